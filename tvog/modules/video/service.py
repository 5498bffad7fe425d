import logging
from typing import Any, Dict

from fastapi import HTTPException

from tvog.config.settings import settings
from tvog.modules.video.replicate_client import ReplicateClient, VideoGenerationError
from tvog.modules.video.schemas import VideoGenerateRequest, VideoGenerateResponse

logger = logging.getLogger(__name__)


class VideoService:
    def __init__(self, replicate: ReplicateClient):
        self.replicate = replicate

    async def start(self, request: VideoGenerateRequest) -> VideoGenerateResponse:
        """Start a text-to-video prediction"""
        if not request.prompt:
            raise HTTPException(status_code=400, detail="Missing required field: prompt is required")
        if len(request.prompt) > settings.max_video_prompt_length:
            raise HTTPException(
                status_code=400,
                detail=f"Prompt too long. Maximum {settings.max_video_prompt_length} characters allowed."
            )

        logger.info("Starting video generation with prompt: %s", request.prompt)
        try:
            prediction = await self.replicate.create_prediction(
                settings.video_model,
                {"prompt": request.prompt, "prompt_optimizer": True},
            )
        except VideoGenerationError as e:
            raise HTTPException(status_code=e.status_code, detail=e.message)
        if not prediction.get("id"):
            logger.error("Replicate prediction has no id: %s", prediction)
            raise HTTPException(status_code=502, detail="Replicate request failed")

        logger.info("Video generation started, prediction ID: %s", prediction["id"])
        return VideoGenerateResponse(prediction_id=prediction["id"], status=prediction.get("status") or "starting")

    async def status(self, prediction_id: str) -> Dict[str, Any]:
        logger.info("Checking status for prediction: %s", prediction_id)
        try:
            return await self.replicate.get_prediction(prediction_id)
        except VideoGenerationError as e:
            raise HTTPException(status_code=e.status_code, detail=e.message)
