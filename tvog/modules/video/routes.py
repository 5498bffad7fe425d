from fastapi import APIRouter, Depends
from tvog.modules.video.replicate_client import ReplicateClient, get_replicate_client
from tvog.modules.video.schemas import VideoGenerateRequest, VideoGenerateResponse
from tvog.modules.video.service import VideoService
from tvog.core.dependencies import get_current_user
from typing import Any, Dict

router = APIRouter(prefix="/videos", tags=["videos"])


def get_video_service(replicate: ReplicateClient = Depends(get_replicate_client)) -> VideoService:
    return VideoService(replicate)


@router.post("", response_model=VideoGenerateResponse)
async def start_video_generation(
    request: VideoGenerateRequest,
    user_data: Dict = Depends(get_current_user),
    service: VideoService = Depends(get_video_service)
):
    """Start generating a video; poll the returned prediction for the result"""
    return await service.start(request)


@router.get("/{prediction_id}")
async def get_video_status(
    prediction_id: str,
    user_data: Dict = Depends(get_current_user),
    service: VideoService = Depends(get_video_service)
) -> Dict[str, Any]:
    return await service.status(prediction_id)
