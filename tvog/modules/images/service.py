import logging
from typing import Any, Dict, Optional

from fastapi import HTTPException

from tvog.config.settings import settings
from tvog.modules.chat.gateway import AIGatewayClient, GatewayError
from tvog.modules.images.schemas import ImageGenerateRequest, ImageGenerateResponse
from tvog.modules.messages.service import MessageService

logger = logging.getLogger(__name__)


def first_image_url(data: Dict[str, Any]) -> Optional[str]:
    try:
        return data["choices"][0]["message"]["images"][0]["image_url"]["url"]
    except (KeyError, IndexError, TypeError):
        return None


def image_markdown(prompt: str, url: str) -> str:
    alt = prompt.replace("[", "").replace("]", "").replace("\n", " ").strip()
    return f"![{alt}]({url})"


class ImageService:
    def __init__(self, gateway: AIGatewayClient):
        self.gateway = gateway

    async def generate(
        self,
        request: ImageGenerateRequest,
        messages: Optional[MessageService] = None
    ) -> ImageGenerateResponse:
        """Generate an image; when a conversation is given, post it there as an assistant message"""
        prompt = request.prompt.strip()
        if not prompt:
            raise HTTPException(status_code=400, detail="Prompt is required")
        try:
            data = await self.gateway.complete(
                [{"role": "user", "content": prompt}],
                settings.image_model,
                modalities=["image", "text"],
            )
        except GatewayError as e:
            raise HTTPException(status_code=e.status_code, detail=e.message)

        image_url = first_image_url(data)
        if not image_url:
            logger.error("Image model returned no image for prompt of length %d", len(prompt))
            raise HTTPException(status_code=500, detail="No image was generated")

        text = data["choices"][0]["message"].get("content") or None
        response = ImageGenerateResponse(image_url=image_url, text=text)
        if request.conversation_id and messages is not None:
            response.message = messages.create_assistant_message(
                request.conversation_id, image_markdown(prompt, image_url)
            )
        return response
