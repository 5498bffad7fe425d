from pydantic import BaseModel, Field
from typing import Optional

from tvog.modules.messages.schemas import MessageResponse


class ImageGenerateRequest(BaseModel):
    prompt: str = Field(..., min_length=1, max_length=4000)
    conversation_id: Optional[str] = None


class ImageGenerateResponse(BaseModel):
    image_url: str
    text: Optional[str] = None
    message: Optional[MessageResponse] = None
