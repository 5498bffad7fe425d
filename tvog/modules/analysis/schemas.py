from pydantic import BaseModel
from typing import Optional

from tvog.modules.messages.schemas import MessageResponse


class FileAnalysisRequest(BaseModel):
    file_url: str
    file_type: Optional[str] = None
    file_name: Optional[str] = None
    prompt: Optional[str] = None


class FileAnalysisResponse(BaseModel):
    analysis: str


class MessageAnalysisResponse(BaseModel):
    analysis: str
    message: MessageResponse
