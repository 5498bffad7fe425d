from pydantic import BaseModel, computed_field
from typing import Optional, List, Literal
from datetime import datetime


class Segment(BaseModel):
    type: Literal["text", "code", "image"]
    content: Optional[str] = None
    language: Optional[str] = None
    url: Optional[str] = None
    alt: Optional[str] = None


class FileAttachment(BaseModel):
    url: str  # storage object path inside the chat-files bucket
    name: str
    type: Optional[str] = None
    size: Optional[int] = None


class MessageUpdate(BaseModel):
    content: str


class MessageResponse(BaseModel):
    id: str
    conversation_id: str
    role: Literal["user", "assistant"]
    content: str
    created_at: datetime
    file_url: Optional[str] = None
    file_name: Optional[str] = None
    file_type: Optional[str] = None
    file_size: Optional[int] = None
    segments: Optional[List[Segment]] = None

    @computed_field
    @property
    def file_size_label(self) -> Optional[str]:
        if not self.file_size:
            return None
        return f"{self.file_size / 1024:.1f} KB"

    @computed_field
    @property
    def is_image(self) -> bool:
        return bool(self.file_type and self.file_type.startswith("image/"))

    class Config:
        from_attributes = True
