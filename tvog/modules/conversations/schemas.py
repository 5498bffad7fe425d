from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime

DEFAULT_TITLE = "New Chat"
TITLE_FROM_MESSAGE_LENGTH = 50


def title_from_message(content: str) -> str:
    """Title for a conversation started by its first message"""
    return content[:TITLE_FROM_MESSAGE_LENGTH] or DEFAULT_TITLE


class ConversationCreate(BaseModel):
    title: Optional[str] = None


class ConversationUpdate(BaseModel):
    title: str = Field(..., max_length=200)

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Title cannot be empty")
        return v


class ConversationResponse(BaseModel):
    id: str
    user_id: str
    title: str
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
