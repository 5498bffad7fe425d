from pydantic import BaseModel, Field
from typing import List, Literal, Optional

from tvog.modules.messages.schemas import FileAttachment


class ChatMessage(BaseModel):
    role: Literal["system", "user", "assistant"]
    content: str


class ChatCompletionRequest(BaseModel):
    messages: List[ChatMessage] = Field(..., min_length=1)


class ChatSendRequest(BaseModel):
    conversation_id: Optional[str] = None
    content: Optional[str] = ""
    attachment: Optional[FileAttachment] = None
