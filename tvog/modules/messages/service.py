from supabase import Client
from tvog.config.settings import settings
from tvog.modules.messages.markdown import split_segments
from tvog.modules.messages.schemas import FileAttachment, MessageResponse, MessageUpdate
from typing import List, Optional, Dict
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


def validate_content(content: str) -> str:
    """Trimmed message text; raises 400 when empty or too long"""
    content = (content or "").strip()
    if not content:
        raise HTTPException(status_code=400, detail="Message cannot be empty")
    if len(content) > settings.max_message_length:
        raise HTTPException(
            status_code=400,
            detail=f"Message must be less than {settings.max_message_length} characters"
        )
    return content


def to_response(row: Dict) -> MessageResponse:
    message = MessageResponse(**row)
    if message.role == "assistant":
        message.segments = split_segments(message.content)
    return message


class MessageService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def create_user_message(
        self,
        conversation_id: str,
        content: Optional[str],
        attachment: Optional[FileAttachment] = None
    ) -> MessageResponse:
        """Insert a user message; either text or an attachment is required"""
        if not (content or "").strip() and attachment is None:
            raise HTTPException(
                status_code=400,
                detail="Cannot send empty message. Please enter a message or attach a file"
            )
        if (content or "").strip():
            content = validate_content(content)
        else:
            content = f"Sent file: {attachment.name}"

        row = {
            "conversation_id": conversation_id,
            "role": "user",
            "content": content,
        }
        if attachment:
            row.update({
                "file_url": attachment.url,
                "file_name": attachment.name,
                "file_type": attachment.type,
                "file_size": attachment.size,
            })
        return self._insert(row)

    def create_assistant_message(self, conversation_id: str, content: str) -> MessageResponse:
        return self._insert({
            "conversation_id": conversation_id,
            "role": "assistant",
            "content": content,
        })

    def _insert(self, row: Dict) -> MessageResponse:
        try:
            result = self.supabase.table("messages").insert(row).execute()
        except Exception as e:
            logger.error(f"Failed to save message: {e}")
            raise HTTPException(status_code=500, detail="Failed to save message")
        if not result.data:
            raise HTTPException(status_code=500, detail="Failed to save message")
        return to_response(result.data[0])

    def list_messages(self, conversation_id: str) -> List[MessageResponse]:
        """Messages of a conversation, oldest first"""
        try:
            result = self.supabase.table("messages")\
                .select("*")\
                .eq("conversation_id", conversation_id)\
                .order("created_at", desc=False)\
                .execute()
        except Exception as e:
            logger.error(f"Error loading messages: {e}")
            raise HTTPException(status_code=500, detail=str(e))
        return [to_response(m) for m in result.data or []]

    def history(self, conversation_id: str) -> List[Dict[str, str]]:
        """Role/content pairs for the model"""
        return [{"role": m.role, "content": m.content} for m in self.list_messages(conversation_id)]

    def get_message(self, message_id: str) -> MessageResponse:
        try:
            result = self.supabase.table("messages").select("*").eq("id", message_id).maybe_single().execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        if not result or not result.data:
            raise HTTPException(status_code=404, detail="Message not found")
        return to_response(result.data)

    def update_message(self, message_id: str, message_data: MessageUpdate) -> MessageResponse:
        content = validate_content(message_data.content)
        try:
            result = self.supabase.table("messages")\
                .update({"content": content})\
                .eq("id", message_id)\
                .execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        if not result.data:
            raise HTTPException(status_code=404, detail="Message not found")
        return to_response(result.data[0])

    def delete_message(self, message_id: str) -> bool:
        """Delete a message and its attachment, if any"""
        message = self.get_message(message_id)
        if message.file_url:
            # The storage policy looks the object up through the message row, so remove it first.
            try:
                self.supabase.storage.from_(settings.storage_bucket).remove([message.file_url])
            except Exception as e:
                logger.warning(f"Failed to delete attachment {message.file_url}: {e}")
        result = self.supabase.table("messages").delete().eq("id", message_id).execute()
        return len(result.data or []) > 0
