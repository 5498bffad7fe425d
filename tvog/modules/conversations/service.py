from datetime import datetime, timezone
from supabase import Client
from tvog.config.settings import settings
from tvog.modules.conversations.schemas import (
    ConversationCreate, ConversationUpdate, ConversationResponse, DEFAULT_TITLE
)
from typing import List, Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class ConversationService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_conversations(self, user_id: str, search: Optional[str] = None) -> List[ConversationResponse]:
        """Caller's conversations, most recently active first, optionally filtered by title"""
        try:
            query = self.supabase.table("conversations").select("*").eq("user_id", user_id)
            if search and search.strip():
                query = query.ilike("title", f"%{_escape_like(search.strip())}%")
            result = query.order("updated_at", desc=True).execute()
            return [ConversationResponse(**c) for c in result.data or []]
        except Exception as e:
            logger.error(f"Error loading conversations: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def create_conversation(self, user_id: str, conversation_data: ConversationCreate) -> ConversationResponse:
        title = (conversation_data.title or "").strip() or DEFAULT_TITLE
        try:
            result = self.supabase.table("conversations").insert({
                "user_id": user_id,
                "title": title,
            }).execute()
        except Exception as e:
            logger.error(f"Failed to create conversation: {e}")
            raise HTTPException(status_code=500, detail="Failed to create conversation")
        if not result.data:
            raise HTTPException(status_code=500, detail="Failed to create conversation")
        return ConversationResponse(**result.data[0])

    def get_conversation(self, conversation_id: str) -> ConversationResponse:
        try:
            result = self.supabase.table("conversations")\
                .select("*")\
                .eq("id", conversation_id)\
                .maybe_single()\
                .execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        if not result or not result.data:
            raise HTTPException(status_code=404, detail="Conversation not found")
        return ConversationResponse(**result.data)

    def rename_conversation(self, conversation_id: str, conversation_data: ConversationUpdate) -> ConversationResponse:
        try:
            result = self.supabase.table("conversations")\
                .update({"title": conversation_data.title.strip()})\
                .eq("id", conversation_id)\
                .execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        if not result.data:
            raise HTTPException(status_code=404, detail="Conversation not found")
        return ConversationResponse(**result.data[0])

    def touch(self, conversation_id: str) -> None:
        """Bump updated_at so the conversation sorts first"""
        self.supabase.table("conversations")\
            .update({"updated_at": datetime.now(timezone.utc).isoformat()})\
            .eq("id", conversation_id)\
            .execute()

    def delete_conversation(self, conversation_id: str) -> bool:
        """Delete conversation, its attachments and (by cascade) its messages"""
        self.get_conversation(conversation_id)
        attachments = self.supabase.table("messages")\
            .select("file_url")\
            .eq("conversation_id", conversation_id)\
            .not_.is_("file_url", "null")\
            .execute()
        paths = [m["file_url"] for m in attachments.data or [] if m.get("file_url")]
        if paths:
            try:
                self.supabase.storage.from_(settings.storage_bucket).remove(paths)
                logger.info(f"Deleted {len(paths)} attachment(s) of conversation {conversation_id}")
            except Exception as e:
                logger.warning(f"Failed to delete attachments of conversation {conversation_id}: {e}")
        result = self.supabase.table("conversations").delete().eq("id", conversation_id).execute()
        return len(result.data or []) > 0
