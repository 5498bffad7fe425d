from fastapi import APIRouter, Depends
from tvog.modules.conversations.schemas import (
    ConversationCreate, ConversationUpdate, ConversationResponse
)
from tvog.modules.conversations.service import ConversationService
from tvog.modules.messages.schemas import MessageResponse
from tvog.modules.messages.service import MessageService
from tvog.core.dependencies import get_current_user, get_user_supabase
from supabase import Client
from typing import List, Optional, Dict

router = APIRouter(prefix="/conversations", tags=["conversations"])


def get_conversation_service(supabase: Client = Depends(get_user_supabase)) -> ConversationService:
    return ConversationService(supabase)


def get_message_service(supabase: Client = Depends(get_user_supabase)) -> MessageService:
    return MessageService(supabase)


@router.get("", response_model=List[ConversationResponse])
async def list_conversations(
    search: Optional[str] = None,
    user_data: Dict = Depends(get_current_user),
    service: ConversationService = Depends(get_conversation_service)
):
    """List own conversations, newest activity first; `search` filters titles case-insensitively."""
    return service.list_conversations(user_data["id"], search=search)


@router.post("", response_model=ConversationResponse, status_code=201)
async def create_conversation(
    conversation_data: Optional[ConversationCreate] = None,
    user_data: Dict = Depends(get_current_user),
    service: ConversationService = Depends(get_conversation_service)
):
    """Start a new conversation (titled "New Chat" unless given)"""
    return service.create_conversation(user_data["id"], conversation_data or ConversationCreate())


@router.get("/{conversation_id}", response_model=ConversationResponse)
async def get_conversation(
    conversation_id: str,
    service: ConversationService = Depends(get_conversation_service)
):
    return service.get_conversation(conversation_id)


@router.patch("/{conversation_id}", response_model=ConversationResponse)
async def rename_conversation(
    conversation_id: str,
    conversation_data: ConversationUpdate,
    service: ConversationService = Depends(get_conversation_service)
):
    return service.rename_conversation(conversation_id, conversation_data)


@router.delete("/{conversation_id}", status_code=204)
async def delete_conversation(
    conversation_id: str,
    service: ConversationService = Depends(get_conversation_service)
):
    service.delete_conversation(conversation_id)
    return None


@router.get("/{conversation_id}/messages", response_model=List[MessageResponse])
async def list_messages(
    conversation_id: str,
    service: MessageService = Depends(get_message_service)
):
    """Messages oldest first; assistant messages include rendered segments"""
    return service.list_messages(conversation_id)
