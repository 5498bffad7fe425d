from fastapi import APIRouter, Depends
from tvog.modules.messages.schemas import MessageResponse, MessageUpdate
from tvog.modules.messages.service import MessageService
from tvog.core.dependencies import get_user_supabase
from supabase import Client

router = APIRouter(prefix="/messages", tags=["messages"])


def get_message_service(supabase: Client = Depends(get_user_supabase)) -> MessageService:
    return MessageService(supabase)


@router.get("/{message_id}", response_model=MessageResponse)
async def get_message(
    message_id: str,
    service: MessageService = Depends(get_message_service)
):
    return service.get_message(message_id)


@router.put("/{message_id}", response_model=MessageResponse)
async def update_message(
    message_id: str,
    message_data: MessageUpdate,
    service: MessageService = Depends(get_message_service)
):
    """Edit message text"""
    return service.update_message(message_id, message_data)


@router.delete("/{message_id}", status_code=204)
async def delete_message(
    message_id: str,
    service: MessageService = Depends(get_message_service)
):
    """Delete message and its attachment"""
    service.delete_message(message_id)
    return None
