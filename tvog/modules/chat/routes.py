from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from tvog.modules.chat.gateway import AIGatewayClient, get_gateway_client
from tvog.modules.chat.schemas import ChatCompletionRequest, ChatSendRequest
from tvog.modules.chat.service import ChatService
from tvog.core.dependencies import get_current_user, get_user_supabase
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/chat", tags=["chat"])

SSE_HEADERS = {"Cache-Control": "no-cache", "X-Accel-Buffering": "no"}


def get_chat_service(
    supabase: Client = Depends(get_user_supabase),
    gateway: AIGatewayClient = Depends(get_gateway_client)
) -> ChatService:
    return ChatService(supabase, gateway)


@router.post("/completions")
async def chat_completions(
    request: ChatCompletionRequest,
    service: ChatService = Depends(get_chat_service)
):
    """Stream a completion for the given messages, passing gateway events through unchanged"""
    stream = await service.proxy(request.messages)
    return StreamingResponse(stream.iter_bytes(), media_type="text/event-stream", headers=SSE_HEADERS)


@router.post("/send")
async def send_message(
    request: ChatSendRequest,
    user_data: Dict = Depends(get_current_user),
    service: ChatService = Depends(get_chat_service)
):
    """
    Store the user message, stream the assistant reply as `start` / `delta` /
    `done` events and store the reply once complete.
    """
    conversation_id, user_message, stream = await service.send(user_data["id"], request)
    return StreamingResponse(
        service.relay(conversation_id, user_message, stream),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )
