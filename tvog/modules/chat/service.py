import json
import logging
from typing import Any, AsyncIterator, Dict, List, Tuple

from fastapi import HTTPException
from supabase import Client

from tvog.config.settings import settings
from tvog.modules.chat.gateway import AIGatewayClient, GatewayError, GatewayStream
from tvog.modules.chat.schemas import ChatMessage, ChatSendRequest
from tvog.modules.chat.sse_decoder import iter_sse_content
from tvog.modules.conversations.schemas import ConversationCreate, title_from_message
from tvog.modules.conversations.service import ConversationService
from tvog.modules.messages.schemas import MessageResponse
from tvog.modules.messages.service import MessageService, validate_content

logger = logging.getLogger(__name__)


def sse_event(data: Dict[str, Any]) -> str:
    return f"data: {json.dumps(data)}\n\n"


def with_system_prompt(messages: List[Dict[str, str]]) -> List[Dict[str, str]]:
    return [{"role": "system", "content": settings.chat_system_prompt}, *messages]


def gateway_http_error(error: GatewayError) -> HTTPException:
    return HTTPException(status_code=error.status_code, detail=error.message)


class ChatService:
    def __init__(self, supabase: Client, gateway: AIGatewayClient):
        self.conversations = ConversationService(supabase)
        self.messages = MessageService(supabase)
        self.gateway = gateway

    async def proxy(self, messages: List[ChatMessage]) -> GatewayStream:
        """Forward a conversation to the gateway and return the raw event stream"""
        payload = with_system_prompt([m.model_dump() for m in messages])
        try:
            return await self.gateway.open_stream(payload, settings.chat_model)
        except GatewayError as e:
            raise gateway_http_error(e)

    def prepare(self, user_id: str, request: ChatSendRequest) -> Tuple[str, MessageResponse]:
        """Validate, create the conversation if needed and store the user message"""
        content = request.content or ""
        if content.strip():
            content = validate_content(content)
        elif request.attachment is None:
            raise HTTPException(
                status_code=400,
                detail="Cannot send empty message. Please enter a message or attach a file"
            )

        conversation_id = request.conversation_id
        if conversation_id:
            self.conversations.get_conversation(conversation_id)
        else:
            conversation = self.conversations.create_conversation(
                user_id, ConversationCreate(title=title_from_message(content))
            )
            conversation_id = conversation.id

        user_message = self.messages.create_user_message(conversation_id, content, request.attachment)
        return conversation_id, user_message

    async def send(self, user_id: str, request: ChatSendRequest) -> Tuple[str, MessageResponse, GatewayStream]:
        conversation_id, user_message = self.prepare(user_id, request)
        history = self.messages.history(conversation_id)
        try:
            stream = await self.gateway.open_stream(with_system_prompt(history), settings.chat_model)
        except GatewayError as e:
            raise gateway_http_error(e)
        return conversation_id, user_message, stream

    async def relay(self, conversation_id: str, user_message: MessageResponse, stream: GatewayStream) -> AsyncIterator[str]:
        """Re-emit assistant deltas as events, then persist the full reply"""
        yield sse_event({
            "type": "start",
            "conversation_id": conversation_id,
            "user_message_id": user_message.id,
        })
        assistant_message = ""
        try:
            async for content in iter_sse_content(stream.iter_bytes()):
                assistant_message += content
                yield sse_event({"type": "delta", "content": content})
        except Exception as e:
            logger.error(f"Stream from AI gateway failed: {e}")
            yield sse_event({"type": "error", "error": "Failed to get response"})
            return
        finally:
            # The decoder stops at [DONE] without draining the body.
            await stream.aclose()

        message_id = None
        try:
            if assistant_message:
                saved = self.messages.create_assistant_message(conversation_id, assistant_message)
                message_id = saved.id
            self.conversations.touch(conversation_id)
        except Exception as e:
            logger.error(f"Failed to save assistant reply for conversation {conversation_id}: {e}")
            yield sse_event({"type": "error", "error": "Failed to save response"})
            return

        yield sse_event({
            "type": "done",
            "conversation_id": conversation_id,
            "message_id": message_id,
            "content": assistant_message,
        })
