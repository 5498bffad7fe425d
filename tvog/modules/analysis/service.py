import logging
from typing import Any, Dict, List, Optional

import httpx
from fastapi import HTTPException

from tvog.config.settings import settings
from tvog.modules.analysis.schemas import FileAnalysisRequest, MessageAnalysisResponse
from tvog.modules.chat.gateway import AIGatewayClient, GatewayError, first_message_content
from tvog.modules.files.service import FileService
from tvog.modules.messages.service import MessageService

logger = logging.getLogger(__name__)

IMAGE_SYSTEM_PROMPT = (
    "You are a helpful AI assistant that analyzes images. "
    "Provide detailed descriptions and insights about what you see in the image."
)
DOCUMENT_SYSTEM_PROMPT = (
    "You are a helpful AI assistant that analyzes documents, code, and files. "
    "Provide detailed insights, explanations, and answer questions about the content. "
    "When analyzing code, explain what it does, how it works, and any notable patterns or issues."
)
FALLBACK_ANALYSIS = "Unable to analyze the file."


def is_image(file_type: Optional[str]) -> bool:
    return bool(file_type and file_type.startswith("image/"))


def is_storage_url(file_url: str) -> bool:
    """Whether a URL points at the configured Supabase project"""
    if not settings.supabase_url:
        return False
    try:
        url = httpx.URL(file_url)
        storage = httpx.URL(settings.supabase_url)
    except httpx.InvalidURL:
        return False
    return (
        url.scheme in ("http", "https")
        and url.scheme == storage.scheme
        and url.host == storage.host
        and url.port == storage.port
    )


def image_messages(request: FileAnalysisRequest) -> List[Dict[str, Any]]:
    prompt = request.prompt or f"Please analyze this image ({request.file_name}) and describe what you see in detail."
    return [
        {"role": "system", "content": IMAGE_SYSTEM_PROMPT},
        {
            "role": "user",
            "content": [
                {"type": "text", "text": prompt},
                {"type": "image_url", "image_url": {"url": request.file_url}},
            ],
        },
    ]


def document_messages(request: FileAnalysisRequest, file_content: str) -> List[Dict[str, Any]]:
    prompt = request.prompt or "Please analyze this file and explain what it does."
    return [
        {"role": "system", "content": DOCUMENT_SYSTEM_PROMPT},
        {
            "role": "user",
            "content": f'Here is the content of the file "{request.file_name}":\n\n```\n{file_content}\n```\n\n{prompt}',
        },
    ]


class AnalysisService:
    def __init__(self, gateway: AIGatewayClient, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.gateway = gateway
        self.transport = transport

    async def fetch_file_content(self, file_url: str) -> str:
        """Text of a document in file storage, at most max_file_size bytes"""
        if not is_storage_url(file_url):
            raise HTTPException(status_code=400, detail="File URL must point to the file storage")
        logger.info("Fetching file content from: %s", file_url.split("?", 1)[0])
        content = bytearray()
        try:
            async with httpx.AsyncClient(timeout=settings.gateway_timeout, transport=self.transport) as client:
                async with client.stream("GET", file_url) as response:
                    if not response.is_success:
                        logger.error("Failed to fetch file: %s", response.status_code)
                        raise HTTPException(status_code=500, detail="Could not fetch file content")
                    async for chunk in response.aiter_bytes():
                        content.extend(chunk)
                        if len(content) > settings.max_file_size:
                            raise HTTPException(status_code=413, detail="File too large to analyze")
                    encoding = response.encoding or "utf-8"
        except httpx.HTTPError as e:
            logger.error("Error fetching file: %s", e)
            raise HTTPException(status_code=500, detail="Could not fetch file content")
        logger.info("File content fetched, length: %d", len(content))
        return bytes(content).decode(encoding, errors="replace")

    async def analyze(self, request: FileAnalysisRequest) -> str:
        """Describe an image or explain a document with the vision-capable model"""
        if is_image(request.file_type):
            messages = image_messages(request)
        else:
            messages = document_messages(request, await self.fetch_file_content(request.file_url))

        try:
            data = await self.gateway.complete(messages, settings.vision_model)
        except GatewayError as e:
            raise HTTPException(status_code=e.status_code, detail=e.message)
        return first_message_content(data) or FALLBACK_ANALYSIS

    async def analyze_message(
        self,
        message_id: str,
        messages: MessageService,
        files: FileService
    ) -> MessageAnalysisResponse:
        """Analyze a message's attachment and store the result as an assistant reply"""
        message = messages.get_message(message_id)
        if not message.file_url:
            raise HTTPException(status_code=400, detail="Message has no attachment")

        signed = files.create_signed_url(message.file_url)
        kind = "image" if is_image(message.file_type) else "file"
        analysis = await self.analyze(FileAnalysisRequest(
            file_url=signed.signed_url,
            file_type=message.file_type,
            file_name=message.file_name,
            prompt=f"Analyze this {kind} and provide detailed insights.",
        ))

        saved = messages.create_assistant_message(
            message.conversation_id,
            f"**File Analysis: {message.file_name}**\n\n{analysis}",
        )
        return MessageAnalysisResponse(analysis=analysis, message=saved)
