"""Client for the OpenAI-compatible AI gateway."""
import logging
from typing import Any, AsyncIterator, Dict, List, Optional

import httpx

from tvog.config.settings import settings

logger = logging.getLogger(__name__)

RATE_LIMITED_MESSAGE = "Rate limits exceeded, please try again later."
PAYMENT_REQUIRED_MESSAGE = "Payment required, please add funds to your workspace."
GATEWAY_ERROR_MESSAGE = "AI gateway error"


class GatewayError(Exception):
    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class GatewayStream:
    """Open streaming response; iterating it closes the connection at the end."""

    def __init__(self, client: httpx.AsyncClient, response: httpx.Response):
        self._client = client
        self._response = response

    async def iter_bytes(self) -> AsyncIterator[bytes]:
        try:
            async for chunk in self._response.aiter_bytes():
                yield chunk
        finally:
            await self.aclose()

    async def aclose(self) -> None:
        await self._response.aclose()
        await self._client.aclose()


class AIGatewayClient:
    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.ai_gateway_api_key
        self.base_url = (base_url or settings.ai_gateway_url).rstrip("/")
        self.timeout = timeout or settings.gateway_timeout
        self.transport = transport

    @property
    def completions_url(self) -> str:
        return f"{self.base_url}/chat/completions"

    def _client(self) -> httpx.AsyncClient:
        if not self.api_key:
            raise GatewayError("AI_GATEWAY_API_KEY is not configured", status_code=500)
        return httpx.AsyncClient(
            timeout=self.timeout,
            transport=self.transport,
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            },
        )

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        if response.is_success:
            return
        if response.status_code == 429:
            raise GatewayError(RATE_LIMITED_MESSAGE, status_code=429)
        if response.status_code == 402:
            raise GatewayError(PAYMENT_REQUIRED_MESSAGE, status_code=402)
        logger.error("AI gateway error: %s %s", response.status_code, response.text)
        raise GatewayError(GATEWAY_ERROR_MESSAGE, status_code=500)

    async def complete(self, messages: List[Dict[str, Any]], model: str, **extra: Any) -> Dict[str, Any]:
        """Non-streaming completion; returns the decoded response body"""
        async with self._client() as client:
            try:
                response = await client.post(
                    self.completions_url,
                    json={"model": model, "messages": messages, "stream": False, **extra},
                )
            except httpx.HTTPError as e:
                logger.error("AI gateway unreachable: %s", e)
                raise GatewayError(GATEWAY_ERROR_MESSAGE, status_code=502)
            self._raise_for_status(response)
            try:
                return response.json()
            except ValueError:
                logger.error("AI gateway returned a non-JSON body: %s", response.text[:200])
                raise GatewayError(GATEWAY_ERROR_MESSAGE, status_code=502)

    async def open_stream(self, messages: List[Dict[str, Any]], model: str) -> GatewayStream:
        """Start a streaming completion; raises GatewayError before any byte is relayed"""
        client = self._client()
        request = client.build_request(
            "POST",
            self.completions_url,
            json={"model": model, "messages": messages, "stream": True},
        )
        try:
            response = await client.send(request, stream=True)
        except httpx.HTTPError as e:
            await client.aclose()
            logger.error("AI gateway unreachable: %s", e)
            raise GatewayError(GATEWAY_ERROR_MESSAGE, status_code=502)

        if not response.is_success:
            await response.aread()
            await response.aclose()
            await client.aclose()
            self._raise_for_status(response)
        return GatewayStream(client, response)


def first_message_content(data: Dict[str, Any]) -> Optional[str]:
    try:
        return data["choices"][0]["message"].get("content")
    except (KeyError, IndexError, TypeError, AttributeError):
        return None


def get_gateway_client() -> AIGatewayClient:
    return AIGatewayClient()
