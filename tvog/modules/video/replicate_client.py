"""Minimal Replicate predictions client over httpx."""
import logging
from typing import Any, Dict, Optional

import httpx

from tvog.config.settings import settings

logger = logging.getLogger(__name__)

NOT_CONFIGURED_MESSAGE = "Video generation is not configured. Please add your Replicate API key."


class VideoGenerationError(Exception):
    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ReplicateClient:
    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.replicate_api_key
        self.base_url = (base_url or settings.replicate_base_url).rstrip("/")
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        if not self.api_key:
            logger.error("REPLICATE_API_KEY is not set")
            raise VideoGenerationError(NOT_CONFIGURED_MESSAGE, status_code=500)
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=60.0,
            transport=self.transport,
            headers={"Authorization": f"Bearer {self.api_key}"},
        )

    @staticmethod
    def _json_or_raise(response: httpx.Response) -> Dict[str, Any]:
        try:
            body = response.json()
        except ValueError:
            body = None
        if response.is_success:
            if not isinstance(body, dict):
                logger.error("Replicate returned an unexpected body: %s", response.text[:200])
                raise VideoGenerationError("Replicate request failed", status_code=502)
            return body
        detail = body.get("detail") if isinstance(body, dict) else None
        detail = detail or response.text
        logger.error("Replicate error: %s %s", response.status_code, detail)
        raise VideoGenerationError(detail or "Replicate request failed", status_code=response.status_code)

    async def _request(self, method: str, path: str, **kwargs: Any) -> Dict[str, Any]:
        async with self._client() as client:
            try:
                response = await client.request(method, path, **kwargs)
            except httpx.HTTPError as e:
                logger.error("Replicate unreachable: %s", e)
                raise VideoGenerationError("Replicate request failed", status_code=502)
            return self._json_or_raise(response)

    async def create_prediction(self, model: str, inputs: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", f"/models/{model}/predictions", json={"input": inputs})

    async def get_prediction(self, prediction_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/predictions/{prediction_id}")


def get_replicate_client() -> ReplicateClient:
    return ReplicateClient()
