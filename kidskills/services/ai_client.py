"""
HTTP client for the OpenRouter chat-completion API.

Only speaks HTTP: status codes and network failures are translated into
the engine's exception types, retries are left to the caller.
"""

from typing import Any, Dict, List, Optional

import httpx

from kidskills.config import get_settings
from kidskills.exceptions import (
    AuthError,
    CredentialError,
    MalformedResponseError,
    RateLimitError,
    TransportError,
)
from kidskills.models.ai_models import DynamicModel
from kidskills.utils.logger import get_logger, mask_secret

logger = get_logger(__name__)
settings = get_settings()


class OpenRouterClient:
    """Async client for ``/chat/completions`` and ``/models``."""

    def __init__(self, api_key: str, base_url: str = None, timeout: float = None):
        if not api_key or not api_key.strip():
            raise CredentialError("OpenRouter API key is not configured")

        self.api_key = api_key.strip()
        self.base_url = (base_url or settings.OPENROUTER_BASE_URL).rstrip("/")
        self.timeout = timeout or settings.AI_REQUEST_TIMEOUT

        self.client = httpx.AsyncClient(timeout=self.timeout)

        logger.info(f"OpenRouter client initialized: {self.base_url} (key {mask_secret(self.api_key)})")

    @property
    def headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            **settings.request_headers,
        }

    async def chat_completion(
        self,
        messages: List[Dict[str, str]],
        model: str,
        temperature: float = 0.7,
        max_tokens: int = None,
        response_format: Optional[Dict[str, Any]] = None
    ) -> str:
        """
        Send one chat-completion request.

        Returns:
            str: The content of the first choice's message

        Raises:
            AuthError: credential rejected (401/403)
            RateLimitError: provider rate limit (429)
            TransportError: network failure or any other non-2xx status
            MalformedResponseError: 2xx body without message content
        """
        payload = {
            "model": model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens or settings.AI_MAX_TOKENS,
        }
        if response_format:
            payload["response_format"] = response_format

        logger.info(f"Requesting chat completion from {model}")
        try:
            response = await self.client.post(
                f"{self.base_url}/chat/completions",
                json=payload,
                headers=self.headers
            )
        except httpx.RequestError as e:
            logger.error(f"Failed to connect to OpenRouter: {e}")
            raise TransportError(f"OpenRouter unavailable: {e}", {"model": model})

        self._raise_for_status(response.status_code, model)
        data = self._json_body(response)

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            content = None
        if not content:
            logger.error(f"No content returned from {model}")
            raise MalformedResponseError("No content returned from AI", {"model": model})

        logger.info(f"Received content of length {len(content)} from {model}")
        return content

    async def list_models(self) -> List[DynamicModel]:
        """Fetch the provider's model catalogue."""
        try:
            response = await self.client.get(f"{self.base_url}/models", headers=self.headers)
        except httpx.RequestError as e:
            logger.error(f"Failed to connect to OpenRouter: {e}")
            raise TransportError(f"OpenRouter unavailable: {e}")

        self._raise_for_status(response.status_code)
        data = self._json_body(response)

        models = []
        for entry in data.get("data") or []:
            if isinstance(entry, dict) and entry.get("id"):
                models.append(DynamicModel(id=entry["id"], display_name=entry.get("name") or entry["id"]))
        logger.info(f"OpenRouter lists {len(models)} models")
        return models

    async def validate_api_key(self) -> bool:
        """A key is valid when ``/models`` answers 2xx with a non-empty list."""
        try:
            models = await self.list_models()
        except Exception as e:
            logger.warning(f"API key validation failed: {e}")
            return False
        return len(models) > 0

    def _raise_for_status(self, status_code: int, model: str = None) -> None:
        if 200 <= status_code < 300:
            return
        context = {"status_code": status_code, "model": model}
        if status_code in (401, 403):
            logger.error(f"OpenRouter rejected the API key: {status_code}")
            raise AuthError(f"Authentication failed: {status_code}", context)
        if status_code == 429:
            logger.warning("OpenRouter rate limit hit")
            raise RateLimitError("Rate limit exceeded", context)
        logger.error(f"OpenRouter request failed: {status_code}")
        raise TransportError(f"OpenRouter request failed: {status_code}", context, status_code=status_code)

    @staticmethod
    def _json_body(response) -> Dict[str, Any]:
        try:
            data = response.json()
        except ValueError as e:
            raise MalformedResponseError(f"Invalid JSON body from OpenRouter: {e}")
        if not isinstance(data, dict):
            raise MalformedResponseError("Unexpected response body from OpenRouter")
        return data

    async def close(self):
        """Close HTTP client"""
        await self.client.aclose()
