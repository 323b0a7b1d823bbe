import logging
import os
from typing import Any, Optional

import httpx

from app.config import (
    DEFAULT_MAX_TOKENS,
    DEFAULT_MODEL,
    DEFAULT_TEMPERATURE,
    OPENAI_CHAT_COMPLETIONS_URL,
    Settings,
)

logger = logging.getLogger(__name__)


class OpenAIError(RuntimeError):
    """Raised when a chat completion cannot be turned into reply text."""


class OpenAIClient:
    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        url: str = OPENAI_CHAT_COMPLETIONS_URL,
        model: str = DEFAULT_MODEL,
        temperature: float = DEFAULT_TEMPERATURE,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.api_key = api_key or os.getenv("OPENAI_API_KEY")
        if not self.api_key:
            raise RuntimeError("Missing OPENAI_API_KEY")
        self.url = url
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self._transport = transport
        self._timeout = timeout

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "OpenAIClient":
        return cls(
            settings.api_key,
            url=settings.completions_url,
            model=settings.model,
            temperature=settings.temperature,
            max_tokens=settings.max_tokens,
            transport=transport,
            timeout=settings.timeout,
        )

    def build_payload(self, messages: list[dict[str, str]]) -> dict[str, Any]:
        return {
            "model": self.model,
            "messages": messages,
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
        }

    async def complete(self, messages: list[dict[str, str]]) -> str:
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }
        payload = self.build_payload(messages)
        logger.debug("POST %s model=%s messages=%d", self.url, self.model, len(messages))

        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            try:
                response = await client.post(self.url, headers=headers, json=payload)
                response.raise_for_status()
            except httpx.HTTPStatusError as exc:
                raise OpenAIError(self._format_error(exc.response.status_code)) from exc
            except httpx.RequestError as exc:
                raise OpenAIError("Unable to reach OpenAI API") from exc

            try:
                data = response.json()
            except ValueError as exc:
                raise OpenAIError("OpenAI API returned invalid JSON") from exc

        return self._extract_content(data)

    def _extract_content(self, data: Any) -> str:
        if not isinstance(data, dict):
            raise OpenAIError("Unexpected OpenAI response format")

        choices = data.get("choices")
        if not isinstance(choices, list) or not choices:
            raise OpenAIError("OpenAI response contained no choices")

        first = choices[0]
        message = first.get("message") if isinstance(first, dict) else None
        content = message.get("content") if isinstance(message, dict) else None
        if not isinstance(content, str):
            raise OpenAIError("OpenAI response is missing message content")

        return content.strip()

    def _format_error(self, status_code: int) -> str:
        if status_code in (401, 403):
            return "OpenAI API rejected the request. Check the API key and its permissions."
        if status_code == 429:
            return "OpenAI API rate limit exceeded. Please try again shortly."
        if 500 <= status_code < 600:
            return "OpenAI API is currently unavailable. Please retry later."
        return f"Unexpected OpenAI API error ({status_code})."


class UnconfiguredClient:
    """Stands in for ``OpenAIClient`` when no API key is configured.

    Every completion fails, so the form settles to its failure message
    instead of the request erroring before submission.
    """

    async def complete(self, messages: list[dict[str, str]]) -> str:
        raise OpenAIError("Missing OPENAI_API_KEY")
