"""HTTP backend for OpenAI-compatible chat completion APIs."""
from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from transcript_digest.config import BackendSettings
from transcript_digest.errors import ChunkBackendError
from transcript_digest.models import ChunkAnalysis, ContentType

from .backend import SummarizationBackend
from .prompt_builder import PromptBuilder
from .response_parser import ResponseParser

logger = logging.getLogger(__name__)


class ChatCompletionBackend(SummarizationBackend):
    """Backend for OpenAI-compatible ``/chat/completions`` endpoints.

    Works with Mistral, OpenAI and local servers that speak the same API.
    Every call opens a short-lived ``httpx.AsyncClient``; pass ``transport``
    to route requests elsewhere (tests, proxies).
    """

    def __init__(
        self,
        base_url: Optional[str],
        api_key: Optional[str] = None,
        model: str = "mistral-medium-2508",
        name: str = "chat-completions",
        timeout: float = 45.0,
        temperature: float = 0.1,
        max_tokens: int = 4096,
        prompt_builder: Optional[PromptBuilder] = None,
        response_parser: Optional[ResponseParser] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize HTTP backend.

        Args:
            base_url: API base URL (e.g. https://api.mistral.ai/v1)
            api_key: API key sent as a bearer token
            model: Model name
            name: Backend name
            timeout: Request timeout in seconds
            temperature: Sampling temperature
            max_tokens: Maximum tokens to generate per response
            prompt_builder: Builds analysis and summary prompts
            response_parser: Parses analysis responses
            transport: Optional httpx transport
        """
        self._name = name
        self.base_url = (base_url or "").rstrip("/")
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.prompt_builder = prompt_builder or PromptBuilder()
        self.response_parser = response_parser or ResponseParser()
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: BackendSettings, **kwargs: Any) -> "ChatCompletionBackend":
        return cls(
            base_url=settings.api_base,
            api_key=settings.api_key.get_secret_value() or None,
            model=settings.model,
            timeout=settings.timeout,
            temperature=settings.temperature,
            **kwargs,
        )

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_available(self) -> bool:
        return bool(self.base_url and self.api_key)

    async def process_chunk(self, text: str) -> ChunkAnalysis:
        """Analyze one chunk."""
        content = await self._complete(self.prompt_builder.build_chunk(text), json_mode=True)
        analysis = self.response_parser.parse(content, label="Chunk")
        if analysis is None:
            raise ChunkBackendError("Model returned an empty analysis")
        return analysis

    async def summarize_text(self, text: str, content_type: ContentType) -> str:
        """Summarize text in one call."""
        content = await self._complete(
            self.prompt_builder.build_summary(text, content_type), json_mode=False
        )
        summary = content.strip()
        if not summary:
            raise ChunkBackendError("Model returned an empty summary")
        return summary

    async def _complete(self, prompt: str, *, json_mode: bool) -> str:
        """Send one chat completion request and return the message content."""
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        payload: dict[str, Any] = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": self.prompt_builder.system_instructions},
                {"role": "user", "content": prompt},
            ],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }
        if json_mode:
            payload["response_format"] = {"type": "json_object"}

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                response = await client.post(
                    f"{self.base_url}/chat/completions",
                    headers=headers,
                    json=payload,
                )
                response.raise_for_status()
                result = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(
                f"HTTP generation failed: {e}",
                extra={"backend": self.name, "status_code": e.response.status_code},
            )
            raise ChunkBackendError(
                f"{self.name} returned HTTP {e.response.status_code}"
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"HTTP generation failed: {e}", extra={"backend": self.name})
            raise ChunkBackendError(f"{self.name} request failed: {e}") from e

        try:
            return result["choices"][0]["message"]["content"] or ""
        except (KeyError, IndexError, TypeError) as e:
            raise ChunkBackendError(f"{self.name} returned an unexpected payload") from e
