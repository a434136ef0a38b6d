from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping, Sequence
from typing import Protocol

import httpx
from openai import APIConnectionError, APIStatusError, APITimeoutError, AsyncOpenAI, OpenAIError

from services.errors import (
    EmptyOutputError,
    UpstreamStatusError,
    UpstreamTimeoutError,
    UpstreamTransportError,
)
from services.prompt_builder import ChatMessage

logger = logging.getLogger(__name__)

OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"
DEFAULT_TIMEOUT_SECONDS = 30.0


class CompletionClient(Protocol):
    async def complete(
        self,
        messages: Sequence[ChatMessage],
        model: str,
        *,
        max_tokens: int,
        temperature: float,
        extra_headers: Mapping[str, str] | None = None,
    ) -> str: ...


class OpenRouterClient:
    """Single chat-completion calls against OpenRouter's OpenAI-compatible API."""

    def __init__(
        self,
        api_key: str,
        base_url: str = OPENROUTER_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        # Retries are the fallback policy's job, not the SDK's.
        self._client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
            max_retries=0,
            http_client=http_client,
        )
        self._timeout = timeout

    async def complete(
        self,
        messages: Sequence[ChatMessage],
        model: str,
        *,
        max_tokens: int,
        temperature: float,
        extra_headers: Mapping[str, str] | None = None,
    ) -> str:
        request = self._client.chat.completions.create(
            model=model,
            messages=[message.to_dict() for message in messages],  # type: ignore[misc]
            max_tokens=max_tokens,
            temperature=temperature,
            extra_headers=dict(extra_headers or {}),
        )
        try:
            # wait_for bounds the whole call; httpx timeouts only bound each phase.
            response = await asyncio.wait_for(request, timeout=self._timeout)
        except (asyncio.TimeoutError, APITimeoutError) as exc:
            raise UpstreamTimeoutError(
                f"Upstream call to {model} timed out after {self._timeout:g}s"
            ) from exc
        except APIStatusError as exc:
            raise UpstreamStatusError(exc.status_code, exc.response.text) from exc
        except APIConnectionError as exc:
            raise UpstreamTransportError(f"Upstream connection failed: {exc}") from exc
        except (OpenAIError, ValueError) as exc:
            # A 2xx reply whose body is not a chat completion.
            raise UpstreamTransportError(f"Upstream returned an invalid response: {exc}") from exc

        # OpenRouter can answer 200 with an error object and no choices.
        choices = getattr(response, "choices", None) or []
        message = getattr(choices[0], "message", None) if choices else None
        content = getattr(message, "content", None)
        if not isinstance(content, str) or not content.strip():
            raise EmptyOutputError(f"Model {model} returned an empty response.")
        return content

    async def aclose(self) -> None:
        await self._client.close()
