from __future__ import annotations

import logging
import re
from collections.abc import Sequence

from services.errors import InvalidRequestError
from services.fallback import FallbackResult, ModelFallbackPolicy
from services.prompt_builder import (
    CONTENT_SYSTEM_PROMPT,
    ContentBrief,
    build_content_prompt,
    build_messages,
)
from services.response_parser import SocialPost, parse_posts
from services.upstream_client import CompletionClient

logger = logging.getLogger(__name__)

DEFAULT_POST_COUNT = 5
MAX_POST_COUNT = 30

ATTRIBUTION_HEADERS = {
    "HTTP-Referer": "https://postfollower.vercel.app",
    "X-Title": "Postfollower",
}

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def clamp_post_count(value: object) -> int:
    """Leading integer of ``value`` capped at 30; unusable or non-positive values give 5."""
    if isinstance(value, bool) or value is None:
        return DEFAULT_POST_COUNT
    if isinstance(value, float):
        value = int(value)
    match = _LEADING_INT.match(str(value))
    if match is None:
        return DEFAULT_POST_COUNT
    count = int(match.group(1))
    if count <= 0:
        return DEFAULT_POST_COUNT
    return min(count, MAX_POST_COUNT)


class SocialPostService:
    """Generate batches of social-media posts as structured JSON."""

    def __init__(
        self,
        client: CompletionClient,
        models: Sequence[str],
        max_output_tokens: int = 2000,
        temperature: float = 0.8,
    ) -> None:
        self._client = client
        self._models = tuple(models)
        self._max_output_tokens = max_output_tokens
        self._temperature = temperature

    async def generate(self, brief: ContentBrief) -> FallbackResult[list[SocialPost]]:
        if not brief.business_type.strip():
            raise InvalidRequestError("Falta el tipo de negocio (businessType)")

        messages = build_messages(CONTENT_SYSTEM_PROMPT, build_content_prompt(brief))

        async def attempt(model: str) -> list[SocialPost]:
            text = await self._client.complete(
                messages,
                model,
                max_tokens=self._max_output_tokens,
                temperature=self._temperature,
                extra_headers=ATTRIBUTION_HEADERS,
            )
            return parse_posts(text)

        result = await ModelFallbackPolicy(self._models, label="ContenidoIA").run(attempt)
        logger.info(
            "Generated %s of %s requested posts with %s",
            len(result.value),
            brief.post_count,
            result.model,
        )
        return result
