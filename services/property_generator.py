from __future__ import annotations

import logging
from collections.abc import Sequence

from services.errors import InvalidRequestError
from services.fallback import FallbackResult, ModelFallbackPolicy
from services.prompt_builder import (
    PROPERTY_SYSTEM_PROMPT,
    PropertyBrief,
    build_messages,
    build_property_prompt,
)
from services.response_parser import extract_description
from services.upstream_client import CompletionClient

logger = logging.getLogger(__name__)

ATTRIBUTION_HEADERS = {
    "HTTP-Referer": "https://inmodescribe.vercel.app",
    "X-Title": "InmoDescribe",
}


class PropertyDescriptionService:
    """Generate real-estate listing descriptions."""

    def __init__(
        self,
        client: CompletionClient,
        models: Sequence[str],
        max_output_tokens: int = 500,
        temperature: float = 0.7,
    ) -> None:
        self._client = client
        self._models = tuple(models)
        self._max_output_tokens = max_output_tokens
        self._temperature = temperature

    async def generate(self, brief: PropertyBrief) -> FallbackResult[str]:
        if not brief.property_type.strip() or not brief.location.strip():
            raise InvalidRequestError("Faltan campos requeridos (propertyType, location)")

        messages = build_messages(PROPERTY_SYSTEM_PROMPT, build_property_prompt(brief))

        async def attempt(model: str) -> str:
            text = await self._client.complete(
                messages,
                model,
                max_tokens=self._max_output_tokens,
                temperature=self._temperature,
                extra_headers=ATTRIBUTION_HEADERS,
            )
            return extract_description(text)

        result = await ModelFallbackPolicy(self._models, label="PropiedadIA").run(attempt)
        logger.debug("Description generated with %s after %s attempts", result.model, len(result.attempts))
        return result
