from __future__ import annotations

from collections.abc import Mapping, Sequence

import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.main import create_app
from services.prompt_builder import ChatMessage

CANDIDATES = "model-a,model-b,model-c,model-d"
ALLOWED_ORIGIN = "http://localhost:5500"


class ScriptedCompletionClient:
    """Fake upstream returning (or raising) scripted outcomes in order."""

    def __init__(self, outcomes: Sequence[str | Exception] = ()) -> None:
        self.outcomes = list(outcomes)
        self.calls: list[dict[str, object]] = []

    async def complete(
        self,
        messages: Sequence[ChatMessage],
        model: str,
        *,
        max_tokens: int,
        temperature: float,
        extra_headers: Mapping[str, str] | None = None,
    ) -> str:
        self.calls.append(
            {
                "model": model,
                "messages": list(messages),
                "max_tokens": max_tokens,
                "temperature": temperature,
                "extra_headers": dict(extra_headers or {}),
            }
        )
        if not self.outcomes:
            raise AssertionError(f"Unexpected upstream call for {model}")
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    @property
    def models_called(self) -> list[str]:
        return [str(call["model"]) for call in self.calls]

    def user_prompt(self, index: int = 0) -> str:
        messages = self.calls[index]["messages"]
        return messages[-1].content  # type: ignore[index]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        openrouter_api_key="test-key",
        environment="test",
        allowed_origins=ALLOWED_ORIGIN,
        candidate_models=CANDIDATES,
        rate_limit="10/minute",
        rate_limit_storage_uri="memory://",
        log_level="WARNING",
    )


@pytest.fixture
def upstream() -> ScriptedCompletionClient:
    return ScriptedCompletionClient()


@pytest.fixture
def client(settings: Settings, upstream: ScriptedCompletionClient) -> TestClient:
    return TestClient(create_app(settings, completion_client=upstream))
