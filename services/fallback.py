from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, TypeVar

from services.errors import GenerationError, ModelsExhaustedError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class FallbackState(str, Enum):
    pending = "pending"
    trying = "trying"
    succeeded = "succeeded"
    exhausted = "exhausted"


@dataclass(frozen=True)
class AttemptRecord:
    model: str
    error: GenerationError | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class FallbackResult(Generic[T]):
    value: T
    model: str
    attempts: list[AttemptRecord] = field(default_factory=list)


class ModelFallbackPolicy:
    """Try candidate models in order until one yields usable output.

    The policy knows nothing about transports: ``attempt`` is any coroutine
    function taking a model identifier. A ``GenerationError`` moves on to the
    next candidate, any other exception propagates untouched.
    """

    def __init__(self, candidates: Sequence[str], label: str = "generation") -> None:
        self._candidates = tuple(candidates)
        self._label = label
        self.state = FallbackState.pending
        self.current_model: str | None = None

    @property
    def candidates(self) -> tuple[str, ...]:
        return self._candidates

    async def run(self, attempt: Callable[[str], Awaitable[T]]) -> FallbackResult[T]:
        attempts: list[AttemptRecord] = []
        last_error: GenerationError | None = None

        for model in self._candidates:
            self.state = FallbackState.trying
            self.current_model = model
            logger.info("Trying %s with %s", self._label, model)
            try:
                value = await attempt(model)
            except GenerationError as exc:
                logger.warning("%s failed with %s: %s", self._label, model, exc.details)
                attempts.append(AttemptRecord(model=model, error=exc))
                last_error = exc
                continue

            attempts.append(AttemptRecord(model=model))
            self.state = FallbackState.succeeded
            return FallbackResult(value=value, model=model, attempts=attempts)

        self.state = FallbackState.exhausted
        self.current_model = None
        logger.error("%s exhausted %s candidate models", self._label, len(self._candidates))
        raise ModelsExhaustedError(last_error, [record.model for record in attempts])
