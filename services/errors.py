from __future__ import annotations

import json

RAW_PREVIEW_CHARS = 200


class InvalidRequestError(ValueError):
    """Raised when a generation request is missing required fields."""


class GenerationError(RuntimeError):
    """Base class for failures of a single model attempt."""

    @property
    def details(self) -> str:
        return str(self)


class UpstreamTransportError(GenerationError):
    """Raised when the upstream API cannot be reached."""


class UpstreamTimeoutError(UpstreamTransportError):
    """Raised when the upstream call is cancelled after the hard timeout."""


class UpstreamStatusError(GenerationError):
    """Raised when the upstream API answers with a non-2xx status."""

    def __init__(self, status_code: int, body: str) -> None:
        super().__init__(f"Upstream returned HTTP {status_code}")
        self.status_code = status_code
        self.body = body

    @property
    def details(self) -> str:
        try:
            payload = json.loads(self.body)
        except (TypeError, ValueError):
            return self.body or str(self)

        if isinstance(payload, dict):
            error = payload.get("error")
            if isinstance(error, dict) and error.get("message"):
                return str(error["message"])
            if isinstance(error, str) and error:
                return error
            if payload.get("message"):
                return str(payload["message"])
        return self.body


class EmptyOutputError(GenerationError):
    """Raised when the upstream call succeeds but returns no usable text."""


class PostsParseError(GenerationError):
    """Raised when no JSON array of posts can be extracted from model output."""

    def __init__(self, message: str, raw_text: str) -> None:
        super().__init__(message)
        self.raw_text = raw_text

    @property
    def raw_preview(self) -> str:
        return self.raw_text[:RAW_PREVIEW_CHARS]


class ModelsExhaustedError(RuntimeError):
    """Raised when every candidate model failed."""

    def __init__(self, last_error: GenerationError | None, attempts: list[str]) -> None:
        super().__init__("All candidate models failed")
        self.last_error = last_error
        self.attempts = attempts

    @property
    def details(self) -> str:
        if self.last_error is None:
            return "No candidate model produced a response."
        return self.last_error.details

    @property
    def raw_preview(self) -> str | None:
        if isinstance(self.last_error, PostsParseError):
            return self.last_error.raw_preview
        return None
