from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable

from fastapi import Request
from starlette.responses import JSONResponse, Response

logger = logging.getLogger(__name__)

ALLOWED_METHODS = ["GET", "POST"]


class OriginPolicy:
    """Allow-list check for the ``Origin`` header.

    Requests without an origin (curl, server-side tooling, tests) are allowed.
    """

    def __init__(self, allowed_origins: Iterable[str]) -> None:
        self.allowed_origins = [origin.rstrip("/") for origin in allowed_origins]

    def is_allowed(self, origin: str | None) -> bool:
        if not origin:
            return True
        return origin.rstrip("/") in self.allowed_origins


def build_origin_guard(
    policy: OriginPolicy,
) -> Callable[[Request, Callable[[Request], Awaitable[Response]]], Awaitable[Response]]:
    async def reject_unknown_origins(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        origin = request.headers.get("origin")
        if not policy.is_allowed(origin):
            logger.warning("CORS blocked for origin: %s", origin)
            return JSONResponse(status_code=403, content={"error": f"No permitido por CORS: {origin}"})
        return await call_next(request)

    return reject_unknown_origins
