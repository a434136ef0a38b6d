from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable

from fastapi import Request
from limits import parse
from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.responses import JSONResponse, Response

from app.core.config import Settings

logger = logging.getLogger(__name__)

RATE_LIMIT_MESSAGE = "Demasiadas solicitudes. Por favor espera un momento."
RATE_LIMIT_SCOPE = "api"

CallNext = Callable[[Request], Awaitable[Response]]


def build_limiter(settings: Settings) -> Limiter:
    return Limiter(
        key_func=get_remote_address,
        storage_uri=settings.rate_limit_storage_uri,
        strategy="fixed-window",
    )


def build_rate_limit_guard(
    settings: Settings, limiter: Limiter
) -> Callable[[Request, CallNext], Awaitable[Response]]:
    """Per-IP fixed window over every path below the API prefix.

    The check keys on the path rather than on the matched route, so every
    /api request counts once, including unmatched ones.
    """
    item = parse(settings.rate_limit)
    prefix = settings.api_prefix.rstrip("/") + "/"
    strategy = limiter.limiter

    def _apply_headers(response: Response, key: str) -> None:
        reset_at, remaining = strategy.get_window_stats(item, key, RATE_LIMIT_SCOPE)
        response.headers["X-RateLimit-Limit"] = str(item.amount)
        response.headers["X-RateLimit-Remaining"] = str(remaining)
        response.headers["X-RateLimit-Reset"] = str(int(reset_at))

    async def limit_api_requests(request: Request, call_next: CallNext) -> Response:
        if not request.url.path.startswith(prefix):
            return await call_next(request)

        key = get_remote_address(request)
        if not strategy.hit(item, key, RATE_LIMIT_SCOPE):
            logger.warning("Rate limit exceeded for %s on %s", key, request.url.path)
            response: Response = JSONResponse(status_code=429, content={"error": RATE_LIMIT_MESSAGE})
            _apply_headers(response, key)
            retry_after = int(response.headers["X-RateLimit-Reset"]) - int(time.time())
            response.headers["Retry-After"] = str(max(retry_after, 0))
            return response

        response = await call_next(request)
        _apply_headers(response, key)
        return response

    return limit_api_requests
