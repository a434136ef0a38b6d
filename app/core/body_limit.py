from __future__ import annotations

from starlette.exceptions import HTTPException
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

BODY_TOO_LARGE_MESSAGE = "Cuerpo de la solicitud demasiado grande"


class BodySizeLimitMiddleware:
    """Reject request bodies above ``max_body_bytes`` with a 413.

    A declared Content-Length is checked up front. Bodies sent without one
    are counted as they are received.
    """

    def __init__(self, app: ASGIApp, max_body_bytes: int) -> None:
        self.app = app
        self.max_body_bytes = max_body_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        for name, value in scope["headers"]:
            if name == b"content-length" and value.isdigit() and int(value) > self.max_body_bytes:
                response = JSONResponse(status_code=413, content={"error": BODY_TOO_LARGE_MESSAGE})
                await response(scope, receive, send)
                return

        received = 0

        async def limited_receive() -> Message:
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.max_body_bytes:
                    raise HTTPException(status_code=413, detail={"error": BODY_TOO_LARGE_MESSAGE})
            return message

        await self.app(scope, limited_receive, send)
