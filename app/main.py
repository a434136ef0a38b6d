from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import JSONResponse

from app.core.body_limit import BodySizeLimitMiddleware
from app.core.config import Settings, get_settings
from app.core.logging_config import configure_logging, request_path
from app.core.origins import ALLOWED_METHODS, OriginPolicy, build_origin_guard
from app.core.rate_limit import build_limiter, build_rate_limit_guard
from routers import contenidoia, health, propiedadia
from services.content_generator import SocialPostService
from services.property_generator import PropertyDescriptionService
from services.upstream_client import CompletionClient, OpenRouterClient

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    completion_client: CompletionClient | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings)

    owns_client = completion_client is None
    if completion_client is None:
        completion_client = OpenRouterClient(
            api_key=settings.openrouter_api_key,
            base_url=settings.upstream_base_url,
            timeout=settings.upstream_timeout,
        )

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "Server started on port %s | health %s/health | origins %s",
            settings.port,
            settings.api_prefix,
            ", ".join(settings.allowed_origin_list),
        )
        yield
        if owns_client and isinstance(completion_client, OpenRouterClient):
            await completion_client.aclose()

    docs_url = "/docs" if settings.enable_docs else None
    redoc_url = "/redoc" if settings.enable_docs else None
    openapi_url = "/openapi.json" if settings.enable_docs else None
    app = FastAPI(
        title=settings.project_name,
        docs_url=docs_url,
        redoc_url=redoc_url,
        openapi_url=openapi_url,
        lifespan=lifespan,
    )

    models = settings.candidate_model_list
    app.state.settings = settings
    app.state.property_service = PropertyDescriptionService(completion_client, models)
    app.state.social_post_service = SocialPostService(completion_client, models)

    # Middleware added last runs first.
    app.add_middleware(BodySizeLimitMiddleware, max_body_bytes=settings.max_body_bytes)
    app.middleware("http")(build_rate_limit_guard(settings, build_limiter(settings)))

    @app.middleware("http")
    async def handle_unexpected_errors(request: Request, call_next):  # type: ignore[no-untyped-def]
        token = request_path.set(request.url.path)
        try:
            return await call_next(request)
        except Exception as exc:  # noqa: BLE001 - one failed request must not take the server down
            logger.exception("Unhandled error on %s %s", request.method, request.url.path)
            return JSONResponse(
                status_code=500,
                content={"error": "Error interno del servidor", "details": str(exc)},
            )
        finally:
            request_path.reset(token)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origin_list,
        allow_credentials=True,
        allow_methods=ALLOWED_METHODS,
        allow_headers=["Content-Type", "Authorization"],
    )
    app.middleware("http")(build_origin_guard(OriginPolicy(settings.allowed_origin_list)))

    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):  # type: ignore[no-untyped-def]
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "no-referrer"
        response.headers["X-XSS-Protection"] = "0"
        response.headers["Cross-Origin-Resource-Policy"] = "cross-origin"
        response.headers["Permissions-Policy"] = "geolocation=(), microphone=(), camera=()"
        response.headers["Content-Security-Policy"] = "default-src 'self'"
        return response

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        if exc.status_code in (404, 405):
            logger.warning("404 Not Found: %s %s", request.method, request.url.path)
            return JSONResponse(
                status_code=404,
                content={"error": "Ruta no encontrada", "path": request.url.path, "method": request.method},
            )
        if isinstance(exc.detail, dict):
            return JSONResponse(status_code=exc.status_code, content=exc.detail)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail, "details": None})

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
        logger.debug("Rejected request body: %s", exc.errors())
        return JSONResponse(status_code=400, content={"error": "Cuerpo de la solicitud inválido"})

    app.include_router(health.router, prefix=settings.api_prefix)
    app.include_router(propiedadia.router, prefix=settings.api_prefix)
    app.include_router(contenidoia.router, prefix=settings.api_prefix)
    return app


def run() -> None:
    try:
        settings = get_settings()
    except ValidationError as exc:
        raise SystemExit(f"Invalid configuration, is OPENROUTER_API_KEY set?\n{exc}") from exc
    uvicorn.run("app.main:create_app", factory=True, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
