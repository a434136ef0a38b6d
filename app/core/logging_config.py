from __future__ import annotations

import logging
from contextvars import ContextVar
from logging.config import dictConfig

from app.core.config import Settings

request_path: ContextVar[str] = ContextVar("request_path", default="-")


class RequestPathFilter(logging.Filter):
    """Stamp each record with the path of the request being served."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_path = request_path.get()
        return True


def configure_logging(settings: Settings) -> None:
    log_format = (
        "%(levelname)s %(asctime)s %(name)s [%(request_path)s] %(message)s"
        if not settings.log_json
        else (
            '{"level":"%(levelname)s","time":"%(asctime)s","logger":"%(name)s",'
            '"path":"%(request_path)s","message":"%(message)s"}'
        )
    )

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "filters": {
                "request_path": {"()": RequestPathFilter},
            },
            "formatters": {
                "proxy": {
                    "format": log_format,
                }
            },
            "handlers": {
                "default": {
                    "class": "logging.StreamHandler",
                    "formatter": "proxy",
                    "filters": ["request_path"],
                }
            },
            "root": {
                "level": settings.log_level,
                "handlers": ["default"],
            },
            "loggers": {
                # Per-request lines from the upstream SDK.
                "httpx": {"level": "WARNING"},
                "openai": {"level": "WARNING"},
            },
        }
    )

    logging.getLogger("uvicorn.error").setLevel(settings.log_level)
