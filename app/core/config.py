from __future__ import annotations

import os
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

Environment = Literal["development", "production", "staging", "test"]

DEFAULT_CANDIDATE_MODELS = (
    "meta-llama/llama-3.1-8b-instruct:free,"
    "mistralai/mistral-7b-instruct:free,"
    "google/gemma-7b-it:free,"
    "meta-llama/llama-3-8b-instruct:free"
)


def _resolve_env_files() -> tuple[str, ...]:
    env = os.getenv("ENVIRONMENT", "development").lower()
    if env in {"prod", "production"}:
        return (".env", ".env.prod")
    if env in {"dev", "development"}:
        return (".env", ".env.dev")
    if env in {"test", "testing"}:
        return (".env", ".env.test")
    return (".env",)


def _split_csv(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=_resolve_env_files(),
        extra="ignore",
    )

    environment: Environment = "development"
    project_name: str = "PropiedadIA & ContenidoIA Proxy"
    api_prefix: str = "/api"
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"
    log_json: bool = False
    enable_docs: bool = False

    openrouter_api_key: str = Field(min_length=1)
    upstream_base_url: str = "https://openrouter.ai/api/v1"
    upstream_timeout_ms: int = Field(default=30_000, gt=0)
    candidate_models: str = DEFAULT_CANDIDATE_MODELS

    # Comma separated.
    allowed_origins: str = "http://localhost:5500"
    rate_limit: str = "10/minute"
    rate_limit_storage_uri: str = "memory://"
    max_body_bytes: int = 10 * 1024

    @property
    def allowed_origin_list(self) -> list[str]:
        return _split_csv(self.allowed_origins)

    @property
    def candidate_model_list(self) -> list[str]:
        return _split_csv(self.candidate_models)

    @property
    def upstream_timeout(self) -> float:
        return self.upstream_timeout_ms / 1000


@lru_cache
def get_settings() -> Settings:
    return Settings()  # type: ignore[call-arg]
