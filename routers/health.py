from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter

from schemas.health import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    timestamp = datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
    return HealthResponse(status="ok", timestamp=timestamp)
