from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from routers.dependencies import get_social_post_service
from schemas.content_generation import (
    ContentGenerationRequest,
    ContentGenerationResponse,
    SocialPostResponse,
)
from services.content_generator import SocialPostService
from services.errors import InvalidRequestError, ModelsExhaustedError

router = APIRouter(prefix="/contenidoia", tags=["contenidoia"])


@router.post("/generate", response_model=ContentGenerationResponse)
async def generate_social_posts(
    payload: ContentGenerationRequest,
    service: SocialPostService = Depends(get_social_post_service),
) -> ContentGenerationResponse:
    try:
        result = await service.generate(payload.to_brief())
    except InvalidRequestError as exc:
        raise HTTPException(status_code=400, detail={"error": str(exc)}) from exc
    except ModelsExhaustedError as exc:
        detail: dict[str, object] = {"error": "Error de IA (Agotado)", "details": exc.details}
        if exc.raw_preview is not None:
            detail["raw_response"] = exc.raw_preview
        raise HTTPException(status_code=500, detail=detail) from exc

    return ContentGenerationResponse(
        posts=[SocialPostResponse(content=post.content, hashtags=post.hashtags) for post in result.value]
    )
