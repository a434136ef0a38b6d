from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from routers.dependencies import get_property_service
from schemas.property_generation import PropertyGenerationRequest, PropertyGenerationResponse
from services.errors import InvalidRequestError, ModelsExhaustedError
from services.property_generator import PropertyDescriptionService

router = APIRouter(prefix="/propiedadia", tags=["propiedadia"])


@router.post("/generate", response_model=PropertyGenerationResponse)
async def generate_property_description(
    payload: PropertyGenerationRequest,
    service: PropertyDescriptionService = Depends(get_property_service),
) -> PropertyGenerationResponse:
    try:
        result = await service.generate(payload.to_brief())
    except InvalidRequestError as exc:
        raise HTTPException(status_code=400, detail={"error": str(exc)}) from exc
    except ModelsExhaustedError as exc:
        raise HTTPException(
            status_code=500,
            detail={"error": "Error de IA (Agotado)", "details": exc.details},
        ) from exc

    return PropertyGenerationResponse(description=result.value)
