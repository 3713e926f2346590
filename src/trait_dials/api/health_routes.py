from typing import Annotated

from fastapi import APIRouter, Depends

from ..config import Settings, get_settings

router = APIRouter(tags=["health"])


@router.get("/health")
def health(settings: Annotated[Settings, Depends(get_settings)]):
    return {
        "status": "ok",
        "model": settings.openai_model,
        "configured": settings.has_api_key,
    }
