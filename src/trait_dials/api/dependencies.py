from typing import Annotated

from fastapi import Depends

from ..config import Settings, get_settings
from ..llm.client import GenerationClient
from ..sources.extractor import DocumentExtractor
from ..recommend.service import RecommendationService


def get_extractor(settings: Annotated[Settings, Depends(get_settings)]) -> DocumentExtractor:
    return DocumentExtractor(settings)


def get_generation_client(settings: Annotated[Settings, Depends(get_settings)]) -> GenerationClient:
    return GenerationClient(settings)


def get_recommendation_service(
    extractor: Annotated[DocumentExtractor, Depends(get_extractor)],
    llm: Annotated[GenerationClient, Depends(get_generation_client)],
) -> RecommendationService:
    return RecommendationService(extractor, llm)
