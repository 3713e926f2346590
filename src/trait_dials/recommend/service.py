"""
Recommendation Orchestrator

Runs one request through the pipeline:

    normalize URL -> extract document -> build prompt
        -> generate -> finalize

Each stage either hands its result to the next or raises, and a raised
error ends the request. The only exception is document extraction, whose
failures degrade to an empty excerpt. Debug diagnostics are attached last
and never change the primary result.
"""

from __future__ import annotations

import logging
import time

from ..api.models import Diagnostics, RecommendationResult, ScenarioRequest
from ..llm.client import GenerationClient, extract_content
from ..llm.prompts import build_prompt
from ..sources.extractor import DocumentExtractor, Extracted
from ..sources.normalizer import normalize_source_url
from ..traits import TRAIT_KEYS
from .finalizer import finalize

logger = logging.getLogger("dials.recommend")


class RecommendationService:
    def __init__(self, extractor: DocumentExtractor, llm: GenerationClient) -> None:
        self.extractor = extractor
        self.llm = llm

    async def recommend(self, request: ScenarioRequest) -> RecommendationResult:
        started = time.monotonic()

        source_url = normalize_source_url(request.pdf_url or "")
        grounding = await self.extractor.fetch_text(source_url)
        if isinstance(grounding, Extracted):
            excerpt = grounding.text
            grounding_status = "extracted"
        else:
            excerpt = ""
            grounding_status = f"unavailable: {grounding.reason}"

        prompt = build_prompt(request.scenario, excerpt, TRAIT_KEYS)
        data = await self.llm.generate(prompt.system, prompt.user)
        result = finalize(extract_content(data))

        logger.info(
            "Recommendation generated (grounding %s, %d chars)",
            "extracted" if excerpt else "none",
            len(excerpt),
            extra={
                "duration_ms": round((time.monotonic() - started) * 1000),
                "model": self.llm.model,
            },
        )

        if request.debug:
            result = result.model_copy(
                update={
                    "diagnostics": Diagnostics(
                        source_url=source_url,
                        grounding_chars=len(excerpt),
                        grounding_text=excerpt,
                        grounding_status=grounding_status,
                    )
                }
            )

        return result
