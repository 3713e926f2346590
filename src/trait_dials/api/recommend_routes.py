"""
Recommend Routes: Scenario -> Trait Levels

This module implements the single public endpoint of the service. It
provides:
- Method and configuration checks before any other processing
- Lenient body parsing with strict scenario validation
- Delegation to the RecommendationService pipeline
- A JSON body for every outcome, success or failure

Request Flow
------------
1. Reject anything but POST (405).
2. Fail fast when the service credential is missing (500).
3. Parse and validate the body (400 on a missing/short scenario).
4. Normalize the source URL, extract grounding text, build the prompt,
   call the generation service and clamp its output.
5. Respond 200 with levels, rationales, summary (and diagnostics when
   `debug` is set).

Errors raised in steps 1-4 are RecommendationError subclasses; the
exception handlers registered in `main.create_app` render them.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import Response

from ..config import Settings, get_settings
from ..core.errors import InvalidMethod, json_response
from ..recommend.service import RecommendationService
from ..recommend.validation import parse_body, validate_request
from .dependencies import get_recommendation_service
from .models import ErrorResponse, RecommendationResult

router = APIRouter(tags=["recommend"])

# Non-POST methods are routed here so that this handler, not the framework,
# answers them with the standard error body.
ACCEPTED_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE"]

ERROR_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
    status.HTTP_405_METHOD_NOT_ALLOWED: {"model": ErrorResponse},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
    status.HTTP_502_BAD_GATEWAY: {"model": ErrorResponse},
}


@router.api_route(
    "/recommend",
    methods=ACCEPTED_METHODS,
    response_model=RecommendationResult,
    responses=ERROR_RESPONSES,
    summary="Recommend trait levels for a scenario",
)
@router.api_route(
    "/api/recommend",
    methods=ACCEPTED_METHODS,
    response_model=RecommendationResult,
    responses=ERROR_RESPONSES,
    include_in_schema=False,
)
async def recommend(
    request: Request,
    settings: Annotated[Settings, Depends(get_settings)],
    service: Annotated[RecommendationService, Depends(get_recommendation_service)],
) -> Response:
    """
    Map a free-text scenario (optionally grounded by a PDF) to trait levels.

    Body
    ----
    {"scenario": str, "pdfUrl"?: str, "debug"?: bool}

    Returns
    -------
    Response
        200 with {"levels", "rationales", "summary", "diagnostics"?}.
    """
    if request.method != "POST":
        raise InvalidMethod()

    settings.require_api_key()

    scenario_request = validate_request(parse_body(await request.body()))

    result = await service.recommend(scenario_request)

    return json_response(status.HTTP_200_OK, result.to_payload())
