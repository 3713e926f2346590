"""
Error Taxonomy and Global Error Handling

This module defines every failure the recommend endpoint can report, and
the FastAPI exception handlers that turn them into JSON responses.

Design Goals
------------
- Every non-200 body has the same shape: {"error": str, "snippet"?: str}
- Raw upstream payloads are only ever echoed as bounded snippets
- Log full stack traces internally for unanticipated failures
- The endpoint always answers with well-formed JSON, even when rendering
  the response itself fails
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import Request, status
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger("dials.errors")

SNIPPET_LIMIT = 200

FALLBACK_ERROR_BODY = b'{"error":"Server error"}'


def snippet(raw: Any, limit: int = SNIPPET_LIMIT) -> str:
    """Return at most `limit` characters of a raw payload for diagnostics."""
    if raw is None:
        return ""
    return str(raw)[:limit]


# ---------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------

class RecommendationError(RuntimeError):
    """
    Base class for failures that map to a specific HTTP status.

    Attributes
    ----------
    status_code : int
        HTTP status returned to the caller.

    message : str
        Human-readable error rendered as the `error` field.

    snippet : Optional[str]
        Bounded excerpt of an offending raw payload, if any.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Server error"

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        snippet: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        self.message = message or self.default_message
        self.snippet = snippet
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"error": self.message}
        if self.snippet is not None:
            payload["snippet"] = self.snippet
        return payload


class InvalidMethod(RecommendationError):
    status_code = status.HTTP_405_METHOD_NOT_ALLOWED
    default_message = "Use POST"


class MissingConfiguration(RecommendationError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Missing service configuration"


class InvalidScenario(RecommendationError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Missing or too-short scenario"


class GenerationError(RecommendationError):
    """Raised by the generation client when the upstream call fails."""


class UpstreamUnavailable(GenerationError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Generation service unavailable"


class UpstreamMalformed(GenerationError):
    status_code = status.HTTP_502_BAD_GATEWAY
    default_message = "Upstream returned non-JSON"


class UpstreamRejected(GenerationError):
    default_message = "OpenAI API error"


class ModelOutputInvalid(RecommendationError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Model did not return valid JSON"


# ---------------------------------------------------------------------
# Response rendering
# ---------------------------------------------------------------------

def json_response(status_code: int, payload: Dict[str, Any]) -> Response:
    """
    Render `payload` as a JSON response.

    If the payload cannot be serialized, a fixed minimal error body is
    returned with status 500 instead.
    """
    try:
        return JSONResponse(status_code=status_code, content=payload)
    except (TypeError, ValueError):
        logger.exception("Failed to serialize response payload")
        return Response(
            content=FALLBACK_ERROR_BODY,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            media_type="application/json",
        )


# ---------------------------------------------------------------------
# Public Exception Handlers
# ---------------------------------------------------------------------

async def recommendation_error_handler(
    request: Request,
    exc: RecommendationError,
) -> Response:
    """Render a taxonomy error with its mapped status."""
    if exc.status_code >= 500:
        logger.error(
            "Request failed: %s %s -> %d %s",
            request.method,
            request.url.path,
            exc.status_code,
            exc.message,
        )
    return json_response(exc.status_code, exc.to_payload())


async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException,
) -> Response:
    """Render framework-level HTTP errors (unknown path, wrong method) as {"error"}."""
    if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        return json_response(exc.status_code, InvalidMethod().to_payload())
    return json_response(exc.status_code, {"error": str(exc.detail)})


async def unhandled_exception_handler(
    request: Request,
    exc: Exception,
) -> Response:
    """
    Catch-all handler for uncaught exceptions.

    Behavior
    --------
    - Logs the full exception stack trace for internal diagnostics.
    - Returns a 500 carrying the exception's message, or a generic one
      when the exception has none.
    """
    logger.exception(
        "Unhandled exception during request: %s %s",
        request.method,
        request.url.path,
        exc_info=exc,
    )
    return json_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        {"error": str(exc) or "Server error"},
    )
