"""
API Models

Pydantic models for the recommend endpoint's request and response
contracts. Wire names are camelCase; Python attributes are snake_case.

Design Goals
------------
- Request models hold already-coerced values (see recommend.validation)
- Response models describe the final, clamped contract only
- Safe defaults (no shared mutable state)
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------
# Request
# ---------------------------------------------------------------------

class ScenarioRequest(BaseModel):
    """
    Validated inbound request.
    """
    scenario: str = Field(..., min_length=3)
    pdf_url: Optional[str] = Field(default=None, alias="pdfUrl")
    debug: bool = False

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)


# ---------------------------------------------------------------------
# Response
# ---------------------------------------------------------------------

class Diagnostics(BaseModel):
    """
    Opt-in troubleshooting block, returned only when `debug` is set.
    """
    source_url: str = Field(default="", alias="sourceUrl")
    grounding_chars: int = Field(default=0, ge=0, alias="groundingChars")
    grounding_text: str = Field(default="", alias="groundingText")
    grounding_status: str = Field(default="", alias="groundingStatus")

    model_config = ConfigDict(populate_by_name=True, extra="forbid")


class RecommendationResult(BaseModel):
    """
    Final response: levels are total over the trait vocabulary and clamped.
    """
    levels: Dict[str, int]
    rationales: Dict[str, Any] = Field(default_factory=dict)
    summary: str = ""
    diagnostics: Optional[Diagnostics] = None

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    def to_payload(self) -> Dict[str, Any]:
        payload = self.model_dump(by_alias=True)
        if self.diagnostics is None:
            payload.pop("diagnostics")
        return payload


class ErrorResponse(BaseModel):
    """
    Body of every non-200 response.
    """
    error: str
    snippet: Optional[str] = None

    model_config = ConfigDict(extra="forbid")
