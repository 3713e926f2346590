"""
Inbound request parsing and validation.

A body that is missing or is not a JSON object is treated as `{}` so that
the caller gets the scenario error rather than a parse error.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Mapping

from ..api.models import ScenarioRequest
from ..core.errors import InvalidScenario

MIN_SCENARIO_LENGTH = 3

_FALSE_STRINGS = {"", "false", "0", "no", "off"}


def parse_body(raw: bytes) -> Dict[str, Any]:
    if not raw:
        return {}
    try:
        body = json.loads(raw)
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def _coerce_text(value: Any) -> str:
    if not value:
        return ""
    return str(value)


def _coerce_flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() not in _FALSE_STRINGS
    return bool(value)


def validate_request(body: Mapping[str, Any]) -> ScenarioRequest:
    """
    Build a ScenarioRequest from a decoded body.

    Raises
    ------
    InvalidScenario
        If `scenario` is absent or shorter than three characters once trimmed.
    """
    scenario = _coerce_text(body.get("scenario"))
    if len(scenario.strip()) < MIN_SCENARIO_LENGTH:
        raise InvalidScenario()

    pdf_url = _coerce_text(body.get("pdfUrl")) or None

    return ScenarioRequest(
        scenario=scenario,
        pdf_url=pdf_url,
        debug=_coerce_flag(body.get("debug", False)),
    )
