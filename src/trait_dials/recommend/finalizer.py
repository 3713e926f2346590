"""
Response finalization.

Model output is untrusted. `finalize` is the single, total conversion from
whatever the model returned into a RecommendationResult: every trait key
present, every level an integer in range. Unknown level keys are dropped.
"""

from __future__ import annotations

import json
from typing import Any, Dict

from ..api.models import RecommendationResult
from ..core.errors import ModelOutputInvalid, snippet
from ..traits import clamp_levels


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-standard JSON constant: {name}")


def _as_mapping(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def finalize(raw_content: Any) -> RecommendationResult:
    """
    Parse and clamp model content.

    Parameters
    ----------
    raw_content : Any
        The message content: a JSON string, already-decoded data, or None.

    Raises
    ------
    ModelOutputInvalid
        If `raw_content` is a string that does not parse as JSON.
    """
    content = raw_content
    if isinstance(content, str):
        try:
            content = json.loads(content, parse_constant=_reject_constant)
        except ValueError as exc:
            raise ModelOutputInvalid(snippet=snippet(raw_content)) from exc

    document = _as_mapping(content)
    summary = document.get("summary")

    return RecommendationResult(
        levels=clamp_levels(_as_mapping(document.get("levels"))),
        rationales=_as_mapping(document.get("rationales")),
        summary=summary if isinstance(summary, str) else "",
    )
