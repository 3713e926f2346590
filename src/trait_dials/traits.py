"""
Trait vocabulary and level clamping.

The trait keys are fixed at import time and never derived from input.
`clamp_level` is the only path by which an untrusted model value becomes
a trait level.
"""

from __future__ import annotations

import math
from typing import Any, Mapping, Dict

TRAIT_KEYS = (
    "ruthlessness",
    "fearlessness",
    "impulsivity",
    "selfConfidence",
    "focus",
    "coolness",
    "toughness",
    "charm",
    "charisma",
    "reducedEmpathy",
    "lackConscience",
)

MIN_LEVEL = 0
MAX_LEVEL = 10
DEFAULT_LEVEL = 5


def _as_number(value: Any) -> float:
    """Numeric coercion; anything that is not a number becomes NaN."""
    if isinstance(value, bool):
        return math.nan
    if isinstance(value, (int, float)):
        try:
            return float(value)
        except OverflowError:
            return math.inf
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return math.nan
        try:
            return float(text)
        except ValueError:
            return math.nan
    return math.nan


def clamp_level(value: Any) -> int:
    """
    Coerce an untrusted value into a trait level.

    Numbers and numeric strings are rounded half up and clamped into
    [MIN_LEVEL, MAX_LEVEL]. Anything that does not yield a finite number
    becomes DEFAULT_LEVEL.
    """
    number = _as_number(value)
    if not math.isfinite(number):
        return DEFAULT_LEVEL
    rounded = math.floor(number + 0.5)
    return max(MIN_LEVEL, min(MAX_LEVEL, rounded))


def clamp_levels(raw_levels: Mapping[str, Any]) -> Dict[str, int]:
    """Build a total level mapping over TRAIT_KEYS, in declaration order."""
    return {key: clamp_level(raw_levels.get(key)) for key in TRAIT_KEYS}
