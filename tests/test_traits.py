import math

import pytest

from trait_dials.traits import DEFAULT_LEVEL, TRAIT_KEYS, clamp_level, clamp_levels


def test_trait_vocabulary_is_fixed():
    assert TRAIT_KEYS == (
        "ruthlessness", "fearlessness", "impulsivity", "selfConfidence", "focus",
        "coolness", "toughness", "charm", "charisma", "reducedEmpathy", "lackConscience",
    )


@pytest.mark.parametrize("raw, expected", [
    (0, 0),
    (7, 7),
    (10, 10),
    (11.7, 10),
    (-4, 0),
    (3.4, 3),
    (2.5, 3),
    (-0.5, 0),
    ("3", 3),
    (" 8.6 ", 9),
    ("1e3", 10),
])
def test_numeric_values_are_rounded_and_clamped(raw, expected):
    assert clamp_level(raw) == expected


@pytest.mark.parametrize("raw", [
    None, "", "   ", "abc", "high", True, False, [], {}, [3],
    math.nan, math.inf, -math.inf, "NaN", "Infinity", 10 ** 400,
])
def test_non_numeric_values_default_to_neutral(raw):
    assert clamp_level(raw) == DEFAULT_LEVEL


def test_clamp_levels_is_total_and_drops_unknown_keys():
    levels = clamp_levels({"ruthlessness": 11.7, "focus": "3", "unknownKey": 9})

    assert list(levels) == list(TRAIT_KEYS)
    assert levels["ruthlessness"] == 10
    assert levels["focus"] == 3
    assert "unknownKey" not in levels
    assert all(levels[k] == DEFAULT_LEVEL for k in TRAIT_KEYS if k not in ("ruthlessness", "focus"))
