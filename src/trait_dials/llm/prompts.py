"""
Prompt construction for trait recommendations.

`build_prompt` is pure: identical inputs always give identical prompts.
Scenario and excerpt text are inserted verbatim; the response finalizer,
not the prompt, is what guards against malformed model output.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from ..traits import TRAIT_KEYS, MIN_LEVEL, MAX_LEVEL

NO_EXCERPT = "(none)"

SYSTEM_PROMPT_TEMPLATE = """
You are a coaching assistant. Map any scenario to psychopathic trait "dials" ({low}-{high}).
If a PDF excerpt is given, use it to ground your reasoning.

Trait keys (use exactly these, no others): {keys}

Always output a single JSON object with exactly these fields:
{{
  "levels": {{ <every trait key>: <integer {low}-{high}> }},
  "rationales": {{ <trait key>: "<one or two sentences; may cite the scenario or quote short fragments of the excerpt>" }},
  "summary": "<short overview of the recommended profile>"
}}
""".strip()

USER_PROMPT_TEMPLATE = """
Scenario:
{scenario}

PDF Excerpt:
{excerpt}
""".strip()


@dataclass(frozen=True)
class Prompt:
    system: str
    user: str


def build_system_prompt(trait_keys: Sequence[str] = TRAIT_KEYS) -> str:
    return SYSTEM_PROMPT_TEMPLATE.format(
        low=MIN_LEVEL,
        high=MAX_LEVEL,
        keys=", ".join(trait_keys),
    )


def build_prompt(
    scenario: str,
    extracted_text: str,
    trait_keys: Sequence[str] = TRAIT_KEYS,
) -> Prompt:
    """Compose the system/user prompt pair for one recommendation."""
    user = USER_PROMPT_TEMPLATE.format(
        scenario=scenario,
        excerpt=extracted_text or NO_EXCERPT,
    )
    return Prompt(system=build_system_prompt(trait_keys), user=user)
