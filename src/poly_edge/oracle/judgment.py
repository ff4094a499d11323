"""Validation and coercion of untrusted provider responses.

Every field is coerced explicitly:

    score      number or numeric string -> float, anything else -> 0.0
    direction  "yes" (any case) -> YES, anything else or absent -> NO
    conviction non-empty string -> kept as-is, else None
    reasoning  list -> its non-empty string items; a bare string -> [string]
    targetPrice / stopLoss  number or numeric string -> float, else None

Unknown keys are ignored. A payload counts as valid only if it is a JSON
object carrying at least one recognized key.
"""

from __future__ import annotations

import math

from poly_edge.common.llm import extract_json_object
from poly_edge.common.types import JsonDict
from poly_edge.oracle.models import InvalidJudgment, RawJudgment, ValidJudgment
from poly_edge.signals.models import Direction

RECOGNIZED_KEYS = frozenset(
    {"score", "direction", "conviction", "reasoning", "targetPrice", "stopLoss"}
)


def _as_float(value: object) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def _as_direction(value: object) -> Direction:
    if isinstance(value, str) and value.strip().upper() == "YES":
        return Direction.YES
    return Direction.NO


def _as_reasoning(value: object) -> tuple[str, ...]:
    if isinstance(value, str):
        return (value,) if value.strip() else ()
    if isinstance(value, list):
        return tuple(item for item in value if isinstance(item, str) and item.strip())
    return ()


def validate_payload(provider: str, payload: object) -> RawJudgment:
    """Validate an already-decoded provider payload."""
    if not isinstance(payload, dict):
        return InvalidJudgment(provider, f"expected a JSON object, got {type(payload).__name__}")

    if not RECOGNIZED_KEYS.intersection(payload):
        return InvalidJudgment(provider, "no recognized keys in response")

    conviction = payload.get("conviction")
    return ValidJudgment(
        provider=provider,
        score=_as_float(payload.get("score")) or 0.0,
        direction=_as_direction(payload.get("direction")),
        conviction=conviction if isinstance(conviction, str) and conviction else None,
        reasoning=_as_reasoning(payload.get("reasoning")),
        target_price=_as_float(payload.get("targetPrice")),
        stop_loss=_as_float(payload.get("stopLoss")),
    )


def parse_judgment(provider: str, text: str) -> RawJudgment:
    """Decode a provider's text response and validate it."""
    payload: JsonDict | None = extract_json_object(text)
    if payload is None:
        return InvalidJudgment(provider, "response is not a JSON object")
    return validate_payload(provider, payload)
