"""Oracle data models: validated judgments and the consensus verdict."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TypeAlias

from poly_edge.signals.models import Direction


class Conviction(Enum):
    """Confidence tier derived from the averaged consensus score."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    NUCLEAR = "NUCLEAR"


@dataclass(frozen=True)
class ValidJudgment:
    """A provider response that passed validation, with coerced fields.

    Attributes:
        provider: name of the provider that produced it
        score: numeric score; 0.0 when absent or non-numeric
        direction: YES or NO; NO when absent or unrecognized
        conviction: provider's own conviction label, unvalidated
        reasoning: reasoning strings in provider order
        target_price: optional numeric target
        stop_loss: optional numeric stop
    """

    provider: str
    score: float = 0.0
    direction: Direction = Direction.NO
    conviction: str | None = None
    reasoning: tuple[str, ...] = field(default_factory=tuple)
    target_price: float | None = None
    stop_loss: float | None = None


@dataclass(frozen=True)
class InvalidJudgment:
    """A provider call that failed or returned an unusable payload."""

    provider: str
    error: str


# Tagged result of one provider call
RawJudgment: TypeAlias = ValidJudgment | InvalidJudgment


@dataclass(frozen=True)
class ConsensusVerdict:
    """Reduced, caller-facing oracle output.

    Attributes:
        score: mean provider score, rounded to 1 decimal
        direction: plurality direction (YES or NO)
        conviction: tier from the unrounded mean score
        reasoning: ordered, deduplicated union of provider reasoning
        target_price: first provider-supplied target, if any
        stop_loss: first provider-supplied stop, if any
        confidence_score: percent of valid judgments agreeing with direction
        providers: providers whose judgments were counted
        fallback: True when built from the local analysis only
    """

    score: float
    direction: Direction
    conviction: Conviction
    reasoning: tuple[str, ...]
    confidence_score: int
    target_price: float | None = None
    stop_loss: float | None = None
    providers: tuple[str, ...] = field(default_factory=tuple)
    fallback: bool = False

    def to_dict(self) -> dict[str, object]:
        return {
            "score": self.score,
            "direction": self.direction.value,
            "conviction": self.conviction.value,
            "reasoning": list(self.reasoning),
            "targetPrice": self.target_price,
            "stopLoss": self.stop_loss,
            "confidenceScore": self.confidence_score,
            "providers": list(self.providers),
            "fallback": self.fallback,
        }
