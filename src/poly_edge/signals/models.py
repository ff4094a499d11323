"""Edge analysis data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Direction(Enum):
    """Side a signal recommends."""

    YES = "YES"
    NO = "NO"
    SHADOW_WHALE = "SHADOW_WHALE"  # mirror recent whale flow


@dataclass(frozen=True)
class EdgeAnalysis:
    """Local heuristic verdict for one market snapshot.

    Attributes:
        market_id: ID of the scored Market
        score: opportunity score, 0-10
        direction: recommended side
        tags: labels explaining the score, in the order they fired
        reward_risk: implied gain/loss ratio, rounded to 2 decimals
    """

    market_id: str
    score: float
    direction: Direction
    tags: tuple[str, ...] = field(default_factory=tuple)
    reward_risk: float = 0.0

    @property
    def reason(self) -> tuple[str, ...]:
        """Tags double as the human-readable reason list."""
        return self.tags
