"""Market data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class WhaleAction(Enum):
    """Most recent large-participant activity on a market."""

    BUY_YES = "buy_yes"
    BUY_NO = "buy_no"
    SELL_YES = "sell_yes"
    NEUTRAL = "neutral"


@dataclass(frozen=True)
class PricePoint:
    """One sample of the YES price history."""

    time: str  # e.g. "3m"
    price: float


@dataclass(frozen=True)
class Market:
    """A normalized snapshot of one tradable question.

    Snapshots are produced fresh each polling cycle and never mutated;
    the next cycle supersedes them.
    """

    id: str
    question: str
    price: float  # YES price, 0-1
    volume24h: float = 0.0
    liquidity: float = 0.0
    funding_rate: float = 0.0
    whale_count_15m: int = 0
    copy_trader_count_20m: int = 0
    recent_whale_action: WhaleAction = WhaleAction.NEUTRAL
    history: tuple[PricePoint, ...] = field(default_factory=tuple)
    outcome: str = "Yes"
