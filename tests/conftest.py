"""Shared test fixtures."""

from __future__ import annotations

import asyncio
import json

import pytest

from poly_edge.errors import ProviderError
from poly_edge.markets.models import Market, PricePoint, WhaleAction
from poly_edge.signals.models import Direction, EdgeAnalysis


class FakeProvider:
    """Judgment provider stand-in returning a canned response or failure."""

    def __init__(
        self,
        name: str,
        response: dict | str | None = None,
        error: BaseException | None = None,
        delay: float = 0.0,
    ) -> None:
        self.name = name
        self._response = response
        self._error = error
        self._delay = delay
        self.contexts: list[str] = []

    async def judge(self, context: str) -> str:
        self.contexts.append(context)
        if self._delay:
            await asyncio.sleep(self._delay)
        if self._error is not None:
            raise self._error
        if isinstance(self._response, dict):
            return json.dumps(self._response)
        return self._response or ""


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch, tmp_path):
    """Keep real credentials and .env files out of tests."""
    for var in ("ANTHROPIC_API_KEY", "GEMINI_API_KEY", "PROVIDER_TIMEOUT", "MIN_EDGE_SCORE", "TOP_EDGES"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def make_provider():
    return FakeProvider


@pytest.fixture
def failing_provider():
    return FakeProvider("broken", error=ProviderError("broken", "connection refused"))


@pytest.fixture
def whale_market():
    """Cheap YES market with whale and copy-trader clusters (reference m1)."""
    return Market(
        id="m1",
        question="Will Bitcoin hit $100k by Jan 1?",
        price=0.38,
        volume24h=1_250_000,
        liquidity=75_000,
        funding_rate=-0.012,
        whale_count_15m=3,
        copy_trader_count_20m=14,
        recent_whale_action=WhaleAction.BUY_YES,
        history=tuple(PricePoint(f"{i}m", 0.36) for i in range(20)),
    )


@pytest.fixture
def fade_market():
    """Expensive YES market with whales selling (reference m2)."""
    return Market(
        id="m2",
        question="Fed Interest Rate Cut in March?",
        price=0.78,
        volume24h=45_000,
        liquidity=120_000,
        funding_rate=0.09,
        whale_count_15m=1,
        copy_trader_count_20m=4,
        recent_whale_action=WhaleAction.BUY_NO,
        outcome="No",
    )


@pytest.fixture
def neutral_market():
    return Market(
        id="m-mid",
        question="Coin flip?",
        price=0.5,
        volume24h=10_000,
        liquidity=10_000,
        funding_rate=-0.05,
        whale_count_15m=0,
        copy_trader_count_20m=0,
        recent_whale_action=WhaleAction.BUY_YES,
    )


@pytest.fixture
def whale_analysis():
    return EdgeAnalysis(
        market_id="m1",
        score=10.0,
        direction=Direction.YES,
        tags=("LIQUIDITY SQUEEZE", "WHALE CLUSTER", "COPY CLUSTER"),
        reward_risk=2.74,
    )


@pytest.fixture
def raw_market():
    """Feed-shaped (camelCase) market record."""
    return {
        "id": "m4",
        "question": "Solana flip ETH market cap in 2025?",
        "outcome": "Yes",
        "price": 0.22,
        "volume24h": 890000,
        "liquidity": 45000,
        "fundingRate": -0.02,
        "whaleCount15m": 4,
        "copyTraderCount20m": 25,
        "recentWhaleAction": "buy_yes",
        "history": [{"time": f"{i}m", "price": 0.21} for i in range(20)],
    }
