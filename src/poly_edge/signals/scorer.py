"""Edge scoring engine: market signals -> score, direction, tags."""

from __future__ import annotations

from poly_edge.markets.models import Market, WhaleAction
from poly_edge.signals.models import Direction, EdgeAnalysis

MAX_SCORE = 10.0
MIN_SCORE = 0.0

# Price bands
YES_BAND_MAX = 0.4
NO_BAND_MIN = 0.75
NEUTRAL_SCORE = 2.0

# Shadow-whale override
SHADOW_WHALE_COUNT = 3
SHADOW_SCORE_CEILING = 8.0
SHADOW_SCORE = 7.5

# Copy-trader cluster
COPY_CLUSTER_COUNT = 12
COPY_BONUS_MIN_SCORE = 5.0


def _score_yes_band(market: Market, tags: list[str]) -> tuple[float, float]:
    """Cheap YES side. Returns (score, reward_risk)."""
    score = 0.0
    if market.funding_rate < 0:
        score += 3
    if market.recent_whale_action is WhaleAction.BUY_YES:
        score += 3
    if market.liquidity < 80_000:
        score += 2
        tags.append("LIQUIDITY SQUEEZE")
    if market.whale_count_15m >= 2:
        score += 2
        tags.append("WHALE CLUSTER")

    # Target exit at 0.9, stop at half the entry price
    if market.price <= 0:
        return score, 0.0
    return score, (0.9 - market.price) / (market.price * 0.5)


def _score_no_band(market: Market, tags: list[str]) -> tuple[float, float]:
    """Expensive YES side, fade it. Returns (score, reward_risk)."""
    score = 0.0
    if market.volume24h < 100_000:
        score += 2
    if market.recent_whale_action in (WhaleAction.BUY_NO, WhaleAction.SELL_YES):
        score += 4
    if market.funding_rate > 0.08:
        score += 2
        tags.append("FUNDING ARB")

    if market.price >= 1:
        return score, 0.0
    return score, (market.price - 0.1) / (1 - market.price)


def score_market(market: Market) -> EdgeAnalysis:
    """Score a single market snapshot.

    Pure and deterministic: the result depends only on ``market``.

    The shadow-whale override is evaluated on the price-band score, before
    the copy-cluster bonus; moving it after the bonus changes results for
    scores just under 8.
    """
    tags: list[str] = []

    if market.price < YES_BAND_MAX:
        score, reward_risk = _score_yes_band(market, tags)
        direction = Direction.YES
    elif market.price > NO_BAND_MIN:
        score, reward_risk = _score_no_band(market, tags)
        direction = Direction.NO
    else:
        score, reward_risk = NEUTRAL_SCORE, 0.0
        direction = Direction.YES

    if market.whale_count_15m >= SHADOW_WHALE_COUNT and score < SHADOW_SCORE_CEILING:
        direction = Direction.SHADOW_WHALE
        score = SHADOW_SCORE
        tags.append("SHADOW FOLLOW")

    if market.copy_trader_count_20m > COPY_CLUSTER_COUNT:
        tags.append("COPY CLUSTER")
        if score > COPY_BONUS_MIN_SCORE:
            score += 1

    score = max(MIN_SCORE, min(MAX_SCORE, score))

    return EdgeAnalysis(
        market_id=market.id,
        score=score,
        direction=direction,
        tags=tuple(tags),
        reward_risk=round(max(0.0, reward_risk), 2),
    )


def rank_edges(
    markets: list[Market],
    min_score: float = 7.0,
    limit: int = 5,
) -> list[tuple[Market, EdgeAnalysis]]:
    """Score markets and return the strongest edges, best first.

    Markets below ``min_score`` are dropped. Ties keep input order.
    """
    scored = [(market, score_market(market)) for market in markets]
    edges = [pair for pair in scored if pair[1].score >= min_score]
    edges.sort(key=lambda pair: pair[1].score, reverse=True)
    return edges[:limit]
