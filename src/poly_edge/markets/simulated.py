"""Simulated market feed for offline runs and demos."""

from __future__ import annotations

import random

from poly_edge.markets.models import Market, PricePoint, WhaleAction

HISTORY_LENGTH = 20

# (id, question, outcome, price, volume24h, liquidity, funding, whales, copiers, action, band_low, band_width)
_REFERENCE_MARKETS = [
    ("m1", "Will Bitcoin hit $100k by Jan 1?", "Yes", 0.38, 1_250_000, 75_000,
     -0.012, 3, 14, WhaleAction.BUY_YES, 0.35, 0.05),
    ("m2", "Fed Interest Rate Cut in March?", "No", 0.78, 45_000, 120_000,
     0.09, 1, 4, WhaleAction.BUY_NO, 0.76, 0.03),
    ("m3", "GPT-5 Release before Q3?", "Yes", 0.12, 500_000, 200_000,
     0.005, 0, 2, WhaleAction.NEUTRAL, 0.11, 0.02),
    ("m4", "Solana flip ETH market cap in 2025?", "Yes", 0.22, 890_000, 45_000,
     -0.02, 4, 25, WhaleAction.BUY_YES, 0.20, 0.06),
    ("m5", "US Ban TikTok by April?", "Yes", 0.65, 320_000, 150_000,
     0.01, 0, 1, WhaleAction.NEUTRAL, 0.64, 0.02),
]


def generate_simulated_markets(seed: int | None = None) -> list[Market]:
    """Build the reference markets with a fresh random price history.

    Only the history is randomized; all scored fields are fixed, so the
    edge analysis of each market is the same across calls.
    """
    rng = random.Random(seed)
    markets = []
    for (market_id, question, outcome, price, volume, liquidity, funding,
         whales, copiers, action, band_low, band_width) in _REFERENCE_MARKETS:
        history = tuple(
            PricePoint(time=f"{i}m", price=round(band_low + rng.random() * band_width, 4))
            for i in range(HISTORY_LENGTH)
        )
        markets.append(
            Market(
                id=market_id,
                question=question,
                outcome=outcome,
                price=price,
                volume24h=float(volume),
                liquidity=float(liquidity),
                funding_rate=funding,
                whale_count_15m=whales,
                copy_trader_count_20m=copiers,
                recent_whale_action=action,
                history=history,
            )
        )
    return markets
