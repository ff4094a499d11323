"""Prompt context shared by every judgment provider."""

from __future__ import annotations

from poly_edge.markets.models import Market
from poly_edge.signals.models import EdgeAnalysis

SYSTEM_PROMPT = (
    "You are PolyEdge Oracle, a prediction market analyst.\n"
    "You only take 8/10+ conviction edges. You are ruthless about risk.\n"
    "Always output strict JSON. Never explain, never apologize."
)

RESPONSE_INSTRUCTIONS = (
    "Return only valid JSON with keys: score (0-10), direction (YES or NO), "
    "conviction (LOW, MEDIUM, HIGH or NUCLEAR), reasoning (array of strings), "
    "targetPrice, stopLoss"
)


def build_market_context(market: Market, analysis: EdgeAnalysis) -> str:
    """Summarize a market and its local analysis for the providers.

    The string is a pure function of its inputs, so every provider in a
    consult() call sees identical context.
    """
    score = f"{analysis.score:g}"
    lines = [
        f"Question: {market.question}",
        f"Current Yes Price: {market.price:.4f} ({market.price * 100:.1f}%)",
        f"24h Volume: ${market.volume24h:,.0f}",
        f"Liquidity: ${market.liquidity:,.0f}",
        f"Whales in last 15m: {market.whale_count_15m}",
        f"Copy traders in last 20m: {market.copy_trader_count_20m}",
        f"Recent whale action: {market.recent_whale_action.value}",
        f"Funding rate: {market.funding_rate * 100:.3f}%",
        f"Your algorithmic score: {score}/10",
        f"Local direction: {analysis.direction.value}",
        f"Tags: {', '.join(analysis.tags)}",
    ]
    return "\n".join(lines)


def build_user_prompt(context: str) -> str:
    return f"{context}\n\n{RESPONSE_INSTRUCTIONS}"
