"""Ingestion boundary: raw market dicts and JSON files -> Market.

Validation lives here so the scoring engine can assume well-formed input.
"""

from __future__ import annotations

import json
import logging
import math
from pathlib import Path

from poly_edge.markets.models import Market, PricePoint, WhaleAction

logger = logging.getLogger(__name__)


def _number(raw: dict, *keys: str, default: float | None = None) -> float:
    """Read the first present key as a finite float.

    Accepts numeric strings. Raises ValueError when no key is present and
    there is no default, or when the value is not a finite number.
    """
    for key in keys:
        value = raw.get(key)
        if value is None or value == "":
            continue
        if isinstance(value, bool):
            raise ValueError(f"{key} must be a number, got {value!r}")
        try:
            number = float(value)
        except (TypeError, ValueError):
            raise ValueError(f"{key} must be a number, got {value!r}") from None
        if not math.isfinite(number):
            raise ValueError(f"{key} must be finite, got {value!r}")
        return number
    if default is None:
        raise ValueError(f"missing required field {keys[0]}")
    return default


def _count(raw: dict, *keys: str) -> int:
    value = _number(raw, *keys, default=0.0)
    if value < 0 or value != int(value):
        raise ValueError(f"{keys[0]} must be a non-negative integer, got {value!r}")
    return int(value)


def _history(raw_history: object) -> tuple[PricePoint, ...]:
    if not raw_history:
        return ()
    if not isinstance(raw_history, list):
        raise ValueError("history must be a list of {time, price} samples")
    points = []
    for i, sample in enumerate(raw_history):
        if not isinstance(sample, dict):
            raise ValueError(f"history[{i}] must be an object")
        points.append(
            PricePoint(
                time=str(sample.get("time", f"{i}m")),
                price=_number(sample, "price"),
            )
        )
    return tuple(points)


def raw_to_market(raw: dict) -> Market:
    """Convert a raw market dict to a validated Market.

    Accepts both camelCase (feed) and snake_case keys.

    Raises:
        ValueError: a required field is missing or out of range
    """
    market_id = str(raw.get("id") or raw.get("market_id") or "")
    if not market_id:
        raise ValueError("missing required field id")

    price = _number(raw, "price")
    if not 0.0 <= price <= 1.0:
        raise ValueError(f"price must be in [0, 1], got {price}")

    volume = _number(raw, "volume24h", "volume_24h", default=0.0)
    liquidity = _number(raw, "liquidity", default=0.0)
    if volume < 0:
        raise ValueError(f"volume24h must be >= 0, got {volume}")
    if liquidity < 0:
        raise ValueError(f"liquidity must be >= 0, got {liquidity}")

    action_raw = raw.get("recentWhaleAction", raw.get("recent_whale_action")) or "neutral"
    try:
        action = WhaleAction(str(action_raw).lower())
    except ValueError:
        raise ValueError(f"unknown recentWhaleAction {action_raw!r}") from None

    return Market(
        id=market_id,
        question=str(raw.get("question", "")),
        price=price,
        volume24h=volume,
        liquidity=liquidity,
        funding_rate=_number(raw, "fundingRate", "funding_rate", default=0.0),
        whale_count_15m=_count(raw, "whaleCount15m", "whale_count_15m"),
        copy_trader_count_20m=_count(raw, "copyTraderCount20m", "copy_trader_count_20m"),
        recent_whale_action=action,
        history=_history(raw.get("history")),
        outcome=str(raw.get("outcome") or "Yes"),
    )


def load_markets(path: Path) -> list[Market]:
    """Load markets from a JSON file holding a list of market objects.

    Invalid records are logged and skipped.
    """
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a JSON list of markets")

    markets: list[Market] = []
    for i, raw in enumerate(data):
        if not isinstance(raw, dict):
            logger.warning("Skipping record %d in %s: not an object", i, path)
            continue
        try:
            markets.append(raw_to_market(raw))
        except ValueError as exc:
            logger.warning("Skipping record %d in %s: %s", i, path, exc)
    return markets
