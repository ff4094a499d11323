"""Top-level orchestration.

Wires together: market snapshot → edge scoring → ranking → oracle consensus.
"""

from __future__ import annotations

import logging
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from poly_edge.config import get_settings
from poly_edge.markets.ingest import load_markets
from poly_edge.markets.models import Market
from poly_edge.markets.simulated import generate_simulated_markets
from poly_edge.oracle.consensus import ConsensusOracle
from poly_edge.oracle.models import ConsensusVerdict
from poly_edge.signals.models import EdgeAnalysis
from poly_edge.signals.scorer import rank_edges, score_market

logger = logging.getLogger(__name__)
console = Console(stderr=True)


def load_snapshot(input_path: Path | None = None, seed: int | None = None) -> list[Market]:
    """Load markets from a JSON file, or the simulated feed when no file is given."""
    if input_path is None:
        markets = generate_simulated_markets(seed)
        console.print(f"[dim]Using simulated feed ({len(markets)} markets)[/dim]")
    else:
        markets = load_markets(input_path)
        console.print(f"[dim]Loaded {len(markets)} market(s) from {escape(str(input_path))}[/dim]")
    return markets


def find_edges(
    markets: list[Market],
    min_score: float | None = None,
    limit: int | None = None,
) -> list[tuple[Market, EdgeAnalysis]]:
    """Score a snapshot and keep the top edges (settings provide defaults)."""
    settings = get_settings()
    if min_score is None:
        min_score = settings.min_edge_score
    if limit is None:
        limit = settings.top_edges

    edges = rank_edges(markets, min_score=min_score, limit=limit)
    logger.info(
        "Found %d edge(s) with score >= %.1f among %d market(s)",
        len(edges), min_score, len(markets),
    )
    return edges


async def consult_market(
    market: Market,
    oracle: ConsensusOracle | None = None,
) -> tuple[EdgeAnalysis, ConsensusVerdict]:
    """Score one market and ask the oracle for a consensus verdict.

    Raises:
        ConfigurationError: no oracle given and no providers configured
    """
    if oracle is None:
        oracle = ConsensusOracle.from_settings()

    analysis = score_market(market)
    names = ", ".join(p.name for p in oracle.providers)
    console.print(f"[bold]Consulting oracle ({names}) on {market.id}...[/bold]")
    verdict = await oracle.consult(market, analysis)
    return analysis, verdict
