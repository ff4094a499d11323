"""Output formatters for edges and oracle verdicts: Rich table, JSON, CSV."""

from __future__ import annotations

import csv
import io
import json
from datetime import datetime, timezone

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from poly_edge.markets.models import Market
from poly_edge.oracle.models import ConsensusVerdict, Conviction
from poly_edge.signals.models import Direction, EdgeAnalysis

_DIRECTION_COLORS = {
    Direction.YES: "green",
    Direction.NO: "red",
    Direction.SHADOW_WHALE: "magenta",
}

_CONVICTION_COLORS = {
    Conviction.LOW: "dim",
    Conviction.MEDIUM: "yellow",
    Conviction.HIGH: "green",
    Conviction.NUCLEAR: "bold red",
}


def format_table(edges: list[tuple[Market, EdgeAnalysis]], console: Console | None = None) -> None:
    """Print ranked edges as a Rich table."""
    if console is None:
        console = Console()

    if not edges:
        console.print("[yellow]No edges found (no market reached the minimum score).[/yellow]")
        return

    table = Table(
        title="PolyEdge Top Edges",
        caption=f"Generated at {datetime.now(timezone.utc).strftime('%Y-%m-%d %H:%M UTC')}",
        show_lines=True,
    )

    table.add_column("ID", width=8)
    table.add_column("Direction", style="bold", width=12)
    table.add_column("Score", justify="right", width=5)
    table.add_column("Price", justify="right", width=6)
    table.add_column("R/R", justify="right", width=6)
    table.add_column("Whales", justify="right", width=6)
    table.add_column("Tags", width=24, no_wrap=False)
    table.add_column("Question", width=40, no_wrap=False)

    for market, analysis in edges:
        color = _DIRECTION_COLORS[analysis.direction]
        table.add_row(
            escape(market.id[:8]),
            f"[{color}]{analysis.direction.value}[/{color}]",
            f"{analysis.score:.1f}",
            f"{market.price:.2f}",
            f"{analysis.reward_risk:.2f}",
            str(market.whale_count_15m),
            escape(", ".join(analysis.tags)),
            escape(market.question[:80]),
        )

    console.print(table)
    console.print(f"\n[dim]{len(edges)} edge(s) total[/dim]")


def _edge_dict(market: Market, analysis: EdgeAnalysis) -> dict[str, object]:
    return {
        "market_id": market.id,
        "question": market.question,
        "price": market.price,
        "score": analysis.score,
        "direction": analysis.direction.value,
        "reward_risk": analysis.reward_risk,
        "tags": list(analysis.tags),
    }


def format_json(edges: list[tuple[Market, EdgeAnalysis]]) -> str:
    """Format ranked edges as a JSON string."""
    return json.dumps([_edge_dict(m, a) for m, a in edges], indent=2)


def format_csv(edges: list[tuple[Market, EdgeAnalysis]]) -> str:
    """Format ranked edges as CSV."""
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(["market_id", "question", "price", "score", "direction", "reward_risk", "tags"])
    for market, analysis in edges:
        writer.writerow([
            market.id, market.question, market.price, analysis.score,
            analysis.direction.value, analysis.reward_risk, "|".join(analysis.tags),
        ])
    return output.getvalue()


def format_verdict(
    market: Market,
    analysis: EdgeAnalysis,
    verdict: ConsensusVerdict,
    console: Console | None = None,
) -> None:
    """Print a consensus verdict next to the local analysis."""
    if console is None:
        console = Console()

    dir_color = _DIRECTION_COLORS[verdict.direction]
    conv_color = _CONVICTION_COLORS[verdict.conviction]

    console.print(f"[bold]PolyEdge Oracle Verdict:[/bold] {escape(market.question)}")
    console.print(
        f"  [{dir_color}]{verdict.direction.value}[/{dir_color}] "
        f"score {verdict.score:.1f}/10 | "
        f"conviction [{conv_color}]{verdict.conviction.value}[/{conv_color}] | "
        f"confidence {verdict.confidence_score}%"
    )
    console.print(
        f"  Local model: {analysis.direction.value} {analysis.score:.1f}/10 "
        f"(R/R {analysis.reward_risk:.2f})"
    )
    if verdict.target_price is not None or verdict.stop_loss is not None:
        target = "-" if verdict.target_price is None else f"{verdict.target_price:.2f}"
        stop = "-" if verdict.stop_loss is None else f"{verdict.stop_loss:.2f}"
        console.print(f"  Target: {target} | Stop: {stop}")
    if verdict.providers:
        console.print(f"  Providers: {escape(', '.join(verdict.providers))}")
    elif verdict.fallback:
        console.print("  [yellow]Fallback: no provider returned a usable judgment[/yellow]")
    for line in verdict.reasoning:
        console.print(f"  • {escape(line)}")


def format_verdict_json(market: Market, analysis: EdgeAnalysis, verdict: ConsensusVerdict) -> str:
    """Format a verdict and its local analysis as JSON."""
    return json.dumps(
        {"edge": _edge_dict(market, analysis), "verdict": verdict.to_dict()},
        indent=2,
        ensure_ascii=False,
    )
