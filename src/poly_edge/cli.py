"""Typer CLI: poly-edge scan, oracle."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

app = typer.Typer(
    name="poly-edge",
    help="Prediction market edge scanner with multi-model oracle consensus",
    no_args_is_help=True,
)
console = Console()

_INPUT_HELP = "JSON file with a list of markets (defaults to the simulated feed)"
_SEED_HELP = "Seed for the simulated feed's price history"


def _load_or_exit(input_path: Optional[Path], seed: Optional[int]) -> list:
    """Load the market snapshot, exiting with code 1 on an unreadable input file."""
    from poly_edge.pipeline import load_snapshot

    try:
        return load_snapshot(input_path, seed)
    except (OSError, ValueError) as exc:
        console.print(f"[red]Could not load markets: {escape(str(exc))}[/red]")
        raise typer.Exit(code=1) from exc


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Configure logging for every command."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@app.command()
def scan(
    input_path: Optional[Path] = typer.Option(None, "--input", "-i", help=_INPUT_HELP),
    seed: Optional[int] = typer.Option(None, "--seed", help=_SEED_HELP),
    output: str = typer.Option(
        "table", "--output", "-o",
        help="Output format: table, json, csv",
    ),
    min_score: Optional[float] = typer.Option(
        None, "--min-score",
        help="Override minimum edge score (0-10)",
    ),
    top: Optional[int] = typer.Option(None, "--top", help="Maximum number of edges to show"),
) -> None:
    """Score a market snapshot and list the strongest edges."""
    from poly_edge.pipeline import find_edges
    from poly_edge.signals.formatters import format_csv, format_json, format_table

    markets = _load_or_exit(input_path, seed)
    edges = find_edges(markets, min_score=min_score, limit=top)

    if output == "json":
        console.print_json(format_json(edges))
    elif output == "csv":
        console.print(format_csv(edges), end="", markup=False, highlight=False, soft_wrap=True)
    else:
        format_table(edges, console)


@app.command()
def oracle(
    market_id: str = typer.Argument(help="Market ID to consult the oracle on"),
    input_path: Optional[Path] = typer.Option(None, "--input", "-i", help=_INPUT_HELP),
    seed: Optional[int] = typer.Option(None, "--seed", help=_SEED_HELP),
    output: str = typer.Option("table", "--output", "-o", help="Output format: table, json"),
) -> None:
    """Ask every configured judgment provider about a market and print the consensus."""
    from poly_edge.errors import ConfigurationError
    from poly_edge.pipeline import consult_market
    from poly_edge.signals.formatters import format_verdict, format_verdict_json

    markets = _load_or_exit(input_path, seed)
    market = next((m for m in markets if m.id == market_id), None)
    if market is None:
        console.print(f"[red]Market '{escape(market_id)}' not found[/red]")
        raise typer.Exit(code=1)

    try:
        analysis, verdict = asyncio.run(consult_market(market))
    except ConfigurationError as exc:
        console.print(f"[red]Oracle not configured: {escape(str(exc))}[/red]")
        raise typer.Exit(code=1) from exc

    if output == "json":
        console.print_json(format_verdict_json(market, analysis, verdict))
    else:
        format_verdict(market, analysis, verdict, console)


if __name__ == "__main__":
    app()
