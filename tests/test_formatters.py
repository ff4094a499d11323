"""Tests for edge and verdict formatters: Rich table, JSON, CSV."""

from __future__ import annotations

import csv
import io
import json
from dataclasses import replace

import pytest
from rich.console import Console

from poly_edge.oracle.models import ConsensusVerdict, Conviction
from poly_edge.signals.formatters import (
    format_csv,
    format_json,
    format_table,
    format_verdict,
    format_verdict_json,
)
from poly_edge.signals.models import Direction
from poly_edge.signals.scorer import score_market


@pytest.fixture
def edges(whale_market, fade_market):
    return [(whale_market, score_market(whale_market)), (fade_market, score_market(fade_market))]


@pytest.fixture
def verdict():
    return ConsensusVerdict(
        score=8.5,
        direction=Direction.YES,
        conviction=Conviction.HIGH,
        reasoning=("Whales loading", "Thin book"),
        confidence_score=100,
        target_price=0.62,
        stop_loss=0.3,
        providers=("claude", "gemini"),
    )


def _console() -> Console:
    return Console(file=io.StringIO(), width=200)


class TestFormatTable:
    def test_renders_rows(self, edges):
        console = _console()
        format_table(edges, console)
        out = console.file.getvalue()

        assert "PolyEdge Top Edges" in out
        assert "m1" in out
        assert "FUNDING ARB" in out
        assert "2 edge(s) total" in out

    def test_empty(self):
        console = _console()
        format_table([], console)
        assert "No edges found" in console.file.getvalue()


class TestFormatJson:
    def test_fields(self, edges):
        data = json.loads(format_json(edges))

        assert data[0]["market_id"] == "m1"
        assert data[0]["direction"] == "YES"
        assert data[0]["score"] == 10
        assert data[1]["tags"] == ["FUNDING ARB"]
        assert data[1]["reward_risk"] == 3.09

    def test_empty(self):
        assert json.loads(format_json([])) == []


class TestFormatCsv:
    def test_header_and_rows(self, edges):
        rows = list(csv.reader(io.StringIO(format_csv(edges))))

        assert rows[0][0] == "market_id"
        assert len(rows) == 3
        assert rows[1][6] == "LIQUIDITY SQUEEZE|WHALE CLUSTER|COPY CLUSTER"


class TestFormatVerdict:
    def test_renders_verdict(self, whale_market, verdict):
        console = _console()
        format_verdict(whale_market, score_market(whale_market), verdict, console)
        out = console.file.getvalue()

        assert "HIGH" in out
        assert "confidence 100%" in out
        assert "Target: 0.62 | Stop: 0.30" in out
        assert "claude, gemini" in out
        assert "Whales loading" in out

    def test_verdict_json(self, whale_market, verdict):
        data = json.loads(format_verdict_json(whale_market, score_market(whale_market), verdict))

        assert data["edge"]["market_id"] == "m1"
        assert data["verdict"]["conviction"] == "HIGH"
        assert data["verdict"]["confidenceScore"] == 100
        assert data["verdict"]["targetPrice"] == 0.62
        assert data["verdict"]["fallback"] is False

    def test_bracketed_provider_text_is_printed_literally(self, whale_market, verdict):
        market = replace(whale_market, question="Will [bold] BTC break $100k?")
        verdict = replace(
            verdict,
            reasoning=("price band [/] broke out", "watch the [bold] whale wall"),
        )
        console = _console()
        format_verdict(market, score_market(market), verdict, console)
        out = console.file.getvalue()

        assert "Will [bold] BTC break $100k?" in out
        assert "price band [/] broke out" in out
        assert "watch the [bold] whale wall" in out


class TestFormatTableMarkup:
    def test_bracketed_question_is_printed_literally(self, whale_market):
        market = replace(whale_market, id="m[/]1", question="Fed cut [red] in June?")
        console = _console()
        format_table([(market, score_market(market))], console)
        out = console.file.getvalue()

        assert "Fed cut [red] in June?" in out
        assert "m[/]1" in out
