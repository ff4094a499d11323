"""Consensus oracle: fan out to judgment providers and reduce their votes.

Flow for one consult() call:
1. Build one context string from the market and its local analysis
2. Ask every provider concurrently; wait until each succeeds or fails
3. Validate each response; drop failures (logged, never raised)
4. No valid judgments -> fallback verdict from the local analysis
5. Otherwise reduce: mean score, plurality direction, merged reasoning
"""

from __future__ import annotations

import asyncio
import logging
from collections import Counter

from poly_edge.config import Settings, get_settings
from poly_edge.errors import ConfigurationError, ProviderError
from poly_edge.markets.models import Market
from poly_edge.oracle.context import build_market_context
from poly_edge.oracle.judgment import parse_judgment
from poly_edge.oracle.models import (
    ConsensusVerdict,
    Conviction,
    InvalidJudgment,
    RawJudgment,
    ValidJudgment,
)
from poly_edge.oracle.providers import JudgmentProvider, build_providers
from poly_edge.signals.models import Direction, EdgeAnalysis

logger = logging.getLogger(__name__)

FALLBACK_REASON = "Oracle unavailable — using local model consensus."

# (minimum mean score, tier), checked top-down
_CONVICTION_THRESHOLDS = (
    (9.2, Conviction.NUCLEAR),
    (8.5, Conviction.HIGH),
    (7.5, Conviction.MEDIUM),
)


def conviction_for(score: float) -> Conviction:
    """Map an averaged score to its conviction tier."""
    for threshold, conviction in _CONVICTION_THRESHOLDS:
        if score >= threshold:
            return conviction
    return Conviction.LOW


def fallback_verdict(analysis: EdgeAnalysis) -> ConsensusVerdict:
    """Verdict built from the local analysis alone. Never raises."""
    direction = Direction.YES if analysis.direction is Direction.YES else Direction.NO
    return ConsensusVerdict(
        score=round(analysis.score, 1),
        direction=direction,
        conviction=Conviction.LOW,
        reasoning=(FALLBACK_REASON, *analysis.tags),
        confidence_score=0,
        fallback=True,
    )


def _plurality(judgments: list[ValidJudgment]) -> Direction:
    """Most-voted direction.

    Ties go to the tied direction that appears first in provider order,
    i.e. the earliest-configured provider backing one of the tied sides.
    """
    votes = Counter(j.direction for j in judgments)
    first_seen: dict[Direction, int] = {}
    for i, judgment in enumerate(judgments):
        first_seen.setdefault(judgment.direction, i)
    return max(votes, key=lambda d: (votes[d], -first_seen[d]))


def _first_present(values: list[float | None]) -> float | None:
    return next((v for v in values if v is not None), None)


def reduce_judgments(judgments: list[ValidJudgment]) -> ConsensusVerdict:
    """Reduce valid judgments (in provider priority order) to one verdict."""
    if not judgments:
        raise ValueError("reduce_judgments needs at least one judgment")

    mean_score = sum(j.score for j in judgments) / len(judgments)
    direction = _plurality(judgments)
    agreeing = sum(1 for j in judgments if j.direction is direction)

    reasoning: dict[str, None] = {}
    for judgment in judgments:
        for line in judgment.reasoning:
            reasoning.setdefault(line, None)

    return ConsensusVerdict(
        score=round(mean_score, 1),
        direction=direction,
        conviction=conviction_for(mean_score),
        reasoning=tuple(reasoning),
        confidence_score=round(100 * agreeing / len(judgments)),
        target_price=_first_present([j.target_price for j in judgments]),
        stop_loss=_first_present([j.stop_loss for j in judgments]),
        providers=tuple(j.provider for j in judgments),
    )


class ConsensusOracle:
    """Ask several judgment providers about a market and reconcile them.

    Provider order is significant: it breaks direction ties and decides
    which provider's target/stop prices win.
    """

    def __init__(
        self,
        providers: list[JudgmentProvider],
        timeout: float | None = None,
    ) -> None:
        if not providers:
            raise ConfigurationError("ConsensusOracle needs at least one judgment provider")
        self._providers = list(providers)
        self._timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> ConsensusOracle:
        """Build an oracle from configured credentials.

        Raises:
            ConfigurationError: no provider credentials are set
        """
        settings = settings or get_settings()
        return cls(build_providers(settings), timeout=settings.provider_timeout)

    @property
    def providers(self) -> list[JudgmentProvider]:
        return list(self._providers)

    async def _ask(self, provider: JudgmentProvider, context: str) -> RawJudgment:
        """Run one provider call and turn any failure into InvalidJudgment."""
        try:
            if self._timeout is None:
                text = await provider.judge(context)
            else:
                text = await asyncio.wait_for(provider.judge(context), timeout=self._timeout)
        except asyncio.TimeoutError:
            return InvalidJudgment(provider.name, f"timed out after {self._timeout:g}s")
        except ProviderError as exc:
            return InvalidJudgment(provider.name, str(exc))
        return parse_judgment(provider.name, text)

    async def gather_judgments(self, market: Market, analysis: EdgeAnalysis) -> list[RawJudgment]:
        """Ask every provider concurrently; one result per provider, in order."""
        context = build_market_context(market, analysis)
        results = await asyncio.gather(
            *(self._ask(provider, context) for provider in self._providers),
            return_exceptions=True,
        )

        judgments: list[RawJudgment] = []
        for provider, result in zip(self._providers, results):
            if isinstance(result, BaseException) and not isinstance(result, Exception):
                raise result
            if isinstance(result, Exception):
                judgments.append(InvalidJudgment(provider.name, f"unexpected error: {result!r}"))
            else:
                judgments.append(result)
        return judgments

    async def consult(self, market: Market, analysis: EdgeAnalysis) -> ConsensusVerdict:
        """Reconcile all providers' judgments on a market into one verdict.

        Never raises for provider failures; falls back to the local
        analysis when no provider returns a usable judgment. An oracle
        without providers cannot be constructed.
        """
        judgments = await self.gather_judgments(market, analysis)

        valid: list[ValidJudgment] = []
        for judgment in judgments:
            if isinstance(judgment, ValidJudgment):
                valid.append(judgment)
            else:
                logger.warning(
                    "Dropping %s judgment for market %s: %s",
                    judgment.provider, market.id, judgment.error,
                )

        if not valid:
            logger.info("No valid judgments for market %s, using local analysis", market.id)
            return fallback_verdict(analysis)

        verdict = reduce_judgments(valid)
        logger.debug(
            "Consensus for %s: %s score=%.1f confidence=%d%% from %d/%d provider(s)",
            market.id, verdict.direction.value, verdict.score,
            verdict.confidence_score, len(valid), len(judgments),
        )
        return verdict
