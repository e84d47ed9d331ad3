"""
Recommendation Engine

Pure pipeline from portfolio holdings and a token catalog to a ranked
recommendation list:

    aggregate_portfolio -> TagExtractor -> TokenScorer -> select_recommendations

No I/O, caching or retries happen here; callers pass already-fetched data.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Optional

from .aggregator import aggregate_portfolio
from .models import CandidateToken, PortfolioSummary, RecommendationList, TokenHolding
from .scorer import ScoringWeights, TokenScorer
from .selector import DEFAULT_RECOMMENDATION_COUNT, select_recommendations
from .tags import TagExtractor

logger = logging.getLogger(__name__)


def _as_holdings(portfolio: Iterable[Any]) -> List[TokenHolding]:
    return [
        item if isinstance(item, TokenHolding) else TokenHolding.from_dict(item)
        for item in portfolio
    ]


def _as_candidates(catalog: Iterable[Any]) -> List[CandidateToken]:
    return [
        item if isinstance(item, CandidateToken) else CandidateToken.from_dict(item)
        for item in catalog
    ]


class RecommendationEngine:
    """Stateless recommender; safe to share across concurrent requests."""

    def __init__(
        self,
        weights: Optional[ScoringWeights] = None,
        extractor: Optional[TagExtractor] = None,
    ):
        self._scorer = TokenScorer(weights)
        self._extractor = extractor or TagExtractor()

    def recommend(
        self,
        portfolio: Iterable[Any],
        catalog: Iterable[Any],
        n: int = DEFAULT_RECOMMENDATION_COUNT,
    ) -> RecommendationList:
        if portfolio is None or catalog is None:
            raise TypeError("portfolio and catalog must be sequences, not None")

        holdings = _as_holdings(portfolio)
        candidates = _as_candidates(catalog)

        summary = aggregate_portfolio(holdings)
        return self.recommend_for_summary(summary, candidates, n, holdings=holdings)

    def recommend_for_summary(
        self,
        summary: PortfolioSummary,
        catalog: Iterable[CandidateToken],
        n: int = DEFAULT_RECOMMENDATION_COUNT,
        *,
        holdings: Optional[List[TokenHolding]] = None,
    ) -> RecommendationList:
        """Recommend from an already aggregated portfolio."""
        # Every symbol in the input counts as held, including holdings the
        # aggregator dropped for a missing network.
        source = holdings if holdings is not None else summary.holdings
        held_symbols = frozenset(h.symbol for h in source if h.symbol)

        profile = self._extractor.extract(summary.holdings)
        scored = self._scorer.score_all(profile, held_symbols, catalog)
        result = select_recommendations(scored, n=n, held_symbols=held_symbols)

        logger.debug(
            "recommendations computed",
            extra={
                "holdings": len(source),
                "networks": summary.network_count,
                "tags": len(profile),
                "candidates": len(scored),
                "selected": len(result),
                "strategy": result.strategy.value,
            },
        )
        return result


_default_engine = RecommendationEngine()


def recommend(
    portfolio: Iterable[Any],
    catalog: Iterable[Any],
    n: int = DEFAULT_RECOMMENDATION_COUNT,
) -> RecommendationList:
    """Rank catalog tokens the portfolio does not hold by category affinity."""
    return _default_engine.recommend(portfolio, catalog, n)


__all__ = ["RecommendationEngine", "recommend"]
