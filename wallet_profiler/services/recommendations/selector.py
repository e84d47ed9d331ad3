"""
Recommendation Selector

Ranks scored candidates and picks a diverse shortlist: one token per
primary category first, then the best remaining scores. When nothing
overlaps the profile at all, falls back to the catalog's own order.
"""

from __future__ import annotations

from typing import AbstractSet, List, Sequence, Set

from .keywords import STABLECOIN_FALLBACK_EXCLUSIONS
from .models import RecommendationList, ScoredCandidate, SelectionStrategy

DEFAULT_RECOMMENDATION_COUNT = 5


def select_recommendations(
    scored: Sequence[ScoredCandidate],
    n: int = DEFAULT_RECOMMENDATION_COUNT,
    held_symbols: AbstractSet[str] = frozenset(),
) -> RecommendationList:
    """
    Select up to ``n`` recommendations from scored catalog entries.

    Args:
        scored: Every catalog entry with its score, in catalog order
        n: Maximum number of recommendations
        held_symbols: Lowercase symbols already in the portfolio

    Returns:
        RecommendationList, diversified when any candidate scored > 0,
        otherwise the top-tokens fallback
    """
    if n <= 0:
        return RecommendationList()

    # sorted() is stable, so catalog order breaks score ties
    ranked = sorted((c for c in scored if c.score > 0), key=lambda c: c.score, reverse=True)

    if not ranked:
        return _top_tokens_fallback(scored, n, held_symbols)

    chosen: List[ScoredCandidate] = []
    chosen_ids: Set[str] = set()
    seen_categories: Set[str] = set()

    for candidate in ranked:
        if len(chosen) >= n:
            break
        category = candidate.token.primary_category
        if category in seen_categories or candidate.id in chosen_ids:
            continue
        seen_categories.add(category)
        chosen.append(candidate)
        chosen_ids.add(candidate.id)

    for candidate in ranked:
        if len(chosen) >= n:
            break
        if candidate.id in chosen_ids:
            continue
        chosen.append(candidate)
        chosen_ids.add(candidate.id)

    return RecommendationList(items=chosen, strategy=SelectionStrategy.DIVERSIFIED)


def _top_tokens_fallback(
    scored: Sequence[ScoredCandidate],
    n: int,
    held_symbols: AbstractSet[str],
) -> RecommendationList:
    chosen: List[ScoredCandidate] = []
    chosen_ids: Set[str] = set()

    for candidate in scored:
        if len(chosen) >= n:
            break
        symbol = candidate.symbol
        if symbol in held_symbols or symbol in STABLECOIN_FALLBACK_EXCLUSIONS:
            continue
        if candidate.score < 0 or candidate.id in chosen_ids:
            continue
        chosen.append(ScoredCandidate(
            token=candidate.token,
            score=max(candidate.score, 0),
            matching_tags=candidate.matching_tags,
        ))
        chosen_ids.add(candidate.id)

    return RecommendationList(items=chosen, strategy=SelectionStrategy.TOP_TOKENS)


__all__ = ["select_recommendations", "DEFAULT_RECOMMENDATION_COUNT"]
