"""
Token Scorer

Scores a catalog token against a portfolio's profile tags using a cheap
fuzzy overlap (containment or a shared 3-character stem), a network
affinity bonus and keyword-family bonuses.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import AbstractSet, Iterable, List, Optional

from .keywords import (
    DEFI_CATEGORY_KEYWORDS,
    DEFI_TAG_KEYWORDS,
    LAYER_KEYWORDS,
    MEME_KEYWORDS,
    MIN_STEM_LENGTH,
    UNICODE_DOT_LOOKALIKES,
    URL_TAG_MARKERS,
)
from .models import CandidateToken, ProfileTagSet, ScoredCandidate


HELD_SCORE = -1


@dataclass(frozen=True)
class ScoringWeights:
    """Bonus points per matching rule."""
    category_overlap: int = 10
    name_overlap: int = 8
    network_affinity: int = 7
    defi_family: int = 6
    meme_family: int = 6
    layer_family: int = 4
    trending: int = 3
    trending_threshold: float = 5.0


DEFAULT_WEIGHTS = ScoringWeights()


def overlaps(a: str, b: str, min_stem: int = MIN_STEM_LENGTH) -> bool:
    """Check for meaningful overlap between two lowercase strings.

    True when one contains the other, or when they share a contiguous
    substring of at least ``min_stem`` characters.
    """
    if not a or not b:
        return False
    if a in b or b in a:
        return True
    shorter, longer = (a, b) if len(a) <= len(b) else (b, a)
    return any(
        shorter[i:i + min_stem] in longer
        for i in range(len(shorter) - min_stem + 1)
    )


def looks_like_url_tag(tag: str) -> bool:
    if any(marker in tag for marker in URL_TAG_MARKERS):
        return True
    return any(ch in UNICODE_DOT_LOOKALIKES for ch in tag)


def _contains_any(value: str, keywords: Iterable[str]) -> bool:
    return any(k in value for k in keywords)


class TokenScorer:
    """
    Scores candidate tokens for relevance to a portfolio profile.

    Rules, per profile tag:
    - category overlap
    - name/symbol overlap
    - network affinity (tag is a held network and overlaps a category)
    - defi / meme / layer keyword families
    plus a single trending bonus once any tag rule has fired.
    """

    def __init__(self, weights: Optional[ScoringWeights] = None):
        self._weights = weights or DEFAULT_WEIGHTS

    @property
    def weights(self) -> ScoringWeights:
        return self._weights

    def score(
        self,
        profile: ProfileTagSet,
        held_symbols: AbstractSet[str],
        candidate: CandidateToken,
    ) -> ScoredCandidate:
        """Score one candidate; held tokens score -1 and must be excluded."""
        if candidate.symbol in held_symbols:
            return ScoredCandidate(token=candidate, score=HELD_SCORE)

        if not candidate.categories:
            return ScoredCandidate(token=candidate, score=0)

        w = self._weights
        categories = [c.lower() for c in candidate.categories]
        name = candidate.name.lower()
        symbol = candidate.symbol

        total = 0
        matched: List[str] = []

        for tag in sorted(profile.tags):
            if looks_like_url_tag(tag):
                continue

            points = 0
            category_hit = any(overlaps(tag, c) for c in categories)

            if category_hit:
                points += w.category_overlap
            if overlaps(tag, name) or overlaps(tag, symbol):
                points += w.name_overlap
            if category_hit and tag in profile.networks:
                points += w.network_affinity
            if _contains_any(tag, DEFI_TAG_KEYWORDS) and any(
                _contains_any(c, DEFI_CATEGORY_KEYWORDS) for c in categories
            ):
                points += w.defi_family
            if _contains_any(tag, MEME_KEYWORDS) and any(
                _contains_any(c, MEME_KEYWORDS) for c in categories
            ):
                points += w.meme_family
            if _contains_any(tag, LAYER_KEYWORDS) and any(
                _contains_any(c, LAYER_KEYWORDS) for c in categories
            ):
                points += w.layer_family

            if points:
                total += points
                matched.append(tag)

        if total > 0 and (candidate.price_change_24h or 0) > w.trending_threshold:
            total += w.trending

        return ScoredCandidate(token=candidate, score=total, matching_tags=tuple(matched))

    def score_all(
        self,
        profile: ProfileTagSet,
        held_symbols: AbstractSet[str],
        catalog: Iterable[CandidateToken],
    ) -> List[ScoredCandidate]:
        """Score every catalog entry, preserving catalog order."""
        return [self.score(profile, held_symbols, candidate) for candidate in catalog]


__all__ = [
    "ScoringWeights",
    "DEFAULT_WEIGHTS",
    "HELD_SCORE",
    "TokenScorer",
    "overlaps",
    "looks_like_url_tag",
]
