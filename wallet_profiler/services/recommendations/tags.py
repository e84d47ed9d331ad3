"""
Tag Extractor

Derives the profile tag set of a portfolio from:
- Token symbols
- Cleaned name tokens
- Network identifiers (full and simplified)
- Keyword-family heuristics (meme, defi, layer-1/2, ...)

Holdings that look like spam or scam airdrops contribute only their
network tags.
"""

from __future__ import annotations

import re
from typing import Iterable, List, Optional, Sequence, Set

from .keywords import (
    KEYWORD_FAMILIES,
    NAME_STOPWORDS,
    NETWORK_SPECIAL_CASES,
    SCAM_NAME_MARKERS,
    KeywordFamily,
)
from .models import PortfolioSummary, ProfileTagSet, TokenHolding

_NAME_SPLIT_RE = re.compile(r"[^a-z0-9]+")


def is_scam_name(name: str) -> bool:
    """Check if a holding name looks like a spam/scam airdrop."""
    lowered = name.lower()
    return any(marker in lowered for marker in SCAM_NAME_MARKERS)


def name_tokens(name: str) -> List[str]:
    """Split a display name into meaningful lowercase words."""
    tokens = []
    for part in _NAME_SPLIT_RE.split(name.lower()):
        if len(part) < 3 or part.isdigit() or part in NAME_STOPWORDS:
            continue
        tokens.append(part)
    return tokens


def network_forms(network_name: str) -> List[str]:
    """Return the lowercased network name and its pre-underscore form."""
    full = network_name.strip().lower()
    if not full:
        return []
    forms = [full]
    simplified = full.split("_", 1)[0]
    if simplified and simplified != full:
        forms.append(simplified)
    return forms


class TagExtractor:
    """Builds a ProfileTagSet from portfolio holdings."""

    def __init__(self, families: Optional[Sequence[KeywordFamily]] = None):
        self._families = tuple(families) if families is not None else KEYWORD_FAMILIES

    def extract(self, holdings: Iterable[TokenHolding]) -> ProfileTagSet:
        if isinstance(holdings, PortfolioSummary):
            holdings = holdings.holdings

        tags: Set[str] = set()
        networks: Set[str] = set()

        for holding in holdings:
            if not holding.is_valid:
                continue

            for form in network_forms(holding.network_name):
                tags.add(form)
                networks.add(form)
                tags.update(NETWORK_SPECIAL_CASES.get(form, ()))

            if is_scam_name(holding.name):
                continue

            tags.update(self._holding_tags(holding))

        return ProfileTagSet(tags=frozenset(tags), networks=frozenset(networks))

    def _holding_tags(self, holding: TokenHolding) -> Set[str]:
        symbol = holding.symbol
        name_lower = holding.name.lower()
        tags: Set[str] = set()

        if len(symbol) > 1 and not symbol.isdigit():
            tags.add(symbol)

        tags.update(name_tokens(holding.name))

        for family in self._families:
            if family.match == "substring":
                hit = any(t in symbol or t in name_lower for t in family.triggers)
            else:
                hit = symbol in family.triggers
            if hit:
                tags.update(family.tags)

        return tags


def extract_profile_tags(holdings: Iterable[TokenHolding]) -> ProfileTagSet:
    """Module-level helper using the default keyword families."""
    return TagExtractor().extract(holdings)


__all__ = [
    "TagExtractor",
    "extract_profile_tags",
    "is_scam_name",
    "name_tokens",
    "network_forms",
]
