"""
Recommendation Models

Data structures shared by the portfolio aggregator, tag extractor,
token scorer and recommendation selector.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, Iterator, List, Optional, Tuple


_ZERO = Decimal("0")


def to_decimal(value: Any) -> Decimal:
    """Coerce a provider value into a non-negative Decimal (0 when unusable)."""
    if value is None or isinstance(value, bool):
        return _ZERO
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            return _ZERO
    if not result.is_finite() or result < 0:
        return _ZERO
    return result


def to_optional_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    return result if math.isfinite(result) else None


@dataclass(frozen=True)
class TokenHolding:
    """One token balance in a wallet on one network."""
    symbol: str
    name: str
    network_name: str
    balance: Decimal = _ZERO
    balance_usd: Decimal = _ZERO
    price_usd: Decimal = _ZERO
    image_url: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "symbol", str(self.symbol or "").strip().lower())
        object.__setattr__(self, "name", str(self.name or "").strip())
        object.__setattr__(self, "network_name", str(self.network_name or "").strip())
        object.__setattr__(self, "balance", to_decimal(self.balance))
        object.__setattr__(self, "balance_usd", to_decimal(self.balance_usd))
        object.__setattr__(self, "price_usd", to_decimal(self.price_usd))

    @property
    def is_valid(self) -> bool:
        return bool(self.symbol) and bool(self.network_name)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TokenHolding":
        """Build from a provider node (camelCase) or an API payload (snake_case)."""
        network = data.get("network")
        if isinstance(network, dict):
            network_name = network.get("name", "")
        else:
            network_name = data.get("networkName") or data.get("network_name") or network or ""

        return cls(
            symbol=data.get("symbol", ""),
            name=data.get("name", ""),
            network_name=network_name,
            balance=data.get("balance"),
            balance_usd=_first_present(data, "balanceUSD", "balanceUsd", "balance_usd"),
            price_usd=_first_present(data, "price", "priceUsd", "price_usd"),
            image_url=data.get("imgUrlV2") or data.get("image_url"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "symbol": self.symbol,
            "name": self.name,
            "networkName": self.network_name,
            "balance": str(self.balance),
            "balanceUsd": str(self.balance_usd),
            "priceUsd": str(self.price_usd),
            "imageUrl": self.image_url,
        }


def _coerce_categories(value: Any) -> Tuple[str, ...]:
    """Category labels as a tuple of non-blank strings.

    A bare string is one label; mappings and non-iterables yield none.
    """
    if not value:
        return ()
    if isinstance(value, str):
        value = (value,)
    elif isinstance(value, (dict, bytes)) or not isinstance(value, Iterable):
        return ()
    return tuple(c for c in value if isinstance(c, str) and c.strip())


@dataclass(frozen=True)
class CandidateToken:
    """A token in the recommendation catalog."""
    id: str
    symbol: str
    name: str
    categories: Tuple[str, ...] = ()
    market_cap_usd: Optional[Decimal] = None
    price_change_24h: Optional[float] = None
    image: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "id", str(self.id or ""))
        object.__setattr__(self, "symbol", str(self.symbol or "").strip().lower())
        object.__setattr__(self, "name", str(self.name or "").strip())
        object.__setattr__(self, "categories", _coerce_categories(self.categories))
        if self.market_cap_usd is not None:
            object.__setattr__(self, "market_cap_usd", to_decimal(self.market_cap_usd))
        object.__setattr__(self, "price_change_24h", to_optional_float(self.price_change_24h))

    @property
    def primary_category(self) -> str:
        """First-listed category, lowercased ("" when the token has none)."""
        return self.categories[0].lower() if self.categories else ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CandidateToken":
        return cls(
            id=data.get("id", ""),
            symbol=data.get("symbol", ""),
            name=data.get("name", ""),
            categories=data.get("categories"),
            market_cap_usd=_first_present(data, "market_cap", "marketCapUsd", "market_cap_usd"),
            price_change_24h=_first_present(data, "price_change_24h", "priceChange24h"),
            image=data.get("image"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "symbol": self.symbol,
            "name": self.name,
            "categories": list(self.categories),
            "market_cap": float(self.market_cap_usd) if self.market_cap_usd is not None else None,
            "price_change_24h": self.price_change_24h,
            "image": self.image,
        }


@dataclass(frozen=True)
class ProfileTagSet:
    """Normalized tags describing a portfolio, plus the networks it touches."""
    tags: FrozenSet[str] = frozenset()
    networks: FrozenSet[str] = frozenset()

    def __contains__(self, tag: str) -> bool:
        return tag in self.tags

    def __len__(self) -> int:
        return len(self.tags)


@dataclass(frozen=True)
class ScoredCandidate:
    """A catalog token with its relevance score and the tags that produced it."""
    token: CandidateToken
    score: int
    matching_tags: Tuple[str, ...] = ()

    @property
    def id(self) -> str:
        return self.token.id

    @property
    def symbol(self) -> str:
        return self.token.symbol

    def to_dict(self) -> Dict[str, Any]:
        data = self.token.to_dict()
        data["score"] = self.score
        data["matchingTags"] = list(self.matching_tags)
        return data


class SelectionStrategy(str, Enum):
    """How a recommendation list was produced."""
    DIVERSIFIED = "diversified"  # Scored, diversity-first path
    TOP_TOKENS = "top_tokens"    # No tag overlap: catalog order fallback


@dataclass
class RecommendationList:
    """Ordered recommendations, ids unique within the list."""
    items: List[ScoredCandidate] = field(default_factory=list)
    strategy: SelectionStrategy = SelectionStrategy.DIVERSIFIED

    def __iter__(self) -> Iterator[ScoredCandidate]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __getitem__(self, index: int) -> ScoredCandidate:
        return self.items[index]

    @property
    def ids(self) -> List[str]:
        return [item.id for item in self.items]

    @property
    def is_fallback(self) -> bool:
        return self.strategy is SelectionStrategy.TOP_TOKENS

    def to_dict(self) -> Dict[str, Any]:
        return {
            "strategy": self.strategy.value,
            "recommendations": [item.to_dict() for item in self.items],
        }


@dataclass
class NetworkHoldings:
    """Holdings on a single network with their combined USD value."""
    network_name: str
    holdings: List[TokenHolding] = field(default_factory=list)
    total_usd: Decimal = _ZERO

    def to_dict(self) -> Dict[str, Any]:
        return {
            "networkName": self.network_name,
            "totalUsd": str(self.total_usd),
            "tokens": [h.to_dict() for h in self.holdings],
        }


@dataclass
class PortfolioSummary:
    """Holdings grouped by network with per-network and total USD value."""
    holdings: List[TokenHolding] = field(default_factory=list)
    networks: Dict[str, NetworkHoldings] = field(default_factory=dict)
    total_usd: Decimal = _ZERO

    @property
    def network_count(self) -> int:
        return len(self.networks)

    @property
    def is_empty(self) -> bool:
        return not self.holdings

    @property
    def held_symbols(self) -> FrozenSet[str]:
        return frozenset(h.symbol for h in self.holdings if h.symbol)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalUsd": str(self.total_usd),
            "networkCount": self.network_count,
            "tokenCount": len(self.holdings),
            "networks": [group.to_dict() for group in self.networks.values()],
        }


def _first_present(data: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return None
