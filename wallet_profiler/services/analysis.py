"""
Wallet Analysis Service

Fetches a wallet's holdings and the token catalog concurrently, then
groups the holdings by network and ranks recommendations.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from ..cache import TTLCache
from ..config import settings
from ..providers.base import PortfolioProvider
from ..providers.zapper import ZapperProvider
from .address import AddressKind, detect_address_kind, normalize_address
from .recommendations import (
    PortfolioSummary,
    RecommendationEngine,
    RecommendationList,
    TokenHolding,
    aggregate_portfolio,
)
from .token_catalog import TokenCatalogService, token_catalog_service

logger = logging.getLogger(__name__)

NO_TOKENS_WARNING = "No tokens found for this wallet"
SOLANA_WARNING = (
    "No tokens found for this Solana wallet. Note that the Zapper API may have "
    "limited support for Solana wallets."
)
UNKNOWN_ADDRESS_WARNING = "Address format not recognised as EVM or Solana"


@dataclass
class WalletAnalysis:
    address: str
    address_kind: AddressKind
    portfolio: PortfolioSummary
    recommendations: RecommendationList
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "address": self.address,
            "addressKind": self.address_kind.value,
            "detectedNetwork": self.address_kind.label,
            "portfolio": self.portfolio.to_dict(),
            **self.recommendations.to_dict(),
            "warnings": list(self.warnings),
        }


def _portfolio_cache_key(address: str, networks: Sequence[str]) -> str:
    return f"portfolio:{address.lower()}:{','.join(sorted(networks))}"


class WalletAnalysisService:
    def __init__(
        self,
        portfolio_provider: Optional[PortfolioProvider] = None,
        catalog_service: Optional[TokenCatalogService] = None,
        engine: Optional[RecommendationEngine] = None,
        cache: Optional[TTLCache] = None,
    ):
        self._portfolio_provider = portfolio_provider or ZapperProvider()
        self._catalog_service = catalog_service or token_catalog_service
        self._engine = engine or RecommendationEngine()
        self._cache = cache or TTLCache(
            default_ttl=settings.portfolio_cache_ttl_seconds,
            max_size=settings.max_cache_size,
        )

    async def _get_holdings(self, address: str, networks: List[str]) -> List[TokenHolding]:
        key = _portfolio_cache_key(address, networks)
        cached = await self._cache.get(key)
        if cached is not None:
            logger.debug("Portfolio cache hit for %s", address)
            return cached

        holdings = await self._portfolio_provider.get_token_balances(address, networks)
        await self._cache.set(key, holdings)
        return holdings

    async def analyze(
        self,
        address: str,
        networks: Optional[Sequence[str]] = None,
        n: Optional[int] = None,
    ) -> WalletAnalysis:
        address = normalize_address(address)
        if not address:
            raise ValueError("Wallet address is required")

        kind = detect_address_kind(address)
        network_list = list(networks) if networks else list(settings.default_networks)
        count = n if n is not None else settings.recommendation_count
        logger.info("Analyzing %s wallet %s", kind.label, address)

        holdings, catalog = await asyncio.gather(
            self._get_holdings(address, network_list),
            self._catalog_service.get_catalog(),
        )

        summary = aggregate_portfolio(holdings)
        recommendations = self._engine.recommend_for_summary(
            summary, catalog, count, holdings=holdings
        )

        warnings: List[str] = []
        if kind is AddressKind.UNKNOWN:
            warnings.append(UNKNOWN_ADDRESS_WARNING)
        if summary.is_empty:
            warnings.append(SOLANA_WARNING if kind is AddressKind.SOLANA else NO_TOKENS_WARNING)

        return WalletAnalysis(
            address=address,
            address_kind=kind,
            portfolio=summary,
            recommendations=recommendations,
            warnings=warnings,
        )


_analysis_service: Optional[WalletAnalysisService] = None


def get_analysis_service() -> WalletAnalysisService:
    global _analysis_service
    if _analysis_service is None:
        _analysis_service = WalletAnalysisService()
    return _analysis_service


async def analyze_wallet(
    address: str,
    networks: Optional[Sequence[str]] = None,
    n: Optional[int] = None,
) -> WalletAnalysis:
    """Holdings grouped by network plus recommendations for one wallet."""
    return await get_analysis_service().analyze(address, networks, n)
