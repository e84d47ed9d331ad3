"""
Token Catalog Service

Serves the candidate token catalog used for recommendations. Data comes
from CoinGecko markets, is cached, and falls back to the last good
catalog or a built-in top-token list when CoinGecko is unavailable.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from ...cache import TTLCache
from ...config import settings
from ...providers.base import CatalogProvider, ProviderError
from ...providers.coingecko import CoingeckoProvider
from ..recommendations.models import CandidateToken
from .classifier import enrich_market_coin, fallback_catalog

logger = logging.getLogger(__name__)

CATALOG_CACHE_KEY = "catalog:coingecko:markets"


class TokenCatalogService:
    """Cached access to the enriched token catalog."""

    def __init__(
        self,
        provider: Optional[CatalogProvider] = None,
        cache: Optional[TTLCache] = None,
        ttl_seconds: Optional[int] = None,
        per_page: Optional[int] = None,
    ):
        self._provider = provider or CoingeckoProvider()
        self._ttl = ttl_seconds or settings.catalog_cache_ttl_seconds
        self._cache = cache or TTLCache(default_ttl=self._ttl, max_size=4)
        self._per_page = per_page or settings.coingecko_markets_per_page

    @property
    def provider(self) -> CatalogProvider:
        return self._provider

    async def get_catalog(self) -> List[CandidateToken]:
        """Return the catalog; never raises for upstream failures."""
        cached = await self._cache.get(CATALOG_CACHE_KEY)
        if cached is not None:
            logger.debug("Using cached token data")
            return cached

        logger.info("Fetching token data from CoinGecko")
        try:
            if not await self._provider.ready():
                raise ProviderError("CoinGecko provider disabled")
            coins = await self._provider.get_markets(per_page=self._per_page)
            if not coins:
                raise ProviderError("CoinGecko returned no coins")
        except ProviderError as exc:
            logger.warning("Error fetching token data: %s", exc)
            return await self._fallback()

        tokens = [enrich_market_coin(coin) for coin in coins if coin.get("id")]
        await self._cache.set(CATALOG_CACHE_KEY, tokens, ttl=self._ttl)
        logger.info("Retrieved %d tokens with enriched categories", len(tokens))
        return tokens

    async def _fallback(self) -> List[CandidateToken]:
        stale = await self._cache.get(CATALOG_CACHE_KEY, allow_stale=True)
        if stale is not None:
            logger.info("Using cached token data due to error")
            return stale

        logger.info("Using hardcoded top tokens fallback with expanded categories")
        return fallback_catalog()

    async def clear(self) -> None:
        await self._cache.clear()


token_catalog_service = TokenCatalogService()


async def get_catalog() -> List[CandidateToken]:
    """Module-level helper that proxies to the singleton service."""
    return await token_catalog_service.get_catalog()


__all__ = [
    "TokenCatalogService",
    "token_catalog_service",
    "get_catalog",
]
