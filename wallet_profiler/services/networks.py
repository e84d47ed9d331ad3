"""Supported network list, read from the portfolio provider's Network enum."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..cache import TTLCache
from ..config import settings
from ..providers.base import PortfolioProvider, ProviderError
from ..providers.zapper import ZapperProvider

logger = logging.getLogger(__name__)

NETWORKS_CACHE_KEY = "networks:zapper:enum"


@dataclass
class NetworkList:
    networks: List[str] = field(default_factory=list)
    from_cache: bool = False
    warning: Optional[str] = None

    @property
    def count(self) -> int:
        return len(self.networks)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "supportedNetworks": [{"name": name} for name in self.networks],
            "networkIds": list(self.networks),
            "count": self.count,
            "fromCache": self.from_cache,
        }
        if self.warning:
            data["warning"] = self.warning
        return data


def _merge(primary: List[str], extra: List[str]) -> List[str]:
    return list(dict.fromkeys([*primary, *extra]))


class NetworkService:
    """Caches the provider's network list and falls back to defaults."""

    def __init__(
        self,
        provider: Optional[PortfolioProvider] = None,
        cache: Optional[TTLCache] = None,
        ttl_seconds: Optional[int] = None,
    ):
        self._provider = provider or ZapperProvider()
        self._ttl = ttl_seconds or settings.networks_cache_ttl_seconds
        self._cache = cache or TTLCache(default_ttl=self._ttl, max_size=4)

    async def get_networks(self) -> NetworkList:
        cached = await self._cache.get(NETWORKS_CACHE_KEY)
        if cached is not None:
            logger.debug("Using cached networks list: %d", len(cached))
            return NetworkList(networks=list(cached), from_cache=True)

        logger.info("Fetching networks from Zapper API")
        try:
            network_ids = await self._provider.get_supported_networks()
        except ProviderError as exc:
            logger.error("Error fetching networks: %s", exc)
            return await self._fallback()

        merged = _merge(network_ids, list(settings.default_networks))
        await self._cache.set(NETWORKS_CACHE_KEY, merged, ttl=self._ttl)
        return NetworkList(networks=merged)

    async def _fallback(self) -> NetworkList:
        stale = await self._cache.get(NETWORKS_CACHE_KEY, allow_stale=True)
        if stale is not None:
            logger.info("Using cached networks as fallback due to error")
            return NetworkList(
                networks=list(stale),
                from_cache=True,
                warning="Using cached networks due to API error",
            )

        logger.info("Using default networks due to error")
        return NetworkList(
            networks=list(settings.default_networks),
            warning="Using default networks due to API error",
        )


network_service = NetworkService()


async def get_networks() -> NetworkList:
    return await network_service.get_networks()
