import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional

import httpx

from ..config import settings
from .base import CatalogProvider, ProviderError
from .retry import send_with_retries

logger = logging.getLogger(__name__)


class CoingeckoProvider(CatalogProvider):
    """CoinGecko API provider for market-ranked token listings"""

    name = "coingecko"
    timeout_s = 15

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        max_retries: Optional[int] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.api_key = settings.coingecko_api_key if api_key is None else api_key
        self.base_url = (base_url or settings.coingecko_base_url).rstrip("/")
        self.max_retries = settings.provider_max_retries if max_retries is None else max_retries
        self._client = client
        self._sleep = sleep

    def _build_headers(self) -> Dict[str, str]:
        headers: Dict[str, str] = {"Accept": "application/json"}
        if self.api_key:
            headers["x-cg-pro-api-key"] = self.api_key
        return headers

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout_s)
        return self._client

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    async def ready(self) -> bool:
        return settings.enable_coingecko  # API key is optional for basic tier

    async def health_check(self) -> Dict[str, Any]:
        if not await self.ready():
            return {
                "status": "unavailable",
                "reason": "Provider disabled"
            }

        try:
            client = await self._get_client()
            response = await client.get(
                f"{self.base_url}/ping",
                headers=self._build_headers(),
                timeout=self.timeout_s
            )
            response.raise_for_status()
            return {"status": "healthy", "latency_ms": int(response.elapsed.total_seconds() * 1000)}
        except Exception as e:
            return {"status": "error", "reason": str(e)}

    async def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        client = await self._get_client()
        response = await send_with_retries(
            lambda: client.get(
                f"{self.base_url}{path}",
                headers=self._build_headers(),
                params=params,
                timeout=self.timeout_s,
            ),
            provider="CoinGecko",
            max_retries=self.max_retries,
            max_delay=settings.provider_retry_max_delay_seconds,
            sleep=self._sleep,
        )
        try:
            return response.json()
        except ValueError as exc:
            raise ProviderError("CoinGecko returned invalid JSON", status_code=502) from exc

    async def get_markets(self, per_page: int = 100) -> List[Dict[str, Any]]:
        """Get coins ordered by market cap (first page only)"""
        params = {
            "vs_currency": "usd",
            "order": "market_cap_desc",
            "per_page": per_page,
            "page": 1,
        }
        data = await self._get("/coins/markets", params)
        if not isinstance(data, list):
            logger.warning("Unexpected CoinGecko markets payload: %s", type(data).__name__)
            return []
        return data
