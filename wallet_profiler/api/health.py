import asyncio
from typing import Any, Dict

from fastapi import APIRouter

from ..config import settings
from ..providers.coingecko import CoingeckoProvider
from ..providers.zapper import ZapperProvider

router = APIRouter()


@router.get("/healthz")
async def health_check() -> Dict[str, Any]:
    """Provider status summary.

    Zapper is required for wallet analysis; CoinGecko is optional since the
    catalog falls back to a built-in token list.
    """

    zapper = ZapperProvider()
    coingecko = CoingeckoProvider()
    try:
        zapper_status, coingecko_status = await asyncio.gather(
            zapper.health_check(),
            coingecko.health_check(),
        )
    finally:
        await zapper.close()
        await coingecko.close()

    providers = {"zapper": zapper_status, "coingecko": coingecko_status}

    if zapper_status["status"] != "healthy":
        overall = "unhealthy" if zapper_status["status"] == "unavailable" else "degraded"
    elif coingecko_status["status"] == "error":
        overall = "degraded"
    else:
        overall = "healthy"

    return {
        "status": overall,
        "providers": providers,
        "available_providers": sum(1 for s in providers.values() if s["status"] == "healthy"),
        "total_providers": len(providers),
        "rate_limit_backend": "redis" if settings.has_redis else "memory",
    }
