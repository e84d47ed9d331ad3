import os
from typing import Any, Dict

from fastapi import APIRouter

from ..config import settings
from ..logging_config import mask_secret

router = APIRouter(prefix="/api")


def _describe(value: str) -> str:
    if not value:
        return "Not set"
    return f"Set (starts with: {mask_secret(value)})"


@router.get("/debug")
async def debug_config() -> Dict[str, Any]:
    """Report which API keys are configured without exposing them."""

    return {
        "envVars": {
            "ZAPPER_API_KEY": _describe(settings.zapper_api_key),
            "COINGECKO_API_KEY": _describe(settings.coingecko_api_key),
            "REDIS_URL": "Set" if settings.has_redis else "Not set",
            "ENVIRONMENT": os.getenv("ENVIRONMENT", "development"),
        },
        "rateLimit": {
            "enabled": settings.enable_rate_limit,
            "requests": settings.rate_limit_requests,
            "windowSeconds": settings.rate_limit_window_seconds,
            "backend": "redis" if settings.has_redis else "memory",
        },
    }
