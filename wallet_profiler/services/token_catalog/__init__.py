"""
Token Catalog Service

Provides the candidate token catalog with category tags for
recommendation scoring.
"""

from .service import TokenCatalogService, token_catalog_service, get_catalog
from .classifier import (
    CATEGORY_MAPPING,
    TOP_TOKENS,
    classify_categories,
    enrich_market_coin,
    fallback_catalog,
)

__all__ = [
    "TokenCatalogService",
    "token_catalog_service",
    "get_catalog",
    "CATEGORY_MAPPING",
    "TOP_TOKENS",
    "classify_categories",
    "enrich_market_coin",
    "fallback_catalog",
]
