import os

from pathlib import Path
from typing import Any, List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


BASE_DIR = Path(__file__).resolve().parents[1]

DEFAULT_NETWORKS = [
    "ETHEREUM_MAINNET",
    "POLYGON_MAINNET",
    "OPTIMISM_MAINNET",
    "ARBITRUM_MAINNET",
    "BINANCE_SMART_CHAIN_MAINNET",
    "AVALANCHE_MAINNET",
    "FANTOM_OPERA_MAINNET",
    "SOLANA_MAINNET",
    "BASE_MAINNET",
    "BLAST_MAINNET",
    "ZKSYNC_MAINNET",
    "LINEA_MAINNET",
]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    def model_post_init(self, __context: Any) -> None:
        """Fall back to the Upstash connection string when REDIS_URL is unset."""

        super().model_post_init(__context)

        if not self.redis_url:
            fallback = os.getenv("UPSTASH_REDIS_URL")
            if fallback:
                object.__setattr__(self, "redis_url", fallback)

    # Server Settings
    host: str = Field(default="127.0.0.1", description="Server host")
    port: int = Field(default=8000, description="Server port")
    log_level: str = Field(default="INFO", description="Logging level")

    # Portfolio provider (Zapper GraphQL)
    zapper_api_key: str = Field(default="", description="Zapper API key")
    zapper_graphql_url: str = Field(
        default="https://public.zapper.xyz/graphql",
        description="Zapper GraphQL endpoint",
    )

    # Catalog provider (CoinGecko)
    coingecko_api_key: str = Field(default="", description="CoinGecko API key")
    coingecko_base_url: str = Field(
        default="https://api.coingecko.com/api/v3",
        description="CoinGecko REST base URL",
    )
    coingecko_markets_per_page: int = Field(
        default=100,
        ge=1,
        le=250,
        description="Number of market-cap ranked coins loaded into the catalog",
    )
    enable_coingecko: bool = Field(default=True, description="Enable CoinGecko provider")

    # Cache Settings
    catalog_cache_ttl_seconds: int = Field(default=1800, description="Token catalog TTL (30 minutes)")
    networks_cache_ttl_seconds: int = Field(default=86400, description="Network list TTL (24 hours)")
    portfolio_cache_ttl_seconds: int = Field(default=300, description="Wallet portfolio TTL")
    cache_ttl_seconds: int = Field(default=300, description="Default cache TTL in seconds")
    max_cache_size: int = Field(default=1000, description="Maximum cache size")

    # Rate Limiting
    enable_rate_limit: bool = Field(default=True, description="Enable API rate limiting")
    rate_limit_requests: int = Field(default=10, ge=1, description="Requests allowed per window")
    rate_limit_window_seconds: int = Field(default=60, ge=1, description="Sliding window length")
    redis_url: str = Field(
        default="",
        description="Redis connection string for shared rate limit windows",
    )

    # Outbound requests
    request_timeout_seconds: int = Field(default=30, description="Request timeout")
    provider_max_retries: int = Field(
        default=3,
        ge=0,
        description="Retries for transient provider failures (429, 5xx, transport)",
    )
    provider_retry_max_delay_seconds: float = Field(
        default=30.0,
        description="Upper bound for exponential retry backoff",
    )

    # Recommendations
    recommendation_count: int = Field(default=5, ge=1, le=50, description="Recommendations per wallet")
    default_networks: List[str] = Field(
        default_factory=lambda: list(DEFAULT_NETWORKS),
        description="Networks queried when the caller does not name any",
    )

    @property
    def has_zapper_key(self) -> bool:
        return bool(self.zapper_api_key)

    @property
    def has_coingecko_key(self) -> bool:
        return bool(self.coingecko_api_key)

    @property
    def has_redis(self) -> bool:
        return bool(self.redis_url)


# Global settings instance
settings = Settings()
