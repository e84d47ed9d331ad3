from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence

from ..services.recommendations.models import TokenHolding


class ProviderError(Exception):
    """An upstream provider call failed."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[str] = None,
    ):
        self.status_code = status_code
        self.details = details or message
        super().__init__(message)


class ProviderNotConfigured(ProviderError):
    """A provider is missing its API key or was disabled."""


class Provider(ABC):
    """Base provider interface"""

    name: str
    timeout_s: int = 10

    @abstractmethod
    async def ready(self) -> bool:
        """Check if provider is ready to serve requests"""
        pass

    @abstractmethod
    async def health_check(self) -> Dict[str, Any]:
        """Return provider health status"""
        pass


class PortfolioProvider(Provider):
    """Provider for multi-network wallet balances"""

    @abstractmethod
    async def get_token_balances(
        self,
        address: str,
        networks: Optional[Sequence[str]] = None,
    ) -> List[TokenHolding]:
        """Get all token balances for an address across networks"""
        pass

    @abstractmethod
    async def get_supported_networks(self) -> List[str]:
        """List network identifiers the provider understands"""
        pass


class CatalogProvider(Provider):
    """Provider for market-ranked token listings"""

    @abstractmethod
    async def get_markets(self, per_page: int = 100) -> List[Dict[str, Any]]:
        """Get market-cap ranked coins"""
        pass
