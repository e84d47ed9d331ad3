import asyncio
import logging
import re
from decimal import Decimal
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence

import httpx

from ..config import settings
from ..logging_config import mask_secret
from ..services.recommendations.models import TokenHolding
from .base import PortfolioProvider, ProviderError, ProviderNotConfigured
from .retry import send_with_retries

logger = logging.getLogger(__name__)

PORTFOLIO_QUERY = """
  query PortfolioV2($addresses: [Address!]!, $networks: [Network!]) {
    portfolioV2(addresses: $addresses, networks: $networks) {
      tokenBalances {
        byToken {
          edges {
            node {
              balance
              balanceRaw
              balanceUSD
              symbol
              name
              price
              imgUrlV2
              network {
                name
                chainId
              }
            }
          }
        }
      }
    }
  }
"""

NETWORKS_QUERY = """
  query GetNetworkEnumValues {
    __type(name: "Network") {
      enumValues {
        name
      }
    }
  }
"""

INVALID_NETWORK_MARKER = 'does not exist in "Network" enum'
_SUGGESTION_RE = re.compile(r'Did you mean the enum value "([^"]+)"')
_INVALID_VALUE_RE = re.compile(r'got invalid value "([^"]+)"')


class ZapperError(ProviderError):
    """The Zapper GraphQL API answered with errors."""

    def __init__(
        self,
        message: str,
        details: Optional[str] = None,
        errors: Optional[List[Dict[str, Any]]] = None,
        suggested_networks: Optional[List[str]] = None,
        status_code: int = 400,
    ):
        super().__init__(message, status_code=status_code, details=details)
        self.errors = errors or []
        self.suggested_networks = suggested_networks or []


def _unique(values: Sequence[str]) -> List[str]:
    seen: List[str] = []
    for value in values:
        if value and value not in seen:
            seen.append(value)
    return seen


def parse_portfolio_edges(payload: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Pull token nodes out of a portfolioV2 response."""
    data = payload.get("data") or {}
    portfolio = data.get("portfolioV2") or {}
    balances = (portfolio.get("tokenBalances") or {}).get("byToken") or {}
    return [edge.get("node") or {} for edge in balances.get("edges") or []]


class ZapperProvider(PortfolioProvider):
    """Zapper GraphQL provider for multi-network wallet balances"""

    name = "zapper"
    timeout_s = 30

    def __init__(
        self,
        api_key: Optional[str] = None,
        url: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        max_retries: Optional[int] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.api_key = settings.zapper_api_key if api_key is None else api_key
        self.url = url or settings.zapper_graphql_url
        self.max_retries = settings.provider_max_retries if max_retries is None else max_retries
        self._client = client
        self._sleep = sleep

    def _build_headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "x-zapper-api-key": self.api_key,
        }

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout_s)
        return self._client

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    async def ready(self) -> bool:
        return bool(self.api_key)

    async def health_check(self) -> Dict[str, Any]:
        if not await self.ready():
            return {
                "status": "unavailable",
                "reason": "API key not configured",
            }

        try:
            client = await self._get_client()
            response = await client.post(
                self.url,
                json={"query": "{ __typename }"},
                headers=self._build_headers(),
                timeout=self.timeout_s,
            )
            response.raise_for_status()
            return {"status": "healthy", "latency_ms": int(response.elapsed.total_seconds() * 1000)}
        except Exception as e:
            return {"status": "error", "reason": str(e)}

    async def _post(self, query: str, variables: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        client = await self._get_client()
        payload = {"query": query, "variables": variables or {}}

        response = await send_with_retries(
            lambda: client.post(
                self.url,
                json=payload,
                headers=self._build_headers(),
                timeout=self.timeout_s,
            ),
            provider="Zapper",
            max_retries=self.max_retries,
            max_delay=settings.provider_retry_max_delay_seconds,
            sleep=self._sleep,
        )
        try:
            data = response.json()
        except ValueError as exc:
            raise ProviderError("Zapper returned invalid JSON", status_code=502) from exc
        if not isinstance(data, dict):
            raise ProviderError("Zapper returned invalid JSON", status_code=502)
        return data

    async def execute(self, query: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Run a GraphQL query, retrying once without networks Zapper rejects."""
        if not await self.ready():
            raise ProviderNotConfigured(
                "Server configuration error: Missing API key",
                status_code=500,
            )

        variables = dict(variables or {})
        logger.debug("Making request to Zapper with API key: %s", mask_secret(self.api_key))

        data = await self._post(query, variables)
        errors = data.get("errors")
        if not errors:
            return data

        logger.error("GraphQL errors: %s", errors)

        invalid_errors = [
            e for e in errors if INVALID_NETWORK_MARKER in str(e.get("message", ""))
        ]
        if not invalid_errors:
            raise ZapperError(
                "GraphQL Error",
                details=str(errors[0].get("message", "")),
                errors=errors,
            )

        suggested = _unique([
            m.group(1)
            for m in (_SUGGESTION_RE.search(str(e.get("message", ""))) for e in invalid_errors)
            if m
        ])
        logger.info("Suggested networks: %s", suggested)

        networks = list(variables.get("networks") or [])
        if not networks or len(invalid_errors) >= len(networks):
            raise ZapperError(
                "Invalid networks specified",
                details="Some networks are not supported by Zapper API",
                errors=errors,
                suggested_networks=suggested,
            )

        invalid = {
            m.group(1)
            for m in (_INVALID_VALUE_RE.search(str(e.get("message", ""))) for e in invalid_errors)
            if m
        }
        valid_networks = _unique([n for n in networks if n not in invalid] + suggested)
        logger.info("Retrying with valid networks: %s", valid_networks)

        retry_data = await self._post(query, {**variables, "networks": valid_networks})
        retry_errors = retry_data.get("errors")
        if retry_errors:
            logger.error("Retry GraphQL errors: %s", retry_errors)
            raise ZapperError(
                "GraphQL Error",
                details=str(retry_errors[0].get("message", "")),
                errors=retry_errors,
            )
        return retry_data

    async def get_token_balances(
        self,
        address: str,
        networks: Optional[Sequence[str]] = None,
    ) -> List[TokenHolding]:
        """Get token balances for an address across the given networks"""
        network_list = list(networks) if networks else list(settings.default_networks)
        logger.info(
            "Making request to Zapper with %d networks for address: %s",
            len(network_list),
            address,
        )

        payload = await self.execute(
            PORTFOLIO_QUERY,
            {"addresses": [address], "networks": network_list},
        )
        holdings = [TokenHolding.from_dict(node) for node in parse_portfolio_edges(payload)]

        if holdings:
            total = sum((h.balance_usd for h in holdings), Decimal("0"))
            networks_found = sorted({h.network_name for h in holdings if h.network_name})
            logger.info(
                "Found %d tokens, total portfolio value: $%.2f, networks found: %s",
                len(holdings),
                total,
                ", ".join(networks_found),
            )
        else:
            logger.info("No tokens found for this wallet")

        return holdings

    async def get_supported_networks(self) -> List[str]:
        """Read the Network enum through GraphQL introspection"""
        payload = await self.execute(NETWORKS_QUERY)
        type_info = (payload.get("data") or {}).get("__type") or {}
        values = type_info.get("enumValues") or []
        network_ids = [v.get("name") for v in values if v.get("name")]
        logger.info("Found %d network enum values", len(network_ids))
        return network_ids
