import pytest
from unittest.mock import AsyncMock, MagicMock

from wallet_profiler.cache import TTLCache
from wallet_profiler.config import DEFAULT_NETWORKS
from wallet_profiler.providers.base import ProviderError, ProviderNotConfigured
from wallet_profiler.services.networks import NetworkService


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def provider():
    p = MagicMock()
    p.get_supported_networks = AsyncMock(return_value=["ETHEREUM_MAINNET", "MOONBEAM_MAINNET"])
    return p


@pytest.fixture
def service(provider, clock):
    return NetworkService(provider=provider, cache=TTLCache(default_ttl=86400, clock=clock), ttl_seconds=86400)


@pytest.mark.asyncio
async def test_merges_provider_networks_with_defaults(service):
    result = await service.get_networks()

    assert result.networks[:2] == ["ETHEREUM_MAINNET", "MOONBEAM_MAINNET"]
    assert set(DEFAULT_NETWORKS) <= set(result.networks)
    assert result.networks.count("ETHEREUM_MAINNET") == 1
    assert result.from_cache is False
    assert result.warning is None


@pytest.mark.asyncio
async def test_second_call_is_cached(service, provider):
    await service.get_networks()
    result = await service.get_networks()

    assert result.from_cache is True
    provider.get_supported_networks.assert_awaited_once()


@pytest.mark.asyncio
async def test_stale_cache_on_error(service, provider, clock):
    fresh = await service.get_networks()

    clock.now += 86401
    provider.get_supported_networks.side_effect = ProviderError("GraphQL Error")
    result = await service.get_networks()

    assert result.networks == fresh.networks
    assert result.from_cache is True
    assert result.warning == "Using cached networks due to API error"


@pytest.mark.asyncio
async def test_defaults_when_nothing_cached(service, provider):
    provider.get_supported_networks.side_effect = ProviderNotConfigured("Missing API key")

    result = await service.get_networks()

    assert result.networks == DEFAULT_NETWORKS
    assert result.warning == "Using default networks due to API error"


@pytest.mark.asyncio
async def test_to_dict_shape(service):
    data = (await service.get_networks()).to_dict()

    assert data["count"] == len(data["networkIds"])
    assert data["supportedNetworks"][0] == {"name": "ETHEREUM_MAINNET"}
    assert "warning" not in data
