import pytest
from decimal import Decimal
from unittest.mock import AsyncMock

from fastapi.testclient import TestClient

from wallet_profiler.api import analyze as analyze_api
from wallet_profiler.api import debug as debug_api
from wallet_profiler.api import networks as networks_api
from wallet_profiler.api import tokens as tokens_api
from wallet_profiler.api import zapper as zapper_api
from wallet_profiler.main import app
from wallet_profiler.middleware.rate_limit import get_rate_limiter
from wallet_profiler.providers.base import ProviderError, ProviderNotConfigured
from wallet_profiler.providers.zapper import ZapperError
from wallet_profiler.services.address import AddressKind
from wallet_profiler.services.analysis import WalletAnalysis
from wallet_profiler.services.networks import NetworkList
from wallet_profiler.services.recommendations import (
    CandidateToken,
    TokenHolding,
    aggregate_portfolio,
    recommend,
)

EVM_ADDRESS = "0x1234567890abcdef1234567890ABCDEF12345678"

CATALOG = [
    CandidateToken(id="chainlink", symbol="link", name="Chainlink", categories=("oracle", "defi")),
    CandidateToken(id="dogecoin", symbol="doge", name="Dogecoin", categories=("meme-token",)),
]


@pytest.fixture(autouse=True)
def reset_rate_limiter():
    backend = get_rate_limiter().backend
    if hasattr(backend, "reset"):
        backend.reset()
    yield


@pytest.fixture
def client():
    return TestClient(app)


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["health"] == "/healthz"


def test_zapper_proxy_requires_query(client):
    response = client.post("/api/zapper", json={"variables": {}})

    assert response.status_code == 400
    assert response.json() == {"error": "Missing GraphQL query"}


def test_zapper_proxy_forwards(client, monkeypatch):
    execute = AsyncMock(return_value={"data": {"ok": True}})
    monkeypatch.setattr(zapper_api.get_zapper_provider(), "execute", execute)

    response = client.post("/api/zapper", json={"query": "{ ok }", "variables": {"addresses": [EVM_ADDRESS]}})

    assert response.status_code == 200
    assert response.json() == {"data": {"ok": True}}
    execute.assert_awaited_once_with("{ ok }", {"addresses": [EVM_ADDRESS]})


@pytest.mark.parametrize("error,status,key", [
    (ProviderNotConfigured("Server configuration error: Missing API key", status_code=500), 500, "error"),
    (ZapperError("Invalid networks specified", details="bad", suggested_networks=["FTM"]), 400, "suggestedNetworks"),
    (ZapperError("GraphQL Error", details="boom", errors=[{"message": "boom"}]), 400, "errors"),
    (ProviderError("Zapper API error: 502 Bad Gateway", status_code=502), 500, "details"),
])
def test_zapper_proxy_errors(client, monkeypatch, error, status, key):
    monkeypatch.setattr(zapper_api.get_zapper_provider(), "execute", AsyncMock(side_effect=error))

    response = client.post("/api/zapper", json={"query": "{ ok }"})

    assert response.status_code == status
    assert key in response.json()


def test_coingecko_catalog(client, monkeypatch):
    monkeypatch.setattr(tokens_api, "get_catalog", AsyncMock(return_value=CATALOG))

    response = client.get("/api/coingecko")

    assert response.status_code == 200
    assert response.headers["cache-control"] == "public, max-age=1800"
    assert [t["id"] for t in response.json()] == ["chainlink", "dogecoin"]


def test_networks(client, monkeypatch):
    result = NetworkList(networks=["ETHEREUM_MAINNET"], from_cache=True, warning="Using cached networks due to API error")
    monkeypatch.setattr(networks_api, "get_networks", AsyncMock(return_value=result))

    response = client.get("/api/networks")

    assert response.headers["cache-control"] == "public, max-age=86400"
    body = response.json()
    assert body["networkIds"] == ["ETHEREUM_MAINNET"]
    assert body["fromCache"] is True
    assert body["warning"] == "Using cached networks due to API error"


def test_debug_masks_keys(client, monkeypatch):
    monkeypatch.setattr(debug_api.settings, "zapper_api_key", "zap-very-secret")
    monkeypatch.setattr(debug_api.settings, "coingecko_api_key", "")

    body = client.get("/api/debug").json()

    assert body["envVars"]["ZAPPER_API_KEY"] == "Set (starts with: zap...)"
    assert body["envVars"]["COINGECKO_API_KEY"] == "Not set"
    assert "zap-very-secret" not in str(body)


def test_analyze(client, monkeypatch):
    holdings = [TokenHolding(symbol="eth", name="Ethereum", network_name="ETHEREUM_MAINNET", balance_usd=Decimal("1000"))]
    analysis = WalletAnalysis(
        address=EVM_ADDRESS,
        address_kind=AddressKind.EVM,
        portfolio=aggregate_portfolio(holdings),
        recommendations=recommend(holdings, CATALOG, 5),
    )
    analyze_wallet = AsyncMock(return_value=analysis)
    monkeypatch.setattr(analyze_api, "analyze_wallet", analyze_wallet)

    response = client.post("/api/analyze", json={"address": EVM_ADDRESS, "limit": 3})

    assert response.status_code == 200
    body = response.json()
    assert body["addressKind"] == "evm"
    assert body["recommendations"][0]["id"] == "chainlink"
    assert body["portfolio"]["totalUsd"] == "1000"
    analyze_wallet.assert_awaited_once_with(EVM_ADDRESS, None, 3)


def test_analyze_blank_address(client):
    response = client.post("/api/analyze", json={"address": "  "})
    assert response.status_code == 400


def test_analyze_provider_error(client, monkeypatch):
    monkeypatch.setattr(
        analyze_api,
        "analyze_wallet",
        AsyncMock(side_effect=ProviderNotConfigured("Server configuration error: Missing API key", status_code=500)),
    )

    response = client.post("/api/analyze", json={"address": EVM_ADDRESS})

    assert response.status_code == 500
    assert response.json()["error"] == "Server configuration error: Missing API key"


def test_analyze_invalid_upstream_json(client, monkeypatch):
    monkeypatch.setattr(
        analyze_api,
        "analyze_wallet",
        AsyncMock(side_effect=ProviderError("Zapper returned invalid JSON", status_code=502)),
    )

    response = client.post("/api/analyze", json={"address": EVM_ADDRESS})

    assert response.status_code == 500
    assert response.json() == {
        "error": "Failed to fetch data from provider",
        "details": "Zapper returned invalid JSON",
    }


def test_recommendations_with_supplied_catalog(client):
    payload = {
        "holdings": [{"symbol": "eth", "name": "Ethereum", "networkName": "ETHEREUM_MAINNET", "balanceUsd": 1000}],
        "catalog": [
            {"id": "link", "symbol": "link", "categories": ["oracle", "defi"]},
            {"id": "doge", "symbol": "doge", "categories": ["meme-token"]},
        ],
    }

    body = client.post("/api/recommendations", json=payload).json()

    assert body["strategy"] == "diversified"
    assert [r["id"] for r in body["recommendations"]] == ["link"]
    assert body["recommendations"][0]["score"] == 10


def test_recommendations_default_catalog(client, monkeypatch):
    monkeypatch.setattr(analyze_api, "get_catalog", AsyncMock(return_value=CATALOG))

    body = client.post("/api/recommendations", json={"holdings": [], "limit": 1}).json()

    assert body["strategy"] == "top_tokens"
    assert [r["id"] for r in body["recommendations"]] == ["chainlink"]


def test_healthz_without_zapper_key(client, monkeypatch):
    from wallet_profiler.api import health as health_api

    monkeypatch.setattr(health_api.settings, "zapper_api_key", "")
    monkeypatch.setattr(
        health_api.CoingeckoProvider,
        "health_check",
        AsyncMock(return_value={"status": "healthy", "latency_ms": 5}),
    )

    body = client.get("/healthz").json()

    assert body["status"] == "unhealthy"
    assert body["providers"]["zapper"]["status"] == "unavailable"
    assert body["available_providers"] == 1
