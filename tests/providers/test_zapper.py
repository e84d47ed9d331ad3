import json

import httpx
import pytest

from wallet_profiler.providers.base import ProviderError, ProviderNotConfigured
from wallet_profiler.providers.zapper import (
    PORTFOLIO_QUERY,
    ZapperError,
    ZapperProvider,
    parse_portfolio_edges,
)

URL = "https://zapper.test/graphql"


def invalid_network_error(value, suggestion=None):
    message = f'Variable "$networks" got invalid value "{value}" at "networks[0]"; Value "{value}" does not exist in "Network" enum.'
    if suggestion:
        message += f' Did you mean the enum value "{suggestion}"?'
    return {"message": message}


def portfolio_payload(*nodes):
    return {"data": {"portfolioV2": {"tokenBalances": {"byToken": {"edges": [{"node": n} for n in nodes]}}}}}


class Recorder:
    """Collects request bodies and answers with queued responses."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.bodies = []
        self.headers = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.bodies.append(json.loads(request.content))
        self.headers.append(request.headers)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        if isinstance(response, httpx.Response):
            return response
        return httpx.Response(200, json=response)


def make_provider(recorder, api_key="zap-secret", max_retries=2):
    sleeps = []

    async def fake_sleep(delay):
        sleeps.append(delay)

    client = httpx.AsyncClient(transport=httpx.MockTransport(recorder))
    provider = ZapperProvider(api_key=api_key, url=URL, client=client, max_retries=max_retries, sleep=fake_sleep)
    return provider, sleeps


@pytest.mark.asyncio
async def test_missing_api_key():
    provider, _ = make_provider(Recorder(), api_key="")

    with pytest.raises(ProviderNotConfigured) as exc:
        await provider.execute(PORTFOLIO_QUERY, {})

    assert exc.value.status_code == 500
    assert str(exc.value) == "Server configuration error: Missing API key"


@pytest.mark.asyncio
async def test_execute_sends_key_header_and_body():
    recorder = Recorder({"data": {"ok": True}})
    provider, _ = make_provider(recorder)

    data = await provider.execute("{ ok }", {"a": 1})

    assert data == {"data": {"ok": True}}
    assert recorder.bodies[0] == {"query": "{ ok }", "variables": {"a": 1}}
    assert recorder.headers[0]["x-zapper-api-key"] == "zap-secret"


@pytest.mark.asyncio
async def test_invalid_network_is_dropped_and_retried():
    recorder = Recorder(
        {"errors": [invalid_network_error("FOO_MAINNET", "FANTOM_OPERA_MAINNET")]},
        portfolio_payload(),
    )
    provider, _ = make_provider(recorder)

    await provider.execute(PORTFOLIO_QUERY, {"addresses": ["0xabc"], "networks": ["ETHEREUM_MAINNET", "FOO_MAINNET"]})

    assert len(recorder.bodies) == 2
    assert recorder.bodies[1]["variables"]["networks"] == ["ETHEREUM_MAINNET", "FANTOM_OPERA_MAINNET"]
    assert recorder.bodies[1]["variables"]["addresses"] == ["0xabc"]


@pytest.mark.asyncio
async def test_all_networks_invalid():
    recorder = Recorder({"errors": [invalid_network_error("FOO", "FTM")]})
    provider, _ = make_provider(recorder)

    with pytest.raises(ZapperError) as exc:
        await provider.execute(PORTFOLIO_QUERY, {"networks": ["FOO"]})

    assert str(exc.value) == "Invalid networks specified"
    assert exc.value.suggested_networks == ["FTM"]
    assert exc.value.status_code == 400
    assert len(recorder.bodies) == 1


@pytest.mark.asyncio
async def test_other_graphql_error():
    recorder = Recorder({"errors": [{"message": "Address is not valid"}]})
    provider, _ = make_provider(recorder)

    with pytest.raises(ZapperError) as exc:
        await provider.execute(PORTFOLIO_QUERY, {"networks": ["ETHEREUM_MAINNET"]})

    assert str(exc.value) == "GraphQL Error"
    assert exc.value.details == "Address is not valid"


@pytest.mark.asyncio
async def test_transient_errors_are_retried_with_backoff():
    recorder = Recorder(
        httpx.Response(503),
        httpx.ConnectError("reset"),
        {"data": {}},
    )
    provider, sleeps = make_provider(recorder, max_retries=3)

    assert await provider.execute("{ ok }") == {"data": {}}
    assert sleeps == [1.0, 2.0]


@pytest.mark.asyncio
async def test_retries_exhausted():
    recorder = Recorder(httpx.Response(429), httpx.Response(429), httpx.Response(429))
    provider, sleeps = make_provider(recorder, max_retries=2)

    with pytest.raises(ProviderError) as exc:
        await provider.execute("{ ok }")

    assert exc.value.status_code == 429
    assert len(sleeps) == 2


@pytest.mark.asyncio
async def test_client_error_is_not_retried():
    recorder = Recorder(httpx.Response(401))
    provider, sleeps = make_provider(recorder)

    with pytest.raises(ProviderError) as exc:
        await provider.execute("{ ok }")

    assert exc.value.status_code == 401
    assert sleeps == []


@pytest.mark.asyncio
async def test_non_json_body_raises_provider_error():
    recorder = Recorder(httpx.Response(200, text="<html>maintenance</html>"))
    provider, sleeps = make_provider(recorder)

    with pytest.raises(ProviderError) as exc:
        await provider.execute("{ ok }")

    assert str(exc.value) == "Zapper returned invalid JSON"
    assert exc.value.status_code == 502
    assert sleeps == []


@pytest.mark.asyncio
async def test_non_object_body_raises_provider_error():
    provider, _ = make_provider(Recorder([1, 2, 3]))

    with pytest.raises(ProviderError, match="invalid JSON"):
        await provider.execute("{ ok }")


@pytest.mark.asyncio
async def test_get_token_balances_parses_nodes():
    recorder = Recorder(portfolio_payload(
        {"symbol": "ETH", "name": "Ethereum", "balance": 1.2, "balanceUSD": 3600.5, "price": 3000.4,
         "network": {"name": "ETHEREUM_MAINNET", "chainId": 1}},
        {"symbol": "BONK", "name": "Bonk", "balance": 1e6, "balanceUSD": 20,
         "network": {"name": "SOLANA_MAINNET", "chainId": None}},
    ))
    provider, _ = make_provider(recorder)

    holdings = await provider.get_token_balances("0xabc", ["ETHEREUM_MAINNET", "SOLANA_MAINNET"])

    assert [h.symbol for h in holdings] == ["eth", "bonk"]
    assert holdings[1].network_name == "SOLANA_MAINNET"
    assert recorder.bodies[0]["variables"] == {
        "addresses": ["0xabc"],
        "networks": ["ETHEREUM_MAINNET", "SOLANA_MAINNET"],
    }


@pytest.mark.asyncio
async def test_get_token_balances_defaults_networks():
    recorder = Recorder(portfolio_payload())
    provider, _ = make_provider(recorder)

    assert await provider.get_token_balances("0xabc") == []
    assert "ETHEREUM_MAINNET" in recorder.bodies[0]["variables"]["networks"]


@pytest.mark.asyncio
async def test_get_supported_networks():
    recorder = Recorder({"data": {"__type": {"enumValues": [{"name": "ETHEREUM_MAINNET"}, {"name": "BASE_MAINNET"}]}}})
    provider, _ = make_provider(recorder)

    assert await provider.get_supported_networks() == ["ETHEREUM_MAINNET", "BASE_MAINNET"]


def test_parse_portfolio_edges_tolerates_missing_data():
    assert parse_portfolio_edges({}) == []
    assert parse_portfolio_edges({"data": {"portfolioV2": None}}) == []
