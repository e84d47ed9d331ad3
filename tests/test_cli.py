import logging
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

import cli
from wallet_profiler.providers.base import ProviderError
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


@pytest.fixture(autouse=True)
def restore_root_handlers():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def analysis():
    holdings = [TokenHolding(symbol="eth", name="Ethereum", network_name="ETHEREUM_MAINNET",
                             balance=Decimal("2"), balance_usd=Decimal("6000"))]
    catalog = [CandidateToken(id="chainlink", symbol="link", name="Chainlink", categories=("oracle", "defi"))]
    return WalletAnalysis(
        address=EVM_ADDRESS,
        address_kind=AddressKind.EVM,
        portfolio=aggregate_portfolio(holdings),
        recommendations=recommend(holdings, catalog),
    )


@pytest.mark.asyncio
async def test_analyze_command(monkeypatch, capsys, analysis):
    analyze_wallet = AsyncMock(return_value=analysis)
    monkeypatch.setattr(cli, "analyze_wallet", analyze_wallet)

    code = await cli.main(["analyze", EVM_ADDRESS, "--networks", "ETHEREUM_MAINNET", "--limit", "3"])

    out = capsys.readouterr().out
    assert code == 0
    assert "ETHEREUM_MAINNET" in out
    assert "$6,000.00" in out
    assert "LINK" in out
    analyze_wallet.assert_awaited_once_with(EVM_ADDRESS, ["ETHEREUM_MAINNET"], 3)


@pytest.mark.asyncio
async def test_analyze_command_reports_errors(monkeypatch, capsys):
    monkeypatch.setattr(cli, "analyze_wallet", AsyncMock(side_effect=ProviderError("Zapper API error: 500")))

    code = await cli.main(["analyze", EVM_ADDRESS])

    assert code == 1
    assert "Zapper API error: 500" in capsys.readouterr().out


@pytest.mark.asyncio
async def test_networks_command(monkeypatch, capsys):
    result = NetworkList(networks=["ETHEREUM_MAINNET", "BASE_MAINNET"])
    monkeypatch.setattr(cli, "get_networks", AsyncMock(return_value=result))

    code = await cli.main(["networks"])

    out = capsys.readouterr().out
    assert code == 0
    assert "2 networks" in out
    assert "BASE_MAINNET" in out
