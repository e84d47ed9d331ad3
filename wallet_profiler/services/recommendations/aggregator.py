"""Group raw balances by network and total their USD value."""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable

from .models import NetworkHoldings, PortfolioSummary, TokenHolding


def aggregate_portfolio(holdings: Iterable[TokenHolding]) -> PortfolioSummary:
    """Build a PortfolioSummary.

    Holdings without a symbol or network are dropped. An empty input is a
    valid "no holdings" summary with a zero total.
    """
    summary = PortfolioSummary()
    total = Decimal("0")

    for holding in holdings:
        if not holding.is_valid:
            continue

        group = summary.networks.get(holding.network_name)
        if group is None:
            group = NetworkHoldings(network_name=holding.network_name)
            summary.networks[holding.network_name] = group

        group.holdings.append(holding)
        group.total_usd += holding.balance_usd
        summary.holdings.append(holding)
        total += holding.balance_usd

    summary.total_usd = total
    return summary


__all__ = ["aggregate_portfolio"]
