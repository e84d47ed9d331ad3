#!/usr/bin/env python3
"""Simple CLI for analyzing wallets locally"""

import argparse
import asyncio
from typing import List, Optional

from wallet_profiler.logging_config import setup_logging
from wallet_profiler.providers.base import ProviderError
from wallet_profiler.services.analysis import WalletAnalysis, analyze_wallet
from wallet_profiler.services.networks import get_networks


def print_analysis(analysis: WalletAnalysis):
    """Pretty print holdings grouped by network and the recommendations"""
    portfolio = analysis.portfolio

    print("\n📊 Portfolio Analysis")
    print("=" * 50)
    print(f"Address: {analysis.address} ({analysis.address_kind.label})")
    print(f"Total Value: ${portfolio.total_usd:,.2f} USD")
    print(f"Networks: {portfolio.network_count}")

    for group in sorted(portfolio.networks.values(), key=lambda g: g.total_usd, reverse=True):
        print(f"\n{group.network_name}  ${group.total_usd:,.2f}")
        print("-" * 50)
        for token in sorted(group.holdings, key=lambda t: t.balance_usd, reverse=True):
            print(f"  {token.balance:>14,.4f} {token.symbol.upper():<8} ${token.balance_usd:>12,.2f}")

    recommendations = analysis.recommendations
    if recommendations:
        header = "Popular tokens" if recommendations.is_fallback else "Recommended tokens"
        print(f"\n✨ {header}")
        print("-" * 50)
        for i, item in enumerate(recommendations, 1):
            tags = f" ({', '.join(item.matching_tags)})" if item.matching_tags else ""
            print(f"{i:2d}. {item.symbol.upper():<8} {item.token.name:<24} score {item.score}{tags}")

    if analysis.warnings:
        print(f"\n⚠️  Warnings: {'; '.join(analysis.warnings)}")


async def cli_analyze(address: str, networks: Optional[List[str]] = None, limit: Optional[int] = None):
    """CLI command to analyze a wallet"""
    print(f"🔍 Analyzing {address}...")

    try:
        analysis = await analyze_wallet(address, networks, limit)
    except (ProviderError, ValueError) as e:
        print(f"❌ Error: {e}")
        return 1

    print_analysis(analysis)
    return 0


async def cli_networks():
    """CLI command to list supported networks"""
    result = await get_networks()
    source = "cache" if result.from_cache else "Zapper"
    print(f"🌐 {result.count} networks (from {source})")
    for name in result.networks:
        print(f"  {name}")
    if result.warning:
        print(f"\n⚠️  {result.warning}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Wallet Profiler CLI")
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    subparsers = parser.add_subparsers(dest="command")

    analyze_parser = subparsers.add_parser("analyze", help="Analyze a wallet and recommend tokens")
    analyze_parser.add_argument("address", help="Wallet address (EVM or Solana)")
    analyze_parser.add_argument("--networks", nargs="+", help="Network enum values, e.g. ETHEREUM_MAINNET")
    analyze_parser.add_argument("--limit", type=int, help="Number of recommendations")

    subparsers.add_parser("networks", help="List supported networks")

    return parser


async def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level or "WARNING")

    if args.command == "analyze":
        if args.limit is not None and args.limit < 0:
            parser.error("--limit must not be negative")
        return await cli_analyze(args.address, args.networks, args.limit)

    if args.command == "networks":
        return await cli_networks()

    parser.print_help()
    return 0


def _run() -> None:
    raise SystemExit(asyncio.run(main()))


if __name__ == "__main__":
    _run()
