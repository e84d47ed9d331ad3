"""
Token Catalog Classifier

Attaches category tags to market-ranked coins based on:
- Symbol defaults (BTC, ETH, SOL, L2s, DEX, oracle, meme)
- An extended keyword mapping matched against symbol and name
"""

from __future__ import annotations

from typing import Any, Dict, List, Sequence, Tuple

from ..recommendations.models import CandidateToken


# First match wins
SYMBOL_DEFAULT_CATEGORIES: Tuple[Tuple[Tuple[str, ...], Tuple[str, ...]], ...] = (
    (("btc", "wbtc"), ("bitcoin", "store-of-value")),
    (("eth", "weth"), ("ethereum", "smart-contract-platform")),
    (("sol", "wsol"), ("solana", "layer-1")),
    (("arb",), ("arbitrum", "layer-2", "scaling")),
    (("matic",), ("polygon", "layer-2", "scaling")),
    (("uni", "cake", "sushi"), ("dex", "defi")),
    (("link", "band"), ("oracle",)),
    (("doge", "shib", "pepe", "bonk"), ("meme-token",)),
    (("avax",), ("avalanche", "layer-1")),
)

# Keyword (substring of symbol or name) -> extra categories
CATEGORY_MAPPING: Dict[str, List[str]] = {
    # Networks and chains
    "bnb": ["binance-coin", "bnb-chain", "bsc", "binance-smart-chain"],
    "ethereum": ["eth", "erc20", "ethereum-ecosystem", "eth-ecosystem"],
    "solana": ["sol", "solana-ecosystem", "sol-ecosystem"],
    "polygon": ["matic", "polygon-ecosystem", "polygon-network"],
    "arbitrum": ["arb", "layer-2", "ethereum-layer-2", "scaling"],
    "optimism": ["op", "layer-2", "ethereum-layer-2", "scaling"],
    "avalanche": ["avax", "layer-1"],
    "fantom": ["ftm", "layer-1"],
    "base": ["layer-2", "ethereum-layer-2", "coinbase-ecosystem"],
    "blast": ["ethereum-layer-2", "scaling"],
    "zksync": ["layer-2", "ethereum-layer-2", "zk-rollup", "scaling"],
    "linea": ["layer-2", "ethereum-layer-2", "scaling"],

    # Token types
    "meme": ["meme-token", "meme-coin", "pepe", "doge"],
    "pepe": ["meme-token", "meme-coin"],
    "fartcoin": ["meme-token", "meme-coin"],
    "lend": ["lending", "borrowing", "defi", "yield"],
    "defi": ["decentralized-finance", "yield", "liquidity"],
    "dex": ["decentralized-exchange", "swap", "amm"],
    "gold": ["commodities", "precious-metals", "store-of-value"],
    "layer": ["layer-1", "layer-2", "scaling", "blockchain"],

    # AI and data
    "neurox": ["ai", "technology", "utility-token"],
    "ontropy": ["ai", "data", "utility-token"],
}

# Served when CoinGecko is unreachable and nothing is cached
TOP_TOKENS: Tuple[Dict[str, Any], ...] = (
    {"id": "bitcoin", "symbol": "btc", "name": "Bitcoin", "categories": ["cryptocurrency"]},
    {"id": "ethereum", "symbol": "eth", "name": "Ethereum", "categories": ["smart-contract-platform", "defi"]},
    {"id": "solana", "symbol": "sol", "name": "Solana", "categories": ["smart-contract-platform", "layer-1"]},
    {"id": "arbitrum", "symbol": "arb", "name": "Arbitrum", "categories": ["layer-2", "scaling"]},
    {"id": "dogecoin", "symbol": "doge", "name": "Dogecoin", "categories": ["meme-token"]},
    {"id": "shiba-inu", "symbol": "shib", "name": "Shiba Inu", "categories": ["meme-token"]},
    {"id": "chainlink", "symbol": "link", "name": "Chainlink", "categories": ["oracle"]},
    {"id": "uniswap", "symbol": "uni", "name": "Uniswap", "categories": ["dex", "defi"]},
    {"id": "polkadot", "symbol": "dot", "name": "Polkadot", "categories": ["interoperability"]},
    {"id": "avalanche-2", "symbol": "avax", "name": "Avalanche", "categories": ["smart-contract-platform", "layer-1"]},
)


def _dedupe(values: Sequence[str]) -> List[str]:
    return list(dict.fromkeys(v for v in values if v))


def classify_categories(symbol: str, name: str) -> List[str]:
    """Build the category list for a coin from its symbol and name.

    The generic "cryptocurrency" tag goes last so the first category stays
    the most specific one.
    """
    symbol = symbol.lower()
    name = name.lower()
    categories: List[str] = []

    for symbols, defaults in SYMBOL_DEFAULT_CATEGORIES:
        if symbol in symbols:
            categories.extend(defaults)
            break

    for key, mapped in CATEGORY_MAPPING.items():
        if key in symbol or key in name:
            categories.extend(mapped)

    categories.append("cryptocurrency")
    return _dedupe(categories)


def enrich_market_coin(coin: Dict[str, Any]) -> CandidateToken:
    """Convert a /coins/markets entry into a catalog token."""
    symbol = str(coin.get("symbol") or "").lower()
    name = str(coin.get("name") or "")
    return CandidateToken(
        id=str(coin.get("id") or ""),
        symbol=symbol,
        name=name,
        categories=tuple(classify_categories(symbol, name)),
        market_cap_usd=coin.get("market_cap") or 0,
        price_change_24h=coin.get("price_change_percentage_24h") or 0,
        image=coin.get("image") or "",
    )


def fallback_catalog() -> List[CandidateToken]:
    """TOP_TOKENS with categories expanded by an exact CATEGORY_MAPPING symbol key."""
    tokens = []
    for token in TOP_TOKENS:
        categories = list(token["categories"])
        categories.extend(CATEGORY_MAPPING.get(token["symbol"].lower(), []))
        tokens.append(CandidateToken(
            id=token["id"],
            symbol=token["symbol"],
            name=token["name"],
            categories=tuple(_dedupe(categories)),
        ))
    return tokens


__all__ = [
    "CATEGORY_MAPPING",
    "SYMBOL_DEFAULT_CATEGORIES",
    "TOP_TOKENS",
    "classify_categories",
    "enrich_market_coin",
    "fallback_catalog",
]
