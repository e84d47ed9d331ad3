"""
Keyword tables used by tag extraction and scoring.

Data only: extend the tables here rather than adding branches to the
extractor or scorer.
"""

from __future__ import annotations

from typing import Dict, FrozenSet, NamedTuple, Tuple


class KeywordFamily(NamedTuple):
    """Maps trigger strings found on a holding to canonical profile tags."""
    triggers: Tuple[str, ...]
    tags: Tuple[str, ...]
    match: str = "symbol"  # "symbol": exact symbol, "substring": in symbol or name


KEYWORD_FAMILIES: Tuple[KeywordFamily, ...] = (
    KeywordFamily(("eth", "weth", "steth", "seth"), ("ethereum", "smart-contract-platform")),
    KeywordFamily(("btc", "wbtc", "sbtc"), ("bitcoin", "store-of-value")),
    KeywordFamily(("sol", "wsol"), ("solana", "layer-1")),
    KeywordFamily(
        ("inu", "shib", "doge", "pepe", "moon", "elon", "safe"),
        ("meme", "meme-token"),
        match="substring",
    ),
    KeywordFamily(("uni", "sushi", "cake", "quick"), ("dex", "defi", "swap")),
    KeywordFamily(("link", "band", "api3"), ("oracle", "defi")),
    KeywordFamily(("ape", "bayc", "doodle", "azuki"), ("nft", "collectible")),
    KeywordFamily(("rndr", "agi", "fet", "ocean"), ("ai", "technology")),
    KeywordFamily(("gala", "enj", "sand", "mana", "axs"), ("gaming", "metaverse", "entertainment")),
    KeywordFamily(("arb",), ("arbitrum", "layer-2", "scaling")),
    KeywordFamily(("op",), ("optimism", "layer-2", "scaling")),
    KeywordFamily(("matic", "pol"), ("polygon", "layer-2")),
    KeywordFamily(("avax",), ("avalanche", "layer-1")),
    KeywordFamily(("bnb", "wbnb"), ("bnb-chain", "layer-1")),
    KeywordFamily(("aave", "comp", "mkr"), ("lending", "defi")),
    KeywordFamily(("usdt", "usdc", "dai", "busd"), ("stablecoin",)),
)

# A holding whose lowercased name contains any of these contributes no
# symbol- or name-derived tags.
SCAM_NAME_MARKERS: Tuple[str, ...] = (
    "airdrop",
    "claim",
    "http://",
    "https://",
    ".com",
    ".io",
    ".org",
    "visit",
    "free",
    "website",
)

NETWORK_SPECIAL_CASES: Dict[str, Tuple[str, ...]] = {
    "moonbeam": ("polkadot", "parachain"),
    "gnosis": ("ethereum", "layer-2"),
    "solana": ("sol", "layer-1"),
}

NAME_STOPWORDS: FrozenSet[str] = frozenset({
    "the", "and", "for", "token", "tokens", "coin", "coins", "wrapped", "bridged",
})

# Profile tags that look like scraped URLs are ignored by the scorer.
URL_TAG_MARKERS: Tuple[str, ...] = ("visit:", "claim")
UNICODE_DOT_LOOKALIKES: FrozenSet[str] = frozenset({
    "·",  # middle dot
    "․",  # one dot leader
    "‧",  # hyphenation point
    "∙",  # bullet operator
    "。",  # ideographic full stop
    "．",  # fullwidth full stop
    "｡",  # halfwidth ideographic full stop
})

DEFI_TAG_KEYWORDS: Tuple[str, ...] = ("defi", "lend", "yield")
DEFI_CATEGORY_KEYWORDS: Tuple[str, ...] = ("defi", "lend", "yield", "staking")
MEME_KEYWORDS: Tuple[str, ...] = ("meme", "pepe", "doge")
LAYER_KEYWORDS: Tuple[str, ...] = ("layer", "chain", "network")

STABLECOIN_FALLBACK_EXCLUSIONS: FrozenSet[str] = frozenset({"usdt", "usdc"})

MIN_STEM_LENGTH = 3
