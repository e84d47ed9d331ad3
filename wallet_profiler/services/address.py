"""Helpers for sniffing and validating wallet addresses."""

from __future__ import annotations

import re
from enum import Enum
from functools import lru_cache

_EVM_ADDRESS_RE = re.compile(r"^0x[a-fA-F0-9]{40}$")
_SOLANA_ADDRESS_RE = re.compile(r"^[1-9A-HJ-NP-Za-km-z]{32,44}$")


class AddressKind(str, Enum):
    SOLANA = "solana"
    EVM = "evm"
    UNKNOWN = "unknown"

    @property
    def label(self) -> str:
        return {"solana": "Solana", "evm": "Ethereum/EVM"}.get(self.value, "Unknown")


def normalize_address(address: str | None) -> str:
    """Strip surrounding whitespace; the provider is case-insensitive."""

    return (address or "").strip()


@lru_cache(maxsize=256)
def detect_address_kind(address: str) -> AddressKind:
    """Guess which chain family an address belongs to from its shape."""

    address = normalize_address(address)
    if _EVM_ADDRESS_RE.match(address):
        return AddressKind.EVM
    # base58 never contains "0", so a 0x prefix cannot match here
    if _SOLANA_ADDRESS_RE.match(address):
        return AddressKind.SOLANA
    return AddressKind.UNKNOWN


def is_valid_wallet_address(address: str | None) -> bool:
    if not address:
        return False
    return detect_address_kind(normalize_address(address)) is not AddressKind.UNKNOWN


__all__ = [
    "AddressKind",
    "detect_address_kind",
    "is_valid_wallet_address",
    "normalize_address",
]
