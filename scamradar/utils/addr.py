# scamradar/utils/addr.py
# Per-family address checksum validation. Pure functions, no I/O.
from __future__ import annotations

import re

import base58
import bech32
from web3 import Web3

_EVM_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")

# Base58Check version bytes for mainnet P2PKH / P2SH
_BTC_VERSIONS = {0x00, 0x05}


def normalize_evm_address(raw: str) -> str:
    """Strictly validate & checksum an EVM address."""
    s = (raw or "").strip()
    if "..." in s:
        raise ValueError("Ellipses ('...') are not allowed. Provide the full 42-char 0x address.")
    if not _EVM_RE.match(s):
        raise ValueError("Invalid address: must be 0x-prefixed and 42 characters long (0x + 40 hex).")
    if not Web3.is_address(s):
        raise ValueError("Invalid address: EIP-55 checksum mismatch.")
    return Web3.to_checksum_address(s)


def is_valid_evm_address(raw: str) -> bool:
    """
    EIP-55 rules: all-lowercase (or all-uppercase) hex carries no checksum and
    is accepted; mixed case must match the checksum exactly.
    """
    try:
        normalize_evm_address(raw)
    except ValueError:
        return False
    return True


def is_valid_bitcoin_address(raw: str) -> bool:
    """Base58Check (double-SHA256) for 1.../3..., Bech32/Bech32m for bc1..."""
    s = (raw or "").strip()
    if not s:
        return False
    if s[:3].lower() == "bc1":
        witver, _ = bech32.decode("bc", s)
        return witver is not None
    try:
        payload = base58.b58decode_check(s)
    except ValueError:
        return False
    return len(payload) == 21 and payload[0] in _BTC_VERSIONS


def bitcoin_address_type(address: str) -> str:
    if address[:3].lower() == "bc1":
        return "Bech32 (SegWit)"
    if address.startswith("3"):
        return "P2SH"
    if address.startswith("1"):
        return "Legacy (P2PKH)"
    return "Unknown"


__all__ = [
    "normalize_evm_address", "is_valid_evm_address",
    "is_valid_bitcoin_address", "bitcoin_address_type",
]
