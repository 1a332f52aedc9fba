# scamradar/core/classify.py
# Lexical input classification. No I/O, no checksum work.
from __future__ import annotations

import re
from typing import Callable, List, Tuple

from scamradar.core.report import InputType

_ALIAS_RE = re.compile(r"^[a-z0-9-]+(\.[a-z0-9-]+)*\.eth$", re.IGNORECASE)
_SCHEME_RE = re.compile(r"^(https?://|www\.)", re.IGNORECASE)
_BARE_DOMAIN_RE = re.compile(r"^[a-zA-Z0-9][a-zA-Z0-9-]*\.[a-zA-Z]{2,}")
_TX_RE = re.compile(r"^0x[0-9a-fA-F]{64}$")
_EVM_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")
_LOOSE_HEX_RE = re.compile(r"^0x[0-9a-fA-F]+$")
_BTC_BASE58_RE = re.compile(r"^[13][1-9A-HJ-NP-Za-km-z]{24,33}$")
_BTC_BECH32_RE = re.compile(r"^bc1[a-z0-9]{38,59}$", re.IGNORECASE)
_SOLANA_RE = re.compile(r"^[2-9A-HJ-NP-Za-km-z][1-9A-HJ-NP-Za-km-z]{31,43}$")
_BTC_LOOSE_BASE58_RE = re.compile(r"^[13][1-9A-HJ-NP-Za-km-z]{19,49}$")
_BTC_LOOSE_BECH32_RE = re.compile(r"^bc1[a-z0-9]{5,69}$", re.IGNORECASE)


def is_bitcoin_shape(s: str) -> bool:
    return bool(_BTC_BASE58_RE.match(s) or _BTC_BECH32_RE.match(s))


def is_solana_shape(s: str) -> bool:
    return bool(_SOLANA_RE.match(s)) and not is_bitcoin_shape(s)


def _is_web_address(s: str) -> bool:
    if _SCHEME_RE.match(s):
        return True
    return bool(_BARE_DOMAIN_RE.match(s)) and not s.startswith("0x")


def _loose_hex(s: str) -> InputType:
    if len(s) == 66:
        return InputType.TX_HASH
    if len(s) == 42:
        return InputType.TOKEN
    return InputType.WALLET


Rule = Tuple[str, Callable[[str], bool], Callable[[str], InputType]]


def _tag(t: InputType) -> Callable[[str], InputType]:
    return lambda _s: t


# Evaluated top to bottom, first match wins. Order matters:
#   alias before web address (".eth" looks like a bare domain),
#   web address before hex (digit-leading domains),
#   legacy-chain before alternate-chain (overlapping Base58 charset).
RULES: List[Rule] = [
    ("name-alias", lambda s: bool(_ALIAS_RE.match(s)), _tag(InputType.ENS)),
    ("web-address", _is_web_address, _tag(InputType.URL)),
    ("transaction-id", lambda s: bool(_TX_RE.match(s)), _tag(InputType.TX_HASH)),
    ("contract-or-wallet", lambda s: bool(_EVM_RE.match(s)), _tag(InputType.TOKEN)),
    ("loose-hex", lambda s: bool(_LOOSE_HEX_RE.match(s)), _loose_hex),
    ("legacy-chain", is_bitcoin_shape, _tag(InputType.BTC_WALLET)),
    ("alternate-chain-token", is_solana_shape, _tag(InputType.SOLANA_TOKEN)),
    ("legacy-chain-loose",
     lambda s: bool(_BTC_LOOSE_BASE58_RE.match(s) or _BTC_LOOSE_BECH32_RE.match(s)),
     _tag(InputType.BTC_WALLET)),
]


def classify(raw: str) -> InputType:
    """Map a raw string to exactly one category. Empty input is UNKNOWN."""
    s = (raw or "").strip()
    if not s:
        return InputType.UNKNOWN
    for _name, matches, tag in RULES:
        if matches(s):
            return tag(s)
    return InputType.UNKNOWN


__all__ = ["RULES", "classify", "is_bitcoin_shape", "is_solana_shape"]
