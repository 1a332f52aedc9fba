# scamradar/sources/security.py
# GoPlus security labels: token, address, NFT contract and phishing-site lookups.
# Raw "0"/"1" strings and {value: ...} objects are normalized here so scanners
# never see provider payload shapes.
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from scamradar.chains import NFT_LABEL_CHAINS
from scamradar.sources.base import MALFORMED, NOT_FOUND, STATUS, FetchResult, HttpSource, short
from scamradar.utils.cache import MISS


class Flag(Enum):
    YES = "yes"
    NO = "no"
    UNKNOWN = "unknown"

    @property
    def set(self) -> bool:
        return self is Flag.YES

    @property
    def clear(self) -> bool:
        return self is Flag.NO


def str_flag(value: Any) -> Optional[bool]:
    """GoPlus token/address flags: "1" -> True, "0" -> False, else None."""
    if value is None:
        return None
    s = str(value).strip()
    if s == "1":
        return True
    if s == "0":
        return False
    return None


def nft_flag(value: Any) -> Flag:
    """
    GoPlus NFT flags come as 0/1 numbers or as {"value": 0|1|-1, ...}
    objects; -1 means renounced/blackholed and counts as not set.
    """
    if isinstance(value, Mapping):
        value = value.get("value")
    if isinstance(value, bool) or value is None:
        return Flag.UNKNOWN
    try:
        n = int(value)
    except (TypeError, ValueError):
        return Flag.UNKNOWN
    if n == 1:
        return Flag.YES
    if n in (0, -1):
        return Flag.NO
    return Flag.UNKNOWN


def _pct(value: Any) -> Optional[float]:
    """GoPlus taxes are 0..1 fractions as strings; return percent."""
    if value in (None, ""):
        return None
    try:
        return float(value) * 100.0
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class TokenSecurity:
    is_honeypot: Optional[bool] = None
    is_open_source: Optional[bool] = None
    is_mintable: Optional[bool] = None
    hidden_owner: Optional[bool] = None
    slippage_modifiable: Optional[bool] = None
    transfer_pausable: Optional[bool] = None
    is_proxy: Optional[bool] = None
    selfdestruct: Optional[bool] = None
    is_blacklisted: Optional[bool] = None
    buy_tax: Optional[float] = None
    sell_tax: Optional[float] = None
    holder_count: Optional[int] = None
    owner_address: Optional[str] = None

    @classmethod
    def from_payload(cls, raw: Dict[str, Any]) -> "TokenSecurity":
        holders = raw.get("holder_count")
        try:
            holder_count = int(holders) if holders not in (None, "") else None
        except (TypeError, ValueError):
            holder_count = None
        return cls(
            is_honeypot=str_flag(raw.get("is_honeypot")),
            is_open_source=str_flag(raw.get("is_open_source")),
            is_mintable=str_flag(raw.get("is_mintable")),
            hidden_owner=str_flag(raw.get("hidden_owner")),
            slippage_modifiable=str_flag(raw.get("slippage_modifiable")),
            transfer_pausable=str_flag(raw.get("transfer_pausable")),
            is_proxy=str_flag(raw.get("is_proxy")),
            selfdestruct=str_flag(raw.get("selfdestruct")),
            is_blacklisted=str_flag(raw.get("is_blacklisted")),
            buy_tax=_pct(raw.get("buy_tax")),
            sell_tax=_pct(raw.get("sell_tax")),
            holder_count=holder_count,
            owner_address=raw.get("owner_address") or None,
        )


ADDRESS_FLAG_KEYS = (
    "phishing_activities", "stealing_attack", "money_laundering", "sanctioned",
    "honeypot_related_address", "blacklist_doubt", "mixer",
)


@dataclass(frozen=True)
class AddressSecurity:
    flags: Tuple[str, ...] = ()     # keys whose value was "1", in ADDRESS_FLAG_KEYS order

    @classmethod
    def from_payload(cls, raw: Dict[str, Any]) -> "AddressSecurity":
        return cls(tuple(k for k in ADDRESS_FLAG_KEYS if str_flag(raw.get(k)) is True))


@dataclass(frozen=True)
class NftSecurity:
    name: Optional[str] = None
    symbol: Optional[str] = None
    description: Optional[str] = None
    erc: Optional[str] = None
    website_url: Optional[str] = None
    discord_url: Optional[str] = None
    twitter_url: Optional[str] = None
    open_source: Flag = Flag.UNKNOWN
    proxy: Flag = Flag.UNKNOWN
    self_destruct: Flag = Flag.UNKNOWN
    privileged_minting: Flag = Flag.UNKNOWN
    privileged_burn: Flag = Flag.UNKNOWN
    transfer_without_approval: Flag = Flag.UNKNOWN
    oversupply_minting: Flag = Flag.UNKNOWN
    restricted_approval: Flag = Flag.UNKNOWN
    malicious: Flag = Flag.UNKNOWN
    trust_list: Flag = Flag.UNKNOWN
    copycats: int = 0

    @property
    def has_data(self) -> bool:
        return bool(self.name or self.erc)

    @classmethod
    def from_payload(cls, raw: Dict[str, Any]) -> "NftSecurity":
        same = raw.get("same_nfts")
        return cls(
            name=raw.get("nft_name") or None,
            symbol=raw.get("nft_symbol") or None,
            description=raw.get("nft_description") or None,
            erc=raw.get("nft_erc") or None,
            website_url=raw.get("website_url") or None,
            discord_url=raw.get("discord_url") or None,
            twitter_url=raw.get("twitter_url") or None,
            open_source=nft_flag(raw.get("nft_open_source")),
            proxy=nft_flag(raw.get("nft_proxy")),
            self_destruct=nft_flag(raw.get("self_destruct")),
            privileged_minting=nft_flag(raw.get("privileged_minting")),
            privileged_burn=nft_flag(raw.get("privileged_burn")),
            transfer_without_approval=nft_flag(raw.get("transfer_without_approval")),
            oversupply_minting=nft_flag(raw.get("oversupply_minting")),
            restricted_approval=nft_flag(raw.get("restricted_approval")),
            malicious=nft_flag(raw.get("malicious_nft_contract")),
            trust_list=nft_flag(raw.get("trust_list")),
            copycats=len(same) if isinstance(same, list) else 0,
        )


@dataclass(frozen=True)
class NftLookup:
    security: NftSecurity
    chain_id: int


class SecurityLabels(HttpSource):
    """GoPlus API. Every endpoint shares this adapter's cache, keyed by request."""

    label = "GoPlus"

    def __init__(self, base_url: str, **kw):
        super().__init__(**kw)
        self.base_url = base_url.rstrip("/")

    async def _call(self, path: str, params: Dict[str, Any]) -> FetchResult[Any]:
        key = (path, tuple(sorted(params.items())))
        cached = self.cache.get(key)
        if cached is not MISS:
            self._dbg(f"cache hit {path}")
            return FetchResult.success(cached)

        res = await self._get_json(f"{self.base_url}{path}", params=params)
        if not res.ok:
            return FetchResult.failure(res.error, res.kind)
        body = res.data
        code = body.get("code") if isinstance(body, dict) else None
        if code != 1:
            return FetchResult.failure(f"GoPlus returned code {code}", STATUS)
        result = body.get("result")
        self.cache.set(key, result)
        return FetchResult.success(result)

    async def token_security(self, address: str, chain_id: int) -> FetchResult[TokenSecurity]:
        addr = address.lower()
        res = await self._call(f"/token_security/{chain_id}", {"contract_addresses": addr})
        if not res.ok:
            return FetchResult.failure(res.error, res.kind)
        if not isinstance(res.data, dict):
            return FetchResult.failure("GoPlus returned an unexpected token payload", MALFORMED)
        raw = res.data.get(addr)
        if not isinstance(raw, dict) or not raw:
            return FetchResult.failure("Token not found in GoPlus database", NOT_FOUND)
        return FetchResult.success(TokenSecurity.from_payload(raw))

    async def address_security(self, address: str, chain_id: int) -> FetchResult[AddressSecurity]:
        res = await self._call(f"/address_security/{address}", {"chain_id": chain_id})
        if not res.ok:
            return FetchResult.failure(res.error, res.kind)
        if not isinstance(res.data, dict):
            return FetchResult.failure("GoPlus returned an unexpected address payload", MALFORMED)
        return FetchResult.success(AddressSecurity.from_payload(res.data))

    async def phishing_site(self, url: str) -> FetchResult[bool]:
        """True if listed as phishing, False if explicitly clean."""
        res = await self._call("/phishing_site", {"url": url})
        if not res.ok:
            return FetchResult.failure(res.error, res.kind)
        verdict = res.data.get("phishing_site") if isinstance(res.data, dict) else None
        if verdict not in (0, 1):
            return FetchResult.failure("GoPlus returned no phishing verdict", MALFORMED)
        return FetchResult.success(verdict == 1)

    async def nft_security(self, address: str,
                           chains: Iterable[int] = NFT_LABEL_CHAINS) -> FetchResult[NftLookup]:
        """Probe chains in order; the first with a named/standardized contract wins."""
        addr = address.lower()
        last_error: Optional[str] = None
        for chain_id in chains:
            res = await self._call(f"/nft_security/{chain_id}", {"contract_addresses": addr})
            if not res.ok:
                last_error = res.error
                self._dbg(f"nft {short(addr)} chain={chain_id} -> {res.error}")
                continue
            if isinstance(res.data, dict):
                sec = NftSecurity.from_payload(res.data)
                if sec.has_data:
                    return FetchResult.success(NftLookup(sec, chain_id))
        if last_error:
            return FetchResult.failure(last_error, NOT_FOUND)
        return FetchResult.failure("NFT contract not found in GoPlus database", NOT_FOUND)


__all__ = [
    "Flag", "str_flag", "nft_flag",
    "TokenSecurity", "AddressSecurity", "ADDRESS_FLAG_KEYS", "NftSecurity", "NftLookup",
    "SecurityLabels",
]
