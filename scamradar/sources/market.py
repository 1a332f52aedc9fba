# scamradar/sources/market.py
# DexScreener market/liquidity data, normalized into Pair records.
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from scamradar.sources.base import MALFORMED, FetchResult, HttpSource, short
from scamradar.utils.cache import MISS


def _num(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _sub(raw: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = raw.get(key)
    return value if isinstance(value, dict) else {}


@dataclass(frozen=True)
class Pair:
    chain_id: Optional[str]
    dex_id: Optional[str]
    pair_address: Optional[str]
    url: Optional[str]
    has_base_token: bool
    base_name: Optional[str]
    base_symbol: Optional[str]
    base_address: Optional[str]
    price_usd: Optional[str]
    price_change_h24: Optional[float]
    liquidity_usd: Optional[float]
    fdv: Optional[float]
    volume_h24: Optional[float]
    pair_created_at: Optional[int]

    @classmethod
    def from_payload(cls, raw: Dict[str, Any]) -> "Pair":
        base = raw.get("baseToken")
        base = base if isinstance(base, dict) else None
        created = _num(raw.get("pairCreatedAt"))
        price = raw.get("priceUsd")
        return cls(
            chain_id=raw.get("chainId") or None,
            dex_id=raw.get("dexId"),
            pair_address=raw.get("pairAddress"),
            url=raw.get("url"),
            has_base_token=base is not None,
            base_name=(base or {}).get("name"),
            base_symbol=(base or {}).get("symbol"),
            base_address=(base or {}).get("address"),
            price_usd=str(price) if price is not None else None,
            price_change_h24=_num(_sub(raw, "priceChange").get("h24")),
            liquidity_usd=_num(_sub(raw, "liquidity").get("usd")),
            fdv=_num(raw.get("fdv")),
            volume_h24=_num(_sub(raw, "volume").get("h24")),
            pair_created_at=int(created) if created else None,
        )


@dataclass(frozen=True)
class MarketSnapshot:
    pairs: Tuple[Pair, ...] = ()

    @property
    def listed(self) -> bool:
        return len(self.pairs) > 0

    def most_liquid(self, prefer_chain: Optional[str] = None) -> Optional[Pair]:
        """Deepest pair; restricted to ``prefer_chain`` when that chain has any."""
        pool = self.pairs
        if prefer_chain:
            preferred = tuple(p for p in self.pairs if p.chain_id == prefer_chain)
            pool = preferred or pool
        if not pool:
            return None
        best = pool[0]
        for p in pool[1:]:
            if (p.liquidity_usd or 0) > (best.liquidity_usd or 0):
                best = p
        return best


class MarketData(HttpSource):
    """Token pairs for an address. Returns an empty snapshot when unlisted."""

    label = "DexScreener"

    def __init__(self, base_url: str, **kw):
        super().__init__(**kw)
        self.base_url = base_url.rstrip("/")

    async def fetch(self, address: str, timeout: Optional[float] = None) -> FetchResult[MarketSnapshot]:
        key = address.lower() if address.startswith("0x") else address
        cached = self.cache.get(key)
        if cached is not MISS:
            self._dbg(f"cache hit {short(address)}")
            return FetchResult.success(cached)

        res = await self._get_json(f"{self.base_url}/{address}", timeout=timeout)
        if not res.ok:
            return FetchResult.failure(res.error, res.kind)
        if not isinstance(res.data, dict):
            return FetchResult.failure("DexScreener API returned unexpected payload", MALFORMED)

        raw_pairs = res.data.get("pairs")
        pairs = tuple(Pair.from_payload(p) for p in raw_pairs if isinstance(p, dict)) \
            if isinstance(raw_pairs, list) else ()
        snap = MarketSnapshot(pairs)
        self.cache.set(key, snap)
        self._dbg(f"{short(address)} -> {len(pairs)} pairs")
        return FetchResult.success(snap)


__all__ = ["Pair", "MarketSnapshot", "MarketData"]
