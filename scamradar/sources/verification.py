# scamradar/sources/verification.py
# Sourcify source-verification lookup. 404 is a valid answer ("not verified").
from __future__ import annotations

from scamradar.sources.base import FetchResult, HttpSource, short
from scamradar.utils.cache import MISS


class SourceVerification(HttpSource):
    label = "Sourcify"

    def __init__(self, base_url: str, **kw):
        super().__init__(**kw)
        self.base_url = base_url.rstrip("/")

    async def is_verified(self, address: str, chain_id: int) -> FetchResult[bool]:
        key = (chain_id, address.lower())
        cached = self.cache.get(key)
        if cached is not MISS:
            return FetchResult.success(cached)

        sent = await self._send("GET", f"{self.base_url}/{chain_id}/{address}",
                                params={"fields": "isVerified"})
        if not sent.ok:
            return FetchResult.failure(sent.error, sent.kind)
        if sent.data.status_code == 404:
            self._dbg(f"{short(address)} chain={chain_id} -> not in registry")
            self.cache.set(key, False)
            return FetchResult.success(False)

        res = self._decode(sent.data)
        if not res.ok:
            return FetchResult.failure(res.error, res.kind)
        flag = res.data.get("isVerified") if isinstance(res.data, dict) else None
        verified = flag is True or flag == "true"
        self.cache.set(key, verified)
        return FetchResult.success(verified)


__all__ = ["SourceVerification"]
