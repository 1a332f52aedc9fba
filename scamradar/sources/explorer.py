# scamradar/sources/explorer.py
# Transaction chain detection: HEAD the tx page on each explorer concurrently;
# the first explorer (in table order) that answers 2xx names the chain.
from __future__ import annotations

from typing import Optional

from scamradar.chains import TX_EXPLORERS
from scamradar.sources.base import FetchResult, HttpSource, short
from scamradar.utils.cache import MISS
from scamradar.utils.concurrency import settle_all


class ExplorerProbe(HttpSource):
    label = "Explorer"

    def __init__(self, explorers=None, **kw):
        super().__init__(**kw)
        self.explorers = list(explorers if explorers is not None else TX_EXPLORERS)

    async def _probe(self, url: str) -> bool:
        sent = await self._send("HEAD", url, allow_redirects=True)
        return sent.ok and sent.data.ok

    async def detect_chain(self, tx_hash: str) -> FetchResult[Optional[str]]:
        """Chain name or None. Only a confirmed chain is cached."""
        key = tx_hash.lower()
        cached = self.cache.get(key)
        if cached is not MISS:
            return FetchResult.success(cached)

        outcomes = await settle_all(*(self._probe(e["prefix"] + tx_hash) for e in self.explorers))
        for explorer, outcome in zip(self.explorers, outcomes):
            if outcome.ok and outcome.value:
                self.cache.set(key, explorer["name"])
                self._dbg(f"{short(tx_hash)} found on {explorer['name']}")
                return FetchResult.success(explorer["name"])
        self._dbg(f"{short(tx_hash)} not found on any explorer")
        return FetchResult.success(None)


__all__ = ["ExplorerProbe"]
