# scamradar/sources/names.py
# ENS name resolution through web3, primary RPC then one fallback.
from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional, Sequence

from web3 import Web3

from scamradar.chains import get_w3
from scamradar.sources.base import NETWORK, NOT_FOUND, TIMEOUT, FetchResult
from scamradar.utils.cache import MISS, TTLCache

_log = logging.getLogger(__name__)

NO_ADDRESS = "ENS name does not resolve to an address"


def _dbg(msg: str) -> None:
    _log.debug("[ens] %s", msg)


class NameResolver:
    """
    Resolves ``*.eth`` names. Each RPC attempt is time-boxed; the fallback is
    tried only when the primary fails outright. A clean "no address" answer is
    cached like a hit.
    """

    def __init__(self, rpc_urls: Sequence[str], cache: Optional[TTLCache] = None,
                 timeout: float = 8.0, w3_factory: Callable[..., Web3] = get_w3):
        self.rpc_urls = [u for u in rpc_urls if u]
        self.cache = cache if cache is not None else TTLCache(ttl_seconds=600)
        self.timeout = float(timeout)
        self.w3_factory = w3_factory

    def _lookup(self, rpc_url: str, name: str) -> Optional[str]:
        w3 = self.w3_factory(rpc_url, timeout=self.timeout)
        return w3.ens.address(name)

    async def resolve(self, name: str) -> FetchResult[str]:
        key = name.strip().lower()
        cached = self.cache.get(key)
        if cached is not MISS:
            _dbg(f"cache hit {key}")
            if cached:
                return FetchResult.success(cached)
            return FetchResult.failure(NO_ADDRESS, NOT_FOUND)

        if not self.rpc_urls:
            return FetchResult.failure("ENS resolution failed: all RPC endpoints unreachable", NETWORK)

        last = len(self.rpc_urls) - 1
        for i, rpc in enumerate(self.rpc_urls):
            try:
                address = await asyncio.wait_for(
                    asyncio.to_thread(self._lookup, rpc, key), timeout=self.timeout)
            except asyncio.TimeoutError:
                _dbg(f"{key} via rpc#{i} timed out")
                if i == last:
                    return FetchResult.failure("ENS resolution failed: ENS resolution timed out", TIMEOUT)
                continue
            except Exception as e:
                _dbg(f"{key} via rpc#{i} failed: {e}")
                if i == last:
                    return FetchResult.failure(f"ENS resolution failed: {e}", NETWORK)
                continue

            resolved = str(address) if address else None
            self.cache.set(key, resolved)
            if not resolved:
                return FetchResult.failure(NO_ADDRESS, NOT_FOUND)
            _dbg(f"{key} -> {resolved[:10]}…")
            return FetchResult.success(resolved)

        return FetchResult.failure("ENS resolution failed: all RPC endpoints unreachable", NETWORK)


__all__ = ["NameResolver", "NO_ADDRESS"]
