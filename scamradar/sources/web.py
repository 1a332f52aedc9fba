# scamradar/sources/web.py
# Reachability probe for a URL: follows redirects by hand so every hop can be
# inspected, and refuses hops that leave HTTP(S), target a private/reserved
# host, or loop back.
from __future__ import annotations

import asyncio
import functools
from dataclasses import dataclass
from typing import Optional, Set
from urllib.parse import urljoin, urlsplit

import requests

from scamradar.sources.base import HttpSource, short
from scamradar.utils.netguard import is_private_or_reserved_host

BROWSER_HEADERS = {
    "User-Agent": ("Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
                   "(KHTML, like Gecko) Chrome/120 Safari/537.36"),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}

# hop refusal reasons
NON_HTTP = "non_http"
PRIVATE_TARGET = "private_target"
LOOP = "loop"

# unreachable classification
ERR_TIMEOUT = "timeout"
ERR_DNS = "dns"
ERR_UNKNOWN = "unknown"

_DNS_MARKERS = (
    "NameResolutionError", "Name or service not known", "nodename nor servname",
    "getaddrinfo failed", "Temporary failure in name resolution", "No address associated",
)


@dataclass
class ProbeResult:
    reachable: bool
    status_code: Optional[int] = None
    final_url: Optional[str] = None
    redirect_count: int = 0
    halted: Optional[str] = None        # NON_HTTP | PRIVATE_TARGET | LOOP
    halted_detail: Optional[str] = None
    error_type: Optional[str] = None    # ERR_* when unreachable


class _Unreachable(Exception):
    def __init__(self, error_type: str):
        super().__init__(error_type)
        self.error_type = error_type


def _classify(exc: BaseException) -> str:
    if isinstance(exc, (asyncio.TimeoutError, requests.Timeout)):
        return ERR_TIMEOUT
    if isinstance(exc, requests.ConnectionError):
        text = repr(exc)
        if any(m in text for m in _DNS_MARKERS):
            return ERR_DNS
    return ERR_UNKNOWN


class WebProbe(HttpSource):
    label = "URL probe"
    cached = False

    def __init__(self, max_redirects: int = 10, **kw):
        super().__init__(**kw)
        self.max_redirects = max_redirects

    def _get(self, url: str) -> requests.Response:
        return self.session.request("GET", url, headers=BROWSER_HEADERS, timeout=self.timeout,
                                    allow_redirects=False, stream=True)

    async def _walk(self, url: str) -> ProbeResult:
        current = url
        visited: Set[str] = {current}
        redirects = 0
        halted = halted_detail = None
        while True:
            try:
                resp = await asyncio.to_thread(functools.partial(self._get, current))
            except requests.RequestException as e:
                raise _Unreachable(_classify(e)) from e
            status = resp.status_code
            resp.close()
            if not (300 <= status < 400):
                break
            location = resp.headers.get("location")
            if not location:
                break

            target = urljoin(current, location)
            parts = urlsplit(target)
            if parts.scheme not in ("http", "https"):
                halted, halted_detail = NON_HTTP, f"{parts.scheme}:"
                break
            if is_private_or_reserved_host(parts.hostname or ""):
                halted, halted_detail = PRIVATE_TARGET, parts.hostname
                break
            if target in visited:
                halted = LOOP
                break

            current = target
            visited.add(current)
            redirects += 1
            self._dbg(f"hop {redirects} -> {short(current, 24)}")
            if redirects >= self.max_redirects:
                break

        return ProbeResult(reachable=True, status_code=status, final_url=current,
                           redirect_count=redirects, halted=halted, halted_detail=halted_detail)

    async def probe(self, url: str) -> ProbeResult:
        """
        One time budget covers the whole redirect walk. Never raises; an
        unreachable target comes back with ``reachable=False``.
        """
        try:
            return await asyncio.wait_for(self._walk(url), timeout=self.timeout)
        except asyncio.TimeoutError:
            self._dbg(f"{short(url, 24)} -> timeout after {self.timeout:g}s")
            return ProbeResult(reachable=False, error_type=ERR_TIMEOUT)
        except _Unreachable as e:
            self._dbg(f"{short(url, 24)} -> unreachable ({e.error_type})")
            return ProbeResult(reachable=False, error_type=e.error_type)
        except (requests.RequestException, ValueError, OSError) as e:
            self._dbg(f"{short(url, 24)} -> {e}")
            return ProbeResult(reachable=False, error_type=ERR_UNKNOWN)


__all__ = [
    "BROWSER_HEADERS", "ProbeResult", "WebProbe",
    "NON_HTTP", "PRIVATE_TARGET", "LOOP", "ERR_TIMEOUT", "ERR_DNS", "ERR_UNKNOWN",
]
