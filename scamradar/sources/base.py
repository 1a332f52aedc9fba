# scamradar/sources/base.py
# Shared plumbing for external evidence sources: result contract, time-boxed
# requests calls, failure classification.
from __future__ import annotations

import asyncio
import functools
import logging
from dataclasses import dataclass
from typing import Any, Generic, Mapping, Optional, TypeVar

import requests

from scamradar.utils.cache import TTLCache

_log = logging.getLogger(__name__)

T = TypeVar("T")

TIMEOUT = "timeout"
MALFORMED = "malformed"
STATUS = "status"
NETWORK = "network"
NOT_FOUND = "not_found"


@dataclass(frozen=True)
class FetchResult(Generic[T]):
    """Uniform adapter result: exactly one of ``data``/``error`` is set."""
    data: Optional[T] = None
    error: Optional[str] = None
    kind: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, data: T) -> "FetchResult[T]":
        return cls(data=data)

    @classmethod
    def failure(cls, error: str, kind: str) -> "FetchResult[T]":
        return cls(error=error, kind=kind)


def short(value: str, keep: int = 10) -> str:
    """Shorten an address/URL for debug logs."""
    return value if len(value) <= keep * 2 else f"{value[:keep]}…{value[-4:]}"


class HttpSource:
    """
    Base class for one external source. Owns its cache (injected, or none when
    ``cached`` is False) and a requests session. Blocking calls run in a worker thread and are bounded
    by ``asyncio.wait_for``; nothing here retries.
    """

    label = "HTTP"
    cached = True

    def __init__(self, session: Optional[requests.Session] = None,
                 cache: Optional[TTLCache] = None, timeout: float = 10.0):
        self.session = session if session is not None else requests.Session()
        if cache is None and self.cached:
            cache = TTLCache(ttl_seconds=60)
        self.cache = cache
        self.timeout = float(timeout)

    def _dbg(self, msg: str) -> None:
        _log.debug("[%s] %s", self.label.lower(), msg)

    async def _send(self, method: str, url: str, *, params: Optional[Mapping[str, Any]] = None,
                    headers: Optional[Mapping[str, str]] = None, timeout: Optional[float] = None,
                    allow_redirects: bool = True, stream: bool = False) -> FetchResult[requests.Response]:
        t = self.timeout if timeout is None else float(timeout)
        call = functools.partial(
            self.session.request, method, url,
            params=params, headers=headers, timeout=t,
            allow_redirects=allow_redirects, stream=stream,
        )
        try:
            resp = await asyncio.wait_for(asyncio.to_thread(call), timeout=t)
        except (asyncio.TimeoutError, requests.Timeout):
            self._dbg(f"{method} {short(url, 32)} -> timeout after {t}s")
            return FetchResult.failure(f"{self.label} API request timed out", TIMEOUT)
        except requests.RequestException as e:
            self._dbg(f"{method} {short(url, 32)} -> network error {e}")
            return FetchResult.failure(f"{self.label} API error: {e}", NETWORK)
        except Exception as e:
            _log.warning("[%s] unexpected transport failure: %s", self.label.lower(), e)
            return FetchResult.failure(f"{self.label} API error: {e}", NETWORK)
        return FetchResult.success(resp)

    def _decode(self, resp: requests.Response) -> FetchResult[Any]:
        if not resp.ok:
            return FetchResult.failure(f"{self.label} API returned {resp.status_code}", STATUS)
        try:
            return FetchResult.success(resp.json())
        except ValueError:
            return FetchResult.failure(f"{self.label} API returned malformed JSON", MALFORMED)

    async def _get_json(self, url: str, *, params: Optional[Mapping[str, Any]] = None,
                        timeout: Optional[float] = None) -> FetchResult[Any]:
        sent = await self._send("GET", url, params=params, timeout=timeout)
        if not sent.ok:
            return FetchResult.failure(sent.error, sent.kind)
        return self._decode(sent.data)


__all__ = [
    "FetchResult", "HttpSource", "short",
    "TIMEOUT", "MALFORMED", "STATUS", "NETWORK", "NOT_FOUND",
]
