"""Shared fakes: a requests-like session routed by URL prefix and a web3 stand-in."""

import json
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

import pytest
import requests

from scamradar.core.dispatch import unsupported_chain_report
from scamradar.settings import Settings
from scamradar.sources.registry import Sources

DEX = "https://api.dexscreener.com/latest/dex/tokens"
GOPLUS = "https://api.gopluslabs.io/api/v1"
SOURCIFY = "https://sourcify.dev/server/v2/contract"
ASIC = "https://moneysmart.gov.au/api/investor-alert-list"
AMF = "https://www.amf-france.org/sites/default/files/listes-noires/liste-noire.csv"

TOKEN = "0x6b175474e89094c44da98b954eedeac495271d0f"
TX = "0x" + "ab" * 32
BTC = "1A1zP1eP5QGefi2DMPTfTL5SLmv7DivfNa"
BTC_BECH32 = "bc1qw508d6qejxtdg4c5r3zarvary0c5xw7kv8f3t4"
SOL = "So11111111111111111111111111111111111111112"

_NO_JSON = object()


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = _NO_JSON,
                 content: Optional[bytes] = None, headers: Optional[Dict[str, str]] = None):
        self.status_code = status_code
        self._payload = payload
        if content is None and payload is not _NO_JSON:
            content = json.dumps(payload).encode("utf-8")
        self.content = content or b""
        self.headers = headers or {}
        self.closed = False

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def json(self) -> Any:
        if self._payload is _NO_JSON:
            raise ValueError("not JSON")
        return self._payload

    def close(self) -> None:
        self.closed = True


Route = Union[FakeResponse, Exception, Callable[..., Any]]


class FakeSession:
    """Longest matching URL prefix wins; unmatched URLs raise ConnectionError."""

    def __init__(self, routes: Optional[Dict[str, Route]] = None):
        self.routes: Dict[str, Route] = dict(routes or {})
        self.calls: List[Tuple[str, str, Dict[str, Any]]] = []

    def route(self, prefix: str, handler: Route) -> None:
        self.routes[prefix] = handler

    def request(self, method: str, url: str, **kw: Any) -> FakeResponse:
        self.calls.append((method, url, kw))
        matches = [p for p in self.routes if url.startswith(p)]
        if not matches:
            raise requests.ConnectionError(f"no route for {url}")
        handler = self.routes[max(matches, key=len)]
        if isinstance(handler, Exception):
            raise handler
        if callable(handler) and not isinstance(handler, FakeResponse):
            return handler(method, url, **kw)
        return handler

    def count(self, prefix: str) -> int:
        return sum(1 for _m, url, _kw in self.calls if url.startswith(prefix))


class FakeEns:
    def __init__(self, names: Dict[str, Any]):
        self.names = names

    def address(self, name: str) -> Optional[str]:
        value = self.names.get(name)
        if isinstance(value, Exception):
            raise value
        return value


class FakeW3:
    def __init__(self, names: Dict[str, Any]):
        self.ens = FakeEns(names)


class FakeW3Factory:
    """Per-RPC name tables; records which RPCs were asked."""

    def __init__(self, per_rpc: Optional[Dict[str, Dict[str, Any]]] = None):
        self.per_rpc = per_rpc or {}
        self.calls: List[str] = []

    def __call__(self, rpc_url: str, timeout: float = 8.0) -> FakeW3:
        self.calls.append(rpc_url)
        return FakeW3(self.per_rpc.get(rpc_url, {}))


def goplus(result: Any, code: int = 1) -> FakeResponse:
    return FakeResponse(200, {"code": code, "message": "OK", "result": result})


def dex_pair(**overrides: Any) -> Dict[str, Any]:
    pair = {
        "chainId": "ethereum",
        "dexId": "uniswap",
        "pairAddress": "0xpair",
        "url": "https://dexscreener.com/ethereum/0xpair",
        "baseToken": {"name": "Dai Stablecoin", "symbol": "DAI", "address": TOKEN},
        "priceUsd": "1.000",
        "priceChange": {"h24": 0.1},
        "liquidity": {"usd": 5_000_000},
        "fdv": 5_000_000_000,
        "volume": {"h24": 2_000_000},
        "pairCreatedAt": 1_500_000_000_000,
    }
    pair.update(overrides)
    return pair


@pytest.fixture
def session() -> FakeSession:
    s = FakeSession()
    # regulator lists answer empty by default
    s.route(ASIC, FakeResponse(200, []))
    s.route(AMF, FakeResponse(200, content="\ufeffnom;catégorie\n".encode("utf-8")))
    return s


@pytest.fixture
def w3_factory() -> FakeW3Factory:
    return FakeW3Factory()


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def sources(session: FakeSession, w3_factory: FakeW3Factory, settings: Settings) -> Sources:
    return Sources.from_settings(settings, session=session, w3_factory=w3_factory)


class FakeEngine:
    """Stands in for ScanEngine at the HTTP and command-line edges."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.seen: List[Tuple[str, Optional[str]]] = []

    async def scan(self, raw: str, kind: Optional[str] = None):
        self.seen.append((raw, kind))
        if self.fail:
            raise RuntimeError("engine down")
        return unsupported_chain_report(raw)

    async def scan_many(self, inputs, kind: Optional[str] = None):
        return [await self.scan(v, kind) for v in inputs]
