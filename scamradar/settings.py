# scamradar/settings.py
# Environment-driven settings. Entry points call load_dotenv() before from_env().
from __future__ import annotations

import os
from dataclasses import dataclass


def _env_str(name: str, default: str) -> str:
    value = (os.getenv(name) or "").strip().rstrip("\r")
    return value or default


def _env_float(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def _env_int(name: str, default: int) -> int:
    return int(_env_float(name, default))


@dataclass(frozen=True)
class Settings:
    # data sources
    dexscreener_base: str = "https://api.dexscreener.com/latest/dex/tokens"
    goplus_base: str = "https://api.gopluslabs.io/api/v1"
    sourcify_base: str = "https://sourcify.dev/server/v2/contract"
    asic_list_url: str = "https://moneysmart.gov.au/api/investor-alert-list"
    amf_list_url: str = "https://www.amf-france.org/sites/default/files/listes-noires/liste-noire.csv"
    ens_primary_rpc: str = "https://eth.llamarpc.com"
    ens_fallback_rpc: str = "https://cloudflare-eth.com"

    # timeouts (seconds)
    market_timeout: float = 10.0
    wallet_market_timeout: float = 5.0
    security_timeout: float = 8.0
    verification_timeout: float = 5.0
    govlist_timeout: float = 15.0
    names_timeout: float = 8.0
    explorer_timeout: float = 5.0
    url_probe_timeout: float = 6.0

    # cache TTLs (seconds) and capacity
    market_ttl: float = 60.0
    security_ttl: float = 300.0
    verification_ttl: float = 3600.0
    govlist_ttl: float = 12 * 3600.0
    names_ttl: float = 600.0
    explorer_ttl: float = 600.0
    cache_max_entries: int = 500

    # HTTP surface
    rate_limit: int = 30
    rate_window: float = 60.0
    rate_max_clients: int = 10_000
    max_input: int = 2000

    @classmethod
    def from_env(cls) -> "Settings":
        d = cls()
        return cls(
            dexscreener_base=_env_str("DEXSCREENER_BASE_URL", d.dexscreener_base),
            goplus_base=_env_str("GOPLUS_BASE_URL", d.goplus_base),
            sourcify_base=_env_str("SOURCIFY_BASE_URL", d.sourcify_base),
            asic_list_url=_env_str("ASIC_LIST_URL", d.asic_list_url),
            amf_list_url=_env_str("AMF_LIST_URL", d.amf_list_url),
            ens_primary_rpc=_env_str("ENS_PRIMARY_RPC", d.ens_primary_rpc),
            ens_fallback_rpc=_env_str("ENS_FALLBACK_RPC", d.ens_fallback_rpc),
            market_timeout=_env_float("MARKET_TIMEOUT", d.market_timeout),
            wallet_market_timeout=_env_float("WALLET_MARKET_TIMEOUT", d.wallet_market_timeout),
            security_timeout=_env_float("SECURITY_TIMEOUT", d.security_timeout),
            verification_timeout=_env_float("VERIFICATION_TIMEOUT", d.verification_timeout),
            govlist_timeout=_env_float("GOVLIST_TIMEOUT", d.govlist_timeout),
            names_timeout=_env_float("NAMES_TIMEOUT", d.names_timeout),
            explorer_timeout=_env_float("EXPLORER_TIMEOUT", d.explorer_timeout),
            url_probe_timeout=_env_float("URL_PROBE_TIMEOUT", d.url_probe_timeout),
            market_ttl=_env_float("MARKET_CACHE_TTL", d.market_ttl),
            security_ttl=_env_float("SECURITY_CACHE_TTL", d.security_ttl),
            verification_ttl=_env_float("VERIFICATION_CACHE_TTL", d.verification_ttl),
            govlist_ttl=_env_float("GOVLIST_CACHE_TTL", d.govlist_ttl),
            names_ttl=_env_float("NAMES_CACHE_TTL", d.names_ttl),
            explorer_ttl=_env_float("EXPLORER_CACHE_TTL", d.explorer_ttl),
            cache_max_entries=_env_int("CACHE_MAX_ENTRIES", d.cache_max_entries),
            rate_limit=_env_int("SCAN_RATE_LIMIT", d.rate_limit),
            rate_window=_env_float("SCAN_RATE_WINDOW", d.rate_window),
            rate_max_clients=_env_int("SCAN_RATE_MAX_CLIENTS", d.rate_max_clients),
            max_input=_env_int("SCAN_MAX_INPUT", d.max_input),
        )


__all__ = ["Settings"]
