# scamradar/sources/registry.py
# Builds every adapter from Settings. Each adapter gets its own cache; this is
# the only place cache lifetimes are decided.
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

import requests

from scamradar.chains import get_w3
from scamradar.settings import Settings
from scamradar.sources.explorer import ExplorerProbe
from scamradar.sources.govlists import AmfList, AsicList, RegulatoryLists
from scamradar.sources.market import MarketData
from scamradar.sources.names import NameResolver
from scamradar.sources.security import SecurityLabels
from scamradar.sources.verification import SourceVerification
from scamradar.sources.web import WebProbe
from scamradar.utils.cache import TTLCache

_log = logging.getLogger(__name__)


@dataclass
class Sources:
    market: MarketData
    security: SecurityLabels
    verification: SourceVerification
    govlists: RegulatoryLists
    names: NameResolver
    explorer: ExplorerProbe
    web: WebProbe
    settings: Settings

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None,
                      session: Optional[requests.Session] = None,
                      w3_factory: Callable = get_w3) -> "Sources":
        s = settings or Settings.from_env()
        http = session if session is not None else requests.Session()
        cap = s.cache_max_entries

        def cache(ttl: float) -> TTLCache:
            return TTLCache(ttl_seconds=ttl, max_entries=cap)

        _log.debug("[sources] building adapters (cache cap=%d)", cap)
        return cls(
            market=MarketData(s.dexscreener_base, session=http, cache=cache(s.market_ttl),
                              timeout=s.market_timeout),
            security=SecurityLabels(s.goplus_base, session=http, cache=cache(s.security_ttl),
                                    timeout=s.security_timeout),
            verification=SourceVerification(s.sourcify_base, session=http,
                                            cache=cache(s.verification_ttl),
                                            timeout=s.verification_timeout),
            govlists=RegulatoryLists(
                AsicList(s.asic_list_url, session=http, cache=cache(s.govlist_ttl),
                         timeout=s.govlist_timeout),
                AmfList(s.amf_list_url, session=http, cache=cache(s.govlist_ttl),
                        timeout=s.govlist_timeout),
            ),
            names=NameResolver([s.ens_primary_rpc, s.ens_fallback_rpc], cache=cache(s.names_ttl),
                               timeout=s.names_timeout, w3_factory=w3_factory),
            explorer=ExplorerProbe(session=http, cache=cache(s.explorer_ttl),
                                   timeout=s.explorer_timeout),
            web=WebProbe(session=http, timeout=s.url_probe_timeout),
            settings=s,
        )

    def clear_caches(self) -> None:
        for c in (self.market.cache, self.security.cache, self.verification.cache,
                  self.names.cache, self.explorer.cache,
                  *(lst.cache for lst in self.govlists.lists)):
            c.clear()


__all__ = ["Sources"]
