# scamradar/sources/govlists.py
# Regulator scam-domain lists (ASIC MoneySmart, AMF France). Each list is
# fetched whole, indexed by domain and cached as one snapshot. A failed
# refresh serves the last good snapshot.
from __future__ import annotations

import csv
import io
import re
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from scamradar.sources.base import MALFORMED, FetchResult, HttpSource
from scamradar.utils.cache import MISS
from scamradar.utils.concurrency import settle_all

ASIC_SOURCE = "ASIC MoneySmart (Australia)"
AMF_SOURCE = "AMF France"

_SNAPSHOT_KEY = "snapshot"


def normalize_domain(raw: str) -> str:
    """Strip scheme, ``www.``, path/query/fragment and trailing dots; lowercase."""
    d = (raw or "").strip().lower()
    d = re.sub(r"^https?://", "", d)
    d = re.sub(r"^www\.", "", d)
    d = d.split("/")[0].split("?")[0].split("#")[0]
    return d.rstrip(".")


def is_domain_like(value: str) -> bool:
    return "." in value and " " not in value and "@" not in value


def parse_semicolon_csv(raw: str) -> List[List[str]]:
    """Split a ``;``-delimited document into trimmed cells; BOM and blank lines dropped."""
    text = raw[1:] if raw.startswith("\ufeff") else raw
    rows = csv.reader(io.StringIO(text, newline=""), delimiter=";")
    return [[cell.strip() for cell in row] for row in rows if any(cell.strip() for cell in row)]


@dataclass(frozen=True)
class ListedEntity:
    name: str
    category: str


@dataclass
class DomainSnapshot:
    domains: Dict[str, ListedEntity] = field(default_factory=dict)
    fetched_at: float = 0.0

    def __contains__(self, domain: str) -> bool:
        return domain in self.domains

    def lookup(self, domain: str) -> Optional[ListedEntity]:
        return self.domains.get(domain)


@dataclass(frozen=True)
class GovListCheck:
    found: bool = False
    source: Optional[str] = None
    entity_name: Optional[str] = None
    category: Optional[str] = None
    error: Optional[str] = None


class DomainListSource(HttpSource):
    """One regulator list. Subclasses parse the response body into a snapshot."""

    source_name = ""

    def __init__(self, url: str, clock: Callable[[], float] = time.time, **kw):
        super().__init__(**kw)
        self.url = url
        self.clock = clock
        self._last_good: Optional[DomainSnapshot] = None

    def parse(self, resp) -> DomainSnapshot:
        raise NotImplementedError

    async def snapshot(self) -> FetchResult[DomainSnapshot]:
        cached = self.cache.get(_SNAPSHOT_KEY)
        if cached is not MISS:
            return FetchResult.success(cached)

        sent = await self._send("GET", self.url)
        error: Optional[Tuple[str, str]] = None
        if not sent.ok:
            error = (sent.error, sent.kind)
        elif not sent.data.ok:
            error = (f"{self.label} API returned {sent.data.status_code}", "status")
        else:
            try:
                snap = self.parse(sent.data)
            except (ValueError, TypeError, AttributeError) as e:
                error = (f"{self.label} list could not be parsed: {e}", MALFORMED)
            else:
                snap.fetched_at = self.clock()
                self.cache.set(_SNAPSHOT_KEY, snap)
                self._last_good = snap
                self._dbg(f"loaded {len(snap.domains)} domains")
                return FetchResult.success(snap)

        if self._last_good is not None:
            self._dbg(f"refresh failed ({error[0]}); serving stale snapshot")
            return FetchResult.success(self._last_good)
        return FetchResult.failure(error[0], error[1])


class AsicList(DomainListSource):
    label = "ASIC"
    source_name = ASIC_SOURCE

    def parse(self, resp) -> DomainSnapshot:
        entries = resp.json()
        if not isinstance(entries, list):
            raise ValueError("expected a JSON array")
        snap = DomainSnapshot()
        for entry in entries:
            if not isinstance(entry, dict):
                continue
            name = entry.get("name") or "Unknown entity"
            categories = entry.get("categories") or []
            category = ", ".join(c for c in categories if c) or "Scam"
            websites = entry.get("websites")
            if not isinstance(websites, list):
                continue
            for site in websites:
                if not site:
                    continue
                domain = normalize_domain(str(site))
                if domain and is_domain_like(domain):
                    snap.domains.setdefault(domain, ListedEntity(name, category))
        return snap


class AmfList(DomainListSource):
    label = "AMF"
    source_name = AMF_SOURCE

    def parse(self, resp) -> DomainSnapshot:
        rows = parse_semicolon_csv(resp.content.decode("utf-8", errors="replace"))
        header = [h.lower() for h in (rows[0] if rows else [])]
        nom_idx = header.index("nom") if "nom" in header else -1
        cat_idx = next((i for i, h in enumerate(header) if h in ("catégorie", "categorie")), -1)

        snap = DomainSnapshot()
        for row in rows[1:]:
            cell = row[nom_idx] if 0 <= nom_idx < len(row) else (row[0] if row else "")
            nom = cell.strip()
            if not nom or not is_domain_like(nom):
                continue
            domain = normalize_domain(nom)
            if not domain or domain in snap.domains:
                continue
            category = ""
            if 0 <= cat_idx < len(row):
                category = row[cat_idx].strip()
            snap.domains[domain] = ListedEntity(domain, category or "Financial fraud")
        return snap


class RegulatoryLists:
    """Checks a domain against every regulator list, queried concurrently."""

    def __init__(self, asic: AsicList, amf: AmfList):
        self.lists = [asic, amf]

    async def check(self, domain: str) -> GovListCheck:
        target = normalize_domain(domain)
        outcomes = await settle_all(*(lst.snapshot() for lst in self.lists))

        failed = 0
        for lst, outcome in zip(self.lists, outcomes):
            res: Any = outcome.value if outcome.ok else None
            if res is None or not res.ok:
                failed += 1
                continue
            entity = res.data.lookup(target)
            if entity is not None:
                return GovListCheck(found=True, source=lst.source_name,
                                    entity_name=entity.name or None,
                                    category=entity.category or None)

        if failed == len(self.lists):
            return GovListCheck(error="Government databases unavailable")
        return GovListCheck()


__all__ = [
    "ASIC_SOURCE", "AMF_SOURCE",
    "normalize_domain", "is_domain_like", "parse_semicolon_csv",
    "ListedEntity", "DomainSnapshot", "GovListCheck",
    "DomainListSource", "AsicList", "AmfList", "RegulatoryLists",
]
