# scamradar/scanners/url.py
# Web address scan: structural heuristics, reachability probe (with redirect
# inspection and the private-network guard), phishing labels and regulator
# lists. The three network checks run concurrently.
from __future__ import annotations

import re
from typing import List, Optional, Tuple
from urllib.parse import urlsplit

from scamradar.core.report import (
    CheckItem, Confidence, InputType, RiskLevel, SafetyReport, Severity, UrlMetadata,
)
from scamradar.core.score import apply_floor
from scamradar.reference import (
    MILD_KEYWORDS, SCAM_KEYWORDS, SPOOFED_BRANDS, SUSPICIOUS_TLDS, TRUSTED_DOMAINS, URL_THRESHOLDS,
)
from scamradar.scanners.common import Evidence, build_report, dbg
from scamradar.sources import web
from scamradar.utils.concurrency import Outcome, settle_all
from scamradar.utils.netguard import is_private_or_reserved_host, parse_ipv4

_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)
_IP_URL_RE = re.compile(r"^https?://\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3}", re.IGNORECASE)
_NON_ASCII_RE = re.compile(r"[^\x00-\x7f]")


def normalize_url(raw: str) -> str:
    url = raw.strip()
    return url if _SCHEME_RE.match(url) else "https://" + url


def is_trusted(domain: str) -> bool:
    return any(domain == td or domain.endswith("." + td) for td in TRUSTED_DOMAINS)


def is_same_domain(a: str, b: str) -> bool:
    a, b = a.removeprefix("www."), b.removeprefix("www.")
    return a == b or a.endswith("." + b) or b.endswith("." + a)


def _split(url: str) -> Tuple[str, str]:
    """(hostname, scheme); hostname falls back to the lowercased input."""
    try:
        parts = urlsplit(url)
        return (parts.hostname or "").lower(), parts.scheme
    except ValueError:
        return url.lower(), ""


def _structural_checks(ev: Evidence, checks: List[CheckItem], domain: str, url: str) -> None:
    """Lexical heuristics on the domain and full URL; skipped for trusted domains."""
    non_ascii = bool(_NON_ASCII_RE.search(domain))
    punycode = "xn--" in domain
    checks.append(CheckItem(label="Unicode/homoglyph characters", passed=not (non_ascii or punycode),
                            detail="Suspicious characters detected" if non_ascii or punycode
                            else "No suspicious characters"))
    if non_ascii:
        ev.add("Domain contains non-ASCII (unicode) characters — possible homoglyph/punycode attack",
               Severity.HIGH)
        ev.recommend("Homoglyph attacks use lookalike characters to impersonate legitimate sites")
    if punycode:
        ev.add("Domain uses punycode encoding (xn--) — may be disguising unicode characters", Severity.HIGH)

    # brand names in the subdomain of someone else's registered domain
    labels = domain.split(".")
    spoofed = False
    if len(labels) >= 3:
        sub = ".".join(labels[:-2])
        registered = ".".join(labels[-2:])
        for brand in SPOOFED_BRANDS:
            if brand in sub and domain not in TRUSTED_DOMAINS and registered not in TRUSTED_DOMAINS:
                spoofed = True
                ev.add(f'Subdomain impersonates "{brand}" — the actual domain is {registered}', Severity.HIGH)
                ev.recommend("Check the actual domain name, not just the subdomain — scammers use "
                             "subdomains to mimic trusted brands")
                break
    checks.append(CheckItem(label="Subdomain spoofing", passed=not spoofed,
                            detail="Brand impersonation in subdomain" if spoofed else "No subdomain tricks"))

    tld = next((t for t in SUSPICIOUS_TLDS if domain.endswith(t)), None)
    if tld:
        ev.add(f"Suspicious domain extension: {tld}", Severity.MEDIUM)
        ev.recommend("Be cautious with uncommon domain extensions often used in scams")
    checks.append(CheckItem(label="Domain extension (TLD)", passed=tld is None,
                            detail="Suspicious TLD detected" if tld else "Standard domain extension"))

    without_tld = ".".join(labels[:-1])
    too_long = len(without_tld) > URL_THRESHOLDS["max_domain_length"]
    checks.append(CheckItem(label="Domain length", passed=not too_long,
                            detail=f"{len(without_tld)} characters"))
    if too_long:
        ev.add("Unusually long domain name", Severity.MEDIUM)

    hyphens = domain.count("-")
    many_hyphens = hyphens >= URL_THRESHOLDS["max_hyphens"]
    checks.append(CheckItem(label="Hyphen count", passed=not many_hyphens,
                            detail=f"{hyphens} hyphen{'' if hyphens == 1 else 's'}"))
    if many_hyphens:
        ev.add(f"Domain contains {hyphens} hyphens — common in phishing URLs", Severity.MEDIUM)

    digits = sum(ch.isdigit() for ch in without_tld)
    many_digits = digits > URL_THRESHOLDS["max_numbers"]
    checks.append(CheckItem(label="Numeric characters", passed=not many_digits,
                            detail=f"{digits} number{'' if digits == 1 else 's'} in domain"))
    if many_digits:
        ev.add("Domain contains many numbers — common in scam URLs", Severity.LOW)

    lowered = url.lower()
    found = [kw for kw in SCAM_KEYWORDS if kw in lowered]
    strong = [kw for kw in found if kw not in MILD_KEYWORDS]
    mild = [kw for kw in found if kw in MILD_KEYWORDS]
    mild_in_path_only = bool(mild) and not strong and not any(kw in domain for kw in mild)
    listed = ", ".join(found)
    if not found:
        detail = "No scam keywords"
    elif mild_in_path_only:
        detail = f"Found in path (benign): {listed}"
    else:
        detail = f"Found: {listed}"
    checks.append(CheckItem(label="Scam keywords", passed=not found or mild_in_path_only, detail=detail))
    if found and not mild_in_path_only:
        ev.add(f"URL contains scam-associated keywords: {listed}",
               Severity.HIGH if len(found) >= 2 else Severity.MEDIUM)
        ev.recommend("URLs with these keywords are frequently associated with phishing attacks")
    elif found:
        ev.add(f"URL path contains crypto-related keywords: {listed}", Severity.INFO, 0)


def _redirect_findings(ev: Evidence, probe: web.ProbeResult, start_host: str) -> None:
    if probe.halted == web.NON_HTTP:
        ev.add(f"URL redirects to non-HTTP scheme ({probe.halted_detail}) — blocked for safety.",
               Severity.DANGER, 50)
    elif probe.halted == web.PRIVATE_TARGET:
        ev.add("URL redirects to a private or reserved IP address — blocked for safety.", Severity.DANGER, 50)
    elif probe.halted == web.LOOP:
        ev.add("URL redirect loop detected — the URL redirects back to a previously visited address.",
               Severity.MEDIUM, 15)

    if probe.redirect_count <= 0:
        return
    final_host, _ = _split(probe.final_url or "")
    if is_same_domain(start_host, final_host):
        ev.add("URL redirects to a different path on the same domain (common behavior).", Severity.INFO, 0)
    else:
        if "." + final_host.rsplit(".", 1)[-1] in SUSPICIOUS_TLDS:
            ev.add(f"URL redirects to a different domain with suspicious TLD ({final_host}) — high phishing risk.",
                   Severity.DANGER, 50)
        else:
            ev.add("URL redirects to a different domain — phishing risk.", Severity.DANGER, 30)
        ev.recommend("Be cautious with redirecting URLs — verify the final destination")
    if probe.redirect_count >= 3:
        ev.add("URL performs multiple redirects (may indicate tracking or obfuscation).", Severity.MEDIUM, 10)


def _unreachable_finding(ev: Evidence, error_type: Optional[str], trusted: bool, seconds: float) -> None:
    if error_type == web.ERR_TIMEOUT:
        base, tail = f"URL unreachable (timeout after {seconds:g}s)", " — cannot verify safety"
    elif error_type == web.ERR_DNS:
        base, tail = "URL unreachable (DNS resolution failed)", " — domain may not exist"
    else:
        base, tail = "URL unreachable (connection error)", " — cannot verify safety"
    # trusted domains are usually just bot-protected
    if trusted:
        ev.add(base, Severity.INFO, 0)
    else:
        ev.add(base + tail, Severity.HIGH, 31)
    ev.recommend("Could not verify this URL — exercise extra caution")


async def _skip():
    return None


async def scan_url(sources, raw: str) -> SafetyReport:
    ev = Evidence()
    checks: List[CheckItem] = []
    url = normalize_url(raw)
    domain, scheme = _split(url)
    meta = UrlMetadata(hostname=domain or None, protocol=scheme or None)
    probe_timeout = sources.web.timeout

    # 1) HTTPS
    https = url.lower().startswith("https://")
    meta.is_https = https
    checks.append(CheckItem(label="HTTPS encryption", passed=https,
                            detail="Connection is encrypted" if https else "Not encrypted"))
    if not https:
        ev.add("Site does not use HTTPS encryption", Severity.HIGH)
        ev.recommend("Avoid entering any personal information on non-HTTPS sites")

    # 2) Allow-list, then structural heuristics
    trusted = is_trusted(domain)
    if trusted:
        checks.append(CheckItem(label="Trusted domain", passed=True,
                                detail=f"{domain} is on the trusted allowlist"))
    else:
        _structural_checks(ev, checks, domain, url)

    # 3) Network checks, concurrently. Private/reserved targets are never probed.
    blocked = is_private_or_reserved_host(domain)
    probe_out, phish_out, gov_out = await settle_all(
        _skip() if blocked else sources.web.probe(url),
        _skip() if trusted else sources.security.phishing_site(url),
        _skip() if trusted else sources.govlists.check(domain),
    )

    # 4) Reachability
    if blocked:
        ev.add("URL points to a private or reserved IP address — blocked for safety.", Severity.DANGER, 50)
        checks.append(CheckItem(label="URL reachability", passed=False, detail="Blocked: private/reserved host"))
    else:
        probe = probe_out.value if probe_out.ok else web.ProbeResult(reachable=False, error_type=web.ERR_UNKNOWN)
        meta.url_reachable = probe.reachable
        if probe.reachable:
            meta.status_code = probe.status_code
            if probe.redirect_count > 0:
                meta.redirected_to = probe.final_url
                meta.final_url = probe.final_url
                meta.redirect_count = probe.redirect_count
            _redirect_findings(ev, probe, domain)

            status = probe.status_code or 0
            if status in (401, 403, 429):
                meta.error_type = "blocked"
                ev.add(f"URL reachable but blocked access (HTTP {status})", Severity.INFO, 5)
                ev.recommend(f"Server returned HTTP {status} — likely bot protection. "
                             "Try visiting manually in your browser.")
            elif status >= 400:
                ev.add(f"URL returned error status (HTTP {status})", Severity.MEDIUM)
        else:
            meta.error_type = probe.error_type
            _unreachable_finding(ev, probe.error_type, trusted, probe_timeout)

        passed = probe.reachable and not meta.error_type and (meta.status_code or 0) < 400
        if passed:
            detail = f"Responded with HTTP {meta.status_code}"
        elif meta.error_type == web.ERR_TIMEOUT:
            detail = f"Timeout after {probe_timeout:g}s"
        elif meta.error_type == web.ERR_DNS:
            detail = "DNS resolution failed"
        elif meta.error_type == "blocked":
            detail = f"Blocked (HTTP {meta.status_code})"
        elif meta.url_reachable:
            detail = f"HTTP {meta.status_code}"
        else:
            detail = "Unreachable"
        checks.append(CheckItem(label="URL reachability", passed=passed, detail=detail))

    # 5) Phishing labels
    if not trusted:
        _phishing(ev, checks, meta, phish_out)

    # 6) Regulator lists
    if not trusted:
        _regulators(ev, checks, meta, gov_out)

    # 7) Raw IP instead of a domain
    if not trusted:
        ip_url = bool(_IP_URL_RE.match(url)) or parse_ipv4(domain) is not None
        checks.append(CheckItem(label="Domain-based URL", passed=not ip_url,
                                detail="Uses IP address instead of domain" if ip_url
                                else "Uses a proper domain name"))
        if ip_url:
            ev.add("URL uses an IP address instead of a domain name", Severity.HIGH)
            ev.recommend("Legitimate sites rarely use raw IP addresses")

    if not ev.recommendations:
        ev.recommend("Always verify URLs before connecting your wallet")
    ev.recommend("Never enter your seed phrase on any website",
                 "Bookmark trusted sites to avoid phishing links")

    result = apply_floor(ev.score(), 5, "Baseline risk floor (no URL is truly zero-risk)")
    level = result.level
    ev.gov_cross_check(level)

    confidence, reason = _confidence(ev, checks, meta, trusted, https, domain)
    summary, next_step = _summary(level, meta, trusted, domain)
    dbg("url", f"{domain} -> {result.score} {level.value}")

    return build_report(InputType.URL, raw, result, ev,
                        confidence=confidence, confidence_reason=reason,
                        summary=summary, next_step=next_step, metadata=meta, checks=checks)


def _phishing(ev: Evidence, checks: List[CheckItem], meta: UrlMetadata, out: Outcome) -> None:
    res = out.value if out.ok else None
    if res is not None and res.ok:
        meta.go_plus_checked = True
        meta.go_plus_phishing = res.data
        if res.data:
            ev.add("URL flagged as phishing by GoPlus security database", Severity.DANGER, 60)
            checks.append(CheckItem(label="Phishing database (GoPlus)", passed=False, detail="Flagged as phishing"))
        else:
            ev.add("Not found in GoPlus phishing database", Severity.INFO, 0)
            checks.append(CheckItem(label="Phishing database (GoPlus)", passed=True,
                                    detail="Not in phishing database"))
    else:
        checks.append(CheckItem(label="Phishing database (GoPlus)", passed=True,
                                detail="Database check unavailable"))


def _regulators(ev: Evidence, checks: List[CheckItem], meta: UrlMetadata, out: Outcome) -> None:
    gov = out.value if out.ok else None
    if gov is not None and gov.found:
        meta.gov_checked = True
        if "ASIC" in (gov.source or ""):
            meta.gov_flagged_asic = True
        if "AMF" in (gov.source or ""):
            meta.gov_flagged_amf = True
        meta.gov_source = gov.source
        entity = f" (entity: {gov.entity_name})" if gov.entity_name else ""
        category = f" — category: {gov.category}" if gov.category else ""
        ev.add(f"Listed in {gov.source} government scam database{entity}{category}", Severity.HIGH)
        checks.append(CheckItem(label="Government databases (ASIC/AMF)", passed=False,
                                detail=f"Flagged by {gov.source}"))
    elif gov is not None and not gov.error:
        meta.gov_checked = True
        ev.add("Not found in ASIC or AMF government scam databases", Severity.INFO, 0)
        checks.append(CheckItem(label="Government databases (ASIC/AMF)", passed=True,
                                detail="Not in government scam databases"))
    else:
        checks.append(CheckItem(label="Government databases (ASIC/AMF)", passed=True,
                                detail="Database check unavailable"))


def _confidence(ev: Evidence, checks: List[CheckItem], meta: UrlMetadata,
                trusted: bool, https: bool, domain: str) -> Tuple[Confidence, str]:
    n = len(checks)
    if trusted:
        return Confidence.HIGH, f"Domain is on the trusted allowlist. {n} checks performed."

    warned = ev.has(Severity.MEDIUM, Severity.HIGH, Severity.DANGER)
    databases = bool(meta.go_plus_checked or meta.gov_checked)
    if meta.url_reachable is False:
        # structural checks alone are not live evidence
        confidence = Confidence.MEDIUM if databases and n >= 5 and len(ev.findings) >= 2 else Confidence.LOW
        reason = f"{n} structural checks performed, but the URL could not be reached for verification."
    elif meta.url_reachable is None:
        confidence = Confidence.MEDIUM if databases else Confidence.LOW
        reason = f"{n} checks performed. The URL was not probed because it targets a private network."
    elif meta.error_type == "blocked":
        confidence = Confidence.MEDIUM if n >= 5 else Confidence.LOW
        reason = f"{n} checks performed. Server blocked direct verification (HTTP {meta.status_code})."
    elif https and not warned:
        confidence = Confidence.HIGH
        reason = f"All {n} checks passed. URL is reachable and uses HTTPS."
    else:
        if n >= 5:
            confidence = Confidence.HIGH if len(ev.findings) >= 2 else Confidence.MEDIUM
        else:
            confidence = Confidence.LOW
        reason = (f"{n} checks performed with {len(ev.findings)} signals detected. URL was reachable."
                  if confidence == Confidence.HIGH else f"{n} checks performed.")
    if meta.gov_checked:
        reason += " Government regulatory databases checked."
    return confidence, reason


def _summary(level: RiskLevel, meta: UrlMetadata, trusted: bool, domain: str) -> Tuple[str, str]:
    if trusted:
        summary = f"This is a known trusted domain ({domain})."
    elif meta.url_reachable is False:
        summary = f"{domain} could not be reached — safety cannot be verified. Exercise caution."
    elif level == RiskLevel.SAFE and meta.error_type == "blocked":
        summary = (f"Site appears structurally safe but blocks automated verification ({meta.status_code}). "
                   "Manual verification recommended.")
    elif level == RiskLevel.SAFE:
        summary = "No suspicious risk signals detected."
    elif level == RiskLevel.SUSPICIOUS:
        summary = "Some suspicious patterns detected — review carefully."
    else:
        summary = "High-risk signals detected — avoid interacting."

    if trusted:
        next_step = "No action needed — this is a recognized safe domain."
    elif level == RiskLevel.DANGEROUS:
        next_step = "Do not visit this URL or connect your wallet to it."
    elif level == RiskLevel.SUSPICIOUS:
        next_step = "Verify the domain carefully before interacting — check official sources."
    else:
        next_step = "Always verify URLs before connecting your wallet."
    return summary, next_step


__all__ = ["scan_url", "normalize_url", "is_trusted", "is_same_domain"]
