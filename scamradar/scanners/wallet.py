# scamradar/scanners/wallet.py
# EVM wallet scan: format checks, blocklist, address labels on several chains
# (merged, de-duplicated) and a best-effort "is this also a token?" probe.
from __future__ import annotations

import re
from typing import List, Set

from scamradar.blocklist import check_blocklist
from scamradar.chains import ADDRESS_LABEL_CHAINS, WALLET_EXPLORERS
from scamradar.core.report import (
    Confidence, ExplorerLink, InputType, SafetyReport, Severity, WalletMetadata,
)
from scamradar.scanners.common import Evidence, build_report, dbg, plural
from scamradar.utils.concurrency import settle_all

_EVM_RE = re.compile(r"^0x[a-fA-F0-9]{40}$")

# label key -> (wording, severity, score override)
ADDRESS_FLAGS = (
    ("phishing_activities", "phishing activities", Severity.DANGER, 60),
    ("stealing_attack", "token-stealing attacks", Severity.DANGER, 60),
    ("money_laundering", "money laundering", Severity.DANGER, 60),
    ("sanctioned", "a sanctions list", Severity.DANGER, 60),
    ("honeypot_related_address", "honeypot tokens", Severity.DANGER, 50),
    ("blacklist_doubt", "blacklists", Severity.HIGH, None),
    ("mixer", "cryptocurrency mixer usage", Severity.HIGH, None),
)

WALLET_RECOMMENDATIONS = (
    "Check this address on block explorers to see transaction history",
    "Use revoke.cash to review and revoke any token approvals granted to this address",
    "Be cautious if this address contacted you claiming to be support or offering free tokens",
    "Never share your private key or seed phrase with anyone",
    "If you suspect this address is associated with a scam, report it on the relevant block explorer",
)


def blocklist_message(entry) -> str:
    return f"This address is flagged as: {entry.label} (source: {entry.source})"


async def scan_wallet(sources, address: str) -> SafetyReport:
    ev = Evidence()
    meta = WalletMetadata()
    trimmed = address.strip()
    has_labels = False

    # 1) Format
    if not trimmed.startswith("0x"):
        ev.add("Wallet address should start with 0x", Severity.HIGH)
    if len(trimmed) != 42:
        ev.add(f"Invalid address length: {len(trimmed)} characters (expected 42)", Severity.HIGH)
    if not _EVM_RE.match(trimmed):
        ev.add("Address contains invalid characters", Severity.HIGH)
    valid = not ev.findings

    # 2) Known-malicious list
    hit = check_blocklist(trimmed)
    if hit is not None:
        ev.add(blocklist_message(hit), Severity.DANGER)
        meta.is_flagged = True
        meta.blocklist_label = hit.label
        meta.blocklist_category = hit.category

    if valid:
        ev.add("Wallet address format is valid", Severity.LOW)
        meta.explorer_urls = [ExplorerLink(name=e["name"], url=e["url"] + trimmed) for e in WALLET_EXPLORERS]
        meta.chain = "EVM-compatible (check explorers)"

        # 3) Market bonus check + address labels, all concurrent
        outcomes = await settle_all(
            sources.market.fetch(trimmed, timeout=sources.settings.wallet_market_timeout),
            *(sources.security.address_security(trimmed, cid) for cid in ADDRESS_LABEL_CHAINS),
        )
        market, labels = outcomes[0], outcomes[1:]

        if market.ok and market.value.ok and market.value.data.listed:
            ev.add("This address is also a token contract with active trading pairs", Severity.LOW)

        flags: List[str] = []
        seen: Set[str] = set()
        for outcome in labels:
            res = outcome.value if outcome.ok else None
            if res is None or not res.ok:
                dbg("wallet", f"address labels unavailable: {res.error if res else outcome.error}")
                continue
            has_labels = True
            for key, wording, severity, override in ADDRESS_FLAGS:
                if key in res.data.flags and key not in seen:
                    seen.add(key)
                    flags.append(key)
                    ev.add(f"Address flagged for {wording} (GoPlus)", severity, override)

        if has_labels:
            meta.go_plus_checked = True
            meta.go_plus_flags = flags
            meta.is_flagged = bool(flags) or bool(meta.is_flagged)
            if not flags:
                ev.add("Address not flagged in GoPlus security database", Severity.INFO, 0)

    ev.recommend(*WALLET_RECOMMENDATIONS)

    result = ev.score()
    ev.gov_links(result.level)

    # 4) Confidence
    if has_labels and meta.is_flagged:
        confidence, reason = Confidence.HIGH, "Address flagged in GoPlus security database."
    elif has_labels:
        confidence = Confidence.HIGH
        reason = ("Address format validated and checked against GoPlus security database. "
                  "No flags detected.")
    elif hit is not None:
        confidence, reason = Confidence.MEDIUM, "Address matches a known-malicious address list entry."
    elif valid:
        confidence = Confidence.LOW
        reason = "Address format validated — no on-chain transaction history analyzed."
    else:
        confidence, reason = Confidence.LOW, "Address format validation failed."

    # 5) Summary
    if meta.is_flagged:
        summary = "WARNING: This wallet address is flagged for malicious activity."
    elif valid and has_labels:
        summary = "Valid wallet address. No malicious activity flags detected in security databases."
    elif valid:
        summary = "Valid wallet address format. Check block explorers for transaction history and approvals."
    else:
        summary = f"Invalid wallet address — {plural(len(ev.findings), 'format issue')} detected."

    next_step = ("Review this address on a block explorer and check for suspicious approvals using revoke.cash."
                 if valid else "Double-check the wallet address for typos or missing characters.")

    return build_report(InputType.WALLET, address, result, ev,
                        confidence=confidence, confidence_reason=reason,
                        summary=summary, next_step=next_step, metadata=meta)


__all__ = ["scan_wallet", "ADDRESS_FLAGS", "blocklist_message"]
