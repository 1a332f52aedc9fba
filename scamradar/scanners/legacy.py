# scamradar/scanners/legacy.py
# Bitcoin address scan. No live source: checksum, blocklist and explorer links.
from __future__ import annotations

from scamradar.blocklist import check_blocklist
from scamradar.chains import BTC_EXPLORERS
from scamradar.core.report import (
    Confidence, ExplorerLink, InputType, SafetyReport, Severity, WalletMetadata,
)
from scamradar.core.score import apply_floor
from scamradar.scanners.common import Evidence, build_report
from scamradar.scanners.wallet import blocklist_message
from scamradar.utils.addr import bitcoin_address_type, is_valid_bitcoin_address


async def scan_bitcoin(sources, address: str) -> SafetyReport:
    ev = Evidence()
    meta = WalletMetadata()
    trimmed = address.strip()

    hit = check_blocklist(trimmed)
    if hit is not None:
        ev.add(blocklist_message(hit), Severity.DANGER)
        meta.is_flagged = True
        meta.blocklist_label = hit.label
        meta.blocklist_category = hit.category

    valid = is_valid_bitcoin_address(trimmed)
    if not valid:
        ev.add("Invalid Bitcoin address format", Severity.HIGH)
    else:
        ev.add(f"Valid {bitcoin_address_type(trimmed)} Bitcoin address", Severity.INFO, 0)
        meta.explorer_urls = [ExplorerLink(name=e["name"], url=e["url"] + trimmed) for e in BTC_EXPLORERS]
        meta.chain = "Bitcoin"

    ev.recommend(
        "Verify this address on a Bitcoin block explorer before sending funds",
        "Never share your private key or seed phrase with anyone",
        "Double-check the full address before every transaction — Bitcoin transactions are irreversible",
    )

    result = ev.score()
    if valid:
        result = apply_floor(result, 5, "Baseline risk floor (no address is truly zero-risk)")
    ev.gov_cross_check(result.level)

    if hit is not None:
        confidence = Confidence.MEDIUM
        reason = "Address matches a known-malicious address list entry — no on-chain data analyzed."
        summary = "WARNING: This Bitcoin address is flagged for malicious activity."
        next_step = "Do not send funds to this address."
    elif valid:
        confidence = Confidence.LOW
        reason = "Valid Bitcoin address format — no on-chain data analyzed."
        summary = "This appears to be a valid Bitcoin address. No scam patterns detected."
        next_step = "Verify this address on a block explorer to check transaction history before sending funds."
    else:
        confidence = Confidence.LOW
        reason = "Address format validation failed."
        summary = "Invalid Bitcoin address — format validation failed."
        next_step = "Double-check the address for typos or missing characters."

    return build_report(InputType.BTC_WALLET, address, result, ev,
                        confidence=confidence, confidence_reason=reason,
                        summary=summary, next_step=next_step, metadata=meta)


__all__ = ["scan_bitcoin"]
