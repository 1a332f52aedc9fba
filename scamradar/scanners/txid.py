# scamradar/scanners/txid.py
# Transaction hash scan: format checks, explorer-based chain detection, links.
from __future__ import annotations

import re

from scamradar.chains import TX_EXPLORERS
from scamradar.core.report import (
    Confidence, ExplorerLink, InputType, SafetyReport, Severity, TxMetadata,
)
from scamradar.scanners.common import Evidence, build_report, plural

_TX_RE = re.compile(r"^0x[a-fA-F0-9]{64}$")

TX_RECOMMENDATIONS = (
    "Verify the transaction on a block explorer to see full details",
    "Check if the transaction involves token approvals — revoke unlimited approvals",
    "Verify the spender address is a known, legitimate contract",
    'Look for "approve" or "setApprovalForAll" function calls — these grant spending permission',
    "If you see an unfamiliar contract, do not interact further",
    "Use revoke.cash to check and revoke token approvals",
    "Paste any wallet address from this transaction into the scanner to check it against security databases",
)


async def scan_transaction(sources, tx_hash: str) -> SafetyReport:
    ev = Evidence()
    meta = TxMetadata()
    trimmed = tx_hash.strip()

    if not trimmed.startswith("0x"):
        ev.add("Transaction hash should start with 0x", Severity.HIGH)
    if len(trimmed) != 66:
        ev.add(f"Invalid hash length: {len(trimmed)} characters (expected 66)", Severity.HIGH)
    if not _TX_RE.match(trimmed):
        ev.add("Transaction hash contains invalid characters", Severity.HIGH)
    valid = not ev.findings

    detected = None
    if valid:
        ev.add("Transaction hash format is valid", Severity.LOW)
        found = await sources.explorer.detect_chain(trimmed)
        detected = found.data if found.ok else None
        if detected:
            meta.detected_chain = detected
            meta.chain = detected
        else:
            meta.chain = "Unknown chain — verify on explorers below"
        meta.explorer_urls = [ExplorerLink(name=e["name"], url=e["prefix"] + trimmed) for e in TX_EXPLORERS]

    ev.recommend(*TX_RECOMMENDATIONS)
    result = ev.score()

    if detected:
        confidence = Confidence.MEDIUM
        reason = f"Transaction found on {detected}. Format validation passed."
    else:
        confidence = Confidence.LOW
        reason = "Only format validation was performed — no on-chain data analyzed."

    if not valid:
        summary = f"Invalid transaction hash — {plural(len(ev.findings), 'format issue')} detected."
        next_step = "Double-check the transaction hash for typos or missing characters."
    elif detected:
        summary = f"Valid transaction hash detected on {detected}. Verify details on the block explorer."
        next_step = f"View this transaction on {detected} block explorer for full details."
    else:
        summary = "Valid transaction hash format. Verify on a block explorer to see full details."
        next_step = "Check this hash on multiple block explorers to find the correct chain."

    return build_report(InputType.TX_HASH, tx_hash, result, ev,
                        confidence=confidence, confidence_reason=reason,
                        summary=summary, next_step=next_step, metadata=meta)


__all__ = ["scan_transaction"]
