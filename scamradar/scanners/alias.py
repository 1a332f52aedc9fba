# scamradar/scanners/alias.py
# ENS name scan: resolve, then delegate to the wallet scanner and re-tag.
from __future__ import annotations

from scamradar.core.report import (
    AliasMetadata, Confidence, Finding, InputType, SafetyReport, Severity, WalletMetadata,
)
from scamradar.core.score import apply_floor
from scamradar.scanners.common import Evidence, build_report
from scamradar.scanners.wallet import scan_wallet

UNRESOLVED_FLOOR = 50
FAILED_PREFIX = "ENS resolution failed: "


async def scan_alias(sources, name: str) -> SafetyReport:
    normalized = name.strip().lower()

    # 1) Resolve
    resolved = await sources.names.resolve(normalized)
    if not resolved.ok:
        error = resolved.error or "Unknown error"
        ev = Evidence()
        ev.add(error if error.startswith(FAILED_PREFIX) else f"{FAILED_PREFIX}{error}", Severity.MEDIUM)
        ev.add("Cannot assess wallet risk without a resolved address", Severity.MEDIUM)
        ev.recommend(
            "Double-check the ENS name spelling",
            "Verify the name is registered at app.ens.domains",
            "If this name was shared with you, be cautious — it may be intentionally misspelled",
            "Never share your private key or seed phrase with anyone",
        )
        result = apply_floor(ev.score(), UNRESOLVED_FLOOR, "Unresolved name risk floor")
        return build_report(
            InputType.ENS, name, result, ev,
            confidence=Confidence.LOW,
            confidence_reason="ENS name could not be resolved — unable to scan the underlying wallet.",
            summary=f'Could not resolve "{normalized}" to an Ethereum address.',
            next_step="Verify the ENS name is spelled correctly and currently registered at app.ens.domains.",
            metadata=AliasMetadata(ens_name=normalized, resolution_error=error),
        )

    # 2) Delegate to the wallet scanner
    address = resolved.data
    report = await scan_wallet(sources, address)
    wallet_meta = report.metadata if isinstance(report.metadata, WalletMetadata) else WalletMetadata()

    meta = AliasMetadata(
        ens_name=normalized,
        resolved_address=address,
        resolution_status="resolved",
        chain=wallet_meta.chain,
        explorer_urls=wallet_meta.explorer_urls,
        go_plus_checked=wallet_meta.go_plus_checked,
        go_plus_flags=wallet_meta.go_plus_flags,
        is_flagged=wallet_meta.is_flagged,
    )
    resolves = Finding(message=f'ENS name "{normalized}" resolves to {address}',
                       severity=Severity.INFO, score_override=0)

    # 3) Re-tag; the prepended finding carries no score, so the breakdown is unchanged
    return report.model_copy(update={
        "input_type": InputType.ENS,
        "input_value": name,
        "findings": [resolves, *report.findings],
        "recommendations": [f"Verify ENS ownership at app.ens.domains/name/{normalized}",
                            *report.recommendations],
        "metadata": meta,
    })


__all__ = ["scan_alias"]
