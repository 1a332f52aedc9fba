# scamradar/scanners/invalid.py
# Terminal report for values that failed their family's checksum rules.
from __future__ import annotations

from scamradar.core.report import (
    Confidence, Finding, InputType, RiskLevel, SafetyReport, ScoreBreakdownItem, Severity,
)

INVALID_SCORE = 70


def invalid_address_report(value: str) -> SafetyReport:
    return SafetyReport(
        input_type=InputType.INVALID_ADDRESS,
        input_value=value,
        risk_score=INVALID_SCORE,
        risk_level=RiskLevel.DANGEROUS,
        confidence=Confidence.HIGH,
        confidence_reason="Address failed cryptographic checksum validation.",
        summary="This is not a valid blockchain address (checksum failed).",
        next_step="Double-check the address for typos. If you copied it, try copying again from the source.",
        findings=[
            Finding(message="Invalid address — checksum failed", severity=Severity.DANGER),
            Finding(message="Sending funds to an invalid address could result in permanent loss",
                    severity=Severity.DANGER),
        ],
        recommendations=[
            "Double-check the address before sending funds. Funds sent to invalid addresses cannot be recovered.",
            "Verify the address with the sender or original source",
            "Never manually type blockchain addresses — always copy and paste",
            "Check that you are using the correct blockchain network",
        ],
        score_breakdown=[ScoreBreakdownItem(label="Invalid address format or checksum", score_impact=INVALID_SCORE)],
    )


__all__ = ["invalid_address_report", "INVALID_SCORE"]
