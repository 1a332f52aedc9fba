# scamradar/scanners/common.py
# Shared helpers for category scanners: finding collection, money formatting,
# pair-age text and report assembly.
from __future__ import annotations

import logging
import time
from typing import List, Optional, Sequence

from scamradar.core.report import (
    CheckItem, Confidence, Finding, InputType, Metadata, RiskLevel, SafetyReport, Severity,
)
from scamradar.core.score import RiskResult, score_findings
from scamradar.reference import GOV_CROSS_CHECK, gov_links_recommendation

_log = logging.getLogger("scamradar.scanners")

DAY_MS = 24 * 60 * 60 * 1000


def dbg(tag: str, msg: str) -> None:
    _log.debug("[%s] %s", tag, msg)


def money(n: float) -> str:
    """Thousands separators, up to three decimals, no trailing zeros."""
    text = f"{n:,.3f}".rstrip("0").rstrip(".")
    return text or "0"


def now_ms() -> int:
    return int(time.time() * 1000)


def age_days(created_ms: int, now: Optional[int] = None) -> float:
    return ((now if now is not None else now_ms()) - created_ms) / DAY_MS


class Evidence:
    """Ordered findings and recommendations gathered during one scan."""

    def __init__(self):
        self.findings: List[Finding] = []
        self.recommendations: List[str] = []

    def add(self, message: str, severity: Severity, score: Optional[int] = None) -> Finding:
        f = Finding(message=message, severity=severity, score_override=score)
        self.findings.append(f)
        return f

    def recommend(self, *texts: str) -> None:
        self.recommendations.extend(texts)

    def has(self, *severities: Severity) -> bool:
        return any(f.severity in severities for f in self.findings)

    def score(self) -> RiskResult:
        return score_findings(self.findings)

    def gov_cross_check(self, level: RiskLevel) -> None:
        if level != RiskLevel.SAFE:
            self.recommendations.append(GOV_CROSS_CHECK)

    def gov_links(self, level: RiskLevel) -> None:
        if level != RiskLevel.SAFE:
            self.recommendations.append(gov_links_recommendation())


def build_report(
    input_type: InputType,
    input_value: str,
    result: RiskResult,
    evidence: Evidence,
    *,
    confidence: Confidence,
    confidence_reason: str,
    summary: str,
    next_step: Optional[str] = None,
    metadata: Optional[Metadata] = None,
    checks: Optional[Sequence[CheckItem]] = None,
) -> SafetyReport:
    return SafetyReport(
        input_type=input_type,
        input_value=input_value,
        risk_score=result.score,
        risk_level=result.level,
        confidence=confidence,
        confidence_reason=confidence_reason,
        summary=summary,
        next_step=next_step,
        findings=list(evidence.findings),
        recommendations=list(evidence.recommendations),
        score_breakdown=list(result.breakdown),
        metadata=metadata,
        checks_performed=list(checks) if checks is not None else None,
    )


def plural(n: int, word: str) -> str:
    return f"{n} {word}{'' if n == 1 else 's'}"


__all__ = [
    "DAY_MS", "dbg", "money", "now_ms", "age_days", "plural",
    "Evidence", "build_report",
]
