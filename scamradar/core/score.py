# scamradar/core/score.py
from __future__ import annotations

from typing import Iterable, List, NamedTuple

from scamradar.core.report import Finding, RiskLevel, ScoreBreakdownItem, Severity

SEVERITY_SCORES = {
    Severity.INFO: 0,
    Severity.LOW: 8,
    Severity.MEDIUM: 15,
    Severity.HIGH: 25,
    Severity.DANGER: 60,
}

_LEVEL_ORDER = [RiskLevel.SAFE, RiskLevel.SUSPICIOUS, RiskLevel.DANGEROUS]


class RiskResult(NamedTuple):
    score: int
    level: RiskLevel
    breakdown: List[ScoreBreakdownItem]


def impact_of(finding: Finding) -> int:
    if finding.score_override is not None:
        return finding.score_override
    return SEVERITY_SCORES[finding.severity]


def risk_level(score: int, findings: Iterable[Finding] = ()) -> RiskLevel:
    """
    Map a clamped score to a level. A danger finding can never read SAFE:
    it lifts the level to SUSPICIOUS, or DANGEROUS once score >= 60.
    """
    if any(f.severity == Severity.DANGER for f in findings):
        return RiskLevel.DANGEROUS if score >= 60 else RiskLevel.SUSPICIOUS
    if score <= 30:
        return RiskLevel.SAFE
    if score <= 60:
        return RiskLevel.SUSPICIOUS
    return RiskLevel.DANGEROUS


def score_findings(findings: Iterable[Finding]) -> RiskResult:
    """Return (score 0..100, level, breakdown) with one breakdown row per finding."""
    findings = list(findings)
    raw = 0
    breakdown: List[ScoreBreakdownItem] = []
    for f in findings:
        impact = impact_of(f)
        raw += impact
        breakdown.append(ScoreBreakdownItem(label=f.message, score_impact=impact))

    score = max(0, min(100, raw))
    return RiskResult(score, risk_level(score, findings), breakdown)


def apply_floor(result: RiskResult, minimum: int, label: str) -> RiskResult:
    """
    Raise the score to ``minimum`` and record the difference as a synthetic
    breakdown row. The level is re-derived from the floored score but never
    drops below the level the findings already earned.
    """
    if result.score >= minimum:
        return result
    floored = min(100, minimum)
    level = max(result.level, risk_level(floored), key=_LEVEL_ORDER.index)
    breakdown = list(result.breakdown)
    breakdown.append(ScoreBreakdownItem(label=label, score_impact=floored - result.score))
    return RiskResult(floored, level, breakdown)


__all__ = ["SEVERITY_SCORES", "RiskResult", "impact_of", "risk_level", "score_findings", "apply_floor"]
