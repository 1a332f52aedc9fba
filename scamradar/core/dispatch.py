# scamradar/core/dispatch.py
# Entry point of the scan engine: classify, validate checksums, route to one
# category scanner, and always hand back a SafetyReport.
from __future__ import annotations

import logging
import re
from typing import Iterable, List, Optional

from scamradar.core.classify import classify
from scamradar.core.report import (
    Confidence, Finding, InputType, RiskLevel, SafetyReport, ScoreBreakdownItem, Severity,
)
from scamradar.core.score import apply_floor, score_findings
from scamradar.scanners.alias import scan_alias
from scamradar.scanners.alt_token import scan_solana_token
from scamradar.scanners.invalid import invalid_address_report
from scamradar.scanners.legacy import scan_bitcoin
from scamradar.scanners.nft import scan_nft
from scamradar.scanners.token import is_unlisted_report, scan_token
from scamradar.scanners.txid import scan_transaction
from scamradar.scanners.url import scan_url
from scamradar.scanners.wallet import scan_wallet
from scamradar.utils.addr import is_valid_bitcoin_address, is_valid_evm_address
from scamradar.utils.concurrency import settle_all

_log = logging.getLogger(__name__)

_BTC_PREFIX_RE = re.compile(r"^([13]|bc1)", re.IGNORECASE)
_FOREIGN_ADDRESS_RE = re.compile(r"^[a-zA-Z0-9]{20,62}$")

# category hints accepted from callers ("nft" is only reachable this way)
KINDS = {t.value for t in InputType} - {InputType.INVALID_ADDRESS.value, InputType.UNKNOWN.value}


def _dbg(msg: str) -> None:
    _log.debug("[dispatch] %s", msg)


def empty_input_report(raw: str) -> SafetyReport:
    found = [Finding(message="No input provided", severity=Severity.INFO, score_override=0)]
    result = apply_floor(score_findings(found), 5, "Baseline risk floor")
    return SafetyReport(
        input_type=InputType.UNKNOWN,
        input_value=raw,
        risk_score=result.score,
        risk_level=result.level,
        confidence=Confidence.LOW,
        confidence_reason="No input provided.",
        summary="No input was provided to scan.",
        findings=found,
        recommendations=["Please provide a URL, contract address, transaction hash, or wallet address"],
        score_breakdown=result.breakdown,
    )


def unsupported_chain_report(value: str) -> SafetyReport:
    return SafetyReport(
        input_type=InputType.UNKNOWN,
        input_value=value,
        risk_score=5,
        risk_level=RiskLevel.SAFE,
        confidence=Confidence.LOW,
        confidence_reason="Address format not recognized — chain may not be supported yet.",
        summary="Valid address format detected, but chain is not yet supported.",
        next_step="Try looking up this address on a chain-specific block explorer.",
        findings=[Finding(message="Address format detected but blockchain not supported",
                          severity=Severity.INFO, score_override=0)],
        recommendations=[
            "Look up this address on a chain-specific block explorer",
            "This scanner currently supports EVM (0x...), Bitcoin and Solana addresses and ENS names",
            "Never share your private key or seed phrase with anyone",
        ],
        score_breakdown=[ScoreBreakdownItem(label="Baseline risk floor", score_impact=5)],
    )


def unrecognised_report(value: str) -> SafetyReport:
    found = [
        Finding(message="Could not determine input type", severity=Severity.MEDIUM),
        Finding(message="Input does not match any known format (URL, contract, tx hash, wallet)",
                severity=Severity.MEDIUM),
    ]
    result = apply_floor(score_findings(found), 50, "Unrecognised input risk floor")
    return SafetyReport(
        input_type=InputType.UNKNOWN,
        input_value=value,
        risk_score=result.score,
        risk_level=result.level,
        confidence=Confidence.LOW,
        confidence_reason="Input type could not be determined.",
        summary="Could not determine input type — unable to perform a targeted scan.",
        next_step="Verify your input is a valid URL, contract address, transaction hash, or wallet address.",
        findings=found,
        recommendations=[
            "Ensure your input is a valid URL, EVM contract address (0x... 42 chars), "
            "transaction hash (0x... 66 chars), or wallet address",
            "Double-check for typos or extra spaces",
        ],
        score_breakdown=result.breakdown,
    )


def degraded_report(value: str) -> SafetyReport:
    found = [Finding(message="Scan could not be completed", severity=Severity.MEDIUM)]
    result = apply_floor(score_findings(found), 50, "Incomplete scan risk floor")
    return SafetyReport(
        input_type=InputType.UNKNOWN,
        input_value=value,
        risk_score=result.score,
        risk_level=result.level,
        confidence=Confidence.LOW,
        confidence_reason="The scan could not be completed.",
        summary="An internal error interrupted the scan — no verdict could be reached.",
        next_step="Try the scan again in a moment.",
        findings=found,
        recommendations=["Treat this input with caution until a full scan succeeds"],
        score_breakdown=result.breakdown,
    )


class ScanEngine:
    """
    Routes one raw input to the matching scanner. ``scan`` never raises:
    scanner failures come back as a degraded LOW-confidence report.
    """

    def __init__(self, sources):
        self.sources = sources

    async def scan(self, raw: str, kind: Optional[str] = None) -> SafetyReport:
        value = (raw or "").strip()
        if not value:
            return empty_input_report(raw or "")

        if kind and kind not in KINDS:
            _dbg(f"ignoring unknown kind hint {kind!r}")
            kind = None
        category = InputType(kind) if kind else classify(value)
        _dbg(f"category={category.value} len={len(value)}")

        try:
            return await self._route(category, value)
        except Exception:
            _log.exception("[dispatch] %s scanner failed", category.value)
            return degraded_report(value)

    async def _route(self, category: InputType, value: str) -> SafetyReport:
        s = self.sources

        if category == InputType.URL:
            return await scan_url(s, value)

        if category == InputType.TOKEN:
            if not is_valid_evm_address(value):
                return invalid_address_report(value)
            # contract and wallet addresses share a shape; no market pairs means wallet
            report = await scan_token(s, value)
            if is_unlisted_report(report):
                _dbg("no liquidity pairs, rescanning as wallet")
                return await scan_wallet(s, value)
            return report

        if category == InputType.WALLET:
            if not is_valid_evm_address(value):
                return invalid_address_report(value)
            return await scan_wallet(s, value)

        if category == InputType.NFT:
            return await scan_nft(s, value)

        if category == InputType.BTC_WALLET:
            if not is_valid_bitcoin_address(value):
                return invalid_address_report(value)
            return await scan_bitcoin(s, value)

        if category == InputType.SOLANA_TOKEN:
            return await scan_solana_token(s, value)

        if category == InputType.ENS:
            return await scan_alias(s, value)

        if category == InputType.TX_HASH:
            return await scan_transaction(s, value)

        # unknown
        if _BTC_PREFIX_RE.match(value) and 20 <= len(value) <= 62:
            return invalid_address_report(value)
        if _FOREIGN_ADDRESS_RE.match(value):
            return unsupported_chain_report(value)
        return unrecognised_report(value)

    async def scan_many(self, inputs: Iterable[str], kind: Optional[str] = None) -> List[SafetyReport]:
        """Scan several inputs concurrently; results keep input order."""
        values = list(inputs)
        outcomes = await settle_all(*(self.scan(v, kind) for v in values))
        return [o.value if o.ok else degraded_report((v or "").strip()) for v, o in zip(values, outcomes)]


__all__ = [
    "ScanEngine", "KINDS",
    "empty_input_report", "unsupported_chain_report", "unrecognised_report", "degraded_report",
]
