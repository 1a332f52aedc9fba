"""Scan engine routing, checksum gating and canned reports."""

import asyncio

import pytest

from scamradar.core.dispatch import KINDS, ScanEngine
from scamradar.core.report import Confidence, InputType, RiskLevel

from conftest import BTC, DEX, GOPLUS, TOKEN, FakeResponse, dex_pair


@pytest.fixture
def engine(sources) -> ScanEngine:
    return ScanEngine(sources)


def scan(engine, raw, kind=None):
    return asyncio.run(engine.scan(raw, kind))


def test_kinds_exclude_terminal_categories() -> None:
    assert "nft" in KINDS
    assert "invalidAddress" not in KINDS
    assert "unknown" not in KINDS


@pytest.mark.parametrize("raw", ["", "   ", None])
def test_empty_input(engine, raw) -> None:
    report = scan(engine, raw)
    assert report.input_type == InputType.UNKNOWN
    assert report.risk_score == 5
    assert report.risk_level == RiskLevel.SAFE
    assert report.findings[0].message == "No input provided"


def test_listed_token_stays_a_token(engine, session) -> None:
    session.route(DEX, FakeResponse(200, {"pairs": [dex_pair()]}))
    report = scan(engine, TOKEN)
    assert report.input_type == InputType.TOKEN


def test_address_without_pairs_is_rescanned_as_wallet(engine, session) -> None:
    session.route(DEX, FakeResponse(200, {"pairs": []}))
    session.route(f"{GOPLUS}/address_security/", FakeResponse(200, {"code": 1, "result": {}}))
    report = scan(engine, TOKEN)
    assert report.input_type == InputType.WALLET
    assert report.confidence == Confidence.HIGH


def test_market_outage_does_not_fall_back_to_wallet(engine) -> None:
    report = scan(engine, TOKEN)
    assert report.input_type == InputType.TOKEN


@pytest.mark.parametrize("raw", [
    BTC[:-1] + "b",
    "0x6b175474E89094C44Da98b954EedeAC495271d0F",
    "10000000000000000000000000",
])
def test_checksum_failures_are_terminal(engine, session, raw) -> None:
    report = scan(engine, raw)
    assert report.input_type == InputType.INVALID_ADDRESS
    assert report.risk_score == 70
    assert report.risk_level == RiskLevel.DANGEROUS
    assert report.confidence == Confidence.HIGH
    assert not session.calls


def test_valid_bitcoin_address(engine) -> None:
    report = scan(engine, BTC)
    assert report.input_type == InputType.BTC_WALLET
    assert report.risk_score == 5


def test_unsupported_chain(engine) -> None:
    report = scan(engine, "cosmos1abcdefghijklmnopqrstuvwxyz")
    assert report.input_type == InputType.UNKNOWN
    assert report.risk_score == 5
    assert report.summary == "Valid address format detected, but chain is not yet supported."


def test_unrecognised_input(engine) -> None:
    report = scan(engine, "hello world")
    assert report.input_type == InputType.UNKNOWN
    assert report.risk_score == 50
    assert report.risk_level == RiskLevel.SUSPICIOUS
    assert report.confidence == Confidence.LOW
    assert report.score_breakdown[-1].label == "Unrecognised input risk floor"


def test_scanner_crash_yields_degraded_report(engine, monkeypatch, caplog) -> None:
    async def boom(_sources, _value):
        raise RuntimeError("scanner exploded")

    monkeypatch.setattr("scamradar.core.dispatch.scan_url", boom)
    report = scan(engine, "https://example.com")
    assert report.risk_score == 50
    assert report.risk_level == RiskLevel.SUSPICIOUS
    assert sum(item.score_impact for item in report.score_breakdown) == report.risk_score
    assert report.score_breakdown[-1].label == "Incomplete scan risk floor"
    assert report.confidence == Confidence.LOW
    assert report.findings[0].message == "Scan could not be completed"
    assert "url scanner failed" in caplog.text


def test_kind_hint_routes_to_nft(engine) -> None:
    report = scan(engine, TOKEN, kind="nft")
    assert report.input_type == InputType.NFT


def test_unknown_kind_hint_is_ignored(engine) -> None:
    report = scan(engine, BTC, kind="dogecoin")
    assert report.input_type == InputType.BTC_WALLET


def test_scan_many_keeps_input_order(engine) -> None:
    reports = asyncio.run(engine.scan_many([BTC, "", "hello world", "vitalik"]))
    assert [r.input_value for r in reports] == [BTC, "", "hello world", "vitalik"]
    assert [r.input_type for r in reports][:2] == [InputType.BTC_WALLET, InputType.UNKNOWN]


def test_repeated_scans_agree(engine, session) -> None:
    session.route(DEX, FakeResponse(200, {"pairs": [dex_pair()]}))
    first = scan(engine, TOKEN).to_dict()
    second = scan(engine, TOKEN).to_dict()
    first.pop("timestamp")
    second.pop("timestamp")
    assert first == second


def test_failed_batch_entry_is_never_zero(engine, monkeypatch) -> None:
    async def boom(_sources, _value):
        raise RuntimeError("scanner exploded")

    monkeypatch.setattr("scamradar.core.dispatch.scan_bitcoin", boom)
    reports = asyncio.run(engine.scan_many([BTC, "hello world"]))
    assert reports[0].risk_score == 50
    assert reports[0].findings[0].message == "Scan could not be completed"
    assert reports[1].risk_score == 50
