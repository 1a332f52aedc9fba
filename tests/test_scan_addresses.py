"""Wallet, Bitcoin, transaction, NFT and ENS scanners."""

import asyncio

from scamradar.blocklist import check_blocklist
from scamradar.core.report import Confidence, InputType, RiskLevel, Severity
from scamradar.scanners.alias import scan_alias
from scamradar.scanners.invalid import invalid_address_report
from scamradar.scanners.legacy import scan_bitcoin
from scamradar.scanners.nft import scan_nft
from scamradar.scanners.txid import scan_transaction
from scamradar.scanners.wallet import scan_wallet

from conftest import BTC, BTC_BECH32, DEX, GOPLUS, SOURCIFY, TOKEN, TX, FakeResponse, dex_pair, goplus

TORNADO_ROUTER = "0x8589427373d6d84e98730d7795d8f6f8731fda16"


def run(coro):
    return asyncio.run(coro)


def messages(report):
    return [f.message for f in report.findings]


# -- wallet ----------------------------------------------------------------

def test_blocklist_lookup_is_case_insensitive() -> None:
    entry = check_blocklist(TORNADO_ROUTER.upper().replace("0X", "0x"))
    assert entry is not None
    assert entry.label == "Tornado Cash: Router"


def test_blocklisted_wallet_without_live_labels(sources) -> None:
    report = run(scan_wallet(sources, TORNADO_ROUTER))
    assert report.metadata.is_flagged is True
    assert report.metadata.blocklist_category == "sanctioned"
    assert report.risk_level == RiskLevel.DANGEROUS
    assert report.confidence == Confidence.MEDIUM
    assert any(m.startswith("This address is flagged as: Tornado Cash: Router (source: OFAC")
               for m in messages(report))


def test_flags_merged_across_chains(sources, session) -> None:
    session.route(f"{GOPLUS}/address_security/", goplus({"phishing_activities": "1", "mixer": "1"}))
    report = run(scan_wallet(sources, TOKEN))
    assert messages(report).count("Address flagged for phishing activities (GoPlus)") == 1
    assert report.metadata.go_plus_flags == ["phishing_activities", "mixer"]
    assert report.confidence == Confidence.HIGH
    assert report.summary == "WARNING: This wallet address is flagged for malicious activity."


def test_clean_wallet_with_labels(sources, session) -> None:
    session.route(f"{GOPLUS}/address_security/", goplus({"phishing_activities": "0"}))
    report = run(scan_wallet(sources, TOKEN))
    assert "Address not flagged in GoPlus security database" in messages(report)
    assert report.risk_level == RiskLevel.SAFE
    assert report.confidence == Confidence.HIGH
    assert len(report.metadata.explorer_urls) == 6


def test_wallet_without_any_live_data_is_low_confidence(sources) -> None:
    report = run(scan_wallet(sources, TOKEN))
    assert report.confidence == Confidence.LOW
    assert report.risk_score == 8


def test_wallet_that_is_also_a_token(sources, session) -> None:
    session.route(DEX, FakeResponse(200, {"pairs": [dex_pair()]}))
    report = run(scan_wallet(sources, TOKEN))
    assert "This address is also a token contract with active trading pairs" in messages(report)
    _m, _url, kw = next(c for c in session.calls if c[1].startswith(DEX))
    assert kw["timeout"] == sources.settings.wallet_market_timeout


def test_malformed_wallet(sources) -> None:
    report = run(scan_wallet(sources, "abc"))
    assert "Wallet address should start with 0x" in messages(report)
    assert report.summary == "Invalid wallet address — 3 format issues detected."


# -- bitcoin ---------------------------------------------------------------

def test_valid_bitcoin_addresses(sources) -> None:
    for address, kind in ((BTC, "Legacy (P2PKH)"), (BTC_BECH32, "Bech32 (SegWit)")):
        report = run(scan_bitcoin(sources, address))
        assert report.input_type == InputType.BTC_WALLET
        assert report.risk_score == 5
        assert report.risk_level == RiskLevel.SAFE
        assert report.confidence == Confidence.LOW
        assert f"Valid {kind} Bitcoin address" in messages(report)


def test_invalid_address_report_shape() -> None:
    report = invalid_address_report("1bad")
    assert report.input_type == InputType.INVALID_ADDRESS
    assert report.risk_score == 70
    assert report.risk_level == RiskLevel.DANGEROUS
    assert report.confidence == Confidence.HIGH
    assert all(f.severity == Severity.DANGER for f in report.findings)


# -- transaction -----------------------------------------------------------

def test_transaction_detected_on_explorer(sources, session) -> None:
    session.route("https://etherscan.io/tx/", FakeResponse(200))
    report = run(scan_transaction(sources, TX))
    assert report.metadata.detected_chain == "Ethereum"
    assert report.confidence == Confidence.MEDIUM
    assert report.risk_score == 8
    assert report.metadata.explorer_urls[0].url == f"https://etherscan.io/tx/{TX}"


def test_transaction_not_found_anywhere(sources) -> None:
    report = run(scan_transaction(sources, TX))
    assert report.metadata.chain == "Unknown chain — verify on explorers below"
    assert report.confidence == Confidence.LOW


def test_malformed_transaction_hash(sources, session) -> None:
    report = run(scan_transaction(sources, "0x1234"))
    assert "Invalid hash length: 6 characters (expected 66)" in messages(report)
    assert report.risk_level == RiskLevel.SUSPICIOUS
    assert not session.calls


# -- NFT -------------------------------------------------------------------

def test_malicious_nft_contract(sources, session) -> None:
    session.route(f"{GOPLUS}/nft_security/1", goplus({
        "nft_name": "Apes", "nft_symbol": "APE", "nft_erc": "erc721",
        "malicious_nft_contract": 1, "nft_open_source": {"value": 1},
    }))
    session.route(SOURCIFY, FakeResponse(404, {}))
    report = run(scan_nft(sources, TOKEN))
    assert report.input_type == InputType.NFT
    assert report.risk_level == RiskLevel.DANGEROUS
    assert report.confidence == Confidence.HIGH
    assert report.summary == "Apes (APE) is flagged as MALICIOUS — do not interact."
    assert report.metadata.token_standard == "ERC-721"
    assert "Contract NOT verified on Sourcify" in messages(report)


def test_trusted_nft_collection(sources, session) -> None:
    session.route(f"{GOPLUS}/nft_security/1", goplus({
        "nft_name": "Punks", "nft_erc": "erc721", "nft_open_source": 1, "trust_list": 1,
        "malicious_nft_contract": 0, "privileged_minting": {"value": -1},
    }))
    report = run(scan_nft(sources, TOKEN))
    assert report.risk_level == RiskLevel.SAFE
    assert report.risk_score == 5
    assert "GoPlus NFT security audit passed — no red flags detected" in messages(report)
    assert report.summary == "Punks is on the GoPlus trust list and passed all security checks."


def test_nft_without_any_data(sources) -> None:
    report = run(scan_nft(sources, TOKEN))
    assert report.confidence == Confidence.LOW
    assert report.metadata.explorer_url == f"https://etherscan.io/address/{TOKEN}"


# -- ENS -------------------------------------------------------------------

def test_unresolved_name_is_suspicious_and_not_delegated(sources, session, w3_factory, settings) -> None:
    w3_factory.per_rpc[settings.ens_primary_rpc] = {"scam.eth": ConnectionError("primary down")}
    w3_factory.per_rpc[settings.ens_fallback_rpc] = {"scam.eth": ConnectionError("fallback down")}
    report = run(scan_alias(sources, "scam.eth"))
    assert report.input_type == InputType.ENS
    assert report.risk_level == RiskLevel.SUSPICIOUS
    assert report.risk_score == 50
    assert report.confidence == Confidence.LOW
    assert report.metadata.resolution_status == "failed"
    assert report.findings[0].message == "ENS resolution failed: fallback down"
    assert session.count(DEX) == 0
    assert session.count(GOPLUS) == 0


def test_resolved_name_reuses_wallet_scan(sources, session, w3_factory, settings) -> None:
    w3_factory.per_rpc[settings.ens_primary_rpc] = {"vitalik.eth": TOKEN}
    session.route(f"{GOPLUS}/address_security/", goplus({}))
    report = run(scan_alias(sources, "Vitalik.eth"))
    assert report.input_type == InputType.ENS
    assert report.findings[0].message == f'ENS name "vitalik.eth" resolves to {TOKEN}'
    assert report.recommendations[0] == "Verify ENS ownership at app.ens.domains/name/vitalik.eth"
    assert report.metadata.resolved_address == TOKEN
    assert report.metadata.resolution_status == "resolved"
    assert report.confidence == Confidence.HIGH
