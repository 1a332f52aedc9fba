"""External source adapters against a fake requests session."""

import asyncio

import requests

from scamradar.sources.base import NOT_FOUND, STATUS, TIMEOUT
from scamradar.sources.govlists import (
    AMF_SOURCE, ASIC_SOURCE, is_domain_like, normalize_domain, parse_semicolon_csv,
)
from scamradar.sources.names import NO_ADDRESS
from scamradar.sources.security import Flag, nft_flag, str_flag
from scamradar.sources import web

from conftest import (
    AMF, ASIC, DEX, GOPLUS, SOURCIFY, TOKEN, TX,
    FakeResponse, FakeW3Factory, dex_pair, goplus,
)


def run(coro):
    return asyncio.run(coro)


# -- market ----------------------------------------------------------------

def test_market_normalizes_pairs_and_caches(sources, session) -> None:
    session.route(DEX, FakeResponse(200, {"pairs": [dex_pair(), dex_pair(liquidity={"usd": 10})]}))
    res = run(sources.market.fetch(TOKEN))
    assert res.ok
    best = res.data.most_liquid()
    assert best.liquidity_usd == 5_000_000
    assert best.price_change_h24 == 0.1
    assert best.base_symbol == "DAI"

    run(sources.market.fetch(TOKEN.upper().replace("0X", "0x")))
    assert session.count(DEX) == 1


def test_market_non_list_pairs_is_empty_snapshot(sources, session) -> None:
    session.route(DEX, FakeResponse(200, {"pairs": None}))
    res = run(sources.market.fetch(TOKEN))
    assert res.ok and not res.data.listed


def test_market_status_error(sources, session) -> None:
    session.route(DEX, FakeResponse(503, {}))
    res = run(sources.market.fetch(TOKEN))
    assert res.error == "DexScreener API returned 503"
    assert res.kind == STATUS


def test_market_timeout_is_classified(sources, session) -> None:
    session.route(DEX, requests.Timeout("slow"))
    res = run(sources.market.fetch(TOKEN))
    assert res.kind == TIMEOUT
    assert res.error == "DexScreener API request timed out"


def test_most_liquid_prefers_requested_chain(sources, session) -> None:
    session.route(DEX, FakeResponse(200, {"pairs": [
        dex_pair(chainId="ethereum", liquidity={"usd": 900}),
        dex_pair(chainId="solana", liquidity={"usd": 100}),
    ]}))
    snap = run(sources.market.fetch("Mint1111")).data
    assert snap.most_liquid(prefer_chain="solana").chain_id == "solana"
    assert snap.most_liquid().chain_id == "ethereum"


# -- security labels -------------------------------------------------------

def test_flag_normalization() -> None:
    assert str_flag("1") is True
    assert str_flag("0") is False
    assert str_flag("") is None
    assert nft_flag(1) is Flag.YES
    assert nft_flag({"value": -1}) is Flag.NO
    assert nft_flag({"value": 0}) is Flag.NO
    assert nft_flag(None) is Flag.UNKNOWN
    assert nft_flag("x") is Flag.UNKNOWN


def test_token_security_parses_flags_and_taxes(sources, session) -> None:
    session.route(f"{GOPLUS}/token_security/1", goplus({TOKEN: {
        "is_honeypot": "0", "is_open_source": "1", "buy_tax": "0.05", "sell_tax": "0.12",
        "holder_count": "420", "owner_address": "",
    }}))
    res = run(sources.security.token_security(TOKEN, 1))
    assert res.ok
    sec = res.data
    assert sec.is_honeypot is False
    assert sec.is_open_source is True
    assert sec.is_mintable is None
    assert round(sec.buy_tax, 6) == 5.0
    assert round(sec.sell_tax, 6) == 12.0
    assert sec.holder_count == 420
    assert sec.owner_address is None


def test_token_security_missing_token(sources, session) -> None:
    session.route(f"{GOPLUS}/token_security/1", goplus({}))
    res = run(sources.security.token_security(TOKEN, 1))
    assert res.error == "Token not found in GoPlus database"
    assert res.kind == NOT_FOUND


def test_goplus_non_success_code(sources, session) -> None:
    session.route(f"{GOPLUS}/token_security/1", goplus(None, code=4029))
    res = run(sources.security.token_security(TOKEN, 1))
    assert res.error == "GoPlus returned code 4029"


def test_address_security_flags(sources, session) -> None:
    session.route(f"{GOPLUS}/address_security/", goplus({"phishing_activities": "1", "mixer": "0"}))
    res = run(sources.security.address_security(TOKEN, 1))
    assert res.data.flags == ("phishing_activities",)


def test_phishing_site_verdicts(sources, session) -> None:
    session.route(f"{GOPLUS}/phishing_site", goplus({"phishing_site": 1}))
    assert run(sources.security.phishing_site("https://bad.example")).data is True
    session.route(f"{GOPLUS}/phishing_site", goplus({"phishing_site": 0}))
    assert run(sources.security.phishing_site("https://good.example")).data is False
    session.route(f"{GOPLUS}/phishing_site", goplus({}))
    assert not run(sources.security.phishing_site("https://other.example")).ok


def test_nft_security_probes_chains_in_order(sources, session) -> None:
    session.route(f"{GOPLUS}/nft_security/1", goplus({"nft_name": None}))
    session.route(f"{GOPLUS}/nft_security/56", goplus({"nft_name": "Apes", "nft_erc": "erc721",
                                                        "malicious_nft_contract": {"value": 1}}))
    res = run(sources.security.nft_security(TOKEN))
    assert res.ok
    assert res.data.chain_id == 56
    assert res.data.security.malicious is Flag.YES
    assert session.count(f"{GOPLUS}/nft_security/137") == 0


def test_nft_security_nothing_found(sources, session) -> None:
    for chain in (1, 56, 137):
        session.route(f"{GOPLUS}/nft_security/{chain}", goplus({}))
    res = run(sources.security.nft_security(TOKEN))
    assert res.error == "NFT contract not found in GoPlus database"


# -- verification ----------------------------------------------------------

def test_sourcify_404_means_unverified_and_is_cached(sources, session) -> None:
    session.route(SOURCIFY, FakeResponse(404, {}))
    assert run(sources.verification.is_verified(TOKEN, 1)).data is False
    assert run(sources.verification.is_verified(TOKEN, 1)).data is False
    assert session.count(SOURCIFY) == 1


def test_sourcify_verified(sources, session) -> None:
    session.route(SOURCIFY, FakeResponse(200, {"isVerified": True}))
    assert run(sources.verification.is_verified(TOKEN, 1)).data is True
    _m, url, kw = session.calls[-1]
    assert url == f"{SOURCIFY}/1/{TOKEN}"
    assert kw["params"] == {"fields": "isVerified"}


# -- regulator lists -------------------------------------------------------

def test_domain_helpers() -> None:
    assert normalize_domain("https://www.Scam-Site.com/path?q=1") == "scam-site.com"
    assert is_domain_like("scam.com")
    assert not is_domain_like("Some Company")
    assert parse_semicolon_csv("\ufeffa;b\r\n\n c ; d \n") == [["a", "b"], ["c", "d"]]


def test_asic_match_wins(sources, session) -> None:
    session.route(ASIC, FakeResponse(200, [
        {"name": "Bad Corp", "categories": ["Crypto scam"], "websites": ["https://www.badcorp.io/"]},
        {"name": "No sites"},
    ]))
    check = run(sources.govlists.check("badcorp.io"))
    assert check.found
    assert check.source == ASIC_SOURCE
    assert check.entity_name == "Bad Corp"
    assert check.category == "Crypto scam"


def test_amf_csv_match(sources, session) -> None:
    body = "\ufeffnom;catégorie\n\"fauxtrade.fr\";Crypto-actifs\nNot a domain;X\n"
    session.route(AMF, FakeResponse(200, content=body.encode("utf-8")))
    check = run(sources.govlists.check("https://fauxtrade.fr/login"))
    assert check.found
    assert check.source == AMF_SOURCE
    assert check.category == "Crypto-actifs"


def test_amf_quoted_cells_keep_delimiters() -> None:
    rows = parse_semicolon_csv('nom;catégorie\n"fauxtrade.fr";"Crypto; forex"\n"Two\nlines";X\n')
    assert rows == [["nom", "catégorie"], ["fauxtrade.fr", "Crypto; forex"], ["Two\nlines", "X"]]


def test_amf_quoted_category_with_semicolon(sources, session) -> None:
    body = '\ufeffnom;catégorie\n"fauxtrade.fr";"Crypto; forex"\n'
    session.route(AMF, FakeResponse(200, content=body.encode("utf-8")))
    check = run(sources.govlists.check("fauxtrade.fr"))
    assert check.found
    assert check.category == "Crypto; forex"


def test_both_lists_failing_reports_unavailable(sources, session) -> None:
    session.route(ASIC, FakeResponse(500, {}))
    session.route(AMF, requests.ConnectionError("down"))
    check = run(sources.govlists.check("example.com"))
    assert not check.found
    assert check.error == "Government databases unavailable"


def test_one_list_failing_still_checks_the_other(sources, session) -> None:
    session.route(ASIC, FakeResponse(500, {}))
    check = run(sources.govlists.check("example.com"))
    assert not check.found
    assert check.error is None


def test_stale_snapshot_served_after_failed_refresh(sources, session) -> None:
    session.route(ASIC, FakeResponse(200, [{"name": "X", "websites": ["x-scam.com"]}]))
    asic = sources.govlists.lists[0]
    assert run(asic.snapshot()).ok
    asic.cache.clear()
    session.route(ASIC, FakeResponse(500, {}))
    res = run(asic.snapshot())
    assert res.ok
    assert "x-scam.com" in res.data


# -- name resolution -------------------------------------------------------

def test_ens_primary_resolves(sources, w3_factory, settings) -> None:
    w3_factory.per_rpc[settings.ens_primary_rpc] = {"vitalik.eth": TOKEN}
    res = run(sources.names.resolve("Vitalik.eth"))
    assert res.data == TOKEN
    assert w3_factory.calls == [settings.ens_primary_rpc]


def test_ens_falls_back_after_primary_error(sources, w3_factory, settings) -> None:
    w3_factory.per_rpc[settings.ens_primary_rpc] = {"vitalik.eth": ConnectionError("rpc down")}
    w3_factory.per_rpc[settings.ens_fallback_rpc] = {"vitalik.eth": TOKEN}
    assert run(sources.names.resolve("vitalik.eth")).data == TOKEN
    assert len(w3_factory.calls) == 2


def test_ens_both_fail(sources, w3_factory, settings) -> None:
    w3_factory.per_rpc[settings.ens_primary_rpc] = {"x.eth": ConnectionError("a")}
    w3_factory.per_rpc[settings.ens_fallback_rpc] = {"x.eth": ConnectionError("b")}
    res = run(sources.names.resolve("x.eth"))
    assert res.error == "ENS resolution failed: b"


def test_ens_negative_result_is_cached(sources, w3_factory) -> None:
    first = run(sources.names.resolve("nobody.eth"))
    second = run(sources.names.resolve("nobody.eth"))
    assert first.error == second.error == NO_ADDRESS
    assert len(w3_factory.calls) == 1


# -- explorer probe --------------------------------------------------------

def test_explorer_first_hit_in_table_order(sources, session) -> None:
    session.route("https://etherscan.io/tx/", FakeResponse(404))
    session.route("https://bscscan.com/tx/", FakeResponse(200))
    session.route("https://polygonscan.com/tx/", FakeResponse(200))
    res = run(sources.explorer.detect_chain(TX))
    assert res.data == "BSC"
    assert all(m == "HEAD" for m, url, _kw in session.calls if "/tx/" in url)


def test_explorer_nothing_found_is_not_cached(sources, session) -> None:
    assert run(sources.explorer.detect_chain(TX)).data is None
    session.route("https://arbiscan.io/tx/", FakeResponse(200))
    assert run(sources.explorer.detect_chain(TX)).data == "Arbitrum"


# -- web probe -------------------------------------------------------------

def test_probe_follows_redirects(sources, session) -> None:
    session.route("https://a.example/", FakeResponse(301, headers={"location": "/next"}))
    session.route("https://a.example/next", FakeResponse(302, headers={"location": "https://b.example/"}))
    session.route("https://b.example/", FakeResponse(200))
    out = run(sources.web.probe("https://a.example/"))
    assert out.reachable
    assert out.status_code == 200
    assert out.redirect_count == 2
    assert out.final_url == "https://b.example/"
    assert out.halted is None


def test_probe_halts_on_non_http_scheme(sources, session) -> None:
    session.route("https://a.example/", FakeResponse(302, headers={"location": "javascript:alert(1)"}))
    out = run(sources.web.probe("https://a.example/"))
    assert out.halted == web.NON_HTTP
    assert out.halted_detail == "javascript:"


def test_probe_halts_on_private_target(sources, session) -> None:
    session.route("https://a.example/", FakeResponse(302, headers={"location": "http://169.254.169.254/"}))
    out = run(sources.web.probe("https://a.example/"))
    assert out.halted == web.PRIVATE_TARGET
    assert session.count("http://169.254.169.254") == 0


def test_probe_halts_on_short_form_loopback_redirect(sources, session) -> None:
    session.route("https://a.example/", FakeResponse(302, headers={"location": "http://127.1:8080/admin"}))
    out = run(sources.web.probe("https://a.example/"))
    assert out.halted == web.PRIVATE_TARGET
    assert out.halted_detail == "127.1"
    assert session.count("http://127.1") == 0


def test_probe_detects_loop(sources, session) -> None:
    session.route("https://a.example/x", FakeResponse(302, headers={"location": "https://a.example/y"}))
    session.route("https://a.example/y", FakeResponse(302, headers={"location": "https://a.example/x"}))
    out = run(sources.web.probe("https://a.example/x"))
    assert out.halted == web.LOOP


def test_probe_classifies_dns_failure(sources, session) -> None:
    session.route("https://nope.example", requests.ConnectionError("NameResolutionError: Failed to resolve"))
    out = run(sources.web.probe("https://nope.example/"))
    assert not out.reachable
    assert out.error_type == web.ERR_DNS


def test_probe_classifies_timeout(sources, session) -> None:
    session.route("https://slow.example", requests.Timeout("read timed out"))
    out = run(sources.web.probe("https://slow.example/"))
    assert out.error_type == web.ERR_TIMEOUT


def test_sources_clear_caches(sources, session) -> None:
    session.route(DEX, FakeResponse(200, {"pairs": []}))
    run(sources.market.fetch(TOKEN))
    sources.clear_caches()
    run(sources.market.fetch(TOKEN))
    assert session.count(DEX) == 2


def test_w3_factory_fixture_is_isolated() -> None:
    assert FakeW3Factory().calls == []


def test_web_probe_has_no_cache(sources, session) -> None:
    session.route("https://a.example/", FakeResponse(200))
    assert sources.web.cache is None
    run(sources.web.probe("https://a.example/"))
    run(sources.web.probe("https://a.example/"))
    assert session.count("https://a.example/") == 2
