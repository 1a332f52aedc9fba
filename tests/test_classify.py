"""Input classification rule table."""

import pytest

from scamradar.core.classify import RULES, classify, is_bitcoin_shape, is_solana_shape
from scamradar.core.report import InputType

from conftest import BTC, BTC_BECH32, SOL, TOKEN, TX


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("https://example.com", InputType.URL),
        ("HTTP://EXAMPLE.COM/path", InputType.URL),
        ("www.example.org", InputType.URL),
        ("uniswap.org", InputType.URL),
        ("1inch.io", InputType.URL),
        ("vitalik.eth", InputType.ENS),
        ("sub.name.eth", InputType.ENS),
        (TX, InputType.TX_HASH),
        (TOKEN, InputType.TOKEN),
        ("0x1234", InputType.WALLET),
        (BTC, InputType.BTC_WALLET),
        (BTC_BECH32, InputType.BTC_WALLET),
        (SOL, InputType.SOLANA_TOKEN),
        ("hello world", InputType.UNKNOWN),
        ("", InputType.UNKNOWN),
        ("   ", InputType.UNKNOWN),
    ],
)
def test_classify_examples(raw: str, expected: InputType) -> None:
    assert classify(raw) == expected


def test_classify_trims_input() -> None:
    assert classify(f"  {TOKEN}\n") == InputType.TOKEN


def test_alias_rule_precedes_web_address() -> None:
    """A .eth name also matches the bare-domain shape; the alias rule must win."""
    names = [name for name, _match, _tag in RULES]
    assert names.index("name-alias") < names.index("web-address")
    assert classify("my-wallet.eth") == InputType.ENS


def test_digit_leading_domain_is_not_hex() -> None:
    assert classify("0xdomain.com") != InputType.URL
    assert classify("123abc.com") == InputType.URL


def test_bitcoin_shape_wins_over_solana() -> None:
    assert is_bitcoin_shape(BTC)
    assert not is_solana_shape(BTC)
    assert is_solana_shape(SOL)


def test_loose_bitcoin_shape_still_routes_to_bitcoin() -> None:
    """Too short for the strict rule but BTC-looking."""
    assert classify("1" + "A" * 22) == InputType.BTC_WALLET


@pytest.mark.parametrize("raw", ["x" * 10_000, "\x00\x01", "🙂🙂🙂", "0x" + "g" * 40])
def test_classify_is_total(raw: str) -> None:
    assert isinstance(classify(raw), InputType)
