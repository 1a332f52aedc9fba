# scamradar/blocklist.py
# Known malicious addresses (lowercase EVM, exact-case-insensitive BTC).
# Only entries backed by a public source belong here.
from __future__ import annotations

from typing import Dict, NamedTuple, Optional, Tuple


class BlocklistEntry(NamedTuple):
    address: str
    label: str
    category: str           # exploit | phishing | sanctioned | scam | drainer | rugpull
    source: str
    chains: Tuple[str, ...] = ("ethereum",)


_TORNADO = "OFAC SDN List – Aug 2022 Tornado Cash designation"
_LAZARUS = "OFAC SDN List – Lazarus Group DPRK-linked designation 2022"

BLOCKED_ADDRESSES = (
    BlocklistEntry("0x8589427373d6d84e98730d7795d8f6f8731fda16", "Tornado Cash: Router", "sanctioned", _TORNADO),
    BlocklistEntry("0xd4b88df4d29f5cedd6857912842cff3b20c8cfa3", "Tornado Cash: 0.1 ETH Pool", "sanctioned", _TORNADO),
    BlocklistEntry("0xfd8610d20aa15b7b2e3be39b396a1bc3516c7144", "Tornado Cash: 1 ETH Pool", "sanctioned", _TORNADO),
    BlocklistEntry("0x07687e702b410fa43f4cb4af7fa097918ffd2730", "Tornado Cash: 10 ETH Pool", "sanctioned", _TORNADO),
    BlocklistEntry("0x23773e65ed146a459667dd7e6781247f3a7d8571", "Tornado Cash: 100 ETH Pool", "sanctioned", _TORNADO),
    BlocklistEntry("0x22aaa7720ddd5388a3c0a3333430953c68f1849b", "Tornado Cash: DAI 100k Pool", "sanctioned", _TORNADO),
    BlocklistEntry("0x098b716b8aaf21512996dc57eb0615e2383e2f96",
                   "Lazarus Group: Ronin Bridge Exploiter (OFAC-sanctioned)", "sanctioned",
                   "OFAC SDN List – Aug 2022, Lazarus Group / DPRK; FBI Public Notice Apr 2022"),
    BlocklistEntry("0xa0e1c89ef1a489c9c7de96311ed5ce5d32c20e4b", "Lazarus Group: OFAC-Designated Wallet", "sanctioned", _LAZARUS),
    BlocklistEntry("0x3ad9db589d201a710ed237c829c7860ba86510fc", "Lazarus Group: OFAC-Designated Wallet", "sanctioned", _LAZARUS),
    BlocklistEntry("0xb6f5ec1a0a9cd1526536d3f0426c429529471f40", "Blender.io: OFAC-Sanctioned Mixer Deposit",
                   "sanctioned", "OFAC SDN List – May 2022 Blender.io designation"),
    BlocklistEntry("0x629e7da20197a5429d30da36e77d06cdf796b71a", "Wormhole Exploiter", "exploit",
                   "Etherscan label; Wormhole post-mortem Feb 2022; rekt.news"),
    BlocklistEntry("0xb5c55f76f90cc528b2609109ca14d8d84593590e", "Nomad Bridge Exploiter", "exploit",
                   "Etherscan label; Nomad Bridge post-mortem Aug 2022; rekt.news"),
    BlocklistEntry("0xb2698c2d99ad2c302a773b8e4de7a064d9015fa2", "Euler Finance Exploiter", "exploit",
                   "Etherscan label; Euler Finance post-mortem Mar 2023; rekt.news"),
    BlocklistEntry("0xc8a65fadf0e0ddaf421f28feab69bf6e2e589963", "Poly Network Exploiter", "exploit",
                   "Etherscan label; Poly Network post-mortem Aug 2021; rekt.news"),
    BlocklistEntry("0x1c5dcdd006ea78a7e4783f9e6021c32935a10fb4", "Beanstalk Exploiter", "exploit",
                   "Etherscan label; Beanstalk Farms post-mortem Apr 2022; rekt.news"),
    BlocklistEntry("1hYDFBGsaJmDPqXDFVCZLCHCHZYBv2RGi", "PlusToken Ponzi Scheme Wallet", "scam",
                   "Chainalysis 2019 report; court documents (PlusToken operators arrested); CipherTrace",
                   ("bitcoin",)),
    BlocklistEntry("bc1qxy2kgdygjrsqtzq2n0yrf2493p83kkfjhx0wlh", 'Twitter Bitcoin Scam 2020 – "Double Your BTC"',
                   "scam", "US DOJ indictment (July 2020); FBI; blockchain.com public record", ("bitcoin",)),
)


def _index(entries) -> Dict[str, BlocklistEntry]:
    out: Dict[str, BlocklistEntry] = {}
    for e in entries:
        # first entry wins on duplicates
        out.setdefault(e.address.lower(), e)
    return out


_BY_ADDRESS = _index(BLOCKED_ADDRESSES)


def check_blocklist(address: str) -> Optional[BlocklistEntry]:
    return _BY_ADDRESS.get((address or "").strip().lower())


__all__ = ["BlocklistEntry", "BLOCKED_ADDRESSES", "check_blocklist"]
