# scamradar/chains.py
# Purpose: Chain tables (names, ids, explorers) + web3 factory used for name resolution.
from __future__ import annotations

import logging
from typing import Dict, List, Optional

from web3 import Web3

_log = logging.getLogger(__name__)

# Market-data chain slug -> numeric chain id understood by the security and
# verification sources
CHAIN_ID_MAP: Dict[str, int] = {
    "ethereum": 1,
    "bsc": 56,
    "polygon": 137,
    "arbitrum": 42161,
    "optimism": 10,
    "avalanche": 43114,
    "base": 8453,
}

CHAIN_NAMES: Dict[str, str] = {
    "ethereum": "Ethereum",
    "bsc": "BNB Smart Chain",
    "polygon": "Polygon",
    "arbitrum": "Arbitrum",
    "optimism": "Optimism",
    "avalanche": "Avalanche",
    "base": "Base",
    "solana": "Solana",
}

# Chains probed for address labels (wallet scan) and NFT labels, in order
ADDRESS_LABEL_CHAINS: List[int] = [1, 56]
NFT_LABEL_CHAINS: List[int] = [1, 56, 137]

TX_EXPLORERS = [
    {"name": "Ethereum", "prefix": "https://etherscan.io/tx/"},
    {"name": "BSC", "prefix": "https://bscscan.com/tx/"},
    {"name": "Polygon", "prefix": "https://polygonscan.com/tx/"},
    {"name": "Arbitrum", "prefix": "https://arbiscan.io/tx/"},
]

WALLET_EXPLORERS = [
    {"name": "Etherscan", "url": "https://etherscan.io/address/"},
    {"name": "BscScan", "url": "https://bscscan.com/address/"},
    {"name": "PolygonScan", "url": "https://polygonscan.com/address/"},
    {"name": "Arbiscan", "url": "https://arbiscan.io/address/"},
    {"name": "Optimistic", "url": "https://optimistic.etherscan.io/address/"},
    {"name": "BaseScan", "url": "https://basescan.org/address/"},
]

BTC_EXPLORERS = [
    {"name": "Blockstream", "url": "https://blockstream.info/address/"},
    {"name": "Blockchain.com", "url": "https://www.blockchain.com/btc/address/"},
]


def chain_display_name(slug: Optional[str]) -> Optional[str]:
    if not slug:
        return slug
    return CHAIN_NAMES.get(slug, slug)


def chain_slug_for_id(chain_id: int) -> Optional[str]:
    for slug, cid in CHAIN_ID_MAP.items():
        if cid == chain_id:
            return slug
    return None


def get_w3(rpc_url: str, timeout: float = 8.0) -> Web3:
    rpc = (rpc_url or "").strip().rstrip("\r")
    if not rpc or rpc in {"https://", "http://"}:
        raise ValueError("Missing/invalid RPC URL for name resolution. Set ENS_PRIMARY_RPC in .env")
    _log.debug("[chains] HTTPProvider -> %s", rpc)
    return Web3(Web3.HTTPProvider(rpc, request_kwargs={"timeout": timeout}))


__all__ = [
    "CHAIN_ID_MAP", "CHAIN_NAMES", "ADDRESS_LABEL_CHAINS", "NFT_LABEL_CHAINS",
    "TX_EXPLORERS", "WALLET_EXPLORERS", "BTC_EXPLORERS",
    "chain_display_name", "chain_slug_for_id", "get_w3",
]
