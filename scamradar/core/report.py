# scamradar/core/report.py
# Report data model shared by scanners, the scoring engine and the outer surfaces.
from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Severity(str, Enum):
    INFO = "info"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    DANGER = "danger"


class RiskLevel(str, Enum):
    SAFE = "SAFE"
    SUSPICIOUS = "SUSPICIOUS"
    DANGEROUS = "DANGEROUS"


class Confidence(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class InputType(str, Enum):
    URL = "url"
    TOKEN = "token"
    TX_HASH = "txHash"
    WALLET = "wallet"
    BTC_WALLET = "btcWallet"
    SOLANA_TOKEN = "solanaToken"
    NFT = "nft"
    ENS = "ens"
    INVALID_ADDRESS = "invalidAddress"
    UNKNOWN = "unknown"


class _Model(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class _Frozen(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class Finding(_Frozen):
    """One piece of evidence. ``score_override`` replaces the severity default."""
    message: str
    severity: Severity
    score_override: Optional[int] = None


class ScoreBreakdownItem(_Frozen):
    label: str
    score_impact: int


class CheckItem(_Frozen):
    label: str
    passed: bool
    detail: str


class ExplorerLink(_Frozen):
    name: str
    url: str


# ---------------------------------------------------------------------------
# Per-category metadata. Scanners fill these in as evidence arrives.
# ---------------------------------------------------------------------------

class UrlMetadata(_Model):
    hostname: Optional[str] = None
    protocol: Optional[str] = None
    is_https: Optional[bool] = None
    url_reachable: Optional[bool] = None
    status_code: Optional[int] = None
    error_type: Optional[str] = None        # timeout | dns | blocked | unknown
    redirected_to: Optional[str] = None
    final_url: Optional[str] = None
    redirect_count: Optional[int] = None
    go_plus_checked: Optional[bool] = None
    go_plus_phishing: Optional[bool] = None
    gov_checked: Optional[bool] = None
    gov_flagged_asic: Optional[bool] = None
    gov_flagged_amf: Optional[bool] = None
    gov_source: Optional[str] = None


class TokenMetadata(_Model):
    name: Optional[str] = None
    symbol: Optional[str] = None
    chain: Optional[str] = None
    chain_id: Optional[str] = None
    dex: Optional[str] = None
    liquidity_usd: Optional[float] = None
    fdv: Optional[float] = None
    volume24h: Optional[float] = None
    price_usd: Optional[str] = None
    price_change24h: Optional[float] = None
    pair_address: Optional[str] = None
    dexscreener_url: Optional[str] = None
    pair_created_at: Optional[int] = None
    pair_age: Optional[str] = None
    go_plus_checked: Optional[bool] = None
    is_honeypot: Optional[bool] = None
    is_open_source: Optional[bool] = None
    is_mintable: Optional[bool] = None
    has_hidden_owner: Optional[bool] = None
    is_proxy: Optional[bool] = None
    can_self_destruct: Optional[bool] = None
    is_blacklisted: Optional[bool] = None
    transfer_pausable: Optional[bool] = None
    slippage_modifiable: Optional[bool] = None
    owner_address: Optional[str] = None
    holder_count: Optional[int] = None
    buy_tax: Optional[float] = None
    sell_tax: Optional[float] = None
    sourcify_verified: Optional[bool] = None


class AltTokenMetadata(_Model):
    chain: str = "Solana"
    mint_address: Optional[str] = None
    name: Optional[str] = None
    symbol: Optional[str] = None
    dex: Optional[str] = None
    liquidity_usd: Optional[float] = None
    fdv: Optional[float] = None
    volume24h: Optional[float] = None
    price_usd: Optional[str] = None
    price_change24h: Optional[float] = None
    pair_address: Optional[str] = None
    dexscreener_url: Optional[str] = None
    pair_created_at: Optional[int] = None
    pair_age: Optional[str] = None


class WalletMetadata(_Model):
    chain: Optional[str] = None
    explorer_urls: Optional[List[ExplorerLink]] = None
    go_plus_checked: Optional[bool] = None
    go_plus_flags: Optional[List[str]] = None
    is_flagged: Optional[bool] = None
    blocklist_label: Optional[str] = None
    blocklist_category: Optional[str] = None


class TxMetadata(_Model):
    chain: Optional[str] = None
    detected_chain: Optional[str] = None
    explorer_urls: Optional[List[ExplorerLink]] = None


class NftMetadata(_Model):
    name: Optional[str] = None
    symbol: Optional[str] = None
    description: Optional[str] = None
    chain: Optional[str] = None
    chain_id: Optional[str] = None
    token_standard: Optional[str] = None
    go_plus_checked: Optional[bool] = None
    is_open_source: Optional[bool] = None
    is_proxy: Optional[bool] = None
    can_self_destruct: Optional[bool] = None
    privileged_minting: Optional[bool] = None
    privileged_burn: Optional[bool] = None
    transfer_without_approval: Optional[bool] = None
    oversupply_minting: Optional[bool] = None
    restricted_approval: Optional[bool] = None
    malicious_contract: Optional[bool] = None
    on_trust_list: Optional[bool] = None
    website_url: Optional[str] = None
    discord_url: Optional[str] = None
    twitter_url: Optional[str] = None
    sourcify_verified: Optional[bool] = None
    explorer_url: Optional[str] = None


class AliasMetadata(_Model):
    ens_name: str
    resolved_address: str = ""
    resolution_status: str = "failed"       # resolved | failed
    resolution_error: Optional[str] = None
    chain: Optional[str] = None
    explorer_urls: Optional[List[ExplorerLink]] = None
    go_plus_checked: Optional[bool] = None
    go_plus_flags: Optional[List[str]] = None
    is_flagged: Optional[bool] = None


Metadata = Union[
    UrlMetadata, TokenMetadata, AltTokenMetadata, WalletMetadata,
    TxMetadata, NftMetadata, AliasMetadata,
]


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class SafetyReport(_Frozen):
    """
    Final scan result. Built once by a scanner and never mutated afterwards;
    use ``model_copy(update=...)`` to derive a re-tagged report.
    """
    input_type: InputType
    input_value: str
    risk_score: int = Field(ge=0, le=100)
    risk_level: RiskLevel
    confidence: Confidence
    confidence_reason: str
    summary: str
    next_step: Optional[str] = None
    findings: List[Finding] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
    score_breakdown: List[ScoreBreakdownItem] = Field(default_factory=list)
    metadata: Optional[Metadata] = None
    checks_performed: Optional[List[CheckItem]] = None
    timestamp: str = Field(default_factory=utc_timestamp)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


__all__ = [
    "Severity", "RiskLevel", "Confidence", "InputType",
    "Finding", "ScoreBreakdownItem", "CheckItem", "ExplorerLink",
    "UrlMetadata", "TokenMetadata", "AltTokenMetadata", "WalletMetadata",
    "TxMetadata", "NftMetadata", "AliasMetadata", "Metadata",
    "SafetyReport", "utc_timestamp",
]
