# scamradar/reference.py
# Static reference tables and detection thresholds. Read-only.
from __future__ import annotations

SUSPICIOUS_TLDS = (
    ".xyz", ".top", ".click", ".vip", ".buzz", ".tk", ".ml", ".ga", ".cf",
    ".gq", ".wang", ".club", ".online", ".site", ".icu", ".fun", ".monster",
    ".surf", ".rest", ".hair", ".sbs", ".cfd", ".live",
)

SCAM_KEYWORDS = (
    "airdrop", "claim", "reward", "rewards", "bonus", "connectwallet",
    "connect-wallet", "verify", "free-mint", "freemint", "giveaway",
    "claim-reward", "metamask", "validate", "sync-wallet", "dapp-connect",
    "token-claim", "nft-drop", "urgent", "act-now", "limited-time",
    "approve-token", "ledger", "support", "free", "double-your", "nft-mint",
)

# benign when they appear only in the path of a structurally clean URL
MILD_KEYWORDS = frozenset({
    "airdrop", "reward", "rewards", "bonus", "free", "giveaway", "nft-drop", "nft-mint",
})

TRUSTED_DOMAINS = frozenset({
    "google.com", "www.google.com",
    "github.com", "www.github.com",
    "coinbase.com", "www.coinbase.com",
    "binance.com", "www.binance.com",
    "ethereum.org", "www.ethereum.org",
    "etherscan.io", "www.etherscan.io",
    "coingecko.com", "www.coingecko.com",
})

SPOOFED_BRANDS = (
    "binance", "coinbase", "metamask", "ledger", "opensea",
    "uniswap", "ethereum", "bitcoin", "kraken", "crypto.com",
)

URL_THRESHOLDS = {
    "max_domain_length": 30,    # domain without TLD
    "max_hyphens": 3,           # at or above
    "max_numbers": 4,           # above
    "max_redirects": 10,
}

TOKEN_THRESHOLDS = {
    "liquidity_dangerous": 5_000,
    "liquidity_suspicious": 50_000,
    "volume_very_low": 1_000,
    "volume_low": 10_000,
    "price_change_suspicious": 50,
    "price_change_dangerous": 200,
    "price_drop": -50,
    "volatility_moderate": 20,
    "volatility_high": 50,
    "fdv_high": 10_000_000,
    "fdv_very_low": 10_000,
    "pair_age_dangerous_days": 1,
    "pair_age_suspicious_days": 3,
}

TAX_THRESHOLDS = {
    "dangerous": 10,   # percent, above
    "suspicious": 5,
}

GOV_RESOURCE_LINKS = (
    {"name": "SEC", "region": "US", "url": "https://www.sec.gov/investor/alerts"},
    {"name": "CFTC", "region": "US", "url": "https://www.cftc.gov/LearnAndProtect/RedList"},
    {"name": "DFPI Crypto Scam Tracker", "region": "US-CA", "url": "https://dfpi.ca.gov/crypto-scams/"},
    {"name": "FCA Warning List", "region": "UK", "url": "https://www.fca.org.uk/consumers/warning-list-unauthorised-firms"},
    {"name": "ASIC Investor Alert List", "region": "AU", "url": "https://moneysmart.gov.au/check-and-report-scams/investor-alert-list"},
    {"name": "AMF Blacklists", "region": "FR", "url": "https://www.amf-france.org/en/warnings/warnings-and-blacklists"},
)

GOV_CROSS_CHECK = (
    "Cross-check with government scam databases (DFPI, CFTC, SEC, FCA, ASIC, AMF) "
    "for additional verification"
)


def gov_links_recommendation(limit: int = 5) -> str:
    top = " | ".join(f"{l['name']} ({l['region']}): {l['url']}" for l in GOV_RESOURCE_LINKS[:limit])
    return f"Check government scam databases: {top}"
