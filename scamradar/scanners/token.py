# scamradar/scanners/token.py
# EVM token scan: market data drives the liquidity/volume/price/age/FDV tiers,
# then security labels and source verification run concurrently once the
# market data has told us which chain the token lives on.
from __future__ import annotations

import math
import re
from typing import Optional

from scamradar.chains import CHAIN_ID_MAP, chain_display_name
from scamradar.core.report import (
    Confidence, InputType, RiskLevel, SafetyReport, Severity, TokenMetadata,
)
from scamradar.core.score import apply_floor
from scamradar.reference import TAX_THRESHOLDS, TOKEN_THRESHOLDS as T
from scamradar.scanners.common import Evidence, age_days, build_report, dbg, money, now_ms
from scamradar.sources.base import TIMEOUT
from scamradar.sources.security import TokenSecurity
from scamradar.utils.concurrency import settle_all

NO_PAIRS = "DexScreener returned no liquidity pairs — token may be unlisted or a scam"

_EVM_RE = re.compile(r"^0x[a-fA-F0-9]{40}$")


def is_unlisted_report(report: SafetyReport) -> bool:
    """True when a token report says the market source had no pairs at all."""
    return any(f.severity == Severity.DANGER and "no liquidity pairs" in f.message
               for f in report.findings)


def _security_findings(ev: Evidence, sec: TokenSecurity, meta: TokenMetadata) -> bool:
    """Map security labels onto findings. Returns True for a honeypot."""
    meta.go_plus_checked = True
    meta.is_honeypot = sec.is_honeypot is True
    meta.is_open_source = sec.is_open_source is True
    meta.is_mintable = sec.is_mintable is True
    meta.has_hidden_owner = sec.hidden_owner is True
    meta.is_proxy = sec.is_proxy is True
    meta.can_self_destruct = sec.selfdestruct is True
    meta.is_blacklisted = sec.is_blacklisted is True
    meta.transfer_pausable = sec.transfer_pausable is True
    meta.slippage_modifiable = sec.slippage_modifiable is True
    meta.owner_address = sec.owner_address
    meta.holder_count = sec.holder_count or None
    meta.buy_tax = sec.buy_tax or None
    meta.sell_tax = sec.sell_tax or None

    honeypot = sec.is_honeypot is True
    if honeypot:
        ev.add("Token flagged as HONEYPOT by GoPlus — cannot sell", Severity.DANGER, 60)
        ev.recommend("HONEYPOT: This token cannot be sold once purchased — do not buy")
    else:
        # can't sell a honeypot anyway, so taxes only matter otherwise
        for side, pct in (("sell", sec.sell_tax or 0.0), ("buy", sec.buy_tax or 0.0)):
            if pct > TAX_THRESHOLDS["dangerous"]:
                ev.add(f"High {side} tax: {pct:.1f}%", Severity.DANGER, 50)
            elif pct > TAX_THRESHOLDS["suspicious"]:
                ev.add(f"Elevated {side} tax: {pct:.1f}%", Severity.MEDIUM, 20)

    if sec.is_open_source is False:
        ev.add("Contract source code is NOT verified/open source", Severity.HIGH)
    if sec.is_mintable:
        ev.add("Token supply can be minted (increased) by owner", Severity.MEDIUM)
    if sec.hidden_owner:
        ev.add("Contract has a hidden owner", Severity.HIGH)
    if sec.slippage_modifiable:
        ev.add("Token slippage can be modified by owner", Severity.HIGH)
    if sec.transfer_pausable:
        ev.add("Token transfers can be paused by owner", Severity.MEDIUM)
    if sec.is_proxy:
        ev.add("Contract is a proxy — logic can be changed", Severity.MEDIUM, 15)
    if sec.selfdestruct:
        ev.add("Contract contains selfdestruct — can be destroyed", Severity.DANGER, 50)
    if sec.is_blacklisted:
        ev.add("Token uses a blacklist — your address could be blocked", Severity.MEDIUM)

    any_flag = any(x is True for x in (
        sec.is_honeypot, sec.is_mintable, sec.hidden_owner, sec.slippage_modifiable,
        sec.transfer_pausable, sec.is_proxy, sec.selfdestruct, sec.is_blacklisted,
    )) or sec.is_open_source is False
    tax_issue = max(sec.buy_tax or 0.0, sec.sell_tax or 0.0) > TAX_THRESHOLDS["suspicious"]
    if not any_flag and not tax_issue:
        ev.add("GoPlus security audit passed — no red flags detected", Severity.INFO, 0)
    return honeypot


async def scan_token(sources, address: str) -> SafetyReport:
    ev = Evidence()
    meta = TokenMetadata()
    has_dex = has_volume = has_price_change = False
    extreme_pump = very_low_liq = low_liq = high_vol = moderate_vol = False
    honeypot = has_security = False

    if not _EVM_RE.match(address):
        ev.add("Invalid contract address format", Severity.HIGH)

    # 1) Market data
    market = await sources.market.fetch(address)
    if not market.ok:
        dbg("token", f"market unavailable: {market.error}")
        if market.kind == TIMEOUT:
            ev.add("DexScreener API request timed out — unable to verify token safety", Severity.MEDIUM, 35)
        else:
            ev.add("Could not fetch token data — external API unavailable", Severity.MEDIUM, 35)
        ev.recommend("Manually verify this token on DexScreener or a block explorer")
    elif not market.data.listed:
        ev.add(NO_PAIRS, Severity.DANGER)
        ev.recommend(
            "Do not interact with this token unless verified on a block explorer",
            "Verify the contract address on a block explorer",
            "Do not send funds to unverified contracts",
        )
    else:
        has_dex = True
        pair = market.data.most_liquid()

        if not pair.has_base_token or not pair.chain_id:
            ev.add("Token data is incomplete — API returned unexpected format.", Severity.MEDIUM, 20)

        meta.name = pair.base_name
        meta.symbol = pair.base_symbol
        meta.chain = chain_display_name(pair.chain_id)
        meta.chain_id = pair.chain_id
        meta.dex = pair.dex_id
        meta.liquidity_usd = pair.liquidity_usd
        meta.fdv = pair.fdv
        meta.volume24h = pair.volume_h24
        meta.price_usd = pair.price_usd
        meta.price_change24h = pair.price_change_h24
        meta.pair_address = pair.pair_address
        meta.dexscreener_url = pair.url
        meta.pair_created_at = pair.pair_created_at

        # 2) Pair age
        if pair.pair_created_at:
            days = age_days(pair.pair_created_at, now_ms())
            whole = math.floor(days)
            meta.pair_age = "Less than 1 day" if whole < 1 else f"{whole} days"
            if days < T["pair_age_dangerous_days"]:
                ev.add(f"Token pair is extremely new ({meta.pair_age} old)", Severity.DANGER, 25)
                ev.recommend("Extremely new tokens are very likely to be scams or rug pulls")
            elif days < T["pair_age_suspicious_days"]:
                ev.add(f"Token pair is very new ({meta.pair_age} old)", Severity.MEDIUM, 15)
                ev.recommend("New tokens are significantly more likely to be scams or rug pulls")

        # 3) Liquidity
        liquidity = pair.liquidity_usd or 0.0
        if liquidity < T["liquidity_dangerous"]:
            very_low_liq = True
            ev.add(f"Dangerously low liquidity: ${money(liquidity)}", Severity.DANGER, 50)
            ev.recommend("Tokens with very low liquidity can be easily manipulated or are likely scams")
        elif liquidity < T["liquidity_suspicious"]:
            low_liq = True
            ev.add(f"Low liquidity: ${money(liquidity)}", Severity.MEDIUM, 25)
            ev.recommend("Low liquidity makes it difficult to sell without large price impact")
        else:
            ev.add(f"Liquidity is healthy: ${money(liquidity)}", Severity.INFO, 0)

        # 4) Volume
        volume = pair.volume_h24
        if volume is not None:
            has_volume = True
            if volume < T["volume_very_low"]:
                ev.add(f"Very low 24h volume: ${money(volume)}", Severity.MEDIUM, 15)
            elif volume < T["volume_low"]:
                ev.add(f"Low 24h trading volume: ${money(volume)}", Severity.MEDIUM, 10)
            else:
                ev.add(f"24h trading volume is healthy: ${money(volume)}", Severity.INFO, 0)

        # 5) Price change: extreme pump, else volatility tiers
        change = pair.price_change_h24
        if change is not None:
            has_price_change = True
            swing = abs(change)
            if change > T["price_change_dangerous"]:
                extreme_pump = True
                ev.add(f"Extreme 24h price pump: +{change:.1f}%", Severity.DANGER)
                ev.recommend("Extreme price pumps are often followed by dumps — be very cautious")
            elif swing >= T["volatility_high"]:
                high_vol = True
                ev.add(f"Token shows high 24h volatility (±{swing:.0f}%) — increased risk.", Severity.MEDIUM, 10)
                if change < T["price_drop"]:
                    ev.recommend("Large price drops may indicate a rug pull or whale dumping")
            elif swing >= T["volatility_moderate"]:
                moderate_vol = True
                ev.add(f"Token shows moderate 24h volatility (±{swing:.0f}%) — increased risk.", Severity.INFO, 5)

        # 6) FDV
        fdv = pair.fdv or 0.0
        if fdv > T["fdv_high"] and liquidity < T["liquidity_suspicious"]:
            ev.add(f"FDV (${money(fdv)}) is very high relative to liquidity (${money(liquidity)}) "
                   "— high rug pull risk", Severity.MEDIUM, 20)
            ev.recommend("A very high FDV with low liquidity means the token could crash easily")
        if 0 < fdv < T["fdv_very_low"]:
            ev.add(f"Very low fully diluted valuation: ${money(fdv)}", Severity.LOW)

        # 7) Security labels + source verification (needs a known chain id)
        chain_id: Optional[int] = CHAIN_ID_MAP.get(pair.chain_id or "")
        if chain_id:
            sec_out, ver_out = await settle_all(
                sources.security.token_security(address, chain_id),
                sources.verification.is_verified(address, chain_id),
            )
            sec = sec_out.value if sec_out.ok else None
            if sec is not None and sec.ok:
                has_security = True
                honeypot = _security_findings(ev, sec.data, meta)
            elif sec is not None:
                dbg("token", f"security labels unavailable: {sec.error}")

            ver = ver_out.value if ver_out.ok else None
            if ver is not None and ver.ok:
                meta.sourcify_verified = ver.data
                if ver.data:
                    ev.add("Contract source code verified on Sourcify", Severity.INFO, 0)
                else:
                    ev.add("Contract NOT verified on Sourcify", Severity.LOW)

    ev.recommend(
        "Check if the contract is verified on the block explorer",
        "Look for locked liquidity before investing",
        "Never invest more than you can afford to lose",
    )

    result = ev.score()
    level = result.level
    ev.gov_links(level)

    # 8) Floor: nothing is zero-risk, volatility lifts the floor
    volatile = high_vol or moderate_vol or extreme_pump
    minimum = 5 if level == RiskLevel.SAFE else 0
    if volatile:
        minimum = max(minimum, 10)
    if minimum:
        result = apply_floor(result, minimum,
                             "Baseline risk floor (price volatility detected)" if volatile
                             else "Baseline risk floor (no token is truly zero-risk)")
    level = result.level

    # 9) Confidence
    has_danger = ev.has(Severity.DANGER)
    if not has_dex:
        confidence = Confidence.LOW
    elif meta.liquidity_usd is not None and has_volume and has_price_change:
        confidence = Confidence.HIGH
    elif meta.liquidity_usd is not None:
        confidence = Confidence.MEDIUM
    else:
        confidence = Confidence.LOW

    if not has_dex and has_danger:
        reason = "No liquidity pairs found — cannot verify token legitimacy."
    elif not has_dex:
        reason = "Limited data available — could not retrieve live market information."
    elif confidence == Confidence.HIGH:
        reason = f"Live market data from DexScreener with {len(ev.findings)} signals analyzed."
    else:
        reason = "Partial market data available — some metrics could not be verified."
    if has_security:
        reason += " GoPlus security audit performed."
    if meta.sourcify_verified is not None:
        reason += " Contract verification checked on Sourcify."

    # 10) Summary / next step, most severe explanation first
    label = f"{meta.name} ({meta.symbol})" if meta.name else "This token"
    if honeypot:
        summary = f"{label} is a HONEYPOT — you will not be able to sell."
    elif not has_dex and has_danger:
        summary = "Token not listed on any DEX — extremely risky."
    elif extreme_pump:
        summary = f"{label} shows extreme price volatility — possible manipulation."
    elif very_low_liq:
        summary = f"{label} has dangerously low liquidity — likely a scam."
    elif level == RiskLevel.DANGEROUS:
        summary = "High-risk signals detected — avoid interacting."
    elif low_liq:
        summary = f"{label} has low liquidity and could be risky."
    elif level == RiskLevel.SUSPICIOUS:
        summary = "Some suspicious patterns detected — review carefully."
    elif volatile and meta.name:
        summary = f"{label} has strong liquidity, but price volatility is elevated."
    elif volatile:
        summary = "No major risk signals, but price volatility adds some risk."
    elif meta.name:
        summary = f"{label} has strong liquidity and healthy trading volume."
    else:
        summary = "No suspicious risk signals detected."

    if level == RiskLevel.DANGEROUS:
        next_step = "Do not buy or interact with this token."
    elif level == RiskLevel.SUSPICIOUS:
        next_step = "Research this token thoroughly before investing — check the contract, team, and community."
    else:
        next_step = "Always do your own research before investing in any token."

    return build_report(InputType.TOKEN, address, result, ev,
                        confidence=confidence, confidence_reason=reason,
                        summary=summary, next_step=next_step, metadata=meta)


__all__ = ["scan_token", "is_unlisted_report", "NO_PAIRS"]
