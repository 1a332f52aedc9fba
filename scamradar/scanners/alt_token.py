# scamradar/scanners/alt_token.py
# Solana token scan. Market data only; no security labels exist for this chain.
from __future__ import annotations

from scamradar.core.report import (
    AltTokenMetadata, CheckItem, Confidence, InputType, RiskLevel, SafetyReport, Severity,
)
from scamradar.core.score import apply_floor
from scamradar.reference import TOKEN_THRESHOLDS as T
from scamradar.scanners.common import DAY_MS, Evidence, build_report, dbg, money, now_ms
from scamradar.sources.base import TIMEOUT


def _signed(change: float) -> str:
    return f"{'+' if change > 0 else ''}{change:.1f}"


async def scan_solana_token(sources, address: str) -> SafetyReport:
    ev = Evidence()
    meta = AltTokenMetadata(mint_address=address)
    has_dex = has_price_change = thin_volume = False
    extreme_pump = very_low_liq = low_liq = high_vol = False

    market = await sources.market.fetch(address)
    if not market.ok:
        dbg("solana", f"market unavailable: {market.error}")
        if market.kind == TIMEOUT:
            ev.add("DexScreener API timed out — could not fetch token data", Severity.MEDIUM)
        else:
            ev.add("Failed to fetch token data from DexScreener", Severity.MEDIUM)
        ev.recommend("Try scanning again — the data source may be temporarily unavailable")
    elif not market.data.listed:
        ev.add("DexScreener returned no liquidity pairs — token may be unlisted or a scam", Severity.DANGER)
        ev.recommend(
            "Do not interact with this token unless verified on a Solana explorer",
            "Verify the mint address on solscan.io or solana.fm",
            "Do not send funds to unverified contracts",
        )
    else:
        has_dex = True
        pair = market.data.most_liquid(prefer_chain="solana")
        if not pair.has_base_token or not pair.chain_id:
            ev.add("Token data is incomplete — API returned unexpected format.", Severity.MEDIUM)
        else:
            meta.name = pair.base_name
            meta.symbol = pair.base_symbol
            meta.dex = pair.dex_id
            meta.liquidity_usd = pair.liquidity_usd
            meta.fdv = pair.fdv
            meta.volume24h = pair.volume_h24
            meta.price_usd = pair.price_usd
            meta.price_change24h = pair.price_change_h24
            meta.pair_address = pair.pair_address
            meta.dexscreener_url = pair.url
            meta.pair_created_at = pair.pair_created_at

            # 1) Pair age, shown in hours under a day
            if pair.pair_created_at:
                age_ms = now_ms() - pair.pair_created_at
                days = age_ms / DAY_MS
                meta.pair_age = (f"{round(age_ms / 3_600_000)} hours" if days < 1
                                 else f"{round(days)} days")
                if days < T["pair_age_dangerous_days"]:
                    ev.add(f"Token pair created {meta.pair_age} ago — extremely new", Severity.DANGER, 25)
                elif days < T["pair_age_suspicious_days"]:
                    ev.add(f"Token pair created {meta.pair_age} ago — very new", Severity.MEDIUM, 15)

            # 2) Liquidity
            liq = pair.liquidity_usd or 0.0
            if liq < T["liquidity_dangerous"]:
                very_low_liq = True
                ev.add(f"Extremely low liquidity: ${money(liq)} USD", Severity.DANGER, 50)
            elif liq < T["liquidity_suspicious"]:
                low_liq = True
                ev.add(f"Low liquidity: ${money(liq)} USD", Severity.MEDIUM, 25)

            # 3) Volume
            vol = pair.volume_h24 or 0.0
            if vol < T["volume_very_low"]:
                thin_volume = True
                ev.add(f"Very low 24h volume: ${money(vol)} USD", Severity.MEDIUM, 15)
            elif vol < T["volume_low"]:
                thin_volume = True
                ev.add(f"Low 24h volume: ${money(vol)} USD", Severity.MEDIUM, 10)

            # 4) Price change
            change = pair.price_change_h24
            if change is not None:
                has_price_change = True
                if change > T["price_change_dangerous"]:
                    extreme_pump = True
                    ev.add(f"Extreme price pump: +{change:.1f}% in 24h", Severity.DANGER)
                elif change > T["price_change_suspicious"] or change < T["price_drop"]:
                    ev.add(f"Large price swing: {_signed(change)}% in 24h", Severity.MEDIUM, 10)
                high_vol = abs(change) > T["volatility_high"]

            # 5) FDV
            fdv = pair.fdv or 0.0
            if fdv > T["fdv_high"] and liq < T["liquidity_suspicious"]:
                ev.add(f"High FDV (${fdv / 1e6:.1f}M) with low liquidity (${money(liq)}) — exit liquidity risk",
                       Severity.MEDIUM, 20)
            if pair.fdv is not None and pair.fdv < T["fdv_very_low"]:
                ev.add(f"Very low FDV: ${money(pair.fdv)}", Severity.LOW)

    if has_dex:
        ev.recommend(
            "Verify the token on solscan.io for detailed contract info",
            "Check if the token has a verified project on DexScreener",
        )
        if very_low_liq or low_liq:
            ev.recommend("Low liquidity tokens have high slippage — use small position sizes")
        if extreme_pump:
            ev.recommend("Extreme price pumps often precede dumps — exercise extreme caution")
        if thin_volume:
            ev.recommend("Low volume makes it difficult to exit positions at fair price")
    ev.recommend(
        "Never invest more than you can afford to lose",
        "Solana tokens cannot currently be checked for honeypot — verify on rugcheck.xyz",
    )

    result = ev.score()
    ev.gov_cross_check(result.level)
    # any observed price movement lifts the floor
    result = apply_floor(result, 10 if has_price_change else 5, "Baseline risk floor (Solana token)")
    level = result.level

    confidence = Confidence.MEDIUM if has_dex else Confidence.LOW
    reason = ("DexScreener data available" if has_dex else "No DexScreener data found") + \
        ". GoPlus not available for Solana tokens."

    sym = f" ({meta.symbol})" if meta.symbol else ""
    if not has_dex:
        summary = "No trading data found for this Solana token. It may be unlisted, a scam, or a wallet address."
        next_step = "Verify this address on solscan.io to confirm it is a valid token."
    elif level == RiskLevel.DANGEROUS:
        summary = f"High-risk Solana token{sym} — multiple danger signals detected."
        next_step = "Do NOT interact with this token until you have thoroughly verified it on multiple sources."
    elif level == RiskLevel.SUSPICIOUS:
        summary = f"Solana token{sym} has some risk signals — proceed with caution."
        next_step = "Check rugcheck.xyz for honeypot analysis before trading."
    else:
        summary = f"Solana token{sym} shows no major red flags based on available data."
        next_step = "Check rugcheck.xyz for additional safety analysis before trading."

    checks = [
        CheckItem(label="DexScreener liquidity data", passed=has_dex,
                  detail="Trading pair found" if has_dex else "No pairs found"),
        CheckItem(label="Liquidity threshold check", passed=not (very_low_liq or low_liq),
                  detail=f"${money(meta.liquidity_usd)}" if meta.liquidity_usd is not None else "N/A"),
        CheckItem(label="24h volume check", passed=not thin_volume,
                  detail=f"${money(meta.volume24h)}" if meta.volume24h is not None else "N/A"),
        CheckItem(label="Price volatility check", passed=not (extreme_pump or high_vol),
                  detail=f"{_signed(meta.price_change24h)}%" if meta.price_change24h is not None else "N/A"),
    ]

    return build_report(InputType.SOLANA_TOKEN, address, result, ev,
                        confidence=confidence, confidence_reason=reason,
                        summary=summary, next_step=next_step, metadata=meta, checks=checks)


__all__ = ["scan_solana_token"]
