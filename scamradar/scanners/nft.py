# scamradar/scanners/nft.py
# NFT contract scan: blocklist, NFT security labels (probed across chains) and
# Sourcify verification, run concurrently.
from __future__ import annotations

import re

from scamradar.blocklist import check_blocklist
from scamradar.chains import chain_display_name, chain_slug_for_id
from scamradar.core.report import (
    Confidence, InputType, NftMetadata, RiskLevel, SafetyReport, Severity,
)
from scamradar.core.score import apply_floor
from scamradar.scanners.common import Evidence, build_report, dbg, plural
from scamradar.scanners.wallet import blocklist_message
from scamradar.sources.security import NftSecurity
from scamradar.utils.concurrency import settle_all

_EVM_RE = re.compile(r"^0x[a-fA-F0-9]{40}$")


def _apply_labels(ev: Evidence, nft: NftSecurity, chain_id: int, meta: NftMetadata) -> None:
    meta.go_plus_checked = True
    meta.name = nft.name
    meta.symbol = nft.symbol
    meta.description = nft.description
    slug = chain_slug_for_id(chain_id)
    if slug:
        meta.chain = chain_display_name(slug)
        meta.chain_id = slug
    if nft.erc:
        meta.token_standard = nft.erc.upper().replace("ERC", "ERC-")
    meta.is_open_source = nft.open_source.set
    meta.is_proxy = nft.proxy.set
    meta.can_self_destruct = nft.self_destruct.set
    meta.privileged_minting = nft.privileged_minting.set
    meta.privileged_burn = nft.privileged_burn.set
    meta.transfer_without_approval = nft.transfer_without_approval.set
    meta.oversupply_minting = nft.oversupply_minting.set
    meta.restricted_approval = nft.restricted_approval.set
    meta.malicious_contract = nft.malicious.set
    meta.on_trust_list = nft.trust_list.set
    meta.website_url = nft.website_url
    meta.discord_url = nft.discord_url
    meta.twitter_url = nft.twitter_url

    # ordered by severity
    if nft.malicious.set:
        ev.add("NFT contract flagged as MALICIOUS by GoPlus", Severity.DANGER, 60)
        ev.recommend("Do NOT interact with this NFT contract — it has been flagged as malicious")
    if nft.transfer_without_approval.set:
        ev.add("Contract can transfer NFTs WITHOUT owner approval", Severity.DANGER, 60)
        ev.recommend("This contract can steal your NFTs — do not approve or interact")
    if nft.self_destruct.set:
        ev.add("Contract contains selfdestruct — can be destroyed", Severity.DANGER, 50)
    if nft.oversupply_minting.set:
        ev.add("Contract can mint beyond declared max supply", Severity.DANGER, 50)
    if nft.privileged_minting.set:
        ev.add("Admin can mint NFTs at will (privileged minting)", Severity.HIGH)
        ev.recommend("Admin-only minting can dilute the collection value")
    if nft.open_source.clear:
        ev.add("Contract source code is NOT verified/open source", Severity.HIGH)
    if nft.privileged_burn.set:
        ev.add("Admin can burn NFTs (privileged burn)", Severity.MEDIUM)
    if nft.proxy.set:
        ev.add("Contract is a proxy — logic can be changed", Severity.MEDIUM, 15)
    if nft.restricted_approval.set:
        ev.add("Contract uses restricted approval patterns", Severity.MEDIUM)
    if nft.trust_list.set:
        ev.add("NFT collection is on the GoPlus trust list", Severity.INFO, 0)
    if nft.copycats:
        ev.add(f"{plural(nft.copycats, 'copycat collection')} detected with the same name "
               "— verify you have the original", Severity.MEDIUM)
        ev.recommend("Verify the contract address matches the official collection — copycats exist")

    risky = any(flag.set for flag in (
        nft.malicious, nft.self_destruct, nft.transfer_without_approval, nft.oversupply_minting,
        nft.privileged_minting, nft.privileged_burn, nft.proxy, nft.restricted_approval,
    ))
    if not risky and not nft.open_source.clear:
        ev.add("GoPlus NFT security audit passed — no red flags detected", Severity.INFO, 0)


async def scan_nft(sources, address: str) -> SafetyReport:
    ev = Evidence()
    meta = NftMetadata()
    address = address.strip()
    has_labels = False

    hit = check_blocklist(address)
    if hit is not None:
        ev.add(blocklist_message(hit), Severity.DANGER)

    if not _EVM_RE.match(address):
        ev.add("Invalid contract address format", Severity.HIGH)

    labels_out, ver_out = await settle_all(
        sources.security.nft_security(address),
        sources.verification.is_verified(address, 1),
    )

    labels = labels_out.value if labels_out.ok else None
    if labels is not None and labels.ok:
        has_labels = True
        _apply_labels(ev, labels.data.security, labels.data.chain_id, meta)
    elif labels is not None:
        dbg("nft", f"labels unavailable: {labels.error}")

    ver = ver_out.value if ver_out.ok else None
    if ver is not None and ver.ok:
        meta.sourcify_verified = ver.data
        if ver.data:
            ev.add("Contract source code verified on Sourcify", Severity.INFO, 0)
        else:
            ev.add("Contract NOT verified on Sourcify", Severity.LOW)

    ev.recommend(
        "Check the NFT collection on OpenSea or other marketplaces for community verification",
        "Verify the contract on the block explorer before interacting",
        "Be cautious of free NFT airdrops — they are often scam vectors",
        "Never approve a contract without understanding what permissions you are granting",
    )

    result = ev.score()
    ev.gov_cross_check(result.level)
    if result.level == RiskLevel.SAFE:
        result = apply_floor(result, 5, "Baseline risk floor (no NFT contract is truly zero-risk)")
    level = result.level

    if has_labels:
        confidence = Confidence.HIGH
        reason = f"GoPlus NFT security audit performed with {len(ev.findings)} signals analyzed."
    elif meta.sourcify_verified is not None or hit is not None:
        confidence = Confidence.MEDIUM
        reason = "Limited data — GoPlus NFT endpoint returned no data for this contract."
    else:
        confidence = Confidence.LOW
        reason = "Unable to retrieve NFT security data."
    if meta.sourcify_verified is not None:
        reason += " Contract verification checked on Sourcify."

    label = (f"{meta.name}{f' ({meta.symbol})' if meta.symbol else ''}"
             if meta.name else "This NFT contract")
    if meta.malicious_contract:
        summary = f"{label} is flagged as MALICIOUS — do not interact."
    elif meta.transfer_without_approval:
        summary = f"{label} can transfer NFTs without owner approval — extremely risky."
    elif level == RiskLevel.DANGEROUS:
        summary = f"High-risk signals detected on {label} — avoid interacting."
    elif level == RiskLevel.SUSPICIOUS:
        summary = f"Some suspicious patterns detected on {label} — review carefully."
    elif meta.on_trust_list:
        summary = f"{label} is on the GoPlus trust list and passed all security checks."
    else:
        summary = f"{label} — no major risk signals detected."

    if level == RiskLevel.DANGEROUS:
        next_step = "Do not interact with this NFT contract."
    elif level == RiskLevel.SUSPICIOUS:
        next_step = "Research this collection thoroughly before minting or purchasing."
    else:
        next_step = "Always verify the collection on a marketplace and check the contract on a block explorer."

    meta.explorer_url = f"https://etherscan.io/address/{address}"

    return build_report(InputType.NFT, address, result, ev,
                        confidence=confidence, confidence_reason=reason,
                        summary=summary, next_step=next_step, metadata=meta)


__all__ = ["scan_nft"]
