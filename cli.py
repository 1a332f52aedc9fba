# cli.py
import argparse
import asyncio
import json
import logging
import os
import sys

from dotenv import load_dotenv

from scamradar.core.dispatch import KINDS, ScanEngine
from scamradar.core.report import RiskLevel, SafetyReport, Severity
from scamradar.sources.registry import Sources

_log = logging.getLogger("scamradar.cli")

SEVERITY_ICONS = {
    Severity.INFO: "ℹ️ ",
    Severity.LOW: "🔹",
    Severity.MEDIUM: "⚠️ ",
    Severity.HIGH: "❗",
    Severity.DANGER: "🚨",
}


def render(report: SafetyReport) -> str:
    lines = [f"🔎 {report.input_type.value}: {report.input_value}", report.summary, ""]

    if report.findings:
        lines.append("Findings:")
        for f in report.findings:
            lines.append(f"  {SEVERITY_ICONS[f.severity]} [{f.severity.value}] {f.message}")
        lines.append("")

    if report.recommendations:
        lines.append("Recommendations:")
        lines.extend(f"  - {r}" for r in report.recommendations)
        lines.append("")

    level = report.risk_level
    lines.append(f"🧮 Final Risk Score: {report.risk_score}/100")
    lines.append("❗ DANGEROUS" if level == RiskLevel.DANGEROUS
                 else "⚠️  SUSPICIOUS" if level == RiskLevel.SUSPICIOUS
                 else "✅ SAFE")
    lines.append(f"Confidence: {report.confidence.value} ({report.confidence_reason})")
    if report.next_step:
        lines.append(f"Next step: {report.next_step}")
    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Scam Radar CLI")
    p.add_argument("--input", required=True, help="URL, address, transaction hash or ENS name")
    p.add_argument("--kind", choices=sorted(KINDS), help="Force a category (e.g. nft)")
    p.add_argument("--json", action="store_true", help="Print JSON only")
    return p


def main(argv=None, engine=None) -> int:
    args = build_parser().parse_args(argv)
    loaded = load_dotenv()
    logging.basicConfig(level=os.getenv("LOG_LEVEL", "WARNING").upper(),
                        format="%(levelname)s %(name)s: %(message)s")
    _log.info("[CLI] .env loaded: %s", loaded)

    engine = engine or ScanEngine(Sources.from_settings())
    try:
        report = asyncio.run(engine.scan(args.input, args.kind))
    except Exception as e:
        print(f"[CLI] scan failed -> {e}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(report.to_dict(), indent=2, ensure_ascii=False))
    else:
        print(render(report))
    return 0


if __name__ == "__main__":
    sys.exit(main())
