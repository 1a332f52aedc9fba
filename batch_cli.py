# batch_cli.py
import argparse
import asyncio
import csv
import json
import logging
import os
import sys
from pathlib import Path
from typing import List

from dotenv import load_dotenv

from scamradar.core.dispatch import KINDS, ScanEngine
from scamradar.core.report import SafetyReport, Severity
from scamradar.sources.registry import Sources

_log = logging.getLogger("scamradar.batch")

FIELDNAMES = [
    "input", "input_type", "risk_score", "risk_level", "confidence",
    "danger_findings", "high_findings", "top_finding", "summary",
]


def load_inputs(path: str) -> List[str]:
    p = Path(path)
    if not p.exists():
        print(f"[BATCH] ❌ Input file not found: {path}", file=sys.stderr)
        sys.exit(1)
    inputs = []
    with p.open(encoding="utf-8") as f:
        for line in f:
            s = line.strip()
            if not s or s.startswith("#"):
                continue
            inputs.append(s)
    _log.info("[BATCH] Loaded %d inputs", len(inputs))
    return inputs


def flatten_report(report: SafetyReport) -> dict:
    """One CSV row per report; the worst finding is listed first."""
    order = [Severity.DANGER, Severity.HIGH, Severity.MEDIUM, Severity.LOW, Severity.INFO]
    ranked = sorted(report.findings, key=lambda f: order.index(f.severity))
    return {
        "input": report.input_value,
        "input_type": report.input_type.value,
        "risk_score": report.risk_score,
        "risk_level": report.risk_level.value,
        "confidence": report.confidence.value,
        "danger_findings": sum(f.severity == Severity.DANGER for f in report.findings),
        "high_findings": sum(f.severity == Severity.HIGH for f in report.findings),
        "top_finding": ranked[0].message if ranked else "",
        "summary": report.summary,
    }


def main(argv=None, engine=None) -> int:
    ap = argparse.ArgumentParser(description="Scam Radar - Batch Scanner")
    ap.add_argument("--infile", required=True, help="Path to text file with one input per line")
    ap.add_argument("--out-csv", default="batch_scan.csv", help="CSV output path")
    ap.add_argument("--out-json", default="batch_scan.json", help="JSON output path")
    ap.add_argument("--kind", choices=sorted(KINDS), help="Force a category for every input")
    args = ap.parse_args(argv)

    loaded = load_dotenv()
    logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper(),
                        format="%(levelname)s %(name)s: %(message)s")
    _log.info("[BATCH] .env loaded: %s", loaded)

    inputs = load_inputs(args.infile)
    engine = engine or ScanEngine(Sources.from_settings())
    _log.info("[BATCH] Scanning %d inputs", len(inputs))
    reports = asyncio.run(engine.scan_many(inputs, args.kind))

    with open(args.out_csv, "w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=FIELDNAMES)
        w.writeheader()
        w.writerows(flatten_report(r) for r in reports)
    _log.info("[BATCH] Wrote CSV -> %s", args.out_csv)

    with open(args.out_json, "w", encoding="utf-8") as f:
        json.dump([r.to_dict() for r in reports], f, indent=2, ensure_ascii=False)
    _log.info("[BATCH] Wrote JSON -> %s", args.out_json)

    print("✅ Done. CSV →", args.out_csv, " JSON →", args.out_json)
    return 0


if __name__ == "__main__":
    sys.exit(main())
