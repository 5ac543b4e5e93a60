"""Import ChatGPT / DeepSeek export files offline and print what the backend would show.

Runs the same ingestion pipeline as `POST /api/import`, without starting the server.

Usage:
  python scripts/import_exports.py exports/chatgpt_conversations.json exports/deepseek.json
  python scripts/import_exports.py exports/*.json --query python --platforms chatgpt
  python scripts/import_exports.py exports/*.json --export out.json

Exit code:
  0 if every file imported
  1 if any file failed
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List


# Allow `from chatcal...` imports without installing the package
sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "backend"))

from chatcal import aggregate
from chatcal.ingest import RawDocument, ingest
from chatcal.platforms import platform_keys


def _documents(paths: List[Path]):
    # Read lazily so files are loaded one at a time, in argument order.
    for p in paths:
        yield RawDocument(p.name, p.read_bytes())


def main(argv: List[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    ap.add_argument("files", nargs="+", type=Path, help="export JSON files")
    ap.add_argument("--query", default="", help="search term (title/content/tags)")
    ap.add_argument("--platforms", default="", help="comma-separated platform keys (default: all)")
    ap.add_argument("--export", type=Path, default=None, help="write filtered records to this JSON file")
    args = ap.parse_args(argv)

    missing = [p for p in args.files if not p.exists()]
    for p in missing:
        print(f"❌ not found: {p}")
    paths = [p for p in args.files if p.exists()]

    result = ingest((), _documents(paths))
    for o in result.outcomes:
        mark = "✅" if o.ok else "❌"
        print(f"{mark} {o.message}")
        for s in o.skipped:
            print(f"   skipped {s}")
    print(result.summary_message())

    platforms = [p.strip() for p in args.platforms.split(",") if p.strip()] or platform_keys()
    records = aggregate.filter_records(result.collection, args.query, platforms, cross_platform=True)

    stats = aggregate.compute_analytics(records)
    print("")
    print(json.dumps(stats.to_dict(), ensure_ascii=False, indent=2))

    days = aggregate.group_by_day(records)
    if days:
        busiest = max(days.items(), key=lambda kv: len(kv[1]))
        print(f"📅 {len(days)} active day(s); busiest {busiest[0]} ({len(busiest[1])})")

    if args.export:
        args.export.write_text(aggregate.export_records(records), encoding="utf-8")
        print(f"💾 wrote {len(records)} record(s) to {args.export}")

    return 1 if (missing or result.failed) else 0


if __name__ == "__main__":
    raise SystemExit(main())
