#!/usr/bin/env python3
"""
Export students and teachers as a JSON backup.

Usage:
  python scripts/export_data.py [--out backup.json]
"""
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from _bootstrap import open_services


def main() -> None:
    ap = argparse.ArgumentParser(description="Export portal records to JSON")
    ap.add_argument("--out", help="Output file (default: stdout)")
    args = ap.parse_args()

    data, _, _ = open_services()
    payload = json.dumps(data.export_all(), ensure_ascii=False, indent=2)
    if args.out:
        Path(args.out).write_text(payload, encoding="utf-8")
        print(f"OK: backup written to {args.out}")
    else:
        sys.stdout.write(payload + "\n")


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:  # pragma: no cover - CLI usage
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)
