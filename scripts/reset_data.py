#!/usr/bin/env python3
"""
Restore the built-in default students and teachers.

Usage:
  python scripts/reset_data.py --yes
"""
from __future__ import annotations

import argparse
import sys

from _bootstrap import open_services


def main() -> None:
    ap = argparse.ArgumentParser(description="Reset portal records to the default seed data")
    ap.add_argument("--yes", action="store_true", help="Confirm overwriting current records")
    args = ap.parse_args()
    if not args.yes:
        raise SystemExit("Refusing to reset without --yes")

    data, _, _ = open_services()
    data.reset_all()
    for key, result in data.flush_all().items():
        status = "ok" if result.ok else f"FAILED ({result.error})"
        print(f"  {key}: {status}")
    print("OK: default data restored")


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:  # pragma: no cover - CLI usage
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)
