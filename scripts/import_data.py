#!/usr/bin/env python3
"""
Restore students and/or teachers from a JSON backup (replaces, no merge).

Usage:
  python scripts/import_data.py backup.json
"""
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from _bootstrap import open_services


def main() -> None:
    ap = argparse.ArgumentParser(description="Import portal records from JSON")
    ap.add_argument("path", help="Backup file produced by export_data.py")
    args = ap.parse_args()

    path = Path(args.path)
    if not path.exists():
        raise SystemExit(f"File not found: {path}")
    with path.open("r", encoding="utf-8") as f:
        payload = json.load(f)

    data, _, _ = open_services()
    data.import_all(payload)
    print("OK: backup imported")
    print(f"  Students: {len(data.students.list())}")
    print(f"  Teachers: {len(data.teachers.list())}")


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:  # pragma: no cover - CLI usage
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)
