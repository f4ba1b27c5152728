"""Shared setup for the command-line scripts."""
from __future__ import annotations

import sys
from pathlib import Path

# Make the portal package importable when run directly
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from portal.app import build_services  # noqa: E402
from portal.core.config import get_settings  # noqa: E402
from portal.repositories.kv_storage import build_storage  # noqa: E402


def open_services():
    settings = get_settings()
    return build_services(settings, build_storage(settings))
