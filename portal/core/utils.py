"""
Utility helpers shared across routers/services.
"""

from datetime import datetime, timezone
from typing import Optional

DASHBOARD_SEGMENT = "dashboard"


def utc_now_iso() -> str:
    """ISO-8601 timestamp in UTC with millisecond precision and a ``Z`` suffix."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def dashboard_path(record_id: str) -> str:
    return f"/{record_id}/{DASHBOARD_SEGMENT}"


def parse_dashboard_path(path: Optional[str]) -> Optional[str]:
    """
    Extract ``<id>`` from a ``/<id>/dashboard`` path.

    Only exact two-segment paths qualify; anything else returns None.
    """
    parts = [p for p in (path or "").split("/") if p]
    if len(parts) != 2 or parts[1] != DASHBOARD_SEGMENT:
        return None
    return parts[0]
