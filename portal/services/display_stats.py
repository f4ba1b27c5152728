"""
Derived display stats for record listings.

These numbers have no backing data: they are cosmetic filler for list views.
Each value is pseudo-random but seeded by the record id, so the same record
always renders the same stats.
"""

from __future__ import annotations

import random
from typing import Optional

STATUS_LABELS = ("Excellent", "Good", "Average")


def display_stats(record_id: str, position: Optional[int] = None) -> dict:
    """
    Return ``{"cgpa": "3.42", "attendance": 87}`` for ``record_id``.

    CGPA falls in the 3.00-4.00 range with two decimals and attendance is an
    integer in [70, 99]. When ``position`` (the row index in a listing) is
    given, a ``status`` label cycles Excellent/Good/Average.
    """
    rng = random.Random(f"display-stats:{record_id}")
    stats = {
        "cgpa": f"{3.0 + rng.random():.2f}",
        "attendance": 70 + int(rng.random() * 30),
    }
    if position is not None:
        stats["status"] = STATUS_LABELS[position % len(STATUS_LABELS)]
    return stats
