"""Domain helpers for student/teacher records."""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Mapping

REQUIRED_FIELDS = ("id", "name", "email")


@dataclass(frozen=True)
class RecordKind:
    """Static description of one record collection."""

    key: str
    label: str
    password_prefix: str
    list_fields: tuple[str, ...] = field(default_factory=tuple)


STUDENTS = RecordKind(key="students", label="Student", password_prefix="Student@")
TEACHERS = RecordKind(
    key="teachers",
    label="Teacher",
    password_prefix="Teacher@",
    list_fields=("specialization",),
)
KINDS = {STUDENTS.key: STUDENTS, TEACHERS.key: TEACHERS}


def default_password(kind: RecordKind, record_id: str) -> str:
    """``Student@001`` style password derived from the last three id characters."""
    return f"{kind.password_prefix}{record_id[-3:]}"


def missing_required(data: Mapping[str, Any]) -> list[str]:
    missing = []
    for name in REQUIRED_FIELDS:
        value = data.get(name)
        if not value or (isinstance(value, str) and not value.strip()):
            missing.append(name)
    return missing


def as_list(value: Any) -> list:
    return list(value) if isinstance(value, (list, tuple)) else []


def matches_query(record: Mapping[str, Any], query: str) -> bool:
    """Case-insensitive substring match on name or email (never id)."""
    q = (query or "").lower()
    name = str(record.get("name") or "").lower()
    email = str(record.get("email") or "").lower()
    return q in name or q in email


def suggest_email(record_id: str, name: str, domain: str = "university.edu") -> str:
    """``jane.roe.002@university.edu`` from a roll number and a display name."""
    if not record_id or not name:
        return ""
    name_part = re.sub(r"\s+", ".", name.strip().lower())
    return f"{name_part}.{record_id[-3:]}@{domain}"
