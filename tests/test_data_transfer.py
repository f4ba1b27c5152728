from __future__ import annotations

import sys
from datetime import datetime
from pathlib import Path

import pytest

# Make the portal package importable during local test runs
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from portal.domain.seeds import DEFAULT_STUDENTS, DEFAULT_TEACHERS  # noqa: E402
from portal.repositories.kv_storage import MemoryStorage  # noqa: E402
from portal.repositories.persistence import CollectionPersistence  # noqa: E402
from portal.repositories.record_store import RecordStore  # noqa: E402
from portal.services.record_service import PortalDataService, RecordImportError  # noqa: E402


@pytest.fixture()
def env():
    storage = MemoryStorage()
    persistence = CollectionPersistence(storage)
    data = PortalDataService(RecordStore.from_persistence(persistence), persistence)
    return data, storage, persistence


def test_export_is_a_deep_snapshot(env):
    data, _, _ = env
    exported = data.export_all()

    assert set(exported) == {"students", "teachers", "exportDate"}
    datetime.fromisoformat(exported["exportDate"].replace("Z", "+00:00"))

    exported["teachers"][0]["specialization"].append("Poetry")
    exported["students"].clear()
    assert "Poetry" not in data.teachers.get_by_id("9876500001")["specialization"]
    assert len(data.students.list()) == len(DEFAULT_STUDENTS)


def test_import_of_export_round_trips(env):
    data, _, _ = env
    data.students.create({"id": "1234500002", "name": "Jane Roe", "email": "jane@x.edu"})
    data.teachers.delete("9876500002")
    students, teachers = data.students.list(), data.teachers.list()

    data.import_all(data.export_all())

    assert data.students.list() == students
    assert data.teachers.list() == teachers


def test_import_replaces_only_present_collections(env):
    data, storage, persistence = env
    teachers = data.teachers.list()

    data.import_all({"students": [{"id": "1", "name": "Only", "email": "only@x.edu"}]})

    assert data.students.list() == [{"id": "1", "name": "Only", "email": "only@x.edu"}]
    assert data.teachers.list() == teachers
    assert persistence.read_json("students") == [{"id": "1", "name": "Only", "email": "only@x.edu"}]


def test_import_with_empty_list_clears_collection(env):
    data, _, _ = env
    data.import_all({"teachers": []})
    assert data.teachers.list() == []


def test_import_ignores_non_list_sections(env):
    data, _, _ = env
    students = data.students.list()
    data.import_all({"students": "not-a-list"})
    assert data.students.list() == students


@pytest.mark.parametrize(
    "payload",
    [
        None,
        ["students"],
        {"students": ["not-an-object"]},
        {"students": [{"id": "1", "when": object()}]},
    ],
)
def test_import_rejects_malformed_payloads(env, payload):
    data, _, _ = env
    students = data.students.list()
    with pytest.raises(RecordImportError):
        data.import_all(payload)
    assert data.students.list() == students


def test_reset_restores_seed_data(env):
    data, _, persistence = env
    data.students.create({"id": "1234500002", "name": "Jane Roe", "email": "jane@x.edu"})
    data.teachers.delete("9876500001")

    data.reset_all()

    assert data.students.list() == DEFAULT_STUDENTS
    assert data.teachers.list() == DEFAULT_TEACHERS
    assert persistence.read_json("teachers") == DEFAULT_TEACHERS


def test_reset_does_not_alias_seed_constants(env):
    data, _, _ = env
    data.reset_all()
    data.teachers.update("9876500001", {"name": "Changed"})
    assert DEFAULT_TEACHERS[0]["name"] == "Dr. Alan Turing"


def test_flush_all_reports_each_collection(env):
    data, storage, _ = env
    results = data.flush_all()
    assert set(results) == {"students", "teachers"}
    assert all(r.ok for r in results.values())
    assert storage.get_item("teachers_last_saved") == results["teachers"].saved_at
