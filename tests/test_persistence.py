"""
Storage backends and collection persistence (fallbacks, markers, failures).
"""
from __future__ import annotations

import json
import sys
import threading
from pathlib import Path

import pytest

# Make the portal package importable during local test runs
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from portal.core import config as core_config  # noqa: E402
from portal.domain.seeds import DEFAULT_STUDENTS  # noqa: E402
from portal.repositories.kv_storage import JsonFileStorage, MemoryStorage, build_storage  # noqa: E402
from portal.repositories.persistence import CollectionPersistence  # noqa: E402
from portal.repositories.record_store import RecordStore  # noqa: E402
from portal.services.record_service import PortalDataService  # noqa: E402


class BrokenStorage(MemoryStorage):
    def get_item(self, key):
        raise OSError("storage unavailable")

    def set_item(self, key, value):
        raise OSError("storage unavailable")


@pytest.mark.parametrize("raw", [None, "", "{not json", json.dumps({"id": "x"}), json.dumps("text")])
def test_load_falls_back_to_seed(raw):
    storage = MemoryStorage({} if raw is None else {"students": raw})
    loaded = CollectionPersistence(storage).load("students", DEFAULT_STUDENTS)

    assert loaded == DEFAULT_STUDENTS
    loaded[0]["name"] = "changed"
    assert DEFAULT_STUDENTS[0]["name"] == "John Doe"


def test_load_reads_stored_collection():
    stored = [{"id": "1", "name": "A", "email": "a@x.edu", "password": "p"}]
    storage = MemoryStorage({"students": json.dumps(stored)})
    assert CollectionPersistence(storage).load("students", DEFAULT_STUDENTS) == stored


def test_load_survives_unreadable_storage():
    assert CollectionPersistence(BrokenStorage()).load("students", DEFAULT_STUDENTS) == DEFAULT_STUDENTS


def test_flush_writes_collection_and_marker():
    storage = MemoryStorage()
    persistence = CollectionPersistence(storage)

    result = persistence.flush("teachers", [{"id": "t1"}])

    assert result.ok is True
    assert result.error is None
    assert json.loads(storage.get_item("teachers")) == [{"id": "t1"}]
    assert storage.get_item("teachers_last_saved") == result.saved_at
    assert persistence.last_saved("teachers") == result.saved_at
    assert result.saved_at.endswith("Z")


def test_flush_failure_is_returned():
    result = CollectionPersistence(BrokenStorage()).flush("students", [])
    assert result.ok is False
    assert result.saved_at is None
    assert "storage unavailable" in result.error


def test_flush_unserializable_payload_is_returned():
    storage = MemoryStorage()
    result = CollectionPersistence(storage).flush("students", [{"id": "1", "blob": object()}])
    assert result.ok is False
    assert storage.get_item("students") is None


def test_json_file_storage_round_trip(tmp_path):
    path = tmp_path / "nested" / "portal.json"
    storage = JsonFileStorage(path)

    assert storage.get_item("students") is None
    storage.set_item("students", "[]")
    storage.set_item("currentUser", "{}")
    assert JsonFileStorage(path).get_item("students") == "[]"

    storage.remove_item("currentUser")
    assert json.loads(path.read_text(encoding="utf-8")) == {"students": "[]"}


def test_json_file_storage_rejects_non_text(tmp_path):
    with pytest.raises(TypeError):
        JsonFileStorage(tmp_path / "portal.json").set_item("students", ["not", "text"])


def test_store_survives_restart_on_json_file(tmp_path):
    path = tmp_path / "portal.json"
    persistence = CollectionPersistence(JsonFileStorage(path))
    store = RecordStore.from_persistence(persistence)
    store.append("students", {"id": "1234500002", "name": "Jane Roe", "email": "jane@x.edu", "password": "p"})
    persistence.flush("students", store.raw("students"))

    reloaded = RecordStore.from_persistence(CollectionPersistence(JsonFileStorage(path)))
    assert reloaded.find("students", "1234500002")["name"] == "Jane Roe"


def test_read_json_default_for_corrupt_slot():
    persistence = CollectionPersistence(MemoryStorage({"currentUser": "{oops"}))
    assert persistence.read_json("currentUser") is None
    assert persistence.read_json("signupUsers", []) == []


def test_build_storage_selects_backend(tmp_path, monkeypatch):
    monkeypatch.setenv("STORAGE_BACKEND", "json")
    monkeypatch.setenv("DATA_FILE", str(tmp_path / "data.json"))
    core_config.get_settings.cache_clear()
    try:
        storage = build_storage(core_config.get_settings())
        assert isinstance(storage, JsonFileStorage)
        assert storage.path == tmp_path / "data.json"

        monkeypatch.setenv("STORAGE_BACKEND", "memory")
        core_config.get_settings.cache_clear()
        assert isinstance(build_storage(core_config.get_settings()), MemoryStorage)

        monkeypatch.setenv("STORAGE_BACKEND", "redis")
        core_config.get_settings.cache_clear()
        with pytest.raises(ValueError):
            build_storage(core_config.get_settings())
    finally:
        core_config.get_settings.cache_clear()


def test_json_file_storage_concurrent_writers_keep_every_slot(tmp_path):
    path = tmp_path / "portal.json"
    storage = JsonFileStorage(path)
    errors = []

    def writer(key):
        try:
            for i in range(40):
                storage.set_item(key, json.dumps([i]))
        except Exception as exc:  # pragma: no cover - surfaced by the assertion below
            errors.append(exc)

    threads = [threading.Thread(target=writer, args=(f"slot{n}",)) for n in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    on_disk = json.loads(path.read_text(encoding="utf-8"))
    assert on_disk == {f"slot{n}": "[39]" for n in range(4)}
    assert sorted(p.name for p in tmp_path.iterdir()) == ["portal.json"]


def test_corrupt_data_file_is_moved_aside_and_repaired(tmp_path):
    path = tmp_path / "portal.json"
    path.write_text("{truncated", encoding="utf-8")

    persistence = CollectionPersistence(JsonFileStorage(path))
    data = PortalDataService(RecordStore.from_persistence(persistence), persistence)
    assert [s["id"] for s in data.students.list()] == [s["id"] for s in DEFAULT_STUDENTS]

    data.students.create({"id": "1234500002", "name": "Jane Roe", "email": "jane@x.edu"})

    assert data.students.last_save_result.ok is True
    assert (tmp_path / "portal.json.corrupt").read_text(encoding="utf-8") == "{truncated"

    reopened = CollectionPersistence(JsonFileStorage(path))
    restarted = PortalDataService(RecordStore.from_persistence(reopened), reopened)
    assert restarted.students.get_by_id("1234500002")["name"] == "Jane Roe"
