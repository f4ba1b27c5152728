"""
Smoke tests for SQLStorage against a temporary SQLite database.
"""
from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Make the portal package importable during local test runs
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from portal.core import config as core_config  # noqa: E402
from portal.db import models  # noqa: E402
from portal.db import session as db_session  # noqa: E402
from portal.repositories.kv_storage import SQLStorage, build_storage  # noqa: E402
from portal.repositories.persistence import CollectionPersistence  # noqa: E402
from portal.repositories.record_store import RecordStore  # noqa: E402
from portal.services.record_service import PortalDataService  # noqa: E402


@pytest.fixture()
def temp_db(tmp_path, monkeypatch):
    """Point DATABASE_URL at a temporary SQLite file and dispose everything on teardown."""
    db_file = tmp_path / "test.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{db_file}")
    monkeypatch.setenv("STORAGE_BACKEND", "sql")
    core_config.get_settings.cache_clear()
    db_session.get_engine.cache_clear()
    db_session._get_sessionmaker.cache_clear()  # type: ignore[attr-defined]

    engine = db_session.get_engine()
    models.Base.metadata.drop_all(bind=engine)
    models.Base.metadata.create_all(bind=engine)

    yield db_file

    try:
        models.Base.metadata.drop_all(bind=engine)
    except Exception:
        pass
    try:
        engine.dispose()
    except Exception:
        pass
    core_config.get_settings.cache_clear()
    db_session.get_engine.cache_clear()
    db_session._get_sessionmaker.cache_clear()  # type: ignore[attr-defined]


def test_slot_crud(temp_db):
    storage = SQLStorage()
    assert storage.get_item("students") is None

    storage.set_item("students", "[]")
    assert storage.get_item("students") == "[]"

    storage.set_item("students", '[{"id": "1"}]')
    assert storage.get_item("students") == '[{"id": "1"}]'

    storage.remove_item("students")
    assert storage.get_item("students") is None
    storage.remove_item("students")


def test_build_storage_creates_schema(temp_db):
    storage = build_storage(core_config.get_settings())
    assert isinstance(storage, SQLStorage)
    storage.set_item("currentUser", "{}")
    assert storage.get_item("currentUser") == "{}"


def test_records_persist_across_services(temp_db):
    persistence = CollectionPersistence(SQLStorage())
    data = PortalDataService(RecordStore.from_persistence(persistence), persistence)
    data.teachers.create({"id": "9876500042", "name": "Ada", "email": "ada@x.edu", "specialization": ["Math"]})

    fresh = CollectionPersistence(SQLStorage())
    reloaded = PortalDataService(RecordStore.from_persistence(fresh), fresh)
    assert reloaded.teachers.get_by_id("9876500042")["specialization"] == ["Math"]
    assert reloaded.teachers.last_saved()


def test_missing_database_url(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "")
    core_config.get_settings.cache_clear()
    db_session.get_engine.cache_clear()
    try:
        with pytest.raises(RuntimeError):
            db_session.get_engine()
    finally:
        core_config.get_settings.cache_clear()
        db_session.get_engine.cache_clear()
