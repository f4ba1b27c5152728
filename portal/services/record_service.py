"""
Student/teacher record use cases (CRUD, search, import/export, reset).

Every successful mutation flushes the whole collection before returning, so
a caller that re-reads immediately observes the change in durable storage.
"""

from __future__ import annotations

from collections.abc import Mapping
from copy import deepcopy
from typing import Any, Optional
import json
import logging
import threading

from portal.core.utils import utc_now_iso
from portal.domain.records import (
    KINDS,
    STUDENTS,
    TEACHERS,
    RecordKind,
    as_list,
    default_password,
    matches_query,
    missing_required,
)
from portal.domain.seeds import SEEDS
from portal.repositories.persistence import CollectionPersistence, SaveResult
from portal.repositories.record_store import RecordStore

logger = logging.getLogger(__name__)


class RecordError(Exception):
    """Base class for record workflow errors."""


class ValidationError(RecordError):
    def __init__(self, message: str, fields: Optional[list[str]] = None):
        super().__init__(message)
        self.message = message
        self.fields = fields or []


class DuplicateKeyError(RecordError):
    pass


class NotFoundError(RecordError):
    pass


class RecordImportError(RecordError):
    """Raised when an import payload cannot be applied."""


class PersistenceError(RecordError):
    """Raised on failed flushes, only when strict persistence is enabled."""

    def __init__(self, result: SaveResult):
        super().__init__(f"Failed to persist {result.key}: {result.error}")
        self.result = result


class RecordService:
    """CRUD operations over one record collection."""

    def __init__(
        self,
        kind: RecordKind,
        store: RecordStore,
        persistence: CollectionPersistence,
        *,
        strict: bool = False,
        lock: Optional[threading.RLock] = None,
    ) -> None:
        self.kind = kind
        self.store = store
        self.persistence = persistence
        self.strict = strict
        self.last_save_result: Optional[SaveResult] = None
        # Guards check-then-write sequences and flushes of the shared store.
        self.lock = lock or threading.RLock()

    @property
    def key(self) -> str:
        return self.kind.key

    # -------------------------------------- persistence --------------------------------------
    def flush(self) -> SaveResult:
        """Force a synchronous write of the collection."""
        with self.lock:
            result = self.persistence.flush(self.key, self.store.raw(self.key))
            self.last_save_result = result
        if not result.ok and self.strict:
            raise PersistenceError(result)
        return result

    def last_saved(self) -> Optional[str]:
        return self.persistence.last_saved(self.key)

    # -------------------------------------- reads --------------------------------------
    def list(self) -> list[dict]:
        return self.store.all(self.key)

    def get_by_id(self, record_id: str) -> Optional[dict]:
        return self.store.find(self.key, record_id)

    def count(self) -> int:
        return self.store.count(self.key)

    def search(self, query: str) -> list[dict]:
        return [r for r in self.store.all(self.key) if matches_query(r, query)]

    # -------------------------------------- writes --------------------------------------
    def create(self, data: Mapping[str, Any]) -> dict:
        data = dict(data or {})
        missing = missing_required(data)
        if missing:
            raise ValidationError(f"{self.kind.label} must have id, name, and email", missing)
        record_id = str(data["id"])
        record = {
            "id": record_id,
            "name": data["name"],
            "email": data["email"],
            "password": data.get("password") or default_password(self.kind, record_id),
        }
        for name in self.kind.list_fields:
            record[name] = as_list(data.get(name))

        with self.lock:
            if self.store.index_of(self.key, record_id) >= 0:
                raise DuplicateKeyError(f"{self.kind.label} with ID {record_id} already exists")
            self.store.append(self.key, record)
            logger.debug("Created %s %s", self.kind.label.lower(), record_id)
            self.flush()
        return dict(record)

    def update(self, record_id: str, patch: Mapping[str, Any]) -> dict:
        with self.lock:
            index = self.store.index_of(self.key, record_id)
            if index < 0:
                raise NotFoundError(f"{self.kind.label} with ID {record_id} not found")
            current = self.store.find(self.key, record_id)
            merged = {**current, **dict(patch or {}), "id": current["id"]}
            for name in self.kind.list_fields:
                merged[name] = as_list(merged.get(name))
            self.store.put(self.key, index, merged)
            logger.debug("Updated %s %s", self.kind.label.lower(), record_id)
            self.flush()
        return dict(merged)

    def delete(self, record_id: str) -> bool:
        with self.lock:
            index = self.store.index_of(self.key, record_id)
            if index < 0:
                return False
            self.store.remove_at(self.key, index)
            logger.debug("Deleted %s %s", self.kind.label.lower(), record_id)
            self.flush()
        return True


class PortalDataService:
    """Bundles the student and teacher services with whole-dataset operations."""

    def __init__(self, store: RecordStore, persistence: CollectionPersistence, *, strict: bool = False) -> None:
        self.store = store
        self.persistence = persistence
        self.lock = threading.RLock()
        self.students = RecordService(STUDENTS, store, persistence, strict=strict, lock=self.lock)
        self.teachers = RecordService(TEACHERS, store, persistence, strict=strict, lock=self.lock)

    def service_for(self, key: str) -> RecordService:
        if key == STUDENTS.key:
            return self.students
        if key == TEACHERS.key:
            return self.teachers
        raise KeyError(f"Unknown collection: {key}")

    def export_all(self) -> dict:
        return {
            "students": self.store.snapshot(STUDENTS.key),
            "teachers": self.store.snapshot(TEACHERS.key),
            "exportDate": utc_now_iso(),
        }

    def import_all(self, data: Any) -> None:
        """
        Replace each collection present in ``data`` as a list.

        Records are not merged or validated field by field; the payload only
        has to be an object whose lists hold JSON-serializable objects.
        """
        if not isinstance(data, Mapping):
            raise RecordImportError("Failed to import data: payload must be an object")
        incoming: dict[str, list[dict]] = {}
        try:
            for key in KINDS:
                records = data.get(key)
                if not isinstance(records, list):
                    continue
                if not all(isinstance(r, Mapping) for r in records):
                    raise TypeError(f"every entry of {key} must be an object")
                incoming[key] = json.loads(json.dumps(records))
        except (TypeError, ValueError) as exc:
            raise RecordImportError(f"Failed to import data: {exc}") from exc

        with self.lock:
            for key, records in incoming.items():
                self.store.replace(key, records)
                logger.info("Imported %d %s", len(records), key)
                self.service_for(key).flush()

    def reset_all(self) -> None:
        with self.lock:
            for key in KINDS:
                self.store.replace(key, deepcopy(SEEDS[key]))
                self.service_for(key).flush()
        logger.info("Restored default students and teachers")

    def flush_all(self) -> dict[str, SaveResult]:
        return {key: self.service_for(key).flush() for key in KINDS}
