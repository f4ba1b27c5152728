"""
String-keyed storage backends.

Every backend mirrors the browser local-storage contract: values are
serialized text addressed by a key, and a missing key reads as None.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Optional
import json
import logging
import os
import tempfile
import threading

from portal.core.config import Settings
from portal.db.create_tables import create_all
from portal.db.models import StorageSlot
from portal.db.session import get_session

logger = logging.getLogger(__name__)


class KeyValueStorage:
    """Interface shared by all storage backends."""

    def get_item(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set_item(self, key: str, value: str) -> None:
        raise NotImplementedError

    def remove_item(self, key: str) -> None:
        raise NotImplementedError


class MemoryStorage(KeyValueStorage):
    """Process-local storage, handy for tests and throwaway runs."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        if not isinstance(value, str):
            raise TypeError(f"storage values must be str, got {type(value).__name__}")
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class JsonFileStorage(KeyValueStorage):
    """
    Single JSON document on disk holding every slot.

    Writes go to a temp file in the same directory and are swapped in with
    os.replace, so readers never see a half-written document. An unparseable
    document is moved aside to ``<name>.corrupt`` and treated as empty.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    def _load(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except ValueError as exc:
            aside = self.path.with_name(self.path.name + ".corrupt")
            logger.warning("Data file %s is unreadable (%s); moving it to %s", self.path, exc, aside)
            os.replace(self.path, aside)
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self, data: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(json.dumps(data, ensure_ascii=False, indent=2))
            os.replace(tmp_name, self.path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    def get_item(self, key: str) -> Optional[str]:
        with self._lock:
            value = self._load().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        if not isinstance(value, str):
            raise TypeError(f"storage values must be str, got {type(value).__name__}")
        with self._lock:
            data = self._load()
            data[key] = value
            self._save(data)

    def remove_item(self, key: str) -> None:
        with self._lock:
            data = self._load()
            if key in data:
                del data[key]
                self._save(data)


class SQLStorage(KeyValueStorage):
    """Slots stored as rows of the ``storage_slots`` table."""

    def get_item(self, key: str) -> Optional[str]:
        with get_session() as session:
            slot = session.get(StorageSlot, key)
            return slot.value if slot else None

    def set_item(self, key: str, value: str) -> None:
        if not isinstance(value, str):
            raise TypeError(f"storage values must be str, got {type(value).__name__}")
        now = datetime.now(timezone.utc)
        with get_session() as session:
            slot = session.get(StorageSlot, key)
            if not slot:
                session.add(StorageSlot(key=key, value=value, updated_at=now))
            else:
                slot.value = value
                slot.updated_at = now
            session.commit()

    def remove_item(self, key: str) -> None:
        with get_session() as session:
            slot = session.get(StorageSlot, key)
            if slot:
                session.delete(slot)
                session.commit()


def build_storage(settings: Settings) -> KeyValueStorage:
    """Pick the backend named by ``STORAGE_BACKEND``."""
    backend = settings.storage_backend
    if backend == "memory":
        return MemoryStorage()
    if backend == "json":
        return JsonFileStorage(settings.data_file)
    if backend == "sql":
        create_all()
        return SQLStorage()
    raise ValueError(f"Unknown STORAGE_BACKEND: {backend!r}")
