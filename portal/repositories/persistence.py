"""
Collection persistence on top of a key/value storage backend.

Collections are serialized as a whole under a well-known key (``students``,
``teachers``) and every successful write stamps ``<key>_last_saved`` for
diagnostics. Write failures are reported through SaveResult, never raised.
"""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass
from typing import Any, Optional
import json
import logging

from portal.core.utils import utc_now_iso
from portal.repositories.kv_storage import KeyValueStorage

logger = logging.getLogger(__name__)


@dataclass
class SaveResult:
    key: str
    ok: bool
    saved_at: Optional[str] = None
    error: Optional[str] = None


class CollectionPersistence:
    """Loads and flushes whole collections to a KeyValueStorage."""

    def __init__(self, storage: KeyValueStorage) -> None:
        self.storage = storage

    @staticmethod
    def marker_key(key: str) -> str:
        return f"{key}_last_saved"

    # ------------------------------ generic JSON slots ------------------------------
    def read_json(self, key: str, default: Any = None) -> Any:
        """Deserialize a slot, returning ``default`` when absent, empty or unreadable."""
        try:
            raw = self.storage.get_item(key)
        except Exception as exc:
            logger.warning("Could not read slot %s: %s", key, exc)
            return default
        if not raw:
            return default
        try:
            return json.loads(raw)
        except (TypeError, ValueError) as exc:
            logger.warning("Slot %s holds invalid JSON (%s); using default", key, exc)
            return default

    def write_json(self, key: str, value: Any) -> SaveResult:
        try:
            self.storage.set_item(key, json.dumps(value, ensure_ascii=False))
        except Exception as exc:
            logger.warning("Could not write slot %s: %s", key, exc)
            return SaveResult(key=key, ok=False, error=str(exc))
        return SaveResult(key=key, ok=True)

    def remove(self, key: str) -> SaveResult:
        try:
            self.storage.remove_item(key)
        except Exception as exc:
            logger.warning("Could not remove slot %s: %s", key, exc)
            return SaveResult(key=key, ok=False, error=str(exc))
        return SaveResult(key=key, ok=True)

    # ------------------------------ collections ------------------------------
    def load(self, key: str, seed: list[dict]) -> list[dict]:
        """Return the stored collection, or a copy of ``seed`` when unusable."""
        data = self.read_json(key)
        if not isinstance(data, list):
            if data is not None:
                logger.warning("Slot %s is not a list; falling back to seed data", key)
            return deepcopy(seed)
        return [dict(item) for item in data if isinstance(item, dict)]

    def flush(self, key: str, records: list[dict]) -> SaveResult:
        """Synchronously write ``records`` and the last-saved marker."""
        try:
            payload = json.dumps(records, ensure_ascii=False)
            self.storage.set_item(key, payload)
            saved_at = utc_now_iso()
            self.storage.set_item(self.marker_key(key), saved_at)
        except Exception as exc:
            logger.warning("Flush of %s failed: %s", key, exc)
            return SaveResult(key=key, ok=False, error=str(exc))
        logger.debug("Flushed %d record(s) to %s", len(records), key)
        return SaveResult(key=key, ok=True, saved_at=saved_at)

    def last_saved(self, key: str) -> Optional[str]:
        try:
            return self.storage.get_item(self.marker_key(key))
        except Exception as exc:
            logger.warning("Could not read marker for %s: %s", key, exc)
            return None
