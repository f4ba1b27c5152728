"""In-memory owner of the student and teacher collections."""

from __future__ import annotations

from copy import deepcopy
from typing import Dict, Iterable, Optional

from portal.domain.records import KINDS
from portal.domain.seeds import SEEDS
from portal.repositories.persistence import CollectionPersistence


def _copy_record(record: dict) -> dict:
    return {k: list(v) if isinstance(v, list) else v for k, v in record.items()}


class RecordStore:
    """
    Single in-memory source of truth for the running process.

    Readers always receive copies; internal lists are only touched through
    the mutation helpers below.
    """

    def __init__(self, collections: Optional[Dict[str, list[dict]]] = None) -> None:
        self._collections: Dict[str, list[dict]] = {key: [] for key in KINDS}
        for key, records in (collections or {}).items():
            self.replace(key, records)

    @classmethod
    def from_persistence(cls, persistence: CollectionPersistence) -> "RecordStore":
        """Load every collection, falling back to the built-in seeds."""
        return cls({key: persistence.load(key, SEEDS[key]) for key in KINDS})

    def _items(self, key: str) -> list[dict]:
        try:
            return self._collections[key]
        except KeyError:
            raise KeyError(f"Unknown collection: {key}") from None

    # ------------------------------ reads ------------------------------
    def all(self, key: str) -> list[dict]:
        return [_copy_record(r) for r in self._items(key)]

    def snapshot(self, key: str) -> list[dict]:
        return deepcopy(self._items(key))

    def find(self, key: str, record_id: str) -> Optional[dict]:
        index = self.index_of(key, record_id)
        return _copy_record(self._items(key)[index]) if index >= 0 else None

    def index_of(self, key: str, record_id: str) -> int:
        for i, record in enumerate(self._items(key)):
            if record.get("id") == record_id:
                return i
        return -1

    def count(self, key: str) -> int:
        return len(self._items(key))

    # ------------------------------ writes ------------------------------
    def append(self, key: str, record: dict) -> None:
        self._items(key).append(_copy_record(record))

    def put(self, key: str, index: int, record: dict) -> None:
        self._items(key)[index] = _copy_record(record)

    def remove_at(self, key: str, index: int) -> None:
        del self._items(key)[index]

    def replace(self, key: str, records: Iterable[dict]) -> None:
        if key not in self._collections:
            raise KeyError(f"Unknown collection: {key}")
        self._collections[key] = deepcopy(list(records))

    # The persistence layer serializes the live list without copying.
    def raw(self, key: str) -> list[dict]:
        return self._items(key)
