# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Volatile in-memory repository.

State lives in a dict guarded by one lock per collection; every mutation and
the unique-key check that precedes it happen under that lock.  Nothing
survives a restart.
"""

import itertools
import threading
from typing import Any, Optional

from core.errors import DuplicateKeyError, RecordNotFoundError
from repositories.base import Repository


class MemoryRepository(Repository):
    def __init__(self, unique_keys: tuple[str, ...] = (), auto_id: bool = True):
        self.unique_keys = tuple(unique_keys)
        self._auto_id = auto_id
        self._ids = itertools.count(1)
        self._records: dict[Any, Any] = {}
        # unique key → {value: record id}
        self._index: dict[str, dict[Any, Any]] = {key: {} for key in self.unique_keys}
        self._lock = threading.Lock()

    def get(self, record_id) -> Optional[Any]:
        with self._lock:
            return self._records.get(record_id)

    def put(self, record) -> Any:
        with self._lock:
            if record.id is None:
                if not self._auto_id:
                    raise ValueError("record id is required for this collection")
                new_id = next(self._ids)
                # Explicit ids may already have taken the next value
                while new_id in self._records:
                    new_id = next(self._ids)
                candidate_id = new_id
            else:
                candidate_id = record.id

            for key in self.unique_keys:
                value = getattr(record, key)
                owner = self._index[key].get(value)
                if owner is not None and owner != candidate_id:
                    raise DuplicateKeyError(key, value)

            previous = self._records.get(candidate_id)
            if previous is not None:
                for key in self.unique_keys:
                    self._index[key].pop(getattr(previous, key), None)

            record.id = candidate_id
            self._records[candidate_id] = record
            for key in self.unique_keys:
                self._index[key][getattr(record, key)] = candidate_id
            return record

    def delete(self, record_id) -> Any:
        with self._lock:
            record = self._records.pop(record_id, None)
            if record is None:
                raise RecordNotFoundError(record_id)
            for key in self.unique_keys:
                self._index[key].pop(getattr(record, key), None)
            return record

    def find_by(self, key: str, value) -> Optional[Any]:
        with self._lock:
            if key in self._index:
                record_id = self._index[key].get(value)
                return self._records.get(record_id) if record_id is not None else None
            for record in self._records.values():
                if getattr(record, key) == value:
                    return record
            return None

    def list(self) -> list:
        with self._lock:
            return list(self._records.values())
