# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Storage interface shared by every collection (users, products, files).

Implementations must make ``put`` atomic with respect to the collection's
unique keys: two concurrent puts carrying the same unique value end with one
stored record and one ``DuplicateKeyError``.  Services only ever talk to this
interface, so the in-memory backend can be swapped for the SQL one without
touching the auth or authorization code.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional


class Repository(ABC):
    #: attribute names whose values must be unique across the collection
    unique_keys: tuple[str, ...] = ()

    @abstractmethod
    def get(self, record_id) -> Optional[Any]:
        """Return the record with *record_id* or None."""

    @abstractmethod
    def put(self, record) -> Any:
        """
        Insert or replace *record* and return it.

        A record whose ``id`` is None is inserted and receives the next id
        (integer-keyed collections only).  Raises ``DuplicateKeyError`` when a
        unique key is already taken by another record.
        """

    @abstractmethod
    def delete(self, record_id) -> Any:
        """Remove and return the record, or raise ``RecordNotFoundError``."""

    @abstractmethod
    def find_by(self, key: str, value) -> Optional[Any]:
        """Return the first record whose *key* attribute equals *value*."""

    @abstractmethod
    def list(self) -> list:
        """All records, oldest first."""
