# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
SQLAlchemy-backed repository.

Uniqueness is enforced by the table's unique constraints; a violation rolls
the session back and surfaces as ``DuplicateKeyError``.  One short-lived
session per call.
"""

from typing import Any, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker

from core.errors import DuplicateKeyError, RecordNotFoundError
from core.logger import logger
from repositories.base import Repository


class SqlRepository(Repository):
    def __init__(
        self,
        model,
        session_factory: sessionmaker,
        unique_keys: tuple[str, ...] = (),
        order_by=None,
    ):
        self.model = model
        self.unique_keys = tuple(unique_keys)
        self._session_factory = session_factory
        self._order_by = order_by if order_by is not None else model.id

    def get(self, record_id) -> Optional[Any]:
        with self._session_factory() as db:
            return db.get(self.model, record_id)

    def put(self, record) -> Any:
        incoming = record
        with self._session_factory() as db:
            try:
                if record.id is None:
                    db.add(record)
                else:
                    record = db.merge(record)
                db.commit()
            except IntegrityError as exc:
                db.rollback()
                # The rollback expired the merged copy; *incoming* still
                # holds the values that were rejected
                key = self._conflicting_key(db, incoming)
                if key is None:
                    raise
                logger.debug("Unique constraint hit on %s.%s", self.model.__tablename__, key)
                raise DuplicateKeyError(key, getattr(incoming, key)) from exc
            return record

    def delete(self, record_id) -> Any:
        with self._session_factory() as db:
            record = db.get(self.model, record_id)
            if record is None:
                raise RecordNotFoundError(record_id)
            db.delete(record)
            db.commit()
            return record

    def find_by(self, key: str, value) -> Optional[Any]:
        with self._session_factory() as db:
            column = getattr(self.model, key)
            return db.query(self.model).filter(column == value).first()

    def list(self) -> list:
        with self._session_factory() as db:
            return db.query(self.model).order_by(self._order_by).all()

    # -- helpers -----------------------------------------------------------

    def _conflicting_key(self, db, record) -> Optional[str]:
        for key in self.unique_keys:
            value = getattr(record, key)
            existing = db.query(self.model).filter(getattr(self.model, key) == value).first()
            if existing is not None and existing.id != record.id:
                return key
        return None
