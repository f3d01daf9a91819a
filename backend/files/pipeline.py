# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
File ingestion pipeline.

An upload moves through  Received → Validated → Persisted → (Deleted).

* Validation (extension + declared MIME type + size) happens entirely
  before the first byte is written.
* Stored names are ``<uuid4 hex>-<epoch ms><original extension>``, so
  concurrent uploads never contend for a name and need no directory lock.
* Batches are all-or-nothing: every file is validated first, and a write
  failure part-way through removes what the batch already stored.
* Delete removes the bytes first and the metadata second.  A crash in
  between leaves an orphan file on disk, never metadata pointing at nothing.
"""

import os
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from core.errors import (
    BatchPartialFailureError,
    FileNotFound,
    NoFileError,
    RecordNotFoundError,
    TooLargeError,
    TooManyFilesError,
    UnsupportedTypeError,
    ValidationError,
)
from core.logger import logger
from core.policy import ADMIN, ensure_can_mutate_owned
from core.security import utc_now
from files.storage import FileStorage
from models.uploaded_file import UploadedFile
from repositories.base import Repository


# -- Received --------------------------------------------------------------


@dataclass
class IncomingFile:
    filename: str
    content_type: str
    data: bytes
    # Size reported by the transport, when known.  ``data`` may have been
    # truncated at max_file_size + 1 bytes.
    declared_size: Optional[int] = None

    @property
    def size(self) -> int:
        return max(len(self.data), self.declared_size or 0)

    @property
    def original_name(self) -> str:
        # Browsers on Windows may send the full client path
        return os.path.basename(self.filename.replace("\\", "/"))

    @property
    def extension(self) -> str:
        """Extension including the dot, as sent (".TXT" stays ".TXT")."""
        return os.path.splitext(self.original_name)[1]


# -- Validated -------------------------------------------------------------


@dataclass
class UploadPolicy:
    max_file_size: int
    max_files: int
    # lower-case extension without dot → accepted lower-case MIME types
    allowed_types: dict[str, set[str]] = field(default_factory=dict)

    @classmethod
    def from_settings(cls, settings) -> "UploadPolicy":
        allowed = {
            ext.lower().lstrip("."): {mime.lower() for mime in mimes}
            for ext, mimes in settings.allowed_file_types.items()
        }
        return cls(
            max_file_size=settings.max_file_size,
            max_files=settings.max_files_per_request,
            allowed_types=allowed,
        )

    def check(self, incoming: IncomingFile) -> None:
        ext = incoming.extension.lower().lstrip(".")
        mime = (incoming.content_type or "").split(";", 1)[0].strip().lower()
        if not ext or mime not in self.allowed_types.get(ext, ()):
            raise UnsupportedTypeError()
        if incoming.size > self.max_file_size:
            raise TooLargeError(f"File too large (max {self.max_file_size} bytes)")

    def check_batch_size(self, count: int) -> None:
        if count == 0:
            raise NoFileError("No files provided")
        if count > self.max_files:
            raise TooManyFilesError(f"Too many files (max {self.max_files} per request)")


# -- Persisted / Deleted -----------------------------------------------------


class FileIngestionPipeline:
    def __init__(
        self,
        files: Repository,
        storage: FileStorage,
        policy: UploadPolicy,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._files = files
        self._storage = storage
        self._policy = policy
        self._clock = clock

    @property
    def policy(self) -> UploadPolicy:
        return self._policy

    def ingest(self, incoming: IncomingFile, actor) -> UploadedFile:
        """Validate and store a single upload owned by *actor*."""
        self._policy.check(incoming)
        return self._persist([incoming], actor)[0]

    def ingest_batch(self, batch: list[IncomingFile], actor) -> list[UploadedFile]:
        """
        Validate every file, then store them all.  One invalid file rejects
        the whole batch with BatchPartialFailureError; nothing is written.
        """
        self._policy.check_batch_size(len(batch))
        for incoming in batch:
            try:
                self._policy.check(incoming)
            except ValidationError as exc:
                raise BatchPartialFailureError(incoming.original_name, exc) from exc
        return self._persist(batch, actor)

    def delete(self, file_id: str, actor) -> UploadedFile:
        record = self._files.get(file_id)
        if record is None:
            raise FileNotFound()
        ensure_can_mutate_owned(actor, record.owner_id, "Not authorized to delete this file")

        # Bytes first; an OSError here leaves the metadata untouched
        if not self._storage.delete(record.stored_name):
            logger.warning("Bytes for file %s were already missing", record.id)
        try:
            self._files.delete(record.id)
        except RecordNotFoundError as exc:
            # Lost a race with a concurrent delete of the same id
            raise FileNotFound() from exc

        logger.info("File deleted: %s (%s) by user %s", record.id, record.original_name, actor.id)
        return record

    def list_for(self, actor) -> list[UploadedFile]:
        """Admins see every file, everyone else their own."""
        records = self._files.list()
        if actor.role == ADMIN:
            return records
        return [r for r in records if r.owner_id == actor.id]

    def open_download(self, stored_name: str) -> tuple[Path, Optional[UploadedFile]]:
        """Path of the stored bytes plus their metadata, if recorded."""
        path = self._storage.path_for(stored_name)
        if path is None or not path.is_file():
            raise FileNotFound()
        return path, self._files.find_by("stored_name", stored_name)

    # -- helpers -----------------------------------------------------------

    def _new_stored_name(self, extension: str) -> str:
        millis = int(self._clock().timestamp() * 1000)
        return f"{uuid.uuid4().hex}-{millis}{extension}"

    def _persist(self, batch: list[IncomingFile], actor) -> list[UploadedFile]:
        stored: list[UploadedFile] = []
        try:
            for incoming in batch:
                stored.append(self._store_one(incoming, actor))
        except Exception:
            for record in stored:
                self._discard(record)
            raise

        for record in stored:
            logger.info(
                "File uploaded: %s as %s (%d bytes) by user %s",
                record.original_name,
                record.stored_name,
                record.size_bytes,
                actor.id,
            )
        return stored

    def _store_one(self, incoming: IncomingFile, actor) -> UploadedFile:
        stored_name = self._new_stored_name(incoming.extension)
        self._storage.write(stored_name, incoming.data)
        record = UploadedFile(
            id=uuid.uuid4().hex,
            original_name=incoming.original_name,
            stored_name=stored_name,
            mime_type=incoming.content_type.split(";", 1)[0].strip(),
            size_bytes=len(incoming.data),
            uploaded_at=self._clock(),
            owner_id=actor.id,
        )
        try:
            return self._files.put(record)
        except Exception:
            self._storage.delete(stored_name)
            raise

    def _discard(self, record: UploadedFile) -> None:
        self._storage.delete(record.stored_name)
        try:
            self._files.delete(record.id)
        except RecordNotFoundError:
            logger.debug("Rollback: metadata %s already gone", record.id)
