# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""UploadedFile ORM model – metadata for bytes kept in the upload directory."""

from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey

from database import Base


class UploadedFile(Base):
    __tablename__ = "uploaded_files"

    # uuid4 hex – not derivable from the content or the upload order
    id = Column(String(32), primary_key=True)
    original_name = Column(String(255), nullable=False)
    # <uuid4>-<epoch-ms>.<ext>; the only name used on disk
    stored_name = Column(String(255), unique=True, nullable=False, index=True)
    mime_type = Column(String(255), nullable=False)
    size_bytes = Column(Integer, nullable=False)
    uploaded_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    owner_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
