# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""Pydantic response models for the file endpoints (camelCase on the wire)."""

from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class FileOut(BaseModel):
    id: str
    original_name: str
    stored_name: str
    mime_type: str
    size_bytes: int
    uploaded_at: datetime
    owner_id: int
    download_url: str

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @classmethod
    def from_record(cls, record) -> "FileOut":
        return cls(
            id=record.id,
            original_name=record.original_name,
            stored_name=record.stored_name,
            mime_type=record.mime_type,
            size_bytes=record.size_bytes,
            uploaded_at=record.uploaded_at,
            owner_id=record.owner_id,
            download_url=f"/files/download/{record.stored_name}",
        )


class UploadResponse(BaseModel):
    success: bool = True
    message: str
    file: FileOut


class BatchUploadResponse(BaseModel):
    success: bool = True
    message: str
    files: List[FileOut]


class FileListResponse(BaseModel):
    success: bool = True
    files: List[FileOut]
    count: int
