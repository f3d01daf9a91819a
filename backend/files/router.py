# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
File endpoints – upload (single / batch), listing, download and delete.

Security invariants enforced here
---------------------------------
* Upload, listing and delete require a bearer token; the uploader becomes
  the owner of the stored file.
* Delete is allowed for the owner or an admin only (403 otherwise).
* Download is public and addressed by the generated stored name, which is
  not guessable from the original name or the content.
* At most ``max_file_size + 1`` bytes of each part are handed to the
  pipeline; the multipart parser has already spooled the part to a
  temporary file by then.
* Ingestion does blocking disk and store work, so it runs in the
  thread pool rather than on the event loop.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import FileResponse
from starlette.concurrency import run_in_threadpool

from core.container import get_pipeline
from core.errors import NoFileError
from core.security import TokenClaims, get_current_user
from files.pipeline import FileIngestionPipeline, IncomingFile
from files.schemas import BatchUploadResponse, FileListResponse, FileOut, UploadResponse

router = APIRouter(prefix="/files", tags=["files"])


async def _receive(upload: UploadFile, limit: int) -> IncomingFile:
    data = await upload.read(limit + 1)
    return IncomingFile(
        filename=upload.filename or "",
        content_type=upload.content_type or "",
        data=data,
        declared_size=getattr(upload, "size", None),
    )


# ---------------------------------------------------------------------------
# POST /files/upload  – single file, multipart field "file"
# ---------------------------------------------------------------------------


@router.post("/upload", response_model=UploadResponse)
async def upload_file(
    file: Optional[UploadFile] = File(default=None),
    current_user: TokenClaims = Depends(get_current_user),
    pipeline: FileIngestionPipeline = Depends(get_pipeline),
):
    if file is None or not file.filename:
        raise NoFileError()
    incoming = await _receive(file, pipeline.policy.max_file_size)
    record = await run_in_threadpool(pipeline.ingest, incoming, current_user)
    return UploadResponse(message="File uploaded successfully", file=FileOut.from_record(record))


# ---------------------------------------------------------------------------
# POST /files/upload/multiple  – multipart field "files", all-or-nothing
# ---------------------------------------------------------------------------


@router.post("/upload/multiple", response_model=BatchUploadResponse)
async def upload_files(
    files: Optional[List[UploadFile]] = File(default=None),
    current_user: TokenClaims = Depends(get_current_user),
    pipeline: FileIngestionPipeline = Depends(get_pipeline),
):
    uploads = [f for f in (files or []) if f.filename]
    # Count check first; no part is read for an oversized batch
    pipeline.policy.check_batch_size(len(uploads))

    batch = [await _receive(f, pipeline.policy.max_file_size) for f in uploads]
    records = await run_in_threadpool(pipeline.ingest_batch, batch, current_user)
    return BatchUploadResponse(
        message=f"{len(records)} files uploaded successfully",
        files=[FileOut.from_record(r) for r in records],
    )


# ---------------------------------------------------------------------------
# GET /files  – own files (all files for admins)
# ---------------------------------------------------------------------------


@router.get("", response_model=FileListResponse)
def list_files(
    current_user: TokenClaims = Depends(get_current_user),
    pipeline: FileIngestionPipeline = Depends(get_pipeline),
):
    records = pipeline.list_for(current_user)
    return FileListResponse(files=[FileOut.from_record(r) for r in records], count=len(records))


# ---------------------------------------------------------------------------
# GET /files/download/{stored_name}  – public
# ---------------------------------------------------------------------------


@router.get("/download/{stored_name}")
def download_file(stored_name: str, pipeline: FileIngestionPipeline = Depends(get_pipeline)):
    path, record = pipeline.open_download(stored_name)
    if record is None:
        return FileResponse(path)
    return FileResponse(path, media_type=record.mime_type, filename=record.original_name)


# ---------------------------------------------------------------------------
# DELETE /files/{file_id}  – owner or admin
# ---------------------------------------------------------------------------


@router.delete("/{file_id}")
def delete_file(
    file_id: str,
    current_user: TokenClaims = Depends(get_current_user),
    pipeline: FileIngestionPipeline = Depends(get_pipeline),
):
    pipeline.delete(file_id, current_user)
    return {"success": True, "message": "File deleted successfully"}
