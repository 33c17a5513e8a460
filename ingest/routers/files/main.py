"""
File Management - Read Endpoints.

Listing, metadata lookup and download URLs for files owned by the current
principal.
"""

from datetime import datetime, timedelta, timezone

from fastapi import APIRouter, Depends, Path, Query, status
from fastapi.responses import JSONResponse

from ingest.config import env
from ingest.config.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from ingest.logger import api_logger
from ingest.models.api.common import ErrorResponse, error_body
from ingest.models.api.files import (
  DownloadUrlResponse,
  FileInfoResponse,
  FileSummary,
  ListFilesResponse,
)
from ingest.models.file_record import FileRecord, FileStatus, to_iso
from ingest.operations.aws.s3 import S3Client
from ingest.operations.files.contracts import MetadataStore
from ingest.routers.files.dependencies import (
  get_download_signer,
  get_metadata_store,
  get_owner_id,
)

FILE_NOT_FOUND_MESSAGE = "File not found"
INVALID_LIMIT_MESSAGE = "Invalid limit parameter. Must be a positive integer."

router = APIRouter()


def _find_file(store: MetadataStore, file_id: str, owner_id: str) -> FileRecord | None:
  record = store.get_by_id(file_id)
  if record is None:
    record = store.get(owner_id, file_id)
  return record


def _parse_limit(raw: str | None) -> int | None:
  if raw is None or raw == "":
    return DEFAULT_PAGE_SIZE
  try:
    limit = int(raw)
  except ValueError:
    return None
  if limit < 1:
    return None
  return min(limit, MAX_PAGE_SIZE)


@router.get(
  "/files",
  response_model=ListFilesResponse,
  response_model_exclude_none=True,
  operation_id="listFiles",
  summary="List Files",
  description="""List the caller's files, newest first.

Pass `nextCursor` from a response as `cursor` to fetch the next page. A cursor
that cannot be read restarts the listing from the first page.""",
  responses={
    200: {"description": "Files retrieved successfully"},
    400: {"description": "Invalid limit", "model": ErrorResponse},
    500: {"description": "Internal server error", "model": ErrorResponse},
  },
)
def list_files(
  limit: str | None = Query(
    None, description=f"Page size (default {DEFAULT_PAGE_SIZE}, max {MAX_PAGE_SIZE})"
  ),
  cursor: str | None = Query(None, description="Opaque continuation cursor"),
  owner_id: str = Depends(get_owner_id),
  store: MetadataStore = Depends(get_metadata_store),
):
  page_size = _parse_limit(limit)
  if page_size is None:
    return JSONResponse(
      status_code=status.HTTP_400_BAD_REQUEST,
      content=error_body(INVALID_LIMIT_MESSAGE),
    )

  page = store.list(owner_id, page_size, cursor or None)
  api_logger.debug(
    f"Listed {len(page.records)} files for {owner_id}", extra={"owner_id": owner_id}
  )
  return ListFilesResponse(
    files=[FileSummary.from_record(record) for record in page.records],
    nextCursor=page.next_cursor,
  )


@router.get(
  "/files/{file_id}",
  response_model=FileInfoResponse,
  response_model_exclude_none=True,
  operation_id="getFile",
  summary="Get File",
  description="Get metadata and lifecycle status for a single file.",
  responses={
    200: {"description": "File found"},
    404: {"description": "File not found", "model": ErrorResponse},
    500: {"description": "Internal server error", "model": ErrorResponse},
  },
)
def get_file(
  file_id: str = Path(..., description="File ID"),
  owner_id: str = Depends(get_owner_id),
  store: MetadataStore = Depends(get_metadata_store),
):
  record = _find_file(store, file_id, owner_id)
  if record is None:
    return JSONResponse(
      status_code=status.HTTP_404_NOT_FOUND,
      content=error_body(FILE_NOT_FOUND_MESSAGE),
    )
  return FileInfoResponse.from_record(record)


@router.get(
  "/files/{file_id}/download",
  response_model=DownloadUrlResponse,
  operation_id="getFileDownloadUrl",
  summary="Get File Download URL",
  description="""Generate a presigned S3 GET URL for an uploaded file.

Only files in UPLOADED status can be downloaded.""",
  responses={
    200: {"description": "Download URL generated successfully"},
    400: {"description": "File has not finished uploading", "model": ErrorResponse},
    404: {"description": "File not found", "model": ErrorResponse},
    500: {"description": "Internal server error", "model": ErrorResponse},
  },
)
def get_file_download_url(
  file_id: str = Path(..., description="File ID"),
  owner_id: str = Depends(get_owner_id),
  store: MetadataStore = Depends(get_metadata_store),
  signer: S3Client = Depends(get_download_signer),
):
  record = _find_file(store, file_id, owner_id)
  if record is None:
    return JSONResponse(
      status_code=status.HTTP_404_NOT_FOUND,
      content=error_body(FILE_NOT_FOUND_MESSAGE),
    )

  if record.status != FileStatus.UPLOADED:
    return JSONResponse(
      status_code=status.HTTP_400_BAD_REQUEST,
      content=error_body(
        f"File is not available for download (status: {record.status.value})"
      ),
    )

  expires_in = env.DOWNLOAD_URL_EXPIRY_SECONDS
  download_url = signer.generate_download_url(
    record.storage_bucket, record.storage_key, expires_in, record.file_name
  )
  return DownloadUrlResponse(
    fileId=record.file_id,
    downloadUrl=download_url,
    expiresAt=to_iso(datetime.now(timezone.utc) + timedelta(seconds=expires_in)),
    fileName=record.file_name,
  )
