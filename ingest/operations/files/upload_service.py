"""
Upload URL issuance.

Flow: classify -> validate -> new file id -> storage key -> PENDING_UPLOAD
record -> presigned PUT URL. The record is written before the URL exists, so
an upload can never complete for a file the metadata store doesn't know.
"""

from datetime import datetime, timedelta, timezone
from typing import Callable, Optional
from urllib.parse import quote

from ingest.config.constants import DEFAULT_UPLOAD_URL_EXPIRY_SECONDS
from ingest.exceptions import ExternalServiceError
from ingest.logger import log_app_error, logger
from ingest.models.file_record import FileRecord, FileStatus, to_iso
from ingest.utils.file_type import classify_file
from ingest.utils.ulid import generate_ulid
from ingest.operations.files.contracts import (
  MetadataStore,
  UploadIssueResult,
  UploadSigner,
)
from ingest.operations.files.keys import build_storage_key
from ingest.operations.files.validation import validate_upload


class PresignedUploadService:
  """Issues time-boxed upload URLs backed by a provisional file record."""

  def __init__(
    self,
    metadata_store: MetadataStore,
    signer: UploadSigner,
    bucket_name: str,
    expiry_seconds: Optional[int] = None,
    clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    id_factory: Callable[[], str] = generate_ulid,
  ):
    self.metadata_store = metadata_store
    self.signer = signer
    self.bucket_name = bucket_name
    self.expiry_seconds = expiry_seconds or DEFAULT_UPLOAD_URL_EXPIRY_SECONDS
    self.clock = clock
    self.id_factory = id_factory

  def issue(
    self, owner_id: str, file_name: str, mime_type: str, size_bytes: int
  ) -> UploadIssueResult:
    """
    Create a pending record and a signed upload URL for it.

    Rejections (policy or infrastructure) come back as an unsuccessful result.
    A policy rejection has no side effects. If signing fails after the record
    was written, the record stays behind as PENDING_UPLOAD and is reclaimed by
    the expiry sweep.
    """
    file_type = classify_file(mime_type, file_name)
    validation = validate_upload(mime_type, size_bytes, file_type)
    if not validation.ok:
      logger.info(
        f"Rejected upload request for {file_name}: {validation.reason}",
        extra={"owner_id": owner_id},
      )
      return UploadIssueResult(success=False, error=validation.reason)

    file_id = None
    try:
      file_id = self.id_factory()
      now = self.clock()
      storage_key = build_storage_key(file_type, owner_id, file_id, file_name, now)
      url_expires_at = to_iso(now + timedelta(seconds=self.expiry_seconds))

      record = FileRecord(
        file_id=file_id,
        owner_id=owner_id,
        file_name=file_name,
        mime_type=mime_type,
        size_bytes=size_bytes,
        status=FileStatus.PENDING_UPLOAD,
        storage_bucket=self.bucket_name,
        storage_key=storage_key,
        created_at=to_iso(now),
        updated_at=to_iso(now),
        url_expires_at=url_expires_at,
      )
      self.metadata_store.create(record)

      upload_url = self.signer.generate_upload_url(
        bucket=self.bucket_name,
        key=storage_key,
        content_type=mime_type,
        expires_in=self.expiry_seconds,
        metadata={
          "originalFileName": quote(file_name),
          "fileSize": str(size_bytes),
        },
      )
    except Exception as e:
      log_app_error(e, "upload_service", "issue", "infrastructure", file_id=file_id)
      return UploadIssueResult(
        success=False,
        error=f"Failed to generate upload URL: {_public_reason(e)}",
      )

    logger.info(
      f"Issued upload URL for file {file_id} ({validation.file_type.value})",
      extra={"file_id": file_id, "owner_id": owner_id, "storage_key": storage_key},
    )
    return UploadIssueResult(
      success=True,
      file_id=file_id,
      upload_url=upload_url,
      storage_key=storage_key,
      url_expires_at=url_expires_at,
      max_size_bytes=validation.max_size_bytes,
    )


def _public_reason(error: Exception) -> str:
  """Error text safe to hand back to callers (no table or bucket names)."""
  if isinstance(error, ExternalServiceError):
    return error.reason or f"{error.service} request failed"
  return str(error)
