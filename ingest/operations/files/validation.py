"""Size and content type policy for upload requests."""

from dataclasses import dataclass
from typing import Optional

from ingest.config.constants import (
  ALLOWED_MIME_TYPES,
  BYTES_PER_MB,
  MAX_IMAGE_SIZE_BYTES,
  MAX_PDF_SIZE_BYTES,
)
from ingest.utils.file_type import FileType, classify_file

MAX_SIZE_BY_TYPE = {
  FileType.PDF: MAX_PDF_SIZE_BYTES,
  FileType.IMAGE: MAX_IMAGE_SIZE_BYTES,
}


@dataclass(frozen=True)
class ValidationResult:
  ok: bool
  file_type: FileType
  max_size_bytes: Optional[int] = None
  reason: Optional[str] = None


def format_mb(size_bytes: int) -> str:
  return f"{size_bytes / BYTES_PER_MB:.2f}MB"


def validate_upload(
  mime_type: str,
  size_bytes: int,
  file_type: Optional[FileType] = None,
) -> ValidationResult:
  """
  Check an upload request against the allow-list and per-type size ceilings.

  The ceiling itself is accepted; one byte over is rejected. Unknown types are
  rejected regardless of size. When `file_type` is not given it is classified
  from the content type alone.
  """
  if file_type is None:
    file_type = classify_file(mime_type, "")

  if file_type == FileType.UNKNOWN:
    return ValidationResult(
      ok=False,
      file_type=file_type,
      reason=f"Unsupported file type: {mime_type}",
    )

  max_size = MAX_SIZE_BY_TYPE[file_type]

  if (mime_type or "").lower() not in ALLOWED_MIME_TYPES:
    return ValidationResult(
      ok=False,
      file_type=file_type,
      max_size_bytes=max_size,
      reason=(
        f"MIME type {mime_type} is not allowed. "
        f"Allowed types: {', '.join(ALLOWED_MIME_TYPES)}"
      ),
    )

  if size_bytes > max_size:
    return ValidationResult(
      ok=False,
      file_type=file_type,
      max_size_bytes=max_size,
      reason=(
        f"File size {format_mb(size_bytes)} exceeds maximum allowed size "
        f"of {format_mb(max_size)}"
      ),
    )

  return ValidationResult(ok=True, file_type=file_type, max_size_bytes=max_size)
