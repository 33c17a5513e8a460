"""File type classification from content type and file name."""

from enum import Enum

from ingest.config.constants import IMAGE_EXTENSIONS


class FileType(str, Enum):
  """Coarse file category used for size policy and key prefixes."""

  PDF = "pdf"
  IMAGE = "image"
  UNKNOWN = "unknown"


def classify_file(mime_type: str, file_name: str) -> FileType:
  """
  Classify a file as pdf, image or unknown.

  Either signal is sufficient: a PDF content type or a `.pdf` name makes the
  file a PDF, an `image/*` content type or a known image extension makes it an
  image. Matching is case-insensitive and never fails.
  """
  lower_type = (mime_type or "").lower()
  lower_name = (file_name or "").lower()

  if "pdf" in lower_type or lower_name.endswith(".pdf"):
    return FileType.PDF

  if lower_type.startswith("image/") or lower_name.endswith(
    tuple(f".{ext}" for ext in IMAGE_EXTENSIONS)
  ):
    return FileType.IMAGE

  return FileType.UNKNOWN
