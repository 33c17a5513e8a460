"""
Storage key layout for uploaded objects.

Keys follow `{typePrefix}/{ownerId}/{yyyy}/{mm}/{dd}/{fileId}.{ext}` where the
type prefix is `pdf` or `images`. The event reconciler recovers the file id
and owner from the same layout, so both directions live here.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional
from urllib.parse import unquote_plus

from ingest.config.constants import (
  IMAGE_KEY_PREFIX,
  PDF_KEY_PREFIX,
  STORAGE_KEY_SEGMENTS,
)
from ingest.exceptions import InvalidStorageKeyError
from ingest.utils.file_type import FileType

# No extension on the original name falls back to the PDF extension
DEFAULT_EXTENSION = "pdf"

KEY_PREFIXES = {
  FileType.PDF: PDF_KEY_PREFIX,
  FileType.IMAGE: IMAGE_KEY_PREFIX,
}


@dataclass(frozen=True)
class ParsedStorageKey:
  type_prefix: str
  owner_id: str
  file_id: str
  extension: str


def extract_extension(file_name: str) -> str:
  """Substring after the last dot, or the default extension."""
  if not file_name or "." not in file_name:
    return DEFAULT_EXTENSION
  extension = file_name.rsplit(".", 1)[1]
  if not extension or "/" in extension:
    return DEFAULT_EXTENSION
  return extension


def build_storage_key(
  file_type: FileType,
  owner_id: str,
  file_id: str,
  file_name: str,
  now: Optional[datetime] = None,
) -> str:
  """
  Derive the object key for a new upload.

  Date segments come from UTC wall-clock time, the same clock that stamps
  record timestamps.
  """
  now = now or datetime.now(timezone.utc)
  prefix = KEY_PREFIXES.get(FileType(file_type), PDF_KEY_PREFIX)
  extension = extract_extension(file_name)
  return (
    f"{prefix}/{owner_id}/{now:%Y}/{now:%m}/{now:%d}/{file_id}.{extension}"
  )


def decode_object_key(raw_key: str) -> str:
  """Undo the URL encoding S3 applies to keys in event notifications."""
  return unquote_plus(raw_key)


def parse_storage_key(key: str) -> ParsedStorageKey:
  """
  Recover owner and file id from an object key.

  Raises:
      InvalidStorageKeyError: If the key does not follow the storage layout
  """
  parts = key.split("/")
  if len(parts) < STORAGE_KEY_SEGMENTS:
    raise InvalidStorageKeyError(key, f"expected {STORAGE_KEY_SEGMENTS} segments")
  if len(parts) > STORAGE_KEY_SEGMENTS:
    raise InvalidStorageKeyError(key, "too many segments")

  type_prefix, owner_id, year, month, day, object_name = parts
  if type_prefix not in (PDF_KEY_PREFIX, IMAGE_KEY_PREFIX):
    raise InvalidStorageKeyError(key, f"unrecognized type prefix '{type_prefix}'")
  if not owner_id:
    raise InvalidStorageKeyError(key, "missing owner segment")
  if not (
    len(year) == 4
    and len(month) == 2
    and len(day) == 2
    and (year + month + day).isdigit()
  ):
    raise InvalidStorageKeyError(key, "malformed date segments")

  file_id, dot, extension = object_name.rpartition(".")
  if not dot or not file_id:
    raise InvalidStorageKeyError(key, "missing file id or extension")

  return ParsedStorageKey(
    type_prefix=type_prefix,
    owner_id=owner_id,
    file_id=file_id,
    extension=extension,
  )
