from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional

from ingest.config.constants import (
  DELETE_AFTER_GRACE_HOURS,
  FILE_KEY_PREFIX,
  OWNER_KEY_PREFIX,
)


class FileStatus(str, Enum):
  """Upload lifecycle status of a file record."""

  PENDING_UPLOAD = "PENDING_UPLOAD"
  UPLOADED = "UPLOADED"
  # Reserved; nothing produces these yet
  FAILED = "FAILED"
  DELETED = "DELETED"


def utc_now_iso() -> str:
  """Current UTC time as an ISO-8601 string with millisecond precision."""
  return (
    datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
  )


def parse_iso(value: str) -> datetime:
  return datetime.fromisoformat(value.replace("Z", "+00:00"))


def to_iso(value: datetime) -> str:
  return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def owner_partition_key(owner_id: str) -> str:
  return f"{OWNER_KEY_PREFIX}{owner_id}"


def file_sort_key(file_id: str) -> str:
  return f"{FILE_KEY_PREFIX}{file_id}"


def primary_key(owner_id: str, file_id: str) -> Dict[str, str]:
  """DynamoDB primary key for a record: owner partition, file sort key."""
  return {"PK": owner_partition_key(owner_id), "SK": file_sort_key(file_id)}


def compute_delete_after(url_expires_at: str) -> str:
  """Deletion watermark: URL expiry plus the cleanup grace period."""
  return to_iso(parse_iso(url_expires_at) + timedelta(hours=DELETE_AFTER_GRACE_HOURS))


@dataclass
class FileRecord:
  """
  Metadata for one ingested file.

  `url_expires_at` and `delete_after` are only meaningful while the record is
  PENDING_UPLOAD; `uploaded_at` is only set once it is UPLOADED.
  """

  file_id: str
  owner_id: str
  file_name: str
  mime_type: str
  size_bytes: int
  status: FileStatus
  storage_bucket: str
  storage_key: str
  created_at: str
  updated_at: str
  uploaded_at: Optional[str] = None
  url_expires_at: Optional[str] = None
  delete_after: Optional[str] = None

  def to_item(self) -> Dict[str, Any]:
    """Serialize to a DynamoDB item, omitting unset optional attributes."""
    item: Dict[str, Any] = {
      **primary_key(self.owner_id, self.file_id),
      "fileId": self.file_id,
      "ownerId": self.owner_id,
      "fileName": self.file_name,
      "mimeType": self.mime_type,
      "sizeBytes": self.size_bytes,
      "status": FileStatus(self.status).value,
      "storageBucket": self.storage_bucket,
      "storageKey": self.storage_key,
      "createdAt": self.created_at,
      "updatedAt": self.updated_at,
    }
    if self.uploaded_at:
      item["uploadedAt"] = self.uploaded_at
    if self.url_expires_at:
      item["urlExpiresAt"] = self.url_expires_at
    if self.delete_after:
      item["deleteAfter"] = self.delete_after
      # Native table TTL works in epoch seconds
      item["ttl"] = int(parse_iso(self.delete_after).timestamp())
    return item

  @classmethod
  def from_item(cls, item: Dict[str, Any]) -> "FileRecord":
    size = item.get("sizeBytes", 0)
    return cls(
      file_id=item["fileId"],
      owner_id=item["ownerId"],
      file_name=item.get("fileName", ""),
      mime_type=item.get("mimeType", ""),
      size_bytes=int(size) if isinstance(size, (int, Decimal)) else 0,
      status=FileStatus(item["status"]),
      storage_bucket=item.get("storageBucket", ""),
      storage_key=item.get("storageKey", ""),
      created_at=item.get("createdAt", ""),
      updated_at=item.get("updatedAt", ""),
      uploaded_at=item.get("uploadedAt"),
      url_expires_at=item.get("urlExpiresAt"),
      delete_after=item.get("deleteAfter"),
    )
