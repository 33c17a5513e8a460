"""
Capability interfaces and result types for the file lifecycle components.

The router, lambdas and tests depend on these protocols rather than on the
DynamoDB/S3 implementations, which are injected at construction time.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence

from ingest.models.file_record import FileRecord, FileStatus


@dataclass
class FilePage:
  """One page of an owner's files, newest first."""

  records: List[FileRecord]
  next_cursor: Optional[str] = None


@dataclass
class UploadIssueResult:
  """Outcome of an upload URL request: a signed descriptor or a rejection."""

  success: bool
  file_id: Optional[str] = None
  upload_url: Optional[str] = None
  storage_key: Optional[str] = None
  url_expires_at: Optional[str] = None
  max_size_bytes: Optional[int] = None
  method: str = "PUT"
  error: Optional[str] = None


@dataclass
class EventOutcome:
  """Result of reconciling one storage notification."""

  key: str
  success: bool
  file_id: Optional[str] = None
  skipped: bool = False
  error: Optional[str] = None

  def to_dict(self) -> Dict[str, Any]:
    result: Dict[str, Any] = {"key": self.key, "success": self.success}
    if self.error:
      result["error"] = self.error
    return result


@dataclass
class ReconcileResult:
  """Aggregated outcomes for one batch of notifications."""

  outcomes: List[EventOutcome] = field(default_factory=list)

  @property
  def success_count(self) -> int:
    return sum(1 for outcome in self.outcomes if outcome.success)

  @property
  def failure_count(self) -> int:
    return sum(1 for outcome in self.outcomes if not outcome.success)

  @property
  def succeeded(self) -> bool:
    return self.failure_count == 0

  def summary(self) -> Dict[str, Any]:
    return {
      "totalRecords": len(self.outcomes),
      "successCount": self.success_count,
      "failureCount": self.failure_count,
      "records": [outcome.to_dict() for outcome in self.outcomes],
    }


@dataclass(frozen=True)
class StorageEvent:
  """A storage "object created" style notification."""

  event_name: str
  bucket: str
  object_key: str


class MetadataStore(Protocol):
  """Durable keyed storage for file records."""

  def create(self, record: FileRecord) -> FileRecord: ...

  def get(self, owner_id: str, file_id: str) -> Optional[FileRecord]: ...

  def get_by_id(self, file_id: str) -> Optional[FileRecord]: ...

  def update(
    self,
    owner_id: str,
    file_id: str,
    fields: Mapping[str, Any],
    expected_status: Optional[FileStatus] = None,
  ) -> None: ...

  def list(
    self, owner_id: str, limit: int, cursor: Optional[str] = None
  ) -> FilePage: ...

  def sweep_expired(self, now_threshold: str) -> int: ...


class UploadSigner(Protocol):
  """Object storage collaborator that mints signed upload/download URLs."""

  def generate_upload_url(
    self,
    bucket: str,
    key: str,
    content_type: str,
    expires_in: int,
    metadata: Optional[Dict[str, str]] = None,
  ) -> str: ...

  def generate_download_url(
    self,
    bucket: str,
    key: str,
    expires_in: int,
    file_name: Optional[str] = None,
  ) -> str: ...


class UploadUrlIssuer(Protocol):
  def issue(
    self, owner_id: str, file_name: str, mime_type: str, size_bytes: int
  ) -> UploadIssueResult: ...


class StatusReconciler(Protocol):
  def reconcile(self, events: Sequence[StorageEvent]) -> ReconcileResult: ...
