"""
Storage event reconciliation.

S3 delivers "object created" notifications at least once. Each notification
is checked against the record's persisted status before anything is written,
and the write itself is guarded on PENDING_UPLOAD, so replays and concurrent
duplicates end in exactly one effective PENDING_UPLOAD -> UPLOADED transition.
"""

from typing import Any, Callable, Dict, List, Sequence

from ingest.config.constants import OBJECT_CREATED_PUT_EVENT
from ingest.exceptions import (
  FileRecordNotFoundError,
  StatusConflictError,
  UnexpectedStatusError,
)
from ingest.logger import events_logger, log_metric
from ingest.models.file_record import FileRecord, FileStatus, utc_now_iso
from ingest.operations.files.contracts import (
  EventOutcome,
  MetadataStore,
  ReconcileResult,
  StorageEvent,
)
from ingest.operations.files.keys import decode_object_key, parse_storage_key


def parse_s3_event(event: Dict[str, Any]) -> List[StorageEvent]:
  """
  Flatten an S3 notification payload into storage events.

  Records that aren't shaped like S3 notifications are logged and dropped so
  one bad entry can't abort the rest of the batch.
  """
  events = []
  for index, record in enumerate(event.get("Records", []) or []):
    if not isinstance(record, dict):
      events_logger.warning(
        f"Ignoring malformed S3 event record at index {index}",
        extra={"metadata": {"record_type": type(record).__name__}},
      )
      continue
    s3 = _as_dict(record.get("s3"))
    events.append(
      StorageEvent(
        event_name=record.get("eventName", "") or "",
        bucket=_as_dict(s3.get("bucket")).get("name", "") or "",
        object_key=_as_dict(s3.get("object")).get("key", "") or "",
      )
    )
  return events


def _as_dict(value: Any) -> Dict[str, Any]:
  return value if isinstance(value, dict) else {}


class S3EventReconciler:
  """Advances file records to UPLOADED from storage creation events."""

  def __init__(
    self,
    metadata_store: MetadataStore,
    clock: Callable[[], str] = utc_now_iso,
  ):
    self.metadata_store = metadata_store
    self.clock = clock

  def reconcile(self, events: Sequence[StorageEvent]) -> ReconcileResult:
    """
    Process each event independently, in delivery order.

    One event failing never stops the rest of the batch; the caller decides
    from the aggregated result whether the batch as a whole failed.
    """
    events_logger.info(f"Reconciling {len(events)} storage event(s)")
    result = ReconcileResult()

    for event in events:
      key = decode_object_key(event.object_key)
      try:
        outcome = self._reconcile_event(event, key)
      except Exception as e:
        events_logger.warning(
          f"Error processing S3 event for key: {key}: {e}",
          extra={
            "storage_key": key,
            "metadata": {"event_name": event.event_name, "bucket": event.bucket},
          },
        )
        outcome = EventOutcome(key=key, success=False, error=str(e))
      result.outcomes.append(outcome)

    log_metric(
      "storage_events_failed",
      result.failure_count,
      component="reconciler",
      metadata={"total": len(result.outcomes), "succeeded": result.success_count},
    )
    return result

  def _reconcile_event(self, event: StorageEvent, key: str) -> EventOutcome:
    if event.event_name != OBJECT_CREATED_PUT_EVENT:
      events_logger.info(
        f"Skipping non-PutObject event: {event.event_name} for key: {key}",
        extra={"storage_key": key},
      )
      return EventOutcome(key=key, success=True, skipped=True)

    parsed = parse_storage_key(key)
    record = self._resolve_record(parsed.file_id, parsed.owner_id)

    if record.owner_id != parsed.owner_id:
      events_logger.warning(
        f"Key owner {parsed.owner_id} does not match record owner for file "
        f"{record.file_id}; using the record owner",
        extra={"file_id": record.file_id, "storage_key": key},
      )

    if record.status == FileStatus.UPLOADED:
      events_logger.info(
        f"File {record.file_id} already marked as UPLOADED, skipping update",
        extra={"file_id": record.file_id, "storage_key": key},
      )
      return EventOutcome(key=key, success=True, file_id=record.file_id)

    if record.status != FileStatus.PENDING_UPLOAD:
      raise UnexpectedStatusError(
        record.file_id, record.status.value, FileStatus.PENDING_UPLOAD.value
      )

    self._mark_uploaded(record)
    events_logger.info(
      f"Updated file {record.file_id} status from PENDING_UPLOAD to UPLOADED",
      extra={"file_id": record.file_id, "owner_id": record.owner_id},
    )
    return EventOutcome(key=key, success=True, file_id=record.file_id)

  def _resolve_record(self, file_id: str, owner_id: str) -> FileRecord:
    # Index first; the primary key covers records the index hasn't caught up on
    record = self.metadata_store.get_by_id(file_id)
    if record is None:
      record = self.metadata_store.get(owner_id, file_id)
    if record is None:
      raise FileRecordNotFoundError(file_id, owner_id)
    return record

  def _mark_uploaded(self, record: FileRecord) -> None:
    try:
      self.metadata_store.update(
        record.owner_id,
        record.file_id,
        {
          "status": FileStatus.UPLOADED,
          "uploaded_at": self.clock(),
          "url_expires_at": None,
          "delete_after": None,
        },
        expected_status=FileStatus.PENDING_UPLOAD,
      )
    except StatusConflictError:
      # Another delivery got there first, or the index read was stale
      current = self.metadata_store.get(record.owner_id, record.file_id)
      if current is not None and current.status == FileStatus.UPLOADED:
        events_logger.info(
          f"File {record.file_id} was marked UPLOADED concurrently",
          extra={"file_id": record.file_id},
        )
        return
      raise UnexpectedStatusError(
        record.file_id,
        current.status.value if current else "missing",
        FileStatus.PENDING_UPLOAD.value,
      )
