"""Periodic cleanup of upload records whose URL expired unused."""

from datetime import datetime, timezone
from typing import Callable, Optional

from ingest.logger import events_logger, performance_timer
from ingest.models.file_record import to_iso
from ingest.operations.files.contracts import MetadataStore


class ExpirySweeper:
  def __init__(
    self,
    metadata_store: MetadataStore,
    clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
  ):
    self.metadata_store = metadata_store
    self.clock = clock

  @performance_timer(events_logger, "expiry_sweeper", "run")
  def run(self, now: Optional[datetime] = None) -> int:
    """Delete pending records whose upload URL expired before `now`."""
    threshold = to_iso(now or self.clock())
    return self.metadata_store.sweep_expired(threshold)
