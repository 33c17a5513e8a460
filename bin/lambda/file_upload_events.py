"""
File Upload Events Lambda Function

Triggered by S3 ObjectCreated notifications on the ingest bucket. Each record
in the batch moves its file from PENDING_UPLOAD to UPLOADED. The batch fails
as a whole if any record failed, so S3/Lambda retries it; reconciliation is
idempotent, so records that already succeeded are not written again.
"""

from typing import Any, Dict

from ingest.exceptions import S3EventBatchError
from ingest.logger import events_logger
from ingest.operations.files.factory import get_reconciler
from ingest.operations.files.reconciler import parse_s3_event


def lambda_handler(event: Dict[str, Any], context) -> Dict[str, Any]:
  events = parse_s3_event(event)
  result = get_reconciler().reconcile(events)
  summary = result.summary()

  if not result.succeeded:
    events_logger.error(
      f"Failed to process {result.failure_count} out of {len(events)} S3 event records",
      extra={"metadata": summary},
    )
    raise S3EventBatchError(result.failure_count, len(events), summary)

  events_logger.info(f"Processed {len(events)} S3 event records")
  return summary
