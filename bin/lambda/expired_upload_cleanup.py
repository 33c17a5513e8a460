"""
Expired Upload Cleanup Lambda Function

Runs on a schedule and deletes PENDING_UPLOAD records whose upload URL expired
without an object ever arriving.
"""

from typing import Any, Dict

from ingest.logger import events_logger
from ingest.operations.files.factory import get_expiry_sweeper


def lambda_handler(event: Dict[str, Any], context) -> Dict[str, Any]:
  deleted_count = get_expiry_sweeper().run()
  events_logger.info(f"Expired upload cleanup removed {deleted_count} record(s)")
  return {"deletedCount": deleted_count}
