"""
Custom Exception Types for the ingest service.

This module provides the exception hierarchy raised by the metadata store and
storage adapters. Components whose contract is result-based (validation,
upload URL issuance, event reconciliation) catch these and report them as
structured outcomes instead of letting them escape.
"""

from typing import Optional, Dict, Any
from datetime import datetime, timezone


class IngestError(Exception):
  """
  Base exception for all ingest application errors.

  Attributes:
      message: Human-readable error message
      error_code: Application-specific error code for categorization
      details: Additional error context and metadata
      timestamp: When the error occurred
  """

  def __init__(
    self,
    message: str,
    error_code: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
  ):
    super().__init__(message)
    self.message = message
    self.error_code = error_code or self.__class__.__name__
    self.details = details or {}
    self.timestamp = datetime.now(timezone.utc).isoformat()

  def to_dict(self) -> Dict[str, Any]:
    """Convert exception to dictionary for API responses."""
    return {
      "error": self.error_code,
      "message": self.message,
      "details": self.details,
      "timestamp": self.timestamp,
    }


# ============================================================================
# File Metadata Exceptions
# ============================================================================


class FileError(IngestError):
  """Base exception for file metadata operations."""

  pass


class FileRecordNotFoundError(FileError):
  """Raised when a file record does not exist."""

  def __init__(self, file_id: str, owner_id: Optional[str] = None):
    details = {"file_id": file_id}
    if owner_id:
      details["owner_id"] = owner_id
    super().__init__(
      f"File record not found for fileId: {file_id}",
      error_code="FILE_NOT_FOUND",
      details=details,
    )


class DuplicateFileError(FileError):
  """Raised when a record already exists under the same primary key."""

  def __init__(self, owner_id: str, file_id: str):
    super().__init__(
      f"File record already exists for owner '{owner_id}' and fileId '{file_id}'",
      error_code="DUPLICATE_FILE",
      details={"owner_id": owner_id, "file_id": file_id},
    )


class InvalidStorageKeyError(FileError):
  """Raised when an object key does not follow the storage key layout."""

  def __init__(self, key: str, reason: str):
    super().__init__(
      f"Failed to extract fileId or ownerId from key: {key} ({reason})",
      error_code="INVALID_STORAGE_KEY",
      details={"key": key, "reason": reason},
    )


class UnexpectedStatusError(FileError):
  """Raised when a record is found in a status the caller cannot act on."""

  def __init__(self, file_id: str, current_status: str, expected_status: str):
    super().__init__(
      f"File {file_id} has unexpected status: {current_status}, "
      f"expected {expected_status}",
      error_code="UNEXPECTED_FILE_STATUS",
      details={
        "file_id": file_id,
        "current_status": current_status,
        "expected_status": expected_status,
      },
    )


class StatusConflictError(FileError):
  """Raised when a status-guarded update finds the record in another status."""

  def __init__(self, file_id: str, expected_status: str):
    super().__init__(
      f"File {file_id} is no longer in status {expected_status}",
      error_code="FILE_STATUS_CONFLICT",
      details={"file_id": file_id, "expected_status": expected_status},
    )


# ============================================================================
# External Service Exceptions
# ============================================================================


class ExternalServiceError(IngestError):
  """Base exception for AWS service failures."""

  def __init__(
    self,
    service: str,
    message: str,
    status_code: Optional[int] = None,
    reason: Optional[str] = None,
    **kwargs,
  ):
    details = {"service": service}
    if status_code:
      details["status_code"] = status_code
    details.update(kwargs)
    super().__init__(
      message,
      error_code="EXTERNAL_SERVICE_ERROR",
      details=details,
    )
    self.service = service
    self.status_code = status_code
    # Message from the underlying SDK error, without resource names
    self.reason = reason


class MetadataStoreError(ExternalServiceError):
  """Raised when a DynamoDB operation on the files table fails."""

  def __init__(self, operation: str, table: str, reason: Optional[str] = None):
    message = f"DynamoDB {operation} failed for table '{table}'"
    if reason:
      message += f": {reason}"
    super().__init__(
      service="AWS_DYNAMODB",
      message=message,
      reason=reason,
      operation=operation,
      table=table,
    )


class S3Error(ExternalServiceError):
  """Raised when S3 operations fail."""

  def __init__(
    self,
    operation: str,
    bucket: str,
    key: Optional[str] = None,
    reason: Optional[str] = None,
  ):
    details = {"operation": operation, "bucket": bucket}
    if key:
      details["key"] = key
    message = f"S3 {operation} failed for bucket '{bucket}'"
    if reason:
      message += f": {reason}"
    super().__init__(
      service="AWS_S3",
      message=message,
      status_code=None,
      reason=reason,
      **details,
    )


class S3EventBatchError(IngestError):
  """Raised by the event lambda when any record in a batch failed."""

  def __init__(self, failure_count: int, total: int, summary: Dict[str, Any]):
    super().__init__(
      f"Failed to process {failure_count} out of {total} S3 event records",
      error_code="S3_EVENT_BATCH_FAILED",
      details=summary,
    )


# ============================================================================
# Configuration Exceptions
# ============================================================================


class ConfigurationError(IngestError):
  """Raised when configuration is invalid or missing."""

  def __init__(self, config_key: str, reason: str):
    super().__init__(
      f"Configuration error for '{config_key}': {reason}",
      error_code="CONFIGURATION_ERROR",
      details={"config_key": config_key, "reason": reason},
    )
