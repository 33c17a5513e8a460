"""File lifecycle: upload issuance, status reconciliation and expiry cleanup."""

from .contracts import (
  EventOutcome,
  FilePage,
  MetadataStore,
  ReconcileResult,
  StorageEvent,
  UploadIssueResult,
  UploadSigner,
)
from .keys import build_storage_key, parse_storage_key
from .metadata_store import DynamoMetadataStore
from .reconciler import S3EventReconciler, parse_s3_event
from .sweeper import ExpirySweeper
from .upload_service import PresignedUploadService
from .validation import validate_upload

__all__ = [
  "DynamoMetadataStore",
  "EventOutcome",
  "ExpirySweeper",
  "FilePage",
  "MetadataStore",
  "PresignedUploadService",
  "ReconcileResult",
  "S3EventReconciler",
  "StorageEvent",
  "UploadIssueResult",
  "UploadSigner",
  "build_storage_key",
  "parse_s3_event",
  "parse_storage_key",
  "validate_upload",
]
