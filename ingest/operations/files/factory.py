"""
Process-wide construction of the file lifecycle components.

Each collaborator is built from configuration once per process and reused
across requests and warm Lambda invocations.
"""

from functools import lru_cache

from ingest.config import env
from ingest.exceptions import ConfigurationError
from ingest.operations.aws.dynamodb import get_files_table
from ingest.operations.aws.s3 import S3Client
from ingest.operations.files.contracts import StatusReconciler
from ingest.operations.files.metadata_store import DynamoMetadataStore
from ingest.operations.files.reconciler import S3EventReconciler
from ingest.operations.files.sweeper import ExpirySweeper
from ingest.operations.files.upload_service import PresignedUploadService


@lru_cache(maxsize=1)
def get_metadata_store() -> DynamoMetadataStore:
  if not env.FILES_TABLE_NAME:
    raise ConfigurationError("FILES_TABLE_NAME", "table name is not configured")
  return DynamoMetadataStore(get_files_table(env.FILES_TABLE_NAME))


@lru_cache(maxsize=1)
def get_s3_client() -> S3Client:
  return S3Client()


@lru_cache(maxsize=1)
def get_upload_service() -> PresignedUploadService:
  if not env.INGEST_BUCKET_NAME:
    raise ConfigurationError("INGEST_BUCKET_NAME", "bucket name is not configured")
  return PresignedUploadService(
    get_metadata_store(),
    get_s3_client(),
    env.INGEST_BUCKET_NAME,
    expiry_seconds=env.UPLOAD_URL_EXPIRY_SECONDS,
  )


@lru_cache(maxsize=1)
def get_reconciler() -> StatusReconciler:
  return S3EventReconciler(get_metadata_store())


@lru_cache(maxsize=1)
def get_expiry_sweeper() -> ExpirySweeper:
  return ExpirySweeper(get_metadata_store())


def reset_components() -> None:
  """Drop cached components so the next call rebuilds them from configuration."""
  for factory in (
    get_metadata_store,
    get_s3_client,
    get_upload_service,
    get_reconciler,
    get_expiry_sweeper,
  ):
    factory.cache_clear()
