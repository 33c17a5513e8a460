"""
FastAPI dependencies for the file endpoints.

Tests replace these through `app.dependency_overrides`.
"""

from ingest.config import env
from ingest.operations.aws.s3 import S3Client
from ingest.operations.files import factory
from ingest.operations.files.contracts import MetadataStore, UploadUrlIssuer


def get_owner_id() -> str:
  # Single principal until authentication lands
  return env.DEFAULT_OWNER_ID


def get_metadata_store() -> MetadataStore:
  return factory.get_metadata_store()


def get_upload_service() -> UploadUrlIssuer:
  return factory.get_upload_service()


def get_download_signer() -> S3Client:
  return factory.get_s3_client()
