import os

# Settings are read at import time, so the environment must be in place first
os.environ["ENVIRONMENT"] = "test"
os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")
os.environ.setdefault("AWS_SECURITY_TOKEN", "testing")
os.environ.setdefault("AWS_SESSION_TOKEN", "testing")
os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")
os.environ.setdefault("AWS_REGION", "us-east-1")
os.environ.pop("AWS_ENDPOINT_URL", None)

from datetime import datetime, timedelta, timezone  # noqa: E402

import boto3  # noqa: E402
from botocore.config import Config  # noqa: E402
import pytest  # noqa: E402
from moto import mock_aws  # noqa: E402

from ingest.models.file_record import FileRecord, FileStatus, to_iso  # noqa: E402
from ingest.operations.aws.dynamodb import create_files_table  # noqa: E402
from ingest.operations.aws.s3 import S3Client  # noqa: E402
from ingest.operations.files.metadata_store import DynamoMetadataStore  # noqa: E402

TEST_REGION = "us-east-1"
TEST_TABLE_NAME = "test-ingest-files"
TEST_BUCKET_NAME = "test-ingest-uploads"
TEST_OWNER_ID = "default-user"


@pytest.fixture
def aws():
  """Moto-backed AWS for the duration of one test."""
  with mock_aws():
    yield


@pytest.fixture
def files_table(aws):
  resource = boto3.resource("dynamodb", region_name=TEST_REGION)
  return create_files_table(resource, TEST_TABLE_NAME)


@pytest.fixture
def metadata_store(files_table):
  return DynamoMetadataStore(files_table)


@pytest.fixture
def s3_bucket(aws):
  client = boto3.client(
    "s3", region_name=TEST_REGION, config=Config(signature_version="s3v4")
  )
  client.create_bucket(Bucket=TEST_BUCKET_NAME)
  return client


@pytest.fixture
def s3_client(s3_bucket):
  return S3Client(region_name=TEST_REGION, stage="test", s3_client=s3_bucket)


@pytest.fixture
def make_record():
  """Factory for file records with sensible defaults."""

  def _make_record(
    file_id: str = "01HZX0000000000000000000AA",
    owner_id: str = TEST_OWNER_ID,
    status: FileStatus = FileStatus.PENDING_UPLOAD,
    url_expires_at: str | None = None,
    **overrides,
  ) -> FileRecord:
    now = datetime.now(timezone.utc)
    if url_expires_at is None and status == FileStatus.PENDING_UPLOAD:
      url_expires_at = to_iso(now + timedelta(minutes=5))
    fields = {
      "file_id": file_id,
      "owner_id": owner_id,
      "file_name": "report.pdf",
      "mime_type": "application/pdf",
      "size_bytes": 1024,
      "status": status,
      "storage_bucket": TEST_BUCKET_NAME,
      "storage_key": f"pdf/{owner_id}/2024/05/01/{file_id}.pdf",
      "created_at": to_iso(now),
      "updated_at": to_iso(now),
      "url_expires_at": url_expires_at,
    }
    fields.update(overrides)
    return FileRecord(**fields)

  return _make_record
