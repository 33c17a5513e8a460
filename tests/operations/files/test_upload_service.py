from datetime import datetime, timezone
from unittest.mock import MagicMock
from urllib.parse import parse_qs, urlparse

import pytest

from ingest.exceptions import MetadataStoreError, S3Error
from ingest.models.file_record import FileStatus
from ingest.operations.files.upload_service import PresignedUploadService

FIXED_NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
BUCKET = "test-ingest-uploads"


@pytest.fixture
def store():
  return MagicMock()


@pytest.fixture
def signer():
  mock = MagicMock()
  mock.generate_upload_url.return_value = "https://s3.example.com/signed"
  return mock


@pytest.fixture
def service(store, signer):
  return PresignedUploadService(
    store,
    signer,
    BUCKET,
    expiry_seconds=300,
    clock=lambda: FIXED_NOW,
    id_factory=lambda: "01HZXFILEID",
  )


@pytest.mark.unit
class TestIssue:
  def test_success_creates_pending_record_then_signs(self, service, store, signer):
    calls = []
    store.create.side_effect = lambda record: calls.append("create") or record
    signer.generate_upload_url.side_effect = (
      lambda **kwargs: calls.append("sign") or "https://s3.example.com/signed"
    )

    result = service.issue("user-1", "doc.pdf", "application/pdf", 1048576)

    assert result.success
    assert result.file_id == "01HZXFILEID"
    assert result.upload_url == "https://s3.example.com/signed"
    assert result.storage_key == "pdf/user-1/2024/05/01/01HZXFILEID.pdf"
    assert result.url_expires_at == "2024-05-01T12:05:00.000Z"
    assert result.max_size_bytes == 10485760
    assert result.method == "PUT"
    assert calls == ["create", "sign"]

    record = store.create.call_args.args[0]
    assert record.status == FileStatus.PENDING_UPLOAD
    assert record.owner_id == "user-1"
    assert record.size_bytes == 1048576
    assert record.storage_bucket == BUCKET
    assert record.url_expires_at == "2024-05-01T12:05:00.000Z"

  def test_signer_receives_key_type_and_metadata(self, service, signer):
    service.issue("user-1", "my photo.png", "image/png", 2048)

    kwargs = signer.generate_upload_url.call_args.kwargs
    assert kwargs["bucket"] == BUCKET
    assert kwargs["key"] == "images/user-1/2024/05/01/01HZXFILEID.png"
    assert kwargs["content_type"] == "image/png"
    assert kwargs["expires_in"] == 300
    assert kwargs["metadata"] == {
      "originalFileName": "my%20photo.png",
      "fileSize": "2048",
    }

  def test_rejection_has_no_side_effects(self, service, store, signer):
    result = service.issue("user-1", "big.pdf", "application/pdf", 11 * 1024 * 1024)

    assert not result.success
    assert result.error == "File size 11.00MB exceeds maximum allowed size of 10.00MB"
    store.create.assert_not_called()
    signer.generate_upload_url.assert_not_called()

  def test_unknown_type_rejected(self, service, store):
    result = service.issue("user-1", "archive.zip", "application/zip", 10)

    assert not result.success
    assert "Unsupported file type" in result.error
    store.create.assert_not_called()

  def test_store_failure_is_reported(self, service, store, signer):
    store.create.side_effect = MetadataStoreError("put_item", "files-table", "boom")

    result = service.issue("user-1", "doc.pdf", "application/pdf", 100)

    assert not result.success
    assert result.error == "Failed to generate upload URL: boom"
    assert "files-table" not in result.error
    signer.generate_upload_url.assert_not_called()

  def test_store_failure_without_reason_hides_table(self, service, store):
    store.create.side_effect = MetadataStoreError("put_item", "files-table")

    result = service.issue("user-1", "doc.pdf", "application/pdf", 100)

    assert result.error == "Failed to generate upload URL: AWS_DYNAMODB request failed"

  def test_signing_failure_leaves_record_for_sweep(self, service, store, signer):
    signer.generate_upload_url.side_effect = S3Error(
      "generate_presigned_url", BUCKET, "k", "denied"
    )

    result = service.issue("user-1", "doc.pdf", "application/pdf", 100)

    assert not result.success
    assert result.error == "Failed to generate upload URL: denied"
    assert BUCKET not in result.error
    store.create.assert_called_once()
    store.update.assert_not_called()

  def test_default_expiry(self, store, signer):
    service = PresignedUploadService(store, signer, BUCKET)

    assert service.expiry_seconds == 300


@pytest.mark.integration
def test_issue_against_moto(metadata_store, s3_client):
  service = PresignedUploadService(metadata_store, s3_client, BUCKET)

  result = service.issue("user-1", "doc.pdf", "application/pdf", 1048576)

  assert result.success
  stored = metadata_store.get("user-1", result.file_id)
  assert stored.status == FileStatus.PENDING_UPLOAD
  assert stored.storage_key == result.storage_key
  assert stored.delete_after is not None

  query = parse_qs(urlparse(result.upload_url).query)
  assert "X-Amz-Signature" in query
  assert query["X-Amz-Expires"] == ["300"]
