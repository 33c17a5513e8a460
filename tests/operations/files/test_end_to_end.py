"""Issue -> upload notification -> read, against moto-emulated AWS."""

import pytest

from ingest.models.file_record import FileStatus
from ingest.operations.files.contracts import StorageEvent
from ingest.operations.files.keys import parse_storage_key
from ingest.operations.files.reconciler import S3EventReconciler
from ingest.operations.files.sweeper import ExpirySweeper
from ingest.operations.files.upload_service import PresignedUploadService

BUCKET = "test-ingest-uploads"
OWNER = "default-user"


@pytest.mark.integration
def test_upload_lifecycle(metadata_store, s3_client):
  issuer = PresignedUploadService(metadata_store, s3_client, BUCKET)
  reconciler = S3EventReconciler(metadata_store)

  issued = issuer.issue(OWNER, "doc.pdf", "application/pdf", 1048576)
  assert issued.success
  assert metadata_store.get(OWNER, issued.file_id).status == FileStatus.PENDING_UPLOAD

  parsed = parse_storage_key(issued.storage_key)
  assert parsed.file_id == issued.file_id
  assert parsed.owner_id == OWNER

  event = StorageEvent("ObjectCreated:Put", BUCKET, issued.storage_key)
  result = reconciler.reconcile([event])
  assert result.succeeded

  record = metadata_store.get_by_id(issued.file_id)
  assert record.status == FileStatus.UPLOADED
  assert record.uploaded_at is not None

  # Uploaded records are out of the sweep's reach
  assert ExpirySweeper(metadata_store).run() == 0
  assert metadata_store.get(OWNER, issued.file_id) is not None


@pytest.mark.integration
def test_object_actually_uploaded_to_bucket(metadata_store, s3_client, s3_bucket):
  issuer = PresignedUploadService(metadata_store, s3_client, BUCKET)

  issued = issuer.issue(OWNER, "scan.png", "image/png", 4)
  s3_bucket.put_object(Bucket=BUCKET, Key=issued.storage_key, Body=b"\x89PNG")

  listed = s3_bucket.list_objects_v2(Bucket=BUCKET, Prefix=f"images/{OWNER}/")
  assert [obj["Key"] for obj in listed["Contents"]] == [issued.storage_key]

  result = S3EventReconciler(metadata_store).reconcile(
    [StorageEvent("ObjectCreated:Put", BUCKET, issued.storage_key)]
  )
  assert result.succeeded
