import pytest

from ingest.config.constants import MAX_IMAGE_SIZE_BYTES, MAX_PDF_SIZE_BYTES
from ingest.operations.files.validation import format_mb, validate_upload
from ingest.utils.file_type import FileType


@pytest.mark.unit
class TestValidateUpload:
  def test_pdf_at_ceiling_is_accepted(self):
    result = validate_upload("application/pdf", MAX_PDF_SIZE_BYTES)

    assert result.ok
    assert result.file_type == FileType.PDF
    assert result.max_size_bytes == 10_485_760
    assert result.reason is None

  def test_pdf_one_byte_over_is_rejected(self):
    result = validate_upload("application/pdf", MAX_PDF_SIZE_BYTES + 1)

    assert not result.ok
    assert "10.00MB" in result.reason

  def test_rejection_reports_size_and_ceiling(self):
    result = validate_upload("application/pdf", 11 * 1024 * 1024)

    assert result.reason == (
      "File size 11.00MB exceeds maximum allowed size of 10.00MB"
    )

  def test_image_ceiling(self):
    assert validate_upload("image/png", MAX_IMAGE_SIZE_BYTES).ok

    rejected = validate_upload("image/png", MAX_IMAGE_SIZE_BYTES + 1)
    assert not rejected.ok
    assert rejected.max_size_bytes == 5_242_880
    assert "5.00MB" in rejected.reason

  @pytest.mark.parametrize(
    "mime_type",
    ["image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp", "IMAGE/PNG"],
  )
  def test_allowed_image_types(self, mime_type):
    assert validate_upload(mime_type, 1024).ok

  def test_mime_type_match_is_case_insensitive(self):
    assert validate_upload("Application/PDF", 1024).ok

  def test_unknown_type_rejected_regardless_of_size(self):
    result = validate_upload("application/zip", 1)

    assert not result.ok
    assert result.file_type == FileType.UNKNOWN
    assert result.reason == "Unsupported file type: application/zip"

  def test_classified_type_outside_allow_list(self):
    result = validate_upload("image/svg+xml", 1024)

    assert not result.ok
    assert result.file_type == FileType.IMAGE
    assert result.reason.startswith("MIME type image/svg+xml is not allowed")

  def test_explicit_file_type_sets_ceiling(self):
    result = validate_upload(
      "application/pdf", MAX_IMAGE_SIZE_BYTES + 1, file_type=FileType.IMAGE
    )

    assert not result.ok
    assert result.max_size_bytes == MAX_IMAGE_SIZE_BYTES


@pytest.mark.unit
def test_format_mb_two_decimals():
  assert format_mb(1024 * 1024) == "1.00MB"
  assert format_mb(1572864) == "1.50MB"
