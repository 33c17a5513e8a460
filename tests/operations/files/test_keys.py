from datetime import datetime, timezone

import pytest

from ingest.exceptions import InvalidStorageKeyError
from ingest.operations.files.keys import (
  build_storage_key,
  decode_object_key,
  extract_extension,
  parse_storage_key,
)
from ingest.utils.file_type import FileType

FIXED_NOW = datetime(2024, 3, 7, 23, 59, tzinfo=timezone.utc)


@pytest.mark.unit
class TestBuildStorageKey:
  def test_pdf_layout(self):
    key = build_storage_key(FileType.PDF, "user-1", "FILE1", "report.pdf", FIXED_NOW)

    assert key == "pdf/user-1/2024/03/07/FILE1.pdf"

  def test_image_layout(self):
    key = build_storage_key(
      FileType.IMAGE, "user-1", "FILE2", "holiday.photo.PNG", FIXED_NOW
    )

    assert key == "images/user-1/2024/03/07/FILE2.PNG"

  def test_missing_extension_defaults_to_pdf(self):
    key = build_storage_key(FileType.IMAGE, "user-1", "FILE3", "photo", FIXED_NOW)

    assert key.endswith("/FILE3.pdf")

  def test_unknown_type_uses_pdf_prefix(self):
    key = build_storage_key(FileType.UNKNOWN, "user-1", "FILE4", "x.bin", FIXED_NOW)

    assert key.startswith("pdf/")

  def test_uses_current_utc_date_by_default(self):
    key = build_storage_key(FileType.PDF, "user-1", "FILE5", "a.pdf")

    today = datetime.now(timezone.utc)
    assert f"/{today:%Y}/" in key


@pytest.mark.unit
@pytest.mark.parametrize(
  "file_name,expected",
  [
    ("report.pdf", "pdf"),
    ("archive.tar.gz", "gz"),
    ("noextension", "pdf"),
    ("trailingdot.", "pdf"),
    ("", "pdf"),
  ],
)
def test_extract_extension(file_name, expected):
  assert extract_extension(file_name) == expected


@pytest.mark.unit
class TestParseStorageKey:
  def test_recovers_owner_and_file_id(self):
    parsed = parse_storage_key("pdf/user-1/2024/03/07/01HZX.pdf")

    assert parsed.type_prefix == "pdf"
    assert parsed.owner_id == "user-1"
    assert parsed.file_id == "01HZX"
    assert parsed.extension == "pdf"

  def test_round_trip_with_builder(self):
    key = build_storage_key(
      FileType.IMAGE, "owner-9", "01HZYABC", "cat.jpeg", FIXED_NOW
    )

    parsed = parse_storage_key(key)

    assert parsed.file_id == "01HZYABC"
    assert parsed.owner_id == "owner-9"

  @pytest.mark.parametrize(
    "key",
    [
      "pdf/user-1/2024/03/01HZX.pdf",
      "uploads/user-1/2024/03/07/01HZX.pdf",
      "pdf/user-1/2024/03/07/extra/01HZX.pdf",
      "pdf//2024/03/07/01HZX.pdf",
      "pdf/user-1/24/3/7/01HZX.pdf",
      "pdf/user-1/2024/03/07/01HZX",
      "pdf/user-1/2024/03/07/.pdf",
      "",
    ],
  )
  def test_rejects_malformed_keys(self, key):
    with pytest.raises(InvalidStorageKeyError):
      parse_storage_key(key)

  def test_error_message_names_the_key(self):
    with pytest.raises(InvalidStorageKeyError) as exc_info:
      parse_storage_key("bogus/key")

    assert "Failed to extract fileId or ownerId from key: bogus/key" in str(
      exc_info.value
    )


@pytest.mark.unit
def test_decode_object_key_undoes_event_encoding():
  assert (
    decode_object_key("pdf/user%401/2024/03/07/ID.pdf") == "pdf/user@1/2024/03/07/ID.pdf"
  )
  assert decode_object_key("images/a+b/2024/03/07/ID.png") == (
    "images/a b/2024/03/07/ID.png"
  )
