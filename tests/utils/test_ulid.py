"""Tests for ULID file id generation."""

import time

from ulid import ULID

from ingest.utils.ulid import generate_ulid


class TestGenerateUlid:
  def test_generate_ulid_format(self):
    ulid_str = generate_ulid()

    # Crockford's Base32, 26 characters
    assert len(ulid_str) == 26
    assert ulid_str.isalnum()
    assert ulid_str.isupper()

  def test_generate_ulid_uniqueness(self):
    ulids = [generate_ulid() for _ in range(100)]
    assert len(set(ulids)) == 100

  def test_later_ids_sort_after_earlier_ones(self):
    first = generate_ulid()
    time.sleep(0.002)
    second = generate_ulid()

    assert second > first

  def test_round_trips_through_library(self):
    ulid_str = generate_ulid()

    assert str(ULID.from_str(ulid_str)) == ulid_str
