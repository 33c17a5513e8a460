"""Utility functions and helpers for the ingest service."""

from .file_type import FileType, classify_file
from .ulid import generate_ulid

__all__ = [
  "FileType",
  "classify_file",
  "generate_ulid",
]
