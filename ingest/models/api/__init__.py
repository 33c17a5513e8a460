"""Pydantic models for the HTTP API."""

from .common import ErrorResponse, error_body
from .files import (
  DownloadUrlResponse,
  FileInfoResponse,
  FileSummary,
  FileUploadRequest,
  FileUploadResponse,
  ListFilesResponse,
)

__all__ = [
  "DownloadUrlResponse",
  "ErrorResponse",
  "FileInfoResponse",
  "FileSummary",
  "FileUploadRequest",
  "FileUploadResponse",
  "ListFilesResponse",
  "error_body",
]
