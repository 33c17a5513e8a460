"""AWS service clients for the ingest service."""

from ingest.operations.aws.dynamodb import (
  create_files_table,
  get_dynamodb_resource,
  get_files_table,
)
from ingest.operations.aws.s3 import S3Client

__all__ = [
  "S3Client",
  "create_files_table",
  "get_dynamodb_resource",
  "get_files_table",
]
