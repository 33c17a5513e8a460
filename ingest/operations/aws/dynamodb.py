"""
DynamoDB access for the files table.

The table keeps one item per file under `PK=USER#{ownerId}`,
`SK=FILE#{fileId}`, with two global secondary indexes:

- FileIdIndex: hash `fileId`, for lookups by id alone
- StatusExpiresAtIndex: hash `status`, range `urlExpiresAt`, for the expiry
  sweep over pending uploads
"""

from typing import Optional

import boto3

from ingest.config import env
from ingest.config.constants import FILE_ID_INDEX, STATUS_EXPIRES_AT_INDEX
from ingest.logger import logger


def get_dynamodb_resource(
  region_name: Optional[str] = None, endpoint_url: Optional[str] = None
):
  """Get DynamoDB resource with proper endpoint configuration."""
  config = env.get_aws_config()
  if region_name:
    config["region_name"] = region_name
  if endpoint_url:
    config["endpoint_url"] = endpoint_url
  return boto3.resource("dynamodb", **config)


def get_files_table(table_name: str, dynamodb_resource=None):
  """Return the Table resource for the files table."""
  resource = dynamodb_resource or get_dynamodb_resource()
  return resource.Table(table_name)


def create_files_table(dynamodb_resource, table_name: str):
  """
  Create the files table with its key schema, both indexes and TTL.

  Used for local development against LocalStack and in tests; deployed
  environments provision the table through infrastructure code.
  """
  logger.info(f"Creating files table {table_name}")
  table = dynamodb_resource.create_table(
    TableName=table_name,
    KeySchema=[
      {"AttributeName": "PK", "KeyType": "HASH"},
      {"AttributeName": "SK", "KeyType": "RANGE"},
    ],
    AttributeDefinitions=[
      {"AttributeName": "PK", "AttributeType": "S"},
      {"AttributeName": "SK", "AttributeType": "S"},
      {"AttributeName": "fileId", "AttributeType": "S"},
      {"AttributeName": "status", "AttributeType": "S"},
      {"AttributeName": "urlExpiresAt", "AttributeType": "S"},
    ],
    GlobalSecondaryIndexes=[
      {
        "IndexName": FILE_ID_INDEX,
        "KeySchema": [{"AttributeName": "fileId", "KeyType": "HASH"}],
        "Projection": {"ProjectionType": "ALL"},
      },
      {
        "IndexName": STATUS_EXPIRES_AT_INDEX,
        "KeySchema": [
          {"AttributeName": "status", "KeyType": "HASH"},
          {"AttributeName": "urlExpiresAt", "KeyType": "RANGE"},
        ],
        "Projection": {"ProjectionType": "ALL"},
      },
    ],
    BillingMode="PAY_PER_REQUEST",
  )
  table.wait_until_exists()

  dynamodb_resource.meta.client.update_time_to_live(
    TableName=table_name,
    TimeToLiveSpecification={"Enabled": True, "AttributeName": "ttl"},
  )
  return table
