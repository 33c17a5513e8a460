"""
S3 adapter for presigned upload and download URLs.
"""

from typing import Dict, Optional
from urllib.parse import quote

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from ingest.config import env
from ingest.config.constants import RESOURCE_TAG_MANAGED_BY, RESOURCE_TAG_PROJECT
from ingest.exceptions import S3Error
from ingest.logger import logger


def get_resource_tags(stage: str) -> Dict[str, str]:
  """Tags applied to the bucket and to every uploaded object."""
  return {
    "Project": RESOURCE_TAG_PROJECT,
    "Environment": stage,
    "ManagedBy": RESOURCE_TAG_MANAGED_BY,
  }


def format_s3_tags(tags: Dict[str, str]) -> str:
  """Format tags as the URL-encoded `Key1=Value1&Key2=Value2` tagging string."""
  return "&".join(
    f"{quote(key, safe='')}={quote(value, safe='')}" for key, value in tags.items()
  )


class S3Client:
  """
  S3 client for minting time-boxed upload and download URLs.

  The client never moves file bytes itself: uploads go straight from the
  caller to S3 through the signed URL.
  """

  def __init__(
    self,
    region_name: Optional[str] = None,
    endpoint_url: Optional[str] = None,
    stage: Optional[str] = None,
    s3_client=None,
  ):
    """
    Initialize S3 client.

    Args:
        region_name: AWS region (defaults to env.AWS_REGION)
        endpoint_url: Custom endpoint URL (e.g., for LocalStack)
        stage: Environment tag stamped on uploaded objects
        s3_client: Prebuilt boto3 S3 client, mainly for tests
    """
    self.region_name = region_name or env.AWS_REGION
    self.endpoint_url = endpoint_url or env.AWS_ENDPOINT_URL
    self.stage = stage or env.ENVIRONMENT

    if s3_client is not None:
      self.s3_client = s3_client
    else:
      # IAM roles supply credentials in deployed environments
      self.s3_client = boto3.client(
        "s3",
        region_name=self.region_name,
        endpoint_url=self.endpoint_url,
        config=Config(signature_version="s3v4"),
      )

    logger.debug(f"Initialized S3Client for region {self.region_name}")

  def generate_upload_url(
    self,
    bucket: str,
    key: str,
    content_type: str,
    expires_in: int,
    metadata: Optional[Dict[str, str]] = None,
  ) -> str:
    """
    Generate a presigned PUT URL scoped to one key and content type.

    The client must send the same Content-Type and x-amz-tagging headers the
    URL was signed with.

    Raises:
        S3Error: If the URL cannot be generated
    """
    params = {
      "Bucket": bucket,
      "Key": key,
      "ContentType": content_type,
      "Tagging": format_s3_tags(get_resource_tags(self.stage)),
    }
    if metadata:
      params["Metadata"] = metadata

    try:
      url = self.s3_client.generate_presigned_url(
        "put_object",
        Params=params,
        ExpiresIn=expires_in,
        HttpMethod="PUT",
      )
    except (ClientError, BotoCoreError) as e:
      logger.error(f"Failed to generate upload URL for s3://{bucket}/{key}: {e}")
      raise S3Error("generate_presigned_url", bucket, key, str(e)) from e

    logger.debug(f"Generated upload URL for s3://{bucket}/{key} ({expires_in}s)")
    return url

  def generate_download_url(
    self,
    bucket: str,
    key: str,
    expires_in: int,
    file_name: Optional[str] = None,
  ) -> str:
    """
    Generate a presigned GET URL, optionally forcing an attachment filename.

    Raises:
        S3Error: If the URL cannot be generated
    """
    params = {"Bucket": bucket, "Key": key}
    if file_name:
      safe_name = file_name.replace('"', "")
      params["ResponseContentDisposition"] = f'attachment; filename="{safe_name}"'

    try:
      return self.s3_client.generate_presigned_url(
        "get_object",
        Params=params,
        ExpiresIn=expires_in,
      )
    except (ClientError, BotoCoreError) as e:
      logger.error(f"Failed to generate download URL for s3://{bucket}/{key}: {e}")
      raise S3Error("generate_presigned_url", bucket, key, str(e)) from e
