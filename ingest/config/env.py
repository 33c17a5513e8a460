"""
Centralized environment variable configuration.

This module provides a single source of truth for all environment variables,
with type conversions and default values.

Organization:
- Helper functions for type-safe env var access
- Core application settings
- AWS resources (DynamoDB table, S3 bucket)
- Upload and download URL lifetimes
"""

import os

from ingest.config.constants import (
  DEFAULT_DOWNLOAD_URL_EXPIRY_SECONDS,
  DEFAULT_UPLOAD_URL_EXPIRY_SECONDS,
)


# ==========================================================================
# HELPER FUNCTIONS FOR TYPE-SAFE ENVIRONMENT VARIABLE ACCESS
# ==========================================================================


def get_int_env(key: str, default: int) -> int:
  """
  Get an integer environment variable with safe type conversion.

  Args:
      key: Environment variable name
      default: Default value if not set or invalid

  Returns:
      Integer value from environment or default
  """
  try:
    return int(os.getenv(key, str(default)))
  except (ValueError, TypeError):
    # Use print instead of logger to avoid circular import
    print(f"Warning: Invalid {key} value, using default: {default}")
    return default


def get_str_env(key: str, default: str = "") -> str:
  """
  Get a string environment variable.

  Args:
      key: Environment variable name
      default: Default value if not set

  Returns:
      String value from environment or default
  """
  return os.getenv(key, default)


# ==========================================================================
# MAIN CONFIGURATION CLASS
# ==========================================================================


class EnvConfig:
  """
  Centralized environment variable configuration.

  Values are read once at import time. Components never read this class
  directly; the application and lambda entrypoints pass the values they need
  into constructors.
  """

  # ==========================================================================
  # CORE APPLICATION SETTINGS
  # ==========================================================================

  # Stage tag (dev, staging, prod, test)
  ENVIRONMENT = get_str_env("ENVIRONMENT", "dev")
  LOG_LEVEL = get_str_env("LOG_LEVEL", "INFO")

  # Hardcoded principal until authentication lands
  DEFAULT_OWNER_ID = get_str_env("DEFAULT_OWNER_ID", "default-user")

  # ==========================================================================
  # AWS CONFIGURATION
  # ==========================================================================

  AWS_REGION = get_str_env("AWS_REGION", "us-east-1")
  # LocalStack or other S3/DynamoDB compatible endpoint for development
  AWS_ENDPOINT_URL = get_str_env("AWS_ENDPOINT_URL", "") or None

  FILES_TABLE_NAME = get_str_env("FILES_TABLE_NAME", "ingest-files")
  INGEST_BUCKET_NAME = get_str_env("INGEST_BUCKET_NAME", "ingest-uploads")

  # ==========================================================================
  # URL LIFETIMES
  # ==========================================================================

  UPLOAD_URL_EXPIRY_SECONDS = get_int_env(
    "UPLOAD_URL_EXPIRY_SECONDS", DEFAULT_UPLOAD_URL_EXPIRY_SECONDS
  )
  DOWNLOAD_URL_EXPIRY_SECONDS = get_int_env(
    "DOWNLOAD_URL_EXPIRY_SECONDS", DEFAULT_DOWNLOAD_URL_EXPIRY_SECONDS
  )

  # ==========================================================================
  # HELPER METHODS
  # ==========================================================================

  @classmethod
  def is_production(cls) -> bool:
    """Check if running in production environment."""
    return cls.ENVIRONMENT.lower() in ["prod", "production"]

  @classmethod
  def is_development(cls) -> bool:
    """Check if running in development environment."""
    return cls.ENVIRONMENT.lower() in ["dev", "development", "local"]

  @classmethod
  def is_test(cls) -> bool:
    """Check if running in test environment."""
    return cls.ENVIRONMENT.lower() in ["test", "testing"]

  @classmethod
  def get_aws_config(cls) -> dict:
    """
    Get AWS configuration as a dict for boto3.

    Note: AWS credentials should come from IAM roles in production.
    This method only sets region and endpoint configuration.
    """
    config = {
      "region_name": cls.AWS_REGION,
    }

    if cls.AWS_ENDPOINT_URL:
      config["endpoint_url"] = cls.AWS_ENDPOINT_URL

    return config


# ==========================================================================
# SINGLETON INSTANCE
# ==========================================================================

# Create a singleton instance for easy import
env = EnvConfig()
