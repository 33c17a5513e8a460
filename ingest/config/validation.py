"""
Environment variable validation for startup checks.

This module provides validation functions to ensure the AWS resources the
service depends on are configured at application startup.
"""

from typing import List
import logging

logger = logging.getLogger(__name__)


class ConfigValidationError(Exception):
  """Raised when configuration validation fails."""

  pass


class EnvValidator:
  """Validates environment configuration at startup."""

  @staticmethod
  def validate_required_vars(env_config) -> None:
    """
    Validate that all required environment variables are set.

    Args:
        env_config: The EnvConfig instance to validate

    Raises:
        ConfigValidationError: If validation fails
    """
    errors: List[str] = []
    warnings: List[str] = []

    required_vars = {
      "FILES_TABLE_NAME": "DynamoDB table holding file metadata",
      "INGEST_BUCKET_NAME": "S3 bucket receiving uploads",
    }

    for var_name, description in required_vars.items():
      if not getattr(env_config, var_name, None):
        message = f"{var_name} is not set ({description})"
        if env_config.is_production():
          errors.append(message)
        else:
          warnings.append(message)

    if env_config.UPLOAD_URL_EXPIRY_SECONDS < 1:
      errors.append("UPLOAD_URL_EXPIRY_SECONDS must be at least 1")

    if env_config.DOWNLOAD_URL_EXPIRY_SECONDS < 1:
      errors.append("DOWNLOAD_URL_EXPIRY_SECONDS must be at least 1")

    for warning in warnings:
      logger.warning(f"Configuration warning: {warning}")

    if errors:
      error_msg = "Configuration validation failed:\n" + "\n".join(
        f"  - {error}" for error in errors
      )
      logger.error(error_msg)
      raise ConfigValidationError(error_msg)

    logger.info("Environment configuration validated successfully")
