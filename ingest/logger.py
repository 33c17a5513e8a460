"""
Ingest Unified Logging System

This module provides the logging interface used across the service:
1. Structured CloudWatch-optimized logging outside development
2. Named loggers per component (core, api, events)
"""

from typing import Optional, Dict, Any, Union

from ingest.config.logging import (
  setup_logging,
  get_logger,
  log_api_request,
  log_error,
  log_performance_metric,
  performance_timer,
)

setup_logging()

logger = get_logger("ingest")

api_logger = get_logger("ingest.api")
events_logger = get_logger("ingest.events")


def log_api(
  method: str,
  path: str,
  status_code: int,
  duration_ms: float,
  owner_id: Optional[str] = None,
  request_id: Optional[str] = None,
) -> None:
  """Log API requests with structured data."""
  log_api_request(
    api_logger, method, path, status_code, duration_ms, owner_id, request_id
  )


def log_app_error(
  error: Exception,
  component: str,
  action: str,
  error_category: str = "application",
  file_id: Optional[str] = None,
  metadata: Optional[Dict[str, Any]] = None,
) -> None:
  """Log application errors with context."""
  log_error(logger, error, component, action, error_category, file_id, metadata)


def log_metric(
  metric_name: str,
  value: Union[int, float],
  unit: str = "count",
  component: str = "system",
  metadata: Optional[Dict[str, Any]] = None,
) -> None:
  """Log performance metrics."""
  log_performance_metric(logger, metric_name, value, unit, component, metadata)


__all__ = [
  "logger",
  "api_logger",
  "events_logger",
  "log_api",
  "log_app_error",
  "log_metric",
  "performance_timer",
  "get_logger",
]
