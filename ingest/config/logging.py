"""
Structured logging configuration for the ingest service.

Outside development every app logger writes one JSON object per line, split
across two streams so CloudWatch metric filters can key off stderr:

- stderr: ERROR and CRITICAL
- stdout: INFO and WARNING

Development gets a plain console format instead. Records carry the file
identity fields (file_id, owner_id, storage_key) when callers pass them as
`extra`, which keeps a single upload traceable across the API and the event
lambdas.
"""

import json
import logging
import logging.config
import time
import traceback
from datetime import datetime, timezone
from functools import wraps
from typing import Any

from ingest.config.env import EnvConfig

APP_LOGGERS = ["ingest", "ingest.api", "ingest.events"]

# Third-party loggers held at WARNING regardless of environment
QUIET_LOGGERS = ["uvicorn", "boto3", "botocore", "urllib3"]

APP_LEVEL_BY_ENV = {"prod": "INFO", "staging": "INFO", "test": "WARNING"}

# Optional record attributes copied into the JSON payload when present
CONTEXT_FIELDS = (
  "action",
  "file_id",
  "owner_id",
  "storage_key",
  "request_id",
  "duration_ms",
  "status_code",
  "metadata",
)


class StructuredFormatter(logging.Formatter):
  """Formats a record as a compact JSON line for CloudWatch Insights."""

  def format(self, record: logging.LogRecord) -> str:
    timestamp = datetime.fromtimestamp(record.created, tz=timezone.utc)
    log_entry = {
      "timestamp": timestamp.isoformat().replace("+00:00", "Z"),
      "level": record.levelname,
      "component": getattr(record, "component", record.name),
      "message": record.getMessage(),
    }

    for field in CONTEXT_FIELDS:
      if hasattr(record, field):
        log_entry[field] = getattr(record, field)

    if record.levelno >= logging.ERROR:
      if record.exc_info and record.exc_info[0]:
        exc_type, exc_value, _ = record.exc_info
        log_entry["error"] = {
          "type": exc_type.__name__,
          "message": str(exc_value),
          "traceback": traceback.format_exception(*record.exc_info),
        }
      if hasattr(record, "error_category"):
        log_entry["error_category"] = record.error_category

    return json.dumps(log_entry, default=str, separators=(",", ":"))


class TieredLogFilter:
  """Passes ERROR+ for the "critical" tier and INFO/WARNING for "operational"."""

  def __init__(self, tier: str):
    self.tier = tier

  def filter(self, record: logging.LogRecord) -> bool:
    if self.tier == "critical":
      return record.levelno >= logging.ERROR
    return logging.INFO <= record.levelno < logging.ERROR


def get_logging_config(environment: str | None = None) -> dict[str, Any]:
  """
  Build the dictConfig for an environment.

  prod and staging log at INFO and test at WARNING, all as structured JSON.
  Any other environment is treated as dev: console output at LOG_LEVEL.
  """
  env = environment or EnvConfig.ENVIRONMENT
  is_dev = env not in APP_LEVEL_BY_ENV
  app_level = (
    (EnvConfig.LOG_LEVEL or "DEBUG") if is_dev else APP_LEVEL_BY_ENV[env]
  )
  app_handlers = ["console"] if is_dev else ["critical", "operational"]
  sdk_handlers = ["console"] if is_dev else ["critical"]

  loggers: dict[str, Any] = {
    name: {"level": app_level, "handlers": list(app_handlers), "propagate": False}
    for name in APP_LOGGERS
  }
  for name in QUIET_LOGGERS:
    loggers[name] = {
      "level": "WARNING",
      "handlers": list(sdk_handlers),
      "propagate": False,
    }

  return {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
      "structured": {"()": StructuredFormatter},
      "simple": {"format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"},
    },
    "filters": {
      "critical_filter": {"()": TieredLogFilter, "tier": "critical"},
      "operational_filter": {"()": TieredLogFilter, "tier": "operational"},
    },
    "handlers": {
      "critical": {
        "class": "logging.StreamHandler",
        "level": "ERROR",
        "formatter": "structured",
        "filters": ["critical_filter"],
        "stream": "ext://sys.stderr",
      },
      "operational": {
        "class": "logging.StreamHandler",
        "level": "INFO",
        "formatter": "structured",
        "filters": ["operational_filter"],
        "stream": "ext://sys.stdout",
      },
      "console": {
        "class": "logging.StreamHandler",
        "level": app_level,
        "formatter": "simple",
        "stream": "ext://sys.stdout",
      },
    },
    "loggers": loggers,
    "root": {"level": "WARNING", "handlers": list(sdk_handlers)},
  }


def setup_logging(environment: str | None = None) -> None:
  logging.config.dictConfig(get_logging_config(environment))


def get_logger(name: str) -> logging.Logger:
  return logging.getLogger(name)


def log_api_request(
  logger: logging.Logger,
  method: str,
  path: str,
  status_code: int,
  duration_ms: float,
  owner_id: str | None = None,
  request_id: str | None = None,
) -> None:
  """Log a completed API request."""
  logger.info(
    f"{method} {path} - {status_code} ({duration_ms:.2f}ms)",
    extra={
      "component": "api",
      "action": "request_completed",
      "method": method,
      "path": path,
      "status_code": status_code,
      "duration_ms": duration_ms,
      "owner_id": owner_id,
      "request_id": request_id,
    },
  )


def log_error(
  logger: logging.Logger,
  error: Exception,
  component: str,
  action: str,
  error_category: str = "application",
  file_id: str | None = None,
  metadata: dict[str, Any] | None = None,
) -> None:
  """Log an exception with its component, action and category."""
  logger.error(
    f"Error in {component}.{action}: {error!s}",
    exc_info=True,
    extra={
      "component": component,
      "action": action,
      "error_category": error_category,
      "file_id": file_id,
      "metadata": metadata or {},
    },
  )


def log_performance_metric(
  logger: logging.Logger,
  metric_name: str,
  value: int | float,
  unit: str = "count",
  component: str = "system",
  metadata: dict[str, Any] | None = None,
) -> None:
  """Log a metric value in a form CloudWatch metric filters can extract."""
  logger.info(
    f"Metric: {metric_name} = {value} {unit}",
    extra={
      "component": component,
      "action": "metric_recorded",
      "metric_name": metric_name,
      "metric_value": value,
      "unit": unit,
      "metadata": metadata or {},
    },
  )


def performance_timer(logger: logging.Logger, component: str, action: str):
  """Decorator that logs how long the wrapped call took, or how it failed."""

  def decorator(func):
    @wraps(func)
    def wrapper(*args, **kwargs):
      start = time.perf_counter()
      try:
        result = func(*args, **kwargs)
      except Exception as e:
        elapsed_ms = (time.perf_counter() - start) * 1000
        log_error(logger, e, component, action, metadata={"duration_ms": elapsed_ms})
        raise

      elapsed_ms = (time.perf_counter() - start) * 1000
      logger.info(
        f"{component}.{action} completed ({elapsed_ms:.2f}ms)",
        extra={
          "component": component,
          "action": action,
          "duration_ms": elapsed_ms,
          "success": True,
        },
      )
      return result

    return wrapper

  return decorator
