"""
Logging middleware for structured API request logging.

Every request gets a request ID, echoed back in the X-Request-ID header and
attached to the request log line and to any unhandled error.
"""

import time
import uuid
from typing import Callable, Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from ingest.logger import log_api, log_app_error


def categorize_error(error: Exception) -> str:
  message = str(error).lower()
  if "dynamodb" in message or "table" in message:
    return "database"
  if "s3" in message or "bucket" in message:
    return "storage"
  if "timeout" in message:
    return "timeout"
  return "application"


class StructuredLoggingMiddleware(BaseHTTPMiddleware):
  """Logs each API request with timing and a correlation ID."""

  def __init__(self, app, exclude_paths: Optional[list] = None):
    super().__init__(app)
    self.exclude_paths = exclude_paths or [
      "/health",
      "/docs",
      "/redoc",
      "/openapi.json",
      "/favicon.ico",
    ]

  async def dispatch(self, request: Request, call_next: Callable) -> Response:
    if any(request.url.path.startswith(path) for path in self.exclude_paths):
      return await call_next(request)

    request_id = str(uuid.uuid4())
    request.state.request_id = request_id
    start_time = time.time()

    try:
      response = await call_next(request)
    except Exception as e:
      duration_ms = (time.time() - start_time) * 1000
      log_app_error(
        error=e,
        component="api_middleware",
        action="request_processing",
        error_category=categorize_error(e),
        metadata={
          "method": request.method,
          "path": request.url.path,
          "duration_ms": duration_ms,
          "request_id": request_id,
        },
      )
      raise

    duration_ms = (time.time() - start_time) * 1000
    log_api(
      method=request.method,
      path=request.url.path,
      status_code=response.status_code,
      duration_ms=duration_ms,
      request_id=request_id,
    )
    response.headers["X-Request-ID"] = request_id
    return response
