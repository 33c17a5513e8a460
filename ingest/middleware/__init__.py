"""HTTP middleware for the ingest API."""

from .logging import StructuredLoggingMiddleware

__all__ = ["StructuredLoggingMiddleware"]
