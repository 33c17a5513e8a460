"""
Centralized configuration package for the ingest service.

This package provides a single source of truth for environment settings and
static file-policy constants.
"""

from .env import env, EnvConfig

__all__ = ["env", "EnvConfig"]
