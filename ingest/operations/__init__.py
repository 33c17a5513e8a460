"""Operational services for the ingest service."""
