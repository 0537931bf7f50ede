"""Shared utilities for pg_dialect."""
