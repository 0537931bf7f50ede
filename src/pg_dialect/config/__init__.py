"""Configuration management for pg_dialect.

Usage:
    >>> from pg_dialect.config import get_settings
    >>> settings = get_settings()
    >>> settings.database.jdbc_url
    'jdbc:postgresql://localhost:5432/postgres'
"""

from pg_dialect.config.connection import PostgresParameters
from pg_dialect.config.settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
    "PostgresParameters",
]
