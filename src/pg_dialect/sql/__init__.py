"""
SQL module for PostgreSQL statement generation.

Provides parameter casting, DDL and INSERT generation, pagination and
database error classification for entities described by pg_dialect.schema.
"""

from .core.parameters import rewrite
from .core.types import storage_name_for_null, storage_type_of
from .dialects.postgresql import DEFAULT_PORT, PostgreSQLDialect
from .errors import (
    ClassifiedDatabaseError,
    ConfigurationError,
    DialectError,
    ErrorClassification,
    ErrorKind,
    classify,
    wrap_exception,
)
from .intervals import Duration, parse_interval, register_interval_caster
from .operations.ddl import build_create_sql
from .operations.insert import InsertBuilder, build_insert_sql
from .operations.pagination import apply_limit, total_count_query

__all__ = [
    "rewrite",
    "storage_type_of",
    "storage_name_for_null",
    "build_create_sql",
    "build_insert_sql",
    "InsertBuilder",
    "apply_limit",
    "total_count_query",
    "classify",
    "wrap_exception",
    "ErrorKind",
    "ErrorClassification",
    "DialectError",
    "ConfigurationError",
    "ClassifiedDatabaseError",
    "Duration",
    "parse_interval",
    "register_interval_caster",
    "PostgreSQLDialect",
    "DEFAULT_PORT",
]
