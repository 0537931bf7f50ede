"""SQL statement generators: DDL, INSERT and pagination."""

from .ddl import build_create_sql
from .insert import InsertBuilder, build_insert_sql
from .pagination import apply_limit, total_count_query

__all__ = [
    "build_create_sql",
    "InsertBuilder",
    "build_insert_sql",
    "apply_limit",
    "total_count_query",
]
