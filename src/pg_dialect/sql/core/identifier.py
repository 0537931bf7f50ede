"""
SQL identifier handling utilities.

Generated SQL uses storage names (see pg_dialect.utils.naming) unquoted.
Sequences and indexes are named after the table and column they serve.
"""

from pg_dialect.utils.naming import to_storage_name


def sequence_name(table: str, column: str) -> str:
    """Name of the sequence backing a generated column."""
    return f"seq_{table}_{column}"


def index_name(table: str, column: str) -> str:
    """Name of the index on a single column."""
    return f"idx_{table}_{column}"


__all__ = ["to_storage_name", "sequence_name", "index_name"]
