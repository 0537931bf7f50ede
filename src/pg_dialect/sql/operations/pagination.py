"""Pagination and row counting for PostgreSQL queries."""

from typing import Optional


def apply_limit(sql: str, offset: Optional[int] = None, limit: Optional[int] = None) -> str:
    """
    Append OFFSET and LIMIT clauses, each only when given.

    Examples:
        >>> apply_limit("select 1", 10, 5)
        'select 1 OFFSET 10 LIMIT 5'
        >>> apply_limit("select 1", limit=5)
        'select 1 LIMIT 5'
    """
    if offset is not None:
        sql = f"{sql} OFFSET {int(offset)}"
    if limit is not None:
        sql = f"{sql} LIMIT {int(limit)}"
    return sql


def total_count_query(query: str) -> str:
    """
    Wrap a query so that it returns its row count.

    PostgreSQL does not expand ``*`` inside ``count(*)``, which keeps the
    count far cheaper than counting a projected column.

    Examples:
        >>> total_count_query("select * from person;")
        'select count(*) as total from (select * from person) as total_count'
    """
    inner = query.strip().rstrip(";").rstrip()
    return f"select count(*) as total from ({inner}) as total_count"


__all__ = ["apply_limit", "total_count_query"]
