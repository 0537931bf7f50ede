"""SQL dialect implementations."""

from .postgresql import DEFAULT_PORT, PostgreSQLDialect

__all__ = ["PostgreSQLDialect", "DEFAULT_PORT"]
