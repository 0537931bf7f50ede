"""
PostgreSQL-specific SQL dialect implementation.

Single entry point for the execution layer: parameter rewriting before a
query runs, DDL at provisioning time, literal inserts, pagination and the
translation of driver errors.
"""

from datetime import datetime
from typing import Any, Mapping, Optional

from pg_dialect.config.settings import Settings
from pg_dialect.schema.core import EntitySchema, FieldDef, SemanticType
from pg_dialect.schema.registry import get_entity

from ..core.parameters import rewrite
from ..core.types import storage_name_for_null, storage_type_of
from ..errors import ClassifiedDatabaseError, ErrorClassification, classify, wrap_exception
from ..operations.ddl import EntityResolver, build_create_sql
from ..operations.insert import build_insert_sql
from ..operations.pagination import apply_limit, total_count_query

DEFAULT_PORT = 5432
DRIVER_NAME = "psycopg2"


class PostgreSQLDialect:
    """PostgreSQL SQL dialect implementation."""

    name = "postgresql"
    default_port = DEFAULT_PORT
    driver = DRIVER_NAME
    supports_numeric_group_by = True

    def __init__(self, compact: bool = False, resolver: EntityResolver = get_entity):
        """
        Args:
            compact: Default rendering of generated DDL/DML
            resolver: Resolves entity references used by foreign keys
        """
        self.compact = compact
        self.resolver = resolver

    @classmethod
    def from_settings(cls, settings: Settings) -> "PostgreSQLDialect":
        """Create a dialect configured from application settings."""
        return cls(compact=settings.compact_sql)

    def sql_type_name(self, semantic_type: SemanticType) -> Optional[str]:
        """Storage type of a semantic type."""
        return storage_type_of(semantic_type)

    def sql_null_name(self, field: FieldDef) -> Optional[str]:
        """Type name to pass to the driver when binding null for ``field``."""
        return storage_name_for_null(field)

    def rewrite(self, sql: str, input_schema: Optional[EntitySchema]) -> str:
        """Add the casts PostgreSQL needs to the parameters of ``sql``."""
        return rewrite(sql, input_schema)

    def limit(self, sql: str, offset: Optional[int] = None, limit: Optional[int] = None) -> str:
        """Append OFFSET/LIMIT clauses."""
        return apply_limit(sql, offset, limit)

    def total_count_query(self, query: str) -> str:
        """Wrap a query so it returns its row count."""
        return total_count_query(query)

    def build_create_sql(self, schema: EntitySchema, compact: Optional[bool] = None) -> str:
        """Build sequences, table and indexes for an entity."""
        return build_create_sql(
            schema,
            self.compact if compact is None else compact,
            self.resolver,
        )

    def build_insert_sql(
        self,
        schema: EntitySchema,
        record: Mapping[str, Any],
        compact: Optional[bool] = None,
        now: Optional[datetime] = None,
    ) -> str:
        """Build a literal INSERT statement for a record."""
        return build_insert_sql(
            schema,
            record,
            self.compact if compact is None else compact,
            now,
        )

    def classify(self, error: BaseException) -> ErrorClassification:
        """Reduce a database error to a semantic kind."""
        return classify(error)

    def wrap_exception(self, error: BaseException) -> Optional[ClassifiedDatabaseError]:
        """Wrap a recognized database error, or return None."""
        return wrap_exception(error)


__all__ = ["PostgreSQLDialect", "DEFAULT_PORT"]
