"""DDL SQL generation for entity schemas.

Builds the sequences, table and indexes of one entity. Column types come
from the shared type mapping so that DDL and parameter casts agree.
"""

from __future__ import annotations

from typing import Callable, List, Optional

from pg_dialect.exceptions import ConfigurationError
from pg_dialect.schema.core import EntitySchema, FieldDef, SemanticType
from pg_dialect.schema.registry import get_entity
from pg_dialect.utils.logging import get_logger

from ..core.identifier import index_name, sequence_name, to_storage_name
from ..core.types import granularity_type, storage_type_of

logger = get_logger(__name__)

EntityResolver = Callable[[str], EntitySchema]


def _column_type(schema: EntitySchema, column: FieldDef) -> str:
    """Storage type of a column, including the array suffix."""
    if column.semantic_type is SemanticType.DATETIME:
        sql_type = granularity_type(column)
    else:
        sql_type = storage_type_of(column.semantic_type)
        if sql_type is None:
            raise ConfigurationError(
                f"No storage type for semantic type '{column.semantic_type.value}'",
                entity=schema.name,
                field=column.name,
            )
    return sql_type + ("[]" if column.is_list else "")


def _foreign_key_clause(
    schema: EntitySchema,
    column: FieldDef,
    is_primary_key: bool,
    resolver: EntityResolver,
) -> Optional[str]:
    if column.foreign_key is not None:
        parts = column.foreign_key.split(":")
        if len(parts) != 2:
            return None
        reference, referenced_column = parts
        try:
            referenced = resolver(reference)
        except KeyError as e:
            raise ConfigurationError(
                f"Foreign key references unknown entity '{reference}'",
                entity=schema.name,
                field=column.name,
            ) from e
        return f"references {referenced.storage_name}({referenced_column})"

    # Inheritance by reference: the child's primary key points at the parent row
    if is_primary_key and schema.super_type is not None:
        parent_column = schema.super_type.get(column.name)
        if parent_column is not None and parent_column.primary_key_candidate:
            return (
                f"references {schema.super_type.storage_name}"
                f"({to_storage_name(column.name)})"
            )
    return None


def _column_clause(
    schema: EntitySchema,
    column: FieldDef,
    primary_key: FieldDef,
    resolver: EntityResolver,
) -> str:
    column_name = to_storage_name(column.name)
    if column.semantic_type is SemanticType.COMPLEX:
        # Nested records are stored elsewhere and referenced by their uuid
        return f"{column_name}_id uuid"

    parts: List[str] = [column_name, _column_type(schema, column)]
    is_primary_key = column is primary_key

    if is_primary_key:
        parts.append("primary key")
    else:
        mandatory = column.mandatory or column.generated
        if mandatory:
            parts.append("not null")
        if column.default_value is not None and column.default_value.strip():
            parts.append(f"default {column.default_value}")
        # Lets later alter scripts add mandatory booleans to filled tables
        elif mandatory and column.semantic_type is SemanticType.BOOLEAN:
            parts.append("default false")

    foreign_key = _foreign_key_clause(schema, column, is_primary_key, resolver)
    if foreign_key:
        parts.append(foreign_key)

    if column.unique:
        parts.append("unique")

    if column.generated:
        parts.append(f"default nextval('{sequence_name(schema.storage_name, column_name)}')")

    return " ".join(parts)


def generate_sequences_ddl(schema: EntitySchema) -> List[str]:
    """Generate CREATE SEQUENCE statements for generated columns."""
    table = schema.storage_name
    return [
        f"create sequence {sequence_name(table, to_storage_name(column.name))};"
        for column in schema.fields_in_table()
        if column.generated
    ]


def generate_create_table_ddl(
    schema: EntitySchema,
    compact: bool = False,
    resolver: EntityResolver = get_entity,
) -> str:
    """
    Generate just the CREATE TABLE statement.

    Raises:
        ConfigurationError: If the table has no single primary key or a
            column type cannot be stored
    """
    primary_key = schema.primary_key()
    indent = "" if compact else "\t"
    newline = "" if compact else "\n"
    separator = ", " if compact else ",\n"
    columns = separator.join(
        indent + _column_clause(schema, column, primary_key, resolver)
        for column in schema.fields_in_table()
    )
    return f"create table {schema.storage_name} ({newline}{columns}{newline});"


def generate_indexes_ddl(schema: EntitySchema) -> List[str]:
    """Generate CREATE INDEX statements for indexed columns."""
    table = schema.storage_name
    sqls: List[str] = []
    for column in schema.fields_in_table():
        if column.indexed:
            column_name = to_storage_name(column.name)
            sqls.append(
                f"create index {index_name(table, column_name)} on {table}({column_name});"
            )
    return sqls


def build_create_sql(
    schema: EntitySchema,
    compact: bool = False,
    resolver: EntityResolver = get_entity,
) -> str:
    """
    Generate complete DDL for an entity: sequences, table and indexes.

    Args:
        schema: Entity to create
        compact: Render each statement on a single line
        resolver: Resolves entity references used by foreign keys

    Returns:
        Newline separated statements, each terminated by ``;``
    """
    statements: List[str] = []
    statements.extend(generate_sequences_ddl(schema))
    statements.append(generate_create_table_ddl(schema, compact, resolver))
    statements.extend(generate_indexes_ddl(schema))

    logger.debug(
        "ddl.generated",
        entity=schema.name,
        table=schema.storage_name,
        statements=len(statements),
    )
    return "\n".join(statements) + "\n"


__all__ = [
    "build_create_sql",
    "generate_sequences_ddl",
    "generate_create_table_ddl",
    "generate_indexes_ddl",
]
