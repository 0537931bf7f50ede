"""
Mapping of semantic types to PostgreSQL storage types.
"""

from typing import Dict, Optional

from pg_dialect.schema.core import FieldDef, Granularity, SemanticType

# Application level limits are preferred over varchar(n), hence text
_STORAGE_TYPES: Dict[SemanticType, str] = {
    SemanticType.STRING: "text",
    SemanticType.CHARACTERS: "text",
    SemanticType.URI: "text",
    SemanticType.ENUMERATION: "text",
    SemanticType.DURATION: "interval",
    SemanticType.BYTES: "bytea",
    SemanticType.INTEGER: "integer",
    SemanticType.LONG: "bigint",
    SemanticType.BIG_INTEGER: "bigint",
    SemanticType.FLOAT: "decimal",
    SemanticType.DOUBLE: "decimal",
    SemanticType.DECIMAL: "decimal",
    SemanticType.SHORT: "smallint",
    SemanticType.BOOLEAN: "boolean",
    SemanticType.UUID: "uuid",
    SemanticType.DATETIME: "timestamp",
}

_GRANULARITY_TYPES: Dict[Granularity, str] = {
    Granularity.DATE: "date",
    Granularity.TIME: "time",
    Granularity.TIMESTAMP: "timestamp",
}


def storage_type_of(semantic_type: SemanticType) -> Optional[str]:
    """
    Return the PostgreSQL storage type for a semantic type.

    Returns:
        Storage type name, or None for nested records and opaque values

    Examples:
        >>> storage_type_of(SemanticType.LONG)
        'bigint'
        >>> storage_type_of(SemanticType.COMPLEX) is None
        True
    """
    return _STORAGE_TYPES.get(semantic_type)


def storage_name_for_null(field: FieldDef) -> Optional[str]:
    """
    Return the type name the driver needs to bind an explicit null.

    A bare null cannot tell a scalar column from an array column, so list
    fields get the ``_array`` variant (``uuid`` vs ``uuid_array``).
    """
    name = storage_type_of(field.semantic_type)
    if name is not None and field.is_list:
        name += "_array"
    return name


def granularity_type(field: FieldDef) -> str:
    """Storage type of a date/time field narrowed by its format annotation."""
    return _GRANULARITY_TYPES[field.granularity]


__all__ = ["storage_type_of", "storage_name_for_null", "granularity_type"]
