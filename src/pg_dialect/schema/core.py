"""Core entity schema types for pg_dialect.

Entities are described once, with every field already resolved to a
SemanticType, and handed to the SQL generators as immutable values.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from pg_dialect.exceptions import ConfigurationError
from pg_dialect.utils.naming import to_storage_name


class SemanticType(Enum):
    """Engine-neutral value domains supported by the dialect."""

    STRING = "string"
    CHARACTERS = "characters"
    URI = "uri"
    ENUMERATION = "enumeration"
    DURATION = "duration"
    BYTES = "bytes"
    SHORT = "short"
    INTEGER = "integer"
    LONG = "long"
    BIG_INTEGER = "big_integer"
    FLOAT = "float"
    DOUBLE = "double"
    DECIMAL = "decimal"
    BOOLEAN = "boolean"
    UUID = "uuid"
    DATETIME = "datetime"
    COMPLEX = "complex"
    ANY = "any"


NUMERIC_TYPES = frozenset(
    {
        SemanticType.SHORT,
        SemanticType.INTEGER,
        SemanticType.LONG,
        SemanticType.BIG_INTEGER,
        SemanticType.FLOAT,
        SemanticType.DOUBLE,
        SemanticType.DECIMAL,
    }
)

TEXTUAL_TYPES = frozenset(
    {
        SemanticType.STRING,
        SemanticType.CHARACTERS,
        SemanticType.URI,
        SemanticType.ENUMERATION,
        SemanticType.UUID,
    }
)


class Granularity(Enum):
    """Precision of a date/time value."""

    DATE = "date"
    TIME = "time"
    TIMESTAMP = "timestamp"


# Pattern letters as used by date format annotations (yyyy-MM-dd'T'HH:mm:ss)
_DATE_LETTERS = set("GyYMLdDEuwWF")
_TIME_LETTERS = set("aHhKkmsSnA")
_QUOTED_LITERAL = re.compile(r"'[^']*'")


def granularity_of(date_format: Optional[str]) -> Granularity:
    """Derive the granularity of a date format annotation.

    Examples:
        >>> granularity_of(None)
        <Granularity.TIMESTAMP: 'timestamp'>
        >>> granularity_of("yyyy-MM-dd")
        <Granularity.DATE: 'date'>
        >>> granularity_of("HH:mm")
        <Granularity.TIME: 'time'>
    """
    if date_format is None:
        return Granularity.TIMESTAMP
    stripped = date_format.strip()
    if stripped == "date":
        return Granularity.DATE
    if stripped == "time":
        return Granularity.TIME
    if stripped in ("dateTime", "timestamp", ""):
        return Granularity.TIMESTAMP

    letters = set(_QUOTED_LITERAL.sub("", stripped))
    has_date = bool(letters & _DATE_LETTERS)
    has_time = bool(letters & _TIME_LETTERS)
    if has_date and not has_time:
        return Granularity.DATE
    if has_time and not has_date:
        return Granularity.TIME
    return Granularity.TIMESTAMP


@dataclass(frozen=True)
class FieldDef:
    """Definition of a single field of an entity."""

    name: str
    semantic_type: SemanticType
    is_list: bool = False
    min_occurs: int = 1
    is_primary_key: Optional[bool] = None
    unique: bool = False
    indexed: bool = False
    generated: bool = False
    foreign_key: Optional[str] = None
    default_value: Optional[str] = None
    format: Optional[str] = None
    description: str = ""

    @property
    def mandatory(self) -> bool:
        return self.min_occurs >= 1

    @property
    def is_simple(self) -> bool:
        return self.semantic_type is not SemanticType.COMPLEX

    @property
    def granularity(self) -> Granularity:
        return granularity_of(self.format)

    @property
    def primary_key_candidate(self) -> bool:
        """Explicitly flagged, or named ``id`` without an explicit flag."""
        if self.is_primary_key is None:
            return self.name == "id"
        return self.is_primary_key


@dataclass(frozen=True)
class EntitySchema:
    """Complete definition of one storage entity."""

    name: str
    fields: Tuple[FieldDef, ...] = field(default_factory=tuple)
    collection_name: Optional[str] = None
    super_type: Optional["EntitySchema"] = None

    def __post_init__(self) -> None:
        # Accept any sequence while keeping the instance hashable and immutable
        object.__setattr__(self, "fields", tuple(self.fields))

    def get(self, name: str) -> Optional[FieldDef]:
        """Resolve a field by name, searching the super type chain."""
        for candidate in self.fields:
            if candidate.name == name:
                return candidate
        if self.super_type is not None:
            return self.super_type.get(name)
        return None

    def fields_in_table(self) -> List[FieldDef]:
        """Fields persisted as columns of this entity's own table."""
        return [
            f
            for f in self.fields
            if not (f.semantic_type is SemanticType.COMPLEX and f.is_list)
        ]

    @property
    def logical_collection_name(self) -> str:
        return self.collection_name or self.name

    @property
    def storage_name(self) -> str:
        return to_storage_name(self.logical_collection_name)

    def primary_key(self) -> FieldDef:
        """Return the single primary key field of the table.

        Raises:
            ConfigurationError: If no field or more than one field qualifies
        """
        candidates = [f for f in self.fields_in_table() if f.primary_key_candidate]
        if len(candidates) != 1:
            names = [f.name for f in candidates]
            raise ConfigurationError(
                f"Expected exactly one primary key field, found {len(candidates)} {names}",
                entity=self.name,
            )
        return candidates[0]


__all__ = [
    "SemanticType",
    "Granularity",
    "NUMERIC_TYPES",
    "TEXTUAL_TYPES",
    "granularity_of",
    "FieldDef",
    "EntitySchema",
]
