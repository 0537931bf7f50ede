"""Entity schema model consumed by the SQL generators.

Fields arrive here already resolved to a SemanticType; the generators never
inspect runtime types themselves.
"""

from .core import (
    NUMERIC_TYPES,
    TEXTUAL_TYPES,
    EntitySchema,
    FieldDef,
    Granularity,
    SemanticType,
    granularity_of,
)
from .loader import load_entities
from .registry import get_entity, list_entities, register_entity, unregister_entity

__all__ = [
    "SemanticType",
    "Granularity",
    "NUMERIC_TYPES",
    "TEXTUAL_TYPES",
    "granularity_of",
    "FieldDef",
    "EntitySchema",
    "register_entity",
    "unregister_entity",
    "get_entity",
    "list_entities",
    "load_entities",
]
