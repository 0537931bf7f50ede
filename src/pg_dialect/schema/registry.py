"""Entity schema registry for pg_dialect.

Entities are registered once at start-up and resolved by reference
afterwards, e.g. when a foreign key names another entity.
"""

from __future__ import annotations

from typing import Dict, List

from .core import EntitySchema


_ENTITY_REGISTRY: Dict[str, EntitySchema] = {}


def register_entity(schema: EntitySchema) -> None:
    """Register an entity schema in the global registry."""
    if schema.name in _ENTITY_REGISTRY:
        raise ValueError(
            f"Entity '{schema.name}' is already registered. "
            "Use a different name or unregister first."
        )
    _ENTITY_REGISTRY[schema.name] = schema


def unregister_entity(name: str) -> None:
    """Remove an entity from the registry, ignoring unknown names."""
    _ENTITY_REGISTRY.pop(name, None)


def get_entity(name: str) -> EntitySchema:
    """Retrieve an entity schema from the registry by reference."""
    if name not in _ENTITY_REGISTRY:
        available = list(_ENTITY_REGISTRY.keys())
        raise KeyError(f"Entity '{name}' not found in registry. Available: {available}")
    return _ENTITY_REGISTRY[name]


def list_entities() -> List[str]:
    """List all registered entity names."""
    return sorted(_ENTITY_REGISTRY.keys())


__all__ = [
    "register_entity",
    "unregister_entity",
    "get_entity",
    "list_entities",
]
