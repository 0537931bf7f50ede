"""Shared pytest fixtures for pg_dialect tests."""

from __future__ import annotations

from typing import Dict, Generator

import pytest

from pg_dialect.schema import EntitySchema, FieldDef, SemanticType
from pg_dialect.schema import registry as schema_registry


@pytest.fixture(autouse=True)
def isolated_registry() -> Generator[Dict[str, EntitySchema], None, None]:
    """Give every test its own view of the entity registry."""
    saved = dict(schema_registry._ENTITY_REGISTRY)
    schema_registry._ENTITY_REGISTRY.clear()
    yield schema_registry._ENTITY_REGISTRY
    schema_registry._ENTITY_REGISTRY.clear()
    schema_registry._ENTITY_REGISTRY.update(saved)


@pytest.fixture
def person_schema() -> EntitySchema:
    """A typical entity: uuid key, mandatory and optional columns."""
    return EntitySchema(
        name="person",
        collection_name="people",
        fields=[
            FieldDef("id", SemanticType.UUID),
            FieldDef("firstName", SemanticType.STRING),
            FieldDef("email", SemanticType.STRING, unique=True, indexed=True),
            FieldDef("active", SemanticType.BOOLEAN),
            FieldDef("age", SemanticType.INTEGER, min_occurs=0),
            FieldDef("created", SemanticType.DATETIME),
        ],
    )


@pytest.fixture
def query_input() -> EntitySchema:
    """Input of a query template exercising every cast rule."""
    return EntitySchema(
        name="personQueryInput",
        fields=[
            FieldDef("id", SemanticType.UUID),
            FieldDef("ids", SemanticType.UUID, is_list=True),
            FieldDef("name", SemanticType.STRING),
            FieldDef("tags", SemanticType.STRING, is_list=True),
            FieldDef("ages", SemanticType.INTEGER, is_list=True),
            FieldDef("scores", SemanticType.LONG, is_list=True),
            FieldDef("active", SemanticType.BOOLEAN),
            FieldDef("born", SemanticType.DATETIME, format="date"),
            FieldDef("alarm", SemanticType.DATETIME, format="HH:mm"),
            FieldDef("since", SemanticType.DATETIME),
            FieldDef("timeout", SemanticType.DURATION),
            FieldDef("address", SemanticType.COMPLEX),
            FieldDef("payload", SemanticType.ANY, is_list=True),
        ],
    )
