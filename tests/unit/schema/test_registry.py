"""
Unit tests for the entity registry.
"""

import pytest

from pg_dialect.schema import (
    EntitySchema,
    FieldDef,
    SemanticType,
    get_entity,
    list_entities,
    register_entity,
    unregister_entity,
)


def _entity(name):
    return EntitySchema(name, [FieldDef("id", SemanticType.UUID)])


@pytest.mark.unit
class TestRegistry:
    """Tests for entity registration and lookup."""

    def test_register_and_get(self):
        schema = _entity("person")
        register_entity(schema)
        assert get_entity("person") is schema

    def test_duplicate_registration(self):
        register_entity(_entity("person"))
        with pytest.raises(ValueError, match="already registered"):
            register_entity(_entity("person"))

    def test_unknown_entity(self):
        register_entity(_entity("person"))
        with pytest.raises(KeyError, match="person"):
            get_entity("vehicle")

    def test_list_is_sorted(self):
        register_entity(_entity("vehicle"))
        register_entity(_entity("person"))
        assert list_entities() == ["person", "vehicle"]

    def test_unregister(self):
        register_entity(_entity("person"))
        unregister_entity("person")
        unregister_entity("person")
        assert list_entities() == []

    def test_registry_starts_empty(self):
        assert list_entities() == []
