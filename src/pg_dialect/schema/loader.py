"""
YAML loader for entity schema definitions.

A definitions file lists entities with their fields:

    entities:
      - name: person
        collection: people
        fields:
          - {name: id, type: uuid}
          - {name: email, type: string, unique: true}
          - {name: tags, type: string, list: true, min_occurs: 0}
      - name: employee
        extends: person
        fields:
          - {name: id, type: uuid, primary_key: true}
          - {name: hiredOn, type: datetime, format: date}

``extends`` may name an entity defined earlier in the same file or one
already present in the registry.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from pg_dialect.utils.logging import get_logger

from .core import EntitySchema, FieldDef, SemanticType
from .registry import get_entity, register_entity

logger = get_logger(__name__)

# YAML keys that differ from FieldDef attribute names
_FIELD_KEY_ALIASES = {
    "type": "semantic_type",
    "list": "is_list",
    "primary_key": "is_primary_key",
    "default": "default_value",
}


def _build_field(raw: Dict[str, Any], file_path: Path, entity_name: str) -> FieldDef:
    values = {_FIELD_KEY_ALIASES.get(key, key): value for key, value in raw.items()}
    type_name = values.get("semantic_type")
    try:
        values["semantic_type"] = SemanticType(str(type_name).lower())
    except ValueError as e:
        raise ValueError(
            f"Unknown type '{type_name}' for field '{values.get('name')}' "
            f"of entity '{entity_name}' in {file_path}"
        ) from e
    default = values.get("default_value")
    if isinstance(default, bool):
        values["default_value"] = "true" if default else "false"
    elif default is not None:
        values["default_value"] = str(default)
    try:
        return FieldDef(**values)
    except TypeError as e:
        raise ValueError(
            f"Invalid field definition for entity '{entity_name}' in {file_path}: {e}"
        ) from e


def load_entities(
    file_path: Union[str, Path], register: bool = True
) -> List[EntitySchema]:
    """
    Load entity schemas from a YAML definitions file.

    Args:
        file_path: Path to the YAML file.
        register: Register every loaded entity in the global registry.

    Returns:
        Entities in file order.

    Raises:
        ValueError: If the file is not valid YAML or a definition is invalid.
        FileNotFoundError: If the file does not exist.
    """
    file_path = Path(file_path)
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            content = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.error(
            "schema_loader.yaml_parse_error", file_path=str(file_path), error=str(e)
        )
        raise ValueError(f"Invalid YAML in {file_path}: {e}") from e

    if content is None:
        logger.debug("schema_loader.empty_file", file_path=str(file_path))
        return []

    if not isinstance(content, dict) or not isinstance(
        content.get("entities", []), list
    ):
        raise ValueError(
            f"Invalid entity definitions in {file_path}: expected a mapping "
            "with an 'entities' list"
        )

    loaded: Dict[str, EntitySchema] = {}
    for raw_entity in content.get("entities", []):
        name = raw_entity.get("name")
        if not name:
            raise ValueError(f"Entity without a name in {file_path}")

        super_type: Optional[EntitySchema] = None
        parent = raw_entity.get("extends")
        if parent:
            super_type = loaded.get(parent)
            if super_type is None:
                try:
                    super_type = get_entity(parent)
                except KeyError as e:
                    raise ValueError(
                        f"Entity '{name}' extends unknown entity '{parent}' in {file_path}"
                    ) from e

        schema = EntitySchema(
            name=name,
            fields=[
                _build_field(raw_field, file_path, name)
                for raw_field in raw_entity.get("fields", [])
            ],
            collection_name=raw_entity.get("collection"),
            super_type=super_type,
        )
        loaded[name] = schema
        if register:
            register_entity(schema)

    logger.info(
        "schema_loader.loaded",
        file_path=str(file_path),
        entity_count=len(loaded),
    )
    return list(loaded.values())


__all__ = ["load_entities"]
