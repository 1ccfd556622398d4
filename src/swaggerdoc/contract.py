"""Loading of the named schemas ("contracts") that annotations may reference.

Contract files are YAML or JSON mappings of schema name to definition. A
definition is either a regular OpenAPI schema or a shorthand property map::

    CreateLedger:
      name: {type: string, required: true, example: main}
      tags: {type: array, itemType: string}
      owner: {type: User}
"""

import json
import logging
from pathlib import Path

import yaml

from swaggerdoc.config import SwaggerDocConfig
from swaggerdoc.generator.schema import SCALAR_TYPES, schema_ref

logger = logging.getLogger(__name__)

CONTRACT_SUFFIXES = (".yaml", ".yml", ".json")
SCHEMA_KEYS = {"type", "$ref", "properties", "allOf", "oneOf", "anyOf"}
PASSTHROUGH_TYPES = SCALAR_TYPES + ("object", "file")
PROPERTY_KEYS = ("description", "example", "enum", "format", "default")


def _read(file_path: Path) -> dict:
    text = file_path.read_text(encoding="utf-8")
    if file_path.suffix == ".json":
        data = json.loads(text)
    else:
        data = yaml.safe_load(text)
    return data or {}


def load_contract_files(directory: Path) -> dict[str, dict]:
    """Read raw contract definitions from every file below ``directory``."""
    raw: dict[str, dict] = {}
    for file_path in sorted(directory.rglob("*")):
        if not file_path.is_file() or file_path.suffix not in CONTRACT_SUFFIXES:
            continue
        for name, definition in _read(file_path).items():
            if name in raw:
                logger.warning("contract %r redefined in %s", name, file_path)
            raw[name] = definition
    return raw


def _is_schema(definition: dict) -> bool:
    if "type" in definition:
        # a property called "type" holds a mapping, a schema type is a string
        return isinstance(definition["type"], str)
    return bool(SCHEMA_KEYS & set(definition))


def _property_schema(prop: dict, names: set[str]) -> dict:
    prop_type = prop.get("type", "string")
    if prop_type == "array":
        item_type = prop.get("itemType", "string")
        items = schema_ref(item_type) if item_type in names else {"type": item_type}
        schema = {"type": "array", "items": items}
    elif prop_type in names and prop_type not in PASSTHROUGH_TYPES:
        schema = schema_ref(prop_type)
    else:
        schema = {"type": prop_type}

    for key in PROPERTY_KEYS:
        if key in prop:
            schema[key] = prop[key]
    return schema


def to_schema(definition: dict, names: set[str]) -> dict:
    """Expand a shorthand property map. Regular schemas are returned as they are."""
    if _is_schema(definition):
        return definition

    required = []
    properties = {}
    for prop_name, prop in definition.items():
        prop = prop or {}
        if prop.get("required"):
            required.append(prop_name)
        properties[prop_name] = _property_schema(prop, names)

    schema = {"type": "object", "properties": properties}
    if required:
        schema["required"] = required
    return schema


def load_contracts(directory: Path) -> dict[str, dict]:
    raw = load_contract_files(directory)
    names = set(raw)
    return {name: to_schema(definition, names) for name, definition in raw.items()}


def get_definitions(config: SwaggerDocConfig) -> dict[str, dict]:
    """Schemas available for ``$ref``: the contract directory plus inline ``schemas``."""
    definitions: dict[str, dict] = {}
    root = config.contract_root
    if root is not None:
        definitions.update(load_contracts(root))
    definitions.update(config.schemas)
    return definitions
