"""
Serialization of a schema graph to a JSON document.

References become ``$ref`` pointers into the root's ``definitions``; a
referenced schema that is not in the definitions yet is appended under a
generated name.
"""

from __future__ import annotations

import datetime
import decimal
import json
import logging
import uuid
from enum import Enum
from pathlib import PurePath
from typing import Any

from ...utils import unique_name
from ..config import SchemaType
from .nodes import JSON_TYPE_NAMES, JsonObjectType, JsonProperty, JsonSchema

logger = logging.getLogger(__name__)

JSON_SCHEMA_DRAFT_04 = "http://json-schema.org/draft-04/schema#"


class SchemaSerializer:
    """Serializes one schema graph; create one instance per document."""

    def __init__(self, root: JsonSchema, schema_type: SchemaType = SchemaType.JSON_SCHEMA):
        self.root = root
        self.schema_type = schema_type
        self._names: dict[int, str] = {id(schema): name for name, schema in root.definitions.items()}
        self._extra_definitions: dict[str, JsonSchema] = {}

    def to_dict(self) -> dict[str, Any]:
        document: dict[str, Any] = {}
        if self.schema_type == SchemaType.JSON_SCHEMA:
            document["$schema"] = JSON_SCHEMA_DRAFT_04
        document.update(self.keywords(self.root))

        definitions = {name: self.keywords(schema) for name, schema in self.root.definitions.items()}
        # Serializing an extra definition may discover further ones
        pending = list(self._extra_definitions.items())
        while pending:
            name, schema = pending.pop(0)
            known = set(self._extra_definitions)
            definitions[name] = self.keywords(schema)
            pending.extend((n, s) for n, s in self._extra_definitions.items() if n not in known)

        if definitions:
            document["definitions"] = definitions
        return document

    def keywords(self, schema: JsonSchema) -> dict[str, Any]:  # noqa: C901
        """Serialize the keywords of one node (not its definitions)."""
        d: dict[str, Any] = {}
        if schema.reference is not None:
            d["$ref"] = self._ref(schema.reference.actual_schema)
        if schema.title is not None:
            d["title"] = schema.title
        if schema.description is not None:
            d["description"] = schema.description
        if schema.type != JsonObjectType.NONE:
            d["type"] = _serialize_type(schema.type)
        if schema.format is not None:
            d["format"] = schema.format
        if schema.is_abstract:
            d["x-abstract"] = True
        if schema.discriminator is not None:
            d["discriminator"] = schema.discriminator
        if isinstance(schema, JsonProperty) and schema.is_read_only:
            d["readOnly"] = True
        if schema.default is not None and _is_json_encodable(schema.default):
            d["default"] = schema.default

        for key, value in (
            ("minimum", schema.minimum),
            ("maximum", schema.maximum),
            ("multipleOf", schema.multiple_of),
            ("minLength", schema.min_length),
            ("maxLength", schema.max_length),
            ("pattern", schema.pattern),
            ("minItems", schema.min_items),
            ("maxItems", schema.max_items),
        ):
            if value is not None:
                d[key] = value

        if schema.enumeration:
            d["enum"] = list(schema.enumeration)
        if schema.enumeration_names:
            d["x-enumNames"] = list(schema.enumeration_names)
        if schema.item is not None:
            d["items"] = self.keywords(schema.item)
        if schema.properties:
            d["properties"] = {name: self.keywords(p) for name, p in schema.properties.items()}
        if schema.required_properties:
            d["required"] = list(schema.required_properties)
        if not schema.allow_additional_properties:
            d["additionalProperties"] = False
        elif schema.additional_properties_schema is not None:
            d["additionalProperties"] = self.keywords(schema.additional_properties_schema)
        if schema.all_of:
            d["allOf"] = [self.keywords(s) for s in schema.all_of]
        if schema.one_of:
            d["oneOf"] = [self.keywords(s) for s in schema.one_of]
        d.update(schema.extension_data)
        return d

    def _ref(self, target: JsonSchema) -> str:
        if target is self.root:
            return "#"
        name = self._names.get(id(target))
        if name is None:
            taken = set(self.root.definitions) | set(self._extra_definitions)
            name = unique_name(target.title or "Anonymous", taken)
            self._names[id(target)] = name
            self._extra_definitions[name] = target
        return f"#/definitions/{name}"


def _serialize_type(json_type: JsonObjectType) -> str | list[str]:
    names = [name for flag, name in JSON_TYPE_NAMES.items() if flag in json_type]
    return names[0] if len(names) == 1 else names


def has_own_keywords(schema: JsonSchema) -> bool:
    """Whether a node would serialize to anything besides a bare ``$ref``."""
    keywords = SchemaSerializer(schema).keywords(schema)
    keywords.pop("$ref", None)
    return bool(keywords)


def schema_to_dict(schema: JsonSchema, schema_type: SchemaType = SchemaType.JSON_SCHEMA) -> dict[str, Any]:
    return SchemaSerializer(schema, schema_type).to_dict()


def _json_default(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime.datetime, datetime.date, datetime.time)):
        return value.isoformat()
    if isinstance(value, decimal.Decimal):
        return float(value)
    if isinstance(value, (uuid.UUID, PurePath)):
        return str(value)
    if isinstance(value, (set, frozenset, tuple)):
        return list(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _is_json_encodable(value: Any) -> bool:
    try:
        json.dumps(value, default=_json_default)
    except (TypeError, ValueError) as e:
        logger.debug("Dropping default value %r: %s", value, e)
        return False
    return True


def schema_to_json(schema: JsonSchema, schema_type: SchemaType = SchemaType.JSON_SCHEMA, indent: int | None = 2) -> str:
    return json.dumps(schema_to_dict(schema, schema_type), indent=indent, default=_json_default)
