"""
Schema node definitions.

These nodes are the in-memory JSON Schema graph built by the generator.
A node is mutable while a generation run is in progress and is identified
by object identity, so the same node can be referenced from many places.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Flag
from typing import Any

from ..errors import CyclicReferenceError


class JsonObjectType(Flag):
    """JSON type bitset of a schema node."""

    NONE = 0
    ARRAY = 1
    BOOLEAN = 2
    INTEGER = 4
    NULL = 8
    NUMBER = 16
    OBJECT = 32
    STRING = 64
    FILE = 128


# Serialized names, in output order
JSON_TYPE_NAMES: dict[JsonObjectType, str] = {
    JsonObjectType.ARRAY: "array",
    JsonObjectType.BOOLEAN: "boolean",
    JsonObjectType.INTEGER: "integer",
    JsonObjectType.NULL: "null",
    JsonObjectType.NUMBER: "number",
    JsonObjectType.OBJECT: "object",
    JsonObjectType.STRING: "string",
    JsonObjectType.FILE: "file",
}


@dataclass(eq=False)
class JsonSchema:
    """One JSON Schema (sub)document."""

    type: JsonObjectType = JsonObjectType.NONE
    format: str | None = None
    title: str | None = None
    description: str | None = None

    # $ref semantics: this node IS the referenced node
    reference: JsonSchema | None = None

    # Object keywords
    properties: dict[str, JsonProperty] = field(default_factory=dict)
    required_properties: list[str] = field(default_factory=list)
    allow_additional_properties: bool = True
    additional_properties_schema: JsonSchema | None = None
    discriminator: str | None = None
    is_abstract: bool = False

    # Composition
    all_of: list[JsonSchema] = field(default_factory=list)
    one_of: list[JsonSchema] = field(default_factory=list)

    # Array keywords
    item: JsonSchema | None = None
    min_items: int | None = None
    max_items: int | None = None

    # Enumerations (parallel sequences)
    enumeration: list[Any] = field(default_factory=list)
    enumeration_names: list[str] = field(default_factory=list)

    # Numeric and string constraints
    minimum: float | None = None
    maximum: float | None = None
    multiple_of: float | None = None
    min_length: int | None = None
    max_length: int | None = None
    pattern: str | None = None

    default: Any = None

    # Vendor extensions (x-* keywords)
    extension_data: dict[str, Any] = field(default_factory=dict)

    # Only populated on the root node
    definitions: dict[str, JsonSchema] = field(default_factory=dict)

    @staticmethod
    def create_any_schema() -> JsonSchema:
        """Create a schema that accepts any value."""
        return JsonSchema()

    @property
    def has_reference(self) -> bool:
        return self.reference is not None

    @property
    def actual_schema(self) -> JsonSchema:
        """Follow references until a concrete node is reached.

        Raises:
            CyclicReferenceError: If the reference chain loops back on itself
        """
        visited: set[int] = set()
        schema = self
        while schema.reference is not None:
            if id(schema) in visited:
                raise CyclicReferenceError("Cyclic $ref chain detected while resolving the actual schema")
            visited.add(id(schema))
            schema = schema.reference
        return schema

    def add_required(self, name: str) -> None:
        if name not in self.required_properties:
            self.required_properties.append(name)


@dataclass(eq=False)
class JsonProperty(JsonSchema):
    """Schema of an object member.

    This is the restricted schema kind: object types are never built inline
    into a property, they are referenced instead.
    """

    is_read_only: bool = False
