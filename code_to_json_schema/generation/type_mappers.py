"""
Custom type mappers.

A type mapper takes over schema generation for one type entirely. Mappers
are matched by exact type first, then by the generic origin (a mapper for
``list`` matches ``list[int]``); the first match wins.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Protocol, get_origin

if TYPE_CHECKING:
    from .generator import JsonSchemaGenerator
    from .resolver import JsonSchemaResolver
    from .schema.nodes import JsonSchema


@dataclass
class TypeMapperContext:
    type: Any
    generator: JsonSchemaGenerator
    resolver: JsonSchemaResolver
    parent_metadata: tuple[Any, ...] | None = None


class TypeMapper(Protocol):
    mapped_type: Any

    # Whether the generated schema is placed in definitions and referenced
    use_reference: bool

    def generate_schema(self, schema: JsonSchema, context: TypeMapperContext) -> None: ...


def find_type_mapper(type_mappers: list[TypeMapper], tp: Any) -> TypeMapper | None:
    for mapper in type_mappers:
        if mapper.mapped_type == tp:
            return mapper
    origin = get_origin(tp)
    if origin is not None:
        for mapper in type_mappers:
            if mapper.mapped_type == origin:
                return mapper
    return None


class PrimitiveTypeMapper:
    """Maps a type onto an inline schema built by a callback."""

    use_reference = False

    def __init__(self, mapped_type: Any, transformer: Callable[[JsonSchema], None]):
        self.mapped_type = mapped_type
        self.transformer = transformer

    def generate_schema(self, schema: JsonSchema, context: TypeMapperContext) -> None:
        self.transformer(schema)


class ObjectTypeMapper:
    """Maps a type onto a fixed, shared object schema."""

    use_reference = True

    def __init__(self, mapped_type: Any, object_schema: JsonSchema):
        self.mapped_type = mapped_type
        self.object_schema = object_schema

    def generate_schema(self, schema: JsonSchema, context: TypeMapperContext) -> None:
        resolver = context.resolver
        if not resolver.has_schema(self.mapped_type, False):
            resolver.add_schema(self.mapped_type, False, self.object_schema)
        schema.reference = self.object_schema
