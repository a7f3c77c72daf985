"""
Generation - Python type to JSON Schema generator.

Schema generation runs in three layers:

1. Reflection: classify a type annotation (JSON type, nullability, containers)
2. Generation: build the schema graph, sharing one schema per referenced type
3. Serialization: turn the graph into a JSON Schema or Swagger 2.0 document
"""

from .config import (
    EnumHandling,
    JsonSchemaGeneratorSettings,
    PropertyNameHandling,
    ReferenceTypeNullHandling,
    SchemaType,
)
from .errors import (
    CyclicReferenceError,
    DuplicateDiscriminatorError,
    DuplicatePropertyError,
    JsonSchemaGenerationError,
    MalformedKnownTypeDeclarationError,
    UnresolvedElementTypeError,
    UnsupportedTypeError,
)
from .extractor import AnnotationExtractor, ConstraintHints
from .generator import JsonSchemaGenerator
from .members import MemberDescriptor, MemberEnumerator
from .name_generator import DefaultSchemaNameGenerator
from .processors import SchemaProcessorContext
from .reflection import ReflectionService, TypeDescription
from .resolver import JsonSchemaResolver
from .schema import JsonObjectType, JsonProperty, JsonSchema, schema_to_dict, schema_to_json
from .type_mappers import ObjectTypeMapper, PrimitiveTypeMapper, TypeMapperContext

__all__ = [
    "JsonSchemaGenerator",
    "JsonSchemaGeneratorSettings",
    "JsonSchemaResolver",
    "SchemaType",
    "EnumHandling",
    "ReferenceTypeNullHandling",
    "PropertyNameHandling",
    "JsonSchema",
    "JsonProperty",
    "JsonObjectType",
    "schema_to_dict",
    "schema_to_json",
    "ReflectionService",
    "TypeDescription",
    "MemberEnumerator",
    "MemberDescriptor",
    "AnnotationExtractor",
    "ConstraintHints",
    "DefaultSchemaNameGenerator",
    "PrimitiveTypeMapper",
    "ObjectTypeMapper",
    "TypeMapperContext",
    "SchemaProcessorContext",
    "JsonSchemaGenerationError",
    "DuplicatePropertyError",
    "DuplicateDiscriminatorError",
    "UnresolvedElementTypeError",
    "MalformedKnownTypeDeclarationError",
    "UnsupportedTypeError",
    "CyclicReferenceError",
]
