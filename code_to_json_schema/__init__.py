"""Code to JSON Schema Generator

A Python package for generating JSON Schema (draft 4) and Swagger 2.0
schemas from annotated Python types: dataclasses, TypedDicts, enums and
plain annotated classes.
"""

__version__ = "1.0.0"
__author__ = "François Lagunas"

from .generation import (
    JsonSchemaGenerationError,
    JsonSchemaGenerator,
    JsonSchemaGeneratorSettings,
    SchemaType,
    schema_to_dict,
    schema_to_json,
)

__all__ = [
    "JsonSchemaGenerator",
    "JsonSchemaGeneratorSettings",
    "JsonSchemaGenerationError",
    "SchemaType",
    "schema_to_dict",
    "schema_to_json",
]
