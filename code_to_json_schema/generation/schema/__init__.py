"""
Schema graph module.

Contains the in-memory schema node definitions and their JSON serializer.
"""

from __future__ import annotations

from .nodes import JSON_TYPE_NAMES, JsonObjectType, JsonProperty, JsonSchema
from .serializer import SchemaSerializer, has_own_keywords, schema_to_dict, schema_to_json

__all__ = [
    "JSON_TYPE_NAMES",
    "JsonObjectType",
    "JsonProperty",
    "JsonSchema",
    "SchemaSerializer",
    "has_own_keywords",
    "schema_to_dict",
    "schema_to_json",
]
