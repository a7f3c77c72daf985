"""
Schema resolver.

Identity cache mapping ``(type, is_integer_enumeration)`` to the one
canonical schema generated for it. Registered schemas other than the root
are appended to the root's definitions.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from ..utils import unique_name
from .schema.nodes import JsonSchema

if TYPE_CHECKING:
    from .config import JsonSchemaGeneratorSettings

logger = logging.getLogger(__name__)


class JsonSchemaResolver:
    """Resolves types to already generated schemas."""

    def __init__(self, root_object: JsonSchema, settings: JsonSchemaGeneratorSettings):
        """
        Initialize the resolver.

        Args:
            root_object: The root schema; receives the definitions
            settings: Generator settings (used for definition names)
        """
        self.root_object = root_object
        self.settings = settings
        self._mappings: dict[tuple[Any, bool], JsonSchema] = {}

    @staticmethod
    def _key(tp: Any, is_integer_enumeration: bool) -> tuple[Any, bool]:
        return (tp, is_integer_enumeration)

    def has_schema(self, tp: Any, is_integer_enumeration: bool) -> bool:
        return self._key(tp, is_integer_enumeration) in self._mappings

    def get_schema(self, tp: Any, is_integer_enumeration: bool) -> JsonSchema:
        """
        Get the canonical schema of a type.

        Raises:
            KeyError: If no schema was registered for the type
        """
        return self._mappings[self._key(tp, is_integer_enumeration)]

    def add_schema(self, tp: Any, is_integer_enumeration: bool, schema: JsonSchema) -> None:
        """
        Register the canonical schema of a type.

        Raises:
            ValueError: If a schema is already registered for the type
        """
        key = self._key(tp, is_integer_enumeration)
        if key in self._mappings:
            raise ValueError(f"A schema is already registered for {tp!r}")
        logger.debug("Registering schema for %r (integer enumeration: %s)", tp, is_integer_enumeration)
        self._mappings[key] = schema
        if schema is not self.root_object:
            self.append_schema(schema, self.settings.schema_name_generator.generate(tp))

    def append_schema(self, schema: JsonSchema, type_name_hint: str) -> None:
        """Add a schema to the root definitions unless it is already there."""
        if schema is self.root_object:
            raise ValueError("The root schema cannot be appended to its own definitions")
        definitions = self.root_object.definitions
        if any(existing is schema for existing in definitions.values()):
            return
        definitions[unique_name(type_name_hint, definitions)] = schema

    @property
    def schemas(self) -> list[JsonSchema]:
        return list(self._mappings.values())
