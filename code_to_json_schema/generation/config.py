"""
Configuration for the schema generator.

Plain options can be loaded from a JSON config file with ``from_dict``;
the pluggable collaborators (type mappers, processors, services) are set
programmatically.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .extractor import AnnotationExtractor
    from .members import MemberEnumerator
    from .name_generator import SchemaNameGenerator
    from .processors import SchemaProcessor
    from .reflection import ReflectionService
    from .type_mappers import TypeMapper


class SchemaType(str, Enum):
    """Output dialect."""

    JSON_SCHEMA = "json_schema"
    SWAGGER2 = "swagger2"  # Restricted: no null type, no oneOf


class EnumHandling(str, Enum):
    """How enums without a StringEnum marker are serialized."""

    INTEGER = "integer"
    STRING = "string"


class ReferenceTypeNullHandling(str, Enum):
    """Natural nullability of strings, containers and objects."""

    NOT_NULL = "not_null"  # Only Optional[...] annotations are nullable
    NULL = "null"


class PropertyNameHandling(str, Enum):
    DEFAULT = "default"
    CAMEL_CASE = "camel_case"
    SNAKE_CASE = "snake_case"


DEFAULT_SCHEMA_NAME_TEMPLATE = "{{ name }}{% for arg in args %}Of{{ arg }}{% endfor %}"


@dataclass
class JsonSchemaGeneratorSettings:
    """Configuration options for schema generation."""

    # Output dialect
    schema_type: SchemaType = SchemaType.JSON_SCHEMA

    # Enum serialization when no StringEnum marker applies
    default_enum_handling: EnumHandling = EnumHandling.INTEGER

    # Nullability of non-Optional reference-like types
    default_reference_type_null_handling: ReferenceTypeNullHandling = ReferenceTypeNullHandling.NOT_NULL

    # Naming policy applied to every property name
    property_name_handling: PropertyNameHandling = PropertyNameHandling.DEFAULT

    # Merge base class members into derived schemas instead of allOf links
    flatten_inheritance_hierarchy: bool = False

    # Include abstract properties, and mixin bases when flattening
    generate_abstract_properties: bool = False

    # Eagerly generate types declared with @known_type
    generate_known_types: bool = True

    # Skip members marked Deprecated()
    ignore_obsolete_properties: bool = False

    # Allow keywords next to $ref instead of wrapping the reference
    allow_references_with_properties: bool = False

    # Include @property members that have a return annotation
    include_computed_properties: bool = False

    # Fully qualified names of base types never linked via allOf
    excluded_type_names: list[str] = field(default_factory=list)

    # jinja2 template for definition names (variables: name, qualname, module, args)
    schema_name_template: str = DEFAULT_SCHEMA_NAME_TEMPLATE

    # Pluggable collaborators (not part of the dict form)
    type_mappers: list[TypeMapper] = field(default_factory=list)
    schema_processors: list[SchemaProcessor] = field(default_factory=list)
    reflection_service: ReflectionService | None = None
    member_enumerator: MemberEnumerator | None = None
    annotation_extractor: AnnotationExtractor | None = None
    schema_name_generator: SchemaNameGenerator | None = None

    def __post_init__(self):
        # Deferred to avoid import cycles between the services and the settings
        from .extractor import AnnotationExtractor
        from .members import MemberEnumerator
        from .name_generator import DefaultSchemaNameGenerator
        from .reflection import ReflectionService

        if self.reflection_service is None:
            self.reflection_service = ReflectionService()
        if self.member_enumerator is None:
            self.member_enumerator = MemberEnumerator()
        if self.annotation_extractor is None:
            self.annotation_extractor = AnnotationExtractor()
        if self.schema_name_generator is None:
            self.schema_name_generator = DefaultSchemaNameGenerator(self.schema_name_template)

    @staticmethod
    def from_dict(d: dict) -> JsonSchemaGeneratorSettings:
        """Create settings from a dictionary (e.g. a JSON config file)."""
        converters = {
            "schema_type": SchemaType,
            "default_enum_handling": EnumHandling,
            "default_reference_type_null_handling": ReferenceTypeNullHandling,
            "property_name_handling": PropertyNameHandling,
        }
        kwargs: dict[str, Any] = {}
        for k, v in d.items():
            if k in converters:
                kwargs[k] = converters[k](v)
            elif k in _PLAIN_OPTIONS:
                kwargs[k] = v
        return JsonSchemaGeneratorSettings(**kwargs)

    def to_dict(self) -> dict:
        """Convert the plain options to a dictionary."""
        return {
            "schema_type": self.schema_type.value,
            "default_enum_handling": self.default_enum_handling.value,
            "default_reference_type_null_handling": self.default_reference_type_null_handling.value,
            "property_name_handling": self.property_name_handling.value,
            "flatten_inheritance_hierarchy": self.flatten_inheritance_hierarchy,
            "generate_abstract_properties": self.generate_abstract_properties,
            "generate_known_types": self.generate_known_types,
            "ignore_obsolete_properties": self.ignore_obsolete_properties,
            "allow_references_with_properties": self.allow_references_with_properties,
            "include_computed_properties": self.include_computed_properties,
            "excluded_type_names": self.excluded_type_names,
            "schema_name_template": self.schema_name_template,
        }


_PLAIN_OPTIONS = {
    "flatten_inheritance_hierarchy",
    "generate_abstract_properties",
    "generate_known_types",
    "ignore_obsolete_properties",
    "allow_references_with_properties",
    "include_computed_properties",
    "excluded_type_names",
    "schema_name_template",
}
