"""
Schema generator.

Recursive type-to-schema generation: classifies a type, dispatches to the
object, enum, array or dictionary builder, and decides for every nested
type whether it is inlined, referenced, or wrapped in a nullable union.
"""

from __future__ import annotations

import abc
import dataclasses
import inspect
import logging
import math
import sys
import types
import typing
from enum import Enum
from typing import Any, Callable, TypeVar

from ..utils import to_camel_case, to_snake_case
from . import annotations as ann
from .config import JsonSchemaGeneratorSettings, PropertyNameHandling, SchemaType
from .errors import (
    DuplicateDiscriminatorError,
    DuplicatePropertyError,
    MalformedKnownTypeDeclarationError,
    UnresolvedElementTypeError,
    UnsupportedTypeError,
    type_display_name,
)
from .extractor import ConstraintHints
from .members import MemberDescriptor
from .processors import SchemaProcessorContext
from .reflection import (
    TypeDescription,
    is_forward_reference,
    origin_class,
    substitute_type_vars,
    type_var_mapping,
    unwrap_type,
)
from .resolver import JsonSchemaResolver
from .schema.nodes import JsonObjectType, JsonProperty, JsonSchema
from .schema.serializer import has_own_keywords, schema_to_json
from .type_mappers import TypeMapperContext, find_type_mapper

logger = logging.getLogger(__name__)

TSchema = TypeVar("TSchema", bound=JsonSchema)

Transformation = Callable[[JsonSchema, JsonSchema], None]

DATA_TYPE_FORMATS = types.MappingProxyType(
    {
        "DateTime": "date-time",
        "Date": "date",
        "Time": "time",
        "EmailAddress": "email",
        "PhoneNumber": "phone",
        "Url": "uri",
    }
)

_OPAQUE_TYPES = (Any, object)

_NON_SCHEMA_BASES = (object, abc.ABC)


def serialized_enum_value(member: Enum) -> str:
    """The string a member is serialized as when its enum is string-typed."""
    overrides = type(member).__dict__.get(ann.ENUM_NAMES_ATTRIBUTE, {})
    if member.name in overrides:
        return overrides[member.name]
    if isinstance(member.value, str) and isinstance(member, str):
        return member.value
    return member.name


def get_type_description(tp: Any) -> str | None:
    """The class docstring, ignoring the signature dataclasses generate."""
    cls = origin_class(tp)
    doc = getattr(cls, "__dict__", {}).get("__doc__")
    if not isinstance(doc, str):
        return None
    if dataclasses.is_dataclass(cls) and doc.startswith(f"{cls.__name__}("):
        return None
    doc = inspect.cleandoc(doc)
    if not doc or doc == "An enumeration.":
        return None
    return doc


class JsonSchemaGenerator:
    """Generates a ``JsonSchema`` graph for a Python type."""

    def __init__(self, settings: JsonSchemaGeneratorSettings | None = None):
        self.settings = settings or JsonSchemaGeneratorSettings()

    @property
    def _is_restricted(self) -> bool:
        return self.settings.schema_type == SchemaType.SWAGGER2

    def _describe(self, tp: Any, metadata: Any = None) -> TypeDescription:
        return self.settings.reflection_service.describe(tp, metadata, self.settings)

    def _extract(self, metadata: Any) -> ConstraintHints:
        return self.settings.annotation_extractor.extract(metadata)

    # Entry points

    def generate(
        self,
        tp: Any,
        parent_metadata: tuple[Any, ...] | None = None,
        resolver: JsonSchemaResolver | None = None,
        schema_class: type[TSchema] = JsonSchema,
    ) -> TSchema:
        """
        Generate the schema of a type.

        Without a resolver the returned schema is a new root document that
        receives the definitions of all referenced types.

        Args:
            tp: The type
            parent_metadata: Metadata of the member or parameter being generated
            resolver: The resolver of the current generation run
            schema_class: Node class of the returned schema

        Returns:
            The schema
        """
        schema = schema_class()
        if resolver is None:
            resolver = JsonSchemaResolver(schema, self.settings)
        self.generate_into(tp, parent_metadata, schema, resolver)
        return schema

    def generate_json(self, tp: Any, indent: int | None = 2) -> str:
        """Generate a root schema for a type and serialize it."""
        return schema_to_json(self.generate(tp), self.settings.schema_type, indent)

    def generate_into(
        self,
        tp: Any,
        parent_metadata: tuple[Any, ...] | None,
        schema: JsonSchema,
        resolver: JsonSchemaResolver,
    ) -> None:
        """Fill ``schema`` with the schema of ``tp`` and register it in ``resolver``."""
        inner, _, _ = unwrap_type(tp)
        self._apply_extension_data(inner, parent_metadata, schema)

        if self._try_handle_special_types(inner, schema, resolver, parent_metadata):
            self._apply_schema_processors(inner, schema, resolver)
            return

        if resolver.root_object is schema:
            schema.title = self.settings.schema_name_generator.generate(inner)

        description = self._describe(tp, parent_metadata)
        tp = description.type
        logger.debug("Generating %s schema for %r", description.json_type, tp)

        if JsonObjectType.OBJECT in description.json_type:
            if description.is_dictionary:
                description.apply_type(schema)
                self._generate_dictionary(schema, description, resolver)
            elif resolver.has_schema(tp, False):
                logger.debug("Reusing the schema of %r", tp)
                schema.reference = resolver.get_schema(tp, False)
            elif type(schema) is JsonSchema:
                description.apply_type(schema)
                schema.description = get_type_description(tp)
                self._generate_object(tp, schema, resolver)
            else:
                schema.reference = self.generate(tp, None, resolver)
        elif description.is_enum:
            self._generate_enum(schema, tp, parent_metadata, description, resolver)
        elif JsonObjectType.ARRAY in description.json_type:
            self._generate_array(schema, description, resolver)
        else:
            description.apply_type(schema)

        self._apply_schema_processors(tp, schema, resolver)

    # Reference and nullability handling

    def generate_with_reference(
        self,
        tp: Any,
        parent_metadata: tuple[Any, ...] | None,
        resolver: JsonSchemaResolver,
        transformation: Transformation | None = None,
        schema_class: type[TSchema] = JsonSchema,
    ) -> TSchema:
        """Generate a schema directly or referenced; does not add nullability."""
        return self.generate_with_reference_and_nullability(tp, parent_metadata, False, resolver, transformation, schema_class)

    def generate_with_reference_and_nullability(
        self,
        tp: Any,
        parent_metadata: tuple[Any, ...] | None,
        is_nullable: bool | None,
        resolver: JsonSchemaResolver,
        transformation: Transformation | None = None,
        schema_class: type[TSchema] = JsonSchema,
    ) -> TSchema:
        """
        Generate a schema directly or referenced, adding nullability if required.

        Args:
            tp: The type
            parent_metadata: Metadata of the member or parameter
            is_nullable: Whether the value may be null; None takes the type's own nullability
            resolver: The resolver of the current generation run
            transformation: Called with (schema, actual schema) before the reference shape is chosen
            schema_class: Node class of the returned schema

        Returns:
            The requested schema, possibly a $ref or a union wrapping one
        """
        description = self._describe(tp, parent_metadata)
        if is_nullable is None:
            is_nullable = description.is_nullable

        if not description.requires_schema_reference(self.settings.type_mappers):
            schema = self.generate(tp, parent_metadata, resolver, schema_class)
            if not schema.has_reference:
                if transformation is not None:
                    transformation(schema, schema)

                if is_nullable and not self._is_restricted:
                    if schema.type == JsonObjectType.NONE:
                        schema.one_of.append(JsonSchema(type=JsonObjectType.NONE))
                        schema.one_of.append(JsonSchema(type=JsonObjectType.NULL))
                    else:
                        schema.type |= JsonObjectType.NULL

                return schema
            referenced_schema = schema.actual_schema
        else:
            referenced_schema = self.generate(tp, parent_metadata, resolver)

        referencing_schema = schema_class()
        if parent_metadata is not None:
            referencing_schema.extension_data.update(self._extract(parent_metadata).extension_data)
        if transformation is not None:
            transformation(referencing_schema, referenced_schema)

        if is_nullable and not self._is_restricted:
            referencing_schema.one_of.append(JsonSchema(type=JsonObjectType.NULL))

        use_direct_reference = self.settings.allow_references_with_properties or not has_own_keywords(referencing_schema)
        if use_direct_reference and not referencing_schema.one_of:
            referencing_schema.reference = referenced_schema.actual_schema
        elif not self._is_restricted:
            referencing_schema.one_of.append(JsonSchema(reference=referenced_schema.actual_schema))
        else:
            referencing_schema.all_of.append(JsonSchema(reference=referenced_schema.actual_schema))

        return referencing_schema

    # Objects

    def _generate_object(self, tp: Any, schema: JsonSchema, resolver: JsonSchemaResolver) -> None:
        # Registered before recursing so cyclic references resolve to this node
        resolver.add_schema(tp, False, schema)

        cls = origin_class(tp)
        schema.allow_additional_properties = False
        schema.is_abstract = inspect.isabstract(cls) or abc.ABC in getattr(cls, "__bases__", ())

        self._generate_properties_and_inheritance(tp, schema, resolver)

        if self.settings.generate_known_types:
            self._generate_known_types(tp, resolver)

    def _generate_properties_and_inheritance(
        self,
        tp: Any,
        schema: JsonSchema,
        resolver: JsonSchemaResolver,
        declared_names: set[str] | None = None,
    ) -> None:
        class_metadata = ann.get_class_metadata(origin_class(tp))
        is_data_contract = any(isinstance(m, ann.DataContract) for m in class_metadata)

        # Members redeclared by a more derived class shadow the base member
        if declared_names is None:
            declared_names = set()

        for member in self.settings.member_enumerator.members_of(tp, self.settings):
            if member.name in declared_names:
                continue
            declared_names.add(member.name)
            if member.is_abstract and not self.settings.generate_abstract_properties:
                continue
            self._load_property(member, tp, schema, resolver, is_data_contract)

        self._generate_inheritance(tp, schema, resolver, declared_names)

    def _base_types(self, tp: Any) -> list[Any]:
        """Direct base types, the primary base first."""
        cls = origin_class(tp)
        if not isinstance(cls, type) or typing.is_typeddict(cls):
            return []
        type_vars = type_var_mapping(tp)
        bases = []
        for base in cls.__dict__.get("__orig_bases__", cls.__bases__):
            base_class = origin_class(base)
            if not isinstance(base_class, type) or base_class in _NON_SCHEMA_BASES:
                continue
            if base_class.__module__ in ("builtins", "typing"):
                continue
            bases.append(substitute_type_vars(base, type_vars))
        return bases

    def _is_base_type_excluded(self, base: Any) -> bool:
        base_class = origin_class(base)
        if any(isinstance(m, ann.SchemaIgnore) for m in ann.get_class_metadata(base_class)):
            return True
        return type_display_name(base_class) in self.settings.excluded_type_names

    def _generate_inheritance(
        self, tp: Any, schema: JsonSchema, resolver: JsonSchemaResolver, declared_names: set[str] | None = None
    ) -> None:
        self._generate_inheritance_discriminator(tp, schema)

        bases = self._base_types(tp)
        if bases and not self._is_base_type_excluded(bases[0]):
            base = bases[0]
            if self.settings.flatten_inheritance_hierarchy:
                base_description = self._describe(base)
                if not base_description.is_dictionary and JsonObjectType.ARRAY not in base_description.json_type:
                    self._generate_properties_and_inheritance(base, schema, resolver, declared_names)
            else:
                base_schema = self.generate(base, None, resolver)
                base_description = self._describe(base)
                if base_description.requires_schema_reference(self.settings.type_mappers):
                    actual_schema = base_schema.actual_schema
                    if resolver.root_object is not actual_schema:
                        resolver.append_schema(actual_schema, self.settings.schema_name_generator.generate(base))
                    schema.all_of.append(JsonSchema(reference=actual_schema))
                else:
                    schema.all_of.append(base_schema)

        if self.settings.flatten_inheritance_hierarchy and self.settings.generate_abstract_properties:
            for capability in bases[1:]:
                if self._is_base_type_excluded(capability):
                    continue
                capability_description = self._describe(capability)
                if not capability_description.is_dictionary and JsonObjectType.ARRAY not in capability_description.json_type:
                    self._generate_properties_and_inheritance(capability, schema, resolver, declared_names)

    def _generate_inheritance_discriminator(self, tp: Any, schema: JsonSchema) -> None:
        if self.settings.flatten_inheritance_hierarchy:
            return

        discriminator = self._try_get_inheritance_discriminator(tp)
        if not discriminator:
            return

        if discriminator in schema.properties:
            raise DuplicateDiscriminatorError(tp, discriminator)

        schema.discriminator = discriminator
        schema.properties[discriminator] = JsonProperty(type=JsonObjectType.STRING)
        schema.add_required(discriminator)

    def _try_get_inheritance_discriminator(self, tp: Any) -> str | None:
        markers = [m for m in ann.get_class_metadata(origin_class(tp)) if isinstance(m, ann.InheritanceDiscriminator)]
        if not markers:
            return None
        if len(markers) > 1:
            raise DuplicateDiscriminatorError(tp, markers[-1].name or ann.DEFAULT_DISCRIMINATOR_NAME)
        return markers[0].name or ann.DEFAULT_DISCRIMINATOR_NAME

    # Known types

    def _generate_known_types(self, tp: Any, resolver: JsonSchemaResolver) -> None:
        cls = origin_class(tp)
        if self.settings.flatten_inheritance_hierarchy:
            # Bases are merged rather than generated, so their known types are collected here
            declarations = [m for klass in cls.__mro__ for m in ann.get_class_metadata(klass)]
        else:
            declarations = list(ann.get_class_metadata(cls))

        for declaration in declarations:
            if not isinstance(declaration, ann.KnownType):
                continue
            if declaration.type is not None:
                self._add_known_type(self._resolve_known_type(cls, declaration.type), resolver)
            elif declaration.method_name is not None:
                method = getattr(cls, declaration.method_name, None)
                if callable(method):
                    for known_type in method() or ():
                        self._add_known_type(known_type, resolver)
            else:
                raise MalformedKnownTypeDeclarationError(cls)

    def _resolve_known_type(self, declaring_class: type, known_type: Any) -> Any:
        if not isinstance(known_type, str):
            return known_type
        target: Any = sys.modules.get(declaring_class.__module__)
        for part in known_type.split("."):
            target = getattr(target, part, None)
        if target is None:
            raise UnsupportedTypeError(known_type, f"known type declared on {type_display_name(declaring_class)} not found")
        return target

    def _add_known_type(self, tp: Any, resolver: JsonSchemaResolver) -> None:
        description = self._describe(tp)
        is_integer_enumeration = description.is_enum and description.json_type == JsonObjectType.INTEGER
        if not resolver.has_schema(description.type, is_integer_enumeration):
            self.generate(tp, None, resolver)

    # Properties

    def _load_property(
        self,
        member: MemberDescriptor,
        parent_type: Any,
        parent_schema: JsonSchema,
        resolver: JsonSchemaResolver,
        is_data_contract: bool,
    ) -> None:
        metadata = member.metadata
        hints = self._extract(metadata)
        if self._is_property_ignored(hints, is_data_contract):
            return

        description = self._describe(member.declared_type, metadata)
        property_type = description.type

        property_name = self.get_property_name(member, hints)
        if property_name in parent_schema.properties:
            raise DuplicatePropertyError(parent_type, property_name)

        requirement = hints.json_property.required if hints.json_property is not None else member.required
        has_required_marker = hints.required is not None
        has_serializer_required = requirement in (ann.Requirement.ALWAYS, ann.Requirement.ALLOW_NULL)
        is_data_member_required = is_data_contract and hints.data_member is not None and hints.data_member.is_required

        if has_required_marker or is_data_member_required or has_serializer_required:
            parent_schema.add_required(property_name)

        is_nullable = (
            description.is_nullable
            and not has_required_marker
            and not is_data_member_required
            and requirement in (ann.Requirement.DEFAULT, ann.Requirement.ALLOW_NULL)
        )

        def transformation(p: JsonSchema, s: JsonSchema) -> None:
            if (
                self.settings.schema_type == SchemaType.JSON_SCHEMA
                and has_required_marker
                and not hints.required.allow_empty_strings
                and description.json_type == JsonObjectType.STRING
                and not description.is_enum
            ):
                p.min_length = 1

            if not is_nullable and self._is_restricted:
                parent_schema.add_required(property_name)

            if hints.is_read_only is not None and isinstance(p, JsonProperty):
                p.is_read_only = hints.is_read_only

            if p.description is None:
                p.description = hints.description

            p.default = self._convert_default_value(member, description)

            self.apply_data_annotations(p, description, metadata)

        parent_schema.properties[property_name] = self.generate_with_reference_and_nullability(
            property_type, metadata, is_nullable, resolver, transformation, JsonProperty
        )

    def get_property_name(self, member: MemberDescriptor, hints: ConstraintHints | None = None) -> str:
        """The JSON name of a member after overrides and the naming policy."""
        if hints is None:
            hints = self._extract(member.metadata)

        name = member.name
        if hints.json_property is not None and hints.json_property.name:
            name = hints.json_property.name
        elif hints.data_member is not None and hints.data_member.name:
            name = hints.data_member.name

        handling = self.settings.property_name_handling
        if handling == PropertyNameHandling.CAMEL_CASE:
            return to_camel_case(name)
        if handling == PropertyNameHandling.SNAKE_CASE:
            return to_snake_case(name)
        return name

    def _is_property_ignored(self, hints: ConstraintHints, is_data_contract: bool) -> bool:
        if hints.is_ignored:
            return True
        if is_data_contract and hints.data_member is None and hints.json_property is None:
            return True
        return self._is_property_ignored_by_settings(hints)

    def _is_property_ignored_by_settings(self, hints: ConstraintHints) -> bool:
        return self.settings.ignore_obsolete_properties and hints.is_deprecated

    def _convert_default_value(self, member: MemberDescriptor, description: TypeDescription) -> Any:
        value = member.default
        if isinstance(value, Enum):
            if description.is_enum and description.json_type == JsonObjectType.STRING:
                return serialized_enum_value(value)
            return value.value
        if dataclasses.is_dataclass(value) and not isinstance(value, type):
            return dataclasses.asdict(value)
        return value

    def apply_data_annotations(self, schema: JsonSchema, description: TypeDescription, metadata: Any) -> None:
        """Apply validation and display metadata of a member to its schema."""
        hints = self._extract(metadata)

        if hints.display_name is not None:
            schema.title = hints.display_name

        if hints.has_default_value:
            schema.default = hints.default_value

        if hints.pattern is not None:
            if description.is_dictionary:
                if schema.additional_properties_schema is not None:
                    schema.additional_properties_schema.pattern = hints.pattern
            else:
                schema.pattern = hints.pattern

        if description.json_type in (JsonObjectType.NUMBER, JsonObjectType.INTEGER):
            if hints.range is not None:
                if hints.range.minimum is not None and math.isfinite(hints.range.minimum):
                    schema.minimum = hints.range.minimum
                if hints.range.maximum is not None and math.isfinite(hints.range.maximum):
                    schema.maximum = hints.range.maximum
            if hints.multiple_of is not None:
                schema.multiple_of = hints.multiple_of

        if hints.min_length is not None:
            if description.json_type == JsonObjectType.STRING:
                schema.min_length = hints.min_length
            elif description.json_type == JsonObjectType.ARRAY:
                schema.min_items = hints.min_length

        if hints.max_length is not None:
            if description.json_type == JsonObjectType.STRING:
                schema.max_length = hints.max_length
            elif description.json_type == JsonObjectType.ARRAY:
                schema.max_items = hints.max_length

        if hints.string_length is not None and description.json_type == JsonObjectType.STRING:
            schema.min_length = hints.string_length.minimum_length
            schema.max_length = hints.string_length.maximum_length

        if hints.data_type is not None:
            fmt = DATA_TYPE_FORMATS.get(hints.data_type.value)
            if fmt is not None:
                schema.format = fmt

    # Leaf builders

    def _generate_array(self, schema: JsonSchema, description: TypeDescription, resolver: JsonSchemaResolver) -> None:
        description.apply_type(schema)

        item_type = description.element_type
        if item_type is not None and is_forward_reference(item_type):
            logger.warning("Could not resolve the element type of %r; items are unconstrained", description.type)
            item_type = None

        if item_type is not None:
            schema.item = self.generate_with_reference_and_nullability(item_type, None, False, resolver)
        else:
            schema.item = JsonSchema.create_any_schema()

    def _generate_dictionary(self, schema: JsonSchema, description: TypeDescription, resolver: JsonSchemaResolver) -> None:
        value_type = description.value_type
        if value_type is None or is_forward_reference(value_type):
            raise UnresolvedElementTypeError(description.type)

        if unwrap_type(value_type)[0] in _OPAQUE_TYPES:
            schema.additional_properties_schema = JsonSchema.create_any_schema()
        else:
            additional_properties_schema = self.generate(value_type, None, resolver)
            value_description = self._describe(value_type)
            if value_description.requires_schema_reference(self.settings.type_mappers):
                schema.additional_properties_schema = JsonSchema(reference=additional_properties_schema)
            else:
                schema.additional_properties_schema = additional_properties_schema

        schema.allow_additional_properties = True

    def _generate_enum(
        self,
        schema: JsonSchema,
        tp: Any,
        parent_metadata: tuple[Any, ...] | None,
        description: TypeDescription,
        resolver: JsonSchemaResolver,
    ) -> None:
        is_integer_enumeration = description.json_type == JsonObjectType.INTEGER
        if resolver.has_schema(tp, is_integer_enumeration):
            schema.reference = resolver.get_schema(tp, is_integer_enumeration)
        elif type(schema) is JsonSchema:
            self._load_enumerations(tp, schema, description)
            description.apply_type(schema)
            schema.description = get_type_description(tp)
            resolver.add_schema(tp, is_integer_enumeration, schema)
        else:
            schema.reference = self.generate(tp, parent_metadata, resolver)

    def _load_enumerations(self, tp: type[Enum], schema: JsonSchema, description: TypeDescription) -> None:
        schema.type = description.json_type
        schema.enumeration.clear()
        schema.enumeration_names.clear()

        for member in tp:
            if description.json_type == JsonObjectType.INTEGER:
                schema.enumeration.append(member.value)
            else:
                schema.enumeration.append(serialized_enum_value(member))
            schema.enumeration_names.append(member.name)

    # Hooks

    def _apply_extension_data(self, tp: Any, parent_metadata: tuple[Any, ...] | None, schema: JsonSchema) -> None:
        if parent_metadata is None or (type(schema) is JsonSchema and self._is_canonical_type(tp)):
            data = self._extract(ann.get_class_metadata(origin_class(tp))).extension_data
        else:
            data = self._extract(parent_metadata).extension_data
        if data:
            schema.extension_data.update(data)

    def _is_canonical_type(self, tp: Any) -> bool:
        """Whether ``tp`` has one shared schema that member metadata must not touch."""
        if tp in _OPAQUE_TYPES or is_forward_reference(tp):
            return False
        return self._describe(tp).requires_schema_reference(self.settings.type_mappers)

    def _try_handle_special_types(
        self,
        tp: Any,
        schema: JsonSchema,
        resolver: JsonSchemaResolver,
        parent_metadata: tuple[Any, ...] | None,
    ) -> bool:
        type_mapper = find_type_mapper(self.settings.type_mappers, tp)
        if type_mapper is not None:
            context = TypeMapperContext(tp, self, resolver, parent_metadata)
            type_mapper.generate_schema(schema, context)
            return True

        return tp in _OPAQUE_TYPES

    def _apply_schema_processors(self, tp: Any, schema: JsonSchema, resolver: JsonSchemaResolver) -> None:
        context = SchemaProcessorContext(tp, schema, resolver, self)
        for processor in self.settings.schema_processors:
            processor.process(context)
