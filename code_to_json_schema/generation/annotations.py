"""
Metadata markers understood by the schema generator.

Member-level markers are attached with ``typing.Annotated``::

    @dataclass
    class Person:
        name: Annotated[str, Required(), StringLength(50)]
        email: Annotated[str | None, DataType(DataTypeKind.EMAIL_ADDRESS)] = None

Type-level metadata is attached with the class decorators at the bottom of
this module. It is stored in the class's own ``__dict__`` so subclasses do
not inherit it implicitly.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, TypeVar

CLASS_METADATA_ATTRIBUTE = "__json_schema_metadata__"
ENUM_NAMES_ATTRIBUTE = "__json_schema_enum_names__"

DEFAULT_DISCRIMINATOR_NAME = "discriminator"

T = TypeVar("T")


class Requirement(str, Enum):
    """Serializer-level requiredness of a member."""

    DEFAULT = "default"  # May be missing or null
    ALLOW_NULL = "allow_null"  # Must be present, may be null
    ALWAYS = "always"  # Must be present and not null
    DISALLOW_NULL = "disallow_null"  # May be missing, must not be null


class DataTypeKind(str, Enum):
    """Semantic data types that map onto a JSON Schema format."""

    DATE_TIME = "DateTime"
    DATE = "Date"
    TIME = "Time"
    EMAIL_ADDRESS = "EmailAddress"
    PHONE_NUMBER = "PhoneNumber"
    URL = "Url"
    PASSWORD = "Password"
    MULTILINE_TEXT = "MultilineText"


# Member markers


@dataclass(frozen=True)
class Required:
    """The member must be present and not null."""

    allow_empty_strings: bool = False


@dataclass(frozen=True)
class JsonIgnore:
    """The member is never serialized."""


@dataclass(frozen=True)
class JsonProperty:
    """Serializer-level settings of a member (name override, requiredness)."""

    name: str | None = None
    required: Requirement = Requirement.DEFAULT


@dataclass(frozen=True)
class DataMember:
    """Opt-in marker for members of a ``@data_contract`` type."""

    name: str | None = None
    is_required: bool = False


@dataclass(frozen=True)
class Deprecated:
    """The member is obsolete; see ``ignore_obsolete_properties``."""

    message: str = ""


@dataclass(frozen=True)
class ReadOnly:
    is_read_only: bool = True


@dataclass(frozen=True)
class Description:
    text: str


@dataclass(frozen=True)
class Display:
    name: str | None = None


@dataclass(frozen=True)
class DefaultValue:
    """Overrides the member's default. A ``None`` value emits no ``default`` keyword."""

    value: Any


@dataclass(frozen=True)
class Pattern:
    pattern: str


@dataclass(frozen=True)
class Range:
    """Inclusive numeric bounds; infinite bounds are not emitted."""

    minimum: float | None = None
    maximum: float | None = None


@dataclass(frozen=True)
class MultipleOf:
    multiple_of: float


@dataclass(frozen=True)
class MinLength:
    length: int


@dataclass(frozen=True)
class MaxLength:
    length: int


@dataclass(frozen=True)
class StringLength:
    """Combined string length bounds."""

    maximum_length: int
    minimum_length: int = 0


@dataclass(frozen=True)
class DataType:
    kind: DataTypeKind


@dataclass(frozen=True)
class StringEnum:
    """Serialize an enum-typed member by name instead of by value."""


@dataclass(frozen=True)
class NotNull:
    """Force a member type to be non-nullable."""


@dataclass(frozen=True)
class CanBeNull:
    """Force a member type to be nullable."""


@dataclass(frozen=True)
class ExtensionData:
    """Adds a vendor extension keyword (e.g. ``x-order``) to the schema."""

    key: str
    value: Any


# Type markers


@dataclass(frozen=True)
class DataContract:
    """Only members marked with ``DataMember`` or ``JsonProperty`` are serialized."""


@dataclass(frozen=True)
class SchemaIgnore:
    """The type is skipped when linking a derived type to its base."""


@dataclass(frozen=True)
class InheritanceDiscriminator:
    """The type is (de)serialized polymorphically using a discriminator property."""

    name: str = DEFAULT_DISCRIMINATOR_NAME


@dataclass(frozen=True)
class KnownType:
    """Declares a polymorphic variant of the decorated type.

    Either ``type`` (a class, or the name of a class in the declaring module)
    or ``method_name`` (a static method returning the variants) must be set.
    """

    type: Any = None
    method_name: str | None = None


def get_class_metadata(cls: Any) -> tuple[Any, ...]:
    """Return the metadata declared directly on a class (not inherited)."""
    namespace = getattr(cls, "__dict__", None)
    if namespace is None:
        return ()
    return tuple(namespace.get(CLASS_METADATA_ATTRIBUTE, ()))


def add_class_metadata(cls: type[T], *markers: Any) -> type[T]:
    """Attach markers to a class; usable after the class is defined."""
    setattr(cls, CLASS_METADATA_ATTRIBUTE, get_class_metadata(cls) + markers)
    return cls


def _class_decorator(*markers: Any) -> Callable[[type[T]], type[T]]:
    def decorator(cls: type[T]) -> type[T]:
        return add_class_metadata(cls, *markers)

    return decorator


def data_contract(cls: type[T]) -> type[T]:
    return add_class_metadata(cls, DataContract())


def schema_ignore(cls: type[T]) -> type[T]:
    return add_class_metadata(cls, SchemaIgnore())


def inheritance_discriminator(name: str = DEFAULT_DISCRIMINATOR_NAME) -> Callable[[type[T]], type[T]]:
    return _class_decorator(InheritanceDiscriminator(name))


def known_type(tp: Any = None, *, method_name: str | None = None) -> Callable[[type[T]], type[T]]:
    return _class_decorator(KnownType(tp, method_name))


def extension_data(key: str, value: Any) -> Callable[[type[T]], type[T]]:
    return _class_decorator(ExtensionData(key, value))


def string_enum(cls: type[T]) -> type[T]:
    """Serialize the decorated enum by name wherever it is used."""
    return add_class_metadata(cls, StringEnum())


def serialized_names(**names: str) -> Callable[[type[T]], type[T]]:
    """Override the serialized names of enum members.

    Example:
        @serialized_names(IN_PROGRESS="in-progress")
        class Status(Enum):
            OPEN = 0
            IN_PROGRESS = 1
    """

    def decorator(cls: type[T]) -> type[T]:
        existing = dict(cls.__dict__.get(ENUM_NAMES_ATTRIBUTE, {}))
        existing.update(names)
        setattr(cls, ENUM_NAMES_ATTRIBUTE, existing)
        return cls

    return decorator
