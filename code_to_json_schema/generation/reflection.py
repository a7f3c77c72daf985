"""
Type classification.

Maps a Python type annotation onto a ``TypeDescription``: its JSON type,
format, nullability and, for containers, its element or value type.
"""

from __future__ import annotations

import collections
import collections.abc
import datetime
import decimal
import logging
import types
import typing
import uuid
from dataclasses import dataclass
from enum import Enum
from pathlib import PurePath
from typing import TYPE_CHECKING, Annotated, Any, ForwardRef, TypeVar, Union, get_args, get_origin

from . import annotations as ann
from .errors import UnsupportedTypeError
from .schema.nodes import JsonObjectType, JsonSchema
from .type_mappers import find_type_mapper

if TYPE_CHECKING:
    from .config import JsonSchemaGeneratorSettings
    from .type_mappers import TypeMapper

logger = logging.getLogger(__name__)

NoneType = type(None)

# Checked in order: datetime before date, bool before int
_PRIMITIVES: tuple[tuple[type, JsonObjectType, str | None], ...] = (
    (bool, JsonObjectType.BOOLEAN, None),
    (int, JsonObjectType.INTEGER, None),
    (float, JsonObjectType.NUMBER, "double"),
    (decimal.Decimal, JsonObjectType.NUMBER, "decimal"),
    (str, JsonObjectType.STRING, None),
    (bytes, JsonObjectType.STRING, "byte"),
    (bytearray, JsonObjectType.STRING, "byte"),
    (datetime.datetime, JsonObjectType.STRING, "date-time"),
    (datetime.date, JsonObjectType.STRING, "date"),
    (datetime.time, JsonObjectType.STRING, "time"),
    (datetime.timedelta, JsonObjectType.STRING, "duration"),
    (uuid.UUID, JsonObjectType.STRING, "uuid"),
    (PurePath, JsonObjectType.STRING, None),
)

# Types that are never null unless annotated Optional
_VALUE_TYPES = (
    bool,
    int,
    float,
    decimal.Decimal,
    datetime.datetime,
    datetime.date,
    datetime.time,
    datetime.timedelta,
    uuid.UUID,
)

_ARRAY_ORIGINS = (
    list,
    set,
    frozenset,
    tuple,
    collections.deque,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
    collections.abc.Set,
    collections.abc.MutableSet,
    collections.abc.Collection,
    collections.abc.Iterable,
)

_STRING_LIKE = (str, bytes, bytearray)

_OPAQUE_TYPES = (Any, object)


@dataclass
class TypeDescription:
    """Classification of one type in one context."""

    type: Any  # The unwrapped type (no Optional, no Annotated)
    json_type: JsonObjectType = JsonObjectType.NONE
    format: str | None = None
    is_nullable: bool = False
    is_dictionary: bool = False
    is_enum: bool = False
    element_type: Any = None
    value_type: Any = None

    @property
    def is_opaque(self) -> bool:
        return self.json_type == JsonObjectType.NONE and not self.is_enum

    def requires_schema_reference(self, type_mappers: list[TypeMapper]) -> bool:
        """Whether the type is represented out of line (in definitions)."""
        mapper = find_type_mapper(type_mappers, self.type)
        if mapper is not None:
            return mapper.use_reference
        return not self.is_dictionary and (JsonObjectType.OBJECT in self.json_type or self.is_enum)

    def apply_type(self, schema: JsonSchema) -> None:
        schema.type = self.json_type
        if self.format is not None:
            schema.format = self.format


def is_forward_reference(tp: Any) -> bool:
    return isinstance(tp, (str, ForwardRef))


def split_annotated(tp: Any) -> tuple[Any, tuple[Any, ...]]:
    """Strip ``Annotated`` layers, returning the inner type and the metadata."""
    metadata: tuple[Any, ...] = ()
    while get_origin(tp) is Annotated:
        metadata += tuple(tp.__metadata__)
        tp = tp.__origin__
    return tp, metadata


def unwrap_optional(tp: Any) -> tuple[Any, bool]:
    """Strip ``None`` from a union; ``X | None`` -> ``(X, True)``."""
    if get_origin(tp) not in (Union, types.UnionType):
        return tp, False
    args = get_args(tp)
    if NoneType not in args:
        return tp, False
    remaining = tuple(a for a in args if a is not NoneType)
    if len(remaining) == 1:
        return remaining[0], True
    return Union[remaining], True


def unwrap_type(tp: Any) -> tuple[Any, bool, tuple[Any, ...]]:
    """Strip ``Annotated`` and ``Optional`` layers in any nesting order."""
    metadata: tuple[Any, ...] = ()
    is_optional = False
    while True:
        tp, extra = split_annotated(tp)
        metadata += extra
        tp, optional = unwrap_optional(tp)
        if not optional:
            return tp, is_optional, metadata
        is_optional = True


def origin_class(tp: Any) -> Any:
    """Return the class behind a (possibly parametrized) type."""
    origin = get_origin(tp)
    return origin if origin is not None else tp


def generic_arguments(tp: Any, base: type) -> tuple[Any, ...]:
    """Type arguments of ``tp`` as seen by the generic ``base``.

    ``dict[str, int]`` -> ``(str, int)``; for ``class Registry(dict[str, int])``
    the arguments are taken from the class's generic bases.
    """
    args = get_args(tp)
    if args:
        return args
    if not isinstance(tp, type):
        return ()
    for klass in tp.__mro__:
        for orig in klass.__dict__.get("__orig_bases__", ()):
            orig_origin = get_origin(orig)
            if isinstance(orig_origin, type) and issubclass(orig_origin, base):
                return get_args(orig)
    return ()


def substitute_type_vars(tp: Any, mapping: dict[TypeVar, Any]) -> Any:
    """Replace type variables in ``tp`` using ``mapping``."""
    if not mapping:
        return tp
    if isinstance(tp, TypeVar):
        return mapping.get(tp, tp)
    parameters = getattr(tp, "__parameters__", ())
    if parameters and get_origin(tp) is not None:
        return tp[tuple(mapping.get(p, p) for p in parameters)]
    return tp


def type_var_mapping(tp: Any) -> dict[TypeVar, Any]:
    """``Page[User]`` -> ``{T: User}`` for ``class Page(Generic[T])``."""
    origin = get_origin(tp)
    if origin is None:
        return {}
    parameters = getattr(origin, "__parameters__", ())
    return dict(zip(parameters, get_args(tp)))


def is_enum_type(tp: Any) -> bool:
    return isinstance(tp, type) and issubclass(tp, Enum)


class ReflectionService:
    """Default type descriptor provider."""

    def describe(self, tp: Any, metadata: Any, settings: JsonSchemaGeneratorSettings) -> TypeDescription:
        tp, is_optional, extra = unwrap_type(tp)
        hints = settings.annotation_extractor.extract(tuple(metadata or ()) + extra)

        description = self._classify(tp, hints, settings)
        description.is_nullable = self._is_nullable(description, is_optional, hints, settings)
        return description

    def _classify(self, tp: Any, hints: Any, settings: JsonSchemaGeneratorSettings) -> TypeDescription:
        if is_forward_reference(tp):
            raise UnsupportedTypeError(tp, "unresolved forward reference")

        if tp is None or tp is NoneType:
            return TypeDescription(NoneType, JsonObjectType.NULL)

        if tp in _OPAQUE_TYPES or isinstance(tp, TypeVar):
            return TypeDescription(tp)

        if is_enum_type(tp):
            json_type = JsonObjectType.INTEGER if self._is_integer_enum(tp, hints, settings) else JsonObjectType.STRING
            return TypeDescription(tp, json_type, is_enum=True)

        if isinstance(tp, type):
            for primitive, json_type, fmt in _PRIMITIVES:
                if issubclass(tp, primitive):
                    return TypeDescription(tp, json_type, fmt)

        origin = origin_class(tp)
        if not isinstance(origin, type):
            # Literal, multi-member unions, NewType and friends
            logger.debug("Treating %r as an unconstrained type", tp)
            return TypeDescription(tp)

        if _is_typed_dict(origin):
            return TypeDescription(tp, JsonObjectType.OBJECT)

        if issubclass(origin, collections.abc.Mapping):
            args = generic_arguments(tp, collections.abc.Mapping)
            value_type = args[1] if len(args) == 2 else Any
            return TypeDescription(tp, JsonObjectType.OBJECT, is_dictionary=True, value_type=value_type)

        if issubclass(origin, _ARRAY_ORIGINS) and not issubclass(origin, _STRING_LIKE):
            return TypeDescription(tp, JsonObjectType.ARRAY, element_type=self._element_type(tp, origin))

        return TypeDescription(tp, JsonObjectType.OBJECT)

    def _element_type(self, tp: Any, origin: type) -> Any:
        args = generic_arguments(tp, collections.abc.Iterable)
        if issubclass(origin, tuple):
            if len(args) == 2 and args[1] is Ellipsis:
                return args[0]
            # Homogeneous fixed-size tuples
            if args and all(a == args[0] for a in args):
                return args[0]
            return None
        return args[0] if len(args) == 1 else None

    def _is_integer_enum(self, tp: type[Enum], hints: Any, settings: JsonSchemaGeneratorSettings) -> bool:
        from .config import EnumHandling

        if hints.string_enum or any(isinstance(m, ann.StringEnum) for m in ann.get_class_metadata(tp)):
            return False
        if settings.default_enum_handling != EnumHandling.INTEGER or issubclass(tp, str):
            return False
        return all(isinstance(m.value, int) and not isinstance(m.value, bool) for m in tp)

    def _is_nullable(self, description: TypeDescription, is_optional: bool, hints: Any, settings: JsonSchemaGeneratorSettings) -> bool:
        from .config import ReferenceTypeNullHandling

        if hints.not_null:
            return False
        if hints.can_be_null or is_optional:
            return True
        if description.json_type == JsonObjectType.NULL:
            return True
        if description.is_enum or description.is_opaque:
            return False
        if isinstance(description.type, type) and issubclass(description.type, _VALUE_TYPES):
            return False
        return settings.default_reference_type_null_handling == ReferenceTypeNullHandling.NULL


def _is_typed_dict(tp: type) -> bool:
    return typing.is_typeddict(tp)
