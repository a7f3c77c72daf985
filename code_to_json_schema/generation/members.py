"""
Member enumeration.

Lists the serializable members a type declares itself (inherited members
are reached by walking the base types). Supported shapes are dataclasses,
``TypedDict`` classes and plain classes with annotations.
"""

from __future__ import annotations

import dataclasses
import inspect
import logging
import typing
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, ClassVar, ForwardRef, Optional, get_args, get_origin

from .annotations import ReadOnly, Requirement
from .reflection import origin_class, substitute_type_vars, type_var_mapping, unwrap_type

if TYPE_CHECKING:
    from .config import JsonSchemaGeneratorSettings

logger = logging.getLogger(__name__)

_TYPED_DICT_QUALIFIERS = (typing.Required, typing.NotRequired)


@dataclass
class MemberDescriptor:
    """One serializable member of a type."""

    name: str
    declared_type: Any
    declaring_type: Any
    metadata: tuple[Any, ...] = ()
    default: Any = None
    required: Requirement = Requirement.DEFAULT
    is_abstract: bool = False


class MemberEnumerator:
    """Default member enumerator."""

    def members_of(self, tp: Any, settings: JsonSchemaGeneratorSettings) -> list[MemberDescriptor]:
        cls = origin_class(tp)
        if not isinstance(cls, type):
            return []

        own_annotations = inspect.get_annotations(cls)
        hints = self._type_hints(cls, own_annotations)
        type_vars = type_var_mapping(tp)
        is_typed_dict = typing.is_typeddict(cls)
        dataclass_fields = {f.name: f for f in dataclasses.fields(cls)} if dataclasses.is_dataclass(cls) else None

        members = []
        for name in own_annotations:
            if name.startswith("_") or name not in hints:
                continue
            hint = hints[name]
            if get_origin(hint) is ClassVar or hint is ClassVar or isinstance(hint, dataclasses.InitVar):
                continue
            if dataclass_fields is not None and name not in dataclass_fields:
                continue

            requirement = Requirement.DEFAULT
            if is_typed_dict:
                hint = _strip_typed_dict_qualifiers(hint)
                if name in cls.__required_keys__:
                    requirement = Requirement.ALLOW_NULL

            declared_type, metadata = _split_member_type(substitute_type_vars(hint, type_vars))
            members.append(
                MemberDescriptor(
                    name=name,
                    declared_type=declared_type,
                    declaring_type=tp,
                    metadata=metadata,
                    default=self._default_value(cls, name, dataclass_fields),
                    required=requirement,
                )
            )

        if settings.include_computed_properties:
            members.extend(self._computed_properties(tp, cls, type_vars))

        return members

    def _type_hints(self, cls: type, own_annotations: dict[str, Any]) -> dict[str, Any]:
        try:
            return typing.get_type_hints(cls, include_extras=True)
        except (NameError, TypeError) as e:
            logger.warning("Could not resolve type hints of %s: %s", cls.__qualname__, e)
            return {name: ForwardRef(value) if isinstance(value, str) else value for name, value in own_annotations.items()}

    def _default_value(self, cls: type, name: str, dataclass_fields: dict[str, dataclasses.Field] | None) -> Any:
        if dataclass_fields is not None:
            default = dataclass_fields[name].default
            return None if default is dataclasses.MISSING else default
        value = cls.__dict__.get(name)
        if callable(value) or isinstance(value, (property, classmethod, staticmethod)):
            return None
        return value

    def _computed_properties(self, tp: Any, cls: type, type_vars: dict) -> list[MemberDescriptor]:
        members = []
        for name, attribute in cls.__dict__.items():
            if name.startswith("_") or not isinstance(attribute, property) or attribute.fget is None:
                continue
            try:
                return_type = typing.get_type_hints(attribute.fget, include_extras=True).get("return")
            except (NameError, TypeError) as e:
                logger.warning("Could not resolve the return type of %s.%s: %s", cls.__qualname__, name, e)
                continue
            if return_type is None:
                continue

            declared_type, metadata = _split_member_type(substitute_type_vars(return_type, type_vars))
            if attribute.fset is None:
                metadata += (ReadOnly(),)
            members.append(
                MemberDescriptor(
                    name=name,
                    declared_type=declared_type,
                    declaring_type=tp,
                    metadata=metadata,
                    is_abstract=getattr(attribute, "__isabstractmethod__", False),
                )
            )
        return members


def _strip_typed_dict_qualifiers(hint: Any) -> Any:
    while get_origin(hint) in _TYPED_DICT_QUALIFIERS:
        hint = get_args(hint)[0]
    return hint


def _split_member_type(hint: Any) -> tuple[Any, tuple[Any, ...]]:
    """``Annotated[int | None, X]`` -> ``(Optional[int], (X,))``."""
    inner, is_optional, metadata = unwrap_type(hint)
    if is_optional:
        return Optional[inner], metadata
    return inner, metadata
