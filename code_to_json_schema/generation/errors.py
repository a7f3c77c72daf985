"""
Errors raised during schema generation.
"""

from __future__ import annotations

from typing import Any


def type_display_name(tp: Any) -> str:
    """Return a fully qualified, human readable name for a type."""
    module = getattr(tp, "__module__", None)
    qualname = getattr(tp, "__qualname__", None)
    if module and qualname and module != "builtins":
        return f"{module}.{qualname}"
    return qualname or repr(tp)


class JsonSchemaGenerationError(ValueError):
    """Base class for all schema generation failures."""

    pass


class DuplicatePropertyError(JsonSchemaGenerationError):
    """Raised when two members of a type resolve to the same JSON property name."""

    def __init__(self, parent_type: Any, property_name: str):
        self.parent_type = parent_type
        self.property_name = property_name
        super().__init__(f"The JSON property '{property_name}' is defined multiple times on type '{type_display_name(parent_type)}'.")


class DuplicateDiscriminatorError(JsonSchemaGenerationError):
    """Raised when a discriminator property collides with an existing property."""

    def __init__(self, parent_type: Any, property_name: str):
        self.parent_type = parent_type
        self.property_name = property_name
        super().__init__(f"The discriminator property '{property_name}' is defined multiple times on type '{type_display_name(parent_type)}'.")


class UnresolvedElementTypeError(JsonSchemaGenerationError):
    """Raised when the value type of a dictionary cannot be determined."""

    def __init__(self, container_type: Any):
        self.container_type = container_type
        super().__init__(f"Could not find the value type of dictionary type '{container_type!r}'.")


class MalformedKnownTypeDeclarationError(JsonSchemaGenerationError):
    """Raised when a known type declaration names neither a type nor a method."""

    def __init__(self, declaring_type: Any):
        self.declaring_type = declaring_type
        super().__init__(f"A known type declaration on {type_display_name(declaring_type)} does not specify a type or a method name.")


class UnsupportedTypeError(JsonSchemaGenerationError):
    """Raised when a type annotation cannot be interpreted."""

    def __init__(self, tp: Any, reason: str = ""):
        self.type = tp
        message = f"Unsupported type '{tp!r}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class CyclicReferenceError(JsonSchemaGenerationError):
    """Raised when following $ref links never reaches a concrete schema."""

    pass
