"""
Extraction of recognized hints from raw member metadata.

The generator never inspects metadata objects directly; it asks the
extractor for a ``ConstraintHints`` record. Unknown metadata is ignored.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable

from . import annotations as ann

_MISSING = object()


@dataclass
class ConstraintHints:
    """Recognized hints of one member (or type) metadata set."""

    required: ann.Required | None = None
    json_property: ann.JsonProperty | None = None
    data_member: ann.DataMember | None = None
    is_ignored: bool = False
    is_deprecated: bool = False
    is_read_only: bool | None = None
    description: str | None = None
    display_name: str | None = None
    default_value: Any = _MISSING
    pattern: str | None = None
    range: ann.Range | None = None
    multiple_of: float | None = None
    min_length: int | None = None
    max_length: int | None = None
    string_length: ann.StringLength | None = None
    data_type: ann.DataTypeKind | None = None
    string_enum: bool = False
    not_null: bool = False
    can_be_null: bool = False
    extension_data: dict[str, Any] = field(default_factory=dict)

    @property
    def has_default_value(self) -> bool:
        return self.default_value is not _MISSING


class AnnotationExtractor:
    """Turns marker objects into ``ConstraintHints``."""

    def extract(self, metadata: Iterable[Any] | None) -> ConstraintHints:
        hints = ConstraintHints()
        for marker in metadata or ():
            self._apply(hints, marker)
        return hints

    def _apply(self, hints: ConstraintHints, marker: Any) -> None:  # noqa: C901
        if isinstance(marker, ann.Required):
            hints.required = marker
        elif isinstance(marker, ann.JsonProperty):
            hints.json_property = marker
        elif isinstance(marker, ann.DataMember):
            hints.data_member = marker
        elif isinstance(marker, ann.JsonIgnore):
            hints.is_ignored = True
        elif isinstance(marker, ann.Deprecated):
            hints.is_deprecated = True
        elif isinstance(marker, ann.ReadOnly):
            hints.is_read_only = marker.is_read_only
        elif isinstance(marker, ann.Description):
            hints.description = marker.text
        elif isinstance(marker, ann.Display):
            if marker.name is not None:
                hints.display_name = marker.name
        elif isinstance(marker, ann.DefaultValue):
            hints.default_value = marker.value
        elif isinstance(marker, ann.Pattern):
            hints.pattern = marker.pattern
        elif isinstance(marker, ann.Range):
            hints.range = marker
        elif isinstance(marker, ann.MultipleOf):
            hints.multiple_of = marker.multiple_of
        elif isinstance(marker, ann.MinLength):
            hints.min_length = marker.length
        elif isinstance(marker, ann.MaxLength):
            hints.max_length = marker.length
        elif isinstance(marker, ann.StringLength):
            hints.string_length = marker
        elif isinstance(marker, ann.DataType):
            hints.data_type = marker.kind
        elif isinstance(marker, ann.StringEnum):
            hints.string_enum = True
        elif isinstance(marker, ann.NotNull):
            hints.not_null = True
        elif isinstance(marker, ann.CanBeNull):
            hints.can_be_null = True
        elif isinstance(marker, ann.ExtensionData):
            hints.extension_data[marker.key] = marker.value
