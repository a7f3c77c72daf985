"""
Schema post-processors.

Processors run, in registration order, after every schema the generator
finishes. They may mutate the schema freely, e.g. to add vendor extensions.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from .generator import JsonSchemaGenerator
    from .resolver import JsonSchemaResolver
    from .schema.nodes import JsonSchema


@dataclass
class SchemaProcessorContext:
    type: Any
    schema: JsonSchema
    resolver: JsonSchemaResolver
    generator: JsonSchemaGenerator


class SchemaProcessor(Protocol):
    def process(self, context: SchemaProcessorContext) -> None: ...
