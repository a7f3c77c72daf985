"""
Definition name generation.

Names are rendered from a jinja2 template so generic types can be spelled
out (``Page[User]`` -> ``PageOfUser`` with the default template).
"""

from __future__ import annotations

from typing import Any, Protocol, get_args

import jinja2

from ..utils import snake_to_pascal_case
from .config import DEFAULT_SCHEMA_NAME_TEMPLATE
from .reflection import origin_class, unwrap_type


class SchemaNameGenerator(Protocol):
    def generate(self, tp: Any) -> str: ...


class DefaultSchemaNameGenerator:
    """Renders definition names from a jinja2 template.

    Template variables:
        name: The class name
        qualname: The qualified class name
        module: The defining module
        args: Names of the type arguments (already rendered, PascalCase)
    """

    def __init__(self, template: str = DEFAULT_SCHEMA_NAME_TEMPLATE):
        self.jinja_env = jinja2.Environment(undefined=jinja2.StrictUndefined)
        self.jinja_env.filters["snake_to_pascal"] = snake_to_pascal_case
        self.template = self.jinja_env.from_string(template)

    def generate(self, tp: Any) -> str:
        tp, _, _ = unwrap_type(tp)
        origin = origin_class(tp)
        name = getattr(origin, "__name__", None) or getattr(origin, "_name", None) or repr(origin)
        args = [snake_to_pascal_case(self.generate(arg)) for arg in get_args(tp) if arg is not Ellipsis]
        return self.template.render(
            name=name,
            qualname=getattr(origin, "__qualname__", name),
            module=getattr(origin, "__module__", ""),
            args=args,
        ).strip()
