import importlib
import json
import logging

import click

from .generation import JsonSchemaGenerationError, JsonSchemaGenerator, JsonSchemaGeneratorSettings, SchemaType


def load_type(type_path: str):
    """Import ``package.module:QualifiedName`` and return the named type."""
    module_name, sep, qualname = type_path.partition(":")
    if not sep or not module_name or not qualname:
        raise click.BadParameter(f"Expected 'module:QualifiedName', got '{type_path}'", param_hint="TYPE")
    try:
        target = importlib.import_module(module_name)
    except ImportError as e:
        raise click.BadParameter(f"Could not import module '{module_name}': {e}", param_hint="TYPE") from e
    for part in qualname.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as e:
            raise click.BadParameter(f"'{module_name}' has no attribute '{qualname}'", param_hint="TYPE") from e
    return target


@click.command()
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True))
@click.option(
    "--schema-type",
    "-s",
    default=None,
    type=click.Choice([t.value for t in SchemaType]),
    help="Output dialect (overrides config file if set)",
)
@click.option("--flatten", is_flag=True, default=False, help="Merge base class properties instead of using allOf")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log type dispatch at DEBUG level")
@click.argument("type_path", metavar="TYPE", type=str)
@click.argument("output", default=None, type=click.Path(resolve_path=True))
def code_to_json_schema(config, schema_type, flatten, verbose, type_path, output):
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    if config is not None:
        with open(config) as f:
            config = json.load(f)
            config = JsonSchemaGeneratorSettings.from_dict(config)
    else:
        config = JsonSchemaGeneratorSettings()

    # CLI flags override the config file
    if schema_type is not None:
        config.schema_type = SchemaType(schema_type)
    if flatten:
        config.flatten_inheritance_hierarchy = True

    tp = load_type(type_path)
    generator = JsonSchemaGenerator(config)
    try:
        out = generator.generate_json(tp)
    except JsonSchemaGenerationError as e:
        raise click.ClickException(str(e)) from e

    with open(output, "w") as f:
        f.write(out)
        f.write("\n")
