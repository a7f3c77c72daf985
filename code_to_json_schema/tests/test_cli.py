import json
from dataclasses import dataclass
from typing import Annotated

from click.testing import CliRunner

from code_to_json_schema.code_to_json_schema import code_to_json_schema
from code_to_json_schema.generation.annotations import JsonProperty


@dataclass
class LineItem:
    sku: str
    quantity: int | None = None


@dataclass
class Order:
    number: str
    items: list[LineItem]


@dataclass
class BrokenOrder:
    first: Annotated[str, JsonProperty(name="same")]
    second: Annotated[str, JsonProperty(name="same")]


def type_path(tp):
    return f"{tp.__module__}:{tp.__qualname__}"


def run(*args):
    return CliRunner().invoke(code_to_json_schema, [str(a) for a in args])


def test_generate_json_schema(tmp_path):
    """Test the CLI writes a JSON Schema document for a dotted type path"""
    output = tmp_path / "order.schema.json"
    result = run(type_path(Order), output)
    assert result.exit_code == 0, result.output

    schema = json.loads(output.read_text())
    assert schema["$schema"] == "http://json-schema.org/draft-04/schema#"
    assert schema["title"] == "Order"
    assert schema["properties"]["items"]["items"] == {"$ref": "#/definitions/LineItem"}
    assert schema["definitions"]["LineItem"]["properties"]["quantity"] == {"type": ["integer", "null"]}


def test_schema_type_option(tmp_path):
    """Test --schema-type selects the Swagger 2.0 dialect"""
    output = tmp_path / "order.swagger.json"
    result = run(type_path(Order), output, "--schema-type", "swagger2")
    assert result.exit_code == 0, result.output

    schema = json.loads(output.read_text())
    assert "$schema" not in schema
    assert schema["required"] == ["number", "items"]


def test_config_file(tmp_path):
    """Test settings are read from a JSON config file"""
    config = tmp_path / "config.json"
    config.write_text(json.dumps({"schema_type": "swagger2", "property_name_handling": "camel_case"}))
    output = tmp_path / "line_item.json"
    result = run(type_path(LineItem), output, "--config", config)
    assert result.exit_code == 0, result.output

    schema = json.loads(output.read_text())
    assert "$schema" not in schema
    assert list(schema["properties"]) == ["sku", "quantity"]


def test_generation_error(tmp_path):
    """Test generation errors are reported as CLI errors"""
    result = run(type_path(BrokenOrder), tmp_path / "broken.json")
    assert result.exit_code == 1
    assert "same" in result.output
    assert not (tmp_path / "broken.json").exists()


def test_invalid_type_path(tmp_path):
    """Test malformed or unknown type paths are rejected"""
    result = run("no_colon_here", tmp_path / "out.json")
    assert result.exit_code == 2

    result = run("code_to_json_schema:DoesNotExist", tmp_path / "out.json")
    assert result.exit_code == 2
    assert "DoesNotExist" in result.output
