import json
from dataclasses import dataclass, field
from typing import Annotated, Any

import pytest

from code_to_json_schema.generation import (
    DuplicatePropertyError,
    JsonSchemaGenerator,
    JsonSchemaGeneratorSettings,
    PropertyNameHandling,
    schema_to_dict,
    schema_to_json,
)
from code_to_json_schema.generation.annotations import (
    DataMember,
    DataType,
    DataTypeKind,
    DefaultValue,
    Deprecated,
    Description,
    Display,
    ExtensionData,
    JsonIgnore,
    JsonProperty,
    MaxLength,
    MinLength,
    MultipleOf,
    Pattern,
    Range,
    ReadOnly,
    Requirement,
    Required,
    StringLength,
    data_contract,
    extension_data,
)


@extension_data("x-table", "locations")
@dataclass
class Location:
    city: str


@dataclass
class Constrained:
    age: Annotated[int, Range(0, 150)]
    ratio: Annotated[float, Range(float("-inf"), 1.0), MultipleOf(0.5)]
    code: Annotated[str, Pattern("^[A-Z]+$"), StringLength(10, 2)]
    tags: Annotated[list[str], MinLength(1), MaxLength(5)]
    email: Annotated[str, DataType(DataTypeKind.EMAIL_ADDRESS)]
    homepage: Annotated[str, DataType(DataTypeKind.URL)]
    secret: Annotated[str, DataType(DataTypeKind.PASSWORD)]
    title: Annotated[str, Display("Title"), Description("The title")]
    level: Annotated[int, DefaultValue(3)]
    labels: Annotated[dict[str, str], Pattern("^x")]
    size: Annotated[str, Range(1, 2)]
    nickname: Annotated[str, Required(allow_empty_strings=True)]
    identifier: Annotated[str, ReadOnly()] = ""
    cleared: Annotated[int, DefaultValue(None)] = 5


@dataclass(frozen=True)
class Coordinates:
    lat: float = 0.0
    lng: float = 0.0


@dataclass
class Place:
    name: str
    where: Coordinates = Coordinates()


@dataclass
class Dictionaries:
    attributes: dict[str, Any]
    untyped: dict
    locations: dict[str, Location]
    counts: dict[str, int] = field(default_factory=dict)


@dataclass
class Named:
    first_name: str
    lastName: str
    renamed: Annotated[str, JsonProperty(name="Alias")] = ""


@dataclass
class Clashing:
    first: Annotated[str, JsonProperty(name="same")]
    second: Annotated[str, JsonProperty(name="same")]


@dataclass
class CaseClash:
    first_name: str
    firstName: str


@dataclass
class SerializerRequirements:
    always: Annotated[str | None, JsonProperty(required=Requirement.ALWAYS)] = None
    allow_null: Annotated[str | None, JsonProperty(required=Requirement.ALLOW_NULL)] = None
    disallow_null: Annotated[str | None, JsonProperty(required=Requirement.DISALLOW_NULL)] = None


@data_contract
@dataclass
class Contract:
    included: Annotated[str, DataMember()]
    renamed: Annotated[int, DataMember(name="Renamed", is_required=True)]
    by_json_property: Annotated[str, JsonProperty()]
    skipped: str = ""


@dataclass
class Ignored:
    kept: str
    hidden: Annotated[str, JsonIgnore()] = ""
    old: Annotated[str, Deprecated("use kept")] = ""
    _private: str = ""


@dataclass
class Extended:
    rank: Annotated[int, ExtensionData("x-order", 1)]
    home: Location
    work: Annotated[Location, ExtensionData("x-order", 2)]


def generate(tp, **settings):
    config = JsonSchemaGeneratorSettings(**settings)
    return schema_to_dict(JsonSchemaGenerator(config).generate(tp), config.schema_type)


class TestDataAnnotations:
    """Test validation metadata mapping"""

    def setup_method(self):
        self.properties = generate(Constrained)["properties"]

    def test_numeric_bounds(self):
        """Test Range and MultipleOf on numbers"""
        assert self.properties["age"] == {"type": "integer", "minimum": 0, "maximum": 150}
        assert self.properties["ratio"] == {"type": "number", "format": "double", "maximum": 1.0, "multipleOf": 0.5}

    def test_numeric_bounds_ignored_for_strings(self):
        """Test Range is ignored on strings"""
        assert self.properties["size"] == {"type": "string"}

    def test_string_constraints(self):
        """Test pattern and length markers on strings"""
        assert self.properties["code"] == {"type": "string", "minLength": 2, "maxLength": 10, "pattern": "^[A-Z]+$"}

    def test_array_length(self):
        """Test length markers on arrays"""
        assert self.properties["tags"] == {"type": "array", "items": {"type": "string"}, "minItems": 1, "maxItems": 5}

    def test_data_type_formats(self):
        """Test DataType markers map to formats"""
        assert self.properties["email"] == {"type": "string", "format": "email"}
        assert self.properties["homepage"] == {"type": "string", "format": "uri"}
        assert self.properties["secret"] == {"type": "string"}

    def test_display_and_description(self):
        """Test Display and Description markers"""
        assert self.properties["title"] == {"type": "string", "title": "Title", "description": "The title"}

    def test_default_value(self):
        """Test the DefaultValue marker"""
        assert self.properties["level"] == {"type": "integer", "default": 3}

    def test_none_default_value_clears_default(self):
        """Test DefaultValue(None) emits no default"""
        assert self.properties["cleared"] == {"type": "integer"}

    def test_dictionary_pattern(self):
        """Test a pattern on a dictionary applies to its values"""
        assert self.properties["labels"] == {"type": "object", "additionalProperties": {"type": "string", "pattern": "^x"}}

    def test_required_allowing_empty_strings(self):
        """Test Required(allow_empty_strings=True) adds no minLength"""
        assert self.properties["nickname"] == {"type": "string"}

    def test_read_only(self):
        """Test the ReadOnly marker"""
        assert self.properties["identifier"] == {"type": "string", "readOnly": True, "default": ""}


class TestDefaultValues:
    """Test default value conversion"""

    def test_dataclass_default(self):
        """Test a dataclass default is converted to a mapping"""
        properties = generate(Place)["properties"]
        assert properties["where"]["default"] == {"lat": 0.0, "lng": 0.0}

    def test_dataclass_default_serializes(self):
        """Test a dataclass default survives JSON serialization"""
        document = json.loads(schema_to_json(JsonSchemaGenerator().generate(Place)))
        assert document["properties"]["where"]["default"] == {"lat": 0.0, "lng": 0.0}


class TestDictionaries:
    """Test dictionary value schemas"""

    def test_any_values(self):
        """Test untyped dictionary values accept anything"""
        properties = generate(Dictionaries)["properties"]
        assert properties["attributes"] == {"type": "object", "additionalProperties": {}}
        assert properties["untyped"] == {"type": "object", "additionalProperties": {}}

    def test_primitive_values(self):
        """Test primitive dictionary values"""
        properties = generate(Dictionaries)["properties"]
        assert properties["counts"] == {"type": "object", "additionalProperties": {"type": "integer"}}

    def test_referenced_values(self):
        """Test object dictionary values are referenced"""
        schema = generate(Dictionaries)
        assert schema["properties"]["locations"] == {
            "type": "object",
            "additionalProperties": {"$ref": "#/definitions/Location"},
        }
        assert "Location" in schema["definitions"]


class TestPropertyNames:
    """Test property naming and collisions"""

    def test_default_names(self):
        """Test member names are kept by default"""
        assert list(generate(Named)["properties"]) == ["first_name", "lastName", "Alias"]

    def test_camel_case(self):
        """Test the camel case naming policy"""
        properties = generate(Named, property_name_handling=PropertyNameHandling.CAMEL_CASE)["properties"]
        assert list(properties) == ["firstName", "lastName", "alias"]

    def test_snake_case(self):
        """Test the snake case naming policy"""
        properties = generate(Named, property_name_handling=PropertyNameHandling.SNAKE_CASE)["properties"]
        assert list(properties) == ["first_name", "last_name", "alias"]

    def test_duplicate_override(self):
        """Test two members with the same JSON name raise"""
        with pytest.raises(DuplicatePropertyError) as e:
            generate(Clashing)
        assert e.value.property_name == "same"
        assert "Clashing" in str(e.value)

    def test_duplicate_after_naming_policy(self):
        """Test names colliding after the naming policy raise"""
        generate(CaseClash)
        with pytest.raises(DuplicatePropertyError):
            generate(CaseClash, property_name_handling=PropertyNameHandling.CAMEL_CASE)


class TestRequirements:
    """Test serializer requiredness and data contracts"""

    def test_serializer_requirements(self):
        """Test JsonProperty requirement levels"""
        schema = generate(SerializerRequirements)
        assert schema["required"] == ["always", "allow_null"]
        assert schema["properties"]["always"] == {"type": "string"}
        assert schema["properties"]["allow_null"] == {"type": ["null", "string"]}
        assert schema["properties"]["disallow_null"] == {"type": "string"}

    def test_data_contract_members(self):
        """Test data contracts only include DataMember and JsonProperty members"""
        schema = generate(Contract)
        assert list(schema["properties"]) == ["included", "Renamed", "by_json_property"]
        assert schema["required"] == ["Renamed"]

    def test_ignored_members(self):
        """Test JsonIgnore and private members are skipped"""
        assert list(generate(Ignored)["properties"]) == ["kept", "old"]

    def test_obsolete_members(self):
        """Test deprecated members are skipped when configured"""
        assert list(generate(Ignored, ignore_obsolete_properties=True)["properties"]) == ["kept"]


class TestExtensionData:
    """Test vendor extension keywords"""

    def test_type_extension_data(self):
        """Test class level extension data"""
        schema = generate(Extended)
        assert schema["definitions"]["Location"]["x-table"] == "locations"
        assert generate(Location)["x-table"] == "locations"

    def test_member_extension_data(self):
        """Test member level extension data"""
        properties = generate(Extended)["properties"]
        assert properties["rank"] == {"type": "integer", "x-order": 1}
        assert properties["home"] == {"$ref": "#/definitions/Location"}
        assert properties["work"] == {"oneOf": [{"$ref": "#/definitions/Location"}], "x-order": 2}
