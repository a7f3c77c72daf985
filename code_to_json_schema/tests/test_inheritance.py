from dataclasses import dataclass

import pytest

from code_to_json_schema.generation import (
    DuplicateDiscriminatorError,
    JsonSchemaGenerator,
    JsonSchemaGeneratorSettings,
    MalformedKnownTypeDeclarationError,
    SchemaType,
    schema_to_dict,
)
from code_to_json_schema.generation.annotations import inheritance_discriminator, known_type, schema_ignore


@inheritance_discriminator("kind")
@dataclass
class Shape:
    name: str


@dataclass
class Circle(Shape):
    radius: float


@dataclass
class Square(Shape):
    side: float


@dataclass
class Drawing:
    shapes: list[Shape]


@inheritance_discriminator("kind")
@dataclass
class ClashingShape:
    kind: str


@inheritance_discriminator("type")
@inheritance_discriminator("kind")
@dataclass
class DoublyDiscriminated:
    name: str


@schema_ignore
@dataclass
class Persistable:
    id: int


@dataclass
class Customer(Persistable):
    email: str


@dataclass
class Timestamped:
    created: str


@dataclass
class Auditable:
    audited_by: str


@dataclass
class Invoice(Timestamped, Auditable):
    total: float



@dataclass
class Vehicle:
    label: str
    wheels: int


@dataclass
class Bicycle(Vehicle):
    wheels: int = 2
    gears: int = 1


@known_type("Dog")
@known_type(method_name="more_animals")
@dataclass
class Animal:
    name: str

    @staticmethod
    def more_animals():
        return [Cat]


@dataclass
class Dog(Animal):
    good: bool = True


@dataclass
class Cat(Animal):
    lives: int = 9


@known_type()
@dataclass
class Malformed:
    name: str


def generate(tp, **settings):
    config = JsonSchemaGeneratorSettings(**settings)
    return schema_to_dict(JsonSchemaGenerator(config).generate(tp), config.schema_type)


class TestLinkedInheritance:
    """Test base classes linked with allOf"""

    def test_derived_type_references_base(self):
        """Test a derived type links its base with allOf"""
        schema = generate(Circle)
        assert schema["properties"] == {"radius": {"type": "number", "format": "double"}}
        assert schema["allOf"] == [{"$ref": "#/definitions/Shape"}]
        assert "discriminator" not in schema

    def test_discriminator_is_added_to_base(self):
        """Test the discriminator property is added to the base"""
        shape = generate(Circle)["definitions"]["Shape"]
        assert shape["discriminator"] == "kind"
        assert shape["properties"] == {"name": {"type": "string"}, "kind": {"type": "string"}}
        assert shape["required"] == ["kind"]

    def test_base_is_generated_once(self):
        """Test a shared base gets one definition"""
        root = JsonSchemaGenerator().generate(Drawing)
        shape = root.definitions["Shape"]
        assert root.properties["shapes"].item.reference is shape
        assert list(root.definitions) == ["Shape"]

    def test_discriminator_collides_with_property(self):
        """Test a discriminator clashing with a member raises"""
        with pytest.raises(DuplicateDiscriminatorError) as e:
            generate(ClashingShape)
        assert e.value.property_name == "kind"

    def test_multiple_discriminators(self):
        """Test more than one discriminator raises"""
        with pytest.raises(DuplicateDiscriminatorError):
            generate(DoublyDiscriminated)

    def test_ignored_base_is_not_linked(self):
        """Test bases marked schema_ignore are skipped"""
        schema = generate(Customer)
        assert "allOf" not in schema
        assert "definitions" not in schema

    def test_excluded_base_is_not_linked(self):
        """Test bases in excluded_type_names are skipped"""
        name = f"{Shape.__module__}.{Shape.__qualname__}"
        schema = generate(Circle, excluded_type_names=[name])
        assert "allOf" not in schema

    def test_only_primary_base_is_linked(self):
        """Test only the first base is linked"""
        schema = generate(Invoice)
        assert schema["allOf"] == [{"$ref": "#/definitions/Timestamped"}]
        assert list(schema["definitions"]) == ["Timestamped"]

    def test_swagger2_discriminator(self):
        """Test the Swagger 2.0 discriminator is required"""
        shape = generate(Circle, schema_type=SchemaType.SWAGGER2)["definitions"]["Shape"]
        assert shape["required"] == ["name", "kind"]


class TestFlattenedInheritance:
    """Test base class members merged into the derived schema"""

    def test_base_properties_are_merged(self):
        """Test base members are merged after the derived members"""
        schema = generate(Circle, flatten_inheritance_hierarchy=True)
        assert list(schema["properties"]) == ["radius", "name"]
        assert "allOf" not in schema
        assert "definitions" not in schema

    def test_no_discriminator_when_flattening(self):
        """Test flattening emits no discriminator"""
        schema = generate(Shape, flatten_inheritance_hierarchy=True)
        assert "discriminator" not in schema
        assert "kind" not in schema["properties"]

    def test_secondary_bases_need_abstract_properties(self):
        """Test secondary bases are merged only with abstract properties enabled"""
        schema = generate(Invoice, flatten_inheritance_hierarchy=True)
        assert list(schema["properties"]) == ["total", "created"]
        schema = generate(Invoice, flatten_inheritance_hierarchy=True, generate_abstract_properties=True)
        assert list(schema["properties"]) == ["total", "created", "audited_by"]

    def test_redeclared_member_shadows_base(self):
        """Test a member redeclared by a derived class is emitted once"""
        schema = generate(Bicycle, flatten_inheritance_hierarchy=True)
        assert list(schema["properties"]) == ["wheels", "gears", "label"]
        assert schema["properties"]["wheels"] == {"type": "integer", "default": 2}


class TestKnownTypes:
    """Test eager generation of declared subtypes"""

    def test_known_types_are_generated(self):
        """Test declared known types get definitions"""
        schema = generate(Animal)
        assert set(schema["definitions"]) == {"Dog", "Cat"}
        assert schema["definitions"]["Dog"]["allOf"] == [{"$ref": "#"}]
        assert schema["definitions"]["Cat"]["properties"] == {"lives": {"type": "integer", "default": 9}}

    def test_known_types_can_be_disabled(self):
        """Test known type generation can be turned off"""
        assert "definitions" not in generate(Animal, generate_known_types=False)

    def test_known_types_of_bases_when_flattening(self):
        """Test known types declared on bases are generated when flattening"""
        schema = generate(Dog, flatten_inheritance_hierarchy=True)
        assert set(schema["definitions"]) == {"Cat"}
        assert list(schema["properties"]) == ["good", "name"]

    def test_malformed_declaration(self):
        """Test a known_type declaration without a type or method raises"""
        with pytest.raises(MalformedKnownTypeDeclarationError):
            generate(Malformed)
