"""Schema parser tests."""

from __future__ import annotations

import pytest
from schema_synth.core.diagnostics import DiagnosticKind, DiagnosticLog, UnsupportedCyclicSchema
from schema_synth.core.schema import (
    ArraySchema,
    EnumSchema,
    ObjectSchema,
    OpaqueSchema,
    PrimitiveKind,
    PrimitiveSchema,
    SchemaParser,
    parse_schema,
    without_nullable,
)


def test_primitive_types_map_to_kinds() -> None:
    assert parse_schema({"type": "integer"}) == PrimitiveSchema(PrimitiveKind.NUMBER)
    assert parse_schema({"type": "number"}) == PrimitiveSchema(PrimitiveKind.NUMBER)
    assert parse_schema({"type": "string", "format": "date-time"}) == PrimitiveSchema(
        PrimitiveKind.STRING
    )
    assert parse_schema({"type": "boolean"}) == PrimitiveSchema(PrimitiveKind.BOOLEAN)


def test_nullable_flag_and_type_list() -> None:
    assert parse_schema({"type": "string", "nullable": True}).nullable is True
    assert parse_schema({"type": ["integer", "null"]}) == PrimitiveSchema(
        PrimitiveKind.NUMBER, nullable=True
    )


def test_object_keeps_property_order_and_required() -> None:
    node = parse_schema(
        {
            "type": "object",
            "properties": {"b": {"type": "string"}, "a": {"type": "integer"}},
            "required": ["a"],
        }
    )

    assert isinstance(node, ObjectSchema)
    assert list(node.properties) == ["b", "a"]
    assert node.is_required("a")
    assert not node.is_required("b")


def test_properties_without_type_imply_object() -> None:
    node = parse_schema({"properties": {"id": {"type": "integer"}}})

    assert isinstance(node, ObjectSchema)


def test_array_items_are_parsed() -> None:
    node = parse_schema({"type": "array", "items": {"type": "string", "enum": ["a", "b"]}})

    assert node == ArraySchema(items=EnumSchema(values=("a", "b")))


def test_enum_with_null_is_nullable() -> None:
    node = parse_schema({"type": "string", "enum": ["open", None, "closed"]})

    assert node == EnumSchema(values=("open", "closed"), nullable=True)


def test_empty_enum_degrades_to_primitive() -> None:
    log = DiagnosticLog()

    assert parse_schema({"enum": []}, log) == PrimitiveSchema(PrimitiveKind.STRING)
    assert parse_schema({"type": "integer", "enum": []}, log) == PrimitiveSchema(
        PrimitiveKind.NUMBER
    )
    assert len(log.of_kind(DiagnosticKind.EMPTY_ENUM)) == 2


@pytest.mark.parametrize(
    "raw",
    [
        {"type": "object"},
        {"type": "array"},
        {"type": "date"},
        {"oneOf": [{"type": "string"}, {"type": "integer"}]},
        {"type": ["string", "integer"]},
        {"$ref": "#/components/schemas/Missing"},
        "not a schema",
    ],
)
def test_malformed_nodes_become_opaque(raw) -> None:
    log = DiagnosticLog()
    node = parse_schema(raw, log, "$.field")

    assert isinstance(node, OpaqueSchema)
    assert node.reason == "malformed"
    [diagnostic] = log.to_list()
    assert diagnostic.kind == DiagnosticKind.MALFORMED_SCHEMA
    assert diagnostic.location == "$.field"


def test_unconstrained_schema_is_opaque_without_diagnostic() -> None:
    log = DiagnosticLog()

    assert parse_schema({}, log) == OpaqueSchema("unconstrained")
    assert parse_schema({"description": "anything"}, log) == OpaqueSchema("unconstrained")
    assert len(log) == 0


def test_null_type_is_nullable_opaque() -> None:
    node = parse_schema({"type": "null"})

    assert isinstance(node, OpaqueSchema)
    assert node.nullable is True


def test_self_referencing_dict_degrades_to_opaque() -> None:
    raw = {"type": "object", "properties": {"id": {"type": "integer"}}}
    raw["properties"]["parent"] = raw
    log = DiagnosticLog()

    node = parse_schema(raw, log)

    assert isinstance(node, ObjectSchema)
    assert node.properties["parent"] == OpaqueSchema("cycle")
    [diagnostic] = log.of_kind(DiagnosticKind.CYCLIC_SCHEMA)
    assert diagnostic.location == "$.parent"


def test_strict_parser_raises_on_cycle() -> None:
    raw = {"type": "array"}
    raw["items"] = raw

    with pytest.raises(UnsupportedCyclicSchema):
        SchemaParser(strict=True).parse(raw)


def test_local_refs_follow_components() -> None:
    components = {
        "Owner": {"type": "object", "properties": {"login": {"type": "string"}}},
        "Repo": {
            "type": "object",
            "properties": {"owner": {"$ref": "#/components/schemas/Owner"}},
        },
    }
    parser = SchemaParser(components=components)

    node = parser.parse({"$ref": "#/components/schemas/Repo"})

    assert node == ObjectSchema(
        properties={
            "owner": ObjectSchema(properties={"login": PrimitiveSchema(PrimitiveKind.STRING)})
        }
    )


def test_recursive_ref_degrades_to_opaque() -> None:
    components = {
        "Node": {
            "type": "object",
            "properties": {
                "value": {"type": "string"},
                "next": {"$ref": "#/definitions/Node"},
            },
        }
    }
    log = DiagnosticLog()

    node = SchemaParser(log, components=components).parse({"$ref": "#/definitions/Node"})

    assert node.properties["next"] == OpaqueSchema("cycle")
    assert len(log.of_kind(DiagnosticKind.CYCLIC_SCHEMA)) == 1


def test_without_nullable_clears_flag() -> None:
    node = ObjectSchema(properties={}, nullable=True)

    assert without_nullable(node).nullable is False
    assert without_nullable(without_nullable(node)) == without_nullable(node)
