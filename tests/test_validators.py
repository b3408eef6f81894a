"""Validator synthesis and evaluation tests."""

from __future__ import annotations

from schema_synth.core.schema import EnumSchema, OpaqueSchema, PrimitiveKind, parse_schema
from schema_synth.core.type_table import TypeTable
from schema_synth.core.types import UnknownType
from schema_synth.core.validators import (
    AnyValue,
    ArrayOf,
    IsPrimitive,
    NullableValidator,
    ObjectWith,
    OneOf,
    ValidatorField,
    ValidatorRef,
    is_valid,
    validate,
)

ID_AND_NAME = ObjectWith(
    fields=(
        ValidatorField("id", IsPrimitive(PrimitiveKind.NUMBER)),
        ValidatorField("name", IsPrimitive(PrimitiveKind.STRING), optional=True),
    )
)


def test_rendering() -> None:
    assert OneOf(("a", "b")).render() == 'z.enum(["a", "b"])'
    assert OneOf((1, "a")).render() == 'z.union([z.literal(1), z.literal("a")])'
    assert NullableValidator(IsPrimitive(PrimitiveKind.STRING)).render() == "z.string().nullable()"
    assert ArrayOf(ValidatorRef("Owner")).render() == "z.array(OwnerSchema)"
    assert ID_AND_NAME.render() == 'z.object({"id": z.number(), "name": z.string().optional()})'


def test_validator_synthesis_never_registers(validators, context, owner_schema) -> None:
    result = validators.synthesize(parse_schema(owner_schema))

    assert isinstance(result, ObjectWith)
    assert len(context.table) == 0


def test_validators_mirror_type_references(types, validators, context, owner_schema) -> None:
    node = parse_schema(
        {
            "type": "object",
            "properties": {
                "owners": {"type": "array", "items": owner_schema},
                "backup": dict(owner_schema, nullable=True),
                "tags": {"type": "array", "items": {"type": "string"}},
            },
        }
    )

    type_expr = types.synthesize_root(node)
    validator_expr = validators.synthesize_root(node)

    assert list(type_expr.references()) == ["Type1", "Type1"]
    assert list(validator_expr.references()) == ["Type1", "Type1"]
    assert validator_expr.fields[1].validator == NullableValidator(ValidatorRef("Type1"))
    entry = context.table.lookup_name("Type1")
    assert [f.name for f in entry.validator.fields] == ["login", "id", "type"]


def test_empty_enum_node_validates_as_string(validators) -> None:
    assert validators.synthesize(EnumSchema(values=())) == IsPrimitive(PrimitiveKind.STRING)


def test_valid_object_passes() -> None:
    assert validate({"id": 1, "name": "x", "extra": True}, ID_AND_NAME) == []
    assert is_valid({"id": 2.5}, ID_AND_NAME)


def test_missing_required_and_wrong_types_are_reported() -> None:
    issues = validate({"name": 3}, ID_AND_NAME)

    assert [str(issue) for issue in issues] == [
        "$.id: missing required field",
        "$.name: expected string, got number",
    ]


def test_booleans_are_not_numbers() -> None:
    assert not is_valid(True, IsPrimitive(PrimitiveKind.NUMBER))
    assert not is_valid(1, OneOf((True,)))
    assert is_valid(True, OneOf((True,)))


def test_null_needs_nullable() -> None:
    assert not is_valid(None, IsPrimitive(PrimitiveKind.STRING))
    assert is_valid(None, NullableValidator(IsPrimitive(PrimitiveKind.STRING)))
    assert is_valid(None, AnyValue())


def test_array_issues_carry_index() -> None:
    issues = validate(["a", 2, "c"], ArrayOf(IsPrimitive(PrimitiveKind.STRING)))

    assert [issue.path for issue in issues] == ["$[1]"]


def test_refs_resolve_through_table() -> None:
    table = TypeTable()
    table.register("fp-item", OpaqueSchema(), UnknownType(), ID_AND_NAME, preferred_name="Item")
    validator = ArrayOf(ValidatorRef("Item"))

    assert is_valid([{"id": 1}], validator, table)
    assert not is_valid([{"name": "no id"}], validator, table)


def test_unresolved_ref_is_an_issue() -> None:
    [issue] = validate({}, ValidatorRef("Missing"))

    assert "Missing" in issue.message
