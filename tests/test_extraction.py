"""Extraction policy tests."""

from __future__ import annotations

from schema_synth.core.components import ComponentNameIndex
from schema_synth.core.config import SynthesisConfig
from schema_synth.core.context import SynthesisContext
from schema_synth.core.extraction import should_extract
from schema_synth.core.fingerprint import fingerprint
from schema_synth.core.schema import parse_schema
from schema_synth.core.types import UnknownType
from schema_synth.core.validators import AnyValue


def _object(*names: str):
    return parse_schema(
        {"type": "object", "properties": {name: {"type": "string"} for name in names}}
    )


def test_two_properties_stay_inline(context) -> None:
    assert should_extract(_object("a", "b"), context) is False


def test_three_properties_are_hoisted(context) -> None:
    assert should_extract(_object("a", "b", "c"), context) is True


def test_threshold_comes_from_config() -> None:
    context = SynthesisContext(SynthesisConfig(extraction_threshold=2))

    assert should_extract(_object("a", "b"), context) is True
    assert should_extract(_object("a"), context) is False


def test_non_objects_are_never_hoisted(context) -> None:
    assert should_extract(parse_schema({"type": "string"}), context) is False
    assert should_extract(
        parse_schema({"type": "array", "items": {"type": "string"}}), context
    ) is False
    assert should_extract(parse_schema({"enum": ["a", "b", "c", "d"]}), context) is False


def test_small_component_shape_is_hoisted() -> None:
    node = _object("login")
    context = SynthesisContext(component_names=ComponentNameIndex({fingerprint(node): "Login"}))

    assert should_extract(node, context) is True


def test_shape_already_in_table_is_hoisted(context) -> None:
    node = _object("a")
    context.table.register(fingerprint(node), node, UnknownType(), AnyValue(), preferred_name="A")

    assert should_extract(_object("a"), context) is True


def test_nullable_variant_of_known_shape_is_hoisted() -> None:
    node = _object("login")
    nullable = parse_schema(
        {"type": "object", "nullable": True, "properties": {"login": {"type": "string"}}}
    )
    context = SynthesisContext(component_names=ComponentNameIndex({fingerprint(node): "Login"}))

    assert should_extract(nullable, context) is True
