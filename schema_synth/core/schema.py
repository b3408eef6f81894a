"""
Core schema representation for type synthesis.

Converts JSON-Schema-shaped dicts (already dereferenced upstream) into a
closed set of immutable node types that both synthesizers match on
exhaustively.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, FrozenSet, Mapping, Optional, Set, Tuple, Union

from .diagnostics import DiagnosticKind, DiagnosticLog, UnsupportedCyclicSchema


class PrimitiveKind(Enum):
    """Primitive value kinds."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"


JsonScalar = Union[str, int, float, bool]


class SchemaNode:
    """Base class for all schema nodes."""

    nullable: bool = False


@dataclass(frozen=True)
class PrimitiveSchema(SchemaNode):
    kind: PrimitiveKind
    nullable: bool = False


@dataclass(frozen=True)
class EnumSchema(SchemaNode):
    """Enumeration of literal values, in source order."""

    values: Tuple[JsonScalar, ...]
    nullable: bool = False


@dataclass(frozen=True)
class ArraySchema(SchemaNode):
    items: SchemaNode
    nullable: bool = False


@dataclass(frozen=True)
class ObjectSchema(SchemaNode):
    """Object with ordered properties and a set of required property names."""

    properties: Dict[str, SchemaNode] = field(default_factory=dict)
    required: FrozenSet[str] = field(default_factory=frozenset)
    nullable: bool = False

    def is_required(self, name: str) -> bool:
        return name in self.required


@dataclass(frozen=True)
class OpaqueSchema(SchemaNode):
    """A subtree whose shape is unknown (degraded, unconstrained or unsupported)."""

    reason: str = "unconstrained"
    nullable: bool = False


_PRIMITIVE_TYPES = {
    "string": PrimitiveKind.STRING,
    "integer": PrimitiveKind.NUMBER,
    "number": PrimitiveKind.NUMBER,
    "boolean": PrimitiveKind.BOOLEAN,
}

_COMPOSITION_KEYWORDS = ("allOf", "oneOf", "anyOf", "not")

LOCAL_REF_PREFIXES = ("#/components/schemas/", "#/definitions/")


class SchemaParser:
    """Converts raw schema dicts into SchemaNode trees.

    Problems inside a fragment are recorded on the diagnostic log and the
    offending subtree becomes an OpaqueSchema. With ``strict=True`` a cycle
    raises UnsupportedCyclicSchema instead.
    """

    def __init__(
        self,
        diagnostics: Optional[DiagnosticLog] = None,
        components: Optional[Mapping[str, Any]] = None,
        strict: bool = False,
    ):
        """
        Initialize the parser.

        Args:
            diagnostics: Log receiving recoverable problems
            components: Named-schema registry used to follow local $ref values
            strict: Raise on cycles instead of degrading
        """
        self.diagnostics = diagnostics if diagnostics is not None else DiagnosticLog()
        self.components = components
        self.strict = strict

    def parse(self, raw: Any, location: str = "$") -> SchemaNode:
        return self._parse(raw, location, set())

    def _parse(self, raw: Any, location: str, active: Set[Any]) -> SchemaNode:
        if not isinstance(raw, dict):
            return self._malformed(location, f"expected a schema object, got {type(raw).__name__}")

        if "$ref" in raw:
            return self._parse_ref(raw["$ref"], location, active)

        key = id(raw)
        if key in active:
            return self._cycle(location)

        active.add(key)
        try:
            return self._parse_node(raw, location, active)
        finally:
            active.discard(key)

    def _parse_ref(self, ref: Any, location: str, active: Set[Any]) -> SchemaNode:
        target_name = _local_ref_name(ref)
        if self.components is None or target_name is None:
            return self._malformed(location, f"unresolved reference {ref!r}")
        if target_name not in self.components:
            return self._malformed(location, f"reference to unknown component {ref!r}")

        key = ("ref", target_name)
        if key in active:
            return self._cycle(location)

        active.add(key)
        try:
            return self._parse(self.components[target_name], location, active)
        finally:
            active.discard(key)

    def _parse_node(self, raw: Dict[str, Any], location: str, active: Set[Any]) -> SchemaNode:
        nullable = bool(raw.get("nullable", False))
        schema_type = raw.get("type")

        # OpenAPI 3.1 style: "type": ["string", "null"]
        if isinstance(schema_type, list):
            nullable = nullable or "null" in schema_type
            remaining = [t for t in schema_type if t != "null"]
            if len(remaining) > 1:
                return self._malformed(
                    location, f"union types are not supported: {remaining}", nullable
                )
            schema_type = remaining[0] if remaining else "null"

        if "enum" in raw:
            return self._parse_enum(raw, schema_type, location, nullable)

        if schema_type == "object" or (schema_type is None and "properties" in raw):
            return self._parse_object(raw, location, active, nullable)

        if schema_type == "array" or (schema_type is None and "items" in raw):
            items = raw.get("items")
            if items is None:
                return self._malformed(location, "array without items", nullable)
            return ArraySchema(
                items=self._parse(items, f"{location}.items", active),
                nullable=nullable,
            )

        if schema_type in _PRIMITIVE_TYPES:
            return PrimitiveSchema(kind=_PRIMITIVE_TYPES[schema_type], nullable=nullable)

        if schema_type == "null":
            return OpaqueSchema(reason="null", nullable=True)

        if schema_type is None:
            for keyword in _COMPOSITION_KEYWORDS:
                if keyword in raw:
                    return self._malformed(
                        location, f"unsupported keyword '{keyword}'", nullable
                    )
            return OpaqueSchema(reason="unconstrained", nullable=nullable)

        return self._malformed(location, f"unknown type {schema_type!r}", nullable)

    def _parse_enum(
        self, raw: Dict[str, Any], schema_type: Any, location: str, nullable: bool
    ) -> SchemaNode:
        values = raw.get("enum")
        if not isinstance(values, list):
            return self._malformed(location, "enum must be a list", nullable)

        if None in values:
            nullable = True
        literals = tuple(v for v in values if v is not None)

        if not literals:
            self.diagnostics.record(
                DiagnosticKind.EMPTY_ENUM,
                "enum has no values, falling back to its primitive type",
                location,
            )
            kind = _PRIMITIVE_TYPES.get(schema_type, PrimitiveKind.STRING)
            return PrimitiveSchema(kind=kind, nullable=nullable)

        return EnumSchema(values=literals, nullable=nullable)

    def _parse_object(
        self, raw: Dict[str, Any], location: str, active: Set[Any], nullable: bool
    ) -> SchemaNode:
        properties = raw.get("properties")
        if not isinstance(properties, dict):
            return self._malformed(location, "object without properties", nullable)

        required = raw.get("required", [])
        if not isinstance(required, list):
            required = []

        parsed = {}
        for name, prop in properties.items():
            parsed[name] = self._parse(prop, f"{location}.{name}", active)

        return ObjectSchema(
            properties=parsed,
            required=frozenset(r for r in required if isinstance(r, str)),
            nullable=nullable,
        )

    def _cycle(self, location: str) -> SchemaNode:
        if self.strict:
            raise UnsupportedCyclicSchema(location)
        self.diagnostics.record(
            DiagnosticKind.CYCLIC_SCHEMA,
            "schema refers to itself, degrading to unknown",
            location,
        )
        return OpaqueSchema(reason="cycle")

    def _malformed(self, location: str, message: str, nullable: bool = False) -> SchemaNode:
        self.diagnostics.record(DiagnosticKind.MALFORMED_SCHEMA, message, location)
        return OpaqueSchema(reason="malformed", nullable=nullable)


def _local_ref_name(ref: Any) -> Optional[str]:
    if not isinstance(ref, str):
        return None
    for prefix in LOCAL_REF_PREFIXES:
        if ref.startswith(prefix):
            return ref[len(prefix):]
    return None


def parse_schema(
    raw: Any,
    diagnostics: Optional[DiagnosticLog] = None,
    location: str = "$",
) -> SchemaNode:
    """
    Convert a raw (dereferenced) schema dict to a SchemaNode.

    Args:
        raw: JSON-Schema-shaped dict
        diagnostics: Log receiving recoverable problems
        location: Path used in diagnostics

    Returns:
        SchemaNode tree; broken subtrees are OpaqueSchema
    """
    return SchemaParser(diagnostics).parse(raw, location)


def same_literal(a: Any, b: Any) -> bool:
    """Literal equality that keeps booleans, numbers and strings apart."""
    if isinstance(a, bool) or isinstance(b, bool):
        return isinstance(a, bool) and isinstance(b, bool) and a == b
    if isinstance(a, str) or isinstance(b, str):
        return isinstance(a, str) and isinstance(b, str) and a == b
    return a == b


def unique_literals(values: Tuple[JsonScalar, ...]) -> Tuple[JsonScalar, ...]:
    """Drop duplicate literals, keeping the first occurrence of each."""
    unique: list = []
    for value in values:
        if not any(same_literal(value, seen) for seen in unique):
            unique.append(value)
    return tuple(unique)


def without_nullable(node: SchemaNode) -> SchemaNode:
    """Return the node with ``nullable`` cleared."""
    if not node.nullable:
        return node
    return replace(node, nullable=False)
