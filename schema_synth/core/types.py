"""
Type expressions produced by the type synthesizer.

An expression is either inline structure or a Reference to a named
declaration in the type table. ``render()`` gives a compact TypeScript-like
notation used for reports and debugging.
"""

import json
from dataclasses import dataclass
from typing import Iterator, Tuple

from .schema import JsonScalar, PrimitiveKind


class TypeExpression:
    """Base class for type expressions."""

    def render(self) -> str:
        raise NotImplementedError

    def references(self) -> Iterator[str]:
        """Yield every declaration name this expression refers to."""
        return iter(())

    def __str__(self) -> str:
        return self.render()


_PRIMITIVE_NAMES = {
    PrimitiveKind.STRING: "string",
    PrimitiveKind.NUMBER: "number",
    PrimitiveKind.BOOLEAN: "boolean",
}


@dataclass(frozen=True)
class PrimitiveType(TypeExpression):
    kind: PrimitiveKind

    def render(self) -> str:
        return _PRIMITIVE_NAMES[self.kind]


@dataclass(frozen=True)
class LiteralUnion(TypeExpression):
    """Union of literal values (an inline enum)."""

    values: Tuple[JsonScalar, ...]

    def render(self) -> str:
        return " | ".join(json.dumps(v) for v in self.values)


@dataclass(frozen=True)
class ArrayType(TypeExpression):
    items: TypeExpression

    def render(self) -> str:
        inner = self.items.render()
        if isinstance(self.items, (LiteralUnion, NullableType)):
            inner = f"({inner})"
        return f"{inner}[]"

    def references(self) -> Iterator[str]:
        return self.items.references()


@dataclass(frozen=True)
class FieldType:
    """One property of an inline object type."""

    name: str
    type: TypeExpression
    optional: bool = False

    def render(self) -> str:
        marker = "?" if self.optional else ""
        return f"{json.dumps(self.name)}{marker}: {self.type.render()}"


@dataclass(frozen=True)
class ObjectType(TypeExpression):
    """Inline object type; fields keep the source declaration order."""

    fields: Tuple[FieldType, ...] = ()

    def render(self) -> str:
        if not self.fields:
            return "{}"
        return "{ " + "; ".join(f.render() for f in self.fields) + " }"

    def references(self) -> Iterator[str]:
        for f in self.fields:
            yield from f.type.references()

    def field_names(self) -> Tuple[str, ...]:
        return tuple(f.name for f in self.fields)


@dataclass(frozen=True)
class Reference(TypeExpression):
    """Reference to a named declaration in the type table."""

    name: str

    def render(self) -> str:
        return self.name

    def references(self) -> Iterator[str]:
        yield self.name


@dataclass(frozen=True)
class UnknownType(TypeExpression):
    """Opaque type for degraded or unconstrained schemas."""

    def render(self) -> str:
        return "unknown"


@dataclass(frozen=True)
class NullableType(TypeExpression):
    inner: TypeExpression

    def render(self) -> str:
        return f"{self.inner.render()} | null"

    def references(self) -> Iterator[str]:
        return self.inner.references()
