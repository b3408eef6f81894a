"""
Runtime validators mirroring synthesized types.

The validator synthesizer walks a schema exactly like the type synthesizer
but never decides hoisting on its own: at object nodes it only reads the type
table, so each ``Reference(name)`` on the type side corresponds to exactly one
``ValidatorRef(name)`` on this side.

Validator expressions are executable through :func:`validate`.
"""

import json
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Iterator, List, Optional, Protocol, Tuple

from .schema import (
    ArraySchema,
    EnumSchema,
    JsonScalar,
    ObjectSchema,
    OpaqueSchema,
    PrimitiveKind,
    PrimitiveSchema,
    SchemaNode,
    same_literal,
    unique_literals,
)

if TYPE_CHECKING:
    from .context import SynthesisContext


class ValidatorExpression:
    """Base class for validator expressions."""

    def render(self) -> str:
        raise NotImplementedError

    def references(self) -> Iterator[str]:
        return iter(())

    def __str__(self) -> str:
        return self.render()


@dataclass(frozen=True)
class IsPrimitive(ValidatorExpression):
    kind: PrimitiveKind

    def render(self) -> str:
        return f"z.{self.kind.value}()"


@dataclass(frozen=True)
class OneOf(ValidatorExpression):
    """Value must equal one of the literals."""

    values: Tuple[JsonScalar, ...]

    def render(self) -> str:
        if all(isinstance(v, str) for v in self.values):
            return f"z.enum([{', '.join(json.dumps(v) for v in self.values)}])"
        literals = ", ".join(f"z.literal({json.dumps(v)})" for v in self.values)
        return f"z.union([{literals}])"


@dataclass(frozen=True)
class ArrayOf(ValidatorExpression):
    inner: ValidatorExpression

    def render(self) -> str:
        return f"z.array({self.inner.render()})"

    def references(self) -> Iterator[str]:
        return self.inner.references()


@dataclass(frozen=True)
class ValidatorField:
    name: str
    validator: ValidatorExpression
    optional: bool = False

    def render(self) -> str:
        rendered = self.validator.render()
        if self.optional:
            rendered += ".optional()"
        return f"{json.dumps(self.name)}: {rendered}"


@dataclass(frozen=True)
class ObjectWith(ValidatorExpression):
    """Object with named, possibly optional, validated fields."""

    fields: Tuple[ValidatorField, ...] = ()

    def render(self) -> str:
        return "z.object({" + ", ".join(f.render() for f in self.fields) + "})"

    def references(self) -> Iterator[str]:
        for f in self.fields:
            yield from f.validator.references()


@dataclass(frozen=True)
class ValidatorRef(ValidatorExpression):
    """Reference to the validator declared for a type table entry."""

    name: str

    def render(self) -> str:
        return f"{self.name}Schema"

    def references(self) -> Iterator[str]:
        yield self.name


@dataclass(frozen=True)
class AnyValue(ValidatorExpression):
    def render(self) -> str:
        return "z.unknown()"


@dataclass(frozen=True)
class NullableValidator(ValidatorExpression):
    inner: ValidatorExpression

    def render(self) -> str:
        return f"{self.inner.render()}.nullable()"

    def references(self) -> Iterator[str]:
        return self.inner.references()


class ValidatorSynthesizer:
    """Builds validator expressions from schema nodes."""

    def __init__(self, context: "SynthesisContext"):
        self.context = context

    def synthesize(self, schema: SchemaNode, location: str = "$") -> ValidatorExpression:
        """
        Build the validator for a schema node.

        Objects already registered in the type table become ValidatorRef;
        everything else is built inline.
        """
        if isinstance(schema, ObjectSchema):
            fp = self.context.object_fingerprint(schema, location, record=False)
            if fp is None:
                return _nullable(AnyValue(), schema.nullable)
            entry = self.context.table.get(fp)
            if entry is not None:
                return _nullable(ValidatorRef(entry.name), schema.nullable)
            return _nullable(self.synthesize_body(schema, location), schema.nullable)

        return self._synthesize_leaf(schema, location)

    def synthesize_root(self, schema: SchemaNode, location: str = "$") -> ValidatorExpression:
        """Root variant, mirrors ``TypeSynthesizer.synthesize_root``."""
        return self.synthesize(schema, location)

    def synthesize_body(self, schema: ObjectSchema, location: str = "$") -> ObjectWith:
        """Build the inline object validator (the body of a declaration)."""
        return ObjectWith(
            fields=tuple(
                ValidatorField(
                    name=name,
                    validator=self.synthesize(prop, f"{location}.{name}"),
                    optional=not schema.is_required(name),
                )
                for name, prop in schema.properties.items()
            )
        )

    def _synthesize_leaf(self, schema: SchemaNode, location: str) -> ValidatorExpression:
        if isinstance(schema, PrimitiveSchema):
            result: ValidatorExpression = IsPrimitive(schema.kind)
        elif isinstance(schema, EnumSchema):
            values = unique_literals(schema.values)
            result = OneOf(values) if values else IsPrimitive(PrimitiveKind.STRING)
        elif isinstance(schema, ArraySchema):
            result = ArrayOf(self.synthesize(schema.items, f"{location}.items"))
        elif isinstance(schema, OpaqueSchema):
            result = AnyValue()
        else:
            raise TypeError(f"Not a schema node: {type(schema).__name__}")
        return _nullable(result, schema.nullable)


def _nullable(expression: ValidatorExpression, nullable: bool) -> ValidatorExpression:
    return NullableValidator(expression) if nullable else expression


# Runtime evaluation


class ValidatorResolver(Protocol):
    def validator_for(self, name: str) -> Optional[ValidatorExpression]:
        ...


@dataclass(frozen=True)
class ValidationIssue:
    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


def _matches_primitive(value: Any, kind: PrimitiveKind) -> bool:
    if kind == PrimitiveKind.STRING:
        return isinstance(value, str)
    if kind == PrimitiveKind.BOOLEAN:
        return isinstance(value, bool)
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate(
    value: Any,
    expression: ValidatorExpression,
    resolver: Optional[ValidatorResolver] = None,
    path: str = "$",
) -> List[ValidationIssue]:
    """
    Check a decoded JSON value against a validator expression.

    Args:
        value: Decoded JSON value
        expression: Validator to apply
        resolver: Looks up ValidatorRef targets (usually the type table)
        path: Path prefix used in issues

    Returns:
        List of issues, empty when the value is valid
    """
    if isinstance(expression, NullableValidator):
        if value is None:
            return []
        return validate(value, expression.inner, resolver, path)

    if isinstance(expression, AnyValue):
        return []

    if isinstance(expression, IsPrimitive):
        if _matches_primitive(value, expression.kind):
            return []
        return [ValidationIssue(path, f"expected {expression.kind.value}, got {_describe(value)}")]

    if isinstance(expression, OneOf):
        if any(same_literal(value, v) for v in expression.values):
            return []
        allowed = ", ".join(json.dumps(v) for v in expression.values)
        return [ValidationIssue(path, f"expected one of {allowed}, got {json.dumps(value)}")]

    if isinstance(expression, ArrayOf):
        if not isinstance(value, list):
            return [ValidationIssue(path, f"expected array, got {_describe(value)}")]
        issues: List[ValidationIssue] = []
        for i, item in enumerate(value):
            issues.extend(validate(item, expression.inner, resolver, f"{path}[{i}]"))
        return issues

    if isinstance(expression, ObjectWith):
        if not isinstance(value, dict):
            return [ValidationIssue(path, f"expected object, got {_describe(value)}")]
        issues = []
        for f in expression.fields:
            field_path = f"{path}.{f.name}"
            if f.name not in value:
                if not f.optional:
                    issues.append(ValidationIssue(field_path, "missing required field"))
                continue
            issues.extend(validate(value[f.name], f.validator, resolver, field_path))
        return issues

    if isinstance(expression, ValidatorRef):
        target = resolver.validator_for(expression.name) if resolver is not None else None
        if target is None:
            return [ValidationIssue(path, f"unresolved validator '{expression.name}'")]
        return validate(value, target, resolver, path)

    raise TypeError(f"Not a validator expression: {type(expression).__name__}")


def is_valid(
    value: Any,
    expression: ValidatorExpression,
    resolver: Optional[ValidatorResolver] = None,
) -> bool:
    return not validate(value, expression, resolver)


def _describe(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__
