"""
Type synthesizer: schema nodes -> type expressions.

Objects that pass the extraction policy are hoisted into the type table
bottom-up (properties first, so inner declarations are named before the outer
one refers to them). The validator for every hoisted declaration is built in
the same step, which keeps types and validators in lockstep.
"""

from typing import Optional

from ..logging_config import get_logger
from .context import SynthesisContext
from .diagnostics import DiagnosticKind
from .extraction import should_extract
from .schema import (
    ArraySchema,
    EnumSchema,
    ObjectSchema,
    OpaqueSchema,
    PrimitiveKind,
    PrimitiveSchema,
    SchemaNode,
    unique_literals,
    without_nullable,
)
from .types import (
    ArrayType,
    FieldType,
    LiteralUnion,
    NullableType,
    ObjectType,
    PrimitiveType,
    Reference,
    TypeExpression,
    UnknownType,
)
from .validators import ValidatorSynthesizer

logger = get_logger(__name__)


class TypeSynthesizer:
    """Recursive schema -> type expression transform bound to one run."""

    def __init__(
        self,
        context: SynthesisContext,
        validators: Optional[ValidatorSynthesizer] = None,
    ):
        self.context = context
        self.validators = validators or ValidatorSynthesizer(context)

    def synthesize(
        self,
        schema: SchemaNode,
        location: str = "$",
        preferred_name: Optional[str] = None,
    ) -> TypeExpression:
        """
        Synthesize the type expression for a schema node.

        Args:
            schema: Node to transform
            location: Path used in diagnostics
            preferred_name: Name to use if this node itself gets hoisted
                (ignored for author-named components)

        Returns:
            Inline expression or Reference to a hoisted declaration
        """
        if isinstance(schema, ObjectSchema):
            return self._synthesize_object(schema, location, preferred_name, root=False)

        if isinstance(schema, PrimitiveSchema):
            result: TypeExpression = PrimitiveType(schema.kind)
        elif isinstance(schema, EnumSchema):
            result = self._synthesize_enum(schema, location)
        elif isinstance(schema, ArraySchema):
            result = ArrayType(self.synthesize(schema.items, f"{location}.items"))
        elif isinstance(schema, OpaqueSchema):
            result = UnknownType()
        else:
            raise TypeError(f"Not a schema node: {type(schema).__name__}")

        return _nullable(result, schema.nullable)

    def synthesize_root(self, schema: SchemaNode, location: str = "$") -> TypeExpression:
        """
        Synthesize a response root.

        A root object is only hoisted here when its shape is already known
        (component or existing declaration); otherwise its body is returned
        inline and the response alias resolver names it.
        """
        if isinstance(schema, ObjectSchema):
            return self._synthesize_object(schema, location, None, root=True)
        return self.synthesize(schema, location)

    def synthesize_body(self, schema: ObjectSchema, location: str = "$") -> ObjectType:
        """Build the inline object type, fields in source order."""
        return ObjectType(
            fields=tuple(
                FieldType(
                    name=name,
                    type=self.synthesize(prop, f"{location}.{name}"),
                    optional=not schema.is_required(name),
                )
                for name, prop in schema.properties.items()
            )
        )

    def _synthesize_object(
        self,
        schema: ObjectSchema,
        location: str,
        preferred_name: Optional[str],
        root: bool,
    ) -> TypeExpression:
        fp = self.context.object_fingerprint(schema, location)
        if fp is None:
            return _nullable(UnknownType(), schema.nullable)

        existing = self.context.table.get(fp)
        if existing is not None:
            return _nullable(Reference(existing.name), schema.nullable)

        if root:
            hoist = fp in self.context.component_names
        else:
            hoist = should_extract(schema, self.context, fp)

        if hoist:
            name = self._hoist(schema, fp, location, preferred_name)
            return _nullable(Reference(name), schema.nullable)

        return _nullable(self.synthesize_body(schema, location), schema.nullable)

    def _hoist(
        self,
        schema: ObjectSchema,
        fp: str,
        location: str,
        preferred_name: Optional[str],
    ) -> str:
        self.context.begin()
        declared = without_nullable(schema)
        body = self.synthesize_body(declared, location)
        validator = self.validators.synthesize_body(declared, location)

        if fp in self.context.component_names:
            preferred_name = None

        name = self.context.table.register(
            fp,
            declared,
            declaration=body,
            validator=validator,
            preferred_name=preferred_name,
        )
        logger.debug("Hoisted %s at %s", name, location)
        return name

    def _synthesize_enum(self, schema: EnumSchema, location: str) -> TypeExpression:
        values = unique_literals(schema.values)
        if not values:
            self.context.diagnostics.record(
                DiagnosticKind.EMPTY_ENUM,
                "enum has no values, falling back to string",
                location,
            )
            return PrimitiveType(PrimitiveKind.STRING)
        return LiteralUnion(values)


def _nullable(expression: TypeExpression, nullable: bool) -> TypeExpression:
    return NullableType(expression) if nullable else expression
