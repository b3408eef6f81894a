"""
Response alias resolver.

After every operation has been synthesized, operations whose responses have
the same shape are grouped so that the shape is declared once and every other
operation gets an alias to it.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from ..logging_config import get_logger
from .context import SynthesisContext, SynthesisState
from .diagnostics import DiagnosticKind, TypeTableFrozenError
from .naming import disambiguate
from .schema import SchemaNode, without_nullable
from .type_table import Origin
from .types import NullableType, TypeExpression, UnknownType
from .validators import AnyValue, NullableValidator, ValidatorExpression

logger = get_logger(__name__)


@dataclass(frozen=True)
class ResponseInput:
    """The synthesized response of one operation."""

    operation: str
    default_name: str
    schema: Optional[SchemaNode]
    type: Optional[TypeExpression] = None
    validator: Optional[ValidatorExpression] = None


@dataclass(frozen=True)
class AliasDeclaration:
    """``name := target`` without restating the structure.

    A nullable alias admits null on top of the target shape.
    """

    name: str
    target: str
    operation: str
    nullable: bool = False

    @property
    def target_expression(self) -> str:
        return f"{self.target} | null" if self.nullable else self.target

    def render(self) -> str:
        return f"{self.name} = {self.target_expression}"


@dataclass
class ResponseResolution:
    """Outcome of alias resolution."""

    # operation -> name of its response type (canonical or alias)
    response_names: Dict[str, str] = field(default_factory=dict)
    aliases: List[AliasDeclaration] = field(default_factory=list)
    # canonical declarations created by the resolver, in order
    declared: List[str] = field(default_factory=list)
    # fingerprint -> operations sharing it, in processing order
    groups: Dict[str, List[str]] = field(default_factory=dict)

    def canonical_for(self, operation: str) -> Optional[str]:
        """Name of the structural declaration behind an operation's response."""
        name = self.response_names.get(operation)
        for alias in self.aliases:
            if alias.name == name:
                return alias.target
        return name


class ResponseAliasResolver:
    """Collapses identical per-operation responses into one declaration."""

    def __init__(self, context: SynthesisContext):
        self.context = context

    def resolve(self, responses: Sequence[ResponseInput]) -> ResponseResolution:
        """
        Group responses by fingerprint and emit canonical and alias declarations.

        Responses are grouped on their non-nullable shape. Canonical name
        precedence: component name, then an existing table name, then the
        default name of the first operation whose response is not nullable.
        A nullable member gets an alias of the form ``Target | null``. A group
        where every member is nullable declares the nullable form itself.

        Args:
            responses: Per-operation responses in processing order

        Returns:
            ResponseResolution; the context is left alias-resolved
        """
        if self.context.state != SynthesisState.FROZEN:
            raise TypeTableFrozenError(
                f"Response aliases need a frozen run, state is {self.context.state.value}"
            )

        table = self.context.table
        resolution = ResponseResolution()
        grouped: Dict[str, List[ResponseInput]] = {}

        for response in responses:
            if response.schema is None:
                continue

            fp = self.context.object_fingerprint(response.schema, f"{response.operation}.response")
            if fp is None:
                self._declare_unknown(response, resolution)
                continue
            grouped.setdefault(fp, []).append(response)

        # Canonical declarations first, so alias names never shadow them.
        pending_aliases: List[tuple] = []
        for fp, members in grouped.items():
            resolution.groups[fp] = [m.operation for m in members]
            existing = table.get(fp)
            admits_null = False

            if existing is not None:
                canonical = existing.name
                aliased = members
            elif fp in self.context.component_names:
                canonical = self._register(fp, members[0], preferred_name=None)
                resolution.declared.append(canonical)
                aliased = members
            else:
                first = next((m for m in members if not m.schema.nullable), members[0])
                admits_null = first.schema.nullable
                preferred = disambiguate(
                    first.default_name, table.is_name_taken, self.context.config.collision_separator
                )
                canonical = self._register(fp, first, preferred_name=preferred)
                resolution.declared.append(canonical)
                resolution.response_names[first.operation] = canonical
                aliased = [m for m in members if m is not first]

            for member in aliased:
                nullable = member.schema.nullable and not admits_null
                pending_aliases.append((member, canonical, nullable))

        alias_names = set()

        def is_taken(name: str) -> bool:
            return table.is_name_taken(name) or name in alias_names

        for member, canonical, nullable in pending_aliases:
            if member.default_name == canonical and not nullable:
                resolution.response_names[member.operation] = canonical
                continue

            name = disambiguate(member.default_name, is_taken, self.context.config.collision_separator)
            if name != member.default_name:
                self.context.diagnostics.record(
                    DiagnosticKind.NAME_COLLISION,
                    f"response alias '{member.default_name}' already used, renamed to '{name}'",
                    member.operation,
                )
            alias_names.add(name)
            resolution.aliases.append(
                AliasDeclaration(
                    name=name, target=canonical, operation=member.operation, nullable=nullable
                )
            )
            resolution.response_names[member.operation] = name

        self.context.mark_alias_resolved()
        logger.info(
            "Resolved %d response groups: %d declarations, %d aliases",
            len(grouped),
            len(resolution.declared),
            len(resolution.aliases),
        )
        return resolution

    def _register(
        self, fp: str, response: ResponseInput, preferred_name: Optional[str]
    ) -> str:
        if preferred_name is not None and response.schema.nullable:
            # every member of the group is nullable, declare that form
            fp = self.context.fingerprint(response.schema, record=False)
            schema, declaration, validator = response.schema, response.type, response.validator
        else:
            schema = without_nullable(response.schema)
            declaration = _strip_null(response.type)
            validator = _strip_null(response.validator)
        return self.context.table.register(
            fp,
            schema,
            declaration=declaration or UnknownType(),
            validator=validator or AnyValue(),
            origin=Origin.RESPONSE_EXTRACTION,
            preferred_name=preferred_name,
        )

    def _declare_unknown(self, response: ResponseInput, resolution: ResponseResolution) -> None:
        table = self.context.table
        name = disambiguate(
            response.default_name, table.is_name_taken, self.context.config.collision_separator
        )
        table.register(
            f"unfingerprintable:{response.operation}",
            response.schema,
            declaration=UnknownType(),
            validator=AnyValue(),
            origin=Origin.RESPONSE_EXTRACTION,
            preferred_name=name,
        )
        resolution.declared.append(name)
        resolution.response_names[response.operation] = name


def _strip_null(expression):
    if isinstance(expression, (NullableType, NullableValidator)):
        return expression.inner
    return expression
