"""
Synthesis context: all state owned by one synthesis run.

The type table, its fallback-name counter, the component name index and the
diagnostic log travel together in a context object that is passed explicitly
to every component. Two runs never share a context.
"""

from enum import Enum
from typing import Optional

from ..logging_config import get_logger
from .components import ComponentNameIndex
from .config import SynthesisConfig
from .diagnostics import DiagnosticKind, DiagnosticLog, TypeTableFrozenError, UnsupportedCyclicSchema
from .fingerprint import Fingerprinter
from .schema import SchemaNode, without_nullable
from .type_table import Origin, TypeTable

logger = get_logger(__name__)


class SynthesisState(Enum):
    """Lifecycle of a run: empty -> populating -> frozen -> alias_resolved."""

    EMPTY = "empty"
    POPULATING = "populating"
    FROZEN = "frozen"
    ALIAS_RESOLVED = "alias_resolved"


class SynthesisContext:
    """State for a single synthesis run."""

    def __init__(
        self,
        config: Optional[SynthesisConfig] = None,
        component_names: Optional[ComponentNameIndex] = None,
    ):
        """
        Create a fresh run context.

        Args:
            config: Synthesis settings (defaults if omitted)
            component_names: Author-given names by fingerprint
        """
        self.config = config or SynthesisConfig()
        self.component_names = component_names or ComponentNameIndex()
        self.diagnostics = DiagnosticLog()
        self.diagnostics.extend(self.component_names.diagnostics)
        self.fingerprint_of = Fingerprinter()
        self.table = TypeTable(
            component_names=self.component_names,
            fallback_prefix=self.config.fallback_name_prefix,
            collision_separator=self.config.collision_separator,
            diagnostics=self.diagnostics,
        )
        self.state = SynthesisState.EMPTY

    def fingerprint(
        self, schema: SchemaNode, location: str = "$", record: bool = True
    ) -> Optional[str]:
        """
        Fingerprint a node, or return None if it is cyclic.

        Args:
            schema: Node to fingerprint
            location: Path used in the diagnostic
            record: Record a CYCLIC_SCHEMA diagnostic on failure
        """
        try:
            return self.fingerprint_of(schema)
        except UnsupportedCyclicSchema as e:
            if record:
                self.diagnostics.record(
                    DiagnosticKind.CYCLIC_SCHEMA,
                    f"cannot fingerprint cyclic schema ({e}), degrading to unknown",
                    location,
                )
            return None

    def object_fingerprint(
        self, schema: SchemaNode, location: str = "$", record: bool = True
    ) -> Optional[str]:
        """Fingerprint an object for hoisting; nullability stays at the use site."""
        return self.fingerprint(without_nullable(schema), location, record)

    def begin(self) -> None:
        """Enter the populating state (idempotent while populating)."""
        if self.state == SynthesisState.EMPTY:
            self.state = SynthesisState.POPULATING
        elif self.state != SynthesisState.POPULATING:
            raise TypeTableFrozenError(f"Cannot populate a run in state {self.state.value}")

    def freeze(self) -> None:
        """Close nested extraction; only response declarations may follow."""
        if self.state in (SynthesisState.FROZEN, SynthesisState.ALIAS_RESOLVED):
            raise TypeTableFrozenError(f"Run already {self.state.value}")
        self.table.accept_only(frozenset({Origin.RESPONSE_EXTRACTION}))
        self.state = SynthesisState.FROZEN
        logger.debug("Type table frozen with %d entries", len(self.table))

    def mark_alias_resolved(self) -> None:
        if self.state != SynthesisState.FROZEN:
            raise TypeTableFrozenError(
                f"Aliases can only be resolved on a frozen run, state is {self.state.value}"
            )
        self.table.accept_only(frozenset())
        self.state = SynthesisState.ALIAS_RESOLVED
