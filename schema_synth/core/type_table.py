"""
Type table: the single registry of named declarations for one run.

Entries are keyed by fingerprint, appended in registration order and never
mutated or removed. Registering a known fingerprint again is a no-op that
returns the name chosen the first time.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Iterator, List, Optional

from ..logging_config import get_logger
from .components import ComponentNameIndex
from .diagnostics import DiagnosticKind, DiagnosticLog, TypeTableFrozenError
from .naming import disambiguate
from .schema import SchemaNode
from .types import TypeExpression
from .validators import ValidatorExpression

logger = get_logger(__name__)


class Origin(Enum):
    """Why a declaration exists."""

    COMPONENT = "component"
    NESTED_EXTRACTION = "nested_extraction"
    RESPONSE_EXTRACTION = "response_extraction"


ALL_ORIGINS: FrozenSet[Origin] = frozenset(Origin)


@dataclass(frozen=True)
class TypeTableEntry:
    name: str
    fingerprint: str
    schema: SchemaNode
    origin: Origin
    declaration: TypeExpression
    validator: ValidatorExpression


class TypeTable:
    """Fingerprint -> declaration registry with unique names."""

    def __init__(
        self,
        component_names: Optional[ComponentNameIndex] = None,
        fallback_prefix: str = "Type",
        collision_separator: str = "",
        diagnostics: Optional[DiagnosticLog] = None,
    ):
        """
        Initialize an empty table.

        Args:
            component_names: Author-given names by fingerprint
            fallback_prefix: Prefix for counter-based fallback names
            collision_separator: Inserted before numeric disambiguation suffixes
            diagnostics: Log receiving name collision diagnostics
        """
        self.component_names = component_names or ComponentNameIndex()
        self.fallback_prefix = fallback_prefix
        self.collision_separator = collision_separator
        self.diagnostics = diagnostics if diagnostics is not None else DiagnosticLog()

        self._by_fingerprint: Dict[str, TypeTableEntry] = {}
        self._by_name: Dict[str, TypeTableEntry] = {}
        self._counter = 0
        self._accepting: FrozenSet[Origin] = ALL_ORIGINS

    def register(
        self,
        fingerprint: str,
        schema: SchemaNode,
        declaration: TypeExpression,
        validator: ValidatorExpression,
        origin: Optional[Origin] = None,
        preferred_name: Optional[str] = None,
    ) -> str:
        """
        Register a declaration, or return the name already held by ``fingerprint``.

        Name choice: ``preferred_name`` if unused, else the component name,
        else a fallback name from the run counter. A name that belongs to a
        different fingerprint gets a numeric suffix.

        Args:
            fingerprint: Structural fingerprint of ``schema``
            schema: The schema being declared
            declaration: Type expression body
            validator: Validator expression body
            origin: Defaults to COMPONENT or NESTED_EXTRACTION by name source
            preferred_name: Name requested by the caller

        Returns:
            The declaration name

        Raises:
            TypeTableFrozenError: If entries of ``origin`` are no longer accepted
        """
        existing = self._by_fingerprint.get(fingerprint)
        if existing is not None:
            return existing.name

        component_name = self.component_names.get(fingerprint)

        use_preferred = bool(preferred_name) and preferred_name not in self._by_name
        if origin is None:
            if not use_preferred and component_name is not None:
                origin = Origin.COMPONENT
            else:
                origin = Origin.NESTED_EXTRACTION

        if origin not in self._accepting:
            raise TypeTableFrozenError(
                f"Type table no longer accepts {origin.value} entries ({fingerprint[:12]})"
            )

        if use_preferred:
            name = preferred_name
        elif component_name is not None:
            name = component_name
        else:
            self._counter += 1
            name = f"{self.fallback_prefix}{self._counter}"

        if name in self._by_name:
            taken = name
            name = disambiguate(name, self.is_name_taken, self.collision_separator)
            self.diagnostics.record(
                DiagnosticKind.NAME_COLLISION,
                f"name '{taken}' already used by another shape, renamed to '{name}'",
            )

        entry = TypeTableEntry(
            name=name,
            fingerprint=fingerprint,
            schema=schema,
            origin=origin,
            declaration=declaration,
            validator=validator,
        )
        self._by_fingerprint[fingerprint] = entry
        self._by_name[name] = entry
        logger.debug("Registered %s (%s)", name, origin.value)
        return name

    def accept_only(self, origins: FrozenSet[Origin]) -> None:
        """Restrict which origins may still be inserted."""
        self._accepting = frozenset(origins)

    def get(self, fingerprint: str) -> Optional[TypeTableEntry]:
        return self._by_fingerprint.get(fingerprint)

    def lookup_name(self, name: str) -> Optional[TypeTableEntry]:
        return self._by_name.get(name)

    def validator_for(self, name: str) -> Optional[ValidatorExpression]:
        entry = self._by_name.get(name)
        return entry.validator if entry is not None else None

    def is_name_taken(self, name: str) -> bool:
        return name in self._by_name

    @property
    def names(self) -> List[str]:
        return list(self._by_name)

    @property
    def fallback_count(self) -> int:
        """Number of fallback names minted so far."""
        return self._counter

    def __contains__(self, fingerprint: str) -> bool:
        return fingerprint in self._by_fingerprint

    def __iter__(self) -> Iterator[TypeTableEntry]:
        return iter(list(self._by_fingerprint.values()))

    def __len__(self) -> int:
        return len(self._by_fingerprint)
