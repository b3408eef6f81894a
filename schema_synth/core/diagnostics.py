"""
Error types and recoverable diagnostics for schema synthesis.

Fatal problems are raised as exceptions. Everything a single schema fragment
can get wrong is recorded as a Diagnostic instead, so one bad fragment never
aborts a whole run.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from ..logging_config import get_logger

logger = get_logger(__name__)


class SynthesisError(Exception):
    """Base exception for schema synthesis errors."""

    pass


class InvalidInputError(SynthesisError):
    """Raised when the operation list or name index is structurally broken."""

    pass


class UnsupportedCyclicSchema(SynthesisError):
    """Raised when a schema node is reachable from itself."""

    def __init__(self, path: str = "$"):
        super().__init__(f"Cyclic schema at {path}")
        self.path = path


class TypeTableFrozenError(SynthesisError):
    """Raised when the type table is written outside its lifecycle window."""

    pass


class DiagnosticKind(Enum):
    """Kinds of recoverable problems."""

    CYCLIC_SCHEMA = "cyclic_schema"
    EMPTY_ENUM = "empty_enum"
    NAME_COLLISION = "name_collision"
    MALFORMED_SCHEMA = "malformed_schema"
    COMPONENT_AMBIGUITY = "component_ambiguity"


@dataclass(frozen=True)
class Diagnostic:
    """A recoverable problem found while synthesizing."""

    kind: DiagnosticKind
    message: str
    location: Optional[str] = None

    def __str__(self) -> str:
        if self.location:
            return f"[{self.kind.value}] {self.location}: {self.message}"
        return f"[{self.kind.value}] {self.message}"


class DiagnosticLog:
    """Ordered collection of diagnostics for one run."""

    def __init__(self):
        self._items: List[Diagnostic] = []

    def record(
        self, kind: DiagnosticKind, message: str, location: Optional[str] = None
    ) -> Diagnostic:
        diagnostic = Diagnostic(kind=kind, message=message, location=location)
        self._items.append(diagnostic)
        logger.warning("%s", diagnostic)
        return diagnostic

    def extend(self, diagnostics: List[Diagnostic]) -> None:
        self._items.extend(diagnostics)

    def of_kind(self, kind: DiagnosticKind) -> List[Diagnostic]:
        return [d for d in self._items if d.kind == kind]

    def __iter__(self):
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def to_list(self) -> List[Diagnostic]:
        return list(self._items)
