"""
Component name index: fingerprint -> author-given schema name.

Built from the API document's named-schema registry before references are
flattened, so that a shape reached through dereferencing can still be given
the name its author chose.
"""

from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

from ..logging_config import get_logger
from .diagnostics import (
    Diagnostic,
    DiagnosticKind,
    DiagnosticLog,
    InvalidInputError,
)
from .fingerprint import fingerprint
from .schema import SchemaParser

logger = get_logger(__name__)


class ComponentNameIndex:
    """Read-only map from fingerprint to component name."""

    def __init__(self, names: Optional[Mapping[str, str]] = None):
        """
        Initialize from a ready fingerprint -> name mapping.

        Args:
            names: Mapping produced by an upstream loader

        Raises:
            InvalidInputError: If ``names`` is not a mapping of strings
        """
        if names is not None and not isinstance(names, Mapping):
            raise InvalidInputError(
                f"Component name index must be a mapping, got {type(names).__name__}"
            )

        self._names: Dict[str, str] = {}
        self._log = DiagnosticLog()

        for fp, name in (names or {}).items():
            if not isinstance(fp, str) or not isinstance(name, str):
                raise InvalidInputError(
                    f"Component name index entries must be strings: {fp!r} -> {name!r}"
                )
            self._names[fp] = name

    @classmethod
    def from_components(cls, registry: Mapping[str, Any]) -> "ComponentNameIndex":
        """
        Build the index from a named-schema registry.

        Local ``$ref`` values between registry entries are followed so the
        fingerprint matches the dereferenced shape operations will carry.
        A self-referencing entry is indexed with its recursive field degraded
        to an opaque node, the same shape the operation side sees after
        dereferencing.

        Args:
            registry: ``components.schemas`` (or Swagger ``definitions``)

        Returns:
            Populated index
        """
        if not isinstance(registry, Mapping):
            raise InvalidInputError(
                f"Schema registry must be a mapping, got {type(registry).__name__}"
            )

        index = cls()
        parser = SchemaParser(diagnostics=index._log, components=registry)

        for name, raw in registry.items():
            node = parser.parse(raw, f"#/components/schemas/{name}")
            index.add(fingerprint(node), name)

        logger.debug("Indexed %d component schema names", len(index))
        return index

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> "ComponentNameIndex":
        """Build the index from an OpenAPI 3.x or Swagger 2.0 document."""
        if not isinstance(document, Mapping):
            raise InvalidInputError("API document must be a mapping")

        components = document.get("components") or {}
        registry = components.get("schemas") if isinstance(components, Mapping) else None
        if registry is None:
            registry = document.get("definitions") or {}
        return cls.from_components(registry)

    def add(self, fp: str, name: str) -> str:
        """
        Record a name for a fingerprint; the first registered name wins.

        Returns:
            The name now associated with ``fp``
        """
        existing = self._names.get(fp)
        if existing is None:
            self._names[fp] = name
            return name

        if existing != name:
            self._log.record(
                DiagnosticKind.COMPONENT_AMBIGUITY,
                f"components '{existing}' and '{name}' share a shape, using '{existing}'",
                f"#/components/schemas/{name}",
            )
        return existing

    def get(self, fp: str) -> Optional[str]:
        return self._names.get(fp)

    def __contains__(self, fp: str) -> bool:
        return fp in self._names

    def __len__(self) -> int:
        return len(self._names)

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def items(self) -> Iterator[Tuple[str, str]]:
        return iter(self._names.items())

    @property
    def diagnostics(self) -> List[Diagnostic]:
        """Problems found while building the index."""
        return self._log.to_list()
