"""
Canonical structural fingerprints for schema nodes.

Two nodes with the same shape get the same fingerprint no matter in which
order their properties or required names were declared. The canonical form
is built explicitly (type tags, sorted keys, sorted required names) instead
of relying on the iteration order of any container.
"""

import hashlib
import json
from typing import Any, Dict, List, Set, Tuple

from .diagnostics import UnsupportedCyclicSchema
from .schema import (
    ArraySchema,
    EnumSchema,
    ObjectSchema,
    OpaqueSchema,
    PrimitiveSchema,
    SchemaNode,
)


def _literal(value: Any) -> Dict[str, Any]:
    if isinstance(value, bool):
        return {"t": "boolean", "v": value}
    if isinstance(value, (int, float)):
        return {"t": "number", "v": value}
    return {"t": "string", "v": str(value)}


def _unique(values) -> List[Any]:
    seen = []
    for value in values:
        tagged = _literal(value)
        if tagged not in seen:
            seen.append(tagged)
    return seen


def canonical_tree(schema: SchemaNode, path: str = "$") -> Dict[str, Any]:
    """Build the tagged canonical tree for a schema node.

    Raises:
        UnsupportedCyclicSchema: If a node is reachable from itself
    """
    return _canonical(schema, path, set())


def _canonical(node: SchemaNode, path: str, active: Set[int]) -> Dict[str, Any]:
    key = id(node)
    if key in active:
        raise UnsupportedCyclicSchema(path)

    active.add(key)
    try:
        if isinstance(node, PrimitiveSchema):
            return {"kind": "primitive", "type": node.kind.value, "nullable": node.nullable}

        if isinstance(node, EnumSchema):
            # Value order is significant, duplicates are not.
            return {"kind": "enum", "values": _unique(node.values), "nullable": node.nullable}

        if isinstance(node, ArraySchema):
            return {
                "kind": "array",
                "items": _canonical(node.items, f"{path}.items", active),
                "nullable": node.nullable,
            }

        if isinstance(node, ObjectSchema):
            return {
                "kind": "object",
                "properties": {
                    name: _canonical(prop, f"{path}.{name}", active)
                    for name, prop in node.properties.items()
                },
                "required": sorted(n for n in node.required if n in node.properties),
                "nullable": node.nullable,
            }

        if isinstance(node, OpaqueSchema):
            return {"kind": "opaque", "nullable": node.nullable}

        raise TypeError(f"Not a schema node: {type(node).__name__}")
    finally:
        active.discard(key)


def canonical_form(schema: SchemaNode) -> str:
    """Serialize a schema node to its canonical text."""
    return json.dumps(
        canonical_tree(schema),
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    )


def fingerprint(schema: SchemaNode) -> str:
    """
    Compute the structural fingerprint of a schema node.

    Args:
        schema: Node to fingerprint

    Returns:
        Hex SHA-256 digest of the canonical form

    Raises:
        UnsupportedCyclicSchema: If the node is cyclic
    """
    return hashlib.sha256(canonical_form(schema).encode("utf-8")).hexdigest()


class Fingerprinter:
    """Memoizing fingerprint calculator scoped to one synthesis run.

    Nodes are kept alive in the cache so their ids stay unique for the run.
    """

    def __init__(self):
        self._cache: Dict[int, Tuple[SchemaNode, str]] = {}

    def __call__(self, schema: SchemaNode) -> str:
        cached = self._cache.get(id(schema))
        if cached is not None and cached[0] is schema:
            return cached[1]

        digest = fingerprint(schema)
        self._cache[id(schema)] = (schema, digest)
        return digest

    def __len__(self) -> int:
        return len(self._cache)
