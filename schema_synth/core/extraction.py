"""
Extraction policy: decides whether an object is hoisted to a named declaration.
"""

from typing import Optional

from .context import SynthesisContext
from .schema import ObjectSchema, SchemaNode


def should_extract(
    schema: SchemaNode,
    context: SynthesisContext,
    fp: Optional[str] = None,
) -> bool:
    """
    Decide whether an object schema gets its own named declaration.

    Objects are hoisted when they have at least ``extraction_threshold``
    properties, when their shape is an author-named component, or when the
    shape is already declared in the type table. Everything else is inlined.

    Args:
        schema: Node to decide for (non-objects are never hoisted)
        context: Current run
        fp: Precomputed object fingerprint, computed when omitted

    Returns:
        True if the object should be hoisted
    """
    if not isinstance(schema, ObjectSchema):
        return False

    if fp is None:
        fp = context.object_fingerprint(schema, record=False)
        if fp is None:
            return False

    if len(schema.properties) >= context.config.extraction_threshold:
        return True

    return fp in context.component_names or fp in context.table
