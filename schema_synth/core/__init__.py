"""
Core synthesis components.

Schema model, fingerprints, type table and the two synthesizers that turn
schema fragments into named type and validator declarations.
"""

from .diagnostics import (
    Diagnostic,
    DiagnosticKind,
    DiagnosticLog,
    InvalidInputError,
    SynthesisError,
    TypeTableFrozenError,
    UnsupportedCyclicSchema,
)
from .schema import (
    ArraySchema,
    EnumSchema,
    ObjectSchema,
    OpaqueSchema,
    PrimitiveKind,
    PrimitiveSchema,
    SchemaNode,
    SchemaParser,
    parse_schema,
)
from .fingerprint import Fingerprinter, canonical_form, fingerprint
from .components import ComponentNameIndex
from .naming import NameSanitizer, NamingCase, disambiguate, to_type_name
from .config import ConfigError, ConfigManager, SynthesisConfig, load_config
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
from .validators import (
    AnyValue,
    ArrayOf,
    IsPrimitive,
    NullableValidator,
    ObjectWith,
    OneOf,
    ValidationIssue,
    ValidatorExpression,
    ValidatorField,
    ValidatorRef,
    ValidatorSynthesizer,
    is_valid,
    validate,
)
from .type_table import Origin, TypeTable, TypeTableEntry
from .context import SynthesisContext, SynthesisState
from .extraction import should_extract
from .synthesizer import TypeSynthesizer
from .responses import (
    AliasDeclaration,
    ResponseAliasResolver,
    ResponseInput,
    ResponseResolution,
)

__all__ = [
    # Errors and diagnostics
    "SynthesisError",
    "InvalidInputError",
    "UnsupportedCyclicSchema",
    "TypeTableFrozenError",
    "Diagnostic",
    "DiagnosticKind",
    "DiagnosticLog",
    # Schema model
    "SchemaNode",
    "PrimitiveKind",
    "PrimitiveSchema",
    "EnumSchema",
    "ArraySchema",
    "ObjectSchema",
    "OpaqueSchema",
    "SchemaParser",
    "parse_schema",
    # Fingerprints and component names
    "fingerprint",
    "canonical_form",
    "Fingerprinter",
    "ComponentNameIndex",
    # Naming utilities
    "NameSanitizer",
    "NamingCase",
    "disambiguate",
    "to_type_name",
    # Configuration system
    "SynthesisConfig",
    "ConfigManager",
    "ConfigError",
    "load_config",
    # Type expressions
    "TypeExpression",
    "PrimitiveType",
    "LiteralUnion",
    "ArrayType",
    "FieldType",
    "ObjectType",
    "Reference",
    "UnknownType",
    "NullableType",
    # Validator expressions
    "ValidatorExpression",
    "IsPrimitive",
    "OneOf",
    "ArrayOf",
    "ValidatorField",
    "ObjectWith",
    "ValidatorRef",
    "AnyValue",
    "NullableValidator",
    "ValidationIssue",
    "validate",
    "is_valid",
    # Synthesis
    "Origin",
    "TypeTable",
    "TypeTableEntry",
    "SynthesisContext",
    "SynthesisState",
    "should_extract",
    "TypeSynthesizer",
    "ValidatorSynthesizer",
    "ResponseAliasResolver",
    "ResponseInput",
    "ResponseResolution",
    "AliasDeclaration",
]
