"""
Schema Synth

Synthesizes a minimal, deduplicated set of named type declarations and
matching runtime validators from the schemas of API operations.
"""

from .core import (
    ComponentNameIndex,
    ConfigError,
    Diagnostic,
    DiagnosticKind,
    InvalidInputError,
    SynthesisConfig,
    SynthesisError,
    fingerprint,
    is_valid,
    load_config,
    parse_schema,
    validate,
)
from .engine import (
    Declaration,
    OperationTypeRefs,
    ParameterRef,
    SynthesisEngine,
    SynthesisResult,
    synthesize_document,
    synthesize_operations,
)
from .logging_config import configure_logging, get_logger
from .operations import Operation, Parameter, operations_from_document, parse_operations
from .report import print_synthesis_report

# Version info
__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Entry points
    "synthesize_operations",
    "synthesize_document",
    "SynthesisEngine",
    "SynthesisResult",
    "Declaration",
    "OperationTypeRefs",
    "ParameterRef",
    # Inputs
    "Operation",
    "Parameter",
    "parse_operations",
    "operations_from_document",
    "ComponentNameIndex",
    "parse_schema",
    "fingerprint",
    # Validation
    "validate",
    "is_valid",
    # Configuration and errors
    "SynthesisConfig",
    "load_config",
    "ConfigError",
    "SynthesisError",
    "InvalidInputError",
    "Diagnostic",
    "DiagnosticKind",
    # Output
    "print_synthesis_report",
    "configure_logging",
    "get_logger",
]
