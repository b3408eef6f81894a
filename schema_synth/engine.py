"""
Synthesis run orchestration.

Walks operations in order, feeds every parameter, request body and response
schema through the synthesizers, freezes the type table, resolves response
aliases and packages everything into a SynthesisResult for the downstream
emitter.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from .core.components import ComponentNameIndex
from .core.config import ConfigError, SynthesisConfig, get_config_manager
from .core.context import SynthesisContext
from .core.diagnostics import Diagnostic, SynthesisError
from .core.naming import disambiguate
from .core.responses import AliasDeclaration, ResponseAliasResolver, ResponseInput
from .core.schema import SchemaParser
from .core.synthesizer import TypeSynthesizer
from .core.type_table import Origin, TypeTableEntry
from .core.types import Reference, TypeExpression
from .core.validators import NullableValidator, ValidatorExpression, ValidatorRef
from .logging_config import get_logger
from .operations import Operation, operations_from_document, parse_operations

logger = get_logger(__name__)


@dataclass(frozen=True)
class Declaration:
    """A named type with its validator, as handed to the emitter."""

    name: str
    type: TypeExpression
    validator: ValidatorExpression
    origin: Origin

    @classmethod
    def from_entry(cls, entry: TypeTableEntry) -> "Declaration":
        return cls(
            name=entry.name,
            type=entry.declaration,
            validator=entry.validator,
            origin=entry.origin,
        )

    def render_type(self) -> str:
        return f"type {self.name} = {self.type.render()}"

    def render_validator(self) -> str:
        return f"const {self.name}Schema = {self.validator.render()}"


@dataclass(frozen=True)
class ParameterRef:
    name: str
    location: str
    required: bool
    type: TypeExpression
    validator: ValidatorExpression


@dataclass
class OperationTypeRefs:
    """Resolved type references of one operation."""

    name: str
    method: str
    path: str
    parameters: List[ParameterRef] = field(default_factory=list)
    request_body: Optional[TypeExpression] = None
    request_body_validator: Optional[ValidatorExpression] = None
    request_body_required: bool = False
    response: Optional[Reference] = None
    response_validator: Optional[ValidatorRef] = None


class SynthesisResult:
    """Container for synthesis output and metadata."""

    def __init__(
        self,
        declarations: List[Declaration] = None,
        aliases: List[AliasDeclaration] = None,
        operations: Dict[str, OperationTypeRefs] = None,
        warnings: List[Diagnostic] = None,
        metadata: Dict[str, Any] = None,
    ):
        """
        Initialize synthesis result.

        Args:
            declarations: Named declarations in registration order
            aliases: Response alias declarations
            operations: Per-operation references keyed by operation name
            warnings: Recoverable diagnostics collected during the run
            metadata: Counts and other run information
        """
        self.declarations = declarations or []
        self.aliases = aliases or []
        self.operations = operations or {}
        self.warnings = warnings or []
        self.metadata = metadata or {}
        self.success = True
        self.error_message: Optional[str] = None
        self.exception: Optional[Exception] = None
        self._by_name = {d.name: d for d in self.declarations}

    @classmethod
    def error(cls, message: str, exception: Exception = None) -> "SynthesisResult":
        """Create a failed result carrying no partial output."""
        result = cls()
        result.success = False
        result.error_message = message
        result.exception = exception
        return result

    def declaration(self, name: str) -> Optional[Declaration]:
        return self._by_name.get(name)

    def validator_for(self, name: str) -> Optional[ValidatorExpression]:
        """Resolve a validator by declaration or alias name."""
        declaration = self._by_name.get(name)
        if declaration is not None:
            return declaration.validator
        for alias in self.aliases:
            if alias.name == name:
                target = self.validator_for(alias.target)
                if target is not None and alias.nullable:
                    return NullableValidator(target)
                return target
        return None

    @property
    def names(self) -> List[str]:
        return [d.name for d in self.declarations]


class SynthesisEngine:
    """Runs schema synthesis over an operation list.

    Each call to :meth:`run` uses a fresh SynthesisContext, so one engine can
    serve many independent runs.
    """

    def __init__(
        self,
        config: Optional[SynthesisConfig] = None,
        component_names: Union[ComponentNameIndex, Mapping[str, str], None] = None,
    ):
        """
        Initialize the engine.

        Args:
            config: Synthesis settings (defaults if omitted)
            component_names: Component index, or a ready fingerprint -> name mapping

        Raises:
            ConfigError: If the configuration does not validate
        """
        self.config = config or SynthesisConfig()
        problems = get_config_manager().validate_config(self.config)
        if problems:
            for problem in problems:
                logger.warning("Config: %s", problem)
            raise ConfigError(f"Invalid configuration: {'; '.join(problems)}")

        if component_names is None or isinstance(component_names, ComponentNameIndex):
            self.component_names = component_names
        else:
            self.component_names = ComponentNameIndex(component_names)

    def run(self, operations: Sequence[Union[Operation, Mapping[str, Any]]]) -> SynthesisResult:
        """
        Synthesize declarations for every operation.

        Raises:
            InvalidInputError: If the operation list is structurally broken
        """
        parsed = parse_operations(operations, self.config.json_media_types)

        context = SynthesisContext(self.config, self.component_names)
        parser = SchemaParser(context.diagnostics)
        types = TypeSynthesizer(context)
        validators = types.validators

        context.begin()
        refs: Dict[str, OperationTypeRefs] = {}
        responses: List[ResponseInput] = []

        for operation in parsed:
            key = disambiguate(
                operation.type_name, lambda n: n in refs, self.config.collision_separator
            )
            logger.debug("Synthesizing %s as %s", operation.label, key)
            op_refs = OperationTypeRefs(name=key, method=operation.method, path=operation.path)

            for param in operation.parameters:
                location = f"{key}.parameters.{param.name}"
                node = parser.parse(param.schema, location)
                op_refs.parameters.append(
                    ParameterRef(
                        name=param.name,
                        location=param.location,
                        required=param.required,
                        type=types.synthesize(node, location),
                        validator=validators.synthesize(node, location),
                    )
                )

            if operation.request_body is not None:
                location = f"{key}.requestBody"
                node = parser.parse(operation.request_body, location)
                preferred = (
                    f"{key}{self.config.request_name_suffix}"
                    if self.config.name_request_bodies
                    else None
                )
                op_refs.request_body = types.synthesize(node, location, preferred_name=preferred)
                op_refs.request_body_validator = validators.synthesize(node, location)
                op_refs.request_body_required = operation.request_body_required

            raw_response = operation.response_schema()
            if raw_response is not None:
                location = f"{key}.response"
                node = parser.parse(raw_response, location)
                responses.append(
                    ResponseInput(
                        operation=key,
                        default_name=f"{key}{self.config.response_name_suffix}",
                        schema=node,
                        type=types.synthesize_root(node, location),
                        validator=validators.synthesize_root(node, location),
                    )
                )

            refs[key] = op_refs

        context.freeze()
        resolution = ResponseAliasResolver(context).resolve(responses)

        for key, name in resolution.response_names.items():
            refs[key].response = Reference(name)
            refs[key].response_validator = ValidatorRef(name)

        declarations = [Declaration.from_entry(entry) for entry in context.table]
        metadata = {
            "operation_count": len(refs),
            "declaration_count": len(declarations),
            "alias_count": len(resolution.aliases),
            "fallback_names": context.table.fallback_count,
            "component_declarations": sum(
                1 for d in declarations if d.origin == Origin.COMPONENT
            ),
            "response_groups": len(resolution.groups),
            "warning_count": len(context.diagnostics),
            "state": context.state.value,
        }

        logger.info(
            "Synthesized %d operations into %d declarations and %d aliases",
            len(refs),
            len(declarations),
            len(resolution.aliases),
        )
        return SynthesisResult(
            declarations=declarations,
            aliases=resolution.aliases,
            operations=refs,
            warnings=context.diagnostics.to_list(),
            metadata=metadata,
        )


def synthesize_operations(
    operations: Sequence[Union[Operation, Mapping[str, Any]]],
    config: Optional[SynthesisConfig] = None,
    component_names: Union[ComponentNameIndex, Mapping[str, str], None] = None,
) -> SynthesisResult:
    """
    Run synthesis with error handling.

    Args:
        operations: Resolved operations (Operation objects or endpoint dicts)
        config: Synthesis settings
        component_names: Fingerprint -> component name index

    Returns:
        SynthesisResult; on invalid input ``success`` is False and nothing
        else is populated
    """
    try:
        engine = SynthesisEngine(config, component_names)
        return engine.run(operations)
    except (SynthesisError, ConfigError) as e:
        logger.error("Schema synthesis failed: %s", e)
        return SynthesisResult.error(f"Schema synthesis failed: {e}", exception=e)


def synthesize_document(
    document: Mapping[str, Any],
    config: Optional[SynthesisConfig] = None,
) -> SynthesisResult:
    """
    Synthesize a dereferenced OpenAPI document.

    The component name index is built from the document's schema registry,
    so pass a document whose ``components.schemas`` still holds the named
    shapes (its operations may be fully dereferenced).
    """
    config = config or SynthesisConfig()
    try:
        index = ComponentNameIndex.from_document(document)
        operations = operations_from_document(document, config.json_media_types)
    except SynthesisError as e:
        logger.error("Schema synthesis failed: %s", e)
        return SynthesisResult.error(f"Schema synthesis failed: {e}", exception=e)
    return synthesize_operations(operations, config, index)
