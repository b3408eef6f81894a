"""Operation model and parsing of resolved operation lists.

Input comes from an upstream loader that has already dereferenced the API
document. Two shapes are accepted: a flat list of endpoint dicts
(``{"operationId", "method", "path", "parameters", "requestBody",
"responses"}``) or a whole OpenAPI 3.x / Swagger 2.0 document whose ``paths``
are walked here.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

from .core.diagnostics import InvalidInputError
from .core.naming import to_type_name
from .logging_config import get_logger

logger = get_logger(__name__)

HTTP_METHODS = ("get", "post", "put", "patch", "delete", "head", "options", "trace")

DEFAULT_MEDIA_TYPES = ("application/json",)


@dataclass
class Parameter:
    """A path, query, header or cookie parameter."""

    name: str
    location: str = "query"
    required: bool = False
    schema: Any = None
    description: Optional[str] = None


@dataclass
class Operation:
    """One API operation with raw (dereferenced) schemas."""

    method: str
    path: str
    operation_id: Optional[str] = None
    summary: Optional[str] = None
    parameters: List[Parameter] = field(default_factory=list)
    request_body: Any = None
    request_body_required: bool = False
    # status code -> response schema (None for no content)
    responses: Dict[str, Any] = field(default_factory=dict)

    @property
    def type_name(self) -> str:
        """PascalCase base name for types derived from this operation."""
        if self.operation_id:
            return to_type_name(self.operation_id)

        segments = [s for s in self.path.split("/") if s and not s.startswith("{")]
        return to_type_name("_".join([self.method.lower()] + segments))

    @property
    def label(self) -> str:
        return f"{self.method.upper()} {self.path}"

    def response_schema(self) -> Any:
        """Schema of the first 2xx response that has one, or None."""
        for status in sorted(self.responses):
            if str(status).startswith("2") and self.responses[status] is not None:
                return self.responses[status]
        return None


def select_media_schema(
    content: Any, media_types: Sequence[str] = DEFAULT_MEDIA_TYPES
) -> Any:
    """
    Pick the schema from a ``content`` map.

    Preference: the configured media types in order, then any JSON-like
    media type, then the first entry.
    """
    if not isinstance(content, Mapping) or not content:
        return None

    for media_type in media_types:
        if media_type in content:
            return _media_schema(content[media_type])

    for media_type, entry in content.items():
        if media_type.endswith("+json") or "json" in media_type:
            return _media_schema(entry)

    return _media_schema(next(iter(content.values())))


def _media_schema(entry: Any) -> Any:
    # OpenAPI 3 wraps the schema in a media type object; flattened inputs do not.
    if isinstance(entry, Mapping) and "schema" in entry:
        return entry["schema"]
    return entry


def parse_operation(
    raw: Mapping[str, Any], media_types: Sequence[str] = DEFAULT_MEDIA_TYPES
) -> Operation:
    """
    Build an Operation from a resolved endpoint dict.

    Raises:
        InvalidInputError: If the endpoint has no method or path
    """
    if not isinstance(raw, Mapping):
        raise InvalidInputError(f"Operation must be a mapping, got {type(raw).__name__}")

    method = raw.get("method")
    path = raw.get("path")
    if not isinstance(method, str) or not isinstance(path, str):
        raise InvalidInputError(f"Operation needs a string method and path: {raw!r:.120}")

    raw_parameters = raw.get("parameters") or []
    if not isinstance(raw_parameters, list):
        raise InvalidInputError(f"Parameters of {method.upper()} {path} must be a list")

    parameters = []
    request_body = None
    request_body_required = False

    for param in raw_parameters:
        if not isinstance(param, Mapping) or not isinstance(param.get("name"), str):
            raise InvalidInputError(f"Malformed parameter in {method.upper()} {path}: {param!r:.80}")
        location = param.get("in", "query")
        if location == "body":
            # Swagger 2.0 body parameter
            request_body = param.get("schema", {})
            request_body_required = bool(param.get("required", False))
            continue
        schema = param.get("schema")
        if schema is None and "type" in param:
            schema = {k: v for k, v in param.items() if k in ("type", "items", "enum", "nullable")}
        parameters.append(
            Parameter(
                name=param["name"],
                location=location,
                required=bool(param.get("required", False)),
                schema=schema if schema is not None else {},
                description=param.get("description"),
            )
        )

    body = raw.get("requestBody")
    if isinstance(body, Mapping):
        request_body = select_media_schema(body.get("content"), media_types)
        request_body_required = bool(body.get("required", False))

    responses: Dict[str, Any] = {}
    raw_responses = raw.get("responses") or {}
    if not isinstance(raw_responses, Mapping):
        raise InvalidInputError(f"Responses of {method.upper()} {path} must be a mapping")

    for status, response in raw_responses.items():
        schema = None
        if isinstance(response, Mapping):
            if "content" in response:
                schema = select_media_schema(response.get("content"), media_types)
            elif "schema" in response:
                schema = response["schema"]
        responses[str(status)] = schema

    return Operation(
        method=method.upper(),
        path=path,
        operation_id=raw.get("operationId"),
        summary=raw.get("summary") or raw.get("description"),
        parameters=parameters,
        request_body=request_body,
        request_body_required=request_body_required,
        responses=responses,
    )


def parse_operations(
    raw_operations: Any, media_types: Sequence[str] = DEFAULT_MEDIA_TYPES
) -> List[Operation]:
    """
    Parse a resolved operation list.

    Items that are already Operation instances are passed through.

    Raises:
        InvalidInputError: If the list or any operation is structurally broken
    """
    if not isinstance(raw_operations, (list, tuple)):
        raise InvalidInputError(
            f"Operation list must be a list, got {type(raw_operations).__name__}"
        )

    operations = []
    for raw in raw_operations:
        if isinstance(raw, Operation):
            operations.append(raw)
        else:
            operations.append(parse_operation(raw, media_types))

    logger.debug("Parsed %d operations", len(operations))
    return operations


def operations_from_document(
    document: Mapping[str, Any], media_types: Sequence[str] = DEFAULT_MEDIA_TYPES
) -> List[Operation]:
    """
    Walk ``paths`` of a dereferenced OpenAPI 3.x or Swagger 2.0 document.

    Path-level parameters are merged into each operation; operation-level
    parameters with the same name and location win.
    """
    if not isinstance(document, Mapping):
        raise InvalidInputError("API document must be a mapping")

    paths = document.get("paths") or {}
    if not isinstance(paths, Mapping):
        raise InvalidInputError("'paths' must be a mapping")

    operations = []
    for path, path_item in paths.items():
        if not isinstance(path_item, Mapping):
            continue

        shared = path_item.get("parameters") or []
        for method in HTTP_METHODS:
            operation = path_item.get(method)
            if not isinstance(operation, Mapping):
                continue

            own = operation.get("parameters") or []
            own_keys = {(p.get("name"), p.get("in")) for p in own if isinstance(p, Mapping)}
            merged = [
                p for p in shared
                if isinstance(p, Mapping) and (p.get("name"), p.get("in")) not in own_keys
            ] + list(own)

            raw = dict(operation)
            raw.update({"method": method, "path": path, "parameters": merged})
            operations.append(parse_operation(raw, media_types))

    logger.info("Collected %d operations from document", len(operations))
    return operations
