"""Operation parsing tests."""

from __future__ import annotations

import pytest
from schema_synth.core.diagnostics import InvalidInputError
from schema_synth.operations import (
    Operation,
    operations_from_document,
    parse_operation,
    parse_operations,
    select_media_schema,
)

STRING = {"type": "string"}


def test_parses_openapi3_endpoint() -> None:
    operation = parse_operation(
        {
            "operationId": "getRepo",
            "method": "get",
            "path": "/repos/{owner}/{repo}",
            "parameters": [
                {"name": "owner", "in": "path", "required": True, "schema": STRING},
                {"name": "page", "in": "query", "schema": {"type": "integer"}},
            ],
            "requestBody": {"required": True, "content": {"application/json": {"schema": STRING}}},
            "responses": {
                "200": {"description": "ok", "content": {"application/json": {"schema": STRING}}},
                "404": {"description": "missing"},
            },
        }
    )

    assert operation.method == "GET"
    assert operation.type_name == "GetRepo"
    assert operation.label == "GET /repos/{owner}/{repo}"
    assert [(p.name, p.location, p.required) for p in operation.parameters] == [
        ("owner", "path", True),
        ("page", "query", False),
    ]
    assert operation.request_body == STRING
    assert operation.request_body_required is True
    assert operation.response_schema() == STRING


def test_name_without_operation_id_uses_method_and_path() -> None:
    operation = Operation(method="get", path="/repos/{owner}/issues")

    assert operation.type_name == "GetReposIssues"


def test_first_successful_status_with_schema_is_the_response() -> None:
    operation = Operation(
        method="POST",
        path="/items",
        responses={"404": {"type": "integer"}, "204": None, "201": STRING, "200": {"type": "boolean"}},
    )

    assert operation.response_schema() == {"type": "boolean"}
    assert Operation(method="DELETE", path="/items", responses={"204": None}).response_schema() is None


def test_media_selection_prefers_json() -> None:
    content = {
        "text/plain": {"schema": {"type": "integer"}},
        "application/vnd.api+json": {"schema": STRING},
    }

    assert select_media_schema(content) == STRING
    assert select_media_schema({"text/csv": {"schema": STRING}}) == STRING
    assert select_media_schema(content, ["text/plain"]) == {"type": "integer"}
    assert select_media_schema({}) is None


def test_swagger2_body_and_primitive_parameters() -> None:
    operation = parse_operation(
        {
            "method": "post",
            "path": "/pets",
            "parameters": [
                {"name": "body", "in": "body", "required": True, "schema": {"type": "object", "properties": {}}},
                {"name": "limit", "in": "query", "type": "integer"},
            ],
            "responses": {"200": {"description": "ok", "schema": STRING}},
        }
    )

    assert operation.request_body == {"type": "object", "properties": {}}
    assert operation.request_body_required is True
    assert [p.name for p in operation.parameters] == ["limit"]
    assert operation.parameters[0].schema == {"type": "integer"}
    assert operation.response_schema() == STRING


@pytest.mark.parametrize(
    "raw",
    [
        {"path": "/x"},
        {"method": "get"},
        {"method": "get", "path": "/x", "parameters": {"name": "a"}},
        {"method": "get", "path": "/x", "parameters": [{"in": "query"}]},
        {"method": "get", "path": "/x", "responses": ["200"]},
        "GET /x",
    ],
)
def test_broken_operation_is_fatal(raw) -> None:
    with pytest.raises(InvalidInputError):
        parse_operation(raw)


def test_operation_list_must_be_a_list() -> None:
    with pytest.raises(InvalidInputError):
        parse_operations({"method": "get", "path": "/x"})


def test_operation_instances_pass_through() -> None:
    operation = Operation(method="GET", path="/x")

    assert parse_operations([operation]) == [operation]


def test_document_walk_merges_path_parameters() -> None:
    document = {
        "openapi": "3.0.0",
        "paths": {
            "/repos/{id}": {
                "parameters": [
                    {"name": "id", "in": "path", "required": True, "schema": STRING},
                    {"name": "trace", "in": "header", "schema": STRING},
                ],
                "get": {
                    "operationId": "getRepo",
                    "parameters": [{"name": "trace", "in": "header", "schema": {"type": "boolean"}}],
                    "responses": {"200": {"content": {"application/json": {"schema": STRING}}}},
                },
                "delete": {"responses": {"204": {"description": "gone"}}},
                "summary": "not an operation",
            }
        },
    }

    get_repo, delete = operations_from_document(document)

    assert get_repo.operation_id == "getRepo"
    assert [(p.name, p.schema) for p in get_repo.parameters] == [
        ("id", STRING),
        ("trace", {"type": "boolean"}),
    ]
    assert delete.type_name == "DeleteRepos"
    assert delete.response_schema() is None
