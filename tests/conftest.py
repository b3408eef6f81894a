"""Shared fixtures for schema synthesis tests."""

from __future__ import annotations

import copy
import logging
from typing import Any, Dict

import pytest
from schema_synth.core.context import SynthesisContext
from schema_synth.core.schema import SchemaParser
from schema_synth.core.synthesizer import TypeSynthesizer
from schema_synth.core.validators import ValidatorSynthesizer
from schema_synth.logging_config import PACKAGE_LOGGER

OWNER: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "login": {"type": "string"},
        "id": {"type": "integer"},
        "type": {"type": "string"},
    },
    "required": ["login", "id"],
}

REPOSITORY: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "id": {"type": "integer"},
        "name": {"type": "string"},
        "full_name": {"type": "string"},
        "private": {"type": "boolean"},
        "stars": {"type": "number"},
    },
    "required": ["id", "name", "full_name"],
}


@pytest.fixture
def context() -> SynthesisContext:
    return SynthesisContext()


@pytest.fixture
def parser(context: SynthesisContext) -> SchemaParser:
    return SchemaParser(context.diagnostics)


@pytest.fixture
def types(context: SynthesisContext) -> TypeSynthesizer:
    return TypeSynthesizer(context)


@pytest.fixture
def validators(types: TypeSynthesizer) -> ValidatorSynthesizer:
    return types.validators


@pytest.fixture
def owner_schema() -> Dict[str, Any]:
    return copy.deepcopy(OWNER)


@pytest.fixture
def repository_schema() -> Dict[str, Any]:
    return copy.deepcopy(REPOSITORY)


@pytest.fixture(autouse=True)
def _restore_package_logger():
    logger = logging.getLogger(PACKAGE_LOGGER)
    handlers = list(logger.handlers)
    level = logger.level
    propagate = logger.propagate
    yield
    logger.handlers = handlers
    logger.setLevel(level)
    logger.propagate = propagate
