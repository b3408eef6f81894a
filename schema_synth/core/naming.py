"""
Naming utilities for synthesized type names.

Handles case conversion of operation identifiers into type names and numeric
disambiguation when two different shapes want the same name.
"""

import re
from enum import Enum
from typing import Callable, Dict


class NamingCase(Enum):
    """Different naming case styles."""
    SNAKE_CASE = "snake"      # user_name
    CAMEL_CASE = "camel"      # userName
    PASCAL_CASE = "pascal"    # UserName


class NameSanitizer:
    """Turns free-form identifiers into safe type names."""

    def __init__(self):
        self._name_cache: Dict[str, str] = {}

    def sanitize_name(self, name: str, target_case: NamingCase = NamingCase.PASCAL_CASE) -> str:
        """
        Sanitize a name and convert it to the target case.

        Args:
            name: Original identifier (operationId, path fragment, ...)
            target_case: Desired case style

        Returns:
            Sanitized name
        """
        cache_key = f"{name}_{target_case.value}"
        if cache_key in self._name_cache:
            return self._name_cache[cache_key]

        cleaned = self._clean_basic(name)
        converted = self._convert_case(cleaned, target_case)
        if converted and converted[0].isdigit():
            converted = f"_{converted}"

        self._name_cache[cache_key] = converted
        return converted

    def _clean_basic(self, name: str) -> str:
        """Basic name cleanup - remove invalid characters."""
        cleaned = re.sub(r'[^a-zA-Z0-9_]', '_', name)
        cleaned = cleaned.strip('_')

        if not cleaned:
            cleaned = "anonymous"

        return cleaned

    def _convert_case(self, name: str, target_case: NamingCase) -> str:
        if target_case == NamingCase.SNAKE_CASE:
            return self._to_snake_case(name)
        elif target_case == NamingCase.CAMEL_CASE:
            return self._to_camel_case(name)
        elif target_case == NamingCase.PASCAL_CASE:
            return self._to_pascal_case(name)
        return name

    def _to_snake_case(self, name: str) -> str:
        """Convert to snake_case."""
        name = re.sub(r'([a-z0-9])([A-Z])', r'\1_\2', name)
        name = re.sub(r'([A-Z]+)([A-Z][a-z])', r'\1_\2', name)
        name = name.lower()
        name = re.sub(r'_+', '_', name)
        return name.strip('_')

    def _to_camel_case(self, name: str) -> str:
        """Convert to camelCase."""
        parts = self._to_snake_case(name).split('_')
        return parts[0] + ''.join(part.capitalize() for part in parts[1:])

    def _to_pascal_case(self, name: str) -> str:
        """Convert to PascalCase."""
        parts = self._to_snake_case(name).split('_')
        return ''.join(part.capitalize() for part in parts if part)


def disambiguate(name: str, is_taken: Callable[[str], bool], separator: str = "") -> str:
    """
    Return ``name`` or the first ``name<sep><n>`` (n >= 2) that is not taken.

    Args:
        name: Desired name
        is_taken: Predicate telling whether a candidate is already used
        separator: Inserted between the name and the numeric suffix

    Returns:
        A name for which ``is_taken`` is False
    """
    if not is_taken(name):
        return name

    counter = 2
    candidate = f"{name}{separator}{counter}"
    while is_taken(candidate):
        counter += 1
        candidate = f"{name}{separator}{counter}"
    return candidate


_default_sanitizer = NameSanitizer()


def to_type_name(name: str) -> str:
    """Convert an identifier to a PascalCase type name."""
    return _default_sanitizer.sanitize_name(name, NamingCase.PASCAL_CASE)
