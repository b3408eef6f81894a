"""Naming utility tests."""

from __future__ import annotations

import pytest
from schema_synth.core.naming import NameSanitizer, NamingCase, disambiguate, to_type_name


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("getRepo", "GetRepo"),
        ("list_repos", "ListRepos"),
        ("listHTTPThings", "ListHttpThings"),
        ("repos.get-by-id", "ReposGetById"),
        ("2fa_setup", "_2faSetup"),
        ("", "Anonymous"),
    ],
)
def test_to_type_name(raw: str, expected: str) -> None:
    assert to_type_name(raw) == expected


def test_sanitizer_case_styles() -> None:
    sanitizer = NameSanitizer()

    assert sanitizer.sanitize_name("UserName", NamingCase.SNAKE_CASE) == "user_name"
    assert sanitizer.sanitize_name("user_name", NamingCase.CAMEL_CASE) == "userName"
    assert sanitizer.sanitize_name("user-name", NamingCase.PASCAL_CASE) == "UserName"


def test_disambiguate_appends_first_free_suffix() -> None:
    taken = {"Repo", "Repo2"}

    assert disambiguate("Owner", taken.__contains__) == "Owner"
    assert disambiguate("Repo", taken.__contains__) == "Repo3"
    assert disambiguate("Repo", {"Repo"}.__contains__, "_") == "Repo_2"
