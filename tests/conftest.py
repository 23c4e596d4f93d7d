"""Conformance fixture loader for casework.

Loads YAML fixtures from tests/fixtures/ and exposes them as parametrized
``fixture_case`` / ``error_fixture`` arguments. Each document declares a
pattern in the config shape (see casework._config) and the values it must
or must not match:

    name: rest capture
    pattern: [1, {rest: null}]
    cases:
      - name: trailing values
        value: [1, 2, 3]
        matched: true
        rest: [2, 3]

Documents with ``expect_error: true`` carry a pattern that parsing or
loading must reject.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pytest
import yaml

from casework import Registry, RegistryBuilder, register_core_matchers
from casework.testing import register

FIXTURE_DIR = Path(__file__).resolve().parent / "fixtures"


@dataclass
class FixtureCase:
    """A single test case from a conformance fixture."""

    fixture_name: str
    case_name: str
    pattern: Any
    value: Any
    matched: bool
    expect: dict[str, Any] = field(default_factory=dict)

    @property
    def id(self) -> str:
        return f"{self.fixture_name}::{self.case_name}"


@dataclass
class ErrorFixture:
    """A pattern that must fail to parse or load."""

    source: str
    name: str
    pattern: Any

    @property
    def id(self) -> str:
        return f"{self.source}::{self.name}"


# ─── Fixture loading ────────────────────────────────────────────────────────

_DIAGNOSTICS = ("rest", "unmatched_keys", "matched_keys", "expected_keys", "values")


def _load_documents() -> list[tuple[str, dict[str, Any]]]:
    """Load every YAML document (files may hold several)."""
    docs: list[tuple[str, dict[str, Any]]] = []
    for yaml_file in sorted(FIXTURE_DIR.glob("*.yaml")):
        with yaml_file.open() as f:
            for doc in yaml.safe_load_all(f):
                if doc is None:
                    continue
                docs.append((yaml_file.name, doc))
    return docs


def load_fixture_cases() -> list[FixtureCase]:
    cases: list[FixtureCase] = []
    for _source, doc in _load_documents():
        if doc.get("expect_error", False):
            continue
        for case in doc["cases"]:
            cases.append(
                FixtureCase(
                    fixture_name=doc["name"],
                    case_name=case["name"],
                    pattern=doc["pattern"],
                    value=case["value"],
                    matched=case["matched"],
                    expect={k: case[k] for k in _DIAGNOSTICS if k in case},
                )
            )
    return cases


def load_error_fixtures() -> list[ErrorFixture]:
    return [
        ErrorFixture(source=source, name=doc["name"], pattern=doc["pattern"])
        for source, doc in _load_documents()
        if doc.get("expect_error", False)
    ]


def pytest_generate_tests(metafunc: pytest.Metafunc) -> None:
    if "fixture_case" in metafunc.fixturenames:
        cases = load_fixture_cases()
        metafunc.parametrize("fixture_case", cases, ids=[c.id for c in cases])
    if "error_fixture" in metafunc.fixturenames:
        errors = load_error_fixtures()
        metafunc.parametrize("error_fixture", errors, ids=[e.id for e in errors])


@pytest.fixture
def registry() -> Registry:
    """Registry with the core matchers and the test domain."""
    return register(register_core_matchers(RegistryBuilder())).build()
