"""Config conformance tests for casework.

Runs the YAML fixtures in tests/fixtures/ through the full config path:
parse_pattern_config() → Registry.load_pattern() → Matcher → Result.

Run with: uv run pytest tests/test_config_conformance.py -v
"""

from __future__ import annotations

import pytest

from casework import ConfigParseError, MatcherError, Registry, parse_pattern_config


def test_config_positive(fixture_case, registry: Registry) -> None:  # noqa: ANN001
    """Positive fixture: the loaded pattern must agree with every case."""
    matcher = registry.load_pattern(parse_pattern_config(fixture_case.pattern))
    result = matcher(fixture_case.value)

    assert result.matched is fixture_case.matched, (
        f"Fixture '{fixture_case.fixture_name}' case '{fixture_case.case_name}': "
        f"expected matched={fixture_case.matched}, got {result!r}"
    )
    expect = fixture_case.expect
    if "rest" in expect:
        assert result.rest == expect["rest"]
    if "values" in expect:
        assert [r.value for r in result.results] == expect["values"]
    for key in ("expected_keys", "matched_keys", "unmatched_keys"):
        if key in expect:
            assert getattr(result, key) == tuple(expect[key])


def test_config_error(error_fixture, registry: Registry) -> None:  # noqa: ANN001
    """Error fixture: either parse or load must fail."""
    try:
        config = parse_pattern_config(error_fixture.pattern)
    except ConfigParseError:
        return

    with pytest.raises(MatcherError):
        registry.load_pattern(config)
