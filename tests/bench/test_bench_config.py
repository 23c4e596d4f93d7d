"""Config-path benchmarks for casework.

Measures the cost of JSON config → Registry → Matcher construction, and
compares config-loaded evaluation against directly-built evaluation.

Run: uv run pytest tests/bench/test_bench_config.py --benchmark-only
"""

from __future__ import annotations

import json

from casework import (
    RegistryBuilder,
    between,
    defined,
    match_object,
    parse_pattern_config,
    register_core_matchers,
    rest,
)

# ── Shared JSON configs ──────────────────────────────────────────────────────

SIMPLE_CONFIG = json.dumps({"object": {"role": "admin"}})

RESPONSE_CONFIG = json.dumps(
    {
        "object": {
            "status": {"matcher": "between", "args": {"lower": 200, "upper": 300}},
            "headers": [
                {"object": {"name": "cookie", "value": {"matcher": "defined"}}},
                {"rest": None},
            ],
            "others": {"rest": None},
        }
    }
)

QUANTIFIER_CONFIG = json.dumps(
    [{"maybe": {"group": ["alice", "fred"]}}, {"some": "bob"}, {"rest": None}]
)

RESPONSE = {
    "status": 200,
    "headers": [{"name": "cookie", "value": "om"}],
    "body": "hello",
}


# ── Registry construction ────────────────────────────────────────────────────


def _build_registry():
    return register_core_matchers(RegistryBuilder()).build()


def test_bench_config_registry_build(benchmark):
    """One-time registry construction cost."""
    benchmark(_build_registry)


# ── Config loading: JSON → parse → Registry → Matcher ────────────────────────


def test_bench_config_load_simple(benchmark):
    registry = _build_registry()

    def go():
        return registry.load_pattern(parse_pattern_config(json.loads(SIMPLE_CONFIG)))

    benchmark(go)


def test_bench_config_load_response(benchmark):
    registry = _build_registry()

    def go():
        return registry.load_pattern(parse_pattern_config(json.loads(RESPONSE_CONFIG)))

    benchmark(go)


def test_bench_config_load_quantifiers(benchmark):
    registry = _build_registry()

    def go():
        return registry.load_pattern(
            parse_pattern_config(json.loads(QUANTIFIER_CONFIG))
        )

    benchmark(go)


# ── Evaluation parity ────────────────────────────────────────────────────────


def test_bench_config_evaluate_response(benchmark):
    """Evaluate a config-loaded matcher."""
    registry = _build_registry()
    matcher = registry.load_pattern(parse_pattern_config(json.loads(RESPONSE_CONFIG)))
    benchmark(matcher, RESPONSE)


def test_bench_direct_evaluate_response(benchmark):
    """Evaluate a directly-built matcher (baseline)."""
    matcher = match_object(
        {
            "status": between(200, 300),
            "headers": [{"name": "cookie", "value": defined}, rest],
            "others": rest,
        }
    )
    benchmark(matcher, RESPONSE)
