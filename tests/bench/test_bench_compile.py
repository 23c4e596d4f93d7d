"""Construction benchmarks for casework.

Measures the cost of normalizing declarative patterns into matchers:
literals, regexes, nested structures and quantifier trees.

Run: uv run pytest tests/bench/test_bench_compile.py --benchmark-only
"""

from __future__ import annotations

from casework import (
    build_matcher,
    defined,
    group,
    match_array,
    match_object,
    match_regexp,
    maybe,
    one_of,
    rest,
    some,
)

# ── Primitive construction ───────────────────────────────────────────────────


def test_bench_compile_literal(benchmark):
    benchmark(build_matcher, "alice")


def test_bench_compile_regex(benchmark):
    benchmark(match_regexp, r"^/api/v\d+/users$")


def test_bench_compile_idempotent(benchmark):
    built = build_matcher({"a": [1, 2, 3]})
    benchmark(build_matcher, built)


# ── Structural construction ──────────────────────────────────────────────────


def test_bench_compile_flat_array(benchmark):
    pattern = list(range(32))
    benchmark(match_array, pattern)


def test_bench_compile_nested_object(benchmark):
    pattern = {
        "status": 200,
        "headers": [{"name": "cookie", "value": defined}, rest],
        "body": {"items": [..., ...], "next": None},
        "others": rest,
    }
    benchmark(match_object, pattern)


def test_bench_compile_quantifier_tree(benchmark):
    def go():
        return match_array(
            [maybe(group("alice", "fred")), some(one_of("bob", "eve")), rest]
        )

    benchmark(go)
