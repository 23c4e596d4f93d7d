"""Evaluation benchmarks for casework.

Measures hot-path matching against concrete and lazy inputs, including
backtracking quantifiers and cached alternation over impure records.

Run: uv run pytest tests/bench/test_bench_evaluate.py --benchmark-only
"""

from __future__ import annotations

from casework import (
    defined,
    greater_than,
    group,
    match,
    match_array,
    match_object,
    maybe,
    one_of,
    otherwise,
    rest,
    some,
    when,
)

# ── Fixtures ─────────────────────────────────────────────────────────────────

RESPONSE = {
    "status": 200,
    "headers": [
        {"name": "cookie", "value": "om"},
        {"name": "accept", "value": "everybody"},
    ],
    "body": "hello",
}

RESPONSE_PATTERN = match_object(
    {
        "status": 200,
        "headers": [{"name": "cookie", "value": defined}, rest],
        "others": rest,
    }
)


class Reading:
    """Record with a computed property, read through the cache."""

    def __init__(self, raw: int) -> None:
        self._raw = raw

    @property
    def value(self) -> int:
        return self._raw * 2


# ── Structural ───────────────────────────────────────────────────────────────


def test_bench_evaluate_object_hit(benchmark):
    benchmark(RESPONSE_PATTERN, RESPONSE)


def test_bench_evaluate_object_miss(benchmark):
    benchmark(RESPONSE_PATTERN, {**RESPONSE, "status": 404})


def test_bench_evaluate_array_exact(benchmark):
    m = match_array(list(range(32)))
    value = list(range(32))
    benchmark(m, value)


# ── Quantifiers over lazy sources ────────────────────────────────────────────


def test_bench_evaluate_some_generator(benchmark):
    m = match_array([some(1), 2, rest])

    def go():
        return m(x for x in [1] * 64 + [2, 3])

    benchmark(go)


def test_bench_evaluate_maybe_group_backtrack(benchmark):
    m = match_array([maybe("x"), some(group("a", "b")), "a", rest])
    value = ["a", "b"] * 16 + ["a", "c"]
    benchmark(m, value)


# ── Alternation ──────────────────────────────────────────────────────────────


def test_bench_evaluate_one_of_records(benchmark):
    m = one_of(
        when({"value": greater_than(100)}, lambda _: "high"),
        when({"value": greater_than(10)}, lambda _: "mid"),
        otherwise(lambda _: "low"),
    )
    benchmark(m, Reading(7))


def test_bench_evaluate_match_driver(benchmark):
    person = {"role": "student"}

    def go():
        return match(
            person,
            when({"role": "professor", "surname": defined}, lambda p: p["surname"]),
            when({"role": "student"}, lambda _: "student"),
            otherwise(lambda _: "stranger"),
        )

    benchmark(go)
