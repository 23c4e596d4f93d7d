"""Property-based tests for matcher invariants."""

from __future__ import annotations

from hypothesis import given
from hypothesis import strategies as st

from casework import (
    Cursor,
    build_matcher,
    match_array,
    match_object,
    maybe,
    one_of,
    rest,
    some,
)
from casework.testing import CountingIterator, expect_matched, expect_unmatched

scalars = st.one_of(
    st.none(), st.booleans(), st.integers(), st.text(max_size=8)
)
patterns = st.recursive(
    scalars,
    lambda children: st.one_of(
        st.lists(children, max_size=4),
        st.dictionaries(st.text(max_size=4), children, max_size=4),
    ),
    max_leaves=12,
)
keys = st.text(alphabet="abcdefgh", min_size=1, max_size=3)


class TestNormalization:
    @given(patterns)
    def test_build_matcher_idempotent(self, pattern: object) -> None:
        m = build_matcher(pattern)
        assert build_matcher(m) is m
        assert build_matcher(pattern) == m

    @given(patterns)
    def test_pattern_matches_itself(self, pattern: object) -> None:
        assert build_matcher(pattern)(pattern).matched


class TestSequences:
    @given(st.lists(st.integers(), max_size=10), st.integers(0, 10))
    def test_rest_captures_suffix(self, values: list[int], split: int) -> None:
        split = min(split, len(values))
        r = expect_matched(match_array([*values[:split], rest])(values))
        assert r.rest == values[split:]
        assert r.value is values

    @given(st.lists(st.integers(), min_size=1, max_size=10))
    def test_exact_length(self, values: list[int]) -> None:
        m = match_array(values)
        assert m(values).matched
        expect_unmatched(m(values[:-1]))
        expect_unmatched(m([*values, 0]))

    @given(st.integers(0, 6), st.integers(0, 6))
    def test_maybe_some_split(self, ones: int, twos: int) -> None:
        values = [1] * ones + [2] * twos
        m = match_array([maybe(some(1)), some(2)])
        r = m(values)
        assert r.matched is (twos > 0)

    @given(st.lists(st.integers(0, 3), max_size=12))
    def test_lazy_source_pulled_at_most_once(self, values: list[int]) -> None:
        source = CountingIterator(values)
        m = one_of(
            match_array([some(0), rest]),
            match_array([maybe(1), some(2), rest]),
            match_array([rest]),
        )
        assert m(source).matched
        assert source.pulls == len(values)

    @given(st.lists(st.integers(), max_size=10), st.data())
    def test_cursor_replay(self, values: list[int], data: st.DataObject) -> None:
        source = CountingIterator(values)
        cursor = Cursor(source)
        first = cursor.drain()
        cursor.jump(data.draw(st.integers(0, len(values))))
        start = cursor.now
        assert cursor.drain() == first[start:]
        assert source.pulls == len(values)


class TestRecords:
    @given(
        st.dictionaries(keys, st.integers(), max_size=6),
        st.dictionaries(keys, st.integers(), max_size=6),
    )
    def test_rest_collects_unclaimed(
        self, claimed: dict[str, int], extra: dict[str, int]
    ) -> None:
        value = {**extra, **claimed}
        r = expect_matched(match_object({**claimed, "_rest": rest})(value))
        assert r.rest == {k: v for k, v in value.items() if k not in claimed}

    @given(
        st.dictionaries(keys, st.integers(0, 2), max_size=6),
        st.dictionaries(keys, st.integers(0, 2), max_size=6),
    )
    def test_diagnostics_sorted(
        self, expected: dict[str, int], value: dict[str, int]
    ) -> None:
        r = match_object(expected)(value)
        if r.matched:
            assert value == expected
            return
        for field in (r.expected_keys, r.matched_keys, r.unmatched_keys):
            assert list(field) == sorted(field)
        assert set(r.matched_keys) | set(r.unmatched_keys) == set(expected) | set(value)
