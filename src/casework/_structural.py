"""Structural matchers — sequences and keyed records.

match_array walks one Cursor over the input, so lazy sources are read at
most once per position and quantifiers can backtrack. match_object checks
each expected key with exactly one read of the input, and reports sorted
diagnostics when the shapes disagree.

Element patterns are resolved with build_matcher() at construction time,
never per call.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, ClassVar

from casework._cache import MISSING, is_record, lookup, record_keys
from casework._cursor import Cursor, as_cursor, consume_one
from casework._matcher import build_matcher
from casework._quantifiers import rest
from casework._result import Matched, Result, Unmatched

_NOT_SEQUENCES = (str, bytes, bytearray, Mapping)


def is_sequence_like(value: Any) -> bool:
    """Iterable, and not a string or a record."""
    if isinstance(value, Cursor):
        return True
    return isinstance(value, Iterable) and not isinstance(value, _NOT_SEQUENCES)


def _sorted_keys(keys: Iterable[Any]) -> tuple[str, ...]:
    return tuple(sorted(keys, key=str))


@dataclass(frozen=True, slots=True)
class ArrayMatcher:
    """Match a sequence element by element.

    - Without ``expected``: any sequence, materialized to a list unless it
      already is a list or tuple
    - With ``expected``: one pattern per position (quantifiers may take
      more or fewer); leftover input fails the match
    - ``rest`` ends matching early and binds the remaining elements to the
      ``rest`` field

    INV: at most one element past the expected length is pulled from a lazy
    source.
    """

    expected: tuple[Any, ...] | None = None
    _matchers: tuple[Any, ...] = field(init=False, repr=False)
    is_matcher: ClassVar[bool] = True

    def __post_init__(self) -> None:
        matchers: tuple[Any, ...] = ()
        if self.expected is not None:
            object.__setattr__(self, "expected", tuple(self.expected))
            matchers = tuple(build_matcher(p) for p in self.expected)
        object.__setattr__(self, "_matchers", matchers)

    def __call__(self, value: Any, /) -> Result[Any]:
        if not is_sequence_like(value):
            return Unmatched(expected=self.expected, type_name=type(value).__name__)
        if self.expected is None:
            return Matched(_materialize(value), results=())

        cursor = as_cursor(value)
        start = cursor.now
        results: list[Result[Any]] = []
        for matcher in self._matchers:
            if matcher is rest:
                remaining = cursor.drain()
                return Matched(
                    _bound(value, cursor, start), results=tuple(results), rest=remaining
                )
            result = consume_one(matcher, cursor)
            if not result.matched:
                return Unmatched(expected=self.expected, failed=result)
            results.append(result)

        _, done = cursor.next()
        if not done:
            return Unmatched(expected=self.expected)
        return Matched(_bound(value, cursor, start), results=tuple(results))


def _materialize(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return value
    if isinstance(value, Cursor):
        return value.drain()
    return list(value)


def _bound(value: Any, cursor: Cursor[Any], start: int) -> Any:
    # Concrete sequences bind themselves; lazy ones bind what was read.
    if isinstance(value, (list, tuple)):
        return value
    return cursor.history(start)


@dataclass(frozen=True, slots=True)
class ObjectMatcher:
    """Match a keyed record key by key.

    Every expected key must be present and match. Input keys no pattern
    claims go to the rest sub-record when a key maps to ``rest``; otherwise
    they fail the match. Failures report ``expected_keys``,
    ``matched_keys`` and ``unmatched_keys``, each sorted.

    The record is bound as given: under an alternation that is the caching
    wrapper, so guards and mappers read the same memoized values.
    """

    expected: Mapping[Any, Any] | None = None
    _matchers: tuple[tuple[Any, Any], ...] = field(init=False, repr=False)
    _rest_key: Any = field(init=False, repr=False)
    _claimed: frozenset[Any] = field(init=False, repr=False)
    is_matcher: ClassVar[bool] = True

    def __post_init__(self) -> None:
        matchers: list[tuple[Any, Any]] = []
        rest_key = None
        for key, pattern in (self.expected or {}).items():
            matcher = build_matcher(pattern)
            if matcher is rest:
                rest_key = key
                continue
            matchers.append((key, matcher))
        object.__setattr__(self, "_matchers", tuple(matchers))
        object.__setattr__(self, "_rest_key", rest_key)
        object.__setattr__(self, "_claimed", frozenset(k for k, _ in matchers))

    @property
    def rest_key(self) -> Any:
        return self._rest_key

    def __call__(self, value: Any, /) -> Result[Any]:
        if not is_record(value):
            return Unmatched(expected=self.expected, type_name=type(value).__name__)
        if self.expected is None:
            return Matched(value, results={})

        results: dict[Any, Result[Any]] = {}
        unmatched_keys: list[Any] = []
        for key, matcher in self._matchers:
            found = lookup(value, key)
            if found is MISSING:
                unmatched_keys.append(key)
                continue
            result = matcher(found)
            if not result.matched:
                unmatched_keys.append(key)
                continue
            results[key] = result

        rest_record: dict[Any, Any] = {}
        for key in record_keys(value):
            if key in self._claimed:
                continue
            if self._rest_key is None:
                unmatched_keys.append(key)
            else:
                rest_record[key] = lookup(value, key)

        if unmatched_keys:
            return Unmatched(
                expected=self.expected,
                expected_keys=_sorted_keys(self.expected),
                matched_keys=_sorted_keys(results),
                unmatched_keys=_sorted_keys(unmatched_keys),
                rest_key=self._rest_key,
            )
        if self._rest_key is None:
            return Matched(value, results=results)
        results[self._rest_key] = Matched(rest_record)
        return Matched(value, results=results, rest=rest_record)


def match_array(expected: Iterable[Any] | None = None) -> ArrayMatcher:
    """Match sequences, optionally element by element against ``expected``."""
    return ArrayMatcher(None if expected is None else tuple(expected))


def match_object(expected: Mapping[Any, Any] | None = None) -> ObjectMatcher:
    """Match keyed records, optionally key by key against ``expected``."""
    return ObjectMatcher(expected)
