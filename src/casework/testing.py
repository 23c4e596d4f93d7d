"""Test utilities for casework.

Assertion helpers that unwrap results, a pull-counting iterator for checking
that lazy sources are read at most once per position, and a small test-domain
matcher set for config fixtures. These are NOT part of the matching API.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from casework._matcher import match_predicate

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from casework._registry import RegistryBuilder
    from casework._result import Matched, Result, Unmatched


def expect_matched(result: Result[Any]) -> Matched[Any]:
    """Assert ``result`` matched and return it.

    >>> from casework import equals
    >>> from casework.testing import expect_matched
    >>> expect_matched(equals(1)(1)).value
    1
    """
    assert result.matched, f"expected a match, got {result!r}"
    return result  # type: ignore[return-value]


def expect_unmatched(result: Result[Any]) -> Unmatched:
    """Assert ``result`` did not match and return it."""
    assert not result.matched, f"expected no match, got {result!r}"
    return result  # type: ignore[return-value]


class CountingIterator[T]:
    """One-pass iterator that counts how many values were pulled."""

    def __init__(self, values: Iterable[T]) -> None:
        self._values: Iterator[T] = iter(values)
        self.pulls = 0

    def __iter__(self) -> CountingIterator[T]:
        return self

    def __next__(self) -> T:
        value = next(self._values)
        self.pulls += 1
        return value


def register(builder: RegistryBuilder) -> RegistryBuilder:
    """Register the test-domain matchers.

    Names: ``even`` (no args), ``length`` (args: ``{"length": n}``).
    """
    return builder.matcher("even", _even_factory).matcher("length", _length_factory)


def _even_factory(args: dict[str, Any]) -> Any:
    if args:
        msg = "even takes no args"
        raise ValueError(msg)
    return match_predicate(lambda v: isinstance(v, int) and v % 2 == 0)


def _length_factory(args: dict[str, Any]) -> Any:
    length = args.get("length")
    if not isinstance(length, int):
        msg = "length requires a 'length' field (int)"
        raise ValueError(msg)
    return match_predicate(lambda v: hasattr(v, "__len__") and len(v) == length)
