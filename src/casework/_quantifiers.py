"""Quantifier combinators — maybe, group, some and the rest marker.

Quantifiers are sequence matchers: they read from the Cursor a structural
matcher supplies and compose purely through checkpoint discipline. Each one
takes ``cursor.now`` before a speculative attempt and jumps back when the
attempt fails; none needs to know about any other's internals.

    match_array([maybe(group("alice", "fred")), some(1), rest])

Called with a plain value (rather than a Cursor) they raise
MarkerMatcherError: a quantifier has no meaning outside a sequence.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar

from loguru import logger

from casework._cursor import Cursor, consume_one
from casework._matcher import MarkerMatcherError, ZeroAdvanceError, build_matcher
from casework._result import Matched, Result, Unmatched

_SEQUENCE_CONTEXT = "match_array or another cursor-consuming quantifier"


def _require_cursor(name: str, value: Any) -> Cursor[Any]:
    if not isinstance(value, Cursor):
        logger.warning(
            "casework.marker.misuse marker={} value_type={}",
            name,
            type(value).__name__,
        )
        raise MarkerMatcherError(name, _SEQUENCE_CONTEXT)
    return value


@dataclass(frozen=True, slots=True)
class Maybe:
    """Zero or one occurrence of ``pattern``. Never fails.

    A failed attempt (or end of input) rewinds the cursor and binds None.
    """

    pattern: Any
    _matcher: Any = field(init=False, repr=False)
    is_matcher: ClassVar[bool] = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "_matcher", build_matcher(self.pattern))

    def __call__(self, value: Any, /) -> Result[Any]:
        return self.consume(_require_cursor("maybe", value))

    def consume(self, cursor: Cursor[Any], /) -> Result[Any]:
        start = cursor.now
        result = consume_one(self._matcher, cursor)
        if result.matched:
            return result
        cursor.jump(start)
        return Matched(None)


@dataclass(frozen=True, slots=True)
class Group:
    """Every pattern, in order, against consecutive positions.

    Binds the list of sub-values. A failure leaves the cursor where the
    failing pattern stopped; rewinding is the enclosing quantifier's job.
    """

    patterns: tuple[Any, ...]
    _matchers: tuple[Any, ...] = field(init=False, repr=False)
    is_matcher: ClassVar[bool] = True

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "_matchers", tuple(build_matcher(p) for p in self.patterns)
        )

    def __call__(self, value: Any, /) -> Result[Any]:
        return self.consume(_require_cursor("group", value))

    def consume(self, cursor: Cursor[Any], /) -> Result[Any]:
        results: list[Result[Any]] = []
        for matcher in self._matchers:
            result = consume_one(matcher, cursor)
            if not result.matched:
                return Unmatched(expected=self.patterns, failed=result)
            results.append(result)
        return Matched(
            [r.value for r in results],  # type: ignore[union-attr]
            results=tuple(results),
        )


@dataclass(frozen=True, slots=True)
class Some:
    """One or more occurrences of ``pattern``, greedy.

    Repeats until an attempt fails, then rewinds that attempt. Later
    patterns never cause ``some`` to give back elements it has taken.

    Raises:
        ZeroAdvanceError: An attempt matched without consuming anything
            (for example ``some(maybe(x))``), which would repeat forever.
    """

    pattern: Any
    _matcher: Any = field(init=False, repr=False)
    is_matcher: ClassVar[bool] = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "_matcher", build_matcher(self.pattern))

    def __call__(self, value: Any, /) -> Result[Any]:
        return self.consume(_require_cursor("some", value))

    def consume(self, cursor: Cursor[Any], /) -> Result[Any]:
        results: list[Result[Any]] = []
        while True:
            start = cursor.now
            result = consume_one(self._matcher, cursor)
            if not result.matched:
                cursor.jump(start)
                break
            if cursor.now == start:
                logger.warning("casework.some.zero_advance position={}", start)
                raise ZeroAdvanceError(self.pattern)
            results.append(result)
        if not results:
            return Unmatched(expected=self.pattern, failed=result)
        return Matched(
            [r.value for r in results],  # type: ignore[union-attr]
            results=tuple(results),
        )


@dataclass(frozen=True, slots=True)
class Rest:
    """Marker for "everything else".

    Recognized by identity inside match_array (remaining elements) and
    match_object (unclaimed keys). As a cursor consumer it drains and binds
    the remaining values; it always succeeds.
    """

    is_matcher: ClassVar[bool] = True

    def __repr__(self) -> str:
        return "rest"

    def __call__(self, value: Any, /) -> Result[Any]:
        if not isinstance(value, Cursor):
            logger.warning(
                "casework.marker.misuse marker=rest value_type={}",
                type(value).__name__,
            )
            raise MarkerMatcherError("rest", "match_array or match_object")
        return self.consume(value)

    def consume(self, cursor: Cursor[Any], /) -> Result[Any]:
        return Matched(cursor.drain())


rest = Rest()


def maybe(pattern: Any) -> Maybe:
    return Maybe(pattern)


def group(*patterns: Any) -> Group:
    return Group(patterns)


def some(pattern: Any) -> Some:
    return Some(pattern)
