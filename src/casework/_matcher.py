"""Matcher core — error types, primitive matchers and pattern dispatch.

Every primitive is a frozen dataclass tagged with ``is_matcher``. The
``build_matcher`` dispatcher resolves a declarative pattern to a Matcher once,
at construction time:

| Matchable               | Matcher                |
|-------------------------|------------------------|
| ``...``                 | ``anything``           |
| built Matcher           | itself (idempotent)    |
| compiled regex          | ``match_regexp``       |
| scalar literal          | ``equals``             |
| Mapping                 | ``match_object``       |
| list / tuple            | ``match_array``        |
| type                    | ``match_instance``     |
| other callable          | ``FunctionMatcher``    |
"""

from __future__ import annotations

import operator
from collections.abc import Callable, Mapping, Sized
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Final

from casework._result import Matched, Result, Unmatched, unmatched


class MatcherError(Exception):
    """Programmer or configuration error. Never a data-driven non-match."""


class MarkerMatcherError(MatcherError):
    """A marker matcher was invoked outside the context that understands it."""

    def __init__(self, name: str, context: str) -> None:
        self.name = name
        super().__init__(
            f"{name} is a marker matcher and does not match values on its own; "
            f"use it within {context}"
        )


class ZeroAdvanceError(MatcherError):
    """A repeated sub-pattern matched without consuming any input."""

    def __init__(self, pattern: Any) -> None:
        self.pattern = pattern
        super().__init__(
            f"some({pattern!r}) matched without advancing the cursor; "
            "the inner pattern must consume at least one element"
        )


class UnbuildableMatchableError(MatcherError):
    """build_matcher() was given a value it cannot turn into a Matcher."""

    def __init__(self, matchable: Any) -> None:
        self.matchable = matchable
        super().__init__(f"unable to build matcher from {matchable!r}")


class CursorJumpError(MatcherError):
    """A cursor was asked to jump outside the range it has already read."""

    def __init__(self, position: int, source_position: int) -> None:
        self.position = position
        self.source_position = source_position
        super().__init__(
            f"cannot jump to position {position}: "
            f"valid positions are 0..{source_position}"
        )


class _Unbound(Enum):
    UNBOUND = "UNBOUND"

    def __repr__(self) -> str:
        return "UNBOUND"


# "Bind, don't constrain": the default for every expected-literal argument.
UNBOUND: Final = _Unbound.UNBOUND

_SCALARS = (type(None), bool, int, float, complex, str, bytes)


def is_matcher(candidate: Any) -> bool:
    """True if ``candidate`` is an already-built Matcher."""
    return getattr(type(candidate), "is_matcher", False) is True


def _strict_equal(expected: Any, value: Any) -> bool:
    # bool is an int subclass in Python; a pattern of 1 must not match True.
    if isinstance(expected, bool) or isinstance(value, bool):
        return expected is value
    return bool(expected == value)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _type_mismatch(value: Any) -> Unmatched:
    return Unmatched(type_name=type(value).__name__)


# ═══════════════════════════════════════════════════════════════════════════════
# Primitive matchers
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class PredicateMatcher:
    """Matches iff ``predicate(value)`` is truthy, binding the value."""

    predicate: Callable[[Any], bool]
    is_matcher: ClassVar[bool] = True

    def __call__(self, value: Any, /) -> Result[Any]:
        if self.predicate(value):
            return Matched(value)
        return unmatched


@dataclass(frozen=True, slots=True)
class FunctionMatcher:
    """A user-supplied function that already returns a Result."""

    function: Callable[[Any], Result[Any]]
    is_matcher: ClassVar[bool] = True

    def __call__(self, value: Any, /) -> Result[Any]:
        return self.function(value)


@dataclass(frozen=True, slots=True)
class EqualsMatcher:
    """Strict equality against ``expected``; UNBOUND matches any value."""

    expected: Any = UNBOUND
    is_matcher: ClassVar[bool] = True

    def __call__(self, value: Any, /) -> Result[Any]:
        if self.expected is UNBOUND or _strict_equal(self.expected, value):
            return Matched(value)
        return unmatched


@dataclass(frozen=True, slots=True)
class TypedMatcher:
    """Runtime type check, then equality against ``expected`` when bound.

    ``bool`` values are rejected by numeric matchers even though ``bool``
    subclasses ``int``.
    """

    types: tuple[type, ...]
    expected: Any = UNBOUND
    accepts_bool: bool = False
    is_matcher: ClassVar[bool] = True

    def __call__(self, value: Any, /) -> Result[Any]:
        if not isinstance(value, self.types) or (
            isinstance(value, bool) and not self.accepts_bool
        ):
            return _type_mismatch(value)
        if self.expected is UNBOUND or _strict_equal(self.expected, value):
            return Matched(value)
        return unmatched


@dataclass(frozen=True, slots=True)
class StringMatcher:
    """String equality, or any string when unbound.

    When ignore_case is True, comparison is case-insensitive.
    The expected value is casefolded once at construction time.
    """

    expected: str | _Unbound = UNBOUND
    ignore_case: bool = False
    _cmp_value: str | _Unbound = field(init=False, repr=False)
    is_matcher: ClassVar[bool] = True

    def __post_init__(self) -> None:
        cmp_value = self.expected
        if self.ignore_case and isinstance(cmp_value, str):
            cmp_value = cmp_value.casefold()
        object.__setattr__(self, "_cmp_value", cmp_value)

    def __call__(self, value: Any, /) -> Result[Any]:
        if not isinstance(value, str):
            return _type_mismatch(value)
        if self._cmp_value is UNBOUND:
            return Matched(value)
        input_val = value.casefold() if self.ignore_case else value
        if input_val == self._cmp_value:
            return Matched(value)
        return unmatched


@dataclass(frozen=True, slots=True)
class InstanceMatcher:
    """isinstance() check against one or more classes."""

    cls: type | tuple[type, ...]
    is_matcher: ClassVar[bool] = True

    def __call__(self, value: Any, /) -> Result[Any]:
        if isinstance(value, self.cls):
            return Matched(value)
        return _type_mismatch(value)


_COMPARISONS: Final[Mapping[str, Callable[[Any, Any], bool]]] = {
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
}


@dataclass(frozen=True, slots=True)
class ComparisonMatcher:
    """Numeric comparison ``value <op> bound``. Non-numbers never match."""

    op: str
    bound: float
    is_matcher: ClassVar[bool] = True

    def __post_init__(self) -> None:
        if self.op not in _COMPARISONS:
            msg = f"unknown comparison operator {self.op!r}"
            raise MatcherError(msg)

    def __call__(self, value: Any, /) -> Result[Any]:
        if not _is_number(value):
            return _type_mismatch(value)
        if _COMPARISONS[self.op](value, self.bound):
            return Matched(value)
        return unmatched


@dataclass(frozen=True, slots=True)
class RangeMatcher:
    """Half-open numeric range ``lower <= value < upper``."""

    lower: float
    upper: float
    is_matcher: ClassVar[bool] = True

    def __call__(self, value: Any, /) -> Result[Any]:
        if not _is_number(value):
            return _type_mismatch(value)
        if self.lower <= value < self.upper:
            return Matched(value)
        return unmatched


@dataclass(frozen=True, slots=True)
class PropMatcher:
    """The input has ``name`` as a key (mappings) or attribute (objects)."""

    name: str
    is_matcher: ClassVar[bool] = True

    def __call__(self, value: Any, /) -> Result[Any]:
        if isinstance(value, Mapping):
            found = self.name in value
        else:
            found = hasattr(value, self.name)
        if found:
            return Matched(value)
        return unmatched


def _is_empty(value: Any) -> bool:
    if isinstance(value, Sized):
        return len(value) == 0
    if hasattr(value, "__dict__"):
        return not vars(value)
    return False


# ═══════════════════════════════════════════════════════════════════════════════
# Factories
# ═══════════════════════════════════════════════════════════════════════════════

anything = PredicateMatcher(lambda _value: True)
defined = PredicateMatcher(lambda value: value is not None)
empty = PredicateMatcher(_is_empty)


def match_predicate(predicate: Callable[[Any], bool]) -> PredicateMatcher:
    """Match any value for which ``predicate`` returns a truthy result."""
    return PredicateMatcher(predicate)


def equals(expected: Any = UNBOUND) -> EqualsMatcher:
    """Match values strictly equal to ``expected`` (any value when omitted)."""
    return EqualsMatcher(expected)


def match_boolean(expected: bool | _Unbound = UNBOUND) -> TypedMatcher:
    return TypedMatcher((bool,), expected, accepts_bool=True)


def match_number(expected: float | _Unbound = UNBOUND) -> TypedMatcher:
    return TypedMatcher((int, float), expected)


def match_int(expected: int | _Unbound = UNBOUND) -> TypedMatcher:
    """Arbitrary-precision integers. ``bool`` is not an integer here."""
    return TypedMatcher((int,), expected)


def match_string(
    expected: str | _Unbound = UNBOUND, *, ignore_case: bool = False
) -> StringMatcher:
    return StringMatcher(expected, ignore_case=ignore_case)


def match_instance(cls: type | tuple[type, ...]) -> InstanceMatcher:
    return InstanceMatcher(cls)


def match_prop(name: str) -> PropMatcher:
    return PropMatcher(name)


def between(lower: float, upper: float) -> RangeMatcher:
    """Numbers in the half-open range ``[lower, upper)``."""
    return RangeMatcher(lower, upper)


def greater_than(bound: float) -> ComparisonMatcher:
    return ComparisonMatcher(">", bound)


def greater_than_equals(bound: float) -> ComparisonMatcher:
    return ComparisonMatcher(">=", bound)


def less_than(bound: float) -> ComparisonMatcher:
    return ComparisonMatcher("<", bound)


def less_than_equals(bound: float) -> ComparisonMatcher:
    return ComparisonMatcher("<=", bound)


# ═══════════════════════════════════════════════════════════════════════════════
# Dispatch
# ═══════════════════════════════════════════════════════════════════════════════


def is_regexp(candidate: Any) -> bool:
    """True for compiled regular expressions (stdlib ``re`` or ``re2``)."""
    return (
        not isinstance(candidate, type)
        and callable(getattr(candidate, "search", None))
        and isinstance(getattr(candidate, "pattern", None), (str, bytes))
    )


def build_matcher(matchable: Any) -> Any:
    """Normalize a declarative pattern into an executable Matcher.

    Idempotent: an already-built Matcher is returned unchanged.

    Raises:
        UnbuildableMatchableError: ``matchable`` is not a literal, regex,
            sequence, record, type or callable.
    """
    # Deferred: the structural matchers build their own element patterns.
    from casework._regexp import match_regexp
    from casework._structural import match_array, match_object

    if matchable is ...:
        return anything
    if is_matcher(matchable):
        return matchable
    if is_regexp(matchable):
        return match_regexp(matchable)
    if isinstance(matchable, _SCALARS):
        return equals(matchable)
    if isinstance(matchable, Mapping):
        return match_object(matchable)
    if isinstance(matchable, (list, tuple)):
        return match_array(matchable)
    if isinstance(matchable, type):
        return match_instance(matchable)
    if callable(matchable):
        return FunctionMatcher(matchable)
    raise UnbuildableMatchableError(matchable)
