"""Composition — alternation, conjunction, negation, guards and mapping.

OneOf and AllOf wrap their input once in a CachedValue, so every alternative
observes the same property reads and the same iterator values. Matchers
below them (guards and mappers included) see the caching wrapper; the
alternation swaps the input back in when the wrapper itself is bound.
Semantics:

- OneOf: first match wins; empty OneOf never matches
- AllOf: every alternative must match; empty AllOf matches its input
- Not: matches (binding the input) iff the inner matcher does not
- When: pattern, then guards left to right, then one value mapper
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any, ClassVar

from casework._cache import CachedValue
from casework._cursor import Cursor, consume_one
from casework._matcher import anything, build_matcher
from casework._result import Matched, Result, Unmatched, accepts_result, unmatched

if TYPE_CHECKING:
    from collections.abc import Callable


def _rebind(result: Result[Any], probe: CachedValue) -> Result[Any]:
    # An alternative that bound the caching wrapper itself binds the input.
    if result.matched and probe.is_wrapper(result.value):  # type: ignore[union-attr]
        return replace(result, value=probe.source)  # type: ignore[type-var]
    return result


def _spans_elements(matcher: Any) -> bool:
    """True if ``matcher`` may consume other than exactly one element."""
    match matcher:
        case When():
            return _spans_elements(matcher._matcher)
        case OneOf():
            return any(matcher._spans)
        case _:
            return callable(getattr(matcher, "consume", None))


@dataclass(frozen=True, slots=True)
class OneOf:
    """Any alternative must match (first match wins).

    Inside a sequence each alternative starts from the same cursor
    position, so alternatives may be quantifiers of different lengths.
    Single-element alternatives share one cached view of that element.
    """

    alternatives: tuple[Any, ...]
    _matchers: tuple[Any, ...] = field(init=False, repr=False)
    _spans: tuple[bool, ...] = field(init=False, repr=False)
    is_matcher: ClassVar[bool] = True

    def __post_init__(self) -> None:
        matchers = tuple(build_matcher(a) for a in self.alternatives)
        object.__setattr__(self, "_matchers", matchers)
        object.__setattr__(self, "_spans", tuple(_spans_elements(m) for m in matchers))

    def __call__(self, value: Any, /) -> Result[Any]:
        probe = CachedValue(value)
        for matcher in self._matchers:
            result = matcher(probe.probe())
            if result.matched:
                return _rebind(result, probe)
        return unmatched

    def consume(self, cursor: Cursor[Any], /) -> Result[Any]:
        start = cursor.now
        probe: CachedValue | None = None
        exhausted = False
        for matcher, spans in zip(self._matchers, self._spans, strict=True):
            cursor.jump(start)
            if spans:
                result = consume_one(matcher, cursor)
            elif exhausted:
                continue
            else:
                if probe is None:
                    element, exhausted = cursor.next()
                    if exhausted:
                        continue
                    probe = CachedValue(element)
                else:
                    cursor.jump(start + 1)
                result = _rebind(matcher(probe.probe()), probe)
            if result.matched:
                return result
        return unmatched


@dataclass(frozen=True, slots=True)
class AllOf:
    """Every alternative must match the same input.

    Short-circuits on the first failure, reporting it in ``failed``.
    Binds the input; one-pass iterators bind the values read from them.
    """

    alternatives: tuple[Any, ...]
    _matchers: tuple[Any, ...] = field(init=False, repr=False)
    is_matcher: ClassVar[bool] = True

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "_matchers", tuple(build_matcher(a) for a in self.alternatives)
        )

    def __call__(self, value: Any, /) -> Result[Any]:
        probe = CachedValue(value)
        results: list[Result[Any]] = []
        for matcher in self._matchers:
            result = matcher(probe.probe())
            if not result.matched:
                return Unmatched(expected=self.alternatives, failed=result)
            results.append(_rebind(result, probe))
        return Matched(probe.observed(), results=tuple(results))


@dataclass(frozen=True, slots=True)
class Not:
    """Inverts the inner matcher. Never binds what the inner matcher bound."""

    pattern: Any
    _matcher: Any = field(init=False, repr=False)
    is_matcher: ClassVar[bool] = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "_matcher", build_matcher(self.pattern))

    def __call__(self, value: Any, /) -> Result[Any]:
        result = self._matcher(value)
        if result.matched:
            return Unmatched(expected=self, failed=result)
        return Matched(value)


@dataclass(frozen=True, slots=True)
class When:
    """A pattern, guarded and transformed.

    Guards run left to right over the bound value and short-circuit on the
    first falsy one; ``mapper`` then replaces the bound value. Diagnostics
    of the underlying result are kept. A guard or mapper with two required
    positional parameters is called as ``fn(value, result)``, which is how
    it reaches regex groups, ``rest`` and ``results``.
    """

    pattern: Any
    guards: tuple[Callable[..., Any], ...] = ()
    mapper: Callable[..., Any] | None = None
    _matcher: Any = field(init=False, repr=False)
    _with_result: tuple[bool, ...] = field(init=False, repr=False)
    is_matcher: ClassVar[bool] = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "_matcher", build_matcher(self.pattern))
        fns = (*self.guards, self.mapper) if self.mapper is not None else self.guards
        object.__setattr__(self, "_with_result", tuple(accepts_result(fn) for fn in fns))

    def __call__(self, value: Any, /) -> Result[Any]:
        return self._finish(self._matcher(value))

    def consume(self, cursor: Cursor[Any], /) -> Result[Any]:
        return self._finish(consume_one(self._matcher, cursor))

    def _apply(self, index: int, fn: Callable[..., Any], result: Matched[Any]) -> Any:
        if self._with_result[index]:
            return fn(result.value, result)
        return fn(result.value)

    def _finish(self, result: Result[Any]) -> Result[Any]:
        match result:
            case Matched():
                for i, guard in enumerate(self.guards):
                    if not self._apply(i, guard, result):
                        return Unmatched(expected=self.pattern, failed=result)
                if self.mapper is None:
                    return result
                value = self._apply(len(self.guards), self.mapper, result)
                return replace(result, value=value)
            case _:
                return result


def one_of(*matchables: Any) -> OneOf:
    return OneOf(matchables)


def all_of(*matchables: Any) -> AllOf:
    return AllOf(matchables)


def not_(matchable: Any) -> Not:
    return Not(matchable)


def when(matchable: Any, *value_mappers: Callable[..., Any]) -> Any:
    r"""Guard and transform a pattern.

    All but the last of ``value_mappers`` are guards; the last maps the
    bound value. With no mappers the built pattern is returned as is.

        when({"pages": greater_than(1)}, lambda res: res["pages"])
        when(match_regexp(r"(\d+) \+ (\d+)"), lambda _, r: r.matched_regexp.groups())
    """
    if not value_mappers:
        return build_matcher(matchable)
    *guards, mapper = value_mappers
    return When(matchable, tuple(guards), mapper)


def otherwise(*value_mappers: Callable[..., Any]) -> Any:
    """``when(anything, ...)``: the catch-all clause."""
    return when(anything, *value_mappers)


def match(value: Any, *clauses: Any, default: Any = None) -> Any:
    """Evaluate ``clauses`` in order against ``value``.

    Returns the bound value of the first matching clause, or ``default``.
    """
    result = OneOf(clauses)(value)
    if result.matched:
        return result.value  # type: ignore[union-attr]
    return default
