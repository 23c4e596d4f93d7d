"""Result algebra — the two-variant outcome every matcher returns.

Matched carries the bound value plus optional diagnostics; Unmatched carries
diagnostics only. Diagnostic fields are additive: control flow only ever
looks at ``result.matched`` (or a ``match``/``case`` on the variant).

The mapper helpers lift plain value functions into result and matcher
transformers:

    map_matcher(str.upper)(equals("a"))("a")  # Matched(value="A")

A value function with two required positional parameters also receives the
whole Matched result, so it can read ``rest``, ``results`` or regex groups:

    map_matched(lambda s, r: r.matched_regexp.group(1))
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable

    from casework._types import Matcher


@dataclass(frozen=True, slots=True)
class Matched[T]:
    """A successful match.

    ``results`` holds per-component sub-results (a tuple for sequence
    matchers, a dict keyed by record key for record matchers). ``rest`` holds
    whatever a ``rest`` marker captured. ``matched_regexp`` holds the regex
    match object for regex matchers.
    """

    value: T
    results: tuple[Result[Any], ...] | dict[Any, Result[Any]] | None = None
    rest: Any = None
    matched_regexp: Any = None

    @property
    def matched(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class Unmatched:
    """A failed match, with optional diagnostics explaining why.

    Record matchers fill the ``*_keys`` fields (always sorted). Combinators
    fill ``expected`` and ``failed``. Type-sensitive matchers fill
    ``type_name`` with the type of the rejected input.
    """

    expected: Any = None
    failed: Result[Any] | None = None
    type_name: str | None = None
    expected_keys: tuple[str, ...] | None = None
    matched_keys: tuple[str, ...] | None = None
    unmatched_keys: tuple[str, ...] | None = None
    rest_key: str | None = None

    @property
    def matched(self) -> bool:
        return False


type Result[T] = Matched[T] | Unmatched

# Shared, payload-free failure.
unmatched = Unmatched()


def matched[T](value: T, **diagnostics: Any) -> Matched[T]:
    """Build a Matched result for ``value``."""
    return Matched(value, **diagnostics)


# ═══════════════════════════════════════════════════════════════════════════════
# Mappers
# ═══════════════════════════════════════════════════════════════════════════════


def accepts_result(fn: Callable[..., Any]) -> bool:
    """True if ``fn`` takes ``(value, result)`` rather than ``(value)``.

    Only required positional parameters count, so builtins such as ``str``
    or ``int`` (whose extra parameters have defaults) get the value alone.
    """
    try:
        params = inspect.signature(fn).parameters.values()
    except (TypeError, ValueError):
        return False
    required = [
        p
        for p in params
        if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD)
        and p.default is p.empty
    ]
    return len(required) >= 2


def map_matched[T, R](mapper: Callable[..., R]) -> Callable[[Matched[T]], Matched[R]]:
    """Map the value of a Matched result, keeping its diagnostics."""
    with_result = accepts_result(mapper)

    def apply(result: Matched[T]) -> Matched[R]:
        if with_result:
            return replace(result, value=mapper(result.value, result))  # type: ignore[return-value]
        return replace(result, value=mapper(result.value))  # type: ignore[return-value]

    return apply


def map_matched_result[T](
    matched_mapper: Callable[[Matched[T]], Result[Any]],
) -> Callable[[Result[T]], Result[Any]]:
    """Apply ``matched_mapper`` to Matched results, pass Unmatched through."""

    def apply(result: Result[T]) -> Result[Any]:
        if result.matched:
            return matched_mapper(result)  # type: ignore[arg-type]
        return result

    return apply


def map_result[T, R](mapper: Callable[..., R]) -> Callable[[Result[T]], Result[R]]:
    """Map the value of matched results only."""
    return map_matched_result(map_matched(mapper))


def map_result_matcher(
    result_mapper: Callable[[Result[Any]], Result[Any]],
) -> Callable[[Matcher[Any]], Callable[[Any], Result[Any]]]:
    """Post-process every result a matcher produces."""

    def wrap(matcher: Matcher[Any]) -> Callable[[Any], Result[Any]]:
        def apply(value: Any) -> Result[Any]:
            return result_mapper(matcher(value))

        return apply

    return wrap


def map_matched_matcher(
    matched_mapper: Callable[[Matched[Any]], Result[Any]],
) -> Callable[[Matcher[Any]], Callable[[Any], Result[Any]]]:
    """Post-process the matched results a matcher produces."""
    return map_result_matcher(map_matched_result(matched_mapper))


def map_matcher(
    mapper: Callable[..., Any],
) -> Callable[[Matcher[Any]], Callable[[Any], Result[Any]]]:
    """Map the bound value of every matched result a matcher produces."""
    return map_result_matcher(map_result(mapper))
