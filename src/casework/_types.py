"""Core protocols and type aliases for casework.

- Matcher is the universal invocation contract: value in, Result out
- SequenceMatcher is a Matcher that can also consume values from a Cursor
- Matchable is anything build_matcher() can normalize into a Matcher

The ``is_matcher`` tag is the capability check build_matcher() relies on.
Plain callables never carry it, so user functions are wrapped rather than
mistaken for built matchers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar, Protocol, TypeVar, runtime_checkable

if TYPE_CHECKING:
    from casework._cursor import Cursor
    from casework._result import Result

T_co = TypeVar("T_co", covariant=True)


@runtime_checkable
class Matcher(Protocol[T_co]):
    """Match a single value.

    Matchers are stateless: calling one twice with the same (unchanged)
    input yields equal results.
    """

    is_matcher: ClassVar[bool]

    def __call__(self, value: Any, /) -> Result[T_co]: ...


@runtime_checkable
class SequenceMatcher(Protocol[T_co]):
    """A Matcher that reads zero or more values from a shared Cursor.

    consume() may leave the cursor anywhere on failure; callers that need
    to retry take a checkpoint with ``cursor.now`` first and ``jump`` back.
    """

    is_matcher: ClassVar[bool]

    def __call__(self, value: Any, /) -> Result[T_co]: ...

    def consume(self, cursor: Cursor[Any], /) -> Result[T_co]: ...


# Anything build_matcher() accepts: literals, regexes, lists, tuples,
# mappings, types, built matchers and custom callables.
type Matchable = Any
