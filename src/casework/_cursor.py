"""Backtracking cursor over a one-pass source.

A Cursor pulls each value from its source at most once and buffers it, so
quantifiers can take a checkpoint (``now``), read ahead speculatively and
``jump`` back on failure without re-running a generator:

    cursor = Cursor(numbers())
    start = cursor.now
    cursor.next(), cursor.next()
    cursor.jump(start)          # replays from the buffer, no new pulls

INV: 0 <= now <= source_position == len(buffer). Reads below
source_position replay; a read at source_position pulls exactly one value.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from casework._matcher import CursorJumpError
from casework._result import Result, Unmatched

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator


class Cursor[T]:
    """Replayable, position-addressable reader over any iterable."""

    __slots__ = ("_source", "_buffer", "_source_exhausted", "_now")

    def __init__(self, source: Iterable[T]) -> None:
        self._source: Iterator[T] = iter(source)
        self._buffer: list[T] = []
        self._source_exhausted = False
        self._now = 0

    def __repr__(self) -> str:
        return (
            f"Cursor(now={self._now}, source_position={self.source_position}, "
            f"source_exhausted={self._source_exhausted})"
        )

    @property
    def now(self) -> int:
        """Current logical position, usable as a checkpoint for jump()."""
        return self._now

    @property
    def source_position(self) -> int:
        """Number of values pulled from the underlying source so far."""
        return len(self._buffer)

    @property
    def source_exhausted(self) -> bool:
        return self._source_exhausted

    @property
    def buffer(self) -> tuple[T, ...]:
        return tuple(self._buffer)

    def next(self) -> tuple[T | None, bool]:
        """Read the next logical value.

        Returns ``(value, False)``, or ``(None, True)`` once the source is
        exhausted. Replays from the buffer when the read head is behind the
        source.
        """
        if self._now == len(self._buffer):
            if self._source_exhausted:
                return None, True
            try:
                value = next(self._source)
            except StopIteration:
                self._source_exhausted = True
                return None, True
            self._buffer.append(value)
        value = self._buffer[self._now]
        self._now += 1
        return value, False

    def jump(self, position: int = 0) -> None:
        """Move the read head back (or forward) to an already-read position.

        Raises:
            CursorJumpError: position is negative or beyond source_position.
        """
        if not 0 <= position <= len(self._buffer):
            raise CursorJumpError(position, len(self._buffer))
        self._now = position

    def drain(self) -> list[T]:
        """Read every remaining value from the current position."""
        values = []
        while True:
            value, done = self.next()
            if done:
                return values
            values.append(value)  # type: ignore[arg-type]

    def history(self, start: int = 0) -> list[T]:
        """Values between checkpoint ``start`` and the current position."""
        return self._buffer[start : self._now]

    def __iter__(self) -> Cursor[T]:
        return self

    def __next__(self) -> T:
        value, done = self.next()
        if done:
            raise StopIteration
        return value  # type: ignore[return-value]


def as_cursor(value: Any) -> Cursor[Any]:
    """Reuse ``value`` if it already is a Cursor, otherwise wrap it."""
    if isinstance(value, Cursor):
        return value
    return Cursor(value)


_END_OF_INPUT = Unmatched(expected="a value", type_name="end of input")


def consume_one(matcher: Any, cursor: Cursor[Any]) -> Result[Any]:
    """Apply one pattern position against the cursor.

    Sequence matchers consume as many values as they need; any other
    matcher is applied to exactly one pulled value.
    """
    consume = getattr(matcher, "consume", None)
    if consume is not None:
        return consume(cursor)
    value, done = cursor.next()
    if done:
        return _END_OF_INPUT
    return matcher(value)
