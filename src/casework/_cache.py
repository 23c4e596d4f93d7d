"""Caching layer — consistent observations under repeated probing.

An alternation (``one_of``/``all_of``) probes one input with several
candidate patterns. If the input has impure accessors (a property with side
effects, a mapping that computes on lookup) or is a one-pass iterator, every
candidate must still observe the same values. CachedValue wraps the input
once per alternation:

| Input                  | Wrapper            | Reset per alternative       |
|------------------------|--------------------|-----------------------------|
| one-pass iterator      | Cursor             | jump to the start position  |
| Mapping                | CachedMapping      | none (memo is shared)       |
| attribute record       | CachedAttributes   | none (memo is shared)       |
| anything else          | -                  | -                           |

Wrappers expose the wrapped object as ``__wrapped__``. Matchers inside the
alternation bind the wrapper, so guards and mappers keep reading through the
memo; the alternation rebinds its input before returning.
"""

from __future__ import annotations

import dataclasses
import inspect
from collections.abc import Iterator, Mapping
from enum import Enum
from typing import Any, Final

from loguru import logger

from casework._cursor import Cursor


class _Missing(Enum):
    MISSING = "MISSING"

    def __repr__(self) -> str:
        return "MISSING"


# Outcome of looking up a key the record does not have.
MISSING: Final = _Missing.MISSING

_NON_RECORDS = (
    type(None), bool, int, float, complex, str, bytes, bytearray,
    list, tuple, set, frozenset, Cursor,
)


class CachedMapping[K, V](Mapping[K, V]):
    """Read-only Mapping view that reads each key from its source once."""

    __slots__ = ("__wrapped__", "_cache")

    def __init__(self, source: Mapping[K, V]) -> None:
        self.__wrapped__ = source
        self._cache: dict[K, V] = {}

    def __repr__(self) -> str:
        return f"CachedMapping({self.__wrapped__!r})"

    def __getitem__(self, key: K) -> V:
        try:
            return self._cache[key]
        except KeyError:
            pass
        value = self.__wrapped__[key]
        self._cache[key] = value
        return value

    def __contains__(self, key: object) -> bool:
        return key in self._cache or key in self.__wrapped__

    def __iter__(self) -> Iterator[K]:
        return iter(self.__wrapped__)

    def __len__(self) -> int:
        return len(self.__wrapped__)


class CachedAttributes:
    """Attribute proxy that reads each attribute from its source once.

    Missing attributes are memoized too, so a property that only sometimes
    exists still answers consistently.
    """

    __slots__ = ("__wrapped__", "_cache")

    def __init__(self, source: Any) -> None:
        self.__wrapped__ = source
        self._cache: dict[str, Any] = {}

    def __repr__(self) -> str:
        return f"CachedAttributes({self.__wrapped__!r})"

    def __getattr__(self, name: str) -> Any:
        # Only reached for names that are not slots of the proxy itself.
        cache = self._cache
        try:
            outcome = cache[name]
        except KeyError:
            outcome = getattr(self.__wrapped__, name, MISSING)
            cache[name] = outcome
        if outcome is MISSING:
            raise AttributeError(name)
        return outcome


# ═══════════════════════════════════════════════════════════════════════════════
# Record access
# ═══════════════════════════════════════════════════════════════════════════════


def unwrap(value: Any) -> Any:
    """The object behind a caching wrapper, or ``value`` itself."""
    if isinstance(value, (CachedMapping, CachedAttributes)):
        return value.__wrapped__
    return value


def is_record(value: Any) -> bool:
    """Keyed-record shaped: a Mapping, or an object with named fields."""
    if isinstance(value, (Mapping, CachedAttributes)):
        return True
    if isinstance(value, _NON_RECORDS) or isinstance(value, (type, Iterator)):
        return False
    if inspect.isroutine(value) or inspect.ismodule(value):
        return False
    return dataclasses.is_dataclass(value) or hasattr(value, "__dict__")


def record_keys(record: Any) -> list[Any]:
    """The keys a record declares.

    Mapping keys for mappings; for objects, dataclass fields or instance
    attributes, skipping private (underscore-prefixed) names.
    """
    source = unwrap(record)
    if isinstance(source, Mapping):
        return list(source)
    if dataclasses.is_dataclass(source):
        names = [f.name for f in dataclasses.fields(source)]
    else:
        names = list(getattr(source, "__dict__", ()))
    return [name for name in names if not name.startswith("_")]


def lookup(record: Any, key: Any) -> Any:
    """Read ``key`` from a record exactly once, or return MISSING."""
    if isinstance(record, Mapping):
        if key in record:
            return record[key]
        return MISSING
    if not isinstance(key, str):
        return MISSING
    return getattr(record, key, MISSING)


# ═══════════════════════════════════════════════════════════════════════════════
# Alternation probe
# ═══════════════════════════════════════════════════════════════════════════════


class CachedValue:
    """One input, observed identically by every alternative of an alternation.

    Created fresh for each evaluation and discarded afterwards; never shared
    between calls.
    """

    __slots__ = ("source", "_value", "_cursor", "_start")

    def __init__(self, source: Any) -> None:
        self.source = source
        self._cursor: Cursor[Any] | None = None
        self._start = 0
        value = source
        if isinstance(source, Cursor):
            self._cursor = source
            self._start = source.now
        elif isinstance(source, Iterator):
            self._cursor = Cursor(source)
            logger.debug(
                "casework.cache.cursor source_type={}", type(source).__name__
            )
        elif isinstance(source, (CachedMapping, CachedAttributes)):
            pass
        elif isinstance(source, Mapping):
            value = CachedMapping(source)
        elif is_record(source):
            value = CachedAttributes(source)
        self._value = value

    def probe(self) -> Any:
        """The value to hand to the next alternative."""
        if self._cursor is not None:
            self._cursor.jump(self._start)
            return self._cursor
        return self._value

    def is_wrapper(self, candidate: Any) -> bool:
        """True if ``candidate`` is a wrapper this probe created."""
        if self._cursor is not None and self._cursor is not self.source:
            return candidate is self._cursor
        return candidate is self._value and self._value is not self.source

    def observed(self) -> Any:
        """The input as the alternatives saw it.

        For a one-pass iterator this is the list of values read from it,
        since the iterator itself has been (partly) consumed.
        """
        if self._cursor is not None and self._cursor is not self.source:
            return list(self._cursor.buffer)
        return self.source
