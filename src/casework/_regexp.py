"""Regular-expression matcher.

Pattern strings are compiled with ``google-re2``, providing guaranteed
linear-time matching. RE2 does not support backreferences or
lookahead/lookbehind because they require backtracking; patterns using them
are rejected at construction time. Already-compiled patterns (stdlib ``re``
objects included) are used as given.

Matching uses ``search`` (not ``fullmatch``): anchor the pattern to match the
whole string.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar

import re2

from casework._matcher import MatcherError, is_regexp
from casework._result import Matched, Result, Unmatched


@dataclass(frozen=True, slots=True)
class RegExpMatcher:
    """Match strings against a regular expression.

    On success ``matched_regexp`` carries the match object, so callers can
    read ``group()``, ``groups()`` and ``groupdict()``. Failures carry
    ``type_name`` so "not a string" can be told apart from "string, but the
    pattern did not match". Bytes patterns match ``bytes`` values only,
    text patterns ``str`` values only.

    Raises:
        MatcherError: If a pattern string is not valid RE2 syntax.
    """

    pattern: Any
    _compiled: Any = field(init=False, repr=False)
    _subject: type = field(init=False, repr=False)
    is_matcher: ClassVar[bool] = True

    def __post_init__(self) -> None:
        if is_regexp(self.pattern):
            compiled = self.pattern
            source = self.pattern.pattern
        else:
            try:
                compiled = re2.compile(self.pattern)
            except re2.error as e:
                msg = f'invalid regex pattern "{self.pattern}": {e}'
                raise MatcherError(msg) from e
            source = self.pattern
        object.__setattr__(self, "_compiled", compiled)
        object.__setattr__(self, "_subject", bytes if isinstance(source, bytes) else str)

    def __call__(self, value: Any, /) -> Result[Any]:
        if not isinstance(value, self._subject):
            return Unmatched(expected=self.pattern, type_name=type(value).__name__)
        found = self._compiled.search(value)
        if found is None:
            return Unmatched(expected=self.pattern, type_name=self._subject.__name__)
        return Matched(value, matched_regexp=found)


def match_regexp(expected: Any) -> RegExpMatcher:
    """Build a regex matcher from a pattern string or a compiled pattern."""
    return RegExpMatcher(expected)
