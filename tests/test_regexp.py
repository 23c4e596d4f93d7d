"""Tests for the regular-expression matcher (casework._regexp)."""

import re

import pytest

from casework import MatcherError, Unmatched, match_regexp


class TestMatchRegexp:
    def test_search_semantics(self) -> None:
        m = match_regexp(r"\d+")
        assert m("abc 123").matched
        assert not m("abc").matched

    def test_anchored(self) -> None:
        m = match_regexp(r"^\d+$")
        assert m("123").matched
        assert not m("abc 123").matched

    def test_match_object_exposed(self) -> None:
        r = match_regexp(r"(?P<user>\w+)@(?P<host>\w+)")("mail alice@example now")
        assert r.matched
        assert r.value == "mail alice@example now"
        assert r.matched_regexp.group("user") == "alice"
        assert r.matched_regexp.groupdict() == {"user": "alice", "host": "example"}

    def test_non_string_reports_type(self) -> None:
        assert match_regexp("a")(1) == Unmatched(expected="a", type_name="int")
        assert match_regexp("a")(None).type_name == "NoneType"

    def test_string_mismatch_reports_str(self) -> None:
        assert match_regexp("a")("b") == Unmatched(expected="a", type_name="str")

    def test_precompiled_stdlib_pattern(self) -> None:
        m = match_regexp(re.compile(r"^(a)\1$"))
        assert m("aa").matched

    def test_rejects_backreference_in_pattern_string(self) -> None:
        with pytest.raises(MatcherError, match="invalid regex pattern"):
            match_regexp(r"(a)\1")

    def test_rejects_lookahead(self) -> None:
        with pytest.raises(MatcherError):
            match_regexp(r"foo(?=bar)")

    def test_bytes_pattern_matches_bytes(self) -> None:
        m = match_regexp(re.compile(rb"^(\d+)$"))
        r = m(b"42")
        assert r.matched
        assert r.matched_regexp.group(1) == b"42"
        assert m(b"x") == Unmatched(expected=m.pattern, type_name="bytes")

    def test_bytes_pattern_rejects_str(self) -> None:
        m = match_regexp(re.compile(b"a"))
        assert m("a") == Unmatched(expected=m.pattern, type_name="str")

    def test_text_pattern_rejects_bytes(self) -> None:
        assert match_regexp("a")(b"a") == Unmatched(expected="a", type_name="bytes")
