"""Config types for declarative pattern construction.

Patterns can be written as plain data (JSON/YAML) and compiled through a
Registry:
  data → parse_pattern_config() → PatternConfig → Registry.load_pattern() → Matcher

Config shapes:

| Data                                   | Config type     | Runtime type     |
|----------------------------------------|-----------------|------------------|
| scalar (null, bool, number, string)    | LiteralConfig   | EqualsMatcher    |
| list                                   | ArrayConfig     | ArrayMatcher     |
| ``{literal: x}``                       | LiteralConfig   | EqualsMatcher    |
| ``{regex: "^a"}``                      | RegexConfig     | RegExpMatcher    |
| ``{array: [...]}`` (or null)           | ArrayConfig     | ArrayMatcher     |
| ``{object: {...}}`` (or null)          | ObjectConfig    | ObjectMatcher    |
| ``{maybe: p}``                         | MaybeConfig     | Maybe            |
| ``{group: [...]}``                     | GroupConfig     | Group            |
| ``{some: p}``                          | SomeConfig      | Some             |
| ``{rest: null}``                       | RestConfig      | rest             |
| ``{one_of: [...]}``                    | OneOfConfig     | OneOf            |
| ``{all_of: [...]}``                    | AllOfConfig     | AllOf            |
| ``{not: p}``                           | NotConfig       | Not              |
| ``{matcher: name, args: {...}}``       | NamedConfig     | registry factory |
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from casework._matcher import MatcherError

# ═══════════════════════════════════════════════════════════════════════════════
# Config types
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class LiteralConfig:
    """Strict equality against a scalar."""

    value: None | bool | int | float | str


@dataclass(frozen=True, slots=True)
class RegexConfig:
    pattern: str


@dataclass(frozen=True, slots=True)
class ArrayConfig:
    """Element-wise sequence pattern. ``None`` elements: any sequence."""

    elements: tuple[PatternConfig, ...] | None = None


@dataclass(frozen=True, slots=True)
class ObjectConfig:
    """Key-wise record pattern. ``None`` fields: any record."""

    fields: tuple[tuple[Any, PatternConfig], ...] | None = None


@dataclass(frozen=True, slots=True)
class MaybeConfig:
    pattern: PatternConfig


@dataclass(frozen=True, slots=True)
class GroupConfig:
    patterns: tuple[PatternConfig, ...]


@dataclass(frozen=True, slots=True)
class SomeConfig:
    pattern: PatternConfig


@dataclass(frozen=True, slots=True)
class RestConfig:
    """The ``rest`` marker."""


@dataclass(frozen=True, slots=True)
class OneOfConfig:
    alternatives: tuple[PatternConfig, ...]


@dataclass(frozen=True, slots=True)
class AllOfConfig:
    alternatives: tuple[PatternConfig, ...]


@dataclass(frozen=True, slots=True)
class NotConfig:
    pattern: PatternConfig


@dataclass(frozen=True, slots=True)
class NamedConfig:
    """Reference to a matcher factory registered under ``name``.

    ``args`` is passed to the factory as-is; its meaning is the factory's
    business.
    """

    name: str
    args: dict[str, Any] = field(default_factory=dict)


type PatternConfig = (
    LiteralConfig
    | RegexConfig
    | ArrayConfig
    | ObjectConfig
    | MaybeConfig
    | GroupConfig
    | SomeConfig
    | RestConfig
    | OneOfConfig
    | AllOfConfig
    | NotConfig
    | NamedConfig
)


# ═══════════════════════════════════════════════════════════════════════════════
# Parsing (data → config types)
# ═══════════════════════════════════════════════════════════════════════════════

_LITERAL_TYPES = (type(None), bool, int, float, str)

_PATTERN_KEYS = frozenset({
    "literal", "regex", "array", "object", "maybe", "group", "some", "rest",
    "one_of", "all_of", "not", "matcher",
})


class ConfigParseError(MatcherError):
    """Error parsing plain data into config types."""


def parse_pattern_config(data: Any) -> PatternConfig:
    """Parse plain data into a PatternConfig.

    This is the main entry point for config loading. Scalars are literals,
    lists are element-wise arrays, and every other pattern is a single-key
    mapping naming its kind.

    Raises:
        ConfigParseError: If the data is malformed.
    """
    if isinstance(data, _LITERAL_TYPES):
        return LiteralConfig(value=data)
    if isinstance(data, list):
        return ArrayConfig(elements=_parse_list("array", data))
    if not isinstance(data, Mapping):
        msg = f"expected scalar, list or dict, got {type(data).__name__}"
        raise ConfigParseError(msg)

    if "matcher" in data:
        return _parse_named(data)
    if len(data) != 1:
        msg = (
            f"pattern dict must have exactly one key of {sorted(_PATTERN_KEYS)}, "
            f"got keys: {sorted(data, key=str)}"
        )
        raise ConfigParseError(msg)

    ((kind, body),) = data.items()
    match kind:
        case "literal":
            if not isinstance(body, _LITERAL_TYPES):
                msg = f"literal must be a scalar, got {type(body).__name__}"
                raise ConfigParseError(msg)
            return LiteralConfig(value=body)
        case "regex":
            if not isinstance(body, str):
                msg = f"regex must be a string, got {type(body).__name__}"
                raise ConfigParseError(msg)
            return RegexConfig(pattern=body)
        case "array":
            if body is None:
                return ArrayConfig()
            return ArrayConfig(elements=_parse_list("array", body))
        case "object":
            return _parse_object(body)
        case "maybe":
            return MaybeConfig(pattern=parse_pattern_config(body))
        case "group":
            return GroupConfig(patterns=_parse_list("group", body))
        case "some":
            return SomeConfig(pattern=parse_pattern_config(body))
        case "rest":
            if body is not None:
                msg = f"rest takes no value, got {body!r}"
                raise ConfigParseError(msg)
            return RestConfig()
        case "one_of":
            return OneOfConfig(alternatives=_parse_list("one_of", body))
        case "all_of":
            return AllOfConfig(alternatives=_parse_list("all_of", body))
        case "not":
            return NotConfig(pattern=parse_pattern_config(body))
        case _:
            msg = f"unknown pattern kind: {kind!r}"
            raise ConfigParseError(msg)


def _parse_list(kind: str, data: Any) -> tuple[PatternConfig, ...]:
    if not isinstance(data, list):
        msg = f"{kind} must be a list, got {type(data).__name__}"
        raise ConfigParseError(msg)
    return tuple(parse_pattern_config(item) for item in data)


def _parse_object(data: Any) -> ObjectConfig:
    if data is None:
        return ObjectConfig()
    if not isinstance(data, Mapping):
        msg = f"object must be a dict, got {type(data).__name__}"
        raise ConfigParseError(msg)
    return ObjectConfig(
        fields=tuple((key, parse_pattern_config(value)) for key, value in data.items())
    )


def _parse_named(data: Mapping[str, Any]) -> NamedConfig:
    """Parse ``{matcher: name}`` with an optional ``args`` dict."""
    extra = set(data) - {"matcher", "args"}
    if extra:
        msg = f"matcher pattern has unexpected keys: {sorted(extra, key=str)}"
        raise ConfigParseError(msg)

    name = data["matcher"]
    if not isinstance(name, str):
        msg = f"matcher name must be a string, got {type(name).__name__}"
        raise ConfigParseError(msg)

    args = data.get("args")
    if args is None:
        args = {}
    if not isinstance(args, Mapping):
        msg = f"args must be a dict, got {type(args).__name__}"
        raise ConfigParseError(msg)

    return NamedConfig(name=name, args=dict(args))
