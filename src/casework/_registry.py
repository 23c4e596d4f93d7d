"""Matcher registry for config-driven pattern construction.

The registry compiles declarative pattern configs (JSON/YAML → PatternConfig)
into runtime matchers, resolving named matchers through registered factories:
- RegistryBuilder → .build() → Registry (immutable)
- Factories are plain callables: (args: dict) → Matcher
- load_pattern() walks the config tree and enforces width and depth limits

Example::

    builder = register_core_matchers(RegistryBuilder())
    builder.matcher("even", lambda args: match_predicate(lambda n: n % 2 == 0))
    registry = builder.build()

    config = parse_pattern_config(yaml.safe_load(text))
    matcher = registry.load_pattern(config)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from loguru import logger

from casework._compose import all_of, not_, one_of
from casework._config import (
    AllOfConfig,
    ArrayConfig,
    GroupConfig,
    LiteralConfig,
    MaybeConfig,
    NamedConfig,
    NotConfig,
    ObjectConfig,
    OneOfConfig,
    RegexConfig,
    RestConfig,
    SomeConfig,
)
from casework._matcher import (
    MatcherError,
    anything,
    between,
    build_matcher,
    defined,
    empty,
    equals,
    greater_than,
    greater_than_equals,
    less_than,
    less_than_equals,
    match_boolean,
    match_int,
    match_number,
    match_prop,
    match_string,
)
from casework._quantifiers import group, maybe, rest, some
from casework._regexp import match_regexp
from casework._structural import match_array, match_object

if TYPE_CHECKING:
    from collections.abc import Callable, Sized

    from casework._config import PatternConfig

# ═══════════════════════════════════════════════════════════════════════════════
# Limits
# ═══════════════════════════════════════════════════════════════════════════════

MAX_DEPTH = 32
MAX_PATTERNS_PER_COMPOUND = 256
MAX_REGEX_PATTERN_LENGTH = 4096
MAX_LITERAL_LENGTH = 8192

# ═══════════════════════════════════════════════════════════════════════════════
# Error types
# ═══════════════════════════════════════════════════════════════════════════════


class UnknownMatcherError(MatcherError):
    """A named matcher was not found in the registry."""

    def __init__(self, name: str, available: list[str]) -> None:
        self.name = name
        self.available = sorted(available)
        if self.available:
            registered = ", ".join(self.available)
            msg = f"unknown matcher: {name!r} (registered: {registered})"
        else:
            msg = f"unknown matcher: {name!r} (no matchers are registered)"
        super().__init__(msg)


class InvalidConfigError(MatcherError):
    """A config payload was malformed or semantically invalid."""

    def __init__(self, source: str) -> None:
        self.source = source
        super().__init__(f"invalid config: {source}")


class TooManyPatternsError(MatcherError):
    """Compound pattern has too many children (width-based limit)."""

    def __init__(self, count: int, max_: int) -> None:
        self.count = count
        self.max = max_
        super().__init__(
            f"too many patterns in compound: {count} exceeds maximum {max_}"
        )


class PatternTooLongError(MatcherError):
    """A literal or regex pattern exceeds the length limit."""

    def __init__(self, length: int, max_: int) -> None:
        self.length = length
        self.max = max_
        super().__init__(
            f"pattern length {length} exceeds maximum {max_}"
        )


class DepthExceededError(MatcherError):
    """Pattern nesting exceeds the depth limit."""

    def __init__(self, depth: int, max_: int) -> None:
        self.depth = depth
        self.max = max_
        super().__init__(
            f"pattern depth {depth} exceeds maximum {max_}"
        )


# ═══════════════════════════════════════════════════════════════════════════════
# Builder
# ═══════════════════════════════════════════════════════════════════════════════

type MatcherFactory = Callable[[dict[str, Any]], Any]


class RegistryBuilder:
    """Builder for constructing a Registry.

    Register matcher factories by name, then call build() to produce an
    immutable Registry. Registering a name twice replaces the factory.
    """

    def __init__(self) -> None:
        self._matcher_factories: dict[str, MatcherFactory] = {}

    def matcher(self, name: str, factory: MatcherFactory) -> RegistryBuilder:
        """Register a matcher factory under ``name``."""
        self._matcher_factories[name] = factory
        return self

    def build(self) -> Registry:
        """Freeze the registry. No further registration is possible."""
        logger.debug(
            "casework.registry.build matchers={}", len(self._matcher_factories)
        )
        return Registry(
            _matcher_factories=MappingProxyType(dict(self._matcher_factories)),
        )


def _kwargs(factory: Callable[..., Any]) -> MatcherFactory:
    # args become keyword arguments of the matcher constructor.
    return lambda args: factory(**args)


def _constant(matcher: Any) -> MatcherFactory:
    def factory(args: dict[str, Any]) -> Any:
        if args:
            msg = f"takes no args, got {sorted(args)}"
            raise TypeError(msg)
        return matcher

    return factory


def register_core_matchers(builder: RegistryBuilder) -> RegistryBuilder:
    """Register the built-in predicate and comparison matchers.

    Names and args:

    | Name                  | args                          |
    |-----------------------|-------------------------------|
    | anything, defined,    | (none)                        |
    | empty                 |                               |
    | boolean, number, int  | ``expected`` (optional)       |
    | string                | ``expected``, ``ignore_case`` |
    | between               | ``lower``, ``upper``          |
    | greater_than, ...     | ``bound``                     |
    | prop                  | ``name``                      |
    """
    return (
        builder.matcher("anything", _constant(anything))
        .matcher("defined", _constant(defined))
        .matcher("empty", _constant(empty))
        .matcher("boolean", _kwargs(match_boolean))
        .matcher("number", _kwargs(match_number))
        .matcher("int", _kwargs(match_int))
        .matcher("string", _kwargs(match_string))
        .matcher("between", _kwargs(between))
        .matcher("greater_than", _kwargs(greater_than))
        .matcher("greater_than_equals", _kwargs(greater_than_equals))
        .matcher("less_than", _kwargs(less_than))
        .matcher("less_than_equals", _kwargs(less_than_equals))
        .matcher("prop", _kwargs(match_prop))
    )


# ═══════════════════════════════════════════════════════════════════════════════
# Registry
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Registry:
    """Immutable registry of named matcher factories.

    Constructed via RegistryBuilder. Use load_pattern() to compile config
    into a runtime Matcher.
    """

    _matcher_factories: MappingProxyType[str, MatcherFactory] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def load_pattern(self, config: PatternConfig) -> Any:
        """Load a Matcher from configuration.

        Raises:
            UnknownMatcherError: a named matcher is not registered
            InvalidConfigError: factory rejected its args, or invalid regex
            TooManyPatternsError: too many children in a compound pattern
            PatternTooLongError: literal or regex exceeds length limit
            DepthExceededError: nesting exceeds MAX_DEPTH
        """
        logger.debug("casework.registry.load kind={}", type(config).__name__)
        return self._load(config, 1)

    @property
    def matcher_count(self) -> int:
        """Number of registered matcher names."""
        return len(self._matcher_factories)

    def contains_matcher(self, name: str) -> bool:
        """Check if a matcher name is registered."""
        return name in self._matcher_factories

    def matcher_names(self) -> list[str]:
        """Return all registered matcher names (sorted)."""
        return sorted(self._matcher_factories.keys())

    # ── Private loading methods ────────────────────────────────────────────

    def _load(self, config: PatternConfig, depth: int) -> Any:
        if depth > MAX_DEPTH:
            raise DepthExceededError(depth, MAX_DEPTH)
        inner = depth + 1

        match config:
            case LiteralConfig(value=value):
                if isinstance(value, str) and len(value) > MAX_LITERAL_LENGTH:
                    raise PatternTooLongError(len(value), MAX_LITERAL_LENGTH)
                return equals(value)
            case RegexConfig(pattern=pattern):
                return _compile_regex(pattern)
            case ArrayConfig(elements=None):
                return match_array()
            case ArrayConfig(elements=elements):
                return match_array(self._load_all(elements, inner))
            case ObjectConfig(fields=None):
                return match_object()
            case ObjectConfig(fields=fields):
                _check_width(fields)
                return match_object(
                    {key: self._load(value, inner) for key, value in fields}
                )
            case MaybeConfig(pattern=pattern):
                return maybe(self._load(pattern, inner))
            case GroupConfig(patterns=patterns):
                return group(*self._load_all(patterns, inner))
            case SomeConfig(pattern=pattern):
                return some(self._load(pattern, inner))
            case RestConfig():
                return rest
            case OneOfConfig(alternatives=alternatives):
                return one_of(*self._load_all(alternatives, inner))
            case AllOfConfig(alternatives=alternatives):
                return all_of(*self._load_all(alternatives, inner))
            case NotConfig(pattern=pattern):
                return not_(self._load(pattern, inner))
            case NamedConfig():
                return self._load_named(config)
            case _:  # pragma: no cover
                msg = f"unknown pattern config type: {type(config).__name__}"
                raise InvalidConfigError(msg)

    def _load_all(
        self, configs: tuple[PatternConfig, ...], depth: int
    ) -> list[Any]:
        _check_width(configs)
        return [self._load(c, depth) for c in configs]

    def _load_named(self, config: NamedConfig) -> Any:
        factory = self._matcher_factories.get(config.name)
        if factory is None:
            raise UnknownMatcherError(
                config.name, list(self._matcher_factories.keys())
            )
        try:
            built = factory(config.args)
        except Exception as e:
            msg = f"matcher {config.name!r}: {e}"
            raise InvalidConfigError(msg) from e
        return build_matcher(built)


# ═══════════════════════════════════════════════════════════════════════════════
# Limit checks
# ═══════════════════════════════════════════════════════════════════════════════


def _check_width(children: Sized) -> None:
    if len(children) > MAX_PATTERNS_PER_COMPOUND:
        raise TooManyPatternsError(len(children), MAX_PATTERNS_PER_COMPOUND)


def _compile_regex(pattern: str) -> Any:
    if len(pattern) > MAX_REGEX_PATTERN_LENGTH:
        raise PatternTooLongError(len(pattern), MAX_REGEX_PATTERN_LENGTH)
    try:
        return match_regexp(pattern)
    except MatcherError as e:
        msg = f"invalid regex pattern: {e}"
        raise InvalidConfigError(msg) from e
