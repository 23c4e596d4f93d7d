"""casework — structural pattern matching for Python values.

Declarative patterns (literals, regexes, lists, dicts, types, callables) are
normalized into matchers that return a Matched/Unmatched result with
diagnostics. All public types are exported from this module for flat imports:

    from casework import match_array, match_object, maybe, some, rest, one_of

Logging goes through loguru and is disabled for this package by default;
call ``logger.enable("casework")`` to see it.
"""

from loguru import logger

__version__ = "0.1.0"

# Cache
from casework._cache import CachedAttributes, CachedMapping, CachedValue

# Composition
from casework._compose import (
    AllOf,
    Not,
    OneOf,
    When,
    all_of,
    match,
    not_,
    one_of,
    otherwise,
    when,
)

# Config types: see casework._config for details
from casework._config import (
    AllOfConfig,
    ArrayConfig,
    ConfigParseError,
    GroupConfig,
    LiteralConfig,
    MaybeConfig,
    NamedConfig,
    NotConfig,
    ObjectConfig,
    OneOfConfig,
    PatternConfig,
    RegexConfig,
    RestConfig,
    SomeConfig,
    parse_pattern_config,
)

# Cursor
from casework._cursor import Cursor, as_cursor, consume_one

# Core matchers and errors
from casework._matcher import (
    UNBOUND,
    ComparisonMatcher,
    CursorJumpError,
    EqualsMatcher,
    FunctionMatcher,
    InstanceMatcher,
    MarkerMatcherError,
    MatcherError,
    PredicateMatcher,
    PropMatcher,
    RangeMatcher,
    StringMatcher,
    TypedMatcher,
    UnbuildableMatchableError,
    ZeroAdvanceError,
    anything,
    between,
    build_matcher,
    defined,
    empty,
    equals,
    greater_than,
    greater_than_equals,
    is_matcher,
    is_regexp,
    less_than,
    less_than_equals,
    match_boolean,
    match_instance,
    match_int,
    match_number,
    match_predicate,
    match_prop,
    match_string,
)

# Quantifiers
from casework._quantifiers import Group, Maybe, Rest, Some, group, maybe, rest, some
from casework._regexp import RegExpMatcher, match_regexp

# Registry: see casework._registry for details
from casework._registry import (
    MAX_DEPTH,
    MAX_LITERAL_LENGTH,
    MAX_PATTERNS_PER_COMPOUND,
    MAX_REGEX_PATTERN_LENGTH,
    DepthExceededError,
    InvalidConfigError,
    PatternTooLongError,
    Registry,
    RegistryBuilder,
    TooManyPatternsError,
    UnknownMatcherError,
    register_core_matchers,
)

# Results
from casework._result import (
    Matched,
    Result,
    Unmatched,
    accepts_result,
    map_matched,
    map_matched_matcher,
    map_matched_result,
    map_matcher,
    map_result,
    map_result_matcher,
    matched,
    unmatched,
)

# Structural
from casework._structural import (
    ArrayMatcher,
    ObjectMatcher,
    is_sequence_like,
    match_array,
    match_object,
)
from casework._types import Matchable, Matcher, SequenceMatcher

logger.disable("casework")

__all__ = [
    # Protocols
    "Matcher",
    "SequenceMatcher",
    "Matchable",
    # Results
    "Matched",
    "Unmatched",
    "Result",
    "matched",
    "unmatched",
    "map_matched",
    "map_matched_result",
    "map_result",
    "map_result_matcher",
    "map_matched_matcher",
    "map_matcher",
    "accepts_result",
    # Errors
    "MatcherError",
    "MarkerMatcherError",
    "ZeroAdvanceError",
    "UnbuildableMatchableError",
    "CursorJumpError",
    # Core matchers
    "UNBOUND",
    "PredicateMatcher",
    "FunctionMatcher",
    "EqualsMatcher",
    "TypedMatcher",
    "StringMatcher",
    "InstanceMatcher",
    "ComparisonMatcher",
    "RangeMatcher",
    "PropMatcher",
    "anything",
    "defined",
    "empty",
    "match_predicate",
    "equals",
    "match_boolean",
    "match_number",
    "match_int",
    "match_string",
    "match_instance",
    "match_prop",
    "between",
    "greater_than",
    "greater_than_equals",
    "less_than",
    "less_than_equals",
    "is_matcher",
    "is_regexp",
    "build_matcher",
    "RegExpMatcher",
    "match_regexp",
    # Structural
    "ArrayMatcher",
    "ObjectMatcher",
    "is_sequence_like",
    "match_array",
    "match_object",
    # Cursor
    "Cursor",
    "as_cursor",
    "consume_one",
    # Quantifiers
    "Maybe",
    "Group",
    "Some",
    "Rest",
    "maybe",
    "group",
    "some",
    "rest",
    # Composition
    "OneOf",
    "AllOf",
    "Not",
    "When",
    "one_of",
    "all_of",
    "not_",
    "when",
    "otherwise",
    "match",
    # Cache
    "CachedMapping",
    "CachedAttributes",
    "CachedValue",
    # Config types
    "LiteralConfig",
    "RegexConfig",
    "ArrayConfig",
    "ObjectConfig",
    "MaybeConfig",
    "GroupConfig",
    "SomeConfig",
    "RestConfig",
    "OneOfConfig",
    "AllOfConfig",
    "NotConfig",
    "NamedConfig",
    "PatternConfig",
    "ConfigParseError",
    "parse_pattern_config",
    # Registry
    "RegistryBuilder",
    "Registry",
    "register_core_matchers",
    "UnknownMatcherError",
    "InvalidConfigError",
    "TooManyPatternsError",
    "PatternTooLongError",
    "DepthExceededError",
    "MAX_DEPTH",
    "MAX_PATTERNS_PER_COMPOUND",
    "MAX_REGEX_PATTERN_LENGTH",
    "MAX_LITERAL_LENGTH",
]
