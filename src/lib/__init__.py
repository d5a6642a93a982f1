"""
prefixparse - Backtracking parser-combinator engine

Composable prefix matchers and typed parser combinators with scoped
whitespace handling and furthest-failure diagnostics.
"""

__version__ = "0.1.0"

from .matchers import (
    ALPHANUMERICS,
    DIGITS,
    END_OF_INPUT,
    LETTERS,
    NEWLINES,
    WHITESPACE,
    CharacterClass,
    EndOfInput,
    Literal,
    MatchMany,
    MatchOptional,
    PrefixMatcher,
    Regex,
    as_matcher,
    match_zero_or_more,
)
from .parser import (
    Deferred,
    Parser,
    as_parser,
    capture,
    either,
    first,
    ignore,
    one_of,
    one_or_more,
    optional,
    recursive,
    repeat,
    second,
    sequence,
    token,
    value,
    zero_or_more,
)
from .whitespace import (
    one_or_more_skipping,
    separated,
    sequence_skipping,
    skipping_trailing_whitespace,
    skipping_whitespace,
    whitespace_policy,
    with_whitespace,
    zero_or_more_skipping,
)
from .driver import BufferIdentityError, ParseError, location_find, parse_to_end
from .log import LOG, context_connectToLogger

__all__ = [
    "ALPHANUMERICS",
    "DIGITS",
    "END_OF_INPUT",
    "LETTERS",
    "NEWLINES",
    "WHITESPACE",
    "CharacterClass",
    "EndOfInput",
    "Literal",
    "MatchMany",
    "MatchOptional",
    "PrefixMatcher",
    "Regex",
    "as_matcher",
    "match_zero_or_more",
    "Deferred",
    "Parser",
    "as_parser",
    "capture",
    "either",
    "first",
    "ignore",
    "one_of",
    "one_or_more",
    "optional",
    "recursive",
    "repeat",
    "second",
    "sequence",
    "token",
    "value",
    "zero_or_more",
    "one_or_more_skipping",
    "separated",
    "sequence_skipping",
    "skipping_trailing_whitespace",
    "skipping_whitespace",
    "whitespace_policy",
    "with_whitespace",
    "zero_or_more_skipping",
    "BufferIdentityError",
    "ParseError",
    "location_find",
    "parse_to_end",
    "LOG",
    "context_connectToLogger",
    "__version__",
]
