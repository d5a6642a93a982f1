"""
Whitespace scoping

The whitespace policy is the parser that decides what counts as skippable
input between tokens. It lives on the ParseContext, not in a global, and is
consulted only by the combinators in this module: plain sequence() and
repeat() never skip anything, so whitespace sensitivity stays an explicit,
visible property of each grammar rule.

with_whitespace() installs a different policy (or none) for the duration
of a subtree, e.g. to make string literals whitespace-sensitive inside an
otherwise free-form grammar. The outer policy is restored however the
subtree exits.

Example:
    >>> word = token(MatchMany(LETTERS))
    >>> words = one_or_more_skipping(word).with_whitespace(WHITESPACE)
    >>> words.parse_to_end("hello big world")
    ['hello', 'big', 'world']
"""

from typing import Any, Optional

from ..models.context import ParseContext
from ..models.cursor import View
from ..models.results import Failed, Parsed, ParseResult, ordered_union
from .matchers import MatchMany, PrefixMatcher
from .parser import Parser, as_parser, ignore, repeat, second, sequence, zero_or_more


def whitespace_policy(policy: Any) -> Optional[Parser]:
    """
    Normalize a whitespace policy

    None means "skip nothing". A matcher that supports run matching is
    wrapped in MatchMany so a single call swallows the whole run.
    """
    if policy is None or isinstance(policy, Parser):
        return policy
    if isinstance(policy, PrefixMatcher) and policy.supports_many and not isinstance(policy, MatchMany):
        policy = MatchMany(policy)
    return ignore(policy)


def skipping_whitespace(parser: Any) -> Parser:
    """Skip leading ambient whitespace, then run `parser`"""
    parser = as_parser(parser)

    def parse(view: View, context: ParseContext) -> ParseResult:
        start = context.whitespace_skip(view)
        result = parser.parse(start, context)
        if isinstance(result, Failed) and result.at.start == start.start and context.whitespace is not None:
            return Failed(
                result.at,
                result.expected,
                ordered_union(result.expected_whitespace, context.whitespace_prefixes),
            )
        return result

    return Parser(parse, lambda: parser.expectation.with_ambient(), parser.label)


def skipping_trailing_whitespace(parser: Any) -> Parser:
    """Run `parser`, then skip trailing ambient whitespace if it succeeded"""
    parser = as_parser(parser)

    def parse(view: View, context: ParseContext) -> ParseResult:
        result = parser.parse(view, context)
        if isinstance(result, Parsed):
            return Parsed(result.value, context.whitespace_skip(result.rest))
        return result

    return Parser(parse, lambda: parser.expectation, parser.label)


def with_whitespace(parser: Any, policy: Any) -> Parser:
    """
    Run `parser` with `policy` as the ambient whitespace

    Args:
        parser: Subtree to run under the policy
        policy: Parser, PrefixMatcher, str, or None to disable skipping
    """
    parser = as_parser(parser)
    policy = whitespace_policy(policy)

    def parse(view: View, context: ParseContext) -> ParseResult:
        with context.whitespace_override(policy):
            return parser.parse(view, context)

    def derive():
        prefixes = policy.expectation.prefixes if policy is not None else ()
        return parser.expectation.with_whitespace(prefixes)

    return Parser(parse, derive, parser.label)


def sequence_skipping(*parsers: Any) -> Parser[tuple]:
    """sequence() that skips ambient whitespace between operands"""
    if not parsers:
        raise ValueError("sequence_skipping() needs at least one parser")
    head, *tail = parsers
    return sequence(head, *(skipping_whitespace(parser) for parser in tail))


def zero_or_more_skipping(parser: Any) -> Parser[list]:
    """
    zero_or_more() that skips ambient whitespace before each attempt after
    the first; whitespace before a failed attempt is left unconsumed
    """
    parser = as_parser(parser)
    return repeat(parser, minimum=0, attempt=skipping_whitespace(parser))


def one_or_more_skipping(parser: Any) -> Parser[list]:
    parser = as_parser(parser)
    return repeat(parser, minimum=1, attempt=skipping_whitespace(parser))


def separated(parser: Any, separator: Any) -> Parser[list]:
    """
    One or more `parser` values separated by `separator`

    Ambient whitespace is skipped on both sides of each separator; the
    separators' values are dropped.
    """
    parser = as_parser(parser)
    tail = zero_or_more(second(sequence_skipping(separator, parser)).skipping_whitespace())
    return sequence(parser, tail).map(lambda values: [values[0], *values[1]])
