"""
Driver: run a parser over a complete input

parse_to_end() anchors a grammar to the end of the input and turns an
unrecovered failure into a ParseError located by line and column.

Which failure is reported is governed by
appsettings.report_furthest_failure: by default the deepest failure any
branch reached (the context's furthest record), otherwise the position at
which the top-level parser itself gave up, i.e. the last-tried branch.
"""

import time
from itertools import islice
from typing import Any, List, Optional, Sequence, Tuple

from ..models.context import ParseContext
from ..models.cursor import View
from ..models.results import Failed, Parsed
from .log import LOG, context_connectToLogger
from .matchers import END_OF_INPUT, PrefixMatcher
from .parser import Parser, as_parser, first, sequence, token
from .whitespace import skipping_whitespace, whitespace_policy


class BufferIdentityError(AssertionError):
    """A failure position does not point into the buffer being parsed"""


class ParseError(SyntaxError):
    """
    Located, human-readable parse failure

    Attributes:
        line: 1-based line of the failure position
        column: 0-based column within that line
        position: Absolute character offset of the failure
        expected: Descriptions of the matchers expected there
        expected_whitespace: Descriptions of the whitespace matchers allowed
                             before them (empty when none was permitted)
        remaining: Snippet of the input left at the failure position

    The inherited SyntaxError `lineno` and `offset` (1-based column) are
    filled in too, so tooling that formats SyntaxErrors locates it.
    """

    def __init__(
        self,
        line: int,
        column: int,
        position: int,
        expected: Sequence[str],
        expected_whitespace: Sequence[str],
        remaining: str,
    ):
        self.line = line
        self.column = column
        self.position = position
        self.expected: List[str] = list(expected)
        self.expected_whitespace: List[str] = list(expected_whitespace)
        self.remaining = remaining
        super().__init__(self.message_render())
        self.lineno = line
        self.offset = column + 1

    def message_render(self) -> str:
        """
        Render the error as one multi-line string

        Example output:
            Line 1, column 3: expected one of [0-9]
            Whitespace allowed: none

            Remaining input:
            <end of input>
        """
        expected = ", ".join(self.expected) if self.expected else "nothing"
        whitespace = ", ".join(self.expected_whitespace) if self.expected_whitespace else "none"
        remaining = self.remaining if self.remaining else "<end of input>"
        return (
            f"Line {self.line}, column {self.column}: expected one of {expected}\n"
            f"Whitespace allowed: {whitespace}\n"
            f"\n"
            f"Remaining input:\n"
            f"{remaining}"
        )

    def __str__(self) -> str:
        return self.message_render()


def location_find(source: str, remainder: View) -> Tuple[int, int]:
    """
    Locate where `remainder` starts within `source`

    Makes a single pass over the characters before the failure offset,
    counting newlines.

    Returns:
        (line, column): 1-based line, 0-based column

    Raises:
        BufferIdentityError: If `remainder` is not a tail of this very
                             buffer (an internal defect, not a parse error)
    """
    if not remainder.is_suffix_of(source):
        raise BufferIdentityError(
            f"Remainder {remainder!r} is not a suffix view of the {len(source)}-character source"
        )
    line, column = 1, 0
    for char in islice(source, remainder.start):
        if char == "\n":
            line += 1
            column = 0
        else:
            column += 1
    return line, column


def descriptions(matchers: Sequence[PrefixMatcher]) -> List[str]:
    return list(dict.fromkeys(matcher.description() for matcher in matchers))


def parse_to_end(
    parser: Any,
    source: str,
    whitespace: Any = None,
    context: Optional[ParseContext] = None,
) -> Any:
    """
    Parse all of `source` with `parser`

    Ambient whitespace is skipped before the grammar and before the
    end-of-input anchor, so a policy given here also permits leading and
    trailing whitespace.

    Args:
        parser: Top-level grammar (Parser, PrefixMatcher or str)
        source: Complete input text
        whitespace: Whitespace policy for this parse (None keeps the
                    context's own policy, which defaults to skipping nothing)
        context: Optional ParseContext to reuse; its furthest-failure
                 record is reset first and its whitespace policy is
                 restored afterwards

    Returns:
        The value produced by `parser`

    Raises:
        ParseError: If the input does not match in full
    """
    from ..config import appsettings

    grammar = as_parser(parser)
    if context is None:
        context = ParseContext(verbosity=appsettings.verbosity)
    context.reset()
    policy = whitespace_policy(whitespace) if whitespace is not None else context.whitespace
    context_connectToLogger(context)

    anchored: Parser = first(
        sequence(skipping_whitespace(grammar), skipping_whitespace(token(END_OF_INPUT)))
    )
    LOG(f"Parsing {len(source)} characters with {grammar!r}", level=2)

    started = time.perf_counter()
    try:
        with context.whitespace_override(policy):
            result = anchored.parse(View.of(source), context)
    finally:
        if appsettings.log_timing:
            LOG(f"Time to parse: {time.perf_counter() - started:.6f}s", level=2)

    if isinstance(result, Parsed):
        return result.value

    error = error_build(source, result, context)
    LOG(f"Parse failed\n{error}", level=1)
    raise error


def error_build(source: str, failed: Failed, context: ParseContext) -> ParseError:
    """Turn the top-level failure into a located ParseError"""
    from ..config import appsettings

    at, expected, whitespace = failed.at, failed.expected, failed.expected_whitespace
    furthest = context.furthest
    if appsettings.report_furthest_failure and furthest is not None and furthest.offset >= at.start:
        at, expected, whitespace = furthest.at, furthest.expected, furthest.expected_whitespace

    line, column = location_find(source, at)
    return ParseError(
        line=line,
        column=column,
        position=at.start,
        expected=descriptions(expected),
        expected_whitespace=descriptions(whitespace),
        remaining=appsettings.snippet_make(at.text),
    )
