"""
Parser combinators

Builds recursive-descent parsers out of prefix matchers. A Parser wraps a
parse function (View, ParseContext) -> Parsed | Failed together with a
statically derived Expectation: the matchers that could be tried at its
entry point. The expectation is computed structurally from the way the
parser was built, never by running it, and is only used for diagnostics.

Backtracking is free: views are immutable, so every alternative, optional
or repetition attempt restarts from the exact view it was handed.

Example:
    >>> number = token(MatchMany(DIGITS), int)
    >>> operator = either("+", "-")
    >>> expr = sequence(number, zero_or_more(sequence(operator, number)))
    >>> expr.parse_to_end("12+3-4")
    (12, [('+', 3), ('-', 4)])
"""

from typing import Any, Callable, Generic, List, Optional, TypeVar

from ..models.context import ParseContext
from ..models.cursor import View
from ..models.results import (
    EMPTY_EXPECTATION,
    Expectation,
    Failed,
    Parsed,
    ParseResult,
    ordered_union,
)
from .matchers import PrefixMatcher, as_matcher


T = TypeVar("T")
U = TypeVar("U")


class Parser(Generic[T]):
    """
    A typed combinator producing a value of type T from a prefix of the input

    Attributes:
        label: Optional readable name used in repr() and debug logs
    """

    # Derivation bookkeeping shared by all parsers. Grammars are built and
    # inspected on a single thread, so class-level counters are enough.
    _derivation_depth = 0
    _cycle_hit = False

    def __init__(
        self,
        fn: Callable[[View, ParseContext], ParseResult],
        derive: Optional[Callable[[], Expectation]] = None,
        label: Optional[str] = None,
    ):
        self._fn = fn
        self._derive = derive
        self._expectation: Optional[Expectation] = None
        self._deriving = False
        self.label = label

    @property
    def expectation(self) -> Expectation:
        """
        Static diagnostic metadata, derived once and cached

        A parser met again while its own expectation is being derived (a
        self-referential grammar) contributes nothing to that derivation.
        Parsers whose result depended on such a cut are not cached, except
        the root of the derivation, so that a later request starting from
        them sees the full cycle.
        """
        if self._expectation is not None:
            return self._expectation
        if self._derive is None:
            self._expectation = EMPTY_EXPECTATION
            return self._expectation
        if self._deriving:
            Parser._cycle_hit = True
            return EMPTY_EXPECTATION

        root = Parser._derivation_depth == 0
        outer_hit = Parser._cycle_hit
        Parser._cycle_hit = False
        Parser._derivation_depth += 1
        self._deriving = True
        try:
            expectation = self._derive()
        finally:
            self._deriving = False
            Parser._derivation_depth -= 1
            hit = Parser._cycle_hit
            Parser._cycle_hit = False if root else (outer_hit or hit)
        if root or not hit:
            self._expectation = expectation
        return expectation

    @property
    def expected_prefixes(self):
        return self.expectation.prefixes

    @property
    def expected_whitespace(self):
        return self.expectation.whitespace

    def parse(self, view: View, context: ParseContext) -> ParseResult:
        """
        Run this parser against `view`

        A failure at this parser's own entry point is stamped with its
        static expectation. Every failure is offered to the context for
        furthest-failure reporting.
        """
        result = self._fn(view, context)
        if isinstance(result, Failed):
            if result.at.start == view.start:
                expectation = self.expectation
                whitespace = expectation.whitespace
                if expectation.ambient_whitespace:
                    whitespace = ordered_union(whitespace, context.whitespace_prefixes)
                result = Failed(
                    result.at,
                    ordered_union(expectation.prefixes, result.expected),
                    ordered_union(whitespace, result.expected_whitespace),
                )
            context.failure_record(result)
        return result

    def parse_to_end(self, source: str, whitespace: Any = None, context: Optional[ParseContext] = None) -> T:
        """Parse the whole of `source`; see driver.parse_to_end()"""
        from .driver import parse_to_end
        return parse_to_end(self, source, whitespace=whitespace, context=context)

    # Builder methods mirroring the module-level functions

    def map(self, transform: Callable[[T], U]) -> "Parser[U]":
        """Apply a pure transform to the value of a successful parse"""
        def parse(view: View, context: ParseContext) -> ParseResult:
            result = self.parse(view, context)
            if isinstance(result, Parsed):
                return Parsed(transform(result.value), result.rest)
            return result
        return Parser(parse, lambda: self.expectation, self.label)

    def then(self, *others: Any) -> "Parser[tuple]":
        return sequence(self, *others)

    def then_skipping(self, *others: Any) -> "Parser[tuple]":
        from .whitespace import sequence_skipping
        return sequence_skipping(self, *others)

    def or_else(self, *others: Any) -> "Parser":
        return either(self, *others)

    def optional(self, default: Any = None) -> "Parser":
        return optional(self, default)

    def zero_or_more(self) -> "Parser[List[T]]":
        return zero_or_more(self)

    def one_or_more(self) -> "Parser[List[T]]":
        return one_or_more(self)

    def skipping_whitespace(self) -> "Parser[T]":
        from .whitespace import skipping_whitespace
        return skipping_whitespace(self)

    def skipping_trailing_whitespace(self) -> "Parser[T]":
        from .whitespace import skipping_trailing_whitespace
        return skipping_trailing_whitespace(self)

    def with_whitespace(self, policy: Any) -> "Parser[T]":
        from .whitespace import with_whitespace
        return with_whitespace(self, policy)

    def named(self, label: str) -> "Parser[T]":
        self.label = label
        return self

    def __repr__(self) -> str:
        if self.label:
            return f"<Parser {self.label}>"
        return f"<Parser at {id(self):#x}>"


def as_parser(obj: Any) -> Parser:
    """Coerce a matcher or plain string to a token parser; pass parsers through"""
    if isinstance(obj, Parser):
        return obj
    return token(as_matcher(obj))


# Primitive lifts

def token(matcher: Any, transform: Optional[Callable[[str], T]] = None) -> Parser:
    """
    Lift a matcher to a parser yielding the matched text

    Args:
        matcher: PrefixMatcher, or a str taken as a Literal
        transform: Optional function applied to the matched text
    """
    matcher = as_matcher(matcher)

    def parse(view: View, context: ParseContext) -> ParseResult:
        halves = matcher.split(view)
        if halves is None:
            return Failed(view, (matcher,))
        matched, rest = halves
        text = matched.text
        return Parsed(transform(text) if transform is not None else text, rest)

    expectation = Expectation((matcher,))
    return Parser(parse, lambda: expectation, matcher.description())


def capture(matcher: Any) -> Parser[View]:
    """Lift a matcher to a parser yielding the matched View itself"""
    matcher = as_matcher(matcher)

    def parse(view: View, context: ParseContext) -> ParseResult:
        halves = matcher.split(view)
        if halves is None:
            return Failed(view, (matcher,))
        return Parsed(halves[0], halves[1])

    expectation = Expectation((matcher,))
    return Parser(parse, lambda: expectation, matcher.description())


def value(matcher: Any, constant: T) -> Parser[T]:
    """Lift a matcher to a parser yielding `constant` whenever it matches"""
    return token(matcher, lambda _: constant)


def ignore(matcher: Any) -> Parser[None]:
    return value(matcher, None)


# Structural combinators

def sequence(*parsers: Any) -> Parser[tuple]:
    """
    Run parsers one after another, without skipping whitespace

    Yields a flat tuple of the operands' values. Fails where the first
    failing operand fails; later operands are never attempted.

    Raises:
        ValueError: If called without operands
    """
    if not parsers:
        raise ValueError("sequence() needs at least one parser")
    parsers = tuple(as_parser(parser) for parser in parsers)

    def parse(view: View, context: ParseContext) -> ParseResult:
        values = []
        rest = view
        for parser in parsers:
            result = parser.parse(rest, context)
            if isinstance(result, Failed):
                return result
            values.append(result.value)
            rest = result.rest
        return Parsed(tuple(values), rest)

    # Only the first operand can be expected at the sequence's entry point
    return Parser(parse, lambda: parsers[0].expectation)


def either(*parsers: Any) -> Parser:
    """
    Ordered choice

    Every branch is tried against the original view and the first success
    wins. When all branches fail, the last-tried branch's failure is
    returned; the driver may still report a deeper failure recorded in the
    context.
    """
    if not parsers:
        raise ValueError("either() needs at least one parser")
    parsers = tuple(as_parser(parser) for parser in parsers)

    def parse(view: View, context: ParseContext) -> ParseResult:
        result: ParseResult = Failed(view)
        for parser in parsers:
            result = parser.parse(view, context)
            if isinstance(result, Parsed):
                return result
        return result

    def derive() -> Expectation:
        expectation = EMPTY_EXPECTATION
        for parser in parsers:
            expectation = expectation.union(parser.expectation)
        return expectation

    return Parser(parse, derive)


def one_of(*matchers: Any) -> Parser[PrefixMatcher]:
    """Ordered choice over matchers, yielding the matcher that matched"""
    if not matchers:
        raise ValueError("one_of() needs at least one matcher")
    matchers = tuple(as_matcher(matcher) for matcher in matchers)

    def parse(view: View, context: ParseContext) -> ParseResult:
        for matcher in matchers:
            halves = matcher.split(view)
            if halves is not None:
                return Parsed(matcher, halves[1])
        return Failed(view, matchers)

    expectation = Expectation(matchers)
    return Parser(parse, lambda: expectation)


def optional(parser: Any, default: Any = None) -> Parser:
    """Zero or one: never fails, yielding `default` without consuming input"""
    parser = as_parser(parser)

    def parse(view: View, context: ParseContext) -> ParseResult:
        result = parser.parse(view, context)
        if isinstance(result, Parsed):
            return result
        return Parsed(default, view)

    return Parser(parse, lambda: parser.expectation)


def repeat(parser: Any, minimum: int = 0, attempt: Optional[Parser] = None) -> Parser[list]:
    """
    Greedy repetition collecting values in order

    Stops at the first failed attempt, or at a success that consumed
    nothing, and resumes from the end of the last success.

    Args:
        parser: Parser for the first occurrence
        minimum: Number of occurrences required (0 or 1 in practice)
        attempt: Parser for occurrences after the first (defaults to parser)
    """
    parser = as_parser(parser)
    attempt = parser if attempt is None else attempt

    def parse(view: View, context: ParseContext) -> ParseResult:
        values = []
        rest = view
        result = parser.parse(rest, context)
        while isinstance(result, Parsed):
            values.append(result.value)
            if result.rest.start == rest.start:
                break
            rest = result.rest
            result = attempt.parse(rest, context)
        if len(values) < minimum:
            return result
        return Parsed(values, rest)

    return Parser(parse, lambda: parser.expectation)


def zero_or_more(parser: Any) -> Parser[list]:
    return repeat(parser, minimum=0)


def one_or_more(parser: Any) -> Parser[list]:
    return repeat(parser, minimum=1)


def first(parser: Parser[tuple]) -> Parser:
    return parser.map(lambda values: values[0])


def second(parser: Parser[tuple]) -> Parser:
    return parser.map(lambda values: values[1])


# Recursive grammars

class Deferred(Parser[T]):
    """
    Placeholder for a parser that is not built yet

    Holds a single cell that is filled once, right after the grammar that
    refers to it has been constructed, and read only while matching.
    """

    def __init__(self, label: Optional[str] = None):
        super().__init__(self._unresolved, None, label)
        self.target: Optional[Parser[T]] = None

    def resolve(self, target: Parser[T]) -> None:
        if self.target is not None:
            raise RuntimeError(f"{self!r} is already resolved")
        self.target = target

    def _unresolved(self, view: View, context: ParseContext) -> ParseResult:
        raise RuntimeError(f"{self!r} was used before it was resolved")

    def parse(self, view: View, context: ParseContext) -> ParseResult:
        if self.target is None:
            return self._unresolved(view, context)
        return self.target.parse(view, context)

    @property
    def expectation(self) -> Expectation:
        if self.target is None:
            Parser._cycle_hit = True
            return EMPTY_EXPECTATION
        return self.target.expectation


def recursive(build: Callable[[Parser[T]], Any]) -> Parser[T]:
    """
    Fixpoint for self-referential grammars

    Example:
        >>> nested = recursive(lambda this: either(
        ...     sequence("(", this, ")").map(lambda v: [v[1]]),
        ...     token("x"),
        ... ))
        >>> nested.parse_to_end("((x))")
        [['x']]
    """
    this: Deferred[T] = Deferred()
    target = as_parser(build(this))
    this.resolve(target)
    if target.label and this.label is None:
        this.label = target.label
    return target
