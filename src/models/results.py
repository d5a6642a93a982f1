"""
Match and parse outcome models

Type-safe structures returned by matchers and parsers. Failures are values,
never exceptions: only the driver turns an unrecovered Failed into a
ParseError.
"""

from dataclasses import dataclass
from typing import Any, Generic, Iterable, Optional, Tuple, TypeVar, Union, TYPE_CHECKING

from .cursor import View

if TYPE_CHECKING:
    from ..lib.matchers import PrefixMatcher


T = TypeVar("T")


def ordered_union(*groups: Iterable[Any]) -> Tuple[Any, ...]:
    """Concatenate groups, dropping repeats but keeping first-appearance order"""
    return tuple(dict.fromkeys(item for group in groups for item in group))


@dataclass(frozen=True)
class Matched:
    """
    A matcher consumed source[start:end]

    `start == end` is a successful zero-width match (e.g. an optional matcher
    whose inner matcher did not apply) and is distinct from NO_MATCH.
    """
    start: int
    end: int

    @property
    def width(self) -> int:
        return self.end - self.start

    def __bool__(self) -> bool:
        return True


class NoMatch:
    """The matcher does not apply at this position"""

    _instance: Optional["NoMatch"] = None

    def __new__(cls) -> "NoMatch":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NO_MATCH"


NO_MATCH = NoMatch()

MatchOutcome = Union[Matched, NoMatch]


@dataclass(frozen=True)
class Expectation:
    """
    Static diagnostic metadata carried by every parser

    Derived structurally when a grammar is built, never by running it.

    Attributes:
        prefixes: Matchers that could be attempted at the parser's entry point
        whitespace: Whitespace matchers that may be skipped at the entry point
        ambient_whitespace: The parser skips whatever whitespace policy is
                            active at run time (resolved when the parser is
                            wrapped in with_whitespace(), or at failure time)
    """
    prefixes: Tuple["PrefixMatcher", ...] = ()
    whitespace: Tuple["PrefixMatcher", ...] = ()
    ambient_whitespace: bool = False

    def union(self, other: "Expectation") -> "Expectation":
        return Expectation(
            prefixes=ordered_union(self.prefixes, other.prefixes),
            whitespace=ordered_union(self.whitespace, other.whitespace),
            ambient_whitespace=self.ambient_whitespace or other.ambient_whitespace,
        )

    def with_ambient(self) -> "Expectation":
        return Expectation(self.prefixes, self.whitespace, True)

    def with_whitespace(self, policy: Tuple["PrefixMatcher", ...]) -> "Expectation":
        """Resolve the ambient marker against a concrete whitespace policy"""
        if not self.ambient_whitespace:
            return self
        return Expectation(self.prefixes, ordered_union(self.whitespace, policy), False)


EMPTY_EXPECTATION = Expectation()


@dataclass(frozen=True)
class Parsed(Generic[T]):
    """Successful parse: the produced value and the input left over"""
    value: T
    rest: View

    def __bool__(self) -> bool:
        return True


@dataclass(frozen=True)
class Failed:
    """
    Failed parse

    Attributes:
        at: Remaining input where matching stopped
        expected: Matchers that were expected at `at`
        expected_whitespace: Whitespace matchers that were allowed before them
    """
    at: View
    expected: Tuple["PrefixMatcher", ...] = ()
    expected_whitespace: Tuple["PrefixMatcher", ...] = ()

    def __bool__(self) -> bool:
        return False


ParseResult = Union[Parsed[T], Failed]


@dataclass
class FailureRecord:
    """
    Furthest failure seen during one parse

    Kept by ParseContext; failures at the same offset merge their expected
    sets so the final diagnostic lists every alternative tried there.
    """
    at: View
    expected: Tuple["PrefixMatcher", ...] = ()
    expected_whitespace: Tuple["PrefixMatcher", ...] = ()

    @property
    def offset(self) -> int:
        return self.at.start

    def merge(self, failed: Failed) -> None:
        self.expected = ordered_union(self.expected, failed.expected)
        self.expected_whitespace = ordered_union(self.expected_whitespace, failed.expected_whitespace)
