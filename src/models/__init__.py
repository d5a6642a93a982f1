"""
Models package for prefixparse

Contains the data structures passed between matchers, parsers and the driver.
"""

from .cursor import View
from .context import ParseContext
from .results import (
    EMPTY_EXPECTATION,
    NO_MATCH,
    Expectation,
    Failed,
    FailureRecord,
    Matched,
    MatchOutcome,
    NoMatch,
    Parsed,
    ParseResult,
)

__all__ = [
    "View",
    "ParseContext",
    "EMPTY_EXPECTATION",
    "NO_MATCH",
    "Expectation",
    "Failed",
    "FailureRecord",
    "Matched",
    "MatchOutcome",
    "NoMatch",
    "Parsed",
    "ParseResult",
]
