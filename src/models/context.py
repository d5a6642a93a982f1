"""
Parse context model

Defines ParseContext, the explicit state object threaded through every
parser call. It holds the only mutable state of a parse: the active
whitespace policy (a save-override-restore slot) and the furthest-failure
bookkeeping used for diagnostics.
"""

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Iterator, Optional, Tuple, TYPE_CHECKING

from .cursor import View
from .results import Failed, FailureRecord, Parsed

if TYPE_CHECKING:
    from ..lib.matchers import PrefixMatcher
    from ..lib.parser import Parser


@dataclass
class ParseContext:
    """
    Per-parse state container (state bus pattern).

    Attributes:
        whitespace: Active whitespace policy, or None for "skip nothing"
        verbosity: Logging verbosity level for this parse (0-3)
        furthest: Deepest failure recorded so far, if any
        suspended: Nesting depth of failures_suspended() blocks
    """

    whitespace: Optional["Parser[Any]"] = field(default=None)
    verbosity: int = field(default=1)
    furthest: Optional[FailureRecord] = field(default=None)
    suspended: int = field(default=0)

    @contextmanager
    def whitespace_override(self, policy: Optional["Parser[Any]"]) -> Iterator[None]:
        """
        Install a whitespace policy for the duration of a with-block

        The previous policy is restored on every exit path, including
        failures and exceptions raised by user transforms.
        """
        saved = self.whitespace
        self.whitespace = policy
        try:
            yield
        finally:
            self.whitespace = saved

    @contextmanager
    def failures_suspended(self) -> Iterator[None]:
        self.suspended += 1
        try:
            yield
        finally:
            self.suspended -= 1

    def whitespace_skip(self, view: View) -> View:
        """
        Skip whatever the active policy matches at the start of `view`

        A failing policy consumes nothing. Whitespace failures are never
        recorded as diagnostics.
        """
        if self.whitespace is None:
            return view
        with self.failures_suspended():
            result = self.whitespace.parse(view, self)
        if isinstance(result, Parsed):
            return result.rest
        return view

    @property
    def whitespace_prefixes(self) -> Tuple["PrefixMatcher", ...]:
        if self.whitespace is None:
            return ()
        return self.whitespace.expectation.prefixes

    def failure_record(self, failed: Failed) -> None:
        """
        Remember `failed` if it is at least as deep as the furthest so far

        A deeper failure replaces the record; one at the same offset merges
        its expected sets into it.
        """
        if self.suspended:
            return
        if self.furthest is None or failed.at.start > self.furthest.offset:
            self.furthest = FailureRecord(failed.at, failed.expected, failed.expected_whitespace)
        elif failed.at.start == self.furthest.offset:
            self.furthest.merge(failed)

    def reset(self) -> None:
        self.furthest = None
        self.suspended = 0
