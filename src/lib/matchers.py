"""
Primitive prefix matchers

A PrefixMatcher tests whether, and how much of, the start of a View it
consumes. Matchers are anchored at the view start and never search ahead.
They are frozen dataclasses: stateless, hashable, and safe to share between
grammars and parses.

Variants:
- Literal: exact text, optionally case-insensitive (Unicode casefold)
- Regex: a regular expression anchored at the view start
- CharacterClass: one member character, or a maximal run of them
- MatchOptional: always matches, zero-width when the inner matcher does not
- MatchMany: one or more repetitions of the inner matcher
- EndOfInput: zero-width anchor that matches only when nothing remains

Example:
    >>> digits = MatchMany(DIGITS)
    >>> digits.match(View.of("123abc"))
    Matched(start=0, end=3)
    >>> digits.description()
    '[0-9]+'
"""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, FrozenSet, Optional, Tuple, Union

from ..models.cursor import View
from ..models.results import NO_MATCH, Matched, MatchOutcome


class PrefixMatcher(ABC):
    """Base class for all primitive matchers"""

    @abstractmethod
    def match(self, view: View) -> MatchOutcome:
        """Match one occurrence at the start of `view`"""

    def match_many(self, view: View) -> Optional[MatchOutcome]:
        """
        Match the maximal run of occurrences at the start of `view`

        Returns None when the matcher has no native run matching, in which
        case MatchMany falls back to repeated single matches.
        """
        return None

    @property
    def supports_many(self) -> bool:
        return False

    @abstractmethod
    def description(self) -> str:
        """Human-readable form used verbatim in diagnostics"""

    def split(self, view: View) -> Optional[Tuple[View, View]]:
        """
        Match and split `view` into (matched, rest)

        Returns:
            The two halves on a match, None otherwise
        """
        outcome = self.match(view)
        if not outcome:
            return None
        assert outcome.start == view.start, f"{self.description()} matched away from the view start"
        matched, rest = view.split(outcome.end)
        assert matched.source is rest.source is view.source
        return matched, rest

    @property
    def parser(self):
        """This matcher lifted to a Parser yielding the matched text"""
        from .parser import token
        return token(self)

    @property
    def ignore(self):
        """This matcher lifted to a Parser yielding None"""
        from .parser import ignore
        return ignore(self)

    def __str__(self) -> str:
        return self.description()


def _quoted(text: str) -> str:
    return '"' + text.replace('\\', '\\\\').replace('"', '\\"') + '"'


@dataclass(frozen=True)
class Literal(PrefixMatcher):
    """
    Exact text at the start of the input

    Case-insensitive comparison uses str.casefold(), so folds that change
    length ("ß" against "SS") consume the right number of input characters.
    """
    text: str
    case_sensitive: bool = True

    def match(self, view: View) -> MatchOutcome:
        if self.case_sensitive:
            if view.startswith(self.text):
                return Matched(view.start, view.start + len(self.text))
            return NO_MATCH
        return self.caseless_match(view)

    def caseless_match(self, view: View) -> MatchOutcome:
        target = self.text.casefold()
        if not target:
            return Matched(view.start, view.start)
        folded = ""
        pos = view.start
        # Fold input one character at a time until it covers the target
        while pos < view.end and len(folded) < len(target):
            folded += view.source[pos].casefold()
            pos += 1
            if not target.startswith(folded[: len(target)]):
                return NO_MATCH
        if folded == target:
            return Matched(view.start, pos)
        return NO_MATCH

    def description(self) -> str:
        prefix = "^" if self.case_sensitive else "~^"
        return prefix + _quoted(self.text)


@dataclass(frozen=True)
class Regex(PrefixMatcher):
    """
    Regular expression anchored at the start of the input

    The compiled pattern runs against the remaining slice itself, so `^`,
    `\\b` and lookbehind never see text before the view start, and `$`
    matches at the end of the view.
    """
    pattern: str
    case_sensitive: bool = True
    compiled: "re.Pattern[str]" = field(init=False, repr=False, compare=False, hash=False)

    def __post_init__(self):
        flags = 0 if self.case_sensitive else re.IGNORECASE
        object.__setattr__(self, "compiled", re.compile(self.pattern, flags))

    def match(self, view: View) -> MatchOutcome:
        found = self.compiled.match(view.text)
        if found is None:
            return NO_MATCH
        return Matched(view.start, view.start + found.end())

    def description(self) -> str:
        prefix = "/" if self.case_sensitive else "~/"
        return prefix + _quoted(self.pattern)


@dataclass(frozen=True)
class CharacterClass(PrefixMatcher):
    """
    A set of single characters

    Membership is either an explicit frozenset or a predicate such as
    str.isdigit. In single mode one member is consumed; match_many consumes
    the maximal non-empty run.
    """
    members: Union[FrozenSet[str], Callable[[str], bool]]
    label: str
    negated: bool = False

    def contains(self, char: str) -> bool:
        if callable(self.members):
            found = bool(self.members(char))
        else:
            found = char in self.members
        return found != self.negated

    @classmethod
    def of(cls, chars: str, label: Optional[str] = None) -> "CharacterClass":
        return cls(frozenset(chars), label if label is not None else chars)

    @classmethod
    def range(cls, low: str, high: str, label: Optional[str] = None) -> "CharacterClass":
        """Inclusive code point range, e.g. CharacterClass.range("0", "9")"""
        if len(low) != 1 or len(high) != 1:
            raise ValueError("CharacterClass.range() bounds must be single characters")
        if ord(low) > ord(high):
            raise ValueError(f"Empty character range {low!r}-{high!r}")
        chars = "".join(chr(code) for code in range(ord(low), ord(high) + 1))
        return cls(frozenset(chars), label if label is not None else f"{low}-{high}")

    def invert(self) -> "CharacterClass":
        return CharacterClass(self.members, self.label, not self.negated)

    def __invert__(self) -> "CharacterClass":
        return self.invert()

    def match(self, view: View) -> MatchOutcome:
        if view.start < view.end and self.contains(view.source[view.start]):
            return Matched(view.start, view.start + 1)
        return NO_MATCH

    def match_many(self, view: View) -> MatchOutcome:
        pos = view.start
        while pos < view.end and self.contains(view.source[pos]):
            pos += 1
        if pos == view.start:
            return NO_MATCH
        return Matched(view.start, pos)

    @property
    def supports_many(self) -> bool:
        return True

    def description(self) -> str:
        return f"[^{self.label}]" if self.negated else f"[{self.label}]"


@dataclass(frozen=True)
class MatchOptional(PrefixMatcher):
    """Zero or one occurrence; never fails"""
    inner: PrefixMatcher

    def match(self, view: View) -> MatchOutcome:
        return self.inner.match(view) or Matched(view.start, view.start)

    def match_many(self, view: View) -> MatchOutcome:
        return self.match(view)

    @property
    def supports_many(self) -> bool:
        return True

    def description(self) -> str:
        return f"{self.inner.description()}?"


@dataclass(frozen=True)
class MatchMany(PrefixMatcher):
    """
    One or more occurrences of the inner matcher

    Uses the inner matcher's native run matching when it has one, to avoid
    re-scanning; otherwise extends the match one occurrence at a time until
    the inner matcher stops applying or stops making progress.
    """
    inner: PrefixMatcher

    def match(self, view: View) -> MatchOutcome:
        if self.inner.supports_many:
            return self.inner.match_many(view)
        end = None
        rest = view
        while True:
            outcome = self.inner.match(rest)
            if not outcome or outcome.end == rest.start:
                break
            end = outcome.end
            rest = view.advance_to(end)
        if end is None:
            return NO_MATCH
        return Matched(view.start, end)

    def match_many(self, view: View) -> MatchOutcome:
        return self.match(view)

    @property
    def supports_many(self) -> bool:
        return True

    def description(self) -> str:
        return f"{self.inner.description()}+"


def match_zero_or_more(inner: PrefixMatcher) -> MatchOptional:
    return MatchOptional(MatchMany(inner))


@dataclass(frozen=True)
class EndOfInput(PrefixMatcher):
    """Zero-width anchor: matches only an empty view"""

    def match(self, view: View) -> MatchOutcome:
        if view.is_empty:
            return Matched(view.start, view.start)
        return NO_MATCH

    def description(self) -> str:
        return "$"


def as_matcher(obj: Any) -> PrefixMatcher:
    """Coerce a plain string to a Literal; pass matchers through"""
    if isinstance(obj, PrefixMatcher):
        return obj
    if isinstance(obj, str):
        return Literal(obj)
    raise TypeError(f"Expected a PrefixMatcher or str, got {type(obj).__name__}")


END_OF_INPUT = EndOfInput()

DIGITS = CharacterClass.range("0", "9")
LETTERS = CharacterClass(str.isalpha, "letter")
ALPHANUMERICS = CharacterClass(str.isalnum, "alphanumeric")
WHITESPACE = CharacterClass(str.isspace, "whitespace")
NEWLINES = CharacterClass.of("\n\r", "newline")
