"""
Input views

A View is a window [start, end) onto a single source string. Every view
split off another shares the same `source` object, so matched text and the
remaining input are never copied until `.text` is asked for.
"""

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class View:
    """
    Non-owning window onto the source text

    Attributes:
        source: The complete input buffer (shared by identity)
        start: Offset of the first character covered
        end: Offset one past the last character covered

    Example:
        >>> view = View.of("12+3")
        >>> matched, rest = view.split(2)
        >>> matched.text, rest.text
        ('12', '+3')
    """
    source: str
    start: int
    end: int

    def __post_init__(self):
        if not 0 <= self.start <= self.end <= len(self.source):
            raise ValueError(
                f"View bounds [{self.start}, {self.end}) outside source of length {len(self.source)}"
            )

    @classmethod
    def of(cls, source: str) -> "View":
        return cls(source, 0, len(source))

    @property
    def text(self) -> str:
        return self.source[self.start:self.end]

    @property
    def offset(self) -> int:
        return self.start

    @property
    def is_empty(self) -> bool:
        return self.start == self.end

    def __len__(self) -> int:
        return self.end - self.start

    def __str__(self) -> str:
        return self.text

    def startswith(self, prefix: str) -> bool:
        return self.source.startswith(prefix, self.start, self.end)

    def split(self, at: int) -> Tuple["View", "View"]:
        """
        Split this view at an absolute offset into (matched, rest)

        Both halves share this view's source, and concatenating their text
        reproduces this view's text exactly.

        Raises:
            ValueError: If `at` lies outside [start, end]
        """
        if not self.start <= at <= self.end:
            raise ValueError(f"Split offset {at} outside view [{self.start}, {self.end})")
        return View(self.source, self.start, at), View(self.source, at, self.end)

    def advance_to(self, at: int) -> "View":
        return self.split(at)[1]

    def is_suffix_of(self, source: str) -> bool:
        """True if this view is genuinely a tail of that exact buffer"""
        return self.source is source and self.end == len(source)

    def __repr__(self) -> str:
        preview = self.text if len(self) <= 20 else self.text[:20] + "..."
        return f"View({self.start}:{self.end} {preview!r})"
