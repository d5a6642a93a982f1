"""
prefixparse - Backtracking parser-combinator engine

Build recursive-descent parsers as ordinary Python values out of small
prefix matchers, then run them with parse_to_end() to get either the parsed
value or a line/column-located ParseError.
"""

__version__ = "0.1.0"

from .lib import *  # noqa: F401,F403
from .lib import __all__ as _lib_all
from .models import ParseContext, View

__all__ = [*_lib_all, "ParseContext", "View"]
