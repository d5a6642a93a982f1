"""
Parse logging through loguru

LOG() writes only when the verbosity of the ParseContext connected for the
current parse allows it, so combinators and the driver never pass the
context to the logger themselves.

Usage:
    from prefixparse.lib.log import LOG, context_connectToLogger

    # At the start of a parse:
    context_connectToLogger(context)

    # Anywhere in that parse:
    LOG("Parse failed at line 3", level=1)
    LOG("Parsed 42 characters in 0.001s", level=2)
"""

from loguru import logger
from typing import Any, Optional
from contextvars import ContextVar
import sys

# Context variable to hold the current ParseContext
_parse_context: ContextVar[Optional[Any]] = ContextVar('parse_context', default=None)

# One stderr sink; LOG() does the verbosity gating
logger_format = (
    "<green>{time:HH:mm:ss}</green> │ "
    "<level>{level: <5}</level> │ "
    "<cyan>{function: <20}</cyan> @ "
    "<cyan>{line: <4}</cyan> ║ "
    "<level>{message}</level>"
)

logger.remove()  # Remove default handler
logger.add(sys.stderr, format=logger_format, level="DEBUG")


def context_connectToLogger(context: Any) -> None:
    """
    Connect a ParseContext to the logging context.

    Called by the driver at the start of each parse so that the context's
    verbosity setting is available to LOG() calls made during that parse.

    Args:
        context: ParseContext instance with verbosity attribute
    """
    _parse_context.set(context)


def LOG(message: str, level: int = 1, **kwargs: Any) -> None:
    """
    Log message if current context's verbosity allows.

    Args:
        message: Log message to display
        level: Minimum verbosity level required (1=failures, 2=parse start and timing)
        **kwargs: Additional loguru metadata

    Example:
        LOG("Line 1, column 3: expected one of [0-9]", level=1)
        LOG("Parsed 6 characters in 0.0001s", level=2)
    """
    context = _parse_context.get()

    if context and hasattr(context, 'verbosity') and context.verbosity >= level:
        logger.opt(depth=1).debug(message, **kwargs)
