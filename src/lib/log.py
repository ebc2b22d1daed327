"""
Logging for forge pipelines, on loguru.

LOG() only emits while a ForgeState is connected to the current context,
and then only up to that state's verbosity. Outside a forge pipeline the
parser, tokenizer and compiler are silent. The connection lives in a
ContextVar, so concurrent forges never see each other's verbosity.

Usage:
    from calloutforge.lib.log import LOG, state_connectToLogger, state_disconnectFromLogger

    token = state_connectToLogger(state)
    try:
        LOG("Shown if verbosity >= 1", level=1)
        LOG("Per-line trace, verbosity >= 3", level=3)
    finally:
        state_disconnectFromLogger(token)
"""

from loguru import logger
from typing import Any, Optional
from contextvars import ContextVar, Token
import sys

# Context variable to hold current ForgeState
_forge_state: ContextVar[Optional[Any]] = ContextVar('forge_state', default=None)

# Configure loguru with calloutforge-specific format
logger_format = (
    "<green>{time:HH:mm:ss}</green> │ "
    "<level>{level: <5}</level> │ "
    "<cyan>{function: <20}</cyan> @ "
    "<cyan>{line: <4}</cyan> ║ "
    "<level>{message}</level>"
)

logger.remove()  # Remove default handler
logger.add(sys.stderr, format=logger_format, level="DEBUG")


def state_connectToLogger(state: Any) -> Token:
    """
    Connect a ForgeState to the logging context.

    Call this at the start of a pipeline so the state's verbosity setting is
    available to LOG() calls made by the parser, tokenizer and compiler.
    Hand the returned token to state_disconnectFromLogger() when the
    pipeline ends, so calls outside it stay silent.

    Args:
        state: ForgeState instance (or anything with a verbosity attribute)

    Returns:
        Context token restoring the previous connection
    """
    return _forge_state.set(state)


def state_disconnectFromLogger(token: Token) -> None:
    """
    Restore the logging context that was active before state_connectToLogger().

    Args:
        token: Token returned by state_connectToLogger()
    """
    _forge_state.reset(token)


def LOG(message: str, level: int = 1, **kwargs: Any) -> None:
    """
    Log message if current state's verbosity allows.

    Args:
        message: Log message to display
        level: Minimum verbosity level required (1=normal, 2=verbose, 3=trace)
        **kwargs: Additional loguru metadata

    Example:
        LOG("Template loaded", level=1)
        LOG("Tokenized 7 tokens", level=2)
        LOG("Line 4: fence-open -> FENCE_OPEN", level=3)
    """
    state = _forge_state.get()

    if state and hasattr(state, 'verbosity') and state.verbosity >= level:
        logger.opt(depth=1).debug(message, **kwargs)
