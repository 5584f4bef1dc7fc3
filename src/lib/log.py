"""
Loguru logging gated by the run's verbosity

The CLI attaches its ProgramState to a context variable once; library code
then calls LOG() with a level and never needs the state passed in. With no
state attached, as when docscheck is used as a library or under pytest,
LOG() prints nothing.

Levels used across docscheck:
    1  run summary and per-document findings
    2  per-document progress, files read and written
    3  per-construct trace (blocks opened/closed, checker counts)

Usage:
    from docscheck.lib.log import LOG, state_connectToLogger

    state_connectToLogger(state)
    LOG(f"Linting {path}", level=2)
"""

import sys
from contextvars import ContextVar
from typing import Any, Optional

from loguru import logger

_program_state: ContextVar[Optional[Any]] = ContextVar('docscheck_state', default=None)

LOG_FORMAT = (
    "<green>{time:HH:mm:ss}</green> │ "
    "<level>{level: <7}</level> │ "
    "<cyan>{module: <13}</cyan>:<cyan>{line: <4}</cyan> ║ "
    "<level>{message}</level>"
)

logger.remove()
logger.add(sys.stderr, format=LOG_FORMAT, level="DEBUG")


def state_connectToLogger(state: Any) -> None:
    """
    Attach a run's state so LOG() can read its verbosity

    Args:
        state: Object with an integer `verbosity` attribute, normally ProgramState
    """
    _program_state.set(state)


def verbosity_get() -> int:
    """Verbosity of the attached state, 0 when none is attached"""
    state = _program_state.get()
    return getattr(state, 'verbosity', 0) if state is not None else 0


def LOG(message: str, level: int = 1, **kwargs: Any) -> None:
    """
    Emit a debug record if the attached verbosity reaches level

    Args:
        message: Text to log
        level: Verbosity needed to show the message (1-3)
        **kwargs: Passed through to loguru for message formatting
    """
    if verbosity_get() >= level:
        logger.opt(depth=1).debug(message, **kwargs)


def LOG_exception(message: str) -> None:
    """
    Log the exception being handled, with traceback, at any verbosity

    For failures that are contained (a single checker on a single document)
    rather than propagated.
    """
    logger.opt(depth=1, exception=True).warning(message)
