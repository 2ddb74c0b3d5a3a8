"""
Centralized logging using Loguru with context-aware verbosity.

LOG() emits a message only when the ProgramState connected to the
current context asks for that much detail. Library code therefore stays
silent when used outside the CLI unless a state is connected.

Verbosity levels used by the engine:
    1 = Normal output (CLI progress)
    2 = Verbose (parse milestones, degradations worth noticing)
    3 = Trace (per-tag decisions)

Usage:
    from minimessage.lib.log import LOG, state_connectToLogger

    state_connectToLogger(state)
    LOG("Parsed 3 messages", level=1)
    LOG("<blink> kept as text", level=3)
"""

from loguru import logger
from typing import Any, Optional
from contextvars import ContextVar
import sys

# Context variable to hold current ProgramState
_program_state: ContextVar[Optional[Any]] = ContextVar('program_state', default=None)

logger_format = (
    "<green>{time:HH:mm:ss}</green> │ "
    "<level>{level: <5}</level> │ "
    "<cyan>{module: <12}</cyan> "
    "<cyan>{function: <18}</cyan> @ "
    "<cyan>{line: <4}</cyan> ║ "
    "<level>{message}</level>"
)

logger.remove()
logger.add(sys.stderr, format=logger_format, level="DEBUG")


def state_connectToLogger(state: Any) -> None:
    """
    Connect a ProgramState to the logging context.

    Args:
        state: Object with a verbosity attribute, usually a ProgramState
    """
    _program_state.set(state)


def LOG(message: str, level: int = 1, **kwargs: Any) -> None:
    """
    Log message if current state's verbosity allows.

    Args:
        message: Log message to display
        level: Minimum verbosity level required (1=normal, 2=verbose, 3=trace)
        **kwargs: Additional loguru arguments
    """
    state = _program_state.get()

    if state is not None and getattr(state, 'verbosity', 0) >= level:
        logger.opt(depth=1).debug(message, **kwargs)
