"""Logging setup for the command-line front end."""

from __future__ import annotations

import contextlib
import sys
from typing import TextIO

from loguru import logger

LOG_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {name}:{function} - {message}"

_handler_id: int | None = None


def configure_logging(level: str = "WARNING", sink: TextIO | None = None) -> int:
    """Route simple_sql log records to stderr (or sink) at the given level.

    Calling it again replaces the handler added by the previous call. Handlers
    installed by anyone else are left alone.

    Returns:
        The loguru handler id of the new sink.
    """
    global _handler_id
    if _handler_id is not None:
        # Already gone if the application reset loguru itself
        with contextlib.suppress(ValueError):
            logger.remove(_handler_id)
        _handler_id = None
    _handler_id = logger.add(sink if sink is not None else sys.stderr, level=level.upper(), format=LOG_FORMAT)
    logger.enable("simple_sql")
    return _handler_id
