"""
Debug logging for Etre SDK.

The SDK logs through the standard logging module under the "etre_sdk"
logger, which has only a NullHandler until the application configures
logging or calls enable_debug(). Functions that log also accept an
explicit logger.
"""

from __future__ import annotations

import logging
import sys
from typing import IO, Optional

from .config import ClientSettings

LOGGER_NAME = "etre_sdk"

DEBUG_FORMAT = "DEBUG %(asctime)s.%(msecs)03d %(filename)s:%(lineno)d %(message)s"
DEBUG_DATEFMT = "%Y/%m/%d %H:%M:%S"

_HANDLER_ATTR = "_etre_debug"


def get_logger() -> logging.Logger:
    """Return the SDK's root logger."""
    return logging.getLogger(LOGGER_NAME)


def enable_debug(
    logger: Optional[logging.Logger] = None,
    stream: Optional[IO[str]] = None,
) -> logging.Logger:
    """Send DEBUG messages from logger to stream (default stderr).

    Calling it again for the same logger does not add another handler.
    """
    logger = logger or get_logger()
    if not any(getattr(h, _HANDLER_ATTR, False) for h in logger.handlers):
        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(logging.Formatter(DEBUG_FORMAT, datefmt=DEBUG_DATEFMT))
        setattr(handler, _HANDLER_ATTR, True)
        logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    return logger


def disable_debug(logger: Optional[logging.Logger] = None) -> None:
    """Remove the handler added by enable_debug()."""
    logger = logger or get_logger()
    for handler in list(logger.handlers):
        if getattr(handler, _HANDLER_ATTR, False):
            logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


def configure(settings: ClientSettings) -> logging.Logger:
    """Apply the logging part of settings and return the SDK logger."""
    if settings.debug:
        return enable_debug()
    return get_logger()
