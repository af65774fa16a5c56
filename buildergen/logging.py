"""
Logging for buildergen.

Library modules log through ``get_logger(__name__)`` and stay silent unless
the host application configures logging; the ``buildergen`` logger carries
only a ``NullHandler`` until then. The command line tool installs its own
handlers with ``setup_logging`` and removes them again with ``reset_logging``.
"""

import logging
import os
import sys
from typing import IO, List, Optional, Union

LOGGER_NAMESPACE = "buildergen"
LEVEL_ENV_VAR = "BUILDERGEN_LOG_LEVEL"
CONSOLE_FORMAT = "buildergen: %(levelname)s: %(message)s"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logging.getLogger(LOGGER_NAMESPACE).addHandler(logging.NullHandler())

_installed: List[logging.Handler] = []


def resolve_level(level: Union[str, int, None] = None) -> int:
    """
    Turn a level name or number into a logging level.

    ``None`` reads ``BUILDERGEN_LOG_LEVEL`` and falls back to WARNING.

    Raises:
        ValueError: If the name is not a logging level
    """
    if level is None:
        level = os.environ.get(LEVEL_ENV_VAR, "WARNING")
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.strip().upper())
    if not isinstance(value, int):
        raise ValueError(f"unknown log level '{level}'")
    return value


def setup_logging(
    level: Union[str, int, None] = None,
    log_file: Optional[str] = None,
    stream: Optional[IO[str]] = None,
) -> logging.Logger:
    """
    Send buildergen log records to the console and optionally a file.

    Calling it again replaces the handlers installed by the previous call.
    Records do not propagate to the root logger while these handlers are
    installed.

    Args:
        level: Level name or number; see :func:`resolve_level`
        log_file: Also append records, with timestamps, to this file
        stream: Console stream (stderr when omitted)

    Returns:
        The ``buildergen`` logger
    """
    log_level = resolve_level(level)
    reset_logging()

    console_handler = logging.StreamHandler(stream or sys.stderr)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    handlers: List[logging.Handler] = [console_handler]
    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        handlers.append(file_handler)

    logger = logging.getLogger(LOGGER_NAMESPACE)
    for handler in handlers:
        handler.setLevel(log_level)
        logger.addHandler(handler)
        _installed.append(handler)
    logger.setLevel(log_level)
    logger.propagate = False
    return logger


def reset_logging() -> None:
    """Remove the handlers ``setup_logging`` installed and restore the defaults."""
    logger = logging.getLogger(LOGGER_NAMESPACE)
    while _installed:
        handler = _installed.pop()
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


def get_logger(name: str) -> logging.Logger:
    """Logger for a module, placed under the ``buildergen`` namespace."""
    if name == LOGGER_NAMESPACE or name.startswith(LOGGER_NAMESPACE + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAMESPACE}.{name}")
