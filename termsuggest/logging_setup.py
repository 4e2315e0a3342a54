"""Logging for the engine and the CLI.

Every component logs through a named logger ("engine", "generators", ...)
sharing the handlers installed by `init_logger`. Records carry the command
line of the completion request they belong to, so interleaved requests stay
readable in a debug log.

Debug mode is enabled by the TERMSUGGEST_DEBUG environment variable or by
`termsuggest --debug LOGFILE`.
"""

import contextlib
import logging
import os
from collections.abc import Iterator
from contextvars import ContextVar

from .ansi import LogStyles, make_style, should_colorize
from .config import coerce_to_bool

__all__ = [
    "LogObjects",
    "get_logger",
    "init_logger",
    "is_debug",
    "request_context",
    "set_debug",
]

DEBUG_ENV = "TERMSUGGEST_DEBUG"

SCREEN_FORMAT = "termsuggest: %(message)s"
DEBUG_SCREEN_FORMAT = "%(name)s [%(command_line)s] %(message)s (%(filename)s:%(lineno)d)"
FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s [%(command_line)s] :: %(message)s"

NO_REQUEST = "-"

_current_request: ContextVar[str] = ContextVar("termsuggest_request", default=NO_REQUEST)


class LogObjects:
    """State shared by every termsuggest logger."""

    handlers: list[logging.Handler] = []
    debug: bool = coerce_to_bool(os.environ.get(DEBUG_ENV))


def is_debug() -> bool:
    """Return True when debug logging is on."""
    return LogObjects.debug


def set_debug(value: bool) -> None:
    """Turn debug logging on or off for loggers created afterwards."""
    LogObjects.debug = value


@contextlib.contextmanager
def request_context(command_line: str) -> Iterator[None]:
    """Tag the records logged inside the block with `command_line`."""
    token = _current_request.set(command_line)
    try:
        yield
    finally:
        _current_request.reset(token)


class RequestFilter(logging.Filter):
    """Adds the `command_line` attribute used by the formats."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.command_line = _current_request.get()
        return True


class ScreenFormatter(logging.Formatter):
    """Short messages on the terminal; warnings and errors are colored."""

    STYLES = {
        logging.WARNING: LogStyles.WARNING,
        logging.ERROR: LogStyles.ERROR,
        logging.CRITICAL: LogStyles.CRITICAL,
    }

    def __init__(self, color: bool) -> None:
        super().__init__(DEBUG_SCREEN_FORMAT if is_debug() else SCREEN_FORMAT)
        self.color = color

    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)
        codes = self.STYLES.get(record.levelno)
        if not (self.color and codes):
            return text
        prefix, suffix = make_style(*codes)
        return prefix + text + suffix


def init_logger(filename: str | None = None, force_debug: bool = False) -> None:
    """Install the shared handlers: stderr, plus `filename` when given.

    Args:
        filename: Optional file receiving every record
        force_debug: If True, turn debug mode on
    """
    if force_debug:
        set_debug(True)
    LogObjects.handlers.clear()
    if filename:
        file_handler = logging.FileHandler(filename)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        LogObjects.handlers.append(file_handler)
    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(ScreenFormatter(should_colorize()))
    LogObjects.handlers.append(stream_handler)
    for handler in LogObjects.handlers:
        handler.addFilter(RequestFilter())


def get_logger(name: str = "termsuggest", level: int | None = None) -> logging.Logger:
    """Return the logger of component `name`, attached to the shared handlers.

    Args:
        name: Component name
        level: Logging level (DEBUG in debug mode, WARNING otherwise, if not set)
    """
    logger = logging.getLogger(name)
    if level is None:
        level = logging.DEBUG if is_debug() else logging.WARNING
    logger.setLevel(level)
    logger.propagate = False
    for handler in LogObjects.handlers:
        if handler not in logger.handlers:
            logger.addHandler(handler)
    return logger
