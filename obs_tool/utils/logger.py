"""
Logging configuration for obs-tool.

Verbosity is driven by the repeated ``-d`` CLI flag; the HTTP client
libraries are kept quiet unless the maximum level is requested because
httpx logs every request at INFO.
"""

import logging
import textwrap
from typing import Optional

# Width log lines are wrapped at when wrapping is enabled
DEFAULT_LOG_WIDTH = 120

# Indentation for continuation lines of a wrapped record
CONTINUATION_INDENT = "    "

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"

# Loggers of third-party libraries whose level follows the verbosity
HTTP_LOGGERS = ("httpx", "httpcore")


class WrappingFormatter(logging.Formatter):
    """
    Formatter that wraps long records, indenting continuation lines.

    Build logs and XML error bodies can produce very long messages; wrapping
    keeps them readable in a terminal. Embedded newlines are preserved.
    """

    def __init__(
        self, fmt: Optional[str] = None, datefmt: Optional[str] = None, width: int = DEFAULT_LOG_WIDTH
    ) -> None:
        super().__init__(fmt, datefmt)
        self.width = width

    def format(self, record: logging.LogRecord) -> str:
        formatted = super().format(record)
        if all(len(line) <= self.width for line in formatted.splitlines()):
            return formatted

        wrapped = []
        for line in formatted.splitlines():
            wrapped.extend(
                textwrap.wrap(
                    line,
                    width=self.width,
                    subsequent_indent=CONTINUATION_INDENT,
                    break_long_words=True,
                    break_on_hyphens=False,
                )
                or [""]
            )
        return "\n".join(wrapped)


def verbosity_to_level(verbosity: int) -> int:
    """Map the ``-d`` count to a logging level (0=WARNING, 1=INFO, 2+=DEBUG)."""
    if verbosity <= 0:
        return logging.WARNING
    if verbosity == 1:
        return logging.INFO
    return logging.DEBUG


def setup_logging(verbosity: int = 0, use_wrapping: bool = False) -> None:
    """
    Configure the root logger.

    Args:
        verbosity: 0=WARNING, 1=INFO, 2=DEBUG, 3+=DEBUG including HTTP request logs
        use_wrapping: Use WrappingFormatter for long messages

    Example:
        >>> from obs_tool.utils import setup_logging
        >>> setup_logging(2)
    """
    level = verbosity_to_level(verbosity)

    if use_wrapping:
        handler = logging.StreamHandler()
        handler.setFormatter(WrappingFormatter(fmt=LOG_FORMAT, width=DEFAULT_LOG_WIDTH))

        root_logger = logging.getLogger()
        root_logger.handlers.clear()
        root_logger.addHandler(handler)
        root_logger.setLevel(level)
    else:
        logging.basicConfig(level=level, format=LOG_FORMAT)

    http_level = logging.DEBUG if verbosity >= 3 else logging.WARNING
    for name in HTTP_LOGGERS:
        logging.getLogger(name).setLevel(http_level)


def get_logger(name: str) -> logging.Logger:
    """Return the logger for ``name`` (typically ``__name__``)."""
    return logging.getLogger(name)


__all__ = [
    "WrappingFormatter",
    "setup_logging",
    "verbosity_to_level",
    "get_logger",
]
