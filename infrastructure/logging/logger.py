"""Logging configuration shared by the host probe.

Terminals get coloured, column-aligned output; anything else (systemd, cron,
redirected files) gets the same columns without ANSI codes. The level comes
from an explicit argument or the ``LOG_LEVEL`` environment variable.
"""

import datetime
import logging
import os
import sys
from typing import ClassVar


class PlainFormatter(logging.Formatter):
    """Column-aligned formatter without colour codes.

    Layout: ``HH:MM:SS | LEVEL    | logger name | message``. DEBUG records get
    millisecond timestamps.
    """

    NAME_WIDTH: ClassVar[int] = 30

    def _timestamp(self, record: logging.LogRecord) -> str:
        created = datetime.datetime.fromtimestamp(record.created)
        if record.levelname == "DEBUG":
            return created.strftime("%H:%M:%S.%f")[:-3]
        return created.strftime("%H:%M:%S")

    def _message(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        return message

    def format(self, record: logging.LogRecord) -> str:
        """Format a record into aligned pipe-separated columns."""
        return (
            f"{self._timestamp(record)} | "
            f"{record.levelname.ljust(8)} | "
            f"{record.name.ljust(self.NAME_WIDTH)} | "
            f"{self._message(record)}"
        )


class ColoredFormatter(PlainFormatter):
    """Logging formatter that adds ANSI color codes to log messages.

    Only the timestamp and level columns are coloured; the logger name and
    message keep the terminal default.

    Attributes:
        COLORS: Dictionary mapping log level names to ANSI color codes.
        GREY: ANSI color code for grey (timestamps and DEBUG).
        RESET: ANSI reset code.
    """

    COLORS: ClassVar[dict[str, str]] = {
        "DEBUG": "\033[90m",  # Grey
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    GREY: ClassVar[str] = "\033[90m"
    RESET: ClassVar[str] = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with color codes and proper alignment.

        Args:
            record: LogRecord instance containing log information.

        Returns:
            Formatted and colorized log message string with aligned columns.
        """
        level_color = self.COLORS.get(record.levelname, self.RESET)
        return (
            f"{self.GREY}{self._timestamp(record)}{self.RESET} | "
            f"{level_color}{record.levelname.ljust(8)}{self.RESET} | "
            f"{record.name.ljust(self.NAME_WIDTH)} | "
            f"{self._message(record)}"
        )


def _resolve_log_level(explicit_level: str | int | None = None) -> int:
    """Resolve a logging level from an explicit value or the environment.

    Explicit levels always win; environment is only consulted when no explicit
    level is provided. Falls back to INFO on invalid values.
    """
    if explicit_level is not None:
        if isinstance(explicit_level, int):
            return explicit_level

        level_name = str(explicit_level).upper()
        return getattr(logging, level_name, logging.INFO)

    env_level = os.getenv("LOG_LEVEL", "INFO").upper()
    return getattr(logging, env_level, logging.INFO)


def _select_formatter(stream) -> logging.Formatter:
    isatty = getattr(stream, "isatty", None)
    if isatty is not None and isatty():
        return ColoredFormatter()
    return PlainFormatter()


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a probe component.

    Handlers live on the root logger (see ``configure_logging``); this only
    names the logger so output carries the component.

    Args:
        name: Name for the logger, typically the module or collector name.

    Returns:
        Logger instance.
    """
    return logging.getLogger(name)


def configure_logging(level: str | int | None = None, stream=None) -> None:
    """Configure the root logger for the probe process.

    - If ``level`` is provided, it is always honored.
    - Otherwise, the ``LOG_LEVEL`` environment variable is consulted.
    - On invalid values, the level falls back to ``logging.INFO``.

    A single stream handler is installed on the root logger the first time this
    is called; later calls only change the level.

    Args:
        level: Explicit level name or number.
        stream: Output stream for the handler. Defaults to stdout.
    """
    root_logger = logging.getLogger()

    if not root_logger.handlers:
        stream = stream or sys.stdout
        handler = logging.StreamHandler(stream)
        handler.setFormatter(_select_formatter(stream))
        root_logger.addHandler(handler)

    root_logger.setLevel(_resolve_log_level(level))
