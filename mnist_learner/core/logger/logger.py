"""
Logging Management Module

Handles centralized logging configuration with dynamic reconfiguration support.
Logging starts console-only at import time and switches to console+file once
the artifact directory of a run has been prepared.

Key Features:
    - Singleton-like Behavior: Prevents duplicate logger configurations
    - Dynamic Reconfiguration: Adds the ``experiment.log`` file handler on demand
    - Colored Console: ANSI colors when stdout is a TTY
"""

from __future__ import annotations

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final

from ..paths.constants import LOG_FILENAME, LOGGER_NAME
from .styles import LogStyle

# Separator characters used to detect decorative lines
_SEPARATOR_CHARS = {"━", "═", "─"}


class ColorFormatter(logging.Formatter):
    """Formatter that applies ANSI colors to console output.

    - WARNING/ERROR/CRITICAL: yellow/red level prefix
    - Lines with ✓: green
    - Separator lines (━, ═, ─): dim
    - Centered UPPER CASE headers: bold magenta
    """

    _LEVEL_COLORS = {
        logging.WARNING: LogStyle.YELLOW,
        logging.ERROR: LogStyle.RED,
        logging.CRITICAL: LogStyle.RED + LogStyle.BOLD,
    }

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record, coloring only the message text and level name."""
        formatted = super().format(record)
        msg = record.getMessage()

        level_color = self._LEVEL_COLORS.get(record.levelno)
        if level_color:
            formatted = formatted.replace(
                record.levelname,
                f"{level_color}{record.levelname}{LogStyle.RESET}",
                1,
            )

        if record.levelno == logging.INFO:
            stripped = msg.strip()

            if stripped and all(c in _SEPARATOR_CHARS for c in stripped):
                return self._color_message_only(formatted, msg, LogStyle.DIM)

            if (
                stripped == stripped.upper()
                and len(stripped) > 5
                and any(c.isalpha() for c in stripped)
            ):
                return self._color_message_only(formatted, msg, LogStyle.BOLD + LogStyle.MAGENTA)

            if LogStyle.SUCCESS in msg:
                return self._color_message_only(formatted, msg, LogStyle.GREEN)

        if record.levelno == logging.WARNING:
            return self._color_message_only(formatted, msg, LogStyle.YELLOW)

        return formatted

    def _color_message_only(self, formatted: str, msg: str, color: str) -> str:
        """Apply *color* only to the message portion of *formatted*."""
        idx = formatted.find(msg)
        if idx == -1:
            return formatted
        return f"{formatted[:idx]}{color}{formatted[idx:]}{LogStyle.RESET}"


# LOGGER CLASS
class Logger:
    """
    Manages centralized logging configuration with singleton-like behavior.

    The logger bootstraps console-only at import time. Once the fit pipeline
    has prepared the artifact directory it calls :meth:`setup` with that
    directory, which rebuilds the handlers and adds ``experiment.log``.

    Class Attributes:
        _configured_names (dict[str, bool]): Logger names already configured.
        _active_log_file (Path | None): Current log file, if any.

    Example:
        >>> logger = Logger.setup(name=LOGGER_NAME, log_dir=Path("artifacts/run"))
        >>> logger.info("Logging to file now")
    """

    _configured_names: Final[dict[str, bool]] = {}
    _active_log_file: Path | None = None

    def __init__(
        self,
        name: str = LOGGER_NAME,
        log_dir: Path | None = None,
        level: int = logging.INFO,
        max_bytes: int = 5 * 1024 * 1024,
        backup_count: int = 2,
    ) -> None:
        self.name = name
        self.log_dir = log_dir
        self.level = level
        self.max_bytes = max_bytes
        self.backup_count = backup_count

        self._log = logging.getLogger(name)

        if name not in Logger._configured_names or log_dir is not None:
            self._setup_logger()
            Logger._configured_names[name] = True

    def _setup_logger(self) -> None:
        """Rebuild handlers: console always, file only when ``log_dir`` is set."""
        fmt_str = "%(asctime)s - %(levelname)s - %(message)s"
        datefmt = "%Y-%m-%d %H:%M:%S"
        plain_formatter = logging.Formatter(fmt_str, datefmt)

        self._log.setLevel(self.level)
        self._log.propagate = False

        for handler in self._log.handlers[:]:
            handler.close()
            self._log.removeHandler(handler)

        console_h = logging.StreamHandler(sys.stdout)
        if sys.stdout.isatty():
            console_h.setFormatter(ColorFormatter(fmt_str, datefmt))
        else:
            console_h.setFormatter(plain_formatter)
        self._log.addHandler(console_h)

        if self.log_dir is not None:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            filename = self.log_dir / LOG_FILENAME
            file_h = RotatingFileHandler(
                filename, maxBytes=self.max_bytes, backupCount=self.backup_count, encoding="utf-8"
            )
            file_h.setFormatter(plain_formatter)
            self._log.addHandler(file_h)
            Logger._active_log_file = filename

    def get_logger(self) -> logging.Logger:
        """Return the underlying ``logging.Logger``."""
        return self._log

    @classmethod
    def get_log_file(cls) -> Path | None:
        """Return the active log file path, or None when logging to console only."""
        return cls._active_log_file

    @classmethod
    def setup(
        cls, name: str, log_dir: Path | None = None, level: str = "INFO", **kwargs
    ) -> logging.Logger:
        """
        Configure the named logger and return it.

        Args:
            name: Logger identifier (typically LOGGER_NAME).
            log_dir: Directory receiving ``experiment.log`` (None = console-only).
            level: Level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
            **kwargs (Any): Forwarded to the Logger constructor.

        Environment Variables:
            DEBUG: If set to "1", forces DEBUG regardless of ``level``.
        """
        if os.getenv("DEBUG") == "1":
            numeric_level = logging.DEBUG
        else:
            numeric_level = getattr(logging, level.upper(), logging.INFO)

        return cls(name=name, log_dir=log_dir, level=numeric_level, **kwargs).get_logger()

    @classmethod
    def detach_file(cls, name: str = LOGGER_NAME) -> None:
        """Close and drop file handlers so the artifact directory can be removed."""
        log = logging.getLogger(name)
        for handler in log.handlers[:]:
            if isinstance(handler, logging.FileHandler):
                handler.close()
                log.removeHandler(handler)
        cls._active_log_file = None


# GLOBAL INSTANCE
# Console-only bootstrap; setup() adds the file handler once a run starts.
logger: Final[logging.Logger] = Logger().get_logger()
