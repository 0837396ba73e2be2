#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Core utility functions for the project.

This module provides the logging setup shared by every entry point: an
append-only transcript file plus colored console output.
"""

import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional, TextIO

from provisioner.config import SYMBOLS_DEFAULT

module_logger = logging.getLogger(__name__)

SIMPLE_LOG_FORMAT_WITH_PREFIX_PLACEHOLDER = "{log_prefix}%(asctime)s - %(levelname)s - %(symbol)s %(name)s - %(message)s"
SIMPLE_LOG_FORMAT_NO_PREFIX = (
    "%(asctime)s - %(levelname)s - %(symbol)s %(name)s - %(message)s"
)

ANSI_BOLD_BLUE = "\033[1;34m"
ANSI_BOLD_RED = "\033[1;31m"
ANSI_RESET = "\033[0m"


class SymbolFormatter(logging.Formatter):
    """
    A custom formatter that adds symbols to log messages based on the log level.

    With ``use_color`` set, banner records are rendered bold blue and
    ERROR/CRITICAL records bold red. The transcript file handler never
    enables colors.
    """

    def __init__(
        self,
        fmt=None,
        datefmt=None,
        style="%",
        validate=True,
        symbols=None,
        use_color=False,
    ):
        super().__init__(fmt, datefmt, style, validate)
        self.symbols = symbols or SYMBOLS_DEFAULT
        self.use_color = use_color

    def format(self, record):
        if record.levelno == logging.DEBUG:
            record.symbol = self.symbols.get("debug", "🐛")
        elif record.levelno == logging.INFO:
            record.symbol = self.symbols.get("info", "ℹ️")
        elif record.levelno == logging.WARNING:
            record.symbol = self.symbols.get("warning", "⚠️")
        elif record.levelno == logging.ERROR:
            record.symbol = self.symbols.get("error", "❌")
        elif record.levelno == logging.CRITICAL:
            record.symbol = self.symbols.get("critical", "🔥")
        else:
            record.symbol = ""

        formatted = super().format(record)
        if not self.use_color:
            return formatted
        if record.levelno >= logging.ERROR:
            return f"{ANSI_BOLD_RED}{formatted}{ANSI_RESET}"
        if getattr(record, "banner", False):
            return f"\n{ANSI_BOLD_BLUE}{formatted}{ANSI_RESET}"
        return formatted


class MaxLevelFilter(logging.Filter):
    """Lets through records strictly below ``max_level``."""

    def __init__(self, max_level: int):
        super().__init__()
        self.max_level = max_level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < self.max_level


def _stream_supports_color(stream: TextIO) -> bool:
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def setup_logging(
    log_level: int = logging.INFO,
    log_file: Optional[str] = None,
    log_to_console: bool = True,
    log_prefix: Optional[str] = None,
    symbols: Optional[Dict[str, str]] = None,
) -> None:
    """
    Configures root logging for a provisioning run.

    Parameters:
    log_level: int
        The logging level to configure. Defaults to logging.INFO.
    log_file: Optional[str]
        Transcript file. Opened in append mode and never truncated, so the
        output of earlier runs is kept.
    log_to_console: bool
        Whether to log to the console. Records below ERROR go to stdout,
        ERROR and above to stderr. Console output is colored when the
        stream is a terminal.
    log_prefix: Optional[str]
        An optional string prefixed to every log line.
    symbols: Optional[Dict[str, str]]
        Level symbols. Defaults to SYMBOLS_DEFAULT.

    Returns:
    None
    """
    actual_prefix = (
        (log_prefix.strip() + " ")
        if log_prefix and log_prefix.strip()
        else ""
    )
    if actual_prefix:
        final_format_str = SIMPLE_LOG_FORMAT_WITH_PREFIX_PLACEHOLDER.format(
            log_prefix=actual_prefix
        )
    else:
        final_format_str = SIMPLE_LOG_FORMAT_NO_PREFIX

    def make_formatter(use_color: bool) -> SymbolFormatter:
        return SymbolFormatter(
            fmt=final_format_str,
            datefmt="%Y-%m-%d %H:%M:%S",
            symbols=symbols,
            use_color=use_color,
        )

    handlers: List[logging.Handler] = []
    if log_file:
        try:
            log_file_path = Path(log_file)
            log_file_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(
                log_file_path, mode="a", encoding="utf-8"
            )
            file_handler.setFormatter(make_formatter(use_color=False))
            handlers.append(file_handler)
        except OSError as e:
            print(
                f"Warning: Could not create file handler for log file {log_file}: {e}",
                file=sys.stderr,
            )

    if log_to_console:
        stdout_handler = logging.StreamHandler(sys.stdout)
        stdout_handler.addFilter(MaxLevelFilter(logging.ERROR))
        stdout_handler.setFormatter(
            make_formatter(_stream_supports_color(sys.stdout))
        )
        handlers.append(stdout_handler)

        stderr_handler = logging.StreamHandler(sys.stderr)
        stderr_handler.setLevel(logging.ERROR)
        stderr_handler.setFormatter(
            make_formatter(_stream_supports_color(sys.stderr))
        )
        handlers.append(stderr_handler)

    if not handlers:  # pragma: no cover
        handlers.append(logging.StreamHandler(sys.stdout))

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    for handler in handlers:
        root_logger.addHandler(handler)

    module_logger.debug(
        f"Logging configured. Level: {logging.getLevelName(log_level)}. Format: '{final_format_str}'"
    )
