"""
Logging setup for shell discovery.

Diagnostics go to stderr so stdout stays clean for --json. An optional log
file receives everything at DEBUG level.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

from .common import env_flag


LOGGER_NAME = "shell_discovery"

_logger: Optional[logging.Logger] = None


def _console_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(ColoredFormatter(
        "%(levelname_colored)s %(message)s",
        use_colors=sys.stderr.isatty() and env_flag("SHELL_DISCOVERY_COLOR", "1"),
    ))
    return handler


def _file_handler(log_file: str) -> logging.Handler:
    Path(log_file).parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))
    return handler


def setup_logging(
    log_file: Optional[str] = None,
    verbose: bool = False,
    quiet: bool = False,
    propagate: bool = False,
) -> logging.Logger:
    """
    Configure the shell_discovery logger.

    Args:
        log_file: Optional file that receives DEBUG output
        verbose: Show DEBUG messages on the console
        quiet: No console output; warnings still reach the log file
        propagate: Pass records to the root logger (pytest caplog)

    Returns:
        Configured logger instance
    """
    global _logger

    level = logging.DEBUG if verbose else logging.WARNING if quiet else logging.INFO

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.handlers.clear()
    if not quiet:
        logger.addHandler(_console_handler(level))
    if log_file:
        logger.addHandler(_file_handler(log_file))
    logger.propagate = propagate

    _logger = logger
    return logger


def get_logger() -> logging.Logger:
    """Return the configured logger, setting up defaults on first use."""
    global _logger
    if _logger is None:
        _logger = setup_logging()
    return _logger


class ColoredFormatter(logging.Formatter):
    """Prefixes each record with a coloured level tag when colours are on."""

    STYLES = {
        "DEBUG": ("\033[36m", "·"),
        "INFO": ("\033[32m", "✓"),
        "WARNING": ("\033[33m", "!"),
        "ERROR": ("\033[31m", "✗"),
        "CRITICAL": ("\033[1;31m", "✗✗"),
    }
    RESET = "\033[0m"

    def __init__(self, fmt: str, use_colors: bool = True):
        super().__init__(fmt)
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        tag = record.levelname
        if self.use_colors:
            color, symbol = self.STYLES.get(tag, ("", ""))
            tag = f"{color}{symbol} {tag}{self.RESET}"
        record.levelname_colored = tag
        return super().format(record)
