"""
Common utilities shared across shell_discovery modules.
"""

from __future__ import annotations

import os
import sys


def env_flag(name: str, default: str = "0") -> bool:
    """
    Check a boolean-style environment flag.

    Args:
        name: Environment variable name
        default: Value assumed when the variable is unset

    Returns:
        True if the variable is set to "1"
    """
    return os.environ.get(name, default) == "1"


def env_int(name: str, default: int, low: int | None = None, high: int | None = None) -> int:
    """
    Read an integer environment setting, falling back on bad values.

    Args:
        name: Environment variable name
        default: Value used when unset, not an integer or out of range
        low: Smallest accepted value (inclusive)
        high: Largest accepted value (inclusive)

    Returns:
        Parsed integer value
    """
    raw = os.environ.get(name, "")
    try:
        value = int(raw) if raw else default
    except ValueError:
        return default
    if (low is not None and value < low) or (high is not None and value > high):
        vlog(f"Ignoring {name}={raw}: expected {low}..{high}, using {default}")
        return default
    return value


def vlog(msg: str, verbose: bool = False) -> None:
    """
    Log verbose message using structured logging.

    Args:
        msg: Message to log
        verbose: Whether verbose mode is enabled
    """
    if verbose or env_flag("SHELL_DISCOVERY_DEBUG"):
        try:
            from .logging_config import get_logger
            logger = get_logger()
            logger.info(msg)
        except Exception:
            # Fallback to stderr if logging fails
            try:
                print(f"[shell_discovery] {msg}", file=sys.stderr)
            except Exception:
                pass
