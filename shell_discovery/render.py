"""
Output rendering and formatting.
"""

from __future__ import annotations

import json
import os
import sys
from typing import Iterable, TextIO

from wcwidth import wcswidth

from .validator import ShellDefinition


USE_COLOR = os.environ.get("SHELL_DISCOVERY_COLOR", "1") == "1"

# ANSI color codes
BOLD = "\033[1m"
GREEN = "\033[32m"
DIM = "\033[2m"
RESET = "\033[0m"


def colorize(text: str, color: str, enabled: bool | None = None) -> str:
    """
    Apply color to text.

    Args:
        text: Text to colorize
        color: ANSI color code
        enabled: Force colors on/off (default: USE_COLOR and stdout is a TTY)

    Returns:
        Colored text or plain text if colors disabled
    """
    if enabled is None:
        enabled = USE_COLOR and sys.stdout.isatty()
    if not enabled or not text:
        return text
    return f"{color}{text}{RESET}"


def display_width(text: str) -> int:
    """Terminal column width of text (wide characters count double)."""
    width = wcswidth(text)
    # Non-printable characters make wcswidth return -1
    return width if width >= 0 else len(text)


def pad(text: str, width: int) -> str:
    return text + " " * max(0, width - display_width(text))


def render_table(
    shells: Iterable[ShellDefinition],
    default_shell: str | None = None,
    color: bool | None = None,
) -> str:
    """
    Render shells as an aligned two-column table.

    Args:
        shells: Shells to render
        default_shell: Path of the default shell, marked with '*'
        color: Force colors on/off

    Returns:
        Table text (no trailing newline); empty string for no shells
    """
    rows = list(shells)
    if not rows:
        return ""

    label_width = max(display_width("SHELL"), *(display_width(s.label) for s in rows))
    lines = [colorize(f"  {pad('SHELL', label_width)}  PATH", BOLD, color)]
    for shell in rows:
        marker = "*" if default_shell and shell.path == default_shell else " "
        label = pad(shell.label, label_width)
        if marker == "*":
            label = colorize(label, GREEN, color)
        lines.append(f"{marker} {label}  {shell.path}")
    return "\n".join(lines)


def render_json(shells: Iterable[ShellDefinition], default_shell: str | None = None) -> str:
    """Render shells (and optionally the default shell) as JSON."""
    payload: dict = {"shells": [s.to_dict() for s in shells]}
    if default_shell is not None:
        payload["default"] = default_shell
    return json.dumps(payload, indent=2, ensure_ascii=False)


def print_summary(shells: list[ShellDefinition], out: TextIO | None = None, color: bool | None = None) -> None:
    """Print a one-line count of discovered shells."""
    out = out or sys.stdout
    count = len(shells)
    noun = "shell" if count == 1 else "shells"
    print(colorize(f"{count} {noun} found", DIM, color), file=out)
