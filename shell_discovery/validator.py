"""
Shell path validation.

Tries a label's candidate paths in priority order and confirms the first
one that exists as a file or symbolic link.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from .common import vlog
from .probe import FileSystemProbe, ProbeError, StatResult


@dataclass(frozen=True)
class ShellDefinition:
    """
    A confirmed shell.

    Attributes:
        label: Display label (e.g., "Git Bash", "zsh")
        path: Candidate path exactly as generated (not normalized)
    """
    label: str
    path: str

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {"label": self.label, "path": self.path}


def _is_shell_entry(result: StatResult) -> bool:
    return result.is_file or result.is_symbolic_link


def probe_candidate(path: str, probe: FileSystemProbe, verbose: bool = False) -> bool:
    """
    Check whether a single candidate path holds a shell executable.

    stat is tried first since it also proves a link target is reachable.
    lstat is the fallback: some Windows links (app execution aliases)
    reject stat but are still valid executables.
    """
    normalized = probe.normalize(path)
    try:
        if _is_shell_entry(probe.stat(normalized)):
            return True
        # stat succeeded but found a directory or device
        return False
    except ProbeError as e:
        vlog(f"  stat {normalized}: {e.kind.value}, trying lstat", verbose)

    try:
        return _is_shell_entry(probe.lstat(normalized))
    except ProbeError as e:
        vlog(f"  lstat {normalized}: {e.kind.value}", verbose)
        return False


def validate_shell_paths(
    label: str,
    candidates: Sequence[str],
    probe: FileSystemProbe | None = None,
    verbose: bool = False,
) -> ShellDefinition | None:
    """
    Return the first candidate that validates, or None.

    Empty candidates are skipped without touching the filesystem. Probe
    failures only disqualify the candidate they happened on.

    Args:
        label: Shell label
        candidates: Candidate paths in priority order
        probe: Filesystem probe (default: FileSystemProbe())
        verbose: Enable verbose logging

    Returns:
        ShellDefinition for the first valid candidate, or None
    """
    probe = probe or FileSystemProbe()

    for candidate in candidates:
        if not candidate:
            continue
        if probe_candidate(candidate, probe, verbose):
            vlog(f"{label}: {candidate}", verbose)
            return ShellDefinition(label=label, path=candidate)

    vlog(f"{label}: not found ({len(candidates)} candidates)", verbose)
    return None
