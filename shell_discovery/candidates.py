"""
Candidate path generation.

Builds, per shell label, the ordered list of paths where that shell may be
installed. Windows uses fixed install locations plus enumerated PowerShell
variants; macOS and Linux read the system shells registry (/etc/shells).
"""

from __future__ import annotations

import posixpath
from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional

from .common import vlog
from .environment import (
    OSKind,
    PlatformEnvironment,
    get_system32_path,
    get_wsl_executable,
)
from .powershell import PowerShellExeDetails
from .probe import FileSystemProbe, ProbeError


DEFAULT_SHELLS_FILE = "/etc/shells"
REGISTRY_PWSH_APP = "pwsh.exe"
REGISTRY_PWSH_LABEL = "PowerShell"

# label -> ordered candidate paths (first validated wins)
CandidateSet = dict[str, tuple[str, ...]]
RegistryLookup = Callable[[str], Optional[str]]


class ShellsFileError(OSError):
    """
    The system shells registry could not be read.

    Attributes:
        path: Path of the shells file
    """
    def __init__(self, path: str, reason: str = ""):
        self.path = path
        message = f"Could not read shells file {path}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


@dataclass(frozen=True)
class GeneratorOptions:
    """
    Knobs for candidate generation.

    Attributes:
        include_cygwin: Probe Cygwin bash locations on Windows
        include_windows_powershell: Add the inbox Windows PowerShell candidate
        shells_file: Shells registry read on macOS/Linux
        extra_candidates: User-configured label -> paths, appended after the
            platform candidates (extends an existing label's fallback chain)
    """
    include_cygwin: bool = True
    include_windows_powershell: bool = True
    shells_file: str = DEFAULT_SHELLS_FILE
    extra_candidates: dict[str, tuple[str, ...]] = field(default_factory=dict)


def _under(env: PlatformEnvironment, var: str, *parts: str) -> str:
    """Join parts below an environment-variable directory; '' if the variable is unset."""
    base = env.getenv(var)
    if not base:
        return ""
    return "\\".join((base,) + parts)


def windows_candidates(
    env: PlatformEnvironment,
    pwsh_installations: Iterable[PowerShellExeDetails] = (),
    registry_lookup: RegistryLookup | None = None,
    options: GeneratorOptions | None = None,
    verbose: bool = False,
) -> CandidateSet:
    """
    Build the Windows candidate set.

    Args:
        env: Windows platform environment
        pwsh_installations: Enumerated PowerShell installations
        registry_lookup: Optional App Paths lookup for pwsh.exe
        options: Generation options
        verbose: Enable verbose logging

    Returns:
        Ordered label -> candidates mapping
    """
    options = options or GeneratorOptions()
    system32 = get_system32_path(env) if env.getenv("windir") else ""

    def in_system32(*parts: str) -> str:
        return "\\".join((system32,) + parts) if system32 else ""

    candidates: CandidateSet = {
        "Command Prompt": (in_system32("cmd.exe"),),
        "WSL Bash": (in_system32(get_wsl_executable(env)),),
        "Git Bash": (
            _under(env, "ProgramW6432", "Git", "bin", "bash.exe"),
            _under(env, "ProgramW6432", "Git", "usr", "bin", "bash.exe"),
            _under(env, "ProgramFiles", "Git", "bin", "bash.exe"),
            _under(env, "ProgramFiles", "Git", "usr", "bin", "bash.exe"),
            _under(env, "LocalAppData", "Programs", "Git", "bin", "bash.exe"),
        ),
    }

    if options.include_cygwin:
        candidates["Cygwin"] = (
            _under(env, "HOMEDRIVE", "cygwin64", "bin", "bash.exe"),
            _under(env, "HOMEDRIVE", "cygwin", "bin", "bash.exe"),
        )

    if options.include_windows_powershell:
        candidates["Windows PowerShell"] = (
            in_system32("WindowsPowerShell", "v1.0", "powershell.exe"),
        )

    for pwsh in pwsh_installations:
        candidates[pwsh.display_name] = (pwsh.exe_path,)

    if registry_lookup is not None and REGISTRY_PWSH_LABEL not in candidates:
        try:
            registry_path = registry_lookup(REGISTRY_PWSH_APP) or ""
        except OSError as e:
            vlog(f"Registry lookup for {REGISTRY_PWSH_APP} failed: {e}", verbose)
            registry_path = ""
        candidates[REGISTRY_PWSH_LABEL] = (registry_path,)

    return candidates


def parse_shells_file(lines: Iterable[str]) -> CandidateSet:
    """
    Turn shells-registry lines into a candidate set.

    Blank lines and '#' comments are dropped; each remaining line is a
    candidate for the label named by its basename. Lines sharing a
    basename are kept in file order, so the first listed path is tried
    first and later ones act as fallbacks (/bin/bash vs /usr/bin/bash).
    """
    candidates: CandidateSet = {}
    for line in lines:
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        name = posixpath.basename(stripped)
        candidates[name] = candidates.get(name, ()) + (stripped,)
    return candidates


def unix_candidates(
    probe: FileSystemProbe,
    options: GeneratorOptions | None = None,
    verbose: bool = False,
) -> CandidateSet:
    """
    Build the macOS/Linux candidate set from the shells registry.

    Raises:
        ShellsFileError: If the shells file cannot be read
    """
    options = options or GeneratorOptions()
    try:
        lines = probe.read_lines(options.shells_file)
    except ProbeError as e:
        raise ShellsFileError(options.shells_file, e.kind.value) from e

    candidates = parse_shells_file(lines)
    vlog(f"Read {len(candidates)} shells from {options.shells_file}", verbose)
    return candidates


def _append_extra(candidates: CandidateSet, extra: dict[str, tuple[str, ...]]) -> CandidateSet:
    merged = dict(candidates)
    for label, paths in extra.items():
        merged[label] = tuple(merged.get(label, ())) + tuple(paths)
    return merged


def generate_candidates(
    env: PlatformEnvironment,
    pwsh_installations: Iterable[PowerShellExeDetails] = (),
    probe: FileSystemProbe | None = None,
    registry_lookup: RegistryLookup | None = None,
    options: GeneratorOptions | None = None,
    verbose: bool = False,
) -> CandidateSet:
    """
    Generate candidate paths for every known shell on the platform.

    Args:
        env: Platform environment
        pwsh_installations: Enumerated PowerShell installations (Windows only)
        probe: Filesystem probe used to read the shells file
        registry_lookup: Optional registry lookup (Windows only)
        options: Generation options
        verbose: Enable verbose logging

    Returns:
        Ordered label -> candidates mapping

    Raises:
        ShellsFileError: On macOS/Linux when the shells file cannot be read
    """
    options = options or GeneratorOptions()
    probe = probe or FileSystemProbe()

    if env.os is OSKind.WINDOWS:
        candidates = windows_candidates(env, pwsh_installations, registry_lookup, options, verbose)
    elif env.os in (OSKind.MACOS, OSKind.LINUX):
        candidates = unix_candidates(probe, options, verbose)
    else:
        raise ValueError(f"Unsupported platform: {env.os}")

    if options.extra_candidates:
        candidates = _append_extra(candidates, options.extra_candidates)

    vlog(f"Generated candidates for {len(candidates)} shells on {env.os.value}", verbose)
    return candidates
