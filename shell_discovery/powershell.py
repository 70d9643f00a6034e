"""
Enumeration of installed PowerShell variants on Windows.

Looks in the well-known install locations of PowerShell (stable and
preview, 64-bit and x86, Store/MSIX, .NET global tool) and of the inbox
Windows PowerShell, yielding only executables that exist.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from packaging.version import InvalidVersion, Version

from .common import vlog
from .environment import (
    PlatformEnvironment,
    get_system32_path,
    is_32bit_process_on_64bit_windows,
)
from .probe import FileSystemProbe, ProbeError


PWSH_EXE = "pwsh.exe"
MSIX_STABLE_PACKAGE = "Microsoft.PowerShell_8wekyb3d8bbwe"
MSIX_PREVIEW_PACKAGE = "Microsoft.PowerShellPreview_8wekyb3d8bbwe"
PREVIEW_SUFFIX = "-preview"


@dataclass(frozen=True)
class PowerShellExeDetails:
    """
    One PowerShell installation.

    Attributes:
        display_name: Human readable name ("PowerShell", "PowerShell (x86)", ...)
        exe_path: Full path to the executable
    """
    display_name: str
    exe_path: str

    def to_dict(self) -> dict:
        return {"displayName": self.display_name, "exePath": self.exe_path}


def _version_key(dirname: str, preview: bool) -> Version | None:
    """Parse an install directory name ('7', '7.4', '7-preview') into a Version."""
    name = dirname.lower()
    if preview:
        if not name.endswith(PREVIEW_SUFFIX):
            return None
        name = name[: -len(PREVIEW_SUFFIX)]
    elif PREVIEW_SUFFIX in name:
        return None
    try:
        return Version(name)
    except InvalidVersion:
        return None


def find_highest_pwsh(
    install_root: str,
    probe: FileSystemProbe,
    preview: bool = False,
) -> str | None:
    """
    Find pwsh.exe in the highest versioned folder under a PowerShell root.

    Args:
        install_root: e.g. "C:\\Program Files\\PowerShell"
        probe: Filesystem probe
        preview: Look at "<ver>-preview" folders instead of stable ones

    Returns:
        Path to pwsh.exe, or None if no matching installation exists
    """
    try:
        entries = probe.readdir(install_root)
    except ProbeError:
        return None

    versioned: list[tuple[Version, str]] = []
    for entry in entries:
        version = _version_key(entry, preview)
        if version is not None:
            versioned.append((version, entry))

    for _, entry in sorted(versioned, reverse=True):
        exe_path = f"{install_root}\\{entry}\\{PWSH_EXE}"
        if probe.file_exists(exe_path):
            return exe_path
    return None


def _program_files_roots(env: PlatformEnvironment) -> tuple[str, str]:
    """Return (native Program Files, x86 Program Files); either may be empty."""
    native = env.getenv("ProgramW6432") or env.getenv("ProgramFiles")
    x86 = env.getenv("ProgramFiles(x86)")
    if x86 == native:
        x86 = ""
    return native, x86


def _variants(env: PlatformEnvironment, probe: FileSystemProbe, preview: bool):
    """Yield (display_name, path-or-None) for one release channel, in priority order."""
    name = "PowerShell Preview" if preview else "PowerShell"
    native, x86 = _program_files_roots(env)

    if native:
        yield name, find_highest_pwsh(f"{native}\\PowerShell", probe, preview)
    if x86:
        yield f"{name} (x86)", find_highest_pwsh(f"{x86}\\PowerShell", probe, preview)

    local_app_data = env.getenv("LocalAppData")
    if local_app_data:
        package = MSIX_PREVIEW_PACKAGE if preview else MSIX_STABLE_PACKAGE
        yield f"{name} (Store)", f"{local_app_data}\\Microsoft\\WindowsApps\\{package}\\{PWSH_EXE}"

    if not preview:
        user_profile = env.getenv("USERPROFILE")
        if user_profile:
            yield ".NET Core PowerShell Global Tool", f"{user_profile}\\.dotnet\\tools\\{PWSH_EXE}"


def _windows_powershell(env: PlatformEnvironment):
    windir = env.getenv("windir")
    if not windir:
        return
    yield "Windows PowerShell", f"{get_system32_path(env)}\\WindowsPowerShell\\v1.0\\powershell.exe"
    # The x86 build exists alongside the native one on 64-bit Windows
    if env.getenv("ProgramFiles(x86)") or is_32bit_process_on_64bit_windows(env):
        yield "Windows PowerShell (x86)", f"{windir}\\SysWOW64\\WindowsPowerShell\\v1.0\\powershell.exe"


def enumerate_powershell_installations(
    env: PlatformEnvironment,
    probe: FileSystemProbe | None = None,
    verbose: bool = False,
) -> Iterator[PowerShellExeDetails]:
    """
    Lazily enumerate installed PowerShell variants.

    Each call starts a fresh scan. Nothing is yielded on non-Windows
    platforms.

    Args:
        env: Platform environment
        probe: Filesystem probe (default: FileSystemProbe())
        verbose: Enable verbose logging

    Yields:
        PowerShellExeDetails for every installation whose executable exists
    """
    if not env.is_windows:
        return

    probe = probe or FileSystemProbe()

    def _candidates():
        yield from _variants(env, probe, preview=False)
        yield from _variants(env, probe, preview=True)
        yield from _windows_powershell(env)

    for display_name, exe_path in _candidates():
        if not exe_path:
            continue
        if not probe.file_exists(exe_path):
            vlog(f"PowerShell: {display_name} not found at {exe_path}", verbose)
            continue
        vlog(f"PowerShell: {display_name} at {exe_path}", verbose)
        yield PowerShellExeDetails(display_name=display_name, exe_path=exe_path)
