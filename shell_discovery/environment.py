"""
Platform environment detection.

Captures the three facts candidate generation depends on:
- OS identity (windows, macos, linux)
- OS version string (Windows build number lives in it)
- Environment variables (windir, ProgramFiles, SHELL, ...)
"""

from __future__ import annotations

import os
import platform
import re
import sys
from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping


WINDOWS_BUILD_RE = re.compile(r"(\d+)\.(\d+)\.(\d+)")

# First Windows 10 build that ships wsl.exe (Fall Creators Update)
WSL_EXE_MIN_BUILD = 16299


class OSKind(str, Enum):
    """Operating system families with distinct discovery strategies."""
    WINDOWS = "windows"
    MACOS = "macos"
    LINUX = "linux"


@dataclass(frozen=True)
class PlatformEnvironment:
    """
    Snapshot of the platform a discovery run targets.

    Attributes:
        os: Operating system family
        os_version: Raw OS version string (e.g., "10.0.19045" on Windows)
        env: Environment variables visible to the discovery run
    """
    os: OSKind
    os_version: str = ""
    env: Mapping[str, str] = field(default_factory=dict)

    @property
    def is_windows(self) -> bool:
        return self.os is OSKind.WINDOWS

    def _lookup_key(self, name: str) -> str | None:
        if name in self.env:
            return name
        if self.is_windows:
            # Windows environment variable names are case-insensitive
            lowered = name.lower()
            for key in self.env:
                if key.lower() == lowered:
                    return key
        return None

    def has_env(self, name: str) -> bool:
        """Whether the variable is defined (even if empty)."""
        return self._lookup_key(name) is not None

    def getenv(self, name: str, default: str = "") -> str:
        """Get an environment variable, honouring Windows case-insensitivity."""
        key = self._lookup_key(name)
        if key is None:
            return default
        return self.env[key]

    def __str__(self) -> str:
        version = f" {self.os_version}" if self.os_version else ""
        return f"{self.os.value}{version}"


def os_kind_from_platform(sys_platform: str) -> OSKind:
    """
    Map a ``sys.platform`` value to an OSKind.

    Args:
        sys_platform: Value such as 'win32', 'darwin', 'linux'

    Returns:
        Matching OSKind (unknown Unix-likes are treated as Linux)
    """
    if sys_platform.startswith(("win32", "cygwin")):
        return OSKind.WINDOWS
    if sys_platform == "darwin":
        return OSKind.MACOS
    return OSKind.LINUX


def detect_platform(environ: Mapping[str, str] | None = None) -> PlatformEnvironment:
    """
    Detect the platform of the running interpreter.

    Args:
        environ: Environment mapping to snapshot (default: os.environ)

    Returns:
        PlatformEnvironment for the current process
    """
    kind = os_kind_from_platform(sys.platform)
    # platform.version() carries the "10.0.<build>" form on Windows
    version = platform.version() if kind is OSKind.WINDOWS else platform.release()
    return PlatformEnvironment(
        os=kind,
        os_version=version,
        env=dict(os.environ if environ is None else environ),
    )


def parse_os_kind(value: str) -> OSKind:
    """
    Parse a user-supplied OS name.

    Raises:
        ValueError: If the value is not a known OS kind
    """
    try:
        return OSKind(value.lower())
    except ValueError:
        valid = ", ".join(k.value for k in OSKind)
        raise ValueError(f"Invalid platform: {value}. Must be one of: {valid}") from None


def platform_from_override(
    override: str | None,
    environ: Mapping[str, str] | None = None,
) -> PlatformEnvironment:
    """
    Detect the platform, optionally forcing the OS kind.

    Args:
        override: 'auto'/None for detection, or an OS kind name
        environ: Environment mapping to snapshot (default: os.environ)

    Returns:
        PlatformEnvironment with the forced or detected OS kind

    Raises:
        ValueError: If override is not a valid OS kind
    """
    detected = detect_platform(environ)
    if not override or override == "auto":
        return detected
    kind = parse_os_kind(override)
    return PlatformEnvironment(os=kind, os_version=detected.os_version, env=detected.env)


def get_windows_build_number(os_version: str) -> int:
    """
    Extract the build number from a "major.minor.build" version string.

    Returns:
        Build number, or 0 if the string does not contain the pattern
    """
    match = WINDOWS_BUILD_RE.search(os_version or "")
    if not match:
        return 0
    return int(match.group(3))


def is_32bit_process_on_64bit_windows(env: PlatformEnvironment) -> bool:
    """WOW64 processes see PROCESSOR_ARCHITEW6432 in their environment."""
    return env.has_env("PROCESSOR_ARCHITEW6432")


def get_system32_path(env: PlatformEnvironment) -> str:
    """
    Resolve the native system directory.

    A 32-bit process on 64-bit Windows has System32 redirected to SysWOW64,
    so the native directory must be reached through Sysnative.
    """
    subdir = "Sysnative" if is_32bit_process_on_64bit_windows(env) else "System32"
    return f"{env.getenv('windir')}\\{subdir}"


def get_wsl_executable(env: PlatformEnvironment) -> str:
    """wsl.exe from build 16299 onwards, bash.exe before it."""
    if get_windows_build_number(env.os_version) >= WSL_EXE_MIN_BUILD:
        return "wsl.exe"
    return "bash.exe"
