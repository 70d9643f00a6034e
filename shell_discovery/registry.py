"""
Windows registry lookup for application install paths.

Applications register their executables under the "App Paths" key; the
default value of ``App Paths\\<name>`` is the full executable path.
"""

from __future__ import annotations

import sys

from .common import vlog


APP_PATHS_KEY = r"SOFTWARE\Microsoft\Windows\CurrentVersion\App Paths"


def lookup_registry_path(app_name: str, verbose: bool = False) -> str | None:
    """
    Resolve an application's executable path from the registry.

    Args:
        app_name: Registered application name (e.g., "pwsh.exe")
        verbose: Enable verbose logging

    Returns:
        Executable path, or None when unavailable (always None off Windows)
    """
    if sys.platform != "win32":
        return None

    try:
        import winreg
    except ImportError:
        return None

    subkey = f"{APP_PATHS_KEY}\\{app_name}"
    for hive in (winreg.HKEY_LOCAL_MACHINE, winreg.HKEY_CURRENT_USER):
        try:
            with winreg.OpenKey(hive, subkey) as key:
                value, _ = winreg.QueryValueEx(key, "")
        except OSError:
            continue
        if isinstance(value, str) and value.strip():
            path = value.strip().strip('"')
            vlog(f"Registry: {app_name} -> {path}", verbose)
            return path

    vlog(f"Registry: no App Paths entry for {app_name}", verbose)
    return None
