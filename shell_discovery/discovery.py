"""
Shell discovery orchestration.

Generates candidates for the platform, validates every label in parallel
and returns the confirmed shells. Each call is a fresh probe; callers that
want to reuse results (e.g. the default shell) hold the cached value
themselves, see DefaultShellMemo.
"""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, Iterable, Iterator, Optional

from .candidates import CandidateSet, RegistryLookup, generate_candidates
from .common import vlog
from .config import Config
from .environment import (
    OSKind,
    PlatformEnvironment,
    detect_platform,
    get_system32_path,
)
from .logging_config import get_logger
from .powershell import PowerShellExeDetails, enumerate_powershell_installations
from .probe import FileSystemProbe
from .registry import lookup_registry_path
from .validator import ShellDefinition, validate_shell_paths


PowerShellEnumerator = Callable[[PlatformEnvironment], Iterable[PowerShellExeDetails]]


def _default_enumerator(probe: FileSystemProbe, verbose: bool) -> PowerShellEnumerator:
    def enumerate_for(env: PlatformEnvironment) -> Iterator[PowerShellExeDetails]:
        return enumerate_powershell_installations(env, probe, verbose)
    return enumerate_for


def validate_candidates(
    candidates: CandidateSet,
    probe: FileSystemProbe,
    max_workers: int,
    verbose: bool = False,
) -> list[ShellDefinition]:
    """
    Validate every label's candidates concurrently.

    Labels are independent; within a label candidates are tried in order.

    Args:
        candidates: label -> ordered candidate paths
        probe: Filesystem probe shared by all workers
        max_workers: Maximum parallel workers
        verbose: Enable verbose logging

    Returns:
        Confirmed shells, in candidate-set order
    """
    if not candidates:
        return []

    confirmed: dict[str, ShellDefinition] = {}
    workers = max(1, min(max_workers, len(candidates)))

    with ThreadPoolExecutor(max_workers=workers) as executor:
        future_to_label = {
            executor.submit(validate_shell_paths, label, paths, probe, verbose): label
            for label, paths in candidates.items()
        }
        for future in as_completed(future_to_label):
            label = future_to_label[future]
            try:
                result = future.result()
            except Exception as e:
                get_logger().warning(f"Unexpected error validating {label}: {e}")
                continue
            if result is not None:
                confirmed[label] = result

    return [confirmed[label] for label in candidates if label in confirmed]


def detect_available_shells(
    env: PlatformEnvironment | None = None,
    probe: FileSystemProbe | None = None,
    config: Config | None = None,
    powershell_enumerator: PowerShellEnumerator | None = None,
    registry_lookup: RegistryLookup | None = None,
    max_workers: int | None = None,
    verbose: bool = False,
) -> list[ShellDefinition]:
    """
    Discover the shells installed on this machine.

    Args:
        env: Platform environment (default: detect_platform())
        probe: Filesystem probe (default: FileSystemProbe())
        config: Discovery configuration (default: Config())
        powershell_enumerator: Callable yielding PowerShell installations
            (default: filesystem enumeration when enabled in config)
        registry_lookup: Callable resolving an app name to a path
            (default: the Windows registry when enabled in config)
        max_workers: Override for the number of parallel workers
        verbose: Enable verbose logging

    Returns:
        Confirmed shells (possibly empty)

    Raises:
        ShellsFileError: On macOS/Linux when the shells file cannot be read
    """
    env = env or detect_platform()
    probe = probe or FileSystemProbe()
    config = config or Config()
    prefs = config.preferences

    pwsh_installations: list[PowerShellExeDetails] = []
    if env.is_windows:
        if powershell_enumerator is None and prefs.enumerate_powershell:
            powershell_enumerator = _default_enumerator(probe, verbose)
        if powershell_enumerator is not None:
            pwsh_installations = list(powershell_enumerator(env))
        if registry_lookup is None and prefs.use_registry:
            registry_lookup = lookup_registry_path

    vlog(f"Discovering shells on {env}", verbose)
    candidates = generate_candidates(
        env,
        pwsh_installations,
        probe=probe,
        registry_lookup=registry_lookup,
        options=config.generator_options(),
        verbose=verbose,
    )

    shells = validate_candidates(candidates, probe, max_workers or prefs.max_workers, verbose)
    vlog(f"Found {len(shells)} of {len(candidates)} shells", verbose)
    return shells


discover_shells = detect_available_shells


def sort_shells(shells: Iterable[ShellDefinition]) -> list[ShellDefinition]:
    """Order shells by label, case-insensitively."""
    return sorted(shells, key=lambda s: (s.label.lower(), s.label, s.path))


def get_default_shell(env: PlatformEnvironment | None = None) -> str:
    """
    Resolve the user's default shell.

    Windows: %ComSpec%, else cmd.exe in the native system directory.
    macOS/Linux: $SHELL, /bin/sh when unset, /bin/bash when it is /bin/false.
    """
    env = env or detect_platform()

    if env.os is OSKind.WINDOWS:
        comspec = env.getenv("ComSpec")
        if comspec:
            return comspec
        if env.getenv("windir"):
            return f"{get_system32_path(env)}\\cmd.exe"
        return "cmd.exe"

    shell = env.getenv("SHELL") or "/bin/sh"
    # Some service accounts have /bin/false as login shell
    if shell == "/bin/false":
        return "/bin/bash"
    return shell


class DefaultShellMemo:
    """
    Caller-owned cache for the default shell.

    The discovery engine keeps no state between calls; hold one of these
    where the default shell is needed repeatedly.
    """

    def __init__(self, resolver: Optional[Callable[[], str]] = None):
        self._resolver = resolver or get_default_shell
        self._value: str | None = None
        self._lock = threading.Lock()

    def get(self) -> str:
        with self._lock:
            if self._value is None:
                self._value = self._resolver()
            return self._value

    def clear(self) -> None:
        with self._lock:
            self._value = None
