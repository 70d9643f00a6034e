"""
Filesystem probing.

Thin wrapper over os.stat/os.lstat/os.readlink/os.listdir that reports a
normalized StatResult and translates OS errors into ProbeError with a
small set of kinds. The probe holds no state and is safe to share between
threads.
"""

from __future__ import annotations

import os
import stat as stat_module
from dataclasses import dataclass
from enum import Enum


class ProbeErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    PERMISSION_DENIED = "permission_denied"
    OTHER = "other"


class ProbeError(OSError):
    """
    Filesystem probe failure.

    Attributes:
        kind: Normalized failure kind
        path: Path that was probed
    """
    def __init__(self, kind: ProbeErrorKind, path: str, message: str = ""):
        self.kind = kind
        self.path = path
        super().__init__(message or f"{kind.value}: {path}")

    @classmethod
    def from_os_error(cls, exc: OSError, path: str) -> ProbeError:
        if isinstance(exc, FileNotFoundError):
            kind = ProbeErrorKind.NOT_FOUND
        elif isinstance(exc, PermissionError):
            kind = ProbeErrorKind.PERMISSION_DENIED
        else:
            kind = ProbeErrorKind.OTHER
        return cls(kind, path, f"{kind.value}: {path} ({exc.strerror or exc})")


@dataclass(frozen=True)
class StatResult:
    """Normalized view of a stat call."""
    is_file: bool = False
    is_symbolic_link: bool = False
    is_directory: bool = False

    @staticmethod
    def from_stat(st: os.stat_result) -> StatResult:
        mode = st.st_mode
        return StatResult(
            is_file=stat_module.S_ISREG(mode),
            is_symbolic_link=stat_module.S_ISLNK(mode),
            is_directory=stat_module.S_ISDIR(mode),
        )


class FileSystemProbe:
    """
    Default probe backed by the local filesystem.

    Subclasses (or test doubles) may override any method; the discovery
    engine only relies on the signatures below.
    """

    def normalize(self, path: str) -> str:
        """Collapse '.' and '..' segments using the host path rules."""
        return os.path.normpath(path)

    def stat(self, path: str) -> StatResult:
        try:
            return StatResult.from_stat(os.stat(path))
        except OSError as e:
            raise ProbeError.from_os_error(e, path) from e

    def lstat(self, path: str) -> StatResult:
        try:
            return StatResult.from_stat(os.lstat(path))
        except OSError as e:
            raise ProbeError.from_os_error(e, path) from e

    def readlink(self, path: str) -> str:
        try:
            return os.readlink(path)
        except OSError as e:
            raise ProbeError.from_os_error(e, path) from e

    def readdir(self, path: str) -> list[str]:
        try:
            return os.listdir(path)
        except OSError as e:
            raise ProbeError.from_os_error(e, path) from e

    def read_lines(self, path: str) -> list[str]:
        """
        Read a text file and split it on newlines.

        Raises:
            ProbeError: If the file cannot be read
        """
        try:
            with open(path, "r", encoding="utf-8", errors="replace") as f:
                contents = f.read()
        except OSError as e:
            raise ProbeError.from_os_error(e, path) from e
        return contents.split("\n")

    def file_exists(self, path: str) -> bool:
        """
        Whether path is a regular file.

        Some symbolic links on Windows (app execution aliases) reject stat,
        so on failure the link target is stat'ed instead.
        """
        try:
            return self.stat(path).is_file
        except ProbeError:
            try:
                return self.stat(self.readlink(path)).is_file
            except ProbeError:
                return False

    def dir_exists(self, path: str) -> bool:
        """Whether path is a directory, with the same link fallback as file_exists."""
        try:
            return self.stat(path).is_directory
        except ProbeError:
            try:
                return self.stat(self.readlink(path)).is_directory
            except ProbeError:
                return False
