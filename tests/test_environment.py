"""
Tests for platform environment detection (shell_discovery/environment.py).
"""

import os
from unittest.mock import patch

import pytest

from shell_discovery.environment import (
    OSKind,
    PlatformEnvironment,
    detect_platform,
    get_system32_path,
    get_windows_build_number,
    get_wsl_executable,
    is_32bit_process_on_64bit_windows,
    os_kind_from_platform,
    parse_os_kind,
    platform_from_override,
)


def windows(env=None, version="10.0.19045"):
    return PlatformEnvironment(os=OSKind.WINDOWS, os_version=version, env=env or {})


class TestPlatformEnvironment:
    """Tests for PlatformEnvironment dataclass."""

    def test_creation(self):
        env = PlatformEnvironment(os=OSKind.LINUX, os_version="6.8.0", env={"SHELL": "/bin/zsh"})
        assert env.os is OSKind.LINUX
        assert not env.is_windows
        assert env.getenv("SHELL") == "/bin/zsh"

    def test_immutable(self):
        env = PlatformEnvironment(os=OSKind.LINUX)
        with pytest.raises(AttributeError):
            env.os = OSKind.MACOS

    def test_str(self):
        assert str(windows()) == "windows 10.0.19045"
        assert str(PlatformEnvironment(os=OSKind.MACOS)) == "macos"

    def test_getenv_default(self):
        assert PlatformEnvironment(os=OSKind.LINUX).getenv("MISSING", "x") == "x"

    def test_windows_lookup_is_case_insensitive(self):
        env = windows({"WINDIR": r"C:\Windows"})
        assert env.getenv("windir") == r"C:\Windows"
        assert env.has_env("WinDir")

    def test_unix_lookup_is_case_sensitive(self):
        env = PlatformEnvironment(os=OSKind.LINUX, env={"SHELL": "/bin/bash"})
        assert env.getenv("shell") == ""
        assert not env.has_env("shell")

    def test_has_env_true_for_empty_value(self):
        assert windows({"PROCESSOR_ARCHITEW6432": ""}).has_env("PROCESSOR_ARCHITEW6432")


class TestOSKind:
    """Tests for OS identification."""

    @pytest.mark.parametrize("value,expected", [
        ("win32", OSKind.WINDOWS),
        ("cygwin", OSKind.WINDOWS),
        ("darwin", OSKind.MACOS),
        ("linux", OSKind.LINUX),
        ("freebsd13", OSKind.LINUX),
    ])
    def test_os_kind_from_platform(self, value, expected):
        assert os_kind_from_platform(value) is expected

    def test_parse_os_kind(self):
        assert parse_os_kind("Windows") is OSKind.WINDOWS

    def test_parse_os_kind_invalid(self):
        with pytest.raises(ValueError, match="Invalid platform"):
            parse_os_kind("beos")


class TestDetectPlatform:
    """Tests for detect_platform / platform_from_override."""

    @patch("shell_discovery.environment.sys.platform", "linux")
    @patch("shell_discovery.environment.platform.release", return_value="6.8.0-generic")
    def test_detect_linux(self, mock_release):
        env = detect_platform({"SHELL": "/bin/bash"})
        assert env.os is OSKind.LINUX
        assert env.os_version == "6.8.0-generic"
        assert env.env == {"SHELL": "/bin/bash"}

    @patch("shell_discovery.environment.sys.platform", "win32")
    @patch("shell_discovery.environment.platform.version", return_value="10.0.22631")
    def test_detect_windows_uses_version(self, mock_version):
        env = detect_platform({})
        assert env.os is OSKind.WINDOWS
        assert env.os_version == "10.0.22631"

    @patch.dict(os.environ, {"SHELL_DISCOVERY_TEST": "1"})
    def test_detect_snapshots_os_environ(self):
        env = detect_platform()
        assert env.env["SHELL_DISCOVERY_TEST"] == "1"

    def test_snapshot_is_a_copy(self):
        source = {"A": "1"}
        env = detect_platform(source)
        source["A"] = "2"
        assert env.env["A"] == "1"

    @pytest.mark.parametrize("override", [None, "", "auto"])
    def test_override_auto(self, override):
        assert platform_from_override(override, {}) == detect_platform({})

    def test_override_forces_kind(self):
        env = platform_from_override("windows", {"windir": r"C:\Windows"})
        assert env.os is OSKind.WINDOWS
        assert env.getenv("windir") == r"C:\Windows"

    def test_override_invalid(self):
        with pytest.raises(ValueError):
            platform_from_override("plan9", {})


class TestWindowsBuildNumber:
    """Tests for build number parsing and WSL executable choice."""

    @pytest.mark.parametrize("version,expected", [
        ("10.0.16299", 16299),
        ("10.0.15000", 15000),
        ("10.0.22631.3447", 22631),
        ("Microsoft Windows 10.0.19045", 19045),
        ("not a version", 0),
        ("10.0", 0),
        ("", 0),
    ])
    def test_parse(self, version, expected):
        assert get_windows_build_number(version) == expected

    def test_wsl_exe_from_16299(self):
        assert get_wsl_executable(windows(version="10.0.16299")) == "wsl.exe"

    def test_bash_exe_before_16299(self):
        assert get_wsl_executable(windows(version="10.0.15000")) == "bash.exe"

    def test_bash_exe_when_unparsable(self):
        assert get_wsl_executable(windows(version="garbage")) == "bash.exe"


class TestSystem32:
    """Tests for the native system directory."""

    def test_native_process(self):
        env = windows({"windir": r"C:\Windows"})
        assert not is_32bit_process_on_64bit_windows(env)
        assert get_system32_path(env) == r"C:\Windows\System32"

    def test_wow64_process_uses_sysnative(self):
        env = windows({"windir": r"C:\Windows", "PROCESSOR_ARCHITEW6432": "AMD64"})
        assert is_32bit_process_on_64bit_windows(env)
        assert get_system32_path(env) == r"C:\Windows\Sysnative"
