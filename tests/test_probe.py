"""
Tests for the filesystem probe (shell_discovery/probe.py).
"""

import os
from unittest.mock import patch

import pytest

from shell_discovery.probe import FileSystemProbe, ProbeError, ProbeErrorKind, StatResult


posix_only = pytest.mark.skipif(os.name == "nt", reason="POSIX symlinks required")


@pytest.fixture
def probe():
    return FileSystemProbe()


class TestProbeError:
    """Tests for OS error translation."""

    @pytest.mark.parametrize("exc,kind", [
        (FileNotFoundError(2, "No such file"), ProbeErrorKind.NOT_FOUND),
        (PermissionError(13, "Permission denied"), ProbeErrorKind.PERMISSION_DENIED),
        (OSError(1920, "The file cannot be accessed by the system"), ProbeErrorKind.OTHER),
    ])
    def test_from_os_error(self, exc, kind):
        error = ProbeError.from_os_error(exc, "/some/path")
        assert error.kind is kind
        assert error.path == "/some/path"
        assert isinstance(error, OSError)

    def test_stat_permission_denied(self, probe):
        with patch("shell_discovery.probe.os.stat", side_effect=PermissionError(13, "denied")):
            with pytest.raises(ProbeError) as exc:
                probe.stat("/x")
        assert exc.value.kind is ProbeErrorKind.PERMISSION_DENIED


class TestStat:
    """Tests for stat/lstat on the real filesystem."""

    def test_file(self, probe, tmp_path):
        f = tmp_path / "f"
        f.write_text("x")
        assert probe.stat(str(f)) == StatResult(is_file=True)

    def test_directory(self, probe, tmp_path):
        assert probe.stat(str(tmp_path)) == StatResult(is_directory=True)

    def test_missing(self, probe, tmp_path):
        with pytest.raises(ProbeError) as exc:
            probe.stat(str(tmp_path / "missing"))
        assert exc.value.kind is ProbeErrorKind.NOT_FOUND

    @posix_only
    def test_lstat_reports_link(self, probe, tmp_path):
        target = tmp_path / "t"
        target.write_text("")
        link = tmp_path / "l"
        link.symlink_to(target)
        assert probe.lstat(str(link)) == StatResult(is_symbolic_link=True)
        assert probe.stat(str(link)) == StatResult(is_file=True)

    @posix_only
    def test_dangling_link(self, probe, tmp_path):
        link = tmp_path / "l"
        link.symlink_to(tmp_path / "gone")
        with pytest.raises(ProbeError):
            probe.stat(str(link))
        assert probe.lstat(str(link)).is_symbolic_link


class TestHelpers:
    """Tests for read_lines, readdir, readlink and existence helpers."""

    def test_read_lines(self, probe, tmp_path):
        f = tmp_path / "shells"
        f.write_text("# comment\n/bin/sh\n")
        assert probe.read_lines(str(f)) == ["# comment", "/bin/sh", ""]

    def test_read_lines_missing(self, probe, tmp_path):
        with pytest.raises(ProbeError):
            probe.read_lines(str(tmp_path / "nope"))

    def test_readdir(self, probe, tmp_path):
        (tmp_path / "a").mkdir()
        (tmp_path / "b").write_text("")
        assert sorted(probe.readdir(str(tmp_path))) == ["a", "b"]

    def test_readlink_on_regular_file_fails(self, probe, tmp_path):
        f = tmp_path / "f"
        f.write_text("")
        with pytest.raises(ProbeError):
            probe.readlink(str(f))

    def test_file_exists(self, probe, tmp_path):
        f = tmp_path / "f"
        f.write_text("")
        assert probe.file_exists(str(f))
        assert not probe.file_exists(str(tmp_path))
        assert not probe.file_exists(str(tmp_path / "missing"))

    def test_dir_exists(self, probe, tmp_path):
        assert probe.dir_exists(str(tmp_path))
        assert not probe.dir_exists(str(tmp_path / "missing"))

    def test_file_exists_falls_back_to_link_target(self, probe, tmp_path):
        target = tmp_path / "target"
        target.write_text("")

        real_stat = os.stat

        def fake_stat(path, *args, **kwargs):
            if path == "alias":
                raise OSError(1920, "The file cannot be accessed by the system")
            return real_stat(path, *args, **kwargs)

        with patch("shell_discovery.probe.os.stat", side_effect=fake_stat), \
                patch("shell_discovery.probe.os.readlink", return_value=str(target)):
            assert probe.file_exists("alias")

    def test_normalize(self, probe):
        assert probe.normalize(os.path.join("a", ".", "b", "..", "c")) == os.path.join("a", "c")
