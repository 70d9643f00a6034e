"""
Tests for output rendering (shell_discovery/render.py).
"""

import io
import json

from shell_discovery.render import display_width, print_summary, render_json, render_table
from shell_discovery.validator import ShellDefinition


SHELLS = [
    ShellDefinition("bash", "/bin/bash"),
    ShellDefinition("Git Bash", r"C:\Program Files\Git\bin\bash.exe"),
]


class TestRenderTable:
    def test_empty(self):
        assert render_table([]) == ""

    def test_columns_aligned(self):
        lines = render_table(SHELLS, color=False).splitlines()
        assert lines[0] == "  SHELL     PATH"
        assert lines[1] == "  bash      /bin/bash"
        assert lines[2] == r"  Git Bash  C:\Program Files\Git\bin\bash.exe"

    def test_default_marked(self):
        lines = render_table(SHELLS, default_shell="/bin/bash", color=False).splitlines()
        assert lines[1].startswith("* bash")
        assert lines[2].startswith("  Git Bash")

    def test_wide_labels(self):
        shells = [ShellDefinition("シェル", "/a"), ShellDefinition("sh", "/b")]
        lines = render_table(shells, color=False).splitlines()
        assert display_width(lines[1].split("  /a")[0]) == display_width(lines[2].split("  /b")[0])

    def test_color(self):
        table = render_table(SHELLS, default_shell="/bin/bash", color=True)
        assert "\033[" in table


class TestDisplayWidth:
    def test_ascii(self):
        assert display_width("bash") == 4

    def test_wide(self):
        assert display_width("シェル") == 6

    def test_non_printable_falls_back_to_len(self):
        assert display_width("a\x07") == 2


class TestRenderJson:
    def test_shells(self):
        data = json.loads(render_json(SHELLS))
        assert data == {"shells": [s.to_dict() for s in SHELLS]}

    def test_default(self):
        assert json.loads(render_json([], "/bin/zsh")) == {"shells": [], "default": "/bin/zsh"}


class TestPrintSummary:
    def test_plural(self):
        out = io.StringIO()
        print_summary(SHELLS, out=out, color=False)
        assert out.getvalue() == "2 shells found\n"

    def test_singular(self):
        out = io.StringIO()
        print_summary(SHELLS[:1], out=out, color=False)
        assert out.getvalue() == "1 shell found\n"
