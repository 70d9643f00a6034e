"""
Tests for shared helpers (shell_discovery/common.py).
"""

import os
from unittest.mock import patch

from shell_discovery.common import env_flag, env_int


class TestEnvFlag:
    @patch.dict(os.environ, {"SHELL_DISCOVERY_X": "1"})
    def test_set(self):
        assert env_flag("SHELL_DISCOVERY_X") is True

    @patch.dict(os.environ, {}, clear=True)
    def test_default(self):
        assert env_flag("SHELL_DISCOVERY_X") is False
        assert env_flag("SHELL_DISCOVERY_X", "1") is True


class TestEnvInt:
    @patch.dict(os.environ, {}, clear=True)
    def test_unset(self):
        assert env_int("SHELL_DISCOVERY_N", 5) == 5

    @patch.dict(os.environ, {"SHELL_DISCOVERY_N": "7"})
    def test_parsed(self):
        assert env_int("SHELL_DISCOVERY_N", 5, 1, 10) == 7

    @patch.dict(os.environ, {"SHELL_DISCOVERY_N": "seven"})
    def test_not_a_number(self):
        assert env_int("SHELL_DISCOVERY_N", 5) == 5

    @patch.dict(os.environ, {"SHELL_DISCOVERY_N": "64"})
    def test_above_range(self):
        assert env_int("SHELL_DISCOVERY_N", 5, 1, 32) == 5

    @patch.dict(os.environ, {"SHELL_DISCOVERY_N": "0"})
    def test_below_range(self):
        assert env_int("SHELL_DISCOVERY_N", 5, low=1) == 5

    @patch.dict(os.environ, {"SHELL_DISCOVERY_N": "64"})
    def test_unbounded(self):
        assert env_int("SHELL_DISCOVERY_N", 5) == 64
