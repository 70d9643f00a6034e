"""
Shared fixtures.
"""

import pytest

from tests.fakes import FakeProbe


@pytest.fixture
def make_probe():
    """Factory for FakeProbe instances."""
    return FakeProbe
