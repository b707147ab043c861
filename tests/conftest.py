"""
Pytest configuration for activemodels tests.

Resets the process-wide configuration around every test.
"""

import pytest

from activemodels import Config


@pytest.fixture(autouse=True)
def reset_config():
    """Restore the default configuration before and after each test."""
    Config.reset()
    yield
    Config.reset()
