"""Pytest configuration and fixtures."""

import shutil
import tempfile

import pytest

from browser_presence.catalog import build_catalog
from browser_presence.snapshot import ProcessWindow


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    temp_path = tempfile.mkdtemp()
    yield temp_path
    shutil.rmtree(temp_path)


@pytest.fixture
def catalog():
    """The built-in browser catalog."""
    return build_catalog()


@pytest.fixture
def sample_processes():
    """Mixed process list as returned by the enumeration primitive."""
    return [
        ProcessWindow(101, "Google Chrome", "GitHub - Google Chrome"),
        ProcessWindow(102, "Google Chrome Helper", ""),
        ProcessWindow(201, "Firefox", "Private Browsing - Mozilla Firefox"),
        ProcessWindow(301, "Finder", "Downloads"),
        ProcessWindow(401, "Brave Browser", "x"),
    ]


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "integration: mark test as integration test")
    config.addinivalue_line("markers", "slow: mark test as slow running")
    config.addinivalue_line("markers", "unit: mark test as unit test")
