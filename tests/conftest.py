"""Pytest configuration and shared fixtures."""

import sys
from datetime import datetime
from pathlib import Path

import pytest

# Ensure src directory is in Python path for all tests
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from quickadd.config import Config  # noqa: E402

# Monday 2024-01-01 10:00, the reference instant used across the suite
REFERENCE_NOW = datetime(2024, 1, 1, 10, 0)


@pytest.fixture
def now():
    return REFERENCE_NOW


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep tests away from the user's real configuration file."""
    monkeypatch.setenv("QUICKADD_CONFIG", str(tmp_path / "config.yaml"))
    Config._instance = None
    yield
    Config._instance = None
