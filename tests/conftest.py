"""Shared test fixtures for checkers_engine."""

import pytest


@pytest.fixture
def tmp_output(tmp_path):
    """Provide a temporary output directory for game logs."""
    return tmp_path / "output"


@pytest.fixture
def sleeps():
    """Record the delays a session asks for instead of sleeping."""
    return []
