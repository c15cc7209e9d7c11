"""Workspace-level pytest configuration and fixtures."""

import pytest

from servicekit import Container


@pytest.fixture
def container() -> Container:
    """Provide a bare container with no extensions or configuration."""
    return Container()
