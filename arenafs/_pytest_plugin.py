"""pytest fixture plugin.

Usage::

    # conftest.py
    pytest_plugins = ["arenafs._pytest_plugin"]

This makes the ``afs`` fixture automatically available::

    def test_something(afs):
        afs.create_dir("/docs")
        afs.create_file("/docs/a.txt", size=5, content_ref="blob-1")
"""

import pytest

from ._fs import ArenaFileSystem


@pytest.fixture
def afs() -> ArenaFileSystem:
    """An unrestricted :class:`ArenaFileSystem` with a fixed clock.

    Provides an independent instance per test (function scope).
    """
    return ArenaFileSystem(clock=lambda: 1_700_000_000_000)
