"""pytest fixture exposing one override session per test.

Enable it from a ``conftest.py``::

    pytest_plugins = ["callswap.pytest_plugin"]
"""

from __future__ import annotations

from typing import Iterator

import pytest

from .session import OverrideSession


@pytest.fixture
def overrides() -> Iterator[OverrideSession]:
    """Yield a session whose overrides are all restored at teardown."""
    session = OverrideSession()
    try:
        yield session
    finally:
        session.close()
