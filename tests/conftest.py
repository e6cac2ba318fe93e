"""Pytest fixtures for shared test state."""

from __future__ import annotations

import pytest

import callswap.config as callswap_config
from callswap.pytest_plugin import overrides  # noqa: F401


@pytest.fixture(autouse=True)
def _reset_config(monkeypatch: pytest.MonkeyPatch) -> None:
    """Reset global override settings between tests."""
    monkeypatch.delenv("CALLSWAP_WARN_ON_GC", raising=False)
    callswap_config.reset_config()
    yield
    callswap_config.reset_config()
