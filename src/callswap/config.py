"""Process-wide settings for override sessions."""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass, field
from typing import Iterable

logger = logging.getLogger(__name__)

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"", "0", "false", "no", "off"}


@dataclass
class _Settings:
    skip_namespaces: tuple[str, ...] = field(default_factory=tuple)
    warn_on_finalizer_restore: bool | None = None


_settings = _Settings()
_settings_lock = threading.Lock()


def configure(
    skip_namespaces: Iterable[str] | None = None,
    warn_on_finalizer_restore: bool | None = None,
) -> None:
    """Configure override sessions.

    Args:
        skip_namespaces: Extra module prefixes ignored when resolving
            unqualified names, for helpers built on top of OverrideSession.
        warn_on_finalizer_restore: Log a warning when a session is garbage
            collected while it still holds overrides.
    """
    namespaces: tuple[str, ...] | None = None
    if skip_namespaces is not None:
        if isinstance(skip_namespaces, str):
            raise TypeError("skip_namespaces must be an iterable of strings, not a string")
        namespaces = tuple(skip_namespaces)
        for namespace in namespaces:
            if not isinstance(namespace, str) or not namespace:
                raise ValueError(f"Invalid namespace to skip: {namespace!r}")
    with _settings_lock:
        if namespaces is not None:
            _settings.skip_namespaces = namespaces
        if warn_on_finalizer_restore is not None:
            _settings.warn_on_finalizer_restore = bool(warn_on_finalizer_restore)


def reset_config() -> None:
    """Restore default settings."""
    with _settings_lock:
        _settings.skip_namespaces = ()
        _settings.warn_on_finalizer_restore = None


def skip_namespaces() -> tuple[str, ...]:
    with _settings_lock:
        return _settings.skip_namespaces


def warn_on_finalizer_restore() -> bool:
    with _settings_lock:
        configured = _settings.warn_on_finalizer_restore
    if configured is not None:
        return configured
    return _resolve_warn_on_gc_env()


def _resolve_warn_on_gc_env() -> bool:
    raw = os.environ.get("CALLSWAP_WARN_ON_GC", "").strip().lower()
    if raw in _TRUE_VALUES:
        return True
    if raw not in _FALSE_VALUES:
        logger.warning("Ignoring invalid CALLSWAP_WARN_ON_GC value: %r", raw)
    return False
