"""Resolution of possibly-unqualified callable names."""

from __future__ import annotations

import inspect
from typing import Iterable

from . import config

_PACKAGE = __name__.partition(".")[0]
_SEPARATORS = (".", ":")


def is_qualified(name: str) -> bool:
    """Return whether the name already carries a namespace."""
    return any(sep in name for sep in _SEPARATORS)


def _is_skipped(module_name: str, prefixes: Iterable[str]) -> bool:
    for prefix in prefixes:
        if module_name == prefix or module_name.startswith(prefix + "."):
            return True
    return False


def caller_module(skip: Iterable[str] = ()) -> str:
    """Return the name of the nearest calling module outside this package.

    Frames belonging to this package, to any configured skip namespace, or to
    the extra prefixes in ``skip`` are passed over so that helpers and
    subclasses built on the session resolve names against their caller.
    """
    prefixes = (_PACKAGE, *config.skip_namespaces(), *skip)
    frame = inspect.currentframe()
    try:
        while frame is not None:
            module_name = frame.f_globals.get("__name__")
            if isinstance(module_name, str) and not _is_skipped(module_name, prefixes):
                return module_name
            frame = frame.f_back
    finally:
        del frame
    return "__main__"


def qualify(name: str, namespace: str | None = None, skip: Iterable[str] = ()) -> str:
    """Turn ``name`` into a fully-qualified name.

    Args:
        name: A bare attribute name or an already qualified name.
        namespace: Module (or ``module:Class``) to qualify bare names with.
            When omitted, the calling module is used.
        skip: Extra module prefixes to pass over when looking for the caller.

    Returns:
        ``name`` unchanged when it is qualified, else ``"<namespace>:<name>"``
        or ``"<namespace>.<name>"`` when the namespace already holds a colon.
    """
    if not isinstance(name, str):
        raise TypeError(f"Callable name must be a string, got {type(name).__name__}")
    if not name:
        raise ValueError("Callable name must not be empty")
    if is_qualified(name):
        return name
    owner = namespace if namespace is not None else caller_module(skip)
    separator = "." if ":" in owner else ":"
    return f"{owner}{separator}{name}"
