"""Validation of replacements and composition of wrappers."""

from __future__ import annotations

from typing import Any, Callable

from .exceptions import InvalidCallableError

_DESCRIPTORS = (staticmethod, classmethod)


def is_callable(value: Any) -> bool:
    """Return whether ``value`` is callable or a static/class method descriptor."""
    return isinstance(value, _DESCRIPTORS) or callable(value)


def validate(candidate: Any) -> None:
    """Raise InvalidCallableError unless ``candidate`` can stand in for a callable."""
    if not is_callable(candidate):
        raise InvalidCallableError(candidate)


def compose(
    original: Any,
    wrapper: Callable[..., Any],
    copy_signature: Callable[[Callable[..., Any], Callable[..., Any]], Callable[..., Any]],
) -> Any:
    """Build a callable that invokes ``wrapper(original, *args, **kwargs)``.

    ``original`` is captured here, so later writes to the same slot (including
    this wrapper itself) are never re-read. ``staticmethod`` and ``classmethod``
    originals are unwrapped, composed, and re-wrapped in the same descriptor
    type; a classmethod wrapper receives the underlying function and calls it
    as ``original(cls, ...)``.

    Args:
        original: The value being wrapped, as stored in its namespace.
        wrapper: Called with the original prepended to the arguments.
        copy_signature: Copies signature metadata from the original onto the
            composed function, called as ``copy_signature(source, target)``.

    Returns:
        The composed callable, or descriptor when ``original`` is one.
    """
    descriptor: type | None = None
    target = original
    if isinstance(original, _DESCRIPTORS):
        descriptor = type(original)
        target = original.__func__

    def wrapped(*args: Any, **kwargs: Any) -> Any:
        return wrapper(target, *args, **kwargs)

    copy_signature(target, wrapped)

    if descriptor is not None:
        return descriptor(wrapped)
    return wrapped
