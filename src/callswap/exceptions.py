"""Custom exceptions for installing and restoring overrides."""

from typing import Any, Iterable


class OverrideError(Exception):
    """Base class for override errors."""


class NoSuchCallableError(OverrideError):
    """Raised when replacing or wrapping a callable that does not exist."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Cannot replace non-existent callable ({name})")


class AlreadyExistsError(OverrideError):
    """Raised when injecting a callable into an occupied slot."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Cannot create a callable that already exists ({name})")


class NotInheritableError(OverrideError):
    """Raised when no base class provides the callable being inherited."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Callable does not exist in a parent class ({name})")


class InvalidCallableError(OverrideError):
    """Raised when a replacement is not callable."""

    def __init__(self, value: Any) -> None:
        self.value = value
        super().__init__(f"({value!r}) must be callable, got {type(value).__name__}")


class NotOverriddenError(OverrideError):
    """Raised when restoring a name this session never touched."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Cannot restore a callable that was not replaced ({name})")


class AmbiguousRestoreError(OverrideError):
    """Raised by a bare restore() while several names are overridden."""

    def __init__(self, names: Iterable[str]) -> None:
        self.names = tuple(names)
        super().__init__(
            "restore() needs explicit names when several callables are overridden: "
            + ", ".join(self.names)
        )


class ModeConflictError(OverrideError):
    """Raised when a name is installed with a mode that contradicts its first install."""

    def __init__(self, name: str, installed: str, requested: str) -> None:
        self.name = name
        self.installed = installed
        self.requested = requested
        super().__init__(
            f"Cannot {requested} ({name}): it was created by {installed}; restore it first"
        )


class NamespaceNotFoundError(OverrideError):
    """Raised when the module or object owning a name cannot be found."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Cannot find the namespace that owns ({name})")
