"""callswap.

Scoped replacement of named callables with guaranteed restoration.
"""

__version__ = "0.1.0"
__all__ = [
    "AlreadyExistsError",
    "AmbiguousRestoreError",
    "InMemoryRegistry",
    "InvalidCallableError",
    "ModeConflictError",
    "ModuleRegistry",
    "NamespaceNotFoundError",
    "NoSuchCallableError",
    "NotInheritableError",
    "NotOverriddenError",
    "OverrideError",
    "OverrideSession",
    "Registry",
    "UnboundCallableError",
    "configure",
]

from .config import configure
from .exceptions import (
    AlreadyExistsError,
    AmbiguousRestoreError,
    InvalidCallableError,
    ModeConflictError,
    NamespaceNotFoundError,
    NoSuchCallableError,
    NotInheritableError,
    NotOverriddenError,
    OverrideError,
)
from .registry import InMemoryRegistry, ModuleRegistry, Registry, UnboundCallableError
from .session import OverrideSession
