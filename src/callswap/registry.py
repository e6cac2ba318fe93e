"""Access to the callable registry that overrides are installed into.

The session never touches modules or classes directly; it goes through a
:class:`Registry`. :class:`ModuleRegistry` binds the interface to the live
interpreter, :class:`InMemoryRegistry` keeps an isolated table of namespaces
that call sites dispatch through.
"""

from __future__ import annotations

import functools
import logging
import pkgutil
import types
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator, Mapping, Sequence
from typing import Any

from .exceptions import NamespaceNotFoundError

logger = logging.getLogger(__name__)


class UnboundCallableError(LookupError):
    """Raised when calling a name that has no binding in an InMemoryRegistry."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Undefined callable called ({name})")


class Registry(ABC):
    """Interface over a namespace of callables keyed by fully-qualified name."""

    @abstractmethod
    def canonical(self, name: str) -> str:
        """Return the key shared by every spelling of the same slot."""

    @abstractmethod
    def exists(self, name: str) -> bool:
        """Return whether the slot is occupied in its own namespace."""

    @abstractmethod
    def get(self, name: str) -> Any:
        """Return the stored value. Only defined when ``exists(name)``."""

    @abstractmethod
    def set(self, name: str, value: Any) -> None:
        """Install or overwrite the binding."""

    @abstractmethod
    def unset(self, name: str) -> None:
        """Remove the binding so the slot is unoccupied."""

    @abstractmethod
    def exists_in_ancestor(self, name: str) -> bool:
        """Return whether a parent namespace provides the name."""

    def require_namespace(self, name: str) -> None:
        """Raise NamespaceNotFoundError unless ``name`` has somewhere to be set."""

    def copy_signature(self, source: Callable[..., Any], target: Callable[..., Any]) -> Callable[..., Any]:
        """Copy name, docstring and signature metadata from source onto target."""
        return functools.update_wrapper(target, source)


def _split_name(name: str) -> tuple[str, str]:
    if ":" in name:
        module, _, path = name.partition(":")
        owner_path, dot, attr = path.rpartition(".")
        owner = f"{module}:{owner_path}" if dot else module
    else:
        owner, _, attr = name.rpartition(".")
    if not owner or not attr:
        raise ValueError(f"Not a fully-qualified callable name: {name!r}")
    return owner, attr


class ModuleRegistry(Registry):
    """Registry over importable modules, classes and objects.

    Names look like ``"package.module.func"``, ``"package.module.Class.method"``
    or ``"package.module:Class.method"``. Only the owner's own ``__dict__`` is
    consulted by :meth:`exists`, so attributes a class inherits do not count
    as present.
    """

    def _resolve(self, name: str) -> tuple[Any | None, str]:
        owner_path, attr = _split_name(name)
        try:
            owner = pkgutil.resolve_name(owner_path)
        except (ImportError, AttributeError, ValueError):
            logger.debug("Could not resolve owner %s of %s", owner_path, name)
            return None, attr
        return owner, attr

    def _require_owner(self, name: str) -> tuple[Any, str]:
        owner, attr = self._resolve(name)
        if owner is None:
            raise NamespaceNotFoundError(name)
        return owner, attr

    @staticmethod
    def _own_namespace(owner: Any) -> Mapping[str, Any]:
        try:
            return vars(owner)
        except TypeError:
            return {}

    def canonical(self, name: str) -> str:
        owner, attr = self._resolve(name)
        if isinstance(owner, types.ModuleType):
            return f"{owner.__name__}:{attr}"
        if isinstance(owner, type):
            return f"{owner.__module__}:{owner.__qualname__}.{attr}"
        return name

    def exists(self, name: str) -> bool:
        owner, attr = self._resolve(name)
        if owner is None:
            return False
        return attr in self._own_namespace(owner)

    def get(self, name: str) -> Any:
        owner, attr = self._require_owner(name)
        return self._own_namespace(owner)[attr]

    def set(self, name: str, value: Any) -> None:
        owner, attr = self._require_owner(name)
        setattr(owner, attr, value)

    def unset(self, name: str) -> None:
        owner, attr = self._require_owner(name)
        delattr(owner, attr)

    def require_namespace(self, name: str) -> None:
        self._require_owner(name)

    def exists_in_ancestor(self, name: str) -> bool:
        owner, attr = self._resolve(name)
        if owner is None or isinstance(owner, types.ModuleType):
            return False
        if isinstance(owner, type):
            bases = owner.__mro__[1:]
        else:
            bases = type(owner).__mro__
        return any(attr in vars(base) for base in bases)


class InMemoryRegistry(Registry):
    """Isolated registry of namespaces with explicit parent links.

    Call sites dispatch through :meth:`call`, so replacing a callable is a
    single table update::

        registry = InMemoryRegistry()
        registry.define("Parent", "util", lambda: "parent")
        registry.declare("Child", parents=["Parent"])
        registry.call("Child.util")  # "parent"
    """

    def __init__(
        self,
        namespaces: Mapping[str, Mapping[str, Callable[..., Any]]] | None = None,
        parents: Mapping[str, Sequence[str]] | None = None,
    ) -> None:
        self._namespaces: dict[str, dict[str, Any]] = {}
        self._parents: dict[str, tuple[str, ...]] = {}
        for namespace, bindings in (namespaces or {}).items():
            self._namespaces[namespace] = dict(bindings)
        for namespace, bases in (parents or {}).items():
            self.declare(namespace, parents=bases)

    @staticmethod
    def _split(name: str) -> tuple[str, str]:
        # the attribute follows the last separator of either kind, matching qualify()
        index = max(name.rfind(":"), name.rfind("."))
        namespace, attr = name[:max(index, 0)], name[index + 1:]
        if index < 0 or not namespace or not attr:
            raise ValueError(f"Not a fully-qualified callable name: {name!r}")
        return namespace, attr

    def declare(self, namespace: str, parents: Sequence[str] = ()) -> None:
        """Create ``namespace`` (if needed) and set its parents, in lookup order."""
        self._namespaces.setdefault(namespace, {})
        self._parents[namespace] = tuple(parents)

    def define(self, namespace: str, name: str, fn: Callable[..., Any]) -> Callable[..., Any]:
        """Bind ``fn`` as ``namespace.name`` outside of any override session."""
        self._namespaces.setdefault(namespace, {})[name] = fn
        return fn

    def _ancestors(self, namespace: str) -> Iterator[str]:
        seen = {namespace}
        pending = list(self._parents.get(namespace, ()))
        while pending:
            parent = pending.pop(0)
            if parent in seen:
                continue
            seen.add(parent)
            yield parent
            pending[:0] = self._parents.get(parent, ())

    def lookup(self, name: str) -> Callable[..., Any]:
        """Find the binding for ``name``, falling back to parent namespaces."""
        namespace, attr = self._split(name)
        for candidate in (namespace, *self._ancestors(namespace)):
            bindings = self._namespaces.get(candidate, {})
            if attr in bindings:
                return bindings[attr]
        raise UnboundCallableError(self.canonical(name))

    def call(self, name: str, *args: Any, **kwargs: Any) -> Any:
        """Invoke whatever ``name`` currently resolves to."""
        return self.lookup(name)(*args, **kwargs)

    def canonical(self, name: str) -> str:
        namespace, attr = self._split(name)
        return f"{namespace}:{attr}"

    def exists(self, name: str) -> bool:
        namespace, attr = self._split(name)
        return attr in self._namespaces.get(namespace, {})

    def get(self, name: str) -> Any:
        namespace, attr = self._split(name)
        return self._namespaces[namespace][attr]

    def set(self, name: str, value: Any) -> None:
        namespace, attr = self._split(name)
        self._namespaces.setdefault(namespace, {})[attr] = value

    def unset(self, name: str) -> None:
        namespace, attr = self._split(name)
        del self._namespaces[namespace][attr]

    def exists_in_ancestor(self, name: str) -> bool:
        namespace, attr = self._split(name)
        return any(
            attr in self._namespaces.get(parent, {}) for parent in self._ancestors(namespace)
        )


_default_registry: ModuleRegistry | None = None


def default_registry() -> ModuleRegistry:
    """Return the shared registry bound to the running interpreter."""
    global _default_registry
    if _default_registry is None:
        _default_registry = ModuleRegistry()
    return _default_registry
