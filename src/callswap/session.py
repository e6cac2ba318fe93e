"""Override sessions: scoped replacement of named callables.

An :class:`OverrideSession` installs replacements through a registry and
remembers, per name, what occupied the slot before its first touch. Restoring
a name puts that value back (or removes the slot again when the session
created it). Everything still overridden is restored when the session is
closed, leaves a ``with`` block, or is garbage collected.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Iterator

from . import config
from .exceptions import (
    AlreadyExistsError,
    AmbiguousRestoreError,
    ModeConflictError,
    NoSuchCallableError,
    NotInheritableError,
    NotOverriddenError,
)
from .names import qualify
from .registry import Registry, default_registry
from .wrapping import compose, is_callable, validate

logger = logging.getLogger(__name__)

_MISSING = object()
_ABSENT = object()

REPLACE = "replace"
INJECT = "inject"
INHERIT = "inherit"
WRAP = "wrap"

_REQUIRES_EXISTING = {REPLACE, WRAP}


@dataclass
class _Saved:
    name: str
    value: Any
    mode: str

    @property
    def existed(self) -> bool:
        return self.value is not _ABSENT


@dataclass
class _Install:
    key: str
    name: str
    replacement: Any


class OverrideSession:
    """Temporarily replace callables and restore them afterwards.

    Names may be fully qualified (``"package.module.func"``,
    ``"package.module:Class.method"``) or bare, in which case they are looked
    up in the calling module (or in ``namespace`` when given).

    Every install method takes either a name and a replacement, or a single
    mapping of names to replacements. A batch is validated as a whole before
    anything is installed, so a failing pair leaves the registry untouched.
    All install and restore methods return the session for chaining::

        with OverrideSession() as session:
            session.replace("shop.prices.lookup", lambda sku: 10).wrap(
                "shop.cart.total", lambda orig, cart: orig(cart) if cart else 0
            )
            ...

    Reuse one session per name. Two sessions overriding the same callable
    can lose the original depending on the order in which they restore.
    """

    # module prefixes passed over when resolving bare names, for subclasses
    # and helpers that live outside this package
    resolve_skip: tuple[str, ...] = ()

    def __init__(
        self,
        target: Any = _MISSING,
        replacement: Any = _MISSING,
        *,
        registry: Registry | None = None,
        namespace: str | None = None,
    ) -> None:
        """Initialize the session.

        Args:
            target: Optional name (or mapping of names) to replace right away.
            replacement: The replacement when ``target`` is a single name.
            registry: Registry to install into. Defaults to the live
                interpreter's modules and classes.
            namespace: Namespace used to qualify bare names instead of the
                calling module.
        """
        self._saved: dict[str, _Saved] = {}
        self._registry = registry if registry is not None else default_registry()
        self._namespace = namespace
        if target is not _MISSING:
            self.replace(target, replacement)

    @property
    def registry(self) -> Registry:
        return self._registry

    def replace(self, target: Any, replacement: Any = _MISSING) -> "OverrideSession":
        """Replace existing callables.

        Raises:
            NoSuchCallableError: A name is not bound to a callable.
            ModeConflictError: A name was injected or inherited by this session.
            InvalidCallableError: A replacement is not callable.
        """
        return self._install(REPLACE, target, replacement)

    override = replace

    def inject(self, target: Any, replacement: Any = _MISSING) -> "OverrideSession":
        """Create callables that must not exist yet.

        Raises:
            AlreadyExistsError: A name is already bound.
            NamespaceNotFoundError: The module or class to inject into is missing.
            InvalidCallableError: A replacement is not callable.
        """
        return self._install(INJECT, target, replacement)

    def inherit(self, target: Any, replacement: Any = _MISSING) -> "OverrideSession":
        """Create callables on a child class that it currently inherits.

        Raises:
            AlreadyExistsError: The child defines the name itself.
            NotInheritableError: No parent provides the name.
            InvalidCallableError: A replacement is not callable.
        """
        return self._install(INHERIT, target, replacement)

    def wrap(self, target: Any, replacement: Any = _MISSING) -> "OverrideSession":
        """Wrap existing callables; each wrapper gets the original as first argument.

        Raises:
            NoSuchCallableError: A name is not bound to a callable.
            ModeConflictError: A name was injected or inherited by this session.
            InvalidCallableError: A wrapper is not callable.
        """
        return self._install(WRAP, target, replacement)

    def restore(self, *names: str) -> "OverrideSession":
        """Restore the named callables to what they were before this session.

        With no names, restores the single overridden callable. Every name is
        checked before any of them is restored.

        Raises:
            NotOverriddenError: A name was never overridden by this session.
            AmbiguousRestoreError: No names were given while several callables
                are overridden. Use :meth:`restore_all` to restore them all.
        """
        if not names:
            if len(self._saved) > 1:
                raise AmbiguousRestoreError(self._saved)
            self._reconcile(list(self._saved))
            return self

        keys: list[str] = []
        for raw_name in names:
            key, _ = self._resolve(raw_name)
            if key not in self._saved:
                raise NotOverriddenError(key)
            if key not in keys:
                keys.append(key)
        self._reconcile(keys)
        return self

    def restore_all(self) -> "OverrideSession":
        """Restore every overridden callable, most recently touched first."""
        self._reconcile(list(reversed(self._saved)))
        return self

    def close(self) -> None:
        """Restore everything still overridden."""
        self.restore_all()

    def is_overridden(self, name: str) -> bool:
        key, _ = self._resolve(name)
        return key in self._saved

    def overridden_names(self) -> tuple[str, ...]:
        """Canonical names currently overridden, in order of first touch."""
        return tuple(self._saved)

    def original(self, name: str) -> Any:
        """Return what occupied ``name`` before this session, or None if it was empty.

        Raises:
            NotOverriddenError: The name was never overridden by this session.
        """
        key, _ = self._resolve(name)
        saved = self._saved.get(key)
        if saved is None:
            raise NotOverriddenError(key)
        return saved.value if saved.existed else None

    def __enter__(self) -> "OverrideSession":
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        self.close()

    def __del__(self) -> None:
        saved = self.__dict__.get("_saved")
        if not saved:
            return
        if config.warn_on_finalizer_restore():
            logger.warning(
                "Override session collected with live overrides, restoring: %s",
                ", ".join(saved),
            )
        try:
            self.restore_all()
        except Exception:  # noqa: BLE001
            logger.exception("Failed to restore overrides during finalization")

    def __len__(self) -> int:
        return len(self._saved)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.is_overridden(name)

    def __iter__(self) -> Iterator[str]:
        return iter(self.overridden_names())

    def __repr__(self) -> str:
        return f"<{type(self).__name__} overriding {list(self._saved)!r}>"

    def _resolve(self, raw_name: str) -> tuple[str, str]:
        name = qualify(raw_name, self._namespace, skip=self.resolve_skip)
        return self._registry.canonical(name), name

    @staticmethod
    def _pairs(target: Any, replacement: Any) -> list[tuple[Any, Any]]:
        if replacement is _MISSING:
            if not isinstance(target, Mapping):
                raise TypeError("Expected a name and a replacement, or a mapping of names to replacements")
            return list(target.items())
        if isinstance(target, Mapping):
            raise TypeError("A mapping of replacements cannot be combined with a replacement argument")
        return [(target, replacement)]

    def _check(self, mode: str, raw_name: Any, replacement: Any) -> _Install:
        key, name = self._resolve(raw_name)
        registry = self._registry
        if mode in _REQUIRES_EXISTING:
            saved = self._saved.get(key)
            if saved is not None and not saved.existed:
                raise ModeConflictError(key, saved.mode, mode)
            if not registry.exists(name) or not is_callable(registry.get(name)):
                raise NoSuchCallableError(name)
        else:
            if registry.exists(name):
                raise AlreadyExistsError(name)
            registry.require_namespace(name)
            if mode == INHERIT and not registry.exists_in_ancestor(name):
                raise NotInheritableError(name)
        validate(replacement)
        return _Install(key=key, name=name, replacement=replacement)

    def _install(self, mode: str, target: Any, replacement: Any) -> "OverrideSession":
        installs = [self._check(mode, name, value) for name, value in self._pairs(target, replacement)]
        registry = self._registry
        for install in installs:
            previous = registry.get(install.name) if registry.exists(install.name) else _ABSENT
            value = install.replacement
            if mode == WRAP:
                value = compose(previous, value, registry.copy_signature)
            registry.set(install.name, value)
            # the first touch decides what restore() puts back
            if install.key not in self._saved:
                self._saved[install.key] = _Saved(name=install.name, value=previous, mode=mode)
            logger.debug("%s: installed %s", mode, install.key)
        return self

    def _reconcile(self, keys: list[str]) -> None:
        registry = self._registry
        for key in keys:
            saved = self._saved.pop(key)
            if saved.existed:
                registry.set(saved.name, saved.value)
                logger.debug("restored %s", key)
            elif registry.exists(saved.name):
                registry.unset(saved.name)
                logger.debug("removed %s", key)


__all__ = ["OverrideSession", "REPLACE", "INJECT", "INHERIT", "WRAP"]
