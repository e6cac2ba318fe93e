"""Unit tests for name qualification."""

import pytest

from callswap import OverrideSession, configure
from callswap.names import caller_module, is_qualified, qualify


def _helper_qualify(name: str) -> str:
    return qualify(name)


def test_is_qualified_detects_dots_and_colons() -> None:
    """Names with a module part are qualified."""
    assert is_qualified("pkg.mod.func")
    assert is_qualified("pkg.mod:Class.method")
    assert not is_qualified("func")


def test_qualified_name_is_returned_unchanged() -> None:
    """Qualified names are never rewritten."""
    assert qualify("sample_targets.bar") == "sample_targets.bar"
    assert qualify("sample_targets:Child.util", namespace="elsewhere") == "sample_targets:Child.util"


def test_bare_name_uses_calling_module() -> None:
    """Bare names are qualified with the module that asked."""
    assert qualify("foo") == f"{__name__}:foo"
    assert _helper_qualify("foo") == f"{__name__}:foo"


def test_bare_name_uses_explicit_namespace() -> None:
    """An explicit namespace wins over the calling module."""
    assert qualify("foo", namespace="pkg.mod") == "pkg.mod:foo"
    assert qualify("method", namespace="pkg.mod:Class") == "pkg.mod:Class.method"


def test_caller_module_skips_package_frames() -> None:
    """Frames inside the package are passed over."""
    assert caller_module() == __name__


def test_caller_module_skips_extra_prefixes() -> None:
    """Extra prefixes make the walk continue outward."""
    assert caller_module(skip=[__name__]) != __name__


def test_configured_skip_namespaces_are_honored() -> None:
    """Configured namespaces behave like extra prefixes."""
    configure(skip_namespaces=[__name__])
    assert caller_module() != __name__


def test_session_resolves_names_against_its_caller() -> None:
    """Session methods do not count as the caller."""
    session = OverrideSession()
    assert session._resolve("foo") == (f"{__name__}:foo", f"{__name__}:foo")


def test_non_string_name_is_rejected() -> None:
    """Only strings name callables."""
    with pytest.raises(TypeError):
        qualify(42)  # type: ignore[arg-type]


def test_empty_name_is_rejected() -> None:
    """An empty name cannot be qualified."""
    with pytest.raises(ValueError):
        qualify("")


class _ForwardingSession(OverrideSession):
    resolve_skip = (__name__,)


def test_subclass_skip_passes_over_its_own_module() -> None:
    """Subclasses can ask for their module to be skipped too."""
    session = _ForwardingSession()
    key, _ = session._resolve("foo")
    assert not key.startswith(f"{__name__}:")
