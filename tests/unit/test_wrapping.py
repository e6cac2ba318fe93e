"""Unit tests for replacement validation and wrapper composition."""

import functools
import inspect

import pytest

import sample_targets
from callswap import InvalidCallableError, ModuleRegistry
from callswap.wrapping import compose, is_callable, validate

copy_signature = ModuleRegistry().copy_signature


class CallableObject:
    def __call__(self, value: int = 1) -> int:
        return value + 1


@pytest.mark.parametrize(
    "candidate",
    [
        lambda: None,
        sample_targets.bar,
        CallableObject(),
        functools.partial(sample_targets.add, 1),
        len,
        staticmethod(lambda: 1),
        classmethod(lambda cls: cls),
    ],
)
def test_validate_accepts_callables(candidate: object) -> None:
    """Functions, callable objects and method descriptors are accepted."""
    validate(candidate)
    assert is_callable(candidate)


@pytest.mark.parametrize("candidate", [None, 42, "sample_targets.bar", ["f"], {"f": 1}])
def test_validate_rejects_non_callables(candidate: object) -> None:
    """Anything that cannot be invoked is rejected."""
    with pytest.raises(InvalidCallableError) as exc_info:
        validate(candidate)
    assert exc_info.value.value is candidate


def test_compose_passes_original_first() -> None:
    """The wrapper receives the captured original and the call arguments."""
    calls = []

    def wrapper(original, *args, **kwargs):
        calls.append((original, args, kwargs))
        return original(*args, **kwargs) * 10

    wrapped = compose(sample_targets.add, wrapper, copy_signature)
    assert wrapped(2, b=3) == 50
    assert calls == [(sample_targets.add, (2,), {"b": 3})]


def test_compose_preserves_signature() -> None:
    """The composed function reports the original's metadata."""
    wrapped = compose(sample_targets.add, lambda original, *args: original(*args), copy_signature)
    assert wrapped.__name__ == "add"
    assert wrapped.__doc__ == "Add two numbers."
    assert wrapped.__wrapped__ is sample_targets.add
    assert inspect.signature(wrapped) == inspect.signature(sample_targets.add)


def test_compose_uses_custom_signature_copier() -> None:
    """A registry may supply its own metadata copier."""
    seen = []

    def copier(source, target):
        seen.append((source, target))
        return target

    wrapped = compose(sample_targets.bar, lambda original: original(), copier)
    assert seen == [(sample_targets.bar, wrapped)]
    assert wrapped() == "original"


def test_compose_rewraps_descriptors() -> None:
    """Static and class method originals keep their descriptor type."""
    static = compose(staticmethod(lambda: 1), lambda original: original() + 1, copy_signature)
    assert isinstance(static, staticmethod)
    assert static.__func__() == 2

    klass = compose(classmethod(lambda cls: cls), lambda original, cls: (original(cls), "wrapped"), copy_signature)
    assert isinstance(klass, classmethod)
    assert klass.__func__(int) == (int, "wrapped")
