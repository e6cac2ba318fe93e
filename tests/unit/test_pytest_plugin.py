"""Unit tests for the overrides fixture."""

import sample_targets
from callswap import OverrideSession


def test_fixture_provides_session(overrides: OverrideSession) -> None:
    """The fixture yields a live session."""
    overrides.replace("sample_targets.bar", lambda: "fixture")
    assert sample_targets.bar() == "fixture"


def test_fixture_restored_previous_test() -> None:
    """Overrides from the previous test were restored at teardown."""
    assert sample_targets.bar() == "original"


def test_fixture_resolves_bare_names_here(overrides: OverrideSession) -> None:
    """Bare names resolve against the test module, not the plugin."""
    overrides.inject("generated_helper", lambda: 7)
    assert overrides.overridden_names() == (f"{__name__}:generated_helper",)
    assert generated_helper() == 7  # type: ignore[name-defined]  # noqa: F821
