"""Package metadata tests."""

from __future__ import annotations

from quark import __version__


def test_version_format() -> None:
    """Ensure the project exposes a version string."""

    assert isinstance(__version__, str)
    assert __version__
