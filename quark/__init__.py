"""Quark desktop application packager."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("quark-packager")
except PackageNotFoundError:  # pragma: no cover - package metadata absent in dev
    __version__ = "0.0.0"

__all__ = ["__version__"]
