"""Path helpers shared by the packer, icon converter and target builder.

Paths handed to external tools use forward slashes on every platform, so the
helpers here work on normalized strings as well as :class:`~pathlib.Path`.
"""

from __future__ import annotations

import os
import re
import sys
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterable, Optional, Sequence, Union

from loguru import logger

PathLike = Union[str, "os.PathLike[str]"]

_DRIVE_PATTERN = re.compile(r"^[A-Za-z]:/")


class HostPlatform(str, Enum):
    WINDOWS = "Windows"
    MACOS = "OSX"
    LINUX = "Linux"

    @classmethod
    def current(cls) -> "HostPlatform":
        if sys.platform.startswith("win"):
            return cls.WINDOWS
        if sys.platform == "darwin":
            return cls.MACOS
        return cls.LINUX


def normalize_path(path: Optional[PathLike]) -> str:
    """Return ``path`` as a string with forward-slash separators."""

    if path is None:
        return ""
    return os.fspath(path).replace("\\", "/")


def is_absolute_path(path: Optional[PathLike]) -> bool:
    """Detect drive-letter, UNC and POSIX absolute paths regardless of host."""

    text = normalize_path(path)
    if _DRIVE_PATTERN.match(text):
        return True
    return text.startswith("/")


def parent_dir(path: PathLike) -> str:
    text = normalize_path(path)
    index = text.rfind("/")
    return text[:index] if index >= 0 else "."


def resolve_path(base_dir: Optional[PathLike], path: Optional[PathLike]) -> str:
    """Resolve ``path`` against ``base_dir`` unless it is already absolute."""

    text = normalize_path(path)
    if not text or is_absolute_path(text):
        return text
    base = normalize_path(base_dir) or "."
    if base.endswith("/"):
        return base + text
    return f"{base}/{text}"


def make_path(directory: PathLike, subdirs: Sequence[str], name: str = "") -> Path:
    """Create ``directory/subdirs...`` as needed and return the path of ``name`` in it."""

    path = Path(normalize_path(directory))
    for sub in subdirs:
        path = path / sub
        if path.exists():
            continue
        try:
            path.mkdir()
        except OSError as exc:
            raise OSError(f"make_path: cannot create dir: {path.as_posix()}") from exc
    return path / name if name else path


def check_file(path: PathLike) -> Optional[Path]:
    candidate = Path(normalize_path(path))
    return candidate if candidate.exists() else None


def check_folder(path: PathLike, for_writing: bool = False) -> bool:
    """Return True if ``path`` is a directory readable (or writeable) by this process."""

    folder = Path(normalize_path(path))
    if not folder.is_dir():
        return False
    mode = os.W_OK if for_writing else os.R_OK
    return os.access(folder, mode)


def remove_file(path: Path) -> None:
    if path.exists() or path.is_symlink():
        path.unlink()


@dataclass(frozen=True, slots=True)
class ToolLocator:
    """Find bundled tool binaries relative to the SDK tool home directory."""

    home: Path
    platform: HostPlatform = field(default_factory=HostPlatform.current)

    def find(self, candidates: Iterable[str]) -> Optional[Path]:
        for relative in candidates:
            found = check_file(os.path.normpath(self.home / relative))
            if found is not None:
                logger.debug("Found tool {}", found)
                return found
        return None


__all__ = [
    "HostPlatform",
    "PathLike",
    "ToolLocator",
    "check_file",
    "check_folder",
    "is_absolute_path",
    "make_path",
    "normalize_path",
    "parent_dir",
    "remove_file",
    "resolve_path",
]
