"""Build log sinks.

The pipeline reports user-facing output (tool command lines, tool output,
per-target results) through a :class:`BuildLogger`. The host decides where it
ends up: a Qt console window, loguru, or nowhere at all.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional, Protocol

from loguru import logger


class LogKind(str, Enum):
    """Classification attached to every build log line."""

    INITIAL = "initial"
    STDOUT = "stdout"
    STDERR = "stderr"
    RESULT = "result"


class BuildLogger(Protocol):
    def add(self, text: str, kind: LogKind = LogKind.STDOUT) -> None:
        """Append text to the build log."""

    def status(self, text: str, progress: Optional[float] = None) -> None:
        """Replace the status line, optionally with a progress percentage."""

    def clear(self) -> None:
        """Reset log, status and progress."""


class NullBuildLogger:
    """Logger that discards everything."""

    def add(self, text: str, kind: LogKind = LogKind.STDOUT) -> None:
        pass

    def status(self, text: str, progress: Optional[float] = None) -> None:
        pass

    def clear(self) -> None:
        pass


class LoguruBuildLogger:
    """Forward build output to loguru, used when running without a window."""

    LEVELS = {
        LogKind.INITIAL: "DEBUG",
        LogKind.STDOUT: "INFO",
        LogKind.STDERR: "ERROR",
        LogKind.RESULT: "SUCCESS",
    }

    def add(self, text: str, kind: LogKind = LogKind.STDOUT) -> None:
        level = self.LEVELS.get(LogKind(kind), "INFO")
        for line in split_lines(text):
            logger.log(level, line)

    def status(self, text: str, progress: Optional[float] = None) -> None:
        if progress is None:
            logger.info("[status] {}", text)
        else:
            logger.info("[status] {} ({:.0f}%)", text, clamp_progress(progress))

    def clear(self) -> None:
        pass


def split_lines(text: object) -> list[str]:
    """Split a chunk of tool output into non-empty lines."""

    chunk = "" if text is None else str(text)
    return [line for line in chunk.replace("\r\n", "\n").split("\n") if line]


def clamp_progress(progress: float) -> float:
    return max(0.0, min(100.0, float(progress)))


__all__ = [
    "BuildLogger",
    "LogKind",
    "LoguruBuildLogger",
    "NullBuildLogger",
    "clamp_progress",
    "split_lines",
]
