"""Collaborators shared by every step of one build run."""

from __future__ import annotations

import os
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from loguru import logger

from .assembler import ExeAssembler, ScappAssembler
from .console import BuildLogger, NullBuildLogger
from .errors import BuildCancelled, ConfigError
from .paths import HostPlatform, ToolLocator
from .runner import CommandRunner

DEFAULT_HOME = Path(__file__).resolve().parents[1]


def parse_tool_timeout(text: str | None) -> Optional[float]:
    """Seconds from ``QUARK_TOOL_TIMEOUT``; empty or non-positive means no limit."""

    text = (text or "").strip()
    if not text:
        return None
    try:
        timeout = float(text)
    except ValueError:
        raise ConfigError(f"QUARK_TOOL_TIMEOUT must be a number of seconds, got {text!r}") from None
    return timeout if timeout > 0 else None


@dataclass(slots=True)
class BuildContext:
    runner: CommandRunner
    assembler: ExeAssembler
    locator: ToolLocator
    build_logger: BuildLogger = field(default_factory=NullBuildLogger)
    _cancelled: threading.Event = field(default_factory=threading.Event, init=False, repr=False)

    @classmethod
    def create(
        cls,
        home: Path,
        build_logger: BuildLogger | None = None,
        *,
        platform: HostPlatform | None = None,
        timeout: Optional[float] = None,
    ) -> "BuildContext":
        sink = build_logger or NullBuildLogger()
        runner = CommandRunner(sink, timeout=timeout)
        return cls(
            runner=runner,
            assembler=ScappAssembler(runner),
            locator=ToolLocator(home, platform or HostPlatform.current()),
            build_logger=sink,
        )

    @classmethod
    def from_env(
        cls,
        build_logger: BuildLogger | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> "BuildContext":
        """Context for the tool home in ``QUARK_HOME`` (default: the checkout root)."""

        env = os.environ if environ is None else environ
        home = Path(env.get("QUARK_HOME") or DEFAULT_HOME).expanduser()
        return cls.create(home, build_logger, timeout=parse_tool_timeout(env.get("QUARK_TOOL_TIMEOUT")))

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def cancel(self) -> None:
        logger.info("Build cancellation requested")
        self._cancelled.set()
        self.runner.terminate()

    def check_cancelled(self) -> None:
        if self._cancelled.is_set():
            raise BuildCancelled("Build cancelled")


__all__ = ["BuildContext", "DEFAULT_HOME", "parse_tool_timeout"]
