"""Centralized logging configuration using Loguru."""

from __future__ import annotations

import pathlib
import sys
from contextlib import contextmanager
from typing import Any, Iterable, Iterator

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{extra[exe]}</cyan> | <level>{message}</level>"
)


def setup_logging(
    *,
    console_level: str = "INFO",
    file_level: str = "DEBUG",
    log_directory: str = "logs",
    log_filename: str = "quark.log",
) -> None:
    """Configure the console and build-log file sinks.

    Parameters
    ----------
    console_level:
        Minimum log level for console output.
    file_level:
        Minimum log level for the serialized build log.
    log_directory:
        Relative or absolute path where ``log_filename`` is kept.
    log_filename:
        Name of the rotating JSON build log.

    Console lines carry the application being packaged (``-`` outside a
    build); file records carry it together with the targets in ``extra``.
    Existing handlers are removed so repeated calls do not duplicate entries.
    """

    logger.remove()
    logger.configure(extra={"exe": "-", "targets": []})

    log_path = pathlib.Path(log_directory).expanduser().resolve()
    log_path.mkdir(parents=True, exist_ok=True)
    file_path = log_path / log_filename

    logger.add(
        sys.stdout,
        level=console_level.upper(),
        format=CONSOLE_FORMAT,
        enqueue=True,
        backtrace=True,
        diagnose=False,
        colorize=True,
    )

    logger.add(
        file_path,
        level=file_level.upper(),
        enqueue=True,
        backtrace=False,
        diagnose=False,
        rotation="10 MB",
        retention="30 days",
        compression="zip",
        serialize=True,
    )

    logger.bind(log_file=str(file_path)).debug("Logging configured")


@contextmanager
def build_log_context(exe: str, targets: Iterable[object]) -> Iterator[None]:
    """Tag every record emitted inside the block with the build it belongs to."""

    with logger.contextualize(exe=exe, targets=[str(target) for target in targets]):
        yield


def log_build_event(event: str, **metadata: Any) -> None:
    """Emit a structured log entry for the build lifecycle.

    Parameters
    ----------
    event:
        Build event name, e.g. ``"started"`` or ``"finished"``.
    **metadata:
        Extra fields such as ``exe``, ``targets`` or ``exit_code``.
    """

    logger.bind(event=event, **metadata).info("build_event")


__all__ = ["CONSOLE_FORMAT", "build_log_context", "log_build_event", "setup_logging"]
