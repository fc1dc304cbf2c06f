"""Bridge to the proprietary ``scapp`` executable assembler."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Mapping, Optional, Protocol, Tuple

from .build_config import AssembleStatus
from .console import BuildLogger, LogKind
from .paths import normalize_path
from .runner import CommandRunner

STATUS_MESSAGES = {
    AssembleStatus.OK: ("Done!", LogKind.RESULT),
    AssembleStatus.NO_METADATA: ("Done, but no metadata update", LogKind.RESULT),
    AssembleStatus.MISSING_DAT: ("FAILURE, no .dat file", LogKind.STDERR),
    AssembleStatus.CANNOT_OPEN_OUTPUT: ("FAILURE opening output file", LogKind.STDERR),
    AssembleStatus.CANNOT_WRITE_OUTPUT: ("FAILURE writing output file", LogKind.STDERR),
}


class ExeAssembler(Protocol):
    def assemble_exe(
        self,
        scapp: Path,
        datfile: Path,
        exefile: Path,
        metadata: Optional[Mapping[str, str]],
    ) -> int:
        """Merge ``datfile`` into a copy of ``scapp`` written to ``exefile``."""


class ScappAssembler:
    """Invoke the assembler binary as a child process.

    The exit status is the assembler's signed result code; ``metadata`` is
    passed as a JSON object when the target supports embedding it.
    """

    def __init__(self, runner: CommandRunner) -> None:
        self.runner = runner

    def assemble_exe(
        self,
        scapp: Path,
        datfile: Path,
        exefile: Path,
        metadata: Optional[Mapping[str, str]],
    ) -> int:
        args = [normalize_path(scapp), "--assemble", normalize_path(datfile), normalize_path(exefile)]
        if metadata is not None:
            args += ["--params", json.dumps(dict(metadata), sort_keys=True)]
        return to_signed_status(self.runner.run(args))


def to_signed_status(code: int) -> int:
    """Undo the unsigned wrapping the OS applies to negative exit codes."""

    if code >= 0x80000000:
        return code - 0x100000000
    if os.name != "nt" and code > 127:
        return code - 256
    return code


def describe_status(status: int) -> Tuple[str, LogKind]:
    try:
        return STATUS_MESSAGES[AssembleStatus(status)]
    except ValueError:
        return f"FAILURE, assembleExe status={status}", LogKind.STDERR


def report_status(status: int, build_logger: BuildLogger) -> int:
    message, kind = describe_status(status)
    build_logger.add(message, kind)
    return status


__all__ = [
    "ExeAssembler",
    "STATUS_MESSAGES",
    "ScappAssembler",
    "describe_status",
    "report_status",
    "to_signed_status",
]
