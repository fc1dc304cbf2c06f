"""External process invocation with streamed output."""

from __future__ import annotations

import codecs
import os
import subprocess
import threading
from typing import IO, Optional, Sequence

from loguru import logger

from .console import BuildLogger, LogKind, NullBuildLogger
from .errors import InvocationError, ToolTimeoutError
from .paths import PathLike

CHUNK_SIZE = 4096
# Bound on waiting for output after a kill; a grandchild may still hold the pipes.
READER_GRACE_SECONDS = 5.0


class CommandRunner:
    """Run external tools one at a time, forwarding their output to a build log.

    ``timeout`` bounds each invocation in seconds; ``None`` waits forever.
    """

    def __init__(
        self,
        build_logger: BuildLogger | None = None,
        *,
        timeout: Optional[float] = None,
        encoding: str = "utf-8",
    ) -> None:
        self.build_logger = build_logger or NullBuildLogger()
        self.timeout = timeout
        self.encoding = encoding
        self._process: subprocess.Popen[bytes] | None = None
        self._lock = threading.Lock()
        self._killed = False

    def run(self, argv: Sequence[PathLike]) -> int:
        args = [os.fspath(arg) for arg in argv or ()]
        if not args:
            raise InvocationError("run: argv must be a non-empty sequence")

        self.build_logger.add(" ".join(args), LogKind.INITIAL)
        logger.debug("Running {}", args)

        try:
            process = subprocess.Popen(args, stdout=subprocess.PIPE, stderr=subprocess.PIPE)
        except OSError as exc:
            raise InvocationError(f"run: failed to spawn: {args[0]} ({exc})") from exc

        with self._lock:
            self._process = process
            self._killed = False
        readers = [
            self._start_reader(process.stdout, LogKind.STDOUT),
            self._start_reader(process.stderr, LogKind.STDERR),
        ]
        try:
            exit_code = process.wait(timeout=self.timeout)
        except subprocess.TimeoutExpired:
            self._kill(process)
            process.wait()
            raise ToolTimeoutError(
                f"{args[0]}: timed out after {self.timeout} seconds", code=process.returncode
            ) from None
        finally:
            grace = READER_GRACE_SECONDS if self._killed else None
            for reader in readers:
                reader.join(grace)
                if reader.is_alive():
                    logger.warning("{} output still open after kill; detaching reader", args[0])
            with self._lock:
                self._process = None

        logger.debug("{} exited with {}", args[0], exit_code)
        return exit_code

    def terminate(self) -> None:
        """Kill the in-flight child process, if any."""

        with self._lock:
            process = self._process
        if process is not None and process.poll() is None:
            logger.info("Terminating {}", process.args[0])
            self._kill(process)

    def _kill(self, process: subprocess.Popen[bytes]) -> None:
        self._killed = True
        process.kill()

    def _start_reader(self, pipe: IO[bytes] | None, kind: LogKind) -> threading.Thread:
        thread = threading.Thread(target=self._pump, args=(pipe, kind), name=f"runner-{kind.value}", daemon=True)
        thread.start()
        return thread

    def _pump(self, pipe: IO[bytes] | None, kind: LogKind) -> None:
        if pipe is None:
            return
        decoder = codecs.getincrementaldecoder(self.encoding)(errors="replace")
        try:
            with pipe:
                while True:
                    chunk = pipe.read1(CHUNK_SIZE)  # type: ignore[attr-defined]
                    text = decoder.decode(chunk, final=not chunk)
                    if text:
                        self.build_logger.add(text, kind)
                    if not chunk:
                        break
        except (OSError, ValueError) as exc:
            logger.debug("Lost {} pipe: {}", kind.value, exc)


__all__ = ["CommandRunner"]
