"""Controller coordinating one build run for the console window."""

from __future__ import annotations

import os
from typing import Optional

from loguru import logger
from PySide6.QtCore import QObject, QThread, Signal

from quark_packaging.build_config import BuildParameters, BuildResult
from quark_packaging.context import BuildContext

from ..workers.build_worker import BuildWorker


class BuildController(QObject):
    """Run builds on a worker thread, one at a time."""

    build_finished = Signal(object)

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._thread: QThread | None = None
        self._worker: BuildWorker | None = None
        self._last_result: Optional[BuildResult] = None

    @property
    def running(self) -> bool:
        return self._worker is not None

    def start_build(self, params: BuildParameters, context: BuildContext) -> bool:
        """Start assembling ``params``; returns False if a build is already running."""

        if self.running:
            logger.warning("Build already in progress; ignoring new request")
            return False

        self._worker = BuildWorker(params, context)
        self._worker.finished.connect(self._handle_finished)

        if os.getenv("QUARK_SYNC_BUILD", "").lower() in {"1", "true", "yes"}:
            logger.debug("Running build synchronously")
            worker = self._worker
            worker.run()
            return True

        self._thread = QThread(self)
        self._worker.moveToThread(self._thread)
        self._thread.started.connect(self._worker.run)
        self._worker.finished.connect(self._thread.quit)
        self._worker.finished.connect(self._worker.deleteLater)
        self._thread.finished.connect(self._thread.deleteLater)

        logger.debug("Starting build thread")
        self._thread.start()
        return True

    def cancel_build(self) -> None:
        if self._worker is not None:
            logger.info("Cancelling active build")
            self._worker.cancel()

    def wait(self, timeout_ms: int = 30_000) -> None:
        if self._thread is not None:
            self._thread.wait(timeout_ms)

    def _handle_finished(self, result: BuildResult) -> None:
        self._last_result = result
        self._worker = None
        self._thread = None
        self.build_finished.emit(result)

    @property
    def last_result(self) -> Optional[BuildResult]:
        return self._last_result


__all__ = ["BuildController"]
