"""Background worker running one build off the GUI thread."""

from __future__ import annotations

from loguru import logger
from PySide6.QtCore import QObject, Signal

from quark_packaging.build import assemble_project
from quark_packaging.build_config import BuildParameters, BuildResult
from quark_packaging.context import BuildContext
from utils.logger import build_log_context


class BuildWorker(QObject):
    """Run :func:`assemble_project` and report the :class:`BuildResult`."""

    finished = Signal(object)

    def __init__(self, params: BuildParameters, context: BuildContext) -> None:
        super().__init__()
        self.params = params
        self.context = context

    def run(self) -> None:
        try:
            with build_log_context(self.params.exe, self.params.targets):
                result = assemble_project(self.params, self.context)
        except Exception as exc:  # pragma: no cover - runtime safety
            logger.exception("Build worker crashed: {}", exc)
            result = BuildResult.failure()
        self.finished.emit(result)

    def cancel(self) -> None:
        self.context.cancel()


__all__ = ["BuildWorker"]
