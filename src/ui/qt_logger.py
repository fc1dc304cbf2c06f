"""Build logger that forwards output to the GUI thread through Qt signals."""

from __future__ import annotations

from typing import Optional

from PySide6.QtCore import QObject, Signal

from quark_packaging.console import LogKind


class QtBuildLogger(QObject):
    """``BuildLogger`` implementation safe to call from worker threads."""

    line_added = Signal(str, str)  # text, kind
    status_changed = Signal(str, object)  # text, progress or None
    cleared = Signal()

    def add(self, text: str, kind: LogKind = LogKind.STDOUT) -> None:
        self.line_added.emit(str(text), LogKind(kind).value)

    def status(self, text: str, progress: Optional[float] = None) -> None:
        self.status_changed.emit(str(text), progress)

    def clear(self) -> None:
        self.cleared.emit()

    def connect_to(self, window) -> None:
        self.line_added.connect(window.append_log)
        self.status_changed.connect(window.set_status)
        self.cleared.connect(window.clear_log)


__all__ = ["QtBuildLogger"]
