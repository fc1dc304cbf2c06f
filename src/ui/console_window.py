"""Console window showing build output, status and progress."""

from __future__ import annotations

import html
from typing import Callable, Optional

from PySide6.QtCore import QSettings, QTimer, Signal
from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import QLabel, QMainWindow, QProgressBar, QStatusBar, QTextEdit

from quark_packaging.console import clamp_progress, split_lines

from .styles import ConsoleTheme


class ConsoleWindow(QMainWindow):
    """Virtual console for one build run.

    The window stays hidden until the first log line or status update so a
    build that fails before producing output does not flash a window; in
    silent mode it never shows itself.
    """

    ORGANIZATION = "Sciter"
    APPLICATION = "Quark"

    close_requested = Signal()

    def __init__(self, *, silent: bool = False) -> None:
        super().__init__()
        self.silent = silent
        self.settings = QSettings(self.ORGANIZATION, self.APPLICATION)
        self._shown = False

        self._configure_window()
        self._create_log_view()
        self._create_status_bar()
        self._restore_state()

    def _configure_window(self) -> None:
        self.setWindowTitle(f"{self.APPLICATION} build")
        self.setMinimumSize(640, 400)

    def _create_log_view(self) -> None:
        self.log_view = QTextEdit(self)
        self.log_view.setReadOnly(True)
        self.log_view.setFont(ConsoleTheme.BASE_FONT)
        self.setCentralWidget(self.log_view)

    def _create_status_bar(self) -> None:
        self.status_label = QLabel("")
        self.progress_bar = QProgressBar()
        self.progress_bar.setRange(0, 100)
        self.progress_bar.setValue(0)
        self.progress_bar.setMaximumWidth(200)

        status_bar = QStatusBar()
        status_bar.addWidget(self.status_label, 1)
        status_bar.addPermanentWidget(self.progress_bar)
        self.setStatusBar(status_bar)

    # ------------------------------------------------------------------
    # Host capability
    # ------------------------------------------------------------------
    def ensure_shown(self) -> None:
        if self._shown or self.silent:
            return
        self._shown = True
        self.show()

    def post_task(self, task: Callable[[], None]) -> None:
        """Run ``task`` on the GUI thread once control returns to the event loop."""

        QTimer.singleShot(0, task)

    # ------------------------------------------------------------------
    # Logger slots
    # ------------------------------------------------------------------
    def append_log(self, text: str, kind: str = "stdout") -> None:
        self.ensure_shown()
        color = ConsoleTheme.color_for(kind)
        for line in split_lines(text):
            self.log_view.append(f'<span class="{kind}" style="white-space:pre; color:{color}">{html.escape(line)}</span>')
        scrollbar = self.log_view.verticalScrollBar()
        scrollbar.setValue(scrollbar.maximum())

    def set_status(self, text: str, progress: Optional[float] = None) -> None:
        self.ensure_shown()
        self.status_label.setText("" if text is None else str(text))
        if isinstance(progress, (int, float)):
            self.progress_bar.setValue(int(clamp_progress(progress)))

    def clear_log(self) -> None:
        self.log_view.clear()
        self.progress_bar.setValue(0)
        self.status_label.setText("")

    def log_lines(self) -> list[str]:
        return [line for line in self.log_view.toPlainText().split("\n") if line]

    # ------------------------------------------------------------------
    # State persistence
    # ------------------------------------------------------------------
    def _restore_state(self) -> None:
        geometry = self.settings.value("console/geometry")
        if geometry:
            self.restoreGeometry(geometry)

    def closeEvent(self, event: QCloseEvent) -> None:  # noqa: N802 - Qt API
        self.settings.setValue("console/geometry", self.saveGeometry())
        self.close_requested.emit()
        super().closeEvent(event)


__all__ = ["ConsoleWindow"]
