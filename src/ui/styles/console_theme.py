"""Styling of the build console window."""

from __future__ import annotations

from PySide6.QtGui import QColor, QFont, QPalette
from PySide6.QtWidgets import QApplication

from quark_packaging.console import LogKind


class ConsoleTheme:
    """Dark terminal-like palette with one color per log line kind."""

    BASE_FONT = QFont("Menlo", 10)
    LINE_COLORS = {
        LogKind.INITIAL: "#8b949e",
        LogKind.STDOUT: "#c9d1d9",
        LogKind.STDERR: "#ff7b72",
        LogKind.RESULT: "#3fb950",
    }

    @classmethod
    def color_for(cls, kind: str) -> str:
        try:
            return cls.LINE_COLORS[LogKind(kind)]
        except ValueError:
            return cls.LINE_COLORS[LogKind.STDOUT]

    @classmethod
    def apply(cls, app: QApplication) -> None:
        palette = QPalette()
        palette.setColor(QPalette.ColorRole.Window, QColor(30, 30, 35))
        palette.setColor(QPalette.ColorRole.WindowText, QColor(220, 220, 220))
        palette.setColor(QPalette.ColorRole.Base, QColor(22, 27, 34))
        palette.setColor(QPalette.ColorRole.Text, QColor(201, 209, 217))
        palette.setColor(QPalette.ColorRole.Highlight, QColor(64, 128, 255))
        palette.setColor(QPalette.ColorRole.HighlightedText, QColor(255, 255, 255))
        app.setPalette(palette)
        app.setStyleSheet(
            """
            QPlainTextEdit, QTextEdit {
                border: none;
                padding: 6px;
            }
            QStatusBar {
                padding: 4px 8px;
            }
            """
        )


__all__ = ["ConsoleTheme"]
