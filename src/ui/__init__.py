"""Qt host shell for the packager."""

from .console_window import ConsoleWindow
from .controllers.build_controller import BuildController
from .qt_logger import QtBuildLogger

__all__ = ["BuildController", "ConsoleWindow", "QtBuildLogger"]
