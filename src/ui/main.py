"""Application entry point for the Qt build console."""

from __future__ import annotations

import sys
from pathlib import Path

from loguru import logger
from PySide6.QtWidgets import QApplication

from config import AppSettings, load_settings, parse_flags, resolve_build_parameters
from config.flags import REQUIRED_HINT, USAGE, BuildFlags
from quark_packaging.build_config import EXIT_BUILD_FAILED, BuildResult
from quark_packaging.console import LogKind
from quark_packaging.context import BuildContext
from quark_packaging.errors import BuildError, UsageError
from utils.logger import log_build_event, setup_logging

from .console_window import ConsoleWindow
from .controllers.build_controller import BuildController
from .qt_logger import QtBuildLogger
from .styles import ConsoleTheme


class BuildSession:
    """Drive one build from parameter resolution to the final status line."""

    def __init__(
        self,
        window: ConsoleWindow,
        build_logger: QtBuildLogger,
        flags: BuildFlags,
        settings: AppSettings,
        cli_dir: Path,
    ) -> None:
        self.window = window
        self.build_logger = build_logger
        self.flags = flags
        self.settings = settings
        self.cli_dir = cli_dir
        self.controller = BuildController(window)
        self.controller.build_finished.connect(self._handle_finished)
        self.window.close_requested.connect(self.controller.cancel_build)
        self.exit_code = EXIT_BUILD_FAILED

    def start(self) -> None:
        try:
            params = resolve_build_parameters(self.flags, self.cli_dir, self.settings)
        except UsageError as exc:
            for line in USAGE:
                self.build_logger.add(line, LogKind.INITIAL)
            self.build_logger.add(REQUIRED_HINT, LogKind.STDERR)
            logger.error("{}", exc)
            self._fail_and_close()
            return
        except BuildError as exc:
            self.build_logger.add(str(exc), LogKind.STDERR)
            self._fail_and_close()
            return

        self.build_logger.status("Starting build...", 0)
        log_build_event("started", exe=params.exe, targets=[str(target) for target in params.targets])
        context = BuildContext.create(
            self.settings.home,
            self.build_logger,
            timeout=self.settings.tool_timeout,
        )
        self.controller.start_build(params, context)

    def _handle_finished(self, result: BuildResult) -> None:
        self.exit_code = result.exit_code
        log_build_event("finished", ok=result.ok, exit_code=result.exit_code)
        if result.ok:
            self.build_logger.status("Success", 100)
            self.build_logger.add("Build succeeded.", LogKind.RESULT)
        else:
            self.build_logger.status("Failed", 100)
            self.build_logger.add(f"Build failed (exitCode={result.exit_code}).", LogKind.STDERR)
        if self.flags.silent:
            self.window.post_task(self.close)

    def _fail_and_close(self) -> None:
        self.build_logger.status("Failed")
        self.exit_code = EXIT_BUILD_FAILED
        self.window.post_task(self.close)

    def close(self) -> None:
        self.window.close()
        app = QApplication.instance()
        if app is not None:
            app.quit()


def main(argv: list[str] | None = None) -> int:
    flags = parse_flags(sys.argv[1:] if argv is None else argv)
    settings = load_settings()

    setup_logging(
        console_level=flags.log_level or settings.log_level,
        log_directory=settings.log_directory,
    )
    logger.info("Launching Quark build console")

    app = QApplication.instance() or QApplication(sys.argv[:1])
    ConsoleTheme.apply(app)

    window = ConsoleWindow(silent=flags.silent)
    build_logger = QtBuildLogger()
    build_logger.connect_to(window)

    session = BuildSession(window, build_logger, flags, settings, Path.cwd())
    window.post_task(session.start)
    app.exec()
    session.controller.cancel_build()
    session.controller.wait()
    return session.exit_code


if __name__ == "__main__":
    raise SystemExit(main())
