"""Run a build without the Qt console window."""

from __future__ import annotations

from pathlib import Path

from loguru import logger

from config import AppSettings, BuildFlags, resolve_build_parameters
from config.flags import REQUIRED_HINT, USAGE
from quark_packaging.build import assemble_project
from quark_packaging.build_config import EXIT_BUILD_FAILED
from quark_packaging.console import LogKind, LoguruBuildLogger
from quark_packaging.context import BuildContext
from quark_packaging.errors import BuildError, UsageError
from utils.logger import build_log_context


def run_headless(flags: BuildFlags, settings: AppSettings, cli_dir: Path | None = None) -> int:
    """Resolve parameters, assemble the project and return the process exit code."""

    build_logger = LoguruBuildLogger()
    try:
        params = resolve_build_parameters(flags, cli_dir or Path.cwd(), settings)
    except UsageError:
        for line in USAGE:
            build_logger.add(line, LogKind.INITIAL)
        build_logger.add(REQUIRED_HINT, LogKind.STDERR)
        return EXIT_BUILD_FAILED
    except BuildError as exc:
        build_logger.add(str(exc), LogKind.STDERR)
        return EXIT_BUILD_FAILED

    context = BuildContext.create(settings.home, build_logger, timeout=settings.tool_timeout)
    with build_log_context(params.exe, params.targets):
        result = assemble_project(params, context)
        if result.ok:
            logger.success("Build succeeded.")
        else:
            logger.error("Build failed (exitCode={}).", result.exit_code)
    return result.exit_code


__all__ = ["run_headless"]
