"""Build orchestration for desktop application bundles."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from loguru import logger

from .build_config import EXIT_BAD_FOLDER, EXIT_BUILD_FAILED, BuildParameters, BuildResult
from .console import LogKind
from .context import BuildContext
from .errors import FolderAccessError
from .packer import package_resources
from .paths import check_folder
from .targets import build_target


def assemble_project(params: BuildParameters, context: Optional[BuildContext] = None) -> BuildResult:
    """Pack resources once, then assemble every requested target in order.

    The first failing step stops the run. Folder problems yield exit code 2,
    every other failure exit code 1. Without ``context`` the tools are looked
    up under ``QUARK_HOME`` and nothing is written to a build log.
    """

    if context is None:
        context = BuildContext.from_env()
    build_logger = context.build_logger
    build_logger.clear()

    try:
        _validate_folders(params.resources, params.out)
    except FolderAccessError as exc:
        build_logger.add(str(exc), LogKind.STDERR)
        logger.error("Build aborted: {}", exc)
        return BuildResult.failure(EXIT_BAD_FOLDER)

    try:
        context.check_cancelled()
        build_logger.status("Packing resources...", 0)
        datfile = package_resources(
            params.resources,
            params.dat_file,
            runner=context.runner,
            locator=context.locator,
        )

        total = len(params.targets)
        for index, target in enumerate(params.targets):
            context.check_cancelled()
            build_logger.status(f"({index + 1}/{total}) {target}", _progress(index, total))
            build_target(context, target, datfile, params)
    except Exception as exc:  # noqa: BLE001 - every failure becomes exit code 1
        logger.opt(exception=exc).error("Build failed: {}", exc)
        build_logger.status("Failed")
        build_logger.add(str(exc) or exc.__class__.__name__, LogKind.STDERR)
        return BuildResult.failure(EXIT_BUILD_FAILED)

    build_logger.status("Done", 100)
    build_logger.add("All targets complete.", LogKind.RESULT)
    logger.info("Assembled {} for {}", params.exe, ", ".join(str(target) for target in params.targets))
    return BuildResult.success()


def _validate_folders(resources: Path, out: Path) -> None:
    if not check_folder(resources, for_writing=False):
        raise FolderAccessError(f"Error: {resources.as_posix()} is not a readable folder")
    if not out.exists():
        try:
            out.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise FolderAccessError(f"Error: {out.as_posix()} is not a writeable folder") from exc
    if not check_folder(out, for_writing=True):
        raise FolderAccessError(f"Error: {out.as_posix()} is not a writeable folder")


def _progress(index: int, total: int) -> Optional[float]:
    return 100.0 * index / total if total else None


__all__ = ["assemble_project"]
