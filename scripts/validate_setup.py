"""Validation script to verify the packaging environment."""

from __future__ import annotations

import importlib
import platform
import shutil
import sys
from dataclasses import dataclass
from pathlib import Path

from loguru import logger

_ROOT = Path(__file__).resolve().parents[1]
for candidate in (_ROOT, _ROOT / "src"):
    if str(candidate) not in sys.path:
        sys.path.insert(0, str(candidate))

from config import load_settings  # noqa: E402
from quark_packaging.build_config import TARGETS  # noqa: E402
from quark_packaging.packer import find_packfolder  # noqa: E402
from quark_packaging.paths import HostPlatform, ToolLocator  # noqa: E402
from quark_packaging.targets import find_scapp  # noqa: E402

REQUIRED_PYTHON = (3, 10)
REQUIRED_PACKAGES = ("PySide6", "loguru", "dotenv")


@dataclass(slots=True)
class ValidationResult:
    label: str
    success: bool
    detail: str
    required: bool = True


def check_python_version() -> ValidationResult:
    current = sys.version_info
    logger.debug("Detected Python version: {}", platform.python_version())
    if current < REQUIRED_PYTHON:
        return ValidationResult(
            label="Python Version",
            success=False,
            detail=(
                "Python 3.10 or newer is required. "
                f"Detected {platform.python_version()}"
            ),
        )
    return ValidationResult(
        label="Python Version",
        success=True,
        detail=f"Python {platform.python_version()} meets requirement",
    )


def import_package(module: str) -> ValidationResult:
    try:
        imported = importlib.import_module(module)
    except ImportError as exc:
        return ValidationResult(
            label=f"Import {module}",
            success=False,
            detail=f"Failed to import {module}: {exc}",
        )
    version = getattr(imported, "__version__", "unknown version")
    return ValidationResult(label=f"Import {module}", success=True, detail=f"Imported {module} {version}")


def check_packfolder(locator: ToolLocator) -> ValidationResult:
    found = find_packfolder(locator)
    if found is None:
        return ValidationResult(
            label="packfolder",
            success=False,
            detail=f"No packfolder executable under {locator.home} for {locator.platform.value}",
        )
    return ValidationResult(label="packfolder", success=True, detail=str(found))


def check_assemblers(locator: ToolLocator) -> list[ValidationResult]:
    results = []
    for target, spec in TARGETS.items():
        found = find_scapp(spec, locator)
        results.append(
            ValidationResult(
                label=f"scapp ({target})",
                success=found is not None,
                detail=str(found) if found else "not found; target cannot be built",
                required=False,
            )
        )
    return results


def check_icon_tools(host: HostPlatform) -> list[ValidationResult]:
    tools = {"magick": "Windows icons"}
    if host is HostPlatform.MACOS:
        tools["iconutil"] = "macOS icons"
    results = []
    for tool, purpose in tools.items():
        found = shutil.which(tool)
        results.append(
            ValidationResult(
                label=tool,
                success=found is not None,
                detail=found or f"not on PATH; needed for {purpose}",
                required=False,
            )
        )
    return results


def run_validation(home: Path | None = None, host: HostPlatform | None = None) -> int:
    logger.info("Starting environment validation...")
    settings = load_settings()
    locator = ToolLocator(home or settings.home, host or HostPlatform.current())

    results: list[ValidationResult] = [check_python_version()]
    results.extend(import_package(module) for module in REQUIRED_PACKAGES)
    results.append(check_packfolder(locator))
    results.extend(check_assemblers(locator))
    results.extend(check_icon_tools(locator.platform))

    for result in results:
        if result.success:
            logger.success("{}: {}", result.label, result.detail)
        elif result.required:
            logger.error("{}: {}", result.label, result.detail)
        else:
            logger.warning("{}: {}", result.label, result.detail)

    failures = [result for result in results if result.required and not result.success]
    if failures:
        logger.error("Validation failed with {} issues", len(failures))
        return 1

    logger.success("Environment validation completed successfully")
    return 0


if __name__ == "__main__":
    raise SystemExit(run_validation())
