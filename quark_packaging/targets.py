"""Per-target binary assembly."""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import Optional

from loguru import logger

from .assembler import report_status
from .build_config import BuildParameters, IconFormat, TargetSpec, target_spec
from .console import LogKind
from .context import BuildContext
from .errors import AssemblerNotFoundError, AssemblyError
from .icons import convert_svg_to_icns, convert_svg_to_ico
from .paths import ToolLocator, make_path, remove_file

BUNDLE_MODE = 0o755

INFO_PLIST_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<!DOCTYPE plist PUBLIC "-//Apple//DTD PLIST 1.0//EN" "http://www.apple.com/DTDs/PropertyList-1.0.dtd">
<plist version="1.0">
<dict>
  <key>CFBundleDevelopmentRegion</key>
  <string>en</string>
  <key>CFBundleIVersion</key>
  <string>{version}</string>
  <key>CFBundleShortVersionString</key>
  <string>{version}</string>
  <key>CFBundleIdentifier</key>
  <string>{name}</string>
  <key>CFBundlePackageType</key>
  <string>APPL</string>
  <key>CFBundleSignature</key>
  <string>MOOS</string>
  <key>LSMinimumSystemVersion</key>
  <string>10.9</string>
  <key>NSMainNibFile</key>
  <string>MainMenu</string>
  <key>NSPrincipalClass</key>
  <string>NSApplication</string>
  <key>CFBundleName</key>
  <string>{name}</string>
  <key>CFBundleExecutable</key>
  <string>{name}</string>
  <key>CFBundleIconFile</key>
  <string>{name}.icns</string>
</dict>
</plist>"""


def find_scapp(spec: TargetSpec, locator: ToolLocator) -> Optional[Path]:
    return locator.find(spec.scapp_candidates)


def render_info_plist(name: str, version: str) -> str:
    return INFO_PLIST_TEMPLATE.replace("{name}", name).replace("{version}", version)


def build_target(context: BuildContext, target: object, datfile: Path, params: BuildParameters) -> Path:
    """Assemble the binary for ``target`` and return the produced artifact."""

    spec = target_spec(target)
    build_logger = context.build_logger
    build_logger.status(f"Building {spec.target}...")

    scapp = find_scapp(spec, context.locator)
    if scapp is None:
        raise AssemblerNotFoundError(f"No scapp found for target {spec.target}")

    target_params = _produce_icon(context, spec, params)
    exefile = make_path(params.out, spec.output_subdirs, spec.executable_name(params.exe))

    build_logger.add(f"{spec.target}: assembling...", LogKind.INITIAL)
    metadata = target_params.metadata() if spec.embeds_metadata else None
    status = report_status(
        context.assembler.assemble_exe(scapp, datfile, exefile, metadata),
        build_logger,
    )
    if status < 0:
        raise AssemblyError(f"{spec.target}: assembleExe failed ({status})", code=status)

    if spec.builds_bundle:
        return make_apple_bundle(exefile, target_params)
    return exefile


def _produce_icon(context: BuildContext, spec: TargetSpec, params: BuildParameters) -> BuildParameters:
    if spec.icon_format is IconFormat.NONE:
        return params
    if params.logo is None:
        logger.warning("{}: no logo configured; skipping icon", spec.target)
        return params

    if spec.icon_format is IconFormat.ICO:
        icofile = convert_svg_to_ico(params.logo, params.out / f"{params.exe}.ico", runner=context.runner)
    else:
        icofile = convert_svg_to_icns(params.logo, params.out, runner=context.runner)
    return params.with_icon(icofile)


def make_apple_bundle(exefile: Path, params: BuildParameters) -> Path:
    """Wrap an assembled macOS executable into ``<out>/macos/<exe>.app``."""

    name = params.exe
    make_path(params.out, ["macos", f"{name}.app", "Contents", "MacOS"])
    make_path(params.out, ["macos", f"{name}.app", "Contents", "Resources"])

    app_path = params.out / "macos" / f"{name}.app"
    app_path.chmod(BUNDLE_MODE)
    contents = app_path / "Contents"

    (contents / "Info.plist").write_text(render_info_plist(name, params.bundle_version), encoding="utf-8")

    executable = contents / "MacOS" / name
    _copy_file_force(exefile, executable)
    executable.chmod(BUNDLE_MODE)

    icns = params.icofile
    if icns is not None and icns.exists():
        _copy_file_force(icns, contents / "Resources" / f"{name}.icns")
    else:
        logger.warning("{}: no icon produced; bundle has no icon", name)

    logger.info("Created bundle {}", app_path)
    return app_path


def _copy_file_force(source: Path, destination: Path) -> None:
    remove_file(destination)
    shutil.copyfile(source, destination)


__all__ = [
    "BUNDLE_MODE",
    "INFO_PLIST_TEMPLATE",
    "build_target",
    "find_scapp",
    "make_apple_bundle",
    "render_info_plist",
]
