"""Resource packing through the external ``packfolder`` tool."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional, Tuple

from loguru import logger

from .errors import PackerNotFoundError, PackingError
from .paths import HostPlatform, PathLike, ToolLocator, normalize_path, remove_file
from .runner import CommandRunner

PACKFOLDER_CANDIDATES: Dict[HostPlatform, Tuple[str, ...]] = {
    HostPlatform.WINDOWS: ("../packfolder.exe", "../../bin/windows/packfolder.exe"),
    HostPlatform.MACOS: ("packfolder", "../../bin/macosx/packfolder"),
    HostPlatform.LINUX: ("../packfolder", "../../bin/linux/packfolder"),
}


def find_packfolder(locator: ToolLocator) -> Optional[Path]:
    return locator.find(PACKFOLDER_CANDIDATES[locator.platform])


def package_resources(
    folder: PathLike,
    datfile: PathLike,
    *,
    runner: CommandRunner,
    locator: ToolLocator,
) -> Path:
    """Pack ``folder`` into the binary archive ``datfile``."""

    packfolder = find_packfolder(locator)
    if packfolder is None:
        raise PackerNotFoundError(
            f"package_resources: no packfolder executable found for {locator.platform.value}"
        )

    target = Path(normalize_path(datfile))
    args = [normalize_path(packfolder), normalize_path(folder), target.as_posix(), "-binary"]
    status = runner.run(args)
    if status != 0:
        remove_file(target)
        raise PackingError(f"packfolder: failed to produce {target.as_posix()} file, status={status}", code=status)

    logger.info("Packed {} into {}", normalize_path(folder), target.as_posix())
    return target


__all__ = ["PACKFOLDER_CANDIDATES", "find_packfolder", "package_resources"]
