"""Logo to platform icon conversion.

Windows icons are produced by ImageMagick. macOS icons are rasterized here
with Qt into an ``.iconset`` directory and handed to ``iconutil``.
"""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import Tuple

from loguru import logger
from PySide6.QtCore import QRectF, Qt
from PySide6.QtGui import QGuiApplication, QImage, QPainter
from PySide6.QtSvg import QSvgRenderer

from .errors import IconConversionError
from .paths import PathLike, normalize_path
from .runner import CommandRunner

ICONSET_DIRNAME = "icon.iconset"
ICNS_FILENAME = "icon.icns"

# (pixel size, iconset name)
ICONSET: Tuple[Tuple[int, str], ...] = (
    (16, "16x16"),
    (32, "16x16@2x"),
    (32, "32x32"),
    (64, "32x32@2x"),
    (128, "128x128"),
    (256, "128x128@2x"),
    (256, "256x256"),
    (512, "256x256@2x"),
    (512, "512x512"),
    (1024, "512x512@2x"),
)

SVG_SUFFIXES = {".svg", ".svgz"}


def magick_args(svg: PathLike, ico: PathLike) -> list[str]:
    return [
        "magick",
        "-density",
        "256x256",
        "-background",
        "transparent",
        normalize_path(svg),
        "-define",
        "icon:auto-resize",
        "-colors",
        "256",
        normalize_path(ico),
    ]


def convert_svg_to_ico(svg: PathLike, ico: PathLike, *, runner: CommandRunner) -> Path:
    status = runner.run(magick_args(svg, ico))
    if status != 0:
        raise IconConversionError("convert_svg_to_ico: failed to produce .ICO file", code=status)
    return Path(normalize_path(ico))


def convert_svg_to_icns(svg: PathLike, out_dir: PathLike, *, runner: CommandRunner) -> Path:
    """Build ``<out_dir>/icon.icns`` from a logo image.

    Writes one PNG per :data:`ICONSET` entry into a fresh
    ``<out_dir>/icon.iconset`` directory, then converts it with ``iconutil``.
    """

    output = Path(normalize_path(out_dir))
    iconset = output / ICONSET_DIRNAME
    if iconset.exists():
        shutil.rmtree(iconset)
    iconset.mkdir(parents=True)

    source = Path(normalize_path(svg))
    render = _load_source(source)
    for size, name in ICONSET:
        target = iconset / f"icon_{name}.png"
        image = render(size)
        if not image.save(str(target), "PNG"):
            raise IconConversionError(f"convert_svg_to_icns: cannot write {target.as_posix()}")
    logger.debug("Wrote {} iconset images to {}", len(ICONSET), iconset)

    status = runner.run(["iconutil", "--convert", "icns", iconset.as_posix()])
    if status != 0:
        raise IconConversionError("convert_svg_to_icns: failed to produce icon.icns file", code=status)
    return output / ICNS_FILENAME


def _load_source(source: Path):
    _ensure_gui_application()
    if source.suffix.lower() in SVG_SUFFIXES:
        renderer = QSvgRenderer(str(source))
        if not renderer.isValid():
            raise IconConversionError(f"convert_svg_to_icns: cannot read {source.as_posix()}")
        return lambda size: _render_svg(renderer, size)

    picture = QImage(str(source))
    if picture.isNull():
        raise IconConversionError(f"convert_svg_to_icns: cannot read {source.as_posix()}")
    return lambda size: _render_image(picture, size)


def _blank(size: int) -> QImage:
    image = QImage(size, size, QImage.Format.Format_ARGB32_Premultiplied)
    image.fill(Qt.GlobalColor.transparent)
    return image


def _render_svg(renderer: QSvgRenderer, size: int) -> QImage:
    image = _blank(size)
    painter = QPainter(image)
    painter.setRenderHint(QPainter.RenderHint.Antialiasing)
    painter.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform)
    renderer.render(painter, QRectF(0, 0, size, size))
    painter.end()
    return image


def _render_image(picture: QImage, size: int) -> QImage:
    scaled = picture.scaled(
        size,
        size,
        Qt.AspectRatioMode.KeepAspectRatio,
        Qt.TransformationMode.SmoothTransformation,
    )
    image = _blank(size)
    painter = QPainter(image)
    painter.drawImage((size - scaled.width()) // 2, (size - scaled.height()) // 2, scaled)
    painter.end()
    return image


_gui_app: QGuiApplication | None = None


def _ensure_gui_application() -> None:
    # QPainter text rendering inside SVGs needs a Qt application instance
    global _gui_app
    if QGuiApplication.instance() is None:
        _gui_app = QGuiApplication([])


__all__ = [
    "ICNS_FILENAME",
    "ICONSET",
    "ICONSET_DIRNAME",
    "convert_svg_to_icns",
    "convert_svg_to_ico",
    "magick_args",
]
