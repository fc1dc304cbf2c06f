"""Pytest configuration and shared fakes for the packager tests."""

from __future__ import annotations

import os
import sys
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
os.environ.setdefault("QUARK_SYNC_BUILD", "1")
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

import pytest


ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from PySide6.QtWidgets import QApplication  # noqa: E402

from quark_packaging.build_config import TARGETS, BuildParameters  # noqa: E402
from quark_packaging.console import LogKind  # noqa: E402
from quark_packaging.context import BuildContext  # noqa: E402
from quark_packaging.packer import PACKFOLDER_CANDIDATES  # noqa: E402
from quark_packaging.paths import HostPlatform, ToolLocator  # noqa: E402


class RecordingLogger:
    def __init__(self) -> None:
        self.lines: List[Tuple[str, LogKind]] = []
        self.statuses: List[Tuple[str, Optional[float]]] = []
        self.clears = 0

    def add(self, text: str, kind: LogKind = LogKind.STDOUT) -> None:
        self.lines.append((str(text), LogKind(kind)))

    def status(self, text: str, progress: Optional[float] = None) -> None:
        self.statuses.append((text, progress))

    def clear(self) -> None:
        self.clears += 1

    def texts(self, kind: LogKind | None = None) -> List[str]:
        return [text for text, line_kind in self.lines if kind is None or line_kind == kind]


class FakeRunner:
    """Records tool invocations and imitates the files each tool produces."""

    def __init__(self, statuses: Dict[str, int] | None = None) -> None:
        self.calls: List[List[str]] = []
        self.statuses = statuses or {}
        self.terminated = False

    def run(self, argv) -> int:
        args = [str(arg) for arg in argv]
        self.calls.append(args)
        tool = Path(args[0]).stem
        status = self.statuses.get(tool, 0)
        if status == 0:
            if tool == "packfolder":
                Path(args[2]).write_bytes(b"packed resources")
            elif tool == "magick":
                Path(args[-1]).write_bytes(b"ico")
            elif tool == "iconutil":
                iconset = Path(args[-1])
                (iconset.parent / "icon.icns").write_bytes(b"icns")
        return status

    def terminate(self) -> None:
        self.terminated = True

    def calls_for(self, tool: str) -> List[List[str]]:
        return [call for call in self.calls if Path(call[0]).stem == tool]


class FakeAssembler:
    def __init__(self, status: int = 0) -> None:
        self.status = status
        self.calls: List[Tuple[Path, Path, Path, Optional[dict]]] = []

    def assemble_exe(self, scapp, datfile, exefile, metadata) -> int:
        self.calls.append((Path(scapp), Path(datfile), Path(exefile), None if metadata is None else dict(metadata)))
        if self.status >= 0:
            Path(exefile).write_bytes(b"\x7fELF assembled")
        return self.status


@pytest.fixture(scope="session", autouse=True)
def qt_app() -> QApplication:
    application = QApplication.instance() or QApplication(sys.argv[:1])
    return application


@pytest.fixture
def sdk_home(tmp_path: Path) -> Path:
    """SDK layout with every primary tool candidate present, relative to ``sdk/quark``."""

    home = tmp_path / "sdk" / "quark"
    home.mkdir(parents=True)
    candidates = [paths[0] for paths in PACKFOLDER_CANDIDATES.values()]
    candidates += [spec.scapp_candidates[0] for spec in TARGETS.values()]
    for relative in candidates:
        tool = Path(os.path.normpath(home / relative))
        tool.parent.mkdir(parents=True, exist_ok=True)
        tool.write_bytes(b"tool")
    return home


@pytest.fixture
def recording_logger() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def fake_assembler() -> FakeAssembler:
    return FakeAssembler()


@pytest.fixture
def make_context(
    sdk_home: Path,
    recording_logger: RecordingLogger,
    fake_runner: FakeRunner,
    fake_assembler: FakeAssembler,
) -> Callable[..., BuildContext]:
    def factory(
        *,
        runner: FakeRunner | None = None,
        assembler: FakeAssembler | None = None,
        platform: HostPlatform = HostPlatform.LINUX,
        home: Path | None = None,
    ) -> BuildContext:
        return BuildContext(
            runner=runner or fake_runner,  # type: ignore[arg-type]
            assembler=assembler or fake_assembler,
            locator=ToolLocator(home or sdk_home, platform),
            build_logger=recording_logger,
        )

    return factory


@pytest.fixture
def project_dirs(tmp_path: Path) -> Tuple[Path, Path]:
    resources = tmp_path / "assets"
    resources.mkdir()
    (resources / "main.htm").write_text("<html><body>Hello</body></html>", encoding="utf-8")
    out = tmp_path / "dist"
    out.mkdir()
    return resources, out


LOGO_SVG = """<svg xmlns="http://www.w3.org/2000/svg" width="64" height="64" viewBox="0 0 64 64">
  <rect x="4" y="4" width="56" height="56" rx="12" fill="#1f6feb"/>
  <circle cx="32" cy="32" r="14" fill="#ffffff"/>
</svg>
"""


@pytest.fixture
def logo(tmp_path: Path) -> Path:
    path = tmp_path / "logo.svg"
    path.write_text(LOGO_SVG, encoding="utf-8")
    return path


@pytest.fixture
def make_params(project_dirs: Tuple[Path, Path]) -> Callable[..., BuildParameters]:
    resources, out = project_dirs

    def factory(targets, **overrides) -> BuildParameters:
        values = {"exe": "MyApp", "resources": resources, "out": out, "targets": targets}
        values.update(overrides)
        return BuildParameters(**values)

    return factory
