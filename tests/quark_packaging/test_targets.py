"""Tests for per-target assembly and macOS bundles."""

from __future__ import annotations

import os
import stat
from pathlib import Path

import pytest

from conftest import FakeAssembler
from quark_packaging.build_config import TargetId
from quark_packaging.console import LogKind
from quark_packaging.errors import AssemblerNotFoundError, AssemblyError, UnknownTargetError
from quark_packaging.targets import build_target, make_apple_bundle, render_info_plist


@pytest.mark.parametrize(
    ("target", "relative"),
    [
        ("winX32", "windows/x32/MyApp.exe"),
        ("winX64", "windows/x64/MyApp.exe"),
        ("winARM64", "windows/arm64/MyApp.exe"),
        ("linuxX64", "linux/x64/MyApp"),
        ("linuxARM32", "linux/arm32/MyApp"),
    ],
)
def test_build_target_output_layout(make_context, make_params, fake_assembler, logo, target, relative) -> None:
    params = make_params([target], logo=logo)
    context = make_context()

    produced = build_target(context, target, params.dat_file, params)

    assert produced == params.out / relative
    assert produced.exists()
    [(scapp, datfile, exefile, _)] = fake_assembler.calls
    assert scapp.name.startswith("scapp")
    assert datfile == params.dat_file
    assert exefile == produced


def test_windows_target_injects_icon_into_metadata(make_context, make_params, fake_runner, fake_assembler, logo) -> None:
    params = make_params(["winX64"], logo=logo, product_name="My App")

    build_target(make_context(), TargetId.WIN_X64, params.dat_file, params)

    [magick] = fake_runner.calls_for("magick")
    assert magick[-1] == (params.out / "MyApp.ico").as_posix()
    metadata = fake_assembler.calls[0][3]
    assert metadata["icofile"] == (params.out / "MyApp.ico").as_posix()
    assert metadata["productName"] == "My App"
    assert params.icofile is None


def test_linux_target_passes_no_metadata(make_context, make_params, fake_runner, fake_assembler, logo) -> None:
    params = make_params(["linuxX64"], logo=logo, product_name="My App")

    build_target(make_context(), "linuxX64", params.dat_file, params)

    assert fake_assembler.calls[0][3] is None
    assert fake_runner.calls == []


def test_build_target_logs_assembling_and_result(make_context, make_params, recording_logger) -> None:
    params = make_params(["linuxARM32"])
    build_target(make_context(), "linuxARM32", params.dat_file, params)

    assert ("linuxARM32: assembling...", LogKind.INITIAL) in recording_logger.lines
    assert ("Done!", LogKind.RESULT) in recording_logger.lines
    assert recording_logger.texts(LogKind.STDERR) == []


def test_build_target_without_logo_skips_icon(make_context, make_params, fake_runner, fake_assembler) -> None:
    params = make_params(["winX32"])
    build_target(make_context(), "winX32", params.dat_file, params)
    assert fake_runner.calls == []
    assert "icofile" not in fake_assembler.calls[0][3]


def test_unknown_target(make_context, make_params) -> None:
    params = make_params(["linuxX64"])
    with pytest.raises(UnknownTargetError):
        build_target(make_context(), "beos", params.dat_file, params)


def test_missing_assembler(make_context, make_params, tmp_path: Path) -> None:
    params = make_params(["linuxX64"])
    context = make_context(home=tmp_path / "nowhere")
    with pytest.raises(AssemblerNotFoundError, match="linuxX64"):
        build_target(context, "linuxX64", params.dat_file, params)


@pytest.mark.parametrize(
    ("status", "message"),
    [
        (-1, "FAILURE, no .dat file"),
        (-2, "FAILURE opening output file"),
        (-3, "FAILURE writing output file"),
        (-9, "FAILURE, assembleExe status=-9"),
    ],
)
def test_negative_status_raises(make_context, make_params, recording_logger, status, message) -> None:
    params = make_params(["linuxX64"])
    context = make_context(assembler=FakeAssembler(status=status))

    with pytest.raises(AssemblyError) as excinfo:
        build_target(context, "linuxX64", params.dat_file, params)

    assert excinfo.value.code == status
    assert (message, LogKind.STDERR) in recording_logger.lines


def test_status_one_is_success_without_metadata(make_context, make_params, recording_logger) -> None:
    params = make_params(["winX64"])
    context = make_context(assembler=FakeAssembler(status=1))
    produced = build_target(context, "winX64", params.dat_file, params)
    assert produced.name == "MyApp.exe"
    assert ("Done, but no metadata update", LogKind.RESULT) in recording_logger.lines


def test_render_info_plist_substitutes_name_and_version() -> None:
    plist = render_info_plist("MyApp", "2.0.1")
    assert "{name}" not in plist
    assert "{version}" not in plist
    assert plist.count("<string>MyApp</string>") == 3
    assert "<string>MyApp.icns</string>" in plist
    assert plist.count("<string>2.0.1</string>") == 2


def test_mac_target_builds_bundle(make_context, make_params, fake_runner, logo) -> None:
    params = make_params(["mac"], logo=logo, product_version="3.2.1")

    bundle = build_target(make_context(), "mac", params.dat_file, params)

    out = params.out
    assert bundle == out / "macos" / "MyApp.app"
    assert len(list((out / "icon.iconset").glob("icon_*.png"))) == 10
    assert (out / "icon.icns").exists()
    contents = bundle / "Contents"
    plist = (contents / "Info.plist").read_text(encoding="utf-8")
    assert "<string>3.2.1</string>" in plist
    assert "<string>MyApp</string>" in plist
    executable = contents / "MacOS" / "MyApp"
    assert executable.read_bytes() == (out / "macos" / "MyApp").read_bytes()
    assert (contents / "Resources" / "MyApp.icns").read_bytes() == b"icns"
    assert len(fake_runner.calls_for("iconutil")) == 1


@pytest.mark.skipif(os.name == "nt", reason="POSIX permission bits")
def test_make_apple_bundle_permissions_and_overwrite(make_params) -> None:
    params = make_params(["mac"])
    exefile = params.out / "macos" / "MyApp"
    exefile.parent.mkdir(parents=True)
    exefile.write_bytes(b"first")
    (params.out / "icon.icns").write_bytes(b"icns")

    bundle = make_apple_bundle(exefile, params)
    exefile.write_bytes(b"second")
    make_apple_bundle(exefile, params)

    executable = bundle / "Contents" / "MacOS" / "MyApp"
    assert executable.read_bytes() == b"second"
    assert stat.S_IMODE(bundle.stat().st_mode) == 0o755
    assert stat.S_IMODE(executable.stat().st_mode) == 0o755
    assert "<string>1.0.0</string>" in (bundle / "Contents" / "Info.plist").read_text(encoding="utf-8")


def test_bundle_ignores_stale_icon_without_logo(make_context, make_params) -> None:
    params = make_params(["mac"])
    (params.out / "icon.icns").write_bytes(b"old icon")

    bundle = build_target(make_context(), "mac", params.dat_file, params)

    assert not (bundle / "Contents" / "Resources" / "MyApp.icns").exists()


def test_make_apple_bundle_copies_produced_icon(make_params) -> None:
    params = make_params(["mac"])
    exefile = params.out / "macos" / "MyApp"
    exefile.parent.mkdir(parents=True)
    exefile.write_bytes(b"exe")
    icns = params.out / "icon.icns"
    icns.write_bytes(b"icns")

    bundle = make_apple_bundle(exefile, params.with_icon(icns))

    assert (bundle / "Contents" / "Resources" / "MyApp.icns").read_bytes() == b"icns"
