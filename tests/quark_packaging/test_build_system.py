"""End-to-end tests of the project assembler with fake external tools."""

from __future__ import annotations

from pathlib import Path

from conftest import FakeAssembler, FakeRunner
from quark_packaging.build import assemble_project
from quark_packaging.build_config import BuildParameters, BuildResult
from quark_packaging.console import LogKind
from quark_packaging.context import DEFAULT_HOME, BuildContext


def test_linux_scenario(make_context, make_params, fake_runner, recording_logger) -> None:
    params = make_params(["linuxX64"])

    result = assemble_project(params, make_context())

    assert result == BuildResult(ok=True, exit_code=0)
    assert (params.out / "MyApp.dat").exists()
    assert (params.out / "linux" / "x64" / "MyApp").exists()
    assert recording_logger.clears == 1
    assert ("Packing resources...", 0) in recording_logger.statuses
    assert ("(1/1) linuxX64", 0.0) in recording_logger.statuses
    assert recording_logger.statuses[-1] == ("Done", 100)
    assert recording_logger.lines[-1] == ("All targets complete.", LogKind.RESULT)
    assert recording_logger.texts(LogKind.STDERR) == []


def test_packs_exactly_once_for_many_targets(make_context, make_params, fake_runner, fake_assembler, logo) -> None:
    params = make_params(["winX32", "winX64", "winARM64", "linuxX64", "linuxARM32"], logo=logo)

    result = assemble_project(params, make_context())

    assert result.ok
    assert len(fake_runner.calls_for("packfolder")) == 1
    assert [Path(call[2]).parent.name for call in fake_assembler.calls] == ["x32", "x64", "arm64", "x64", "arm32"]


def test_status_progress_per_target(make_context, make_params, recording_logger) -> None:
    params = make_params(["linuxX64", "linuxARM32"])
    assemble_project(params, make_context())
    target_statuses = [status for status in recording_logger.statuses if status[0].startswith("(")]
    assert target_statuses == [("(1/2) linuxX64", 0.0), ("(2/2) linuxARM32", 50.0)]


def test_missing_resources_folder(make_context, tmp_path: Path, fake_runner, recording_logger) -> None:
    out = tmp_path / "dist"
    params = BuildParameters(exe="MyApp", resources=tmp_path / "missing", out=out, targets=["linuxX64"])

    result = assemble_project(params, make_context())

    assert result == BuildResult(ok=False, exit_code=2)
    assert fake_runner.calls == []
    assert not (out / "MyApp.dat").exists()
    [message] = recording_logger.texts(LogKind.STDERR)
    assert "is not a readable folder" in message


def test_output_folder_is_created(make_context, project_dirs, tmp_path: Path) -> None:
    resources, _ = project_dirs
    out = tmp_path / "fresh" / "dist"
    params = BuildParameters(exe="MyApp", resources=resources, out=out, targets=["linuxARM32"])

    assert assemble_project(params, make_context()).ok
    assert (out / "linux" / "arm32" / "MyApp").exists()


def test_output_path_that_is_a_file(make_context, project_dirs, tmp_path: Path, recording_logger) -> None:
    resources, _ = project_dirs
    blocker = tmp_path / "blocker"
    blocker.write_text("not a folder", encoding="utf-8")
    params = BuildParameters(exe="MyApp", resources=resources, out=blocker, targets=["linuxX64"])

    result = assemble_project(params, make_context())

    assert result.exit_code == 2
    assert "is not a writeable folder" in recording_logger.texts(LogKind.STDERR)[0]


def test_assembler_failure_aborts_remaining_targets(make_context, make_params, recording_logger, logo) -> None:
    assembler = FakeAssembler(status=-1)
    params = make_params(["winX64", "linuxX64"], logo=logo)

    result = assemble_project(params, make_context(assembler=assembler))

    assert result == BuildResult(ok=False, exit_code=1)
    assert len(assembler.calls) == 1
    stderr = recording_logger.texts(LogKind.STDERR)
    assert "FAILURE, no .dat file" in stderr
    assert "winX64: assembleExe failed (-1)" in stderr
    assert recording_logger.statuses[-1] == ("Failed", None)
    assert not any(status[0].endswith("linuxX64") for status in recording_logger.statuses)


def test_packer_failure(make_context, make_params, fake_assembler, recording_logger) -> None:
    runner = FakeRunner(statuses={"packfolder": 2})
    params = make_params(["linuxX64"])

    result = assemble_project(params, make_context(runner=runner))

    assert result.exit_code == 1
    assert fake_assembler.calls == []
    assert not params.dat_file.exists()
    assert any("status=2" in text for text in recording_logger.texts(LogKind.STDERR))


def test_missing_packer(make_context, make_params, tmp_path: Path, recording_logger) -> None:
    params = make_params(["linuxX64"])
    result = assemble_project(params, make_context(home=tmp_path / "empty"))
    assert result.exit_code == 1
    assert "no packfolder executable found" in recording_logger.texts(LogKind.STDERR)[0]


def test_icon_failure_stops_build(make_context, make_params, fake_assembler, logo) -> None:
    runner = FakeRunner(statuses={"magick": 1})
    params = make_params(["winX64"], logo=logo)

    result = assemble_project(params, make_context(runner=runner))

    assert result.exit_code == 1
    assert fake_assembler.calls == []


def test_mac_scenario(make_context, make_params, logo) -> None:
    params = make_params(["mac"], logo=logo, product_name="My App", product_version="1.4.0")

    result = assemble_project(params, make_context())

    out = params.out
    assert result.ok
    assert len(list((out / "icon.iconset").glob("*.png"))) == 10
    assert (out / "icon.icns").exists()
    bundle = out / "macos" / "MyApp.app" / "Contents"
    assert (bundle / "MacOS" / "MyApp").exists()
    assert (bundle / "Resources" / "MyApp.icns").exists()
    plist = (bundle / "Info.plist").read_text(encoding="utf-8")
    assert "<string>MyApp</string>" in plist
    assert "<string>1.4.0</string>" in plist


def test_rerun_overwrites_outputs(make_context, make_params) -> None:
    params = make_params(["linuxX64"])
    assert assemble_project(params, make_context()).ok
    first = params.dat_file.read_bytes()
    assert assemble_project(params, make_context()).ok
    assert params.dat_file.read_bytes() == first


def test_cancelled_build_does_not_pack(make_context, make_params, fake_runner, recording_logger) -> None:
    context = make_context()
    context.cancel()

    result = assemble_project(make_params(["linuxX64"]), context)

    assert result.exit_code == 1
    assert fake_runner.calls == []
    assert fake_runner.terminated
    assert "Build cancelled" in recording_logger.texts(LogKind.STDERR)


def test_default_context_uses_tool_home_from_environment(project_dirs, tmp_path: Path, monkeypatch) -> None:
    resources, out = project_dirs
    monkeypatch.setenv("QUARK_HOME", str(tmp_path / "no-sdk"))
    params = BuildParameters(exe="MyApp", resources=resources, out=out, targets=["linuxX64"])

    assert assemble_project(params) == BuildResult(ok=False, exit_code=1)
    missing = BuildParameters(exe="MyApp", resources=tmp_path / "missing", out=out, targets=["linuxX64"])
    assert assemble_project(missing) == BuildResult(ok=False, exit_code=2)


def test_context_from_environment(tmp_path: Path) -> None:
    context = BuildContext.from_env(environ={"QUARK_HOME": str(tmp_path), "QUARK_TOOL_TIMEOUT": "12.5"})
    assert context.locator.home == tmp_path
    assert context.runner.timeout == 12.5
    assert BuildContext.from_env(environ={}).locator.home == DEFAULT_HOME
    assert BuildContext.from_env(environ={}).runner.timeout is None
