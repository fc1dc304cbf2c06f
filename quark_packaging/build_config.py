"""Packaging configuration dataclasses."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

from .errors import ConfigError, UnknownTargetError
from .paths import is_absolute_path, normalize_path


EXIT_OK = 0
EXIT_BUILD_FAILED = 1
EXIT_BAD_FOLDER = 2

DEFAULT_BUNDLE_VERSION = "1.0.0"


class TargetId(str, Enum):
    """Platform/architecture pairs the assembler can produce binaries for."""

    WIN_X32 = "winX32"
    WIN_X64 = "winX64"
    WIN_ARM64 = "winARM64"
    MAC = "mac"
    LINUX_X64 = "linuxX64"
    LINUX_ARM32 = "linuxARM32"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: object) -> "TargetId":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip())
        except ValueError:
            raise UnknownTargetError(value) from None


class IconFormat(str, Enum):
    ICO = "ico"
    ICNS = "icns"
    NONE = "none"


class AssembleStatus(IntEnum):
    """Status codes returned by the scapp assembler."""

    OK = 0
    NO_METADATA = 1
    MISSING_DAT = -1
    CANNOT_OPEN_OUTPUT = -2
    CANNOT_WRITE_OUTPUT = -3


@dataclass(frozen=True, slots=True)
class TargetSpec:
    """Where to find the assembler for a target and how to lay out its output."""

    target: TargetId
    scapp_candidates: Tuple[str, ...]
    output_subdirs: Tuple[str, ...]
    executable_suffix: str = ""
    icon_format: IconFormat = IconFormat.NONE
    embeds_metadata: bool = True
    builds_bundle: bool = False

    def executable_name(self, exe: str) -> str:
        return f"{exe}{self.executable_suffix}"


TARGETS: Dict[TargetId, TargetSpec] = {
    TargetId.WIN_X32: TargetSpec(
        target=TargetId.WIN_X32,
        scapp_candidates=("../x32/scapp.exe", "../../bin/windows/x32/scapp.exe"),
        output_subdirs=("windows", "x32"),
        executable_suffix=".exe",
        icon_format=IconFormat.ICO,
    ),
    TargetId.WIN_X64: TargetSpec(
        target=TargetId.WIN_X64,
        scapp_candidates=("../x64/scapp.exe", "../../bin/windows/x64/scapp.exe"),
        output_subdirs=("windows", "x64"),
        executable_suffix=".exe",
        icon_format=IconFormat.ICO,
    ),
    TargetId.WIN_ARM64: TargetSpec(
        target=TargetId.WIN_ARM64,
        scapp_candidates=("../arm64/scapp.exe", "../../bin/windows/arm64/scapp.exe"),
        output_subdirs=("windows", "arm64"),
        executable_suffix=".exe",
        icon_format=IconFormat.ICO,
    ),
    TargetId.MAC: TargetSpec(
        target=TargetId.MAC,
        scapp_candidates=("scapp", "../../bin/macosx/scapp"),
        output_subdirs=("macos",),
        icon_format=IconFormat.ICNS,
        builds_bundle=True,
    ),
    TargetId.LINUX_X64: TargetSpec(
        target=TargetId.LINUX_X64,
        scapp_candidates=("../x64/scapp", "../../bin/linux/x64/scapp"),
        output_subdirs=("linux", "x64"),
        embeds_metadata=False,
    ),
    TargetId.LINUX_ARM32: TargetSpec(
        target=TargetId.LINUX_ARM32,
        scapp_candidates=("../arm32/scapp", "../../bin/linux/arm32/scapp"),
        output_subdirs=("linux", "arm32"),
        embeds_metadata=False,
    ),
}


def target_spec(target: object) -> TargetSpec:
    spec = TARGETS.get(TargetId.parse(target))
    if spec is None:
        raise UnknownTargetError(target)
    return spec


# On-disk (settings/config JSON) key -> BuildParameters field
PARAMETER_KEYS: Dict[str, str] = {
    "exe": "exe",
    "resources": "resources",
    "out": "out",
    "logo": "logo",
    "targets": "targets",
    "productName": "product_name",
    "productVersion": "product_version",
    "productDescription": "product_description",
    "productCompany": "product_company",
    "productCopyright": "product_copyright",
}

PATH_KEYS = ("resources", "out", "logo")


@dataclass(frozen=True, slots=True)
class BuildParameters:
    """Validated inputs of one assembly run.

    Paths are absolute. ``icofile`` is only set on the per-target copies
    produced by :meth:`with_icon`.
    """

    exe: str
    resources: Path
    out: Path
    targets: Tuple[TargetId, ...]
    logo: Optional[Path] = None
    product_name: Optional[str] = None
    product_version: Optional[str] = None
    product_description: Optional[str] = None
    product_company: Optional[str] = None
    product_copyright: Optional[str] = None
    icofile: Optional[Path] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if not self.exe or not str(self.exe).strip():
            raise ConfigError("Build parameter 'exe' is required")
        object.__setattr__(self, "exe", str(self.exe).strip())
        object.__setattr__(self, "resources", _absolute("resources", self.resources))
        object.__setattr__(self, "out", _absolute("out", self.out))
        if self.logo is not None:
            object.__setattr__(self, "logo", _absolute("logo", self.logo))

        targets = self.targets
        if isinstance(targets, str):
            targets = [item for item in targets.split(",") if item.strip()]
        parsed = tuple(TargetId.parse(item) for item in (targets or ()))
        if not parsed:
            raise ConfigError("Build parameter 'targets' must list at least one target")
        object.__setattr__(self, "targets", parsed)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "BuildParameters":
        unknown = sorted(set(data) - set(PARAMETER_KEYS))
        if unknown:
            raise ConfigError(f"Unknown build parameters: {', '.join(unknown)}")
        kwargs = {PARAMETER_KEYS[key]: value for key, value in data.items() if value not in (None, "")}
        for name in ("exe", "resources", "out", "targets"):
            if name not in kwargs:
                raise ConfigError(f"Build parameter '{name}' is required")
        return cls(**kwargs)

    @property
    def dat_file(self) -> Path:
        return self.out / f"{self.exe}.dat"

    @property
    def bundle_version(self) -> str:
        return self.product_version or DEFAULT_BUNDLE_VERSION

    def with_icon(self, icofile: Path) -> "BuildParameters":
        return dataclasses.replace(self, icofile=icofile)

    def metadata(self) -> Dict[str, str]:
        """Product metadata record handed to the assembler."""

        record = {"exe": self.exe}
        for key, name in PARAMETER_KEYS.items():
            value = getattr(self, name)
            if name.startswith("product_") and value:
                record[key] = str(value)
        if self.logo is not None:
            record["logo"] = self.logo.as_posix()
        if self.icofile is not None:
            record["icofile"] = self.icofile.as_posix()
        return record


@dataclass(frozen=True, slots=True)
class BuildResult:
    ok: bool
    exit_code: int

    @classmethod
    def success(cls) -> "BuildResult":
        return cls(ok=True, exit_code=EXIT_OK)

    @classmethod
    def failure(cls, exit_code: int = EXIT_BUILD_FAILED) -> "BuildResult":
        return cls(ok=False, exit_code=exit_code)


def _absolute(name: str, value: Any) -> Path:
    if value is None or str(value) == "":
        raise ConfigError(f"Build parameter '{name}' is required")
    text = normalize_path(value)
    if not is_absolute_path(text):
        raise ConfigError(f"Build parameter '{name}' must be an absolute path: {text}")
    return Path(text)


__all__ = [
    "AssembleStatus",
    "BuildParameters",
    "BuildResult",
    "DEFAULT_BUNDLE_VERSION",
    "EXIT_BAD_FOLDER",
    "EXIT_BUILD_FAILED",
    "EXIT_OK",
    "IconFormat",
    "PARAMETER_KEYS",
    "PATH_KEYS",
    "TARGETS",
    "TargetId",
    "TargetSpec",
    "target_spec",
]
