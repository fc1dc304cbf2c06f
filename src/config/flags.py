"""Command line flags of the packager."""

from __future__ import annotations

import argparse
from dataclasses import dataclass, field
from typing import Dict, List, NoReturn, Optional, Sequence

from loguru import logger

from quark_packaging.errors import UsageError

USAGE = (
    "Usage:",
    "  quark --project <id|name>",
    "  quark --config <project.json>",
    "  quark --exe app --resources path/to/app --out dist --logo icon.svg --targets winX64,mac [--silent]",
)
REQUIRED_HINT = "Required: --exe --resources --out --targets (unless --project/--config provides them)"

# flag destination -> settings/config key
PRODUCT_FLAGS = {
    "product_name": "productName",
    "product_version": "productVersion",
    "product_description": "productDescription",
    "product_company": "productCompany",
    "product_copyright": "productCopyright",
}


@dataclass(slots=True)
class BuildFlags:
    exe: Optional[str] = None
    resources: Optional[str] = None
    out: Optional[str] = None
    logo: Optional[str] = None
    targets: List[str] = field(default_factory=list)
    product: Dict[str, str] = field(default_factory=dict)
    project: Optional[str] = None
    config: Optional[str] = None
    silent: bool = False
    headless: bool = False
    log_level: Optional[str] = None
    usage_error: Optional[str] = None
    extra: List[str] = field(default_factory=list)


def _comma_list(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class FlagParser(argparse.ArgumentParser):
    """Argument parser that raises :class:`UsageError` instead of exiting."""

    def error(self, message: str) -> NoReturn:
        raise UsageError(message)


def build_parser() -> argparse.ArgumentParser:
    parser = FlagParser(
        prog="quark",
        description="Package a Sciter application for Windows, macOS and Linux",
    )
    parser.add_argument("--exe", help="Application name of the produced executables")
    parser.add_argument("--resources", help="Folder with the application resources")
    parser.add_argument("--out", help="Output folder")
    parser.add_argument("--logo", help="Application logo (SVG) used for icons")
    for dest, key in PRODUCT_FLAGS.items():
        option = "--" + dest.replace("_", "-")
        parser.add_argument(f"--{key}", option, dest=dest, help=f"{key} metadata")
    parser.add_argument("--target", action="append", default=[], help="Target to build; may repeat")
    parser.add_argument("--targets", type=_comma_list, help="Comma separated targets, e.g. winX64,mac")
    parser.add_argument("--project", help="Project id or name from the saved settings")
    parser.add_argument("--config", help="Project JSON file")
    parser.add_argument("--silent", action="store_true", help="Close the window when the build ends")
    parser.add_argument("--headless", action="store_true", help="Run without a window, logging to the console")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Console log level",
    )
    return parser


def parse_flags(argv: Sequence[str]) -> BuildFlags:
    """Parse packager flags, ignoring anything the host put before the first option."""

    args = [str(arg) for arg in argv]
    first_flag = next((i for i, arg in enumerate(args) if arg.startswith("--")), len(args))
    leading, rest = args[:first_flag], args[first_flag:]

    try:
        namespace, unknown = build_parser().parse_known_args(rest)
    except UsageError as exc:
        logger.warning("Invalid command line: {}", exc)
        return BuildFlags(
            silent="--silent" in rest,
            headless="--headless" in rest,
            usage_error=str(exc),
            extra=leading,
        )
    targets = list(namespace.targets or []) + list(namespace.target or [])
    product = {
        key: getattr(namespace, dest)
        for dest, key in PRODUCT_FLAGS.items()
        if getattr(namespace, dest)
    }
    return BuildFlags(
        exe=namespace.exe,
        resources=namespace.resources,
        out=namespace.out,
        logo=namespace.logo,
        targets=targets,
        product=product,
        project=namespace.project,
        config=namespace.config,
        silent=namespace.silent,
        headless=namespace.headless,
        log_level=namespace.log_level,
        extra=leading + unknown,
    )


__all__ = ["BuildFlags", "FlagParser", "PRODUCT_FLAGS", "REQUIRED_HINT", "USAGE", "build_parser", "parse_flags"]
