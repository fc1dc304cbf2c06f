"""Turn flags, saved projects and config files into :class:`BuildParameters`."""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from loguru import logger

from quark_packaging.build_config import PATH_KEYS, BuildParameters
from quark_packaging.errors import ConfigError, UsageError
from quark_packaging.paths import PathLike, normalize_path, resolve_path

from .flags import BuildFlags
from .projects import load_config_file, load_project_from_settings
from .settings import AppSettings

REQUIRED_KEYS = ("exe", "resources", "out", "targets")


def build_params_from_flags(flags: BuildFlags, base: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
    """Overlay explicit flags on top of a saved project or config mapping."""

    params: Dict[str, Any] = dict(base or {})
    if flags.exe:
        params["exe"] = str(flags.exe)
    for key in PATH_KEYS:
        value = getattr(flags, key)
        if value:
            params[key] = normalize_path(value)
    params.update(flags.product)
    if flags.targets:
        params["targets"] = list(flags.targets)
    return params


def resolve_build_parameters(flags: BuildFlags, cli_dir: PathLike, settings: AppSettings) -> BuildParameters:
    if flags.usage_error:
        raise UsageError(flags.usage_error)

    base: Optional[Dict[str, Any]] = None

    if flags.project:
        base = load_project_from_settings(flags.project, settings.settings_path)
        if base is None:
            raise ConfigError(f"Project not found in settings: {flags.project}")
        logger.debug("Using saved project {}", flags.project)

    if flags.config:
        config_path = resolve_path(cli_dir, flags.config)
        base = load_config_file(config_path)
        logger.debug("Using project config {}", config_path)

    params = build_params_from_flags(flags, base)
    for key in PATH_KEYS:
        if params.get(key):
            params[key] = resolve_path(cli_dir, params[key])

    missing = [key for key in REQUIRED_KEYS if not params.get(key)]
    if missing:
        raise UsageError(f"Missing required parameters: {', '.join(missing)}")

    return BuildParameters.from_mapping(params)


__all__ = ["REQUIRED_KEYS", "build_params_from_flags", "resolve_build_parameters"]
