"""Build parameter resolution from flags, saved projects and config files."""

from .flags import USAGE, BuildFlags, parse_flags
from .projects import load_config_file, load_project_from_settings
from .resolve import build_params_from_flags, resolve_build_parameters
from .settings import AppSettings, load_settings

__all__ = [
    "AppSettings",
    "BuildFlags",
    "USAGE",
    "build_params_from_flags",
    "load_config_file",
    "load_project_from_settings",
    "load_settings",
    "parse_flags",
    "resolve_build_parameters",
]
