"""Environment-driven application settings."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv
from loguru import logger

from quark_packaging.context import DEFAULT_HOME, parse_tool_timeout

SETTINGS_FILENAME = "sciter-js-quark.json"

_ROOT = DEFAULT_HOME


def user_app_data_dir(environ: Mapping[str, str] | None = None) -> Path:
    env = os.environ if environ is None else environ
    if sys.platform.startswith("win"):
        appdata = env.get("APPDATA")
        if appdata:
            return Path(appdata)
        return Path.home() / "AppData" / "Roaming"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support"
    return Path(env.get("XDG_CONFIG_HOME") or Path.home() / ".config")


@dataclass(slots=True)
class AppSettings:
    """Runtime configuration of the packager."""

    home: Path
    settings_path: Path
    tool_timeout: Optional[float] = None
    log_level: str = "INFO"
    log_directory: str = "logs"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "AppSettings":
        env = os.environ if environ is None else environ
        home = Path(env.get("QUARK_HOME") or _ROOT).expanduser()
        settings_path = Path(env.get("QUARK_SETTINGS") or user_app_data_dir(env) / SETTINGS_FILENAME).expanduser()

        return cls(
            home=home,
            settings_path=settings_path,
            tool_timeout=parse_tool_timeout(env.get("QUARK_TOOL_TIMEOUT")),
            log_level=env.get("QUARK_LOG_LEVEL", "INFO").upper(),
            log_directory=env.get("QUARK_LOG_DIR", "logs"),
        )


def load_settings(env_file: Path | None = None) -> AppSettings:
    """Load ``.env`` (without overriding the real environment) and read settings."""

    dotenv_path = env_file or _ROOT / ".env"
    if load_dotenv(dotenv_path, override=False):
        logger.debug("Loaded environment from {}", dotenv_path)
    return AppSettings.from_env()


__all__ = ["AppSettings", "SETTINGS_FILENAME", "load_settings", "user_app_data_dir"]
