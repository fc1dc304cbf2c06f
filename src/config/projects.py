"""Saved project lookup and project config files."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional

from loguru import logger

from quark_packaging.build_config import PATH_KEYS
from quark_packaging.errors import ConfigError
from quark_packaging.paths import PathLike, normalize_path, parent_dir, resolve_path

PROJECT_IDENTITY_KEYS = ("id", "name")


def _read_json(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot read {path.as_posix()}: {exc}") from exc
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Malformed JSON in {path.as_posix()}: {exc}") from exc


def load_project_from_settings(selector: str, settings_path: PathLike) -> Optional[Dict[str, Any]]:
    """Return the saved project whose ``id`` or ``name`` equals ``selector``.

    The identity keys are stripped so the result can be fed straight into
    :meth:`BuildParameters.from_mapping`. ``None`` if the settings file or the
    project does not exist.
    """

    path = Path(normalize_path(settings_path))
    if not path.exists():
        logger.debug("Settings file {} not found", path)
        return None

    data = _read_json(path)
    projects = data.get("projects") if isinstance(data, dict) else None
    if projects is None:
        return None
    if not isinstance(projects, list):
        raise ConfigError(f"'projects' in {path.as_posix()} must be a list")

    wanted = str(selector or "")
    for project in projects:
        if not isinstance(project, dict):
            continue
        if project.get("id") == wanted or project.get("name") == wanted:
            return {key: value for key, value in project.items() if key not in PROJECT_IDENTITY_KEYS}
    return None


def load_config_file(config_path: PathLike) -> Dict[str, Any]:
    """Load a project JSON file, resolving its relative paths against its folder."""

    path = normalize_path(config_path)
    data = _read_json(Path(path))
    if not isinstance(data, dict):
        raise ConfigError(f"Project config {path} must be a JSON object")

    config_dir = parent_dir(path)
    project = {key: value for key, value in data.items() if key not in PROJECT_IDENTITY_KEYS}
    for key in PATH_KEYS:
        if project.get(key):
            project[key] = resolve_path(config_dir, project[key])
    return project


__all__ = ["load_config_file", "load_project_from_settings"]
