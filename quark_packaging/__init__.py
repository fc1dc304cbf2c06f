"""Desktop application packaging: resource packing, icons and per-target assembly."""

from .build import assemble_project
from .build_config import BuildParameters, BuildResult, TargetId, TargetSpec, TARGETS
from .console import BuildLogger, LogKind, LoguruBuildLogger, NullBuildLogger
from .context import BuildContext
from .targets import build_target

__all__ = [
    "assemble_project",
    "build_target",
    "BuildContext",
    "BuildLogger",
    "BuildParameters",
    "BuildResult",
    "LogKind",
    "LoguruBuildLogger",
    "NullBuildLogger",
    "TargetId",
    "TargetSpec",
    "TARGETS",
]
