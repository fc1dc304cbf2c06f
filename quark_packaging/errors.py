"""Exception hierarchy raised by the packaging pipeline."""

from __future__ import annotations

from typing import Optional


class BuildError(Exception):
    """Base class for every failure detected while assembling a project."""


class ConfigError(BuildError):
    """Missing or malformed build parameters, settings or config files."""


class UsageError(ConfigError):
    """Required command line parameters were not supplied."""


class FolderAccessError(BuildError):
    """Resource folder is not readable or output folder is not writeable."""


class InvocationError(BuildError):
    """An external process could not be started."""


class ToolNotFoundError(BuildError):
    """An external tool binary is not discoverable on this platform."""


class ExternalToolFailure(BuildError):
    """An external tool reported a failing status code."""

    def __init__(self, message: str, code: Optional[int] = None) -> None:
        super().__init__(message)
        self.code = code


class PackingError(ExternalToolFailure):
    """The resource packer failed to produce the archive."""


class PackerNotFoundError(ToolNotFoundError, PackingError):
    """No packfolder executable exists for the host platform."""

    def __init__(self, message: str) -> None:
        PackingError.__init__(self, message)


class IconConversionError(ExternalToolFailure):
    """The logo could not be converted to a platform icon."""


class AssemblerNotFoundError(ToolNotFoundError):
    """No scapp assembler binary exists for the requested target."""


class AssemblyError(ExternalToolFailure):
    """The assembler returned a negative status."""


class ToolTimeoutError(ExternalToolFailure):
    """An external tool exceeded the configured timeout and was killed."""


class UnknownTargetError(BuildError, ValueError):
    """The target id is not one of the supported platforms."""

    def __init__(self, target: object) -> None:
        super().__init__(f"Unknown target {target}")
        self.target = target


class BuildCancelled(BuildError):
    """The build was cancelled by the host before it finished."""


__all__ = [
    "AssemblerNotFoundError",
    "AssemblyError",
    "BuildCancelled",
    "BuildError",
    "ConfigError",
    "ExternalToolFailure",
    "FolderAccessError",
    "IconConversionError",
    "InvocationError",
    "PackerNotFoundError",
    "PackingError",
    "ToolNotFoundError",
    "ToolTimeoutError",
    "UnknownTargetError",
    "UsageError",
]
