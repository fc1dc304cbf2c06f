"""Controller layer for the UI."""

from .build_controller import BuildController

__all__ = ["BuildController"]
