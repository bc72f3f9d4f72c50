"""Controllers that hold UI state and delegate edits to core services."""

from .outline_controller import OutlineController

__all__ = ["OutlineController"]
