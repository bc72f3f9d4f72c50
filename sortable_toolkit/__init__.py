"""Top-level package for the Sortable Toolkit outline engine.

This package hosts the GUI-agnostic implementation of drag-and-drop list and
tree reordering. Front-ends should only depend on the public API exposed
here rather than importing internal modules directly.
"""

from .core.models import HeadingLevel, LeveledOutline, OutlineNode  # re-export for convenience

__all__: list[str] = [
    "HeadingLevel",
    "LeveledOutline",
    "OutlineNode",
]
