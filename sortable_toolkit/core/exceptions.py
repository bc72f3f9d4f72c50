"""Exceptions raised by the Sortable Toolkit core.

Editing operations never raise for expected invalid input; only data crossing
the process boundary (serialized outlines) is rejected with an exception.
"""

__all__ = ["SortableToolkitError", "OutlineFormatError"]


class SortableToolkitError(Exception):
    """Base exception for all toolkit errors."""


class OutlineFormatError(SortableToolkitError, ValueError):
    """Serialized outline data is malformed.

    Attributes
    ----------
    path
        Location of the offending entry (``"[0].children[2]"``), if known.
    """

    def __init__(self, message: str, path: str = "") -> None:
        self.path = path
        super().__init__(f"{message} (at {path})" if path else message)
