from __future__ import annotations

"""Simple reusable helper functions.

These helpers are side-effect-free and contain no GUI or disk I/O; they can be
used across all layers of the toolkit.
"""

import re
from typing import Any, Optional, Union

from sortable_toolkit.core.models import HeadingLevel
from sortable_toolkit.core.models.events import DropSlot

__all__ = [
    "SLOT_SEPARATOR",
    "format_slot_id",
    "parse_slot_id",
    "slot_ids_for",
    "child_id_for",
]

# Shared with the drag layer; must stay bit-exact.
SLOT_SEPARATOR = "-slot-"

_SLOT_PATTERN = re.compile(r"^(h[1-6])-slot-(0|[1-9][0-9]*)$")


def format_slot_id(level: HeadingLevel, index: int) -> str:
    """Return the drop-slot identifier for the gap before ``index`` in ``level``.

    >>> format_slot_id(HeadingLevel.H2, 0)
    'h2-slot-0'
    """
    if index < 0:
        raise ValueError(f"slot index must be non-negative, got {index}")
    return f"{level.key}{SLOT_SEPARATOR}{int(index)}"


def parse_slot_id(slot_id: Any) -> Optional[DropSlot]:
    """Parse ``"<levelKey>-slot-<index>"`` into a :class:`DropSlot`.

    Returns None for anything that is not a well-formed slot identifier:
    unknown level keys, negative or zero-padded indices, stray whitespace.
    """
    if not isinstance(slot_id, str):
        return None
    match = _SLOT_PATTERN.fullmatch(slot_id)
    if match is None:
        return None
    level = HeadingLevel.from_key(match.group(1))
    if level is None:
        return None
    return DropSlot(level=level, index=int(match.group(2)))


def slot_ids_for(level: HeadingLevel, length: int) -> list[str]:
    """Return every slot identifier a level of ``length`` items exposes.

    A level with ``n`` items has ``n + 1`` slots: one before each item and
    one at the end.
    """
    return [format_slot_id(level, i) for i in range(length + 1)]


def child_id_for(parent_id: Union[str, int], existing_children: int) -> str:
    """Derive the id of the next child appended under ``parent_id``.

    >>> child_id_for("1", 1)
    '1-2'
    """
    return f"{parent_id}-{existing_children + 1}"
