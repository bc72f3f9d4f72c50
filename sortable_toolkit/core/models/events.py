from __future__ import annotations

"""Input events emitted by the drag-and-drop layer.

The engine never sees pointer events; the drag layer reduces an interaction
to one of the records below. A drag aborted before drop is reported as a
:class:`DragEnd` whose ``target_slot_id`` is None.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Optional, Sequence, Union

if TYPE_CHECKING:
    from . import HeadingLevel, OutlineNode

__all__ = ["DragEnd", "AddChildRequest", "ReorderChildren", "DropSlot"]


@dataclass(frozen=True)
class DragEnd:
    """A drop: the dragged node id and the slot it was released over."""

    dragged_id: Union[str, int]
    target_slot_id: Optional[str] = None

    @property
    def cancelled(self) -> bool:
        return self.target_slot_id is None


@dataclass(frozen=True)
class AddChildRequest:
    parent_id: Union[str, int]


@dataclass(frozen=True)
class ReorderChildren:
    """The sortable list reported a new order for one parent's children.

    ``parent_id`` None addresses the root sequence.
    """

    parent_id: Optional[Union[str, int]]
    children: Sequence["OutlineNode"]


@dataclass(frozen=True)
class DropSlot:
    """Parsed form of a ``"<levelKey>-slot-<index>"`` identifier."""

    level: "HeadingLevel"
    index: int

    @property
    def slot_id(self) -> str:
        from sortable_toolkit.core.utils import format_slot_id

        return format_slot_id(self.level, self.index)

    def __str__(self) -> str:
        return self.slot_id

    @classmethod
    def parse(cls, slot_id: Any) -> Optional["DropSlot"]:
        from sortable_toolkit.core.utils import parse_slot_id

        return parse_slot_id(slot_id)
