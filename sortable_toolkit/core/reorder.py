from __future__ import annotations

"""Level-constrained reordering of a leveled outline.

A drop is described by the id of the dragged node and the id of the slot it
was released over (``"h3-slot-1"``). The dragged node leaves its source level
and is inserted into the slot's level, taking that level as its own. H1 items
are anchors: they are never resolved as the dragged node and H1 slots are
never valid landing targets.

Every rejected drop (cancelled drag, self-drop, unknown id, malformed or
non-reorderable slot) yields the input outline object unchanged.
"""

from dataclasses import dataclass
from enum import Enum
import logging
from typing import Any, Optional

from sortable_toolkit.core.models import REORDERABLE_LEVELS, HeadingLevel, LeveledOutline, NodeId, OutlineNode
from sortable_toolkit.core.utils import parse_slot_id

__all__ = ["SlotIndexPolicy", "MovePlan", "plan_move", "apply_move", "reorder"]

logger = logging.getLogger(__name__)


class SlotIndexPolicy(str, Enum):
    """How a slot index is read when a node moves within its own level.

    ``POST_REMOVAL``
        The index addresses the level after the dragged node was taken out.
        Dropping ``a`` of ``[a, b, c]`` on slot 2 gives ``[b, c, a]``.
    ``VISUAL``
        The index addresses the level as it was rendered during the drag.
        Dropping ``a`` of ``[a, b, c]`` on slot 2 gives ``[b, a, c]``.

    Cross-level moves behave the same under both policies.
    """

    POST_REMOVAL = "post_removal"
    VISUAL = "visual"

    @classmethod
    def coerce(cls, value: Any, default: Optional["SlotIndexPolicy"] = None) -> "SlotIndexPolicy":
        fallback = default or cls.POST_REMOVAL
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            logger.warning("Unknown slot index policy %r, using %s", value, fallback.value)
            return fallback


@dataclass(frozen=True)
class MovePlan:
    """Resolved drop, or the reason it resolves to nothing.

    Attributes
    ----------
    dragged_id
        Id of the node being dragged.
    source_level / source_index
        Where the dragged node currently sits.
    target_level / target_index
        Level and final position (already adjusted and clamped) of the node.
    noop_reason
        None when the plan changes the outline, otherwise a short tag:
        ``cancelled``, ``self_drop``, ``not_found``, ``malformed_slot``,
        ``level_not_reorderable`` or ``unchanged``.
    """

    dragged_id: NodeId
    source_level: Optional[HeadingLevel] = None
    source_index: int = -1
    target_level: Optional[HeadingLevel] = None
    target_index: int = -1
    noop_reason: Optional[str] = None

    @property
    def is_noop(self) -> bool:
        return self.noop_reason is not None


def plan_move(
    outline: LeveledOutline,
    dragged_id: NodeId,
    target_slot_id: Optional[str],
    policy: SlotIndexPolicy = SlotIndexPolicy.POST_REMOVAL,
) -> MovePlan:
    """Resolve a drop against ``outline`` without building the new outline."""
    if target_slot_id is None:
        return MovePlan(dragged_id, noop_reason="cancelled")
    if dragged_id == target_slot_id:
        return MovePlan(dragged_id, noop_reason="self_drop")

    located = outline.find(dragged_id, REORDERABLE_LEVELS)
    if located is None:
        return MovePlan(dragged_id, noop_reason="not_found")
    source_level, source_index, _ = located

    slot = parse_slot_id(target_slot_id)
    if slot is None:
        return MovePlan(dragged_id, source_level, source_index, noop_reason="malformed_slot")
    if slot.level not in REORDERABLE_LEVELS:
        return MovePlan(dragged_id, source_level, source_index, noop_reason="level_not_reorderable")

    same_level = slot.level == source_level
    if same_level:
        remaining = sum(1 for node in outline[source_level] if node.id != dragged_id)
    else:
        remaining = len(outline[slot.level])

    index = slot.index
    if same_level and policy is SlotIndexPolicy.VISUAL and index > source_index:
        index -= 1
    index = max(0, min(index, remaining))

    plan = MovePlan(dragged_id, source_level, source_index, slot.level, index)
    # A lone node dropped back where it was; duplicates of its id still collapse.
    if same_level and index == source_index and remaining == len(outline[source_level]) - 1:
        return MovePlan(dragged_id, source_level, source_index, slot.level, index, noop_reason="unchanged")
    return plan


def apply_move(outline: LeveledOutline, plan: MovePlan) -> LeveledOutline:
    """Build the outline a non-noop :class:`MovePlan` describes."""
    if plan.is_noop or plan.source_level is None or plan.target_level is None:
        return outline

    source_items = outline[plan.source_level]
    node: OutlineNode = source_items[plan.source_index]
    remaining = tuple(item for item in source_items if item.id != plan.dragged_id)

    result = outline.with_group(plan.source_level, remaining)
    base = result[plan.target_level]
    moved = node.with_level(plan.target_level)
    index = max(0, min(plan.target_index, len(base)))
    return result.with_group(plan.target_level, (*base[:index], moved, *base[index:]))


def reorder(
    outline: LeveledOutline,
    dragged_id: NodeId,
    target_slot_id: Optional[str],
    policy: SlotIndexPolicy = SlotIndexPolicy.POST_REMOVAL,
) -> LeveledOutline:
    """Move ``dragged_id`` to the slot ``target_slot_id``.

    Levels other than the source and target level are shared with ``outline``
    by reference. Rejected drops return ``outline`` itself.
    """
    plan = plan_move(outline, dragged_id, target_slot_id, policy)
    if plan.is_noop:
        logger.debug("reorder noop: %s dragged=%r slot=%r", plan.noop_reason, dragged_id, target_slot_id)
        return outline
    return apply_move(outline, plan)
