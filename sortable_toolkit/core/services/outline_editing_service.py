from __future__ import annotations

"""Service layer for structural edits on in-memory outlines.

This module provides a UI-agnostic, testable service that wraps the pure
outline operations (slot reordering, child appending, node updates, sibling
sorting) with logging and uniform result reporting.

Scope and guarantees:
- Operates purely in-memory on immutable outline values, no file I/O nor UI imports.
- Every method returns an OperationResult carrying the resulting state; a
  rejected edit returns success=False and the input state object unchanged.
- Expected invalid actions (unknown ids, malformed slots, cancelled drags)
  never raise.

Examples
--------
Basic usage:

    service = OutlineEditingService()
    result = service.move_by_slot(outline, "h3-1", "h2-slot-0")
    if not result.success:
        print(result.message)
    outline = result.state

"""

from dataclasses import dataclass
import logging
from typing import Any, Callable, Dict, Optional, Sequence, Union

from sortable_toolkit.config import ConfigManager
from sortable_toolkit.core import tree_ops
from sortable_toolkit.core.converter import flatten_outline, nest_outline, validate
from sortable_toolkit.core.converter.validation import InvariantViolation
from sortable_toolkit.core.models import Forest, LeveledOutline, NodeId, OutlineNode
from sortable_toolkit.core.reorder import SlotIndexPolicy, apply_move, plan_move

__all__ = ["OperationResult", "OutlineEditingService"]

logger = logging.getLogger(__name__)

OutlineState = Union[LeveledOutline, Forest]

_NOOP_MESSAGES = {
    "cancelled": "Drop cancelled.",
    "self_drop": "Dropped onto itself.",
    "not_found": "Dragged item is not movable or was not found.",
    "malformed_slot": "Drop target is not a valid slot.",
    "level_not_reorderable": "Items cannot be dropped on that level.",
    "unchanged": "Item is already at that position.",
}


@dataclass(frozen=True)
class OperationResult:
    """Result of a structural editing operation.

    Attributes
    ----------
    success
        Whether the operation changed the state.
    message
        Human-readable summary suitable for logs or UI display.
    state
        The resulting state; the input state itself when nothing changed.
    details
        Optional structured details for diagnostics or caller logic.
    """

    success: bool
    message: str
    state: Any
    details: Optional[Dict[str, Any]] = None


class OutlineEditingService:
    """Encapsulates edit operations on leveled outlines and nested forests.

    Parameters
    ----------
    policy
        Same-level slot index policy; defaults to ``outline.yml``
        ``reorder.same_level_index_policy``.
    child_title_template
        Title format for appended children; ``{title}`` and ``{id}`` refer
        to the parent.
    strict
        When True, an edit whose result violates the outline invariants is
        refused and the input state is returned.
    """

    def __init__(
        self,
        policy: Optional[Union[SlotIndexPolicy, str]] = None,
        child_title_template: Optional[str] = None,
        strict: Optional[bool] = None,
    ) -> None:
        config = ConfigManager()
        if policy is None:
            policy = config.get("outline", "reorder", {}).get("same_level_index_policy")
        self.policy: SlotIndexPolicy = SlotIndexPolicy.coerce(policy)
        if child_title_template is None:
            child_title_template = config.get("outline", "append", {}).get(
                "child_title_template", tree_ops.DEFAULT_CHILD_TITLE
            )
        self.child_title_template: str = child_title_template
        if strict is None:
            strict = bool(config.get("outline", "service", {}).get("strict", False))
        self.strict: bool = strict

    # -------------------------------------------------------------------------
    # Leveled outline
    # -------------------------------------------------------------------------

    def move_by_slot(
        self,
        outline: LeveledOutline,
        dragged_id: NodeId,
        target_slot_id: Optional[str],
    ) -> OperationResult:
        """Move a heading to a drop slot, relabeling it to the slot's level."""
        logger.info("Edit: move_by_slot item=%s slot=%s", dragged_id, target_slot_id)
        plan = plan_move(outline, dragged_id, target_slot_id, self.policy)
        if plan.is_noop:
            logger.info("Edit noop: move_by_slot %s item=%s", plan.noop_reason, dragged_id)
            return OperationResult(
                False,
                _NOOP_MESSAGES.get(plan.noop_reason, "Nothing to move."),
                outline,
                {"reason": plan.noop_reason, "item": dragged_id, "slot": target_slot_id},
            )

        moved = apply_move(outline, plan)
        details = {
            "item": dragged_id,
            "from": (plan.source_level.key, plan.source_index),
            "to": (plan.target_level.key, plan.target_index),
            "policy": self.policy.value,
        }
        refused = self._refuse_if_invalid("move_by_slot", outline, moved, details)
        if refused is not None:
            return refused
        logger.info(
            "Edit OK: move_by_slot item=%s %s[%d] -> %s[%d]",
            dragged_id,
            plan.source_level.key,
            plan.source_index,
            plan.target_level.key,
            plan.target_index,
        )
        return OperationResult(True, f"Moved item to {plan.target_level.label}.", moved, details)

    def nest(self, outline: LeveledOutline) -> Forest:
        """Return the nested view of ``outline``."""
        return nest_outline(outline)

    def flatten(self, forest: Sequence[OutlineNode]) -> LeveledOutline:
        return flatten_outline(forest)

    # -------------------------------------------------------------------------
    # Nested forest
    # -------------------------------------------------------------------------

    def add_child(self, forest: Sequence[OutlineNode], parent_id: NodeId) -> OperationResult:
        """Append a synthesized child under ``parent_id``."""
        logger.info("Edit: add_child parent=%s", parent_id)
        updated = tree_ops.add_child(forest, parent_id, self.child_title_template)
        if updated is forest:
            logger.warning("Edit FAIL: add_child parent_not_found parent=%s", parent_id)
            return OperationResult(False, f"Item not found for id '{parent_id}'.", forest, {"parent_id": parent_id})
        parent = tree_ops.find_node(updated, parent_id)
        child = parent.children[-1] if parent is not None and parent.children else None
        details = {"parent_id": parent_id, "child_id": child.id if child is not None else None}
        refused = self._refuse_if_invalid("add_child", forest, updated, details)
        if refused is not None:
            return refused
        logger.info("Edit OK: add_child parent=%s child=%s", parent_id, details["child_id"])
        return OperationResult(True, "Added child.", updated, details)

    def update_node(
        self,
        forest: Sequence[OutlineNode],
        node_id: NodeId,
        transform: Callable[[OutlineNode], OutlineNode],
    ) -> OperationResult:
        """Replace a node with ``transform(node)``; ``transform`` must keep the id."""
        logger.info("Edit: update_node item=%s", node_id)
        if tree_ops.find_node(forest, node_id) is None:
            logger.warning("Edit FAIL: update_node item_not_found item=%s", node_id)
            return OperationResult(False, f"Item not found for id '{node_id}'.", forest, {"node_id": node_id})
        updated = tree_ops.update_node(forest, node_id, transform)
        if updated is forest:
            logger.info("Edit noop: update_node unchanged item=%s", node_id)
            return OperationResult(False, "Item unchanged.", forest, {"node_id": node_id})
        refused = self._refuse_if_invalid("update_node", forest, updated, {"node_id": node_id})
        if refused is not None:
            return refused
        logger.info("Edit OK: update_node item=%s", node_id)
        return OperationResult(True, "Updated item.", updated, {"node_id": node_id})

    def rename(self, forest: Sequence[OutlineNode], node_id: NodeId, new_title: str) -> OperationResult:
        """Rename a node; whitespace in ``new_title`` is collapsed."""
        title = " ".join((new_title or "").split())
        if not title:
            return OperationResult(False, "Title cannot be empty.", forest, {"node_id": node_id})
        return self.update_node(
            forest, node_id, lambda node: node if node.title == title else node.with_title(title)
        )

    def replace_children(
        self,
        forest: Sequence[OutlineNode],
        parent_id: Optional[NodeId],
        children: Sequence[OutlineNode],
    ) -> OperationResult:
        """Adopt the order the sortable list reported for one parent."""
        logger.info("Edit: replace_children parent=%s count=%d", parent_id, len(children))
        if parent_id is not None and tree_ops.find_node(forest, parent_id) is None:
            logger.warning("Edit FAIL: replace_children parent_not_found parent=%s", parent_id)
            return OperationResult(False, f"Item not found for id '{parent_id}'.", forest, {"parent_id": parent_id})
        updated = tree_ops.replace_children(forest, parent_id, children)
        if updated is forest:
            logger.info("Edit noop: replace_children unchanged parent=%s", parent_id)
            return OperationResult(False, "Order unchanged.", forest, {"parent_id": parent_id})
        refused = self._refuse_if_invalid("replace_children", forest, updated, {"parent_id": parent_id})
        if refused is not None:
            return refused
        logger.info("Edit OK: replace_children parent=%s", parent_id)
        return OperationResult(True, "Reordered items.", updated, {"parent_id": parent_id})

    def move_child(
        self,
        forest: Sequence[OutlineNode],
        parent_id: Optional[NodeId],
        from_index: int,
        to_index: int,
    ) -> OperationResult:
        """Move one child of ``parent_id`` between sibling positions."""
        logger.info("Edit: move_child parent=%s from=%d to=%d", parent_id, from_index, to_index)
        updated = tree_ops.move_child(forest, parent_id, from_index, to_index)
        details = {"parent_id": parent_id, "from": from_index, "to": to_index}
        if updated is forest:
            logger.info("Edit noop: move_child parent=%s", parent_id)
            return OperationResult(False, "Cannot move (at boundary or not found).", forest, details)
        logger.info("Edit OK: move_child parent=%s from=%d to=%d", parent_id, from_index, to_index)
        return OperationResult(True, "Moved item.", updated, details)

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def validate(self, state: OutlineState) -> list[InvariantViolation]:
        return validate(state)

    def _refuse_if_invalid(
        self,
        operation: str,
        before: OutlineState,
        after: OutlineState,
        details: Dict[str, Any],
    ) -> Optional[OperationResult]:
        if not self.strict:
            return None
        # Only violations the edit introduces count; existing ones are tolerated.
        existing = {(v.kind, v.node_id) for v in validate(before, check_nesting=False)}
        violations = [v for v in validate(after, check_nesting=False) if (v.kind, v.node_id) not in existing]
        if not violations:
            return None
        logger.warning(
            "Edit REFUSED: %s violations=%s",
            operation,
            ",".join(sorted({v.kind for v in violations})),
        )
        return OperationResult(
            False,
            f"Edit would break the outline: {violations[0].message}",
            before,
            {**details, "violations": violations},
        )
