from __future__ import annotations

"""Outline invariant checks.

The editing operations treat these invariants as caller preconditions and
never enforce them. This module lets a caller surface violations as data
instead of relying on best-effort results:

``duplicate_id``
    Two nodes share an id; lookups resolve to the first in traversal order.
``missing_level``
    A node in a leveled tree carries no level.
``level_not_deeper``
    A child's level is not strictly greater than its parent's.
``group_mismatch``
    A node of a leveled outline sits in a group other than its own level.
``reparented_on_nest``
    Flattening then nesting the forest would attach the node to a different
    parent. :func:`nest_outline` reads levels group by group, so deeper items
    always attach to the last item of the nearest shallower level.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Union

from sortable_toolkit.core.converter.outline_builder import flatten_outline, nest_outline
from sortable_toolkit.core.models import LeveledOutline, NodeId, OutlineNode

__all__ = ["InvariantViolation", "validate_forest", "validate_leveled", "validate"]


@dataclass(frozen=True)
class InvariantViolation:
    kind: str
    node_id: NodeId
    message: str


def _parent_map(forest: Sequence[OutlineNode]) -> Dict[NodeId, Optional[NodeId]]:
    parents: Dict[NodeId, Optional[NodeId]] = {}
    stack = [(node, None) for node in reversed(forest)]
    while stack:
        node, parent_id = stack.pop()
        parents.setdefault(node.id, parent_id)
        stack.extend((child, node.id) for child in reversed(node.children))
    return parents


def validate_forest(forest: Sequence[OutlineNode], check_nesting: bool = True) -> List[InvariantViolation]:
    """Return the invariant violations found in a nested forest.

    Level checks only apply when at least one node carries a level; a
    free-form tree is only checked for duplicate ids.
    """
    violations: List[InvariantViolation] = []
    seen: set = set()
    leveled = False

    stack = [(node, None) for node in reversed(forest)]
    ordered: List[tuple] = []
    while stack:
        node, parent = stack.pop()
        ordered.append((node, parent))
        if node.level is not None:
            leveled = True
        stack.extend((child, node) for child in reversed(node.children))

    for node, parent in ordered:
        if node.id in seen:
            violations.append(InvariantViolation("duplicate_id", node.id, f"Id {node.id!r} is used more than once."))
        seen.add(node.id)

        if not leveled:
            continue
        if node.level is None:
            violations.append(InvariantViolation("missing_level", node.id, f"Node {node.id!r} has no level."))
            continue
        if parent is not None and parent.level is not None and node.level <= parent.level:
            violations.append(
                InvariantViolation(
                    "level_not_deeper",
                    node.id,
                    f"Node {node.id!r} ({node.level.label}) is not deeper than its parent "
                    f"{parent.id!r} ({parent.level.label}).",
                )
            )

    if leveled and check_nesting and not violations:
        expected = _parent_map(forest)
        actual = _parent_map(nest_outline(flatten_outline(forest)))
        for node_id, parent_id in expected.items():
            if actual.get(node_id) != parent_id:
                violations.append(
                    InvariantViolation(
                        "reparented_on_nest",
                        node_id,
                        f"Node {node_id!r} would move from parent {parent_id!r} to {actual.get(node_id)!r} when nested.",
                    )
                )
    return violations


def validate_leveled(outline: LeveledOutline) -> List[InvariantViolation]:
    """Return the invariant violations found in a leveled outline."""
    violations: List[InvariantViolation] = []
    seen: set = set()
    for level, items in outline.groups():
        for node in items:
            if node.id in seen:
                violations.append(InvariantViolation("duplicate_id", node.id, f"Id {node.id!r} is used more than once."))
            seen.add(node.id)
            if node.level != level:
                found = node.level.label if node.level is not None else "no level"
                violations.append(
                    InvariantViolation(
                        "group_mismatch",
                        node.id,
                        f"Node {node.id!r} has {found} but sits in group {level.key}.",
                    )
                )
    return violations


def validate(
    state: Union[LeveledOutline, Sequence[OutlineNode]], check_nesting: bool = True
) -> List[InvariantViolation]:
    """Dispatch to :func:`validate_leveled` or :func:`validate_forest`."""
    if isinstance(state, LeveledOutline):
        return validate_leveled(state)
    return validate_forest(state, check_nesting=check_nesting)
