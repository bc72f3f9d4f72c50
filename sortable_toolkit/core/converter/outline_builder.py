from __future__ import annotations

"""Conversion between leveled outlines and nested outline trees.

:func:`nest_outline` turns the per-level groups into a tree the way a heading
outline is read: items are taken in level order H1..H6 and each one becomes a
child of the nearest preceding item with a strictly shallower level.
:func:`flatten_outline` is the inverse: a depth-first pre-order walk that
files every node under its own level.

The round trip ``nest_outline(flatten_outline(forest))`` reproduces ``forest``
only when the forest is outline-valid (see
:mod:`sortable_toolkit.core.converter.validation`).
"""

from dataclasses import dataclass, field
import logging
from typing import Dict, List, Sequence

from sortable_toolkit.core.models import Forest, HeadingLevel, LeveledOutline, OutlineNode

__all__ = ["nest_outline", "flatten_outline"]

logger = logging.getLogger(__name__)


@dataclass
class _OpenNode:
    """Mutable build-time stand-in for a node whose children are still growing."""

    node: OutlineNode
    level: int
    children: List["_OpenNode"] = field(default_factory=list)

    def freeze(self) -> OutlineNode:
        return self.node.with_children(child.freeze() for child in self.children)


def nest_outline(outline: LeveledOutline) -> Forest:
    """Build the nested forest for ``outline`` in a single left-to-right pass.

    Items whose level has no shallower predecessor become additional roots.
    """
    roots: List[_OpenNode] = []
    heading_stack: List[_OpenNode] = []  # Track parent chain for hierarchy

    for group_level, items in outline.groups():
        for item in items:
            level = int(item.level) if item.level is not None else int(group_level)
            current = _OpenNode(item.without_children(), level)

            # Remove nodes from stack that are at same or deeper level
            while heading_stack and heading_stack[-1].level >= level:
                heading_stack.pop()

            if heading_stack:
                heading_stack[-1].children.append(current)
            else:
                roots.append(current)

            heading_stack.append(current)

    forest = tuple(root.freeze() for root in roots)
    logger.debug("nest_outline: %d items -> %d roots", outline.total_count(), len(forest))
    return forest


def flatten_outline(forest: Sequence[OutlineNode]) -> LeveledOutline:
    """Group every node of ``forest`` by level in depth-first pre-order.

    Children are dropped from the grouped items. Nodes without a level have no
    group to go to and are skipped, but their descendants are still visited.
    """
    groups: Dict[HeadingLevel, List[OutlineNode]] = {level: [] for level in HeadingLevel}
    skipped = 0

    stack: List[OutlineNode] = list(reversed(forest))
    while stack:
        node = stack.pop()
        if node.level is None:
            skipped += 1
        else:
            groups[node.level].append(node.without_children())
        stack.extend(reversed(node.children))

    if skipped:
        logger.warning("flatten_outline: skipped %d node(s) without a level", skipped)
    return LeveledOutline(groups)
