from __future__ import annotations

"""Copy-on-write operations on nested outline forests.

Every function here is pure: it takes a forest (a sequence of root
:class:`OutlineNode` objects) and returns a new one. Only the nodes on the
path from a root to the edited node are rebuilt; every other subtree is
returned by reference so callers can compare states with ``is``.

A lookup miss is never an error: the input forest object itself is returned.
When ids are duplicated the first match in pre-order wins.
"""

import logging
from typing import Callable, Iterator, List, Optional, Sequence, Tuple

from sortable_toolkit.core.models import Forest, HeadingLevel, NodeId, OutlineNode
from sortable_toolkit.core.utils import child_id_for

__all__ = [
    "update_node",
    "add_child",
    "replace_children",
    "move_child",
    "find_node",
    "iter_nodes",
    "count_nodes",
    "DEFAULT_CHILD_TITLE",
]

logger = logging.getLogger(__name__)

DEFAULT_CHILD_TITLE = "Child of {title}"

NodeTransform = Callable[[OutlineNode], OutlineNode]


def _update_in(
    nodes: Sequence[OutlineNode], target_id: NodeId, transform: NodeTransform
) -> Tuple[Sequence[OutlineNode], bool]:
    for index, node in enumerate(nodes):
        if node.id == target_id:
            updated = transform(node)
            if updated is node:
                return nodes, True
            return (*nodes[:index], updated, *nodes[index + 1:]), True
        if node.children:
            children, found = _update_in(node.children, target_id, transform)
            if found:
                if children is node.children:
                    return nodes, True
                return (*nodes[:index], node.with_children(children), *nodes[index + 1:]), True
    return nodes, False


def update_node(forest: Sequence[OutlineNode], target_id: NodeId, transform: NodeTransform) -> Forest:
    """Replace the first node whose id is ``target_id`` by ``transform(node)``.

    ``transform`` must return a node with the same id; this is not checked.
    Returns ``forest`` itself when no node matches or when ``transform``
    returns the node unchanged.
    """
    updated, found = _update_in(forest, target_id, transform)
    if not found:
        logger.debug("update_node: id %r not found", target_id)
    if updated is forest:
        return forest  # type: ignore[return-value]
    return tuple(updated)


def add_child(
    forest: Sequence[OutlineNode],
    parent_id: NodeId,
    title_template: str = DEFAULT_CHILD_TITLE,
) -> Forest:
    """Append a synthesized child to the node ``parent_id``.

    The child id is ``"<parent_id>-<n>"`` where ``n`` is the parent's child
    count plus one, so sequential calls on the same parent yield distinct ids.
    A leveled parent gives its child the next deeper level.
    """

    def _append(parent: OutlineNode) -> OutlineNode:
        level: Optional[HeadingLevel] = parent.level.deeper() if parent.level is not None else None
        child = OutlineNode(
            id=child_id_for(parent.id, len(parent.children)),
            title=title_template.format(title=parent.title, id=parent.id),
            level=level,
        )
        return parent.with_children((*parent.children, child))

    return update_node(forest, parent_id, _append)


def replace_children(
    forest: Sequence[OutlineNode],
    parent_id: Optional[NodeId],
    children: Sequence[OutlineNode],
) -> Forest:
    """Set the children of ``parent_id`` (the root sequence when None)."""
    if parent_id is None:
        if _same_items(forest, children):
            return forest  # type: ignore[return-value]
        return tuple(children)

    def _set(parent: OutlineNode) -> OutlineNode:
        if _same_items(parent.children, children):
            return parent
        return parent.with_children(children)

    return update_node(forest, parent_id, _set)


def move_child(
    forest: Sequence[OutlineNode],
    parent_id: Optional[NodeId],
    from_index: int,
    to_index: int,
) -> Forest:
    """Move one child of ``parent_id`` from ``from_index`` to ``to_index``.

    ``to_index`` addresses the sibling sequence after the moved child has been
    taken out and is clamped to its bounds. An out-of-range ``from_index`` or
    a move that leaves the order unchanged returns ``forest`` itself.
    """
    if parent_id is None:
        siblings: Sequence[OutlineNode] = forest
    else:
        parent = find_node(forest, parent_id)
        if parent is None:
            return forest  # type: ignore[return-value]
        siblings = parent.children

    if not 0 <= from_index < len(siblings):
        return forest  # type: ignore[return-value]

    moved = siblings[from_index]
    rest = (*siblings[:from_index], *siblings[from_index + 1:])
    target = max(0, min(to_index, len(rest)))
    if target == from_index:
        return forest  # type: ignore[return-value]
    return replace_children(forest, parent_id, (*rest[:target], moved, *rest[target:]))


def find_node(forest: Sequence[OutlineNode], node_id: NodeId) -> Optional[OutlineNode]:
    """Return the first node (pre-order) with ``node_id``, or None."""
    for node in iter_nodes(forest):
        if node.id == node_id:
            return node
    return None


def iter_nodes(forest: Sequence[OutlineNode]) -> Iterator[OutlineNode]:
    """Yield every node in depth-first pre-order without recursion."""
    stack: List[OutlineNode] = list(reversed(forest))
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def count_nodes(forest: Sequence[OutlineNode]) -> int:
    return sum(1 for _ in iter_nodes(forest))


def _same_items(current: Sequence[OutlineNode], proposed: Sequence[OutlineNode]) -> bool:
    if len(current) != len(proposed):
        return False
    return all(a is b for a, b in zip(current, proposed))
