from __future__ import annotations

"""Shared data structures used across the Sortable Toolkit core.

This package exposes immutable value objects used by the tree operations,
the converter and the services. It is intentionally free of UI / I/O code so
that the contained objects can be reused in any context (unit-tests, CLI,
GUI, etc.).

Nodes are never mutated in place: every edit produces new node objects for
the path that changed while untouched subtrees are shared by reference.
"""

from dataclasses import dataclass, field, replace
from enum import IntEnum
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple, Union

from .events import AddChildRequest, DragEnd, DropSlot, ReorderChildren

__all__ = [
    "NodeId",
    "HeadingLevel",
    "REORDERABLE_LEVELS",
    "OutlineNode",
    "Forest",
    "LeveledOutline",
    "DragEnd",
    "AddChildRequest",
    "ReorderChildren",
    "DropSlot",
]

NodeId = Union[str, int]


class HeadingLevel(IntEnum):
    """Closed set of outline levels, H1 being the shallowest."""

    H1 = 1
    H2 = 2
    H3 = 3
    H4 = 4
    H5 = 5
    H6 = 6

    @property
    def key(self) -> str:
        """Lower-case key used in grouped outlines and slot ids (``"h2"``)."""
        return f"h{self.value}"

    @property
    def label(self) -> str:
        """Display label (``"H2"``)."""
        return f"H{self.value}"

    @classmethod
    def from_key(cls, key: Any) -> Optional["HeadingLevel"]:
        """Return the level for ``"h1".."h6"`` (case-insensitive) or None."""
        if not isinstance(key, str):
            return None
        text = key.strip().lower()
        if len(text) != 2 or text[0] != "h" or not text[1].isdigit():
            return None
        try:
            return cls(int(text[1]))
        except ValueError:
            return None

    @classmethod
    def from_label(cls, label: Any) -> Optional["HeadingLevel"]:
        return cls.from_key(label)

    def deeper(self) -> Optional["HeadingLevel"]:
        """Return the next deeper level, or None below H6."""
        if self is HeadingLevel.H6:
            return None
        return HeadingLevel(self.value + 1)


# H1 items are anchors: never dragged, never a landing target.
REORDERABLE_LEVELS: Tuple[HeadingLevel, ...] = (
    HeadingLevel.H2,
    HeadingLevel.H3,
    HeadingLevel.H4,
    HeadingLevel.H5,
    HeadingLevel.H6,
)


@dataclass(frozen=True)
class OutlineNode:
    """A node of an outline tree.

    Attributes
    ----------
    id
        Identifier, unique across the forest (caller-maintained).
    title
        Display text.
    level
        Heading level for leveled outlines; None in free-form trees.
    children
        Ordered child nodes; order is document order.
    extra
        Arbitrary additional display data carried along unchanged.
    """

    id: NodeId
    title: str = ""
    level: Optional[HeadingLevel] = None
    children: Tuple["OutlineNode", ...] = ()
    extra: Mapping[str, Any] = field(default_factory=dict)

    def has_children(self) -> bool:
        """Return True if this node has child nodes."""
        return len(self.children) > 0

    def with_children(self, children) -> "OutlineNode":
        return replace(self, children=tuple(children))

    def with_title(self, title: str) -> "OutlineNode":
        return replace(self, title=title)

    def with_level(self, level: Optional[HeadingLevel]) -> "OutlineNode":
        return replace(self, level=level)

    def without_children(self) -> "OutlineNode":
        if not self.children:
            return self
        return replace(self, children=())


Forest = Tuple[OutlineNode, ...]


class LeveledOutline:
    """Hierarchy stored as one ordered group of nodes per heading level.

    All six levels are always present; absent ones are empty tuples. The
    object is immutable: :meth:`with_group` returns a new outline that shares
    every other group tuple with this one.
    """

    __slots__ = ("_groups",)

    def __init__(self, groups: Optional[Mapping[HeadingLevel, Any]] = None) -> None:
        normalized: Dict[HeadingLevel, Tuple[OutlineNode, ...]] = {}
        source = groups or {}
        for level in HeadingLevel:
            items = source.get(level, ())
            normalized[level] = items if isinstance(items, tuple) else tuple(items)
        self._groups = normalized

    @classmethod
    def from_keys(cls, groups: Mapping[str, Any]) -> "LeveledOutline":
        """Build from ``{"h1": [...], "h2": [...]}``; unknown keys are ignored."""
        by_level: Dict[HeadingLevel, Any] = {}
        for key, items in groups.items():
            level = HeadingLevel.from_key(key)
            if level is not None:
                by_level[level] = items
        return cls(by_level)

    def group(self, level: HeadingLevel) -> Tuple[OutlineNode, ...]:
        return self._groups[level]

    def __getitem__(self, level: HeadingLevel) -> Tuple[OutlineNode, ...]:
        return self._groups[level]

    def with_group(self, level: HeadingLevel, items) -> "LeveledOutline":
        """Return a copy with ``level``'s group replaced by ``items``."""
        groups = dict(self._groups)
        groups[level] = tuple(items)
        return LeveledOutline(groups)

    def groups(self) -> Iterator[Tuple[HeadingLevel, Tuple[OutlineNode, ...]]]:
        """Yield ``(level, items)`` in fixed level order H1..H6."""
        for level in HeadingLevel:
            yield level, self._groups[level]

    def iter_nodes(self) -> Iterator[OutlineNode]:
        """Yield every node in level order, then sequence order."""
        for _, items in self.groups():
            yield from items

    def find(self, node_id: NodeId, levels=None) -> Optional[Tuple[HeadingLevel, int, OutlineNode]]:
        """Locate the first node with ``node_id`` among ``levels`` (default: all)."""
        for level in tuple(HeadingLevel) if levels is None else levels:
            for index, node in enumerate(self._groups[level]):
                if node.id == node_id:
                    return level, index, node
        return None

    def total_count(self) -> int:
        return sum(len(items) for items in self._groups.values())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LeveledOutline):
            return NotImplemented
        return self._groups == other._groups

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        parts = ", ".join(f"{lvl.key}={[n.id for n in items]}" for lvl, items in self.groups() if items)
        return f"LeveledOutline({parts})"
