from __future__ import annotations

"""Plain-data, JSON and XML renditions of outlines.

The presentation layer shows the current state as pretty-printed JSON next to
the interactive list; this module produces that view and reads it back. The
nested outline can also be exported as a small XML document built with lxml::

    <outline>
      <node id="h1-1" level="h1" title="Content Marketing ROI">
        <node id="h2-1" level="h2" title="Understanding Conversion"/>
      </node>
    </outline>

Readers accept the shapes the demo seeds use: ``title`` or ``name`` for the
text, ``label`` (``"H2"``), ``type`` (``"h2"``) or ``level`` (``2``) for the
level. Malformed input raises :class:`OutlineFormatError`.
"""

import json
import logging
from typing import Any, Dict, List, Mapping, Sequence, Union

from lxml import etree as ET  # type: ignore

from sortable_toolkit.core.exceptions import OutlineFormatError
from sortable_toolkit.core.models import Forest, HeadingLevel, LeveledOutline, OutlineNode

__all__ = [
    "node_to_data",
    "forest_to_data",
    "forest_from_data",
    "outline_to_data",
    "outline_from_data",
    "to_json",
    "forest_from_json",
    "outline_from_json",
    "forest_to_xml",
    "forest_from_xml",
]

logger = logging.getLogger(__name__)

_TITLE_KEYS = ("title", "name")
_LEVEL_KEYS = ("label", "type", "level")
_RESERVED = {"id", "children", *_TITLE_KEYS, *_LEVEL_KEYS}

_XML_ROOT = "outline"
_XML_NODE = "node"
_XML_DATA_PREFIX = "data-"


# ---------------------------------------------------------------------------
# Plain data
# ---------------------------------------------------------------------------

def node_to_data(node: OutlineNode, include_children: bool = True) -> Dict[str, Any]:
    data: Dict[str, Any] = {"id": node.id, "title": node.title}
    if node.level is not None:
        data["label"] = node.level.label
    data.update(node.extra)
    if include_children:
        data["children"] = [node_to_data(child) for child in node.children]
    return data


def forest_to_data(forest: Sequence[OutlineNode]) -> List[Dict[str, Any]]:
    return [node_to_data(node) for node in forest]


def outline_to_data(outline: LeveledOutline) -> Dict[str, List[Dict[str, Any]]]:
    """Return ``{"h1": [...], ..., "h6": [...]}`` with childless items."""
    return {
        level.key: [node_to_data(node, include_children=False) for node in items]
        for level, items in outline.groups()
    }


def _parse_level(raw: Any, path: str) -> HeadingLevel:
    if isinstance(raw, HeadingLevel):
        return raw
    if isinstance(raw, int) and not isinstance(raw, bool):
        try:
            return HeadingLevel(raw)
        except ValueError:
            raise OutlineFormatError(f"Level {raw!r} is outside 1..6", path) from None
    level = HeadingLevel.from_key(raw)
    if level is None:
        raise OutlineFormatError(f"Unknown level {raw!r}", path)
    return level


def _node_from_data(data: Any, path: str, default_level: Union[HeadingLevel, None] = None) -> OutlineNode:
    if not isinstance(data, Mapping):
        raise OutlineFormatError(f"Expected an object, got {type(data).__name__}", path)
    if "id" not in data:
        raise OutlineFormatError("Missing 'id'", path)
    node_id = data["id"]
    if not isinstance(node_id, (str, int)) or isinstance(node_id, bool):
        raise OutlineFormatError(f"Id must be a string or integer, got {node_id!r}", path)

    title = next((data[k] for k in _TITLE_KEYS if k in data), "")
    if not isinstance(title, str):
        raise OutlineFormatError(f"Title must be a string, got {title!r}", path)

    level = default_level
    for key in _LEVEL_KEYS:
        if key in data and data[key] is not None:
            level = _parse_level(data[key], f"{path}.{key}")
            break

    raw_children = data.get("children") or []
    if not isinstance(raw_children, (list, tuple)):
        raise OutlineFormatError("'children' must be a list", path)
    children = tuple(
        _node_from_data(child, f"{path}.children[{i}]") for i, child in enumerate(raw_children)
    )
    extra = {k: v for k, v in data.items() if k not in _RESERVED}
    return OutlineNode(id=node_id, title=title, level=level, children=children, extra=extra)


def forest_from_data(data: Any) -> Forest:
    if not isinstance(data, (list, tuple)):
        raise OutlineFormatError(f"Expected a list of nodes, got {type(data).__name__}")
    return tuple(_node_from_data(item, f"[{i}]") for i, item in enumerate(data))


def outline_from_data(data: Any) -> LeveledOutline:
    """Read grouped data; items without a level take their group's level."""
    if not isinstance(data, Mapping):
        raise OutlineFormatError(f"Expected an object keyed by level, got {type(data).__name__}")
    groups: Dict[HeadingLevel, List[OutlineNode]] = {}
    for key, items in data.items():
        level = HeadingLevel.from_key(key)
        if level is None:
            raise OutlineFormatError(f"Unknown level key {key!r}")
        if not isinstance(items, (list, tuple)):
            raise OutlineFormatError("Level group must be a list", key)
        groups[level] = [_node_from_data(item, f"{key}[{i}]", level) for i, item in enumerate(items)]
    return LeveledOutline(groups)


# ---------------------------------------------------------------------------
# JSON
# ---------------------------------------------------------------------------

def to_json(state: Union[LeveledOutline, Sequence[OutlineNode]], indent: int = 2) -> str:
    """Pretty-print a forest or a leveled outline."""
    if isinstance(state, LeveledOutline):
        payload: Any = outline_to_data(state)
    else:
        payload = forest_to_data(state)
    return json.dumps(payload, indent=indent, ensure_ascii=False)


def _load_json(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise OutlineFormatError(f"Invalid JSON: {exc.msg}", f"line {exc.lineno}") from exc


def forest_from_json(text: str) -> Forest:
    return forest_from_data(_load_json(text))


def outline_from_json(text: str) -> LeveledOutline:
    return outline_from_data(_load_json(text))


# ---------------------------------------------------------------------------
# XML
# ---------------------------------------------------------------------------

def _set_attribute(elem: ET._Element, name: str, value: str, path: str) -> None:
    try:
        elem.set(name, value)
    except ValueError as exc:
        # lxml rejects invalid attribute names and control characters in values
        raise OutlineFormatError(f"Cannot write attribute {name!r} as XML: {exc}", path) from exc


def _append_xml(parent: ET._Element, node: OutlineNode, path: str) -> None:
    elem = ET.SubElement(parent, _XML_NODE)
    _set_attribute(elem, "id", str(node.id), path)
    if node.level is not None:
        elem.set("level", node.level.key)
    _set_attribute(elem, "title", node.title, path)
    for key, value in node.extra.items():
        _set_attribute(elem, f"{_XML_DATA_PREFIX}{key}", str(value), path)
    for i, child in enumerate(node.children):
        _append_xml(elem, child, f"{path}/{_XML_NODE}[{i}]")


def forest_to_xml(forest: Sequence[OutlineNode], pretty: bool = True) -> str:
    """Serialize a nested forest to an ``<outline>`` document.

    Ids and extra values are written as text; they read back as strings.
    Raises :class:`OutlineFormatError` when an extra key is not a valid XML
    name or a value holds characters XML cannot carry.
    """
    root = ET.Element(_XML_ROOT)
    for i, node in enumerate(forest):
        _append_xml(root, node, f"/{_XML_ROOT}/{_XML_NODE}[{i}]")
    return ET.tostring(root, encoding="unicode", pretty_print=pretty)


def _node_from_xml(elem: ET._Element, path: str) -> OutlineNode:
    if elem.tag != _XML_NODE:
        raise OutlineFormatError(f"Unexpected element <{elem.tag}>", path)
    node_id = elem.get("id")
    if not node_id:
        raise OutlineFormatError("Missing 'id' attribute", path)
    raw_level = elem.get("level")
    level = _parse_level(raw_level, path) if raw_level else None
    extra = {
        name[len(_XML_DATA_PREFIX):]: value
        for name, value in elem.attrib.items()
        if name.startswith(_XML_DATA_PREFIX)
    }
    children = tuple(
        _node_from_xml(child, f"{path}/{_XML_NODE}[{i}]")
        for i, child in enumerate(c for c in elem if isinstance(c.tag, str))
    )
    return OutlineNode(id=node_id, title=elem.get("title", ""), level=level, children=children, extra=extra)


def forest_from_xml(text: Union[str, bytes]) -> Forest:
    """Parse an ``<outline>`` document produced by :func:`forest_to_xml`."""
    parser = ET.XMLParser(resolve_entities=False, no_network=True)
    try:
        root = ET.fromstring(text.encode("utf-8") if isinstance(text, str) else text, parser)
    except ET.XMLSyntaxError as exc:
        raise OutlineFormatError(f"Invalid XML: {exc}") from exc
    if root.tag != _XML_ROOT:
        raise OutlineFormatError(f"Expected <{_XML_ROOT}> root, got <{root.tag}>")
    return tuple(
        _node_from_xml(child, f"/{_XML_ROOT}/{_XML_NODE}[{i}]")
        for i, child in enumerate(c for c in root if isinstance(c.tag, str))
    )
