import logging

import pytest

from sortable_toolkit.core.converter import validate
from sortable_toolkit.core.exceptions import OutlineFormatError
from sortable_toolkit.core.models import HeadingLevel, LeveledOutline
from sortable_toolkit.core.samples import (
    SAMPLE_NAMES,
    heading_tree,
    load_sample,
    nested_sortable,
    recursive_tree,
)
from sortable_toolkit.core.tree_ops import count_nodes, find_node


def test_heading_tree_is_grouped_by_level():
    outline = heading_tree()
    assert isinstance(outline, LeveledOutline)
    assert [n.id for n in outline[HeadingLevel.H2]] == ["h2-1", "h2-2"]
    assert [n.id for n in outline[HeadingLevel.H6]] == ["h6-2"]
    assert outline.total_count() == 9
    assert validate(outline) == []


def test_nested_sortable_keeps_integer_ids_and_types():
    forest = nested_sortable()
    assert [n.id for n in forest] == [1, 3, 2, 4]
    assert forest[0].title == "Content Marketing ROI: The Ultimate Guide"
    leaf = find_node(forest, "4-1-2-3-1-3")
    assert leaf.level is HeadingLevel.H6
    assert validate(forest, check_nesting=False) == []


def test_recursive_tree():
    forest = recursive_tree()
    assert [n.id for n in forest] == ["1", "2"]
    assert forest[0].children[0].title == "Item 1.1"
    assert count_nodes(forest) == 3


def test_every_sample_loads():
    for name in SAMPLE_NAMES:
        assert load_sample(name) is not None


def test_unknown_sample():
    with pytest.raises(KeyError):
        load_sample("kanban")


def test_user_override_replaces_sample(isolated_config):
    (isolated_config / "sample_outlines.yml").write_text(
        "recursive_tree:\n  - {id: solo, title: Solo}\n", encoding="utf-8"
    )
    forest = recursive_tree()
    assert [n.id for n in forest] == ["solo"]
    # other samples keep their packaged value
    assert heading_tree().total_count() == 9


def test_malformed_override_raises(isolated_config):
    (isolated_config / "sample_outlines.yml").write_text(
        "heading_tree:\n  h9: []\n", encoding="utf-8"
    )
    with pytest.raises(OutlineFormatError):
        heading_tree()


def test_missing_sample_starts_empty(isolated_config, caplog):
    (isolated_config / "sample_outlines.yml").write_text("recursive_tree: null\n", encoding="utf-8")
    with caplog.at_level(logging.WARNING):
        assert recursive_tree() == ()
    assert "not configured" in caplog.text
