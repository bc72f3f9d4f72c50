import pytest

from sortable_toolkit.core.models import (
    REORDERABLE_LEVELS,
    HeadingLevel,
    LeveledOutline,
    OutlineNode,
)


class TestHeadingLevel:
    def test_key_and_label(self):
        assert HeadingLevel.H3.key == "h3"
        assert HeadingLevel.H3.label == "H3"

    @pytest.mark.parametrize("raw,expected", [("h1", HeadingLevel.H1), ("H6", HeadingLevel.H6), ("h4", HeadingLevel.H4)])
    def test_from_key(self, raw, expected):
        assert HeadingLevel.from_key(raw) is expected
        assert HeadingLevel.from_label(raw) is expected

    @pytest.mark.parametrize("raw", ["h0", "h7", "h10", "heading", "", None, 3])
    def test_from_key_unknown(self, raw):
        assert HeadingLevel.from_key(raw) is None

    def test_deeper(self):
        assert HeadingLevel.H2.deeper() is HeadingLevel.H3
        assert HeadingLevel.H6.deeper() is None

    def test_h1_is_not_reorderable(self):
        assert HeadingLevel.H1 not in REORDERABLE_LEVELS
        assert list(REORDERABLE_LEVELS) == [HeadingLevel(i) for i in range(2, 7)]


class TestOutlineNode:
    def test_nodes_are_immutable(self):
        node = OutlineNode(id="a", title="A")
        with pytest.raises(AttributeError):
            node.title = "B"  # type: ignore[misc]

    def test_with_helpers_return_new_nodes(self):
        child = OutlineNode(id="c")
        node = OutlineNode(id="a", title="A", level=HeadingLevel.H2)

        with_children = node.with_children([child])
        assert with_children is not node
        assert with_children.children == (child,)
        assert node.children == ()

        assert node.with_level(HeadingLevel.H3).level is HeadingLevel.H3
        assert node.with_title("B").title == "B"
        assert node.with_title("B").id == "a"

    def test_without_children_keeps_childless_node(self):
        node = OutlineNode(id="a")
        assert node.without_children() is node
        parent = OutlineNode(id="p", children=(node,))
        assert parent.without_children().children == ()


class TestLeveledOutline:
    def test_all_levels_present(self):
        outline = LeveledOutline()
        assert [level for level, _ in outline.groups()] == list(HeadingLevel)
        assert all(items == () for _, items in outline.groups())
        assert outline.total_count() == 0

    def test_from_keys_ignores_unknown_keys(self):
        node = OutlineNode(id="x", level=HeadingLevel.H2)
        outline = LeveledOutline.from_keys({"h2": [node], "h9": [OutlineNode(id="y")]})
        assert outline[HeadingLevel.H2] == (node,)
        assert outline.total_count() == 1

    def test_with_group_shares_untouched_groups(self, leveled_outline, make_heading):
        updated = leveled_outline.with_group(HeadingLevel.H3, [make_heading("new", 3)])
        assert updated is not leveled_outline
        assert updated[HeadingLevel.H3][0].id == "new"
        for level in HeadingLevel:
            if level is not HeadingLevel.H3:
                assert updated[level] is leveled_outline[level]

    def test_find_respects_level_filter(self, leveled_outline):
        assert leveled_outline.find("h3-2") == (HeadingLevel.H3, 1, leveled_outline[HeadingLevel.H3][1])
        assert leveled_outline.find("h1-1", REORDERABLE_LEVELS) is None
        assert leveled_outline.find("missing") is None

    def test_find_with_no_levels_finds_nothing(self, leveled_outline):
        assert leveled_outline.find("h2-1", ()) is None
        assert leveled_outline.find("h2-1", None)[0] is HeadingLevel.H2

    def test_equality_is_structural(self, leveled_outline):
        copy = LeveledOutline({level: list(items) for level, items in leveled_outline.groups()})
        assert copy == leveled_outline
        assert copy != leveled_outline.with_group(HeadingLevel.H6, [])

    def test_iter_nodes_in_level_order(self, leveled_outline):
        ids = [node.id for node in leveled_outline.iter_nodes()]
        assert ids == ["h1-1", "h2-1", "h2-2", "h3-1", "h3-2", "h4-1", "h5-1", "h5-2", "h6-2"]
