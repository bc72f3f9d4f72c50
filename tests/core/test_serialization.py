import json

import pytest

from sortable_toolkit.core.exceptions import OutlineFormatError
from sortable_toolkit.core.models import HeadingLevel, OutlineNode
from sortable_toolkit.core.serialization import (
    forest_from_data,
    forest_from_json,
    forest_from_xml,
    forest_to_data,
    forest_to_xml,
    outline_from_data,
    outline_from_json,
    outline_to_data,
    to_json,
)


class TestPlainData:
    def test_forest_to_data_shape(self, make_heading):
        forest = (make_heading("r", 1, "Root", [make_heading("c", 2, "Child")]),)
        assert forest_to_data(forest) == [
            {
                "id": "r",
                "title": "Root",
                "label": "H1",
                "children": [{"id": "c", "title": "Child", "label": "H2", "children": []}],
            }
        ]

    def test_free_form_nodes_have_no_label(self, free_tree):
        data = forest_to_data(free_tree)
        assert "label" not in data[0]
        assert data[0]["children"][0]["id"] == "1-1"

    def test_reads_sortable_demo_keys(self):
        forest = forest_from_data(
            [{"id": 2, "name": "Strategy", "type": "h1", "children": [{"id": "2-1", "name": "Goals", "type": "h2"}]}]
        )
        assert forest[0].id == 2
        assert forest[0].title == "Strategy"
        assert forest[0].level is HeadingLevel.H1
        assert forest[0].children[0].level is HeadingLevel.H2
        assert forest[0].extra == {}

    def test_extra_fields_are_preserved(self):
        forest = forest_from_data([{"id": "x", "title": "X", "color": "lime", "children": []}])
        assert forest[0].extra == {"color": "lime"}
        assert forest_to_data(forest)[0]["color"] == "lime"

    def test_integer_levels(self):
        assert forest_from_data([{"id": "x", "level": 3}])[0].level is HeadingLevel.H3

    def test_outline_data_round_trip(self, leveled_outline):
        data = outline_to_data(leveled_outline)
        assert list(data) == ["h1", "h2", "h3", "h4", "h5", "h6"]
        assert data["h2"][0] == {"id": "h2-1", "title": "Title h2-1", "label": "H2"}
        assert outline_from_data(data) == leveled_outline

    def test_outline_items_default_to_group_level(self):
        outline = outline_from_data({"h3": [{"id": "a", "title": "A"}]})
        assert outline[HeadingLevel.H3][0].level is HeadingLevel.H3

    @pytest.mark.parametrize(
        "payload",
        [
            {"id": "x"},
            [{"title": "no id"}],
            [{"id": None}],
            [{"id": True}],
            [{"id": "x", "title": 5}],
            [{"id": "x", "label": "H9"}],
            [{"id": "x", "level": 0}],
            [{"id": "x", "children": "nope"}],
            ["string"],
        ],
    )
    def test_malformed_forest_data(self, payload):
        with pytest.raises(OutlineFormatError):
            forest_from_data(payload)

    def test_error_reports_path(self):
        with pytest.raises(OutlineFormatError) as excinfo:
            forest_from_data([{"id": "a", "children": [{"id": "b"}, {"title": "x"}]}])
        assert excinfo.value.path == "[0].children[1]"

    @pytest.mark.parametrize("payload", [[], {"h9": []}, {"h2": "x"}, {"h2": [{"id": "a", "label": "bogus"}]}])
    def test_malformed_outline_data(self, payload):
        with pytest.raises(OutlineFormatError):
            outline_from_data(payload)

    def test_format_error_is_a_value_error(self):
        with pytest.raises(ValueError):
            forest_from_data("not a list")


class TestJson:
    def test_forest_json_matches_display_panel(self, free_tree):
        text = to_json(free_tree)
        assert json.loads(text) == [
            {"id": "1", "title": "Item 1", "children": [{"id": "1-1", "title": "Item 1.1", "children": []}]},
            {"id": "2", "title": "Item 2", "children": []},
        ]
        assert "\n  " in text
        assert forest_from_json(text) == free_tree

    def test_outline_json_round_trip(self, leveled_outline):
        assert outline_from_json(to_json(leveled_outline)) == leveled_outline

    def test_non_ascii_titles_kept_verbatim(self):
        text = to_json((OutlineNode(id="a", title="À propos"),))
        assert "À propos" in text

    def test_invalid_json(self):
        with pytest.raises(OutlineFormatError):
            forest_from_json("[{")
        with pytest.raises(OutlineFormatError):
            outline_from_json("nope")


class TestXml:
    def test_round_trip_with_string_ids(self, make_heading):
        forest = (
            make_heading("r", 1, "Root & co", [make_heading("c", 2, "Child <1>")]),
            OutlineNode(id="free", title="Free", extra={"color": "rose"}),
        )
        xml = forest_to_xml(forest)
        assert xml.startswith("<outline>")
        assert '<node id="c" level="h2" title="Child &lt;1&gt;"/>' in xml
        assert forest_from_xml(xml) == forest

    def test_integer_ids_read_back_as_strings(self):
        restored = forest_from_xml(forest_to_xml((OutlineNode(id=7, title="Seven"),)))
        assert restored[0].id == "7"

    @pytest.mark.parametrize("key", ["my key", "a<b"])
    def test_extra_key_that_is_not_an_xml_name(self, key):
        forest = forest_from_json(json.dumps([{"id": "a", "title": "A", key: "x"}]))
        with pytest.raises(OutlineFormatError) as excinfo:
            forest_to_xml(forest)
        assert excinfo.value.path == "/outline/node[0]"

    def test_control_characters_in_title(self, make_item):
        forest = (make_item("r", children=[OutlineNode(id="a", title="tab\x01bad")]),)
        with pytest.raises(OutlineFormatError) as excinfo:
            forest_to_xml(forest)
        assert excinfo.value.path == "/outline/node[0]/node[0]"

    def test_empty_forest(self):
        assert forest_from_xml(forest_to_xml(())) == ()

    @pytest.mark.parametrize(
        "text",
        [
            "<outline><node",
            "<map/>",
            "<outline><node title='no id'/></outline>",
            "<outline><node id='a' level='h8'/></outline>",
            "<outline><item id='a'/></outline>",
        ],
    )
    def test_malformed_xml(self, text):
        with pytest.raises(OutlineFormatError):
            forest_from_xml(text)
