"""Test configuration and fixtures shared by the Sortable Toolkit tests.

Every test runs against the packaged configuration only: user overrides are
redirected to an empty temporary directory and the ConfigManager singleton is
reset around each test.
"""

import logging
import sys
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sortable_toolkit.config import ConfigManager
from sortable_toolkit.core.models import HeadingLevel, LeveledOutline, OutlineNode

# Configure test logging
logging.basicConfig(
    level=logging.DEBUG,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point user overrides at an empty directory and reload config per test."""
    user_dir = tmp_path / "user_config"
    user_dir.mkdir()
    monkeypatch.setenv("SORTABLE_TOOLKIT_CONFIG_DIR", str(user_dir))
    ConfigManager.reset()
    yield user_dir
    ConfigManager.reset()


def heading(node_id, level, title=None, children=()):
    """Build a leveled node; ``level`` is an int 1..6."""
    return OutlineNode(
        id=node_id,
        title=title if title is not None else f"Title {node_id}",
        level=HeadingLevel(level),
        children=tuple(children),
    )


def item(node_id, title=None, children=()):
    """Build a free-form (unleveled) node."""
    return OutlineNode(id=node_id, title=title if title is not None else f"Item {node_id}", children=tuple(children))


@pytest.fixture
def make_heading():
    return heading


@pytest.fixture
def make_item():
    return item


@pytest.fixture
def leveled_outline():
    """Outline shaped like the heading-tree demo, one or two items per level."""
    return LeveledOutline(
        {
            HeadingLevel.H1: [heading("h1-1", 1)],
            HeadingLevel.H2: [heading("h2-1", 2), heading("h2-2", 2)],
            HeadingLevel.H3: [heading("h3-1", 3), heading("h3-2", 3)],
            HeadingLevel.H4: [heading("h4-1", 4)],
            HeadingLevel.H5: [heading("h5-1", 5), heading("h5-2", 5)],
            HeadingLevel.H6: [heading("h6-2", 6)],
        }
    )


@pytest.fixture
def free_tree():
    """Tree shaped like the recursive-tree demo."""
    return (
        item("1", "Item 1", [item("1-1", "Item 1.1")]),
        item("2", "Item 2"),
    )


@pytest.fixture
def deep_tree():
    """Four-level tree with siblings at every level."""
    return (
        item("a", children=[
            item("a1", children=[
                item("a1x", children=[item("a1x-deep")]),
                item("a1y"),
            ]),
            item("a2"),
        ]),
        item("b", children=[item("b1")]),
        item("c"),
    )
