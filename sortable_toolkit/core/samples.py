"""Seed outlines for the demo panels, read from ``sample_outlines.yml``."""

import logging
from typing import Union

from sortable_toolkit.config import ConfigManager
from sortable_toolkit.core.exceptions import OutlineFormatError
from sortable_toolkit.core.models import Forest, LeveledOutline
from sortable_toolkit.core.serialization import forest_from_data, outline_from_data

__all__ = ["SAMPLE_NAMES", "load_sample", "heading_tree", "nested_sortable", "recursive_tree"]

logger = logging.getLogger(__name__)

SAMPLE_NAMES = ("heading_tree", "nested_sortable", "recursive_tree")

# Samples stored grouped by level; the others are nested lists.
_LEVELED_SAMPLES = {"heading_tree"}


def load_sample(name: str) -> Union[LeveledOutline, Forest]:
    """Return the named seed state.

    An absent sample yields an empty state of the right shape. Raises
    :class:`OutlineFormatError` when the configured data is malformed.
    """
    if name not in SAMPLE_NAMES:
        raise KeyError(f"Unknown sample {name!r}; expected one of {', '.join(SAMPLE_NAMES)}")
    data = ConfigManager().get_samples().get(name)
    leveled = name in _LEVELED_SAMPLES
    if data is None:
        logger.warning("Sample %s not configured; starting empty", name)
        return LeveledOutline() if leveled else ()
    try:
        return outline_from_data(data) if leveled else forest_from_data(data)
    except OutlineFormatError:
        logger.error("Sample %s is malformed", name, exc_info=True)
        raise


def heading_tree() -> LeveledOutline:
    return load_sample("heading_tree")  # type: ignore[return-value]


def nested_sortable() -> Forest:
    return load_sample("nested_sortable")  # type: ignore[return-value]


def recursive_tree() -> Forest:
    return load_sample("recursive_tree")  # type: ignore[return-value]
