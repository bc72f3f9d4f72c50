"""Leveled outline ⇄ nested tree conversion."""

from .outline_builder import flatten_outline, nest_outline
from .validation import InvariantViolation, validate, validate_forest, validate_leveled

__all__ = [
    "nest_outline",
    "flatten_outline",
    "InvariantViolation",
    "validate",
    "validate_forest",
    "validate_leveled",
]
