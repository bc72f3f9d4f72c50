"""Toolkit-agnostic UI glue. No widget code lives in this package."""
