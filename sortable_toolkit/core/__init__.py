"""Core outline engine: models, tree operations, conversion and services."""
