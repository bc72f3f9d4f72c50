from __future__ import annotations

"""High-level editing services.

Services are UI-agnostic and report every edit through an OperationResult.
"""

from .outline_editing_service import OperationResult, OutlineEditingService  # noqa: F401

__all__: list[str] = [
    "OperationResult",
    "OutlineEditingService",
]
