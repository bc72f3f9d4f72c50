from __future__ import annotations

from typing import Callable, List, Optional, Union

from sortable_toolkit.core.models import (
    AddChildRequest,
    DragEnd,
    Forest,
    LeveledOutline,
    ReorderChildren,
)
from sortable_toolkit.core.serialization import to_json
from sortable_toolkit.core.services.outline_editing_service import (
    OperationResult,
    OutlineEditingService,
)

OutlineState = Union[LeveledOutline, Forest]
Listener = Callable[[OutlineState], None]
Event = Union[DragEnd, AddChildRequest, ReorderChildren]


class OutlineController:
    """Owns the current outline state and applies drag-and-drop events to it.

    The controller is the single writer of its state. Each event is resolved
    against the latest committed state at the moment it is applied, never
    against a value captured earlier, so two events arriving back to back
    compose instead of the second overwriting the first. It contains no UI
    toolkit code and does not perform I/O or logging.

    Parameters
    ----------
    state : LeveledOutline or tuple of OutlineNode
        Initial state. A leveled outline accepts drag-end events; a nested
        forest accepts add-child and reorder-children events.
    editing_service : OutlineEditingService, optional
        Service that performs the edits; one is created from config if omitted.

    Notes
    -----
    - Routine failures (unknown ids, invalid slots, cancelled drags) come back
      as unsuccessful OperationResult objects and leave the state untouched.
    - Listeners are called after each committed change with the new state.
    """

    def __init__(
        self,
        state: OutlineState,
        editing_service: Optional[OutlineEditingService] = None,
    ) -> None:
        self._state: OutlineState = state if isinstance(state, LeveledOutline) else tuple(state)
        self.editing_service: OutlineEditingService = editing_service or OutlineEditingService()
        self._listeners: List[Listener] = []
        self.last_result: Optional[OperationResult] = None

    # ---------------------------------------------------------------------------------
    # State access
    # ---------------------------------------------------------------------------------

    @property
    def state(self) -> OutlineState:
        return self._state

    @property
    def is_leveled(self) -> bool:
        return isinstance(self._state, LeveledOutline)

    def nested_view(self) -> Forest:
        """Return the state as a nested forest (nesting a leveled outline)."""
        if isinstance(self._state, LeveledOutline):
            return self.editing_service.nest(self._state)
        return self._state

    def to_json(self, nested: bool = True) -> str:
        """Render the state for the side-by-side JSON panel."""
        return to_json(self.nested_view() if nested else self._state)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; returns a callable that unregisters it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    # ---------------------------------------------------------------------------------
    # Event handling
    # ---------------------------------------------------------------------------------

    def apply(self, edit: Callable[[OutlineState], OperationResult]) -> OperationResult:
        """Run ``edit`` against the current state and commit a successful result."""
        result = edit(self._state)
        self.last_result = result
        if result.success and result.state is not self._state:
            self._state = result.state
            for listener in list(self._listeners):
                listener(self._state)
        return result

    def handle_drag_end(self, event: DragEnd) -> OperationResult:
        """Move the dragged heading to the slot it was dropped on."""
        if event.cancelled:
            return self._reject("Drop cancelled.", {"reason": "cancelled", "item": event.dragged_id})

        def _move(state: OutlineState) -> OperationResult:
            if not isinstance(state, LeveledOutline):
                return OperationResult(False, "Slot drops need a leveled outline.", state, {"reason": "not_leveled"})
            return self.editing_service.move_by_slot(state, event.dragged_id, event.target_slot_id)

        return self.apply(_move)

    def handle_add_child(self, event: AddChildRequest) -> OperationResult:
        def _add(state: OutlineState) -> OperationResult:
            if isinstance(state, LeveledOutline):
                return OperationResult(False, "Children are added to nested trees only.", state, {"reason": "leveled"})
            return self.editing_service.add_child(state, event.parent_id)

        return self.apply(_add)

    def handle_reorder_children(self, event: ReorderChildren) -> OperationResult:
        """Adopt the order the sortable list reported for one parent."""

        def _reorder(state: OutlineState) -> OperationResult:
            if isinstance(state, LeveledOutline):
                return OperationResult(False, "Sibling sorting needs a nested tree.", state, {"reason": "leveled"})
            return self.editing_service.replace_children(state, event.parent_id, event.children)

        return self.apply(_reorder)

    def dispatch(self, event: Event) -> OperationResult:
        """Route an event from the drag layer to its handler."""
        if isinstance(event, DragEnd):
            return self.handle_drag_end(event)
        if isinstance(event, AddChildRequest):
            return self.handle_add_child(event)
        if isinstance(event, ReorderChildren):
            return self.handle_reorder_children(event)
        return self._reject(f"Unsupported event {type(event).__name__}.", {"reason": "unsupported_event"})

    def _reject(self, message: str, details: dict) -> OperationResult:
        result = OperationResult(False, message, self._state, details)
        self.last_result = result
        return result
