"""
NeuroMuscle Selection Controller
Owns hover/selection state for the body model.

Selection is exclusive: selecting a region replaces the previous one and
re-selecting the current region does nothing. Per-region states
(idle / hovered / selected) are derived from the two fields, never stored.
"""
from dataclasses import dataclass
from typing import Callable, Optional

import muscle_map
from logging_utils import get_logger
from models import RegionState, SelectionSnapshot

logger = get_logger(__name__)

SelectionListener = Callable[[str], None]


@dataclass
class SelectionState:
    """Mutable selection state, one per session."""
    selected: Optional[str] = None
    hovered: Optional[str] = None


class SelectionController:
    """Applies pointer intents to a SelectionState and notifies on selection changes."""

    def __init__(self, state: Optional[SelectionState] = None):
        self.state = state or SelectionState()
        self._listeners: list[SelectionListener] = []

    # ------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------

    def subscribe(self, listener: SelectionListener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: SelectionListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    # ------------------------------------------------------------
    # Intents
    # ------------------------------------------------------------

    def select_region(self, region_id: Optional[str]) -> bool:
        """
        Select a region. Returns True only when the selection changed.
        Non-interactive or unknown ids and the current selection are no-ops.
        """
        region = muscle_map.get_region(region_id)
        if region is None or not region.interactive:
            return False
        if region.id == self.state.selected:
            return False

        previous = self.state.selected
        self.state.selected = region.id
        logger.debug("[Selection] %s -> %s", previous, region.id)

        for listener in list(self._listeners):
            listener(region.id)
        return True

    def set_hover(self, region_id: Optional[str]) -> None:
        """Set the hovered region. None clears it; decorative or unknown ids are ignored."""
        if region_id is None:
            self.state.hovered = None
            return
        region = muscle_map.get_region(region_id)
        if region is None or not region.interactive:
            return
        self.state.hovered = region.id

    def pointer_leave(self, region_id: Optional[str]) -> None:
        """Clear the hover if the pointer left the hovered region."""
        resolved = muscle_map.resolve_hit(region_id) if region_id else None
        if resolved is None or resolved == self.state.hovered:
            self.state.hovered = None

    # ------------------------------------------------------------
    # Derived state
    # ------------------------------------------------------------

    def region_state(self, region_id: str) -> RegionState:
        return derive_region_state(region_id, self.snapshot())

    def snapshot(self) -> SelectionSnapshot:
        return SelectionSnapshot(selected=self.state.selected, hovered=self.state.hovered)

    @property
    def selected(self) -> Optional[str]:
        return self.state.selected

    @property
    def hovered(self) -> Optional[str]:
        return self.state.hovered


def derive_region_state(region_id: str, selection: SelectionSnapshot) -> RegionState:
    """Selected > Hovered > Idle; decorative regions are always Static."""
    if not muscle_map.is_interactive(region_id):
        return RegionState.STATIC
    if selection.selected == region_id:
        return RegionState.SELECTED
    if selection.hovered == region_id:
        return RegionState.HOVERED
    return RegionState.IDLE
