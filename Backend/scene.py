"""
NeuroMuscle Scene Adapter
Thin bridge to the 3D renderer: per-frame draw descriptors out,
pointer events in. The core never issues draw calls itself.
"""
import time
from typing import Callable, Optional

import muscle_map
from highlight import compute_visuals
from models import PointerEvent, PointerKind, PrimitiveDraw, RegionState
from selection import SelectionController, derive_region_state


class SceneClock:
    """Elapsed wall-clock seconds since creation. Drives the selection pulse."""

    def __init__(self, now: Callable[[], float] = time.monotonic):
        self._now = now
        self._start = now()

    def elapsed(self) -> float:
        return self._now() - self._start


def build_scene(controller: SelectionController, elapsed_sec: float) -> list[PrimitiveDraw]:
    """One draw descriptor per primitive, colored for the current selection."""
    selection = controller.snapshot()
    draws = []

    for region in muscle_map.REGIONS.values():
        state = derive_region_state(region.id, selection)
        visuals = compute_visuals(region, selection, elapsed_sec)
        label = region.display_name if state == RegionState.HOVERED else None

        for prim in muscle_map.primitives_for(region.id):
            draws.append(PrimitiveDraw(
                key=prim.key,
                region_id=region.id,
                shape=prim.shape,
                args=prim.args,
                position=prim.position,
                rotation=prim.rotation,
                scale=prim.scale,
                interactive=region.interactive,
                state=state,
                visuals=visuals,
                label=label,
            ))

    return draws


def dispatch_pointer(controller: SelectionController, event: PointerEvent) -> Optional[str]:
    """
    Apply a pointer event to the controller.
    Returns the resolved region id (None when the hit maps to nothing).
    """
    region_id = muscle_map.resolve_hit(event.target)

    if event.kind == PointerKind.ENTER:
        controller.set_hover(region_id)
    elif event.kind == PointerKind.LEAVE:
        controller.pointer_leave(region_id)
    elif event.kind == PointerKind.CLICK:
        controller.select_region(region_id)

    return region_id
