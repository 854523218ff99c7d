"""
NeuroMuscle Highlight Policy
Maps (region, selection, elapsed time) to material parameters.
Pure - reads state, never mutates it.
"""
import math

from models import MuscleRegion, RegionState, SelectionSnapshot, VisualParams
from selection import derive_region_state

# ============================================================
# Palette
# ============================================================

BASE_COLOR_INTERACTIVE = "#a1a1aa"  # zinc 400
BASE_COLOR_STATIC = "#52525b"       # zinc 600
HIGHLIGHT_COLOR = "#60a5fa"         # blue 400
HOVER_COLOR = "#e4e4e7"             # zinc 200
SELECTED_EMISSIVE = "#1d4ed8"       # deep blue glow
NO_EMISSIVE = "#000000"

# ============================================================
# Pulse
# ============================================================

PULSE_PERIOD_SEC = math.pi / 2  # sin(4t)
PULSE_CENTER = 0.6
PULSE_AMPLITUDE = 0.2
HOVER_INTENSITY = 0.3

STATIC_VISUALS = VisualParams(color=BASE_COLOR_STATIC)
IDLE_VISUALS = VisualParams(color=BASE_COLOR_INTERACTIVE)
HOVER_VISUALS = VisualParams(color=HOVER_COLOR, emissive_intensity=HOVER_INTENSITY)


def pulse_intensity(elapsed_sec: float) -> float:
    """Glow intensity of a selected region at wall-clock time elapsed_sec."""
    phase = 2 * math.pi * elapsed_sec / PULSE_PERIOD_SEC
    return PULSE_CENTER + PULSE_AMPLITUDE * math.sin(phase)


def visuals_for_state(state: RegionState, elapsed_sec: float = 0.0) -> VisualParams:
    if state == RegionState.SELECTED:
        return VisualParams(
            color=HIGHLIGHT_COLOR,
            emissive=SELECTED_EMISSIVE,
            emissive_intensity=pulse_intensity(elapsed_sec),
            pulsing=True,
        )
    if state == RegionState.HOVERED:
        return HOVER_VISUALS
    if state == RegionState.IDLE:
        return IDLE_VISUALS
    return STATIC_VISUALS


def compute_visuals(
        region: MuscleRegion,
        selection: SelectionSnapshot,
        elapsed_sec: float,
) -> VisualParams:
    """Visual parameters for one region this frame."""
    if not region.interactive:
        return STATIC_VISUALS
    return visuals_for_state(derive_region_state(region.id, selection), elapsed_sec)
