"""
NeuroMuscle Muscle Map
Static catalog of selectable body regions, their drawable primitives,
and the name tables keyed by region id.
Pure data - no external dependencies beyond the models.
"""
from typing import Optional, TypedDict

from models import BodyPrimitive, MuscleGroup, MuscleRegion, PrimitiveShape, Vec3


class RegionSpec(TypedDict):
    display_name: str  # tooltip label
    group: MuscleGroup
    interactive: bool


# ============================================================
# Region Catalog
# One entry per muscle concept, not per primitive.
# ============================================================

REGION_CATALOG: dict[str, RegionSpec] = {
    # === HEAD ===
    "head": {"display_name": "头部/颈部", "group": MuscleGroup.HEAD, "interactive": True},

    # === CHEST ===
    "upper_chest": {"display_name": "上胸 (Upper)", "group": MuscleGroup.CHEST, "interactive": True},
    "middle_chest": {"display_name": "中胸 (Middle)", "group": MuscleGroup.CHEST, "interactive": True},
    "lower_chest": {"display_name": "下胸 (Lower)", "group": MuscleGroup.CHEST, "interactive": True},
    "outer_chest": {"display_name": "外沿 (Outer)", "group": MuscleGroup.CHEST, "interactive": True},

    # === BACK ===
    "traps": {"display_name": "斜方肌", "group": MuscleGroup.BACK, "interactive": True},
    "rhomboids": {"display_name": "菱形肌", "group": MuscleGroup.BACK, "interactive": True},
    "lats": {"display_name": "背阔肌", "group": MuscleGroup.BACK, "interactive": True},
    "teres": {"display_name": "大圆肌", "group": MuscleGroup.BACK, "interactive": True},
    "lower_back": {"display_name": "竖脊肌", "group": MuscleGroup.BACK, "interactive": True},

    # === SHOULDERS ===
    "front_delt": {"display_name": "前束", "group": MuscleGroup.SHOULDER, "interactive": True},
    "side_delt": {"display_name": "中束", "group": MuscleGroup.SHOULDER, "interactive": True},
    "rear_delt": {"display_name": "后束", "group": MuscleGroup.SHOULDER, "interactive": True},

    # === ARMS ===
    "biceps_long": {"display_name": "长头", "group": MuscleGroup.ARM, "interactive": True},
    "biceps_short": {"display_name": "短头", "group": MuscleGroup.ARM, "interactive": True},
    "brachialis": {"display_name": "肱肌", "group": MuscleGroup.ARM, "interactive": True},
    "triceps_long": {"display_name": "三头-长头", "group": MuscleGroup.ARM, "interactive": True},
    "triceps_lateral": {"display_name": "三头-外侧头", "group": MuscleGroup.ARM, "interactive": True},
    "forearms": {"display_name": "前臂", "group": MuscleGroup.ARM, "interactive": True},

    # === CORE ===
    "abs_upper": {"display_name": "上腹", "group": MuscleGroup.CORE, "interactive": True},
    "abs_lower": {"display_name": "下腹", "group": MuscleGroup.CORE, "interactive": True},
    "obliques": {"display_name": "腹外斜肌", "group": MuscleGroup.CORE, "interactive": True},

    # === LEGS ===
    "glutes": {"display_name": "臀大肌", "group": MuscleGroup.LEG, "interactive": True},
    "quads": {"display_name": "股四头肌", "group": MuscleGroup.LEG, "interactive": True},
    "hamstrings": {"display_name": "腘绳肌", "group": MuscleGroup.LEG, "interactive": True},
    "calves": {"display_name": "小腿", "group": MuscleGroup.LEG, "interactive": True},

    # === DECORATIVE (never hovered or selected) ===
    "torso": {"display_name": "躯干", "group": MuscleGroup.CORE, "interactive": False},
    "pelvis": {"display_name": "骨盆", "group": MuscleGroup.LEG, "interactive": False},
    "hands": {"display_name": "手", "group": MuscleGroup.ARM, "interactive": False},
    "feet": {"display_name": "脚", "group": MuscleGroup.LEG, "interactive": False},
}

# ============================================================
# Anatomical phrases sent to the model (more specific than the tooltip)
# ============================================================

ANATOMICAL_NAMES: dict[str, str] = {
    "upper_chest": "上胸肌 (Clavicular Head of Pectoralis Major)",
    "middle_chest": "胸大肌中部 (Sternal Head of Pectoralis Major)",
    "lower_chest": "下胸肌 (Abdominal Head of Pectoralis Major)",
    "outer_chest": "胸肌外沿 (Outer Costal fibers of Pectoralis)",
    "traps": "斜方肌 (Trapezius)",
    "lats": "背阔肌 (Latissimus Dorsi)",
    "rhomboids": "菱形肌 (Rhomboids)",
    "teres": "大圆肌和小圆肌 (Teres Major and Minor)",
    "lower_back": "竖脊肌 (Erector Spinae)",
    "front_delt": "三角肌前束 (Anterior Deltoid)",
    "side_delt": "三角肌中束 (Lateral Deltoid)",
    "rear_delt": "三角肌后束 (Posterior Deltoid)",
    "biceps_long": "肱二头肌长头 (Long Head of Biceps Brachii - Outer peak)",
    "biceps_short": "肱二头肌短头 (Short Head of Biceps Brachii - Inner thickness)",
    "brachialis": "肱肌 (Brachialis - Muscle underneath biceps)",
    "triceps_long": "肱三头肌长头 (Long Head of Triceps Brachii)",
    "triceps_lateral": "肱三头肌外侧头 (Lateral Head of Triceps Brachii)",
    "forearms": "前臂屈肌和伸肌 (Forearms)",
    "abs_upper": "上腹直肌 (Upper Rectus Abdominis)",
    "abs_lower": "下腹直肌 (Lower Rectus Abdominis)",
    "obliques": "腹外斜肌 (External Obliques)",
    "quads": "股四头肌 (Quadriceps)",
    "hamstrings": "腘绳肌 (Hamstrings)",
    "calves": "小腿肌群 (Calves)",
    "glutes": "臀大肌 (Glutes)",
    "head": "颈部肌肉 (Neck Muscles)",
}

# ============================================================
# Localization table for the result panel header
# ============================================================

PANEL_LABELS: dict[str, str] = {
    "upper_chest": "上胸 (Upper Chest)",
    "middle_chest": "中胸 (Middle Chest)",
    "lower_chest": "下胸 (Lower Chest)",
    "outer_chest": "胸肌外沿 (Outer Chest)",
    "traps": "斜方肌 (Trapezius)",
    "lats": "背阔肌 (Lats)",
    "rhomboids": "菱形肌 (Rhomboids)",
    "teres": "大圆肌/小圆肌 (Teres)",
    "lower_back": "竖脊肌 (Lower Back)",
    "front_delt": "三角肌前束 (Front Delt)",
    "side_delt": "三角肌中束 (Side Delt)",
    "rear_delt": "三角肌后束 (Rear Delt)",
    "biceps_long": "肱二头肌-长头 (Long Head)",
    "biceps_short": "肱二头肌-短头 (Short Head)",
    "brachialis": "肱肌 (Brachialis)",
    "triceps_long": "肱三头肌-长头 (Long Head)",
    "triceps_lateral": "肱三头肌-外侧头 (Lateral Head)",
    "forearms": "前臂 (Forearms)",
    "abs_upper": "上腹肌 (Upper Abs)",
    "abs_lower": "下腹肌 (Lower Abs)",
    "obliques": "腹外斜肌/人鱼线 (Obliques)",
    "quads": "股四头肌 (Quads)",
    "hamstrings": "腘绳肌 (Hamstrings)",
    "calves": "小腿 (Calves)",
    "glutes": "臀大肌 (Glutes)",
    "head": "颈部 (Neck)",
}

# ============================================================
# Body Layout
# Left-side positions are given; the right side is mirrored across x.
# ============================================================

CAPSULE_SEGMENTS = (4.0, 16.0)


def _single(region_id: str, shape: PrimitiveShape, args: tuple, position: Vec3,
            rotation: Vec3 = (0.0, 0.0, 0.0)) -> list[BodyPrimitive]:
    return [BodyPrimitive(
        key=region_id, region_id=region_id, shape=shape,
        args=args, position=position, rotation=rotation,
    )]


def _pair(region_id: str, shape: PrimitiveShape, args: tuple, left: Vec3,
          rotation: Vec3 = (0.0, 0.0, 0.0)) -> list[BodyPrimitive]:
    x, y, z = left
    rx, ry, rz = rotation
    return [
        BodyPrimitive(key=f"{region_id}.left", region_id=region_id, shape=shape,
                      args=args, position=(x, y, z), rotation=(rx, ry, rz)),
        BodyPrimitive(key=f"{region_id}.right", region_id=region_id, shape=shape,
                      args=args, position=(-x, y, z), rotation=(rx, -ry, -rz)),
    ]


def _capsule(radius: float, length: float) -> tuple:
    return (radius, length) + CAPSULE_SEGMENTS


BOX = PrimitiveShape.BOX
SPHERE = PrimitiveShape.SPHERE
CAPSULE = PrimitiveShape.CAPSULE
CYLINDER = PrimitiveShape.CYLINDER

BODY_LAYOUT: list[BodyPrimitive] = [
    # === HEAD ===
    *_single("head", CAPSULE, _capsule(0.32, 0.45), (0.0, 3.9, 0.0)),

    # === CHEST ===
    *_pair("upper_chest", BOX, (0.45, 0.2, 0.15), (-0.25, 3.25, 0.22), (0.0, 0.0, -0.2)),
    *_pair("middle_chest", BOX, (0.42, 0.35, 0.18), (-0.22, 2.95, 0.28)),
    *_pair("lower_chest", BOX, (0.4, 0.15, 0.12), (-0.25, 2.7, 0.25), (0.0, 0.0, 0.1)),
    *_pair("outer_chest", BOX, (0.12, 0.5, 0.12), (-0.5, 2.95, 0.22), (0.0, 0.0, 0.1)),

    # === BACK ===
    *_single("traps", CYLINDER, (0.5, 0.4, 0.2), (0.0, 3.45, -0.2)),
    *_single("rhomboids", BOX, (0.4, 0.5, 0.1), (0.0, 2.9, -0.25)),
    *_pair("lats", BOX, (0.25, 1.1, 0.1), (-0.55, 2.5, -0.2), (0.0, 0.0, 0.2)),
    *_pair("teres", BOX, (0.15, 0.2, 0.1), (-0.6, 3.0, -0.15), (0.0, 0.0, 0.3)),
    *_single("lower_back", BOX, (0.25, 0.5, 0.15), (0.0, 2.0, -0.25)),

    # === SHOULDERS ===
    *_pair("side_delt", SPHERE, (0.26,), (-0.85, 3.3, 0.0)),
    *_pair("front_delt", SPHERE, (0.18,), (-0.7, 3.25, 0.18)),
    *_pair("rear_delt", SPHERE, (0.18,), (-0.7, 3.25, -0.18)),

    # === ARMS (arm origin at x=±0.95, y=2.5) ===
    *_pair("biceps_long", CAPSULE, _capsule(0.07, 0.55), (-1.03, 2.5, 0.1)),
    *_pair("biceps_short", CAPSULE, _capsule(0.07, 0.5), (-0.87, 2.5, 0.1)),
    *_pair("brachialis", CAPSULE, _capsule(0.05, 0.3), (-1.07, 2.4, 0.05)),
    *_pair("triceps_long", CAPSULE, _capsule(0.08, 0.55), (-0.89, 2.55, -0.12)),
    *_pair("triceps_lateral", CAPSULE, _capsule(0.07, 0.4), (-1.03, 2.65, -0.1)),
    *_pair("forearms", CAPSULE, _capsule(0.11, 0.65), (-0.95, 1.8, 0.0), (0.0, 0.0, 0.1)),

    # === CORE ===
    *_single("abs_upper", BOX, (0.32, 0.35, 0.1), (0.0, 2.3, 0.2)),
    *_single("abs_lower", BOX, (0.3, 0.45, 0.1), (0.0, 1.85, 0.2)),
    *_pair("obliques", CAPSULE, _capsule(0.15, 0.7), (-0.35, 2.1, 0.15)),

    # === LEGS ===
    *_single("glutes", BOX, (0.48, 0.45, 0.3), (0.0, 1.25, -0.2)),
    *_pair("quads", CAPSULE, _capsule(0.24, 1.2), (-0.35, 0.3, 0.15)),
    *_pair("hamstrings", CAPSULE, _capsule(0.22, 1.2), (-0.35, 0.3, -0.15)),
    *_pair("calves", CAPSULE, _capsule(0.17, 1.0), (-0.4, -1.0, -0.1)),

    # === DECORATIVE ===
    *_single("torso", CYLINDER, (0.5, 0.4, 1.6), (0.0, 2.6, 0.0)),
    *_single("pelvis", BOX, (0.7, 0.3, 0.35), (0.0, 1.45, 0.0)),
    *_pair("hands", SPHERE, (0.1,), (-0.97, 1.3, 0.0)),
    *_pair("feet", BOX, (0.18, 0.1, 0.35), (-0.4, -1.65, 0.08)),
]


# ============================================================
# Catalog Construction
# ============================================================

def _build_regions(
        catalog: dict[str, RegionSpec],
        layout: list[BodyPrimitive],
) -> dict[str, MuscleRegion]:
    """Attach primitive keys to each region and check the layout is consistent."""
    keys: dict[str, list[str]] = {region_id: [] for region_id in catalog}
    seen: set[str] = set()

    for prim in layout:
        if prim.region_id not in catalog:
            raise ValueError(f"Primitive {prim.key!r} references unknown region {prim.region_id!r}")
        if prim.key in seen:
            raise ValueError(f"Duplicate primitive key: {prim.key!r}")
        seen.add(prim.key)
        keys[prim.region_id].append(prim.key)

    missing = [region_id for region_id, k in keys.items() if not k]
    if missing:
        raise ValueError(f"Regions without geometry: {', '.join(missing)}")

    return {
        region_id: MuscleRegion(
            id=region_id,
            display_name=spec["display_name"],
            group=spec["group"],
            interactive=spec["interactive"],
            geometry=tuple(keys[region_id]),
        )
        for region_id, spec in catalog.items()
    }


REGIONS: dict[str, MuscleRegion] = _build_regions(REGION_CATALOG, BODY_LAYOUT)
PRIMITIVES: dict[str, BodyPrimitive] = {p.key: p for p in BODY_LAYOUT}


# ============================================================
# Lookups
# ============================================================

def normalize_region_id(region_id: str) -> str:
    """Normalize a region id for lookup."""
    return region_id.lower().strip()


def get_region(region_id: Optional[str]) -> Optional[MuscleRegion]:
    """Get a region by id, or None when unknown."""
    if not region_id:
        return None
    return REGIONS.get(normalize_region_id(region_id))


def list_regions(
        group: Optional[str] = None,
        interactive: Optional[bool] = None,
) -> list[MuscleRegion]:
    """List regions in catalog order, optionally filtered."""
    return [
        r for r in REGIONS.values()
        if (group is None or r.group == group)
        and (interactive is None or r.interactive == interactive)
    ]


def is_interactive(region_id: Optional[str]) -> bool:
    region = get_region(region_id)
    return region is not None and region.interactive


def primitives_for(region_id: str) -> list[BodyPrimitive]:
    region = get_region(region_id)
    if region is None:
        return []
    return [PRIMITIVES[key] for key in region.geometry]


def resolve_hit(target: Optional[str]) -> Optional[str]:
    """
    Map a raw pointer hit to a semantic region id.
    Accepts a primitive key ("lats.left") or a region id ("lats").
    """
    if not target:
        return None
    key = target.strip()
    prim = PRIMITIVES.get(key)
    if prim is not None:
        return prim.region_id
    region = get_region(key)
    return region.id if region else None


def anatomical_name(region_id: str) -> str:
    """Descriptive anatomical phrase for prompting. Falls back to the id."""
    return ANATOMICAL_NAMES.get(normalize_region_id(region_id), region_id)


def display_label(region_id: str) -> str:
    """Localized panel label. Falls back to the id."""
    return PANEL_LABELS.get(normalize_region_id(region_id), region_id)


# ============================================================
# Example Usage
# ============================================================
if __name__ == "__main__":
    print(f"{len(REGIONS)} regions, {len(PRIMITIVES)} primitives")
    print("lats.right ->", resolve_hit("lats.right"))
    print("Prompt phrase:", anatomical_name("lats"))
