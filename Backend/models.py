"""
NeuroMuscle Data Models
Pydantic models for the region catalog, selection state, visuals,
exercise results and API responses.
"""
from typing import Optional, Any
from pydantic import AliasChoices, BaseModel, Field, field_validator
from enum import Enum


# ============================================================
# Enums
# ============================================================

class MuscleGroup(str, Enum):
    CHEST = "chest"
    BACK = "back"
    SHOULDER = "shoulder"
    ARM = "arm"
    CORE = "core"
    LEG = "leg"
    HEAD = "head"


class PrimitiveShape(str, Enum):
    CAPSULE = "capsule"
    BOX = "box"
    SPHERE = "sphere"
    CYLINDER = "cylinder"


class RegionState(str, Enum):
    STATIC = "static"
    IDLE = "idle"
    HOVERED = "hovered"
    SELECTED = "selected"


class PointerKind(str, Enum):
    ENTER = "enter"
    LEAVE = "leave"
    CLICK = "click"


class OutcomeKind(str, Enum):
    SUCCESS = "success"
    EMPTY = "empty"
    FAILURE = "failure"


class FailureReason(str, Enum):
    MISSING_CREDENTIAL = "missing_credential"
    TRANSPORT_ERROR = "transport_error"
    EMPTY_RESPONSE = "empty_response"


# ============================================================
# Region Catalog
# ============================================================

Vec3 = tuple[float, float, float]


class BodyPrimitive(BaseModel):
    """One drawable part of the body. Geometry is passed to the renderer untouched."""
    key: str
    region_id: str
    shape: PrimitiveShape = PrimitiveShape.CAPSULE
    args: tuple[float, ...] = ()
    position: Vec3 = (0.0, 0.0, 0.0)
    rotation: Vec3 = (0.0, 0.0, 0.0)
    scale: Vec3 = (1.0, 1.0, 1.0)

    class Config:
        frozen = True
        use_enum_values = True


class MuscleRegion(BaseModel):
    """A named anatomical area. Several primitives may share one id."""
    id: str
    display_name: str
    group: MuscleGroup
    interactive: bool = True
    geometry: tuple[str, ...] = ()  # primitive keys, opaque to the core

    class Config:
        frozen = True
        use_enum_values = True


# ============================================================
# Selection & Visuals
# ============================================================

class SelectionSnapshot(BaseModel):
    """Read-only copy of the selection state."""
    selected: Optional[str] = None
    hovered: Optional[str] = None

    class Config:
        frozen = True


class VisualParams(BaseModel):
    """Material parameters for one region at one instant."""
    color: str
    emissive: str = "#000000"
    emissive_intensity: float = 0.0
    pulsing: bool = False

    class Config:
        frozen = True


class PrimitiveDraw(BaseModel):
    """Everything the renderer needs to draw one primitive this frame."""
    key: str
    region_id: str
    shape: PrimitiveShape
    args: tuple[float, ...]
    position: Vec3
    rotation: Vec3
    scale: Vec3
    interactive: bool
    state: RegionState
    visuals: VisualParams
    label: Optional[str] = None  # tooltip, only while hovered

    class Config:
        use_enum_values = True


class PointerEvent(BaseModel):
    """Pointer event reported by the renderer, tagged with the hit primitive or region."""
    kind: PointerKind
    target: Optional[str] = None

    class Config:
        use_enum_values = True


# ============================================================
# Exercise Results
# ============================================================

DEFAULT_SCORE = 5.0


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return "; ".join(str(v) for v in value)
    return str(value)


class ExerciseRecord(BaseModel):
    """
    One recommended exercise, normalized from model output.

    Dumps back to the input only for canonical keys and in-range values:
    aliases (setsReps, rating, gifUrl) are renamed, list text is joined,
    and scores are clamped to 0-10 (non-numeric scores become 5).
    """
    name: str = ""
    description: str = ""
    volume: str = Field(
        default="",
        validation_alias=AliasChoices("volume", "setsReps", "sets_reps", "reps"),
        description="Sets/reps guidance as free text",
    )
    focus: str = Field(default="", description="Training emphasis")
    score: float = Field(
        default=DEFAULT_SCORE,
        validation_alias=AliasChoices("score", "rating"),
        description="Recommendation strength, 0-10",
    )
    difficulty: Optional[str] = None
    media_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("media_url", "gifUrl"),
    )

    class Config:
        populate_by_name = True
        extra = "ignore"

    @field_validator("name", "description", "volume", "focus", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> str:
        return _as_text(v)

    @field_validator("score", mode="before")
    @classmethod
    def coerce_score(cls, v: Any) -> float:
        try:
            score = float(v)
        except (TypeError, ValueError):
            return DEFAULT_SCORE
        if score != score:  # NaN
            return DEFAULT_SCORE
        return max(0.0, min(10.0, score))

    @field_validator("difficulty", "media_url", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        text = str(v).strip()
        return text or None


class QueryFailure(BaseModel):
    """Why a query produced no exercises."""
    reason: FailureReason
    message: str = ""
    status: Optional[int] = None
    body: Optional[str] = None

    class Config:
        use_enum_values = True


class QueryOutcome(BaseModel):
    """Success(records) | Empty | Failure(reason)."""
    kind: OutcomeKind
    exercises: list[ExerciseRecord] = Field(default_factory=list)
    failure: Optional[QueryFailure] = None

    class Config:
        use_enum_values = True

    @classmethod
    def from_records(cls, records: list[ExerciseRecord]) -> "QueryOutcome":
        if not records:
            return cls(kind=OutcomeKind.EMPTY)
        return cls(kind=OutcomeKind.SUCCESS, exercises=list(records))

    @classmethod
    def failed(
            cls,
            reason: FailureReason,
            message: str = "",
            status: Optional[int] = None,
            body: Optional[str] = None,
    ) -> "QueryOutcome":
        return cls(
            kind=OutcomeKind.FAILURE,
            failure=QueryFailure(reason=reason, message=message, status=status, body=body),
        )


# ============================================================
# Chat Request
# ============================================================

class ChatMessage(BaseModel):
    role: str
    content: str


class RequestSpec(BaseModel):
    """A fully specified chat-completion request."""
    model: str
    messages: list[ChatMessage]
    temperature: float = 0.1
    max_tokens: int = 800

    class Config:
        frozen = True

    def to_payload(self) -> dict:
        """Request body for a /chat/completions endpoint."""
        return {
            "model": self.model,
            "messages": [m.model_dump() for m in self.messages],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }


# ============================================================
# API Request/Response Models
# ============================================================

class SessionView(BaseModel):
    """What the presentation layer renders for one session."""
    session_id: str
    selection: SelectionSnapshot
    title: Optional[str] = None
    loading: bool = False
    outcome: Optional[QueryOutcome] = None


class PointerResponse(BaseModel):
    """Result of dispatching one pointer event."""
    region_id: Optional[str] = None
    query_started: bool = False
    view: SessionView
