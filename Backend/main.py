"""
NeuroMuscle FastAPI Backend
Region catalog, pointer handling for the 3D body model,
and AI exercise recommendations per selected muscle.
"""
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Optional
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from config import settings
from logging_utils import get_logger
from models import (
    MuscleGroup, MuscleRegion, PointerEvent, PointerResponse,
    PrimitiveDraw, SessionView,
)
import muscle_map
from exercise_service import get_pipeline
from session_service import ExerciseSession

logger = get_logger("api")


# ============================================================
# App Lifecycle
# ============================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle startup and shutdown events."""
    logger.info("[API] Starting %s API...", settings.APP_NAME)
    if not settings.LLM_API_KEY:
        logger.warning("[API] LLM_API_KEY is not set; exercise queries will fail with missing_credential")

    yield
    logger.info("[API] Shutting down...")
    _sessions.clear()


app = FastAPI(
    title="NeuroMuscle API",
    description="Interactive muscle map with AI exercise recommendations",
    version="1.0.0",
    lifespan=lifespan
)

# CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================
# Session Store (in-memory, one per viewer)
# ============================================================

_sessions: dict[str, ExerciseSession] = {}


def create_session() -> ExerciseSession:
    session = ExerciseSession(pipeline=get_pipeline())
    _sessions[session.session_id] = session

    # dicts keep insertion order, so the first key is the oldest session
    while len(_sessions) > settings.MAX_SESSIONS:
        oldest = next(iter(_sessions))
        del _sessions[oldest]
        logger.info("[API] Evicted session: %s", oldest)
    return session


def get_session(session_id: str) -> ExerciseSession:
    session = _sessions.get(session_id)
    if session is None:
        raise HTTPException(404, "Session not found")
    return session


# ============================================================
# Request/Response Models
# ============================================================

class CreateSessionResponse(BaseModel):
    session_id: str


# ============================================================
# Region Catalog
# ============================================================

@app.get("/api/regions", response_model=list[MuscleRegion])
async def api_list_regions(group: Optional[MuscleGroup] = None, interactive: Optional[bool] = None):
    """List body regions, optionally by group."""
    return muscle_map.list_regions(group=group.value if group else None, interactive=interactive)


@app.get("/api/regions/{region_id}", response_model=MuscleRegion)
async def api_get_region(region_id: str):
    """Get one region."""
    region = muscle_map.get_region(region_id)
    if not region:
        raise HTTPException(404, "Region not found")
    return region


# ============================================================
# Sessions
# ============================================================

@app.post("/api/sessions", response_model=CreateSessionResponse)
async def api_create_session():
    """Start a new viewer session."""
    session = create_session()
    logger.info("[API] Created session: %s", session.session_id)
    return CreateSessionResponse(session_id=session.session_id)


@app.get("/api/sessions/{session_id}", response_model=SessionView)
async def api_get_session(session_id: str):
    """Current selection and exercise outcome (for polling)."""
    return get_session(session_id).view()


@app.post("/api/sessions/{session_id}/pointer", response_model=PointerResponse)
async def api_pointer_event(session_id: str, event: PointerEvent):
    """Apply a hover/leave/click from the renderer. Clicks start queries in the background."""
    session = get_session(session_id)
    region_id, started = session.handle_pointer(event)
    return PointerResponse(region_id=region_id, query_started=started, view=session.view())


@app.get("/api/sessions/{session_id}/scene", response_model=list[PrimitiveDraw])
async def api_get_scene(session_id: str, t: Optional[float] = None):
    """Draw descriptors for every primitive at elapsed time t (seconds)."""
    return get_session(session_id).scene(t)


@app.delete("/api/sessions/{session_id}")
async def api_delete_session(session_id: str):
    """Drop a session."""
    get_session(session_id)
    del _sessions[session_id]
    return {"message": "Session closed", "session_id": session_id}


# ============================================================
# Health Check
# ============================================================

@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": datetime.utcnow().isoformat(),
        "version": "1.0.0",
        "llm_configured": bool(settings.LLM_API_KEY),
    }


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "NeuroMuscle API",
        "version": "1.0.0",
        "docs": "/docs"
    }


# ============================================================
# Run Server
# ============================================================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
