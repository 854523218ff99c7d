"""
NeuroMuscle Prompt Builder
Turns an anatomical phrase into a chat-completion request with a strict
JSON output contract. Pure data construction - no I/O.
"""
from typing import Optional

from config import settings
from models import ChatMessage, RequestSpec

# ============================================================
# Output Contract
# ============================================================

EXERCISE_FIELDS = ("name", "description", "volume", "focus", "score", "difficulty")
DIFFICULTY_LEVELS = ("Beginner", "Intermediate", "Advanced")

EXERCISE_SYSTEM_PROMPT = """
You are an expert strength coach and exercise physiologist.
Given one target muscle, recommend 3-6 exercises that isolate or strongly load it.

Respond with EXACTLY a JSON array of objects and nothing else.
Each object must have exactly these keys:
- "name": exercise name
- "description": one or two sentences on execution and why it targets the muscle
- "volume": recommended sets and reps as text, e.g. "4 x 8-12"
- "focus": training emphasis, e.g. "hypertrophy", "strength", "stretch"
- "score": number from 0 to 10, how strongly you recommend it for this muscle
- "difficulty": one of {difficulty_levels}

Rules:
- No prose before or after the array, no markdown, no code fences.
- Do not add or rename keys.
- Write "name", "description" and "focus" in {language}; keep "difficulty" in English.
"""

EXERCISE_USER_PROMPT = """
Target muscle: {muscle}
"""


def build_system_prompt(language: Optional[str] = None) -> str:
    return EXERCISE_SYSTEM_PROMPT.format(
        difficulty_levels=", ".join(f'"{d}"' for d in DIFFICULTY_LEVELS),
        language=language or settings.RESPONSE_LANGUAGE,
    ).strip()


def build_request(
        display_name: str,
        *,
        model: Optional[str] = None,
        language: Optional[str] = None,
) -> RequestSpec:
    """Build the exercise request for one anatomical phrase."""
    return RequestSpec(
        model=model or settings.LLM_MODEL,
        messages=[
            ChatMessage(role="system", content=build_system_prompt(language)),
            ChatMessage(role="user", content=EXERCISE_USER_PROMPT.format(muscle=display_name).strip()),
        ],
        temperature=settings.LLM_TEMPERATURE,
        max_tokens=settings.LLM_MAX_TOKENS,
    )
