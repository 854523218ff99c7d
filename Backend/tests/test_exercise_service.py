"""Tests for the exercise query pipeline."""

import asyncio
import json

import pytest
import requests

from exercise_service import (
    FALLBACK_SCORE, FALLBACK_VOLUME, extract_content, parse_exercises,
)
from models import FailureReason, OutcomeKind
from prompt_builder import build_request


EXERCISES = [
    {
        "name": "Push-up",
        "description": "Bodyweight press.",
        "volume": "3 x 15",
        "focus": "endurance",
        "score": 7,
        "difficulty": "Beginner",
        "media_url": "https://example.com/pushup.gif",
    },
    {
        "name": "Incline Dumbbell Press",
        "description": "Press on a 30 degree bench.",
        "volume": "4 x 8-12",
        "focus": "hypertrophy",
        "score": 9.5,
        "difficulty": "Intermediate",
        "media_url": "https://example.com/incline.gif",
    },
]

REQUEST = build_request("上胸肌 (Clavicular Head of Pectoralis Major)")


def run(pipeline):
    return asyncio.run(pipeline.execute(REQUEST))


# ============================================================
# Parsing
# ============================================================

def test_valid_array_round_trips():
    records = parse_exercises(json.dumps(EXERCISES))
    assert [r.model_dump() for r in records] == EXERCISES


def test_round_trip_holds_only_for_in_range_scores():
    edge = [dict(EXERCISES[0], score=0.0), dict(EXERCISES[0], score=10.0)]
    assert [r.model_dump() for r in parse_exercises(json.dumps(edge))] == edge

    out_of_range = [dict(EXERCISES[0], score=-3), dict(EXERCISES[0], score=11)]
    assert [r.score for r in parse_exercises(json.dumps(out_of_range))] == [0.0, 10.0]


def test_array_embedded_in_prose():
    content = "Sure! Here you go: " + json.dumps(EXERCISES[:1]) + "\nEnjoy your training."
    records = parse_exercises(content)
    assert len(records) == 1
    assert records[0].name == "Push-up"


def test_array_inside_code_fence():
    content = "```json\n" + json.dumps(EXERCISES) + "\n```"
    assert [r.name for r in parse_exercises(content)] == ["Push-up", "Incline Dumbbell Press"]


def test_unparsable_text_becomes_single_record():
    records = parse_exercises("not json at all")
    assert len(records) == 1
    assert "not json at all" in records[0].description
    assert records[0].score == FALLBACK_SCORE
    assert records[0].volume == FALLBACK_VOLUME


def test_broken_embedded_array_falls_back():
    content = 'Here: [{"name": "Row", "score": }]'
    records = parse_exercises(content)
    assert len(records) == 1
    assert records[0].description == content


def test_json_object_is_not_an_array():
    content = json.dumps({"exercises": EXERCISES})
    records = parse_exercises(content)
    assert [r.name for r in records] == ["Push-up", "Incline Dumbbell Press"]


def test_lenient_item_normalization():
    content = json.dumps([
        {"name": "Curl", "setsReps": "3 x 12", "rating": "8", "gifUrl": "https://x/curl.gif"},
        {"name": "Dip", "score": "very high"},
        {"name": "Shrug", "score": 42},
        "Farmer carry",
    ])
    curl, dip, shrug, carry = parse_exercises(content)
    assert curl.volume == "3 x 12"
    assert curl.score == 8.0
    assert curl.media_url == "https://x/curl.gif"
    assert dip.score == 5.0
    assert shrug.score == 10.0
    assert carry.description == "Farmer carry"


# ============================================================
# Extraction
# ============================================================

@pytest.mark.parametrize("envelope", [
    {"choices": [{"message": {"content": "A"}}]},
    {"choices": [{"text": "A"}]},
    {"data": [{"content": "A"}]},
    {"choices": [{"message": {"content": ""}}], "data": [{"content": "A"}]},
])
def test_extract_known_locations(envelope):
    assert extract_content(envelope) == "A"


def test_extract_priority_order():
    envelope = {"choices": [{"message": {"content": "first"}, "text": "second"}], "data": [{"content": "third"}]}
    assert extract_content(envelope) == "first"


@pytest.mark.parametrize("envelope", [{}, {"choices": []}, {"choices": [{"message": {"content": "  "}}]}, [], "text"])
def test_extract_nothing(envelope):
    assert extract_content(envelope) is None


# ============================================================
# Pipeline
# ============================================================

def test_missing_credential_skips_transport(make_pipeline):
    pipeline, transport = make_pipeline(content=json.dumps(EXERCISES), api_key="")
    outcome = run(pipeline)
    assert outcome.kind == OutcomeKind.FAILURE
    assert outcome.failure.reason == FailureReason.MISSING_CREDENTIAL
    assert len(transport.calls) == 0


def test_request_sent_with_bearer(make_pipeline):
    pipeline, transport = make_pipeline(content=json.dumps(EXERCISES))
    run(pipeline)
    assert len(transport.calls) == 1
    call = transport.calls[0]
    assert call["url"] == "https://llm.example/v1/chat/completions"
    assert call["headers"]["Authorization"] == "Bearer test-key"
    assert call["payload"] == REQUEST.to_payload()


def test_success(make_pipeline):
    pipeline, _ = make_pipeline(content=json.dumps(EXERCISES))
    outcome = run(pipeline)
    assert outcome.kind == OutcomeKind.SUCCESS
    assert [r.model_dump() for r in outcome.exercises] == EXERCISES


def test_prose_content_is_success(make_pipeline):
    pipeline, _ = make_pipeline(content="Sure! Here you go: " + json.dumps(EXERCISES))
    outcome = run(pipeline)
    assert outcome.kind == OutcomeKind.SUCCESS
    assert len(outcome.exercises) == 2


def test_garbage_content_is_success_with_raw_text(make_pipeline):
    pipeline, _ = make_pipeline(content="not json at all")
    outcome = run(pipeline)
    assert outcome.kind == OutcomeKind.SUCCESS
    assert len(outcome.exercises) == 1
    assert "not json at all" in outcome.exercises[0].description


def test_empty_array_is_empty(make_pipeline):
    pipeline, _ = make_pipeline(content="[]")
    outcome = run(pipeline)
    assert outcome.kind == OutcomeKind.EMPTY
    assert outcome.exercises == []


def test_http_error_status(make_pipeline):
    pipeline, _ = make_pipeline(status=401, body='{"error": "invalid key"}')
    outcome = run(pipeline)
    assert outcome.kind == OutcomeKind.FAILURE
    assert outcome.failure.reason == FailureReason.TRANSPORT_ERROR
    assert outcome.failure.status == 401
    assert "invalid key" in outcome.failure.body


def test_timeout_is_transport_error(make_pipeline):
    pipeline, _ = make_pipeline(error=requests.Timeout("read timed out"))
    outcome = run(pipeline)
    assert outcome.failure.reason == FailureReason.TRANSPORT_ERROR
    assert outcome.failure.status is None
    assert "timed out" in outcome.failure.body


def test_no_content_is_empty_response(make_pipeline):
    pipeline, _ = make_pipeline(body=json.dumps({"choices": [{"message": {"content": ""}}]}))
    outcome = run(pipeline)
    assert outcome.failure.reason == FailureReason.EMPTY_RESPONSE


def test_non_json_body_is_empty_response(make_pipeline):
    pipeline, _ = make_pipeline(body="<html>gateway</html>")
    outcome = run(pipeline)
    assert outcome.failure.reason == FailureReason.EMPTY_RESPONSE
