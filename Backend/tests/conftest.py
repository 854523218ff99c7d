"""Shared fixtures: a scripted transport and pipelines built on it."""

import json

import pytest

from exercise_service import ExerciseQueryPipeline, TransportResponse


class FakeTransport:
    """Records calls and replays a canned response (or raises)."""

    def __init__(self, status=200, body="", error=None):
        self.status = status
        self.body = body
        self.error = error
        self.calls = []

    async def send(self, url, headers, payload):
        self.calls.append({"url": url, "headers": headers, "payload": payload})
        if self.error is not None:
            raise self.error
        return TransportResponse(status=self.status, text=self.body)


def chat_envelope(content):
    return json.dumps({"choices": [{"message": {"role": "assistant", "content": content}}]})


@pytest.fixture
def make_transport():
    return FakeTransport


@pytest.fixture
def make_pipeline():
    def _make(content=None, status=200, body=None, error=None, api_key="test-key"):
        if body is None:
            body = chat_envelope(content) if content is not None else ""
        transport = FakeTransport(status=status, body=body, error=error)
        pipeline = ExerciseQueryPipeline(
            api_key=api_key,
            base_url="https://llm.example/v1",
            transport=transport,
        )
        return pipeline, transport
    return _make
