"""
NeuroMuscle Exercise Service
Exercise recommendations from an OpenAI-compatible chat-completion endpoint.

Model output is not guaranteed to follow the JSON contract, so parsing
degrades instead of failing: whole-text JSON, then the first embedded
array, then a single record carrying the raw text.
"""
import asyncio
import json
import re
from dataclasses import dataclass
from typing import Any, Callable, Optional

import requests
from pydantic import ValidationError

from config import settings
from logging_utils import get_logger
from models import ExerciseRecord, FailureReason, QueryOutcome, RequestSpec

logger = get_logger(__name__)

# ============================================================
# Transport
# ============================================================


@dataclass
class TransportResponse:
    status: int
    text: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class RequestsTransport:
    """
    Blocking `requests` POST run in a worker thread so the event loop stays free.
    Timeouts are enforced here, not by the pipeline.
    """

    def __init__(self, timeout_sec: Optional[float] = None, session: Optional[requests.Session] = None):
        self.timeout_sec = timeout_sec or settings.LLM_TIMEOUT_SEC
        self._session = session or requests.Session()

    def _post(self, url: str, headers: dict, payload: dict) -> TransportResponse:
        response = self._session.post(url, headers=headers, json=payload, timeout=self.timeout_sec)
        return TransportResponse(status=response.status_code, text=response.text)

    async def send(self, url: str, headers: dict, payload: dict) -> TransportResponse:
        return await asyncio.to_thread(self._post, url, headers, payload)


# ============================================================
# Content Extraction
# Provider envelopes differ; try each known location in order.
# ============================================================

def _first(items: Any) -> Any:
    if isinstance(items, list) and items:
        return items[0]
    return None


def extract_message_content(envelope: dict) -> Optional[str]:
    """choices[0].message.content (chat completions)."""
    choice = _first(envelope.get("choices"))
    if isinstance(choice, dict) and isinstance(choice.get("message"), dict):
        return choice["message"].get("content")
    return None


def extract_choice_text(envelope: dict) -> Optional[str]:
    """choices[0].text (legacy completions)."""
    choice = _first(envelope.get("choices"))
    if isinstance(choice, dict):
        return choice.get("text")
    return None


def extract_data_content(envelope: dict) -> Optional[str]:
    """data[0].content"""
    item = _first(envelope.get("data"))
    if isinstance(item, dict):
        return item.get("content")
    return None


CONTENT_EXTRACTORS: list[Callable[[dict], Optional[str]]] = [
    extract_message_content,
    extract_choice_text,
    extract_data_content,
]


def extract_content(envelope: Any) -> Optional[str]:
    """Text payload from the first extractor that yields a non-blank string."""
    if not isinstance(envelope, dict):
        return None
    for extractor in CONTENT_EXTRACTORS:
        content = extractor(envelope)
        if isinstance(content, str) and content.strip():
            return content
    return None


# ============================================================
# Structural Parsing
# ============================================================

# Greedy: first "[{" to the last "}]"
JSON_ARRAY_PATTERN = re.compile(r"\[\s*\{[\s\S]*\}\s*\]")

FALLBACK_NAME = "AI 训练建议"
FALLBACK_VOLUME = "3 x 10-12"
FALLBACK_FOCUS = "综合训练"
FALLBACK_SCORE = 5.0


def fallback_record(raw_text: str) -> ExerciseRecord:
    """Single renderable record for output that could not be parsed."""
    return ExerciseRecord(
        name=FALLBACK_NAME,
        description=raw_text,
        volume=FALLBACK_VOLUME,
        focus=FALLBACK_FOCUS,
        score=FALLBACK_SCORE,
    )


def _load_array(text: str) -> Optional[list]:
    try:
        data = json.loads(text)
    except ValueError:
        return None
    return data if isinstance(data, list) else None


def to_record(item: Any) -> ExerciseRecord:
    """Normalize one parsed array element."""
    if not isinstance(item, dict):
        return fallback_record(item if isinstance(item, str) else json.dumps(item, ensure_ascii=False))
    try:
        return ExerciseRecord.model_validate(item)
    except ValidationError:
        return fallback_record(json.dumps(item, ensure_ascii=False))


def parse_exercises(content: str) -> list[ExerciseRecord]:
    """Recover exercise records from model text. Never raises on bad content."""
    text = content.strip()

    items = _load_array(text)
    if items is None:
        match = JSON_ARRAY_PATTERN.search(text)
        if match:
            items = _load_array(match.group(0))
            if items is not None:
                logger.info("[Pipeline] Extracted JSON array embedded in prose")

    if items is None:
        logger.warning("[Pipeline] Unparsable model output, returning raw text (%d chars)", len(text))
        return [fallback_record(text)]

    return [to_record(item) for item in items]


# ============================================================
# Pipeline
# ============================================================

class ExerciseQueryPipeline:
    """Issues one exercise request and classifies the result."""

    def __init__(
            self,
            api_key: Optional[str] = None,
            base_url: Optional[str] = None,
            transport=None,
            timeout_sec: Optional[float] = None,
    ):
        self.api_key = settings.LLM_API_KEY if api_key is None else api_key
        self.base_url = base_url or settings.LLM_BASE_URL
        self.transport = transport or RequestsTransport(timeout_sec=timeout_sec)

    @property
    def endpoint(self) -> str:
        return self.base_url.rstrip("/") + "/chat/completions"

    async def execute(self, request: RequestSpec) -> QueryOutcome:
        """Run the request. Always returns an outcome; failures are values."""
        if not self.api_key:
            logger.warning("[Pipeline] No API key configured, skipping request")
            return QueryOutcome.failed(
                FailureReason.MISSING_CREDENTIAL,
                "Missing API key. Set LLM_API_KEY in your .env",
            )

        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }

        try:
            response = await self.transport.send(self.endpoint, headers, request.to_payload())
        except (requests.RequestException, OSError) as e:
            logger.error("[Pipeline] Transport failed: %s", e)
            return QueryOutcome.failed(
                FailureReason.TRANSPORT_ERROR,
                f"Request failed: {e}",
                body=str(e),
            )

        if not response.ok:
            logger.error("[Pipeline] API error %s: %s", response.status, response.text[:200])
            return QueryOutcome.failed(
                FailureReason.TRANSPORT_ERROR,
                f"API error: {response.status}",
                status=response.status,
                body=response.text,
            )

        try:
            envelope = json.loads(response.text)
        except ValueError:
            logger.error("[Pipeline] Response body is not JSON")
            return QueryOutcome.failed(FailureReason.EMPTY_RESPONSE, "Response body is not JSON")

        content = extract_content(envelope)
        if not content:
            logger.warning("[Pipeline] No content in response envelope")
            return QueryOutcome.failed(FailureReason.EMPTY_RESPONSE, "No content returned")

        outcome = QueryOutcome.from_records(parse_exercises(content))
        logger.info("[Pipeline] %s with %d exercise(s)", outcome.kind, len(outcome.exercises))
        return outcome


_pipeline: Optional[ExerciseQueryPipeline] = None


def get_pipeline() -> ExerciseQueryPipeline:
    """Get the default pipeline (singleton)."""
    global _pipeline
    if _pipeline is None:
        _pipeline = ExerciseQueryPipeline()
    return _pipeline


# ============================================================
# Example Usage
# ============================================================
if __name__ == "__main__":
    from muscle_map import anatomical_name
    from prompt_builder import build_request

    outcome = asyncio.run(get_pipeline().execute(build_request(anatomical_name("lats"))))
    print(outcome.model_dump_json(indent=2))
