"""API tests against the FastAPI app with a scripted LLM transport."""

import json
import time

import pytest
from fastapi.testclient import TestClient

import main


@pytest.fixture
def client_for(monkeypatch, make_pipeline):
    def _client(**pipeline_kwargs):
        pipeline, transport = make_pipeline(**pipeline_kwargs)
        monkeypatch.setattr(main, "get_pipeline", lambda: pipeline)
        return TestClient(main.app), transport
    return _client


def wait_loaded(client, session_id, attempts=100):
    for _ in range(attempts):
        view = client.get(f"/api/sessions/{session_id}").json()
        if not view["loading"]:
            return view
        time.sleep(0.01)
    raise AssertionError("query never finished")


def pointer(client, session_id, kind, target):
    response = client.post(f"/api/sessions/{session_id}/pointer", json={"kind": kind, "target": target})
    assert response.status_code == 200
    return response.json()


def test_health_and_root(client_for):
    client, _ = client_for(content="[]")
    with client:
        assert client.get("/health").json()["status"] == "healthy"
        assert client.get("/").json()["name"] == "NeuroMuscle API"


def test_list_regions(client_for):
    client, _ = client_for(content="[]")
    with client:
        regions = client.get("/api/regions").json()
        ids = [r["id"] for r in regions]
        assert "lats" in ids and "torso" in ids

        backs = client.get("/api/regions", params={"group": "back"}).json()
        assert backs and all(r["group"] == "back" for r in backs)

        decorative = client.get("/api/regions", params={"interactive": "false"}).json()
        assert decorative and not any(r["interactive"] for r in decorative)


def test_get_region(client_for):
    client, _ = client_for(content="[]")
    with client:
        lats = client.get("/api/regions/lats").json()
        assert lats["display_name"] == "背阔肌"
        assert client.get("/api/regions/nope").status_code == 404


def test_click_runs_query(client_for):
    content = json.dumps([{"name": "Pull-up", "volume": "4 x 8", "score": 9}])
    client, transport = client_for(content=content)
    with client:
        session_id = client.post("/api/sessions").json()["session_id"]

        hovered = pointer(client, session_id, "enter", "lats.left")
        assert hovered["region_id"] == "lats"
        assert hovered["query_started"] is False
        assert hovered["view"]["selection"]["hovered"] == "lats"

        clicked = pointer(client, session_id, "click", "lats.right")
        assert clicked["query_started"] is True
        assert clicked["view"]["title"] == "背阔肌 (Lats)"

        view = wait_loaded(client, session_id)
        assert view["outcome"]["kind"] == "success"
        assert view["outcome"]["exercises"][0]["name"] == "Pull-up"
        assert len(transport.calls) == 1


def test_missing_credential_reported(client_for):
    client, transport = client_for(content="[]", api_key="")
    with client:
        session_id = client.post("/api/sessions").json()["session_id"]
        pointer(client, session_id, "click", "quads")

        view = wait_loaded(client, session_id)
        assert view["outcome"]["kind"] == "failure"
        assert view["outcome"]["failure"]["reason"] == "missing_credential"
        assert transport.calls == []


def test_click_on_decorative_region_is_ignored(client_for):
    client, transport = client_for(content="[]")
    with client:
        session_id = client.post("/api/sessions").json()["session_id"]
        body = pointer(client, session_id, "click", "torso")
        assert body["query_started"] is False
        assert body["view"]["selection"]["selected"] is None
        assert transport.calls == []


def test_scene(client_for):
    client, _ = client_for(content="[]")
    with client:
        session_id = client.post("/api/sessions").json()["session_id"]
        pointer(client, session_id, "click", "quads.left")
        wait_loaded(client, session_id)

        draws = client.get(f"/api/sessions/{session_id}/scene", params={"t": 0.0}).json()
        by_key = {d["key"]: d for d in draws}
        assert by_key["quads.left"]["state"] == "selected"
        assert by_key["quads.left"]["visuals"]["pulsing"] is True
        assert 0.4 <= by_key["quads.left"]["visuals"]["emissive_intensity"] <= 0.8
        assert by_key["torso"]["state"] == "static"


def test_unknown_session(client_for):
    client, _ = client_for(content="[]")
    with client:
        assert client.get("/api/sessions/missing").status_code == 404
        response = client.post("/api/sessions/missing/pointer", json={"kind": "click", "target": "lats"})
        assert response.status_code == 404


def test_delete_session(client_for):
    client, _ = client_for(content="[]")
    with client:
        session_id = client.post("/api/sessions").json()["session_id"]
        assert client.delete(f"/api/sessions/{session_id}").status_code == 200
        assert client.get(f"/api/sessions/{session_id}").status_code == 404


def test_oldest_session_evicted_past_limit(client_for, monkeypatch):
    monkeypatch.setattr(main.settings, "MAX_SESSIONS", 2)
    client, _ = client_for(content="[]")
    with client:
        ids = [client.post("/api/sessions").json()["session_id"] for _ in range(3)]
        assert client.get(f"/api/sessions/{ids[0]}").status_code == 404
        assert client.get(f"/api/sessions/{ids[1]}").status_code == 200
        assert client.get(f"/api/sessions/{ids[2]}").status_code == 200
