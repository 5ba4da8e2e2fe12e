from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import Mock

import pytest
import requests
from fastapi.testclient import TestClient

from workflow_runner.config import LLMConfig, RunnerSettings
from workflow_runner.llm.huggingface_provider import HuggingFaceProvider
from workflow_runner.llm.provider import LLMConfigurationError, LLMRequestError
from workflow_runner.server.app import create_app
from workflow_runner.server.config import ServerSettings
from workflow_runner.workflows.executor import StepExecutor


@pytest.fixture
def client(monkeypatch, tmp_path: Path, fake_llm, http_session) -> TestClient:
    monkeypatch.setenv("WORKFLOW_STATE_PATH", str(tmp_path / "agent_state"))
    monkeypatch.setenv("WORKFLOW_UI_DIST", str(tmp_path / "ui" / "dist"))

    app = create_app(RunnerSettings(_env_file=None), ServerSettings(_env_file=None))
    # Swap the network-facing pieces for fakes.
    app.state.executor = StepExecutor(llm=fake_llm, session=http_session)
    return TestClient(app)


def _shout_workflow() -> dict[str, object]:
    return {
        "name": "Shout",
        "steps": [
            {"id": "b", "type": "TRANSFORM_TEXT", "order": 2, "config": {"inputField": "msg"}},
            {
                "id": "a",
                "type": "ECHO",
                "order": 1,
                "config": {"message": "hey", "outputField": "msg"},
            },
        ],
    }


def test_health_and_root(client: TestClient) -> None:
    assert client.get("/api/health").json() == {"status": "ok"}

    root = client.get("/")
    assert root.status_code == 200
    assert "Server is running" in root.text

    assert client.get("/api/unknown").status_code == 404


def test_workflow_crud(client: TestClient) -> None:
    created = client.post("/api/workflows", json=_shout_workflow())
    assert created.status_code == 201
    workflow = created.json()
    assert workflow["trigger"] == "manual"
    assert [s["id"] for s in workflow["steps"]] == ["b", "a"]

    listed = client.get("/api/workflows").json()
    assert [w["_id"] for w in listed] == [workflow["_id"]]

    updated = client.put(
        f"/api/workflows/{workflow['_id']}", json={"name": "Loud", "description": "x"}
    ).json()
    assert updated["name"] == "Loud"
    assert updated["description"] == "x"
    assert len(updated["steps"]) == 2

    assert client.get(f"/api/workflows/{workflow['_id']}").json()["name"] == "Loud"

    assert client.delete(f"/api/workflows/{workflow['_id']}").status_code == 204
    assert client.get(f"/api/workflows/{workflow['_id']}").status_code == 404
    assert client.delete(f"/api/workflows/{workflow['_id']}").status_code == 404


def test_create_rejects_unknown_step_type(client: TestClient) -> None:
    resp = client.post(
        "/api/workflows",
        json={"name": "Bad", "steps": [{"id": "s", "type": "SEND_EMAIL", "order": 1}]},
    )
    assert resp.status_code == 422


def test_run_workflow_endpoint(client: TestClient) -> None:
    workflow_id = client.post("/api/workflows", json=_shout_workflow()).json()["_id"]

    resp = client.post(f"/api/workflows/{workflow_id}/run", json={"seed": True})

    assert resp.status_code == 200
    assert resp.json() == {
        "workflowId": workflow_id,
        "context": {"seed": True, "msg": "HEY"},
        "stepsRun": [
            {"id": "a", "type": "ECHO", "status": "success", "error": None},
            {"id": "b", "type": "TRANSFORM_TEXT", "status": "success", "error": None},
        ],
    }


def test_run_with_non_object_body_uses_empty_context(client: TestClient) -> None:
    workflow_id = client.post("/api/workflows", json=_shout_workflow()).json()["_id"]

    for kwargs in ({"json": [1, 2, 3]}, {}):
        body = client.post(f"/api/workflows/{workflow_id}/run", **kwargs).json()
        assert body["context"] == {"msg": "HEY"}


def test_run_reports_step_error(client: TestClient, fake_llm) -> None:
    fake_llm.error = LLMRequestError("HuggingFace API error: 401 Unauthorized: bad token")
    workflow_id = client.post(
        "/api/workflows",
        json={
            "name": "Prompt",
            "steps": [
                {"id": "p", "type": "LLM_GENERAL", "order": 1, "config": {"promptTemplate": "x"}},
                {"id": "e", "type": "ECHO", "order": 2},
            ],
        },
    ).json()["_id"]

    body = client.post(f"/api/workflows/{workflow_id}/run", json={"k": "v"}).json()

    assert body["context"] == {"k": "v"}
    assert len(body["stepsRun"]) == 1
    assert body["stepsRun"][0]["status"] == "error"
    assert "401" in body["stepsRun"][0]["error"]


def test_run_unknown_workflow(client: TestClient) -> None:
    resp = client.post("/api/workflows/does-not-exist/run", json={})
    assert resp.status_code == 404
    assert resp.json()["error"] == "Workflow not found"


def test_sample_workflow_summarizes_url(client: TestClient, fake_llm) -> None:
    fake_llm.reply = "- sample summary"
    sample = client.post("/api/workflows/sample").json()
    assert sample["name"] == "Sample: Summarize URL"
    assert [s["type"] for s in sample["steps"]] == ["FETCH_URL", "LLM_SUMMARIZE"]

    body = client.post(
        f"/api/workflows/{sample['_id']}/run", json={"url": "https://example.com"}
    ).json()

    assert body["context"]["pageContent"] == "Hello"
    assert body["context"]["summary"] == "- sample summary"


def test_test_llm_endpoint(client: TestClient, fake_llm) -> None:
    resp = client.post("/api/test-llm", json={"prompt": "ping"})

    assert resp.json() == {"prompt": "ping", "result": "LLM reply"}
    assert client.post("/api/test-llm", json={}).status_code == 422

    fake_llm.error = LLMConfigurationError("HF_API_TOKEN is missing")
    assert client.post("/api/test-llm", json={"prompt": "ping"}).status_code == 503

    fake_llm.error = LLMRequestError("HuggingFace API error: 500")
    assert client.post("/api/test-llm", json={"prompt": "ping"}).status_code == 502


def test_summarize_url_endpoint(client: TestClient, http_session, response_factory) -> None:
    resp = client.post("/api/summarize-url", json={"url": "https://example.com"})
    assert resp.json() == {"url": "https://example.com", "summary": "LLM reply"}

    http_session.get.return_value = response_factory(500, "oops")
    failed = client.post("/api/summarize-url", json={"url": "https://example.com"})
    assert failed.status_code == 400
    assert failed.json()["error"] == "Failed to fetch URL"


def test_serves_built_ui(monkeypatch, tmp_path: Path) -> None:
    dist = tmp_path / "ui" / "dist"
    (dist / "assets").mkdir(parents=True)
    (dist / "index.html").write_text("<html>app</html>", encoding="utf-8")
    (dist / "assets" / "app.js").write_text("console.log(1)", encoding="utf-8")
    monkeypatch.setenv("WORKFLOW_UI_DIST", str(dist))
    monkeypatch.setenv("WORKFLOW_STATE_PATH", str(tmp_path / "agent_state"))

    client = TestClient(create_app(RunnerSettings(_env_file=None), ServerSettings(_env_file=None)))

    assert client.get("/").text == "<html>app</html>"
    assert client.get("/workflows/123").text == "<html>app</html>"
    assert client.get("/assets/app.js").text == "console.log(1)"


def test_ui_fallback_stays_inside_bundle(monkeypatch, tmp_path: Path) -> None:
    dist = tmp_path / "ui" / "dist"
    dist.mkdir(parents=True)
    (dist / "index.html").write_text("<html>app</html>", encoding="utf-8")
    (dist / "robots.txt").write_text("User-agent: *", encoding="utf-8")
    (tmp_path / "secret.txt").write_text("TOP SECRET", encoding="utf-8")
    monkeypatch.setenv("WORKFLOW_UI_DIST", str(dist))
    monkeypatch.setenv("WORKFLOW_STATE_PATH", str(tmp_path / "agent_state"))

    client = TestClient(create_app(RunnerSettings(_env_file=None), ServerSettings(_env_file=None)))

    assert client.get("/robots.txt").text == "User-agent: *"
    for path in ("/%2e%2e/%2e%2e/secret.txt", "/..%2f..%2fsecret.txt"):
        resp = client.get(path)
        assert "TOP SECRET" not in resp.text
        assert resp.text == "<html>app</html>"


def test_workflow_documents_use_client_field_names(client: TestClient, tmp_path: Path) -> None:
    created = client.post("/api/workflows", json=_shout_workflow()).json()

    assert {"_id", "createdAt", "updatedAt"} <= created.keys()
    assert not {"id", "created_at", "updated_at"} & created.keys()

    state_file = tmp_path / "agent_state" / "workflows.json"
    stored = json.loads(state_file.read_text(encoding="utf-8"))
    assert stored[0]["_id"] == created["_id"]
    assert stored[0]["createdAt"] == created["createdAt"]


def test_error_bodies_use_error_key(client: TestClient) -> None:
    missing = client.get("/api/workflows/nope")
    assert missing.json() == {"error": "Workflow not found"}

    invalid = client.post("/api/test-llm", json={})
    assert invalid.status_code == 422
    assert invalid.json()["error"] == "Invalid request"
    assert invalid.json()["details"]

    assert client.get("/api/unknown").json() == {"error": "Not Found"}


def test_llm_connection_failure_maps_to_bad_gateway(client: TestClient, http_session) -> None:
    llm_config = LLMConfig(_env_file=None, hf_api_token="hf-test")
    llm_session = Mock(spec=requests.Session)
    llm_session.post.side_effect = requests.ConnectionError("connection refused")
    client.app.state.executor = StepExecutor(
        llm=HuggingFaceProvider(llm_config, session=llm_session), session=http_session
    )

    resp = client.post("/api/test-llm", json={"prompt": "ping"})
    assert resp.status_code == 502
    assert "connection refused" in resp.json()["error"]

    resp = client.post("/api/summarize-url", json={"url": "https://example.com"})
    assert resp.status_code == 502
