"""Test configuration and fixtures."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import Mock

import pytest
import requests

from workflow_runner.llm.provider import LLMProvider
from workflow_runner.workflows.executor import StepExecutor
from workflow_runner.workflows.store import WorkflowStore

_ENV_VARS = (
    "LLM_PROVIDER",
    "HF_API_TOKEN",
    "HF_CHAT_URL",
    "HF_MODEL",
    "OPENAI_API_KEY",
    "OPENAI_MODEL",
    "OPENAI_BASE_URL",
    "LLM_MAX_TOKENS",
    "LLM_TIMEOUT_SECONDS",
    "LOG_LEVEL",
    "WORKFLOW_STATE_PATH",
    "FETCH_TIMEOUT_SECONDS",
    "FETCH_USER_AGENT",
    "FETCH_MAX_CHARS",
    "HOST",
    "PORT",
    "WORKFLOW_UI_DIST",
    "WORKFLOW_CORS_ORIGINS",
)


class FakeLLM(LLMProvider):
    """Records every chat call and answers with a canned reply."""

    def __init__(self, reply: str = "LLM reply", error: Exception | None = None) -> None:
        self.reply = reply
        self.error = error
        self.calls: list[dict[str, object]] = []

    def chat(
        self,
        messages: list[dict[str, str]],
        max_tokens: int | None = None,
    ) -> str:
        self.calls.append({"messages": messages, "max_tokens": max_tokens})
        if self.error is not None:
            raise self.error
        return self.reply


def make_response(status_code: int = 200, text: str = "", json_body: object = None) -> Mock:
    resp = Mock(spec=requests.Response)
    resp.status_code = status_code
    resp.ok = 200 <= status_code < 400
    resp.reason = "OK" if resp.ok else "Error"
    resp.text = text
    resp.json.return_value = json_body
    return resp


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """Run every test from an empty directory with no runner env vars set.

    This keeps a developer's `.env` and shell settings out of the tests.
    """

    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    workdir = tmp_path / "cwd"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    return workdir


@pytest.fixture
def fake_llm() -> FakeLLM:
    return FakeLLM()


@pytest.fixture
def http_session() -> Mock:
    session = Mock(spec=requests.Session)
    session.headers = {}
    session.get.return_value = make_response(200, "<html><body><p>Hello</p></body></html>")
    return session


@pytest.fixture
def executor(fake_llm: FakeLLM, http_session: Mock) -> StepExecutor:
    return StepExecutor(llm=fake_llm, session=http_session)


@pytest.fixture
def store(tmp_path: Path) -> WorkflowStore:
    return WorkflowStore(tmp_path / "agent_state" / "workflows.json")


@pytest.fixture
def response_factory():
    """Build fake `requests.Response` objects."""
    return make_response


@pytest.fixture
def llm_factory():
    """Build `FakeLLM` instances with a custom reply or error."""
    return FakeLLM
