"""Shared fixtures for the Perplexity Search MCP tests.

HTTP traffic never leaves the process: clients are built on
``httpx.MockTransport`` and record every request they receive.
"""

from __future__ import annotations

import json
from typing import Any, Callable

import httpx
import pytest

from api import PerplexityClient
from core import SearchSession, ToolDispatcher


class RecordingTransport(httpx.MockTransport):
    """Mock transport that answers with a canned response and keeps requests."""

    def __init__(self, status_code: int = 200, body: Any = None):
        self.requests: list[httpx.Request] = []
        self.status_code = status_code
        self.body = body if body is not None else answer("ok")
        super().__init__(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if isinstance(self.body, (dict, list)):
            return httpx.Response(self.status_code, json=self.body)
        return httpx.Response(self.status_code, text=str(self.body))

    @property
    def last_payload(self) -> dict[str, Any]:
        return json.loads(self.requests[-1].content)


def answer(content: str) -> dict[str, Any]:
    """Minimal chat-completions body with a single choice."""
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def make_client() -> Callable[[RecordingTransport], PerplexityClient]:
    def _make(transport: RecordingTransport) -> PerplexityClient:
        return PerplexityClient(
            "test_key", base_url="https://api.perplexity.test", transport=transport
        )

    return _make


@pytest.fixture
def session() -> SearchSession:
    return SearchSession(default_model="sonar-pro")


@pytest.fixture
def dispatcher(session, transport, make_client) -> ToolDispatcher:
    return ToolDispatcher(session, make_client(transport))


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Empty Perplexity environment, run from a directory without a .env file."""
    for name in (
        "PERPLEXITY_API_KEY",
        "PERPLEXITY_MODEL",
        "PERPLEXITY_API_URL",
        "PERPLEXITY_TIMEOUT",
        "PERPLEXITY_LOG_LEVEL",
    ):
        # setenv first so anything a .env file loads is undone afterwards
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    return monkeypatch
