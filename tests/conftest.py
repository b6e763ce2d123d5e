from __future__ import annotations

import json
import os
from types import SimpleNamespace
from typing import Any, Callable, Dict, List, Optional

# Pin configuration before anything under xcollab is imported
os.environ["LLM_PROVIDER"] = "mock"
os.environ["OPENAI_API_KEY"] = ""
os.environ["SUPABASE_URL"] = ""
os.environ["SUPABASE_KEY"] = ""
os.environ["SUPABASE_SERVICE_KEY"] = ""
os.environ["PROPOSAL_COOLDOWN_SECONDS"] = "25"
os.environ["HACKATHON_LIST_LIMIT"] = "5"

import httpx
import pytest
from fastapi.testclient import TestClient


HACKATHONS: List[Dict[str, Any]] = [
    {
        "id": "hk-1",
        "title": "Green Code Jam",
        "description": "Build tools for sustainable computing.",
        "tracks": ["Climate", "Open Data"],
        "start_date": "2025-03-05",
        "end_date": "2025-03-07T18:00:00Z",
        "min_team_size": 2,
        "max_team_size": 2,
    },
    {
        "id": 42,
        "title": "Campus AI Sprint",
        "description": "Two days of applied AI.",
        "tracks": None,
        "start_date": "2025-04-01",
        "end_date": "2025-04-02",
    },
]


class FakeQuery:
    """Records the PostgREST builder chain and filters the fake rows."""

    def __init__(self, rows: List[Dict[str, Any]], calls: List[tuple], error: Optional[Exception]):
        self._rows = rows
        self._calls = calls
        self._error = error
        self._limit: Optional[int] = None
        self._filters: List[tuple] = []

    def select(self, columns: str):
        self._calls.append(("select", columns))
        return self

    def eq(self, column: str, value: Any):
        self._calls.append(("eq", column, value))
        self._filters.append((column, value))
        return self

    def limit(self, n: int):
        self._calls.append(("limit", n))
        self._limit = n
        return self

    def execute(self):
        if self._error is not None:
            raise self._error
        rows = [
            r for r in self._rows
            if all(str(r.get(col)) == str(val) for col, val in self._filters)
        ]
        if self._limit is not None:
            rows = rows[: self._limit]
        return SimpleNamespace(data=rows)


class FakeSupabase:
    def __init__(self, rows: List[Dict[str, Any]], error: Optional[Exception] = None):
        self.rows = rows
        self.error = error
        self.calls: List[tuple] = []

    def table(self, name: str) -> FakeQuery:
        self.calls.append(("table", name))
        return FakeQuery(self.rows, self.calls, self.error)


@pytest.fixture
def fake_supabase(monkeypatch):
    """Install a fake Supabase client seeded with HACKATHONS; returns the fake."""
    import xcollab.data_client.hackathon_client as hackathon_client

    fake = FakeSupabase([dict(r) for r in HACKATHONS])
    monkeypatch.setattr(hackathon_client, "get_supabase", lambda: fake)
    return fake


def completion(content: str) -> Dict[str, Any]:
    return {"choices": [{"index": 0, "message": {"role": "assistant", "content": content}}]}


@pytest.fixture
def install_llm(monkeypatch) -> Callable[[Callable[[httpx.Request], httpx.Response]], List[Dict[str, Any]]]:
    """
    Route the agent's LLM calls through an httpx.MockTransport.

    Returns a list that collects the decoded JSON payload of every request.
    """
    from xcollab.llm_client import llm_agent
    from xcollab.llm_client.llm_client import LLMClient

    def _install(handler: Callable[[httpx.Request], httpx.Response]) -> List[Dict[str, Any]]:
        seen: List[Dict[str, Any]] = []

        def _recording(request: httpx.Request) -> httpx.Response:
            seen.append(json.loads(request.content))
            return handler(request)

        llm = LLMClient(provider="openai", api_key="sk-test", transport=httpx.MockTransport(_recording))
        monkeypatch.setattr(llm_agent, "_llm", llm)
        return seen

    return _install


@pytest.fixture
def client() -> TestClient:
    from xcollab.main import app
    from xcollab.routes.page_routes import proposal_throttle

    proposal_throttle.reset()
    return TestClient(app)


@pytest.fixture(autouse=True)
def fresh_llm_breaker(monkeypatch):
    """Give every test a closed circuit breaker and retries without sleeping."""
    from datetime import timedelta

    from aiobreaker import CircuitBreaker
    from tenacity import wait_none

    from xcollab.llm_client import llm_client

    fresh = CircuitBreaker(
        fail_max=llm_client.breaker.fail_max,
        timeout_duration=timedelta(seconds=30),
        exclude=(httpx.HTTPStatusError,),
    )
    monkeypatch.setattr(llm_client, "breaker", fresh)
    monkeypatch.setattr(llm_client._post_with_retry.retry, "wait", wait_none())
    return fresh
