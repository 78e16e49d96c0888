"""Integration-focused tests for the Travel Guide FastAPI surface."""
from __future__ import annotations

import json
from typing import Any, Dict, List, Mapping

import pytest
from fastapi.testclient import TestClient

from travel_guide.api import app as api_app
from travel_guide.core.schemas import ResearchEvent, ToolResult
from travel_guide.workflows.research import ResearchOrchestrator


class StubRegistry:
    """Minimal registry: search and country lookups succeed, everything else fails."""

    def __init__(self) -> None:
        self.calls: List[str] = []

    async def invoke(self, name: str, args: Mapping[str, Any]) -> ToolResult:
        self.calls.append(name)
        if name == "search_destination":
            return ToolResult.ok({"country": "Portugal", "coordinates": {"lat": 38.72, "lng": -9.14}})
        if name == "get_country_info":
            return ToolResult.ok({"name": "Portugal", "currency": {"code": "EUR"}, "languages": ["Portuguese"]})
        return ToolResult.failed(f"{name} unavailable")

    def catalog(self) -> List[Dict[str, Any]]:
        return [
            {
                "name": "search_destination",
                "label": "Researching destination",
                "description": "Geocode a destination.",
                "adapters": ["nominatim"],
                "inputSchema": {"type": "object"},
            }
        ]


class ExplodingOrchestrator:
    async def run(self, destination, *, is_cancelled=None):
        yield ResearchEvent.progress(5)
        raise RuntimeError("upstream meltdown")


class StubService:
    def __init__(self) -> None:
        self.registry = StubRegistry()
        self.orchestrator = ResearchOrchestrator(self.registry, step_delay_s=0)


@pytest.fixture
def stub_service(monkeypatch) -> StubService:
    service = StubService()
    monkeypatch.setattr(api_app, "get_research_service", lambda: service)
    return service


@pytest.fixture
def client(stub_service: StubService) -> TestClient:
    with TestClient(api_app.app) as test_client:
        yield test_client


def _lines(response) -> List[Dict[str, Any]]:
    return [json.loads(line) for line in response.text.splitlines() if line.strip()]


def test_health(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "service": "travel-guide-api"}


def test_research_streams_events_until_complete(client: TestClient, stub_service: StubService) -> None:
    response = client.post("/research", json={"destination": "Lisbon"})

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/event-stream")
    assert response.headers["cache-control"] == "no-cache"

    events = _lines(response)
    assert events[0]["type"] == "step"
    assert events[1] == {"type": "progress", "data": {"progress": 5}}
    assert events[-1]["type"] == "complete"
    assert {event["type"] for event in events} == {"step", "tool_call", "progress", "complete"}

    guide = events[-1]["data"]["guide"]
    assert guide["destination"] == "Lisbon"
    assert guide["country"] == "Portugal"
    assert guide["theme"] == "portugal"
    assert guide["overview"]["currency"] == "EUR"
    assert guide["mapData"][0]["coordinates"] == {"lat": 38.72, "lng": -9.14}
    assert len(stub_service.registry.calls) == 12


def test_research_without_destination_streams_error(client: TestClient, stub_service: StubService) -> None:
    response = client.post("/research", json={})

    assert response.status_code == 200
    assert _lines(response) == [{"type": "error", "data": {"error": "Destination is required"}}]
    assert stub_service.registry.calls == []


def test_research_failure_mid_stream_becomes_error_line(client: TestClient, stub_service: StubService) -> None:
    stub_service.orchestrator = ExplodingOrchestrator()

    response = client.post("/research", json={"destination": "Lisbon"})

    events = _lines(response)
    assert events[0] == {"type": "progress", "data": {"progress": 5}}
    assert events[-1] == {"type": "error", "data": {"error": "upstream meltdown"}}


def test_tools_catalog(client: TestClient) -> None:
    response = client.get("/tools")

    assert response.status_code == 200
    body = response.json()
    assert body[0]["name"] == "search_destination"
    assert body[0]["inputSchema"] == {"type": "object"}


def test_steps(client: TestClient) -> None:
    response = client.get("/steps")

    assert response.status_code == 200
    steps = response.json()
    assert [step["id"] for step in steps][:3] == ["init", "overview", "cities"]
    assert steps[-1]["id"] == "synthesize"
    assert all(step["status"] == "pending" and step["toolCalls"] == [] for step in steps)
