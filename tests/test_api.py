import asyncio
import io
import time

import openpyxl
import pytest
from fastapi.testclient import TestClient

from weldmaster.api.dependencies import get_session
from weldmaster.api.endpoints.session import parse_reading
from weldmaster.main import app
from weldmaster.services.weld_engine import SessionState


async def _slow_analyzer(system_prompt, user_prompt, credential):
    await asyncio.sleep(0.2)
    return f"analysis with {credential}"


@pytest.fixture
def state(clock):
    return SessionState(clock=clock, analyzer=_slow_analyzer)


@pytest.fixture
def client(state, monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    app.dependency_overrides[get_session] = lambda: state
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def _prepare_pass(client, clock):
    client.patch("/api/session/parameters", json={"voltage": 20, "current": 150, "length": 100})
    client.post("/api/session/timer/start")
    clock.advance(10)
    client.post("/api/session/timer/stop")


def _wait_until_idle(client, timeout=5.0):
    deadline = time.monotonic() + timeout
    data = client.get("/api/analysis").json()
    while data["status"] != "idle" and time.monotonic() < deadline:
        time.sleep(0.05)
        data = client.get("/api/analysis").json()
    return data


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_snapshot_defaults(client):
    data = client.get("/api/session").json()
    assert data["process"] == "MIG_MAG"
    assert data["heat_input"] is None
    assert data["pass_count"] == 0


def test_list_processes(client):
    data = client.get("/api/session/processes").json()
    assert {p["id"] for p in data} == {"MMA", "MIG_MAG", "TIG", "SAW", "FCAW"}


def test_set_process(client):
    response = client.put("/api/session/process", json={"process": "TIG"})
    assert response.status_code == 200
    assert response.json()["efficiency"] == 0.6

    assert client.put("/api/session/process", json={"process": "LASER"}).status_code == 422


@pytest.mark.parametrize(
    "raw, expected",
    [("12,5", 12.5), (" 20 ", 20.0), ("abc", 0.0), ("", 0.0), (7, 7.0)],
)
def test_parse_reading(raw, expected):
    assert parse_reading(raw) == expected


def test_textual_parameters(client):
    response = client.patch(
        "/api/session/parameters",
        json={"voltage": "22,5", "current": "oops", "length": 80},
    )
    data = response.json()
    assert response.status_code == 200
    assert data["voltage"] == 22.5
    assert data["current"] == 0.0
    assert data["length"] == 80.0


def test_negative_parameters_rejected_atomically(client):
    response = client.patch("/api/session/parameters", json={"voltage": 20, "length": -5})
    assert response.status_code == 422
    assert client.get("/api/session").json()["voltage"] == 0.0


def test_timer_flow(client, clock):
    assert client.post("/api/session/timer/start").json()["changed"] is True
    assert client.post("/api/session/timer/start").json()["changed"] is False
    clock.advance(2.5)
    data = client.post("/api/session/timer/stop").json()
    assert data["is_running"] is False
    assert data["elapsed_time"] == pytest.approx(2.5)

    assert client.post("/api/session/timer/toggle").json()["is_running"] is True
    assert client.put("/api/session/timer", json={"seconds": 4}).status_code == 409
    client.post("/api/session/timer/toggle")

    response = client.put("/api/session/timer", json={"seconds": 4})
    assert response.status_code == 200
    assert response.json()["elapsed_time"] == 4.0

    assert client.post("/api/session/timer/reset").json()["elapsed_time"] == 0.0


def test_stream_ends_when_timer_stopped(client):
    response = client.get("/api/session/stream")
    assert response.status_code == 200
    assert response.text.startswith("data: ")
    assert response.text.count("data: ") == 1


def test_commit_list_delete(client, clock):
    assert client.post("/api/passes").status_code == 409

    _prepare_pass(client, clock)
    response = client.post("/api/passes")
    assert response.status_code == 201
    created = response.json()
    assert created["heat_input"] == pytest.approx(0.24)
    assert created["process_label"] == "MIG/MAG (131/135)"

    listed = client.get("/api/passes").json()
    assert [p["id"] for p in listed] == [created["id"]]

    assert client.delete(f"/api/passes/{created['id']}").status_code == 204
    assert client.delete("/api/passes/unknown").status_code == 204
    assert client.get("/api/passes").json() == []


def test_export(client, clock):
    assert client.get("/api/passes/export").status_code == 404

    _prepare_pass(client, clock)
    client.post("/api/passes")
    response = client.get("/api/passes/export")

    assert response.status_code == 200
    assert "weld_report_" in response.headers["content-disposition"]
    ws = openpyxl.load_workbook(io.BytesIO(response.content)).active
    assert ws.max_row == 2
    assert ws.cell(row=2, column=9).value == pytest.approx(0.24)


def test_analysis_preconditions(client, clock):
    # No heat input yet
    assert client.post("/api/analysis", json={"credential": "key"}).status_code == 409

    _prepare_pass(client, clock)
    response = client.post("/api/analysis", json={"credential": ""})
    assert response.status_code == 400
    assert client.get("/api/analysis").json()["status"] == "idle"


def test_analysis_runs_and_rejects_concurrent_request(client, clock):
    _prepare_pass(client, clock)

    response = client.post("/api/analysis", json={"credential": "key"})
    assert response.status_code == 202
    assert response.json()["status"] == "in_flight"

    assert client.post("/api/analysis", json={"credential": "key"}).status_code == 409

    data = _wait_until_idle(client)
    assert data["status"] == "idle"
    assert data["result"] == "analysis with key"
    assert data["failed"] is False


def test_analysis_uses_configured_credential(client, clock, monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "env-key")
    _prepare_pass(client, clock)
    assert client.post("/api/analysis").status_code == 202
    assert _wait_until_idle(client)["result"] == "analysis with env-key"
