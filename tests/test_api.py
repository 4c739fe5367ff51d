# tests/test_api.py
"""
HTTP tests for the lottery matching backend.

Covers:
- health endpoint
- stateless matching endpoint (camelCase and snake_case bodies)
- run execute / cancel endpoints and their error mapping
"""
import httpx
import pytest
from httpx import ASGITransport

from lottery.domain.matching import ALGORITHM_VERSION
from lottery.main import app

BASE_URL = "http://test"


@pytest.fixture
async def async_client():
    transport = ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url=BASE_URL) as client:
        yield client


@pytest.mark.anyio
async def test_health(async_client):
    resp = await async_client.get("/api/v1/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


@pytest.mark.anyio
async def test_matching_endpoint_camel_case(async_client):
    body = {
        "participantIds": ["a", "b", "c", "d"],
        "groupSizeMin": 2,
        "groupSizeMax": 2,
        "recentMatches": [],
        "seed": "run-42",
    }
    resp = await async_client.post("/api/v1/matching", json=body)
    assert resp.status_code == 200
    data = resp.json()
    assert data["algorithmVersion"] == ALGORITHM_VERSION
    assert len(data["matches"]) == 2
    assert data["unmatched"] == []

    # same seed, same answer
    again = await async_client.post("/api/v1/matching", json=body)
    assert again.json() == data


@pytest.mark.anyio
async def test_matching_endpoint_normalizes_bounds(async_client):
    resp = await async_client.post("/api/v1/matching", json={
        "participant_ids": ["a", "b", "c", "d", "e"],
        "group_size_min": 5,
        "group_size_max": 1,
        "seed": "swapped",
    })
    assert resp.status_code == 200
    data = resp.json()
    assert [len(g) for g in data["matches"]] == [2, 2]
    assert len(data["unmatched"]) == 1


@pytest.mark.anyio
async def test_matching_endpoint_rejects_malformed_body(async_client):
    resp = await async_client.post("/api/v1/matching", json={"participantIds": "abc"})
    assert resp.status_code == 422


@pytest.mark.anyio
async def test_execute_run(async_client):
    resp = await async_client.post("/api/v1/runs/run-7/execute", json={
        "lottery": {"groupSizeMin": 2, "groupSizeMax": 3, "repeatWindowRuns": 2},
        "participations": [
            {"userId": "a", "status": "confirmed"},
            {"userId": "b", "status": "confirmed"},
            {"userId": "c", "status": "confirmed"},
            {"userId": "d", "status": "declined"},
        ],
        "recentMatches": [
            {"runId": "run-6", "memberIds": ["a", "b"], "createdAt": "2025-03-01T12:00:00Z"},
        ],
    })
    assert resp.status_code == 200
    data = resp.json()
    assert data["runId"] == "run-7"
    assert data["status"] == "matched"
    assert data["outcome"] == "matched"
    assert data["confirmedCount"] == 3
    assert sorted(data["matches"][0]["memberIds"]) == ["a", "b", "c"]


@pytest.mark.anyio
async def test_execute_run_rejects_invalid_lottery(async_client):
    resp = await async_client.post("/api/v1/runs/run-8/execute", json={
        "lottery": {"groupSizeMin": 4, "groupSizeMax": 2},
    })
    assert resp.status_code == 422


@pytest.mark.anyio
async def test_execute_canceled_run(async_client):
    resp = await async_client.post("/api/v1/runs/run-9/execute", json={"status": "canceled"})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Canceled runs cannot be executed"


@pytest.mark.anyio
async def test_cancel_run(async_client):
    resp = await async_client.post("/api/v1/runs/run-10/cancel", json={"status": "scheduled", "reason": "holiday"})
    assert resp.status_code == 200
    assert resp.json() == {"run_id": "run-10", "status": "canceled", "reason": "holiday"}

    resp = await async_client.post("/api/v1/runs/run-10/cancel", json={"status": "matched"})
    assert resp.status_code == 400


@pytest.mark.anyio
async def test_matching_endpoint_lone_surrogate_seed(async_client):
    resp = await async_client.post(
        "/api/v1/matching",
        content=b'{"participantIds": ["a", "b"], "groupSizeMin": 2, "groupSizeMax": 2, "seed": "\\ud800"}',
        headers={"Content-Type": "application/json"},
    )
    assert resp.status_code == 200
    assert sorted(resp.json()["matches"][0]) == ["a", "b"]


@pytest.mark.anyio
async def test_execute_run_mixed_timezone_history(async_client):
    resp = await async_client.post("/api/v1/runs/r1/execute", json={
        "lottery": {"groupSizeMin": 2, "groupSizeMax": 2},
        "participations": [{"userId": u} for u in ["a", "b", "c", "d"]],
        "recentMatches": [
            {"memberIds": ["a", "b"], "createdAt": "2025-03-01T12:00:00Z"},
            {"memberIds": ["c", "d"], "createdAt": "2025-03-02T12:00:00"},
        ],
    })
    assert resp.status_code == 200
    data = resp.json()
    assert data["outcome"] == "matched"
    assert sorted(pid for m in data["matches"] for pid in m["memberIds"]) == ["a", "b", "c", "d"]
