"""
evolink — HTTP Control Surface Tests

Copyright (c) 2026 SolisHQ (github.com/solishq). MIT License.
"""

import asyncio

import httpx
import pytest
from fastapi.testclient import TestClient

from evolink import server
from evolink.snapshot import GenerationDump

SMALL_WORLD = {
    "width": 30,
    "height": 30,
    "population_size": 25,
    "turns_per_generation": 4,
    "neuron_count": 2,
    "max_links": 6,
    "mutation_rate": 0.05,
    "seed": 9,
}


@pytest.fixture
def client():
    """Fresh module state per test."""
    server.world = None
    server.auto_running = False
    server.auto_task = None
    server._world_lock = asyncio.Lock()
    with TestClient(server.app) as c:
        yield c
    server.world = None


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


@pytest.mark.parametrize("method,path", [
    ("get", "/sim/state"),
    ("get", "/sim/dump"),
    ("get", "/sim/history"),
    ("post", "/sim/turn"),
])
def test_requires_simulation(client, method, path):
    r = getattr(client, method)(path, **({"json": {"turns": 1}} if method == "post" else {}))
    assert r.status_code == 404


def test_create_and_state(client):
    r = client.post("/sim/create", json=SMALL_WORLD)
    assert r.status_code == 200
    assert r.json() == {"status": "created", "population": 25}

    state = client.get("/sim/state").json()
    assert state["generation"] == 0
    assert state["turn"] == 0
    assert len(state["creatures"]) == 25


def test_create_rejects_invalid_config(client):
    r = client.post("/sim/create", json={**SMALL_WORLD, "mutation_rate": 1.5})
    assert r.status_code == 422
    r = client.post("/sim/create", json={**SMALL_WORLD, "population_size": 0})
    assert r.status_code == 422
    r = client.post("/sim/create", json={**SMALL_WORLD, "condition": "everywhere"})
    assert r.status_code == 422


def test_turns_cross_generation_boundary(client):
    client.post("/sim/create", json=SMALL_WORLD)
    r = client.post("/sim/turn", json={"turns": 6})
    assert r.status_code == 200
    body = r.json()
    assert body["generation"] == 1
    assert body["turn"] == 1

    history = client.get("/sim/history").json()["history"]
    assert len(history) == 1
    assert history[0]["generation"] == 0
    assert history[0]["survivors"] == body["survivors_last_gen"]

    state = client.get("/sim/state").json()
    assert len(state["creatures"]) == 25


def test_turn_request_bounds(client):
    client.post("/sim/create", json=SMALL_WORLD)
    assert client.post("/sim/turn", json={"turns": 0}).status_code == 422


def test_dump_export(client):
    client.post("/sim/create", json=SMALL_WORLD)
    first = client.get("/sim/dump").json()
    second = client.get("/sim/dump").json()
    assert first == second
    dump = GenerationDump.model_validate(first)
    assert dump.generation_number == 0
    assert len(dump.generation) == 25
    for row in dump.generation:
        assert len(row) <= 3


def test_auto_toggle(client):
    client.post("/sim/create", json=SMALL_WORLD)
    r = client.post("/sim/auto", json={"interval_ms": 5})
    assert r.json() == {"auto": True, "interval_ms": 5}
    r = client.post("/sim/auto")
    assert r.json() == {"auto": False}


def test_websocket_init_state(client):
    client.post("/sim/create", json=SMALL_WORLD)
    with client.websocket_connect("/ws") as ws:
        msg = ws.receive_json()
        assert msg["type"] == "init"
        assert msg["data"]["population_size"] == 25
        ws.send_text('{"type": "get_state"}')
        msg = ws.receive_json()
        assert msg["type"] == "state"


def test_history_limit_bounds(client):
    client.post("/sim/create", json=SMALL_WORLD)
    client.post("/sim/turn", json={"turns": 20})
    assert client.get("/sim/history", params={"limit": 0}).status_code == 422
    assert client.get("/sim/history", params={"limit": -1}).status_code == 422

    full = client.get("/sim/history").json()["history"]
    assert len(full) >= 3
    tail = client.get("/sim/history", params={"limit": 2}).json()["history"]
    assert tail == full[-2:]


def test_create_stops_running_auto_loop(client):
    client.post("/sim/create", json=SMALL_WORLD)
    assert client.post("/sim/auto", json={"interval_ms": 5}).json()["auto"] is True

    r = client.post("/sim/create", json={**SMALL_WORLD, "seed": 10})
    assert r.status_code == 200
    assert server.auto_task is None
    assert server.auto_running is False
    assert client.get("/sim/state").json()["turn"] == 0


def test_health_answers_during_long_batch():
    server.world = None
    server.auto_running = False
    server.auto_task = None

    async def scenario():
        server._world_lock = asyncio.Lock()
        transport = httpx.ASGITransport(app=server.app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
            assert (await c.post("/sim/create", json=SMALL_WORLD)).status_code == 200
            batch = asyncio.create_task(c.post("/sim/turn", json={"turns": 2000}))
            await asyncio.sleep(0)

            r = await c.get("/health")
            assert r.status_code == 200
            assert not batch.done()

            r = await batch
            assert r.status_code == 200
            assert r.json()["generation"] > 0

    try:
        asyncio.run(scenario())
    finally:
        server.world = None
