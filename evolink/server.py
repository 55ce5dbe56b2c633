"""
evolink — Server

Copyright (c) 2026 SolisHQ (github.com/solishq). MIT License.

FastAPI + WebSocket control surface for a GridWorld.
Create, step, auto-run, inspect, export. Rendering is left to the client.
"""

import asyncio
import json
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, HTTPException, Query, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
from typing import Optional

from .config import WorldConfig
from .world import GridWorld

logger = logging.getLogger(__name__)


# ─── State ──────────────────────────────────────────────

world: Optional[GridWorld] = None
ws_clients: set[WebSocket] = set()
auto_running = False
auto_task = None
_world_lock = asyncio.Lock()


# ─── App ────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await _stop_auto()

app = FastAPI(title="evolink", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health():
    return {"status": "ok", "engine": "evolink"}


# ─── Models ─────────────────────────────────────────────

class TurnRequest(BaseModel):
    turns: int = Field(default=1, ge=1, le=100_000)

class AutoRequest(BaseModel):
    interval_ms: int = Field(default=100, ge=1, le=10_000)


def _require_world() -> GridWorld:
    if world is None:
        raise HTTPException(status_code=404, detail="No simulation created")
    return world


async def _stop_auto():
    global auto_running, auto_task
    auto_running = False
    if auto_task:
        auto_task.cancel()
        try:
            await auto_task
        except asyncio.CancelledError:
            pass
        auto_task = None


# ─── Simulation Control ────────────────────────────────

@app.post("/sim/create")
async def create_sim(config: WorldConfig):
    global world
    await _stop_auto()
    async with _world_lock:
        world = GridWorld(config)
        events = world.pop_events()
    await broadcast({"type": "created", "data": world.get_state(), "events": events})
    return {"status": "created", "population": len(world.board)}


@app.post("/sim/turn")
async def run_turns(req: TurnRequest):
    """Run a batch of turns, yielding to the loop between turns."""
    current = _require_world()
    events = []
    for _ in range(req.turns):
        async with _world_lock:
            current.do_turn()
            events.extend(current.pop_events())
        await asyncio.sleep(0)
    state = current.get_state()
    await broadcast({"type": "turn", "data": state, "events": events[-10:]})
    return {
        "turn": current.clock.turn,
        "generation": current.generation_number,
        "survivors_last_gen": current.survivors_last_gen,
    }


@app.post("/sim/auto")
async def toggle_auto(req: Optional[AutoRequest] = None):
    """Toggle a background turn loop. interval_ms=1 is fast-forward."""
    global auto_running, auto_task
    req = req or AutoRequest()

    if auto_running:
        await _stop_auto()
        return {"auto": False}

    _require_world()
    auto_running = True

    async def auto_loop():
        global auto_running
        try:
            while auto_running and world:
                async with _world_lock:
                    world.do_turn()
                    events = world.pop_events()
                    state = world.get_state()
                await broadcast({"type": "turn", "data": state, "events": events[-10:]})
                await asyncio.sleep(req.interval_ms / 1000)
        except asyncio.CancelledError:
            pass
        finally:
            auto_running = False

    auto_task = asyncio.create_task(auto_loop())
    return {"auto": True, "interval_ms": req.interval_ms}


# ─── Query ──────────────────────────────────────────────

@app.get("/sim/state")
async def get_state():
    return _require_world().get_state()


@app.get("/sim/history")
async def get_history(limit: int = Query(default=50, ge=1, le=10_000)):
    return {"history": _require_world().history[-limit:]}


@app.get("/sim/dump")
async def get_dump():
    """Export payload: generation number plus every entity's links."""
    return _require_world().dump_generation()


# ─── WebSocket ──────────────────────────────────────────

@app.websocket("/ws")
async def websocket_endpoint(ws: WebSocket):
    await ws.accept()
    ws_clients.add(ws)
    try:
        if world:
            await ws.send_json({"type": "init", "data": world.get_state()})
        while True:
            data = await ws.receive_text()
            if len(data) > 10_000:
                continue
            try:
                msg = json.loads(data)
            except json.JSONDecodeError:
                continue
            if msg.get("type") == "get_state" and world:
                await ws.send_json({"type": "state", "data": world.get_state()})
    except WebSocketDisconnect:
        ws_clients.discard(ws)


async def broadcast(message: dict):
    """Send to all connected WebSocket clients."""
    dead = set()
    for ws in ws_clients:
        try:
            await ws.send_json(message)
        except (WebSocketDisconnect, RuntimeError) as e:
            logger.debug("dropping websocket client: %s", e)
            dead.add(ws)
    ws_clients.difference_update(dead)


# ─── Run ────────────────────────────────────────────────

def start(host: str = "0.0.0.0", port: int = 8000):
    import uvicorn
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    start()
