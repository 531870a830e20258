"""WebSocket connection management and state serialization."""

import asyncio
import json
from dataclasses import asdict
from typing import Optional

from fastapi import WebSocket, WebSocketDisconnect

from .clock import format_elapsed
from .controller import GameController
from .engine import TransitionEvents
from .levels import level_target, tick_interval_ms


class ConnectionManager:
    """Tracks sockets and sends broadcasts one at a time, in order.

    Synchronous code hands messages to :meth:`queue`; a single :meth:`pump`
    task drains ``outbox`` so sends to a socket never interleave.
    """

    def __init__(self):
        self.connections: set[WebSocket] = set()
        self.outbox: Optional[asyncio.Queue] = None

    def queue(self, message: str):
        if self.outbox is not None and self.connections:
            self.outbox.put_nowait(message)

    async def pump(self):
        while True:
            message = await self.outbox.get()
            try:
                await self.broadcast(message)
            finally:
                self.outbox.task_done()

    async def connect(self, ws: WebSocket):
        await ws.accept()
        self.connections.add(ws)

    def disconnect(self, ws: WebSocket):
        self.connections.discard(ws)

    async def broadcast(self, message: str):
        disconnected = []
        for ws in list(self.connections):
            try:
                await ws.send_text(message)
            except (WebSocketDisconnect, RuntimeError, OSError):
                disconnected.append(ws)
        for ws in disconnected:
            self.connections.discard(ws)

    async def send_personal(self, ws: WebSocket, message: str):
        await ws.send_text(message)


def cells_to_list(cells) -> list[list[int]]:
    return [[x, y] for x, y in cells]


def build_state_msg(controller: GameController, events: Optional[TransitionEvents] = None) -> str:
    state = controller.state
    config = controller.config
    now = controller.now()
    effect_left = max(0.0, state.effect_until - now) if state.effect_active(now) else 0.0
    elapsed = controller.elapsed_ms()
    return json.dumps({
        "type": "state",
        "grid": [config.cols, config.rows],
        "snake": cells_to_list(state.snake),
        "direction": state.direction.value,
        "apples": cells_to_list(state.apples),
        "golden_apple": list(state.golden_apple) if state.golden_apple is not None else None,
        "effect_ms": effect_left,
        "worms": [
            {
                "cells": cells_to_list(w.body),
                "direction": w.direction.value,
                "length": w.length,
                "phase": w.phase,
            }
            for w in state.worms
        ],
        "tunnels": cells_to_list(state.tunnels),
        "level": state.level,
        "max_level": config.max_level,
        "apples_eaten": state.apples_eaten,
        "apples_target": level_target(state.level, config),
        "tick_ms": tick_interval_ms(state.level, effect_left > 0),
        "elapsed_ms": elapsed,
        "elapsed": format_elapsed(elapsed) if config.has_timer else None,
        "clock_running": controller.clock.ticking,
        "running": state.running,
        "paused": state.paused,
        "game_over": state.game_over,
        "win": state.win,
        "rank": controller.last_rank,
        "events": asdict(events) if events is not None else None,
    })


def build_records_msg(controller: GameController) -> str:
    best = controller.records.best()
    return json.dumps({
        "type": "records",
        "enabled": controller.config.has_timer,
        "records": controller.records.to_list(),
        "best": asdict(best) if best is not None else None,
    })
