"""FastAPI application: HTTP route, WebSocket endpoint, timer wiring."""

import asyncio
import json
import logging
import os

from contextlib import asynccontextmanager

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.responses import FileResponse

from .config import load_config, server_address
from .connection_manager import ConnectionManager, build_records_msg, build_state_msg
from .controller import GameController
from .engine import TransitionEvents
from .models import GameState

logger = logging.getLogger(__name__)

HTML_PATH = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "index.html")

controller = GameController(load_config())
manager = ConnectionManager()


def broadcast_state(state: GameState, events: TransitionEvents):
    if manager.connections:
        manager.queue(build_state_msg(controller, events))


@asynccontextmanager
async def lifespan(app: FastAPI):
    manager.outbox = asyncio.Queue()
    sender = asyncio.create_task(manager.pump())
    controller.listeners.append(broadcast_state)
    controller.attach(asyncio.get_running_loop())
    logger.info("Game controller attached (%dx%d grid)", controller.config.cols, controller.config.rows)
    yield
    controller.close()
    controller.listeners.remove(broadcast_state)
    sender.cancel()
    try:
        await sender
    except asyncio.CancelledError:
        pass
    manager.outbox = None


app = FastAPI(lifespan=lifespan)


@app.get("/")
async def serve_index():
    return FileResponse(HTML_PATH, media_type="text/html")


def handle_message(msg: dict) -> bool:
    """Dispatch one client intent. Returns True when the records list should be sent back."""
    kind = msg.get("type")
    if kind == "direction":
        controller.steer(msg.get("direction"))
    elif kind == "start":
        controller.start()
    elif kind == "pause":
        controller.pause()
    elif kind == "restart":
        controller.restart()
    elif kind == "records":
        return True
    return False


@app.websocket("/ws")
async def websocket_endpoint(ws: WebSocket):
    await manager.connect(ws)
    try:
        await manager.send_personal(ws, build_state_msg(controller))
        while True:
            raw = await ws.receive_text()
            try:
                msg = json.loads(raw)
            except json.JSONDecodeError:
                continue
            if not isinstance(msg, dict):
                continue
            if handle_message(msg):
                await manager.send_personal(ws, build_records_msg(controller))
    except WebSocketDisconnect:
        pass
    finally:
        manager.disconnect(ws)


if __name__ == "__main__":
    import uvicorn
    host, port = server_address()
    print(f"Snake server starting on http://localhost:{port}")
    uvicorn.run(app, host=host, port=port)
