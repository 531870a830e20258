import asyncio
import json
import random

from wormsnake.connection_manager import ConnectionManager, build_records_msg, build_state_msg
from wormsnake.controller import GameController
from wormsnake.records import Record


class FakeSocket:
    def __init__(self):
        self.sent = []

    async def send_text(self, message):
        await asyncio.sleep(0)
        self.sent.append(message)


class ClosedSocket:
    async def send_text(self, message):
        raise RuntimeError("socket closed")


def test_queue_is_dropped_without_an_outbox():
    manager = ConnectionManager()
    manager.connections.add(FakeSocket())
    manager.queue("lost")
    assert manager.outbox is None


def test_pump_sends_in_order_and_drops_dead_sockets():
    live, dead = FakeSocket(), ClosedSocket()

    async def scenario():
        manager = ConnectionManager()
        manager.connections.update({live, dead})
        manager.outbox = asyncio.Queue()
        sender = asyncio.create_task(manager.pump())
        for message in ("one", "two", "three"):
            manager.queue(message)
        await manager.outbox.join()
        sender.cancel()
        try:
            await sender
        except asyncio.CancelledError:
            pass
        return manager

    manager = asyncio.run(scenario())
    assert live.sent == ["one", "two", "three"]
    assert manager.connections == {live}


def test_state_message_reports_the_clock():
    controller = GameController(rng=random.Random(3))
    assert json.loads(build_state_msg(controller))["clock_running"] is False
    controller.start()
    assert json.loads(build_state_msg(controller))["clock_running"] is True


def test_records_message_carries_the_best_round():
    controller = GameController(rng=random.Random(3))
    assert json.loads(build_records_msg(controller))["best"] is None
    controller.records.add(Record(level=2, apples=4, elapsed_ms=9000.0, won=False))
    controller.records.add(Record(level=5, apples=15, elapsed_ms=60000.0, won=True))
    best = json.loads(build_records_msg(controller))["best"]
    assert best["won"] is True
    assert best["level"] == 5
