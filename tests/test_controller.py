import asyncio
import random

import pytest

from wormsnake.config import VARIANTS
from wormsnake.controller import GameController
from wormsnake.models import Cell, Direction, Worm

from tests.helpers import ScriptedRng, make_state

FAR_SNAKE = (Cell(0, 20), Cell(0, 21), Cell(0, 22))


@pytest.fixture
def controller():
    return GameController(rng=random.Random(42))


@pytest.fixture
def loop():
    loop = asyncio.new_event_loop()
    yield loop
    loop.close()


def test_idle_controller_does_not_move(controller):
    before = controller.state
    controller.tick()
    assert controller.state is before


def test_start_and_pause(controller):
    controller.pause()
    assert not controller.state.paused

    controller.start()
    assert controller.state.running
    controller.pause()
    assert controller.state.paused
    controller.pause()
    assert not controller.state.paused


def test_start_is_a_no_op_after_game_over(controller):
    controller.state = make_state(game_over=True, running=False)
    controller.start()
    assert not controller.state.running
    controller.pause()
    assert not controller.state.paused


def test_direction_requests(controller):
    assert not controller.request_direction("left")
    assert not controller.request_direction("north")
    assert controller.request_direction("up")
    assert controller.state.pending_direction is Direction.UP


def test_steer_starts_an_idle_round(controller):
    controller.steer("down")
    assert controller.state.running
    assert controller.state.pending_direction is Direction.DOWN
    controller.tick()
    assert controller.state.head == Cell(10, 11)


def test_steer_restarts_after_game_over(controller):
    controller.state = make_state(snake=(Cell(5, 5), Cell(4, 5), Cell(3, 5)), level=3,
                                  game_over=True, running=False)
    controller.steer("up")
    assert controller.state.running
    assert controller.state.level == 1
    assert controller.state.pending_direction is Direction.UP


def test_game_over_is_recorded(controller):
    controller.state = make_state(snake=(Cell(24, 3), Cell(23, 3), Cell(22, 3)))
    controller.tick()
    assert controller.state.game_over
    assert len(controller.records.entries) == 1
    assert controller.last_rank == 1


def test_classic_variant_keeps_no_records():
    controller = GameController(VARIANTS["classic"], rng=random.Random(1))
    controller.state = make_state(snake=(Cell(24, 3), Cell(23, 3), Cell(22, 3)))
    controller.tick()
    assert controller.state.game_over
    assert controller.records.entries == []


def test_level_up_is_provisioned(controller):
    controller.state = make_state(apples=(Cell(11, 10),), apples_eaten=2)
    controller.tick()
    state = controller.state
    assert state.level == 2
    assert len(state.worms) == 1
    assert len(state.apples) == 1
    assert state.golden_apple is not None


def test_apple_respawns_after_being_eaten(controller):
    controller.state = make_state(apples=(Cell(11, 10),))
    controller.tick()
    assert controller.state.apples == ()
    controller.respawn_apple()
    assert len(controller.state.apples) == 1


def test_listeners_hear_about_transitions(controller):
    seen = []
    controller.listeners.append(lambda state, events: seen.append(events))
    controller.state = make_state(apples=(Cell(11, 10),))
    controller.tick()
    assert seen[-1].ate_apple
    assert seen[-1].moved


def test_movement_timer_follows_pause(controller, loop):
    controller.attach(loop)
    assert controller._tick_handle is None
    controller.start()
    assert controller._tick_handle is not None
    controller.pause()
    assert controller._tick_handle is None
    controller.close()


def test_golden_wander_timer_is_cancelled_when_eaten(controller, loop):
    controller.attach(loop)
    controller.state = make_state(golden_apple=Cell(11, 10))
    controller._schedule_golden_wander()
    handle = controller._golden_wander_handle
    assert handle is not None
    controller.tick()
    assert controller.state.golden_apple is None
    assert controller._golden_wander_handle is None
    assert handle.cancelled()
    controller.close()


def test_start_while_running_keeps_the_movement_timer(controller, loop):
    controller.attach(loop)
    controller.start()
    handle = controller._tick_handle
    controller.start()
    assert controller._tick_handle is handle
    assert not handle.cancelled()
    controller.close()


def test_worm_eating_the_golden_apple_cancels_its_wander_timer(controller, loop):
    controller.attach(loop)
    controller.rng = ScriptedRng()
    worm = Worm.spawn(Cell(10, 10), Direction.RIGHT, 2)
    controller.state = make_state(snake=FAR_SNAKE, golden_apple=Cell(11, 10), worms=(worm,))
    controller._schedule_golden_wander()
    handle = controller._golden_wander_handle
    controller.worm_tick()
    assert controller.state.golden_apple is None
    assert len(controller.state.worms) == 2
    assert handle.cancelled()
    assert controller._golden_wander_handle is None
    assert controller._worm_handle is not None
    controller.close()


def test_worm_eating_the_apple_schedules_a_respawn(controller, loop):
    controller.attach(loop)
    controller.rng = ScriptedRng()
    worm = Worm.spawn(Cell(10, 10), Direction.RIGHT, 2)
    controller.state = make_state(snake=FAR_SNAKE, apples=(Cell(11, 10),), worms=(worm,))
    assert controller._respawn_handle is None
    controller.worm_tick()
    assert controller.state.apples == ()
    assert controller.state.worms[0].length == 3
    assert controller._respawn_handle is not None
    controller.close()
    assert controller._respawn_handle is None


def test_apple_wander_delay_is_rolled_again_after_each_move(controller, loop):
    controller.attach(loop)
    controller._cancel("_apple_wander_handle")
    # Level 1 interval is 2000 ms, jittered to 1500 ms then 2499 ms.
    controller.rng = ScriptedRng(0.0, 0.999)
    controller._schedule_apple_wander()
    first = controller._apple_wander_handle
    controller.apple_wander_tick()
    second = controller._apple_wander_handle
    assert second is not None and second is not first
    assert second.when() - first.when() > 0.9
    controller.close()


def test_restart_resets_everything(controller):
    controller.state = make_state(level=4, apples_eaten=2)
    controller.clock.start(0)
    controller.restart()
    assert controller.state.level == 1
    assert not controller.state.running
    assert controller.clock.elapsed(10_000) == 0
