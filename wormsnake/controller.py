"""Single owner of the live game state and of the timers that advance it."""

import asyncio
import logging
import random
import time
from dataclasses import replace
from typing import Callable, Optional

from .config import GameConfig, DEFAULT_CONFIG
from .constants import WORM_MOVE_MS
from .clock import SessionClock
from .engine import TransitionEvents, diff_states, initial_state, next_state
from .levels import apple_respawn_ms, apple_wander_ms, golden_wander_ms, provision_level, tick_interval_ms
from .models import Direction, GameState
from .placement import place_food, wander_apple, wander_golden_apple
from .records import Record, RecordBook
from .worms import move_worms

logger = logging.getLogger(__name__)

Listener = Callable[[GameState, TransitionEvents], None]


class GameController:
    """Holds the current ``GameState`` and replaces it from timer callbacks.

    Timers are plain ``loop.call_later`` handles that call back into the
    controller, so there is only ever one copy of the state. Nothing is
    scheduled until :meth:`attach` gives the controller an event loop.
    """

    def __init__(self, config: GameConfig = DEFAULT_CONFIG, rng=None,
                 loop: Optional[asyncio.AbstractEventLoop] = None):
        self.config = config
        self.rng = rng if rng is not None else random.Random()
        self.loop = loop
        self.state = initial_state(self.rng, config)
        self.clock = SessionClock()
        self.records = RecordBook()
        self.last_rank = 0
        self.listeners: list[Listener] = []

        self._tick_handle: Optional[asyncio.TimerHandle] = None
        self._worm_handle: Optional[asyncio.TimerHandle] = None
        self._apple_wander_handle: Optional[asyncio.TimerHandle] = None
        self._golden_wander_handle: Optional[asyncio.TimerHandle] = None
        self._respawn_handle: Optional[asyncio.TimerHandle] = None

    # ── Lifecycle ──────────────────────────────────────────────────

    def attach(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self.loop = loop or asyncio.get_running_loop()
        self._schedule_worms()
        self._schedule_apple_wander()
        self._schedule_golden_wander()
        self._schedule_tick()

    def close(self):
        for name in ("_tick_handle", "_worm_handle", "_apple_wander_handle",
                     "_golden_wander_handle", "_respawn_handle"):
            self._cancel(name)

    def now(self) -> float:
        if self.loop is not None:
            return self.loop.time() * 1000.0
        return time.monotonic() * 1000.0

    def elapsed_ms(self) -> float:
        return self.clock.elapsed(self.now()) if self.config.has_timer else 0.0

    # ── Intents ────────────────────────────────────────────────────

    def start(self):
        """Begin an idle round. A running or finished round is left as it is."""
        if self.state.finished or self.state.running:
            return
        self.state = replace(self.state, running=True, paused=False)
        logger.info("Game started on level %d", self.state.level)
        if self.config.has_timer:
            self.clock.start(self.now())
        self._schedule_tick()
        self._notify(TransitionEvents())

    def pause(self):
        """Toggle pause. Ignored while idle or after the round ended."""
        if not self.state.running or self.state.finished:
            return
        paused = not self.state.paused
        self.state = replace(self.state, paused=paused)
        if self.config.has_timer:
            if paused:
                self.clock.pause(self.now())
            else:
                self.clock.resume(self.now())
        logger.info("Game %s", "paused" if paused else "resumed")
        self._schedule_tick()
        self._notify(TransitionEvents())

    def restart(self):
        self._cancel("_tick_handle")
        self._cancel("_respawn_handle")
        self._cancel("_golden_wander_handle")
        self.state = initial_state(self.rng, self.config)
        self.clock.reset()
        self.last_rank = 0
        self._schedule_golden_wander()
        logger.info("Game restarted")
        self._notify(TransitionEvents())

    def request_direction(self, value) -> bool:
        """Latch a turn for the next tick. Unknown values and reversals are dropped."""
        direction = Direction.parse(value)
        if direction is None or direction == self.state.direction.opposite:
            return False
        self.state = replace(self.state, pending_direction=direction)
        return True

    def steer(self, value):
        """Arrow-key behaviour: a direction also starts an idle round or restarts a finished one."""
        if Direction.parse(value) is None:
            return
        if self.state.finished:
            self.restart()
            self.request_direction(value)
            self.start()
        elif not self.state.running:
            self.request_direction(value)
            self.start()
        else:
            self.request_direction(value)

    # ── Timer callbacks ────────────────────────────────────────────

    def tick(self):
        self._tick_handle = None
        prev = self.state
        self._apply(prev, next_state(prev, prev.pending_direction, self.rng, self.now(), self.config))
        self._schedule_tick()

    def worm_tick(self):
        self._worm_handle = None
        prev = self.state
        new = move_worms(prev, self.rng, self.config)
        if new is not prev:
            self._apply(prev, new)
        self._schedule_worms()

    def apple_wander_tick(self):
        self._apple_wander_handle = None
        if self._active():
            prev = self.state
            self.state = wander_apple(prev, self.rng, self.config)
            if self.state != prev:
                self._notify(TransitionEvents())
        self._schedule_apple_wander()

    def golden_wander_tick(self):
        self._golden_wander_handle = None
        if self.state.golden_apple is None:
            return
        if self._active():
            prev = self.state
            self.state = wander_golden_apple(prev, self.rng, self.config)
            if self.state != prev:
                self._notify(TransitionEvents())
        self._schedule_golden_wander()

    def respawn_apple(self):
        self._respawn_handle = None
        if self.state.finished or self.state.apples:
            return
        if self.state.paused:
            self._schedule_respawn()
            return
        apple = place_food(self.state, self.rng, self.config)
        if apple is None:
            self._schedule_respawn()
            return
        self.state = replace(self.state, apples=(apple,))
        self._notify(TransitionEvents())

    # ── Internals ──────────────────────────────────────────────────

    def _active(self) -> bool:
        return self.state.running and not self.state.paused and not self.state.finished

    def _apply(self, prev: GameState, new: GameState):
        events = diff_states(prev, new)
        if events.leveled_up:
            new = provision_level(new, self.rng, self.config)
        if events.golden_lost:
            self._cancel("_golden_wander_handle")
        self.state = new

        if events.apple_lost and not new.apples:
            self._schedule_respawn()
        if new.golden_apple is not None:
            self._schedule_golden_wander()
        if events.died or events.won:
            self._finish(won=events.won)
        self._notify(events)

    def _finish(self, won: bool):
        self._cancel("_respawn_handle")
        self._cancel("_golden_wander_handle")
        if not self.config.has_timer:
            return
        now = self.now()
        self.clock.stop(now)
        record = Record(
            level=self.state.level,
            apples=self.state.apples_eaten,
            elapsed_ms=self.clock.elapsed(now),
            won=won,
        )
        self.last_rank = self.records.add(record)
        logger.info("Round over (%s) on level %d, rank %d",
                    "won" if won else "lost", record.level, self.last_rank)

    def _notify(self, events: TransitionEvents):
        for listener in list(self.listeners):
            listener(self.state, events)

    def _cancel(self, name: str):
        handle = getattr(self, name)
        if handle is not None:
            handle.cancel()
            setattr(self, name, None)

    def _schedule_tick(self):
        self._cancel("_tick_handle")
        if self.loop is None or not self._active():
            return
        delay = tick_interval_ms(self.state.level, self.state.effect_active(self.now()))
        self._tick_handle = self.loop.call_later(delay / 1000.0, self.tick)

    def _schedule_worms(self):
        if self.loop is None or self._worm_handle is not None:
            return
        self._worm_handle = self.loop.call_later(WORM_MOVE_MS / 1000.0, self.worm_tick)

    def _schedule_apple_wander(self):
        if self.loop is None or self._apple_wander_handle is not None:
            return
        delay = apple_wander_ms(self.state.level, self.rng)
        self._apple_wander_handle = self.loop.call_later(delay / 1000.0, self.apple_wander_tick)

    def _schedule_golden_wander(self):
        if self.loop is None or self._golden_wander_handle is not None or self.state.golden_apple is None:
            return
        delay = golden_wander_ms(self.rng)
        self._golden_wander_handle = self.loop.call_later(delay / 1000.0, self.golden_wander_tick)

    def _schedule_respawn(self):
        if self.loop is None or self._respawn_handle is not None:
            return
        delay = apple_respawn_ms(self.rng)
        self._respawn_handle = self.loop.call_later(delay / 1000.0, self.respawn_apple)
