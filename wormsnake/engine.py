"""Core game state transition."""

import logging
from dataclasses import dataclass, replace
from typing import Optional

from .config import GameConfig, DEFAULT_CONFIG
from .constants import GOLDEN_EFFECT_MS
from .grid import in_bounds, step
from .levels import level_target, provision_level
from .models import Cell, Direction, GameState
from .occupancy import occupied_by_worm
from .placement import place_food, spawn_worm

logger = logging.getLogger(__name__)


def initial_state(rng, config: GameConfig = DEFAULT_CONFIG) -> GameState:
    """Fresh, idle round: three-cell snake heading right, level 1 provisioned."""
    # Room ahead of the head on any grid at least four cells wide.
    hx = max(2, min(10, config.cols // 2))
    hy = min(10, config.rows // 2)
    state = GameState(snake=(Cell(hx, hy), Cell(hx - 1, hy), Cell(hx - 2, hy)))
    return provision_level(state, rng, config)


def _terminate(state: GameState, direction: Direction) -> GameState:
    return replace(state, direction=direction, pending_direction=direction, game_over=True, running=False)


def next_state(state: GameState, requested, rng, now: float,
               config: GameConfig = DEFAULT_CONFIG) -> GameState:
    """Advance the snake one cell.

    Args:
        state: Current state, returned untouched when the round is over,
            idle or paused.
        requested: Direction the player asked for. Reversals and values
            outside the enum are ignored.
        rng: Randomness source with a ``random()`` method.
        now: Timestamp in milliseconds, used for the golden apple effect window.
        config: Variant capabilities and grid size.

    Returns:
        The next state. Collisions end the round with ``game_over``; clearing
        the last level ends it with ``win``.
    """
    if state.game_over or not state.running or state.paused:
        return state

    direction = state.direction
    wanted = Direction.parse(requested)
    if wanted is not None and wanted != direction.opposite:
        direction = wanted

    new_head = step(state.head, direction)
    if not in_bounds(new_head, config):
        logger.info("Hit the wall at %s on level %d", tuple(new_head), state.level)
        return _terminate(state, direction)

    teleported = False
    if not state.just_teleported and len(state.tunnels) == 2 and new_head in state.tunnels:
        a, b = state.tunnels
        new_head = b if new_head == a else a
        teleported = True

    tail = state.snake[-1]
    if new_head in state.snake and new_head != tail:
        logger.info("Ran into itself at %s", tuple(new_head))
        return _terminate(state, direction)

    if occupied_by_worm(state, new_head):
        logger.info("Ran into a worm at %s", tuple(new_head))
        return _terminate(state, direction)

    golden_apple = state.golden_apple
    golden_used = state.golden_used
    effect_until: Optional[float] = state.effect_until
    if effect_until is not None and now >= effect_until:
        effect_until = None
    if config.has_golden_apple and golden_apple is not None and new_head == golden_apple:
        golden_apple = None
        golden_used = True
        effect_until = now + GOLDEN_EFFECT_MS

    ate = new_head in state.apples
    if ate:
        snake = (new_head,) + state.snake
        apples = tuple(a for a in state.apples if a != new_head)
    else:
        snake = (new_head,) + state.snake[:-1]
        apples = state.apples

    apples_eaten = state.apples_eaten
    level = state.level
    worms = state.worms
    win = False

    if ate:
        apples_eaten += 1
        if not config.has_worm_growth:
            refill = place_food(replace(state, snake=snake, apples=apples, golden_apple=golden_apple), rng, config)
            if refill is not None:
                apples = apples + (refill,)

        if apples_eaten >= level_target(level, config):
            if level >= config.max_level:
                win = True
                logger.info("Cleared the final level")
            else:
                level += 1
                apples_eaten = 0
                golden_used = False
                interim = replace(state, snake=snake, apples=apples, golden_apple=golden_apple)
                worm = spawn_worm(interim, rng, config)
                if worm is not None:
                    worms = worms + (worm,)
                logger.info("Advanced to level %d with %d worm(s)", level, len(worms))

    return replace(
        state,
        snake=snake,
        direction=direction,
        pending_direction=direction,
        apples=apples,
        apples_eaten=apples_eaten,
        level=level,
        worms=worms,
        golden_apple=golden_apple,
        golden_used=golden_used,
        effect_until=effect_until,
        just_teleported=teleported,
        win=win,
        running=not win,
    )


@dataclass(frozen=True)
class TransitionEvents:
    """What changed between two states, for sound and feedback cues."""

    moved: bool = False
    ate_apple: bool = False
    ate_golden: bool = False
    died: bool = False
    won: bool = False
    leveled_up: bool = False
    teleported: bool = False
    apple_lost: bool = False
    golden_lost: bool = False
    worm_spawned: bool = False


def diff_states(prev: GameState, new: GameState) -> TransitionEvents:
    moved = new.snake != prev.snake
    golden_lost = prev.golden_apple is not None and new.golden_apple is None
    return TransitionEvents(
        moved=moved,
        ate_apple=len(new.snake) > len(prev.snake),
        ate_golden=golden_lost and moved and new.head == prev.golden_apple,
        died=new.game_over and not prev.game_over,
        won=new.win and not prev.win,
        leveled_up=new.level > prev.level,
        teleported=moved and new.just_teleported,
        apple_lost=len(new.apples) < len(prev.apples),
        golden_lost=golden_lost,
        worm_spawned=len(new.worms) > len(prev.worms),
    )
