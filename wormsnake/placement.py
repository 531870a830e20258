"""Random placement of apples, tunnels and worms.

Every sampler takes the randomness source explicitly and only ever calls
``rng.random()``, so a ``random.Random`` or any object with a ``random()``
method returning floats in ``[0, 1)`` can drive it. Exhausted searches are a
normal outcome and come back as ``None`` (or ``()`` for tunnels).
"""

import logging
from dataclasses import replace
from typing import Optional, Sequence, TypeVar

from .config import GameConfig, DEFAULT_CONFIG
from .constants import TUNNEL_ATTEMPTS, TUNNEL_EDGE_BUFFER, TUNNEL_MIN_DISTANCE
from .grid import all_cells, distance, in_bounds, neighbors, step
from .models import Cell, Direction, GameState, Worm, derive_body
from .occupancy import is_free

logger = logging.getLogger(__name__)

T = TypeVar("T")


def choose(rng, items: Sequence[T]) -> Optional[T]:
    if not items:
        return None
    idx = min(int(rng.random() * len(items)), len(items) - 1)
    return items[idx]


def shuffled(rng, items: Sequence[T]) -> list[T]:
    pool = list(items)
    out = []
    while pool:
        out.append(pool.pop(min(int(rng.random() * len(pool)), len(pool) - 1)))
    return out


def place_food(state: GameState, rng, config: GameConfig = DEFAULT_CONFIG) -> Optional[Cell]:
    empty = [c for c in all_cells(config) if is_free(state, c)]
    if not empty:
        logger.debug("No free cell for an apple")
    return choose(rng, empty)


def place_golden_apple(state: GameState, rng, config: GameConfig = DEFAULT_CONFIG) -> Optional[Cell]:
    empty = [c for c in all_cells(config) if is_free(state, c, include_golden=False)]
    if not empty:
        logger.debug("No free cell for the golden apple")
    return choose(rng, empty)


def place_tunnel_pair(state: GameState, rng, config: GameConfig = DEFAULT_CONFIG) -> tuple[Cell, ...]:
    """Two free cells inside the edge buffer, at least TUNNEL_MIN_DISTANCE apart.

    Returns ``()`` when TUNNEL_ATTEMPTS draws are not enough.
    """
    span_x = config.cols - 2 * TUNNEL_EDGE_BUFFER
    span_y = config.rows - 2 * TUNNEL_EDGE_BUFFER
    if span_x <= 0 or span_y <= 0:
        return ()

    accepted: list[Cell] = []
    for _ in range(TUNNEL_ATTEMPTS):
        cell = Cell(
            TUNNEL_EDGE_BUFFER + min(int(rng.random() * span_x), span_x - 1),
            TUNNEL_EDGE_BUFFER + min(int(rng.random() * span_y), span_y - 1),
        )
        if not is_free(state, cell):
            continue
        if accepted and distance(accepted[0], cell) < TUNNEL_MIN_DISTANCE:
            continue
        accepted.append(cell)
        if len(accepted) == 2:
            return tuple(accepted)

    logger.debug("Gave up placing tunnels after %d attempts", TUNNEL_ATTEMPTS)
    return ()


def _fits(state: GameState, body: Sequence[Cell], config: GameConfig) -> bool:
    return all(in_bounds(c, config) and is_free(state, c) for c in body)


def spawn_worm(state: GameState, rng, config: GameConfig = DEFAULT_CONFIG) -> Optional[Worm]:
    """Uniform pick among every head/facing whose whole body lands on free cells."""
    length = config.worm_length
    options = []
    for cell in all_cells(config):
        if not is_free(state, cell):
            continue
        for d in Direction:
            if _fits(state, derive_body(cell, d, length), config):
                options.append((cell, d))
    picked = choose(rng, options)
    if picked is None:
        logger.debug("No room to spawn a worm")
        return None
    head, d = picked
    return Worm.spawn(head, d, length, phase=len(state.worms) * 1.3)


def spawn_worm_near(state: GameState, eater: Worm, rng, config: GameConfig = DEFAULT_CONFIG) -> Optional[Worm]:
    """New worm right next to ``eater``'s head, tail touching it; generic spawn otherwise."""
    length = config.worm_length
    for d in shuffled(rng, list(Direction)):
        head = step(step(eater.head, d), d)
        body = derive_body(head, d, length)
        if _fits(state, body, config):
            return Worm.spawn(head, d, length, phase=len(state.worms) * 1.3)
    return spawn_worm(state, rng, config)


def _wander_options(state: GameState, cell: Cell, config: GameConfig) -> list[Cell]:
    return [nxt for _, nxt in neighbors(cell, config) if is_free(state, nxt)]


def wander_apple(state: GameState, rng, config: GameConfig = DEFAULT_CONFIG) -> GameState:
    """Nudge every outstanding apple one step onto a random free neighbour."""
    if not state.apples:
        return state
    apples = list(state.apples)
    for i, apple in enumerate(apples):
        nxt = choose(rng, _wander_options(replace(state, apples=tuple(apples)), apple, config))
        if nxt is not None:
            apples[i] = nxt
    return replace(state, apples=tuple(apples))


def wander_golden_apple(state: GameState, rng, config: GameConfig = DEFAULT_CONFIG) -> GameState:
    if state.golden_apple is None:
        return state
    nxt = choose(rng, _wander_options(state, state.golden_apple, config))
    if nxt is None:
        return state
    return replace(state, golden_apple=nxt)
