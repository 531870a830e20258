"""Worm movement, feeding and breeding."""

import logging
from dataclasses import replace
from typing import Optional

from .config import GameConfig, DEFAULT_CONFIG
from .constants import WORM_GREEDY_CHANCE
from .grid import manhattan, neighbors
from .models import Cell, GameState, Worm
from .occupancy import occupied_by_consumable, occupied_by_snake, occupied_by_tunnel, occupied_by_worm
from .placement import choose, spawn_worm_near

logger = logging.getLogger(__name__)


def legal_moves(state: GameState, index: int, config: GameConfig = DEFAULT_CONFIG) -> list[Worm]:
    """Every one-step move of worm ``index`` that keeps its body clear of other things.

    The result holds the moved worms themselves, in ``Direction`` order.
    """
    worm = state.worms[index]
    retained = worm.body[: worm.length - 1]
    moves = []
    for d, head in neighbors(worm.head, config):
        if head in retained:
            continue
        moved = worm.advance(head, d)
        blocked = False
        for cell in moved.body:
            if (occupied_by_snake(state, cell)
                    or occupied_by_worm(state, cell, skip=index)
                    or occupied_by_tunnel(state, cell)):
                blocked = True
                break
        if blocked:
            continue
        # Classic worms are pests that steer around the food.
        if not config.has_worm_growth and occupied_by_consumable(state, head):
            continue
        moves.append(moved)
    return moves


def worm_target(state: GameState, config: GameConfig = DEFAULT_CONFIG) -> Optional[Cell]:
    if config.has_golden_apple and state.golden_apple is not None:
        return state.golden_apple
    if state.apples:
        return state.apples[0]
    return None


def choose_move(moves: list[Worm], target: Optional[Cell], rng,
                config: GameConfig = DEFAULT_CONFIG) -> Optional[Worm]:
    """Head for ``target`` most of the time, otherwise wander."""
    if not moves:
        return None
    if config.has_worm_growth and target is not None:
        ranked = sorted(moves, key=lambda w: manhattan(w.head, target))
        if rng.random() < WORM_GREEDY_CHANCE:
            return ranked[0]
    return choose(rng, moves)


def move_worms(state: GameState, rng, config: GameConfig = DEFAULT_CONFIG) -> GameState:
    if state.game_over or state.win or not state.running or state.paused or not state.worms:
        return state

    target = worm_target(state, config)
    for i in range(len(state.worms)):
        picked = choose_move(legal_moves(state, i, config), target, rng, config)
        if picked is None:
            continue  # boxed in, stays put
        worms = list(state.worms)
        worms[i] = picked
        state = replace(state, worms=tuple(worms))

    if not config.has_worm_growth:
        return state

    worms = list(state.worms)
    apples = list(state.apples)
    for i, worm in enumerate(worms):
        if worm.head in apples:
            apples.remove(worm.head)
            worms[i] = worm.grow()
            logger.debug("Worm %d ate the apple and grew to %d", i, worms[i].length)
    state = replace(state, worms=tuple(worms), apples=tuple(apples))

    if config.has_golden_apple and state.golden_apple is not None:
        for worm in state.worms:
            if worm.head != state.golden_apple:
                continue
            state = replace(state, golden_apple=None, golden_used=True)
            newborn = spawn_worm_near(state, worm, rng, config)
            if newborn is not None:
                state = replace(state, worms=state.worms + (newborn,))
                logger.info("A worm took the golden apple, %d worms now", len(state.worms))
            break

    return state
