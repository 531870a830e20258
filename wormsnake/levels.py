"""Level schedule, pacing and per-level provisioning."""

import logging
from dataclasses import replace

from .config import GameConfig, DEFAULT_CONFIG
from .constants import (
    APPLE_RESPAWN_MS, BASE_TICK_MS, EFFECT_SLOWDOWN, GOLDEN_APPLE_MIN_LEVEL,
    GOLDEN_WANDER_MS, LEVEL_APPLE_INTERVALS, LEVEL_SPEEDUP, MIN_TICK_MS,
    TUNNEL_MIN_LEVEL, WANDER_JITTER,
)
from .models import GameState
from .placement import place_food, place_golden_apple, place_tunnel_pair

logger = logging.getLogger(__name__)


def level_target(level: int, config: GameConfig = DEFAULT_CONFIG) -> int:
    """Apples needed to clear ``level``; the last entry repeats past the table."""
    targets = config.level_targets
    return targets[min(max(level, 1), len(targets)) - 1]


def tick_interval_ms(level: int, effect_active: bool = False) -> int:
    speedup = LEVEL_SPEEDUP ** max(0, level - 1)
    interval = max(MIN_TICK_MS, round(BASE_TICK_MS * speedup))
    if effect_active:
        interval *= EFFECT_SLOWDOWN
    return interval


def _jitter(base: float, rng) -> float:
    low, high = WANDER_JITTER
    return base * (low + (high - low) * rng.random())


def apple_wander_ms(level: int, rng) -> float:
    base = LEVEL_APPLE_INTERVALS[min(max(level, 1), len(LEVEL_APPLE_INTERVALS)) - 1]
    return _jitter(base, rng)


def golden_wander_ms(rng) -> float:
    return _jitter(GOLDEN_WANDER_MS, rng)


def apple_respawn_ms(rng) -> float:
    low, high = APPLE_RESPAWN_MS
    return low + (high - low) * rng.random()


def provision_level(state: GameState, rng, config: GameConfig = DEFAULT_CONFIG) -> GameState:
    """(Re)place the hazards and consumables that belong to ``state.level``."""
    if not state.apples:
        apple = place_food(state, rng, config)
        if apple is not None:
            state = replace(state, apples=(apple,))

    if config.has_tunnels and state.level >= TUNNEL_MIN_LEVEL:
        cleared = replace(state, tunnels=(), just_teleported=False)
        state = replace(cleared, tunnels=place_tunnel_pair(cleared, rng, config))
        if not state.tunnels:
            logger.info("Level %d starts without tunnels", state.level)
    elif state.tunnels:
        state = replace(state, tunnels=(), just_teleported=False)

    if (config.has_golden_apple
            and state.level >= GOLDEN_APPLE_MIN_LEVEL
            and state.golden_apple is None
            and not state.golden_used):
        golden = place_golden_apple(state, rng, config)
        if golden is not None:
            state = replace(state, golden_apple=golden)

    return state
