"""Variant selection: one engine, a capability set picked at construction."""

import logging
import os
from dataclasses import dataclass, replace

from .constants import GRID_W, GRID_H, LEVEL_TARGETS, MIN_PLAYABLE_GRID, WORM_INITIAL_LENGTH

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GameConfig:
    cols: int = GRID_W
    rows: int = GRID_H
    level_targets: tuple[int, ...] = LEVEL_TARGETS
    has_golden_apple: bool = True
    has_tunnels: bool = True
    has_worm_growth: bool = True
    has_timer: bool = True

    def __post_init__(self):
        if self.cols < 3 or self.rows < 1:
            raise ValueError(f"grid too small: {self.cols}x{self.rows}")
        if not self.level_targets or min(self.level_targets) < 1:
            raise ValueError("level_targets must be a non-empty sequence of positive ints")

    @property
    def max_level(self) -> int:
        return len(self.level_targets)

    @property
    def worm_length(self) -> int:
        # Classic worms are single-cell pests.
        return WORM_INITIAL_LENGTH if self.has_worm_growth else 1


VARIANTS = {
    "classic": GameConfig(
        has_golden_apple=False, has_tunnels=False, has_worm_growth=False, has_timer=False,
    ),
    "arcade": GameConfig(
        has_golden_apple=False, has_tunnels=False, has_worm_growth=False, has_timer=True,
    ),
    "advanced": GameConfig(),
}

DEFAULT_CONFIG = VARIANTS["advanced"]


def load_config() -> GameConfig:
    """Build the config from ``SNAKE_VARIANT`` and ``SNAKE_GRID`` env vars."""
    name = os.getenv("SNAKE_VARIANT", "advanced").strip().lower()
    config = VARIANTS.get(name)
    if config is None:
        logger.warning("Unknown SNAKE_VARIANT %r, using 'advanced'", name)
        config = DEFAULT_CONFIG

    grid = os.getenv("SNAKE_GRID", "").strip()
    if grid:
        try:
            size = int(grid)
            if size < MIN_PLAYABLE_GRID:
                raise ValueError(f"grid below {MIN_PLAYABLE_GRID}")
            config = replace(config, cols=size, rows=size)
        except ValueError:
            logger.warning("Invalid SNAKE_GRID %r, keeping %dx%d", grid, config.cols, config.rows)
    return config


def server_address() -> tuple[str, int]:
    host = os.getenv("SNAKE_HOST", "0.0.0.0")
    try:
        port = int(os.getenv("SNAKE_PORT", "8765"))
    except ValueError:
        logger.warning("Invalid SNAKE_PORT, using 8765")
        port = 8765
    return host, port
