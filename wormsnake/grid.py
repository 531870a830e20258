"""Grid geometry."""

import math
from typing import Iterator

from .config import GameConfig, DEFAULT_CONFIG
from .models import Cell, Direction


def in_bounds(cell: Cell, config: GameConfig = DEFAULT_CONFIG) -> bool:
    return 0 <= cell[0] < config.cols and 0 <= cell[1] < config.rows


def step(cell: Cell, direction: Direction) -> Cell:
    dx, dy = direction.vector
    return Cell(cell[0] + dx, cell[1] + dy)


def neighbors(cell: Cell, config: GameConfig = DEFAULT_CONFIG) -> list[tuple[Direction, Cell]]:
    """In-bounds orthogonal neighbours, paired with the direction that reaches them."""
    result = []
    for d in Direction:
        nxt = step(cell, d)
        if in_bounds(nxt, config):
            result.append((d, nxt))
    return result


def manhattan(a: Cell, b: Cell) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def distance(a: Cell, b: Cell) -> float:
    return math.hypot(a[0] - b[0], a[1] - b[1])


def all_cells(config: GameConfig = DEFAULT_CONFIG) -> Iterator[Cell]:
    for y in range(config.rows):
        for x in range(config.cols):
            yield Cell(x, y)
