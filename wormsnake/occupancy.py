"""Membership tests against the current state's collections.

Nothing here is cached: every call looks at the state it is given.
"""

from typing import Optional

from .models import Cell, GameState


def occupied_by_snake(state: GameState, cell: Cell) -> bool:
    return cell in state.snake


def occupied_by_worm(state: GameState, cell: Cell, skip: Optional[int] = None) -> bool:
    """True if any worm body covers ``cell``; the worm at index ``skip`` is ignored."""
    for i, worm in enumerate(state.worms):
        if i == skip:
            continue
        if cell in worm.body:
            return True
    return False


def occupied_by_consumable(state: GameState, cell: Cell, include_golden: bool = True) -> bool:
    if cell in state.apples:
        return True
    return include_golden and state.golden_apple is not None and cell == state.golden_apple


def occupied_by_tunnel(state: GameState, cell: Cell) -> bool:
    return cell in state.tunnels


def is_free(state: GameState, cell: Cell, include_golden: bool = True) -> bool:
    return not (
        occupied_by_snake(state, cell)
        or occupied_by_worm(state, cell)
        or occupied_by_consumable(state, cell, include_golden)
        or occupied_by_tunnel(state, cell)
    )
