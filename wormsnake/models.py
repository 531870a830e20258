"""Data models."""

from dataclasses import dataclass, field
from enum import Enum
from typing import NamedTuple, Optional

from .constants import DIRECTIONS, OPPOSITES


class Cell(NamedTuple):
    x: int
    y: int


class Direction(str, Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"

    @property
    def opposite(self) -> "Direction":
        return Direction(OPPOSITES[self.value])

    @property
    def vector(self) -> tuple[int, int]:
        return DIRECTIONS[self.value]

    @classmethod
    def parse(cls, value) -> Optional["Direction"]:
        """Return the matching direction, or None for anything outside the enum."""
        if isinstance(value, Direction):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                return None
        return None


@dataclass(frozen=True)
class Worm:
    """Autonomous hazard. ``body`` is head first and always ``length`` cells long.

    ``phase`` only drives the wriggle animation and is ignored by equality.
    """

    head: Cell
    direction: Direction
    length: int
    body: tuple[Cell, ...]
    phase: float = field(default=0.0, compare=False)

    def __post_init__(self):
        if self.length < 1:
            raise ValueError(f"worm length must be positive, got {self.length}")
        if len(self.body) != self.length or self.body[0] != self.head:
            raise ValueError(f"worm body {self.body} does not match head {self.head} / length {self.length}")

    @classmethod
    def spawn(cls, head: Cell, direction: Direction, length: int, phase: float = 0.0) -> "Worm":
        return cls(head, direction, length, derive_body(head, direction, length), phase)

    def advance(self, head: Cell, direction: Direction) -> "Worm":
        body = (head,) + self.body[: self.length - 1]
        return Worm(head, direction, self.length, body, self.phase)

    def grow(self) -> "Worm":
        # The duplicated tail unfolds on the next move.
        return Worm(self.head, self.direction, self.length + 1, self.body + (self.body[-1],), self.phase)


def derive_body(head: Cell, direction: Direction, length: int) -> tuple[Cell, ...]:
    """Chain of ``length`` cells starting at ``head`` and trailing away from ``direction``."""
    dx, dy = direction.vector
    return tuple(Cell(head.x - dx * i, head.y - dy * i) for i in range(length))


@dataclass(frozen=True)
class GameState:
    snake: tuple[Cell, ...]  # head first
    direction: Direction = Direction.RIGHT
    pending_direction: Direction = Direction.RIGHT
    apples: tuple[Cell, ...] = ()
    apples_eaten: int = 0
    level: int = 1
    worms: tuple[Worm, ...] = ()
    tunnels: tuple[Cell, ...] = ()
    golden_apple: Optional[Cell] = None
    golden_used: bool = False
    effect_until: Optional[float] = None
    just_teleported: bool = False
    running: bool = False
    paused: bool = False
    game_over: bool = False
    win: bool = False

    @property
    def head(self) -> Cell:
        return self.snake[0]

    @property
    def finished(self) -> bool:
        return self.game_over or self.win

    def effect_active(self, now: float) -> bool:
        return self.effect_until is not None and now < self.effect_until
