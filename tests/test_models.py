import pytest

from wormsnake.config import GameConfig
from wormsnake.grid import in_bounds, manhattan, neighbors, step
from wormsnake.models import Cell, Direction, Worm


def test_opposite_is_involutive():
    for d in Direction:
        assert d.opposite != d
        assert d.opposite.opposite == d


def test_parse_direction():
    assert Direction.parse("up") is Direction.UP
    assert Direction.parse(" LEFT ") is Direction.LEFT
    assert Direction.parse(Direction.DOWN) is Direction.DOWN
    assert Direction.parse("diagonal") is None
    assert Direction.parse(3) is None
    assert Direction.parse(None) is None


def test_worm_derived_body():
    worm = Worm.spawn(Cell(5, 5), Direction.RIGHT, 2)
    assert worm.body == (Cell(5, 5), Cell(4, 5))


def test_worm_rejects_inconsistent_body():
    with pytest.raises(ValueError):
        Worm(Cell(0, 0), Direction.RIGHT, 2, (Cell(0, 0),))
    with pytest.raises(ValueError):
        Worm(Cell(0, 0), Direction.RIGHT, 1, (Cell(1, 0),))


def test_worm_grows_then_unfolds():
    worm = Worm.spawn(Cell(5, 5), Direction.RIGHT, 2).grow()
    assert worm.length == 3
    assert worm.body == (Cell(5, 5), Cell(4, 5), Cell(4, 5))
    moved = worm.advance(Cell(6, 5), Direction.RIGHT)
    assert moved.body == (Cell(6, 5), Cell(5, 5), Cell(4, 5))


def test_worm_phase_is_not_part_of_equality():
    a = Worm.spawn(Cell(5, 5), Direction.UP, 2, phase=0.0)
    b = Worm.spawn(Cell(5, 5), Direction.UP, 2, phase=3.2)
    assert a == b


def test_bounds():
    assert in_bounds(Cell(0, 0))
    assert in_bounds(Cell(24, 24))
    assert not in_bounds(Cell(25, 0))
    assert not in_bounds(Cell(-1, 3))
    small = GameConfig(cols=4, rows=2)
    assert not in_bounds(Cell(1, 2), small)


def test_neighbors_at_corner():
    around = neighbors(Cell(0, 0))
    assert {c for _, c in around} == {Cell(1, 0), Cell(0, 1)}
    assert step(Cell(3, 3), Direction.UP) == Cell(3, 2)
    assert manhattan(Cell(0, 0), Cell(3, 4)) == 7
