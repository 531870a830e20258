from wormsnake.models import Cell, Direction, GameState


class ScriptedRng:
    """Hands out the given values in order, then ``default`` forever."""

    def __init__(self, *values, default=0.0):
        self.values = list(values)
        self.default = default

    def random(self):
        if self.values:
            return self.values.pop(0)
        return self.default


def make_state(**overrides) -> GameState:
    fields = dict(
        snake=(Cell(10, 10), Cell(9, 10), Cell(8, 10)),
        direction=Direction.RIGHT,
        pending_direction=Direction.RIGHT,
        apples=(Cell(20, 20),),
        running=True,
    )
    fields.update(overrides)
    return GameState(**fields)
