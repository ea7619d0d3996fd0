# src/tests/helpers.py
import random

from src.game.level import Obstacle
from src.game.world import World


class ConstRandom(random.Random):
    """random() always returns the same value (0.0 -> every roll passes, 0.99 -> none do)."""
    def __init__(self, value: float):
        super().__init__(0)
        self.value = value

    def random(self):
        return self.value


def quiet_world(**kw) -> World:
    """A world whose generator never spawns on its own."""
    return World(rng=ConstRandom(0.99), **kw)


def obstacle_landing_at(x: float, y: float) -> Obstacle:
    """Obstacle that sits at (x, y) right after its next move()."""
    ob = Obstacle(x=x, y=y)
    ob.x = x - (ob.vx + ob.ax)
    return ob
