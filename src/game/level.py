# src/game/level.py
from __future__ import annotations
import logging
import random
from dataclasses import dataclass, field
from typing import List, Tuple
from .config import (
    WIDTH, OBSTACLE_W, OBSTACLE_H, MIN_DISTANCE, MAX_DISTANCE,
    SPAWN_CHANCE, FLOATING_CHANCE, FLOATING_SCORE_THRESHOLD,
    OBSTACLE_GROUND_Y, OBSTACLE_FLOAT_BAND,
    OBSTACLE_VX, OBSTACLE_ACCELERATION
)

logger = logging.getLogger(__name__)


@dataclass
class Obstacle:
    x: float
    y: float
    vx: float = OBSTACLE_VX
    ax: float = OBSTACLE_ACCELERATION
    width: int = OBSTACLE_W
    height: int = OBSTACLE_H
    kind: str = "ground"    # "ground" or "floating"
    initial_vx: float = field(init=False)
    initial_ax: float = field(init=False)

    def __post_init__(self):
        self.initial_vx = self.vx
        self.initial_ax = self.ax

    @property
    def rect(self) -> Tuple[float, float, float, float]:
        return (self.x, self.y, self.width, self.height)

    @property
    def off_screen(self) -> bool:
        return self.x + self.width <= 0

    def move(self):
        """One tick of kinematics. vx keeps growing leftward for as long as we live."""
        self.vx += self.ax
        self.x += self.vx

    def reset(self):
        """Back to spawn-time speed (for pooling; the game itself just respawns)."""
        self.vx = self.initial_vx
        self.ax = self.initial_ax


class ObstacleGen:
    """
    Spawns obstacles off the right edge and scrolls them left.
    - at most one spawn per tick, with a hard minimum gap to the previous one
    - floating obstacles only unlock once the score reaches the threshold
    """
    def __init__(self, seed: int | None = None, width: int = WIDTH, rng: random.Random | None = None,
                 ground_y: float = OBSTACLE_GROUND_Y):
        if rng is None:
            if seed is None:
                seed = random.randrange(0, 2**32 - 1)
            rng = random.Random(seed)
        self.seed = seed
        self.rng = rng
        self.width = width
        self.ground_y = float(ground_y)
        self.obstacles: List[Obstacle] = []

    @property
    def last(self) -> Obstacle | None:
        # spawn order == left-to-right order
        return self.obstacles[-1] if self.obstacles else None

    def _rand_range(self, lo: float, hi: float) -> float:
        # half-open [lo, hi); rng.uniform may return hi
        return self.rng.random() * (hi - lo) + lo

    def can_spawn(self) -> bool:
        last = self.last
        return last is None or last.x + MIN_DISTANCE < self.width

    def maybe_spawn(self, score: int) -> Obstacle | None:
        """Roll for a new obstacle. Returns it if one was added."""
        if not (self.rng.random() < SPAWN_CHANCE and self.can_spawn()):
            return None

        distance = self._rand_range(MIN_DISTANCE, MAX_DISTANCE)
        last = self.last
        x = last.x + distance if last is not None else float(self.width)

        if score >= FLOATING_SCORE_THRESHOLD and self.rng.random() < FLOATING_CHANCE:
            y = self._rand_range(self.ground_y - OBSTACLE_FLOAT_BAND, self.ground_y)
            ob = Obstacle(x=x, y=y, kind="floating")
        else:
            ob = Obstacle(x=x, y=self.ground_y, kind="ground")

        self.obstacles.append(ob)
        logger.debug("spawned %s obstacle at x=%.1f y=%.1f (score=%d)", ob.kind, ob.x, ob.y, score)
        return ob

    def update(self):
        """Move every obstacle, then drop the ones fully past the left edge."""
        for ob in self.obstacles:
            ob.move()
        self.obstacles = [ob for ob in self.obstacles if not ob.off_screen]

    def clear(self):
        self.obstacles = []
