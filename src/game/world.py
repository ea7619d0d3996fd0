# src/game/world.py
from __future__ import annotations
import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Tuple
from .config import GameConfig, DEFAULT_GRAVITY, FALL_MULTIPLIER, SCORE_INCREMENT
from .collision import first_collision
from .level import ObstacleGen
from .player import Player, Rect

logger = logging.getLogger(__name__)


class GameState(Enum):
    RUNNING = "running"
    GAME_OVER = "game_over"


@dataclass(frozen=True)
class FrameSnapshot:
    """Read-only view of one frame, handed to render sinks."""
    player: Rect
    obstacles: Tuple[Rect, ...]
    score: int
    game_over: bool
    ground_y: float
    width: int
    height: int


@dataclass(frozen=True)
class StepResult:
    collided: bool = False
    score_delta: int = 0


class World:
    """
    All mutable game state for one session: player, obstacles, gravity, score.
    One call to step() == one fixed tick.
    """
    def __init__(self, config: GameConfig | None = None, seed: int | None = None,
                 rng: random.Random | None = None):
        self.config = config or GameConfig()
        self.level = ObstacleGen(seed, width=self.config.width, rng=rng, ground_y=self.config.ground_y)
        self.player = self._spawn_player()
        self.gravity = DEFAULT_GRAVITY
        self.score = 0
        self.state = GameState.RUNNING

    def _spawn_player(self) -> Player:
        return Player(y=self.config.ground_y)

    @property
    def game_over(self) -> bool:
        return self.state is GameState.GAME_OVER

    @property
    def obstacles(self):
        return self.level.obstacles

    # --- commands ---

    def jump(self) -> bool:
        if self.game_over:
            return False
        return self.player.jump()

    def set_fast_fall(self, on: bool):
        # direct override: holding the key must never compound
        self.gravity = DEFAULT_GRAVITY * FALL_MULTIPLIER if on else DEFAULT_GRAVITY

    # --- simulation ---

    def step(self) -> StepResult:
        if self.game_over:
            return StepResult()

        self.player.apply_gravity(self.gravity)
        self.level.maybe_spawn(self.score)
        self.level.update()
        self.player.land(self.config.ground_y)

        hit = first_collision(self.player.rect, self.level.obstacles)
        if hit is not None:
            logger.info("Collision detected! score=%d obstacle=(%.1f, %.1f)", self.score, hit.x, hit.y)
            self.state = GameState.GAME_OVER
            return StepResult(collided=True)

        self.score += SCORE_INCREMENT
        return StepResult(score_delta=SCORE_INCREMENT)

    def restart(self):
        self.player = self._spawn_player()
        self.level.clear()
        self.gravity = DEFAULT_GRAVITY
        self.score = 0
        self.state = GameState.RUNNING

    def snapshot(self) -> FrameSnapshot:
        return FrameSnapshot(
            player=self.player.rect,
            obstacles=tuple(ob.rect for ob in self.level.obstacles),
            score=self.score,
            game_over=self.game_over,
            ground_y=self.config.ground_y,
            width=self.config.width,
            height=self.config.height,
        )
