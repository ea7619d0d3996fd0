# src/game/config.py
from __future__ import annotations
from dataclasses import dataclass

# --- Display ---
WIDTH = 800
HEIGHT = 300
FPS = 30                    # simulation ticks per second (fixed step, no dt scaling)
GROUND_BAND_H = HEIGHT / 3  # grey band at the bottom of the screen

# --- Player ---
PLAYER_X = 50
PLAYER_W = 33
PLAYER_H = 13
GROUND_Y = HEIGHT - GROUND_BAND_H - PLAYER_H   # ground contact line (187)

# --- Physics (px/tick, px/tick^2) ---
DEFAULT_GRAVITY = 1.5
FALL_MULTIPLIER = 5         # gravity while the fast-fall key is held
JUMP_FORCE = -20.0
SCORE_INCREMENT = 1

# --- Obstacle generation ---
OBSTACLE_W = 33
OBSTACLE_H = 13
MIN_DISTANCE = 200          # gap between consecutive spawns
MAX_DISTANCE = 300
SPAWN_CHANCE = 0.5
FLOATING_CHANCE = 0.5
FLOATING_SCORE_THRESHOLD = 200
OBSTACLE_MIN_Y = 100        # floating band [min, max)
OBSTACLE_MAX_Y = GROUND_Y
OBSTACLE_GROUND_Y = GROUND_Y
OBSTACLE_FLOAT_BAND = OBSTACLE_MAX_Y - OBSTACLE_MIN_Y   # floating band height, measured up from the ground line
OBSTACLE_VX = -10.0
OBSTACLE_ACCELERATION = -0.1   # negative: speeds up towards the left, never clamped

# --- Colors (RGB) ---
COLOR_BG = (255, 255, 255)
COLOR_GROUND = (128, 128, 128)
COLOR_PLAYER = (0, 0, 0)
COLOR_OBSTACLE = (255, 0, 0)
COLOR_SCORE = (255, 255, 0)
COLOR_GAME_OVER = (255, 0, 0)

# --- HUD ---
SCORE_LABEL_POS = (50, 30)
SCORE_VALUE_POS = (50, 60)
GAME_OVER_POS = (250, 150)
SEED_DEFAULT = None         # None -> fresh random layout every launch


@dataclass(frozen=True)
class GameConfig:
    """Viewport geometry and tick rate for one world."""
    width: int = WIDTH
    height: int = HEIGHT
    fps: int = FPS

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"viewport must be positive, got {self.width}x{self.height}")
        if self.fps <= 0:
            raise ValueError(f"fps must be positive, got {self.fps}")
        if self.ground_y < 0:
            raise ValueError(f"viewport height {self.height} leaves no room for the player")

    @property
    def ground_band_h(self) -> float:
        return self.height / 3

    @property
    def ground_y(self) -> float:
        """Top of the player when its feet touch the ground band."""
        return self.height - self.ground_band_h - PLAYER_H

    @property
    def tick_time(self) -> float:
        return 1.0 / self.fps
