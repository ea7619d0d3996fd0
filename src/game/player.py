# src/game/player.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple
from .config import PLAYER_X, PLAYER_W, PLAYER_H, GROUND_Y, JUMP_FORCE

Rect = Tuple[float, float, float, float]


@dataclass
class Player:
    """
    The box the user steers.
    - y is the TOP of the box (screen coords, +y goes down)
    - jumping stays True until the box lands again
    """
    x: float = float(PLAYER_X)
    y: float = float(GROUND_Y)
    vy: float = 0.0
    jumping: bool = False
    width: int = PLAYER_W
    height: int = PLAYER_H

    @property
    def rect(self) -> Rect:
        return (self.x, self.y, self.width, self.height)

    def jump(self) -> bool:
        """Kick upwards unless already airborne. Returns True if performed."""
        if not self.jumping:
            self.vy = JUMP_FORCE
            self.jumping = True
            return True
        return False

    def apply_gravity(self, gravity: float):
        self.vy += gravity
        self.y += self.vy

    def stop_jump(self):
        self.jumping = False

    def land(self, ground_y: float) -> bool:
        """Clamp onto the ground line if the feet reached it. Returns True on contact."""
        if self.y >= ground_y:
            self.y = ground_y
            self.vy = 0.0
            self.stop_jump()
            return True
        return False
