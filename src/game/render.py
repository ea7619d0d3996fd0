# src/game/render.py
from __future__ import annotations
import threading
from typing import Optional
import pygame
from .config import (
    COLOR_BG, COLOR_GROUND, COLOR_PLAYER, COLOR_OBSTACLE, COLOR_SCORE, COLOR_GAME_OVER,
    SCORE_LABEL_POS, SCORE_VALUE_POS, GAME_OVER_POS
)
from .world import FrameSnapshot


def _to_rect(r) -> pygame.Rect:
    x, y, w, h = r
    return pygame.Rect(int(x), int(y), int(w), int(h))


class FrameBuffer:
    """Render sink that just keeps the latest snapshot (tick thread -> display thread)."""
    def __init__(self):
        self._lock = threading.Lock()
        self._latest: Optional[FrameSnapshot] = None
        self.frames = 0

    def draw(self, snapshot: FrameSnapshot):
        with self._lock:
            self._latest = snapshot
            self.frames += 1

    @property
    def latest(self) -> Optional[FrameSnapshot]:
        with self._lock:
            return self._latest


class PygameRenderer:
    """Draws a FrameSnapshot onto a pygame surface."""
    def __init__(self, surface: pygame.Surface, font: Optional[pygame.font.Font] = None,
                 banner_font: Optional[pygame.font.Font] = None):
        self.surface = surface
        if font is None or banner_font is None:
            pygame.font.init()
        self.font = font or pygame.font.SysFont("couriernew", 20, bold=True)
        self.banner_font = banner_font or pygame.font.SysFont("couriernew", 40, bold=True)

    def draw(self, snap: FrameSnapshot):
        s = self.surface
        s.fill(COLOR_BG)

        # ground band = bottom third
        band_h = snap.height / 3
        pygame.draw.rect(s, COLOR_GROUND, pygame.Rect(0, int(snap.height - band_h), snap.width, int(band_h)))

        pygame.draw.rect(s, COLOR_PLAYER, _to_rect(snap.player))
        for ob in snap.obstacles:
            pygame.draw.rect(s, COLOR_OBSTACLE, _to_rect(ob))

        s.blit(self.font.render("Score", True, COLOR_SCORE), SCORE_LABEL_POS)
        s.blit(self.font.render(str(snap.score), True, COLOR_SCORE), SCORE_VALUE_POS)

        if snap.game_over:
            s.blit(self.banner_font.render("GAME OVER", True, COLOR_GAME_OVER), GAME_OVER_POS)
