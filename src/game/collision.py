# src/game/collision.py
from __future__ import annotations
from typing import Iterable, Optional, Tuple

Rect = Tuple[float, float, float, float]   # (x, y, w, h), top-left origin


def rects_overlap(a: Rect, b: Rect) -> bool:
    """
    AABB test on float rects. Touching edges count as a hit.
    (pygame.Rect would truncate to ints and ignore touching edges.)
    """
    ax, ay, aw, ah = a
    bx, by, bw, bh = b
    return not (ax + aw < bx or
                ax > bx + bw or
                ay + ah < by or
                ay > by + bh)


def first_collision(player_rect: Rect, obstacles: Iterable) -> Optional[object]:
    """Return the first obstacle whose rect overlaps the player, else None."""
    for ob in obstacles:
        if rects_overlap(player_rect, ob.rect):
            return ob
    return None
