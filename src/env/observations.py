# src/env/observations.py
"""
Compact observation vector for agents.

    [y_norm, vy_norm, jumping,
     dx1, y1, vx1,      # nearest obstacle still ahead of (or under) the player
     dx2, y2, vx2]      # the one after it

Missing obstacles use the "far away, on the ground, standing still" sentinel
(dx=1, y=1, vx=0) so an empty screen looks like max clearance.
"""
from __future__ import annotations
from typing import List
import numpy as np
from ..game.config import JUMP_FORCE
from ..game.world import World

N_OBSTACLES = 2
OBS_SIZE = 3 + 3 * N_OBSTACLES
MAX_VX = 30.0          # normalisation only; real speed is unbounded
VY_SCALE = abs(JUMP_FORCE)

OBS_LOW = np.array([0.0, -1.0, 0.0] + [-1.0, 0.0, -1.0] * N_OBSTACLES, dtype=np.float32)
OBS_HIGH = np.array([1.0, 1.0, 1.0] + [1.0, 1.0, 0.0] * N_OBSTACLES, dtype=np.float32)


def _clip(v: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, v))


def obstacles_ahead(world: World) -> List:
    px = world.player.x
    # left-to-right already (spawn order)
    return [ob for ob in world.obstacles if ob.x + ob.width >= px]


def build_observation(world: World) -> np.ndarray:
    p = world.player
    ground_y = world.config.ground_y
    width = world.config.width

    feats = [
        _clip(p.y / max(1.0, ground_y), 0.0, 1.0),
        _clip(p.vy / VY_SCALE, -1.0, 1.0),
        1.0 if p.jumping else 0.0,
    ]

    ahead = obstacles_ahead(world)[:N_OBSTACLES]
    for i in range(N_OBSTACLES):
        if i < len(ahead):
            ob = ahead[i]
            feats += [
                _clip((ob.x - p.x) / width, -1.0, 1.0),
                _clip(ob.y / max(1.0, ground_y), 0.0, 1.0),
                _clip(ob.vx / MAX_VX, -1.0, 0.0),
            ]
        else:
            feats += [1.0, 1.0, 0.0]

    return np.asarray(feats, dtype=np.float32)
