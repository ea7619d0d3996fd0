# src/game/controls.py
from __future__ import annotations
from enum import Enum
from typing import Optional

JUMP_KEYS = ("w", "W")
FALL_KEYS = ("s", "S")


class Command(Enum):
    JUMP = "jump"
    FAST_FALL_ON = "fast_fall_on"
    FAST_FALL_OFF = "fast_fall_off"
    RESTART = "restart"


def key_down(key: str, game_over: bool) -> Optional[Command]:
    """Any key restarts after a crash; otherwise only W and S mean something."""
    if game_over:
        return Command.RESTART
    if key in JUMP_KEYS:
        return Command.JUMP
    if key in FALL_KEYS:
        return Command.FAST_FALL_ON
    return None


def key_up(key: str) -> Optional[Command]:
    if key in FALL_KEYS:
        return Command.FAST_FALL_OFF
    return None
