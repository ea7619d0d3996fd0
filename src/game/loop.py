# src/game/loop.py
from __future__ import annotations
import logging
import threading
from collections import deque
from typing import Deque, Optional, Protocol

from . import controls
from .controls import Command
from .world import World, GameState, FrameSnapshot

logger = logging.getLogger(__name__)


class RenderSink(Protocol):
    def draw(self, snapshot: FrameSnapshot) -> None: ...


class TickSource(Protocol):
    running: bool
    def start(self, callback) -> None: ...
    def stop(self) -> None: ...


class GameLoop:
    """
    Drives a World from a fixed-rate tick source.

    Key events may arrive from another thread than the ticks; a lock keeps
    input handling and tick() on one logical sequence. Commands are buffered
    and applied at the start of the next tick.
    """
    def __init__(self, world: World, clock: TickSource, sink: Optional[RenderSink] = None):
        self.world = world
        self.clock = clock
        self.sink = sink
        self.restarts = 0
        self._pending: Deque[Command] = deque()
        self._lock = threading.RLock()
        self._restart_lock = threading.Lock()

    @property
    def state(self) -> GameState:
        return self.world.state

    # --- lifecycle ---

    def start(self):
        self.clock.start(self.tick)

    def stop(self):
        self.clock.stop()

    def restart(self) -> bool:
        """GAME_OVER -> RUNNING. The old tick source is fully stopped before the new one starts."""
        with self._restart_lock:
            with self._lock:
                if not self.world.game_over:
                    return False
            # outside the tick lock: the tick thread may be waiting on it while we join
            self.clock.stop()
            with self._lock:
                self._pending.clear()
                self.world.restart()
                self.restarts += 1
            logger.info("Restarted (run #%d)", self.restarts + 1)
            self.clock.start(self.tick)
            return True

    # --- input ---

    def key_down(self, key: str) -> Optional[Command]:
        with self._lock:
            cmd = controls.key_down(key, self.world.game_over)
            if cmd is not None and cmd is not Command.RESTART:
                self._pending.append(cmd)
        if cmd is Command.RESTART:
            self.restart()
        return cmd

    def key_up(self, key: str) -> Optional[Command]:
        with self._lock:
            cmd = controls.key_up(key)
            if cmd is not None:
                self._pending.append(cmd)
        return cmd

    def _apply(self, cmd: Command):
        if cmd is Command.JUMP:
            self.world.jump()
        elif cmd is Command.FAST_FALL_ON:
            self.world.set_fast_fall(True)
        elif cmd is Command.FAST_FALL_OFF:
            self.world.set_fast_fall(False)

    # --- tick ---

    def tick(self):
        with self._lock:
            if self.world.game_over:
                return
            while self._pending:
                self._apply(self._pending.popleft())
            self.world.step()
            if self.sink is not None:
                self.sink.draw(self.world.snapshot())
