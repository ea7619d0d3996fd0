# src/game/clock.py
"""
Fixed-rate tick sources.

Both expose the same tiny surface: start(callback), stop(), running.
- FixedStepScheduler: real time, one background thread per start().
- ManualClock: virtual time, ticks only when advance() is called (tests, gym env).
"""
from __future__ import annotations
import logging
import threading
import time
from typing import Callable, Optional

from .config import FPS

logger = logging.getLogger(__name__)

TickCallback = Callable[[], None]


class FixedStepScheduler:
    def __init__(self, fps: int = FPS, name: str = "tick"):
        if fps <= 0:
            raise ValueError(f"fps must be positive, got {fps}")
        self.tick_time = 1.0 / fps
        self.name = name
        self.ticks = 0
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive() and not self._stop.is_set()

    def start(self, callback: TickCallback):
        if self.running:
            raise RuntimeError("scheduler already running; stop() it first")
        old = self._thread
        if old is not None and old.is_alive() and old is not threading.current_thread():
            # a stop() that timed out mid-tick: let that tick finish before the next stream begins
            logger.debug("Waiting for previous tick thread to exit")
            old.join()

        # one Event per run, so a late thread can never be woken up again
        stop = threading.Event()
        self._stop = stop
        self._thread = threading.Thread(target=self._run, args=(callback, stop), name=self.name, daemon=True)
        self._thread.start()
        logger.debug("Tick thread started at %.1f Hz", 1.0 / self.tick_time)

    def stop(self, timeout: float | None = 1.0):
        """Stop ticking and wait for the thread. Safe to call when idle."""
        thread = self._thread
        self._stop.set()
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
            if thread.is_alive():
                # keep the handle; start() joins it before spawning a new one
                logger.warning("Tick thread did not stop within %.1fs", timeout)
                return
        self._thread = None
        logger.debug("Tick thread stopped after %d ticks", self.ticks)

    def _run(self, callback: TickCallback, stop: threading.Event):
        next_deadline = time.perf_counter()
        while not stop.is_set():
            try:
                callback()
            except Exception:
                logger.exception("Tick raised; stopping scheduler")
                stop.set()
                break
            self.ticks += 1

            # Sleep until the next fixed deadline; if we fell behind, don't try to catch up.
            next_deadline += self.tick_time
            sleep_time = next_deadline - time.perf_counter()
            if sleep_time > 0:
                stop.wait(sleep_time)
            else:
                next_deadline = time.perf_counter()


class ManualClock:
    """Virtual clock: each advance() fires the callback n times if started."""
    def __init__(self):
        self.ticks = 0
        self.starts = 0
        self._callback: Optional[TickCallback] = None

    @property
    def running(self) -> bool:
        return self._callback is not None

    def start(self, callback: TickCallback):
        if self.running:
            raise RuntimeError("clock already running; stop() it first")
        self._callback = callback
        self.starts += 1

    def stop(self):
        self._callback = None

    def advance(self, n: int = 1) -> int:
        """Fire up to n ticks. Stops early if the callback stops the clock. Returns ticks fired."""
        fired = 0
        for _ in range(n):
            if self._callback is None:
                break
            self._callback()
            self.ticks += 1
            fired += 1
        return fired
