# src/tests/loop_tests.py
"""
World state machine, input mapping, game loop and tick sources.

Usage (from repo root):
  python -m src.tests.loop_tests
"""
from __future__ import annotations
import threading
import time

from src.game import controls
from src.game.clock import FixedStepScheduler, ManualClock
from src.game.config import DEFAULT_GRAVITY, FALL_MULTIPLIER, GROUND_Y, JUMP_FORCE
from src.game.controls import Command
from src.game.loop import GameLoop
from src.game.render import FrameBuffer
from src.game.world import GameState
from src.tests.helpers import quiet_world, obstacle_landing_at


def _manual_loop():
    world = quiet_world()
    clock = ManualClock()
    sink = FrameBuffer()
    loop = GameLoop(world, clock, sink=sink)
    loop.start()
    return world, clock, sink, loop


def _crash(world, clock):
    world.obstacles.append(obstacle_landing_at(world.player.x, world.player.y))
    clock.advance(1)
    assert world.game_over


# --- input mapping ---

def test_key_mapping():
    assert controls.key_down("w", game_over=False) is Command.JUMP
    assert controls.key_down("W", game_over=False) is Command.JUMP
    assert controls.key_down("s", game_over=False) is Command.FAST_FALL_ON
    assert controls.key_down("S", game_over=False) is Command.FAST_FALL_ON
    assert controls.key_down("x", game_over=False) is None
    assert controls.key_down("space", game_over=False) is None
    for key in ("w", "s", "x", "return"):
        assert controls.key_down(key, game_over=True) is Command.RESTART
    assert controls.key_up("s") is Command.FAST_FALL_OFF
    assert controls.key_up("S") is Command.FAST_FALL_OFF
    assert controls.key_up("w") is None


# --- world ---

def test_score_increments_once_per_tick():
    world = quiet_world()
    for expected in range(1, 101):
        result = world.step()
        assert not result.collided and result.score_delta == 1
        assert world.score == expected
    assert world.state is GameState.RUNNING


def test_collision_ends_run_and_freezes_score():
    world = quiet_world()
    for _ in range(5):
        world.step()
    world.obstacles.append(obstacle_landing_at(50.0, GROUND_Y))
    result = world.step()
    assert result.collided and result.score_delta == 0
    assert world.state is GameState.GAME_OVER
    assert world.score == 5

    frozen_player = world.player.rect
    for _ in range(10):
        assert world.step().score_delta == 0
    assert world.score == 5
    assert world.player.rect == frozen_player


def test_world_restart_resets_everything():
    world = quiet_world()
    world.set_fast_fall(True)
    world.jump()
    world.step()
    world.obstacles.append(obstacle_landing_at(world.player.x, world.player.y))
    world.step()
    assert world.game_over

    world.restart()
    assert world.state is GameState.RUNNING
    assert world.score == 0
    assert world.obstacles == []
    assert (world.player.x, world.player.y) == (50, 187)
    assert world.player.vy == 0.0 and not world.player.jumping
    assert world.gravity == DEFAULT_GRAVITY


def test_snapshot_is_read_only_copy():
    world = quiet_world()
    world.obstacles.append(obstacle_landing_at(400.0, GROUND_Y))
    world.step()
    snap = world.snapshot()
    assert snap.player == world.player.rect
    assert len(snap.obstacles) == 1 and snap.score == 1 and not snap.game_over
    world.step()
    assert snap.score == 1, "snapshots must not follow later ticks"


# --- game loop ---

def test_jump_applied_on_next_tick():
    world, clock, _, loop = _manual_loop()
    assert loop.key_down("w") is Command.JUMP
    assert not world.player.jumping, "commands wait for the next tick"
    clock.advance(1)
    assert world.player.jumping
    assert world.player.vy == JUMP_FORCE + DEFAULT_GRAVITY
    assert world.player.y == GROUND_Y + JUMP_FORCE + DEFAULT_GRAVITY


def test_fast_fall_is_an_override_not_a_multiplier():
    world, clock, _, loop = _manual_loop()
    loop.key_down("s")
    loop.key_down("s")              # key auto-repeat
    clock.advance(1)
    assert world.gravity == DEFAULT_GRAVITY * FALL_MULTIPLIER
    loop.key_down("S")
    clock.advance(1)
    assert world.gravity == DEFAULT_GRAVITY * FALL_MULTIPLIER
    loop.key_up("s")
    clock.advance(1)
    assert world.gravity == DEFAULT_GRAVITY


def test_fast_fall_shortens_a_jump():
    def airtime(fast: bool) -> int:
        world, clock, _, loop = _manual_loop()
        loop.key_down("w")
        if fast:
            loop.key_down("s")
        clock.advance(1)
        ticks = 1
        while world.player.jumping:
            clock.advance(1)
            ticks += 1
        return ticks
    assert airtime(fast=True) < airtime(fast=False)


def test_unknown_keys_ignored():
    world, clock, sink, loop = _manual_loop()
    assert loop.key_down("q") is None
    assert loop.key_up("q") is None
    clock.advance(3)
    assert world.score == 3 and not world.player.jumping


def test_loop_renders_every_running_tick():
    world, clock, sink, loop = _manual_loop()
    clock.advance(4)
    assert sink.frames == 4
    assert sink.latest.score == 4 and not sink.latest.game_over


def test_collision_tick_renders_banner_then_loop_idles():
    world, clock, sink, loop = _manual_loop()
    clock.advance(3)
    _crash(world, clock)
    assert sink.frames == 4 and sink.latest.game_over
    assert sink.latest.score == 3

    clock.advance(20)               # clock keeps firing, nothing happens
    assert world.score == 3 and sink.frames == 4
    assert loop.state is GameState.GAME_OVER


def test_jump_ignored_while_game_over_restarts_instead():
    world, clock, sink, loop = _manual_loop()
    loop.key_down("s")
    clock.advance(2)
    _crash(world, clock)

    assert loop.key_down("w") is Command.RESTART
    assert loop.state is GameState.RUNNING
    assert world.score == 0 and world.obstacles == []
    assert world.player.rect == (50, 187, 33, 13)
    assert world.gravity == DEFAULT_GRAVITY
    assert not world.player.jumping
    assert clock.running and clock.starts == 2
    assert loop.restarts == 1

    clock.advance(2)
    assert world.score == 2


def test_restart_only_from_game_over():
    world, clock, _, loop = _manual_loop()
    clock.advance(2)
    assert loop.restart() is False
    assert world.score == 2 and clock.starts == 1
    assert clock.running and loop.state is GameState.RUNNING


def test_restart_waits_for_a_tick_in_progress():
    world, clock, _, loop = _manual_loop()
    _crash(world, clock)
    results = []
    with loop._lock:                 # a tick holding the loop
        t = threading.Thread(target=lambda: results.append(loop.restart()))
        t.start()
        time.sleep(0.05)
        assert results == [] and world.game_over
        assert clock.running, "restart must not touch the clock before it holds the lock"
    t.join(2.0)
    assert results == [True]
    assert not world.game_over and clock.running and clock.starts == 2


def test_concurrent_restarts_run_once():
    world, clock, _, loop = _manual_loop()
    _crash(world, clock)
    results = []
    threads = [threading.Thread(target=lambda: results.append(loop.restart())) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(2.0)
    assert sorted(results) == [False, False, False, True]
    assert loop.restarts == 1 and clock.starts == 2 and clock.running


def test_pending_commands_dropped_on_restart():
    world, clock, _, loop = _manual_loop()
    _crash(world, clock)
    loop.key_up("s")                 # queued while dead
    loop.key_down("a")               # restart
    clock.advance(1)
    assert world.gravity == DEFAULT_GRAVITY
    assert world.score == 1


# --- tick sources ---

def test_manual_clock_needs_start():
    clock = ManualClock()
    calls = []
    assert clock.advance(3) == 0
    clock.start(lambda: calls.append(1))
    assert clock.advance(3) == 3 and len(calls) == 3
    try:
        clock.start(lambda: None)
    except RuntimeError:
        pass
    else:
        raise AssertionError("double start must raise")
    clock.stop()
    assert clock.advance(2) == 0 and not clock.running


def _wait_for(cond, timeout: float = 2.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if cond():
            return True
        time.sleep(0.005)
    return cond()


def _tick_threads(name: str):
    return [t for t in threading.enumerate() if t.name == name and t.is_alive()]


def test_scheduler_ticks_and_stops():
    sched = FixedStepScheduler(fps=200, name="sched-test")
    calls = []
    sched.start(lambda: calls.append(1))
    assert _wait_for(lambda: len(calls) >= 5)
    try:
        sched.start(lambda: None)
    except RuntimeError:
        pass
    else:
        raise AssertionError("double start must raise")
    sched.stop()
    assert not sched.running
    n = len(calls)
    time.sleep(0.05)
    assert len(calls) == n, "no ticks after stop()"
    assert _tick_threads("sched-test") == []


def test_scheduler_stops_on_tick_error():
    sched = FixedStepScheduler(fps=200, name="sched-boom")

    def boom():
        raise ValueError("boom")
    sched.start(boom)
    assert _wait_for(lambda: not sched.running)
    sched.stop()


def test_slow_tick_outliving_stop_is_not_revived():
    sched = FixedStepScheduler(fps=200, name="sched-slow")
    in_slow_tick = threading.Event()
    slow_calls, fast_calls = [], []

    def slow():
        slow_calls.append(1)
        in_slow_tick.set()
        time.sleep(0.3)

    sched.start(slow)
    assert in_slow_tick.wait(2.0)
    sched.stop(timeout=0.05)        # gives up while the slow tick is still running
    assert not sched.running

    sched.start(lambda: fast_calls.append(1))
    try:
        assert len(_tick_threads("sched-slow")) == 1
        assert _wait_for(lambda: len(fast_calls) >= 5)
        assert len(slow_calls) == 1, "the old tick stream must not resume"
        assert len(_tick_threads("sched-slow")) == 1
    finally:
        sched.stop()
    assert _tick_threads("sched-slow") == []


def test_threaded_restart_never_doubles_tick_streams():
    world = quiet_world()
    sched = FixedStepScheduler(fps=120, name="loop-test")
    loop = GameLoop(world, sched, sink=FrameBuffer())
    loop.start()
    try:
        assert _wait_for(lambda: world.score > 3)
        for _ in range(3):
            with loop._lock:
                world.obstacles.append(obstacle_landing_at(world.player.x, world.player.y))
            assert _wait_for(lambda: world.game_over)
            assert loop.key_down("x") is Command.RESTART
            assert len(_tick_threads("loop-test")) == 1
            assert _wait_for(lambda: world.score > 0)
    finally:
        loop.stop()
    assert _tick_threads("loop-test") == []
    assert loop.restarts == 3


def main():
    for name, fn in sorted(globals().items()):
        if name.startswith("test_") and callable(fn):
            fn()
            print(f"✓ {name}")
    print("🎉 loop tests passed")


if __name__ == "__main__":
    main()
