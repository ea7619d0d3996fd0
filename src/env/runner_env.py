# src/env/runner_env.py
from __future__ import annotations
from typing import Optional, Dict, Any
import numpy as np
import gymnasium as gym
import pygame
import random

from src.game.config import GameConfig, FPS
from src.game.clock import ManualClock
from src.game.loop import GameLoop
from src.game.render import PygameRenderer
from src.game.world import World
from src.env.observations import build_observation, OBS_LOW, OBS_HIGH

NOOP, JUMP, FAST_FALL = 0, 1, 2


class BoxRunnerEnv(gym.Env):
    """
    Box Runner Gymnasium environment (vector observations).
    - Simulation at a fixed 30 Hz, driven by a virtual clock (no sleeping).
    - Agent acts every `frame_skip` ticks (default 2) -> 15 decisions/sec.
    - Actions: 0 = NOOP, 1 = JUMP, 2 = FAST_FALL (held for the whole decision step).
    - Observation: shape (9,), float32, see src/env/observations.py.
    """
    metadata = {"render_modes": ["human", "rgb_array"], "render_fps": FPS}

    def __init__(self,
                 render_mode: Optional[str] = None,
                 frame_skip: int = 2,
                 time_limit_seconds: Optional[float] = 60.0,
                 config: Optional[GameConfig] = None):
        super().__init__()
        assert frame_skip >= 1, "frame_skip must be >= 1"
        assert render_mode is None or render_mode in self.metadata["render_modes"], f"bad render_mode {render_mode}"
        self.render_mode = render_mode
        self.frame_skip = int(frame_skip)
        self.config = config or GameConfig()

        self.time_limit_decisions = None
        if time_limit_seconds is not None:
            self.time_limit_decisions = int(self.config.fps * time_limit_seconds / self.frame_skip)

        self.action_space = gym.spaces.Discrete(3)
        self.observation_space = gym.spaces.Box(low=OBS_LOW, high=OBS_HIGH, dtype=np.float32)

        # --- Runtime state ---
        self.world: Optional[World] = None
        self.loop: Optional[GameLoop] = None
        self.clock: Optional[ManualClock] = None
        self.timestep: int = 0
        self.current_seed: Optional[int] = None

        # Rendering
        self.screen = None
        self.renderer: Optional[PygameRenderer] = None
        self.render_clock = None

    # -------------------- Core API --------------------

    def reset(self, *, seed: Optional[int] = None, options: Optional[Dict[str, Any]] = None):
        super().reset(seed=seed)  # initializes self.np_random

        # The world gets its own stdlib RNG, derived from gymnasium's so reset(seed=...) is repeatable.
        self.current_seed = int(self.np_random.integers(0, 2**31 - 1))
        self.world = World(self.config, rng=random.Random(self.current_seed))
        self.clock = ManualClock()
        self.loop = GameLoop(self.world, self.clock)
        self.loop.start()
        self.timestep = 0

        obs = self._get_obs()
        info = {"seed": self.current_seed, "score": self.world.score}
        return obs, info

    def step(self, action: int):
        assert self.action_space.contains(action), f"Invalid action {action}"
        assert self.world is not None and self.loop is not None

        # Same key events a human would send
        if not self.world.game_over:
            if action == JUMP:
                self.loop.key_down("w")
            if action == FAST_FALL:
                self.loop.key_down("s")
            else:
                self.loop.key_up("s")

        for _ in range(self.frame_skip):
            self.clock.advance(1)
            if self.world.game_over:
                break

        alive = not self.world.game_over
        reward = 1.0 if alive else -1.0

        self.timestep += 1
        terminated = not alive
        truncated = False
        if (self.time_limit_decisions is not None) and (self.timestep >= self.time_limit_decisions):
            truncated = True

        obs = self._get_obs()
        info = {
            "score": self.world.score,
            "timestep": self.timestep,
            "seed": self.current_seed,
            "obstacles": len(self.world.obstacles),
            "jumping": self.world.player.jumping,
        }

        if self.render_mode == "human":
            self.render()

        return obs, reward, terminated, truncated, info

    # -------------------- Helpers --------------------

    def _get_obs(self) -> np.ndarray:
        assert self.world is not None
        return build_observation(self.world)

    # -------------------- Rendering --------------------

    def render(self):
        if self.render_mode is None or self.world is None:
            return None

        if self.screen is None:
            pygame.init()
            size = (self.config.width, self.config.height)
            if self.render_mode == "human":
                self.screen = pygame.display.set_mode(size)
                pygame.display.set_caption("Box Runner — Gym Env")
                self.render_clock = pygame.time.Clock()
            else:
                self.screen = pygame.Surface(size)
            self.renderer = PygameRenderer(self.screen)

        self.renderer.draw(self.world.snapshot())

        if self.render_mode == "human":
            # Pump minimal event queue so the OS doesn't think we're hung
            pygame.event.pump()
            pygame.display.flip()
            self.render_clock.tick(self.metadata["render_fps"])
            return None

        # (H, W, 3) uint8
        arr = pygame.surfarray.array3d(self.screen)  # (W, H, 3)
        return np.transpose(arr, (1, 0, 2))

    def close(self):
        if self.loop is not None:
            self.loop.stop()
        if self.screen is not None:
            if self.render_mode == "human":
                pygame.display.quit()
            pygame.quit()
            self.screen = None
            self.renderer = None
            self.render_clock = None
