from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from falling_blocks.game import COLORS, Command, FallingBlocksGame, GameConfig, PieceKind

# Env action index -> engine command; None lets gravity act alone.
ENV_ACTIONS: Tuple[Optional[Command], ...] = (
    Command.MOVE_LEFT,
    Command.MOVE_RIGHT,
    Command.ROTATE_CW,
    Command.ROTATE_CCW,
    Command.SOFT_DROP,
    Command.HARD_DROP,
    Command.HOLD,
    None,
)


class FallingBlocksEnv(gym.Env):
    """Single-agent environment over `FallingBlocksGame`.

    Each step applies one command and then one gravity tick (skipped after a
    hard drop, which already locked the piece). Pause and reset are not part
    of the action space; episodes restart through `reset()`.
    """

    metadata = {"render_modes": ["rgb_array"], "render_fps": 30}

    def __init__(self, config: Optional[GameConfig] = None, render_mode: Optional[str] = None,
                 max_episode_steps: int = 5000,
                 score_weight: float = 0.01,
                 terminal_penalty: float = -1.0) -> None:
        super().__init__()
        self.game = FallingBlocksGame(config)
        self.render_mode = render_mode
        self.max_episode_steps = int(max_episode_steps)
        self.score_weight = float(score_weight)
        self.terminal_penalty = float(terminal_penalty)

        rows, cols = self.game.grid.rows, self.game.grid.columns
        n_kinds = len(PieceKind)

        # Grid holds locked kinds (1..7) and the falling piece as negative kinds.
        self.observation_space = spaces.Dict(
            {
                "grid": spaces.Box(low=-(n_kinds - 1), high=n_kinds - 1, shape=(rows, cols), dtype=np.int8),
                "next": spaces.Discrete(n_kinds),
                "held": spaces.Discrete(n_kinds),
                "hold_available": spaces.Discrete(2),
            }
        )
        self.action_space = spaces.Discrete(len(ENV_ACTIONS))

        self._last_obs: Optional[Dict[str, Any]] = None
        self._steps = 0

    def _get_obs(self) -> Dict[str, Any]:
        held = self.game.held_kind
        next_kind = self.game.next_kind
        return {
            "grid": self.game.get_state().astype(np.int8),
            "next": int(next_kind) if next_kind is not None else 0,
            "held": int(held) if held is not None else 0,
            "hold_available": int(self.game.hold_available),
        }

    def _get_info(self) -> Dict[str, Any]:
        info = self.game.get_info()
        info["steps"] = self._steps
        info["ghost_row"] = self.game.ghost_row()
        info["filled_cells"] = self.game.grid.filled_cells()
        return info

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        if seed is not None:
            self.game.rng.seed(seed)
        self.game.new_game()
        self._steps = 0
        obs = self._get_obs()
        self._last_obs = obs
        return obs, self._get_info()

    def step(self, action: int):
        if not self.action_space.contains(int(action)):
            raise ValueError(f"action {action!r} outside {self.action_space}")
        command = ENV_ACTIONS[int(action)]

        score_before = self.game.score
        if command is not None:
            self.game.apply(command)
        if command != Command.HARD_DROP:
            self.game.tick()
        self._steps += 1

        terminated = bool(self.game.over)
        truncated = not terminated and self._steps >= self.max_episode_steps

        reward_components: Dict[str, float] = {
            "score": self.score_weight * float(self.game.score - score_before),
        }
        if terminated:
            reward_components["terminal"] = self.terminal_penalty
        reward = float(sum(reward_components.values()))

        obs = self._get_obs()
        info = self._get_info()
        info["reward_components"] = reward_components
        self._last_obs = obs
        return obs, reward, terminated, truncated, info

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode != "rgb_array":
            return None
        grid = self._last_obs["grid"] if self._last_obs is not None else self.game.get_state()
        cell = 12
        h, w = grid.shape
        img = np.zeros((h * cell, w * cell, 3), dtype=np.uint8)
        for y in range(h):
            for x in range(w):
                v = abs(int(grid[y, x]))
                color = COLORS[PieceKind(v)] if v else (30, 30, 36)
                img[y * cell : (y + 1) * cell, x * cell : (x + 1) * cell, :] = color
        return img

    def close(self) -> None:
        pass
