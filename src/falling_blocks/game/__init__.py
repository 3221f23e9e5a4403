"""Game module for Falling Blocks.

Exports the core game engine and supporting classes:
- GameGrid: Grid representation, collision checks and row clearing
- PieceKind: Enum of piece kinds (plus the EMPTY sentinel)
- ScoringRules: Scoring, leveling and fall-interval configuration
- FallingBlocksGame: Engine state machine driven by commands and ticks
- Command / GameStatus: Engine command vocabulary and status values
- TickSource / ManualTickSource: Timer contract the engine drives
"""

from .grid import GameGrid
from .pieces import COLORS, PieceKind, rotate_shape, spawn_shape
from .rules import ScoringRules
from .difficulty import DIFFICULTY_INTERVALS, interval_for_difficulty
from .timing import ManualTickSource, TickSource
from .core import ActivePiece, Command, FallingBlocksGame, GameConfig, GameStatus

__all__ = [
    "GameGrid",
    "PieceKind",
    "COLORS",
    "rotate_shape",
    "spawn_shape",
    "ScoringRules",
    "DIFFICULTY_INTERVALS",
    "interval_for_difficulty",
    "TickSource",
    "ManualTickSource",
    "ActivePiece",
    "Command",
    "FallingBlocksGame",
    "GameConfig",
    "GameStatus",
]
