from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any, Callable, Dict, List, Optional, Tuple

import numpy as np

from .difficulty import interval_for_difficulty
from .grid import GameGrid
from .pieces import PLAYABLE_KINDS, PieceKind, Shape, rotate_shape, spawn_column, spawn_shape
from .rules import ScoringRules
from .timing import ManualTickSource, TickSource

logger = logging.getLogger(__name__)

# Horizontal offsets tried, in order, after a rotation.
KICK_OFFSETS = (0, 1, -1, 2, -2)


class Command(IntEnum):
    MOVE_LEFT = 0
    MOVE_RIGHT = 1
    ROTATE_CW = 2
    ROTATE_CCW = 3
    SOFT_DROP = 4
    HARD_DROP = 5
    HOLD = 6
    PAUSE_TOGGLE = 7
    RESET = 8


class GameStatus(Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    PAUSED = "paused"
    GAME_OVER = "game_over"


@dataclass
class ActivePiece:
    kind: PieceKind
    shape: Shape
    row: int
    col: int

    def copy(self) -> "ActivePiece":
        return ActivePiece(self.kind, self.shape.copy(), self.row, self.col)

    def cells(self, row: Optional[int] = None) -> List[Tuple[int, int]]:
        """Grid (row, col) of every occupied cell, optionally at another row."""
        top = self.row if row is None else row
        return [(top + int(r), self.col + int(c)) for r, c in zip(*np.nonzero(self.shape))]


@dataclass
class GameConfig:
    columns: int = 10
    rows: int = 20
    random_seed: Optional[int] = None
    difficulty: Optional[str] = None
    # Reject a hold swap whose spawn position is blocked instead of allowing it.
    check_hold_swap: bool = True

    def __post_init__(self) -> None:
        if self.columns < 1 or self.rows < 1:
            raise ValueError(f"grid dimensions must be positive, got {self.columns}x{self.rows}")


class FallingBlocksGame:
    """Falling-block game engine.

    Owns the grid, the falling piece, the next/held kinds, score and level.
    Every public operation runs to completion synchronously; callers must
    serialize access onto one thread. Commands that are not allowed in the
    current state, or that would produce an invalid placement, do nothing.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        tick_source: Optional[TickSource] = None,
    ) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.tick_source: TickSource = tick_source if tick_source is not None else ManualTickSource()
        self.rng = random.Random(self.config.random_seed)
        self.grid = GameGrid(self.config.columns, self.config.rows)
        self.current_piece: Optional[ActivePiece] = None
        self.next_kind: Optional[PieceKind] = None
        self.held_kind: Optional[PieceKind] = None
        self.hold_available = True
        self.score = 0
        self.lines_cleared = 0
        self.level = 1
        self.fall_interval = interval_for_difficulty(self.config.difficulty)
        self.running = False
        self.paused = False
        self.over = False
        self._listeners: List[Callable[[], None]] = []
        self._interval_listeners: List[Callable[[int], None]] = []

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------
    def add_listener(self, callback: Callable[[], None]) -> None:
        """Register a callback invoked after every state change."""
        self._listeners.append(callback)

    def add_interval_listener(self, callback: Callable[[int], None]) -> None:
        """Register a callback invoked with the new fall interval when it changes."""
        self._interval_listeners.append(callback)

    def _changed(self) -> None:
        for callback in self._listeners:
            callback()

    def _set_fall_interval(self, interval: int) -> None:
        if interval == self.fall_interval:
            return
        self.fall_interval = interval
        for callback in self._interval_listeners:
            callback(interval)

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------
    @property
    def status(self) -> GameStatus:
        if self.over:
            return GameStatus.GAME_OVER
        if not self.running:
            return GameStatus.NOT_STARTED
        if self.paused:
            return GameStatus.PAUSED
        return GameStatus.RUNNING

    def _can_act(self) -> bool:
        return self.running and not self.paused and not self.over and self.current_piece is not None

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------
    def set_difficulty(self, name: Optional[str]) -> int:
        """Set the fall interval from a difficulty name and return it.

        The value survives `new_game()`; only level-ups change it afterwards.
        """
        previous = self.fall_interval
        self._set_fall_interval(interval_for_difficulty(name))
        logger.info("Difficulty %r -> fall interval %d ms", name, self.fall_interval)
        if self.running and not self.paused and not self.over:
            self.tick_source.arm(self.fall_interval)
        if self.fall_interval != previous:
            self._changed()
        return self.fall_interval

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def _random_kind(self) -> PieceKind:
        return self.rng.choice(PLAYABLE_KINDS)

    def new_game(self) -> None:
        self.tick_source.stop()
        self.grid.reset()
        self.score = 0
        self.lines_cleared = 0
        self.level = 1
        # fall_interval is left untouched: it comes from the difficulty setting.
        self.held_kind = None
        self.hold_available = True
        self.running = True
        self.paused = False
        self.over = False
        self.next_kind = self._random_kind()
        self.spawn_next()
        if not self.over:
            self.tick_source.arm(self.fall_interval)
        logger.info("New game started (fall interval %d ms)", self.fall_interval)
        self._changed()

    def spawn_next(self) -> None:
        kind = self.next_kind if self.next_kind is not None else self._random_kind()
        self.next_kind = self._random_kind()
        shape = spawn_shape(kind)
        self.current_piece = ActivePiece(kind, shape, 0, spawn_column(self.grid.columns, shape))
        self.hold_available = True
        logger.debug("Spawned %s at column %d, next %s", kind.name, self.current_piece.col, self.next_kind.name)
        if not self.is_valid_placement(shape, 0, self.current_piece.col):
            self.over = True
            self.running = False
            self.tick_source.stop()
            logger.info("Game over: score %d, lines %d, level %d", self.score, self.lines_cleared, self.level)
        self._changed()

    # ------------------------------------------------------------------
    # Placement
    # ------------------------------------------------------------------
    def is_valid_placement(self, shape: Shape, row: int, col: int) -> bool:
        return self.grid.is_valid_placement(shape, row, col)

    def _fits_below(self, piece: ActivePiece, row: int) -> bool:
        return self.grid.is_valid_placement(piece.shape, row + 1, piece.col)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------
    def move(self, d_row: int, d_col: int) -> bool:
        if not self._can_act():
            return False
        piece = self.current_piece
        new_row, new_col = piece.row + d_row, piece.col + d_col
        if not self.grid.is_valid_placement(piece.shape, new_row, new_col):
            return False
        piece.row, piece.col = new_row, new_col
        self._changed()
        return True

    def rotate(self, clockwise: bool = True) -> bool:
        if not self._can_act():
            return False
        piece = self.current_piece
        if piece.kind == PieceKind.O:
            return False
        rotated = rotate_shape(piece.shape, clockwise)
        for offset in KICK_OFFSETS:
            if self.grid.is_valid_placement(rotated, piece.row, piece.col + offset):
                piece.shape = rotated
                piece.col += offset
                self._changed()
                return True
        return False

    def soft_drop_step(self) -> bool:
        if not self._can_act():
            return False
        piece = self.current_piece
        if not self._fits_below(piece, piece.row):
            return False
        piece.row += 1
        self.score += self.rules.soft_drop_points
        self._changed()
        return True

    def hard_drop(self) -> int:
        """Drop the piece to the floor, lock it, and return rows descended."""
        if not self._can_act():
            return 0
        piece = self.current_piece
        dropped = 0
        while self._fits_below(piece, piece.row):
            piece.row += 1
            self.score += self.rules.hard_drop_points
            dropped += 1
        self.lock()
        return dropped

    def tick(self) -> None:
        if not self._can_act():
            return
        piece = self.current_piece
        if not self._fits_below(piece, piece.row):
            self.lock()
            return
        piece.row += 1
        self._changed()

    on_tick = tick

    def lock(self) -> int:
        """Lock the active piece, clear full rows, then spawn the next piece.

        Returns the number of rows cleared by this lock.
        """
        if not self._can_act():
            return 0
        piece = self.current_piece
        self.grid.lock_shape(piece.shape, piece.row, piece.col, piece.kind)
        cleared = self.grid.clear_full_rows()
        logger.debug("Locked %s at (%d, %d), cleared %d", piece.kind.name, piece.row, piece.col, cleared)
        if cleared > 0:
            self.score += self.rules.score_for_lines(cleared, self.level)
            self.lines_cleared += cleared
            new_level = self.rules.level_for_lines(self.lines_cleared)
            if new_level > self.level:
                self.level = new_level
                self._set_fall_interval(self.rules.fall_interval_for_level(self.level))
                self.tick_source.arm(self.fall_interval)
                logger.info("Level %d reached, fall interval %d ms", self.level, self.fall_interval)
        self.spawn_next()
        return cleared

    def hold(self) -> bool:
        if not self._can_act() or not self.hold_available:
            return False
        piece = self.current_piece
        if self.held_kind is None:
            self.held_kind = piece.kind
            self.spawn_next()
        else:
            shape = spawn_shape(self.held_kind)
            col = spawn_column(self.grid.columns, shape)
            if self.config.check_hold_swap and not self.grid.is_valid_placement(shape, 0, col):
                logger.debug("Hold swap to %s rejected: spawn position blocked", self.held_kind.name)
                return False
            swapped_in = self.held_kind
            self.held_kind = piece.kind
            self.current_piece = ActivePiece(swapped_in, shape, 0, col)
        self.hold_available = False
        logger.debug("Hold: active %s, held %s", self.current_piece.kind.name, self.held_kind.name)
        self._changed()
        return True

    def pause_toggle(self) -> None:
        if self.over or not self.running:
            return
        self.paused = not self.paused
        if self.paused:
            self.tick_source.stop()
        else:
            self.tick_source.arm(self.fall_interval)
        logger.info("Game %s", "paused" if self.paused else "resumed")
        self._changed()

    def apply(self, command: Command | int) -> None:
        """Dispatch a discrete command to the matching operation."""
        command = Command(command)
        if command == Command.MOVE_LEFT:
            self.move(0, -1)
        elif command == Command.MOVE_RIGHT:
            self.move(0, 1)
        elif command == Command.SOFT_DROP:
            self.soft_drop_step()
        elif command == Command.ROTATE_CW:
            self.rotate(True)
        elif command == Command.ROTATE_CCW:
            self.rotate(False)
        elif command == Command.HARD_DROP:
            self.hard_drop()
        elif command == Command.HOLD:
            self.hold()
        elif command == Command.PAUSE_TOGGLE:
            self.pause_toggle()
        elif command == Command.RESET:
            self.new_game()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @property
    def active(self) -> Optional[ActivePiece]:
        return None if self.current_piece is None else self.current_piece.copy()

    def cell(self, row: int, col: int) -> PieceKind:
        return self.grid.cell(row, col)

    def grid_cells(self) -> np.ndarray:
        return self.grid.clone_state()

    def ghost_row(self) -> Optional[int]:
        """Lowest row the active piece could reach from its current column."""
        piece = self.current_piece
        if piece is None:
            return None
        row = piece.row
        while self._fits_below(piece, row):
            row += 1
        return row

    def get_state(self) -> np.ndarray:
        # Overlay current piece on a copy of the grid for observation
        state = self.grid.clone_state()
        if self.current_piece is not None and not self.over:
            for r, c in self.current_piece.cells():
                if self.grid.is_inside(r, c):
                    # Use negative to indicate falling piece overlay
                    state[r, c] = -int(self.current_piece.kind)
        return state

    def get_info(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "level": self.level,
            "lines_cleared": self.lines_cleared,
            "fall_interval": self.fall_interval,
            "next_kind": self.next_kind,
            "held_kind": self.held_kind,
            "hold_available": self.hold_available,
            "status": self.status,
        }
