from __future__ import annotations

from typing import Callable, Optional

import pytest

from falling_blocks.game import ActivePiece, FallingBlocksGame, GameConfig, ManualTickSource, PieceKind, spawn_shape
from falling_blocks.game.pieces import spawn_column


@pytest.fixture
def ticks() -> ManualTickSource:
    return ManualTickSource()


@pytest.fixture
def game(ticks: ManualTickSource) -> FallingBlocksGame:
    g = FallingBlocksGame(GameConfig(random_seed=1234), tick_source=ticks)
    g.new_game()
    return g


@pytest.fixture
def set_active(game: FallingBlocksGame) -> Callable[..., ActivePiece]:
    """Replace the falling piece with a known kind at a known position."""

    def _set(kind: PieceKind, row: int = 0, col: Optional[int] = None) -> ActivePiece:
        shape = spawn_shape(kind)
        if col is None:
            col = spawn_column(game.grid.columns, shape)
        game.current_piece = ActivePiece(kind, shape, row, col)
        return game.current_piece

    return _set


@pytest.fixture
def fill_row(game: FallingBlocksGame) -> Callable[..., None]:
    """Fill a grid row with locked cells, leaving the columns in `skip` empty."""

    def _fill(row: int, skip=(), kind: PieceKind = PieceKind.Z) -> None:
        for col in range(game.grid.columns):
            if col not in skip:
                game.grid.set_cell(row, col, kind)

    return _fill
