from __future__ import annotations

import numpy as np
import pytest

from falling_blocks.game import GameGrid, PieceKind, spawn_shape


@pytest.fixture
def grid() -> GameGrid:
    return GameGrid(10, 20)


def _fill(grid: GameGrid, row: int, skip=(), kind=PieceKind.Z) -> None:
    for col in range(grid.columns):
        if col not in skip:
            grid.set_cell(row, col, kind)


@pytest.mark.parametrize("columns,rows", [(0, 20), (10, 0), (-1, 5), (3, 20), (10, 3)])
def test_degenerate_dimensions_are_rejected(columns, rows):
    with pytest.raises(ValueError):
        GameGrid(columns, rows)


def test_new_grid_is_empty(grid):
    assert grid.grid.shape == (20, 10)
    assert grid.filled_cells() == 0
    assert grid.cell(0, 0) == PieceKind.EMPTY


def test_placement_bounds(grid):
    o = spawn_shape(PieceKind.O)
    assert grid.is_valid_placement(o, 0, 0)
    assert grid.is_valid_placement(o, 18, 8)
    assert not grid.is_valid_placement(o, 0, -1)
    assert not grid.is_valid_placement(o, 0, 9)
    assert not grid.is_valid_placement(o, 19, 0)


def test_empty_shape_cells_ignore_walls(grid):
    i = spawn_shape(PieceKind.I)
    assert grid.is_valid_placement(i, -1, 0)
    assert grid.is_valid_placement(i, 17, 6)
    assert not grid.is_valid_placement(i, 17, 7)
    # Only column 2 of the vertical bar is occupied.
    vertical = np.rot90(i, -1)
    assert grid.is_valid_placement(vertical, 0, -2)
    assert not grid.is_valid_placement(vertical, 0, -3)
    assert grid.is_valid_placement(vertical, 16, 7)


def test_cells_above_the_top_skip_occupancy(grid):
    o = spawn_shape(PieceKind.O)
    grid.set_cell(0, 4, PieceKind.T)
    assert grid.is_valid_placement(o, -2, 4)
    assert not grid.is_valid_placement(o, -1, 4)
    # Side walls still apply above the field.
    assert not grid.is_valid_placement(o, -2, -1)


def test_occupied_cell_blocks_placement(grid):
    t = spawn_shape(PieceKind.T)
    grid.set_cell(11, 5, PieceKind.L)
    assert not grid.is_valid_placement(t, 10, 4)
    assert grid.is_valid_placement(t, 10, 6)


def test_validity_check_is_pure(grid):
    _fill(grid, 19, skip=(3,))
    before = grid.clone_state()
    for row in range(-2, 20):
        for col in range(-3, 11):
            grid.is_valid_placement(spawn_shape(PieceKind.S), row, col)
    assert np.array_equal(grid.grid, before)


def test_lock_shape_skips_rows_above_field(grid):
    o = spawn_shape(PieceKind.O)
    written = grid.lock_shape(o, -1, 2, PieceKind.O)
    assert written == 2
    assert grid.cell(0, 2) == PieceKind.O
    assert grid.cell(0, 3) == PieceKind.O
    assert grid.filled_cells() == 2


def test_clear_single_full_row_shifts_rows_above(grid):
    _fill(grid, 19)
    grid.set_cell(18, 0, PieceKind.I)
    grid.set_cell(10, 9, PieceKind.J)
    assert grid.clear_full_rows() == 1
    assert grid.grid.shape == (20, 10)
    assert grid.cell(19, 0) == PieceKind.I
    assert grid.cell(11, 9) == PieceKind.J
    assert not np.any(grid.grid[0])
    assert grid.filled_cells() == 2


def test_rows_below_cleared_row_are_untouched(grid):
    _fill(grid, 17)
    grid.set_cell(18, 1, PieceKind.S)
    grid.set_cell(19, 2, PieceKind.T)
    grid.set_cell(16, 5, PieceKind.L)
    below = grid.grid[18:].copy()
    assert grid.clear_full_rows() == 1
    assert np.array_equal(grid.grid[18:], below)
    assert grid.cell(17, 5) == PieceKind.L


def test_full_rows_separated_by_a_gap(grid):
    _fill(grid, 19)
    grid.set_cell(18, 0, PieceKind.I)
    _fill(grid, 17)
    grid.set_cell(16, 4, PieceKind.O)
    assert grid.clear_full_rows() == 2
    assert grid.cell(19, 0) == PieceKind.I
    assert grid.cell(18, 4) == PieceKind.O
    assert grid.filled_cells() == 2


def test_four_adjacent_full_rows(grid):
    for row in range(16, 20):
        _fill(grid, row)
    grid.set_cell(15, 7, PieceKind.Z)
    assert grid.clear_full_rows() == 4
    assert grid.cell(19, 7) == PieceKind.Z
    assert grid.filled_cells() == 1
