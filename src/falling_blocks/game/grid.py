from __future__ import annotations

from typing import Iterator, Tuple

import numpy as np

from .pieces import MAX_SHAPE_SIZE, PieceKind, Shape


Coordinate = Tuple[int, int]


class GameGrid:
    """Discrete ROWS x COLUMNS play field.

    Cells hold `PieceKind` values; 0 (`PieceKind.EMPTY`) means unoccupied.
    Only locked pieces are stored here, never the falling one. Row 0 is the
    top of the field.
    """

    def __init__(self, columns: int = 10, rows: int = 20) -> None:
        columns = int(columns)
        rows = int(rows)
        if columns < 1 or rows < 1:
            raise ValueError(f"grid dimensions must be positive, got {columns}x{rows}")
        if columns < MAX_SHAPE_SIZE or rows < MAX_SHAPE_SIZE:
            raise ValueError(
                f"grid {columns}x{rows} is smaller than the largest piece ({MAX_SHAPE_SIZE}x{MAX_SHAPE_SIZE})"
            )
        self.columns = columns
        self.rows = rows
        self.grid = np.zeros((self.rows, self.columns), dtype=np.int8)

    def reset(self) -> None:
        self.grid.fill(PieceKind.EMPTY)

    def is_inside(self, row: int, col: int) -> bool:
        return 0 <= col < self.columns and 0 <= row < self.rows

    def cell(self, row: int, col: int) -> PieceKind:
        return PieceKind(int(self.grid[row, col]))

    def set_cell(self, row: int, col: int, kind: PieceKind) -> None:
        self.grid[row, col] = int(kind)

    @staticmethod
    def occupied_offsets(shape: Shape) -> Iterator[Coordinate]:
        for r, c in zip(*np.nonzero(shape)):
            yield int(r), int(c)

    def is_valid_placement(self, shape: Shape, row: int, col: int) -> bool:
        """Check whether `shape` fits with its top-left corner at (row, col).

        Cells above the visible field (negative row) only need to be inside the
        side walls; they are never checked for occupancy.
        """
        for r, c in self.occupied_offsets(shape):
            gr, gc = row + r, col + c
            if gc < 0 or gc >= self.columns or gr >= self.rows:
                return False
            if gr >= 0 and self.grid[gr, gc] != PieceKind.EMPTY:
                return False
        return True

    def lock_shape(self, shape: Shape, row: int, col: int, kind: PieceKind) -> int:
        """Write `kind` into every cell covered by `shape`; return cells written.

        Assumes the position was validated. Cells above row 0 are dropped.
        """
        written = 0
        for r, c in self.occupied_offsets(shape):
            gr = row + r
            if gr < 0:
                continue
            self.grid[gr, col + c] = int(kind)
            written += 1
        return written

    def is_row_full(self, row: int) -> bool:
        return bool(np.all(self.grid[row, :] != PieceKind.EMPTY))

    def clear_full_rows(self) -> int:
        """Remove full rows scanning bottom-up, return how many were removed.

        Each full row is removed by shifting every row above it down by one and
        emptying row 0; the same index is then checked again since it now holds
        the row that was above it.
        """
        cleared = 0
        row = self.rows - 1
        while row >= 0:
            if self.is_row_full(row):
                if row > 0:
                    self.grid[1 : row + 1] = self.grid[0:row].copy()
                self.grid[0, :] = PieceKind.EMPTY
                cleared += 1
            else:
                row -= 1
        return cleared

    def filled_cells(self) -> int:
        return int(np.count_nonzero(self.grid))

    def clone_state(self) -> np.ndarray:
        return self.grid.copy()
