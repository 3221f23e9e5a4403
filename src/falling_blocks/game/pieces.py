from __future__ import annotations

from enum import IntEnum
from typing import Dict, Tuple

import numpy as np


class PieceKind(IntEnum):
    EMPTY = 0
    I = 1
    O = 2
    T = 3
    S = 4
    Z = 5
    J = 6
    L = 7


Shape = np.ndarray

PLAYABLE_KINDS: Tuple[PieceKind, ...] = tuple(k for k in PieceKind if k != PieceKind.EMPTY)


def _template(rows) -> Shape:
    arr = np.array(rows, dtype=np.int8)
    arr.setflags(write=False)
    return arr


BASE_SHAPES: Dict[PieceKind, Shape] = {
    PieceKind.I: _template([[0, 0, 0, 0], [1, 1, 1, 1], [0, 0, 0, 0], [0, 0, 0, 0]]),
    PieceKind.O: _template([[1, 1], [1, 1]]),
    PieceKind.T: _template([[0, 1, 0], [1, 1, 1], [0, 0, 0]]),
    PieceKind.S: _template([[0, 1, 1], [1, 1, 0], [0, 0, 0]]),
    PieceKind.Z: _template([[1, 1, 0], [0, 1, 1], [0, 0, 0]]),
    PieceKind.J: _template([[1, 0, 0], [1, 1, 1], [0, 0, 0]]),
    PieceKind.L: _template([[0, 0, 1], [1, 1, 1], [0, 0, 0]]),
}

# Largest template side; grids smaller than this cannot host every piece.
MAX_SHAPE_SIZE = max(max(s.shape) for s in BASE_SHAPES.values())

COLORS: Dict[PieceKind, Tuple[int, int, int]] = {
    PieceKind.EMPTY: (0, 0, 0),
    PieceKind.I: (0, 245, 255),
    PieceKind.O: (255, 235, 59),
    PieceKind.T: (224, 64, 251),
    PieceKind.S: (105, 240, 174),
    PieceKind.Z: (255, 82, 82),
    PieceKind.J: (68, 138, 255),
    PieceKind.L: (255, 171, 64),
}


def spawn_shape(kind: PieceKind) -> Shape:
    """Return a writable copy of the canonical shape for `kind`."""
    if kind == PieceKind.EMPTY:
        raise ValueError("EMPTY has no shape")
    return BASE_SHAPES[PieceKind(kind)].copy()


def rotate_shape(shape: Shape, clockwise: bool = True) -> Shape:
    """Rotate an n x m matrix into a new m x n matrix.

    Clockwise maps source[r][c] to result[c][n-1-r]; counter-clockwise maps
    source[r][c] to result[m-1-c][r].
    """
    n, m = shape.shape
    rotated = np.zeros((m, n), dtype=shape.dtype)
    for r in range(n):
        for c in range(m):
            if clockwise:
                rotated[c, n - 1 - r] = shape[r, c]
            else:
                rotated[m - 1 - c, r] = shape[r, c]
    return rotated


def shape_width(shape: Shape) -> int:
    return int(shape.shape[1])


def spawn_column(columns: int, shape: Shape) -> int:
    return columns // 2 - shape_width(shape) // 2
