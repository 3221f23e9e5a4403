from __future__ import annotations

from typing import Optional, Sequence, Tuple

import numpy as np
import pygame

from falling_blocks.game import COLORS, FallingBlocksGame, PieceKind, spawn_shape

Color = Tuple[int, int, int]

BACKGROUND: Color = (26, 26, 46)
GRID_LINE: Color = (40, 40, 60)
TEXT: Color = (255, 255, 255)
LEGEND: Color = (128, 128, 128)

CONTROLS_LEGEND: Sequence[str] = (
    "←→ Muovi",
    "↓ Veloce",
    "↑/ X Ruota",
    "Z Antior.",
    "SPAZIO Drop",
    "C Hold",
    "P Pausa",
    "R Reset",
)


def _color_for_kind(kind: int) -> Color:
    return COLORS.get(PieceKind(abs(int(kind))), (200, 200, 200))


class Renderer:
    """Draws a frame from engine queries only; keeps no game state."""

    def __init__(self, cell_size: int = 30, panel_width: int = 150, mini_cell: int = 16) -> None:
        self.cell_size = cell_size
        self.panel_width = panel_width
        self.mini_cell = mini_cell

    def window_size(self, game: FallingBlocksGame) -> Tuple[int, int]:
        return (game.grid.columns * self.cell_size + self.panel_width, game.grid.rows * self.cell_size)

    def _draw_cell(self, screen: pygame.Surface, col: int, row: int, color: Color, opacity: float = 1.0) -> None:
        if row < 0:
            return
        rect = pygame.Rect(col * self.cell_size + 1, row * self.cell_size + 1, self.cell_size - 2, self.cell_size - 2)
        if opacity >= 1.0:
            pygame.draw.rect(screen, color, rect)
            return
        cell = pygame.Surface(rect.size, pygame.SRCALPHA)
        cell.fill((*color, int(255 * opacity)))
        screen.blit(cell, rect.topleft)

    def _draw_grid_lines(self, screen: pygame.Surface, rows: int, columns: int) -> None:
        width, height = columns * self.cell_size, rows * self.cell_size
        for r in range(rows + 1):
            pygame.draw.line(screen, GRID_LINE, (0, r * self.cell_size), (width, r * self.cell_size))
        for c in range(columns + 1):
            pygame.draw.line(screen, GRID_LINE, (c * self.cell_size, 0), (c * self.cell_size, height))

    def _draw_locked(self, screen: pygame.Surface, cells: np.ndarray) -> None:
        rows, columns = cells.shape
        for r in range(rows):
            for c in range(columns):
                if cells[r, c] != PieceKind.EMPTY:
                    self._draw_cell(screen, c, r, _color_for_kind(cells[r, c]))

    def _draw_active(self, screen: pygame.Surface, game: FallingBlocksGame) -> None:
        piece = game.active
        if piece is None or game.over:
            return
        color = _color_for_kind(piece.kind)
        ghost = game.ghost_row()
        for r, c in piece.cells(ghost):
            self._draw_cell(screen, c, r, color, 0.3)
        for r, c in piece.cells():
            self._draw_cell(screen, c, r, color)

    def _draw_mini(self, screen: pygame.Surface, kind: Optional[PieceKind], x: int, y: int) -> None:
        if kind is None:
            return
        shape = spawn_shape(kind)
        step = self.mini_cell + 2
        for r, c in zip(*np.nonzero(shape)):
            rect = pygame.Rect(x + int(c) * step, y + int(r) * step, self.mini_cell, self.mini_cell)
            pygame.draw.rect(screen, _color_for_kind(kind), rect)

    def _draw_panel(self, screen: pygame.Surface, game: FallingBlocksGame, font: pygame.font.Font,
                    small_font: pygame.font.Font) -> None:
        x = game.grid.columns * self.cell_size + 15
        for y, txt in ((15, f"PUNTI: {game.score}"), (35, f"LIVELLO: {game.level}"), (55, f"RIGHE: {game.lines_cleared}")):
            screen.blit(font.render(txt, True, TEXT), (x, y))
        screen.blit(font.render("PROSSIMO", True, TEXT), (x, 90))
        self._draw_mini(screen, game.next_kind, x, 110)
        screen.blit(font.render("HOLD [C]", True, TEXT), (x, 190))
        self._draw_mini(screen, game.held_kind, x, 210)
        for i, txt in enumerate(CONTROLS_LEGEND):
            screen.blit(small_font.render(txt, True, LEGEND), (x, 320 + i * 15))

    def _draw_overlay(self, screen: pygame.Surface, game: FallingBlocksGame, big_font: pygame.font.Font) -> None:
        if not (game.paused or game.over):
            return
        width, height = game.grid.columns * self.cell_size, game.grid.rows * self.cell_size
        shade = pygame.Surface((width, height), pygame.SRCALPHA)
        shade.fill((0, 0, 0, 180))
        screen.blit(shade, (0, 0))
        txt = big_font.render("GAME OVER" if game.over else "PAUSA", True, TEXT)
        screen.blit(txt, txt.get_rect(center=(width // 2, height // 2)))

    def draw(self, screen: pygame.Surface, game: FallingBlocksGame, font: pygame.font.Font,
             small_font: pygame.font.Font, big_font: pygame.font.Font) -> None:
        screen.fill(BACKGROUND)
        self._draw_grid_lines(screen, game.grid.rows, game.grid.columns)
        self._draw_locked(screen, game.grid_cells())
        self._draw_active(screen, game)
        self._draw_panel(screen, game, font, small_font)
        self._draw_overlay(screen, game, big_font)
        pygame.display.flip()
