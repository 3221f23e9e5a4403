from __future__ import annotations

import argparse
import logging
from typing import List, Optional

import pygame

from falling_blocks.game import FallingBlocksGame, GameConfig
from falling_blocks.game.difficulty import DEFAULT_DIFFICULTY, DIFFICULTY_INTERVALS, MENU_CHOICES
from .input_map import command_for_event
from .renderer import BACKGROUND, TEXT, Renderer

logger = logging.getLogger(__name__)

TICK_EVENT = pygame.USEREVENT + 1


class PygameTickSource:
    """Delivers engine ticks as TICK_EVENT through pygame's event queue."""

    def __init__(self, event_type: int = TICK_EVENT) -> None:
        self.event_type = event_type

    def arm(self, interval_ms: int) -> None:
        pygame.time.set_timer(self.event_type, int(interval_ms))

    def stop(self) -> None:
        pygame.time.set_timer(self.event_type, 0)


def choose_difficulty(screen: pygame.Surface, font: pygame.font.Font) -> Optional[str]:
    """Modal difficulty menu; Escape picks the default, closing the window returns None."""
    selected = MENU_CHOICES.index(DEFAULT_DIFFICULTY)
    clock = pygame.time.Clock()
    while True:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                return None
            if event.type != pygame.KEYDOWN:
                continue
            if event.key == pygame.K_ESCAPE:
                return DEFAULT_DIFFICULTY
            if event.key in (pygame.K_RETURN, pygame.K_KP_ENTER, pygame.K_SPACE):
                return MENU_CHOICES[selected]
            if event.key == pygame.K_UP:
                selected = (selected - 1) % len(MENU_CHOICES)
            elif event.key == pygame.K_DOWN:
                selected = (selected + 1) % len(MENU_CHOICES)
            elif pygame.K_1 <= event.key < pygame.K_1 + len(MENU_CHOICES):
                return MENU_CHOICES[event.key - pygame.K_1]

        screen.fill(BACKGROUND)
        title = font.render("Scegli la difficoltà:", True, TEXT)
        screen.blit(title, (20, 40))
        for i, name in enumerate(MENU_CHOICES):
            color = (255, 235, 59) if i == selected else TEXT
            txt = font.render(f"{i + 1}. {name.capitalize()}", True, color)
            screen.blit(txt, (40, 90 + i * 30))
        pygame.display.flip()
        clock.tick(30)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Play Falling Blocks")
    p.add_argument("--difficulty", choices=sorted(DIFFICULTY_INTERVALS), default=None,
                   help="Initial fall speed; prompts in-window when omitted")
    p.add_argument("--cell-size", type=int, default=30)
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return p


def run(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    pygame.init()
    try:
        game = FallingBlocksGame(GameConfig(random_seed=args.seed), tick_source=PygameTickSource())
        renderer = Renderer(cell_size=args.cell_size)
        screen = pygame.display.set_mode(renderer.window_size(game))
        pygame.display.set_caption("Falling Blocks")
        font = pygame.font.SysFont("Arial", 14, bold=True)
        small_font = pygame.font.SysFont("Arial", 9)
        big_font = pygame.font.SysFont("Arial", 28, bold=True)

        difficulty = args.difficulty
        if difficulty is None:
            difficulty = choose_difficulty(screen, font)
            if difficulty is None:
                return
        game.set_difficulty(difficulty)

        dirty = [True]

        def invalidate() -> None:
            dirty[0] = True

        game.add_listener(invalidate)
        game.add_interval_listener(lambda ms: logger.debug("Tick interval now %d ms", ms))
        game.new_game()

        clock = pygame.time.Clock()
        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == TICK_EVENT:
                    game.on_tick()
                elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                    running = False
                else:
                    command = command_for_event(event)
                    if command is not None:
                        game.apply(command)

            if dirty[0]:
                renderer.draw(screen, game, font, small_font, big_font)
                dirty[0] = False
            clock.tick(60)
    finally:
        pygame.quit()


if __name__ == "__main__":  # pragma: no cover
    run()
