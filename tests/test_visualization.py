from __future__ import annotations

import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import pygame
import pytest

from falling_blocks.game import Command, FallingBlocksGame, GameConfig, ManualTickSource
from falling_blocks.visualization.human_play import TICK_EVENT, PygameTickSource, build_parser, choose_difficulty
from falling_blocks.visualization.input_map import KEY_TO_COMMAND, command_for_event
from falling_blocks.visualization.renderer import Renderer


@pytest.fixture
def display():
    pygame.init()
    screen = pygame.display.set_mode((450, 600))
    yield screen
    pygame.quit()


@pytest.mark.parametrize(
    "key,command",
    [
        (pygame.K_LEFT, Command.MOVE_LEFT),
        (pygame.K_RIGHT, Command.MOVE_RIGHT),
        (pygame.K_DOWN, Command.SOFT_DROP),
        (pygame.K_UP, Command.ROTATE_CW),
        (pygame.K_x, Command.ROTATE_CW),
        (pygame.K_z, Command.ROTATE_CCW),
        (pygame.K_SPACE, Command.HARD_DROP),
        (pygame.K_c, Command.HOLD),
        (pygame.K_p, Command.PAUSE_TOGGLE),
        (pygame.K_r, Command.RESET),
    ],
)
def test_keys_map_to_commands(key, command):
    assert command_for_event(pygame.event.Event(pygame.KEYDOWN, key=key)) == command


def test_every_command_has_a_key():
    assert set(KEY_TO_COMMAND.values()) == set(Command)


def test_unmapped_and_non_key_events_are_ignored():
    assert command_for_event(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_q)) is None
    assert command_for_event(pygame.event.Event(pygame.KEYUP, key=pygame.K_LEFT)) is None


def test_parser_defaults():
    args = build_parser().parse_args([])
    assert args.difficulty is None
    assert args.cell_size == 30
    args = build_parser().parse_args(["--difficulty", "impossibile", "--seed", "3"])
    assert args.difficulty == "impossibile"
    assert args.seed == 3


def test_renderer_draws_every_state(display):
    game = FallingBlocksGame(GameConfig(random_seed=0), tick_source=ManualTickSource())
    renderer = Renderer(cell_size=30)
    assert renderer.window_size(game) == (450, 600)
    font = pygame.font.Font(None, 14)
    game.new_game()
    game.hold()
    renderer.draw(display, game, font, font, font)
    game.pause_toggle()
    renderer.draw(display, game, font, font, font)
    game.pause_toggle()
    while not game.over:
        game.hard_drop()
    renderer.draw(display, game, font, font, font)


def test_difficulty_menu_number_keys(display):
    pygame.event.post(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_3))
    assert choose_difficulty(display, pygame.font.Font(None, 14)) == "difficile"


def test_difficulty_menu_escape_picks_normale(display):
    pygame.event.post(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_ESCAPE))
    assert choose_difficulty(display, pygame.font.Font(None, 14)) == "normale"


def _tick_arrives(within_ms):
    deadline = pygame.time.get_ticks() + within_ms
    while pygame.time.get_ticks() < deadline:
        if pygame.event.get(TICK_EVENT):
            return True
        pygame.time.wait(5)
    return False


def test_pygame_tick_source_arms_and_stops(display):
    ticks = PygameTickSource()
    pygame.event.clear()
    ticks.arm(10)
    assert _tick_arrives(1000)
    ticks.stop()
    pygame.time.wait(30)
    pygame.event.clear()
    assert not _tick_arrives(100)
