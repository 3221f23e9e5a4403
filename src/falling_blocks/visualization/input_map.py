from __future__ import annotations

from typing import Dict, Optional

import pygame

from falling_blocks.game import Command


KEY_TO_COMMAND: Dict[int, Command] = {
    pygame.K_LEFT: Command.MOVE_LEFT,
    pygame.K_RIGHT: Command.MOVE_RIGHT,
    pygame.K_DOWN: Command.SOFT_DROP,
    pygame.K_UP: Command.ROTATE_CW,
    pygame.K_x: Command.ROTATE_CW,
    pygame.K_z: Command.ROTATE_CCW,
    pygame.K_SPACE: Command.HARD_DROP,
    pygame.K_c: Command.HOLD,
    pygame.K_p: Command.PAUSE_TOGGLE,
    pygame.K_r: Command.RESET,
}


def command_for_event(event: pygame.event.Event) -> Optional[Command]:
    if event.type != pygame.KEYDOWN:
        return None
    return KEY_TO_COMMAND.get(event.key)
