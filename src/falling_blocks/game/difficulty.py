from __future__ import annotations

from typing import Dict, Optional

DEFAULT_DIFFICULTY = "normale"

# Initial fall interval in milliseconds per difficulty name.
DIFFICULTY_INTERVALS: Dict[str, int] = {
    "facile": 800,
    "normale": 500,
    "difficile": 300,
    "impossibile": 150,
}

# Choices offered by the start-up menu, in display order.
MENU_CHOICES = ("facile", "normale", "difficile")


def interval_for_difficulty(name: Optional[str]) -> int:
    """Map a difficulty name to its fall interval; unknown or missing names use normale."""
    if name is None:
        return DIFFICULTY_INTERVALS[DEFAULT_DIFFICULTY]
    return DIFFICULTY_INTERVALS.get(name.strip().lower(), DIFFICULTY_INTERVALS[DEFAULT_DIFFICULTY])
