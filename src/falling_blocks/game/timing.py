from __future__ import annotations

from typing import List, Optional, Protocol


class TickSource(Protocol):
    """Host timer that delivers `FallingBlocksGame.on_tick()` calls.

    The engine asks for ticks every `interval_ms` via `arm()` (re-arming
    replaces any previous interval) and asks for silence via `stop()`.
    Ticks must be delivered on the same thread as every other engine call.
    """

    def arm(self, interval_ms: int) -> None: ...

    def stop(self) -> None: ...


class ManualTickSource:
    """Tick source for headless hosts: records requests, never fires by itself."""

    def __init__(self) -> None:
        self.interval_ms: Optional[int] = None
        self.active = False
        self.history: List[Optional[int]] = []

    def arm(self, interval_ms: int) -> None:
        self.interval_ms = int(interval_ms)
        self.active = True
        self.history.append(self.interval_ms)

    def stop(self) -> None:
        self.active = False
        self.history.append(None)
