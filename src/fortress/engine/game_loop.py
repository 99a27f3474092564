"""Game loop — asyncio-based 1-second timer tick.

The tick is the only autonomous step in the engine: while the focus
timer runs, each elapsed interval advances it by exactly one second.
Missed ticks are not caught up. Everything else is a direct reaction to
a user action on the controller.
"""

from __future__ import annotations

import asyncio
import time
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fortress.engine.controller import FortressGame
    from fortress.loaders.game_config_loader import GameConfig


class GameLoop:
    """The cooperative 1-second tick loop.

    Args:
        game: Controller whose timer is ticked.
        game_config: Provides ``step_length_ms``.
        stop_when_idle: End the loop as soon as the timer stops running
            (a session completed or was paused).
    """

    def __init__(self, game: FortressGame, game_config: GameConfig | None = None,
                 stop_when_idle: bool = False) -> None:
        self._game = game
        self._running = False
        self._stop_when_idle = stop_when_idle
        self._step_interval = (game_config.step_length_ms / 1000.0) if game_config else 1.0

        self.tick_count: int = 0
        self.started_at: float = 0.0

    async def run(self) -> None:
        """Start the loop. Runs until stop() is called."""
        self._running = True
        self.started_at = time.monotonic()
        while self._running:
            await asyncio.sleep(self._step_interval)
            if not self._running:
                break
            self._step()

    @property
    def uptime_seconds(self) -> float:
        """Seconds since the loop started."""
        if self.started_at == 0.0:
            return 0.0
        return time.monotonic() - self.started_at

    @property
    def is_running(self) -> bool:
        return self._running

    def stop(self) -> None:
        """Signal the loop to stop."""
        self._running = False

    def _step(self) -> None:
        """One tick: advance the timer if it is running."""
        if self._game.is_running:
            self._game.tick()
            self.tick_count += 1
        if self._stop_when_idle and not self._game.is_running:
            self.stop()
