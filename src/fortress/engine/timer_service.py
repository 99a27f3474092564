"""Timer service — focus-session countdown and session rewards.

State machine:
  IDLE → RUNNING → (COMPLETED → IDLE), RUNNING ↔ PAUSED

Only a countdown that reaches zero while running pays out; pausing or
resetting never does. All methods operate on GameState. No I/O.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from fortress.models.game_state import GameState
    from fortress.util.events import EventBus
    from fortress.util.rng import RandomSource

from fortress.loaders.game_config_loader import GameConfig
from fortress.util.events import SessionCompleted
from fortress.util.rng import rand_int
from fortress.util.types import clamp_minutes, format_time

log = logging.getLogger(__name__)


class TimerService:
    """Service driving the Pomodoro countdown.

    Args:
        event_bus: Receives SessionCompleted notifications.
        rng: Random source for session rewards.
        game_config: Minute bounds and reward ranges.
    """

    def __init__(self, event_bus: EventBus, rng: RandomSource,
                 game_config: GameConfig | None = None) -> None:
        self._events = event_bus
        self._rng = rng
        self._config = game_config or GameConfig()

    # -- Configuration ---------------------------------------------------

    def set_configured_minutes(self, state: GameState, value: Any) -> int:
        """Set the session length; idle timers reload immediately.

        Unparseable input becomes the minimum, everything else is clamped.
        """
        minutes = clamp_minutes(value, self._config.min_minutes, self._config.max_minutes)
        timer = state.timer
        timer.configured_minutes = minutes
        if not timer.running:
            timer.reload()
        return minutes

    # -- Transitions -----------------------------------------------------

    def start(self, state: GameState) -> None:
        timer = state.timer
        if timer.seconds_remaining <= 0:
            timer.reload()
        timer.running = True
        log.debug("Timer started: %s left", format_time(timer.seconds_remaining))

    def pause(self, state: GameState) -> None:
        state.timer.running = False
        log.debug("Timer paused: %s left", format_time(state.timer.seconds_remaining))

    def reset(self, state: GameState) -> None:
        """Stop the countdown and refill it. No reward."""
        state.timer.running = False
        state.timer.reload()

    def tick(self, state: GameState) -> bool:
        """Advance the countdown by one second.

        Returns True if this tick completed the session.
        """
        timer = state.timer
        if not timer.running:
            return False
        if timer.seconds_remaining > 0:
            timer.seconds_remaining -= 1
        if timer.seconds_remaining == 0:
            self._complete(state)
            return True
        return False

    # -- Completion ------------------------------------------------------

    def roll_reward(self) -> dict[str, int]:
        """Roll the resources paid for one completed session."""
        return {
            res: rand_int(self._rng, lo, hi)
            for res, (lo, hi) in self._config.session_reward.items()
        }

    def _complete(self, state: GameState) -> None:
        timer = state.timer
        timer.running = False
        timer.reload()

        reward = self.roll_reward()
        tokens = self._config.session_focus_tokens
        state.ledger.credit(reward)
        state.ledger.focus_tokens += tokens

        parts = ", ".join(f"{amount} {res}" for res, amount in reward.items())
        message = f"Session complete! You earned {parts} and +{tokens} focus token."
        log.info("Session complete: reward=%s tokens=+%d", reward, tokens)
        self._events.emit(SessionCompleted(reward=reward, focus_tokens=tokens, message=message))
