"""Timer model — the focus-session countdown."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class TimerState:
    """State of the Pomodoro countdown.

    Attributes:
        configured_minutes: Session length, clamped to [1, 180].
        seconds_remaining: Countdown value; reloaded from configured_minutes
            whenever the timer is idle and the minutes change.
        running: Whether ticks currently decrement the countdown.
    """

    configured_minutes: int = 25
    seconds_remaining: int = 25 * 60
    running: bool = False

    def reload(self) -> None:
        """Refill the countdown from the configured session length."""
        self.seconds_remaining = self.configured_minutes * 60
