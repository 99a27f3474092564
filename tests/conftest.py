"""Shared fixtures: a scripted random source and a fresh game state."""

from __future__ import annotations

import pytest

from fortress.models.game_state import GameState
from fortress.util.events import EventBus


class ScriptedRng:
    """Random source that returns queued values in order.

    Each value must fall inside the requested range. Once the script runs
    out, the lower bound of the range is returned.
    """

    def __init__(self, values=()):
        self.values = list(values)
        self.calls: list[tuple[int, int]] = []

    def push(self, *values: int) -> None:
        self.values.extend(values)

    def randint(self, a: int, b: int) -> int:
        self.calls.append((a, b))
        if not self.values:
            return a
        value = self.values.pop(0)
        assert a <= value <= b, f"scripted value {value} outside [{a}, {b}]"
        return value


@pytest.fixture
def rng() -> ScriptedRng:
    return ScriptedRng()


@pytest.fixture
def bus() -> EventBus:
    return EventBus()


@pytest.fixture
def received(bus: EventBus) -> list:
    """Every event emitted on ``bus``, in order."""
    events: list = []
    bus.on_any(events.append)
    return events


@pytest.fixture
def state() -> GameState:
    return GameState()
