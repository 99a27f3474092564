"""FortressGame — the call interface the presentation layer talks to.

Owns the single GameState and the engine services. Every public method
is one user action that runs to completion before the next one; the
notifications it produced are both emitted on the event bus and queued
for ``drain_notifications()``. The queue keeps only the newest
``notification_queue_limit`` entries, so callers that listen on the bus
instead never have to drain it.
"""

from __future__ import annotations

import logging
import time
from collections import deque
from dataclasses import asdict
from datetime import date
from typing import Any, Callable, Optional

from fortress.engine.fortress_service import FortressService
from fortress.engine.raid_service import RaidService
from fortress.engine.taming_service import TamingService
from fortress.engine.timer_service import TimerService
from fortress.loaders.game_config_loader import GameConfig
from fortress.models.creature import WildEncounter
from fortress.models.game_state import GameState
from fortress.models.raid import RaidLogEntry
from fortress.models.timer import TimerState
from fortress.util.events import EventBus
from fortress.util.rng import RandomSource, make_rng

log = logging.getLogger(__name__)


class FortressGame:
    """Controller wiring the engine services around one GameState.

    Args:
        game_config: Balance constants (defaults if omitted).
        rng: Injectable random source; an unseeded ``random.Random`` otherwise.
        event_bus: Shared bus; a private one is created if omitted.
        today: Local calendar day provider for the daily raid gate.
        clock: Epoch-seconds provider for timestamps.
    """

    def __init__(
        self,
        game_config: GameConfig | None = None,
        rng: RandomSource | None = None,
        event_bus: EventBus | None = None,
        today: Callable[[], date] = date.today,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.config = game_config or GameConfig()
        self.events = event_bus or EventBus()
        rng = rng if rng is not None else make_rng()

        self.state = GameState(timer=TimerState(
            configured_minutes=self.config.default_minutes,
            seconds_remaining=self.config.default_minutes * 60,
        ))
        self.timer = TimerService(self.events, rng, self.config)
        self.fortress = FortressService(self.events, self.config)
        self.taming = TamingService(self.events, rng, self.config, clock=clock)
        self.raids = RaidService(self.events, rng, self.config, today=today, clock=clock)

        self._pending: deque[Any] = deque(maxlen=self.config.notification_queue_limit)
        self.events.on_any(self._pending.append)

    # -- Timer -----------------------------------------------------------

    def set_configured_minutes(self, value: Any) -> int:
        return self.timer.set_configured_minutes(self.state, value)

    def start(self) -> None:
        self.timer.start(self.state)

    def pause(self) -> None:
        self.timer.pause(self.state)

    def reset(self) -> None:
        self.timer.reset(self.state)

    def tick(self) -> bool:
        """One elapsed second. Returns True when it completed a session."""
        return self.timer.tick(self.state)

    @property
    def is_running(self) -> bool:
        return self.state.timer.running

    # -- Fortress --------------------------------------------------------

    def build_structure(self, kind: str) -> Optional[str]:
        return self.fortress.build_structure(self.state, kind)

    def structure_cost(self, kind: str) -> dict[str, int]:
        return self.fortress.structure_cost(self.state, kind)

    # -- Creatures -------------------------------------------------------

    def generate_encounter(self) -> WildEncounter:
        return self.taming.generate_encounter(self.state)

    def feed(self, creature_id: str) -> Optional[str]:
        return self.taming.feed(self.state, creature_id)

    def calm(self, creature_id: str) -> Optional[str]:
        return self.taming.calm(self.state, creature_id)

    def walk(self, creature_id: str) -> Optional[str]:
        return self.taming.walk(self.state, creature_id)

    # -- Raids -----------------------------------------------------------

    def resolve_raid(self, is_daily: bool) -> RaidLogEntry | str:
        return self.raids.resolve_raid(self.state, is_daily)

    def can_run_daily_raid(self) -> bool:
        return self.raids.can_run_daily_raid(self.state)

    # -- Output ----------------------------------------------------------

    def drain_notifications(self) -> list[Any]:
        """Return and forget all notifications emitted since the last drain."""
        pending = list(self._pending)
        self._pending.clear()
        return pending

    def snapshot(self) -> dict[str, Any]:
        """Plain-dict view of the whole state for rendering."""
        s = self.state
        return {
            "resources": s.ledger.to_dict(),
            "timer": asdict(s.timer),
            "fortress": asdict(s.fortress),
            "build_costs": {kind: self.structure_cost(kind) for kind in self.fortress.kinds},
            "wild": [asdict(c) for c in s.wild],
            "stable": [asdict(c) for c in s.stable],
            "raid_log": [asdict(e) for e in s.raid_log],
            "last_daily_raid_day": s.last_daily_raid_day,
            "can_run_daily_raid": self.can_run_daily_raid(),
        }
