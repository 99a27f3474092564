"""Fortress service — structure upgrades.

Each structure kind has a linear cost/power schedule keyed by the next
level. An upgrade deducts the cost, bumps the level and adds power in
one step, or does nothing at all.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from fortress.models.game_state import GameState
    from fortress.util.events import EventBus

from fortress.loaders.game_config_loader import GameConfig
from fortress.util.events import BuildRejected, StructureBuilt

log = logging.getLogger(__name__)


class FortressService:
    """Service for fortress upgrades.

    Args:
        event_bus: Receives StructureBuilt / BuildRejected notifications.
        game_config: Structure schedules.
    """

    def __init__(self, event_bus: EventBus, game_config: GameConfig | None = None) -> None:
        self._events = event_bus
        self._schedules = (game_config or GameConfig()).structures

    @property
    def kinds(self) -> list[str]:
        return list(self._schedules)

    def structure_cost(self, state: GameState, kind: str) -> dict[str, int]:
        """Price of the next level of *kind* (empty for unknown kinds)."""
        schedule = self._schedules.get(kind)
        if schedule is None:
            return {}
        return schedule.cost(state.fortress.level_of(kind) + 1)

    def build_structure(self, state: GameState, kind: str) -> Optional[str]:
        """Upgrade a structure by one level. Returns error message or None."""
        schedule = self._schedules.get(kind)
        if schedule is None:
            message = f"Unknown structure: {kind}"
            self._events.emit(BuildRejected(kind=kind, cost={}, message=message))
            return message

        next_level = state.fortress.level_of(kind) + 1
        cost = schedule.cost(next_level)
        if not state.ledger.spend(cost):
            message = "Not enough resources. Finish a focus session to earn more!"
            log.debug("Build %s Lv.%d rejected: cost=%s have=%s",
                      kind, next_level, cost, state.ledger.stocks)
            self._events.emit(BuildRejected(kind=kind, cost=cost, message=message))
            return message

        gain = schedule.power_gain(next_level)
        state.fortress.set_level(kind, next_level)
        state.fortress.add_power(gain)

        log.info("Built %s Lv.%d: cost=%s power +%d → %d",
                 kind, next_level, cost, gain, state.fortress.power)
        self._events.emit(StructureBuilt(
            kind=kind,
            level=next_level,
            power_gain=gain,
            message=f"{kind.capitalize()} upgraded to Lv.{next_level}. Power +{gain}",
        ))
        return None
