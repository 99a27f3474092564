"""Game state — the single aggregate every engine service operates on.

Held by the FortressGame controller; services mutate it only inside one
action call, so sibling fields never disagree between actions.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from fortress.models.creature import TamedCreature, WildEncounter
from fortress.models.fortress import FortressState
from fortress.models.ledger import ResourceLedger
from fortress.models.raid import RaidLogEntry
from fortress.models.timer import TimerState


@dataclass
class GameState:
    """Complete state of one player's session.

    Attributes:
        ledger: Resources and focus tokens.
        timer: Focus-session countdown.
        fortress: Structure levels and power.
        wild: Encounters being tamed, newest first.
        stable: Tamed creatures in taming order.
        raid_log: Resolved raids, newest first.
        last_daily_raid_day: ISO date of the last daily raid, if any.
    """

    ledger: ResourceLedger = field(default_factory=ResourceLedger)
    timer: TimerState = field(default_factory=TimerState)
    fortress: FortressState = field(default_factory=FortressState)
    wild: list[WildEncounter] = field(default_factory=list)
    stable: list[TamedCreature] = field(default_factory=list)
    raid_log: list[RaidLogEntry] = field(default_factory=list)
    last_daily_raid_day: Optional[str] = None

    def find_wild(self, creature_id: str) -> Optional[WildEncounter]:
        """Look up a wild encounter by ID."""
        for creature in self.wild:
            if creature.creature_id == creature_id:
                return creature
        return None
