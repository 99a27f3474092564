"""Raid models — defender perks and the raid log."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class DefenderPerks:
    """Modifiers derived from the stable for one raid.

    Attributes:
        ambush_pct: Raptor bonus to own power (multiplicative).
        shield_loss_reduce: Triceratops reduction of defeat losses.
        scout_pct: Pteranodon reduction of enemy power.
        bulwark_flat: Ankylosaurus flat bonus to own power.
        rend_extra_food: Spinosaurus food added to victory loot.
        counts: Raw aggregates (level sums / counts) per species.
    """

    ambush_pct: float = 0.0
    shield_loss_reduce: float = 0.0
    scout_pct: float = 0.0
    bulwark_flat: int = 0
    rend_extra_food: int = 0
    counts: dict[str, int] = field(default_factory=dict)

    def notes(self) -> dict[str, Any]:
        """Snapshot stored on the raid log entry."""
        return {
            "ambush_pct": self.ambush_pct,
            "scout_pct": self.scout_pct,
            "bulwark_flat": self.bulwark_flat,
            "shield_loss_reduce": self.shield_loss_reduce,
            "rend_extra_food": self.rend_extra_food,
            "counts": dict(self.counts),
        }


@dataclass
class RaidLogEntry:
    """One resolved raid, newest first in GameState.raid_log.

    Attributes:
        day: Local calendar day (ISO date) of the raid.
        raw_enemy_power: Rolled opponent power.
        raw_my_power: Fortress power at the time of the raid.
        effective_my_power: Own power after perks.
        effective_enemy_power: Enemy power after perks.
        result: "victory" or "breached".
        delta: Resources lost (negative values) on a breach.
        loot: Resources gained on a victory.
        daily: Whether this was the once-per-day raid.
        timestamp: Epoch seconds.
        notes: Perk snapshot (DefenderPerks.notes()).
    """

    day: str
    raw_enemy_power: int
    raw_my_power: int
    effective_my_power: int
    effective_enemy_power: int
    result: str
    delta: dict[str, int] = field(default_factory=dict)
    loot: dict[str, int] = field(default_factory=dict)
    daily: bool = False
    timestamp: float = 0.0
    notes: dict[str, Any] = field(default_factory=dict)
