"""Fortress model — structure levels and raid power."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class FortressState:
    """Per-structure levels and the fortress power scalar.

    Attributes:
        wall_level: Wall upgrades completed.
        tower_level: Tower upgrades completed.
        hatchery_level: Hatchery upgrades completed.
        power: Raid strength. Raised by upgrades and taming, never lowered.
    """

    wall_level: int = 0
    tower_level: int = 0
    hatchery_level: int = 0
    power: int = 0

    def level_of(self, kind: str) -> int:
        return int(getattr(self, f"{kind}_level"))

    def set_level(self, kind: str, level: int) -> None:
        setattr(self, f"{kind}_level", int(level))

    def add_power(self, amount: int) -> None:
        self.power += max(0, int(amount))
