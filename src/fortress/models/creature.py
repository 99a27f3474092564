"""Creature models — the species catalog, wild encounters and tamed creatures.

A WildEncounter lives in the wild collection until its taming progress
reaches the target; it is then replaced by a TamedCreature in the stable.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from fortress.util.constants import (
    ANKYLOSAURUS,
    PTERANODON,
    RAPTOR,
    SPINOSAURUS,
    TRICERATOPS,
)


@dataclass(frozen=True)
class Species:
    """A creature species that can show up as an encounter."""
    name: str
    emoji: str
    temperament: str


SPECIES: tuple[Species, ...] = (
    Species(RAPTOR, "🦖", "Skittish"),
    Species(TRICERATOPS, "🐲", "Stubborn"),
    Species(PTERANODON, "🪽", "Alert"),
    Species(ANKYLOSAURUS, "🛡️", "Calm"),
    Species(SPINOSAURUS, "🦕", "Aggressive"),
)


@dataclass
class WildEncounter:
    """An untamed creature being worked on.

    Attributes:
        creature_id: Unique identity, kept when the creature is tamed.
        species: Species name (see SPECIES).
        emoji: Display glyph of the species.
        temperament: Flavour text of the species.
        difficulty: Tier 1..3; sets target, hostility and feed rate.
        taming_progress: Accumulated effort, capped at taming_target.
        taming_target: Progress needed to tame; fixed at creation.
        hostility: 0..3, lowered by calming.
        walked_distance: Cosmetic distance walked.
        level: 1..3; drives tame power and defender perks.
    """

    creature_id: str
    species: str
    emoji: str = ""
    temperament: str = ""
    difficulty: int = 1
    taming_progress: int = 0
    taming_target: int = 100
    hostility: int = 1
    walked_distance: int = 0
    level: int = 1

    @property
    def is_tamed(self) -> bool:
        return self.taming_progress >= self.taming_target

    def add_progress(self, amount: int) -> None:
        """Advance taming progress, never past the target."""
        self.taming_progress = min(self.taming_progress + max(0, int(amount)), self.taming_target)


@dataclass
class TamedCreature:
    """A creature living in the stable.

    ``experience`` is tracked but no rule reads or grows it yet.
    """

    creature_id: str
    species: str
    emoji: str = ""
    temperament: str = ""
    difficulty: int = 1
    taming_progress: int = 0
    taming_target: int = 100
    hostility: int = 0
    walked_distance: int = 0
    level: int = 1
    tamed: bool = True
    tamed_at: float = 0.0
    experience: int = field(default=0)

    @classmethod
    def from_encounter(cls, wild: WildEncounter, tamed_at: float) -> "TamedCreature":
        return cls(
            creature_id=wild.creature_id,
            species=wild.species,
            emoji=wild.emoji,
            temperament=wild.temperament,
            difficulty=wild.difficulty,
            taming_progress=wild.taming_progress,
            taming_target=wild.taming_target,
            hostility=wild.hostility,
            walked_distance=wild.walked_distance,
            level=wild.level,
            tamed_at=tamed_at,
        )
