"""Taming service — wild encounters, taming actions and promotion.

Responsibilities:
- Encounter generation (species, difficulty tier, level)
- Feed (costs food), calm (costs a focus token), walk (free)
- Promotion of fully tamed encounters to the stable

Every progress-changing action ends with the promotion sweep, inside the
same call, so a creature is never missing from both collections.
"""

from __future__ import annotations

import itertools
import logging
import time
from typing import TYPE_CHECKING, Callable, Optional

if TYPE_CHECKING:
    from fortress.models.game_state import GameState
    from fortress.util.events import EventBus
    from fortress.util.rng import RandomSource

from fortress.loaders.game_config_loader import GameConfig
from fortress.models.creature import SPECIES, TamedCreature, WildEncounter
from fortress.util.constants import FOOD
from fortress.util.events import CreatureTamed, TamingRejected
from fortress.util.rng import rand_int

log = logging.getLogger(__name__)


class TamingService:
    """Service for creature encounters and taming.

    Args:
        event_bus: Receives CreatureTamed / TamingRejected notifications.
        rng: Random source for encounter generation.
        game_config: Taming targets, rates and tame power.
        clock: Returns epoch seconds for ``tamed_at``.
    """

    def __init__(self, event_bus: EventBus, rng: RandomSource,
                 game_config: GameConfig | None = None,
                 clock: Callable[[], float] = time.time) -> None:
        self._events = event_bus
        self._rng = rng
        self._config = game_config or GameConfig()
        self._clock = clock
        self._ids = itertools.count(1)

    # -- Encounters ------------------------------------------------------

    def taming_target(self, difficulty: int) -> int:
        cfg = self._config
        return cfg.taming_base_target + cfg.taming_target_per_tier * (difficulty - 1)

    def generate_encounter(self, state: GameState) -> WildEncounter:
        """Roll a new wild encounter and put it at the front of the wild list."""
        species = SPECIES[rand_int(self._rng, 0, len(SPECIES) - 1)]
        difficulty = rand_int(self._rng, 1, 3)
        level = rand_int(self._rng, 1, 3)
        encounter = WildEncounter(
            creature_id=f"{species.name}-{next(self._ids)}",
            species=species.name,
            emoji=species.emoji,
            temperament=species.temperament,
            difficulty=difficulty,
            taming_target=self.taming_target(difficulty),
            hostility=min(difficulty, self._config.max_hostility),
            level=level,
        )
        state.wild.insert(0, encounter)
        log.info("Encounter: %s tier=%d level=%d target=%d",
                 encounter.creature_id, difficulty, level, encounter.taming_target)
        return encounter

    # -- Actions ---------------------------------------------------------

    def feed(self, state: GameState, creature_id: str) -> Optional[str]:
        """Feed up to ``feed_max_food`` food. Returns error message or None."""
        creature = state.find_wild(creature_id)
        if creature is None:
            return self._reject("feed", creature_id, f"Unknown creature: {creature_id}")
        if state.ledger.get(FOOD) <= 0:
            return self._reject("feed", creature_id,
                                "No food. Complete focus sessions to earn more.")

        eaten = state.ledger.take_up_to(FOOD, self._config.feed_max_food)
        rate = self._config.feed_rates.get(creature.difficulty, 0)
        creature.add_progress(eaten * rate)
        log.debug("Fed %s %d food: progress %d/%d", creature_id, eaten,
                  creature.taming_progress, creature.taming_target)
        self.promote_tamed(state)
        return None

    def calm(self, state: GameState, creature_id: str) -> Optional[str]:
        """Spend a focus token to calm a creature. Returns error message or None."""
        creature = state.find_wild(creature_id)
        if creature is None:
            return self._reject("calm", creature_id, f"Unknown creature: {creature_id}")
        if not state.ledger.spend_token():
            return self._reject("calm", creature_id,
                                "No focus tokens. Finish a focus session to earn one.")

        cfg = self._config
        bonus = cfg.calm_bonus_per_calm_step * (cfg.max_hostility - creature.hostility)
        creature.hostility = max(0, creature.hostility - 1)
        creature.add_progress(cfg.calm_base_progress + bonus)
        log.debug("Calmed %s: hostility %d progress %d/%d", creature_id,
                  creature.hostility, creature.taming_progress, creature.taming_target)
        self.promote_tamed(state)
        return None

    def walk(self, state: GameState, creature_id: str) -> Optional[str]:
        """Walk a creature. Free. Returns error message or None."""
        creature = state.find_wild(creature_id)
        if creature is None:
            return self._reject("walk", creature_id, f"Unknown creature: {creature_id}")

        creature.walked_distance += self._config.walk_distance
        creature.add_progress(self._config.walk_progress)
        self.promote_tamed(state)
        return None

    # -- Promotion -------------------------------------------------------

    def promote_tamed(self, state: GameState) -> list[TamedCreature]:
        """Move every fully tamed encounter from wild to stable.

        Safe to call any number of times; each encounter moves exactly once
        because it leaves the wild list in the same pass.
        """
        done = [c for c in state.wild if c.is_tamed]
        if not done:
            return []

        state.wild = [c for c in state.wild if not c.is_tamed]
        promoted: list[TamedCreature] = []
        for wild in done:
            tamed = TamedCreature.from_encounter(wild, tamed_at=self._clock())
            state.stable.append(tamed)
            gain = self._config.tame_power_base + self._config.tame_power_per_level * wild.level
            state.fortress.add_power(gain)
            promoted.append(tamed)

            log.info("Tamed %s (Lv.%d): power +%d → %d",
                     tamed.creature_id, tamed.level, gain, state.fortress.power)
            self._events.emit(CreatureTamed(
                creature_id=tamed.creature_id,
                species=tamed.species,
                level=tamed.level,
                power_gain=gain,
                message=f"{tamed.emoji} {tamed.species} (Lv.{tamed.level}) joined your fortress! "
                        f"Power +{gain}",
            ))
        return promoted

    def _reject(self, action: str, creature_id: str, message: str) -> str:
        log.debug("%s %s rejected: %s", action, creature_id, message)
        self._events.emit(TamingRejected(action=action, creature_id=creature_id, message=message))
        return message
