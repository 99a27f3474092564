"""Raid service — opponent generation, raid resolution and the raid log.

A raid rolls an opponent around the fortress' own power, applies the
defender perks of the stable to both sides and compares:

  victory   → random loot (plus Spinosaurus food), credited uncapped
  breached  → a share of every stock is lost, never below zero

Daily raids run at most once per local calendar day; practice raids are
unlimited and never touch the daily marker.
"""

from __future__ import annotations

import logging
import math
import time
from datetime import date
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from fortress.models.game_state import GameState
    from fortress.models.ledger import ResourceLedger
    from fortress.util.events import EventBus
    from fortress.util.rng import RandomSource

from fortress.engine.perks import compute_defender_perks, effective_powers, perk_lines
from fortress.loaders.game_config_loader import GameConfig
from fortress.models.raid import DefenderPerks, RaidLogEntry
from fortress.util.constants import BREACHED, FOOD, RESOURCE_KEYS, VICTORY
from fortress.util.events import RaidResolved
from fortress.util.rng import rand_int

log = logging.getLogger(__name__)


def loss_factor(my_eff: int, enemy_eff: int, shield_loss_reduce: float,
                max_loss_factor: float = 0.3, gap_floor: int = 20) -> float:
    """Share of each stock lost on a breach, after the Triceratops shield."""
    gap = enemy_eff - my_eff
    base = min(max_loss_factor, gap / max(gap_floor, enemy_eff))
    return max(0.0, base * (1 - shield_loss_reduce))


def compute_losses(ledger: ResourceLedger, factor: float, jitter: dict[str, int],
                   rng: RandomSource) -> dict[str, int]:
    """Per-resource losses: floor(stock * factor) + jitter, capped at the stock.

    Jitter is rolled for every resource in RESOURCE_KEYS order, even empty ones.
    """
    losses: dict[str, int] = {}
    for res in RESOURCE_KEYS:
        stock = ledger.get(res)
        extra = rand_int(rng, 0, jitter.get(res, 0))
        losses[res] = min(stock, math.floor(stock * factor) + extra)
    return losses


class RaidService:
    """Service resolving raids against the fortress.

    Args:
        event_bus: Receives RaidResolved notifications.
        rng: Random source for enemy power, loot and loss jitter.
        game_config: Raid formula constants and perk magnitudes.
        today: Returns the local calendar day (daily gate).
        clock: Returns epoch seconds for log timestamps.
    """

    def __init__(self, event_bus: EventBus, rng: RandomSource,
                 game_config: GameConfig | None = None,
                 today: Callable[[], date] = date.today,
                 clock: Callable[[], float] = time.time) -> None:
        self._events = event_bus
        self._rng = rng
        self._config = game_config or GameConfig()
        self._today = today
        self._clock = clock

    # -- Query -----------------------------------------------------------

    def today_label(self) -> str:
        return self._today().isoformat()

    def can_run_daily_raid(self, state: GameState) -> bool:
        """True if no daily raid has been fought today."""
        return state.last_daily_raid_day != self.today_label()

    # -- Opponent --------------------------------------------------------

    def roll_enemy_power(self, state: GameState) -> int:
        """Opponent power: ~90% of ours, ±30% swing, never below the minimum."""
        cfg = self._config
        power = state.fortress.power
        base = max(cfg.min_enemy_power, math.floor(power * cfg.enemy_base_ratio))
        swing = max(cfg.min_enemy_power, math.floor(power * cfg.enemy_swing_ratio))
        return max(cfg.min_enemy_power, base + rand_int(self._rng, -swing, swing))

    # -- Resolution ------------------------------------------------------

    def resolve_raid(self, state: GameState, is_daily: bool) -> RaidLogEntry | str:
        """Fight one raid. Returns the log entry, or an error string.

        A daily raid already fought today is refused without touching state.
        """
        day = self.today_label()
        if is_daily and state.last_daily_raid_day == day:
            log.debug("Daily raid refused: already fought on %s", day)
            return "The daily raid has already been fought today."

        enemy_raw = self.roll_enemy_power(state)
        my_raw = max(0, state.fortress.power)
        perks = compute_defender_perks(state.stable, self._config)
        my_eff, enemy_eff = effective_powers(perks, my_raw, enemy_raw)

        loot = {res: 0 for res in RESOURCE_KEYS}
        delta = {res: 0 for res in RESOURCE_KEYS}
        if my_eff >= enemy_eff:
            result = VICTORY
            loot = self._roll_loot(perks)
            state.ledger.credit(loot)
        else:
            result = BREACHED
            factor = loss_factor(my_eff, enemy_eff, perks.shield_loss_reduce,
                                 self._config.max_loss_factor, self._config.loss_gap_floor)
            losses = compute_losses(state.ledger, factor, self._config.loss_jitter, self._rng)
            for res, amount in losses.items():
                state.ledger.take_up_to(res, amount)
            delta = {res: -amount for res, amount in losses.items()}

        entry = RaidLogEntry(
            day=day,
            raw_enemy_power=enemy_raw,
            raw_my_power=my_raw,
            effective_my_power=my_eff,
            effective_enemy_power=enemy_eff,
            result=result,
            delta=delta,
            loot=loot,
            daily=is_daily,
            timestamp=self._clock(),
            notes=perks.notes(),
        )
        state.raid_log.insert(0, entry)
        del state.raid_log[self._config.raid_log_limit:]
        if is_daily:
            state.last_daily_raid_day = day

        log.info("Raid %s (%s): enemy %d→%d vs fortress %d→%d loot=%s delta=%s",
                 result, "daily" if is_daily else "practice",
                 enemy_raw, enemy_eff, my_raw, my_eff, loot, delta)
        self._events.emit(self._notification(entry, perks))
        return entry

    def _roll_loot(self, perks: DefenderPerks) -> dict[str, int]:
        loot = {
            res: rand_int(self._rng, lo, hi)
            for res, (lo, hi) in self._config.victory_loot.items()
        }
        loot[FOOD] = loot.get(FOOD, 0) + perks.rend_extra_food
        return loot

    def _notification(self, entry: RaidLogEntry, perks: DefenderPerks) -> RaidResolved:
        if entry.result == VICTORY:
            title = "Raid repelled!"
            summary = "Loot: " + " ".join(f"+{v} {k}" for k, v in entry.loot.items())
        else:
            title = "Breach!"
            summary = "Losses: " + " ".join(f"{v} {k}" for k, v in entry.delta.items())
        lines = perk_lines(perks)
        message = (
            f"{title} Enemy {entry.effective_enemy_power} vs. Fortress "
            f"{entry.effective_my_power}. {summary}. "
            f"Defender perks: {'; '.join(lines) or 'None'}"
        )
        return RaidResolved(
            result=entry.result,
            daily=entry.daily,
            effective_my_power=entry.effective_my_power,
            effective_enemy_power=entry.effective_enemy_power,
            perk_lines=lines,
            message=message,
        )
