"""Defender perks — raid modifiers granted by tamed creatures.

  Raptor        ambush   +3% own power per level     (cap 30%)
  Triceratops   shield   -20% raid losses each       (cap 60%)
  Pteranodon    scout    -5% enemy power each        (cap 25%)
  Ankylosaurus  bulwark  +2 flat own power per level
  Spinosaurus   rend     +1 food on victory per level

Recomputed from the full stable for every raid; nothing is cached.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from fortress.models.creature import TamedCreature

from fortress.loaders.game_config_loader import GameConfig
from fortress.models.raid import DefenderPerks
from fortress.util.constants import (
    ANKYLOSAURUS,
    PTERANODON,
    RAPTOR,
    SPINOSAURUS,
    TRICERATOPS,
)
from fortress.util.types import format_percent


def compute_defender_perks(stable: Iterable[TamedCreature],
                           game_config: GameConfig | None = None) -> DefenderPerks:
    """Aggregate the stable into a perk bundle."""
    cfg = game_config or GameConfig()
    raptor_levels = trike_count = ptera_count = anky_levels = spino_levels = 0
    for c in stable:
        if not c.tamed:
            continue
        level = c.level or 1
        if c.species == RAPTOR:
            raptor_levels += level
        elif c.species == TRICERATOPS:
            trike_count += 1
        elif c.species == PTERANODON:
            ptera_count += 1
        elif c.species == ANKYLOSAURUS:
            anky_levels += level
        elif c.species == SPINOSAURUS:
            spino_levels += level

    return DefenderPerks(
        ambush_pct=min(cfg.raptor_pct_cap, cfg.raptor_pct_per_level * raptor_levels),
        shield_loss_reduce=min(cfg.triceratops_pct_cap,
                               cfg.triceratops_pct_per_creature * trike_count),
        scout_pct=min(cfg.pteranodon_pct_cap, cfg.pteranodon_pct_per_creature * ptera_count),
        bulwark_flat=cfg.ankylosaurus_flat_per_level * anky_levels,
        rend_extra_food=cfg.spinosaurus_food_per_level * spino_levels,
        counts={
            "raptor_levels": raptor_levels,
            "trike_count": trike_count,
            "ptera_count": ptera_count,
            "anky_levels": anky_levels,
            "spino_levels": spino_levels,
        },
    )


def effective_powers(perks: DefenderPerks, my_power_raw: int,
                     enemy_power_raw: int) -> tuple[int, int]:
    """Apply perks to both sides. Flat bonus goes in before the ambush multiplier."""
    my_eff = math.floor((my_power_raw + perks.bulwark_flat) * (1 + perks.ambush_pct))
    enemy_eff = math.floor(enemy_power_raw * (1 - perks.scout_pct))
    return my_eff, enemy_eff


def perk_lines(perks: DefenderPerks) -> list[str]:
    """Human-readable summary of the active perks."""
    lines = []
    if perks.ambush_pct > 0:
        lines.append(f"Raptor Ambush: +{format_percent(perks.ambush_pct)} power")
    if perks.bulwark_flat > 0:
        lines.append(f"Anky Bulwark: +{perks.bulwark_flat} flat power")
    if perks.scout_pct > 0:
        lines.append(f"Pteranodon Scout: -{format_percent(perks.scout_pct)} enemy")
    if perks.shield_loss_reduce > 0:
        lines.append(f"Trike Shield: -{format_percent(perks.shield_loss_reduce)} losses")
    if perks.rend_extra_food > 0:
        lines.append(f"Spino Rend: +{perks.rend_extra_food} food on victory")
    return lines
