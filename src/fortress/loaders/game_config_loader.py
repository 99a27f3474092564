"""Game configuration — loads tunable constants from config/game.yaml.

Provides a single ``GameConfig`` dataclass that is loaded once at startup
and then passed (or injected) wherever constants are needed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Tuple

import yaml

from fortress.models.fortress import FortressState
from fortress.util.constants import FOOD, HATCHERY, STONE, TOWER, WALL, WOOD

log = logging.getLogger(__name__)

DEFAULT_GAME_CONFIG_PATH = "config/game.yaml"

Range = Tuple[int, int]


@dataclass
class StructureSchedule:
    """Linear cost / power schedule of one structure kind.

    Costs and power gain are multiplied by the *next* level (1-indexed).
    """
    cost_per_level: Dict[str, int] = field(default_factory=dict)
    power_per_level: int = 0

    def cost(self, level: int) -> Dict[str, int]:
        return {res: amount * level for res, amount in self.cost_per_level.items()}

    def power_gain(self, level: int) -> int:
        return self.power_per_level * level


def _default_structures() -> Dict[str, StructureSchedule]:
    return {
        WALL: StructureSchedule({WOOD: 20, STONE: 10}, 5),
        TOWER: StructureSchedule({WOOD: 15, STONE: 20}, 8),
        HATCHERY: StructureSchedule({WOOD: 10, FOOD: 15}, 6),
    }


@dataclass
class GameConfig:
    """All tunable gameplay constants.

    Loaded from ``config/game.yaml``.  Every field has a sensible default
    so the engine can start even without the file.
    """

    # -- Timing ------------------------------------------------------
    step_length_ms: float = 1000.0
    default_minutes: int = 25
    min_minutes: int = 1
    max_minutes: int = 180

    # -- Session reward ----------------------------------------------
    session_reward: Dict[str, Range] = field(default_factory=lambda: {
        WOOD: (5, 9), STONE: (2, 5), FOOD: (1, 4),
    })
    session_focus_tokens: int = 1

    # -- Fortress ----------------------------------------------------
    structures: Dict[str, StructureSchedule] = field(default_factory=_default_structures)

    # -- Taming ------------------------------------------------------
    taming_base_target: int = 100
    taming_target_per_tier: int = 40
    feed_max_food: int = 2
    feed_rates: Dict[int, int] = field(default_factory=lambda: {1: 10, 2: 8, 3: 6})
    calm_base_progress: int = 12
    calm_bonus_per_calm_step: int = 2
    max_hostility: int = 3
    walk_distance: int = 200
    walk_progress: int = 6
    tame_power_base: int = 10
    tame_power_per_level: int = 5

    # -- Defender perks ----------------------------------------------
    raptor_pct_per_level: float = 0.03
    raptor_pct_cap: float = 0.30
    triceratops_pct_per_creature: float = 0.20
    triceratops_pct_cap: float = 0.60
    pteranodon_pct_per_creature: float = 0.05
    pteranodon_pct_cap: float = 0.25
    ankylosaurus_flat_per_level: int = 2
    spinosaurus_food_per_level: int = 1

    # -- Raids -------------------------------------------------------
    min_enemy_power: int = 10
    enemy_base_ratio: float = 0.9
    enemy_swing_ratio: float = 0.3
    max_loss_factor: float = 0.3
    loss_gap_floor: int = 20
    victory_loot: Dict[str, Range] = field(default_factory=lambda: {
        WOOD: (3, 7), STONE: (2, 5), FOOD: (1, 3),
    })
    loss_jitter: Dict[str, int] = field(default_factory=lambda: {
        WOOD: 3, STONE: 2, FOOD: 2,
    })
    raid_log_limit: int = 50

    # -- Presentation ------------------------------------------------
    notification_queue_limit: int = 100


def _as_ranges(raw: dict) -> Dict[str, Range]:
    return {k: (int(v[0]), int(v[1])) for k, v in raw.items()}


def _merge_structures(raw: dict, defaults: Dict[str, StructureSchedule]) -> Dict[str, StructureSchedule]:
    """Overlay per-kind YAML entries on the default schedules.

    Kinds the fortress has no level slot for are skipped with a warning.
    """
    merged = {kind: StructureSchedule(dict(s.cost_per_level), s.power_per_level)
              for kind, s in defaults.items()}
    for kind, attrs in raw.items():
        if f"{kind}_level" not in FortressState.__dataclass_fields__:
            log.warning("Ignoring unknown structure kind %r in game config", kind)
            continue
        if not isinstance(attrs, dict):
            continue
        schedule = merged.setdefault(kind, StructureSchedule())
        costs = attrs.get("cost_per_level") or {}
        schedule.cost_per_level.update({k: int(v) for k, v in costs.items()})
        if "power_per_level" in attrs:
            schedule.power_per_level = int(attrs["power_per_level"])
    return merged


def load_game_config(path: str = DEFAULT_GAME_CONFIG_PATH) -> GameConfig:
    """Load game configuration from a YAML file.

    Missing keys fall back to dataclass defaults, also inside the nested
    sections.  If the file does not exist, a warning is logged and pure
    defaults are returned.
    """
    p = Path(path)
    if not p.exists():
        log.warning("Game config not found at %s — using defaults", p)
        return GameConfig()

    with p.open() as f:
        raw = yaml.safe_load(f) or {}

    log.info("Loaded game config from %s (%d keys)", p, len(raw))

    # Nested sections are merged over the defaults key by key
    defaults = GameConfig()
    nested: dict = {}
    structures_raw = raw.pop("structures", None)
    if isinstance(structures_raw, dict):
        nested["structures"] = _merge_structures(structures_raw, defaults.structures)
    for key in ("session_reward", "victory_loot"):
        section = raw.pop(key, None)
        if isinstance(section, dict):
            nested[key] = {**getattr(defaults, key), **_as_ranges(section)}
    rates = raw.pop("feed_rates", None)
    if isinstance(rates, dict):
        nested["feed_rates"] = {**defaults.feed_rates,
                                **{int(k): int(v) for k, v in rates.items()}}
    jitter = raw.pop("loss_jitter", None)
    if isinstance(jitter, dict):
        nested["loss_jitter"] = {**defaults.loss_jitter,
                                 **{k: int(v) for k, v in jitter.items()}}

    cfg = GameConfig(**nested, **{
        k: v for k, v in raw.items()
        if k in GameConfig.__dataclass_fields__
    })
    return cfg
