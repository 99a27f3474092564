"""Tests for raid resolution, losses, the raid log and the daily gate."""

import itertools
from datetime import date

import pytest

from fortress.engine.raid_service import RaidService, compute_losses, loss_factor
from fortress.models.creature import TamedCreature
from fortress.models.game_state import GameState
from fortress.models.ledger import ResourceLedger
from fortress.models.raid import RaidLogEntry
from fortress.util.events import RaidResolved

DAY = date(2026, 3, 14)


@pytest.fixture
def today():
    """Mutable calendar: set today.day to move the clock."""
    class _Today:
        day = DAY

        def __call__(self):
            return self.day
    return _Today()


@pytest.fixture
def service(bus, rng, today) -> RaidService:
    ticks = itertools.count(1)
    return RaidService(bus, rng, today=today, clock=lambda: float(next(ticks)))


def _trikes(n):
    return [TamedCreature(creature_id=f"Triceratops-{i}", species="Triceratops") for i in range(n)]


# ── Opponent ───────────────────────────────────────────────────────────


class TestEnemyPower:
    def test_scales_with_fortress_power(self, service, state, rng):
        state.fortress.power = 100
        rng.push(-30)
        assert service.roll_enemy_power(state) == 60
        assert rng.calls == [(-30, 30)]

    def test_weak_fortress_uses_minimums(self, service, state, rng):
        rng.push(-10)
        assert service.roll_enemy_power(state) == 10
        assert rng.calls == [(-10, 10)]

    def test_never_below_minimum(self, service, state, rng):
        state.fortress.power = 5
        rng.push(-10)
        assert service.roll_enemy_power(state) == 10


# ── Resolution ─────────────────────────────────────────────────────────


class TestResolveRaid:
    def test_victory_example(self, service, state: GameState, rng, received):
        """power 100 vs rolled 95, no creatures → victory, food loot without bonus."""
        state.fortress.power = 100
        rng.push(5, 4, 3, 2)

        entry = service.resolve_raid(state, is_daily=False)

        assert isinstance(entry, RaidLogEntry)
        assert entry.raw_enemy_power == 95
        assert entry.effective_my_power == 100
        assert entry.effective_enemy_power == 95
        assert entry.result == "victory"
        assert entry.loot == {"wood": 4, "stone": 3, "food": 2}
        assert state.ledger.stocks == {"wood": 4, "stone": 3, "food": 2}
        assert state.fortress.power == 100
        assert isinstance(received[-1], RaidResolved)
        assert received[-1].result == "victory"
        assert "None" in received[-1].message

    def test_spinosaurus_adds_victory_food(self, service, state, rng):
        state.fortress.power = 100
        state.stable.append(TamedCreature(creature_id="Spinosaurus-1", species="Spinosaurus", level=3))
        rng.push(0, 3, 2, 1)
        entry = service.resolve_raid(state, is_daily=False)
        assert entry.result == "victory"
        assert entry.loot["food"] == 1 + 3

    def test_victory_loot_is_uncapped(self, service, state, rng):
        state.fortress.power = 100
        state.ledger.credit({"wood": 10_000})
        rng.push(0, 7, 5, 3)
        service.resolve_raid(state, is_daily=False)
        assert state.ledger.get("wood") == 10_007

    def test_breach_with_triceratops_shield(self, service, state, rng):
        state.fortress.power = 100
        state.stable.extend(_trikes(3))
        state.ledger.credit({"wood": 50, "stone": 10, "food": 5})
        rng.push(30, 1, 0, 2)  # enemy 120, then wood/stone/food jitter

        entry = service.resolve_raid(state, is_daily=False)

        # gap 20 → min(0.3, 20/120) * (1 - 0.6) ≈ 0.0667
        assert entry.result == "breached"
        assert entry.effective_enemy_power == 120
        assert entry.delta == {"wood": -4, "stone": 0, "food": -2}
        assert entry.loot == {"wood": 0, "stone": 0, "food": 0}
        assert state.ledger.stocks == {"wood": 46, "stone": 10, "food": 3}
        assert state.fortress.power == 100
        assert entry.notes["counts"]["trike_count"] == 3

    def test_breach_never_goes_negative(self, service, state, rng):
        state.ledger.credit({"wood": 1, "stone": 0, "food": 2})
        for _ in range(20):
            rng.push(10, 3, 2, 2)  # enemy 20 vs own 0
            entry = service.resolve_raid(state, is_daily=False)
            assert entry.result == "breached"
            assert all(v >= 0 for v in state.ledger.stocks.values())
        assert state.ledger.stocks == {"wood": 0, "stone": 0, "food": 0}

    def test_log_keeps_fifty_newest(self, service, state):
        for _ in range(55):
            service.resolve_raid(state, is_daily=False)
        assert len(state.raid_log) == 50
        timestamps = [e.timestamp for e in state.raid_log]
        assert timestamps == sorted(timestamps, reverse=True)
        assert timestamps[0] == 55.0


class TestLosses:
    def test_loss_factor_example(self):
        factor = loss_factor(100, 130, 0.6)
        assert abs(factor - (30 / 130) * 0.4) < 1e-9

    def test_loss_factor_caps_at_thirty_percent(self):
        assert loss_factor(0, 1000, 0.0) == 0.3

    def test_loss_factor_uses_gap_floor(self):
        assert loss_factor(5, 10, 0.0) == 5 / 20

    def test_triceratops_example(self, rng):
        """3 Triceratops, enemy 130 vs 100, 50 wood → 4 + jitter wood lost."""
        ledger = ResourceLedger(stocks={"wood": 50, "stone": 0, "food": 0})
        factor = loss_factor(100, 130, 0.6)
        rng.push(3, 2, 2)
        losses = compute_losses(ledger, factor, {"wood": 3, "stone": 2, "food": 2}, rng)
        assert losses == {"wood": 7, "stone": 0, "food": 0}
        assert rng.calls == [(0, 3), (0, 2), (0, 2)]


# ── Daily gate ─────────────────────────────────────────────────────────


class TestDailyGate:
    def test_second_daily_raid_same_day_is_noop(self, service, state, received):
        assert service.can_run_daily_raid(state) is True
        first = service.resolve_raid(state, is_daily=True)
        assert isinstance(first, RaidLogEntry)
        assert state.last_daily_raid_day == "2026-03-14"
        assert service.can_run_daily_raid(state) is False
        snapshot = dict(state.ledger.stocks)

        second = service.resolve_raid(state, is_daily=True)

        assert isinstance(second, str)
        assert len(state.raid_log) == 1
        assert state.ledger.stocks == snapshot
        assert len([e for e in received if isinstance(e, RaidResolved)]) == 1

    def test_practice_raids_are_unlimited(self, service, state):
        service.resolve_raid(state, is_daily=True)
        for _ in range(3):
            assert isinstance(service.resolve_raid(state, is_daily=False), RaidLogEntry)
        assert len(state.raid_log) == 4
        assert [e.daily for e in state.raid_log] == [False, False, False, True]

    def test_practice_raid_leaves_marker_alone(self, service, state):
        service.resolve_raid(state, is_daily=False)
        assert state.last_daily_raid_day is None
        assert service.can_run_daily_raid(state) is True

    def test_next_day_unlocks_daily_raid(self, service, state, today):
        service.resolve_raid(state, is_daily=True)
        today.day = date(2026, 3, 15)
        assert service.can_run_daily_raid(state) is True
        assert isinstance(service.resolve_raid(state, is_daily=True), RaidLogEntry)
        assert state.last_daily_raid_day == "2026-03-15"
