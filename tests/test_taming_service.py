"""Tests for encounters, feed/calm/walk and promotion to the stable."""

import pytest

from fortress.engine.taming_service import TamingService
from fortress.models.creature import WildEncounter
from fortress.models.game_state import GameState
from fortress.util.events import CreatureTamed, TamingRejected


@pytest.fixture
def service(bus, rng) -> TamingService:
    return TamingService(bus, rng, clock=lambda: 1234.0)


def _encounter(service, state, rng, species_idx=0, tier=1, level=1) -> WildEncounter:
    rng.push(species_idx, tier, level)
    return service.generate_encounter(state)


# ── Encounters ─────────────────────────────────────────────────────────


class TestGenerateEncounter:
    @pytest.mark.parametrize("tier, target", [(1, 100), (2, 140), (3, 180)])
    def test_tier_sets_target_and_hostility(self, service, state, rng, tier, target):
        c = _encounter(service, state, rng, species_idx=1, tier=tier, level=2)
        assert c.species == "Triceratops"
        assert c.emoji == "🐲"
        assert c.difficulty == tier
        assert c.taming_target == target
        assert c.hostility == tier
        assert c.level == 2
        assert c.taming_progress == 0
        assert rng.calls == [(0, 4), (1, 3), (1, 3)]

    def test_new_encounters_go_first_with_unique_ids(self, service, state, rng):
        first = _encounter(service, state, rng)
        second = _encounter(service, state, rng)
        assert state.wild == [second, first]
        assert first.creature_id != second.creature_id


# ── Feed ───────────────────────────────────────────────────────────────


class TestFeed:
    @pytest.mark.parametrize("tier, rate", [(1, 10), (2, 8), (3, 6)])
    def test_feed_uses_two_food_at_tier_rate(self, service, state, rng, tier, rate):
        c = _encounter(service, state, rng, tier=tier)
        state.ledger.credit({"food": 5})
        assert service.feed(state, c.creature_id) is None
        assert state.ledger.get("food") == 3
        assert c.taming_progress == 2 * rate

    def test_feed_with_one_food(self, service, state, rng):
        c = _encounter(service, state, rng, tier=2)
        state.ledger.credit({"food": 1})
        service.feed(state, c.creature_id)
        assert state.ledger.get("food") == 0
        assert c.taming_progress == 8

    def test_no_food_rejected(self, service, state, rng, received):
        c = _encounter(service, state, rng)
        error = service.feed(state, c.creature_id)
        assert error is not None
        assert c.taming_progress == 0
        assert isinstance(received[-1], TamingRejected)
        assert received[-1].action == "feed"

    def test_feed_caps_at_target(self, service, state, rng):
        c = _encounter(service, state, rng, tier=3)
        c.taming_progress = 175
        state.ledger.credit({"food": 2})
        service.feed(state, c.creature_id)
        # tamed and moved; the stable copy keeps the capped progress
        assert state.stable[0].taming_progress == 180

    def test_unknown_creature_keeps_food(self, service, state, rng, received):
        c = _encounter(service, state, rng)
        state.ledger.credit({"food": 5})
        assert service.feed(state, "Nessie-1") == "Unknown creature: Nessie-1"
        assert state.ledger.get("food") == 5
        assert state.ledger.focus_tokens == 0
        assert c.taming_progress == 0
        assert isinstance(received[-1], TamingRejected)
        assert received[-1].action == "feed"


# ── Calm ───────────────────────────────────────────────────────────────


class TestCalm:
    @pytest.mark.parametrize("hostility, gain", [(3, 12), (2, 14), (1, 16), (0, 18)])
    def test_calm_bonus_uses_hostility_before(self, service, state, rng, hostility, gain):
        c = _encounter(service, state, rng, tier=3)
        c.hostility = hostility
        state.ledger.focus_tokens = 1
        assert service.calm(state, c.creature_id) is None
        assert state.ledger.focus_tokens == 0
        assert c.taming_progress == gain
        assert c.hostility == max(0, hostility - 1)

    def test_no_tokens_rejected(self, service, state, rng, received):
        c = _encounter(service, state, rng, tier=2)
        error = service.calm(state, c.creature_id)
        assert error is not None
        assert c.hostility == 2
        assert c.taming_progress == 0
        assert received[-1].action == "calm"

    def test_unknown_creature_keeps_token(self, service, state, rng, received):
        c = _encounter(service, state, rng)
        state.ledger.credit({"food": 2})
        state.ledger.focus_tokens = 1
        assert service.calm(state, "Nessie-1") == "Unknown creature: Nessie-1"
        assert state.ledger.get("food") == 2
        assert state.ledger.focus_tokens == 1
        assert c.hostility == 1
        assert isinstance(received[-1], TamingRejected)
        assert received[-1].action == "calm"


# ── Walk ───────────────────────────────────────────────────────────────


class TestWalk:
    def test_walk_is_free(self, service, state, rng):
        c = _encounter(service, state, rng)
        assert service.walk(state, c.creature_id) is None
        assert c.walked_distance == 200
        assert c.taming_progress == 6
        assert state.ledger.to_dict() == {"wood": 0, "stone": 0, "food": 0, "focus_tokens": 0}

    def test_unknown_creature_rejected(self, service, state, received):
        assert service.walk(state, "Nessie-1") == "Unknown creature: Nessie-1"
        assert isinstance(received[-1], TamingRejected)

    def test_progress_never_exceeds_target(self, service, state, rng):
        c = _encounter(service, state, rng, tier=1)
        c.taming_progress = 97
        c.taming_target = 200
        for _ in range(40):
            service.walk(state, c.creature_id)
            if c not in state.wild:
                break
            assert c.taming_progress <= c.taming_target


# ── Promotion ──────────────────────────────────────────────────────────


class TestPromotion:
    def test_walking_to_target_tames(self, service, state: GameState, rng, received):
        c = _encounter(service, state, rng, species_idx=3, tier=1, level=2)
        for _ in range(16):
            service.walk(state, c.creature_id)
        assert c.taming_progress == 96
        assert state.wild == [c]

        service.walk(state, c.creature_id)

        assert state.wild == []
        assert len(state.stable) == 1
        tamed = state.stable[0]
        assert tamed.creature_id == c.creature_id
        assert tamed.species == "Ankylosaurus"
        assert tamed.tamed is True
        assert tamed.tamed_at == 1234.0
        assert tamed.experience == 0
        assert state.fortress.power == 10 + 5 * 2

        tamed_events = [e for e in received if isinstance(e, CreatureTamed)]
        assert len(tamed_events) == 1
        assert tamed_events[0].power_gain == 20

    def test_sweep_is_idempotent(self, service, state, rng):
        c = _encounter(service, state, rng, level=3)
        c.taming_progress = c.taming_target

        first = service.promote_tamed(state)
        second = service.promote_tamed(state)

        assert [t.creature_id for t in first] == [c.creature_id]
        assert second == []
        assert len(state.stable) == 1
        assert state.fortress.power == 25

    def test_only_finished_encounters_move(self, service, state, rng):
        done = _encounter(service, state, rng, level=1)
        busy = _encounter(service, state, rng, level=1)
        done.taming_progress = done.taming_target - 6
        service.walk(state, done.creature_id)
        assert state.wild == [busy]
        assert [t.creature_id for t in state.stable] == [done.creature_id]

    def test_action_on_tamed_creature_is_rejected(self, service, state, rng):
        c = _encounter(service, state, rng)
        c.taming_progress = c.taming_target - 6
        service.walk(state, c.creature_id)
        assert service.walk(state, c.creature_id) is not None
        assert len(state.stable) == 1
