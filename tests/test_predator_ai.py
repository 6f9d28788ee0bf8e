"""Tests for the PredatorDecisionEngine state machine driver."""

import random

import pytest

from lakesim.config.simulation_config import DecisionConfig
from lakesim.config.species import SpeciesCatalog
from lakesim.entities.targets import LURE_TARGET, NO_TARGET, LureTarget, SchoolTarget
from lakesim.entity_ids import SchoolId
from lakesim.events.domain_events import (
    FrenzyEvent,
    HooksetEvent,
    LureBumpedEvent,
    MigratedEvent,
    StrikeEvent,
    StrikeMissedEvent,
)
from lakesim.simulation import SimulationEngine
from lakesim.state_machine import BehaviorState
from lakesim.systems.fight import FightResolver
from lakesim.systems.predator_ai import PredatorDecisionEngine

from helpers import add_member, add_predator


def make_engine(registry, catalog, config, lure, events, rng, decision_config=None):
    fight = FightResolver(
        registry, lure, config.world, config.fight, events, rng=rng,
        wary_ticks=config.decision.wary_ticks,
    )
    return PredatorDecisionEngine(
        registry,
        catalog,
        config.world,
        decision_config or config.decision,
        lure,
        events,
        rng=rng,
        fight=fight,
    )


@pytest.fixture
def decision(registry, catalog, config, lure, events, seeded_rng):
    return make_engine(registry, catalog, config, lure, events, seeded_rng)


def step(registry, engine, frame):
    result = engine.update(frame)
    registry.apply_pending(frame)
    return result


class TestLurePipeline:
    def test_strike_and_hookset_end_to_end(self, config) -> None:
        """An aggressive fish near a lure retrieved at its favorite speed strikes on tick 3."""
        catalog = SpeciesCatalog.from_mapping(
            {
                "test_pike": {
                    "kind": "predator",
                    "behavior_style": "pursuit",
                    "aggressiveness": 0.9,
                    "interest_threshold": 0.5,
                    "optimal_lure_speed": 2.0,
                    "speed_tolerance": 2.0,
                    "strike_distance": 25.0,
                    "vision": {"horizontal_range": 200.0, "vertical_range": 200.0},
                    "depth_range": {"min_ft": 40.0, "max_ft": 100.0},
                }
            }
        )
        engine = SimulationEngine(config=config, catalog=catalog, seed=1)
        predator = engine.spawn_predator("test_pike", origin=(400, 240)).unwrap()
        engine.drop_lure(410, 240)
        engine.retrieve_lure((1, 0), 2.0)

        engine.step()
        assert predator.state is BehaviorState.INVESTIGATING
        assert predator.target == LURE_TARGET

        engine.step()
        assert predator.state is BehaviorState.CHASING

        engine.attempt_hookset()
        engine.step()
        assert predator.state is BehaviorState.HOOKED
        assert engine.active_fight is not None
        assert engine.active_fight.predator_id == predator.id
        assert engine.lure.owner == predator.id

        kinds = [type(event) for event in engine.drain_events()]
        assert kinds.index(StrikeEvent) < kinds.index(HooksetEvent)
        assert LureBumpedEvent in kinds

    def test_simultaneous_strikers_only_first_hooked(
        self, registry, catalog, lure, events, decision
    ) -> None:
        """Of two STRIKING fish, the first in registry order wins the line."""
        lure.drop(400, 240)
        trout = catalog.get("lake_trout")
        first = add_predator(registry, trout, 400, 240, state=BehaviorState.STRIKING)
        second = add_predator(registry, trout, 405, 240, state=BehaviorState.STRIKING)
        for predator in (first, second):
            predator.strike_window_ticks = 10
            predator.target = LURE_TARGET

        decision.request_hookset()
        step(registry, decision, 1)
        assert first.state is BehaviorState.HOOKED
        assert second.state is BehaviorState.STRIKING
        assert lure.owner == first.id
        assert len(events.of_type(HooksetEvent)) == 1

        step(registry, decision, 2)
        assert second.state is BehaviorState.IDLE
        assert second.target == NO_TARGET
        assert first.state is BehaviorState.HOOKED

    def test_strike_window_expires(self, registry, catalog, lure, events, decision) -> None:
        lure.drop(400, 240)
        predator = add_predator(
            registry, catalog.get("lake_trout"), 400, 240, state=BehaviorState.STRIKING
        )
        predator.target = LURE_TARGET
        predator.strike_window_ticks = 2

        step(registry, decision, 1)
        assert predator.state is BehaviorState.STRIKING
        step(registry, decision, 2)
        assert predator.state is BehaviorState.IDLE
        missed = events.of_type(StrikeMissedEvent)
        assert [e.predator_id for e in missed] == [predator.id]

    def test_hookset_with_nothing_striking_is_harmless(self, registry, catalog, decision) -> None:
        add_predator(registry, catalog.get("lake_trout"), 400, 240)
        decision.request_hookset()
        result = step(registry, decision, 1)
        assert result.details["hooked"] == 0

    def test_invalid_target_returns_to_idle(self, registry, catalog, lure, decision) -> None:
        lure.drop(400, 240)
        predator = add_predator(
            registry, catalog.get("lake_trout"), 400, 240, state=BehaviorState.INVESTIGATING
        )
        predator.target = NO_TARGET

        step(registry, decision, 1)
        assert predator.state is BehaviorState.IDLE

    def test_lifted_lure_ends_investigation(self, registry, catalog, lure, decision) -> None:
        lure.drop(400, 240)
        predator = add_predator(registry, catalog.get("lake_trout"), 420, 240)
        step(registry, decision, 1)
        assert predator.state is BehaviorState.INVESTIGATING

        lure.lift()
        step(registry, decision, 2)
        assert predator.state is BehaviorState.IDLE
        assert predator.target == NO_TARGET

    def test_speed_mismatch_exhausts_patience(
        self, registry, catalog, config, lure, events, seeded_rng
    ) -> None:
        """A motionless lure is two tolerances off a trout's favorite speed."""
        engine = make_engine(
            registry, catalog, config, lure, events, seeded_rng,
            decision_config=DecisionConfig(interest_patience_ticks=3),
        )
        lure.drop(400, 240)
        predator = add_predator(
            registry, catalog.get("lake_trout"), 400, 240, state=BehaviorState.INVESTIGATING
        )
        predator.target = LURE_TARGET
        assert engine.speed_match(predator) == 0.0

        step(registry, engine, 1)
        step(registry, engine, 2)
        assert predator.state is BehaviorState.INVESTIGATING
        assert predator.patience_ticks == 2
        step(registry, engine, 3)
        assert predator.state is BehaviorState.IDLE

    def test_owned_lure_is_invisible(self, registry, catalog, lure, decision) -> None:
        lure.drop(400, 240)
        other = add_predator(registry, catalog.get("lake_trout"), 900, 240)
        predator = add_predator(registry, catalog.get("lake_trout"), 410, 240)
        lure.owner = other.id
        assert not decision.lure_detectable(predator)

    def test_visual_interest_rises_while_investigating(
        self, registry, catalog, lure, decision
    ) -> None:
        lure.drop(400, 240)
        predator = add_predator(registry, catalog.get("lake_trout"), 420, 240)
        step(registry, decision, 1)
        assert predator.state is BehaviorState.INVESTIGATING
        assert predator.visual_interest > 0.0


class TestModifiers:
    def test_wary_raises_threshold_and_shrinks_strike(self, registry, catalog, decision) -> None:
        predator = add_predator(registry, catalog.get("lake_trout"), 400, 240)
        calm_threshold = decision.interest_threshold(predator)
        calm_strike = decision.strike_distance(predator)

        predator.wary_ticks = 100
        assert decision.interest_threshold(predator) == pytest.approx(calm_threshold + 0.3)
        assert decision.strike_distance(predator) == pytest.approx(calm_strike * 0.6)

    def test_ambush_strikes_from_further(self, registry, catalog, decision) -> None:
        pike = add_predator(registry, catalog.get("northern_pike"), 400, 100)
        assert decision.strike_distance(pike) == pytest.approx(30.0 * 1.6)

    def test_wary_detection_is_shorter(self, registry, catalog, lure, decision) -> None:
        lure.drop(550, 300)
        predator = add_predator(registry, catalog.get("lake_trout"), 400, 300)
        assert decision.lure_detectable(predator)
        predator.wary_ticks = 100
        assert not decision.lure_detectable(predator)

    def test_interest_score_draws_from_rng(self, registry, catalog, lure, decision) -> None:
        lure.drop(400, 300)
        predator = add_predator(registry, catalog.get("lake_trout"), 400, 300)
        scores = {decision.interest_score(predator) for _ in range(5)}
        assert len(scores) > 1


class TestPreyPipeline:
    def _school(self, registry, traits, xs, y):
        school_id = registry.create_school(traits)
        members = [add_member(registry, traits, school_id, x, y, flush=False) for x in xs]
        registry.apply_pending(0)
        return school_id, members

    def test_hungry_predator_hunts(self, registry, catalog, lure, decision) -> None:
        """Above the feeding threshold prey wins over a visible lure."""
        alewife = catalog.get("alewife")
        school_id, members = self._school(registry, alewife, [440, 450, 460], 300)
        lure.drop(410, 300)
        predator = add_predator(registry, catalog.get("lake_trout"), 400, 300, hunger=80)

        step(registry, decision, 1)
        assert predator.state is BehaviorState.HUNTING_PREY
        assert isinstance(predator.target, SchoolTarget)
        assert predator.target.school_id == school_id
        assert predator.target.focus_id == members[0].id
        assert predator.commitment_ticks == decision.config.commitment_ticks

    def test_fed_predator_prefers_lure(self, registry, catalog, lure, decision) -> None:
        alewife = catalog.get("alewife")
        self._school(registry, alewife, [440, 450, 460], 300)
        lure.drop(410, 300)
        predator = add_predator(registry, catalog.get("lake_trout"), 400, 300, hunger=40)

        step(registry, decision, 1)
        assert predator.state is BehaviorState.INVESTIGATING
        assert isinstance(predator.target, LureTarget)

    def test_hunger_at_threshold_does_not_hunt(self, registry, catalog, lure, decision) -> None:
        """Hunting needs hunger strictly above the feeding threshold."""
        alewife = catalog.get("alewife")
        self._school(registry, alewife, [440, 450, 460], 300)
        lure.drop(410, 300)
        threshold = decision.config.feeding_threshold
        predator = add_predator(registry, catalog.get("lake_trout"), 400, 300, hunger=threshold)

        step(registry, decision, 1)
        assert predator.hunger == threshold
        assert predator.state is BehaviorState.INVESTIGATING
        assert isinstance(predator.target, LureTarget)

    def test_hunger_at_threshold_without_lure_stays_idle(
        self, registry, catalog, decision
    ) -> None:
        alewife = catalog.get("alewife")
        self._school(registry, alewife, [440, 450, 460], 300)
        predator = add_predator(registry, catalog.get("lake_trout"), 400, 300, hunger=60.0)

        step(registry, decision, 1)
        assert predator.state is BehaviorState.IDLE
        assert predator.target == NO_TARGET

    def test_meal_leads_to_feeding_then_idle(
        self, registry, catalog, config, lure, events, seeded_rng
    ) -> None:
        engine = make_engine(
            registry, catalog, config, lure, events, seeded_rng,
            decision_config=DecisionConfig(feeding_ticks=2),
        )
        alewife = catalog.get("alewife")
        school_id, _ = self._school(registry, alewife, [420], 300)
        predator = add_predator(
            registry, catalog.get("lake_trout"), 400, 300, state=BehaviorState.HUNTING_PREY
        )
        predator.target = SchoolTarget(school_id=school_id)
        predator.last_meal_frame = 5

        step(registry, engine, 5)
        assert predator.state is BehaviorState.FEEDING
        assert predator.target == NO_TARGET
        step(registry, engine, 6)
        assert predator.state is BehaviorState.FEEDING
        step(registry, engine, 7)
        assert predator.state is BehaviorState.IDLE

    def test_vanished_school_returns_to_idle(self, registry, catalog, decision) -> None:
        alewife = catalog.get("alewife")
        school_id, members = self._school(registry, alewife, [420], 300)
        predator = add_predator(
            registry, catalog.get("lake_trout"), 400, 300, state=BehaviorState.HUNTING_PREY
        )
        predator.target = SchoolTarget(school_id=school_id, focus_id=members[0].id)
        registry.request_despawn(members[0].id)
        registry.apply_pending(0)

        step(registry, decision, 1)
        assert predator.state is BehaviorState.IDLE

    def test_escaped_school_goes_on_cooldown(self, registry, catalog, decision) -> None:
        alewife = catalog.get("alewife")
        school_id, members = self._school(registry, alewife, [1000], 300)
        predator = add_predator(
            registry, catalog.get("lake_trout"), 400, 300, state=BehaviorState.HUNTING_PREY
        )
        predator.target = SchoolTarget(school_id=school_id, focus_id=members[0].id)

        step(registry, decision, 1)
        assert predator.state is BehaviorState.IDLE
        assert predator.is_on_cooldown(school_id)
        assert all(c.school_id != school_id for c in decision.prey_candidates(predator))

    def test_switches_to_much_better_school_after_commitment(
        self, registry, catalog, decision
    ) -> None:
        alewife = catalog.get("alewife")
        lone_id, lone = self._school(registry, alewife, [550], 300)
        big_id, _ = self._school(registry, alewife, [420 + 2 * i for i in range(10)], 300)
        predator = add_predator(
            registry, catalog.get("lake_trout"), 400, 300, state=BehaviorState.HUNTING_PREY
        )
        predator.target = SchoolTarget(school_id=lone_id, focus_id=lone[0].id)
        predator.commitment_ticks = 0

        step(registry, decision, 1)
        assert predator.state is BehaviorState.HUNTING_PREY
        assert predator.target.school_id == big_id
        assert predator.is_on_cooldown(lone_id)
        assert predator.commitment_ticks == decision.config.commitment_ticks

    def test_commitment_blocks_switching(self, registry, catalog, decision) -> None:
        alewife = catalog.get("alewife")
        lone_id, lone = self._school(registry, alewife, [550], 300)
        self._school(registry, alewife, [420 + 2 * i for i in range(10)], 300)
        predator = add_predator(
            registry, catalog.get("lake_trout"), 400, 300, state=BehaviorState.HUNTING_PREY
        )
        predator.target = SchoolTarget(school_id=lone_id, focus_id=lone[0].id)
        predator.commitment_ticks = 50

        step(registry, decision, 1)
        assert predator.target.school_id == lone_id
        assert not predator.is_on_cooldown(lone_id)


class TestMigrationAndBiology:
    def test_migrating_predator_leaves_area(self, registry, catalog, events, decision) -> None:
        predator = add_predator(registry, catalog.get("lake_trout"), 10, 300)
        assert decision.signal_migration(predator, 1)
        assert predator.migration_direction == -1

        for frame in range(2, 40):
            step(registry, decision, frame)
        migrated = events.of_type(MigratedEvent)
        assert len(migrated) == 1
        assert migrated[0].species_id == "lake_trout"
        assert registry.predators() == []

    def test_hooked_predator_not_migrated(self, registry, catalog, decision) -> None:
        predator = add_predator(
            registry, catalog.get("lake_trout"), 10, 300, state=BehaviorState.HOOKED
        )
        assert not decision.signal_migration(predator, 1)
        assert predator.state is BehaviorState.HOOKED

    def test_signal_migration_twice(self, registry, catalog, decision) -> None:
        predator = add_predator(registry, catalog.get("lake_trout"), 1500, 300)
        assert decision.signal_migration(predator, 1)
        assert predator.migration_direction == 1
        assert not decision.signal_migration(predator, 2)

    def test_starving_predator_loses_health(
        self, registry, catalog, config, lure, events, seeded_rng
    ) -> None:
        engine = make_engine(
            registry, catalog, config, lure, events, seeded_rng,
            decision_config=DecisionConfig(hunger_interval_ticks=1),
        )
        predator = add_predator(registry, catalog.get("lake_trout"), 400, 300, hunger=90)
        step(registry, engine, 1)
        assert predator.hunger == pytest.approx(90.96)
        assert predator.health == pytest.approx(99.6)

    def test_metabolism_scales_hunger(self, registry, config, lure, events, seeded_rng) -> None:
        catalog = SpeciesCatalog.from_mapping(
            {
                "slow_burner": {"hunger_rate": 2.0, "metabolism": 0.5},
                "fast_burner": {"hunger_rate": 2.0, "metabolism": 1.5},
            }
        )
        engine = make_engine(
            registry, catalog, config, lure, events, seeded_rng,
            decision_config=DecisionConfig(hunger_interval_ticks=1),
        )
        slow = add_predator(registry, catalog.get("slow_burner"), 400, 300, hunger=10)
        fast = add_predator(registry, catalog.get("fast_burner"), 1200, 300, hunger=10)
        step(registry, engine, 1)
        assert slow.hunger == pytest.approx(11.0)
        assert fast.hunger == pytest.approx(13.0)

    def test_hooked_predator_untouched(self, registry, catalog, decision) -> None:
        predator = add_predator(
            registry, catalog.get("lake_trout"), 400, 300, state=BehaviorState.HOOKED
        )
        before = predator.pos.copy()
        result = step(registry, decision, 1)
        assert predator.pos == before
        assert result.entities_affected == 0

    def test_predators_stay_in_water_column(self, registry, catalog, config, decision) -> None:
        predator = add_predator(registry, catalog.get("lake_trout"), 400, config.world.max_y)
        for frame in range(1, 30):
            step(registry, decision, frame)
        assert config.world.min_y <= predator.pos.y <= config.world.max_y
        assert 0.0 <= predator.pos.x <= config.world.width


class TestFrenzy:
    def _engine(self, registry, catalog, config, lure, events, rng, **overrides):
        overrides.setdefault("frenzy_join_chance", 1.0)
        return make_engine(
            registry, catalog, config, lure, events, rng,
            decision_config=DecisionConfig(**overrides),
        )

    def _school(self, registry, traits, xs, y):
        school_id = registry.create_school(traits)
        for x in xs:
            add_member(registry, traits, school_id, x, y, flush=False)
        registry.apply_pending(0)
        return school_id

    def test_idle_fish_joins_hunting_neighbor(
        self, registry, catalog, config, lure, events, seeded_rng
    ) -> None:
        """A fed, idle fish next to a hunting one piles in on the same school."""
        engine = self._engine(registry, catalog, config, lure, events, seeded_rng)
        trout = catalog.get("lake_trout")
        school_id = self._school(registry, catalog.get("alewife"), [440, 450, 460], 300)
        hunter = add_predator(registry, trout, 420, 300, state=BehaviorState.HUNTING_PREY)
        hunter.target = SchoolTarget(school_id=school_id)
        follower = add_predator(registry, trout, 600, 300, hunger=30)

        step(registry, engine, 1)

        assert follower.in_frenzy
        assert follower.frenzy_ticks > engine.config.frenzy_base_ticks
        assert follower.frenzy_intensity == pytest.approx(0.3)
        assert follower.frenzy_school == school_id
        assert 1 <= follower.extra_strikes <= engine.config.frenzy_max_extra_strikes
        assert follower.state is BehaviorState.HUNTING_PREY
        assert follower.target.school_id == school_id
        frenzies = events.of_type(FrenzyEvent)
        assert [(e.predator_id, e.excited_neighbors) for e in frenzies] == [(follower.id, 1)]
        assert engine.get_debug_info()["frenzies"] == 1

    def test_frenzy_without_prey_goes_for_the_lure(
        self, registry, catalog, config, lure, events, seeded_rng
    ) -> None:
        engine = self._engine(registry, catalog, config, lure, events, seeded_rng)
        trout = catalog.get("lake_trout")
        lure.drop(500, 300)
        chaser = add_predator(registry, trout, 480, 300, state=BehaviorState.CHASING)
        chaser.target = LURE_TARGET
        follower = add_predator(registry, trout, 560, 300)

        step(registry, engine, 1)

        assert follower.in_frenzy
        assert follower.frenzy_school is None
        assert follower.state is BehaviorState.INVESTIGATING
        assert follower.target == LURE_TARGET

    def test_disabled_or_alone_means_no_frenzy(
        self, registry, catalog, config, lure, events, seeded_rng
    ) -> None:
        engine = self._engine(
            registry, catalog, config, lure, events, seeded_rng, frenzy_enabled=False
        )
        trout = catalog.get("lake_trout")
        lure.drop(500, 300)
        chaser = add_predator(registry, trout, 480, 300, state=BehaviorState.CHASING)
        chaser.target = LURE_TARGET
        follower = add_predator(registry, trout, 560, 300)
        loner = add_predator(registry, trout, 1400, 300)

        step(registry, engine, 1)

        assert not follower.in_frenzy
        assert not loner.in_frenzy
        assert events.of_type(FrenzyEvent) == []
        assert engine.excited_neighbors(loner) == []
        assert engine.excited_neighbors(follower) == [chaser]

    def test_frenzy_raises_interest(self, registry, catalog, config, lure, events) -> None:
        calm_engine = self._engine(registry, catalog, config, lure, events, random.Random(5))
        frenzied_engine = self._engine(registry, catalog, config, lure, events, random.Random(5))
        lure.drop(420, 300)
        predator = add_predator(registry, catalog.get("lake_trout"), 400, 300)

        calm = calm_engine.interest_score(predator)
        predator.frenzy_ticks = 100
        predator.frenzy_intensity = 0.6
        frenzied = frenzied_engine.interest_score(predator)

        bonus = calm_engine.config.frenzy_interest_bonus * 0.6
        assert frenzied == pytest.approx(calm + bonus)

    def test_missed_strike_in_frenzy_strikes_again(
        self, registry, catalog, config, lure, events, seeded_rng
    ) -> None:
        engine = self._engine(registry, catalog, config, lure, events, seeded_rng)
        lure.drop(400, 240)
        predator = add_predator(
            registry, catalog.get("lake_trout"), 400, 240, state=BehaviorState.STRIKING
        )
        predator.target = LURE_TARGET
        predator.strike_window_ticks = 1
        predator.frenzy_ticks = 100
        predator.frenzy_intensity = 0.3
        predator.extra_strikes = 1

        step(registry, engine, 1)
        assert predator.state is BehaviorState.CHASING
        assert predator.extra_strikes == 0
        step(registry, engine, 2)
        assert predator.state is BehaviorState.STRIKING

        predator.strike_window_ticks = 1
        step(registry, engine, 3)
        assert predator.state is BehaviorState.IDLE
        assert len(events.of_type(StrikeMissedEvent)) == 2

    def test_frenzy_school_outscores_nearer_school(
        self, registry, catalog, config, lure, events, seeded_rng
    ) -> None:
        engine = self._engine(registry, catalog, config, lure, events, seeded_rng)
        alewife = catalog.get("alewife")
        near = self._school(registry, alewife, [430, 435, 440], 300)
        far = self._school(registry, alewife, [560, 565, 570], 300)
        predator = add_predator(registry, catalog.get("lake_trout"), 400, 300, hunger=80)

        assert engine.best_prey_candidate(predator).school_id == near
        predator.frenzy_ticks = 50
        predator.frenzy_school = far
        assert engine.best_prey_candidate(predator).school_id == far

    def test_frenzy_wears_off(self, registry, catalog) -> None:
        predator = add_predator(registry, catalog.get("lake_trout"), 400, 300)
        predator.frenzy_ticks = 2
        predator.frenzy_intensity = 0.9
        predator.frenzy_school = SchoolId(4)
        predator.extra_strikes = 2

        predator.tick_timers()
        assert predator.in_frenzy
        predator.tick_timers()
        assert not predator.in_frenzy
        assert predator.frenzy_intensity == 0.0
        assert predator.frenzy_school is None
        assert predator.extra_strikes == 0
