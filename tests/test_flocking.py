"""Tests for the FlockController schooling pass."""

import logging
import math

import pytest

from lakesim.config.simulation_config import FlockConfig
from lakesim.config.species import SpeciesCatalog
from lakesim.math_utils import Vector2
from lakesim.systems.flocking import FlockController

from helpers import add_food, add_member, add_predator


@pytest.fixture
def flock(registry, catalog, config, seeded_rng):
    return FlockController(registry, catalog, config.world, config.flock, rng=seeded_rng)


class TestPanic:
    def test_only_threatened_members_scatter(self, registry, catalog, flock) -> None:
        """Ten alewife near a lake trout panic and flee away from it; the rest stay calm."""
        alewife = catalog.get("alewife")
        school_id = registry.create_school(alewife)
        near = [
            add_member(registry, alewife, school_id, 200 + 5 * i, 200, flush=False)
            for i in range(10)
        ]
        far = [
            add_member(registry, alewife, school_id, 800 + 10 * (i % 20), 400 + 10 * (i // 20), flush=False)
            for i in range(40)
        ]
        add_predator(registry, catalog.get("lake_trout"), 200, 240)

        flock.update(1)

        assert all(member.panicking for member in near)
        assert not any(member.panicking for member in far)
        for member in near:
            assert member.velocity.y < 0
            assert member.pos.y < 200

    def test_non_eater_is_not_a_threat(self, registry, catalog, flock) -> None:
        """Sculpin ignore a pike; only lake trout eat them."""
        sculpin = catalog.get("slimy_sculpin")
        school_id = registry.create_school(sculpin)
        member = add_member(registry, sculpin, school_id, 300, 500, flush=False)
        add_predator(registry, catalog.get("northern_pike"), 310, 500)

        flock.update(1)
        assert not member.panicking

    def test_panic_wears_off(self, registry, catalog, config, seeded_rng) -> None:
        cfg = FlockConfig(panic_ticks=3)
        flock = FlockController(registry, catalog, config.world, cfg, rng=seeded_rng)
        alewife = catalog.get("alewife")
        school_id = registry.create_school(alewife)
        member = add_member(registry, alewife, school_id, 300, 300, flush=False)
        trout = add_predator(registry, catalog.get("lake_trout"), 300, 330)

        flock.update(1)
        assert member.panicking
        registry.request_despawn(trout.id)
        registry.apply_pending(1)

        states = []
        for frame in range(2, 6):
            flock.update(frame)
            states.append(member.panicking)
        assert states == [True, True, False, False]


class TestMovement:
    def test_vertical_clamp_bounces(self, registry, catalog, config, flock) -> None:
        """A member driven through the surface is clamped back into the water column."""
        alewife = catalog.get("alewife")
        school_id = registry.create_school(alewife)
        member = add_member(registry, alewife, school_id, 500, config.world.min_y + 0.5)
        member.velocity = Vector2(0.0, -3.0)

        flock.update(1)

        assert member.pos.y == pytest.approx(config.world.min_y)
        assert member.velocity.y > 0

    def test_school_of_one_stays_finite(self, registry, catalog, flock) -> None:
        alewife = catalog.get("alewife")
        school_id = registry.create_school(alewife)
        member = add_member(registry, alewife, school_id, 500, 300)

        for frame in range(1, 50):
            flock.update(frame)

        assert member.pos.is_finite()
        assert member.velocity.is_finite()
        assert not math.isnan(member.heading)

    def test_stacked_members_stay_finite(self, registry, catalog, flock) -> None:
        """Members on the exact same spot do not divide by zero."""
        alewife = catalog.get("alewife")
        school_id = registry.create_school(alewife)
        members = [add_member(registry, alewife, school_id, 400, 300, flush=False) for _ in range(5)]
        registry.apply_pending(0)

        flock.update(1)
        assert all(m.pos.is_finite() for m in members)

    def test_speed_limited_to_base_when_calm(self, registry, catalog, flock) -> None:
        alewife = catalog.get("alewife")
        school_id = registry.create_school(alewife)
        member = add_member(registry, alewife, school_id, 500, 300)
        member.velocity = Vector2(50.0, 0.0)

        flock.update(1)
        assert member.speed <= alewife.speed.base + 1e-9

    def test_calm_member_targets_nearby_food(self, registry, catalog, flock) -> None:
        alewife = catalog.get("alewife")
        school_id = registry.create_school(alewife)
        member = add_member(registry, alewife, school_id, 500, 300, flush=False)
        food = add_food(registry, catalog.get("zooplankton"), 530, 300)

        flock.update(1)
        assert member.food_target == food.id

    def test_no_members_is_empty_result(self, flock) -> None:
        result = flock.update(1)
        assert result.entities_affected == 0


class TestWeightOrdering:
    def _catalog(self, alignment_weight, enabled=True, ceiling=None):
        return SpeciesCatalog.from_mapping(
            {
                "test_shiner": {
                    "kind": "prey",
                    "behavior_style": "schooling_only",
                    "schooling": {"enabled": enabled, "alignment_weight": alignment_weight},
                }
            },
            alignment_ceiling=ceiling,
        )

    def test_alignment_at_food_weight_falls_back(self, config, caplog) -> None:
        """A species aligning as hard as it chases food gets the default record."""
        food_weight = config.flock.food_weight
        with caplog.at_level(logging.WARNING, logger="lakesim.config.species"):
            catalog = self._catalog(food_weight, ceiling=food_weight)
        traits = catalog.get("test_shiner")
        assert traits.schooling.alignment_weight < food_weight
        assert traits.aggressiveness == pytest.approx(0.2)
        assert "test_shiner alignment_weight" in caplog.text

    def test_engine_survives_overeager_alignment(self, config) -> None:
        from lakesim.config.species_data import SPECIES_DATA
        from lakesim.simulation import SimulationEngine

        raw = dict(SPECIES_DATA)
        alewife = dict(raw["alewife"])
        alewife["schooling"] = {**alewife["schooling"], "alignment_weight": 2.0}
        raw["alewife"] = alewife

        engine = SimulationEngine(config=config, catalog=SpeciesCatalog.from_mapping(raw), seed=3)

        assert engine.catalog.get("alewife").schooling.alignment_weight < config.flock.food_weight
        assert engine.spawn_school("alewife", 5, (400, 200)).is_ok()
        engine.run(5)

    def test_default_record_fits_a_low_ceiling(self) -> None:
        catalog = self._catalog(0.9, ceiling=0.5)
        assert catalog.get("test_shiner").schooling.alignment_weight < 0.5
        assert catalog.get("never_declared").schooling.alignment_weight < 0.5

    def test_solitary_species_not_checked(self, config) -> None:
        catalog = self._catalog(5.0, enabled=False, ceiling=config.flock.food_weight)
        assert catalog.get("test_shiner").schooling.alignment_weight == 5.0

    def test_bundled_species_fit_the_ordering(self, catalog, config) -> None:
        for species_id in catalog.species_ids():
            schooling = catalog.get(species_id).schooling
            if schooling.enabled:
                assert schooling.alignment_weight < config.flock.food_weight < config.flock.flee_weight
