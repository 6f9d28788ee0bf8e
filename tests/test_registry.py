"""Tests for the organism registry arena."""

import pytest

from lakesim.config.simulation_config import PopulationConfig, WorldConfig
from lakesim.config.species import OrganismKind
from lakesim.entities.predator import Predator
from lakesim.entity_ids import OrganismId
from lakesim.events.domain_events import SchoolDisbandedEvent
from lakesim.exceptions import RegistryError
from lakesim.math_utils import Vector2
from lakesim.registry import OrganismRegistry

from helpers import add_food, add_member, add_predator


class TestSpawnAndDespawn:
    def test_ids_assigned_at_safe_point(self, registry, catalog) -> None:
        """A spawn request is invisible until apply_pending runs."""
        trout = Predator(catalog.get("lake_trout"), Vector2(100, 200), weight=5.0)
        assert registry.request_spawn(trout).is_ok()
        assert trout.id is None
        assert registry.count(OrganismKind.PREDATOR) == 0

        flushed = registry.apply_pending(1)
        assert flushed.spawned == 1
        assert trout.id == OrganismId(0, 0)
        assert registry.get(trout.id) is trout

    def test_despawn_marks_dead_immediately(self, registry, catalog) -> None:
        trout = add_predator(registry, catalog.get("lake_trout"), 100, 200)
        assert registry.request_despawn(trout.id, reason="test")
        assert not trout.alive
        assert registry.get(trout.id) is None
        assert registry.count(OrganismKind.PREDATOR) == 1
        registry.apply_pending(1)
        assert registry.count(OrganismKind.PREDATOR) == 0

    def test_double_despawn_is_noop(self, registry, catalog) -> None:
        trout = add_predator(registry, catalog.get("lake_trout"), 100, 200)
        assert registry.request_despawn(trout.id)
        assert not registry.request_despawn(trout.id)
        assert registry.apply_pending(1).removed == 1

    def test_slot_reuse_bumps_generation(self, registry, catalog) -> None:
        """A stale handle never resolves to the fish that reused its slot."""
        traits = catalog.get("lake_trout")
        first = add_predator(registry, traits, 100, 200)
        second = add_predator(registry, traits, 300, 200)
        stale_id = first.id

        registry.request_despawn(first.id)
        registry.apply_pending(1)
        third = add_predator(registry, traits, 500, 200)

        assert third.id == OrganismId(0, 1)
        assert registry.get(stale_id) is None
        assert registry.get(third.id) is third
        assert [p.id for p in registry.predators()] == [third.id, second.id]

    def test_queued_twice_raises(self, registry, catalog) -> None:
        trout = Predator(catalog.get("lake_trout"), Vector2(100, 200), weight=5.0)
        registry.request_spawn(trout).unwrap()
        with pytest.raises(RegistryError, match="already queued"):
            registry.request_spawn(trout)
        assert registry.apply_pending(1).spawned == 1

    def test_live_organism_respawn_raises(self, registry, catalog) -> None:
        trout = add_predator(registry, catalog.get("lake_trout"), 100, 200)
        with pytest.raises(RegistryError, match="already registered"):
            registry.request_spawn(trout)
        assert registry.count(OrganismKind.PREDATOR) == 1

    def test_dead_organism_may_be_respawned(self, registry, catalog) -> None:
        """Once its slot is gone the same object can be registered again."""
        trout = add_predator(registry, catalog.get("lake_trout"), 100, 200)
        registry.request_despawn(trout.id)
        registry.apply_pending(1)
        assert registry.request_spawn(trout).is_ok()


class TestPopulationCaps:
    def test_cap_counts_pending_spawns(self, catalog) -> None:
        registry = OrganismRegistry(WorldConfig(), PopulationConfig(max_predators=1))
        traits = catalog.get("lake_trout")
        assert registry.request_spawn(Predator(traits, Vector2(10, 100), 5.0)).is_ok()
        result = registry.request_spawn(Predator(traits, Vector2(20, 100), 5.0))
        assert result.is_err()
        assert "cap" in result.error
        registry.apply_pending(1)
        assert registry.count(OrganismKind.PREDATOR) == 1

    def test_member_needs_existing_school(self, registry, catalog) -> None:
        from lakesim.entities.organism import SchoolMember
        from lakesim.entity_ids import SchoolId

        member = SchoolMember(catalog.get("alewife"), Vector2(10, 100), SchoolId(99))
        assert registry.request_spawn(member).is_err()


class TestSchools:
    def test_last_member_gone_disbands_school(self, registry, catalog, events) -> None:
        traits = catalog.get("alewife")
        school_id = registry.create_school(traits)
        a = add_member(registry, traits, school_id, 100, 100)
        b = add_member(registry, traits, school_id, 110, 100)
        assert registry.schools[school_id].member_ids == [a.id, b.id]

        registry.request_despawn(a.id)
        registry.apply_pending(2)
        assert registry.schools[school_id].size == 1
        assert not events.of_type(SchoolDisbandedEvent)

        registry.request_despawn(b.id)
        registry.apply_pending(3)
        assert school_id not in registry.schools
        disbanded = events.of_type(SchoolDisbandedEvent)
        assert len(disbanded) == 1
        assert disbanded[0].school_id == school_id
        assert disbanded[0].species_id == "alewife"
        assert disbanded[0].frame == 3

    def test_never_populated_school_pruned_silently(self, registry, catalog, events) -> None:
        school_id = registry.create_school(catalog.get("alewife"))
        registry.apply_pending(1)
        assert school_id not in registry.schools
        assert events.pending_count() == 0

    def test_centroid(self, registry, catalog) -> None:
        traits = catalog.get("alewife")
        school_id = registry.create_school(traits)
        add_member(registry, traits, school_id, 100, 100, flush=False)
        add_member(registry, traits, school_id, 200, 300)
        assert registry.school_centroid(school_id) == Vector2(150, 200)


class TestLifecycles:
    def test_food_expires_after_lifespan(self, registry, catalog) -> None:
        food = add_food(registry, catalog.get("zooplankton"), 100, 100)
        food.lifespan_remaining = 2
        assert registry.tick_lifecycles() == 0
        assert registry.tick_lifecycles() == 1
        registry.apply_pending(2)
        assert registry.count(OrganismKind.FOOD) == 0

    def test_ages_everything(self, registry, catalog) -> None:
        trout = add_predator(registry, catalog.get("lake_trout"), 100, 200)
        registry.tick_lifecycles()
        registry.tick_lifecycles()
        assert trout.age == 2


class TestQueries:
    def test_query_filters_kind_and_radius(self, registry, catalog) -> None:
        traits = catalog.get("alewife")
        school_id = registry.create_school(traits)
        near = add_member(registry, traits, school_id, 110, 100, flush=False)
        add_member(registry, traits, school_id, 400, 100, flush=False)
        trout = add_predator(registry, catalog.get("lake_trout"), 100, 100)

        prey = registry.query(trout.pos, 50, OrganismKind.PREY)
        assert prey == [near]
        assert trout in registry.query(trout.pos, 50)

    def test_query_skips_dead(self, registry, catalog) -> None:
        trout = add_predator(registry, catalog.get("lake_trout"), 100, 100)
        registry.request_despawn(trout.id)
        assert registry.query(Vector2(100, 100), 10) == []


def test_registry_without_event_queue(catalog) -> None:
    registry = OrganismRegistry(WorldConfig(), PopulationConfig())
    traits = catalog.get("alewife")
    school_id = registry.create_school(traits)
    member = add_member(registry, traits, school_id, 10, 10)
    registry.request_despawn(member.id)
    assert registry.apply_pending(1).schools_disbanded == 1
