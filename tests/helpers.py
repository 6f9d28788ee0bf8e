"""Builders shared by the lakesim tests."""

from typing import Optional

from lakesim.config.species import SpeciesTraits
from lakesim.entities.organism import FoodResource, SchoolMember
from lakesim.entities.predator import Predator, SizeClass
from lakesim.entity_ids import SchoolId
from lakesim.math_utils import Vector2
from lakesim.registry import OrganismRegistry
from lakesim.state_machine import BehaviorState


def add_predator(
    registry: OrganismRegistry,
    traits: SpeciesTraits,
    x: float,
    y: float,
    hunger: float = 50.0,
    health: float = 100.0,
    state: Optional[BehaviorState] = None,
    size_class: SizeClass = SizeClass.MEDIUM,
) -> Predator:
    """Spawn a predator and flush the registry so it has an id."""
    predator = Predator(
        traits, Vector2(x, y), weight=traits.weight_range[0], size_class=size_class,
        hunger=hunger, health=health,
    )
    if state is not None:
        predator.machine.force_state(state)
    registry.request_spawn(predator).unwrap()
    registry.apply_pending(0)
    return predator


def add_member(
    registry: OrganismRegistry,
    traits: SpeciesTraits,
    school_id: SchoolId,
    x: float,
    y: float,
    flush: bool = True,
) -> SchoolMember:
    member = SchoolMember(traits, Vector2(x, y), school_id)
    registry.request_spawn(member).unwrap()
    if flush:
        registry.apply_pending(0)
    return member


def add_food(registry: OrganismRegistry, traits: SpeciesTraits, x: float, y: float) -> FoodResource:
    food = FoodResource(traits, Vector2(x, y), lifespan_ticks=traits.lifespan_ticks or 100)
    registry.request_spawn(food).unwrap()
    registry.apply_pending(0)
    return food
