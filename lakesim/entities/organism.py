"""Organism base class plus schooling prey and the plankton food tier.

All organisms share one generic type parameterized by a ``SpeciesTraits``
record; species differences live in data, not subclasses. The subclasses
here only add the state a role needs (school bookkeeping, lifespan).
"""

from typing import Optional

from lakesim.config.species import OrganismKind, SpeciesTraits
from lakesim.entity_ids import OrganismId, SchoolId
from lakesim.math_utils import Vector2, clamp


class Organism:
    """Any simulated living thing owned by the registry.

    Attributes:
        id: Arena handle, assigned when the registry applies the spawn
        traits: Species trait record
        pos: World position (x along the lake, y down from the surface)
        weight: Body weight in pounds
        speed: Current speed in world units per tick
        heading: Current heading in radians
        visible: Whether the sonar collaborator should draw it
        age: Ticks since spawn
        alive: False once consumed, caught or queued for removal
    """

    kind: OrganismKind = OrganismKind.PREY

    def __init__(self, traits: SpeciesTraits, pos: Vector2, weight: float = 1.0) -> None:
        self.id: Optional[OrganismId] = None
        self.traits = traits
        self.pos = pos
        self.weight = weight
        self.speed = 0.0
        self.heading = 0.0
        self.visible = True
        self.age = 0
        self.alive = True

    @property
    def species_id(self) -> str:
        return self.traits.species_id

    def depth_ft(self, depth_scale: float) -> float:
        if depth_scale <= 0:
            return 0.0
        return self.pos.y / depth_scale

    def distance_to(self, other: "Organism") -> float:
        return self.pos.distance_to(other.pos)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.species_id}, id={self.id})"


class SchoolMember(Organism):
    """A schooling (or solitary) prey fish.

    Every member belongs to exactly one school; solitary species get a
    school of their own so the bookkeeping stays uniform.
    """

    kind = OrganismKind.PREY

    def __init__(
        self,
        traits: SpeciesTraits,
        pos: Vector2,
        school_id: SchoolId,
        velocity: Optional[Vector2] = None,
        weight: float = 0.1,
        hunger: float = 40.0,
    ) -> None:
        super().__init__(traits, pos, weight)
        self.school_id = school_id
        self.velocity = velocity if velocity is not None else Vector2(0.0, 0.0)
        self.panicking = False
        self.panic_ticks = 0
        self.food_target: Optional[OrganismId] = None
        self._hunger = clamp(hunger, 0.0, 100.0)

    @property
    def hunger(self) -> float:
        return self._hunger

    @hunger.setter
    def hunger(self, value: float) -> None:
        self._hunger = clamp(value, 0.0, 100.0)

    @property
    def nutrition_value(self) -> float:
        return self.traits.diet.nutrition_value


class FoodResource(Organism):
    """A plankton patch; feeds prey biology and expires after its lifespan."""

    kind = OrganismKind.FOOD

    def __init__(self, traits: SpeciesTraits, pos: Vector2, lifespan_ticks: int) -> None:
        super().__init__(traits, pos, weight=traits.weight_range[0])
        self.lifespan_remaining = max(0, lifespan_ticks)

    @property
    def consumed(self) -> bool:
        return not self.alive

    @property
    def nutrition_value(self) -> float:
        return self.traits.diet.nutrition_value

    def tick_lifespan(self) -> bool:
        """Age one tick; returns True when the lifespan has run out."""
        self.age += 1
        if self.lifespan_remaining > 0:
            self.lifespan_remaining -= 1
        return self.lifespan_remaining == 0
