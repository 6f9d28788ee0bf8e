"""Species trait records and the species catalog.

Species quirks are data, not subclasses: every organism is the same
generic type parameterized by a ``SpeciesTraits`` record looked up here.
Raw trait tables come from the spawning/config collaborator as a mapping
of species id -> dict; each record is validated with pydantic, and a
record that fails validation is replaced by a conservative default so a
typo in balance data never takes the simulation down.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Set, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

logger = logging.getLogger(__name__)


class BehaviorStyle(str, Enum):
    """How a species hunts; selects decision-engine parameter defaults."""

    AMBUSH = "ambush"
    PURSUIT = "pursuit"
    OPPORTUNISTIC = "opportunistic"
    SCHOOLING_ONLY = "schooling_only"


class StaminaClass(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    VERY_HIGH = "very_high"


class OrganismKind(str, Enum):
    PREDATOR = "predator"
    PREY = "prey"
    FOOD = "food"


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


class SpeedTraits(_Record):
    """Speeds in world units per tick."""

    base: float = Field(1.2, gt=0)
    panic: float = Field(2.4, gt=0)
    burst: float = Field(2.4, gt=0)


class VisionTraits(_Record):
    horizontal_range: float = Field(120.0, ge=0)
    vertical_range: float = Field(160.0, ge=0)


class SchoolingTraits(_Record):
    """Flocking parameters; tight radii model baitballs, wide ones loose schools."""

    enabled: bool = True
    separation_radius: float = Field(20.0, gt=0)
    alignment_radius: float = Field(50.0, gt=0)
    cohesion_radius: float = Field(70.0, gt=0)
    separation_weight: float = Field(1.5, ge=0)
    alignment_weight: float = Field(1.0, ge=0)
    cohesion_weight: float = Field(1.0, ge=0)
    threat_radius: float = Field(120.0, ge=0)

    @property
    def perception_radius(self) -> float:
        return max(self.separation_radius, self.alignment_radius, self.cohesion_radius)


class DietTraits(_Record):
    """What a species is, what it eats and what it is worth as a meal.

    Attributes:
        categories: Prey categories this species belongs to ("bait", ...)
        can_eat: Categories or species ids this species eats
        eaten_by: Species ids or categories that eat this species
        nutrition_value: Hunger removed from whoever eats this species
        preferences: Optional per-category/species appetite weights (0-1)
        consumption_range: Reach within which this species can eat a target
    """

    categories: List[str] = Field(default_factory=list)
    can_eat: List[str] = Field(default_factory=list)
    eaten_by: List[str] = Field(default_factory=list)
    nutrition_value: float = Field(10.0, ge=0)
    preferences: Dict[str, float] = Field(default_factory=dict)
    consumption_range: float = Field(8.0, gt=0)


class DepthRange(_Record):
    min_ft: float = Field(0.0, ge=0)
    max_ft: float = Field(150.0, ge=0)

    @model_validator(mode="after")
    def _ordered(self) -> "DepthRange":
        if self.min_ft > self.max_ft:
            raise ValueError(f"depth range min {self.min_ft} > max {self.max_ft}")
        return self

    @property
    def preferred_ft(self) -> float:
        return (self.min_ft + self.max_ft) / 2.0


class SpeciesTraits(_Record):
    """Complete trait record for one species."""

    species_id: str
    name: str = ""
    kind: OrganismKind = OrganismKind.PREDATOR
    behavior_style: BehaviorStyle = BehaviorStyle.OPPORTUNISTIC
    aggressiveness: float = Field(0.5, ge=0, le=1)
    interest_threshold: float = Field(0.5, ge=0)
    optimal_lure_speed: float = Field(2.0, ge=0)
    speed_tolerance: float = Field(2.0, gt=0)
    strike_distance: float = Field(25.0, gt=0)
    stamina_class: StaminaClass = StaminaClass.MEDIUM
    weight_range: Tuple[float, float] = (1.0, 4.0)
    hunger_rate: float = Field(1.0, ge=0)
    metabolism: float = Field(1.0, gt=0)
    lifespan_ticks: Optional[int] = Field(None, gt=0)
    speed: SpeedTraits = Field(default_factory=SpeedTraits)
    vision: VisionTraits = Field(default_factory=VisionTraits)
    schooling: SchoolingTraits = Field(default_factory=SchoolingTraits)
    diet: DietTraits = Field(default_factory=DietTraits)
    depth_range: DepthRange = Field(default_factory=DepthRange)

    @model_validator(mode="after")
    def _weight_ordered(self) -> "SpeciesTraits":
        low, high = self.weight_range
        if low <= 0 or low > high:
            raise ValueError(f"invalid weight range {self.weight_range}")
        return self

    @property
    def is_ambush(self) -> bool:
        return self.behavior_style is BehaviorStyle.AMBUSH

    def identity_tags(self) -> Set[str]:
        """Species id plus every category, used by the eat rule."""
        return {self.species_id, *self.diet.categories}


def default_traits(species_id: str) -> SpeciesTraits:
    """Conservative stand-in for missing or malformed trait data.

    Low aggressiveness and moderate speed: a fish with broken data is
    hard to provoke and never outruns anything.
    """
    return SpeciesTraits(
        species_id=species_id,
        name=species_id,
        aggressiveness=0.2,
        interest_threshold=0.6,
        speed=SpeedTraits(base=1.2, panic=2.4, burst=2.0),
        diet=DietTraits(categories=["unknown"], can_eat=["bait", "zooplankton"]),
    )


def can_eat(eater: SpeciesTraits, prey: SpeciesTraits) -> bool:
    """Whether ``eater`` may eat ``prey``.

    The relation may be declared from either side: the eater's ``can_eat``
    naming the prey's species or one of its categories, or the prey's
    ``eaten_by`` naming the eater's species or one of its categories.
    """
    if eater.species_id == prey.species_id:
        return False
    eats = set(eater.diet.can_eat)
    if eats & prey.identity_tags():
        return True
    return bool(set(prey.diet.eaten_by) & eater.identity_tags())


def diet_preference(eater: SpeciesTraits, prey: SpeciesTraits) -> float:
    """Appetite of ``eater`` for ``prey`` in [0, 1] (1.0 when unspecified)."""
    prefs = eater.diet.preferences
    if not prefs:
        return 1.0
    best: Optional[float] = None
    for tag in prey.identity_tags():
        if tag in prefs:
            best = prefs[tag] if best is None else max(best, prefs[tag])
    return 0.5 if best is None else max(0.0, min(1.0, best))


class SpeciesCatalog:
    """Read-only lookup of species trait records.

    Example:
        catalog = SpeciesCatalog.from_mapping({"pike": {...}})
        traits = catalog.get("pike")
        catalog.can_eat(traits, catalog.get("alewife"))
    """

    def __init__(
        self,
        traits: Mapping[str, SpeciesTraits],
        alignment_ceiling: Optional[float] = None,
    ) -> None:
        self.alignment_ceiling = alignment_ceiling
        self._traits: Dict[str, SpeciesTraits] = {
            species_id: self._fit_alignment(record) for species_id, record in traits.items()
        }
        self._fallbacks: Dict[str, SpeciesTraits] = {}
        self._eat_cache: Dict[Tuple[str, str], bool] = {}

    @classmethod
    def from_mapping(
        cls, raw: Mapping[str, Any], alignment_ceiling: Optional[float] = None
    ) -> "SpeciesCatalog":
        """Validate a raw species table.

        Records that fail validation are logged and replaced with
        ``default_traits`` for that species id. With ``alignment_ceiling``
        set, so are schooling records whose alignment weight reaches it.
        """
        traits: Dict[str, SpeciesTraits] = {}
        for species_id, record in raw.items():
            if not isinstance(record, Mapping):
                logger.warning(
                    "Species %s trait record is %s, not a mapping; using defaults",
                    species_id,
                    type(record).__name__,
                )
                traits[species_id] = default_traits(species_id)
                continue
            try:
                traits[species_id] = SpeciesTraits.model_validate(
                    {**record, "species_id": species_id}
                )
            except ValidationError as exc:
                logger.warning(
                    "Species %s has malformed traits (%d errors); using defaults: %s",
                    species_id,
                    exc.error_count(),
                    exc.errors()[0]["msg"],
                )
                traits[species_id] = default_traits(species_id)
        return cls(traits, alignment_ceiling)

    def with_alignment_ceiling(self, ceiling: float) -> "SpeciesCatalog":
        """A copy whose schooling species all align less strongly than ``ceiling``."""
        return SpeciesCatalog(self._traits, ceiling)

    def _default(self, species_id: str) -> SpeciesTraits:
        traits = default_traits(species_id)
        ceiling = self.alignment_ceiling
        if ceiling is not None and traits.schooling.alignment_weight >= ceiling:
            schooling = traits.schooling.model_copy(update={"alignment_weight": ceiling / 2.0})
            traits = traits.model_copy(update={"schooling": schooling})
        return traits

    def _fit_alignment(self, traits: SpeciesTraits) -> SpeciesTraits:
        ceiling = self.alignment_ceiling
        schooling = traits.schooling
        if ceiling is None or not schooling.enabled or schooling.alignment_weight < ceiling:
            return traits
        logger.warning(
            "Species %s alignment_weight %.2f is not below food weight %.2f; using defaults",
            traits.species_id,
            schooling.alignment_weight,
            ceiling,
        )
        return self._default(traits.species_id)

    def get(self, species_id: str) -> SpeciesTraits:
        """Trait record for ``species_id``, or the default record if unknown."""
        traits = self._traits.get(species_id)
        if traits is not None:
            return traits
        fallback = self._fallbacks.get(species_id)
        if fallback is None:
            logger.warning("Unknown species %r; using default traits", species_id)
            fallback = self._default(species_id)
            self._fallbacks[species_id] = fallback
        return fallback

    def can_eat(self, eater: SpeciesTraits, prey: SpeciesTraits) -> bool:
        key = (eater.species_id, prey.species_id)
        cached = self._eat_cache.get(key)
        if cached is None:
            cached = can_eat(eater, prey)
            self._eat_cache[key] = cached
        return cached

    def species_ids(self) -> List[str]:
        return sorted(self._traits)

    def __contains__(self, species_id: object) -> bool:
        return species_id in self._traits

    def __len__(self) -> int:
        return len(self._traits)


def default_catalog() -> SpeciesCatalog:
    """Catalog built from the bundled lake species table."""
    from lakesim.config.species_data import SPECIES_DATA

    return SpeciesCatalog.from_mapping(SPECIES_DATA)
