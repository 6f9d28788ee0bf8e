"""Food chain resolution: who eats whom, and who gives up and leaves.

Consumption is target based. Schooling prey eat the food resource the
flocking pass pointed them at; predators in HUNTING_PREY eat the member
their target currently focuses on. Either way the prey must be within
the eater's consumption range and the eat rule must allow it.

Resolving a consumption is idempotent: the first eater marks the prey
dead on the spot, so any later attempt in the same tick is a no-op.

The resolver also tracks when each predator last saw eligible prey. A
predator that has seen nothing for ``migration_timeout_ticks`` is handed
to the migration callback, the only link to the decision engine.
"""

import logging
from collections import Counter
from typing import Callable, Optional

from lakesim.config.simulation_config import FoodChainConfig, WorldConfig
from lakesim.config.species import OrganismKind, SpeciesCatalog
from lakesim.entities.organism import Organism, SchoolMember
from lakesim.entities.predator import Predator
from lakesim.entities.targets import prey_focus
from lakesim.events.domain_events import FeedingEvent
from lakesim.events.event_queue import EventQueue
from lakesim.registry import OrganismRegistry
from lakesim.state_machine import BehaviorState
from lakesim.systems.base import BaseSystem, SystemResult
from lakesim.systems.perception import detection_ranges, organisms_in_envelope
from lakesim.update_phases import UpdatePhase, runs_in_phase

logger = logging.getLogger(__name__)

MigrationSignal = Callable[[Predator, int], None]


@runs_in_phase(UpdatePhase.FOOD_CHAIN)
class FoodChainResolver(BaseSystem):
    """Resolves feeding and tracks prey sightings for migration pressure."""

    def __init__(
        self,
        registry: OrganismRegistry,
        catalog: SpeciesCatalog,
        world: WorldConfig,
        config: FoodChainConfig,
        events: EventQueue,
        migration_signal: Optional[MigrationSignal] = None,
        wary_detection_multiplier: float = 1.0,
    ) -> None:
        super().__init__("FoodChain")
        self._registry = registry
        self._catalog = catalog
        self._world = world
        self.config = config
        self._events = events
        self._migration_signal = migration_signal
        self._wary_multiplier = wary_detection_multiplier
        self._meals: Counter = Counter()
        self._migrations_signaled = 0

    def set_migration_signal(self, signal: MigrationSignal) -> None:
        self._migration_signal = signal

    def _do_update(self, frame: int) -> SystemResult:
        meals = 0

        if frame % self.config.prey_hunger_interval_ticks == 0:
            for member in self._registry.school_members():
                member.hunger += self.config.prey_hunger_rate

        for member in self._registry.school_members():
            if member.food_target is None:
                continue
            food = self._registry.get(member.food_target)
            if food is None:
                member.food_target = None
                continue
            if self._within_reach(member, food) and self.resolve_consumption(member, food, frame):
                member.food_target = None
                meals += 1

        for predator in self._registry.predators():
            if predator.state is not BehaviorState.HUNTING_PREY:
                continue
            prey = self._registry.get(prey_focus(predator.target))
            if prey is None:
                continue
            if self._within_reach(predator, prey) and self.resolve_consumption(predator, prey, frame):
                meals += 1

        signaled = 0
        if frame % self.config.sighting_interval_ticks == 0:
            signaled = self._update_sightings(frame)

        return SystemResult(
            entities_affected=meals,
            entities_removed=meals,
            events_emitted=meals,
            details={"meals": meals, "migrations_signaled": signaled},
        )

    @staticmethod
    def _within_reach(eater: Organism, prey: Organism) -> bool:
        return eater.distance_to(prey) <= eater.traits.diet.consumption_range

    def resolve_consumption(self, eater: Organism, prey: Organism, frame: int) -> bool:
        """Apply one meal. Returns False (and changes nothing) if it cannot happen.

        A prey that is already consumed, an eater that is gone, or a pair
        the eat rule forbids are all no-ops.
        """
        if not eater.alive or not prey.alive:
            return False
        if not self._catalog.can_eat(eater.traits, prey.traits):
            return False
        if not self._registry.request_despawn(prey.id, reason=f"eaten by {eater.id}"):
            return False

        nutrition = prey.traits.diet.nutrition_value
        if isinstance(eater, Predator):
            excess = nutrition - eater.hunger
            eater.hunger -= nutrition
            if excess > 0:
                eater.health += excess * self.config.excess_nutrition_heal_ratio
            eater.last_meal_frame = frame
            self._meals["predator"] += 1
        elif isinstance(eater, SchoolMember):
            eater.hunger -= nutrition
            self._meals["prey"] += 1

        self._events.emit(
            FeedingEvent(eater_id=eater.id, prey_id=prey.id, nutrition=nutrition, frame=frame)
        )
        logger.debug("%s ate %s (+%.1f)", eater.id, prey.id, nutrition)
        return True

    # ------------------------------------------------------------------
    # Migration pressure
    # ------------------------------------------------------------------

    def _update_sightings(self, frame: int) -> int:
        signaled = 0
        for predator in self._registry.predators():
            if predator.is_hooked or predator.is_migrating:
                continue
            if self.prey_visible(predator):
                predator.last_sighting_frame = frame
                continue
            if frame - predator.last_sighting_frame >= self.config.migration_timeout_ticks:
                if self._migration_signal is not None:
                    self._migration_signal(predator, frame)
                signaled += 1
        self._migrations_signaled += signaled
        return signaled

    def prey_visible(self, predator: Predator) -> bool:
        """Whether any prey the predator may eat is inside its detection envelope."""
        horizontal, vertical = detection_ranges(
            predator, self._world.depth_scale, self._wary_multiplier
        )
        for organism in organisms_in_envelope(
            self._registry, predator.pos, horizontal, vertical, OrganismKind.PREY
        ):
            if self._catalog.can_eat(predator.traits, organism.traits):
                return True
        return False

    def get_debug_info(self) -> dict:
        info = super().get_debug_info()
        info["meals"] = dict(self._meals)
        info["migrations_signaled"] = self._migrations_signaled
        return info
