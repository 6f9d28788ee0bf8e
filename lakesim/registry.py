"""Organism registry: arena storage with deferred spawns and removals.

The registry is the only broadly shared mutable structure in the
simulation. Systems never insert or delete mid-pass; they *request*
spawns and despawns, and the engine calls ``apply_pending`` at the safe
points between component passes.

Storage is a dense slot list. An ``OrganismId`` is (slot index,
generation); freed slots are reused lowest-index first with the
generation bumped, so stale handles resolve to None instead of to an
unrelated fish.

A despawn request marks the organism dead immediately (``alive = False``)
so later queries in the same pass skip it, but its slot is only freed at
the next safe point.
"""

import heapq
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Set, Tuple

from lakesim.config.simulation_config import PopulationConfig, WorldConfig
from lakesim.config.species import OrganismKind, SpeciesTraits
from lakesim.entities.organism import FoodResource, Organism, SchoolMember
from lakesim.entities.predator import Predator
from lakesim.entity_ids import OrganismId, SchoolId
from lakesim.events.domain_events import SchoolDisbandedEvent
from lakesim.events.event_queue import EventQueue
from lakesim.exceptions import RegistryError
from lakesim.math_utils import Vector2
from lakesim.result import Err, Ok, Result
from lakesim.spatial.grid import SpatialGrid

logger = logging.getLogger(__name__)


@dataclass
class School:
    """A group of prey moving under shared flocking rules.

    Attributes:
        school_id: Identifier
        traits: Species of every member
        member_ids: Live members in spawn order
        populated: Whether any member has ever joined
    """

    school_id: SchoolId
    traits: SpeciesTraits
    member_ids: List[OrganismId] = field(default_factory=list)
    populated: bool = False

    @property
    def species_id(self) -> str:
        return self.traits.species_id

    @property
    def size(self) -> int:
        return len(self.member_ids)


@dataclass
class FlushResult:
    """What one ``apply_pending`` call changed."""

    spawned: int = 0
    removed: int = 0
    schools_disbanded: int = 0


class OrganismRegistry:
    """Owns every live organism and school.

    Example:
        registry = OrganismRegistry(world, population, events)
        registry.request_spawn(predator)
        registry.apply_pending(frame)      # predator.id is now set
        registry.request_despawn(predator.id, reason="caught")
        registry.apply_pending(frame)      # slot freed
    """

    def __init__(
        self,
        world: WorldConfig,
        population: PopulationConfig,
        events: Optional[EventQueue] = None,
    ) -> None:
        self._world = world
        self._population = population
        self._events = events
        self._slots: List[Optional[Organism]] = []
        self._generations: List[int] = []
        self._free: List[int] = []
        self._pending_spawns: List[Organism] = []
        self._pending_removals: List[Tuple[OrganismId, str]] = []
        self._removal_ids: Set[OrganismId] = set()
        self._live_counts: Dict[OrganismKind, int] = {kind: 0 for kind in OrganismKind}
        self._pending_counts: Dict[OrganismKind, int] = {kind: 0 for kind in OrganismKind}
        self.schools: Dict[SchoolId, School] = {}
        self._next_school = 0
        self.grid = SpatialGrid(world.width, world.floor_y, world.cell_size)
        self._frame = 0

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------

    def _cap_for(self, kind: OrganismKind) -> int:
        if kind is OrganismKind.PREDATOR:
            return self._population.max_predators
        if kind is OrganismKind.FOOD:
            return self._population.max_food_resources
        return self._population.max_school_members

    def has_capacity(self, kind: OrganismKind, count: int = 1) -> bool:
        used = self._live_counts[kind] + self._pending_counts[kind]
        return used + count <= self._cap_for(kind)

    def create_school(self, traits: SpeciesTraits) -> SchoolId:
        """Open a new (empty) school; it is pruned if no member ever joins."""
        school_id = SchoolId(self._next_school)
        self._next_school += 1
        self.schools[school_id] = School(school_id=school_id, traits=traits)
        return school_id

    def request_spawn(self, organism: Organism) -> Result[Organism, str]:
        """Queue a spawn. Dropped with Err when the population cap is reached.

        Raises:
            RegistryError: If the organism is already live here or already queued
        """
        if organism.id is not None and self.get(organism.id) is organism:
            raise RegistryError(f"{organism.id} ({organism.species_id}) is already registered")
        if any(pending is organism for pending in self._pending_spawns):
            raise RegistryError(f"{organism.species_id} spawn already queued")
        kind = organism.kind
        if not self.has_capacity(kind):
            logger.debug(
                "Spawn of %s dropped: %s cap %d reached",
                organism.species_id,
                kind.value,
                self._cap_for(kind),
            )
            return Err(f"{kind.value} population cap reached")
        if isinstance(organism, SchoolMember) and organism.school_id not in self.schools:
            return Err(f"{organism.school_id} does not exist")
        self._pending_spawns.append(organism)
        self._pending_counts[kind] += 1
        return Ok(organism)

    def request_despawn(self, organism_id: Optional[OrganismId], reason: str = "") -> bool:
        """Queue a removal; returns False if not live or already queued."""
        if organism_id is None or organism_id in self._removal_ids:
            return False
        organism = self.get(organism_id)
        if organism is None:
            return False
        organism.alive = False
        self._removal_ids.add(organism_id)
        self._pending_removals.append((organism_id, reason))
        return True

    # ------------------------------------------------------------------
    # Safe point
    # ------------------------------------------------------------------

    def apply_pending(self, frame: int) -> FlushResult:
        """Apply queued removals then spawns, prune empty schools, re-index."""
        self._frame = frame
        result = FlushResult()

        removals = self._pending_removals
        self._pending_removals = []
        self._removal_ids.clear()
        for organism_id, reason in removals:
            if self._free_slot(organism_id, reason):
                result.removed += 1

        spawns = self._pending_spawns
        self._pending_spawns = []
        for kind in self._pending_counts:
            self._pending_counts[kind] = 0
        for organism in spawns:
            self._place(organism)
            result.spawned += 1

        result.schools_disbanded = self._prune_schools(frame)
        self.reindex()
        return result

    def _place(self, organism: Organism) -> None:
        if self._free:
            index = heapq.heappop(self._free)
            self._generations[index] += 1
            self._slots[index] = organism
        else:
            index = len(self._slots)
            self._slots.append(organism)
            self._generations.append(0)
        organism.id = OrganismId(index, self._generations[index])
        organism.alive = True
        self._live_counts[organism.kind] += 1
        if isinstance(organism, SchoolMember):
            school = self.schools[organism.school_id]
            school.member_ids.append(organism.id)
            school.populated = True

    def _free_slot(self, organism_id: OrganismId, reason: str) -> bool:
        index = organism_id.index
        if index >= len(self._slots) or self._generations[index] != organism_id.generation:
            return False
        organism = self._slots[index]
        if organism is None:
            return False
        self._slots[index] = None
        heapq.heappush(self._free, index)
        self._live_counts[organism.kind] -= 1
        organism.alive = False
        if isinstance(organism, SchoolMember):
            school = self.schools.get(organism.school_id)
            if school is not None and organism_id in school.member_ids:
                school.member_ids.remove(organism_id)
        logger.debug("Removed %s (%s): %s", organism_id, organism.species_id, reason or "unspecified")
        return True

    def _prune_schools(self, frame: int) -> int:
        disbanded = 0
        for school_id in [sid for sid, school in self.schools.items() if not school.member_ids]:
            school = self.schools.pop(school_id)
            if school.populated:
                disbanded += 1
                if self._events is not None:
                    self._events.emit(
                        SchoolDisbandedEvent(
                            school_id=school_id, species_id=school.species_id, frame=frame
                        )
                    )
        return disbanded

    def reindex(self) -> None:
        self.grid.rebuild(self.iter_live())

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get(self, organism_id: Optional[OrganismId]) -> Optional[Organism]:
        """The live organism behind a handle, or None if gone or stale."""
        if organism_id is None:
            return None
        index = organism_id.index
        if index >= len(self._slots) or self._generations[index] != organism_id.generation:
            return None
        organism = self._slots[index]
        if organism is None or not organism.alive:
            return None
        return organism

    def get_predator(self, organism_id: Optional[OrganismId]) -> Optional[Predator]:
        organism = self.get(organism_id)
        return organism if isinstance(organism, Predator) else None

    def iter_live(self, kind: Optional[OrganismKind] = None) -> Iterator[Organism]:
        """Live organisms in registry (slot) order."""
        for organism in self._slots:
            if organism is None or not organism.alive:
                continue
            if kind is None or organism.kind is kind:
                yield organism

    def predators(self) -> List[Predator]:
        return [o for o in self.iter_live(OrganismKind.PREDATOR) if isinstance(o, Predator)]

    def school_members(self) -> List[SchoolMember]:
        return [o for o in self.iter_live(OrganismKind.PREY) if isinstance(o, SchoolMember)]

    def food_resources(self) -> List[FoodResource]:
        return [o for o in self.iter_live(OrganismKind.FOOD) if isinstance(o, FoodResource)]

    def members_of(self, school_id: SchoolId) -> List[SchoolMember]:
        school = self.schools.get(school_id)
        if school is None:
            return []
        members = []
        for member_id in school.member_ids:
            organism = self.get(member_id)
            if isinstance(organism, SchoolMember):
                members.append(organism)
        return members

    def school_centroid(self, school_id: SchoolId) -> Optional[Vector2]:
        members = self.members_of(school_id)
        if not members:
            return None
        total = Vector2(0.0, 0.0)
        for member in members:
            total.add_inplace(member.pos)
        return total / len(members)

    def query(
        self,
        pos: Vector2,
        radius: float,
        kind: Optional[OrganismKind] = None,
    ) -> List[Organism]:
        return self.grid.query(pos, radius, kind)

    def count(self, kind: Optional[OrganismKind] = None) -> int:
        if kind is None:
            return sum(self._live_counts.values())
        return self._live_counts[kind]

    # ------------------------------------------------------------------
    # Lifecycle pass
    # ------------------------------------------------------------------

    def tick_lifecycles(self) -> int:
        """Age everything one tick and expire plankton; returns expiries queued."""
        expired = 0
        for organism in list(self.iter_live()):
            if isinstance(organism, FoodResource):
                if organism.tick_lifespan() and self.request_despawn(organism.id, reason="expired"):
                    expired += 1
            else:
                organism.age += 1
        return expired
