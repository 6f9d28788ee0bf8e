"""Headless simulation engine - the tick orchestrator.

The engine owns the registry, the lure, the RNG, the event queue and one
instance of every component pass. It contains no behavior of its own:
each tick it applies queued input, then runs the passes in phase order,
flushing deferred registry mutations between passes.

    REGISTRY -> FLOCKING -> FOOD_CHAIN -> DECISION -> FIGHT -> SPAWN

Usage:
------
    engine = SimulationEngine(seed=7)
    engine.spawn_school("alewife", 30, (400, 200))
    engine.spawn_predator("lake_trout", "large", (600, 240))
    engine.drop_lure(620, 230)
    for _ in range(600):
        engine.step()
        for event in engine.drain_events():
            ...
"""

import logging
import math
import random
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from lakesim.commands import (
    AttemptHookset,
    CommandQueue,
    DropLure,
    LiftLure,
    Reel,
    RetrieveLure,
    SetDrag,
)
from lakesim.config.simulation_config import SimulationConfig
from lakesim.config.species import SpeciesCatalog, SpeciesTraits, default_catalog
from lakesim.entities.lure import Lure
from lakesim.entities.organism import SchoolMember
from lakesim.entities.predator import Predator, SizeClass
from lakesim.events.event_queue import EventQueue
from lakesim.math_utils import Vector2, clamp
from lakesim.registry import OrganismRegistry
from lakesim.result import Err, Ok, Result
from lakesim.snapshots import SonarSnapshot, build_sonar_snapshot
from lakesim.system_registry import SystemRegistry
from lakesim.systems.base import BaseSystem, SystemResult
from lakesim.systems.fight import FightResolver, FightSession
from lakesim.systems.flocking import FlockController
from lakesim.systems.food_chain import FoodChainResolver
from lakesim.systems.food_spawning import FoodSpawningSystem, make_food_cluster
from lakesim.systems.predator_ai import PredatorDecisionEngine
from lakesim.update_phases import PHASE_DESCRIPTIONS, UpdatePhase

logger = logging.getLogger(__name__)

Origin = Union[Vector2, Tuple[float, float], Sequence[float]]

SCHOOL_SPAWN_SPREAD = 40.0
SCHOOL_HEADING_JITTER = 0.3
SCHOOL_INITIAL_SPEED_FRACTION = 0.5


@dataclass
class TickResult:
    """What one ``step()`` did.

    Attributes:
        frame: The frame that was simulated
        systems: SystemResult per pass, keyed by system name ("Registry" first)
        events_emitted: Events pushed to the queue during the tick
    """

    frame: int
    systems: Dict[str, SystemResult] = field(default_factory=dict)
    events_emitted: int = 0

    @property
    def total(self) -> SystemResult:
        combined = SystemResult.empty()
        for result in self.systems.values():
            combined = combined + result
        return combined


def _as_vector(origin: Origin) -> Vector2:
    if isinstance(origin, Vector2):
        return origin.copy()
    x, y = origin
    return Vector2(float(x), float(y))


class SimulationEngine:
    """A headless predator/prey simulation driven one tick at a time.

    Attributes:
        config: Validated simulation configuration
        catalog: Species trait lookup
        rng: The only random source; every pass draws from it
        registry: Owner of every organism and school
        lure: The player's lure
        events: Outbound domain events
        frame: Last simulated frame (0 before the first step)
    """

    def __init__(
        self,
        config: Optional[SimulationConfig] = None,
        catalog: Optional[SpeciesCatalog] = None,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.config = (config or SimulationConfig()).validate()
        self.catalog = (catalog or default_catalog()).with_alignment_ceiling(
            self.config.flock.food_weight
        )
        self.rng = rng if rng is not None else random.Random(seed)
        self.frame = 0
        self.events = EventQueue()
        self.lure = Lure()
        self.registry = OrganismRegistry(self.config.world, self.config.population, self.events)
        self._commands = CommandQueue()
        self._current_phase: Optional[UpdatePhase] = None

        cfg = self.config
        self.fight = FightResolver(
            self.registry,
            self.lure,
            cfg.world,
            cfg.fight,
            self.events,
            rng=self.rng,
            wary_ticks=cfg.decision.wary_ticks,
        )
        self.decision = PredatorDecisionEngine(
            self.registry,
            self.catalog,
            cfg.world,
            cfg.decision,
            self.lure,
            self.events,
            rng=self.rng,
            fight=self.fight,
        )
        self.flocking = FlockController(
            self.registry, self.catalog, cfg.world, cfg.flock, rng=self.rng
        )
        self.food_chain = FoodChainResolver(
            self.registry,
            self.catalog,
            cfg.world,
            cfg.food_chain,
            self.events,
            migration_signal=self.decision.signal_migration,
            wary_detection_multiplier=cfg.decision.wary_detection_multiplier,
        )
        self.food_spawning = FoodSpawningSystem(
            self.registry, self.catalog, cfg.world, cfg.food_spawn, rng=self.rng
        )

        self._system_registry = SystemRegistry()
        for system in (
            self.flocking,
            self.food_chain,
            self.decision,
            self.fight,
            self.food_spawning,
        ):
            self._system_registry.register(system)

    # =========================================================================
    # Input commands
    # =========================================================================

    def attempt_hookset(self) -> None:
        self._commands.push(AttemptHookset())

    def reel(self, intensity: float = 1.0) -> None:
        self._commands.push(Reel(intensity=intensity))

    def set_drag(self, setting: float) -> None:
        """Drag as a percent of the reel maximum, applied from the next tick."""
        self._commands.push(SetDrag(setting=setting))

    def retrieve_lure(self, direction: Origin, speed: float) -> None:
        self._commands.push(RetrieveLure(direction=_as_vector(direction), speed=speed))

    def drop_lure(self, x: float, y: float) -> None:
        self._commands.push(DropLure(x=x, y=y))

    def lift_lure(self) -> None:
        self._commands.push(LiftLure())

    def _apply_commands(self) -> None:
        world = self.config.world
        for command in self._commands.drain():
            if isinstance(command, AttemptHookset):
                if self.fight.active_session is not None:
                    logger.debug("Hookset ignored: a fight is already active")
                else:
                    self.decision.request_hookset()
            elif isinstance(command, Reel):
                self.fight.queue_reel(command.intensity)
            elif isinstance(command, SetDrag):
                self.fight.set_drag(command.setting)
            elif isinstance(command, RetrieveLure):
                if not self.lure.is_owned:
                    self.lure.set_retrieve(command.direction, command.speed)
            elif isinstance(command, DropLure):
                if not self.lure.is_owned:
                    self.lure.drop(
                        clamp(command.x, 0.0, world.width),
                        clamp(command.y, world.min_y, world.max_y),
                    )
            elif isinstance(command, LiftLure):
                if not self.lure.is_owned:
                    self.lure.lift()

    # =========================================================================
    # Spawning
    # =========================================================================

    def spawn_school(
        self, species: str, count: int, origin: Origin
    ) -> Result[List[SchoolMember], str]:
        """Queue a school of ``count`` members around ``origin``.

        Members get their ids when the next tick applies the spawn. Solitary
        species get one school per member.
        """
        traits = self.catalog.get(species)
        center = _as_vector(origin)
        world = self.config.world
        heading = self.rng.choice((0.0, math.pi))
        cruise = traits.speed.base * SCHOOL_INITIAL_SPEED_FRACTION
        school_id = self.registry.create_school(traits) if traits.schooling.enabled else None

        members: List[SchoolMember] = []
        for _ in range(max(0, count)):
            pos = Vector2(
                clamp(center.x + self.rng.uniform(-SCHOOL_SPAWN_SPREAD, SCHOOL_SPAWN_SPREAD), 0.0, world.width),
                clamp(
                    center.y + self.rng.uniform(-SCHOOL_SPAWN_SPREAD, SCHOOL_SPAWN_SPREAD) / 2,
                    world.min_y,
                    world.max_y,
                ),
            )
            member_heading = heading + self.rng.uniform(-SCHOOL_HEADING_JITTER, SCHOOL_HEADING_JITTER)
            member = SchoolMember(
                traits,
                pos,
                school_id if school_id is not None else self.registry.create_school(traits),
                velocity=Vector2.from_angle(member_heading, cruise),
                weight=self.rng.uniform(*traits.weight_range),
            )
            member.heading = member_heading
            if self.registry.request_spawn(member).is_ok():
                members.append(member)

        if not members:
            return Err(f"no {species} spawned: population cap reached")
        if len(members) < count:
            logger.debug("Spawned %d of %d %s (population cap)", len(members), count, species)
        return Ok(members)

    def spawn_predator(
        self,
        species: str,
        size_class: Union[SizeClass, str] = SizeClass.MEDIUM,
        origin: Optional[Origin] = None,
        hunger: Optional[float] = None,
        health: Optional[float] = None,
    ) -> Result[Predator, str]:
        """Queue one predator; its weight is drawn from its size-class quartile."""
        traits = self.catalog.get(species)
        size = SizeClass.parse(size_class)
        pos = _as_vector(origin) if origin is not None else self._random_position(traits)
        predator = Predator(
            traits,
            pos,
            weight=self._weight_for(traits, size),
            size_class=size,
            hunger=hunger if hunger is not None else 50.0,
            health=health if health is not None else 100.0,
        )
        predator.heading = self.rng.choice((0.0, math.pi))
        predator.last_sighting_frame = self.frame
        return self.registry.request_spawn(predator)

    def spawn_food_cluster(self, origin: Origin, count: Optional[int] = None) -> int:
        """Queue a plankton cluster; returns how many patches were accepted."""
        spawn_cfg = self.config.food_spawn
        return make_food_cluster(
            self.registry,
            self.catalog,
            self.config.world,
            self.rng,
            _as_vector(origin),
            spawn_cfg.cluster_size if count is None else count,
            spawn_cfg.cluster_spread,
            spawn_cfg.species,
        )

    def _weight_for(self, traits: SpeciesTraits, size: SizeClass) -> float:
        low, high = traits.weight_range
        quarter = (high - low) / 4.0
        return low + quarter * (size.quartile + self.rng.random())

    def _random_position(self, traits: SpeciesTraits) -> Vector2:
        world = self.config.world
        scale = world.depth_scale
        y = self.rng.uniform(traits.depth_range.min_ft * scale, traits.depth_range.max_ft * scale)
        return Vector2(self.rng.uniform(0.0, world.width), clamp(y, world.min_y, world.max_y))

    # =========================================================================
    # Tick
    # =========================================================================

    def step(self) -> TickResult:
        """Advance the simulation by one tick."""
        self.frame += 1
        frame = self.frame
        emitted_before = self.events.pending_count()
        result = TickResult(frame=frame)

        self._current_phase = UpdatePhase.REGISTRY
        flushed = self.registry.apply_pending(frame)
        self._apply_commands()
        expired = self.registry.tick_lifecycles()
        self.lure.advance(self.config.world.min_y, self.config.world.max_y)
        flushed_expired = self.registry.apply_pending(frame)
        result.systems["Registry"] = SystemResult(
            entities_spawned=flushed.spawned,
            entities_removed=flushed.removed + flushed_expired.removed,
            details={
                "expired": expired,
                "schools_disbanded": flushed.schools_disbanded + flushed_expired.schools_disbanded,
            },
        )

        for system in self._system_registry:
            self._current_phase = system.phase
            result.systems[system.name] = system.update(frame)
            flush = self.registry.apply_pending(frame)
            if flush.removed or flush.spawned:
                logger.debug(
                    "Frame %d after %s: +%d -%d", frame, system.name, flush.spawned, flush.removed
                )

        self._current_phase = None
        result.events_emitted = self.events.pending_count() - emitted_before
        return result

    def run(self, ticks: int) -> List[TickResult]:
        return [self.step() for _ in range(ticks)]

    # =========================================================================
    # Outputs
    # =========================================================================

    def drain_events(self) -> List[object]:
        return self.events.drain()

    def sonar_snapshot(self) -> SonarSnapshot:
        return build_sonar_snapshot(
            self.frame, self.registry, self.lure, self.config.world.depth_scale
        )

    @property
    def active_fight(self) -> Optional[FightSession]:
        return self.fight.active_session

    # =========================================================================
    # System registry
    # =========================================================================

    def get_systems(self) -> List[BaseSystem]:
        return self._system_registry.get_all()

    def get_system(self, name: str) -> Optional[BaseSystem]:
        return self._system_registry.get(name)

    def set_system_enabled(self, name: str, enabled: bool) -> bool:
        return self._system_registry.set_enabled(name, enabled)

    def get_systems_debug_info(self) -> Dict[str, Any]:
        return self._system_registry.get_debug_info()

    def get_current_phase(self) -> Optional[UpdatePhase]:
        return self._current_phase

    def get_phase_description(self, phase: Optional[UpdatePhase] = None) -> str:
        if phase is None:
            phase = self._current_phase
        if phase is None:
            return "Not in update loop"
        return PHASE_DESCRIPTIONS.get(phase, phase.name)
