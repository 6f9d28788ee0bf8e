"""Food spawning system for automatic plankton replenishment.

Schooling prey graze on plankton patches; without replenishment the base
of the food chain runs dry and every school eventually stops feeding.

Architecture Notes:
- Extends BaseSystem for uniform system management
- Runs in UpdatePhase.SPAWN
- Uses the engine RNG for reproducible cluster placement
- Respects FoodSpawnConfig.enabled
"""

import logging
import random
from typing import Optional

from lakesim.config.simulation_config import FoodSpawnConfig, WorldConfig
from lakesim.config.species import OrganismKind, SpeciesCatalog
from lakesim.entities.organism import FoodResource
from lakesim.math_utils import Vector2, clamp
from lakesim.registry import OrganismRegistry
from lakesim.systems.base import BaseSystem, SystemResult
from lakesim.update_phases import UpdatePhase, runs_in_phase
from lakesim.util.rng import require_rng_param

logger = logging.getLogger(__name__)

DEFAULT_FOOD_LIFESPAN_TICKS = 1800


def make_food_cluster(
    registry: OrganismRegistry,
    catalog: SpeciesCatalog,
    world: WorldConfig,
    rng: random.Random,
    origin: Vector2,
    count: int,
    spread: float,
    species_id: str,
) -> int:
    """Request a cluster of plankton patches around ``origin``.

    Returns the number of spawns accepted (the population cap may drop some).
    """
    traits = catalog.get(species_id)
    lifespan = traits.lifespan_ticks or DEFAULT_FOOD_LIFESPAN_TICKS
    accepted = 0
    for _ in range(count):
        pos = Vector2(
            clamp(origin.x + rng.uniform(-spread, spread), 0.0, world.width),
            clamp(origin.y + rng.uniform(-spread, spread), world.min_y, world.max_y),
        )
        if registry.request_spawn(FoodResource(traits, pos, lifespan)).is_ok():
            accepted += 1
    return accepted


@runs_in_phase(UpdatePhase.SPAWN)
class FoodSpawningSystem(BaseSystem):
    """Keeps a minimum amount of plankton in the lake.

    Every ``spawn_interval_ticks`` the system checks the live food count
    and, if it is below ``min_resources``, drops one cluster at a random
    spot inside the depth band the food species prefers.

    Attributes:
        config: FoodSpawnConfig with the replenishment parameters
        _total_spawned: Count of food spawned since system creation
        _frames_since_spawn: Frames elapsed since last spawn check
    """

    def __init__(
        self,
        registry: OrganismRegistry,
        catalog: SpeciesCatalog,
        world: WorldConfig,
        config: Optional[FoodSpawnConfig] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        super().__init__("FoodSpawning")
        self._registry = registry
        self._catalog = catalog
        self._world = world
        self.config = config if config is not None else FoodSpawnConfig()
        self._rng = require_rng_param(rng, "FoodSpawningSystem.__init__")
        self._total_spawned = 0
        self._frames_since_spawn = 0

    def _do_update(self, frame: int) -> SystemResult:
        if not self.config.enabled:
            return SystemResult.skipped_result()

        self._frames_since_spawn += 1
        if self._frames_since_spawn < self.config.spawn_interval_ticks:
            return SystemResult.empty()
        self._frames_since_spawn = 0

        live = self._registry.count(OrganismKind.FOOD)
        if live >= self.config.min_resources:
            return SystemResult(details={"food_count": live})

        spawned = make_food_cluster(
            self._registry,
            self._catalog,
            self._world,
            self._rng,
            self._cluster_origin(),
            self.config.cluster_size,
            self.config.cluster_spread,
            self.config.species,
        )
        self._total_spawned += spawned
        logger.debug("Spawned %d food resources at frame %d (had %d)", spawned, frame, live)
        return SystemResult(entities_spawned=spawned, details={"food_count": live})

    def _cluster_origin(self) -> Vector2:
        depth = self._catalog.get(self.config.species).depth_range
        scale = self._world.depth_scale
        low = clamp(depth.min_ft * scale, self._world.min_y, self._world.max_y)
        high = clamp(depth.max_ft * scale, self._world.min_y, self._world.max_y)
        return Vector2(self._rng.uniform(0.0, self._world.width), self._rng.uniform(low, high))

    def get_debug_info(self) -> dict:
        info = super().get_debug_info()
        info["total_spawned"] = self._total_spawned
        info["frames_since_spawn"] = self._frames_since_spawn
        return info
