"""Flocking controller for schooling prey.

Each member steers by four contributions computed over neighbors of its
own school: separation, alignment, cohesion and a panic override that
scatters the school when a predator comes within the threat radius. A
mild attraction toward the nearest sighted food resource applies when
the member is calm.

All contributions are summed as vectors, then the velocity is limited to
the member's current maximum speed (panic speed while fleeing).

The pass is two-phase: every member's steering is computed against the
positions at the start of the pass, then every member moves. Results do
not depend on iteration order.
"""

import logging
import math
import random
from typing import List, Optional, Sequence

from lakesim.config.simulation_config import FlockConfig, WorldConfig
from lakesim.config.species import OrganismKind, SpeciesCatalog
from lakesim.entities.organism import FoodResource, SchoolMember
from lakesim.entities.predator import Predator
from lakesim.math_utils import Vector2
from lakesim.registry import OrganismRegistry
from lakesim.systems.base import BaseSystem, SystemResult
from lakesim.update_phases import UpdatePhase, runs_in_phase
from lakesim.util.rng import require_rng_param

logger = logging.getLogger(__name__)

# Members slower than this fraction of base speed get nudged along their heading
MIN_CRUISE_FRACTION = 0.3
WANDER_TURN = 0.3
BOUNCE = 0.5


@runs_in_phase(UpdatePhase.FLOCKING)
class FlockController(BaseSystem):
    """Computes per-tick movement for every school member.

    Steering is recomputed every ``update_interval_ticks`` ticks (and
    whenever a member's panic flag flips); threats are evaluated every
    tick so a school reacts to a predator in the tick it arrives.
    """

    def __init__(
        self,
        registry: OrganismRegistry,
        catalog: SpeciesCatalog,
        world: WorldConfig,
        config: FlockConfig,
        rng: Optional[random.Random] = None,
    ) -> None:
        super().__init__("Flocking")
        self._registry = registry
        self._catalog = catalog
        self._world = world
        self.config = config
        self._rng = require_rng_param(rng, "FlockController.__init__")
        self._total_panics = 0

    def _do_update(self, frame: int) -> SystemResult:
        members = self._registry.school_members()
        if not members:
            return SystemResult.empty()

        recompute = frame % self.config.update_interval_ticks == 0
        forces: List[Optional[Vector2]] = []
        newly_panicked = 0

        for member in members:
            threats = self._threats_near(member)
            was_panicking = member.panicking
            self._update_panic(member, threats)
            if member.panicking and not was_panicking:
                newly_panicked += 1
            if recompute or member.panicking != was_panicking:
                forces.append(self._steer(member, threats))
            else:
                forces.append(None)

        for member, force in zip(members, forces):
            self._integrate(member, force)

        self._total_panics += newly_panicked
        return SystemResult(
            entities_affected=len(members),
            details={"panicked": newly_panicked, "recomputed": int(recompute)},
        )

    # ------------------------------------------------------------------
    # Panic
    # ------------------------------------------------------------------

    def _threats_near(self, member: SchoolMember) -> List[Predator]:
        radius = member.traits.schooling.threat_radius
        if radius <= 0:
            return []
        threats = []
        for organism in self._registry.query(member.pos, radius, OrganismKind.PREDATOR):
            if isinstance(organism, Predator) and self._catalog.can_eat(
                organism.traits, member.traits
            ):
                threats.append(organism)
        return threats

    def _update_panic(self, member: SchoolMember, threats: Sequence[Predator]) -> None:
        if threats:
            member.panicking = True
            member.panic_ticks = self.config.panic_ticks
        elif member.panic_ticks > 0:
            member.panic_ticks -= 1
            member.panicking = member.panic_ticks > 0
        else:
            member.panicking = False

    # ------------------------------------------------------------------
    # Steering
    # ------------------------------------------------------------------

    def _steer(self, member: SchoolMember, threats: Sequence[Predator]) -> Vector2:
        schooling = member.traits.schooling
        force = Vector2(0.0, 0.0)

        if schooling.enabled:
            separation, alignment, cohesion = self._neighbor_rules(member)
            separation_weight = schooling.separation_weight
            cohesion_weight = schooling.cohesion_weight
            if member.panicking:
                separation_weight *= self.config.panic_separation_multiplier
                cohesion_weight *= self.config.panic_cohesion_multiplier
            force.add_inplace(separation * separation_weight)
            force.add_inplace(alignment * schooling.alignment_weight)
            force.add_inplace(cohesion * cohesion_weight)
        else:
            member.heading += self._rng.uniform(-WANDER_TURN, WANDER_TURN)
            force.add_inplace(Vector2.from_angle(member.heading, self.config.wander_strength))

        if member.panicking:
            member.food_target = None
            force.add_inplace(self._flee(member, threats) * self.config.flee_weight)
        else:
            force.add_inplace(self._food_attraction(member) * self.config.food_weight)

        force.add_inplace(self._boundary(member))
        return force

    def _neighbor_rules(self, member: SchoolMember):
        """Separation, alignment and cohesion over same-school neighbors.

        Empty neighbor sets (a school of one) contribute zero vectors.
        """
        schooling = member.traits.schooling
        separation = Vector2(0.0, 0.0)
        velocity_sum = Vector2(0.0, 0.0)
        position_sum = Vector2(0.0, 0.0)
        aligned = 0
        cohesive = 0

        for other in self._registry.query(
            member.pos, schooling.perception_radius, OrganismKind.PREY
        ):
            if other is member or not isinstance(other, SchoolMember):
                continue
            if other.school_id != member.school_id:
                continue
            dx = member.pos.x - other.pos.x
            dy = member.pos.y - other.pos.y
            distance = math.sqrt(dx * dx + dy * dy)
            if distance <= 0.0:
                continue
            if distance < schooling.separation_radius:
                separation.x += dx / distance
                separation.y += dy / distance
            if distance < schooling.alignment_radius:
                velocity_sum.add_inplace(other.velocity)
                aligned += 1
            if distance < schooling.cohesion_radius:
                position_sum.add_inplace(other.pos)
                cohesive += 1

        alignment = Vector2(0.0, 0.0)
        if aligned:
            alignment = (velocity_sum / aligned - member.velocity) * self.config.alignment_factor
        cohesion = Vector2(0.0, 0.0)
        if cohesive:
            cohesion = (position_sum / cohesive - member.pos) * self.config.cohesion_factor
        return separation, alignment, cohesion

    def _flee(self, member: SchoolMember, threats: Sequence[Predator]) -> Vector2:
        radius = member.traits.schooling.threat_radius
        flee = Vector2(0.0, 0.0)
        for threat in threats:
            dx = member.pos.x - threat.pos.x
            dy = member.pos.y - threat.pos.y
            distance = math.sqrt(dx * dx + dy * dy)
            if distance <= 0.0 or distance >= radius:
                continue
            strength = (radius - distance) / radius * self.config.flee_strength
            flee.x += dx / distance * strength
            flee.y += dy / distance * strength
        return flee

    def _food_attraction(self, member: SchoolMember) -> Vector2:
        nearest: Optional[FoodResource] = None
        nearest_sq = float("inf")
        for organism in self._registry.query(
            member.pos, self.config.food_sight_radius, OrganismKind.FOOD
        ):
            if not isinstance(organism, FoodResource):
                continue
            if not self._catalog.can_eat(member.traits, organism.traits):
                continue
            distance_sq = member.pos.distance_squared_to(organism.pos)
            if distance_sq < nearest_sq:
                nearest = organism
                nearest_sq = distance_sq
        if nearest is None:
            member.food_target = None
            return Vector2(0.0, 0.0)
        member.food_target = nearest.id
        return (nearest.pos - member.pos).normalize()

    def _boundary(self, member: SchoolMember) -> Vector2:
        margin = self.config.boundary_margin
        force = Vector2(0.0, 0.0)
        if member.pos.x < margin:
            force.x = self.config.boundary_force
        elif member.pos.x > self._world.width - margin:
            force.x = -self.config.boundary_force
        return force

    # ------------------------------------------------------------------
    # Integration
    # ------------------------------------------------------------------

    def _integrate(self, member: SchoolMember, force: Optional[Vector2]) -> None:
        velocity = member.velocity
        if force is not None and force.is_finite():
            velocity.add_inplace(force)
        velocity.mul_inplace(self.config.damping)

        speeds = member.traits.speed
        max_speed = speeds.panic if member.panicking else speeds.base
        velocity.limit_inplace(max_speed)

        min_cruise = speeds.base * MIN_CRUISE_FRACTION
        if velocity.length_squared() < min_cruise * min_cruise:
            nudge = Vector2.from_angle(member.heading, min_cruise)
            velocity.update(nudge.x, nudge.y)

        member.pos.add_inplace(velocity)
        self._clamp(member)
        member.speed = velocity.length()
        if member.speed > 0.0:
            member.heading = velocity.angle()

    def _clamp(self, member: SchoolMember) -> None:
        min_y = self._world.min_y
        max_y = self._world.max_y
        if member.pos.y < min_y:
            member.pos.y = min_y
            member.velocity.y = -member.velocity.y * BOUNCE
        elif member.pos.y > max_y:
            member.pos.y = max_y
            member.velocity.y = -member.velocity.y * BOUNCE
        if member.pos.x < 0.0:
            member.pos.x = 0.0
        elif member.pos.x > self._world.width:
            member.pos.x = self._world.width

    def get_debug_info(self) -> dict:
        info = super().get_debug_info()
        info["total_panics"] = self._total_panics
        return info
