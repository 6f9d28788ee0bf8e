"""Predator decision engine.

Drives every predator's behavior state machine once per tick:

    IDLE -> INVESTIGATING -> CHASING -> STRIKING -> HOOKED (fight handoff)
    IDLE -> HUNTING_PREY -> FEEDING -> IDLE
    any  -> MIGRATING -> removed once off the playable area

Each predator makes at most one decision transition per tick. A hookset
command is resolved after every predator has stepped, so a fish that
entered STRIKING this tick can be hooked in the same tick, and of two
simultaneous strikers only the first in registry order wins the line.

Movement for predators also happens here, after the decision for the
tick, so the food chain pass of the next tick sees the new positions.
"""

import logging
import math
import random
from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple

from lakesim.config.simulation_config import DecisionConfig, WorldConfig
from lakesim.config.species import OrganismKind, SpeciesCatalog, diet_preference
from lakesim.entities.lure import Lure
from lakesim.entities.organism import SchoolMember
from lakesim.entities.predator import Predator
from lakesim.entities.targets import (
    LURE_TARGET,
    NO_TARGET,
    LureTarget,
    MemberTarget,
    SchoolTarget,
    Target,
)
from lakesim.entity_ids import SchoolId
from lakesim.events.domain_events import (
    FrenzyEvent,
    LureBumpedEvent,
    MigratedEvent,
    StrikeEvent,
    StrikeMissedEvent,
)
from lakesim.events.event_queue import EventQueue
from lakesim.math_utils import Vector2, clamp
from lakesim.registry import OrganismRegistry
from lakesim.state_machine import LURE_STATES, BehaviorState
from lakesim.systems.base import BaseSystem, SystemResult
from lakesim.systems.perception import (
    detection_ranges,
    in_envelope,
    organisms_in_envelope,
    predator_zone,
)
from lakesim.update_phases import UpdatePhase, runs_in_phase
from lakesim.util.rng import require_rng_param

if TYPE_CHECKING:
    from lakesim.systems.fight import FightResolver

logger = logging.getLogger(__name__)

# Prey target scoring
PROXIMITY_WEIGHT = 0.6
SCHOOL_SIZE_WEIGHT = 0.4
SCHOOL_SIZE_SATURATION = 10

# Predators closer than this to the area edge turn back while cruising
EDGE_TURN_MARGIN = 40.0

# States that make a predator exciting to the idle fish around it
EXCITED_STATES = frozenset(
    {
        BehaviorState.INVESTIGATING,
        BehaviorState.CHASING,
        BehaviorState.STRIKING,
        BehaviorState.HUNTING_PREY,
        BehaviorState.FEEDING,
    }
)


@dataclass
class PreyCandidate:
    """A school (or solitary prey) a predator could hunt right now."""

    school_id: SchoolId
    nearest: SchoolMember
    distance: float
    visible_count: int
    score: float

    def to_target(self) -> Target:
        if self.nearest.traits.schooling.enabled:
            return SchoolTarget(school_id=self.school_id, focus_id=self.nearest.id)
        return MemberTarget(organism_id=self.nearest.id)


@runs_in_phase(UpdatePhase.DECISION)
class PredatorDecisionEngine(BaseSystem):
    """Runs the predator state machines and moves predators.

    The engine never touches a HOOKED predator; the fight resolver owns it
    until the fight ends. Migration is requested from outside through
    ``signal_migration`` (wired to the food chain resolver).
    """

    def __init__(
        self,
        registry: OrganismRegistry,
        catalog: SpeciesCatalog,
        world: WorldConfig,
        config: DecisionConfig,
        lure: Lure,
        events: EventQueue,
        rng: Optional[random.Random] = None,
        fight: Optional["FightResolver"] = None,
    ) -> None:
        super().__init__("PredatorAI")
        self._registry = registry
        self._catalog = catalog
        self._world = world
        self.config = config
        self._lure = lure
        self._events = events
        self._rng = require_rng_param(rng, "PredatorDecisionEngine.__init__")
        self._fight = fight
        self._hookset_pending = False
        self._transitions = 0
        self._state_counts: Dict[str, int] = {}
        self._frenzies = 0

    def request_hookset(self) -> None:
        """Player hookset input for this tick."""
        self._hookset_pending = True

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------

    def _do_update(self, frame: int) -> SystemResult:
        hookset = self._hookset_pending
        self._hookset_pending = False

        predators = [p for p in self._registry.predators() if not p.is_hooked]
        transitions_before = self._transitions
        emitted_before = self._events.pending_count()
        removed = 0

        for predator in predators:
            self._step(predator, frame)
            if not predator.alive:
                removed += 1

        hooked = 0
        if hookset:
            hooked = self._resolve_hookset(predators, frame)

        counts: Dict[str, int] = {}
        for predator in predators:
            if predator.alive:
                counts[predator.state.value] = counts.get(predator.state.value, 0) + 1
        self._state_counts = counts

        return SystemResult(
            entities_affected=len(predators),
            entities_removed=removed,
            events_emitted=self._events.pending_count() - emitted_before,
            details={
                "transitions": self._transitions - transitions_before,
                "hooked": hooked,
            },
        )

    def _step(self, predator: Predator, frame: int) -> None:
        predator.tick_timers()
        self._tick_biology(predator)

        state = predator.state
        if state is BehaviorState.MIGRATING:
            self._migrate(predator, frame)
            return

        if state is BehaviorState.IDLE:
            self._decide_idle(predator, frame)
        elif state is BehaviorState.INVESTIGATING:
            self._decide_investigating(predator, frame)
        elif state is BehaviorState.CHASING:
            self._decide_chasing(predator, frame)
        elif state is BehaviorState.STRIKING:
            self._decide_striking(predator, frame)
        elif state is BehaviorState.HUNTING_PREY:
            self._decide_hunting(predator, frame)
        elif state is BehaviorState.FEEDING:
            self._decide_feeding(predator, frame)
        else:
            self._reset_to_idle(predator, frame, f"unexpected state {state.name}")

        self._move(predator)
        self._update_visual_interest(predator)

    def _resolve_hookset(self, predators: List[Predator], frame: int) -> int:
        """Offer the line to STRIKING predators in registry order."""
        strikers = [p for p in predators if p.alive and p.state is BehaviorState.STRIKING]
        if not strikers:
            logger.debug("Hookset at frame %d with nothing striking", frame)
            return 0
        if self._fight is None:
            logger.warning("Hookset ignored: no fight resolver attached")
            return 0
        hooked = 0
        for predator in strikers:
            result = self._fight.try_begin(predator, frame)
            if result.is_ok():
                hooked += 1
                self._transitions += 1
            else:
                logger.debug("%s stays STRIKING: %s", predator.id, result.error)
        return hooked

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def _transition(
        self, predator: Predator, state: BehaviorState, frame: int, reason: str = ""
    ) -> bool:
        result = predator.machine.try_transition(state, frame, reason)
        if result.is_err():
            logger.debug("%s: %s", predator.id, result.error)
            return False
        self._transitions += 1
        return True

    def _reset_to_idle(self, predator: Predator, frame: int, reason: str) -> None:
        """Drop the target and go back to IDLE."""
        predator.target = NO_TARGET
        predator.commitment_ticks = 0
        predator.strike_window_ticks = 0
        predator.patience_ticks = 0
        predator.feeding_ticks = 0
        predator.bumped = False
        if predator.state is BehaviorState.IDLE:
            return
        if not self._transition(predator, BehaviorState.IDLE, frame, reason):
            logger.warning("Forcing %s to IDLE from %s (%s)", predator.id, predator.state.name, reason)
            predator.machine.force_state(BehaviorState.IDLE, frame, reason)

    def signal_migration(self, predator: Predator, frame: int) -> bool:
        """Send a predator toward the nearest horizontal edge for good.

        Hooked and already-migrating predators are left alone.
        """
        if not predator.alive or predator.is_hooked or predator.is_migrating:
            return False
        if not self._transition(predator, BehaviorState.MIGRATING, frame, "no prey sighted"):
            return False
        predator.target = NO_TARGET
        predator.commitment_ticks = 0
        predator.strike_window_ticks = 0
        predator.migration_direction = -1 if predator.pos.x < self._world.width / 2 else 1
        logger.info(
            "%s (%s) migrating %s",
            predator.id,
            predator.species_id,
            "left" if predator.migration_direction < 0 else "right",
        )
        return True

    # ------------------------------------------------------------------
    # Lure pipeline
    # ------------------------------------------------------------------

    def _ranges(self, predator: Predator) -> Tuple[float, float]:
        return detection_ranges(
            predator, self._world.depth_scale, self.config.wary_detection_multiplier
        )

    def lure_detectable(self, predator: Predator, range_multiplier: float = 1.0) -> bool:
        lure = self._lure
        if not lure.in_water or lure.is_owned:
            return False
        horizontal, vertical = self._ranges(predator)
        return in_envelope(
            predator.pos, lure.pos, horizontal * range_multiplier, vertical * range_multiplier
        )

    def speed_match(self, predator: Predator) -> float:
        traits = predator.traits
        mismatch = abs(self._lure.speed - traits.optimal_lure_speed)
        return max(0.0, 1.0 - mismatch / traits.speed_tolerance)

    def interest_score(self, predator: Predator) -> float:
        """How interested a predator is in the lure this tick.

        Draws one random number from the engine RNG.
        """
        cfg = self.config
        zone = predator_zone(predator, self._world.depth_scale)
        aggression = clamp(predator.traits.aggressiveness + zone.aggressiveness_bonus, 0.1, 1.0)
        retrieving = 1.0 if self._lure.retrieving else 0.0
        base = (
            cfg.interest_speed_weight * self.speed_match(predator)
            + cfg.interest_depth_weight * zone.interest_bonus
            + cfg.interest_retrieve_weight * retrieving
        )
        score = aggression * base + cfg.interest_random_weight * self._rng.random()
        if predator.in_frenzy:
            score += cfg.frenzy_interest_bonus * predator.frenzy_intensity
        return score

    def interest_threshold(self, predator: Predator) -> float:
        threshold = predator.traits.interest_threshold
        if predator.is_wary:
            threshold += self.config.wary_interest_penalty
        return threshold

    def strike_distance(self, predator: Predator) -> float:
        style = predator.traits.behavior_style.value
        distance = predator.traits.strike_distance * self.config.style_strike_multipliers.get(style, 1.0)
        if predator.is_wary:
            distance *= self.config.wary_strike_multiplier
        return distance

    def _decide_idle(self, predator: Predator, frame: int) -> None:
        if self._maybe_join_frenzy(predator, frame):
            return

        if predator.hunger > self.config.feeding_threshold:
            candidate = self.best_prey_candidate(predator)
            if candidate is not None:
                if self._transition(predator, BehaviorState.HUNTING_PREY, frame, "hungry"):
                    predator.target = candidate.to_target()
                    predator.commitment_ticks = self.config.commitment_ticks
                return

        if self.lure_detectable(predator):
            if self._transition(predator, BehaviorState.INVESTIGATING, frame, "lure sighted"):
                predator.target = LURE_TARGET
                predator.patience_ticks = 0

    def _decide_investigating(self, predator: Predator, frame: int) -> None:
        if not isinstance(predator.target, LureTarget):
            self._reset_to_idle(predator, frame, "invalid target")
            return
        if not self.lure_detectable(predator):
            self._reset_to_idle(predator, frame, "lure lost")
            return

        if self.speed_match(predator) <= 0.0:
            predator.patience_ticks += 1
            if predator.patience_ticks >= self.config.interest_patience_ticks:
                self._reset_to_idle(predator, frame, "lost interest")
            return
        predator.patience_ticks = 0

        if self.interest_score(predator) > self.interest_threshold(predator):
            if self._transition(predator, BehaviorState.CHASING, frame, "interested"):
                predator.bumped = False

    def _decide_chasing(self, predator: Predator, frame: int) -> None:
        if not isinstance(predator.target, LureTarget):
            self._reset_to_idle(predator, frame, "invalid target")
            return
        if not self.lure_detectable(predator, self.config.chase_give_up_multiplier):
            self._reset_to_idle(predator, frame, "lure escaped")
            return

        distance = predator.pos.distance_to(self._lure.pos)
        strike = self.strike_distance(predator)
        if not predator.bumped and distance <= strike * self.config.bump_distance_multiplier:
            predator.bumped = True
            self._events.emit(LureBumpedEvent(predator_id=predator.id, frame=frame))

        if distance < strike:
            if self._transition(predator, BehaviorState.STRIKING, frame, "in range"):
                predator.strike_window_ticks = self.config.strike_window_ticks
                self._events.emit(StrikeEvent(predator_id=predator.id, frame=frame))

    def _decide_striking(self, predator: Predator, frame: int) -> None:
        if self._lure.is_owned or not self._lure.in_water:
            self._reset_to_idle(predator, frame, "line taken")
            return
        predator.strike_window_ticks -= 1
        if predator.strike_window_ticks > 0:
            return
        self._events.emit(StrikeMissedEvent(predator_id=predator.id, frame=frame))
        if self._can_strike_again(predator):
            if self._transition(predator, BehaviorState.CHASING, frame, "missed, striking again"):
                predator.extra_strikes -= 1
                predator.strike_window_ticks = 0
                predator.bumped = False
                return
        self._reset_to_idle(predator, frame, "strike window closed")

    def _can_strike_again(self, predator: Predator) -> bool:
        if not predator.in_frenzy or predator.extra_strikes <= 0:
            return False
        return self.lure_detectable(predator, self.config.chase_give_up_multiplier)

    # ------------------------------------------------------------------
    # Prey pipeline
    # ------------------------------------------------------------------

    def prey_candidates(self, predator: Predator) -> List[PreyCandidate]:
        """Edible schools inside the detection envelope, not on cooldown."""
        horizontal, vertical = self._ranges(predator)
        reach = max(horizontal, vertical)
        by_school: Dict[SchoolId, List[Tuple[float, SchoolMember]]] = {}
        for organism in organisms_in_envelope(
            self._registry, predator.pos, horizontal, vertical, OrganismKind.PREY
        ):
            if not isinstance(organism, SchoolMember):
                continue
            if predator.is_on_cooldown(organism.school_id):
                continue
            if not self._catalog.can_eat(predator.traits, organism.traits):
                continue
            distance = predator.distance_to(organism)
            by_school.setdefault(organism.school_id, []).append((distance, organism))

        candidates = []
        for school_id, sightings in by_school.items():
            distance, nearest = min(sightings, key=lambda item: (item[0], item[1].id))
            score = self._score_prey(predator, nearest, distance, len(sightings), reach)
            if predator.in_frenzy and school_id == predator.frenzy_school:
                score += self.config.frenzy_target_bonus
            candidates.append(
                PreyCandidate(
                    school_id=school_id,
                    nearest=nearest,
                    distance=distance,
                    visible_count=len(sightings),
                    score=score,
                )
            )
        return candidates

    @staticmethod
    def _score_prey(
        predator: Predator, prey: SchoolMember, distance: float, count: int, reach: float
    ) -> float:
        proximity = max(0.0, 1.0 - distance / reach) if reach > 0 else 0.0
        size = min(1.0, count / SCHOOL_SIZE_SATURATION)
        preference = diet_preference(predator.traits, prey.traits)
        return (PROXIMITY_WEIGHT * proximity + SCHOOL_SIZE_WEIGHT * size) * preference

    def best_prey_candidate(self, predator: Predator) -> Optional[PreyCandidate]:
        candidates = self.prey_candidates(predator)
        if not candidates:
            return None
        return max(candidates, key=lambda c: (c.score, -c.school_id.value))

    def _focus_of(self, predator: Predator) -> Optional[Tuple[SchoolId, SchoolMember]]:
        """The hunted school and its member nearest the predator, or None if gone."""
        target = predator.target
        if isinstance(target, SchoolTarget):
            members = self._registry.members_of(target.school_id)
            if not members:
                return None
            nearest = min(members, key=lambda m: (predator.pos.distance_squared_to(m.pos), m.id))
            return target.school_id, nearest
        if isinstance(target, MemberTarget):
            prey = self._registry.get(target.organism_id)
            if not isinstance(prey, SchoolMember):
                return None
            return prey.school_id, prey
        return None

    def _abandon(self, predator: Predator, school_id: SchoolId) -> None:
        predator.abandon_cooldowns[school_id] = self.config.abandon_cooldown_ticks

    def _decide_hunting(self, predator: Predator, frame: int) -> None:
        if predator.last_meal_frame == frame:
            if self._transition(predator, BehaviorState.FEEDING, frame, "ate"):
                predator.target = NO_TARGET
                predator.commitment_ticks = 0
                predator.feeding_ticks = self.config.feeding_ticks
            return

        if not isinstance(predator.target, (SchoolTarget, MemberTarget)):
            self._reset_to_idle(predator, frame, "invalid target")
            return
        focus = self._focus_of(predator)
        if focus is None:
            self._reset_to_idle(predator, frame, "prey gone")
            return
        school_id, prey = focus

        horizontal, vertical = self._ranges(predator)
        give_up = self.config.chase_give_up_multiplier
        if not in_envelope(predator.pos, prey.pos, horizontal * give_up, vertical * give_up):
            self._abandon(predator, school_id)
            self._reset_to_idle(predator, frame, "prey out of range")
            return

        if predator.commitment_ticks <= 0:
            candidates = self.prey_candidates(predator)
            current = next((c for c in candidates if c.school_id == school_id), None)
            current_score = current.score if current is not None else self._score_prey(
                predator, prey, predator.distance_to(prey), 1, max(horizontal, vertical)
            )
            others = [c for c in candidates if c.school_id != school_id]
            if others:
                best = max(others, key=lambda c: (c.score, -c.school_id.value))
                if best.score > current_score + self.config.target_switch_margin:
                    logger.debug(
                        "%s switches from %s to %s", predator.id, school_id, best.school_id
                    )
                    self._abandon(predator, school_id)
                    predator.target = best.to_target()
                    predator.commitment_ticks = self.config.commitment_ticks
                    return

        if isinstance(predator.target, SchoolTarget):
            predator.target = SchoolTarget(school_id=school_id, focus_id=prey.id)

    def _decide_feeding(self, predator: Predator, frame: int) -> None:
        predator.feeding_ticks -= 1
        if predator.feeding_ticks <= 0:
            self._reset_to_idle(predator, frame, "done feeding")

    # ------------------------------------------------------------------
    # Frenzy feeding
    # ------------------------------------------------------------------

    def excited_neighbors(self, predator: Predator) -> List[Predator]:
        """Other predators within the frenzy radius that are after the lure or prey."""
        excited = [
            other
            for other in self._registry.query(
                predator.pos, self.config.frenzy_radius, OrganismKind.PREDATOR
            )
            if other is not predator
            and isinstance(other, Predator)
            and other.state in EXCITED_STATES
        ]
        return sorted(excited, key=lambda other: other.id)

    def _maybe_join_frenzy(self, predator: Predator, frame: int) -> bool:
        """Roll for an idle predator to pile in on nearby excitement.

        A predator that joins gets a timed frenzy whose length and
        intensity grow with the number of excited neighbors, one or more
        extra strikes, and the school the first hunting neighbor is on.
        It then heads for that school if it can see it, else for the lure.

        Returns:
            True if the predator left IDLE this tick
        """
        cfg = self.config
        if not cfg.frenzy_enabled or predator.in_frenzy:
            return False
        excited = self.excited_neighbors(predator)
        if not excited or self._rng.random() >= cfg.frenzy_join_chance:
            return False

        count = len(excited)
        predator.frenzy_ticks = int(
            cfg.frenzy_base_ticks * (1.0 + count * cfg.frenzy_duration_per_neighbor)
        )
        predator.frenzy_intensity = min(1.0, count * cfg.frenzy_intensity_per_neighbor)
        predator.frenzy_school = None
        for other in excited:
            focus = self._focus_of(other)
            if focus is not None:
                predator.frenzy_school = focus[0]
                break
        predator.extra_strikes = (
            self._rng.randint(1, cfg.frenzy_max_extra_strikes)
            if cfg.frenzy_max_extra_strikes > 0
            else 0
        )
        self._frenzies += 1
        self._events.emit(
            FrenzyEvent(
                predator_id=predator.id,
                excited_neighbors=count,
                intensity=predator.frenzy_intensity,
                frame=frame,
            )
        )
        logger.debug(
            "%s joins a frenzy (%d excited, intensity %.2f)",
            predator.id,
            count,
            predator.frenzy_intensity,
        )

        if predator.frenzy_school is not None:
            candidate = next(
                (
                    c
                    for c in self.prey_candidates(predator)
                    if c.school_id == predator.frenzy_school
                ),
                None,
            )
            if candidate is not None:
                if self._transition(predator, BehaviorState.HUNTING_PREY, frame, "frenzy"):
                    predator.target = candidate.to_target()
                    predator.commitment_ticks = cfg.commitment_ticks
                return True
        if self.lure_detectable(predator):
            if self._transition(predator, BehaviorState.INVESTIGATING, frame, "frenzy"):
                predator.target = LURE_TARGET
                predator.patience_ticks = 0
            return True
        return False

    # ------------------------------------------------------------------
    # Migration
    # ------------------------------------------------------------------

    def _migrate(self, predator: Predator, frame: int) -> None:
        if predator.migration_direction == 0:
            predator.migration_direction = -1 if predator.pos.x < self._world.width / 2 else 1
        speed = predator.traits.speed.base * self.config.migration_speed_multiplier
        predator.pos.x += predator.migration_direction * speed
        predator.heading = 0.0 if predator.migration_direction > 0 else math.pi
        predator.speed = speed
        self._clamp_vertical(predator)
        predator.visual_interest = max(0.0, predator.visual_interest - self.config.interest_decay_rate)

        if self._world.is_off_area(predator.pos.x):
            if self._registry.request_despawn(predator.id, reason="migrated"):
                self._events.emit(
                    MigratedEvent(predator_id=predator.id, species_id=predator.species_id, frame=frame)
                )
                logger.info("%s (%s) left the area", predator.id, predator.species_id)

    # ------------------------------------------------------------------
    # Biology and movement
    # ------------------------------------------------------------------

    def _tick_biology(self, predator: Predator) -> None:
        cfg = self.config
        predator.biology_ticks += 1
        if predator.biology_ticks < cfg.hunger_interval_ticks:
            return
        predator.biology_ticks = 0
        predator.hunger += predator.traits.hunger_rate * predator.traits.metabolism
        if predator.hunger > cfg.starving_hunger:
            predator.health -= cfg.starvation_damage
        elif predator.hunger < cfg.well_fed_hunger:
            predator.health += cfg.recovery_amount

    def _update_visual_interest(self, predator: Predator) -> None:
        if predator.state in LURE_STATES:
            predator.visual_interest = min(1.0, predator.visual_interest + self.config.interest_rise_rate)
        else:
            predator.visual_interest = max(0.0, predator.visual_interest - self.config.interest_decay_rate)

    def _move(self, predator: Predator) -> None:
        cfg = self.config
        traits = predator.traits
        base = traits.speed.base * predator_zone(predator, self._world.depth_scale).speed_multiplier
        state = predator.state

        if state is BehaviorState.INVESTIGATING:
            if traits.is_ambush:
                self._hold_anchor(predator, base)
            else:
                self._seek(predator, self._lure.pos, base * cfg.investigate_speed_multiplier)
        elif state is BehaviorState.CHASING:
            multiplier = cfg.ambush_chase_speed_multiplier if traits.is_ambush else cfg.chase_speed_multiplier
            self._seek(predator, self._lure.pos, base * multiplier)
        elif state is BehaviorState.STRIKING:
            self._seek(predator, self._lure.pos, traits.speed.burst)
        elif state is BehaviorState.HUNTING_PREY:
            focus = self._focus_of(predator)
            if focus is not None:
                self._seek(predator, focus[1].pos, base * cfg.hunt_speed_multiplier)
        elif traits.is_ambush:
            self._hold_anchor(predator, base)
        else:
            self._cruise(predator, base * cfg.idle_speed_multiplier)

        self._clamp_vertical(predator)
        predator.pos.x = clamp(predator.pos.x, 0.0, self._world.width)

    def _seek(self, predator: Predator, point: Vector2, speed: float) -> None:
        offset = point - predator.pos
        distance = offset.length()
        if distance <= 0.0 or speed <= 0.0:
            predator.speed = 0.0
            return
        step = min(speed, distance)
        predator.pos.add_inplace(offset * (step / distance))
        predator.heading = offset.angle()
        predator.speed = step

    def _hold_anchor(self, predator: Predator, base: float) -> None:
        if predator.pos.distance_to(predator.anchor) > self.config.ambush_radius:
            self._seek(predator, predator.anchor, base * self.config.ambush_return_speed)
        else:
            predator.speed = 0.0

    def _cruise(self, predator: Predator, speed: float) -> None:
        """Slow horizontal patrol with a drift toward the preferred depth."""
        if predator.pos.x < EDGE_TURN_MARGIN:
            direction = 1.0
        elif predator.pos.x > self._world.width - EDGE_TURN_MARGIN:
            direction = -1.0
        else:
            direction = 1.0 if math.cos(predator.heading) >= 0.0 else -1.0
        preferred_y = predator.traits.depth_range.preferred_ft * self._world.depth_scale
        velocity = Vector2(direction * speed, (preferred_y - predator.pos.y) * self.config.depth_seek_rate)
        predator.pos.add_inplace(velocity)
        predator.heading = 0.0 if direction > 0 else math.pi
        predator.speed = velocity.length()

    def _clamp_vertical(self, predator: Predator) -> None:
        predator.pos.y = clamp(predator.pos.y, self._world.min_y, self._world.max_y)

    def get_debug_info(self) -> dict:
        info = super().get_debug_info()
        info["transitions"] = self._transitions
        info["states"] = dict(self._state_counts)
        info["frenzies"] = self._frenzies
        return info
