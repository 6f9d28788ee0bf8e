"""Fight resolution: the tension and stamina contest after a hookset.

One fight at a time owns the lure. Each tick the fish pulls (resistance
scaled by its remaining stamina and its current fight phase), accepted
reel inputs add tension, and slack lets tension decay. Too much tension
breaks the line; enough sustained tension tires the fish out and it is
landed.

The reel drag caps what the line has to hold. When the fish pulls
harder than the drag, line slips off the spool: tension is relieved
and the fish gets further away. An empty spool loses the fish. A
heavier drag setting tires the fish faster, and lighter line breaks at
less tension.

Fight phases follow the fish's behavior on the line:

    HOOKSET  -> FIGHTING <-> THRASHING
                FIGHTING  -> GIVING_UP (stamina low, for good)

A thrash onset rolls once for the fish spitting the hook.
"""

import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from lakesim.config.simulation_config import FightConfig, WorldConfig
from lakesim.entities.lure import Lure
from lakesim.entities.predator import Predator, SizeClass
from lakesim.entities.targets import NO_TARGET
from lakesim.entity_ids import OrganismId
from lakesim.events.domain_events import CatchEvent, EscapeEvent, HooksetEvent
from lakesim.events.event_queue import EventQueue
from lakesim.math_utils import Vector2, clamp
from lakesim.registry import OrganismRegistry
from lakesim.result import Err, Ok, Result
from lakesim.snapshots import PredatorSnapshot
from lakesim.state_machine import (
    TERMINAL_FIGHT_STATES,
    BehaviorState,
    FightState,
    StateMachine,
    create_fight_state_machine,
)
from lakesim.systems.base import BaseSystem, SystemResult
from lakesim.update_phases import UpdatePhase, runs_in_phase
from lakesim.util.rng import require_rng_param, roll

logger = logging.getLogger(__name__)

# Hookset quality score: striking fish start at this, hunger and luck add up to 30 each
STRIKING_HOOKSET_SCORE = 40.0
# World units the fish dives per point of resistance added in a tick
SWIM_DOWN_PER_RESISTANCE = 4.0
CONDITION_STAMINA_PENALTY = 30.0


class FightOutcome(Enum):
    PENDING = "pending"
    CAUGHT = "caught"
    ESCAPED = "escaped"
    LINE_BROKEN = "line_broken"


class FightPhase(Enum):
    """What the fish is doing on the line."""

    HOOKSET = "hookset"
    FIGHTING = "fighting"
    THRASHING = "thrashing"
    GIVING_UP = "giving_up"


class HooksetQuality(Enum):
    BARELY = "barely"
    BAD = "bad"
    GOOD = "good"
    GREAT = "great"

    @classmethod
    def from_score(cls, score: float) -> "HooksetQuality":
        if score < 25:
            return cls.BARELY
        if score < 50:
            return cls.BAD
        if score < 75:
            return cls.GOOD
        return cls.GREAT


_OUTCOMES = {
    FightState.HOOKED: FightOutcome.PENDING,
    FightState.FIGHTING: FightOutcome.PENDING,
    FightState.CAUGHT: FightOutcome.CAUGHT,
    FightState.ESCAPED: FightOutcome.ESCAPED,
    FightState.LINE_BROKEN: FightOutcome.LINE_BROKEN,
}


@dataclass
class FightSession:
    """One predator bound to the line.

    Attributes:
        predator_id: The hooked predator
        size_class: Size class of the fish (drives hook-spit odds)
        stamina_class: Species stamina class (drives tiring)
        machine: HOOKED -> FIGHTING -> CAUGHT / ESCAPED / LINE_BROKEN
        started_frame: Frame of the hookset
        quality: How well the hook was set
        tension: Line tension in [0, max_tension]
        stamina: Fish stamina; landed at zero
        elapsed: Ticks since the hookset
        phase: Current fight phase
        line_out: Distance between the fish and the angler
        drag_slips: Ticks on which the drag gave line
        reel_count: Accepted reel inputs
        escape_reason: Set when the fish got away
    """

    predator_id: OrganismId
    size_class: SizeClass
    stamina_class: str
    machine: StateMachine[FightState]
    started_frame: int
    quality: HooksetQuality
    tension: float
    stamina: float
    snapshot: PredatorSnapshot
    hook_pos: Vector2
    line_out: float
    initial_line_out: float
    elapsed: int = 0
    phase: FightPhase = FightPhase.HOOKSET
    phase_ticks: int = 0
    next_thrash_ticks: int = 0
    thrash_ticks_left: int = 0
    reel_count: int = 0
    drag_slips: int = 0
    last_reel_tick: Optional[int] = None
    escape_reason: Optional[str] = None
    tension_history: List[float] = field(default_factory=list)

    @property
    def state(self) -> FightState:
        return self.machine.state

    @property
    def outcome(self) -> FightOutcome:
        return _OUTCOMES[self.machine.state]

    @property
    def is_over(self) -> bool:
        return self.machine.state in TERMINAL_FIGHT_STATES


def initial_stamina(predator: Predator) -> float:
    """Stamina at the hookset: 100 for a fish in perfect condition."""
    return 100.0 - (1.0 - predator.condition()) * CONDITION_STAMINA_PENALTY


@runs_in_phase(UpdatePhase.FIGHT)
class FightResolver(BaseSystem):
    """Owns the line while a fight is on.

    The decision engine hands a STRIKING predator over with ``try_begin``;
    from then on this system alone moves it until the fight resolves.
    """

    def __init__(
        self,
        registry: OrganismRegistry,
        lure: Lure,
        world: WorldConfig,
        config: FightConfig,
        events: EventQueue,
        rng: Optional[random.Random] = None,
        wary_ticks: int = 0,
    ) -> None:
        super().__init__("Fight")
        self._registry = registry
        self._lure = lure
        self._world = world
        self.config = config
        self._events = events
        self._rng = require_rng_param(rng, "FightResolver.__init__")
        self._wary_ticks = wary_ticks
        self.drag_setting = config.drag_setting
        self._session: Optional[FightSession] = None
        self._queued_reels: List[float] = []
        self.last_session: Optional[FightSession] = None
        self._catches = 0
        self._escapes = 0

    @property
    def active_session(self) -> Optional[FightSession]:
        return self._session

    def try_begin(self, predator: Predator, frame: int) -> Result[FightSession, str]:
        """Hook a STRIKING predator. Err while another fight owns the line."""
        if self._session is not None:
            return Err(f"line already owned by {self._session.predator_id}")
        if self._lure.is_owned:
            return Err(f"lure already owned by {self._lure.owner}")
        if predator.state is not BehaviorState.STRIKING:
            return Err(f"{predator.id} is {predator.state.name}, not STRIKING")
        transition = predator.machine.try_transition(BehaviorState.HOOKED, frame, "hookset")
        if transition.is_err():
            return Err(transition.error)

        cfg = self.config
        quality = self._roll_quality(predator)
        line_out = max(predator.pos.y, cfg.landing_line_out)
        session = FightSession(
            predator_id=predator.id,
            size_class=predator.size_class,
            stamina_class=predator.traits.stamina_class.value,
            machine=create_fight_state_machine(),
            started_frame=frame,
            quality=quality,
            tension=cfg.initial_tension,
            stamina=initial_stamina(predator),
            snapshot=PredatorSnapshot.from_predator(predator, self._world.depth_scale),
            hook_pos=predator.pos.copy(),
            line_out=line_out,
            initial_line_out=line_out,
        )
        predator.target = NO_TARGET
        predator.strike_window_ticks = 0
        self._lure.owner = predator.id
        self._lure.velocity = Vector2(0.0, 0.0)
        self._lure.pos.update(predator.pos.x, predator.pos.y)
        self._session = session
        self._queued_reels = []
        self._events.emit(
            HooksetEvent(
                predator_id=predator.id,
                species_id=predator.species_id,
                quality=quality.value,
                frame=frame,
            )
        )
        logger.info(
            "Hooked %s (%s, %.1f lbs): %s hookset, stamina %.1f",
            predator.id,
            predator.species_id,
            predator.weight,
            quality.value,
            session.stamina,
        )
        return Ok(session)

    def _roll_quality(self, predator: Predator) -> HooksetQuality:
        score = STRIKING_HOOKSET_SCORE + predator.hunger / 100.0 * 30.0 + self._rng.random() * 30.0
        return HooksetQuality.from_score(score)

    def set_drag(self, setting: float) -> float:
        """Set the drag as a percent of the reel's maximum; returns the clamped value."""
        self.drag_setting = clamp(setting, 0.0, 100.0)
        logger.debug(
            "Drag set to %.0f%% (%.1f lbs)", self.drag_setting, self.drag_force_lb(reeling=False)
        )
        return self.drag_setting

    def drag_force_lb(self, reeling: bool) -> float:
        drag = self.drag_setting / 100.0 * self.config.max_drag_lb
        if reeling:
            drag *= self.config.reeling_drag_multiplier
        return drag

    def break_threshold(self) -> float:
        """Tension that snaps the current line; lighter line snaps sooner.

        Heavier line raises the threshold but never past the danger margin
        below max tension.
        """
        cfg = self.config
        scaled = cfg.break_threshold * cfg.line_test_lb / cfg.rated_line_test_lb
        return min(cfg.max_tension - cfg.min_danger_margin, scaled)

    def spool_empty(self, session: FightSession) -> bool:
        return session.line_out / self._world.depth_scale >= self.config.spool_capacity_ft

    def queue_reel(self, intensity: float = 1.0) -> bool:
        """Queue one reel input for the next fight tick; False when no fight is on."""
        if self._session is None:
            logger.debug("Reel ignored: no active fight")
            return False
        self._queued_reels.append(clamp(intensity, 0.0, 1.0))
        return True

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------

    def _do_update(self, frame: int) -> SystemResult:
        session = self._session
        if session is None:
            return SystemResult.empty()
        reels = self._queued_reels
        self._queued_reels = []

        predator = self._registry.get_predator(session.predator_id)
        if predator is None or not predator.is_hooked:
            self._escape(session, None, "predator_lost", frame)
            return SystemResult(events_emitted=1, details={"outcome": FightOutcome.ESCAPED.value})

        session.elapsed += 1
        if session.state is FightState.HOOKED:
            session.machine.transition(FightState.FIGHTING, frame, "first tick")

        if self._advance_phase(session):
            self._escape(session, predator, "hook_spit", frame)
            return SystemResult(
                entities_affected=1, events_emitted=1, details={"outcome": "hook_spit"}
            )

        cfg = self.config
        accepted = False
        for intensity in reels:
            if self._reel_allowed(session):
                session.tension += cfg.tension_per_reel
                session.line_out = max(
                    cfg.landing_line_out, session.line_out - cfg.reel_distance * intensity
                )
                session.reel_count += 1
                session.last_reel_tick = session.elapsed
                accepted = True

        phase_multiplier = cfg.phase_resistance_multipliers.get(session.phase.value, 1.0)
        resistance = cfg.resistance_base * session.stamina / 100.0 * phase_multiplier
        session.tension += resistance
        if not accepted:
            session.tension -= cfg.tension_decay
        session.tension = clamp(session.tension, 0.0, cfg.max_tension)
        pull = predator.weight * phase_multiplier * session.stamina / 100.0
        slipped = self._slip_drag(session, pull, reeling=accepted)
        session.tension_history.append(session.tension)

        self._follow(session, predator, resistance)

        if slipped and self.spool_empty(session):
            session.machine.transition(FightState.LINE_BROKEN, frame, "spool empty")
            self._escape(session, predator, "spool_empty", frame)
            return SystemResult(
                entities_affected=1, events_emitted=1, details={"outcome": "spool_empty"}
            )

        if session.tension >= self.break_threshold():
            session.machine.transition(FightState.LINE_BROKEN, frame, "tension")
            self._escape(session, predator, "line_broken", frame)
            return SystemResult(
                entities_affected=1, events_emitted=1, details={"outcome": "line_broken"}
            )

        class_multiplier = cfg.stamina_class_multipliers.get(session.stamina_class, 1.0)
        drag_multiplier = 0.5 + self.drag_setting / 100.0
        session.stamina -= (
            cfg.tire_rate * (session.tension / 100.0) * class_multiplier * drag_multiplier
        )
        if session.stamina <= 0.0:
            session.stamina = 0.0
            self._land(session, predator, frame)
            return SystemResult(
                entities_affected=1,
                entities_removed=1,
                events_emitted=1,
                details={"outcome": FightOutcome.CAUGHT.value},
            )

        return SystemResult(
            entities_affected=1,
            details={"tension": session.tension, "stamina": session.stamina},
        )

    def _slip_drag(self, session: FightSession, pull: float, reeling: bool) -> bool:
        """Pay out line if the fish outpulls the drag; returns True if it slipped."""
        drag = self.drag_force_lb(reeling)
        if pull <= drag:
            return False
        cfg = self.config
        slip_ft = (pull - drag) / pull * cfg.drag_slip_ft
        session.line_out += slip_ft * self._world.depth_scale
        session.tension *= cfg.drag_slip_relief
        session.drag_slips += 1
        return True

    def _reel_allowed(self, session: FightSession) -> bool:
        if session.last_reel_tick is None:
            return True
        return session.elapsed - session.last_reel_tick >= self.config.min_reel_interval_ticks

    def _advance_phase(self, session: FightSession) -> bool:
        """Step the fight phase; returns True if the fish spat the hook."""
        cfg = self.config
        session.phase_ticks += 1
        phase = session.phase

        if phase is FightPhase.HOOKSET:
            if session.phase_ticks > cfg.hookset_ticks:
                self._enter_phase(session, FightPhase.FIGHTING)
                session.next_thrash_ticks = cfg.thrash_interval_ticks + self._rng.randint(
                    0, cfg.thrash_interval_jitter
                )
        elif phase is FightPhase.FIGHTING:
            if session.stamina < cfg.giving_up_stamina:
                self._enter_phase(session, FightPhase.GIVING_UP)
            elif session.phase_ticks >= session.next_thrash_ticks:
                self._enter_phase(session, FightPhase.THRASHING)
                session.thrash_ticks_left = cfg.thrash_duration_ticks + self._rng.randint(
                    0, cfg.thrash_duration_jitter
                )
                return self._roll_hook_spit(session)
        elif phase is FightPhase.THRASHING:
            session.thrash_ticks_left -= 1
            if session.thrash_ticks_left <= 0:
                self._enter_phase(session, FightPhase.FIGHTING)
                session.next_thrash_ticks = cfg.thrash_interval_ticks + self._rng.randint(
                    0, cfg.thrash_interval_jitter
                )
        return False

    @staticmethod
    def _enter_phase(session: FightSession, phase: FightPhase) -> None:
        logger.debug("%s: %s -> %s", session.predator_id, session.phase.value, phase.value)
        session.phase = phase
        session.phase_ticks = 0

    def hook_spit_chance(self, session: FightSession) -> float:
        cfg = self.config
        base = cfg.hook_spit_chance_by_size.get(session.size_class.value, 0.03)
        chance = base * (0.5 + session.stamina / 100.0)
        return chance * cfg.hookset_quality_multipliers.get(session.quality.value, 1.0)

    def _roll_hook_spit(self, session: FightSession) -> bool:
        if not self.config.hook_spit_enabled:
            return False
        return roll(self._rng, self.hook_spit_chance(session))

    def _follow(self, session: FightSession, predator: Predator, resistance: float) -> None:
        """Move the fish with the fight and keep the lure in its mouth."""
        world = self._world
        progress = session.line_out / session.initial_line_out if session.initial_line_out > 0 else 0.0
        target_y = world.min_y + (session.hook_pos.y - world.min_y) * progress
        target_y += resistance * SWIM_DOWN_PER_RESISTANCE
        predator.pos.update(session.hook_pos.x, clamp(target_y, world.min_y, world.max_y))
        self._lure.pos.update(predator.pos.x, predator.pos.y)
        session.snapshot = PredatorSnapshot.from_predator(predator, world.depth_scale)

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def _land(self, session: FightSession, predator: Predator, frame: int) -> None:
        session.machine.transition(FightState.CAUGHT, frame, "stamina exhausted")
        snapshot = PredatorSnapshot.from_predator(predator, self._world.depth_scale)
        self._registry.request_despawn(predator.id, reason="caught")
        self._release_line(session)
        self._catches += 1
        self._events.emit(CatchEvent(snapshot=snapshot, fight_ticks=session.elapsed, frame=frame))
        logger.info(
            "Landed %s (%s, %.1f lbs) after %d ticks",
            predator.id,
            predator.species_id,
            predator.weight,
            session.elapsed,
        )

    def _escape(
        self,
        session: FightSession,
        predator: Optional[Predator],
        reason: str,
        frame: int,
    ) -> None:
        if not session.is_over:
            session.machine.transition(FightState.ESCAPED, frame, reason)
        session.escape_reason = reason
        snapshot = session.snapshot
        if predator is not None:
            if not predator.machine.try_transition(BehaviorState.IDLE, frame, reason).is_ok():
                logger.warning("Forcing escaped %s to IDLE", predator.id)
                predator.machine.force_state(BehaviorState.IDLE, frame, reason)
            predator.wary_ticks = self._wary_ticks
            predator.bumped = False
            snapshot = PredatorSnapshot.from_predator(predator, self._world.depth_scale)
        self._release_line(session)
        self._escapes += 1
        self._events.emit(EscapeEvent(snapshot=snapshot, reason=reason, frame=frame))
        logger.info("%s escaped: %s", session.predator_id, reason)

    def _release_line(self, session: FightSession) -> None:
        self._lure.owner = None
        self.last_session = session
        self._session = None
        self._queued_reels = []

    def get_debug_info(self) -> dict:
        info = super().get_debug_info()
        info["active"] = self._session is not None
        info["catches"] = self._catches
        info["escapes"] = self._escapes
        if self._session is not None:
            info["tension"] = self._session.tension
            info["stamina"] = self._session.stamina
            info["phase"] = self._session.phase.value
            info["line_out_ft"] = self._session.line_out / self._world.depth_scale
        info["drag_setting"] = self.drag_setting
        return info
