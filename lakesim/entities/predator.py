"""Predator state: a gamefish driven by the decision engine."""

from enum import Enum
from typing import Dict, Optional

from lakesim.config.species import OrganismKind, SpeciesTraits
from lakesim.entity_ids import SchoolId
from lakesim.entities.organism import Organism
from lakesim.entities.targets import NO_TARGET, Target
from lakesim.math_utils import Vector2, clamp
from lakesim.state_machine import (
    BehaviorState,
    StateMachine,
    create_behavior_state_machine,
)


class SizeClass(str, Enum):
    """Where in its species' weight range a fish falls."""

    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"
    TROPHY = "trophy"

    @property
    def quartile(self) -> int:
        return _SIZE_ORDER.index(self)

    @classmethod
    def parse(cls, value: object) -> "SizeClass":
        """Lenient parse: unknown size classes become MEDIUM."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            return cls.MEDIUM


_SIZE_ORDER = [SizeClass.SMALL, SizeClass.MEDIUM, SizeClass.LARGE, SizeClass.TROPHY]


class Predator(Organism):
    """A predator fish with hunger, health, a behavior state and one target.

    Hunger and health are clamped to [0, 100] by their setters. All timers
    are tick counters that never go negative; ``tick_timers`` decrements
    them once per decision update.

    Attributes:
        machine: Behavior state machine (IDLE, INVESTIGATING, ...)
        target: Exactly one of NoTarget / LureTarget / SchoolTarget / MemberTarget
        size_class: Size class the fish was spawned as
        commitment_ticks: Ticks left before a hunting target may be switched
        abandon_cooldowns: Per-school ticks before it may be re-targeted
        last_sighting_frame: Frame prey was last seen (food chain bookkeeping)
        wary_ticks: Post-escape caution remaining
        strike_window_ticks: Ticks left in the current strike window
        patience_ticks: Consecutive ticks of lure speed mismatch
        feeding_ticks: Ticks left in FEEDING
        anchor: Ambush hold position
        migration_direction: -1 (left edge), +1 (right edge) or 0
        visual_interest: Sonar flash intensity in [0, 1]
        bumped: Whether the current chase already bumped the lure
        last_meal_frame: Frame of the most recent meal, or -1
        biology_ticks: Ticks since the last hunger/health update
        frenzy_ticks: Frenzy time remaining
        frenzy_intensity: Frenzy strength in [0, 1], zero outside a frenzy
        frenzy_school: School the excited neighbors were hunting, if any
        extra_strikes: Re-strikes left after a missed strike while in a frenzy
    """

    kind = OrganismKind.PREDATOR

    def __init__(
        self,
        traits: SpeciesTraits,
        pos: Vector2,
        weight: float,
        size_class: SizeClass = SizeClass.MEDIUM,
        hunger: float = 50.0,
        health: float = 100.0,
        machine: Optional[StateMachine[BehaviorState]] = None,
    ) -> None:
        super().__init__(traits, pos, weight)
        self.size_class = size_class
        self._hunger = clamp(hunger, 0.0, 100.0)
        self._health = clamp(health, 0.0, 100.0)
        self.machine = machine if machine is not None else create_behavior_state_machine()
        self.target: Target = NO_TARGET
        self.commitment_ticks = 0
        self.abandon_cooldowns: Dict[SchoolId, int] = {}
        self.last_sighting_frame = 0
        self.wary_ticks = 0
        self.strike_window_ticks = 0
        self.patience_ticks = 0
        self.feeding_ticks = 0
        self.anchor = pos.copy()
        self.migration_direction = 0
        self.visual_interest = 0.0
        self.bumped = False
        self.last_meal_frame = -1
        self.biology_ticks = 0
        self.frenzy_ticks = 0
        self.frenzy_intensity = 0.0
        self.frenzy_school: Optional[SchoolId] = None
        self.extra_strikes = 0

    @property
    def hunger(self) -> float:
        return self._hunger

    @hunger.setter
    def hunger(self, value: float) -> None:
        self._hunger = clamp(value, 0.0, 100.0)

    @property
    def health(self) -> float:
        return self._health

    @health.setter
    def health(self, value: float) -> None:
        self._health = clamp(value, 0.0, 100.0)

    @property
    def state(self) -> BehaviorState:
        return self.machine.state

    @property
    def is_hooked(self) -> bool:
        return self.machine.state is BehaviorState.HOOKED

    @property
    def is_migrating(self) -> bool:
        return self.machine.state is BehaviorState.MIGRATING

    @property
    def is_wary(self) -> bool:
        return self.wary_ticks > 0

    @property
    def in_frenzy(self) -> bool:
        return self.frenzy_ticks > 0

    @property
    def nutrition_value(self) -> float:
        return self.traits.diet.nutrition_value

    def condition(self) -> float:
        """Biological condition in [0, 1]: healthy and well fed is 1."""
        return (self._health / 100.0 + (1.0 - self._hunger / 100.0)) / 2.0

    def tick_timers(self) -> None:
        """Decrement every countdown by one tick, flooring at zero."""
        if self.commitment_ticks > 0:
            self.commitment_ticks -= 1
        if self.wary_ticks > 0:
            self.wary_ticks -= 1
        if self.frenzy_ticks > 0:
            self.frenzy_ticks -= 1
            if self.frenzy_ticks == 0:
                self.end_frenzy()
        if self.abandon_cooldowns:
            expired = []
            for school_id, ticks in self.abandon_cooldowns.items():
                if ticks <= 1:
                    expired.append(school_id)
                else:
                    self.abandon_cooldowns[school_id] = ticks - 1
            for school_id in expired:
                del self.abandon_cooldowns[school_id]

    def is_on_cooldown(self, school_id: SchoolId) -> bool:
        return school_id in self.abandon_cooldowns

    def end_frenzy(self) -> None:
        self.frenzy_ticks = 0
        self.frenzy_intensity = 0.0
        self.frenzy_school = None
        self.extra_strikes = 0
