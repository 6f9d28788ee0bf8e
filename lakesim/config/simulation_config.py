"""Simulation configuration dataclasses.

Each subsystem reads one small config dataclass; ``SimulationConfig``
bundles them. Defaults come from ``lakesim.config.defaults``. Call
``validate()`` (the engine does) to reject nonsensical combinations early.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict

from lakesim.config import defaults as d
from lakesim.exceptions import ConfigurationError


def _dict_factory(source: Dict) -> Callable[[], Dict]:
    return lambda: dict(source)


@dataclass
class WorldConfig:
    """Playable area and depth scaling.

    Attributes:
        width: Horizontal extent of the playable area in world units
        max_depth_ft: Depth of the lake floor in feet
        depth_scale: World units per foot of depth
        surface_margin_ft: Minimum depth for clamped organisms
        floor_margin_ft: Minimum clearance above the floor
        migration_exit_margin: Distance past an edge that counts as "off-area"
        cell_size: Spatial index cell size
    """

    width: float = d.WORLD_WIDTH
    max_depth_ft: float = d.MAX_DEPTH_FT
    depth_scale: float = d.DEPTH_SCALE
    surface_margin_ft: float = d.SURFACE_MARGIN_FT
    floor_margin_ft: float = d.FLOOR_MARGIN_FT
    migration_exit_margin: float = d.MIGRATION_EXIT_MARGIN
    cell_size: float = d.SPATIAL_CELL_SIZE

    @property
    def floor_y(self) -> float:
        return self.max_depth_ft * self.depth_scale

    @property
    def min_y(self) -> float:
        return self.surface_margin_ft * self.depth_scale

    @property
    def max_y(self) -> float:
        return (self.max_depth_ft - self.floor_margin_ft) * self.depth_scale

    def depth_ft(self, y: float) -> float:
        return y / self.depth_scale

    def is_off_area(self, x: float) -> bool:
        margin = self.migration_exit_margin
        return x < -margin or x > self.width + margin

    def validate(self) -> None:
        if self.depth_scale <= 0:
            raise ConfigurationError(f"depth_scale must be positive, got {self.depth_scale}")
        if self.width <= 0 or self.max_depth_ft <= 0:
            raise ConfigurationError("world width and depth must be positive")
        if self.min_y >= self.max_y:
            raise ConfigurationError("surface and floor margins leave no water column")
        if self.cell_size <= 0:
            raise ConfigurationError("cell_size must be positive")


@dataclass
class PopulationConfig:
    max_predators: int = d.MAX_PREDATORS
    max_school_members: int = d.MAX_SCHOOL_MEMBERS
    max_food_resources: int = d.MAX_FOOD_RESOURCES

    def validate(self) -> None:
        if min(self.max_predators, self.max_school_members, self.max_food_resources) < 0:
            raise ConfigurationError("population caps must be non-negative")


@dataclass
class DecisionConfig:
    """Predator decision engine tuning."""

    feeding_threshold: float = d.FEEDING_THRESHOLD
    interest_speed_weight: float = d.INTEREST_SPEED_WEIGHT
    interest_depth_weight: float = d.INTEREST_DEPTH_WEIGHT
    interest_retrieve_weight: float = d.INTEREST_RETRIEVE_WEIGHT
    interest_random_weight: float = d.INTEREST_RANDOM_WEIGHT
    interest_patience_ticks: int = d.INTEREST_PATIENCE_TICKS
    strike_window_ticks: int = d.STRIKE_WINDOW_TICKS
    bump_distance_multiplier: float = d.BUMP_DISTANCE_MULTIPLIER
    chase_give_up_multiplier: float = d.CHASE_GIVE_UP_MULTIPLIER
    commitment_ticks: int = d.COMMITMENT_TICKS
    abandon_cooldown_ticks: int = d.ABANDON_COOLDOWN_TICKS
    target_switch_margin: float = d.TARGET_SWITCH_MARGIN
    feeding_ticks: int = d.FEEDING_TICKS
    migration_speed_multiplier: float = d.MIGRATION_SPEED_MULTIPLIER
    wary_ticks: int = d.WARY_TICKS
    wary_interest_penalty: float = d.WARY_INTEREST_PENALTY
    wary_strike_multiplier: float = d.WARY_STRIKE_MULTIPLIER
    wary_detection_multiplier: float = d.WARY_DETECTION_MULTIPLIER
    frenzy_enabled: bool = d.FRENZY_ENABLED
    frenzy_radius: float = d.FRENZY_RADIUS
    frenzy_join_chance: float = d.FRENZY_JOIN_CHANCE
    frenzy_base_ticks: int = d.FRENZY_BASE_TICKS
    frenzy_duration_per_neighbor: float = d.FRENZY_DURATION_PER_NEIGHBOR
    frenzy_intensity_per_neighbor: float = d.FRENZY_INTENSITY_PER_NEIGHBOR
    frenzy_interest_bonus: float = d.FRENZY_INTEREST_BONUS
    frenzy_max_extra_strikes: int = d.FRENZY_MAX_EXTRA_STRIKES
    frenzy_target_bonus: float = d.FRENZY_TARGET_BONUS
    ambush_radius: float = d.AMBUSH_RADIUS
    ambush_return_speed: float = d.AMBUSH_RETURN_SPEED
    chase_speed_multiplier: float = d.CHASE_SPEED_MULTIPLIER
    ambush_chase_speed_multiplier: float = d.AMBUSH_CHASE_SPEED_MULTIPLIER
    investigate_speed_multiplier: float = d.INVESTIGATE_SPEED_MULTIPLIER
    hunt_speed_multiplier: float = d.HUNT_SPEED_MULTIPLIER
    idle_speed_multiplier: float = d.IDLE_SPEED_MULTIPLIER
    depth_seek_rate: float = d.DEPTH_SEEK_RATE
    interest_rise_rate: float = d.INTEREST_RISE_RATE
    interest_decay_rate: float = d.INTEREST_DECAY_RATE
    style_strike_multipliers: Dict[str, float] = field(
        default_factory=_dict_factory(d.STYLE_STRIKE_MULTIPLIERS)
    )
    hunger_interval_ticks: int = d.HUNGER_INTERVAL_TICKS
    starving_hunger: float = d.STARVING_HUNGER
    starvation_damage: float = d.STARVATION_DAMAGE
    well_fed_hunger: float = d.WELL_FED_HUNGER
    recovery_amount: float = d.RECOVERY_AMOUNT

    def validate(self) -> None:
        if not 0.0 <= self.feeding_threshold <= 100.0:
            raise ConfigurationError("feeding_threshold must be within [0, 100]")
        for name in (
            "interest_patience_ticks",
            "strike_window_ticks",
            "commitment_ticks",
            "abandon_cooldown_ticks",
            "feeding_ticks",
            "wary_ticks",
            "frenzy_base_ticks",
            "frenzy_max_extra_strikes",
        ):
            if getattr(self, name) < 0:
                raise ConfigurationError(f"{name} must be non-negative")
        if self.hunger_interval_ticks <= 0:
            raise ConfigurationError("hunger_interval_ticks must be positive")
        if not 0.0 <= self.frenzy_join_chance <= 1.0:
            raise ConfigurationError("frenzy_join_chance must be within [0, 1]")
        if self.frenzy_radius < 0.0:
            raise ConfigurationError("frenzy_radius must be non-negative")


@dataclass
class FlockConfig:
    """Schooling controller tuning (species supply radii and base weights)."""

    update_interval_ticks: int = d.FLOCK_UPDATE_INTERVAL_TICKS
    alignment_factor: float = d.ALIGNMENT_FACTOR
    cohesion_factor: float = d.COHESION_FACTOR
    panic_separation_multiplier: float = d.PANIC_SEPARATION_MULTIPLIER
    panic_cohesion_multiplier: float = d.PANIC_COHESION_MULTIPLIER
    panic_ticks: int = d.PANIC_TICKS
    flee_weight: float = d.FLEE_WEIGHT
    flee_strength: float = d.FLEE_STRENGTH
    food_weight: float = d.FOOD_WEIGHT
    food_sight_radius: float = d.FOOD_SIGHT_RADIUS
    boundary_margin: float = d.BOUNDARY_MARGIN
    boundary_force: float = d.BOUNDARY_FORCE
    damping: float = d.VELOCITY_DAMPING
    wander_strength: float = d.WANDER_STRENGTH

    def validate(self) -> None:
        if self.update_interval_ticks < 1:
            raise ConfigurationError("update_interval_ticks must be at least 1")
        if not 0.0 < self.food_weight < self.flee_weight:
            raise ConfigurationError(
                f"food_weight ({self.food_weight}) must be positive and below "
                f"flee_weight ({self.flee_weight})"
            )
        if self.panic_cohesion_multiplier >= 1.0 or self.panic_separation_multiplier <= 1.0:
            raise ConfigurationError("panic must raise separation and lower cohesion")
        if not 0.0 < self.damping <= 1.0:
            raise ConfigurationError("damping must be within (0, 1]")


@dataclass
class FoodChainConfig:
    sighting_interval_ticks: int = d.SIGHTING_INTERVAL_TICKS
    migration_timeout_ticks: int = d.MIGRATION_TIMEOUT_TICKS
    excess_nutrition_heal_ratio: float = d.EXCESS_NUTRITION_HEAL_RATIO
    prey_hunger_interval_ticks: int = d.PREY_HUNGER_INTERVAL_TICKS
    prey_hunger_rate: float = d.PREY_HUNGER_RATE

    def validate(self) -> None:
        if self.sighting_interval_ticks < 1 or self.prey_hunger_interval_ticks < 1:
            raise ConfigurationError("food chain intervals must be at least 1 tick")
        if self.migration_timeout_ticks < 1:
            raise ConfigurationError("migration_timeout_ticks must be at least 1")


@dataclass
class FightConfig:
    """Line tension and stamina contest tuning."""

    max_tension: float = d.MAX_LINE_TENSION
    break_threshold: float = d.TENSION_BREAK_THRESHOLD
    min_danger_margin: float = d.MIN_DANGER_MARGIN
    initial_tension: float = d.INITIAL_TENSION
    tension_decay: float = d.TENSION_DECAY
    tension_per_reel: float = d.TENSION_PER_REEL
    min_reel_interval_ticks: int = d.MIN_REEL_INTERVAL_TICKS
    resistance_base: float = d.RESISTANCE_BASE
    tire_rate: float = d.TIRE_RATE
    reel_distance: float = d.REEL_DISTANCE
    landing_line_out: float = d.LANDING_LINE_OUT
    drag_setting: float = d.DRAG_SETTING
    max_drag_lb: float = d.MAX_DRAG_LB
    reeling_drag_multiplier: float = d.REELING_DRAG_MULTIPLIER
    drag_slip_ft: float = d.DRAG_SLIP_FT
    drag_slip_relief: float = d.DRAG_SLIP_RELIEF
    spool_capacity_ft: float = d.SPOOL_CAPACITY_FT
    line_test_lb: float = d.LINE_TEST_LB
    rated_line_test_lb: float = d.RATED_LINE_TEST_LB
    stamina_class_multipliers: Dict[str, float] = field(
        default_factory=_dict_factory(d.STAMINA_CLASS_MULTIPLIERS)
    )
    hookset_ticks: int = d.HOOKSET_TICKS
    thrash_interval_ticks: int = d.THRASH_INTERVAL_TICKS
    thrash_interval_jitter: int = d.THRASH_INTERVAL_JITTER
    thrash_duration_ticks: int = d.THRASH_DURATION_TICKS
    thrash_duration_jitter: int = d.THRASH_DURATION_JITTER
    giving_up_stamina: float = d.GIVING_UP_STAMINA
    phase_resistance_multipliers: Dict[str, float] = field(
        default_factory=_dict_factory(d.PHASE_RESISTANCE_MULTIPLIERS)
    )
    hook_spit_enabled: bool = True
    hook_spit_chance_by_size: Dict[str, float] = field(
        default_factory=_dict_factory(d.HOOK_SPIT_CHANCE_BY_SIZE)
    )
    hookset_quality_multipliers: Dict[str, float] = field(
        default_factory=_dict_factory(d.HOOKSET_QUALITY_MULTIPLIERS)
    )

    def validate(self) -> None:
        if self.min_danger_margin <= 0.0:
            raise ConfigurationError("min_danger_margin must be positive")
        if not 0.0 < self.break_threshold <= self.max_tension - self.min_danger_margin:
            raise ConfigurationError(
                "break_threshold must sit below max_tension to leave a danger margin"
            )
        if not 0.0 <= self.initial_tension < self.break_threshold:
            raise ConfigurationError("initial_tension must start below break_threshold")
        if self.min_reel_interval_ticks < 1:
            raise ConfigurationError("min_reel_interval_ticks must be at least 1")
        missing = {"low", "medium", "high", "very_high"} - set(self.stamina_class_multipliers)
        if missing:
            raise ConfigurationError(f"stamina_class_multipliers missing {sorted(missing)}")
        if not 0.0 <= self.drag_setting <= 100.0:
            raise ConfigurationError("drag_setting must be within [0, 100]")
        if not 0.0 < self.drag_slip_relief <= 1.0:
            raise ConfigurationError("drag_slip_relief must be within (0, 1]")
        for name in ("max_drag_lb", "spool_capacity_ft", "line_test_lb", "rated_line_test_lb"):
            if getattr(self, name) <= 0.0:
                raise ConfigurationError(f"{name} must be positive")


@dataclass
class FoodSpawnConfig:
    """Automatic plankton replenishment."""

    enabled: bool = d.AUTO_FOOD_ENABLED
    min_resources: int = d.AUTO_FOOD_MIN_RESOURCES
    spawn_interval_ticks: int = d.AUTO_FOOD_SPAWN_INTERVAL_TICKS
    cluster_size: int = d.AUTO_FOOD_CLUSTER_SIZE
    cluster_spread: float = d.FOOD_CLUSTER_SPREAD
    species: str = d.FOOD_SPECIES

    def validate(self) -> None:
        if self.spawn_interval_ticks < 1:
            raise ConfigurationError("spawn_interval_ticks must be at least 1")


@dataclass
class SimulationConfig:
    """All tuning for one simulation run."""

    world: WorldConfig = field(default_factory=WorldConfig)
    population: PopulationConfig = field(default_factory=PopulationConfig)
    decision: DecisionConfig = field(default_factory=DecisionConfig)
    flock: FlockConfig = field(default_factory=FlockConfig)
    food_chain: FoodChainConfig = field(default_factory=FoodChainConfig)
    fight: FightConfig = field(default_factory=FightConfig)
    food_spawn: FoodSpawnConfig = field(default_factory=FoodSpawnConfig)

    def validate(self) -> "SimulationConfig":
        """Validate every section, raising ConfigurationError on the first problem."""
        for section in (
            self.world,
            self.population,
            self.decision,
            self.flock,
            self.food_chain,
            self.fight,
            self.food_spawn,
        ):
            section.validate()
        return self
