"""Default tuning values for the lake simulation.

Every value here is balance data, not structure: the dataclasses in
``lakesim.config.simulation_config`` read these as defaults and callers may
override any of them. Units are world units (1 foot = ``DEPTH_SCALE``
units) and ticks (``FRAME_RATE`` ticks per simulated second).
"""

# =============================================================================
# WORLD
# =============================================================================
FRAME_RATE = 60
WORLD_WIDTH = 1600.0
MAX_DEPTH_FT = 150.0
DEPTH_SCALE = 4.0  # world units per foot
SURFACE_MARGIN_FT = 0.5  # Schooling prey never breach the surface
FLOOR_MARGIN_FT = 3.0  # ...or bury themselves in the lake floor
MIGRATION_EXIT_MARGIN = 60.0  # How far past the edge a migrant must swim
SPATIAL_CELL_SIZE = 100.0

# =============================================================================
# POPULATION CAPS
# =============================================================================
MAX_PREDATORS = 40
MAX_SCHOOL_MEMBERS = 600
MAX_FOOD_RESOURCES = 800

# =============================================================================
# PREDATOR DECISIONS
# =============================================================================
# Hunger strictly above this makes a predator hunt prey instead of the lure
FEEDING_THRESHOLD = 60.0

# Interest score weights
INTEREST_SPEED_WEIGHT = 0.6
INTEREST_DEPTH_WEIGHT = 0.25
INTEREST_RETRIEVE_WEIGHT = 0.15
INTEREST_RANDOM_WEIGHT = 0.3
INTEREST_PATIENCE_TICKS = 90  # Speed mismatch tolerated before giving up

STRIKE_WINDOW_TICKS = 30  # Half a second to set the hook
BUMP_DISTANCE_MULTIPLIER = 2.0
CHASE_GIVE_UP_MULTIPLIER = 1.5  # Chase abandoned beyond this x detection range

# Hunting commitment
COMMITMENT_TICKS = 180
ABANDON_COOLDOWN_TICKS = 300
TARGET_SWITCH_MARGIN = 0.15
FEEDING_TICKS = 30

# Migration
MIGRATION_TIMEOUT_TICKS = 600  # Ten seconds without a prey sighting
MIGRATION_SPEED_MULTIPLIER = 2.0

# Post-escape caution
WARY_TICKS = 600
WARY_INTEREST_PENALTY = 0.3
WARY_STRIKE_MULTIPLIER = 0.6
WARY_DETECTION_MULTIPLIER = 0.7

# Frenzy feeding: idle fish near excited fish pile in
FRENZY_ENABLED = True
FRENZY_RADIUS = 450.0
FRENZY_JOIN_CHANCE = 0.75
FRENZY_BASE_TICKS = 180
FRENZY_DURATION_PER_NEIGHBOR = 0.15
FRENZY_INTENSITY_PER_NEIGHBOR = 0.3
FRENZY_INTEREST_BONUS = 0.3  # Scaled by intensity
FRENZY_MAX_EXTRA_STRIKES = 2
FRENZY_TARGET_BONUS = 0.5  # Prey score bonus for the school the frenzy is on

# Ambush holding
AMBUSH_RADIUS = 50.0
AMBUSH_RETURN_SPEED = 0.3

# Movement multipliers by state
CHASE_SPEED_MULTIPLIER = 1.8
AMBUSH_CHASE_SPEED_MULTIPLIER = 1.2
INVESTIGATE_SPEED_MULTIPLIER = 0.7
HUNT_SPEED_MULTIPLIER = 2.0
IDLE_SPEED_MULTIPLIER = 0.5
DEPTH_SEEK_RATE = 0.02

# Visual interest (sonar flash intensity)
INTEREST_RISE_RATE = 0.1
INTEREST_DECAY_RATE = 0.03

# Behavior style strike distance multipliers
STYLE_STRIKE_MULTIPLIERS = {
    "ambush": 1.6,
    "pursuit": 1.0,
    "opportunistic": 1.1,
    "schooling_only": 1.0,
}

# =============================================================================
# BIOLOGY
# =============================================================================
HUNGER_INTERVAL_TICKS = 120
STARVING_HUNGER = 85.0
STARVATION_DAMAGE = 0.4
WELL_FED_HUNGER = 30.0
RECOVERY_AMOUNT = 0.25
EXCESS_NUTRITION_HEAL_RATIO = 0.5

# =============================================================================
# FLOCKING
# =============================================================================
FLOCK_UPDATE_INTERVAL_TICKS = 1
ALIGNMENT_FACTOR = 0.1
COHESION_FACTOR = 0.01
PANIC_SEPARATION_MULTIPLIER = 2.5
PANIC_COHESION_MULTIPLIER = 0.2
PANIC_TICKS = 120
FLEE_WEIGHT = 2.0
FLEE_STRENGTH = 5.0
FOOD_WEIGHT = 1.4  # Above any species alignment weight, below flee
FOOD_SIGHT_RADIUS = 80.0
BOUNDARY_MARGIN = 40.0
BOUNDARY_FORCE = 0.3
VELOCITY_DAMPING = 0.95
WANDER_STRENGTH = 0.05

# =============================================================================
# FOOD CHAIN
# =============================================================================
SIGHTING_INTERVAL_TICKS = 1
PREY_HUNGER_INTERVAL_TICKS = 240
PREY_HUNGER_RATE = 1.0

# =============================================================================
# FIGHT
# =============================================================================
MAX_LINE_TENSION = 100.0
TENSION_BREAK_THRESHOLD = 95.0
MIN_DANGER_MARGIN = 2.0  # Heavier line never pushes the break point closer to max than this
INITIAL_TENSION = 20.0
TENSION_DECAY = 2.0
TENSION_PER_REEL = 15.0
MIN_REEL_INTERVAL_TICKS = 6  # 100 ms at 60 fps
RESISTANCE_BASE = 0.5
TIRE_RATE = 0.8
REEL_DISTANCE = 5.0
LANDING_LINE_OUT = 10.0

# Reel drag and line. The drag slips when the fish pulls harder than it holds.
DRAG_SETTING = 50.0  # Percent of MAX_DRAG_LB
MAX_DRAG_LB = 25.0
REELING_DRAG_MULTIPLIER = 5.0  # Drag holds harder while the angler cranks
DRAG_SLIP_FT = 0.5  # Line paid out per tick when the pull fully beats the drag
DRAG_SLIP_RELIEF = 0.8  # Fraction of tension kept on a slipping tick
SPOOL_CAPACITY_FT = 300.0
LINE_TEST_LB = 15.0
RATED_LINE_TEST_LB = 15.0  # Line test the break threshold is tuned for

STAMINA_CLASS_MULTIPLIERS = {
    "low": 1.6,
    "medium": 1.0,
    "high": 0.7,
    "very_high": 0.5,
}

HOOKSET_TICKS = 180
THRASH_INTERVAL_TICKS = 300
THRASH_INTERVAL_JITTER = 120
THRASH_DURATION_TICKS = 120
THRASH_DURATION_JITTER = 60
GIVING_UP_STAMINA = 25.0

PHASE_RESISTANCE_MULTIPLIERS = {
    "hookset": 1.5,
    "fighting": 1.0,
    "thrashing": 2.0,
    "giving_up": 0.4,
}

HOOK_SPIT_CHANCE_BY_SIZE = {
    "small": 0.02,
    "medium": 0.05,
    "large": 0.10,
    "trophy": 0.15,
}

HOOKSET_QUALITY_MULTIPLIERS = {
    "barely": 2.5,
    "bad": 1.5,
    "good": 1.0,
    "great": 0.3,
}

# =============================================================================
# FOOD SPAWNING
# =============================================================================
AUTO_FOOD_ENABLED = True
AUTO_FOOD_MIN_RESOURCES = 60
AUTO_FOOD_SPAWN_INTERVAL_TICKS = 120
AUTO_FOOD_CLUSTER_SIZE = 20
FOOD_CLUSTER_SPREAD = 30.0
FOOD_SPECIES = "zooplankton"
