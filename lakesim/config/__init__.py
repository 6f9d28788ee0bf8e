"""Configuration package for the lake simulation.

- defaults: module-level default tuning constants
- depth_zones: surface / mid-column / bottom behavior modifiers
- simulation_config: dataclass configs grouped under SimulationConfig
- species / species_data: pydantic species trait records and the bundled table
"""

from lakesim.config.depth_zones import DepthZone, zone_for_depth
from lakesim.config.simulation_config import (
    DecisionConfig,
    FightConfig,
    FlockConfig,
    FoodChainConfig,
    FoodSpawnConfig,
    PopulationConfig,
    SimulationConfig,
    WorldConfig,
)
from lakesim.config.species import (
    BehaviorStyle,
    OrganismKind,
    SpeciesCatalog,
    SpeciesTraits,
    StaminaClass,
    default_catalog,
    default_traits,
)

__all__ = [
    "BehaviorStyle",
    "DecisionConfig",
    "DepthZone",
    "FightConfig",
    "FlockConfig",
    "FoodChainConfig",
    "FoodSpawnConfig",
    "OrganismKind",
    "PopulationConfig",
    "SimulationConfig",
    "SpeciesCatalog",
    "SpeciesTraits",
    "StaminaClass",
    "WorldConfig",
    "default_catalog",
    "default_traits",
    "zone_for_depth",
]
