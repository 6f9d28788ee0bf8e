"""Bundled species table for a cold, deep northern lake.

Plain data in the shape the catalog validates. Speeds are world units per
tick, ranges are world units, depths are feet, weights are pounds.
"""

from typing import Any, Dict

SPECIES_DATA: Dict[str, Dict[str, Any]] = {
    # ------------------------------------------------------------------
    # Base of the food chain
    # ------------------------------------------------------------------
    "zooplankton": {
        "name": "Zooplankton",
        "kind": "food",
        "behavior_style": "schooling_only",
        "aggressiveness": 0.0,
        "weight_range": (0.001, 0.001),
        "lifespan_ticks": 1800,
        "speed": {"base": 0.2, "panic": 0.2, "burst": 0.2},
        "schooling": {"enabled": False},
        "diet": {
            "categories": ["zooplankton", "plankton"],
            "eaten_by": ["bait", "yellow_perch"],
            "nutrition_value": 4.0,
        },
        "depth_range": {"min_ft": 10.0, "max_ft": 120.0},
    },
    # ------------------------------------------------------------------
    # Baitfish
    # ------------------------------------------------------------------
    "alewife": {
        "name": "Alewife",
        "kind": "prey",
        "behavior_style": "schooling_only",
        "weight_range": (0.05, 0.2),
        "speed": {"base": 2.2, "panic": 4.5, "burst": 4.5},
        "vision": {"horizontal_range": 90.0, "vertical_range": 60.0},
        "schooling": {
            "separation_radius": 15.0,
            "alignment_radius": 40.0,
            "cohesion_radius": 60.0,
            "separation_weight": 1.5,
            "alignment_weight": 1.0,
            "cohesion_weight": 1.0,
            "threat_radius": 140.0,
        },
        "diet": {
            "categories": ["bait", "baitfish"],
            "can_eat": ["zooplankton"],
            "nutrition_value": 12.0,
            "consumption_range": 6.0,
        },
        "depth_range": {"min_ft": 20.0, "max_ft": 120.0},
    },
    "rainbow_smelt": {
        "name": "Rainbow Smelt",
        "kind": "prey",
        "behavior_style": "schooling_only",
        "weight_range": (0.05, 0.25),
        "speed": {"base": 2.0, "panic": 4.0, "burst": 4.0},
        "vision": {"horizontal_range": 80.0, "vertical_range": 60.0},
        # Tight baitball
        "schooling": {
            "separation_radius": 12.0,
            "alignment_radius": 35.0,
            "cohesion_radius": 50.0,
            "separation_weight": 2.0,
            "alignment_weight": 1.2,
            "cohesion_weight": 1.0,
            "threat_radius": 130.0,
        },
        "diet": {
            "categories": ["bait", "baitfish"],
            "can_eat": ["zooplankton"],
            "nutrition_value": 16.0,
            "consumption_range": 6.0,
        },
        "depth_range": {"min_ft": 30.0, "max_ft": 140.0},
    },
    "cisco": {
        "name": "Cisco",
        "kind": "prey",
        "behavior_style": "schooling_only",
        "weight_range": (0.3, 1.5),
        "speed": {"base": 2.5, "panic": 5.0, "burst": 5.0},
        "vision": {"horizontal_range": 100.0, "vertical_range": 80.0},
        # Loose open-water school
        "schooling": {
            "separation_radius": 25.0,
            "alignment_radius": 60.0,
            "cohesion_radius": 80.0,
            "separation_weight": 1.2,
            "alignment_weight": 1.0,
            "cohesion_weight": 0.8,
            "threat_radius": 160.0,
        },
        "diet": {
            "categories": ["bait", "coregonid"],
            "can_eat": ["zooplankton"],
            "nutrition_value": 18.0,
            "consumption_range": 7.0,
        },
        "depth_range": {"min_ft": 60.0, "max_ft": 150.0},
    },
    "emerald_shiner": {
        "name": "Emerald Shiner",
        "kind": "prey",
        "behavior_style": "schooling_only",
        "weight_range": (0.02, 0.1),
        "speed": {"base": 2.0, "panic": 4.0, "burst": 4.0},
        "vision": {"horizontal_range": 80.0, "vertical_range": 50.0},
        "schooling": {
            "separation_radius": 20.0,
            "alignment_radius": 50.0,
            "cohesion_radius": 70.0,
            "separation_weight": 1.3,
            "alignment_weight": 1.0,
            "cohesion_weight": 0.9,
            "threat_radius": 120.0,
        },
        "diet": {
            "categories": ["bait", "baitfish"],
            "can_eat": ["zooplankton"],
            "nutrition_value": 10.0,
            "consumption_range": 6.0,
        },
        "depth_range": {"min_ft": 5.0, "max_ft": 60.0},
    },
    # Solitary bottom dweller, only lake trout go after it
    "slimy_sculpin": {
        "name": "Slimy Sculpin",
        "kind": "prey",
        "behavior_style": "schooling_only",
        "weight_range": (0.02, 0.08),
        "speed": {"base": 1.0, "panic": 2.5, "burst": 2.5},
        "schooling": {"enabled": False, "threat_radius": 80.0},
        "diet": {
            "categories": ["sculpin"],
            "can_eat": ["zooplankton"],
            "eaten_by": ["lake_trout"],
            "nutrition_value": 8.0,
            "consumption_range": 5.0,
        },
        "depth_range": {"min_ft": 90.0, "max_ft": 150.0},
    },
    # ------------------------------------------------------------------
    # Gamefish
    # ------------------------------------------------------------------
    # Both predator and prey: spawned as a school it feeds the big fish,
    # spawned as a predator it chases the lure.
    "yellow_perch": {
        "name": "Yellow Perch",
        "kind": "predator",
        "behavior_style": "opportunistic",
        "aggressiveness": 0.6,
        "interest_threshold": 0.55,
        "optimal_lure_speed": 1.5,
        "speed_tolerance": 1.5,
        "strike_distance": 20.0,
        "stamina_class": "low",
        "weight_range": (0.2, 1.5),
        "hunger_rate": 1.2,
        "metabolism": 0.8,
        "speed": {"base": 1.4, "panic": 3.0, "burst": 3.0},
        "vision": {"horizontal_range": 120.0, "vertical_range": 150.0},
        "schooling": {
            "separation_radius": 40.0,
            "alignment_radius": 70.0,
            "cohesion_radius": 100.0,
            "separation_weight": 1.0,
            "alignment_weight": 0.8,
            "cohesion_weight": 0.6,
            "threat_radius": 120.0,
        },
        "diet": {
            "categories": ["perch", "panfish"],
            "can_eat": ["zooplankton", "bait"],
            "eaten_by": ["northern_pike", "smallmouth_bass", "lake_trout"],
            "nutrition_value": 20.0,
            "preferences": {"bait": 0.8, "zooplankton": 0.3},
            "consumption_range": 8.0,
        },
        "depth_range": {"min_ft": 10.0, "max_ft": 60.0},
    },
    "smallmouth_bass": {
        "name": "Smallmouth Bass",
        "kind": "predator",
        "behavior_style": "pursuit",
        "aggressiveness": 0.7,
        "interest_threshold": 0.5,
        "optimal_lure_speed": 2.0,
        "speed_tolerance": 2.0,
        "strike_distance": 25.0,
        "stamina_class": "high",
        "weight_range": (1.0, 6.0),
        "hunger_rate": 1.5,
        "metabolism": 1.0,
        "speed": {"base": 1.6, "panic": 3.5, "burst": 3.5},
        "vision": {"horizontal_range": 150.0, "vertical_range": 250.0},
        "schooling": {"enabled": False},
        "diet": {
            "categories": ["bass"],
            "can_eat": ["crayfish", "bait", "perch"],
            "nutrition_value": 30.0,
            "preferences": {"bait": 0.7, "perch": 0.9},
            "consumption_range": 8.0,
        },
        "depth_range": {"min_ft": 10.0, "max_ft": 60.0},
    },
    "northern_pike": {
        "name": "Northern Pike",
        "kind": "predator",
        "behavior_style": "ambush",
        "aggressiveness": 0.8,
        "interest_threshold": 0.5,
        "optimal_lure_speed": 2.5,
        "speed_tolerance": 2.5,
        "strike_distance": 30.0,
        "stamina_class": "medium",
        "weight_range": (3.0, 20.0),
        "hunger_rate": 1.0,
        "metabolism": 1.2,
        "speed": {"base": 1.2, "panic": 4.0, "burst": 4.0},
        "vision": {"horizontal_range": 180.0, "vertical_range": 200.0},
        "schooling": {"enabled": False},
        "diet": {
            "categories": ["pike"],
            "can_eat": ["bait", "perch", "bass"],
            "nutrition_value": 40.0,
            "preferences": {"perch": 1.0, "bait": 0.6},
            "consumption_range": 10.0,
        },
        "depth_range": {"min_ft": 5.0, "max_ft": 40.0},
    },
    "lake_trout": {
        "name": "Lake Trout",
        "kind": "predator",
        "behavior_style": "pursuit",
        "aggressiveness": 0.6,
        "interest_threshold": 0.55,
        "optimal_lure_speed": 2.0,
        "speed_tolerance": 2.0,
        "strike_distance": 25.0,
        "stamina_class": "very_high",
        "weight_range": (3.0, 25.0),
        "hunger_rate": 0.8,
        "metabolism": 1.2,
        "speed": {"base": 1.5, "panic": 3.0, "burst": 3.0},
        "vision": {"horizontal_range": 180.0, "vertical_range": 280.0},
        "schooling": {"enabled": False},
        "diet": {
            "categories": ["salmonid", "trout"],
            "can_eat": ["bait", "coregonid"],
            "nutrition_value": 45.0,
            "preferences": {"coregonid": 1.0, "bait": 0.8},
            "consumption_range": 9.0,
        },
        "depth_range": {"min_ft": 40.0, "max_ft": 150.0},
    },
}
