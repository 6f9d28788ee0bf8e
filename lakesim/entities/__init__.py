"""Simulated organisms and the player lure."""

from lakesim.entities.lure import Lure
from lakesim.entities.organism import FoodResource, Organism, SchoolMember
from lakesim.entities.predator import Predator, SizeClass
from lakesim.entities.targets import (
    LURE_TARGET,
    NO_TARGET,
    LureTarget,
    MemberTarget,
    NoTarget,
    SchoolTarget,
    Target,
)

__all__ = [
    "FoodResource",
    "LURE_TARGET",
    "Lure",
    "LureTarget",
    "MemberTarget",
    "NO_TARGET",
    "NoTarget",
    "Organism",
    "Predator",
    "SchoolMember",
    "SchoolTarget",
    "SizeClass",
    "Target",
]
