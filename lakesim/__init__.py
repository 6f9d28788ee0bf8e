"""Behavioral core of a predator/prey angling game.

This package contains the pure simulation logic with no rendering, input
or persistence dependencies. Key modules include:

- simulation: SimulationEngine, the tick orchestrator and command inbox
- registry: arena storage for organisms and schools
- systems: flocking, food chain, predator decisions, fight, food spawning
- config: tuning dataclasses, depth zones and the species catalog
- events: outbound domain events and the event queue
- snapshots: sonar views and predator state serialization

Design note: this module exposes a small, explicit public API via ``__all__``.
"""

from lakesim.config import SimulationConfig, SpeciesCatalog, default_catalog
from lakesim.entities import Lure, Predator, SizeClass
from lakesim.events import EventQueue
from lakesim.simulation import SimulationEngine, TickResult
from lakesim.state_machine import BehaviorState, FightState

__version__ = "0.1.0"

__all__ = [
    "BehaviorState",
    "EventQueue",
    "FightState",
    "Lure",
    "Predator",
    "SimulationConfig",
    "SimulationEngine",
    "SizeClass",
    "SpeciesCatalog",
    "TickResult",
    "default_catalog",
]
