"""Pytest configuration and fixtures for lakesim tests."""

import random

import pytest

from lakesim.config.simulation_config import FoodSpawnConfig, SimulationConfig
from lakesim.config.species import default_catalog
from lakesim.entities.lure import Lure
from lakesim.events.event_queue import EventQueue
from lakesim.registry import OrganismRegistry


@pytest.fixture
def seeded_rng():
    """Provide a deterministic RNG for tests."""
    return random.Random(42)


@pytest.fixture
def catalog():
    """The bundled species catalog."""
    return default_catalog()


@pytest.fixture
def config():
    """Default configuration with automatic plankton spawning turned off."""
    return SimulationConfig(food_spawn=FoodSpawnConfig(enabled=False)).validate()


@pytest.fixture
def events():
    return EventQueue()


@pytest.fixture
def registry(config, events):
    """An empty organism registry sharing the test event queue."""
    return OrganismRegistry(config.world, config.population, events)


@pytest.fixture
def lure():
    return Lure()


@pytest.fixture
def engine(config):
    """Setup a simulation engine for testing with deterministic seed."""
    from lakesim.simulation import SimulationEngine

    return SimulationEngine(config=config, seed=42)
