"""Simulation systems package.

Each component pass of a tick is a system with a single responsibility,
following the BaseSystem contract and declaring its UpdatePhase.

System Execution Order
======================

```
REGISTRY    apply input, spawns, aging, plankton expiry   (engine)
FLOCKING    FlockController: schooling prey move
FOOD_CHAIN  FoodChainResolver: meals, sightings, migration pressure
DECISION    PredatorDecisionEngine: state machines, predator movement
FIGHT       FightResolver: tension/stamina contest for the hooked fish
SPAWN       FoodSpawningSystem: plankton replenishment
```

Deferred registry mutations are applied between every pair of passes.

Why This Order Matters
----------------------
1. **FLOCKING before FOOD_CHAIN**: prey pick their food target before meals resolve.
2. **FOOD_CHAIN before DECISION**: a predator sees its meal (and any migration
   signal) in the same tick it happens.
3. **DECISION before FIGHT**: a hookset begins the fight, which ticks the same frame.
4. **SPAWN last**: count what was eaten before deciding to replenish.
"""

from lakesim.systems.base import BaseSystem, SystemResult
from lakesim.systems.fight import (
    FightOutcome,
    FightPhase,
    FightResolver,
    FightSession,
    HooksetQuality,
)
from lakesim.systems.flocking import FlockController
from lakesim.systems.food_chain import FoodChainResolver
from lakesim.systems.food_spawning import FoodSpawningSystem
from lakesim.systems.predator_ai import PredatorDecisionEngine

__all__ = [
    "BaseSystem",
    "FightOutcome",
    "FightPhase",
    "FightResolver",
    "FightSession",
    "FlockController",
    "FoodChainResolver",
    "FoodSpawningSystem",
    "HooksetQuality",
    "PredatorDecisionEngine",
    "SystemResult",
]
