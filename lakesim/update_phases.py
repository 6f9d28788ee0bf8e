"""Update phase definitions for explicit execution ordering.

One simulation tick runs its component passes in a fixed order. The
ordering is what makes a tick deterministic: given identical inputs and
seed, every organism is visited in the same order every time.

    REGISTRY -> FLOCKING -> FOOD_CHAIN -> DECISION -> FIGHT -> SPAWN

The engine applies deferred registry mutations between every pair of
phases. Systems declare their phase with ``@runs_in_phase`` so the
engine can verify the wiring and report it in debug output.
"""

from enum import Enum, auto
from typing import TYPE_CHECKING, Callable, Dict, Optional

__all__ = [
    "UpdatePhase",
    "PHASE_DESCRIPTIONS",
    "runs_in_phase",
    "get_system_phase",
]

if TYPE_CHECKING:
    from lakesim.systems.base import BaseSystem


class UpdatePhase(Enum):
    """Phases of a simulation tick, in execution order."""

    REGISTRY = auto()  # Apply commands, spawns, aging, lifespan expiry
    FLOCKING = auto()  # Schooling prey movement
    FOOD_CHAIN = auto()  # Consumption, sightings, migration pressure
    DECISION = auto()  # Predator state machines and movement
    FIGHT = auto()  # Line tension contest
    SPAWN = auto()  # Automatic plankton replenishment


PHASE_DESCRIPTIONS: Dict[UpdatePhase, str] = {
    UpdatePhase.REGISTRY: "Applying commands and organism lifecycles",
    UpdatePhase.FLOCKING: "Moving schooling prey",
    UpdatePhase.FOOD_CHAIN: "Resolving predation and feeding",
    UpdatePhase.DECISION: "Updating predator decisions",
    UpdatePhase.FIGHT: "Resolving the active fight",
    UpdatePhase.SPAWN: "Replenishing food resources",
}


def runs_in_phase(phase: UpdatePhase) -> Callable:
    """Decorator to declare which phase a system runs in.

    Example:
        @runs_in_phase(UpdatePhase.FIGHT)
        class FightResolver(BaseSystem):
            ...
    """

    def decorator(cls):
        cls._phase = phase
        return cls

    return decorator


def get_system_phase(system: "BaseSystem") -> Optional[UpdatePhase]:
    """Get the phase a system is declared to run in."""
    return getattr(system, "_phase", None)
