"""System registration and management.

Keeps the component passes in execution order and checks that the order
matches the phases the systems declare.

Design Decisions:
-----------------
1. Systems run in registration order; ``register`` rejects a system whose
   phase would run before an already-registered later phase.

2. Systems can be enabled/disabled at runtime without removal.

3. Debug info is aggregated from all systems for observability.
"""

import logging
from typing import TYPE_CHECKING, Any, Dict, Iterator, List, Optional

from lakesim.exceptions import SimulationError
from lakesim.update_phases import UpdatePhase, get_system_phase

if TYPE_CHECKING:
    from lakesim.systems.base import BaseSystem

logger = logging.getLogger(__name__)

_PHASE_ORDER = list(UpdatePhase)


class SystemRegistry:
    """Registers and manages simulation systems.

    Example:
        registry = SystemRegistry()
        registry.register(flock_controller)
        registry.register(food_chain)

        for system in registry:
            system.update(frame)

        registry.set_enabled("Flocking", False)
    """

    def __init__(self) -> None:
        self._systems: List["BaseSystem"] = []

    def register(self, system: "BaseSystem") -> None:
        """Register a system for execution after every system already registered.

        Raises:
            SimulationError: If the system is undecorated or out of phase order
        """
        phase = get_system_phase(system)
        if phase is None:
            raise SimulationError(f"{system.name} does not declare an update phase")
        if self._systems:
            last_phase = get_system_phase(self._systems[-1])
            if _PHASE_ORDER.index(phase) < _PHASE_ORDER.index(last_phase):
                raise SimulationError(
                    f"{system.name} runs in {phase.name}, before {last_phase.name}"
                )
        self._systems.append(system)
        logger.debug("Registered system: %s (%s)", system.name, phase.name)

    def get(self, name: str) -> Optional["BaseSystem"]:
        for system in self._systems:
            if system.name == name:
                return system
        return None

    def get_all(self) -> List["BaseSystem"]:
        """All registered systems in execution order (a copy)."""
        return self._systems.copy()

    def set_enabled(self, name: str, enabled: bool) -> bool:
        """Enable or disable a system by name; False if no such system."""
        system = self.get(name)
        if system is None:
            return False
        system.enabled = enabled
        logger.debug("System %s enabled=%s", name, enabled)
        return True

    def get_debug_info(self) -> Dict[str, Any]:
        return {system.name: system.get_debug_info() for system in self._systems}

    def __len__(self) -> int:
        return len(self._systems)

    def __iter__(self) -> Iterator["BaseSystem"]:
        return iter(self._systems)

    def __repr__(self) -> str:
        system_names = [s.name for s in self._systems]
        return f"SystemRegistry(systems={system_names})"
