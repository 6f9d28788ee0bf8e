"""RNG utilities for deterministic simulation.

Every random draw in the simulation goes through one ``random.Random``
owned by the engine. Components receive it explicitly and fail loudly when
it is missing instead of silently creating an unseeded fallback.
"""

import random
from typing import Optional

from lakesim.exceptions import SimulationError


class MissingRNGError(SimulationError):
    """Raised when an RNG is required but was not provided.

    This indicates a wiring bug: every system gets the engine's RNG.
    """


def require_rng_param(rng: Optional[random.Random], context: str) -> random.Random:
    """Validate that an RNG parameter was provided, failing loudly if not.

    Args:
        rng: The RNG that should have been provided
        context: Description of where this is called from (for error messages)

    Returns:
        The validated RNG

    Raises:
        MissingRNGError: If rng is None

    Example:
        def __init__(self, rng: Optional[random.Random] = None):
            self._rng = require_rng_param(rng, "FightResolver.__init__")
    """
    if rng is None:
        raise MissingRNGError(f"RNG required: {context}. Pass the engine RNG explicitly.")
    return rng


def roll(rng: random.Random, chance: float) -> bool:
    """Return True with probability ``chance`` (clamped to [0, 1])."""
    if chance <= 0.0:
        return False
    if chance >= 1.0:
        return True
    return rng.random() < chance
