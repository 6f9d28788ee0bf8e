"""Small shared helpers for the simulation."""

from lakesim.util.rng import MissingRNGError, require_rng_param

__all__ = [
    "MissingRNGError",
    "require_rng_param",
]
