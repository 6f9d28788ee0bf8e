"""lakesim exception hierarchy.

Centralised base classes so callers can catch narrowly. Under normal
operation none of these escape ``SimulationEngine.step()``; they signal
programming or configuration mistakes made by collaborators.
"""


class LakeSimError(Exception):
    """Root of all lakesim domain exceptions."""


class SimulationError(LakeSimError):
    """Errors during simulation execution (engine, systems, organisms)."""


class RegistryError(SimulationError):
    """An organism registry failure (double registration, bad handle)."""


class SnapshotError(LakeSimError):
    """Errors while encoding or decoding predator snapshots."""


class ConfigurationError(LakeSimError):
    """Invalid or missing configuration."""
