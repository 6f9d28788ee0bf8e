"""Spatial indexing for neighbor queries."""

from lakesim.spatial.grid import SpatialGrid

__all__ = ["SpatialGrid"]
