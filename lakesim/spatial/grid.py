"""Spatial indexing for neighbor queries."""

import math
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Tuple

from lakesim.config.species import OrganismKind
from lakesim.entities.organism import Organism
from lakesim.math_utils import Vector2


class SpatialGrid:
    """
    Uniform grid over the playable area for proximity queries.

    Each cell keeps per-kind buckets (predator / prey / food) so a school
    looking for threats never walks past plankton. Positions outside the
    area are clamped into the edge cells; distance filtering is exact, so
    this only costs a few extra comparisons for migrating fish.
    """

    def __init__(self, width: float, height: float, cell_size: float = 100.0) -> None:
        """
        Args:
            width: Width of the playable area in world units
            height: Depth of the water column in world units
            cell_size: Size of each grid cell
        """
        self.width = width
        self.height = height
        self.cell_size = cell_size
        self.cols = max(1, math.ceil(width / cell_size))
        self.rows = max(1, math.ceil(height / cell_size))
        self.grid: Dict[Tuple[int, int], Dict[OrganismKind, List[Organism]]] = defaultdict(
            lambda: defaultdict(list)
        )
        self._count = 0

    def _get_cell(self, x: float, y: float) -> Tuple[int, int]:
        """Get the grid cell coordinates for a position."""
        col = max(0, min(self.cols - 1, int(x // self.cell_size)))
        row = max(0, min(self.rows - 1, int(y // self.cell_size)))
        return (col, row)

    def _get_cell_range(self, x: float, y: float, radius: float) -> Tuple[int, int, int, int]:
        """Get the (min_col, max_col, min_row, max_row) range for a radius query."""
        cs = self.cell_size
        min_col = max(0, min(self.cols - 1, int((x - radius) // cs)))
        max_col = max(0, min(self.cols - 1, int((x + radius) // cs)))
        min_row = max(0, min(self.rows - 1, int((y - radius) // cs)))
        max_row = max(0, min(self.rows - 1, int((y + radius) // cs)))
        return (min_col, max_col, min_row, max_row)

    def clear(self) -> None:
        self.grid.clear()
        self._count = 0

    def add(self, organism: Organism) -> None:
        cell = self._get_cell(organism.pos.x, organism.pos.y)
        self.grid[cell][organism.kind].append(organism)
        self._count += 1

    def rebuild(self, organisms: Iterable[Organism]) -> None:
        """Re-index every organism; insertion order is preserved per cell."""
        self.clear()
        for organism in organisms:
            self.add(organism)

    def query(
        self,
        pos: Vector2,
        radius: float,
        kind: Optional[OrganismKind] = None,
    ) -> List[Organism]:
        """Live organisms within ``radius`` of ``pos`` (optionally one kind only)."""
        if radius < 0 or self._count == 0:
            return []
        min_col, max_col, min_row, max_row = self._get_cell_range(pos.x, pos.y, radius)
        radius_sq = radius * radius
        px, py = pos.x, pos.y
        found: List[Organism] = []
        grid = self.grid
        for col in range(min_col, max_col + 1):
            for row in range(min_row, max_row + 1):
                cell_map = grid.get((col, row))
                if not cell_map:
                    continue
                if kind is not None:
                    buckets = (cell_map.get(kind, ()),)
                else:
                    buckets = tuple(cell_map.values())
                for bucket in buckets:
                    for organism in bucket:
                        if not organism.alive:
                            continue
                        dx = organism.pos.x - px
                        dy = organism.pos.y - py
                        if dx * dx + dy * dy <= radius_sq:
                            found.append(organism)
        return found

    def __len__(self) -> int:
        return self._count
