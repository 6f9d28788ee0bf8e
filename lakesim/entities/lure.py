"""The player's lure: the single exclusively-owned line resource."""

from typing import Optional

from lakesim.entity_ids import OrganismId
from lakesim.math_utils import Vector2


class Lure:
    """Position and motion of the lure as driven by input commands.

    Attributes:
        pos: World position
        velocity: Retrieve velocity in world units per tick
        in_water: Whether fish can see it at all
        owner: Predator currently hooked on it, or None
    """

    def __init__(self, pos: Optional[Vector2] = None) -> None:
        self.pos = pos if pos is not None else Vector2(0.0, 0.0)
        self.velocity = Vector2(0.0, 0.0)
        self.in_water = False
        self.owner: Optional[OrganismId] = None

    @property
    def speed(self) -> float:
        return self.velocity.length()

    @property
    def retrieving(self) -> bool:
        return self.in_water and self.velocity.length_squared() > 0.0

    @property
    def is_owned(self) -> bool:
        return self.owner is not None

    def drop(self, x: float, y: float) -> None:
        self.pos.update(x, y)
        self.velocity.update(0.0, 0.0)
        self.in_water = True

    def lift(self) -> None:
        self.in_water = False
        self.velocity.update(0.0, 0.0)

    def set_retrieve(self, direction: Vector2, speed: float) -> None:
        """Set the retrieve velocity; a zero direction or speed stops the lure."""
        self.velocity = direction.normalize() * max(0.0, speed)

    def advance(self, min_y: float, max_y: float) -> None:
        """Move one tick along the retrieve velocity, staying in the water column."""
        if not self.in_water or self.is_owned:
            return
        self.pos.add_inplace(self.velocity)
        if self.pos.y < min_y:
            self.pos.y = min_y
        elif self.pos.y > max_y:
            self.pos.y = max_y
