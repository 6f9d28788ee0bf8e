"""Detection envelope helpers shared by the food chain and decision passes.

A predator sees a box, not a circle: a horizontal range and a (usually
larger) vertical range, both scaled by the depth zone it is swimming in
and shrunk while it is wary.
"""

import math
from typing import TYPE_CHECKING, List, Optional, Tuple

from lakesim.config.depth_zones import DepthZone, zone_for_depth
from lakesim.config.species import OrganismKind
from lakesim.entities.organism import Organism
from lakesim.entities.predator import Predator
from lakesim.math_utils import Vector2

if TYPE_CHECKING:
    from lakesim.registry import OrganismRegistry


def predator_zone(predator: Predator, depth_scale: float) -> DepthZone:
    return zone_for_depth(predator.depth_ft(depth_scale))


def detection_ranges(
    predator: Predator,
    depth_scale: float,
    wary_multiplier: float = 1.0,
) -> Tuple[float, float]:
    """(horizontal, vertical) detection range for a predator right now."""
    zone = predator_zone(predator, depth_scale)
    scale = zone.detection_multiplier
    if predator.is_wary:
        scale *= wary_multiplier
    vision = predator.traits.vision
    return vision.horizontal_range * scale, vision.vertical_range * scale


def in_envelope(origin: Vector2, point: Vector2, horizontal: float, vertical: float) -> bool:
    return abs(point.x - origin.x) <= horizontal and abs(point.y - origin.y) <= vertical


def organisms_in_envelope(
    registry: "OrganismRegistry",
    origin: Vector2,
    horizontal: float,
    vertical: float,
    kind: Optional[OrganismKind] = None,
) -> List[Organism]:
    """Live organisms inside the box around ``origin``.

    The grid query uses the box diagonal so the corners are covered; the
    box test then drops whatever the circle picked up outside it.
    """
    radius = math.hypot(horizontal, vertical)
    return [
        organism
        for organism in registry.query(origin, radius, kind)
        if in_envelope(origin, organism.pos, horizontal, vertical)
    ]
