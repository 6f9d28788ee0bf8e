"""Depth zones of the water column.

Fish behave differently near the surface, in open water and near the
bottom. Each zone scales speed, detection range and aggressiveness and
contributes a bonus to the lure interest score.
"""

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class DepthZone:
    """One horizontal band of the water column.

    Attributes:
        name: Zone identifier ("surface", "mid_column", "bottom")
        min_ft: Upper edge of the band in feet (inclusive)
        max_ft: Lower edge of the band in feet (exclusive, except the last zone)
        speed_multiplier: Scales predator movement speed
        aggressiveness_bonus: Added to species aggressiveness before clamping
        interest_bonus: Contribution to the lure interest score (0-1)
        detection_multiplier: Scales both axes of the detection envelope
    """

    name: str
    min_ft: float
    max_ft: float
    speed_multiplier: float
    aggressiveness_bonus: float
    interest_bonus: float
    detection_multiplier: float

    def contains(self, depth_ft: float) -> bool:
        return self.min_ft <= depth_ft < self.max_ft


SURFACE = DepthZone("surface", 0.0, 40.0, 1.3, 0.35, 1.0, 1.1)
MID_COLUMN = DepthZone("mid_column", 40.0, 100.0, 1.0, 0.1, 0.6, 1.0)
BOTTOM = DepthZone("bottom", 100.0, 150.0, 0.6, -0.1, 0.3, 0.85)

DEPTH_ZONES: Tuple[DepthZone, ...] = (SURFACE, MID_COLUMN, BOTTOM)


def zone_for_depth(depth_ft: float) -> DepthZone:
    """Return the zone containing ``depth_ft``.

    Depths above the surface map to SURFACE and anything below the last
    band maps to BOTTOM.
    """
    if depth_ft < SURFACE.max_ft:
        return SURFACE
    for zone in DEPTH_ZONES:
        if zone.contains(depth_ft):
            return zone
    return BOTTOM
