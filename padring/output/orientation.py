"""
Cell orientation per die location.

Pad cells are drawn facing south (pad opening at y = 0). On the other sides
they are rotated so the opening faces the die edge; a flipped pad is
mirrored along its side. Corner cells are drawn for the south-west corner
and mirrored into the other three.
"""

from enum import Enum
from typing import Tuple
import math

from ..layout.items import ItemKind, PlacementItem


class Orientation(Enum):
    """DEF orientations as (rotation in degrees, mirror about x before rotating)."""
    N = (0, False)
    W = (90, False)
    S = (180, False)
    E = (270, False)
    FS = (0, True)
    FW = (90, True)
    FN = (180, True)
    FE = (270, True)

    @property
    def rotation(self) -> int:
        return self.value[0]

    @property
    def x_reflection(self) -> bool:
        return self.value[1]

    def transform(self, x: float, y: float) -> Tuple[float, float]:
        """Apply the orientation to a point in cell coordinates."""
        if self.x_reflection:
            y = -y
        rad = math.radians(self.rotation)
        cos_r, sin_r = round(math.cos(rad)), round(math.sin(rad))
        return (x * cos_r - y * sin_r, x * sin_r + y * cos_r)


SIDE_ORIENTATION = {
    "S": (Orientation.N, Orientation.FN),
    "N": (Orientation.S, Orientation.FS),
    "W": (Orientation.E, Orientation.FW),
    "E": (Orientation.W, Orientation.FE),
}

CORNER_ORIENTATION = {
    "SW": Orientation.N,
    "SE": Orientation.FN,
    "NW": Orientation.FS,
    "NE": Orientation.S,
}


def item_orientation(item: PlacementItem) -> Orientation:
    if item.kind == ItemKind.CORNER:
        return CORNER_ORIENTATION[item.location]
    normal, flipped = SIDE_ORIENTATION[item.location]
    return flipped if item.flipped else normal


def cell_dimensions(item: PlacementItem) -> Tuple[float, float]:
    """Unrotated cell width and height (LEF SIZE)."""
    if item.cell is not None:
        return item.cell.size_x, item.cell.size_y
    return item.size, max(item.other_size, 0.0)


def placement_origin(item: PlacementItem) -> Tuple[float, float, Orientation]:
    """
    Where to put the cell origin so the oriented cell covers the footprint.

    Returns (x, y, orientation). The cell is assumed to span
    [0, width] x [0, height] in its own coordinates.
    """
    orientation = item_orientation(item)
    width, height = cell_dimensions(item)
    corners = [orientation.transform(cx, cy)
               for cx, cy in ((0, 0), (width, 0), (width, height), (0, height))]
    min_x = min(c[0] for c in corners)
    min_y = min(c[1] for c in corners)
    fx0, fy0, _, _ = item.footprint()
    return (fx0 - min_x, fy0 - min_y, orientation)
