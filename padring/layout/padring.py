"""
Padring Model

Owns the four die sides, the die geometry and the shared corner cells, and
runs the layout of every side. The perimeter traversal it exposes is the
single order in which all writers see the ring: counter-clockwise starting
at the south-west corner.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional
import logging

from .items import (
    CORNER_LOCATIONS,
    ItemKind,
    PlacementItem,
    Side,
)
from .side import SideLayout
from ..errors import ConfigParseError, LayoutOverflow, MissingDieGeometry

logger = logging.getLogger(__name__)

# Smallest die extent accepted (microns)
MIN_DIE_SIZE = 1.0e-6

# (first corner, last corner) of each side, in layout direction
SIDE_CORNERS = {
    Side.NORTH: ("NW", "NE"),
    Side.SOUTH: ("SW", "SE"),
    Side.EAST: ("SE", "NE"),
    Side.WEST: ("SW", "NW"),
}

# Fixed order in which sides are laid out
LAYOUT_ORDER = (Side.NORTH, Side.SOUTH, Side.EAST, Side.WEST)

# Counter-clockwise perimeter: each side preceded by the corner it starts at
PERIMETER_ORDER = (
    ("SW", Side.SOUTH),
    ("SE", Side.EAST),
    ("NE", Side.NORTH),
    ("NW", Side.WEST),
)


@dataclass
class PadringModel:
    """
    Padring database: die geometry, four sides and four corners.

    Fillers are not part of the model; the gap filler produces them from
    the resolved sides.
    """
    design_name: str = "padring"
    die_width: float = 0.0  # microns
    die_height: float = 0.0
    grid: float = 1.0

    # Filler prefixes active before the first filler declaration
    fillers: List[str] = field(default_factory=list)

    sides: Dict[Side, SideLayout] = field(default_factory=dict)
    corners: Dict[str, PlacementItem] = field(default_factory=dict)

    def __post_init__(self):
        for side in Side:
            if side not in self.sides:
                self.sides[side] = SideLayout(side, self.grid)
        self._instances = set()

    # --- accessors ---

    @property
    def north(self) -> SideLayout:
        return self.sides[Side.NORTH]

    @property
    def south(self) -> SideLayout:
        return self.sides[Side.SOUTH]

    @property
    def east(self) -> SideLayout:
        return self.sides[Side.EAST]

    @property
    def west(self) -> SideLayout:
        return self.sides[Side.WEST]

    def get_side(self, side: Side) -> SideLayout:
        return self.sides[side]

    def get_corner(self, location: str) -> Optional[PlacementItem]:
        return self.corners.get(location)

    def get_pad_cell_count(self) -> int:
        """Number of cells and bonds over all sides (corners excluded)."""
        return sum(
            1
            for side in self.sides.values()
            for item in side
            if item.kind in (ItemKind.CELL, ItemKind.BOND)
        )

    def instance_names(self) -> set:
        return set(self._instances)

    # --- construction ---

    def _register_instance(self, name: str):
        if not name:
            return
        if name in self._instances:
            raise ConfigParseError(f"Duplicate instance name '{name}'")
        self._instances.add(name)

    def set_die_size(self, width: float, height: float):
        self.die_width = width
        self.die_height = height

    def set_grid(self, grid: float):
        self.grid = grid
        for side in self.sides.values():
            side.set_grid(grid)

    def set_corner(self, corner: PlacementItem):
        """Register a corner cell under its location tag (NW, NE, SW, SE)."""
        if corner.location not in CORNER_LOCATIONS:
            raise ConfigParseError(f"Unknown corner location '{corner.location}'")
        if corner.location in self.corners:
            raise ConfigParseError(f"Corner {corner.location} defined twice")
        self._register_instance(corner.instance)
        self.corners[corner.location] = corner

    def add_item(self, side: Side, item: PlacementItem):
        """Add a configuration item to the end of a side."""
        self._register_instance(item.instance)
        item.location = side.value
        self.sides[side].add_item(item)

    # --- layout ---

    def validate_die_geometry(self):
        if self.die_width < MIN_DIE_SIZE or self.die_height < MIN_DIE_SIZE:
            raise MissingDieGeometry(
                f"Die area was not specified or is too small "
                f"({self.die_width:g} x {self.die_height:g} microns)"
            )

    def _wire_corners(self):
        for side, (first, last) in SIDE_CORNERS.items():
            layout = self.sides[side]
            layout.set_first_corner(self.corners.get(first))
            layout.set_last_corner(self.corners.get(last))

    def do_layout(self):
        """
        Lay out all four sides.

        Edge positions are stamped on every side before any side is laid
        out, so each corner ends up at the lower-left vertex of its cell:
        its coordinate across one side comes from the neighbouring side's
        layout walk.

        Raises:
            MissingDieGeometry: die width or height not set.
            LayoutOverflow: any side does not fit or does not close.
        """
        self.validate_die_geometry()

        for location in CORNER_LOCATIONS:
            if location not in self.corners:
                logger.warning(f"No {location} corner defined, corner space is left empty")

        self.north.set_die_size(self.die_width)
        self.south.set_die_size(self.die_width)
        self.east.set_die_size(self.die_height)
        self.west.set_die_size(self.die_height)

        for layout in self.sides.values():
            layout.set_grid(self.grid)

        self._wire_corners()

        self.north.set_edge_pos(self.die_height)
        self.south.set_edge_pos(0.0)
        self.east.set_edge_pos(self.die_width)
        self.west.set_edge_pos(0.0)

        for side in LAYOUT_ORDER:
            layout = self.sides[side]
            try:
                layout.do_layout()
            except LayoutOverflow:
                logger.error(f"Layout of the {side.name.lower()} side failed")
                raise

    # --- enumeration ---

    def iter_side(self, side: Side) -> Iterator[PlacementItem]:
        """Items of one side in perimeter traversal order."""
        layout = self.sides[side]
        return reversed(layout) if side.is_reversed else iter(layout)

    def iter_perimeter(self, include_corners: bool = True) -> Iterator[PlacementItem]:
        """
        Every side item in one counter-clockwise pass.

        South left to right, east bottom to top, north right to left, west
        top to bottom, with each corner between the two sides it joins.
        """
        for corner_location, side in PERIMETER_ORDER:
            corner = self.corners.get(corner_location)
            if include_corners and corner is not None:
                yield corner
            yield from self.iter_side(side)
