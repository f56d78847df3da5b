"""
Placement Items

A PlacementItem is anything located on one edge of the die: pad cells,
bond pads, corners, spacers, fillers and filler declarations. The item kind
is a tagged variant; consumers dispatch on ItemKind and reject kinds they
do not know.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from ..library.cells import CellInfo

UNRESOLVED = -1.0

# Coordinates are kept in microns, rounded to remove float accumulation noise
COORD_DECIMALS = 6


def snap_coord(value: float) -> float:
    """Round a coordinate or size to the working precision."""
    return round(value, COORD_DECIMALS)


class ItemKind(Enum):
    """Kinds of placement items."""
    CELL = "cell"                # pad cell with fixed dimensions
    CORNER = "corner"            # corner cell shared by two sides
    FIXED_SPACE = "fixed_space"  # explicit gap, closed with fillers
    FLEX_SPACE = "flex_space"    # gap sized at layout time, closed with fillers
    FILLER = "filler"            # filler cell produced by the gap filler
    BOND = "bond"                # bond pad
    FILLER_DECL = "filler_decl"  # rebinds the active filler set


# Kinds that are written to the output formats
EMITTED_KINDS = {ItemKind.CELL, ItemKind.CORNER, ItemKind.BOND, ItemKind.FILLER}

# Kinds whose width is a reserved gap for the gap filler
GAP_KINDS = {ItemKind.FIXED_SPACE, ItemKind.FLEX_SPACE}


class Side(Enum):
    """Die edges. Value is the location tag used in configs and reports."""
    NORTH = "N"
    SOUTH = "S"
    EAST = "E"
    WEST = "W"

    @property
    def is_horizontal(self) -> bool:
        """North and south are laid out along the x axis."""
        return self in (Side.NORTH, Side.SOUTH)

    @property
    def is_reversed(self) -> bool:
        """North and west are enumerated against insertion order."""
        return self in (Side.NORTH, Side.WEST)

    @classmethod
    def parse(cls, text: str) -> "Side":
        key = text.strip().upper()
        for side in cls:
            if key in (side.value, side.name):
                return side
        raise ValueError(f"Unknown side: {text}")


CORNER_LOCATIONS = ("NW", "NE", "SW", "SE")


@dataclass
class PlacementItem:
    """A single item on one edge of the die."""
    kind: ItemKind
    instance: str = ""
    cell_name: str = ""
    location: str = ""  # "N", "S", "E", "W" or a corner tag

    size: float = UNRESOLVED  # along the layout axis (microns)
    other_size: float = UNRESOLVED  # perpendicular to the layout axis
    offset: float = 0.0  # extra clearance before the item
    x: float = UNRESOLVED
    y: float = UNRESOLVED
    flipped: bool = False

    # Filler name prefixes, FILLER_DECL only
    fillers: List[str] = field(default_factory=list)

    # Library entry, not owned
    cell: Optional[CellInfo] = field(default=None, repr=False, compare=False)

    @property
    def has_coordinates(self) -> bool:
        """Filler declarations never carry coordinates."""
        return self.kind != ItemKind.FILLER_DECL

    @property
    def is_resolved(self) -> bool:
        return self.size >= 0 and self.x >= 0 and self.y >= 0

    @property
    def is_emitted(self) -> bool:
        return self.kind in EMITTED_KINDS

    @property
    def is_gap(self) -> bool:
        return self.kind in GAP_KINDS

    def bind_cell(self, cell: CellInfo):
        """Attach a library cell and take the item dimensions from it."""
        self.cell = cell
        self.cell_name = cell.name
        self.size = cell.size_x
        self.other_size = cell.size_y

    def footprint(self):
        """
        Area covered on the die as (min_x, min_y, max_x, max_y).

        Side items are anchored on the die edge: (x, y) is the start of the
        item along the layout axis and the edge coordinate across it. Corner
        items are anchored at their lower-left vertex.
        """
        if self.kind == ItemKind.CORNER:
            width = self.size
            height = self.other_size if self.other_size >= 0 else self.size
            return (self.x, self.y, self.x + width, self.y + height)

        depth = max(self.other_size, 0.0)
        if self.location == Side.SOUTH.value:
            return (self.x, self.y, self.x + self.size, self.y + depth)
        if self.location == Side.NORTH.value:
            return (self.x, self.y - depth, self.x + self.size, self.y)
        if self.location == Side.WEST.value:
            return (self.x, self.y, self.x + depth, self.y + self.size)
        if self.location == Side.EAST.value:
            return (self.x - depth, self.y, self.x, self.y + self.size)
        raise ValueError(f"Item {self.instance!r} has no side location: {self.location!r}")


def make_cell(instance: str, cell: CellInfo, side: Side,
              flipped: bool = False, offset: float = 0.0) -> PlacementItem:
    item = PlacementItem(
        kind=ItemKind.CELL,
        instance=instance,
        location=side.value,
        flipped=flipped,
        offset=offset,
    )
    item.bind_cell(cell)
    return item


def make_bond(instance: str, cell: CellInfo, side: Side,
              flipped: bool = False, offset: float = 0.0) -> PlacementItem:
    item = make_cell(instance, cell, side, flipped, offset)
    item.kind = ItemKind.BOND
    return item


def make_corner(instance: str, cell: CellInfo, location: str) -> PlacementItem:
    if location not in CORNER_LOCATIONS:
        raise ValueError(f"Unknown corner location: {location}")
    item = PlacementItem(kind=ItemKind.CORNER, instance=instance, location=location)
    item.bind_cell(cell)
    return item


def make_fixed_space(width: float, side: Side) -> PlacementItem:
    return PlacementItem(kind=ItemKind.FIXED_SPACE, size=width, location=side.value)


def make_flex_space(side: Side) -> PlacementItem:
    return PlacementItem(kind=ItemKind.FLEX_SPACE, location=side.value)


def make_filler_decl(prefixes: List[str], side: Side) -> PlacementItem:
    return PlacementItem(
        kind=ItemKind.FILLER_DECL,
        size=0.0,
        location=side.value,
        fillers=list(prefixes),
    )
