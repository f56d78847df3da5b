"""
Side Layout

Places the items of one die edge along its layout axis. North and south
are laid out along x, east and west along y. Every item on the side shares
the same perpendicular coordinate (the edge position), including the two
corner cells the side shares with its neighbours.

Flexible spacers absorb whatever die extent the fixed-size items leave
free, so pads end up evenly distributed between the corners.
"""

import logging
import math
from typing import Iterator, List, Optional

from .items import (
    ItemKind,
    PlacementItem,
    Side,
    make_flex_space,
    snap_coord,
)
from ..errors import LayoutOverflow

logger = logging.getLogger(__name__)

# Tolerance for float comparisons against the grid
GRID_EPSILON = 1e-9


def snap_down(value: float, grid: float) -> float:
    """Round a non-negative value down to a multiple of the grid."""
    if grid <= 0:
        return snap_coord(value)
    return snap_coord(math.floor(value / grid + GRID_EPSILON) * grid)


class SideLayout:
    """
    Ordered placement items for one edge of the die.

    Items are kept in insertion order, which is also the order of
    increasing position along the layout axis. Corners are held separately
    because each one belongs to two sides.
    """

    def __init__(self, side: Side, grid: float = 1.0, die_size: float = 0.0):
        self.side = side
        self.grid = grid
        self.die_size = die_size  # extent along the layout axis
        self.edge_pos = 0.0
        self.items: List[PlacementItem] = []
        self.first_corner: Optional[PlacementItem] = None
        self.last_corner: Optional[PlacementItem] = None

        # Residual left after the last item when there is no flex space
        self.trailing_gap = 0.0
        self.trailing_gap_pos = 0.0

        self._insert_flex_spacer = False

    @property
    def is_horizontal(self) -> bool:
        return self.side.is_horizontal

    # --- item insertion ---

    def add_item(self, item: PlacementItem):
        """
        Append an item.

        A flex spacer is inserted in front of a cell that follows another
        cell or bond, so adjacent functional cells always have a gap to
        absorb leftover space. An explicit fixed space takes the place of
        that spacer; a cell offset adds clearance after it.
        """
        if self._insert_flex_spacer and item.kind == ItemKind.CELL:
            flex = make_flex_space(self.side)
            self._set_item_edge_pos(flex)
            self.items.append(flex)

        if not item.location:
            item.location = self.side.value
        self._set_item_edge_pos(item)
        self.items.append(item)

        if item.kind in (ItemKind.CELL, ItemKind.BOND):
            self._insert_flex_spacer = True
        elif item.kind != ItemKind.FILLER_DECL:
            self._insert_flex_spacer = False

    def set_first_corner(self, corner: Optional[PlacementItem]):
        """Left-most corner for north/south, bottom-most for east/west."""
        self.first_corner = corner
        self._set_item_edge_pos(corner)

    def set_last_corner(self, corner: Optional[PlacementItem]):
        """Right-most corner for north/south, top-most for east/west."""
        self.last_corner = corner
        self._set_item_edge_pos(corner)

    def set_edge_pos(self, pos: float):
        """Set the perpendicular coordinate and re-stamp every item with it."""
        self.edge_pos = pos
        for item in self.items:
            self._set_item_edge_pos(item)
        self._set_item_edge_pos(self.first_corner)
        self._set_item_edge_pos(self.last_corner)

    def set_grid(self, grid: float):
        self.grid = grid

    def set_die_size(self, die_size: float):
        self.die_size = die_size

    # --- coordinate helpers ---

    def get_item_pos(self, item: PlacementItem) -> float:
        """Coordinate of an item along the layout axis."""
        return item.x if self.is_horizontal else item.y

    def _set_item_pos(self, item: Optional[PlacementItem], pos: float):
        if item is None:
            return
        if self.is_horizontal:
            item.x = snap_coord(pos)
        else:
            item.y = snap_coord(pos)

    def _set_item_edge_pos(self, item: Optional[PlacementItem]):
        if item is None or not item.has_coordinates:
            return
        if self.is_horizontal:
            item.y = self.edge_pos
        else:
            item.x = self.edge_pos

    # --- layout ---

    def get_min_size(self) -> float:
        """Sum of all resolved item sizes; unresolved flex spaces count as 0."""
        return sum(item.size for item in self.items if item.size >= 0)

    def _corner_size(self, corner: Optional[PlacementItem]) -> float:
        if corner is None:
            return 0.0
        return max(corner.size, 0.0)

    def _fixed_total(self) -> float:
        total = self._corner_size(self.first_corner) + self._corner_size(self.last_corner)
        for item in self.items:
            if item.kind == ItemKind.FLEX_SPACE and item.size < 0:
                total += item.offset
            else:
                total += max(item.size, 0.0) + item.offset
        return total

    def do_layout(self):
        """
        Resolve every flex space width and every along-axis coordinate.

        Raises:
            LayoutOverflow: fixed content exceeds the die extent, or the
                walked positions do not close on the die extent.
        """
        name = self.side.name.lower()
        fixed_total = self._fixed_total()
        flex_items = [i for i in self.items
                      if i.kind == ItemKind.FLEX_SPACE and i.size < 0]

        if fixed_total > self.die_size + GRID_EPSILON:
            raise LayoutOverflow(name, fixed_total, self.die_size)

        free = self.die_size - fixed_total
        self.trailing_gap = 0.0

        if flex_items:
            flex_size = max(0.0, snap_down(free / len(flex_items), self.grid))
            for item in flex_items:
                item.size = flex_size
            logger.debug(f"({name}) {len(flex_items)} flex spaces of {flex_size:g} microns")
        elif free > GRID_EPSILON:
            self.trailing_gap = snap_coord(free)
            logger.warning(
                f"({name}) no flexible space on side, "
                f"{self.trailing_gap:g} microns left before the last corner"
            )

        self._set_item_pos(self.first_corner, 0.0)
        pos = self._corner_size(self.first_corner)
        for item in self.items:
            if not item.has_coordinates:
                continue
            pos += item.offset
            self._set_item_pos(item, pos)
            self._set_item_edge_pos(item)
            pos += item.size

        self.trailing_gap_pos = snap_coord(pos)
        pos += self.trailing_gap
        self._set_item_pos(self.last_corner, pos)

        end = snap_coord(pos + self._corner_size(self.last_corner))
        if abs(end - self.die_size) > self.grid + GRID_EPSILON:
            raise LayoutOverflow(
                name, end, self.die_size,
                f"({name}) layout ends at {end:g} but the die extent is {self.die_size:g}",
            )

        if logger.isEnabledFor(logging.DEBUG):
            self.dump()

    def dump(self):
        """Log the side contents at debug level."""
        logger.debug(f"Side {self.side.name}: edge={self.edge_pos:g} die={self.die_size:g}")
        for label, corner in (("first", self.first_corner), ("last", self.last_corner)):
            if corner is not None:
                logger.debug(f"  {label} corner {corner.instance} at ({corner.x:g}, {corner.y:g})")
        for item in self.items:
            logger.debug(
                "  %-12s %-16s %-16s pos=%g size=%g offset=%g",
                item.kind.value, item.instance or "-", item.cell_name or "-",
                self.get_item_pos(item), item.size, item.offset,
            )

    # --- iteration ---

    def __iter__(self) -> Iterator[PlacementItem]:
        return iter(self.items)

    def __reversed__(self) -> Iterator[PlacementItem]:
        return reversed(self.items)

    def __len__(self) -> int:
        return len(self.items)
