"""
Gap Filler

Closes every reserved gap of a laid-out padring with filler cells. Each gap
is filled greedily: take the widest registered filler that still fits,
place it, and repeat until the gap is closed.

The active filler set is explicit state of the walk over a side: a filler
declaration replaces it for all later gaps on that side, and the updated
registry is handed back to the caller instead of being stored anywhere.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Set, Tuple
import logging

from .fillers import FillerRegistry, WIDTH_EPSILON
from .items import ItemKind, PlacementItem, Side, snap_coord
from .padring import PERIMETER_ORDER, PadringModel
from .side import SideLayout
from ..errors import NoFillerFits, UnknownCellReference
from ..library.cells import CellLibrary

logger = logging.getLogger(__name__)


class ResidualPolicy(Enum):
    """What to do with a leftover smaller than one grid unit."""
    DISCARD = "discard"  # drop it, each gap is closed on its own
    CARRY = "carry"      # keep a running total over the side and report it


@dataclass
class FillResult:
    """Fillers produced for one side, grouped by the gap item they close."""
    side: Side
    fillers: List[PlacementItem] = field(default_factory=list)
    gaps: List[Tuple[PlacementItem, List[PlacementItem]]] = field(default_factory=list)
    trailing: List[PlacementItem] = field(default_factory=list)
    discarded: float = 0.0  # total sub-grid residue dropped on this side
    carried: float = 0.0    # running residue under ResidualPolicy.CARRY

    def fillers_for(self, gap: PlacementItem) -> List[PlacementItem]:
        for item, fillers in self.gaps:
            if item is gap:
                return fillers
        return []


class GapFiller:
    """
    Produces filler placements for reserved gaps.

    Instance names are FILLER_<n>, numbered over the whole run and never
    colliding with names already used by the configuration.
    """

    def __init__(self, grid: float, library: Optional[CellLibrary] = None,
                 policy: ResidualPolicy = ResidualPolicy.DISCARD,
                 reserved_names: Optional[Set[str]] = None):
        self.grid = grid
        self.library = library
        self.policy = policy
        self._reserved = set(reserved_names or ())
        self._counter = 0

    @property
    def filler_count(self) -> int:
        return self._counter

    def _next_instance(self) -> str:
        while True:
            name = f"FILLER_{self._counter}"
            self._counter += 1
            if name not in self._reserved:
                self._reserved.add(name)
                return name

    def fill_gap(self, pos: float, space: float, registry: FillerRegistry,
                 side: Side, edge_pos: float) -> List[PlacementItem]:
        """
        Fill [pos, pos + space) on a side.

        Args:
            pos: Gap start along the layout axis
            space: Gap width (microns)
            registry: Fillers to choose from
            side: Side the gap is on
            edge_pos: Perpendicular coordinate of the side

        Returns:
            Filler items in order of increasing position

        Raises:
            NoFillerFits: no registered filler fits the remaining width
        """
        fillers, _ = self._fill(pos, space, registry, side, edge_pos)
        return fillers

    def _fill(self, pos: float, space: float, registry: FillerRegistry,
              side: Side, edge_pos: float) -> Tuple[List[PlacementItem], float]:
        # Returns the fillers and the sub-grid leftover that was not closed
        fillers = []
        space = snap_coord(space)
        if space <= WIDTH_EPSILON:
            return fillers, 0.0
        if space < self.grid:
            return fillers, space

        while space > WIDTH_EPSILON:
            fit = registry.best_fit(space)
            if fit is None:
                raise NoFillerFits(side.name.lower(), space)

            cell_name, width = fit
            filler = PlacementItem(
                kind=ItemKind.FILLER,
                instance=self._next_instance(),
                cell_name=cell_name,
                location=side.value,
                size=width,
            )
            if self.library is not None:
                filler.cell = self.library.get_cell_by_name(cell_name)
                if filler.cell is not None:
                    filler.other_size = filler.cell.size_y
            if side.is_horizontal:
                filler.x, filler.y = snap_coord(pos), edge_pos
            else:
                filler.x, filler.y = edge_pos, snap_coord(pos)
            fillers.append(filler)

            pos += width
            space = snap_coord(space - width)
            if 0.0 < space < self.grid:
                return fillers, space

        return fillers, 0.0

    def _rebind(self, decl: PlacementItem) -> FillerRegistry:
        if self.library is None:
            raise ValueError("Filler declarations need a cell library")
        registry = FillerRegistry.from_library(decl.fillers, self.library)
        if registry.cell_count == 0:
            raise UnknownCellReference(
                " ".join(decl.fillers),
                "no filler cell matches the filler declaration",
            )
        logger.debug(f"Filler set rebound to {registry.names()}")
        return registry

    def fill_side(self, layout: SideLayout,
                  registry: FillerRegistry) -> Tuple[FillResult, FillerRegistry]:
        """
        Close every gap of a laid-out side, walking items by position.

        Returns:
            The fill result and the registry active at the end of the walk
        """
        result = FillResult(side=layout.side)
        name = layout.side.name.lower()

        def close(pos: float, space: float) -> List[PlacementItem]:
            # Never fill past the gap itself, the next cell starts there
            fillers, residue = self._fill(pos, space, registry,
                                          layout.side, layout.edge_pos)
            if self.policy == ResidualPolicy.CARRY:
                before = result.carried
                result.carried = snap_coord(before + residue)
                if before < self.grid <= result.carried + WIDTH_EPSILON:
                    logger.warning(
                        f"({name}) carried residue reached {result.carried:g} "
                        f"microns, a full grid unit is left unfilled"
                    )
            else:
                result.discarded += residue
            result.fillers.extend(fillers)
            return fillers

        for item in layout:
            if item.kind == ItemKind.FILLER_DECL:
                registry = self._rebind(item)
            elif item.kind in (ItemKind.FIXED_SPACE, ItemKind.FLEX_SPACE):
                fillers = close(layout.get_item_pos(item), item.size)
                result.gaps.append((item, fillers))
            elif item.kind in (ItemKind.CELL, ItemKind.BOND, ItemKind.CORNER,
                               ItemKind.FILLER):
                continue
            else:
                raise ValueError(f"Unhandled item kind: {item.kind}")

        if layout.trailing_gap > 0:
            result.trailing = close(layout.trailing_gap_pos, layout.trailing_gap)

        result.discarded = snap_coord(result.discarded)
        if result.discarded > 0:
            logger.debug(f"({name}) {result.discarded:g} microns of sub-grid residue dropped")
        if result.carried > 0:
            logger.info(f"({name}) {result.carried:g} microns of residue carried over the side")
        return result, registry

    def fill_padring(self, model: PadringModel,
                     registry: FillerRegistry) -> Dict[Side, FillResult]:
        """Fill all four sides; each side starts from the initial registry."""
        results = {}
        for side in (Side.SOUTH, Side.EAST, Side.NORTH, Side.WEST):
            result, _ = self.fill_side(model.get_side(side), registry)
            results[side] = result
            logger.debug(f"({side.name.lower()}) {len(result.fillers)} fillers placed")
        return results


def _side_with_fillers(model: PadringModel, side: Side,
                       result: Optional[FillResult]) -> List[PlacementItem]:
    """Emitted items of a side in perimeter order, fillers in their gaps."""
    placed = []
    for item in model.iter_side(side):
        if item.kind in (ItemKind.CELL, ItemKind.BOND):
            placed.append(item)
        elif item.kind in (ItemKind.FIXED_SPACE, ItemKind.FLEX_SPACE):
            if result is not None:
                fillers = result.fillers_for(item)
                placed.extend(reversed(fillers) if side.is_reversed else fillers)
        elif item.kind in (ItemKind.FILLER_DECL, ItemKind.CORNER, ItemKind.FILLER):
            continue
        else:
            raise ValueError(f"Unhandled item kind: {item.kind}")

    # The trailing gap sits just before the last corner of the side
    if result is not None and result.trailing:
        if side.is_reversed:
            placed[:0] = reversed(result.trailing)
        else:
            placed.extend(result.trailing)
    return placed


def perimeter_items(model: PadringModel,
                    results: Optional[Dict[Side, FillResult]] = None) -> List[PlacementItem]:
    """
    Every emitted item (corners, cells, bonds, fillers) in perimeter order.

    Same counter-clockwise pass as PadringModel.iter_perimeter(), with the
    filler cells of each gap at the position of the gap.
    """
    results = results or {}
    items = []
    for corner_location, side in PERIMETER_ORDER:
        corner = model.get_corner(corner_location)
        if corner is not None:
            items.append(corner)
        items.extend(_side_with_fillers(model, side, results.get(side)))
    return items
