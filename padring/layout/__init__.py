"""Padring layout engine: side placement and filler gap filling."""

from .items import (
    ItemKind,
    PlacementItem,
    Side,
    make_bond,
    make_cell,
    make_corner,
    make_filler_decl,
    make_fixed_space,
    make_flex_space,
)
from .side import SideLayout
from .padring import PadringModel
from .fillers import FillerRegistry
from .gap_filler import FillResult, GapFiller, ResidualPolicy, perimeter_items

__all__ = [
    "ItemKind",
    "PlacementItem",
    "Side",
    "make_bond",
    "make_cell",
    "make_corner",
    "make_filler_decl",
    "make_fixed_space",
    "make_flex_space",
    "SideLayout",
    "PadringModel",
    "FillerRegistry",
    "FillResult",
    "GapFiller",
    "ResidualPolicy",
    "perimeter_items",
]
