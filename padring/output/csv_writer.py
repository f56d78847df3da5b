"""
CSV writer

Pin assignment table: one row per pad cell, numbered in perimeter order,
with its side, instance, cell and position. Corners, bond pads and fillers
are skipped.
"""

from typing import List
import csv
import io

from .base import PadringWriter
from ..layout.items import ItemKind, PlacementItem

CSV_HEADER = ["pin", "side", "instance", "cell", "x", "y", "flipped"]


class CSVWriter(PadringWriter):
    """Pad cell listing for package and bonding diagrams."""

    format_name = "CSV"

    def __init__(self, design_name: str, die_width: float = 0.0, die_height: float = 0.0):
        super().__init__(design_name, die_width, die_height)
        self._rows: List[list] = []

    def write_cell(self, item: PlacementItem):
        if item.kind != ItemKind.CELL:
            return
        self._rows.append([
            len(self._rows) + 1,
            item.location,
            item.instance,
            item.cell_name,
            f"{item.x:g}",
            f"{item.y:g}",
            "yes" if item.flipped else "no",
        ])

    def render(self) -> str:
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(CSV_HEADER)
        writer.writerows(self._rows)
        return buffer.getvalue()
