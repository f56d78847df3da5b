"""
DEF writer

Writes the padring as a DEF COMPONENTS section with FIXED placements, so
place-and-route tools pick the ring up as pre-placed instances.
"""

from typing import List

from .base import PadringWriter
from .orientation import item_orientation
from ..layout.items import PlacementItem

# Used when the LEF files do not declare UNITS DATABASE MICRONS
DEFAULT_DATABASE_UNITS = 1000


class DEFWriter(PadringWriter):
    """DEF 5.8 writer."""

    format_name = "DEF"

    def __init__(self, design_name: str, die_width: float, die_height: float,
                 database_units: float = 0.0):
        super().__init__(design_name, die_width, die_height)
        self.database_units = int(database_units) if database_units > 0 else DEFAULT_DATABASE_UNITS
        self._components: List[str] = []

    def _dbu(self, value: float) -> int:
        return int(round(value * self.database_units))

    def write_cell(self, item: PlacementItem):
        min_x, min_y, _, _ = item.footprint()
        orientation = item_orientation(item)
        self._components.append(
            f"- {item.instance} {item.cell_name} + FIXED "
            f"( {self._dbu(min_x)} {self._dbu(min_y)} ) {orientation.name} ;"
        )

    def render(self) -> str:
        lines = [
            "VERSION 5.8 ;",
            'DIVIDERCHAR "/" ;',
            'BUSBITCHARS "[]" ;',
            f"DESIGN {self.design_name} ;",
            f"UNITS DISTANCE MICRONS {self.database_units} ;",
            "",
            f"DIEAREA ( 0 0 ) ( {self._dbu(self.die_width)} {self._dbu(self.die_height)} ) ;",
            "",
            f"COMPONENTS {len(self._components)} ;",
        ]
        lines.extend(f"  {c}" for c in self._components)
        lines.append("END COMPONENTS")
        lines.append("")
        lines.append("END DESIGN")
        return "\n".join(lines) + "\n"
