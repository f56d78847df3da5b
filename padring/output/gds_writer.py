"""
GDS2 writer

Builds a top cell named after the design holding one reference per placed
cell. The referenced cells are left undefined and get resolved when the
padring is merged with the cell library GDS.
"""

from pathlib import Path
from typing import Optional, Union
import logging
import math

import gdstk

from .base import PadringWriter
from .orientation import placement_origin
from ..layout.items import PlacementItem

logger = logging.getLogger(__name__)


class GDS2Writer(PadringWriter):
    """Writes cell references into a gdstk library."""

    format_name = "GDS2"

    def __init__(self, design_name: str, die_width: float, die_height: float,
                 boundary_layer: Optional[int] = None):
        super().__init__(design_name, die_width, die_height)
        self.library = gdstk.Library(unit=1e-6, precision=1e-9)
        self.top = self.library.new_cell(design_name)
        if boundary_layer is not None:
            self.top.add(gdstk.rectangle((0, 0), (die_width, die_height), layer=boundary_layer))

    def write_cell(self, item: PlacementItem):
        x, y, orientation = placement_origin(item)
        self.top.add(gdstk.Reference(
            item.cell_name,
            origin=(x, y),
            rotation=math.radians(orientation.rotation),
            x_reflection=orientation.x_reflection,
        ))

    def render(self) -> str:
        raise NotImplementedError("GDS2 is a binary format, use save()")

    def save(self, path: Union[str, Path]):
        path = Path(path)
        self.library.write_gds(str(path))
        logger.info(f"Writing padring to {self.format_name} file: {path}")
