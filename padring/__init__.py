"""
Padring - ASIC Padring Generator

Places I/O pad cells, corner cells and filler cells around the perimeter of
a die from a cell library (LEF) and a placement configuration, and writes
the resulting ring as GDS2, DEF, SVG, Verilog or CSV.
"""

__version__ = "0.1.0"
__author__ = "Padring Team"

from .engine import GeneratorConfig, PadringGenerator, PadringResult
from .errors import PadringError
from .layout.padring import PadringModel
from .library.cells import CellLibrary

__all__ = [
    "GeneratorConfig",
    "PadringGenerator",
    "PadringResult",
    "PadringError",
    "PadringModel",
    "CellLibrary",
]
