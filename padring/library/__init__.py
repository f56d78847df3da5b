"""Cell library: LEF parsing and cell lookup."""

from .cells import CellInfo, CellLibrary, PinDirection, PinInfo, PinUse
from .lef_reader import LEFReader, load_library

__all__ = [
    "CellInfo",
    "CellLibrary",
    "PinDirection",
    "PinInfo",
    "PinUse",
    "LEFReader",
    "load_library",
]
