"""Padring output writers (GDS2, DEF, SVG, Verilog, CSV)."""

from .base import PadringWriter
from .csv_writer import CSVWriter
from .def_writer import DEFWriter
from .gds_writer import GDS2Writer
from .orientation import Orientation, item_orientation, placement_origin
from .svg_writer import SVGWriter
from .verilog_writer import VerilogWriter

__all__ = [
    "PadringWriter",
    "CSVWriter",
    "DEFWriter",
    "GDS2Writer",
    "SVGWriter",
    "VerilogWriter",
    "Orientation",
    "item_orientation",
    "placement_origin",
]
