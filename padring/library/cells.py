"""
Cell Library

In-memory cell database built from one or more LEF files. The layout engine
only reads from it: cell sizes, the filler classification and the pin map
used by the netlist writer.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple
import logging

logger = logging.getLogger(__name__)


class PinDirection(Enum):
    """Pin direction as used by the netlist writer."""
    IN = "in"
    OUT = "out"
    INOUT = "inout"

    @classmethod
    def from_lef(cls, direction: str) -> "PinDirection":
        """Map a LEF DIRECTION keyword (INPUT, OUTPUT [TRISTATE], INOUT, FEEDTHRU)."""
        keyword = direction.upper()
        if keyword == "INPUT":
            return cls.IN
        if keyword == "OUTPUT":
            return cls.OUT
        return cls.INOUT


class PinUse(Enum):
    """Pin usage; anything not power or ground is treated as a signal."""
    SIGNAL = "signal"
    POWER = "power"
    GROUND = "ground"

    @classmethod
    def from_lef(cls, use: str) -> "PinUse":
        keyword = use.upper()
        if keyword == "POWER":
            return cls.POWER
        if keyword == "GROUND":
            return cls.GROUND
        return cls.SIGNAL


@dataclass
class PinInfo:
    """A macro pin."""
    name: str
    direction: PinDirection = PinDirection.IN
    use: PinUse = PinUse.SIGNAL
    port_class: str = ""  # "CORE" for core-side ports, empty otherwise

    @property
    def is_signal(self) -> bool:
        return self.use == PinUse.SIGNAL


@dataclass
class CellInfo:
    """Physical description of a library cell (LEF MACRO)."""
    name: str
    size_x: float = 0.0  # microns
    size_y: float = 0.0
    cell_class: str = ""  # e.g. "PAD INOUT", "PAD SPACER", "ENDCAP TOPLEFT"
    foreign: str = ""
    foreign_offset: Tuple[float, float] = (0.0, 0.0)
    origin: Tuple[float, float] = (0.0, 0.0)
    symmetry: str = ""
    is_filler: bool = False
    pins: Dict[str, PinInfo] = field(default_factory=dict)

    def signal_pins(self) -> List[PinInfo]:
        """Pins with signal use, in declaration order."""
        return [pin for pin in self.pins.values() if pin.is_signal]


@dataclass
class CellLibrary:
    """Cell database keyed by macro name, in declaration order."""
    cells: Dict[str, CellInfo] = field(default_factory=dict)
    database_units: float = 0.0  # LEF UNITS DATABASE MICRONS, 0 if never given

    def add_cell(self, cell: CellInfo):
        """Add or replace a cell. A later LEF file overrides earlier definitions."""
        if cell.name in self.cells:
            logger.debug(f"Cell {cell.name} redefined, using latest definition")
        self.cells[cell.name] = cell

    def get_cell_by_name(self, name: str) -> Optional[CellInfo]:
        return self.cells.get(name)

    def filler_cells(self) -> List[CellInfo]:
        """All cells flagged as fillers, in declaration order."""
        return [c for c in self.cells.values() if c.is_filler]

    def check_integrity(self) -> int:
        """Warn about cells that cannot be placed. Returns the number of problems."""
        problems = 0
        for cell in self.cells.values():
            if cell.size_x <= 0.0 or cell.size_y <= 0.0:
                logger.warning(f"Cell {cell.name} has no valid SIZE ({cell.size_x} x {cell.size_y})")
                problems += 1
        return problems

    def dump(self):
        """Log every cell at debug level."""
        if not logger.isEnabledFor(logging.DEBUG):
            return
        for cell in self.cells.values():
            logger.debug(
                "Cell %s: %g x %g class=%r filler=%s pins=%d",
                cell.name, cell.size_x, cell.size_y, cell.cell_class,
                cell.is_filler, len(cell.pins),
            )
            for pin in cell.pins.values():
                logger.debug("    pin %s %s %s", pin.name, pin.direction.value, pin.use.value)

    def __len__(self) -> int:
        return len(self.cells)

    def __iter__(self) -> Iterator[CellInfo]:
        return iter(self.cells.values())

    def __contains__(self, name: str) -> bool:
        return name in self.cells
