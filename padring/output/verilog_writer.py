"""
Verilog writer

Emits a structural module instantiating every padring cell. Each signal
pin of every instance becomes a module port and a wire named
<instance>_<pin>; power and ground pins are left out.
"""

from typing import List

from .base import PadringWriter
from ..errors import UnknownCellReference
from ..layout.items import PlacementItem
from ..library.cells import PinDirection

DIRECTION_KEYWORD = {
    PinDirection.IN: "input",
    PinDirection.OUT: "output",
    PinDirection.INOUT: "inout",
}


class VerilogWriter(PadringWriter):
    """Structural Verilog netlist of the padring."""

    format_name = "Verilog"

    def __init__(self, design_name: str, die_width: float = 0.0, die_height: float = 0.0):
        super().__init__(design_name, die_width, die_height)
        self._ports: List[str] = []
        self._directions: List[str] = []
        self._wires: List[str] = []
        self._body: List[str] = []

    def write_cell(self, item: PlacementItem):
        if item.cell is None:
            raise UnknownCellReference(item.cell_name, f"instance {item.instance}")

        connections = []
        for pin in item.cell.signal_pins():
            net = f"{item.instance}_{pin.name}"
            self._ports.append(net)
            self._directions.append(f"  {DIRECTION_KEYWORD[pin.direction]} {net};")
            self._wires.append(f"  wire {net};")
            connections.append(f".{pin.name}({net})")

        self._body.append(f"  {item.cell_name} {item.instance}({', '.join(connections)});")

    def render(self) -> str:
        lines = ["`timescale 1ps/1ps", f"module {self.design_name} ("]
        lines.append(",\n".join(f"  {port}" for port in self._ports))
        lines.append(");")
        lines.append("")
        lines.append("// Direction phase")
        lines.extend(self._directions)
        lines.append("")
        lines.append("// Variable phase")
        lines.extend(self._wires)
        lines.append("")
        lines.append("// Instantiation phase")
        lines.extend(self._body)
        lines.append("endmodule")
        return "\n".join(lines) + "\n"
