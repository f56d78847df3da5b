"""
SVG writer

Draws the die outline and every placed cell as a rectangle, coloured by
item kind, with the instance name as a label. SVG y runs downwards, so die
coordinates are mirrored vertically.
"""

from typing import List, Tuple
from xml.sax.saxutils import escape

from .base import PadringWriter
from ..layout.items import ItemKind, PlacementItem

# (fill, stroke) per item kind
KIND_COLORS = {
    ItemKind.CELL: ("#fcd34d", "#92400e"),
    ItemKind.BOND: ("#93c5fd", "#1e3a8a"),
    ItemKind.CORNER: ("#d1d5db", "#374151"),
    ItemKind.FILLER: ("#bbf7d0", "#166534"),
}


class SVGWriter(PadringWriter):
    """Minimal SVG rendering of a padring."""

    format_name = "SVG"

    def __init__(self, design_name: str, die_width: float, die_height: float,
                 scale: float = 1.0, margin: float = 10.0):
        super().__init__(design_name, die_width, die_height)
        self.scale = scale
        self.margin = margin
        self._shapes: List[str] = []

    def _to_svg(self, x: float, y: float) -> Tuple[float, float]:
        return ((x + self.margin) * self.scale,
                (self.die_height - y + self.margin) * self.scale)

    def write_cell(self, item: PlacementItem):
        fill, stroke = KIND_COLORS[item.kind]
        min_x, min_y, max_x, max_y = item.footprint()
        sx, sy = self._to_svg(min_x, max_y)
        w = (max_x - min_x) * self.scale
        h = (max_y - min_y) * self.scale

        self._shapes.append(
            f'<rect x="{sx:g}" y="{sy:g}" width="{w:g}" height="{h:g}" '
            f'fill="{fill}" stroke="{stroke}" stroke-width="0.5">'
            f'<title>{escape(item.instance)} ({escape(item.cell_name)})</title></rect>'
        )

        if item.kind in (ItemKind.CELL, ItemKind.BOND, ItemKind.CORNER):
            cx = sx + w / 2
            cy = sy + h / 2
            rotate = ""
            if item.location in ("E", "W"):
                rotate = f' transform="rotate(-90 {cx:g} {cy:g})"'
            self._shapes.append(
                f'<text x="{cx:g}" y="{cy:g}" font-size="{max(2.0, 8 * self.scale):g}" '
                f'text-anchor="middle" dominant-baseline="middle"{rotate}>'
                f'{escape(item.instance)}</text>'
            )

    def render(self) -> str:
        width = (self.die_width + 2 * self.margin) * self.scale
        height = (self.die_height + 2 * self.margin) * self.scale
        ox, oy = self._to_svg(0.0, self.die_height)

        lines = [
            f'<svg xmlns="http://www.w3.org/2000/svg" '
            f'width="{width:g}" height="{height:g}" viewBox="0 0 {width:g} {height:g}">',
            f'<title>{escape(self.design_name)}</title>',
            '<rect width="100%" height="100%" fill="white"/>',
            f'<rect x="{ox:g}" y="{oy:g}" width="{self.die_width * self.scale:g}" '
            f'height="{self.die_height * self.scale:g}" fill="none" stroke="black" stroke-width="1"/>',
        ]
        lines.extend(self._shapes)
        lines.append('</svg>')
        return "\n".join(lines) + "\n"
