"""Common interface of the padring output writers."""

from pathlib import Path
from typing import Iterable, Union
import logging

from ..layout.items import PlacementItem

logger = logging.getLogger(__name__)


class PadringWriter:
    """
    Base class for writers that consume placed items in perimeter order.

    Subclasses implement write_cell() and render(). Writers never compute
    positions themselves; they only read what the layout engine resolved.
    """

    #: Human readable format name used in log messages
    format_name = "output"

    def __init__(self, design_name: str, die_width: float, die_height: float):
        self.design_name = design_name
        self.die_width = die_width
        self.die_height = die_height
        self.cell_count = 0

    def write_cell(self, item: PlacementItem):
        raise NotImplementedError

    def write_padring(self, items: Iterable[PlacementItem]):
        for item in items:
            if not item.is_emitted:
                raise ValueError(f"Item kind {item.kind.value} cannot be written")
            self.write_cell(item)
            self.cell_count += 1

    def render(self) -> str:
        raise NotImplementedError

    def save(self, path: Union[str, Path]):
        path = Path(path)
        path.write_text(self.render())
        logger.info(f"Writing padring to {self.format_name} file: {path}")
