"""
Padring Configuration Reader

Builds a PadringModel from a placement list. Two flavours are accepted.

Text configuration (statements end with ';', '#' starts a comment):

    DESIGN chip_top;
    AREA 1000 1000;
    GRID 0.1;
    FILLER FILL;                    # filler prefixes used from the start
    CORNER CORNER_SW SW corner;
    PAD P_CLK S pad_in;
    SPACE 20;                       # fixed gap on the side of the last pad
    PAD P_RST S pad_in FLIP;
    SPACE FLEX;                     # flexible gap
    OFFSET 5;                       # clearance before the next pad
    BOND B_VDD S bond_vdd;
    FILLER FILLW;                   # rebinds fillers for the rest of the side

YAML configuration (*.yaml / *.yml):

    design: chip_top
    area: [1000, 1000]
    grid: 0.1
    fillers: [FILL]
    corners:
      SW: {instance: CORNER_SW, cell: corner}
    sides:
      S:
        - pad: {instance: P_CLK, cell: pad_in}
        - space: 20
        - pad: {instance: P_RST, cell: pad_in, flip: true}
        - flex
        - bond: {instance: B_VDD, cell: bond_vdd, offset: 5}
        - fillers: [FILLW]
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Union
import logging
import re

import yaml

from ..errors import ConfigParseError, UnknownCellReference
from ..layout.items import (
    CORNER_LOCATIONS,
    PlacementItem,
    Side,
    make_bond,
    make_cell,
    make_corner,
    make_filler_decl,
    make_fixed_space,
    make_flex_space,
)
from ..layout.padring import PadringModel
from ..library.cells import CellInfo, CellLibrary

logger = logging.getLogger(__name__)

_TOKEN_RE = re.compile(r'"[^"]*"|;|[^\s;]+')

YAML_SUFFIXES = {".yaml", ".yml"}


class ConfigReader:
    """
    Reads a padring configuration into a PadringModel.

    Every cell name is resolved against the library while reading, so the
    model only ever holds items with known sizes.
    """

    def __init__(self, library: CellLibrary):
        self.library = library
        self.model = PadringModel()
        self._source = "<string>"
        self._line: Optional[int] = None
        self._last_side: Optional[Side] = None
        self._pending_offset: Dict[Side, float] = {}

    # --- helpers ---

    def _error(self, message: str) -> ConfigParseError:
        return ConfigParseError(message, self._source, self._line)

    def _number(self, word: Any, what: str) -> float:
        try:
            return float(word)
        except (TypeError, ValueError):
            raise self._error(f"Expected a number for {what}, got {word!r}")

    def _cell(self, name: str, instance: str) -> CellInfo:
        cell = self.library.get_cell_by_name(name)
        if cell is None:
            raise UnknownCellReference(name, f"instance {instance}, {self._source}:{self._line}")
        return cell

    def _side(self, location: str) -> Side:
        try:
            return Side.parse(location)
        except ValueError:
            raise self._error(f"Unknown pad location '{location}', expected N, S, E or W")

    def _current_side(self, keyword: str) -> Side:
        if self._last_side is None:
            raise self._error(f"{keyword} must follow a PAD or BOND that selects the side")
        return self._last_side

    def _add(self, side: Side, item: PlacementItem):
        try:
            self.model.add_item(side, item)
        except ConfigParseError as e:
            raise self._error(e.message)

    # --- directives ---

    def add_design(self, name: str):
        self.model.design_name = name

    def add_area(self, width: Any, height: Any):
        self.model.set_die_size(self._number(width, "AREA width"),
                                self._number(height, "AREA height"))

    def add_grid(self, grid: Any):
        value = self._number(grid, "GRID")
        if value <= 0:
            raise self._error(f"GRID must be positive, got {value:g}")
        self.model.set_grid(value)

    def add_corner(self, instance: str, location: str, cell_name: str):
        location = location.upper()
        if location not in CORNER_LOCATIONS:
            raise self._error(f"Unknown corner location '{location}', expected one of {', '.join(CORNER_LOCATIONS)}")
        corner = make_corner(instance, self._cell(cell_name, instance), location)
        try:
            self.model.set_corner(corner)
        except ConfigParseError as e:
            raise self._error(e.message)

    def add_pad(self, instance: str, location: str, cell_name: str,
                flip: bool = False, bond: bool = False, offset: float = 0.0):
        side = self._side(location)
        offset += self._pending_offset.pop(side, 0.0)
        cell = self._cell(cell_name, instance)
        factory = make_bond if bond else make_cell
        self._add(side, factory(instance, cell, side, flipped=flip, offset=offset))
        self._last_side = side

    def add_space(self, width: Any, side: Optional[Side] = None):
        side = side or self._current_side("SPACE")
        if isinstance(width, str) and width.upper() == "FLEX":
            self._add(side, make_flex_space(side))
            return
        value = self._number(width, "SPACE")
        if value < 0:
            raise self._error(f"SPACE must not be negative, got {value:g}")
        self._add(side, make_fixed_space(value, side))

    def add_flex(self, side: Side):
        self._add(side, make_flex_space(side))

    def add_offset(self, value: Any, side: Optional[Side] = None):
        side = side or self._current_side("OFFSET")
        offset = self._number(value, "OFFSET")
        if offset < 0:
            raise self._error(f"OFFSET must not be negative, got {offset:g}")
        self._pending_offset[side] = self._pending_offset.get(side, 0.0) + offset

    def add_fillers(self, prefixes: List[str], side: Optional[Side] = None):
        if not prefixes:
            raise self._error("FILLER needs at least one cell name prefix")
        side = side or self._last_side
        if side is None:
            self.model.fillers.extend(prefixes)
        else:
            self._add(side, make_filler_decl(prefixes, side))

    def _finish(self) -> PadringModel:
        for side, offset in self._pending_offset.items():
            logger.warning(f"OFFSET {offset:g} on side {side.value} is not followed by a pad, ignored")
        self._pending_offset.clear()
        return self.model

    # --- text format ---

    def _statements(self, text: str):
        words: List[str] = []
        start_line = None
        for lineno, line in enumerate(text.splitlines(), start=1):
            for match in _TOKEN_RE.finditer(line):
                word = match.group(0)
                if word.startswith("#"):
                    break
                if word == ";":
                    if words:
                        yield start_line, words
                    words, start_line = [], None
                    continue
                if start_line is None:
                    start_line = lineno
                words.append(word.strip('"'))
        if words:
            self._line = start_line
            raise self._error(f"Missing ';' after '{' '.join(words)}'")

    def _expect(self, words: List[str], minimum: int, maximum: int, usage: str):
        if not minimum <= len(words) - 1 <= maximum:
            raise self._error(f"Malformed statement '{' '.join(words)}', usage: {usage}")

    def parse_text(self, text: str, source: str = "<string>") -> PadringModel:
        self._source = source
        for line, words in self._statements(text):
            self._line = line
            keyword = words[0].upper()

            if keyword == "DESIGN":
                self._expect(words, 1, 1, "DESIGN name;")
                self.add_design(words[1])
            elif keyword == "AREA":
                self._expect(words, 2, 2, "AREA width height;")
                self.add_area(words[1], words[2])
            elif keyword == "GRID":
                self._expect(words, 1, 1, "GRID size;")
                self.add_grid(words[1])
            elif keyword == "CORNER":
                self._expect(words, 3, 3, "CORNER instance NW|NE|SW|SE cell;")
                self.add_corner(words[1], words[2], words[3])
            elif keyword in ("PAD", "BOND"):
                self._expect(words, 3, 4, f"{keyword} instance N|S|E|W cell [FLIP];")
                flip = False
                if len(words) == 5:
                    if words[4].upper() != "FLIP":
                        raise self._error(f"Unknown {keyword} option '{words[4]}'")
                    flip = True
                self.add_pad(words[1], words[2], words[3], flip=flip,
                             bond=(keyword == "BOND"))
            elif keyword == "SPACE":
                self._expect(words, 1, 1, "SPACE width|FLEX;")
                self.add_space(words[1])
            elif keyword == "OFFSET":
                self._expect(words, 1, 1, "OFFSET width;")
                self.add_offset(words[1])
            elif keyword == "FILLER":
                self._expect(words, 1, 64, "FILLER prefix [prefix ...];")
                self.add_fillers(words[1:])
            else:
                raise self._error(f"Unknown keyword '{words[0]}'")

        return self._finish()

    # --- YAML format ---

    def _yaml_pad(self, side: Side, entry: Any, bond: bool):
        if not isinstance(entry, dict) or "instance" not in entry or "cell" not in entry:
            raise self._error(f"{'bond' if bond else 'pad'} entry needs 'instance' and 'cell'")
        offset = self._number(entry.get("offset", 0.0), "offset")
        self.add_pad(str(entry["instance"]), side.value, str(entry["cell"]),
                     flip=bool(entry.get("flip", False)), bond=bond, offset=offset)

    def _yaml_side(self, side: Side, entries: Any):
        if not isinstance(entries, list):
            raise self._error(f"Side {side.value} must be a list of entries")
        for index, entry in enumerate(entries):
            self._line = index + 1
            if entry == "flex":
                self.add_flex(side)
                continue
            if not isinstance(entry, dict) or len(entry) != 1:
                raise self._error(f"Side {side.value} entry {index}: expected one key, got {entry!r}")
            key, value = next(iter(entry.items()))
            if key == "pad":
                self._yaml_pad(side, value, bond=False)
            elif key == "bond":
                self._yaml_pad(side, value, bond=True)
            elif key == "space":
                self.add_space(value, side)
            elif key == "offset":
                self.add_offset(value, side)
            elif key == "fillers":
                prefixes = [value] if isinstance(value, str) else list(value or [])
                self.add_fillers([str(p) for p in prefixes], side)
            else:
                raise self._error(f"Side {side.value} entry {index}: unknown key '{key}'")
        self._line = None

    def parse_yaml(self, text: str, source: str = "<string>") -> PadringModel:
        self._source = source
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise self._error(f"Invalid YAML: {e}")

        if not isinstance(data, dict):
            raise self._error("Configuration must be a mapping")

        if "design" in data:
            self.add_design(str(data["design"]))
        if "area" in data:
            area = data["area"]
            if not isinstance(area, (list, tuple)) or len(area) != 2:
                raise self._error("area must be [width, height]")
            self.add_area(area[0], area[1])
        if "grid" in data:
            self.add_grid(data["grid"])

        fillers = data.get("fillers") or []
        if isinstance(fillers, str):
            fillers = [fillers]
        self.model.fillers.extend(str(f) for f in fillers)

        for location, entry in (data.get("corners") or {}).items():
            if not isinstance(entry, dict) or "cell" not in entry:
                raise self._error(f"Corner {location} needs a 'cell'")
            self.add_corner(str(entry.get("instance", f"CORNER_{location}")),
                            str(location), str(entry["cell"]))

        for location, entries in (data.get("sides") or {}).items():
            self._yaml_side(self._side(str(location)), entries)

        unknown = set(data) - {"design", "area", "grid", "fillers", "corners", "sides"}
        if unknown:
            logger.warning(f"Ignoring unknown configuration keys: {sorted(unknown)}")

        return self._finish()


def load_config(path: Union[str, Path], library: CellLibrary) -> PadringModel:
    """Read a configuration file, choosing the format by file suffix."""
    path = Path(path)
    if not path.exists():
        raise ConfigParseError("Configuration file not found", str(path))

    reader = ConfigReader(library)
    text = path.read_text()
    if path.suffix.lower() in YAML_SUFFIXES:
        model = reader.parse_yaml(text, source=str(path))
    else:
        model = reader.parse_text(text, source=str(path))

    logger.debug(f"Configuration {path}: {model.get_pad_cell_count()} pads, "
                 f"{len(model.corners)} corners")
    return model
