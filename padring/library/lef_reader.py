"""
LEF Reader

Reads the subset of LEF (Library Exchange Format) that the padring flow
needs: macro sizes and classes, pins with direction and use, and the
database units. Technology sections (layers, vias, sites, ...) are skipped.

Example of a macro the reader understands:

    MACRO PADCELL_SIG
      CLASS PAD INOUT ;
      FOREIGN PADCELL_SIG 0 0 ;
      ORIGIN 0 0 ;
      SIZE 80 BY 200 ;
      SYMMETRY X Y R90 ;
      PIN PAD
        DIRECTION INOUT ;
        USE SIGNAL ;
        PORT
          LAYER met5 ;
            RECT 10 10 70 70 ;
        END
      END PAD
    END PADCELL_SIG
"""

from pathlib import Path
from typing import Iterable, List, Optional, Union
import logging
import re

from .cells import CellInfo, CellLibrary, PinDirection, PinInfo, PinUse
from ..errors import ConfigParseError

logger = logging.getLogger(__name__)

# Top-level blocks closed by "END <name>" that carry nothing we need
NAMED_SKIP_BLOCKS = {"LAYER", "VIA", "VIARULE", "SITE", "NONDEFAULTRULE"}
# Top-level blocks closed by "END <keyword>"
KEYWORD_SKIP_BLOCKS = {"PROPERTYDEFINITIONS", "SPACING", "MAXVIASTACK"}

_TOKEN_RE = re.compile(r'"[^"]*"|;|[^\s;]+')


class _Token:
    __slots__ = ("text", "line")

    def __init__(self, text: str, line: int):
        self.text = text
        self.line = line

    @property
    def upper(self) -> str:
        return self.text.upper()


def _tokenize(text: str) -> List[_Token]:
    tokens = []
    for lineno, line in enumerate(text.splitlines(), start=1):
        for match in _TOKEN_RE.finditer(line):
            word = match.group(0)
            if word.startswith("#"):
                break
            tokens.append(_Token(word, lineno))
    return tokens


class LEFReader:
    """
    Token based LEF parser filling a CellLibrary.

    Usage:
        reader = LEFReader()
        reader.parse_file("pads.lef")
        reader.parse_file("fillers.lef")
        library = reader.library
    """

    def __init__(self, library: Optional[CellLibrary] = None):
        self.library = library or CellLibrary()
        self._tokens: List[_Token] = []
        self._pos = 0
        self._source = "<string>"

    # --- token stream ---

    def _eof(self) -> bool:
        return self._pos >= len(self._tokens)

    def _error(self, message: str) -> ConfigParseError:
        if self._tokens:
            index = min(self._pos, len(self._tokens) - 1)
            line = self._tokens[index].line
        else:
            line = None
        return ConfigParseError(message, self._source, line)

    def _peek(self) -> Optional[_Token]:
        if self._eof():
            return None
        return self._tokens[self._pos]

    def _next(self) -> _Token:
        if self._eof():
            raise self._error("Unexpected end of file")
        token = self._tokens[self._pos]
        self._pos += 1
        return token

    def _statement(self) -> List[str]:
        """Consume tokens up to and including the next ';'."""
        words = []
        while True:
            token = self._next()
            if token.text == ";":
                return words
            words.append(token.text)

    def _number(self, word: str) -> float:
        try:
            return float(word)
        except ValueError:
            raise self._error(f"Expected a number, got '{word}'")

    # --- public API ---

    def parse_file(self, path: Union[str, Path]) -> CellLibrary:
        path = Path(path)
        if not path.exists():
            raise ConfigParseError("LEF file not found", str(path))
        logger.info(f"Reading LEF {path}")
        return self.parse(path.read_text(), source=str(path))

    def parse(self, text: str, source: str = "<string>") -> CellLibrary:
        self._tokens = _tokenize(text)
        self._pos = 0
        self._source = source

        while not self._eof():
            token = self._next()
            keyword = token.upper
            if keyword == "MACRO":
                self._parse_macro(self._next().text)
            elif keyword == "UNITS":
                self._parse_units()
            elif keyword in NAMED_SKIP_BLOCKS:
                self._skip_block(self._next().text)
            elif keyword in KEYWORD_SKIP_BLOCKS:
                self._skip_block(token.text)
            elif keyword == "BEGINEXT":
                while self._next().upper != "ENDEXT":
                    pass
            elif keyword == "END":
                # END LIBRARY
                self._next()
                break
            else:
                self._statement()

        return self.library

    # --- blocks ---

    def _skip_block(self, name: str):
        while True:
            token = self._next()
            if token.upper == "END":
                following = self._peek()
                if following is not None and following.text == name:
                    self._next()
                    return

    def _skip_anonymous_block(self):
        """Skip an OBS or PORT style block closed by a bare END."""
        while True:
            token = self._peek()
            if token is None:
                raise self._error("Unexpected end of file inside block")
            if token.upper == "END":
                self._next()
                return
            self._statement()

    def _parse_units(self):
        while True:
            token = self._next()
            if token.upper == "END":
                self._next()  # UNITS
                return
            words = self._statement()
            if token.upper == "DATABASE" and len(words) >= 2 and words[0].upper() == "MICRONS":
                self.library.database_units = self._number(words[1])
                logger.debug(f"LEF database units: {self.library.database_units:g} per micron")

    def _parse_macro(self, name: str):
        cell = CellInfo(name=name)

        while True:
            token = self._next()
            keyword = token.upper

            if keyword == "END":
                end_name = self._next().text
                if end_name != name:
                    raise self._error(f"Expected 'END {name}', got 'END {end_name}'")
                break
            elif keyword == "PIN":
                pin = self._parse_pin(self._next().text)
                cell.pins[pin.name] = pin
            elif keyword == "OBS":
                self._skip_anonymous_block()
            elif keyword == "CLASS":
                words = self._statement()
                cell.cell_class = " ".join(w.upper() for w in words)
                cell.is_filler = (
                    len(words) >= 2
                    and words[0].upper() == "PAD"
                    and words[1].upper() == "SPACER"
                )
            elif keyword == "FOREIGN":
                words = self._statement()
                if words:
                    cell.foreign = words[0]
                if len(words) >= 3:
                    cell.foreign_offset = (self._number(words[1]), self._number(words[2]))
            elif keyword == "ORIGIN":
                words = self._statement()
                if len(words) >= 2:
                    cell.origin = (self._number(words[0]), self._number(words[1]))
            elif keyword == "SIZE":
                words = self._statement()
                if len(words) != 3 or words[1].upper() != "BY":
                    raise ConfigParseError(f"Malformed SIZE statement in macro {name}",
                                           self._source, token.line)
                cell.size_x = self._number(words[0])
                cell.size_y = self._number(words[2])
            elif keyword == "SYMMETRY":
                cell.symmetry = " ".join(self._statement())
            else:
                self._statement()

        self.library.add_cell(cell)

    def _parse_pin(self, name: str) -> PinInfo:
        pin = PinInfo(name=name)

        while True:
            token = self._next()
            keyword = token.upper

            if keyword == "END":
                self._next()  # pin name
                return pin
            elif keyword == "PORT":
                self._parse_port(pin)
            elif keyword == "DIRECTION":
                words = self._statement()
                if words:
                    pin.direction = PinDirection.from_lef(words[0])
            elif keyword == "USE":
                words = self._statement()
                if words:
                    pin.use = PinUse.from_lef(words[0])
            else:
                self._statement()

    def _parse_port(self, pin: PinInfo):
        while True:
            token = self._peek()
            if token is None:
                raise self._error(f"Unexpected end of file in PORT of pin {pin.name}")
            if token.upper == "END":
                self._next()
                return
            words = self._statement()
            if words and words[0].upper() == "CLASS" and len(words) > 1:
                pin.port_class = words[1].upper()


def load_library(paths: Iterable[Union[str, Path]]) -> CellLibrary:
    """Read several LEF files into one library; the last database unit wins."""
    library = CellLibrary()
    database_units = 0.0

    for path in paths:
        reader = LEFReader(CellLibrary())
        partial = reader.parse_file(path)
        for cell in partial:
            library.add_cell(cell)
        if partial.database_units > 0.0:
            database_units = partial.database_units

    library.database_units = database_units
    library.check_integrity()
    logger.info(f"{len(library)} cells read")
    library.dump()
    return library
