"""Tests for LEF parsing."""

import logging

import pytest

from padring.errors import ConfigParseError
from padring.library.cells import PinDirection, PinUse
from padring.library.lef_reader import LEFReader, load_library


class TestMacros:
    def test_all_macros_read(self, pad_library):
        assert len(pad_library) == 10
        assert "pad_in" in pad_library
        assert "pad_site" not in pad_library

    def test_size(self, pad_library):
        cell = pad_library.get_cell_by_name("pad_in")

        assert (cell.size_x, cell.size_y) == (20, 10)

    def test_fractional_size(self, pad_library):
        assert pad_library.get_cell_by_name("FILL0_3").size_x == pytest.approx(0.3)

    def test_spacer_class_flags_filler(self, pad_library):
        fillers = [cell.name for cell in pad_library.filler_cells()]

        assert fillers == ["FILL5", "FILL2", "FILL1", "FILL0_3", "SPC10"]
        assert not pad_library.get_cell_by_name("FILLX_LOGO").is_filler

    def test_class_foreign_symmetry(self, pad_library):
        cell = pad_library.get_cell_by_name("pad_in")

        assert cell.cell_class == "PAD INOUT"
        assert cell.foreign == "pad_in"
        assert cell.symmetry == "X Y R90"

    def test_database_units(self, pad_library):
        assert pad_library.database_units == 1000


class TestPins:
    def test_pins_in_order(self, pad_library):
        cell = pad_library.get_cell_by_name("pad_in")

        assert list(cell.pins) == ["PAD", "Y", "VDD"]

    def test_direction_and_use(self, pad_library):
        pins = pad_library.get_cell_by_name("pad_in").pins

        assert pins["PAD"].direction == PinDirection.INOUT
        assert pins["Y"].direction == PinDirection.OUT
        assert pins["VDD"].use == PinUse.POWER

    def test_port_class(self, pad_library):
        pins = pad_library.get_cell_by_name("pad_in").pins

        assert pins["Y"].port_class == "CORE"
        assert pins["PAD"].port_class == ""

    def test_signal_pins_skip_power(self, pad_library):
        names = [pin.name for pin in pad_library.get_cell_by_name("pad_in").signal_pins()]

        assert names == ["PAD", "Y"]


class TestErrors:
    def test_malformed_size(self):
        text = "MACRO bad\n  SIZE 10 20 ;\nEND bad\n"

        with pytest.raises(ConfigParseError) as exc_info:
            LEFReader().parse(text, source="bad.lef")

        assert exc_info.value.source == "bad.lef"
        assert exc_info.value.line == 2

    def test_mismatched_end(self):
        text = "MACRO a\n  SIZE 1 BY 1 ;\nEND b\n"

        with pytest.raises(ConfigParseError):
            LEFReader().parse(text)

    def test_truncated_file(self):
        with pytest.raises(ConfigParseError):
            LEFReader().parse("MACRO a\n  SIZE 1 BY 1 ;\n")

    def test_bad_number(self):
        with pytest.raises(ConfigParseError):
            LEFReader().parse("MACRO a\n  SIZE x BY 1 ;\nEND a\n")

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigParseError):
            LEFReader().parse_file(tmp_path / "missing.lef")


class TestLoadLibrary:
    def test_merges_files(self, tmp_path, pad_lef_file):
        extra = tmp_path / "extra.lef"
        extra.write_text(
            "UNITS\n  DATABASE MICRONS 2000 ;\nEND UNITS\n"
            "MACRO extra_pad\n  CLASS PAD INPUT ;\n  SIZE 30 BY 10 ;\nEND extra_pad\n"
            "END LIBRARY\n"
        )

        library = load_library([pad_lef_file, extra])

        assert "pad_in" in library
        assert "extra_pad" in library
        assert library.database_units == 2000

    def test_later_definition_wins(self, tmp_path, pad_lef_file):
        override = tmp_path / "override.lef"
        override.write_text("MACRO pad_in\n  SIZE 25 BY 10 ;\nEND pad_in\n")

        library = load_library([pad_lef_file, override])

        assert library.get_cell_by_name("pad_in").size_x == 25
        assert library.database_units == 1000

    def test_cells_dumped_at_debug(self, pad_lef_file, caplog):
        with caplog.at_level(logging.DEBUG, logger="padring.library"):
            load_library([pad_lef_file])

        assert "Cell pad_in: 20 x 10" in caplog.text
        assert "pin Y out signal" in caplog.text

    def test_skips_technology_sections(self):
        text = (
            "LAYER met1\n  TYPE ROUTING ;\n  WIDTH 0.14 ;\nEND met1\n"
            "VIA via1 DEFAULT\n  LAYER met1 ;\n    RECT -0.1 -0.1 0.1 0.1 ;\nEND via1\n"
            "PROPERTYDEFINITIONS\n  LAYER LEF58_TYPE STRING ;\nEND PROPERTYDEFINITIONS\n"
            "BEGINEXT \"tag\"\n  anything ;\nENDEXT\n"
            "MACRO p\n  SIZE 1 BY 2 ;\nEND p\n"
        )

        library = LEFReader().parse(text)

        assert [cell.name for cell in library] == ["p"]
