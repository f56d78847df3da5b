"""
Shared test fixtures for padring tests.

Provides a small pad cell library (as LEF text and as CellInfo objects),
filler registries and configuration files for layout and writer tests.
"""

import pytest
from pathlib import Path

from padring.layout.fillers import FillerRegistry
from padring.library.cells import (
    CellInfo,
    CellLibrary,
    PinDirection,
    PinInfo,
    PinUse,
)
from padring.library.lef_reader import LEFReader


PAD_LEF = """\
VERSION 5.8 ;
BUSBITCHARS "[]" ;
DIVIDERCHAR "/" ;

UNITS
  DATABASE MICRONS 1000 ;
END UNITS

SITE pad_site
  CLASS PAD ;
  SIZE 1 BY 10 ;
END pad_site

MACRO corner
  CLASS ENDCAP BOTTOMLEFT ;
  FOREIGN corner 0 0 ;
  ORIGIN 0 0 ;
  SIZE 10 BY 10 ;
  SYMMETRY X Y R90 ;
END corner

MACRO pad_in
  CLASS PAD INOUT ;
  FOREIGN pad_in 0 0 ;
  ORIGIN 0 0 ;
  SIZE 20 BY 10 ;
  SYMMETRY X Y R90 ;
  PIN PAD
    DIRECTION INOUT ;
    USE SIGNAL ;
    PORT
      LAYER met5 ;
        RECT 2 0 18 6 ;
    END
  END PAD
  PIN Y
    DIRECTION OUTPUT ;
    USE SIGNAL ;
    PORT
      CLASS CORE ;
      LAYER met2 ;
        RECT 9 9.5 10 10 ;
    END
  END Y
  PIN VDD
    DIRECTION INOUT ;
    USE POWER ;
    PORT
      LAYER met4 ;
        RECT 0 2 20 4 ;
    END
  END VDD
  OBS
    LAYER met1 ;
      RECT 0 0 20 10 ;
  END
END pad_in

MACRO pad_vdd
  CLASS PAD POWER ;
  SIZE 20 BY 10 ;
  PIN VDD
    DIRECTION INOUT ;
    USE POWER ;
  END VDD
END pad_vdd

MACRO bond_sig
  CLASS COVER BUMP ;
  SIZE 20 BY 10 ;
  PIN A
    DIRECTION INPUT ;
    USE SIGNAL ;
  END A
END bond_sig

MACRO FILL5
  CLASS PAD SPACER ;
  SIZE 5 BY 10 ;
END FILL5

MACRO FILL2
  CLASS PAD SPACER ;
  SIZE 2 BY 10 ;
END FILL2

MACRO FILL1
  CLASS PAD SPACER ;
  SIZE 1 BY 10 ;
END FILL1

MACRO FILL0_3
  CLASS PAD SPACER ;
  SIZE 0.3 BY 10 ;
END FILL0_3

MACRO FILLX_LOGO
  CLASS PAD INOUT ;
  SIZE 4 BY 10 ;
END FILLX_LOGO

MACRO SPC10
  CLASS PAD SPACER ;
  SIZE 10 BY 10 ;
END SPC10

END LIBRARY
"""


@pytest.fixture
def pad_lef_file(tmp_path) -> Path:
    """PAD_LEF written to disk."""
    path = tmp_path / "pads.lef"
    path.write_text(PAD_LEF)
    return path


@pytest.fixture
def pad_library() -> CellLibrary:
    """Library parsed from PAD_LEF."""
    return LEFReader().parse(PAD_LEF, source="pads.lef")


@pytest.fixture
def simple_library() -> CellLibrary:
    """Library built directly from CellInfo objects."""
    library = CellLibrary(database_units=1000)
    library.add_cell(CellInfo(name="corner", size_x=10, size_y=10, cell_class="ENDCAP"))
    library.add_cell(CellInfo(
        name="pad_in",
        size_x=20,
        size_y=10,
        cell_class="PAD INOUT",
        pins={
            "PAD": PinInfo("PAD", PinDirection.INOUT, PinUse.SIGNAL),
            "Y": PinInfo("Y", PinDirection.OUT, PinUse.SIGNAL, "CORE"),
            "VDD": PinInfo("VDD", PinDirection.INOUT, PinUse.POWER),
        },
    ))
    for name, width in (("FILL5", 5), ("FILL2", 2), ("FILL1", 1), ("FILL0_3", 0.3)):
        library.add_cell(CellInfo(name=name, size_x=width, size_y=10,
                                  cell_class="PAD SPACER", is_filler=True))
    return library


@pytest.fixture
def filler_registry() -> FillerRegistry:
    """Fillers of width 5, 2, 1 and 0.3 registered out of order."""
    return FillerRegistry([("FILL1", 1), ("FILL5", 5), ("FILL0_3", 0.3), ("FILL2", 2)])


@pytest.fixture
def padring_cfg(tmp_path) -> Path:
    """A 200 x 200 die with corners, pads on three sides and an empty east side."""
    path = tmp_path / "ring.cfg"
    path.write_text("""\
# test padring
DESIGN test_ring;
AREA 200 200;
GRID 1;
FILLER FILL;

CORNER C_SW SW corner;
CORNER C_SE SE corner;
CORNER C_NE NE corner;
CORNER C_NW NW corner;

PAD P_S1 S pad_in;
PAD P_S2 S pad_in;

PAD P_N1 N pad_in FLIP;
SPACE 13;
PAD P_N2 N pad_vdd;

PAD P_W1 W pad_in;
""")
    return path
