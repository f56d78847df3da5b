"""Tests for the output writers and cell orientation."""

import csv
import io
import math

import pytest

from padring.config.reader import load_config
from padring.engine import PadringGenerator
from padring.layout.items import ItemKind, PlacementItem
from padring.output import (
    CSVWriter,
    DEFWriter,
    GDS2Writer,
    Orientation,
    SVGWriter,
    VerilogWriter,
    item_orientation,
    placement_origin,
)


@pytest.fixture
def ring(pad_library, padring_cfg):
    """Laid out and filled result for the shared test configuration."""
    model = load_config(padring_cfg, pad_library)
    return PadringGenerator().build(model, pad_library)


def find(ring, instance):
    return next(item for item in ring.items if item.instance == instance)


class TestOrientation:
    @pytest.mark.parametrize("instance, expected", [
        ("P_S1", Orientation.N),
        ("P_N1", Orientation.FS),
        ("P_N2", Orientation.S),
        ("P_W1", Orientation.E),
        ("C_SW", Orientation.N),
        ("C_SE", Orientation.FN),
        ("C_NE", Orientation.S),
        ("C_NW", Orientation.FS),
    ])
    def test_orientation_per_location(self, ring, instance, expected):
        assert item_orientation(find(ring, instance)) == expected

    def test_east_side_orientation(self):
        pad = PlacementItem(kind=ItemKind.CELL, location="E", flipped=True)

        assert item_orientation(pad) == Orientation.FE

    def test_transform_rotates_counter_clockwise(self):
        assert Orientation.W.transform(1, 0) == (0, 1)
        assert Orientation.FS.transform(1, 1) == (1, -1)

    @pytest.mark.parametrize("instance, origin", [
        ("P_S1", (10, 0)),
        ("P_N1", (10, 200)),
        ("P_N2", (63, 200)),
        ("P_W1", (0, 30)),
        ("C_SE", (200, 0)),
        ("C_NE", (200, 200)),
        ("C_NW", (0, 200)),
    ])
    def test_placement_origin(self, ring, instance, origin):
        x, y, _ = placement_origin(find(ring, instance))

        assert (x, y) == pytest.approx(origin)


class TestDEFWriter:
    def test_components(self, ring):
        writer = DEFWriter("test_ring", 200, 200, database_units=1000)
        writer.write_padring(ring.items)
        text = writer.render()

        assert "DIEAREA ( 0 0 ) ( 200000 200000 ) ;" in text
        assert "UNITS DISTANCE MICRONS 1000 ;" in text
        assert f"COMPONENTS {len(ring.items)} ;" in text
        assert "- P_S1 pad_in + FIXED ( 10000 0 ) N ;" in text
        assert "- P_N1 pad_in + FIXED ( 10000 190000 ) FS ;" in text
        assert "- P_W1 pad_in + FIXED ( 0 10000 ) E ;" in text
        assert text.rstrip().endswith("END DESIGN")

    def test_default_units(self):
        assert DEFWriter("d", 1, 1).database_units == 1000

    def test_rejects_layout_only_items(self):
        writer = DEFWriter("d", 1, 1)
        flex = PlacementItem(kind=ItemKind.FLEX_SPACE, location="S", size=1, x=0, y=0)

        with pytest.raises(ValueError):
            writer.write_padring([flex])


class TestVerilogWriter:
    def test_signal_pins_become_ports(self, ring):
        writer = VerilogWriter("test_ring")
        writer.write_padring(ring.items)
        text = writer.render()

        assert text.startswith("`timescale 1ps/1ps\nmodule test_ring (")
        assert "  inout P_S1_PAD;" in text
        assert "  output P_S1_Y;" in text
        assert "  wire P_W1_Y;" in text
        assert "VDD" not in text
        assert "  pad_in P_N1(.PAD(P_N1_PAD), .Y(P_N1_Y));" in text
        assert "  pad_vdd P_N2();" in text
        assert text.rstrip().endswith("endmodule")

    def test_port_count(self, ring):
        writer = VerilogWriter("test_ring")
        writer.write_padring(ring.items)

        # four pad_in instances with two signal pins each
        assert writer.render().count("  wire ") == 8


class TestCSVWriter:
    def test_pads_in_perimeter_order(self, ring):
        writer = CSVWriter("test_ring")
        writer.write_padring(ring.items)
        rows = list(csv.reader(io.StringIO(writer.render())))

        assert rows[0] == ["pin", "side", "instance", "cell", "x", "y", "flipped"]
        assert [row[2] for row in rows[1:]] == ["P_S1", "P_S2", "P_N2", "P_N1", "P_W1"]
        assert [row[0] for row in rows[1:]] == ["1", "2", "3", "4", "5"]
        assert rows[4][6] == "yes"


class TestSVGWriter:
    def test_one_rect_per_item(self, ring):
        writer = SVGWriter("test_ring", 200, 200)
        writer.write_padring(ring.items)
        text = writer.render()

        # background and die outline plus one per item
        assert text.count("<rect ") == len(ring.items) + 2
        assert ">P_S1</text>" in text
        assert text.rstrip().endswith("</svg>")

    def test_y_axis_flipped(self, ring):
        writer = SVGWriter("test_ring", 200, 200, margin=0)
        writer.write_cell(find(ring, "C_SW"))

        assert writer._shapes[0].startswith('<rect x="0" y="190" width="10" height="10"')


class TestGDS2Writer:
    def test_references(self, ring):
        writer = GDS2Writer("test_ring", 200, 200)
        writer.write_padring(ring.items)

        refs = {(ref.cell, tuple(ref.origin)) for ref in writer.top.references}
        assert len(writer.top.references) == len(ring.items)
        assert ("pad_in", (10.0, 0.0)) in refs

        north = next(ref for ref in writer.top.references
                     if tuple(ref.origin) == pytest.approx((63, 200)))
        assert north.rotation == pytest.approx(math.pi)
        assert not north.x_reflection

    def test_save(self, ring, tmp_path):
        writer = GDS2Writer("test_ring", 200, 200, boundary_layer=235)
        writer.write_padring(ring.items)
        path = tmp_path / "ring.gds"

        writer.save(path)

        assert path.stat().st_size > 0
