"""
Padring Generator

Runs the whole flow: read the cell library and the configuration, lay out
the four sides, close every gap with fillers and hand the ring to the
requested writers. Files are written only once the ring is complete.

Example:
    >>> generator = PadringGenerator(GeneratorConfig(gds_path="ring.gds"))
    >>> result = generator.run(["pads.lef"], "ring.cfg")
    >>> result.report["pad_cells"]
    24
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple, Union
import logging

from .config.reader import load_config
from .errors import NoFillersAvailable
from .layout.fillers import FillerRegistry
from .layout.gap_filler import FillResult, GapFiller, ResidualPolicy, perimeter_items
from .layout.items import PlacementItem, Side
from .layout.padring import PadringModel
from .library.cells import CellLibrary
from .library.lef_reader import load_library
from .output import (
    CSVWriter,
    DEFWriter,
    GDS2Writer,
    PadringWriter,
    SVGWriter,
    VerilogWriter,
)

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


@dataclass
class GeneratorConfig:
    """Run options that do not live in the padring configuration file."""
    # Filler prefixes added to the ones from the configuration
    filler_prefixes: List[str] = field(default_factory=list)
    residual_policy: ResidualPolicy = ResidualPolicy.DISCARD

    # Output files, None skips the format
    gds_path: Optional[PathLike] = None
    svg_path: Optional[PathLike] = None
    def_path: Optional[PathLike] = None
    verilog_path: Optional[PathLike] = None
    csv_path: Optional[PathLike] = None


@dataclass
class PadringResult:
    """Outcome of a successful run."""
    model: PadringModel
    library: CellLibrary
    fillers: Dict[Side, FillResult] = field(default_factory=dict)
    items: List[PlacementItem] = field(default_factory=list)
    report: Dict[str, object] = field(default_factory=dict)
    written: List[Path] = field(default_factory=list)

    @property
    def filler_count(self) -> int:
        return sum(len(result.fillers) for result in self.fillers.values())


class PadringGenerator:
    """Drives library loading, layout, filling and output."""

    def __init__(self, config: Optional[GeneratorConfig] = None):
        self.config = config or GeneratorConfig()

    def initial_registry(self, model: PadringModel, library: CellLibrary) -> FillerRegistry:
        prefixes = list(model.fillers) + list(self.config.filler_prefixes)
        registry = FillerRegistry.from_library(prefixes, library)
        if registry.cell_count == 0:
            raise NoFillersAvailable(
                "Cannot proceed without filler cells. "
                "Please use the --filler option or a FILLER statement "
                "naming PAD SPACER cells from the LEF files."
            )
        logger.info(f"Found {registry.cell_count} filler cells")
        return registry

    def build(self, model: PadringModel, library: CellLibrary) -> PadringResult:
        """Lay out and fill an already loaded model."""
        registry = self.initial_registry(model, library)
        model.validate_die_geometry()

        report = {
            "design": model.design_name,
            "die_width": model.die_width,
            "die_height": model.die_height,
            "grid": model.grid,
            "pad_cells": model.get_pad_cell_count(),
            "smallest_filler": registry.smallest_width(),
        }
        logger.info(f"Die area        : {model.die_width:g} x {model.die_height:g} microns")
        logger.info(f"Grid            : {model.grid:g} microns")
        logger.info(f"Padring cells   : {report['pad_cells']}")
        logger.info(f"Smallest filler : {registry.smallest_width():g} microns")

        model.do_layout()

        filler = GapFiller(
            model.grid,
            library=library,
            policy=self.config.residual_policy,
            reserved_names=model.instance_names(),
        )
        fillers = filler.fill_padring(model, registry)

        result = PadringResult(model=model, library=library, fillers=fillers)
        result.items = perimeter_items(model, fillers)
        report["fillers_placed"] = result.filler_count
        report["residue_discarded"] = sum(r.discarded for r in fillers.values())
        report["residue_carried"] = sum(r.carried for r in fillers.values())
        result.report = report
        logger.info(f"Fillers placed  : {result.filler_count}")
        return result

    def run(self, lef_paths: Sequence[PathLike], config_path: PathLike) -> PadringResult:
        """
        Full flow from files to files.

        Raises:
            PadringError: any failure; nothing is written in that case.
        """
        library = load_library(lef_paths)

        logger.info(f"Reading padring configuration {config_path}")
        model = load_config(config_path, library)

        result = self.build(model, library)
        result.written = self.write_outputs(result)
        return result

    def writers(self, result: PadringResult) -> List[Tuple[PadringWriter, Path]]:
        """(writer, path) for every requested output format."""
        model = result.model
        name, width, height = model.design_name, model.die_width, model.die_height
        requested = [
            (self.config.gds_path, lambda: GDS2Writer(name, width, height)),
            (self.config.svg_path, lambda: SVGWriter(name, width, height)),
            (self.config.def_path, lambda: DEFWriter(
                name, width, height, result.library.database_units)),
            (self.config.verilog_path, lambda: VerilogWriter(name, width, height)),
            (self.config.csv_path, lambda: CSVWriter(name, width, height)),
        ]
        return [(factory(), Path(path)) for path, factory in requested if path]

    def write_outputs(self, result: PadringResult) -> List[Path]:
        """
        Write every requested format, all or nothing.

        Every writer is filled in memory before the first file is opened.
        If a save fails, the files already written by this call are removed
        and the error is re-raised.
        """
        outputs = self.writers(result)
        for writer, _ in outputs:
            writer.write_padring(result.items)

        written = []
        try:
            for writer, path in outputs:
                writer.save(path)
                written.append(path)
        except OSError:
            for path in written:
                logger.warning(f"Removing partial output {path}")
                path.unlink(missing_ok=True)
            raise
        return written
