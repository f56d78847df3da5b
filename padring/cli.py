#!/usr/bin/env python3
"""
Padring CLI

Command-line interface of the padring generator.

Usage:
    padring -L pads.lef -o ring.gds ring.cfg
    padring -L tech.lef -L pads.lef --def ring.def --svg ring.svg ring.yaml
"""

import argparse
import logging
import sys
from typing import List, Optional

from . import __version__
from .engine import GeneratorConfig, PadringGenerator
from .errors import PadringError
from .layout.gap_filler import ResidualPolicy

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="padring",
        description="Padring - ASIC padring generator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  padring -L pads.lef -o ring.gds ring.cfg
  padring -L pads.lef --filler FILL --svg ring.svg --csv pins.csv ring.cfg
  padring -L pads.lef --def ring.def --ver ring.v --residual carry ring.yaml
        """,
    )

    parser.add_argument('--version', action='version', version=f'padring {__version__}')
    parser.add_argument('config', help='Padring configuration file (.cfg or .yaml)')
    parser.add_argument('-L', '--lef', action='append', default=[], metavar='LEF',
                        help='LEF file with the pad cells (repeatable)')
    parser.add_argument('-o', '--output', metavar='GDS', help='GDS2 output file')
    parser.add_argument('--svg', help='SVG output file')
    parser.add_argument('--def', dest='def_file', metavar='DEF', help='DEF output file')
    parser.add_argument('--ver', metavar='VERILOG', help='Verilog netlist output file')
    parser.add_argument('--csv', help='CSV pin assignment output file')
    parser.add_argument('--filler', action='append', default=[], metavar='PREFIX',
                        help='Filler cell name prefix (repeatable)')
    parser.add_argument('--residual', choices=[p.value for p in ResidualPolicy],
                        default=ResidualPolicy.DISCARD.value,
                        help='Sub-grid leftover of a gap: discard it or keep a running '
                             'total over the side (default: discard)')

    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument('-v', '--verbose', action='store_true', help='Debug output')
    verbosity.add_argument('-q', '--quiet', action='store_true', help='Errors only')
    return parser


def setup_logging(verbose: bool = False, quiet: bool = False):
    level = logging.INFO
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose, args.quiet)
    logger.info(f"PADRING version {__version__}")

    if not args.lef:
        logger.error("No LEF files given, use -L to add the pad cell library")
        return 1

    config = GeneratorConfig(
        filler_prefixes=args.filler,
        residual_policy=ResidualPolicy(args.residual),
        gds_path=args.output,
        svg_path=args.svg,
        def_path=args.def_file,
        verilog_path=args.ver,
        csv_path=args.csv,
    )

    try:
        PadringGenerator(config).run(args.lef, args.config)
    except PadringError as e:
        logger.error(str(e))
        return 1
    except OSError as e:
        logger.error(f"Cannot access {e.filename}: {e.strerror}")
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
