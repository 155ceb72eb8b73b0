"""Command-line interface for depgraph."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from depgraph.errors import DepgraphError
from depgraph.pipeline import generate, run

logger = logging.getLogger("depgraph")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="depgraph",
        description="Render the resolved dependency graph of a project as DOT.",
    )
    parser.add_argument(
        "project_dir",
        type=Path,
        help="Path to the project to graph",
    )
    parser.add_argument(
        "-o",
        "--output-dir",
        type=Path,
        default=None,
        help="Output directory (default: build/reports/dependency-graph)",
    )
    parser.add_argument(
        "--format",
        default=None,
        dest="image_format",
        help="Image format passed to Graphviz dot, or 'none' (default: png)",
    )
    parser.add_argument(
        "-g",
        "--generator",
        default=None,
        help="Named generator from the depgraph settings",
    )
    parser.add_argument(
        "--no-children",
        action="store_false",
        dest="children",
        default=None,
        help="Only draw first-level dependencies",
    )
    parser.add_argument(
        "--label",
        default=None,
        help="Graph caption",
    )
    parser.add_argument(
        "--stdout",
        action="store_true",
        help="Print the DOT text instead of writing files",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose (debug) output",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.WARNING, format="%(message)s")
    if args.verbose:
        logger.setLevel(logging.DEBUG)

    try:
        if args.stdout:
            print(
                generate(
                    args.project_dir,
                    generator_name=args.generator,
                    label=args.label,
                    children=args.children,
                )
            )
            return

        run(
            args.project_dir,
            output_dir=args.output_dir,
            generator_name=args.generator,
            image_format=args.image_format,
            no_image=args.image_format == "none",
            label=args.label,
            children=args.children,
        )
    except DepgraphError as e:
        logger.error("%s", e)
        sys.exit(1)
