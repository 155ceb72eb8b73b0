"""Orchestrator: detect → load → generate → render."""

from __future__ import annotations

import logging
from pathlib import Path

from depgraph.config import Generator
from depgraph.dot.graph import GraphLabel
from depgraph.errors import SourceError
from depgraph.generator import DotGenerator
from depgraph.model import ProjectRef
from depgraph.render import output_stem, render_image, write_dot
from depgraph.settings import load_settings
from depgraph.sources import detect_source

logger = logging.getLogger(__name__)


def load_forest(project_dir: Path) -> ProjectRef:
    """Load the resolved project forest of *project_dir*."""
    source = detect_source(project_dir)
    if source is None:
        raise SourceError(
            f"Could not detect project type of {project_dir} "
            "(expected depgraph.yaml, pom.xml or a Gradle build)"
        )
    logger.debug("Source: %s", type(source).__name__)
    return source.load(project_dir)


def _customize(
    generator: Generator, *, label: str | None, children: bool | None
) -> Generator:
    changes: dict = {}
    if label is not None:
        changes["graph_label"] = GraphLabel(label)
    if children is False:
        changes["children"] = lambda _: False
    return generator.copy(**changes) if changes else generator


def generate(
    project_dir: Path,
    *,
    generator_name: str | None = None,
    label: str | None = None,
    children: bool | None = None,
) -> str:
    """Return the DOT text for *project_dir* without writing anything."""
    project_dir = project_dir.resolve()
    settings = load_settings(project_dir)
    generator = _customize(
        settings.generator(generator_name), label=label, children=children
    )
    return DotGenerator(load_forest(project_dir), generator).generate()


def run(
    project_dir: Path,
    *,
    output_dir: Path | None = None,
    generator_name: str | None = None,
    image_format: str | None = None,
    no_image: bool = False,
    label: str | None = None,
    children: bool | None = None,
) -> list[Path]:
    """Run the full depgraph pipeline and return the written paths."""
    project_dir = project_dir.resolve()
    settings = load_settings(project_dir)
    generator = _customize(
        settings.generator(generator_name), label=label, children=children
    )

    forest = load_forest(project_dir)
    text = DotGenerator(forest, generator).generate()

    out_dir = output_dir or settings.output_dir
    if not out_dir.is_absolute():
        out_dir = project_dir / out_dir
    dot_path = out_dir / f"{output_stem(generator.name)}.dot"
    write_dot(text, dot_path)
    logger.info("Generated %s", dot_path)
    written = [dot_path]

    fmt = None if no_image else (image_format or settings.format)
    if fmt:
        image_path = render_image(dot_path, fmt)
        if image_path is not None:
            logger.info("Generated %s", image_path)
            written.append(image_path)

    return written
