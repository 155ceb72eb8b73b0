"""Loaders of already-resolved project forests, one per build tool."""

from __future__ import annotations

from pathlib import Path

from depgraph.sources.base import ForestSource
from depgraph.sources.gradle import GradleSource
from depgraph.sources.manifest import ManifestSource
from depgraph.sources.maven import MavenSource

__all__ = [
    "ForestSource",
    "GradleSource",
    "ManifestSource",
    "MavenSource",
    "detect_source",
]


def detect_source(project_dir: Path) -> ForestSource | None:
    """Return the first source applicable to *project_dir*.

    An explicit manifest wins over build files.
    """
    sources: list[ForestSource] = [ManifestSource(), MavenSource(), GradleSource()]
    for source in sources:
        if source.can_handle(project_dir):
            return source
    return None
