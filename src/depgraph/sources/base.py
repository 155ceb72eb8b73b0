"""Forest source protocol — all sources conform to this interface."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from depgraph.model import ProjectRef


class ForestSource(Protocol):
    """Protocol for loaders of already-resolved project forests."""

    def can_handle(self, project_dir: Path) -> bool:
        """Return True if this source applies to the given project."""
        ...

    def load(self, project_dir: Path) -> ProjectRef:
        """Return the resolved project forest rooted at *project_dir*."""
        ...
