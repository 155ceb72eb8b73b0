"""Render resolved project dependency forests as Graphviz DOT graphs."""

from depgraph.config import ALL, Generator
from depgraph.generator import DotGenerator
from depgraph.model import Configuration, ProjectRef, ResolvedDependency

__all__ = [
    "ALL",
    "Configuration",
    "DotGenerator",
    "Generator",
    "ProjectRef",
    "ResolvedDependency",
]
