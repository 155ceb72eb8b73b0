"""Exceptions raised by depgraph."""

from __future__ import annotations


class DepgraphError(Exception):
    """Base class for all depgraph errors."""


class GraphGenerationError(DepgraphError):
    """A generation request could not produce a complete graph."""


class MalformedDependencyError(GraphGenerationError):
    """A resolved dependency lacks the coordinates needed to identify it."""

    def __init__(self, dependency, parent: str):
        self.dependency = dependency
        self.parent = parent
        super().__init__(
            f"Resolved dependency below {parent!r} has no group/artifact: "
            f"{dependency!r}"
        )


class UnknownProjectError(GraphGenerationError):
    """A project dependency names a project that is not in the forest."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Project dependency on unknown project {name!r}")


class UnknownNodeError(GraphGenerationError):
    """An edge refers to a node key that was never registered."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"No node registered for key {key!r}")


class SourceError(DepgraphError):
    """A project forest could not be loaded."""


class RenderError(DepgraphError):
    """The external layout engine failed to render a graph."""


class SettingsError(DepgraphError):
    """A depgraph settings table is invalid."""
