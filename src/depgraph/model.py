"""Build-tool-agnostic data model for already-resolved project forests."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class ResolvedDependency:
    """A node in an already-resolved dependency tree.

    Module dependencies carry ``group`` and ``artifact``; inter-project
    dependencies carry the ``project`` name instead.
    """

    group: str | None = None
    artifact: str | None = None
    version: str | None = None
    children: list[ResolvedDependency] = field(default_factory=list)
    project: str | None = None  # name of a project in the same forest

    @property
    def is_project(self) -> bool:
        return self.project is not None

    @property
    def coordinate(self) -> str:
        if self.is_project:
            return f"project :{self.project}"
        parts = [self.group or "", self.artifact or ""]
        if self.version:
            parts.append(self.version)
        return ":".join(parts)


@dataclass
class Configuration:
    """A named dependency scope and its first-level resolved dependencies."""

    name: str
    dependencies: list[ResolvedDependency] = field(default_factory=list)
    resolvable: bool = True


@dataclass
class ProjectRef:
    """A project (or sub-project) of the forest."""

    name: str
    configurations: list[Configuration] = field(default_factory=list)
    subprojects: list[ProjectRef] = field(default_factory=list)
    path: str | None = None  # e.g. ":lib"

    def configuration(self, name: str) -> Configuration:
        """Return the configuration called *name*, creating it if needed."""
        for config in self.configurations:
            if config.name == name:
                return config
        config = Configuration(name=name)
        self.configurations.append(config)
        return config

    def walk(self):
        """Yield this project and all nested sub-projects, depth first."""
        yield self
        for sub in self.subprojects:
            yield from sub.walk()
