"""Generator configuration: the predicates and callbacks that shape a graph."""

from __future__ import annotations

import dataclasses
import re
from collections.abc import Callable
from dataclasses import dataclass

from depgraph.dot.graph import GraphLabel, GraphNode, Justification, Location
from depgraph.identity import shorten_coordinate
from depgraph.model import Configuration, ProjectRef, ResolvedDependency

# compileClasspath, releaseRuntimeClasspath, flavor1DebugCompileClasspath,
# compile, runtime, default
_CLASSPATH_RE = re.compile(
    r"^(?:"
    r"(?:[a-z][A-Za-z0-9]*(?:Compile|Runtime)|compile|runtime)(?:Classpath)?"
    r"|default"
    r")$"
)
# testCompileClasspath, androidTestRuntimeClasspath, debugUnitTestCompileClasspath
_TEST_RE = re.compile(r"(?:^test|Test)(?=[A-Z]|$)")


def is_classpath_configuration(configuration: Configuration) -> bool:
    """Default configuration policy: non-test compile/runtime classpaths."""
    name = configuration.name
    return bool(_CLASSPATH_RE.match(name)) and not _TEST_RE.search(name)


def _always(_) -> bool:
    return True


def _unchanged(node: GraphNode, _) -> GraphNode:
    return node


@dataclass(frozen=True)
class Generator:
    """Decision points consulted while building a dependency graph.

    Every field can be overridden independently; use :meth:`copy` to
    derive a variant from an existing generator.
    """

    name: str = ""
    include: Callable[[ResolvedDependency], bool] = _always
    children: Callable[[ResolvedDependency], bool] = _always
    dependency_node: Callable[[GraphNode, ResolvedDependency], GraphNode] = _unchanged
    include_project: Callable[[ProjectRef], bool] = _always
    project_node: Callable[[GraphNode, ProjectRef], GraphNode] = _unchanged
    include_configuration: Callable[[Configuration], bool] = is_classpath_configuration
    label: Callable[[ResolvedDependency], str] = shorten_coordinate
    graph_label: GraphLabel | None = None

    def copy(self, **changes) -> Generator:
        return dataclasses.replace(self, **changes)

    @classmethod
    def from_settings(cls, name: str, table: dict) -> Generator:
        """Build a generator from a ``[generators.<name>]`` settings table.

        Recognized keys: ``include_groups`` and ``exclude_groups`` (group
        prefixes), ``exclude_projects`` (names), ``include_configurations``
        (regex matched against the full configuration name), ``children``
        (bool), ``label``, ``label_location`` and ``label_justification``.
        """
        changes: dict = {"name": name}

        include_groups = tuple(table.get("include_groups", ()))
        exclude_groups = tuple(table.get("exclude_groups", ()))
        if include_groups or exclude_groups:

            def include(dependency: ResolvedDependency) -> bool:
                group = dependency.group or ""
                if include_groups and not group.startswith(include_groups):
                    return False
                return not (exclude_groups and group.startswith(exclude_groups))

            changes["include"] = include

        exclude_projects = frozenset(table.get("exclude_projects", ()))
        if exclude_projects:
            changes["include_project"] = lambda p: p.name not in exclude_projects

        pattern = table.get("include_configurations")
        if pattern:
            config_re = re.compile(pattern)
            changes["include_configuration"] = lambda c: bool(
                config_re.fullmatch(c.name)
            )

        if table.get("children") is False:
            changes["children"] = lambda _: False

        text = table.get("label")
        if text:
            location = table.get("label_location")
            justification = table.get("label_justification")
            changes["graph_label"] = GraphLabel(
                text,
                Location[location.upper()] if location else None,
                Justification[justification.upper()] if justification else None,
            )

        return cls(**changes)


ALL = Generator()
