"""Walk a resolved project forest and build its dependency graph."""

from __future__ import annotations

import logging

from depgraph.config import ALL, Generator
from depgraph.dot.graph import Graph
from depgraph.dot.serializer import to_dot
from depgraph.dot.shape import Shape
from depgraph.errors import MalformedDependencyError, UnknownProjectError
from depgraph.identity import module_key, project_key
from depgraph.model import ProjectRef, ResolvedDependency

logger = logging.getLogger(__name__)

_DEFAULT_ATTRIBUTES = {"shape": Shape.RECTANGLE.value}


class DotGenerator:
    """Build the DOT graph of *project* as configured by *generator*.

    A multi-project root is represented by its sub-projects only, nested
    ones included, in declaration order. Each call to :meth:`generate_graph`
    starts from a fresh graph.
    """

    def __init__(self, project: ProjectRef, generator: Generator = ALL) -> None:
        self.project = project
        self.generator = generator
        self._forest = {p.name: p for p in project.walk()}

    def _projects(self) -> list[ProjectRef]:
        candidates = list(self.project.walk())[1:] or [self.project]
        return [p for p in candidates if self.generator.include_project(p)]

    def generate_graph(self) -> Graph:
        graph = Graph()
        expanded: set[str] = set()

        if self.generator.graph_label is not None:
            label = self.generator.graph_label
            graph.set_label(label.text, label.location, label.justification)

        projects = self._projects()
        for project in projects:
            self._add_project_node(graph, project, root=True)

        for project in projects:
            parent = project_key(project)
            for configuration in project.configurations:
                if not configuration.resolvable:
                    continue
                if not self.generator.include_configuration(configuration):
                    logger.debug("%s: skipping %s", project.name, configuration.name)
                    continue
                for dependency in configuration.dependencies:
                    self._append(graph, expanded, dependency, parent)

        logger.debug(
            "Graph for %s: %d projects, %d nodes",
            self.project.name,
            len(projects),
            len(graph),
        )
        return graph

    def generate(self) -> str:
        """Return the DOT text of the graph."""
        return to_dot(self.generate_graph())

    def _add_project_node(self, graph: Graph, project: ProjectRef, root: bool = False):
        key = project_key(project)
        is_new = key not in graph
        node = graph.add_node(key, project.name, _DEFAULT_ATTRIBUTES, root=root)
        if is_new:
            self.generator.project_node(node, project)
        return node

    def _append(
        self,
        graph: Graph,
        expanded: set[str],
        dependency: ResolvedDependency,
        parent: str,
    ) -> None:
        if dependency.is_project:
            project = self._forest.get(dependency.project)
            if project is None:
                raise UnknownProjectError(dependency.project)
            if not self.generator.include_project(project):
                return
            key = self._add_project_node(graph, project).key
        else:
            if not dependency.group or not dependency.artifact:
                raise MalformedDependencyError(dependency, parent)
            if not self.generator.include(dependency):
                return
            key = module_key(dependency.group, dependency.artifact)
            is_new = key not in graph
            node = graph.add_node(
                key, self.generator.label(dependency), _DEFAULT_ATTRIBUTES
            )
            if is_new:
                self.generator.dependency_node(node, dependency)

        graph.add_edge(parent, key)

        if key in expanded or not self.generator.children(dependency):
            return
        expanded.add(key)
        for child in dependency.children:
            self._append(graph, expanded, child, key)
