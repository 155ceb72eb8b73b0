"""In-memory directed graph with per-node and graph-level attributes."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum

from depgraph.dot.shape import Shape
from depgraph.errors import UnknownNodeError


class Location(str, Enum):
    TOP = "t"
    CENTER = "c"
    BOTTOM = "b"


class Justification(str, Enum):
    LEFT = "l"
    MIDDLE = "c"
    RIGHT = "r"


@dataclass(frozen=True)
class GraphLabel:
    """Graph-level caption, emitted before any node."""

    text: str
    location: Location | None = None
    justification: Justification | None = None

    def locate(self, location: Location) -> GraphLabel:
        return GraphLabel(self.text, location, self.justification)

    def justify(self, justification: Justification) -> GraphLabel:
        return GraphLabel(self.text, self.location, justification)


@dataclass
class GraphNode:
    """A graph node.

    ``key`` is the identity used for deduplication, ``name`` is what ends
    up in the DOT output.
    """

    key: str
    name: str
    attributes: dict[str, str] = field(default_factory=dict)
    links: list[str] = field(default_factory=list)

    def add(self, *values: Shape, **attributes: object) -> GraphNode:
        """Set attributes, overriding existing values. Returns the node.

        New attributes are written out in the order they were first set.
        """
        for value in values:
            if not isinstance(value, Shape):
                raise TypeError(f"Positional attributes must be Shape, got {value!r}")
            self.attributes["shape"] = value.value
        for attr, value in attributes.items():
            self.attributes[attr] = str(value)
        return self

    def merge(self, attributes: dict[str, str]) -> None:
        """Add attributes whose keys are not set yet."""
        for attr, value in attributes.items():
            self.attributes.setdefault(attr, value)


class Graph:
    """Insertion-ordered nodes and deduplicated directed edges."""

    def __init__(self, name: str = "G") -> None:
        self.name = name
        self.attributes: dict[str, str] = {}
        self._nodes: dict[str, GraphNode] = {}
        self._names: dict[str, str] = {}
        self._roots: list[str] = []
        self._edges: set[tuple[str, str]] = set()

    def __contains__(self, key: str) -> bool:
        return key in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def node(self, key: str) -> GraphNode:
        try:
            return self._nodes[key]
        except KeyError:
            raise UnknownNodeError(key) from None

    def add_node(
        self,
        key: str,
        name: str | None = None,
        attributes: dict[str, str] | None = None,
        *,
        root: bool = False,
    ) -> GraphNode:
        """Register *key* if needed and return its node.

        An existing node keeps its name; only attributes it does not have
        yet are merged in. A name already taken by another key falls back
        to *key*, so distinct nodes never share a DOT identifier.
        """
        node = self._nodes.get(key)
        if node is None:
            name = name or key
            if self._names.get(name, key) != key:
                name = key
            self._names[name] = key
            node = GraphNode(key=key, name=name)
            self._nodes[key] = node
        if attributes:
            node.merge(attributes)
        if root and key not in self._roots:
            self._roots.append(key)
        return node

    def add_edge(self, source: str, target: str) -> bool:
        """Link *source* to *target*. Returns False if the edge already existed."""
        source_node = self.node(source)
        self.node(target)
        if (source, target) in self._edges:
            return False
        self._edges.add((source, target))
        source_node.links.append(target)
        return True

    def has_edge(self, source: str, target: str) -> bool:
        return (source, target) in self._edges

    def set_label(
        self,
        text: str,
        location: Location | None = None,
        justification: Justification | None = None,
    ) -> None:
        if justification is not None:
            self.attributes["labeljust"] = justification.value
        if location is not None:
            self.attributes["labelloc"] = location.value
        self.attributes["label"] = text

    def set_attributes(self, **attributes: object) -> None:
        for attr, value in attributes.items():
            self.attributes[attr] = str(value)

    @property
    def roots(self) -> list[str]:
        return list(self._roots)

    def ordered_nodes(self) -> list[GraphNode]:
        """Nodes in discovery order along links, starting from the roots.

        Nodes unreachable from any root follow in insertion order.
        """
        visited: dict[str, None] = {}

        def _visit(key: str) -> None:
            # Iterative preorder; links are pushed reversed to keep their order.
            stack = [key]
            while stack:
                current = stack.pop()
                if current in visited:
                    continue
                visited[current] = None
                stack.extend(reversed(self._nodes[current].links))

        for key in self._roots:
            _visit(key)
        for key in self._nodes:
            _visit(key)

        return [self._nodes[key] for key in visited]

    def ordered_edges(self) -> Iterator[tuple[GraphNode, GraphNode]]:
        """Edges grouped by source node, in :meth:`ordered_nodes` order."""
        for node in self.ordered_nodes():
            for target in node.links:
                yield node, self._nodes[target]
