"""Graphviz DOT graph model and serializer."""

from depgraph.dot.graph import Graph, GraphLabel, GraphNode, Justification, Location
from depgraph.dot.serializer import to_dot
from depgraph.dot.shape import Shape

__all__ = [
    "Graph",
    "GraphLabel",
    "GraphNode",
    "Justification",
    "Location",
    "Shape",
    "to_dot",
]
