"""Serialize a :class:`Graph` to Graphviz DOT text."""

from __future__ import annotations

from depgraph.dot.graph import Graph


def _quote(value: str) -> str:
    if '"' in value or "\\" in value:
        value = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{value}"'


def _attribute_list(attributes: dict[str, str]) -> str:
    return ",".join(f"{_quote(k)}={_quote(v)}" for k, v in attributes.items())


def to_dot(graph: Graph) -> str:
    """Return the DOT representation of *graph*.

    Output is a pure function of the graph's registration order, so the
    same traversal always produces byte-identical text.
    """
    lines = [f"digraph {_quote(graph.name)} {{"]

    for attr, value in graph.attributes.items():
        lines.append(f"{_quote(attr)}={_quote(value)}")

    for node in graph.ordered_nodes():
        if node.attributes:
            lines.append(f"{_quote(node.name)} [{_attribute_list(node.attributes)}]")
        else:
            lines.append(_quote(node.name))

    for source, target in graph.ordered_edges():
        lines.append(f"{_quote(source.name)} -> {_quote(target.name)}")

    lines.append("}")
    return "\n".join(lines)
