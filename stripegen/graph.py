"""Dependency graph between components.

An edge A -> B means the type generated for A refers to the type generated
for B, directly or through one of A's inline objects.
"""

from __future__ import annotations

from typing import Mapping

import networkx as nx

from .component_generator import Component
from .errors import InvariantViolation
from .objects import schema_deps
from .paths import ComponentPath
from .templates import render_dot


def build_dependency_graph(components: Mapping[ComponentPath, Component]) -> nx.DiGraph:
    """Build the component dependency graph.

    Raises:
        InvariantViolation: a component refers to a path with no component.
    """
    graph = nx.DiGraph()
    graph.add_nodes_from(components)
    for path, component in components.items():
        for dep in schema_deps(component.object):
            # Self references (e.g. nested errors) carry no information here
            if dep == path:
                continue
            if dep not in graph:
                raise InvariantViolation(f"{path} refers to unknown component {dep}")
            graph.add_edge(path, dep)
    return graph


def to_dot(graph: nx.DiGraph) -> str:
    """Graphviz DOT text for `graph`, with nodes and edges sorted."""
    return render_dot(sorted(graph.nodes), sorted(graph.edges))


def component_dependencies(graph: nx.DiGraph, path: ComponentPath) -> list[ComponentPath]:
    """`path` followed by everything reachable from it, in BFS order."""
    if path not in graph:
        raise InvariantViolation(f"No component at path {path}")
    return [path] + [target for _, target in nx.bfs_edges(graph, path)]
