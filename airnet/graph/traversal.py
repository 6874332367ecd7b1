"""Depth-first, breadth-first and topological walks over a Graph.

Every walk starts from a fresh ``TraversalMarkers`` table, so no walk
depends on state left over by a previous one. Walks take an optional
``visit`` callback invoked once per newly visited vertex, which lets the
query layer aggregate without re-implementing the traversal.

DFS is written with an explicit stack of adjacency iterators: discovery
order is the same as the recursive formulation, without the interpreter
recursion limit.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Callable, Deque, Dict, Iterator, List, Optional, Set, Tuple

from .store import Graph, Vertex

Visitor = Callable[[Vertex], None]


@dataclass
class TraversalMarkers:
    """Per-walk vertex state, keyed by vertex key.

    Attributes:
        visited: Vertices already discovered
        processing: Vertices on the current DFS path
        num: Discovery index of each vertex
        low: Low-link value of each vertex
    """

    visited: Set[str] = field(default_factory=set)
    processing: Set[str] = field(default_factory=set)
    num: Dict[str, int] = field(default_factory=dict)
    low: Dict[str, int] = field(default_factory=dict)

    def is_visited(self, vertex: Vertex) -> bool:
        return vertex.key in self.visited

    def mark(self, vertex: Vertex) -> None:
        self.visited.add(vertex.key)


def _noop(vertex: Vertex) -> None:
    return None


def dfs_visit(
    graph: Graph,
    start: Vertex,
    markers: TraversalMarkers,
    visit: Visitor = _noop,
) -> List[Vertex]:
    """Visit every vertex reachable from ``start`` not yet marked."""
    order: List[Vertex] = []
    markers.mark(start)
    visit(start)
    order.append(start)
    stack: List[Iterator[Vertex]] = [graph.neighbours(start)]

    while stack:
        child = next(stack[-1], None)
        if child is None:
            stack.pop()
            continue
        if markers.is_visited(child):
            continue
        markers.mark(child)
        visit(child)
        order.append(child)
        stack.append(graph.neighbours(child))

    return order


def dfs(graph: Graph, visit: Visitor = _noop) -> List[Vertex]:
    """Whole-graph DFS, restarting at each unvisited vertex in order."""
    markers = TraversalMarkers()
    order: List[Vertex] = []
    for vertex in graph.vertices:
        if not markers.is_visited(vertex):
            order.extend(dfs_visit(graph, vertex, markers, visit))
    return order


def dfs_from(graph: Graph, source: str, visit: Visitor = _noop) -> List[Vertex]:
    """DFS from a single source; empty if the source is unknown."""
    start = graph.find_vertex(source)
    if start is None:
        return []
    return dfs_visit(graph, start, TraversalMarkers(), visit)


def dfs_destinations(graph: Graph, source: str, visit: Visitor = _noop) -> List[Vertex]:
    """Walk the destinations reachable from ``source``.

    Unlike ``dfs_from`` the source is not marked up front: it is only
    visited when a cycle leads back to it.
    """
    start = graph.find_vertex(source)
    if start is None:
        return []

    markers = TraversalMarkers()
    order: List[Vertex] = []
    stack: List[Iterator[Vertex]] = [graph.neighbours(start)]

    while stack:
        dest = next(stack[-1], None)
        if dest is None:
            stack.pop()
            continue
        if markers.is_visited(dest):
            continue
        markers.mark(dest)
        visit(dest)
        order.append(dest)
        stack.append(graph.neighbours(dest))

    return order


def bfs_levels(
    graph: Graph, source: str
) -> Iterator[Tuple[Vertex, int, Optional[Vertex]]]:
    """Yield ``(vertex, hops, parent)`` in BFS order from ``source``."""
    start = graph.find_vertex(source)
    if start is None:
        return

    markers = TraversalMarkers()
    queue: Deque[Tuple[Vertex, int, Optional[Vertex]]] = deque()
    queue.append((start, 0, None))
    markers.mark(start)

    while queue:
        vertex, hops, parent = queue.popleft()
        yield vertex, hops, parent
        for dest in graph.neighbours(vertex):
            if not markers.is_visited(dest):
                markers.mark(dest)
                queue.append((dest, hops + 1, vertex))


def bfs(graph: Graph, source: str, visit: Visitor = _noop) -> List[Vertex]:
    """BFS from a single source; empty if the source is unknown."""
    order: List[Vertex] = []
    for vertex, _, _ in bfs_levels(graph, source):
        visit(vertex)
        order.append(vertex)
    return order


def topsort(graph: Graph) -> List[Vertex]:
    """Kahn topological order.

    Only valid on acyclic graphs: vertices held back by a cycle never
    reach in-degree zero and are left out of the result. In-degrees are
    counted in a local table so the vertex degree counters are untouched.
    """
    in_degree: Dict[str, int] = {vertex.key: 0 for vertex in graph.vertices}
    for vertex in graph.vertices:
        for edge in vertex.adj:
            in_degree[edge.dest] += 1

    queue: Deque[Vertex] = deque(
        vertex for vertex in graph.vertices if in_degree[vertex.key] == 0
    )
    order: List[Vertex] = []

    while queue:
        vertex = queue.popleft()
        order.append(vertex)
        for dest in graph.neighbours(vertex):
            in_degree[dest.key] -= 1
            if in_degree[dest.key] == 0:
                queue.append(dest)

    return order
