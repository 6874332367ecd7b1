"""In-memory directed flight graph.

Vertices live in an insertion-ordered arena keyed by normalized airport
code; edges refer to their destination by that key. Vertices own their
outgoing edges only, so "flights from" and "flights to" are tracked
separately per vertex.

The graph is built once and then only read. Traversal state (visited
flags, discovery indices) is kept out of the vertices, see
``traversal.TraversalMarkers``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterator, List, Optional, Set

from ..domain.models import Airline, Airport

logger = logging.getLogger(__name__)


def normalize_code(code: str) -> str:
    """Arena key for an airport code (lookups are case-insensitive)."""
    return code.strip().upper()


@dataclass
class Edge:
    """A directed route to ``dest``, operated by one or more airlines."""

    dest: str
    distance_km: float
    airlines: Set[Airline] = field(default_factory=set)

    def add_airline(self, airline: Airline) -> None:
        self.airlines.add(airline)

    @property
    def operators(self) -> FrozenSet[Airline]:
        return frozenset(self.airlines)


@dataclass
class Vertex:
    """An airport and its outgoing routes.

    ``flights_to``/``flights_from`` count flight records, while
    ``in_degree``/``out_degree`` count routes and are only meaningful
    after ``Graph.setup_degrees``.
    """

    airport: Airport
    adj: List[Edge] = field(default_factory=list)
    flights_to: int = 0
    flights_from: int = 0
    in_degree: int = 0
    out_degree: int = 0

    @property
    def key(self) -> str:
        return normalize_code(self.airport.code)

    def edge_to(self, dest: str) -> Optional[Edge]:
        dest = normalize_code(dest)
        for edge in self.adj:
            if edge.dest == dest:
                return edge
        return None

    def _add_edge(self, dest: str, distance_km: float) -> Edge:
        edge = Edge(dest=dest, distance_km=distance_km)
        self.adj.append(edge)
        return edge

    def _remove_edge_to(self, dest: str) -> bool:
        for i, edge in enumerate(self.adj):
            if edge.dest == dest:
                del self.adj[i]
                return True
        return False


class Graph:
    """Directed graph of airports connected by airline-labeled routes."""

    def __init__(self) -> None:
        self._vertices: Dict[str, Vertex] = {}

    def __len__(self) -> int:
        return len(self._vertices)

    def __contains__(self, code: object) -> bool:
        return isinstance(code, str) and normalize_code(code) in self._vertices

    @property
    def num_vertices(self) -> int:
        return len(self._vertices)

    @property
    def vertices(self) -> List[Vertex]:
        """Vertices in insertion order."""
        return list(self._vertices.values())

    def find_vertex(self, code: str) -> Optional[Vertex]:
        return self._vertices.get(normalize_code(code))

    def vertex(self, key: str) -> Vertex:
        """Dereference an edge destination key."""
        return self._vertices[key]

    def neighbours(self, vertex: Vertex) -> Iterator[Vertex]:
        """Destinations of ``vertex`` in adjacency order."""
        for edge in vertex.adj:
            yield self._vertices[edge.dest]

    def add_vertex(self, airport: Airport) -> bool:
        """Add an airport; returns False if its code is already present."""
        if airport.code in self:
            return False
        self._vertices[normalize_code(airport.code)] = Vertex(airport)
        return True

    def remove_vertex(self, code: str) -> bool:
        """Remove an airport and every route pointing to it."""
        key = normalize_code(code)
        if self._vertices.pop(key, None) is None:
            return False
        for vertex in self._vertices.values():
            vertex._remove_edge_to(key)
        return True

    def add_edge(self, source: str, dest: str, distance_km: float) -> Optional[Edge]:
        """Add the route ``source -> dest``.

        Returns None if either endpoint is missing. A pair holds at most one
        edge: when the route already exists it is returned unchanged.
        """
        v1 = self.find_vertex(source)
        v2 = self.find_vertex(dest)
        if v1 is None or v2 is None:
            return None
        existing = v1.edge_to(v2.key)
        if existing is not None:
            return existing
        return v1._add_edge(v2.key, distance_km)

    def remove_edge(self, source: str, dest: str) -> bool:
        v1 = self.find_vertex(source)
        v2 = self.find_vertex(dest)
        if v1 is None or v2 is None:
            return False
        return v1._remove_edge_to(v2.key)

    def find_edge(self, source: str, dest: str) -> Optional[Edge]:
        v1 = self.find_vertex(source)
        if v1 is None:
            return None
        return v1.edge_to(dest)

    def add_flight(self, source: str, dest: str, airline: Airline) -> bool:
        """Record one flight of ``airline`` on the route ``source -> dest``.

        The route is created on its first flight, with its great-circle
        distance; later flights only add their airline to it. Flight
        counters of both endpoints are incremented either way.
        """
        v1 = self.find_vertex(source)
        v2 = self.find_vertex(dest)
        if v1 is None or v2 is None:
            logger.debug(
                "Flight skipped, unknown airport",
                extra={"source": source, "dest": dest},
            )
            return False

        edge = v1.edge_to(v2.key)
        if edge is None:
            distance = v1.airport.distance_to(v2.airport.location)
            edge = v1._add_edge(v2.key, distance)
        edge.add_airline(airline)

        v1.flights_from += 1
        v2.flights_to += 1
        return True

    def setup_degrees(self) -> None:
        """Recompute in/out degree of every vertex from the current routes."""
        for vertex in self._vertices.values():
            vertex.in_degree = 0
            vertex.out_degree = len(vertex.adj)

        for vertex in self._vertices.values():
            for edge in vertex.adj:
                self._vertices[edge.dest].in_degree += 1


@dataclass
class FlightNetwork:
    """A fully built graph together with the airline catalog."""

    graph: Graph
    airlines: FrozenSet[Airline] = field(default_factory=frozenset)
