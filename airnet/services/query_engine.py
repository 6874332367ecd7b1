"""Query engine - Analytical algorithms over the flight network.

The engine is handed a fully built FlightNetwork and never mutates it.
Every query identifies airports by code; an unknown code is not an error
and simply yields an empty (or zero) result.
"""

from __future__ import annotations

import logging
from collections import defaultdict, deque
from dataclasses import dataclass, field
from operator import attrgetter
from typing import (
    Callable,
    Deque,
    Dict,
    FrozenSet,
    Hashable,
    Iterator,
    List,
    Optional,
    Set,
    Tuple,
    Union,
)

from ..domain.errors import InvalidQueryError
from ..domain.models import (
    Airline,
    Airport,
    AirportTraffic,
    Coordinates,
    DiameterResult,
    Projection,
    SearchAttribute,
)
from ..graph.store import FlightNetwork, Graph, Vertex
from ..graph.traversal import TraversalMarkers, bfs_levels, dfs, dfs_destinations

AirportPath = Tuple[Airport, ...]
ProjectionFn = Callable[[Airport], Hashable]

_PROJECTIONS: Dict[Projection, ProjectionFn] = {
    Projection.AIRPORT: attrgetter("code"),
    Projection.CITY: lambda airport: (airport.city, airport.country),
    Projection.COUNTRY: attrgetter("country"),
}

_SEARCH_ATTRIBUTES: Dict[SearchAttribute, Callable[[Airport], str]] = {
    SearchAttribute.NAME: attrgetter("name"),
    SearchAttribute.CITY: attrgetter("city"),
    SearchAttribute.COUNTRY: attrgetter("country"),
}


def squash(text: str) -> str:
    """Lowercase ``text`` and drop every whitespace character."""
    return "".join(text.lower().split())


def _by_name(airport: Airport) -> str:
    return airport.name.lower()


@dataclass
class QueryEngine:
    """Statistics, reachability, criticality and shortest-path queries.

    Attributes:
        network: The flight graph and the airline catalog
    """

    network: FlightNetwork

    _airlines_by_code: Dict[str, Airline] = field(init=False, repr=False)
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)
        self._airlines_by_code = {
            airline.code.upper(): airline for airline in self.network.airlines
        }

    @property
    def graph(self) -> Graph:
        return self.network.graph

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def find_airport(self, code: str) -> Optional[Airport]:
        vertex = self.graph.find_vertex(code)
        return vertex.airport if vertex is not None else None

    def find_airline(self, code: str) -> Optional[Airline]:
        return self._airlines_by_code.get(code.strip().upper())

    def search_airports(self, query: str, attribute: SearchAttribute) -> List[Airport]:
        """Airports whose ``attribute`` contains ``query``.

        Matching ignores case and whitespace; results are sorted by name.
        """
        getter = _SEARCH_ATTRIBUTES[attribute]
        needle = squash(query)
        matches = [
            vertex.airport
            for vertex in self.graph.vertices
            if needle in squash(getter(vertex.airport))
        ]
        return sorted(matches, key=_by_name)

    def closest_airports(self, coordinates: Coordinates) -> List[Airport]:
        """Every airport at the minimum distance from ``coordinates``."""
        closest: List[Airport] = []
        min_distance = float("inf")

        for vertex in self.graph.vertices:
            distance = vertex.airport.distance_to(coordinates)
            if distance < min_distance:
                min_distance = distance
                closest = [vertex.airport]
            elif distance == min_distance:
                closest.append(vertex.airport)

        return sorted(closest, key=_by_name)

    def airports_in_city(self, city: str, country: str) -> List[Airport]:
        """Airports whose city and country match exactly, ignoring case and spaces."""
        city_key = squash(city)
        country_key = squash(country)
        found: List[Airport] = []

        def collect(vertex: Vertex) -> None:
            airport = vertex.airport
            if squash(airport.city) == city_key and squash(airport.country) == country_key:
                found.append(airport)

        dfs(self.graph, collect)
        return found

    def airlines_between(self, source: str, target: str) -> FrozenSet[Airline]:
        """Airlines flying the direct route; empty when there is none."""
        edge = self.graph.find_edge(source, target)
        return edge.operators if edge is not None else frozenset()

    def distance_between(self, source: str, target: str) -> float:
        """Direct route distance in km; 0.0 when there is no direct route."""
        edge = self.graph.find_edge(source, target)
        return edge.distance_km if edge is not None else 0.0

    # ------------------------------------------------------------------
    # Global statistics
    # ------------------------------------------------------------------

    def number_of_airports(self) -> int:
        return self.graph.num_vertices

    def number_of_flights(self) -> int:
        return sum(vertex.flights_to for vertex in self.graph.vertices)

    def number_of_flight_routes(self) -> int:
        return sum(vertex.out_degree for vertex in self.graph.vertices)

    def flights_per_city(self) -> Dict[Tuple[str, str], int]:
        """Outbound flights per (city, country)."""
        totals: Dict[Tuple[str, str], int] = defaultdict(int)

        def count(vertex: Vertex) -> None:
            totals[(vertex.airport.city, vertex.airport.country)] += vertex.flights_from

        dfs(self.graph, count)
        return dict(sorted(totals.items()))

    def flights_per_airline(self) -> Dict[Airline, int]:
        """Number of routes each airline operates."""
        totals: Dict[Airline, int] = defaultdict(int)

        def count(vertex: Vertex) -> None:
            for edge in vertex.adj:
                for airline in edge.airlines:
                    totals[airline] += 1

        dfs(self.graph, count)
        return dict(sorted(totals.items()))

    # ------------------------------------------------------------------
    # Per-airport statistics
    # ------------------------------------------------------------------

    def flights_out_of_airport(self, code: str) -> int:
        vertex = self.graph.find_vertex(code)
        return vertex.flights_from if vertex is not None else 0

    def flights_to_airport(self, code: str) -> int:
        vertex = self.graph.find_vertex(code)
        return vertex.flights_to if vertex is not None else 0

    def airlines_out_of_airport(self, code: str) -> int:
        """Number of distinct airlines with a departure from the airport."""
        vertex = self.graph.find_vertex(code)
        if vertex is None:
            return 0
        airlines: Set[Airline] = set()
        for edge in vertex.adj:
            airlines.update(edge.airlines)
        return len(airlines)

    def countries_flown_to_from_airport(self, code: str) -> int:
        vertex = self.graph.find_vertex(code)
        if vertex is None:
            return 0
        return len({dest.airport.country for dest in self.graph.neighbours(vertex)})

    def countries_flown_to_from_city(self, city: str, country: str) -> int:
        countries: Set[str] = set()
        for airport in self.airports_in_city(city, country):
            vertex = self.graph.find_vertex(airport.code)
            assert vertex is not None
            countries.update(dest.airport.country for dest in self.graph.neighbours(vertex))
        return len(countries)

    # ------------------------------------------------------------------
    # Reachability
    # ------------------------------------------------------------------

    def reachable_within(
        self,
        code: str,
        max_layovers: int,
        projection: Union[Projection, ProjectionFn] = Projection.AIRPORT,
    ) -> FrozenSet[Hashable]:
        """Destinations reachable with at most ``max_layovers`` stops.

        The bound applies to the airport a flight departs from: every
        destination of an airport first reached within ``max_layovers``
        hops is included.

        ``Projection.CITY`` counts (city, country) pairs, so two cities
        sharing a name in different countries count twice; a count by
        city name alone can be lower.

        Raises:
            InvalidQueryError: If ``max_layovers`` is negative.
        """
        if max_layovers < 0:
            raise InvalidQueryError(
                f"Number of layovers must be non-negative, got {max_layovers}",
                parameter="max_layovers",
                value=max_layovers,
            )
        project = _PROJECTIONS[projection] if isinstance(projection, Projection) else projection

        reached: Set[Hashable] = set()
        for vertex, hops, _ in bfs_levels(self.graph, code):
            if hops <= max_layovers:
                for dest in self.graph.neighbours(vertex):
                    reached.add(project(dest.airport))
        return frozenset(reached)

    def count_reachable_within(
        self,
        code: str,
        max_layovers: int,
        projection: Union[Projection, ProjectionFn] = Projection.AIRPORT,
    ) -> int:
        return len(self.reachable_within(code, max_layovers, projection))

    def reachable_airports(self, code: str) -> List[Airport]:
        """Airports reachable from ``code`` with any number of stops.

        The origin is only included when a cycle leads back to it.
        """
        return [vertex.airport for vertex in dfs_destinations(self.graph, code)]

    def reachable_cities(self, code: str) -> Set[Tuple[str, str]]:
        return {(airport.city, airport.country) for airport in self.reachable_airports(code)}

    def reachable_countries(self, code: str) -> Set[str]:
        return {airport.country for airport in self.reachable_airports(code)}

    # ------------------------------------------------------------------
    # Rankings
    # ------------------------------------------------------------------

    def traffic_ranking(self) -> List[AirportTraffic]:
        """All airports by inbound + outbound flights, busiest first."""
        ranking = [
            AirportTraffic(vertex.airport, vertex.flights_to + vertex.flights_from)
            for vertex in self.graph.vertices
        ]
        ranking.sort(key=attrgetter("total_flights"), reverse=True)
        return ranking

    def top_k_airports(self, k: int) -> List[AirportTraffic]:
        """The ``k`` busiest airports, plus any airport tied with the last one.

        Raises:
            InvalidQueryError: If ``k`` is lower than 1.
        """
        if k < 1:
            raise InvalidQueryError(
                f"k must be at least 1, got {k}", parameter="k", value=k
            )

        top: List[AirportTraffic] = []
        last_total: Optional[int] = None
        for i, entry in enumerate(self.traffic_ranking()):
            if i < k or entry.total_flights == last_total:
                top.append(entry)
                last_total = entry.total_flights
            else:
                break
        return top

    # ------------------------------------------------------------------
    # Criticality
    # ------------------------------------------------------------------

    def essential_airports(self) -> Set[str]:
        """Codes of airports flagged by a low-link articulation test.

        The test runs on the outgoing adjacency only and does not skip the
        edge back to the DFS parent, so on a directed network it flags cut
        vertices of the DFS forest rather than true directed separators.
        """
        markers = TraversalMarkers()
        essential: Set[str] = set()
        index = 0

        for root in self.graph.vertices:
            if not markers.is_visited(root):
                index = self._low_link(root, markers, essential, index)

        self._logger.debug("Essential airports computed", extra={"count": len(essential)})
        return essential

    def _low_link(
        self,
        root: Vertex,
        markers: TraversalMarkers,
        essential: Set[str],
        index: int,
    ) -> int:
        num = markers.num
        low = markers.low
        children: Dict[str, int] = {}

        def enter(vertex: Vertex) -> None:
            nonlocal index
            markers.mark(vertex)
            markers.processing.add(vertex.key)
            num[vertex.key] = index
            low[vertex.key] = index
            children[vertex.key] = 0
            index += 1

        enter(root)
        stack: List[Tuple[Vertex, Iterator[Vertex]]] = [(root, self.graph.neighbours(root))]

        while stack:
            vertex, pending = stack[-1]
            dest = next(pending, None)

            if dest is None:
                stack.pop()
                markers.processing.discard(vertex.key)
                if not stack:
                    continue
                parent = stack[-1][0]
                low[parent.key] = min(low[parent.key], low[vertex.key])
                if parent is root:
                    if children[parent.key] > 1:
                        essential.add(parent.airport.code)
                elif low[vertex.key] >= num[parent.key]:
                    essential.add(parent.airport.code)
                continue

            if not markers.is_visited(dest):
                children[vertex.key] += 1
                enter(dest)
                stack.append((dest, self.graph.neighbours(dest)))
            elif dest.key in markers.processing:
                low[vertex.key] = min(low[vertex.key], num[dest.key])

        return index

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------

    def diameter(self) -> DiameterResult:
        """Longest shortest path over all sources, with every witness path.

        A source that reaches no other airport contributes nothing.
        """
        diameter = 0
        paths: List[AirportPath] = []

        for source in self.graph.vertices:
            parents: Dict[str, Optional[Vertex]] = {}
            farthest: List[Vertex] = []
            max_hops = 0

            for vertex, hops, parent in bfs_levels(self.graph, source.key):
                parents[vertex.key] = parent
                if hops > max_hops:
                    max_hops = hops
                    farthest = [vertex]
                elif hops == max_hops:
                    farthest.append(vertex)

            if max_hops == 0:
                continue
            if max_hops > diameter:
                diameter = max_hops
                paths = []
            if max_hops == diameter:
                paths.extend(self._unwind(vertex, parents) for vertex in farthest)

        self._logger.info(
            "Diameter computed",
            extra={"diameter": diameter, "paths": len(paths)},
        )
        return DiameterResult(diameter=diameter, paths=tuple(paths))

    @staticmethod
    def _unwind(vertex: Vertex, parents: Dict[str, Optional[Vertex]]) -> AirportPath:
        path: List[Airport] = []
        current: Optional[Vertex] = vertex
        while current is not None:
            path.append(current.airport)
            current = parents[current.key]
        path.reverse()
        return tuple(path)

    def shortest_paths(self, source: str, target: str) -> List[AirportPath]:
        """Every minimum-hop path from ``source`` to ``target``.

        Queue entries carry their partial path, and the target is checked
        before the visited test, so each equal-length way into the target
        is kept while intermediate airports are still visited once.
        """
        start = self.graph.find_vertex(source)
        goal = self.graph.find_vertex(target)
        if start is None or goal is None:
            return []

        markers = TraversalMarkers()
        markers.mark(start)
        queue: Deque[Tuple[Tuple[Vertex, ...], Vertex]] = deque([((start,), start)])
        shortest: List[Tuple[Vertex, ...]] = []
        shortest_len: Optional[int] = None

        while queue:
            path, vertex = queue.popleft()
            if shortest_len is not None and len(path) + 1 > shortest_len:
                break

            for dest in self.graph.neighbours(vertex):
                if dest is goal:
                    candidate = path + (dest,)
                    if shortest_len is None or len(candidate) < shortest_len:
                        shortest = [candidate]
                        shortest_len = len(candidate)
                    elif len(candidate) == shortest_len:
                        shortest.append(candidate)
                elif not markers.is_visited(dest):
                    markers.mark(dest)
                    queue.append((path + (dest,), dest))

        return [tuple(v.airport for v in path) for path in shortest]
